"""
Layout annotation produced for every shift on each render pass.
"""
from dataclasses import dataclass

from .shift import Shift


@dataclass(frozen=True)
class ShiftLayout:
    """
    Where a shift is drawn on the day grid.

    Attributes:
        shift: The shift being placed
        column: Index of the shift within its overlap cluster
        total_columns: Size of that cluster
        cluster: Index of the cluster within the day
        top: Pixel offset of the shift's top edge from the grid start
        height: Pixel height of the shift
    """
    shift: Shift
    column: int
    total_columns: int
    cluster: int = 0
    top: float = 0.0
    height: float = 0.0

    @property
    def width_percent(self) -> float:
        """Horizontal share of the grid: 100% / total_columns."""
        return 100.0 / self.total_columns

    @property
    def left_percent(self) -> float:
        """Left offset as a percentage of the grid width."""
        return self.column * self.width_percent

    def to_dict(self) -> dict:
        """Convert to the render annotation dictionary."""
        return {
            "id": self.shift.id,
            "column": self.column,
            "total_columns": self.total_columns,
            "cluster": self.cluster,
            "top": self.top,
            "height": self.height,
            "left_percent": self.left_percent,
            "width_percent": self.width_percent,
        }
