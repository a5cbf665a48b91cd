"""
Pointer event protocol for the interaction controller.
Defines the events a host posts to drive drag, resize and click-to-create.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class EventType(Enum):
    """Types of events the grid consumes."""

    # Pointer gestures
    POINTER_DOWN = "pointer_down"     # Press on a shift body or resize handle
    POINTER_MOVE = "pointer_move"     # Pointer moved while pressed
    POINTER_UP = "pointer_up"         # Pointer released
    GRID_CLICK = "grid_click"         # Click on an empty grid cell

    # Preview decisions
    CONFIRM = "confirm"               # Accept the click-to-create preview
    CANCEL = "cancel"                 # Discard the click-to-create preview

    # Explicit actions
    DELETE = "delete"                 # Remove a shift


class HitTarget(Enum):
    """What the pointer was over when it went down."""
    SHIFT_BODY = "shift_body"
    RESIZE_HANDLE = "resize_handle"
    EMPTY_GRID = "empty_grid"


@dataclass
class PointerEvent:
    """
    One event in the grid's input stream.

    Attributes:
        event_type: Type of the event
        y: Pointer offset in pixels from the top of the grid
        target: What was hit on pointer-down
        shift_id: Shift the event refers to (pointer-down, delete)
        receiver: Name of the component the event is for (None for all)
        sequence: Arrival number, assigned by the queue
        timestamp: When the event was created
        metadata: Additional host data
    """
    event_type: EventType
    y: Optional[float] = None
    target: Optional[HitTarget] = None
    shift_id: Optional[str] = None
    receiver: Optional[str] = None
    sequence: int = 0
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict = field(default_factory=dict)

    # ==================== Factories ====================

    @classmethod
    def down(cls, y: float, shift_id: str,
             target: HitTarget = HitTarget.SHIFT_BODY, **kwargs) -> "PointerEvent":
        """Pointer pressed on a shift (body or bottom handle)."""
        return cls(EventType.POINTER_DOWN, y=y, target=target, shift_id=shift_id, **kwargs)

    @classmethod
    def move(cls, y: float, **kwargs) -> "PointerEvent":
        return cls(EventType.POINTER_MOVE, y=y, **kwargs)

    @classmethod
    def up(cls, y: Optional[float] = None, **kwargs) -> "PointerEvent":
        return cls(EventType.POINTER_UP, y=y, **kwargs)

    @classmethod
    def click(cls, y: float, **kwargs) -> "PointerEvent":
        """Click on an empty grid cell."""
        return cls(EventType.GRID_CLICK, y=y, target=HitTarget.EMPTY_GRID, **kwargs)

    @classmethod
    def confirm(cls, **kwargs) -> "PointerEvent":
        return cls(EventType.CONFIRM, **kwargs)

    @classmethod
    def cancel(cls, **kwargs) -> "PointerEvent":
        return cls(EventType.CANCEL, **kwargs)

    @classmethod
    def delete(cls, shift_id: str, **kwargs) -> "PointerEvent":
        return cls(EventType.DELETE, shift_id=shift_id, **kwargs)

    # ==================== Serialization ====================

    def __str__(self) -> str:
        """Human-readable event representation."""
        parts = [f"#{self.sequence}", self.event_type.value]
        if self.y is not None:
            parts.append(f"y={self.y:g}")
        if self.target is not None:
            parts.append(self.target.value)
        if self.shift_id:
            parts.append(self.shift_id)
        return f"[{self.timestamp.strftime('%H:%M:%S')}] " + " ".join(parts)

    def to_dict(self) -> dict:
        """Convert event to dictionary for logging/serialization."""
        return {
            "event_type": self.event_type.value,
            "y": self.y,
            "target": self.target.value if self.target else None,
            "shift_id": self.shift_id,
            "receiver": self.receiver,
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }
