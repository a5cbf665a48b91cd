"""
Column layout for overlapping shifts.

Shifts that overlap are drawn side by side instead of stacked. The day's
shifts are grouped into overlap clusters and each shift gets a column
within its cluster; renderers give it width = 100% / total_columns and
left = column * width.

Layout is recomputed from scratch on every call and never patched.
"""
from typing import Dict, Iterable, List

from config import SLOT_DURATION, SLOT_HEIGHT
from models.layout import ShiftLayout
from models.shift import Shift
from .overlap import overlaps
from .time_grid import time_to_minutes, shift_position


def cluster_shifts(shifts: Iterable[Shift]) -> List[List[Shift]]:
    """
    Group shifts into overlap clusters.

    Shifts are scanned in start-time order (stable, so ties keep their
    input order). Each shift joins the first cluster holding ANY shift it
    overlaps, otherwise it opens a new cluster. Two shifts that do not
    overlap each other can share a cluster when a third shift links them.

    Args:
        shifts: The day's shifts

    Returns:
        Clusters in creation order, members in arrival order
    """
    ordered = sorted(shifts, key=lambda s: time_to_minutes(s.start_time))

    clusters: List[List[Shift]] = []
    for shift in ordered:
        for cluster in clusters:
            if any(overlaps(shift, member) for member in cluster):
                cluster.append(shift)
                break
        else:
            clusters.append([shift])

    return clusters


def calculate_shift_layout(shifts: Iterable[Shift],
                           day_start_minutes: int = 0,
                           slot_minutes: int = SLOT_DURATION,
                           slot_height: int = SLOT_HEIGHT) -> List[ShiftLayout]:
    """
    Assign every shift a column and pixel position.

    Args:
        shifts: The day's shifts
        day_start_minutes: Minute offset of the grid's first row

    Returns:
        One ShiftLayout per input shift, cluster by cluster
    """
    layout = []
    for cluster_index, cluster in enumerate(cluster_shifts(shifts)):
        for column, shift in enumerate(cluster):
            top, height = shift_position(shift, day_start_minutes, slot_minutes, slot_height)
            layout.append(ShiftLayout(
                shift=shift,
                column=column,
                total_columns=len(cluster),
                cluster=cluster_index,
                top=top,
                height=height,
            ))
    return layout


def layout_by_id(layout: Iterable[ShiftLayout]) -> Dict[str, ShiftLayout]:
    """Index layout records by shift id."""
    return {item.shift.id: item for item in layout}
