"""
Overlap detection between shifts.

Intervals are half-open: a shift ending at 10:00 and one starting at 10:00
do not overlap. Every conflict rule in the engine is built on overlaps().
"""
from typing import Iterable, List, Tuple

from models.shift import Shift
from .time_grid import time_to_minutes


def overlaps(a: Shift, b: Shift) -> bool:
    """Check if two shifts share any time (dates are not compared)."""
    return (time_to_minutes(a.start_time) < time_to_minutes(b.end_time)
            and time_to_minutes(b.start_time) < time_to_minutes(a.end_time))


def overlapping_peers(shift: Shift, all_shifts: Iterable[Shift]) -> List[Shift]:
    """
    Get every other shift on the same day that overlaps this one.

    The shift itself (matched by id) is never reported.
    """
    return [
        other for other in all_shifts
        if other.id != shift.id
        and other.date == shift.date
        and overlaps(shift, other)
    ]


def can_place_shift(shift: Shift, all_shifts: Iterable[Shift], allow_overlap: bool = False) -> bool:
    """Check if a shift may sit where it is under the overlap policy."""
    if allow_overlap:
        return True
    return not overlapping_peers(shift, all_shifts)


def find_conflicts(shifts: Iterable[Shift]) -> List[Tuple[Shift, Shift]]:
    """All overlapping pairs among the given shifts, in input order."""
    items = list(shifts)
    pairs = []
    for i, a in enumerate(items):
        for b in items[i + 1:]:
            if a.id != b.id and a.date == b.date and overlaps(a, b):
                pairs.append((a, b))
    return pairs
