"""
Day schedule model: the working set of shifts for one calendar day.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .shift import Shift


@dataclass(frozen=True)
class DaySchedule:
    """
    Immutable set of shifts belonging to one day.

    Every change returns a new DaySchedule; the previous one stays valid
    for anyone still holding it.

    Attributes:
        date: The day this working set covers
        shifts: Shifts in insertion order
    """
    date: date
    shifts: Tuple[Shift, ...] = ()

    # Index for fast lookup
    _by_id: Dict[str, Shift] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "shifts", tuple(self.shifts))
        index = {}
        for shift in self.shifts:
            if shift.date != self.date:
                raise ValueError(f"Shift {shift.id} is dated {shift.date}, not {self.date}")
            if shift.id in index:
                raise ValueError(f"Duplicate shift id: {shift.id}")
            index[shift.id] = shift
        object.__setattr__(self, "_by_id", index)

    @classmethod
    def from_shifts(cls, target_date: date, shifts: Iterable[Shift]) -> "DaySchedule":
        """Build the working set for a date, dropping shifts of other days."""
        return cls(target_date, tuple(s for s in shifts if s.date == target_date))

    def get(self, shift_id: str) -> Optional[Shift]:
        """Get a shift by id."""
        return self._by_id.get(shift_id)

    def __contains__(self, shift_id: object) -> bool:
        return shift_id in self._by_id

    def __iter__(self) -> Iterator[Shift]:
        return iter(self.shifts)

    def __len__(self) -> int:
        return len(self.shifts)

    def add(self, shift: Shift) -> "DaySchedule":
        """Return a new schedule with the shift appended."""
        return DaySchedule(self.date, self.shifts + (shift,))

    def replace(self, shift: Shift) -> "DaySchedule":
        """Return a new schedule with the shift of the same id swapped in."""
        if shift.id not in self._by_id:
            raise KeyError(shift.id)
        return DaySchedule(
            self.date,
            tuple(shift if s.id == shift.id else s for s in self.shifts)
        )

    def remove(self, shift_id: str) -> "DaySchedule":
        """Return a new schedule without the given shift."""
        if shift_id not in self._by_id:
            raise KeyError(shift_id)
        return DaySchedule(self.date, tuple(s for s in self.shifts if s.id != shift_id))

    def summary(self) -> dict:
        """Get a summary of the day."""
        return {
            "date": self.date.isoformat(),
            "shift_count": len(self.shifts),
            "staffed": sum(1 for s in self.shifts if s.staff_id),
            "unstaffed": sum(1 for s in self.shifts if not s.staff_id),
        }

    def __str__(self) -> str:
        summary = self.summary()
        return (
            f"Day {summary['date']} | "
            f"{summary['shift_count']} shifts | "
            f"{summary['unstaffed']} unstaffed"
        )
