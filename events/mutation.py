"""
Committed shift mutations.

The grid never persists anything itself. Every committed change is emitted
as a ShiftMutation that the host replays against its store.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from models.shift import Shift

# Fields compared when diffing an edited day against its saved state
DIFF_FIELDS = ("start_time", "end_time", "title", "description", "staff_id")


class MutationType(Enum):
    """Kinds of change the grid can emit."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class ShiftMutation:
    """
    One committed change to the day's shift set.

    Attributes:
        mutation_type: create, update or delete
        shift_id: Id of the affected shift
        shift: Full record after the change (None for delete)
        changes: Changed fields (all fields for create)
        timestamp: When the change was committed
    """
    mutation_type: MutationType
    shift_id: str
    shift: Optional[Shift] = None
    changes: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(cls, shift: Shift) -> "ShiftMutation":
        data = shift.to_dict()
        data.pop("id")
        return cls(MutationType.CREATE, shift.id, shift, data)

    @classmethod
    def update(cls, shift: Shift, changes: Optional[Dict[str, Any]] = None) -> "ShiftMutation":
        """Update mutation; a move or resize only changes the times."""
        if changes is None:
            changes = {"start_time": shift.start_time, "end_time": shift.end_time}
        return cls(MutationType.UPDATE, shift.id, shift, changes)

    @classmethod
    def delete(cls, shift_id: str) -> "ShiftMutation":
        return cls(MutationType.DELETE, shift_id)

    def to_dict(self) -> dict:
        """Convert mutation to dictionary for logging/serialization."""
        return {
            "mutation_type": self.mutation_type.value,
            "shift_id": self.shift_id,
            "changes": dict(self.changes),
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        if self.mutation_type == MutationType.DELETE:
            return f"delete {self.shift_id}"
        fields = ", ".join(f"{k}={v}" for k, v in self.changes.items())
        return f"{self.mutation_type.value} {self.shift_id} ({fields})"


def diff_shift_sets(original: Iterable[Shift], updated: Iterable[Shift]) -> List[ShiftMutation]:
    """
    Work out the mutations that turn a saved shift set into an edited one.

    Shifts are matched by id. Updates only carry the fields that changed,
    and shifts with no changed fields produce no mutation.

    Args:
        original: Shifts as last saved
        updated: Shifts as currently edited

    Returns:
        Creates, then updates, then deletes
    """
    before = {s.id: s for s in original}
    after = list(updated)
    after_ids = {s.id for s in after}

    creates, updates = [], []
    for shift in after:
        previous = before.get(shift.id)
        if previous is None:
            creates.append(ShiftMutation.create(shift))
            continue
        changes = {
            name: getattr(shift, name)
            for name in DIFF_FIELDS
            if getattr(shift, name) != getattr(previous, name)
        }
        if changes:
            updates.append(ShiftMutation.update(shift, changes))

    deletes = [ShiftMutation.delete(shift_id) for shift_id in before if shift_id not in after_ids]

    return creates + updates + deletes


def apply_mutation(shifts: Iterable[Shift], mutation: ShiftMutation) -> List[Shift]:
    """
    Apply one mutation to a list of shifts, returning a new list.

    Raises:
        KeyError: If an update or delete names an unknown shift
    """
    items = list(shifts)
    ids = [s.id for s in items]

    if mutation.mutation_type == MutationType.CREATE:
        return items + [mutation.shift]

    if mutation.shift_id not in ids:
        raise KeyError(mutation.shift_id)

    if mutation.mutation_type == MutationType.DELETE:
        return [s for s in items if s.id != mutation.shift_id]

    return [mutation.shift if s.id == mutation.shift_id else s for s in items]
