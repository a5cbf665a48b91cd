"""
Replays committed mutations against a remote shift store.

The engine never persists anything; this module is the hand-off point.
Any object with create/update/delete methods can act as the store.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from config import retry_with_backoff
from events.mutation import MutationType, ShiftMutation
from models.shift import Shift

logger = logging.getLogger("ShiftGridEngine")


@runtime_checkable
class ShiftStore(Protocol):
    """
    Interface contract for remote shift stores.

    Usage:
        def save(store: ShiftStore):
            store.create_shift(shift)
    """

    def create_shift(self, shift: Shift) -> Any:
        ...

    def update_shift(self, shift_id: str, changes: Dict[str, Any]) -> Any:
        ...

    def delete_shift(self, shift_id: str) -> Any:
        ...


@dataclass
class SyncResult:
    """
    Outcome of pushing mutations to a store.

    Attributes:
        created: Create mutations attempted
        updated: Update mutations attempted
        deleted: Delete mutations attempted
        successful: Mutations the store accepted
        failed: Mutations that still failed after retrying
        errors: (shift id, error text) for each failure
    """
    created: int = 0
    updated: int = 0
    deleted: int = 0
    successful: int = 0
    failed: int = 0
    errors: List[tuple] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "successful": self.successful,
            "failed": self.failed,
        }


def push_mutations(store: ShiftStore,
                   mutations: Iterable[ShiftMutation],
                   max_retries: int = 3,
                   base_delay: float = 1.0) -> SyncResult:
    """
    Send mutations to the store in order.

    Each call is retried with exponential backoff. A mutation that still
    fails is counted and the rest are still sent.

    Args:
        store: Remote store
        mutations: Mutations in commit order
        max_retries: Retries per mutation
        base_delay: First backoff delay in seconds

    Returns:
        SyncResult with per-kind counts
    """
    @retry_with_backoff(max_retries=max_retries, base_delay=base_delay)
    def send(mutation: ShiftMutation) -> Any:
        if mutation.mutation_type == MutationType.CREATE:
            return store.create_shift(mutation.shift)
        if mutation.mutation_type == MutationType.UPDATE:
            return store.update_shift(mutation.shift_id, mutation.changes)
        return store.delete_shift(mutation.shift_id)

    result = SyncResult()
    counters = {
        MutationType.CREATE: "created",
        MutationType.UPDATE: "updated",
        MutationType.DELETE: "deleted",
    }

    for mutation in mutations:
        name = counters[mutation.mutation_type]
        setattr(result, name, getattr(result, name) + 1)
        try:
            send(mutation)
            result.successful += 1
        except Exception as e:
            result.failed += 1
            result.errors.append((mutation.shift_id, str(e)))
            logger.error(f"Failed to {mutation.mutation_type.value} {mutation.shift_id}: {e}")

    logger.info(f"Sync finished: {result.to_dict()}")
    return result


class InMemoryShiftStore:
    """
    Dictionary-backed ShiftStore for demos and tests.

    Attributes:
        shifts: Stored shifts by id
        calls: (operation, shift id) for every call received
    """

    def __init__(self, shifts: Optional[Iterable[Shift]] = None):
        self.shifts: Dict[str, Shift] = {s.id: s for s in (shifts or [])}
        self.calls: List[tuple] = []

    def create_shift(self, shift: Shift) -> Shift:
        self.calls.append(("create", shift.id))
        if shift.id in self.shifts:
            raise ValueError(f"Shift {shift.id} already exists")
        self.shifts[shift.id] = shift
        return shift

    def update_shift(self, shift_id: str, changes: Dict[str, Any]) -> Shift:
        self.calls.append(("update", shift_id))
        if shift_id not in self.shifts:
            raise KeyError(shift_id)
        data = self.shifts[shift_id].to_dict()
        data.update(changes)
        self.shifts[shift_id] = Shift.from_dict(data)
        return self.shifts[shift_id]

    def delete_shift(self, shift_id: str) -> None:
        self.calls.append(("delete", shift_id))
        if shift_id not in self.shifts:
            raise KeyError(shift_id)
        del self.shifts[shift_id]
