import unittest
from datetime import date

from events.mutation import ShiftMutation
from models.shift import Shift
from roster.sync import InMemoryShiftStore, ShiftStore, push_mutations


DAY = date(2024, 12, 16)


def _shift(shift_id, start, end):
    return Shift(id=shift_id, date=DAY, start_time=start, end_time=end)


class FlakyStore(InMemoryShiftStore):
    """Fails the first call of every operation once."""

    def __init__(self, shifts=None):
        super().__init__(shifts)
        self.failed_once = set()

    def update_shift(self, shift_id, changes):
        if shift_id not in self.failed_once:
            self.failed_once.add(shift_id)
            raise ConnectionError("store timed out")
        return super().update_shift(shift_id, changes)


class TestPushMutations(unittest.TestCase):
    def test_store_satisfies_protocol(self):
        self.assertIsInstance(InMemoryShiftStore(), ShiftStore)

    def test_replays_in_order(self):
        a = _shift("a", "09:00", "10:00")
        store = InMemoryShiftStore([a])
        mutations = [
            ShiftMutation.create(_shift("b", "11:00", "12:00")),
            ShiftMutation.update(a.with_times("07:00", "08:00")),
            ShiftMutation.delete("b"),
        ]
        result = push_mutations(store, mutations, max_retries=0, base_delay=0)

        self.assertTrue(result.success)
        self.assertEqual((result.created, result.updated, result.deleted), (1, 1, 1))
        self.assertEqual(store.calls, [("create", "b"), ("update", "a"), ("delete", "b")])
        self.assertEqual(store.shifts["a"].start_time, "07:00")
        self.assertNotIn("b", store.shifts)

    def test_transient_failure_is_retried(self):
        a = _shift("a", "09:00", "10:00")
        store = FlakyStore([a])
        with self.assertLogs(level="WARNING"):
            result = push_mutations(store, [ShiftMutation.update(a.with_times("10:00", "11:00"))],
                                    max_retries=2, base_delay=0)
        self.assertTrue(result.success)
        self.assertEqual(store.shifts["a"].end_time, "11:00")

    def test_failures_are_counted_and_rest_still_sent(self):
        store = InMemoryShiftStore()
        mutations = [
            ShiftMutation.delete("missing"),
            ShiftMutation.create(_shift("c", "13:00", "14:00")),
        ]
        with self.assertLogs(level="ERROR"):
            result = push_mutations(store, mutations, max_retries=1, base_delay=0)
        self.assertFalse(result.success)
        self.assertEqual(result.failed, 1)
        self.assertEqual(result.successful, 1)
        self.assertEqual(result.errors[0][0], "missing")
        self.assertIn("c", store.shifts)
        self.assertEqual(store.calls.count(("delete", "missing")), 2)
        self.assertEqual(result.to_dict()["failed"], 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
