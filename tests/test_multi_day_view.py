import unittest
from datetime import date, timedelta

from config import ShiftRulesConfig
from engine.multi_day_view import MultiDayView, UNASSIGNED
from engine.time_grid import FULL_DAY
from events.event import PointerEvent
from events.event_queue import EventQueue
from events.mutation import MutationType
from models.shift import Shift


MONDAY = date(2024, 12, 16)
TUESDAY = date(2024, 12, 17)
LATER = date(2024, 12, 30)


def _shift(shift_id, day, start, end, staff_id=None):
    return Shift(id=shift_id, date=day, start_time=start, end_time=end, staff_id=staff_id)


def _window(shifts=None, **kwargs):
    if shifts is None:
        shifts = [
            _shift("a", MONDAY, "09:00", "10:00", "guard_1"),
            _shift("b", TUESDAY, "08:00", "09:00"),
            _shift("c", TUESDAY, "12:00", "13:00", "guard_1"),
            _shift("z", LATER, "09:00", "17:00"),
        ]
    kwargs.setdefault("geometry", FULL_DAY)
    kwargs.setdefault("rules", ShiftRulesConfig())
    kwargs.setdefault("allow_overlap", False)
    return MultiDayView(shifts, MONDAY, verbose=False, **kwargs)


def _ids(view):
    return [s.id for s in view.shifts]


class TestWindow(unittest.TestCase):
    def test_week_by_default(self):
        window = _window()
        self.assertEqual(len(window.dates), 7)
        self.assertEqual(window.dates[0], MONDAY)
        self.assertEqual(window.end_date, MONDAY + timedelta(days=6))
        self.assertEqual(sorted(window.days), window.dates)

    def test_shifts_go_to_their_day(self):
        window = _window()
        self.assertEqual(_ids(window.day(MONDAY)), ["a"])
        self.assertEqual(_ids(window.day(TUESDAY)), ["b", "c"])
        self.assertEqual(_ids(window.day(MONDAY + timedelta(days=2))), [])
        self.assertEqual(sorted(_ids(window)), ["a", "b", "c", "z"])

    def test_day_outside_window(self):
        with self.assertRaises(KeyError):
            _window().day(LATER)

    def test_window_length(self):
        window = _window(num_days=3)
        self.assertEqual(window.end_date, MONDAY + timedelta(days=2))
        with self.assertRaises(ValueError):
            _window(num_days=0)


class TestNavigation(unittest.TestCase):
    def test_next_and_previous_move_by_window_length(self):
        window = _window()
        window.next()
        self.assertEqual(window.start_date, MONDAY + timedelta(days=7))
        window.previous()
        window.previous()
        self.assertEqual(window.start_date, MONDAY - timedelta(days=7))

    def test_today(self):
        window = _window()
        window.today(LATER)
        self.assertEqual(window.start_date, LATER)
        self.assertEqual(_ids(window.day(LATER)), ["z"])

    def test_navigation_keeps_edits_and_mutations(self):
        window = _window()
        window.day(MONDAY).delete("a")
        window.next()
        window.previous()

        self.assertEqual(_ids(window.day(MONDAY)), [])
        [mutation] = window.drain_mutations()
        self.assertEqual((mutation.mutation_type, mutation.shift_id), (MutationType.DELETE, "a"))
        self.assertEqual(window.drain_mutations(), [])

        [change] = window.pending_changes()
        self.assertEqual(change.shift_id, "a")
        window.mark_saved()
        self.assertEqual(window.pending_changes(), [])

    def test_navigation_refused_mid_gesture(self):
        window = _window()
        window.day(MONDAY).pointer_down(545, "a")
        with self.assertRaises(RuntimeError):
            window.next()
        self.assertEqual(window.start_date, MONDAY)

        window.day(MONDAY).pointer_up()
        window.next()
        self.assertEqual(window.start_date, MONDAY + timedelta(days=7))

    def test_old_days_leave_the_queue(self):
        window = _window()
        self.assertEqual(len(window.queue.subscribers), 7)
        window.next()
        self.assertEqual(len(window.queue.subscribers), 7)
        self.assertNotIn(f"MultiDayView[{MONDAY.isoformat()}].controller",
                         window.queue.subscribers)


class TestSharedQueue(unittest.TestCase):
    def test_days_share_the_callers_queue(self):
        queue = EventQueue(verbose=False)
        window = _window(event_queue=queue)
        self.assertIs(window.queue, queue)
        for view in window.days.values():
            self.assertIs(view.queue, queue)

    def test_drag_commits_only_on_its_day(self):
        window = _window()
        monday = window.day(MONDAY)
        monday.pointer_down(545, "a")
        monday.pointer_move(605)
        monday.pointer_up()

        self.assertEqual(monday.schedule.get("a").start_time, "10:00")
        self.assertEqual(window.day(TUESDAY).drain_mutations(), [])
        self.assertEqual(len(window.drain_mutations()), 1)

    def test_event_on_queue_reaches_its_day(self):
        window = _window()
        tuesday = window.day(TUESDAY)
        window.queue.publish(PointerEvent.delete("b", receiver=tuesday.controller.name))
        self.assertEqual(_ids(tuesday), ["c"])
        self.assertEqual(_ids(window.day(MONDAY)), ["a"])


class TestStaffLanes(unittest.TestCase):
    def test_group_by_staff(self):
        window = _window()
        lanes = window.shifts_by_staff(TUESDAY)
        self.assertEqual(list(lanes), [UNASSIGNED, "guard_1"])
        self.assertEqual([s.id for s in lanes["guard_1"]], ["c"])
        self.assertEqual(window.shifts_by_staff(MONDAY + timedelta(days=3)), {})

    def test_lane_layout_is_per_guard(self):
        shifts = [
            _shift("a", MONDAY, "09:00", "11:00", "guard_1"),
            _shift("b", MONDAY, "10:00", "12:00", "guard_2"),
        ]
        window = _window(shifts, allow_overlap=True)
        self.assertEqual(window.day(MONDAY).layout()[0].total_columns, 2)
        for lane in window.staff_layout(MONDAY).values():
            self.assertEqual([item.total_columns for item in lane], [1])


class TestReporting(unittest.TestCase):
    def test_summary(self):
        summary = _window().summary()
        self.assertEqual(summary["start_date"], "2024-12-16")
        self.assertEqual(summary["days"]["2024-12-17"]["shift_count"], 2)
        self.assertEqual(summary["pending_changes"], 0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
