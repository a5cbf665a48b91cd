import unittest
from datetime import date

from models.day_schedule import DaySchedule
from models.shift import Shift, ShiftStatus
from models.validation import ValidationReason, ValidationResult, validate_shift_record


DAY = date(2024, 12, 16)


class TestShift(unittest.TestCase):
    def test_from_dict_accepts_portal_keys(self):
        shift = Shift.from_dict({
            "$id": "x1",
            "shiftDate": "2024-12-16",
            "startTime": " 09:00 ",
            "endTime": "17:00",
            "staffId": "",
            "unknown": "ignored",
        })
        self.assertEqual(shift.id, "x1")
        self.assertEqual(shift.date, DAY)
        self.assertEqual(shift.start_time, "09:00")
        self.assertIsNone(shift.staff_id)
        self.assertEqual(shift.title, "Shift")
        self.assertEqual(shift.status, "active")

    def test_round_trip_through_dict(self):
        shift = Shift("a", DAY, "09:00", "10:00", title="Gate", staff_id="g1", notes="radio")
        self.assertEqual(Shift.from_dict(shift.to_dict()), shift)

    def test_with_times_copies(self):
        shift = Shift("a", DAY, "09:00", "10:00", title="Gate")
        moved = shift.with_times("11:00", "12:00")
        self.assertEqual((shift.start_time, moved.start_time), ("09:00", "11:00"))
        self.assertEqual(moved.title, "Gate")

    def test_new_ids_are_unique(self):
        self.assertNotEqual(Shift.new_id(), Shift.new_id())

    def test_status_from_string(self):
        self.assertEqual(ShiftStatus.from_string(" Draft "), ShiftStatus.DRAFT)
        self.assertIsNone(ShiftStatus.from_string("lunch"))


class TestDaySchedule(unittest.TestCase):
    def setUp(self):
        self.a = Shift("a", DAY, "09:00", "10:00")
        self.b = Shift("b", DAY, "11:00", "12:00")
        self.schedule = DaySchedule(DAY, [self.a, self.b])

    def test_lookup(self):
        self.assertIs(self.schedule.get("a"), self.a)
        self.assertIsNone(self.schedule.get("zz"))
        self.assertIn("b", self.schedule)
        self.assertEqual(len(self.schedule), 2)

    def test_changes_return_new_schedules(self):
        moved = self.a.with_times("13:00", "14:00")
        replaced = self.schedule.replace(moved)
        self.assertEqual(replaced.get("a").start_time, "13:00")
        self.assertEqual(self.schedule.get("a").start_time, "09:00")

        c = Shift("c", DAY, "15:00", "16:00")
        self.assertEqual([s.id for s in self.schedule.add(c)], ["a", "b", "c"])
        self.assertEqual([s.id for s in self.schedule.remove("a")], ["b"])

    def test_rejects_foreign_and_duplicate_shifts(self):
        with self.assertRaises(ValueError):
            DaySchedule(DAY, [Shift("x", date(2024, 12, 17), "09:00", "10:00")])
        with self.assertRaises(ValueError):
            DaySchedule(DAY, [self.a, self.a])

    def test_unknown_ids(self):
        with self.assertRaises(KeyError):
            self.schedule.remove("zz")
        with self.assertRaises(KeyError):
            self.schedule.replace(Shift("zz", DAY, "09:00", "10:00"))

    def test_from_shifts_filters_by_day(self):
        other = Shift("x", date(2024, 12, 17), "09:00", "10:00")
        schedule = DaySchedule.from_shifts(DAY, [self.a, other])
        self.assertEqual([s.id for s in schedule], ["a"])

    def test_summary(self):
        schedule = DaySchedule(DAY, [self.a, Shift("s", DAY, "12:00", "13:00", staff_id="g1")])
        self.assertEqual(schedule.summary()["unstaffed"], 1)
        self.assertIn("2 shifts", str(schedule))


class TestValidationModels(unittest.TestCase):
    def test_validation_result(self):
        declined = ValidationResult.reject(ValidationReason.OVERLAPS_ANOTHER_SHIFT)
        self.assertFalse(declined)
        self.assertEqual(declined.reason, "Overlaps with another shift")
        self.assertTrue(ValidationResult.accept())

    def test_valid_record(self):
        check = validate_shift_record({"date": "2024-12-16", "start_time": "09:00",
                                       "end_time": "24:00"})
        self.assertTrue(check.valid)
        self.assertEqual(check.errors, [])

    def test_site_not_required(self):
        check = validate_shift_record({"shiftDate": "2024-12-16", "startTime": "09:00",
                                       "endTime": "10:00"})
        self.assertTrue(check.valid)

    def test_all_errors_reported(self):
        check = validate_shift_record({"date": "16/12/2024", "start_time": "", "end_time": "9"})
        self.assertFalse(check.valid)
        self.assertEqual(check.errors, [
            "Start time is required",
            "Invalid end time format (use HH:MM)",
            "Invalid date format (use YYYY-MM-DD)",
        ])

    def test_end_must_follow_start(self):
        check = validate_shift_record({"date": "2024-12-16", "start_time": "12:00",
                                       "end_time": "12:00"})
        self.assertEqual(check.errors, ["End time must be after start time"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
