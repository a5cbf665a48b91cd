import unittest
from datetime import date

from models.shift import Shift
from roster.stats import FRAME_COLUMNS, shift_stats, shifts_to_frame


MON = date(2024, 12, 16)
TUE = date(2024, 12, 17)
WED = date(2024, 12, 18)


class TestShiftStats(unittest.TestCase):
    def setUp(self):
        self.shifts = [
            Shift("a", MON, "09:00", "17:00", staff_id="g1", site_id="north"),
            Shift("b", MON, "22:00", "24:00", staff_id="g2", site_id="north", status="draft"),
            Shift("c", TUE, "06:00", "06:45", staff_id="g1", site_id="south"),
            Shift("d", WED, "12:00", "13:00", site_id="north", status="open"),
        ]

    def test_frame(self):
        df = shifts_to_frame(self.shifts)
        self.assertEqual(list(df.columns), FRAME_COLUMNS)
        self.assertEqual(df["duration_minutes"].tolist(), [480, 120, 45, 60])

    def test_empty_frame_keeps_columns(self):
        self.assertEqual(list(shifts_to_frame([]).columns), FRAME_COLUMNS)

    def test_stats(self):
        stats = shift_stats(self.shifts)
        self.assertEqual(stats["total"], 4)
        self.assertEqual(stats["by_status"], {"active": 2, "draft": 1, "open": 1})
        self.assertEqual(stats["by_date"], {"2024-12-16": 2, "2024-12-17": 1, "2024-12-18": 1})
        self.assertEqual(stats["total_hours"], 11.75)
        self.assertEqual(stats["staff_coverage"], 2)

    def test_date_range_is_inclusive(self):
        stats = shift_stats(self.shifts, start_date=TUE, end_date=WED)
        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["total_hours"], 1.75)

    def test_site_filter(self):
        stats = shift_stats(self.shifts, site_id="north")
        self.assertEqual(stats["total"], 3)
        self.assertEqual(stats["staff_coverage"], 2)

    def test_nothing_selected(self):
        stats = shift_stats(self.shifts, site_id="east")
        self.assertEqual(stats, {
            "total": 0,
            "by_status": {},
            "by_date": {},
            "total_hours": 0.0,
            "staff_coverage": 0,
        })


if __name__ == "__main__":
    unittest.main(verbosity=2)
