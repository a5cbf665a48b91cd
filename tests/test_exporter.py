import json
import os
import tempfile
import unittest
from datetime import date

from openpyxl import load_workbook

from engine.time_grid import BUSINESS_HOURS, FULL_DAY
from models.shift import Shift
from roster.exporter import RosterExporter
from roster.loader import ShiftLoader


DAY = date(2024, 12, 16)


def _shift(shift_id, start, end, **kwargs):
    return Shift(id=shift_id, date=DAY, start_time=start, end_time=end, **kwargs)


class TestRosterExporter(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.shifts = [
            _shift("a", "09:00", "11:00", title="Gate", staff_id="g1"),
            _shift("b", "10:00", "12:00", title="Lobby", staff_id="g2", status="draft"),
            _shift("c", "13:00", "14:00", title="Patrol"),
            Shift("z", date(2024, 12, 17), "09:00", "10:00"),
        ]

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_export_day_workbook(self):
        exporter = RosterExporter(geometry=FULL_DAY, output_dir=self.tmpdir.name, verbose=False)
        path = exporter.export_day(DAY, self.shifts)
        self.assertTrue(path.endswith("shifts_2024-12-16.xlsx"))

        wb = load_workbook(path)
        self.assertEqual(wb.sheetnames, ["Day Grid", "Shifts", "Summary"])

        grid = wb["Day Grid"]
        self.assertEqual(grid.cell(row=1, column=3).value, "Column 2")
        self.assertEqual(grid.cell(row=2, column=1).value, "00:00")
        self.assertEqual(grid.cell(row=20, column=2).value, "Gate (09:00 - 11:00)")
        self.assertEqual(grid.cell(row=22, column=3).value, "Lobby (10:00 - 12:00)")

        shifts_sheet = wb["Shifts"]
        self.assertEqual(shifts_sheet.max_row, 4)
        self.assertEqual(shifts_sheet.cell(row=1, column=1).value, "id")

        summary = wb["Summary"]
        self.assertEqual(summary["B3"].value, 3)
        self.assertEqual(summary["B4"].value, 5)
        self.assertEqual(summary["B6"].value, 1)

    def test_grid_rows_follow_the_window(self):
        exporter = RosterExporter(geometry=BUSINESS_HOURS, output_dir=self.tmpdir.name,
                                  verbose=False)
        path = exporter.export_day(DAY, self.shifts, filename="business.xlsx")
        grid = load_workbook(path)["Day Grid"]
        self.assertEqual(grid.cell(row=2, column=1).value, "08:00")
        self.assertEqual(grid.cell(row=4, column=2).value, "Gate (09:00 - 11:00)")

    def test_json_export_reads_back(self):
        exporter = RosterExporter(output_dir=self.tmpdir.name, verbose=False)
        path = exporter.export_json(self.shifts)
        self.assertEqual(os.path.basename(path), f"schedule-{date.today().isoformat()}.json")

        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        self.assertEqual(records[0]["date"], "2024-12-16")

        result = ShiftLoader(verbose=False).load(path)
        self.assertTrue(result.ok)
        self.assertEqual(result.shifts, self.shifts)


if __name__ == "__main__":
    unittest.main(verbosity=2)
