"""
Roster Exporter - Writes a day's grid and shift list to Excel and JSON.
"""
import json
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Border, Side, Alignment
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from config import config
from engine.base import GridComponent
from engine.layout import calculate_shift_layout
from engine.overlap import find_conflicts
from engine.time_grid import GridGeometry, minutes_to_time, format_shift_display
from models.shift import Shift
from .stats import shift_stats, shifts_to_frame


class RosterExporter(GridComponent):
    """
    Exports shifts for printing and hand-off.

    Responsibilities:
    - Draw a day as a slot-by-column grid in Excel
    - Write the shift list and a summary sheet
    - Write shifts as a JSON array the loader can read back
    """

    def __init__(self, geometry: Optional[GridGeometry] = None,
                 output_dir: Optional[str] = None, verbose: Optional[bool] = None):
        super().__init__("RosterExporter", verbose=verbose)
        self.geometry = geometry or GridGeometry.from_config(config.grid)
        self.output_dir = Path(output_dir or config.output_dir)

        # Style definitions
        self.header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
        self.header_font = Font(color="FFFFFF", bold=True, size=11)
        self.hour_fill = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
        self.status_colors = {
            "active": PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"),     # Green
            "draft": PatternFill(start_color="D9D9D9", end_color="D9D9D9", fill_type="solid"),     # Gray
            "scheduled": PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid"),  # Blue
            "open": PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid"),      # Yellow
            "cancelled": PatternFill(start_color="FCE4D6", end_color="FCE4D6", fill_type="solid"),  # Orange
        }
        self.conflict_fill = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

    # ==================== Excel ====================

    def export_day(self, shift_date: date, shifts: Iterable[Shift],
                   filename: Optional[str] = None) -> str:
        """
        Generate an Excel workbook for one day.

        Args:
            shift_date: Day to export
            shifts: Shifts to export (other days are skipped)
            filename: Output file name (default shifts_<date>.xlsx)

        Returns:
            Path to the generated file
        """
        day_shifts = [s for s in shifts if s.date == shift_date]
        self.log(f"Exporting {len(day_shifts)} shifts for {shift_date.isoformat()}...")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / (filename or f"shifts_{shift_date.isoformat()}.xlsx")

        wb = Workbook()
        self._create_grid_sheet(wb, shift_date, day_shifts)
        self._create_shift_sheet(wb, day_shifts)
        self._create_summary_sheet(wb, day_shifts)
        wb.save(filepath)

        self.log(f"Workbook saved to {filepath}", "success")
        return str(filepath)

    def _style_header(self, ws, headers: List[str]) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
            cell.border = self.thin_border

    def _create_grid_sheet(self, wb: Workbook, shift_date: date, shifts: List[Shift]) -> None:
        """Create the slot-by-column grid sheet."""
        ws = wb.active
        ws.title = "Day Grid"

        geometry = self.geometry
        layout = calculate_shift_layout(shifts, geometry.day_start_minutes,
                                        geometry.slot_minutes, geometry.slot_height)
        columns = max((item.total_columns for item in layout), default=1)
        conflicted = {s.id for pair in find_conflicts(shifts) for s in pair}

        headers = [shift_date.strftime("%a %d/%m")] + [f"Column {i + 1}" for i in range(columns)]
        self._style_header(ws, headers)
        ws.column_dimensions['A'].width = 12
        for col in range(2, columns + 2):
            ws.column_dimensions[get_column_letter(col)].width = 22

        # One row per slot
        for slot in range(geometry.slot_count):
            minute = geometry.day_start_minutes + slot * geometry.slot_minutes
            cell = ws.cell(row=slot + 2, column=1, value=minutes_to_time(minute))
            cell.border = self.thin_border
            if minute % 60 == 0:
                cell.fill = self.hour_fill
                cell.font = Font(bold=True)

        for item in layout:
            first_row = int(item.top // geometry.slot_height) + 2
            rows = max(1, round(item.height / geometry.slot_height))
            col = item.column + 2
            fill = (self.conflict_fill if item.shift.id in conflicted
                    else self.status_colors.get(item.shift.status, PatternFill()))

            for row in range(first_row, first_row + rows):
                if row < 2 or row > geometry.slot_count + 1:
                    continue
                cell = ws.cell(row=row, column=col)
                cell.fill = fill
                cell.border = self.thin_border

            if 2 <= first_row <= geometry.slot_count + 1:
                display = format_shift_display(item.shift)
                label = ws.cell(row=first_row, column=col,
                                value=f"{item.shift.title} ({display['time_range']})")
                label.alignment = Alignment(wrap_text=True, vertical="top")

    def _create_shift_sheet(self, wb: Workbook, shifts: List[Shift]) -> None:
        """Create the shift list sheet."""
        ws = wb.create_sheet("Shifts")
        df = shifts_to_frame(shifts)
        headers = list(df.columns)
        self._style_header(ws, headers)

        for row_index, values in enumerate(dataframe_to_rows(df, index=False, header=False), 2):
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row_index, column=col, value=value)
                cell.border = self.thin_border

        for col in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = 14

    def _create_summary_sheet(self, wb: Workbook, shifts: List[Shift]) -> None:
        """Create the summary sheet."""
        ws = wb.create_sheet("Summary")
        stats = shift_stats(shifts)

        ws.cell(row=1, column=1, value="SHIFT SUMMARY").font = Font(bold=True, size=14)
        rows = [
            ("Total Shifts:", stats["total"]),
            ("Total Hours:", stats["total_hours"]),
            ("Staff Covered:", stats["staff_coverage"]),
            ("Conflicts:", len(find_conflicts(shifts))),
        ]
        for offset, (label, value) in enumerate(rows):
            ws.cell(row=3 + offset, column=1, value=label)
            ws.cell(row=3 + offset, column=2, value=value)

        row = 3 + len(rows) + 1
        ws.cell(row=row, column=1, value="By Status").font = Font(bold=True)
        for status, count in stats["by_status"].items():
            row += 1
            cell = ws.cell(row=row, column=1, value=status)
            cell.fill = self.status_colors.get(status, PatternFill())
            ws.cell(row=row, column=2, value=count)

        ws.column_dimensions['A'].width = 18
        ws.column_dimensions['B'].width = 12

    # ==================== JSON ====================

    def export_json(self, shifts: Iterable[Shift], filename: Optional[str] = None) -> str:
        """
        Write shifts as a JSON array.

        Returns:
            Path to the generated file
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / (filename or f"schedule-{date.today().isoformat()}.json")

        records = [shift.to_dict() for shift in shifts]
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2)

        self.log(f"Exported {len(records)} shifts to {filepath}", "success")
        return str(filepath)
