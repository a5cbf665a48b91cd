"""
Multi-day schedule view.

Shows a window of consecutive days (a week by default) with one
DayScheduleView per day, all fed from one shared event queue. Every day is
dragged, resized and created on under the same rules. Navigation moves the
window by its own length; edits made in a day are kept when the window
moves away and back.
"""
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from rich.table import Table

from config import config, ShiftRulesConfig, DEFAULT_WINDOW_DAYS
from models.layout import ShiftLayout
from models.shift import Shift
from events.event_queue import EventQueue
from events.mutation import ShiftMutation, diff_shift_sets
from .base import GridComponent
from .layout import calculate_shift_layout
from .schedule_view import DayScheduleView
from .time_grid import GridGeometry

# Lane for shifts without a guard
UNASSIGNED = "unassigned"


class MultiDayView(GridComponent):
    """
    A navigable window of day grids.

    Responsibilities:
    - Keep the full shift collection, handing each window day its shifts
    - Build one DayScheduleView per visible day on a shared queue
    - Move the window (previous, next, today) between gestures
    - Group a day's shifts into per-guard lanes
    - Collect mutations and net changes across every day
    """

    def __init__(self,
                 shifts: Iterable[Shift] = (),
                 start_date: Optional[date] = None,
                 num_days: int = DEFAULT_WINDOW_DAYS,
                 *,
                 geometry: Optional[GridGeometry] = None,
                 rules: Optional[ShiftRulesConfig] = None,
                 allow_overlap: Optional[bool] = None,
                 readonly: bool = False,
                 site_id: Optional[str] = None,
                 staff_id: Optional[str] = None,
                 event_queue: Optional[EventQueue] = None,
                 name: str = "MultiDayView",
                 verbose: Optional[bool] = None):
        """
        Initialize the window.

        Args:
            shifts: Every shift the host holds, any date
            start_date: First visible day (today by default)
            num_days: Days in the window
            event_queue: Queue shared by all day views (a private one by default)

        Raises:
            ValueError: If num_days is less than 1
        """
        if num_days < 1:
            raise ValueError(f"num_days must be at least 1, got {num_days}")
        super().__init__(name, None, verbose)

        self.num_days = num_days
        self.geometry = geometry or GridGeometry.from_config(config.grid)
        self.queue = event_queue if event_queue is not None else EventQueue(verbose=False)
        self._day_options = {
            "geometry": self.geometry,
            "rules": rules,
            "allow_overlap": allow_overlap,
            "readonly": readonly,
            "site_id": site_id,
            "staff_id": staff_id,
        }

        self._outside: List[Shift] = list(shifts)
        self._saved: List[Shift] = list(self._outside)
        self._outbox: List[ShiftMutation] = []
        self.days: Dict[date, DayScheduleView] = {}

        self.start_date = start_date or date.today()
        self._open_window()

    # ==================== Window ====================

    @property
    def dates(self) -> List[date]:
        return [self.start_date + timedelta(days=i) for i in range(self.num_days)]

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.num_days - 1)

    def day(self, shift_date: date) -> DayScheduleView:
        """
        Get the view of one visible day.

        Raises:
            KeyError: If the date is outside the window
        """
        if shift_date not in self.days:
            raise KeyError(f"{shift_date.isoformat()} is outside the window "
                           f"{self.start_date.isoformat()}..{self.end_date.isoformat()}")
        return self.days[shift_date]

    def _open_window(self) -> None:
        visible = set(self.dates)
        shifts = self._outside
        self._outside = [s for s in shifts if s.date not in visible]
        for shift_date in self.dates:
            self.days[shift_date] = DayScheduleView(
                shift_date,
                shifts,
                event_queue=self.queue,
                name=f"{self.name}[{shift_date.isoformat()}]",
                verbose=self.verbose,
                **self._day_options,
            )

    def _close_window(self) -> None:
        shifts = self.shifts
        for view in self.days.values():
            self._outbox.extend(view.drain_mutations())
            view.close()
        self.days = {}
        self._outside = shifts

    def go_to(self, start_date: date) -> None:
        """
        Move the window so it starts on start_date.

        Raises:
            RuntimeError: If a gesture is in progress on any day
        """
        busy = [d.isoformat() for d, view in self.days.items() if not view.controller.is_idle]
        if busy:
            raise RuntimeError(f"Cannot move the window during a gesture on {', '.join(busy)}")

        self._close_window()
        self.start_date = start_date
        self._open_window()
        self.log(f"Window {self.start_date.isoformat()}..{self.end_date.isoformat()}", "debug")

    def previous(self) -> None:
        self.go_to(self.start_date - timedelta(days=self.num_days))

    def next(self) -> None:
        self.go_to(self.start_date + timedelta(days=self.num_days))

    def today(self, today: Optional[date] = None) -> None:
        """Move the window so it starts on today's date."""
        self.go_to(today or date.today())

    # ==================== Shifts ====================

    @property
    def shifts(self) -> List[Shift]:
        """Every shift: those outside the window, then each visible day's."""
        shifts = list(self._outside)
        for shift_date in sorted(self.days):
            shifts.extend(self.days[shift_date].shifts)
        return shifts

    def shifts_by_staff(self, shift_date: date) -> Dict[str, List[Shift]]:
        """
        Group a visible day's shifts into per-guard lanes.

        Shifts without a guard go to the "unassigned" lane. Lanes appear in
        the order their first shift does.
        """
        lanes: Dict[str, List[Shift]] = {}
        for shift in self.day(shift_date).shifts:
            lanes.setdefault(shift.staff_id or UNASSIGNED, []).append(shift)
        return lanes

    def staff_layout(self, shift_date: date) -> Dict[str, List[ShiftLayout]]:
        """Column layout computed separately inside each guard's lane."""
        geometry = self.geometry
        return {
            staff_id: calculate_shift_layout(lane, geometry.day_start_minutes,
                                             geometry.slot_minutes, geometry.slot_height)
            for staff_id, lane in self.shifts_by_staff(shift_date).items()
        }

    # ==================== Outbound Mutations ====================

    def drain_mutations(self) -> List[ShiftMutation]:
        """Mutations committed on any day since the last drain, oldest day first."""
        drained, self._outbox = self._outbox, []
        for shift_date in sorted(self.days):
            drained.extend(self.days[shift_date].drain_mutations())
        return drained

    def pending_changes(self) -> List[ShiftMutation]:
        """Net changes across all dates since loading or the last save."""
        return diff_shift_sets(self._saved, self.shifts)

    def mark_saved(self) -> None:
        self._saved = self.shifts
        for view in self.days.values():
            view.mark_saved()

    def close(self) -> None:
        """Detach every day view from the queue."""
        for view in self.days.values():
            view.close()
        self.shutdown()

    # ==================== Reporting ====================

    def summary(self) -> Dict[str, Any]:
        """Per-day counts for the visible window."""
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": {
                shift_date.isoformat(): view.summary()
                for shift_date, view in sorted(self.days.items())
            },
            "pending_changes": len(self.pending_changes()),
        }

    def print_window(self) -> None:
        """Print one row per visible day."""
        table = Table(title=f"🗓️ {self.start_date.strftime('%d %b')} - {self.end_date.strftime('%d %b %Y')}")
        table.add_column("Day", style="cyan")
        table.add_column("Shifts", justify="right")
        table.add_column("Unassigned", justify="right")
        table.add_column("Conflicts", justify="right")

        for shift_date, view in sorted(self.days.items()):
            day_summary = view.schedule.summary()
            conflicts = len(view.conflicts())
            table.add_row(
                shift_date.strftime("%a %d/%m"),
                str(day_summary["shift_count"]),
                str(day_summary["unstaffed"]),
                f"[red]{conflicts}[/red]" if conflicts else "0",
            )

        self.console.print(table)
