"""
Day schedule view.

Hosts one day's grid: owns the day's shift set, the event queue and the
interaction controller, applies committed mutations and collects them for
the host to persist.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple
from rich.table import Table

from config import config, ShiftRulesConfig
from models.day_schedule import DaySchedule
from models.layout import ShiftLayout
from models.shift import Shift
from events.event import PointerEvent, HitTarget
from events.event_queue import EventQueue
from events.mutation import ShiftMutation, apply_mutation, diff_shift_sets
from .base import GridComponent
from .controller import InteractionController
from .layout import calculate_shift_layout
from .overlap import find_conflicts
from .session import SessionState
from .time_grid import GridGeometry, format_shift_display
from .validator import MoveValidator


class DayScheduleView(GridComponent):
    """
    One day of the scheduling grid.

    Responsibilities:
    - Hold the day's shift set and replace it atomically on every commit
    - Route host input through the event queue to the controller
    - Collect committed mutations for the host to persist
    - Compute layout and conflicts on demand, never cached
    """

    def __init__(self,
                 shift_date: date,
                 shifts: Iterable[Shift] = (),
                 *,
                 geometry: Optional[GridGeometry] = None,
                 rules: Optional[ShiftRulesConfig] = None,
                 allow_overlap: Optional[bool] = None,
                 readonly: bool = False,
                 site_id: Optional[str] = None,
                 staff_id: Optional[str] = None,
                 event_queue: Optional[EventQueue] = None,
                 name: Optional[str] = None,
                 verbose: Optional[bool] = None):
        """
        Initialize the view.

        Args:
            shift_date: Day shown by this view
            shifts: Shift collection; shifts dated other days are dropped
            geometry: Grid window and scale (config default)
            rules: Duration bounds (config default)
            allow_overlap: Overlap policy (config default)
            readonly: Ignore every gesture
            site_id: Site stamped on created shifts
            staff_id: Guard stamped on created shifts
            event_queue: Queue shared with other views (a private one by default)
            name: Component name, unique per queue (DayView[<date>] by default)
        """
        name = name or f"DayView[{shift_date.isoformat()}]"
        super().__init__(name, None, verbose)

        self.geometry = geometry or GridGeometry.from_config(config.grid)
        self.schedule = DaySchedule.from_shifts(shift_date, shifts)
        self._saved = self.schedule
        self._outbox: List[ShiftMutation] = []

        self.queue = event_queue if event_queue is not None else EventQueue(verbose=False)
        self.validator = MoveValidator(
            geometry=self.geometry,
            rules=rules or config.rules,
            allow_overlap=config.grid.allow_overlap if allow_overlap is None else allow_overlap,
        )
        self.controller = InteractionController(
            lambda: self.schedule,
            self._apply,
            shift_date,
            name=f"{name}.controller",
            event_queue=self.queue,
            geometry=self.geometry,
            validator=self.validator,
            site_id=site_id,
            staff_id=staff_id,
            readonly=readonly,
            verbose=self.verbose,
        )

    @property
    def date(self) -> date:
        return self.schedule.date

    @property
    def shifts(self) -> Tuple[Shift, ...]:
        return self.schedule.shifts

    @property
    def session(self) -> SessionState:
        return self.controller.session

    def _apply(self, mutation: ShiftMutation) -> None:
        """Replace the day's shift set with the mutated one."""
        self.schedule = DaySchedule(self.schedule.date,
                                    apply_mutation(self.schedule.shifts, mutation))
        self._outbox.append(mutation)

    # ==================== Host Input ====================

    def _send(self, event: PointerEvent) -> PointerEvent:
        event.receiver = self.controller.name
        return self.queue.publish(event)

    def pointer_down(self, y: float, shift_id: str,
                     target: HitTarget = HitTarget.SHIFT_BODY) -> PointerEvent:
        return self._send(PointerEvent.down(y, shift_id, target))

    def pointer_move(self, y: float) -> PointerEvent:
        return self._send(PointerEvent.move(y))

    def pointer_up(self, y: Optional[float] = None) -> PointerEvent:
        return self._send(PointerEvent.up(y))

    def click(self, y: float) -> PointerEvent:
        return self._send(PointerEvent.click(y))

    def confirm(self) -> PointerEvent:
        return self._send(PointerEvent.confirm())

    def cancel(self) -> PointerEvent:
        return self._send(PointerEvent.cancel())

    def delete(self, shift_id: str) -> PointerEvent:
        return self._send(PointerEvent.delete(shift_id))

    # ==================== Derived Output ====================

    def layout(self) -> List[ShiftLayout]:
        """Column and pixel layout of the current shift set."""
        return calculate_shift_layout(
            self.schedule,
            self.geometry.day_start_minutes,
            self.geometry.slot_minutes,
            self.geometry.slot_height,
        )

    def conflicts(self) -> List[Tuple[Shift, Shift]]:
        """Overlapping pairs in the current shift set."""
        return find_conflicts(self.schedule)

    # ==================== Outbound Mutations ====================

    def drain_mutations(self) -> List[ShiftMutation]:
        """Hand over every mutation committed since the last drain."""
        drained, self._outbox = self._outbox, []
        return drained

    def pending_changes(self) -> List[ShiftMutation]:
        """Net changes since the day was loaded or last saved."""
        return diff_shift_sets(self._saved, self.schedule)

    def mark_saved(self) -> None:
        """Record the current shift set as persisted."""
        self._saved = self.schedule
        self.log(f"Saved state updated ({len(self.schedule)} shifts)", "debug")

    def reload(self, shifts: Iterable[Shift]) -> None:
        """
        Replace the day's shifts with a fresh copy from the store.

        Raises:
            RuntimeError: If a gesture is in progress
        """
        if not self.controller.is_idle:
            raise RuntimeError("Cannot reload while a gesture is in progress")
        self.schedule = DaySchedule.from_shifts(self.schedule.date, shifts)
        self._saved = self.schedule
        self._outbox = []

    def close(self) -> None:
        """Detach the controller from the queue so the name can be reused."""
        self.controller.shutdown()
        self.shutdown()

    # ==================== Reporting ====================

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the day and the controller."""
        summary = self.schedule.summary()
        summary.update({
            "conflicts": len(self.conflicts()),
            "pending_changes": len(self.pending_changes()),
            "controller": self.controller.get_metrics(),
        })
        return summary

    def print_day(self) -> None:
        """Print the day's shifts with their layout columns."""
        table = Table(title=f"📅 Shifts for {self.schedule.date.isoformat()}")
        table.add_column("Time", style="cyan")
        table.add_column("Duration", justify="right")
        table.add_column("Title")
        table.add_column("Staff")
        table.add_column("Column", justify="right")

        for item in self.layout():
            display = format_shift_display(item.shift)
            duration = display["duration"] + (" ⚠️" if display["is_long"] else "")
            table.add_row(
                display["time_range"],
                duration,
                item.shift.title,
                item.shift.staff_id or "-",
                f"{item.column + 1}/{item.total_columns}",
            )

        self.console.print(table)
