"""
Interaction Controller.

Turns the pointer-event stream into committed shift mutations. The
controller owns exactly one session at a time:

    Idle --pointer down on body-------> Dragging
    Idle --pointer down on handle-----> Resizing
    Idle --click on empty grid--------> Previewing
    Dragging/Resizing --move----------> same state (commit or discard frame)
    Dragging/Resizing --pointer up----> Idle
    Previewing --confirm--------------> Idle (create emitted)
    Previewing --cancel---------------> Idle

Every move frame is either fully committed or fully discarded, so after
release the shift sits at its last committed position.
"""
from typing import Any, Callable, Dict, Iterable, Optional
from datetime import date

from config import config
from models.shift import Shift, ShiftStatus
from events.event import PointerEvent, EventType, HitTarget
from events.event_queue import EventQueue
from events.mutation import ShiftMutation
from .base import GridComponent
from .session import SessionState, Idle, Dragging, Resizing, Previewing, IDLE
from .snapping import snap_to_grid, snap_minutes
from .time_grid import GridGeometry, time_to_minutes, minutes_to_time
from .validator import MoveValidator


class UnknownShiftError(KeyError):
    """Raised when an event names a shift that is not in the day's set."""


class InteractionController(GridComponent):
    """
    State machine for drag-to-move, drag-to-resize and click-to-create.

    The controller never stores the day's shifts. It reads them through
    shift_source on every frame and hands each committed change to
    on_commit, which is expected to replace the shift set before the next
    event is delivered.
    """

    def __init__(self,
                 shift_source: Callable[[], Iterable[Shift]],
                 on_commit: Callable[[ShiftMutation], None],
                 shift_date: date,
                 *,
                 name: str = "controller",
                 event_queue: Optional[EventQueue] = None,
                 geometry: Optional[GridGeometry] = None,
                 validator: Optional[MoveValidator] = None,
                 site_id: Optional[str] = None,
                 staff_id: Optional[str] = None,
                 readonly: bool = False,
                 default_new_shift_minutes: Optional[int] = None,
                 verbose: Optional[bool] = None):
        """
        Initialize the controller.

        Args:
            shift_source: Returns the day's current shifts
            on_commit: Receives every committed mutation
            shift_date: Day that click-to-create shifts are dated
            event_queue: Queue to subscribe to (None to call handle() directly)
            geometry: Grid window and scale (config default)
            validator: Move/resize rules (config default)
            site_id: Site stamped on created shifts
            staff_id: Guard stamped on created shifts
            readonly: Ignore every gesture when True
            default_new_shift_minutes: Length of a click-to-create preview
        """
        self.shift_source = shift_source
        self.on_commit = on_commit
        self.shift_date = shift_date
        self.geometry = geometry or GridGeometry.from_config(config.grid)
        self.validator = validator or MoveValidator(
            self.geometry, config.rules, config.grid.allow_overlap
        )
        self.site_id = site_id
        self.staff_id = staff_id
        self.readonly = readonly
        self.default_new_shift_minutes = (
            default_new_shift_minutes or config.grid.default_new_shift_minutes
        )

        self.session: SessionState = IDLE
        self.frames_committed = 0
        self.frames_rejected = 0
        self.last_rejection: Optional[str] = None

        super().__init__(name, event_queue, verbose)

    def _setup_handlers(self) -> None:
        self._event_handlers = {
            EventType.POINTER_DOWN: self._on_pointer_down,
            EventType.POINTER_MOVE: self._on_pointer_move,
            EventType.POINTER_UP: self._on_pointer_up,
            EventType.GRID_CLICK: self._on_grid_click,
            EventType.CONFIRM: self._on_confirm,
            EventType.CANCEL: self._on_cancel,
            EventType.DELETE: self._on_delete,
        }

    def handle(self, event: PointerEvent) -> SessionState:
        """Deliver one event directly, bypassing any queue."""
        self._handle_event(event)
        return self.session

    # ==================== Session Helpers ====================

    @property
    def is_idle(self) -> bool:
        return isinstance(self.session, Idle)

    def _transition(self, new_state: SessionState) -> None:
        old_state = self.session
        self.session = new_state
        if old_state.mode != new_state.mode:
            self.log(f"Session: {old_state.mode.value} → {new_state.mode.value}", "debug")

    def _lookup(self, shift_id: Optional[str]) -> Shift:
        for shift in self.shift_source():
            if shift.id == shift_id:
                return shift
        raise UnknownShiftError(shift_id)

    def _commit(self, mutation: ShiftMutation) -> None:
        self.on_commit(mutation)
        self.frames_committed += 1
        self.log(f"Committed {mutation}", "info")

    def _reject(self, reason: Optional[str], start: int, end: int) -> None:
        self.frames_rejected += 1
        self.last_rejection = reason
        self.log(f"Discarded frame {start}-{end} min: {reason}", "debug")

    # ==================== Pointer Down / Up ====================

    def _on_pointer_down(self, event: PointerEvent) -> None:
        if self.readonly or not self.is_idle:
            return
        if event.target == HitTarget.EMPTY_GRID:
            return

        shift = self._lookup(event.shift_id)
        if event.target == HitTarget.RESIZE_HANDLE:
            self._transition(Resizing(shift=shift, anchor_y=event.y))
        else:
            top, _ = self.geometry.shift_position(shift)
            self._transition(Dragging(shift=shift, pointer_offset=event.y - top))

    def _on_pointer_up(self, event: PointerEvent) -> None:
        if isinstance(self.session, (Dragging, Resizing)):
            self._transition(IDLE)

    # ==================== Pointer Move ====================

    def _on_pointer_move(self, event: PointerEvent) -> None:
        if isinstance(self.session, Dragging):
            self._drag_frame(self.session, event.y)
        elif isinstance(self.session, Resizing):
            self._resize_frame(self.session, event.y)

    def _drag_frame(self, session: Dragging, pointer_y: float) -> None:
        """Move the dragged shift so its top follows the pointer."""
        geometry = self.geometry
        shift = session.shift
        start_minutes = time_to_minutes(shift.start_time)
        duration = time_to_minutes(shift.end_time) - start_minutes
        shift_height = geometry.to_pixels(duration)

        top = snap_to_grid(pointer_y - session.pointer_offset, geometry.slot_height)
        top = max(0, min(top, geometry.day_height - shift_height))

        new_start = snap_minutes(geometry.day_start_minutes + geometry.to_minutes(top),
                                 geometry.slot_minutes)
        new_end = snap_minutes(new_start + duration, geometry.slot_minutes)
        if new_start == start_minutes and new_end == start_minutes + duration:
            return

        result = self.validator.validate(shift, new_start, new_end, self.shift_source())
        if not result.valid:
            self._reject(result.reason, new_start, new_end)
            return

        moved = shift.with_times(minutes_to_time(new_start), minutes_to_time(new_end))
        self._commit(ShiftMutation.update(moved))
        self.session = Dragging(shift=moved, pointer_offset=session.pointer_offset)

    def _resize_frame(self, session: Resizing, pointer_y: float) -> None:
        """Move the resized shift's end so its bottom edge follows the pointer."""
        geometry = self.geometry
        shift = session.shift
        start_minutes = time_to_minutes(shift.start_time)
        end_minutes = time_to_minutes(shift.end_time)
        _, height = geometry.shift_position(shift)

        constraints = self.validator.resize_constraints(shift)
        new_height = snap_to_grid(height + (pointer_y - session.anchor_y), geometry.slot_height)
        new_height = constraints.clamp_height(new_height)

        new_end = snap_minutes(start_minutes + geometry.to_minutes(new_height),
                               geometry.slot_minutes)
        if new_end == end_minutes:
            return

        result = self.validator.validate(shift, start_minutes, new_end, self.shift_source())
        if not result.valid:
            self._reject(result.reason, start_minutes, new_end)
            return

        resized = shift.with_times(shift.start_time, minutes_to_time(new_end))
        self._commit(ShiftMutation.update(resized))
        # Keep the anchor on the committed bottom edge
        anchor_y = session.anchor_y + geometry.to_pixels(new_end - end_minutes)
        self.session = Resizing(shift=resized, anchor_y=anchor_y)

    # ==================== Click-to-Create ====================

    def _on_grid_click(self, event: PointerEvent) -> None:
        if self.readonly or isinstance(self.session, (Dragging, Resizing)):
            return

        geometry = self.geometry
        duration = self.default_new_shift_minutes
        top = snap_to_grid(event.y, geometry.slot_height)
        top = max(0, min(top, geometry.day_height - geometry.to_pixels(duration)))

        start = snap_minutes(geometry.day_start_minutes + geometry.to_minutes(top),
                             geometry.slot_minutes)
        proposed = Shift(
            id=Shift.new_id(),
            date=self.shift_date,
            start_time=minutes_to_time(start),
            end_time=minutes_to_time(start + duration),
            title="New Shift",
            status=ShiftStatus.ACTIVE.value,
            site_id=self.site_id,
            staff_id=self.staff_id,
        )
        self._transition(Previewing(proposed=proposed, top=top))
        self.log(f"Previewing {proposed.start_time}-{proposed.end_time}", "debug")

    def _on_confirm(self, event: PointerEvent) -> None:
        if isinstance(self.session, Previewing):
            proposed = self.session.proposed
            self._transition(IDLE)
            self._commit(ShiftMutation.create(proposed))

    def _on_cancel(self, event: PointerEvent) -> None:
        if isinstance(self.session, Previewing):
            self._transition(IDLE)

    # ==================== Delete ====================

    def _on_delete(self, event: PointerEvent) -> None:
        if self.readonly or not self.is_idle:
            return
        shift = self._lookup(event.shift_id)
        self._commit(ShiftMutation.delete(shift.id))

    # ==================== Metrics ====================

    def get_metrics(self) -> Dict[str, Any]:
        metrics = super().get_metrics()
        metrics.update({
            "session": self.session.mode.value,
            "frames_committed": self.frames_committed,
            "frames_rejected": self.frames_rejected,
            "last_rejection": self.last_rejection,
        })
        return metrics
