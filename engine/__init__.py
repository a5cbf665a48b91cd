"""
Shift grid engine: time grid, snapping, overlap, layout, validation and
the interaction controller, day and multi-day views.
"""
from .time_grid import (
    MalformedTimeError,
    GridGeometry,
    FULL_DAY,
    BUSINESS_HOURS,
    time_to_minutes,
    minutes_to_time,
    minutes_to_pixels,
    pixels_to_minutes,
    time_to_pixels,
    pixels_to_time,
)
from .snapping import snap_to_grid, snap_time_to_grid, snap_minutes, shift_from_position
from .overlap import overlaps, overlapping_peers, can_place_shift, find_conflicts
from .layout import cluster_shifts, calculate_shift_layout, layout_by_id
from .validator import (
    validate_shift_move,
    get_resize_constraints,
    ResizeConstraints,
    MoveValidator,
)
from .session import SessionMode, Idle, Dragging, Resizing, Previewing, IDLE
from .base import GridComponent
from .controller import InteractionController, UnknownShiftError
from .schedule_view import DayScheduleView
from .multi_day_view import MultiDayView, UNASSIGNED

__all__ = [
    "MalformedTimeError", "GridGeometry", "FULL_DAY", "BUSINESS_HOURS",
    "time_to_minutes", "minutes_to_time", "minutes_to_pixels", "pixels_to_minutes",
    "time_to_pixels", "pixels_to_time",
    "snap_to_grid", "snap_time_to_grid", "snap_minutes", "shift_from_position",
    "overlaps", "overlapping_peers", "can_place_shift", "find_conflicts",
    "cluster_shifts", "calculate_shift_layout", "layout_by_id",
    "validate_shift_move", "get_resize_constraints", "ResizeConstraints", "MoveValidator",
    "SessionMode", "Idle", "Dragging", "Resizing", "Previewing", "IDLE",
    "GridComponent",
    "InteractionController", "UnknownShiftError",
    "DayScheduleView", "MultiDayView", "UNASSIGNED",
]
