"""
Move/Resize Validator.

Decides whether a proposed new start/end for a shift may be committed.
Checks run in a fixed order and stop at the first failure:

1. Time range: day_start <= start < end <= day_end
2. Duration: min_duration <= end - start <= max_duration
3. Overlap: no other shift on the day overlaps the proposed interval
   (skipped when overlap is allowed)

A rejection is a ValidationResult with a reason, never an exception, and
validation never modifies any shift.
"""
from dataclasses import dataclass, field
from typing import Iterable, Union

from config import (
    SLOT_DURATION,
    SLOT_HEIGHT,
    MIN_SHIFT_DURATION,
    MAX_SHIFT_DURATION,
    MINUTES_PER_DAY,
    ShiftRulesConfig,
)
from models.shift import Shift
from models.validation import ValidationReason, ValidationResult
from .overlap import overlapping_peers
from .time_grid import GridGeometry, time_to_minutes, minutes_to_time, minutes_to_pixels

TimeValue = Union[str, int]


def _as_minutes(value: TimeValue) -> int:
    if isinstance(value, str):
        return time_to_minutes(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected 'HH:MM' or minutes, got {type(value).__name__}")
    return value


def validate_shift_move(shift: Shift,
                        new_start: TimeValue,
                        new_end: TimeValue,
                        all_shifts: Iterable[Shift],
                        allow_overlap: bool = False,
                        *,
                        min_duration: int = MIN_SHIFT_DURATION,
                        max_duration: int = MAX_SHIFT_DURATION,
                        day_start_minutes: int = 0,
                        day_end_minutes: int = MINUTES_PER_DAY) -> ValidationResult:
    """
    Validate a proposed new interval for a shift.

    Args:
        shift: The shift being moved or resized
        new_start: Proposed start ("HH:MM" or minutes since midnight)
        new_end: Proposed end ("HH:MM" or minutes since midnight)
        all_shifts: The day's shifts; the moved shift itself is ignored
        allow_overlap: Skip the overlap check when True

    Returns:
        ValidationResult (valid, reason)

    Raises:
        MalformedTimeError: If a time string is not "HH:MM"
    """
    start = _as_minutes(new_start)
    end = _as_minutes(new_end)

    if not (day_start_minutes <= start < end <= day_end_minutes):
        return ValidationResult.reject(ValidationReason.INVALID_TIME_RANGE)

    if not (min_duration <= end - start <= max_duration):
        return ValidationResult.reject(ValidationReason.DURATION_OUT_OF_BOUNDS)

    if not allow_overlap:
        proposed = shift.with_times(minutes_to_time(start), minutes_to_time(end))
        if overlapping_peers(proposed, all_shifts):
            return ValidationResult.reject(ValidationReason.OVERLAPS_ANOTHER_SHIFT)

    return ValidationResult.accept()


# =============================================================================
# RESIZE CONSTRAINTS
# =============================================================================

@dataclass(frozen=True)
class ResizeConstraints:
    """
    Pixel bounds a shift block may be dragged within while resizing.

    Attributes:
        min_top: Highest the top edge may go
        max_top: Lowest the top edge may go
        min_height: Shortest block (minimum duration)
        max_height: Tallest block (maximum duration or end of window)
    """
    min_top: float
    max_top: float
    min_height: float
    max_height: float

    def clamp_height(self, height: float) -> float:
        return max(self.min_height, min(height, self.max_height))

    def clamp_top(self, top: float) -> float:
        return max(self.min_top, min(top, self.max_top))


def get_resize_constraints(shift: Shift,
                           day_start_minutes: int = 0,
                           day_end_minutes: int = MINUTES_PER_DAY,
                           *,
                           min_duration: int = MIN_SHIFT_DURATION,
                           max_duration: int = MAX_SHIFT_DURATION,
                           slot_minutes: int = SLOT_DURATION,
                           slot_height: int = SLOT_HEIGHT) -> ResizeConstraints:
    """
    Work out how far a shift's edges can travel on the grid.

    Pixel values are measured from the top of the visible window.

    Args:
        shift: The shift being resized
        day_start_minutes: First visible minute
        day_end_minutes: Last visible minute

    Returns:
        ResizeConstraints for the shift
    """
    start = time_to_minutes(shift.start_time)
    end = time_to_minutes(shift.end_time)

    def px(minutes: int) -> float:
        return minutes_to_pixels(minutes, slot_minutes, slot_height)

    return ResizeConstraints(
        min_top=px(max(day_start_minutes, start - max_duration) - day_start_minutes),
        max_top=px(min(day_end_minutes - min_duration, end - min_duration) - day_start_minutes),
        min_height=px(min_duration),
        max_height=px(min(max_duration, day_end_minutes - start)),
    )


# =============================================================================
# BOUND VALIDATOR
# =============================================================================

@dataclass
class MoveValidator:
    """
    Validator bound to one grid's window, duration rules and overlap policy.

    Attributes:
        geometry: Visible window and scale of the grid
        rules: Duration bounds
        allow_overlap: Whether shifts may overlap their peers
    """
    geometry: GridGeometry = field(default_factory=GridGeometry)
    rules: ShiftRulesConfig = field(default_factory=ShiftRulesConfig)
    allow_overlap: bool = False

    def validate(self, shift: Shift, new_start: TimeValue, new_end: TimeValue,
                 all_shifts: Iterable[Shift]) -> ValidationResult:
        """
        Validate against the rules and the window's end.

        The lower bound stays at midnight: drags are already clamped to the
        window's top, and a shift imported before the window opens must
        still be resizable.
        """
        return validate_shift_move(
            shift, new_start, new_end, all_shifts, self.allow_overlap,
            min_duration=self.rules.min_duration,
            max_duration=self.rules.max_duration,
            day_start_minutes=0,
            day_end_minutes=min(self.geometry.day_end_minutes, self.rules.day_limit),
        )

    def resize_constraints(self, shift: Shift) -> ResizeConstraints:
        return get_resize_constraints(
            shift,
            self.geometry.day_start_minutes,
            self.geometry.day_end_minutes,
            min_duration=self.rules.min_duration,
            max_duration=self.rules.max_duration,
            slot_minutes=self.geometry.slot_minutes,
            slot_height=self.geometry.slot_height,
        )
