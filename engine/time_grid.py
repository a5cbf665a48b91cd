"""
Time-grid conversions.

Converts between clock times ("HH:MM"), minute offsets and pixel offsets
on the fixed-height day grid. One slot (default 30 minutes) is drawn
slot_height pixels tall; pixel -> minute conversions round half-up to the
nearest slot, so every pixel offset maps back onto the grid.
"""
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from config import (
    SLOT_DURATION,
    SLOT_HEIGHT,
    MINUTES_PER_DAY,
    LONG_SHIFT_MINUTES,
    GridConfig,
)
from models.shift import Shift

Number = Union[int, float]

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")


class MalformedTimeError(ValueError):
    """Raised when a clock time is not a valid "HH:MM" string."""


# =============================================================================
# CLOCK TIME <-> MINUTES
# =============================================================================

def time_to_minutes(value: str) -> int:
    """
    Convert "HH:MM" to minutes since midnight.

    "24:00" is accepted as the end of the day.

    Raises:
        MalformedTimeError: If value is not a valid clock time
    """
    match = _TIME_PATTERN.match(value) if isinstance(value, str) else None
    if not match:
        raise MalformedTimeError(f"Invalid time {value!r} (expected HH:MM)")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise MalformedTimeError(f"Invalid time {value!r} (outside 00:00-24:00)")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """
    Convert minutes since midnight to "HH:MM".

    Raises:
        ValueError: If minutes falls outside [0, 1440]
    """
    minutes = int(minutes)
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Minute offset {minutes} is outside the day (0-{MINUTES_PER_DAY})")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def minutes_between(start_time: str, end_time: str) -> int:
    """Minutes from start_time to end_time (negative if end is earlier)."""
    return time_to_minutes(end_time) - time_to_minutes(start_time)


def add_minutes_to_time(value: str, minutes: int) -> str:
    """Shift a clock time by a number of minutes, staying within the day."""
    return minutes_to_time(time_to_minutes(value) + minutes)


# =============================================================================
# MINUTES <-> PIXELS
# =============================================================================

def check_number(value: Number, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{label} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{label} must be finite, got {value}")


def round_to_unit(value: Number, unit: Number) -> int:
    """Round value to the nearest multiple of unit, halves rounding up."""
    return int(math.floor(value / unit + 0.5) * unit)


def minutes_to_pixels(minutes: Number,
                      slot_minutes: int = SLOT_DURATION,
                      slot_height: int = SLOT_HEIGHT) -> float:
    """Pixel length of a duration in minutes."""
    check_number(minutes, "minutes")
    return minutes / slot_minutes * slot_height


def pixels_to_minutes(pixels: Number,
                      slot_minutes: int = SLOT_DURATION,
                      slot_height: int = SLOT_HEIGHT) -> int:
    """Duration in minutes for a pixel length, rounded to the nearest slot."""
    check_number(pixels, "pixels")
    slots = math.floor(pixels / slot_height + 0.5)
    return int(slots * slot_minutes)


def time_to_pixels(value: str,
                   day_start_minutes: int = 0,
                   slot_minutes: int = SLOT_DURATION,
                   slot_height: int = SLOT_HEIGHT) -> float:
    """Pixel offset of a clock time from the top of the grid."""
    return minutes_to_pixels(time_to_minutes(value) - day_start_minutes,
                             slot_minutes, slot_height)


def pixels_to_time(pixels: Number,
                   day_start_minutes: int = 0,
                   slot_minutes: int = SLOT_DURATION,
                   slot_height: int = SLOT_HEIGHT) -> str:
    """Clock time at a pixel offset from the top of the grid."""
    return minutes_to_time(
        pixels_to_minutes(pixels, slot_minutes, slot_height) + day_start_minutes
    )


def shift_position(shift: Shift,
                   day_start_minutes: int = 0,
                   slot_minutes: int = SLOT_DURATION,
                   slot_height: int = SLOT_HEIGHT) -> Tuple[float, float]:
    """
    Get a shift's (top, height) in pixels on the day grid.

    Args:
        shift: The shift to place
        day_start_minutes: Minute offset of the grid's first row

    Returns:
        Tuple of (top, height)
    """
    top = time_to_pixels(shift.start_time, day_start_minutes, slot_minutes, slot_height)
    height = minutes_to_pixels(minutes_between(shift.start_time, shift.end_time),
                               slot_minutes, slot_height)
    return top, height


# =============================================================================
# GRID GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class GridGeometry:
    """
    Visible window and scale of a day grid.

    Attributes:
        day_start_minutes: First visible minute of the day
        day_end_minutes: Last visible minute of the day
        slot_minutes: Minutes per slot
        slot_height: Pixels per slot
        name: Human-readable name (e.g., "Business Hours")
    """
    day_start_minutes: int = 0
    day_end_minutes: int = MINUTES_PER_DAY
    slot_minutes: int = SLOT_DURATION
    slot_height: int = SLOT_HEIGHT
    name: str = ""

    def __post_init__(self):
        if not 0 <= self.day_start_minutes < self.day_end_minutes <= MINUTES_PER_DAY:
            raise ValueError(
                f"Invalid day window {self.day_start_minutes}-{self.day_end_minutes}"
            )
        if self.slot_minutes <= 0 or self.slot_height <= 0:
            raise ValueError("Slot duration and height must be positive")

    @classmethod
    def from_times(cls, day_start: str, day_end: str, **kwargs) -> "GridGeometry":
        """Build a geometry from "HH:MM" window bounds."""
        return cls(time_to_minutes(day_start), time_to_minutes(day_end), **kwargs)

    @classmethod
    def from_config(cls, grid: GridConfig) -> "GridGeometry":
        """Build the geometry described by a GridConfig."""
        return cls.from_times(
            grid.day_start,
            grid.day_end,
            slot_minutes=grid.slot_minutes,
            slot_height=grid.slot_height,
        )

    @property
    def day_height(self) -> float:
        """Total pixel height of the visible window."""
        return minutes_to_pixels(self.day_end_minutes - self.day_start_minutes,
                                 self.slot_minutes, self.slot_height)

    @property
    def slot_count(self) -> int:
        """Number of slot rows drawn for the window."""
        return math.ceil((self.day_end_minutes - self.day_start_minutes) / self.slot_minutes)

    def to_pixels(self, minutes: Number) -> float:
        return minutes_to_pixels(minutes, self.slot_minutes, self.slot_height)

    def to_minutes(self, pixels: Number) -> int:
        return pixels_to_minutes(pixels, self.slot_minutes, self.slot_height)

    def time_to_pixels(self, value: str) -> float:
        return time_to_pixels(value, self.day_start_minutes, self.slot_minutes, self.slot_height)

    def pixels_to_time(self, pixels: Number) -> str:
        return pixels_to_time(pixels, self.day_start_minutes, self.slot_minutes, self.slot_height)

    def shift_position(self, shift: Shift) -> Tuple[float, float]:
        return shift_position(shift, self.day_start_minutes, self.slot_minutes, self.slot_height)

    def time_labels(self, interval_minutes: int = 60) -> List[str]:
        """Hour labels for the side of the grid, both ends included."""
        return generate_time_slots(self.day_start_minutes, self.day_end_minutes + 1,
                                   interval_minutes)


# Pre-defined day windows
FULL_DAY = GridGeometry(0, MINUTES_PER_DAY, name="Full Day")
BUSINESS_HOURS = GridGeometry(8 * 60, 17 * 60, name="Business Hours")


# =============================================================================
# DISPLAY HELPERS
# =============================================================================

def generate_time_slots(start_minutes: int = 0,
                        end_minutes: int = MINUTES_PER_DAY,
                        interval_minutes: int = SLOT_DURATION) -> List[str]:
    """Clock times from start (inclusive) to end (exclusive) at a fixed step."""
    return [
        minutes_to_time(m)
        for m in range(start_minutes, min(end_minutes, MINUTES_PER_DAY + 1), interval_minutes)
    ]


def format_duration(minutes: int) -> str:
    """Compact duration label, e.g. 90 -> "1h30m"."""
    hours, mins = divmod(int(minutes), 60)
    label = ""
    if hours > 0:
        label += f"{hours}h"
    if mins > 0:
        label += f"{mins}m"
    return label or "0m"


def format_shift_display(shift: Shift) -> Dict[str, object]:
    """Labels shown on a shift block."""
    duration = minutes_between(shift.start_time, shift.end_time)
    return {
        "time_range": f"{shift.start_time} - {shift.end_time}",
        "duration": format_duration(duration),
        "is_long": duration > LONG_SHIFT_MINUTES,
    }
