"""
Snapping to the slot grid.

All snaps round half-up to the nearest slot boundary and are idempotent.
"""
from typing import Tuple

from config import SLOT_DURATION, SLOT_HEIGHT
from .time_grid import (
    Number,
    round_to_unit,
    time_to_minutes,
    minutes_to_time,
    pixels_to_minutes,
    check_number,
)


def snap_to_grid(pixels: Number, snap_size: int = SLOT_HEIGHT) -> int:
    """Round a pixel offset to the nearest slot boundary."""
    check_number(pixels, "pixels")
    return round_to_unit(pixels, snap_size)


def snap_minutes(minutes: Number, slot_minutes: int = SLOT_DURATION) -> int:
    """Round a minute offset to the nearest slot boundary."""
    check_number(minutes, "minutes")
    return round_to_unit(minutes, slot_minutes)


def snap_time_to_grid(value: str, snap_minutes: int = SLOT_DURATION) -> str:
    """Round a clock time to the nearest slot boundary, e.g. 14:07 -> 14:00."""
    return minutes_to_time(round_to_unit(time_to_minutes(value), snap_minutes))


def shift_from_position(top: Number,
                        height: Number,
                        day_start_minutes: int = 0,
                        slot_minutes: int = SLOT_DURATION,
                        slot_height: int = SLOT_HEIGHT) -> Tuple[str, str]:
    """
    Turn a block's pixel position back into snapped start/end times.

    Args:
        top: Pixel offset of the block's top edge
        height: Pixel height of the block
        day_start_minutes: Minute offset of the grid's first row

    Returns:
        Tuple of (start_time, end_time)
    """
    start = pixels_to_minutes(top, slot_minutes, slot_height) + day_start_minutes
    end = start + pixels_to_minutes(height, slot_minutes, slot_height)
    return (
        minutes_to_time(round_to_unit(start, slot_minutes)),
        minutes_to_time(round_to_unit(end, slot_minutes)),
    )
