"""
Data models for the shift grid engine.
"""
from .shift import Shift, ShiftStatus
from .day_schedule import DaySchedule
from .layout import ShiftLayout
from .validation import (
    ValidationReason,
    ValidationResult,
    RecordCheck,
    validate_shift_record,
)

__all__ = [
    "Shift", "ShiftStatus",
    "DaySchedule",
    "ShiftLayout",
    "ValidationReason", "ValidationResult", "RecordCheck", "validate_shift_record",
]
