"""
Validation result models.

Two kinds of checks produce results here:
- move/resize validation on the grid (ValidationResult), where a failure is
  a declined state transition and never an exception;
- record validation at the import/save edge (RecordCheck), which collects
  every problem found in a raw shift record.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import re


class ValidationReason(Enum):
    """Reasons a proposed move or resize is declined, in check order."""
    INVALID_TIME_RANGE = "Invalid time range"
    DURATION_OUT_OF_BOUNDS = "Shift duration out of bounds"
    OVERLAPS_ANOTHER_SHIFT = "Overlaps with another shift"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a proposed new start/end for a shift.

    Attributes:
        valid: Whether the proposal may be committed
        reason: Human-readable reason when declined, None when valid
    """
    valid: bool
    reason: Optional[str] = None

    @classmethod
    def accept(cls) -> "ValidationResult":
        return cls(valid=True, reason=None)

    @classmethod
    def reject(cls, reason: ValidationReason) -> "ValidationResult":
        return cls(valid=False, reason=reason.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "reason": self.reason}

    def __bool__(self) -> bool:
        return self.valid


# =============================================================================
# RECORD VALIDATION (IMPORT / SAVE EDGE)
# =============================================================================

_TIME_FORMAT = re.compile(r"^\d{2}:\d{2}$")
_DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass
class RecordCheck:
    """
    Result of checking a raw shift record before it enters the engine.

    Attributes:
        valid: Whether the record can be turned into a Shift
        errors: Every problem found, in field order
    """
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False


def _field(record: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def validate_shift_record(record: Dict[str, Any]) -> RecordCheck:
    """
    Check a raw shift record (snake_case or portal keys).

    Site is not required: shifts can be laid out before a site is chosen.

    Args:
        record: Raw record, e.g. a CSV row or JSON object

    Returns:
        RecordCheck listing every error found
    """
    check = RecordCheck()

    shift_date = _field(record, "date", "shiftDate")
    start_time = _field(record, "start_time", "startTime")
    end_time = _field(record, "end_time", "endTime")

    if shift_date is None:
        check.add_error("Date is required")
    if start_time is None:
        check.add_error("Start time is required")
    if end_time is None:
        check.add_error("End time is required")

    start_ok = start_time is not None and bool(_TIME_FORMAT.match(str(start_time)))
    end_ok = end_time is not None and bool(_TIME_FORMAT.match(str(end_time)))

    if start_time is not None and not start_ok:
        check.add_error("Invalid start time format (use HH:MM)")
    if end_time is not None and not end_ok:
        check.add_error("Invalid end time format (use HH:MM)")

    if shift_date is not None and not _DATE_FORMAT.match(str(shift_date)):
        check.add_error("Invalid date format (use YYYY-MM-DD)")

    # HH:MM strings compare correctly as text once both are well formed
    if start_ok and end_ok and str(start_time) >= str(end_time):
        check.add_error("End time must be after start time")

    return check
