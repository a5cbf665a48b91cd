"""
Shift model.
"""
from dataclasses import dataclass, replace, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional
import uuid


class ShiftStatus(Enum):
    """Lifecycle status tags a shift can carry."""
    ACTIVE = "active"
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    CONFIRMED = "confirmed"
    OPEN = "open"
    CANCELLED = "cancelled"

    @classmethod
    def from_string(cls, value: str) -> Optional["ShiftStatus"]:
        """Convert a status tag to ShiftStatus, None if unknown."""
        try:
            return cls(value.lower().strip())
        except ValueError:
            return None


# Record keys used by the portal's shift collection -> model field names
_RECORD_ALIASES = {
    "$id": "id",
    "shiftDate": "date",
    "startTime": "start_time",
    "endTime": "end_time",
    "siteId": "site_id",
    "staffId": "staff_id",
}


@dataclass(frozen=True)
class Shift:
    """
    Represents one guard shift on a single day.

    Shifts are immutable: moving or resizing produces a new record, so a
    day's shift set can be swapped atomically without readers ever seeing
    a half-updated shift.

    Attributes:
        id: Opaque unique identifier
        date: Calendar day the shift belongs to
        start_time: Clock time "HH:MM"
        end_time: Clock time "HH:MM" ("24:00" allowed), same day as start
        title: Display title
        description: Free text
        status: Status tag (see ShiftStatus)
        site_id: Optional site reference, uninterpreted here
        staff_id: Optional guard reference, uninterpreted here
        notes: Free text notes
    """
    id: str
    date: date
    start_time: str
    end_time: str
    title: str = "Shift"
    description: str = ""
    status: str = ShiftStatus.ACTIVE.value
    site_id: Optional[str] = None
    staff_id: Optional[str] = None
    notes: str = ""

    @staticmethod
    def new_id() -> str:
        """Generate an identifier for a shift created on the grid."""
        return f"shift_{uuid.uuid4().hex[:12]}"

    def with_times(self, start_time: str, end_time: str) -> "Shift":
        """Return a copy of this shift with new start/end times."""
        return replace(self, start_time=start_time, end_time=end_time)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Shift":
        """
        Build a Shift from a record.

        Accepts both snake_case keys and the portal's record keys
        ($id, shiftDate, startTime, endTime, siteId, staffId). Unknown keys
        are ignored.

        Args:
            data: Shift record

        Returns:
            Shift instance

        Raises:
            KeyError: If id, date, start or end time is missing
            ValueError: If the date is not ISO formatted
        """
        values = {}
        for key, value in data.items():
            values[_RECORD_ALIASES.get(key, key)] = value

        shift_date = values["date"]
        if isinstance(shift_date, str):
            shift_date = date.fromisoformat(shift_date.strip())

        return cls(
            id=str(values["id"]),
            date=shift_date,
            start_time=str(values["start_time"]).strip(),
            end_time=str(values["end_time"]).strip(),
            title=values.get("title") or "Shift",
            description=values.get("description") or "",
            status=values.get("status") or ShiftStatus.ACTIVE.value,
            site_id=values.get("site_id") or None,
            staff_id=values.get("staff_id") or None,
            notes=values.get("notes") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (ISO date) for export."""
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data

    def __str__(self) -> str:
        return (
            f"{self.title} on {self.date.strftime('%a %d/%m')}: "
            f"{self.start_time}-{self.end_time} [{self.status}]"
        )
