"""
Shift statistics.
"""
from datetime import date
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from engine.time_grid import minutes_between
from models.shift import Shift

FRAME_COLUMNS = [
    "id", "date", "start_time", "end_time", "duration_minutes",
    "title", "status", "site_id", "staff_id",
]


def shifts_to_frame(shifts: Iterable[Shift]) -> pd.DataFrame:
    """
    Tabulate shifts, one row per shift, with their duration in minutes.

    Args:
        shifts: Shifts to tabulate

    Returns:
        DataFrame with FRAME_COLUMNS (empty but typed when there are no shifts)
    """
    rows = [
        {
            "id": s.id,
            "date": s.date.isoformat(),
            "start_time": s.start_time,
            "end_time": s.end_time,
            "duration_minutes": minutes_between(s.start_time, s.end_time),
            "title": s.title,
            "status": s.status,
            "site_id": s.site_id,
            "staff_id": s.staff_id,
        }
        for s in shifts
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def shift_stats(shifts: Iterable[Shift],
                start_date: Optional[date] = None,
                end_date: Optional[date] = None,
                site_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Summarise shifts in a date range.

    Args:
        shifts: Shifts to summarise
        start_date: First day included (inclusive)
        end_date: Last day included (inclusive)
        site_id: Only count shifts at this site

    Returns:
        Dictionary with total, by_status, by_date, total_hours and
        staff_coverage (number of distinct guards)
    """
    selected = [
        s for s in shifts
        if (start_date is None or s.date >= start_date)
        and (end_date is None or s.date <= end_date)
        and (site_id is None or s.site_id == site_id)
    ]
    df = shifts_to_frame(selected)

    if df.empty:
        return {
            "total": 0,
            "by_status": {},
            "by_date": {},
            "total_hours": 0.0,
            "staff_coverage": 0,
        }

    return {
        "total": int(len(df)),
        "by_status": {k: int(v) for k, v in df.groupby("status").size().items()},
        "by_date": {k: int(v) for k, v in df.groupby("date").size().sort_index().items()},
        "total_hours": round(float(df["duration_minutes"].sum()) / 60, 2),
        "staff_coverage": int(df["staff_id"].dropna().nunique()),
    }
