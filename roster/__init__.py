"""
Import, export, statistics and store sync for shift rosters.
"""
from .loader import ShiftLoader, LoadResult, RejectedRecord
from .exporter import RosterExporter
from .stats import shift_stats, shifts_to_frame
from .sync import ShiftStore, SyncResult, push_mutations, InMemoryShiftStore

__all__ = [
    "ShiftLoader", "LoadResult", "RejectedRecord",
    "RosterExporter",
    "shift_stats", "shifts_to_frame",
    "ShiftStore", "SyncResult", "push_mutations", "InMemoryShiftStore",
]
