"""
Event stream and outbound mutations for the shift grid.
"""
from .event import PointerEvent, EventType, HitTarget
from .event_queue import EventQueue
from .mutation import MutationType, ShiftMutation, diff_shift_sets, apply_mutation

__all__ = [
    "PointerEvent", "EventType", "HitTarget",
    "EventQueue",
    "MutationType", "ShiftMutation", "diff_shift_sets", "apply_mutation",
]
