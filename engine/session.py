"""
Drag/resize/create session states.

A session is exactly one of Idle, Dragging, Resizing or Previewing, and
each variant carries its own payload. There is no "mode flag plus maybe a
shift" combination, so a session without data or with stale data cannot
be represented.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Union

from models.shift import Shift


class SessionMode(Enum):
    """Interaction mode of the current session."""
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"
    PREVIEWING = "previewing"


@dataclass(frozen=True)
class Idle:
    """No gesture in progress."""
    mode = SessionMode.IDLE


@dataclass(frozen=True)
class Dragging:
    """
    Moving a shift.

    Attributes:
        shift: Last committed snapshot of the shift being moved
        pointer_offset: Pointer y minus the shift's top edge at pointer-down
    """
    shift: Shift
    pointer_offset: float
    mode = SessionMode.DRAGGING


@dataclass(frozen=True)
class Resizing:
    """
    Moving a shift's bottom edge.

    Attributes:
        shift: Last committed snapshot of the shift being resized
        anchor_y: Pointer y matching the snapshot's bottom edge
    """
    shift: Shift
    anchor_y: float
    mode = SessionMode.RESIZING


@dataclass(frozen=True)
class Previewing:
    """
    Click-to-create preview waiting for confirm or cancel.

    Attributes:
        proposed: The shift that confirm would create
        top: Snapped pixel offset of the preview's top edge
    """
    proposed: Shift
    top: float
    mode = SessionMode.PREVIEWING


SessionState = Union[Idle, Dragging, Resizing, Previewing]

IDLE = Idle()
