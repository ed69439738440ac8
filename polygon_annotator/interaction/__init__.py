"""Interaction types shared by the gesture resolver and the canvas."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class ToolMode(Enum):
    """Active toolbar tool."""

    POLYGON = "polygon"
    MOVE = "move"


class GestureMode(Enum):
    IDLE = "idle"
    PENDING_CLICK = "pending-click"
    PANNING = "panning"


class PointerButton(Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"
    OTHER = "other"


@dataclass(frozen=True)
class GestureResult:
    kind: Literal[
        "pending_click",
        "start_pan",
        "pan",
        "vertex_added",
        "stop_pan",
        "cancelled",
        "noop",
    ]
    payload: object | None = None


NOOP = GestureResult(kind="noop")
