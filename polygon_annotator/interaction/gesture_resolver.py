"""Click-versus-drag resolution for pointer gestures on the canvas."""
from __future__ import annotations

import logging
import math

from polygon_annotator.interaction import (
    NOOP,
    GestureMode,
    GestureResult,
    PointerButton,
    ToolMode,
)
from polygon_annotator.model.polygon import PolygonBuilder
from polygon_annotator.model.viewport import AffineViewport
from polygon_annotator.model.viewport_math import Point

logger = logging.getLogger(__name__)

DRAG_THRESHOLD_PX = 4.0


class PointerGestureResolver:
    """Turns one press/move/release sequence into a vertex, a pan or nothing.

    A press that could place a vertex waits in ``PENDING_CLICK``. Moving
    further than ``drag_threshold`` from the press point turns it into a
    pan; releasing before that places the vertex at the release point. Any
    other press pans straight away. Pans are applied to the viewport on
    every move.
    """

    def __init__(
        self,
        viewport: AffineViewport,
        polygon: PolygonBuilder,
        *,
        drag_threshold: float = DRAG_THRESHOLD_PX,
        tool_mode: ToolMode = ToolMode.POLYGON,
    ) -> None:
        self._viewport = viewport
        self._polygon = polygon
        self.drag_threshold = drag_threshold
        self.tool_mode = tool_mode
        self._mode = GestureMode.IDLE
        self._gesture_origin: Point | None = None
        self._last_screen_point: Point | None = None

    @property
    def mode(self) -> GestureMode:
        return self._mode

    def reset(self) -> None:
        self._mode = GestureMode.IDLE
        self._gesture_origin = None
        self._last_screen_point = None

    def _can_place_vertex(self) -> bool:
        return self.tool_mode is ToolMode.POLYGON and not self._polygon.closed

    def on_pointer_down(
        self,
        pos: Point,
        button: PointerButton = PointerButton.LEFT,
        modifiers: bool = False,
    ) -> GestureResult:
        self._gesture_origin = pos
        self._last_screen_point = pos
        if button is PointerButton.LEFT and not modifiers and self._can_place_vertex():
            self._mode = GestureMode.PENDING_CLICK
            return GestureResult(kind="pending_click", payload=pos)

        self._mode = GestureMode.PANNING
        self._viewport.mark_user_transform()
        return GestureResult(kind="start_pan", payload=pos)

    def on_pointer_move(self, pos: Point) -> GestureResult:
        if self._mode is GestureMode.IDLE or self._last_screen_point is None:
            return NOOP

        if self._mode is GestureMode.PENDING_CLICK:
            origin = self._gesture_origin or pos
            if math.hypot(pos[0] - origin[0], pos[1] - origin[1]) <= self.drag_threshold:
                return NOOP
            logger.debug("Press at %s became a pan at %s", origin, pos)
            self._mode = GestureMode.PANNING
            self._viewport.mark_user_transform()

        dx = pos[0] - self._last_screen_point[0]
        dy = pos[1] - self._last_screen_point[1]
        self._last_screen_point = pos
        self._viewport.pan_by(dx, dy)
        return GestureResult(kind="pan", payload=(dx, dy))

    def on_pointer_up(self, pos: Point) -> GestureResult:
        mode = self._mode
        self.reset()
        if mode is GestureMode.PANNING:
            return GestureResult(kind="stop_pan")
        if mode is GestureMode.PENDING_CLICK and self._can_place_vertex():
            world = self._viewport.to_world(pos)
            if self._polygon.add_vertex(world):
                return GestureResult(kind="vertex_added", payload=world)
        return NOOP

    def on_pointer_leave(self) -> GestureResult:
        if self._mode is GestureMode.IDLE:
            return NOOP
        self.reset()
        return GestureResult(kind="cancelled")
