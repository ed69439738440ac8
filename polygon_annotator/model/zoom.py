"""Anchor-preserving zoom for the annotation viewport."""
from __future__ import annotations

import logging

from polygon_annotator.model import viewport_math
from polygon_annotator.model.viewport import AffineViewport
from polygon_annotator.model.viewport_math import Point

logger = logging.getLogger(__name__)

WHEEL_ZOOM_IN = 1.1
WHEEL_ZOOM_OUT = 0.9
BUTTON_ZOOM_STEP = 1.2


class ZoomController:
    def __init__(
        self,
        viewport: AffineViewport,
        *,
        min_scale: float = viewport_math.MIN_SCALE,
        max_scale: float = viewport_math.MAX_SCALE,
        wheel_zoom_in: float = WHEEL_ZOOM_IN,
        wheel_zoom_out: float = WHEEL_ZOOM_OUT,
    ) -> None:
        self._viewport = viewport
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.wheel_zoom_in = wheel_zoom_in
        self.wheel_zoom_out = wheel_zoom_out
        self._last_cursor: Point | None = None

    @property
    def last_cursor(self) -> Point | None:
        return self._last_cursor

    def note_cursor(self, point: Point) -> None:
        self._last_cursor = point

    def clear_cursor(self) -> None:
        self._last_cursor = None

    def default_anchor(self) -> Point:
        if self._last_cursor is not None:
            return self._last_cursor
        return self._viewport.center()

    def zoom_at_screen_point(
        self,
        anchor: Point | None,
        *,
        multiplier: float | None = None,
        absolute: float | None = None,
    ) -> float:
        """Change the scale keeping the world point under ``anchor`` fixed.

        Exactly one of ``multiplier`` or ``absolute`` must be given. The
        target is clamped to ``[min_scale, max_scale]``. Returns the scale in
        effect afterwards; without a loaded image nothing changes.
        """
        if (multiplier is None) == (absolute is None):
            raise ValueError("Pass exactly one of multiplier or absolute")

        viewport = self._viewport
        if not viewport.has_image():
            return viewport.scale

        if anchor is None:
            anchor = self.default_anchor()

        previous = viewport.scale
        target = absolute if absolute is not None else previous * multiplier
        new_scale = viewport_math.clamp_scale(target, self.min_scale, self.max_scale)

        world_x, world_y = viewport.to_world(anchor)
        offset = (
            anchor[0] - world_x * new_scale,
            anchor[1] - world_y * new_scale,
        )
        viewport.mark_user_transform()
        viewport.set_transform(new_scale, offset)
        logger.debug(
            "Zoom %.4f -> %.4f anchored at %s", previous, viewport.scale, anchor
        )
        return viewport.scale

    def zoom_by(self, multiplier: float, anchor: Point | None = None) -> float:
        return self.zoom_at_screen_point(anchor, multiplier=multiplier)

    def zoom_to(self, scale: float, anchor: Point | None = None) -> float:
        return self.zoom_at_screen_point(anchor, absolute=scale)

    def zoom_wheel(self, anchor: Point, delta: float) -> bool:
        """Zoom in for positive wheel deltas and out for negative ones."""
        if delta == 0:
            return False
        self.note_cursor(anchor)
        if not self._viewport.has_image():
            return False
        factor = self.wheel_zoom_in if delta > 0 else self.wheel_zoom_out
        self.zoom_at_screen_point(anchor, multiplier=factor)
        return True
