"""Annotation session tying the viewport, zoom, gestures and polygon together.

The session is the single owner the UI talks to. It carries no Qt types so
it can be driven directly from tests; the canvas widget translates Qt events
into the plain tuples and enums used here.
"""
from __future__ import annotations

import logging
from pathlib import Path

from polygon_annotator.config import AnnotatorSettings
from polygon_annotator.interaction import (
    NOOP,
    GestureMode,
    GestureResult,
    PointerButton,
    ToolMode,
)
from polygon_annotator.interaction.gesture_resolver import PointerGestureResolver
from polygon_annotator.model.polygon import (
    Polygon,
    PolygonBuilder,
    export_extents,
    format_points_preview,
)
from polygon_annotator.model.viewport import (
    AffineViewport,
    ImageDimensions,
    ViewportTransform,
)
from polygon_annotator.model.viewport_math import Point, Size
from polygon_annotator.model.zoom import ZoomController

logger = logging.getLogger(__name__)


class AnnotationSession:
    def __init__(self, settings: AnnotatorSettings | None = None) -> None:
        self.settings = settings or AnnotatorSettings()
        self.viewport = AffineViewport()
        self.polygon = PolygonBuilder()
        self.zoom = ZoomController(
            self.viewport,
            min_scale=self.settings.min_scale,
            max_scale=self.settings.max_scale,
            wheel_zoom_in=self.settings.wheel_zoom_in,
            wheel_zoom_out=self.settings.wheel_zoom_out,
        )
        self.gestures = PointerGestureResolver(
            self.viewport,
            self.polygon,
            drag_threshold=self.settings.drag_threshold_px,
            tool_mode=ToolMode(self.settings.default_tool),
        )
        self.image_path: Path | None = None

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def tool_mode(self) -> ToolMode:
        return self.gestures.tool_mode

    @property
    def scale(self) -> float:
        return self.viewport.scale

    @property
    def offset(self) -> Point:
        return self.viewport.offset

    @property
    def transform(self) -> ViewportTransform:
        return self.viewport.transform

    @property
    def image(self) -> ImageDimensions | None:
        return self.viewport.image

    @property
    def gesture_mode(self) -> GestureMode:
        return self.gestures.mode

    def polygon_snapshot(self) -> Polygon:
        return self.polygon.snapshot()

    def cursor_role(self) -> str:
        if self.gestures.mode is GestureMode.PANNING:
            return "grabbing"
        if self.tool_mode is ToolMode.MOVE:
            return "grab"
        if self.polygon.closed:
            return "default"
        return "crosshair"

    def points_preview(self) -> str:
        return format_points_preview(self.polygon.points)

    def export_extents(self) -> tuple[int, int]:
        return export_extents(self.polygon.points, self.viewport.image)

    def can_close_polygon(self) -> bool:
        return (
            self.tool_mode is ToolMode.POLYGON
            and len(self.polygon) >= 3
            and not self.polygon.closed
        )

    def can_edit_polygon(self) -> bool:
        return self.tool_mode is ToolMode.POLYGON and len(self.polygon) > 0

    def can_export(self) -> bool:
        return len(self.polygon) > 0

    # ------------------------------------------------------------------
    # Image and view
    # ------------------------------------------------------------------
    def load_image(self, dimensions: ImageDimensions, path: Path | None = None) -> None:
        self.gestures.reset()
        self.polygon.reset()
        self.image_path = path
        self.viewport.load_image(dimensions)
        logger.info(
            "Loaded image %s (%dx%d)",
            path if path is not None else "<memory>",
            dimensions.width,
            dimensions.height,
        )

    def resize(self, viewport_size: Size) -> None:
        self.viewport.resize(viewport_size)

    def request_fit(self) -> ViewportTransform | None:
        return self.viewport.request_fit()

    def set_tool_mode(self, mode: ToolMode) -> None:
        self.gestures.tool_mode = mode

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------
    def wheel(self, pos: Point, delta: float) -> bool:
        return self.zoom.zoom_wheel(pos, delta)

    def zoom_in(self) -> float:
        return self.zoom.zoom_by(self.settings.button_zoom_step)

    def zoom_out(self) -> float:
        return self.zoom.zoom_by(1 / self.settings.button_zoom_step)

    def set_slider_scale(self, scale: float) -> float:
        return self.zoom.zoom_to(scale)

    # ------------------------------------------------------------------
    # Pointer gestures
    # ------------------------------------------------------------------
    def pointer_down(
        self,
        pos: Point,
        button: PointerButton = PointerButton.LEFT,
        modifiers: bool = False,
    ) -> GestureResult:
        self.zoom.note_cursor(pos)
        if not self.viewport.has_image():
            return NOOP
        return self.gestures.on_pointer_down(pos, button, modifiers)

    def pointer_move(self, pos: Point) -> GestureResult:
        self.zoom.note_cursor(pos)
        if not self.viewport.has_image():
            return NOOP
        return self.gestures.on_pointer_move(pos)

    def pointer_up(self, pos: Point) -> GestureResult:
        if not self.viewport.has_image():
            return NOOP
        return self.gestures.on_pointer_up(pos)

    def pointer_leave(self) -> GestureResult:
        return self.gestures.on_pointer_leave()

    # ------------------------------------------------------------------
    # Polygon editing
    # ------------------------------------------------------------------
    def close_polygon(self) -> bool:
        return self.polygon.close()

    def undo_vertex(self) -> Point | None:
        return self.polygon.undo_last()

    def reset_polygon(self) -> None:
        self.polygon.reset()
