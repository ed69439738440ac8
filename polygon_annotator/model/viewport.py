"""Viewport state for the annotation canvas.

The viewport is a transient state holder: it does not load images or paint
anything. It owns the current scale and screen-space offset, the loaded
image size, the visible widget size and the latch recording whether the user
has zoomed or panned by hand.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from polygon_annotator.model import viewport_math
from polygon_annotator.model.viewport_math import Point, Size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )

    def as_size(self) -> Size:
        return (self.width, self.height)


@dataclass(frozen=True)
class ViewportTransform:
    scale: float = 1.0
    offset: Point = (0.0, 0.0)


class AffineViewport:
    """Screen/world mapping with offset clamping and fit-to-view."""

    def __init__(self) -> None:
        self._scale = 1.0
        self._offset: Point = (0.0, 0.0)
        self._image: ImageDimensions | None = None
        self._viewport_size: Size = (0, 0)
        self.user_transform_active = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def scale(self) -> float:
        return self._scale

    @property
    def offset(self) -> Point:
        return self._offset

    @property
    def image(self) -> ImageDimensions | None:
        return self._image

    @property
    def viewport_size(self) -> Size:
        return self._viewport_size

    @property
    def transform(self) -> ViewportTransform:
        return ViewportTransform(self._scale, self._offset)

    def has_image(self) -> bool:
        return self._image is not None

    def center(self) -> Point:
        return viewport_math.viewport_center(self._viewport_size)

    # ------------------------------------------------------------------
    # Coordinate mapping
    # ------------------------------------------------------------------
    def to_world(self, screen: Point) -> Point:
        return viewport_math.to_world(screen, self._scale, self._offset)

    def to_screen(self, world: Point) -> Point:
        return viewport_math.to_screen(world, self._scale, self._offset)

    def clamp(self, proposed: Point, scale: float | None = None) -> Point:
        image_size = self._image.as_size() if self._image is not None else None
        return viewport_math.clamp_offset(
            proposed,
            image_size,
            self._scale if scale is None else scale,
            self._viewport_size,
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set_scale(self, scale: float) -> None:
        self._scale = scale
        self._offset = self.clamp(self._offset)

    def set_offset(self, offset: Point) -> None:
        self._offset = self.clamp(offset)

    def set_transform(self, scale: float, offset: Point) -> None:
        self._scale = scale
        self._offset = self.clamp(offset, scale)

    def pan_by(self, dx: float, dy: float) -> None:
        ox, oy = self._offset
        self.set_offset((ox + dx, oy + dy))

    def mark_user_transform(self) -> None:
        self.user_transform_active = True

    def fit(self, viewport_size: Size | None = None) -> ViewportTransform | None:
        """Center the whole image in the viewport without upscaling it."""
        if viewport_size is not None:
            self._viewport_size = viewport_size
        image_size = self._image.as_size() if self._image is not None else None
        result = viewport_math.fit_transform(image_size, self._viewport_size)
        if result is None:
            return None
        scale, offset = result
        self.set_transform(scale, offset)
        logger.debug(
            "Fit image %s into viewport %s: scale=%.4f offset=%s",
            image_size,
            self._viewport_size,
            self._scale,
            self._offset,
        )
        return self.transform

    def load_image(self, dimensions: ImageDimensions) -> None:
        self._image = dimensions
        self.user_transform_active = False
        self.set_scale(1.0)
        self.fit()

    def resize(self, viewport_size: Size) -> None:
        self._viewport_size = viewport_size
        if not self.user_transform_active:
            if self.fit() is not None:
                return
        self._offset = self.clamp(self._offset)

    def request_fit(self) -> ViewportTransform | None:
        self.user_transform_active = False
        return self.fit()
