"""Pure screen/world transform helpers for the annotation viewport.

``screen = world * scale + offset`` and ``world = (screen - offset) / scale``.
Nothing in here holds state; :class:`~polygon_annotator.model.viewport.AffineViewport`
owns the values and calls these functions.
"""
from __future__ import annotations

from typing import Tuple

Point = Tuple[float, float]
Size = Tuple[int, int]

MIN_SCALE = 0.1
MAX_SCALE = 10.0


def to_world(screen: Point, scale: float, offset: Point) -> Point:
    return (
        (screen[0] - offset[0]) / scale,
        (screen[1] - offset[1]) / scale,
    )


def to_screen(world: Point, scale: float, offset: Point) -> Point:
    return (
        world[0] * scale + offset[0],
        world[1] * scale + offset[1],
    )


def clamp_scale(scale: float, min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE) -> float:
    return max(min_scale, min(max_scale, scale))


def clamp_axis(proposed: float, image_extent: float, scale: float, visible_extent: float) -> float:
    """Clamp one offset component.

    Images narrower than the viewport on this axis pan freely. Wider ones
    keep their edges at or beyond the viewport edges.
    """
    scaled = image_extent * scale
    if scaled <= visible_extent:
        return proposed
    min_offset = visible_extent - scaled
    return min(0.0, max(min_offset, proposed))


def clamp_offset(
    proposed: Point,
    image_size: Size | None,
    scale: float,
    viewport_size: Size,
) -> Point:
    if image_size is None:
        return proposed
    image_w, image_h = image_size
    view_w, view_h = viewport_size
    return (
        clamp_axis(proposed[0], image_w, scale, view_w),
        clamp_axis(proposed[1], image_h, scale, view_h),
    )


def calculate_fit_scale(image_size: Size | None, viewport_size: Size) -> float | None:
    """Largest scale that shows the whole image, never above 1."""
    if image_size is None:
        return None
    view_w, view_h = viewport_size
    if view_w <= 0 or view_h <= 0:
        return None
    image_w, image_h = image_size
    return min(view_w / image_w, view_h / image_h, 1.0)


def fit_transform(image_size: Size | None, viewport_size: Size) -> tuple[float, Point] | None:
    scale = calculate_fit_scale(image_size, viewport_size)
    if scale is None or image_size is None:
        return None
    image_w, image_h = image_size
    view_w, view_h = viewport_size
    offset = (
        (view_w - image_w * scale) / 2,
        (view_h - image_h * scale) / 2,
    )
    return scale, offset


def viewport_center(viewport_size: Size) -> Point:
    return (viewport_size[0] / 2, viewport_size[1] / 2)
