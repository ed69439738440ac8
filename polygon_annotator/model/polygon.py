"""Polygon annotation data in image pixel space."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from polygon_annotator.model.viewport import ImageDimensions
from polygon_annotator.model.viewport_math import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Point, ...] = ()
    closed: bool = False


class PolygonBuilder:
    """Ordered vertex list plus a closed flag.

    ``closed`` only changes through :meth:`close` and :meth:`reset`, so
    :meth:`undo_last` on a closed polygon leaves it closed even when fewer
    than three vertices remain.
    """

    def __init__(self) -> None:
        self._points: List[Point] = []
        self._closed = False

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(self._points)

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._points)

    def snapshot(self) -> Polygon:
        return Polygon(tuple(self._points), self._closed)

    def add_vertex(self, point: Point) -> bool:
        if self._closed:
            return False
        self._points.append((float(point[0]), float(point[1])))
        logger.debug("Added vertex #%d at %s", len(self._points), point)
        return True

    def close(self) -> bool:
        if len(self._points) <= 2:
            return False
        self._closed = True
        logger.debug("Closed polygon with %d vertices", len(self._points))
        return True

    def undo_last(self) -> Point | None:
        if not self._points:
            return None
        return self._points.pop()

    def reset(self) -> None:
        self._points = []
        self._closed = False


def export_extents(
    points: Iterable[Point], dimensions: ImageDimensions | None
) -> tuple[int, int]:
    """Canvas size that holds the image and every vertex beyond its edges."""
    max_x = float(dimensions.width) if dimensions is not None else 0.0
    max_y = float(dimensions.height) if dimensions is not None else 0.0
    for x, y in points:
        if x > max_x:
            max_x = x
        if y > max_y:
            max_y = y
    return math.ceil(max_x), math.ceil(max_y)


def format_points_preview(points: Iterable[Point]) -> str:
    return " ".join(f"{x:.0f},{y:.0f}" for x, y in points)
