from __future__ import annotations

import base64
from dataclasses import dataclass
import logging
import mimetypes
from pathlib import Path
from typing import Iterable, Sequence

from polygon_annotator.model.polygon import export_extents
from polygon_annotator.model.viewport import ImageDimensions
from polygon_annotator.model.viewport_math import Point

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "annotation.svg"
POLYGON_FILL = "rgba(255,0,0,0.3)"
POLYGON_STROKE = "red"


@dataclass(frozen=True)
class ExportResult:
    success: bool
    message: str
    output_path: Path | None = None


def default_export_name(image_path: Path | None) -> str:
    if image_path is None or not image_path.stem:
        return DEFAULT_EXPORT_NAME
    return f"{image_path.stem}.svg"


def _format_number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_points_attribute(points: Iterable[Point]) -> str:
    return " ".join(f"{_format_number(x)},{_format_number(y)}" for x, y in points)


def image_data_url(image_path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(image_path.name)
    payload = base64.b64encode(image_path.read_bytes()).decode("ascii")
    return f"data:{mime_type or 'application/octet-stream'};base64,{payload}"


def build_svg_document(
    image_href: str, dimensions: ImageDimensions, points: Sequence[Point]
) -> str:
    width, height = export_extents(points, dimensions)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        f'<image href="{image_href}" x="0" y="0" '
        f'width="{dimensions.width}" height="{dimensions.height}" />'
        f'<polygon points="{format_points_attribute(points)}" fill="{POLYGON_FILL}" '
        f'stroke="{POLYGON_STROKE}" stroke-width="2" />'
        "</svg>"
    )


def export_svg(
    *,
    output_path: Path,
    image_path: Path | None,
    dimensions: ImageDimensions | None,
    points: Sequence[Point],
) -> ExportResult:
    if dimensions is None or image_path is None:
        return ExportResult(success=False, message="Load an image before exporting.")
    if not points:
        return ExportResult(success=False, message="Add polygon points before exporting.")

    try:
        document = build_svg_document(image_data_url(image_path), dimensions, points)
        output_path.write_text(document, encoding="utf-8")
    except OSError as exc:
        logger.warning("SVG export to %s failed", output_path, exc_info=True)
        return ExportResult(success=False, message=f"SVG export failed:\n{exc}")

    return ExportResult(
        success=True, message=f"Saved SVG to {output_path}", output_path=output_path
    )
