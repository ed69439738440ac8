from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PyQt5 import QtGui

from polygon_annotator.model.viewport import ImageDimensions

IMAGE_FILE_FILTER = "Image files (*.png *.jpg *.jpeg *.bmp *.gif *.webp);;All files (*)"


@dataclass(frozen=True)
class LoadedImage:
    path: Path
    image: QtGui.QImage
    dimensions: ImageDimensions


def load_image(path: Path) -> LoadedImage:
    image = QtGui.QImage(str(path))
    if image.isNull():
        raise ValueError(f"Unable to load image from {path}")
    return LoadedImage(
        path=path,
        image=image,
        dimensions=ImageDimensions(image.width(), image.height()),
    )
