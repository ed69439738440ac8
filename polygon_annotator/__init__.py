"""Image polygon annotation with pan/zoom viewport."""

__version__ = "0.1.0"
