"""Centered bounding box derivation."""

from __future__ import annotations

from boxmanifest.types import BoundingBox


DEFAULT_COVERAGE_PERCENT = 80


def calculate_bounding_box(
    width: int,
    height: int,
    coverage_percent: int = DEFAULT_COVERAGE_PERCENT,
) -> BoundingBox:
    """Box spanning ``coverage_percent`` of each image side, centered on the image.

    All divisions floor. Inputs outside the valid range are rejected rather than
    clamped: width and height must be positive and coverage must lie in [0, 100],
    which keeps every coordinate inside ``[0, width] x [0, height]``.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"width and height must be > 0, got {width}x{height}")
    if not 0 <= coverage_percent <= 100:
        raise ValueError(f"coverage_percent must be in [0, 100], got {coverage_percent}")

    x_center = width // 2
    y_center = height // 2
    w = width * coverage_percent // 100
    h = height * coverage_percent // 100
    xmin = x_center - w // 2
    ymin = y_center - h // 2
    return BoundingBox(xmin=xmin, ymin=ymin, xmax=xmin + w, ymax=ymin + h)
