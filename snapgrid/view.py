"""View extent helpers."""

import math

Extent = tuple[float, float, float, float]  # (min_x, min_y, max_x, max_y)


def calculate_extent(center: tuple[float, float], resolution: float,
                     size: tuple[int, int], rotation: float = 0.0) -> Extent:
    """Bounding box covering a viewport of ``size`` pixels.

    ``resolution`` is projected units per pixel; ``rotation`` is in radians.
    A rotated view gets the axis-aligned box around its rotated corners.
    """
    half_w = resolution * size[0] / 2
    half_h = resolution * size[1] / 2
    cos_r = math.cos(rotation)
    sin_r = math.sin(rotation)
    xs = []
    ys = []
    for sx, sy in ((-1, -1), (1, -1), (1, 1), (-1, 1)):
        dx = sx * half_w
        dy = sy * half_h
        xs.append(center[0] + dx * cos_r - dy * sin_r)
        ys.append(center[1] + dx * sin_r + dy * cos_r)
    return (min(xs), min(ys), max(xs), max(ys))


def extent_center(extent: Extent) -> tuple[float, float]:
    return ((extent[0] + extent[2]) / 2, (extent[1] + extent[3]) / 2)


def extent_corners(extent: Extent) -> list[tuple[float, float]]:
    """Bottom-left, top-right, top-left, bottom-right."""
    min_x, min_y, max_x, max_y = extent
    return [(min_x, min_y), (max_x, max_y), (min_x, max_y), (max_x, min_y)]


def contains_point(extent: Extent, point: tuple[float, float]) -> bool:
    """True if ``point`` lies inside or on the edge of ``extent``."""
    return extent[0] <= point[0] <= extent[2] and extent[1] <= point[1] <= extent[3]


def validate_extent(extent) -> Extent:
    """Coerce to a 4-float tuple; raises ValueError for a malformed box."""
    if len(extent) != 4:
        raise ValueError(f"extent must have 4 values, got {len(extent)}")
    min_x, min_y, max_x, max_y = (float(v) for v in extent)
    if not all(math.isfinite(v) for v in (min_x, min_y, max_x, max_y)):
        raise ValueError("extent values must be finite")
    if min_x > max_x or min_y > max_y:
        raise ValueError(f"extent is inverted: {extent}")
    return (min_x, min_y, max_x, max_y)
