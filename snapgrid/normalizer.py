"""Local projection-distortion correction.

The view projection does not preserve distance, so a metre on the ground is a
different number of projected units depending on where you are.  We measure
that locally by nudging the origin one projected unit along each axis and
asking the sphere how far it actually moved.
"""

from .errors import DegenerateBasis
from .projection import to_geographic
from .sphere import spherical_distance
from .vectors import Vector2, add


def local_normalization_coefficients(origin: Vector2, projection: str) -> Vector2:
    """Return (cx, cy): projected units per metre along x and y at ``origin``.

    A local linear approximation; fine within a viewport around the origin.
    """
    origin_geo = to_geographic(origin, projection)
    test_x = to_geographic(add(origin, (1.0, 0.0)), projection)
    test_y = to_geographic(add(origin, (0.0, 1.0)), projection)

    dx = spherical_distance(origin_geo, test_x)
    dy = spherical_distance(origin_geo, test_y)
    if dx == 0 or dy == 0:
        raise DegenerateBasis(f"projection {projection} collapses distance at {origin}")
    return (1 / dx, 1 / dy)
