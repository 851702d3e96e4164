"""Grid direction and basis vectors from two control points."""

import math
from dataclasses import dataclass

from .errors import DegenerateControlPoints
from .projection import to_geographic
from .sphere import spherical_distance
from .units import validate_dimension
from .vectors import Vector2, elementwise_product


@dataclass
class GridDescriptor:
    """Configuration of the active grid.

    ``x_dim``/``y_dim`` are in metres.  Dimension edits mutate this in place;
    the direction factors are only derived once, from the control points.
    """
    origin_point: Vector2
    rise_factor: float
    run_factor: float
    x_dim: float
    y_dim: float

    def to_dict(self) -> dict:
        return {
            "origin": list(self.origin_point),
            "rise_factor": self.rise_factor,
            "run_factor": self.run_factor,
            "x_dim": self.x_dim,
            "y_dim": self.y_dim,
        }


@dataclass(frozen=True)
class BasisPair:
    """One-cell steps along each grid axis, in projected units."""
    x: Vector2
    y: Vector2


def derive_direction(origin: Vector2, anchor: Vector2,
                     projection: str) -> tuple[float, float]:
    """Return (rise_factor, run_factor) of the unit direction origin -> anchor.

    Rise is the north component, run the east component, both measured on the
    sphere.  Signs come from comparing raw lon/lat, so the result is wrong when
    the points straddle the antimeridian or a pole.
    """
    cp1 = to_geographic(origin, projection)
    cp2 = to_geographic(anchor, projection)

    cp3 = (cp1[0], cp2[1])  # pure latitude displacement
    cp4 = (cp2[0], cp1[1])  # pure longitude displacement

    length = spherical_distance(cp1, cp2)
    if length == 0:
        raise DegenerateControlPoints(f"control points {origin} and {anchor} coincide")

    rise = spherical_distance(cp1, cp3)
    run = spherical_distance(cp1, cp4)

    if cp1[0] > cp2[0]:
        run *= -1
    if cp1[1] > cp2[1]:
        rise *= -1

    rise_factor = rise / length
    run_factor = run / length

    # rise/run are legs measured along different great circles, so on the
    # sphere they only approximately square-sum to length; renormalise.
    norm = math.hypot(rise_factor, run_factor)
    return (rise_factor / norm, run_factor / norm)


def create_descriptor(origin: Vector2, anchor: Vector2, x_dim: float, y_dim: float,
                      projection: str) -> GridDescriptor:
    x_dim = validate_dimension(x_dim)
    y_dim = validate_dimension(y_dim)
    rise_factor, run_factor = derive_direction(origin, anchor, projection)
    return GridDescriptor(
        origin_point=(float(origin[0]), float(origin[1])),
        rise_factor=rise_factor,
        run_factor=run_factor,
        x_dim=x_dim,
        y_dim=y_dim,
    )


def derive_basis(descriptor: GridDescriptor, coefficients: Vector2) -> BasisPair:
    """Distortion-corrected basis vectors for ``descriptor``.

    y is x rotated 90 degrees before the per-axis correction, so afterwards the
    pair is only approximately orthogonal in projected space.
    """
    d = descriptor
    x = elementwise_product((d.x_dim * d.run_factor, d.x_dim * d.rise_factor), coefficients)
    y = elementwise_product((-d.y_dim * d.rise_factor, d.y_dim * d.run_factor), coefficients)
    return BasisPair(x, y)
