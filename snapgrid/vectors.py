"""2D vector arithmetic and 2x2 matrix helpers.

Matrices are given as a pair of column vectors ``[bx, by]``, which is how the
grid basis is carried around everywhere else.
"""

import math
from typing import Callable

from .errors import DegenerateBasis

Vector2 = tuple[float, float]
Matrix2 = tuple[Vector2, Vector2]  # (column 0, column 1)

# Relative: |det| over the product of column lengths, i.e. sin of the angle.
EPSILON = 1e-12


def add(a: Vector2, b: Vector2, c: Vector2 | None = None) -> Vector2:
    if c is not None:
        return (a[0] + b[0] + c[0], a[1] + b[1] + c[1])
    return (a[0] + b[0], a[1] + b[1])


def subtract(a: Vector2, b: Vector2) -> Vector2:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vector2, c: float) -> Vector2:
    return (v[0] * c, v[1] * c)


def elementwise_product(a: Vector2, b: Vector2) -> Vector2:
    return (a[0] * b[0], a[1] * b[1])


def determinant(m: Matrix2) -> float:
    (a, b), (c, d) = m
    return a * d - b * c


def invert_2x2(m: Matrix2) -> Matrix2:
    """Return the inverse of ``m`` (columns in, columns out).

    Raises DegenerateBasis when the columns are colinear.
    """
    (a, b), (c, d) = m
    det = a * d - b * c
    if not math.isfinite(det) or abs(det) <= EPSILON * math.hypot(a, b) * math.hypot(c, d):
        raise DegenerateBasis(f"basis vectors {m[0]} and {m[1]} are colinear (det={det!r})")
    return ((d / det, -b / det), (-c / det, a / det))


def multiply_2x2(m: Matrix2, v: Vector2) -> Vector2:
    (a, b), (c, d) = m
    e, f = v
    return (a * e + c * f, b * e + d * f)


def solve_coordinate_vector(bx: Vector2, by: Vector2, z: Vector2) -> Vector2:
    """Return (i, j) such that ``i*bx + j*by == z``."""
    return multiply_2x2(invert_2x2((bx, by)), z)


def round_half_up(x: float) -> int:
    """Round to nearest, halves towards +inf (Python's round() is banker's)."""
    return math.floor(x + 0.5)


def round_to_index(v: Vector2,
                   rounding: Callable[[float], int] = round_half_up) -> tuple[int, int]:
    return (int(rounding(v[0])), int(rounding(v[1])))


def aligned_index_vector(origin: Vector2, bx: Vector2, by: Vector2, z: Vector2,
                         rounding: Callable[[float], int] = round_half_up) -> tuple[int, int]:
    """Integer basis coordinates of ``z`` relative to ``origin``."""
    return round_to_index(solve_coordinate_vector(bx, by, subtract(z, origin)), rounding)
