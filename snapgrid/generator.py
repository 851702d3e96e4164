"""Visible grid intersection points for a view extent."""

import logging
import math

from .basis import BasisPair, GridDescriptor, derive_basis
from .normalizer import local_normalization_coefficients
from .vectors import (
    Vector2,
    add,
    aligned_index_vector,
    multiply_2x2,
    scale,
)
from .view import Extent, contains_point, extent_center, extent_corners

logger = logging.getLogger(__name__)

MAX_POINTS_PER_SIDE = 64


def re_anchor(origin: Vector2, basis: BasisPair, extent: Extent) -> Vector2:
    """Grid point nearest the view center.

    Indices are taken relative to this instead of the true origin so they
    stay small however far the view has panned.
    """
    index = aligned_index_vector(origin, basis.x, basis.y, extent_center(extent))
    return add(origin, multiply_2x2((basis.x, basis.y), index))


def index_bounds(v_origin: Vector2, basis: BasisPair,
                 extent: Extent) -> tuple[int, int, int, int]:
    """(min_i, min_j, max_i, max_j) of the extent corners in index space."""
    corners = [aligned_index_vector(v_origin, basis.x, basis.y, corner, math.ceil)
               for corner in extent_corners(extent)]
    i_values = [c[0] for c in corners]
    j_values = [c[1] for c in corners]
    return (min(i_values), min(j_values), max(i_values), max(j_values))


def _increment(delta: int, max_points_per_side: int) -> int:
    # ceil keeps the inclusive count at most max_points_per_side + 1
    return max(1, math.ceil(delta / max_points_per_side))


def generate_grid_points(origin: Vector2, basis: BasisPair, extent: Extent,
                         max_points_per_side: int = MAX_POINTS_PER_SIDE) -> list[Vector2]:
    """Enumerate grid points inside ``extent``, thinned to a bounded count.

    Points come out i-major (outer loop over the x axis index).
    """
    v_origin = re_anchor(origin, basis, extent)
    min_i, min_j, max_i, max_j = index_bounds(v_origin, basis, extent)

    inc_i = _increment(max_i - min_i, max_points_per_side)
    inc_j = _increment(max_j - min_j, max_points_per_side)

    points = []
    for i in range(min_i, max_i + 1, inc_i):
        x_step = scale(basis.x, i)
        for j in range(min_j, max_j + 1, inc_j):
            p = add(v_origin, x_step, scale(basis.y, j))
            if contains_point(extent, p):
                points.append(p)

    logger.debug("Generated %d grid points (step %d x %d) for extent %s",
                 len(points), inc_i, inc_j, extent)
    return points


def basis_for(descriptor: GridDescriptor, projection: str) -> BasisPair:
    """Basis for ``descriptor`` corrected for distortion at its origin."""
    coefficients = local_normalization_coefficients(descriptor.origin_point, projection)
    return derive_basis(descriptor, coefficients)


def compute_grid_points(descriptor: GridDescriptor | None, extent: Extent,
                        projection: str,
                        max_points_per_side: int = MAX_POINTS_PER_SIDE) -> list[Vector2]:
    """Points to draw this frame; empty when there is no grid."""
    if descriptor is None:
        return []
    basis = basis_for(descriptor, projection)
    return generate_grid_points(descriptor.origin_point, basis, extent, max_points_per_side)
