"""Tests for great-circle distance."""

import math

import pytest

from snapgrid.sphere import DEFAULT_RADIUS, spherical_distance


def test_same_point_is_zero():
    assert spherical_distance((12.5, 45.0), (12.5, 45.0)) == 0


def test_one_degree_along_equator():
    assert spherical_distance((0, 0), (1, 0)) == pytest.approx(math.radians(1) * DEFAULT_RADIUS)


def test_one_degree_along_meridian_matches_equator():
    assert spherical_distance((30, 10), (30, 11)) == pytest.approx(
        spherical_distance((0, 0), (1, 0)))


def test_longitude_shrinks_with_latitude():
    at_60 = spherical_distance((0, 60), (0.001, 60))
    at_0 = spherical_distance((0, 0), (0.001, 0))
    assert at_60 == pytest.approx(at_0 * 0.5, rel=1e-6)


def test_symmetric():
    a, b = (-73.98, 40.75), (2.35, 48.85)
    assert spherical_distance(a, b) == pytest.approx(spherical_distance(b, a))
