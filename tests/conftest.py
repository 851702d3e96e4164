"""Shared fixtures for snapping grid tests."""

import pytest

from snapgrid.basis import GridDescriptor
from snapgrid.server import app
from snapgrid.session import GridSession, InteractionSlot
from snapgrid.snapping import SnapIndex


@pytest.fixture
def flat_descriptor():
    """Axis-aligned 5 m grid at the map origin."""
    return GridDescriptor(origin_point=(0.0, 0.0), rise_factor=0.0, run_factor=1.0,
                          x_dim=5.0, y_dim=5.0)


@pytest.fixture
def slot():
    return InteractionSlot()


@pytest.fixture
def snap_index():
    return SnapIndex()


@pytest.fixture
def session(slot, snap_index):
    return GridSession(slot=slot, snap_index=snap_index)


@pytest.fixture
def client():
    """Flask test client."""
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
