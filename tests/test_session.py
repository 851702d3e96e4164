"""Tests for the grid session lifecycle."""

import pytest
from shapely.geometry import LineString, MultiPoint, Point

from snapgrid.errors import (
    DegenerateBasis,
    DegenerateControlPoints,
    GridStateError,
    InvalidDimension,
    UnsupportedUnit,
)
from snapgrid.session import GridSession, GridState
from snapgrid.snapping import Feature

VIEW = (-12.0, -12.0, 12.0, 12.0)


def make_active(session: GridSession, anchor=(10.0, 0.0)) -> GridSession:
    session.activate()
    session.capture_point((0.0, 0.0))
    session.capture_point(anchor)
    return session


class TestCapture:
    def test_starts_inactive(self, session):
        assert session.state is GridState.INACTIVE
        assert session.descriptor is None
        assert session.render(VIEW) == []

    def test_activate_takes_interaction_slot(self, session, slot):
        session.activate()
        assert session.state is GridState.CAPTURING_ORIGIN
        assert slot.holder is session

    def test_two_points_make_an_active_grid(self, session, slot, snap_index):
        session.activate()
        assert session.capture_point((0.0, 0.0)) is GridState.CAPTURING_ANCHOR
        assert session.capture_point((10.0, 0.0)) is GridState.ACTIVE
        assert session.descriptor.run_factor == pytest.approx(1)
        assert session.descriptor.rise_factor == pytest.approx(0)
        assert session.descriptor.x_dim == 5.0
        assert slot.holder is None
        assert session.grid_feature in snap_index

    def test_anchor_too_close_is_rejected(self, session):
        session.activate()
        session.capture_point((0.0, 0.0))
        with pytest.raises(DegenerateControlPoints):
            session.capture_point((0.0, 0.0))
        assert session.state is GridState.CAPTURING_ANCHOR
        assert session.capture_point((0.0, 10.0)) is GridState.ACTIVE
        assert session.descriptor.rise_factor == pytest.approx(1)

    def test_capture_without_activation(self, session):
        with pytest.raises(GridStateError):
            session.capture_point((0.0, 0.0))

    def test_capture_when_active(self, session):
        make_active(session)
        with pytest.raises(GridStateError):
            session.capture_point((3.0, 3.0))


class TestCaptureSnapping:
    def test_origin_lands_on_nearby_feature_vertex(self, session, snap_index):
        snap_index.add_feature(Feature(Point(3.0, 4.0)))
        session.activate()
        session.capture_point((3.3, 4.2))
        assert session.control_points == [(3.0, 4.0)]

    def test_anchor_snaps_and_sets_direction(self, session, snap_index):
        snap_index.add_feature(Feature(LineString([(0.0, 0.0), (0.0, 20.0)])))
        session.activate()
        session.capture_point((0.4, -0.3))
        session.capture_point((0.6, 19.5))
        assert session.control_points == [(0.0, 0.0), (0.0, 20.0)]
        assert session.descriptor.origin_point == (0.0, 0.0)
        assert session.descriptor.run_factor == pytest.approx(0)
        assert session.descriptor.rise_factor == pytest.approx(1)

    def test_points_beyond_tolerance_are_kept(self, session, snap_index):
        snap_index.add_feature(Feature(Point(3.0, 4.0)))
        session.activate()
        session.capture_point((6.0, 8.0))
        assert session.control_points == [(6.0, 8.0)]

    def test_zero_tolerance_disables_snapping(self, slot, snap_index):
        snap_index.add_feature(Feature(Point(3.0, 4.0)))
        session = GridSession(slot=slot, snap_index=snap_index, snap_tolerance=0)
        session.activate()
        session.capture_point((3.3, 4.2))
        assert session.control_points == [(3.3, 4.2)]


class TestCancellation:
    @pytest.mark.parametrize("captured", [0, 1])
    def test_cancel_discards_partial_capture(self, session, slot, captured):
        session.activate()
        if captured:
            session.capture_point((0.0, 0.0))
        session.cancel()
        assert session.state is GridState.INACTIVE
        assert session.control_points == []
        assert slot.holder is None

    def test_cancel_leaves_active_grid_alone(self, session):
        make_active(session)
        session.cancel()
        assert session.is_active

    def test_other_interaction_preempts_capture(self, session, slot):
        session.activate()
        session.capture_point((0.0, 0.0))
        other = object()
        slot.acquire(other)
        assert session.state is GridState.INACTIVE
        assert slot.holder is other

    def test_cannot_activate_while_other_interaction_holds_slot(self, session, slot):
        slot.acquire(object())
        with pytest.raises(GridStateError):
            session.activate()
        assert session.state is GridState.INACTIVE


class TestClear:
    def test_clear_releases_everything(self, session, snap_index):
        make_active(session)
        assert len(session.render(VIEW)) == 25
        session.clear()
        assert session.state is GridState.INACTIVE
        assert session.descriptor is None
        assert session.render(VIEW) == []
        assert session.grid_feature not in snap_index
        assert session.grid_feature.geometry.is_empty

    def test_reactivation_drops_previous_grid(self, session, snap_index, slot):
        make_active(session)
        session.activate()
        assert session.descriptor is None
        assert session.grid_feature not in snap_index
        assert slot.holder is session


class TestParameters:
    def test_dimensions_mutate_descriptor_in_place(self, session):
        make_active(session, anchor=(10.0, 10.0))
        descriptor = session.descriptor
        direction = (descriptor.rise_factor, descriptor.run_factor)
        session.set_dimensions(x_value=10)
        assert session.descriptor is descriptor
        assert descriptor.x_dim == 10.0
        assert descriptor.y_dim == 5.0
        assert (descriptor.rise_factor, descriptor.run_factor) == direction

    def test_invalid_dimension_changes_nothing(self, session):
        make_active(session)
        with pytest.raises(InvalidDimension):
            session.set_dimensions(y_value=0)
        assert session.descriptor.y_dim == 5.0
        assert session.y_value == 5.0

    def test_unit_change_converts_entered_values(self, session):
        make_active(session)
        session.set_unit("ft")
        assert session.descriptor.x_dim == pytest.approx(5 / 3.28084)
        session.set_unit("in")
        assert session.descriptor.y_dim == pytest.approx(0.127)

    def test_unsupported_unit(self, session):
        make_active(session)
        with pytest.raises(UnsupportedUnit):
            session.set_unit("yd")
        assert session.unit == "m"
        assert session.descriptor.x_dim == 5.0

    def test_dimensions_can_change_before_capture(self, session):
        session.set_dimensions(2, 3)
        make_active(session)
        assert (session.descriptor.x_dim, session.descriptor.y_dim) == (2.0, 3.0)

    def test_invalid_initial_configuration(self, slot, snap_index):
        with pytest.raises(InvalidDimension):
            GridSession(slot=slot, snap_index=snap_index, x_value=-5)
        with pytest.raises(UnsupportedUnit):
            GridSession(slot=slot, snap_index=snap_index, unit="cubit")


class TestRender:
    def test_render_publishes_points_for_snapping(self, session, snap_index):
        make_active(session)
        points = session.render(VIEW)
        assert len(points) == 25
        assert isinstance(session.grid_feature.geometry, MultiPoint)
        assert len(session.grid_feature.geometry.geoms) == 25
        # grid stays snappable with the view elsewhere
        assert session.grid_feature in snap_index.features_in_extent((1e6, 1e6, 1e6 + 1, 1e6 + 1))
        nearest = min(points, key=lambda p: (p[0] - 4.9) ** 2 + (p[1] - 0.2) ** 2)
        assert snap_index.snap((4.9, 0.2), tolerance=1.0) == pytest.approx(nearest)

    def test_render_error_keeps_previous_geometry(self, session):
        make_active(session)
        session.render(VIEW)
        before = session.grid_feature.geometry
        session.descriptor.x_dim = 0.0
        with pytest.raises(DegenerateBasis):
            session.render(VIEW)
        assert session.grid_feature.geometry is before
