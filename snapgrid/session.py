"""Grid session: two-point capture, lifecycle and resource ownership.

One ``GridSession`` per map.  It owns the ``GridDescriptor`` and passes it
into the pure engine functions on every redraw.
"""

import enum
import logging

from shapely.geometry import MultiPoint

from .basis import GridDescriptor, create_descriptor
from .errors import DegenerateControlPoints, GridStateError
from .generator import compute_grid_points
from .projection import WEB_MERCATOR, check_projection, to_geographic
from .snapping import Feature, SnapIndex
from .sphere import spherical_distance
from .units import DEFAULT_DIMENSION, DEFAULT_UNIT, parse_dimension

logger = logging.getLogger(__name__)

# Anything closer than this (metres) cannot give a stable direction.
MIN_CONTROL_POINT_SEPARATION = 1e-3

# Projected units; captured control points within this of a feature vertex snap to it.
DEFAULT_SNAP_TOLERANCE = 1.0


class GridState(enum.Enum):
    INACTIVE = "inactive"
    CAPTURING_ORIGIN = "capturing_origin"
    CAPTURING_ANCHOR = "capturing_anchor"
    ACTIVE = "active"


class InteractionSlot:
    """The map's single active-interaction slot.

    Acquiring it preempts whoever holds it, by calling ``preempted(new_owner)``
    on the previous holder if it has one.
    """

    def __init__(self):
        self.holder = None

    def acquire(self, owner) -> None:
        previous = self.holder
        if previous is owner:
            return
        self.holder = owner
        if previous is not None and hasattr(previous, "preempted"):
            previous.preempted(owner)

    def release(self, owner) -> None:
        if self.holder is owner:
            self.holder = None

    def is_held_by_other(self, owner) -> bool:
        return self.holder is not None and self.holder is not owner


class GridSession:
    """Control-side state for one snapping grid."""

    def __init__(self, slot: InteractionSlot | None = None,
                 snap_index: SnapIndex | None = None,
                 projection: str = WEB_MERCATOR,
                 unit: str = DEFAULT_UNIT,
                 x_value: float = DEFAULT_DIMENSION,
                 y_value: float = DEFAULT_DIMENSION,
                 snap_tolerance: float = DEFAULT_SNAP_TOLERANCE):
        self.slot = slot if slot is not None else InteractionSlot()
        self.snap_index = snap_index if snap_index is not None else SnapIndex()
        self.projection = check_projection(projection)
        self.snap_tolerance = float(snap_tolerance)

        parse_dimension(x_value, unit)
        parse_dimension(y_value, unit)
        self.unit = unit
        # raw user-entered values, in self.unit
        self.x_value = float(x_value)
        self.y_value = float(y_value)

        self.state = GridState.INACTIVE
        self.descriptor: GridDescriptor | None = None
        self.control_points: list[tuple[float, float]] = []
        self.grid_feature = Feature(MultiPoint(), name="snapping-grid")

    @property
    def x_dim(self) -> float:
        return parse_dimension(self.x_value, self.unit)

    @property
    def y_dim(self) -> float:
        return parse_dimension(self.y_value, self.unit)

    @property
    def is_active(self) -> bool:
        return self.state is GridState.ACTIVE

    def _set_state(self, state: GridState) -> None:
        if state is not self.state:
            logger.info("Snapping grid %s -> %s", self.state.value, state.value)
            self.state = state

    # -- lifecycle -------------------------------------------------------

    def activate(self) -> None:
        """Start capturing a new origin, discarding any existing grid."""
        if self.slot.is_held_by_other(self):
            raise GridStateError("another drawing interaction is active")
        self._drop_grid()
        self.control_points = []
        self.slot.acquire(self)
        self._set_state(GridState.CAPTURING_ORIGIN)

    def capture_point(self, point: tuple[float, float]) -> GridState:
        """Feed the next captured control point; returns the new state."""
        point = self._snapped((float(point[0]), float(point[1])))

        if self.state is GridState.CAPTURING_ORIGIN:
            self.control_points = [point]
            self._set_state(GridState.CAPTURING_ANCHOR)
            return self.state

        if self.state is not GridState.CAPTURING_ANCHOR:
            raise GridStateError(f"cannot capture a control point while {self.state.value}")

        origin = self.control_points[0]
        separation = spherical_distance(to_geographic(origin, self.projection),
                                        to_geographic(point, self.projection))
        if separation < MIN_CONTROL_POINT_SEPARATION:
            raise DegenerateControlPoints(
                f"rotation anchor is {separation:.6g} m from the origin; "
                f"need at least {MIN_CONTROL_POINT_SEPARATION} m")

        self.descriptor = create_descriptor(origin, point, self.x_dim, self.y_dim,
                                            self.projection)
        self.control_points.append(point)
        self.slot.release(self)
        self.snap_index.add_feature(self.grid_feature, always_visible=True)
        self._set_state(GridState.ACTIVE)
        return self.state

    def _snapped(self, point: tuple[float, float]) -> tuple[float, float]:
        if self.snap_tolerance <= 0:
            return point
        snapped = self.snap_index.snap(point, self.snap_tolerance)
        if snapped is None:
            return point
        logger.debug("Control point %s snapped to %s", point, snapped)
        return snapped

    def cancel(self) -> None:
        """Abort an in-progress capture (escape).  No-op otherwise."""
        if self.state in (GridState.CAPTURING_ORIGIN, GridState.CAPTURING_ANCHOR):
            self._reset_capture()

    def preempted(self, other) -> None:
        """Another interaction took the slot."""
        logger.debug("Snapping grid capture preempted by %r", other)
        self.cancel()

    def clear(self) -> None:
        """Remove the grid entirely and release everything held."""
        self._drop_grid()
        self._reset_capture()

    def _reset_capture(self) -> None:
        self.control_points = []
        self.slot.release(self)
        self._set_state(GridState.INACTIVE)

    def _drop_grid(self) -> None:
        self.descriptor = None
        self.control_points = []
        self.grid_feature.set_geometry(MultiPoint())
        self.snap_index.remove_feature(self.grid_feature)

    # -- parameters ------------------------------------------------------

    def set_dimensions(self, x_value: float | None = None,
                       y_value: float | None = None) -> None:
        """Change cell size (in the current unit); validated before applying."""
        x_value = self.x_value if x_value is None else x_value
        y_value = self.y_value if y_value is None else y_value
        x_dim = parse_dimension(x_value, self.unit)
        y_dim = parse_dimension(y_value, self.unit)
        self.x_value = float(x_value)
        self.y_value = float(y_value)
        self._apply_dimensions(x_dim, y_dim)

    def set_unit(self, unit: str) -> None:
        """Reinterpret the entered values in ``unit``."""
        x_dim = parse_dimension(self.x_value, unit)
        y_dim = parse_dimension(self.y_value, unit)
        self.unit = unit
        self._apply_dimensions(x_dim, y_dim)

    def _apply_dimensions(self, x_dim: float, y_dim: float) -> None:
        if self.descriptor is not None:
            self.descriptor.x_dim = x_dim
            self.descriptor.y_dim = y_dim

    # -- redraw ----------------------------------------------------------

    def render(self, extent: tuple[float, float, float, float]) -> list[tuple[float, float]]:
        """Recompute the visible grid and publish it to the snapping feature.

        On an engine error the previous geometry is left in place.
        """
        if not self.is_active:
            return []
        points = compute_grid_points(self.descriptor, extent, self.projection)
        self.grid_feature.set_geometry(MultiPoint(points))
        return points
