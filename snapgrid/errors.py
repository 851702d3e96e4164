"""Exception types raised by the grid engine and its collaborators."""


class SnapGridError(Exception):
    """Base class for all snapping grid errors."""


class DegenerateControlPoints(SnapGridError, ValueError):
    """Origin and rotation anchor coincide, so the grid direction is undefined."""


class DegenerateBasis(SnapGridError, ArithmeticError):
    """Basis vectors are colinear (or zero); the grid is undefined here."""


class UnsupportedUnit(SnapGridError, ValueError):
    """A distance unit outside the recognised set was selected."""


class InvalidDimension(SnapGridError, ValueError):
    """A cell dimension that is not a finite, positive number."""


class UnsupportedProjection(SnapGridError, ValueError):
    """A CRS code the coordinate transform does not know about."""


class GridStateError(SnapGridError, RuntimeError):
    """An operation was requested in a lifecycle state that does not allow it."""
