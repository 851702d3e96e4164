"""Distance units accepted for grid cell dimensions."""

import math

from .errors import InvalidDimension, UnsupportedUnit

# Multiply a value in the given unit by this to get metres.
UNIT_FACTORS: dict[str, float] = {
    "m": 1.0,
    "ft": 1 / 3.28084,
    "in": 0.0254,
}

DEFAULT_UNIT = "m"
DEFAULT_DIMENSION = 5.0


def default_unit(measurement_system: str | None) -> str:
    """The unit preselected for a host measurement system ('us' or 'metric')."""
    return "ft" if measurement_system == "us" else DEFAULT_UNIT


def conversion_factor(unit: str) -> float:
    try:
        return UNIT_FACTORS[unit]
    except KeyError:
        raise UnsupportedUnit(f"Unsupported unit selected: {unit}") from None


def to_meters(value: float, unit: str) -> float:
    return float(value) * conversion_factor(unit)


def validate_dimension(value: float) -> float:
    """Return ``value`` as float if it is a usable cell size, else raise."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidDimension(f"Cell dimension must be a number, got {value!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidDimension(f"Cell dimension must be positive, got {value!r}")
    return value


def parse_dimension(raw, unit: str) -> float:
    """Parse a user-entered dimension in ``unit`` into metres."""
    factor = conversion_factor(unit)
    return validate_dimension(validate_dimension(raw) * factor)
