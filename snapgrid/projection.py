"""Coordinate transforms between the map view CRS and geographic (lon, lat)."""

import math

from .errors import UnsupportedProjection

GEOGRAPHIC = "EPSG:4326"
WEB_MERCATOR = "EPSG:3857"

WEB_MERCATOR_RADIUS = 6378137.0
# Latitude where spherical Mercator becomes square; beyond this y diverges.
WEB_MERCATOR_MAX_LAT = 85.0511287798066

METERS_PER_DEGREE_LAT = 111_319.49  # at the equator
FEET_PER_METER = 3.28083989501312


def _mercator_to_geographic(x: float, y: float) -> tuple[float, float]:
    lon = math.degrees(x / WEB_MERCATOR_RADIUS)
    lat = math.degrees(2 * math.atan(math.exp(y / WEB_MERCATOR_RADIUS)) - math.pi / 2)
    return (lon, lat)


def _geographic_to_mercator(lon: float, lat: float) -> tuple[float, float]:
    lat = max(-WEB_MERCATOR_MAX_LAT, min(WEB_MERCATOR_MAX_LAT, lat))
    x = WEB_MERCATOR_RADIUS * math.radians(lon)
    y = WEB_MERCATOR_RADIUS * math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))
    return (x, y)


def _identity(a: float, b: float) -> tuple[float, float]:
    return (a, b)


# code -> (to geographic, from geographic)
PROJECTIONS = {
    GEOGRAPHIC: (_identity, _identity),
    WEB_MERCATOR: (_mercator_to_geographic, _geographic_to_mercator),
}


def check_projection(code: str) -> str:
    if code not in PROJECTIONS:
        raise UnsupportedProjection(
            f"Unsupported projection {code!r}; expected one of {sorted(PROJECTIONS)}")
    return code


def transform(point: tuple[float, float], from_crs: str,
              to_crs: str) -> tuple[float, float]:
    """Return a new point moved from ``from_crs`` into ``to_crs``."""
    to_geo, _ = PROJECTIONS[check_projection(from_crs)]
    _, from_geo = PROJECTIONS[check_projection(to_crs)]
    if from_crs == to_crs:
        return (float(point[0]), float(point[1]))
    return from_geo(*to_geo(point[0], point[1]))


def to_geographic(point: tuple[float, float], projection: str) -> tuple[float, float]:
    return transform(point, projection, GEOGRAPHIC)


def from_geographic(point: tuple[float, float], projection: str) -> tuple[float, float]:
    return transform(point, GEOGRAPHIC, projection)


class Projector:
    """Projects WGS84 coordinates to a local Cartesian frame.

    Origin is the center of the bounding box.  X = east, Y = north.
    Used for drawing-unit output (DXF), not for the grid math itself.
    """

    def __init__(self, south: float, west: float, north: float, east: float,
                 units: str = "feet"):
        self.center_lat = (south + north) / 2.0
        self.center_lon = (west + east) / 2.0
        self.cos_lat = math.cos(math.radians(self.center_lat))
        self.scale = FEET_PER_METER if units == "feet" else 1.0

    @classmethod
    def for_extent(cls, extent: tuple[float, float, float, float], projection: str,
                   units: str = "feet") -> "Projector":
        west, south = to_geographic((extent[0], extent[1]), projection)
        east, north = to_geographic((extent[2], extent[3]), projection)
        return cls(south, west, north, east, units)

    def project(self, lat: float, lon: float) -> tuple[float, float]:
        """Return (x, y) in drawing units."""
        x = (lon - self.center_lon) * METERS_PER_DEGREE_LAT * self.cos_lat * self.scale
        y = (lat - self.center_lat) * METERS_PER_DEGREE_LAT * self.scale
        return (x, y)

    def project_point(self, point: tuple[float, float], projection: str) -> tuple[float, float]:
        """Project a point given in the map view CRS."""
        lon, lat = to_geographic(point, projection)
        return self.project(lat, lon)
