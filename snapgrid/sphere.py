"""Great-circle distance on a spherical earth."""

import math

# Mean earth radius (IUGG), metres.
DEFAULT_RADIUS = 6371008.8


def spherical_distance(a: tuple[float, float], b: tuple[float, float],
                       radius: float = DEFAULT_RADIUS) -> float:
    """Haversine distance between two (lon, lat) degree pairs, in metres."""
    lat1 = math.radians(a[1])
    lat2 = math.radians(b[1])
    dlat = lat2 - lat1
    dlon = math.radians(b[0] - a[0])
    h = (math.sin(dlat / 2) ** 2
         + math.sin(dlon / 2) ** 2 * math.cos(lat1) * math.cos(lat2))
    return 2 * radius * math.atan2(math.sqrt(h), math.sqrt(1 - h))
