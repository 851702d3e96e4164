"""Snapping index: the set of features drawn geometry can snap onto."""

from shapely.geometry import MultiPoint, Point, box
from shapely.geometry.base import BaseGeometry
from shapely.ops import nearest_points


class Feature:
    """A map feature with a replaceable geometry."""

    def __init__(self, geometry: BaseGeometry | None = None, name: str = ""):
        self.geometry = geometry if geometry is not None else MultiPoint()
        self.name = name

    def set_geometry(self, geometry: BaseGeometry) -> None:
        self.geometry = geometry

    def __repr__(self) -> str:
        return f"Feature({self.name or id(self)!r}, {self.geometry.geom_type})"


class SnapIndex:
    """Features available for snapping.

    Features registered with ``always_visible=True`` are offered regardless of
    the query extent; the grid's own point geometry is registered that way so
    it stays snappable when its control points are off screen.
    """

    def __init__(self):
        self._features: list[Feature] = []
        self._always_visible: set[int] = set()

    def __contains__(self, feature: Feature) -> bool:
        return any(f is feature for f in self._features)

    def __len__(self) -> int:
        return len(self._features)

    def add_feature(self, feature: Feature, always_visible: bool = False) -> None:
        if feature not in self:
            self._features.append(feature)
        if always_visible:
            self._always_visible.add(id(feature))

    def remove_feature(self, feature: Feature) -> None:
        self._features = [f for f in self._features if f is not feature]
        self._always_visible.discard(id(feature))

    def features(self) -> list[Feature]:
        return list(self._features)

    def features_in_extent(self, extent: tuple[float, float, float, float] | None) -> list[Feature]:
        if extent is None:
            return self.features()
        clip = box(*extent)
        return [f for f in self._features
                if id(f) in self._always_visible
                or (not f.geometry.is_empty and f.geometry.intersects(clip))]

    def snap(self, point: tuple[float, float], tolerance: float,
             extent: tuple[float, float, float, float] | None = None) -> tuple[float, float] | None:
        """Nearest feature coordinate within ``tolerance`` of ``point``, or None."""
        target = Point(point)
        best = None
        best_distance = tolerance
        for feature in self.features_in_extent(extent):
            geom = feature.geometry
            if geom.is_empty:
                continue
            # vertices only: snapping to points, not along edges
            vertices = geom if geom.geom_type in ("Point", "MultiPoint") else MultiPoint(
                [c for part in _parts(geom) for c in part])
            if vertices.is_empty:
                continue
            candidate = nearest_points(target, vertices)[1]
            distance = target.distance(candidate)
            if distance <= best_distance:
                best = (candidate.x, candidate.y)
                best_distance = distance
        return best


def _parts(geom: BaseGeometry):
    """Coordinate sequences of every line/ring in ``geom``."""
    if hasattr(geom, "geoms"):
        for part in geom.geoms:
            yield from _parts(part)
    elif geom.geom_type == "Polygon":
        yield list(geom.exterior.coords)
        for ring in geom.interiors:
            yield list(ring.coords)
    else:
        yield list(geom.coords)
