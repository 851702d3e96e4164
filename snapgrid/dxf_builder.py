"""DXF export of a rendered grid: points, control cell and view border."""

import logging

import ezdxf
from shapely.geometry import LineString, MultiLineString, Point, box

from .basis import GridDescriptor
from .generator import basis_for
from .projection import Projector
from .vectors import add

logger = logging.getLogger(__name__)

POINTS_LAYER = "SNAPGRID-POINTS"
CONTROL_LAYER = "SNAPGRID-CONTROL"
BORDER_LAYER = "SNAPGRID-BORDER"

# (ACI color, lineweight in hundredths of mm)
LAYER_STYLES = {
    POINTS_LAYER:  {"color": 3, "lineweight": 13},   # green
    CONTROL_LAYER: {"color": 6, "lineweight": 25},   # magenta
    BORDER_LAYER:  {"color": 7, "lineweight": 50},   # white
}


def _clip_line(pts: list[tuple[float, float]],
               clip_box: box) -> list[list[tuple[float, float]]]:
    """Clip an open polyline to the bounding box. Returns list of line segments."""
    clipped = LineString(pts).intersection(clip_box)
    if clipped.is_empty:
        return []
    parts = clipped.geoms if isinstance(clipped, MultiLineString) else [clipped]
    return [list(part.coords) for part in parts
            if isinstance(part, LineString) and len(part.coords) >= 2]


def build_dxf(points: list[tuple[float, float]],
              extent: tuple[float, float, float, float],
              projection: str,
              descriptor: GridDescriptor | None = None,
              units: str = "feet") -> ezdxf.document.Drawing:
    """Create a DXF document with the grid points in local drawing units."""
    doc = ezdxf.new("R2010")
    doc.header["$INSUNITS"] = 2 if units == "feet" else 6
    msp = doc.modelspace()

    for name, style in LAYER_STYLES.items():
        doc.layers.add(name, color=style["color"])

    projector = Projector.for_extent(extent, projection, units)

    def local(p):
        return projector.project_point(p, projection)

    min_x, min_y, max_x, max_y = extent
    bl = local((min_x, min_y))
    br = local((max_x, min_y))
    tr = local((max_x, max_y))
    tl = local((min_x, max_y))
    clip_rect = box(min(bl[0], tl[0]), min(bl[1], br[1]),
                    max(br[0], tr[0]), max(tl[1], tr[1]))

    msp.add_lwpolyline(
        [bl, br, tr, tl, bl],
        dxfattribs={"layer": BORDER_LAYER, "lineweight": LAYER_STYLES[BORDER_LAYER]["lineweight"]},
    )

    written = 0
    for p in points:
        x, y = local(p)
        if not clip_rect.intersects(Point(x, y)):
            continue
        msp.add_point((x, y), dxfattribs={"layer": POINTS_LAYER})
        written += 1

    if descriptor is not None:
        # Outline of the origin cell shows the grid's rotation and size
        basis = basis_for(descriptor, projection)
        o = descriptor.origin_point
        cell = [o, add(o, basis.x), add(o, basis.x, basis.y), add(o, basis.y), o]
        for seg in _clip_line([local(c) for c in cell], clip_rect):
            msp.add_lwpolyline(
                seg,
                dxfattribs={"layer": CONTROL_LAYER,
                            "lineweight": LAYER_STYLES[CONTROL_LAYER]["lineweight"]},
            )
        ox, oy = local(o)
        if clip_rect.intersects(Point(ox, oy)):
            extent_x = abs(tr[0] - bl[0])
            extent_y = abs(tr[1] - bl[1])
            radius = min(extent_x, extent_y) / 200.0 or 1.0
            msp.add_circle((ox, oy), radius, dxfattribs={"layer": CONTROL_LAYER})

    logger.info("Built DXF with %d grid points", written)
    return doc
