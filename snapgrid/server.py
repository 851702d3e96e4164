"""Flask application exposing the grid engine over HTTP."""

import io
import logging
import os
from datetime import datetime, timezone

from flask import Flask, jsonify, request, send_file

from .basis import GridDescriptor, create_descriptor
from .dxf_builder import build_dxf
from .errors import (
    DegenerateBasis,
    DegenerateControlPoints,
    InvalidDimension,
    UnsupportedProjection,
    UnsupportedUnit,
)
from .generator import MAX_POINTS_PER_SIDE, basis_for, generate_grid_points, re_anchor
from .projection import check_projection
from .units import (
    DEFAULT_UNIT,
    UNIT_FACTORS,
    default_unit,
    parse_dimension,
    validate_dimension,
)
from .view import calculate_extent, validate_extent

logger = logging.getLogger(__name__)

app = Flask(__name__)

DEFAULT_PROJECTION = os.environ.get("SNAPGRID_PROJECTION", "EPSG:3857")

CONFIG_ERRORS = (KeyError, TypeError, ValueError)


def _point(value) -> tuple[float, float]:
    x, y = value
    return (float(x), float(y))


def _descriptor_from(data: dict, projection: str) -> GridDescriptor:
    """Either an explicit descriptor, or origin + anchor + dimensions."""
    if "descriptor" in data:
        d = data["descriptor"]
        return GridDescriptor(
            origin_point=_point(d["origin"]),
            rise_factor=float(d["rise_factor"]),
            run_factor=float(d["run_factor"]),
            x_dim=validate_dimension(d["x_dim"]),
            y_dim=validate_dimension(d["y_dim"]),
        )
    unit = data.get("unit", DEFAULT_UNIT)
    x_dim = parse_dimension(data.get("x_dim", 5), unit)
    y_dim = parse_dimension(data.get("y_dim", 5), unit)
    return create_descriptor(_point(data["origin"]), _point(data["anchor"]),
                             x_dim, y_dim, projection)


def _extent_from(data: dict) -> tuple[float, float, float, float]:
    if "extent" in data:
        return validate_extent(data["extent"])
    view = data["view"]
    return validate_extent(calculate_extent(
        _point(view["center"]),
        float(view["resolution"]),
        (int(view["size"][0]), int(view["size"][1])),
        float(view.get("rotation", 0.0)),
    ))


def _error(message: str, status: int):
    return jsonify({"error": message}), status


@app.errorhandler(DegenerateControlPoints)
@app.errorhandler(DegenerateBasis)
def degenerate_geometry(exc):
    logger.warning("Rejected degenerate grid: %s", exc)
    return _error(str(exc), 422)


@app.route("/api/units")
def units():
    system = request.args.get("system")
    return jsonify({"units": UNIT_FACTORS, "default": default_unit(system)})


@app.route("/api/grid/descriptor", methods=["POST"])
def descriptor():
    data = request.get_json(force=True)
    try:
        projection = check_projection(data.get("projection", DEFAULT_PROJECTION))
        grid = _descriptor_from(data, projection)
    except (UnsupportedUnit, InvalidDimension, UnsupportedProjection) as exc:
        return _error(str(exc), 400)
    except DegenerateControlPoints:
        raise
    except CONFIG_ERRORS as exc:
        return _error(f"Invalid parameters: {exc}", 400)
    return jsonify({"descriptor": grid.to_dict(), "projection": projection})


@app.route("/api/grid/points", methods=["POST"])
def points():
    data = request.get_json(force=True)
    try:
        projection = check_projection(data.get("projection", DEFAULT_PROJECTION))
        grid = _descriptor_from(data, projection)
        extent = _extent_from(data)
        max_per_side = int(data.get("max_points_per_side", MAX_POINTS_PER_SIDE))
        if max_per_side < 1:
            raise ValueError("max_points_per_side must be at least 1")
    except (UnsupportedUnit, InvalidDimension, UnsupportedProjection) as exc:
        return _error(str(exc), 400)
    except DegenerateControlPoints:
        raise
    except CONFIG_ERRORS as exc:
        return _error(f"Invalid parameters: {exc}", 400)

    basis = basis_for(grid, projection)
    grid_points = generate_grid_points(grid.origin_point, basis, extent, max_per_side)
    return jsonify({
        "points": [list(p) for p in grid_points],
        "count": len(grid_points),
        "basis": {"x": list(basis.x), "y": list(basis.y)},
        "v_origin": list(re_anchor(grid.origin_point, basis, extent)),
        "extent": list(extent),
    })


@app.route("/api/grid/export", methods=["POST"])
def export():
    data = request.get_json(force=True)
    try:
        projection = check_projection(data.get("projection", DEFAULT_PROJECTION))
        grid = _descriptor_from(data, projection)
        extent = _extent_from(data)
        units = data.get("units", "feet")
    except (UnsupportedUnit, InvalidDimension, UnsupportedProjection) as exc:
        return _error(str(exc), 400)
    except DegenerateControlPoints:
        raise
    except CONFIG_ERRORS as exc:
        return _error(f"Invalid parameters: {exc}", 400)

    if units not in ("feet", "meters"):
        return _error("units must be 'feet' or 'meters'", 400)

    basis = basis_for(grid, projection)
    grid_points = generate_grid_points(grid.origin_point, basis, extent)
    doc = build_dxf(grid_points, extent, projection, grid, units)

    # ezdxf.write requires a text stream
    dxf_stream = io.StringIO()
    doc.write(dxf_stream)
    dxf_bytes = dxf_stream.getvalue().encode("utf-8")

    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return send_file(
        io.BytesIO(dxf_bytes),
        download_name=f"snapping_grid_{ts}.dxf",
        as_attachment=True,
        mimetype="application/dxf",
    )
