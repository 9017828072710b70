from __future__ import annotations

from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from .curve_path import CurvePath
from .curve_path_group import CurvePathGroup
from .types import FillRule


def curve_path_to_polygon(
    path: CurvePath,
    max_pixel_diff: float = 0.25,
    scaling: float = 1.0,
) -> Polygon:
    """Closed path sampled curvature-adaptively into a shapely polygon."""
    if not path.closed:
        raise ValueError("Only closed paths convert to polygons.")
    points = path.get_curvature_adaptive_points(max_pixel_diff, scaling)
    poly = Polygon([(float(x), float(y)) for x, y in points])
    if not poly.is_valid:
        poly = poly.buffer(0)  # self-touching outlines from tight strokes
    return poly


def curve_path_group_to_geometry(
    group: CurvePathGroup,
    max_pixel_diff: float = 0.25,
    scaling: float = 1.0,
    fill_rule: FillRule = "evenodd",
) -> BaseGeometry:
    """
    Closed subpaths combined into one shape. `evenodd` cuts overlaps out, so
    inner subpaths become holes; `nonzero` unions everything.
    Open subpaths are ignored.
    """
    polys = [
        curve_path_to_polygon(path, max_pixel_diff, scaling)
        for path in group.curve_paths
        if path.closed and path.curves
    ]
    if not polys:
        return MultiPolygon()
    if fill_rule == "nonzero":
        return unary_union(polys)

    geometry: BaseGeometry = polys[0]
    for poly in polys[1:]:
        geometry = geometry.symmetric_difference(poly)
    return geometry


def filled_area(item: CurvePath | CurvePathGroup, scaling: float = 1.0) -> float:
    if isinstance(item, CurvePathGroup):
        return float(curve_path_group_to_geometry(item, scaling=scaling).area)
    if not item.closed:
        return 0.0
    return float(curve_path_to_polygon(item, scaling=scaling).area)
