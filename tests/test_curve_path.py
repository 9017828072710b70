import math

import numpy as np
import pytest
from shapely.geometry import Point, Polygon

from src.curvegeom.algebra import identity, point, rotation, translation
from src.curvegeom.curve_path import CurvePath
from src.curvegeom.curves import ArcCurve, LineCurve
from src.curvegeom.types import CurveType


def _corner_path() -> CurvePath:
    return CurvePath().move_to(0.0, 0.0).line_to(1.0, 0.0).line_to(1.0, 2.0)


def _square(size: float = 1.0) -> CurvePath:
    return (
        CurvePath()
        .move_to(0.0, 0.0)
        .line_to(size, 0.0)
        .line_to(size, size)
        .line_to(0.0, size)
        .close_path()
    )


def test_two_lines_length_and_svg() -> None:
    path = _corner_path()
    assert path.curve_count == 2
    assert path.get_length() == pytest.approx(3.0)
    assert path.map_u2t(0.5) == pytest.approx(0.625)
    assert path.to_svg_path_d() == "M0 0L1 0L1 2"


def test_parameter_maps() -> None:
    path = _corner_path()
    assert path.map_t2u(0.375) == pytest.approx(0.25)

    index, local_u = path.map_global_u_to_local(0.5)
    assert index == 1
    assert local_u == pytest.approx(0.25)

    assert path.map_global_t_to_local(0.5) == (1, 0.0)
    assert path.map_global_t_to_local(1.0) == (1, 1.0)
    assert path.map_local_t_to_global(1, 0.5) == pytest.approx(0.75)
    assert path.map_local_u_to_global(1, 0.5) == pytest.approx(2.0 / 3.0)

    np.testing.assert_allclose(path.get_spaced_ts(2), [0.0, 0.625, 1.0])
    assert path.t_at_length(1.5) == pytest.approx(0.625)


def test_point_queries() -> None:
    path = _corner_path()
    np.testing.assert_allclose(path.point_at(0.25), [0.5, 0.0])
    np.testing.assert_allclose(path.point_at(0.75), [1.0, 1.0])
    np.testing.assert_allclose(path.spaced_point_at(0.5), [1.0, 0.5])
    np.testing.assert_allclose(path.point_at_length(2.0), [1.0, 1.0])
    np.testing.assert_allclose(path.tangent_at(0.75), [0.0, 2.0])
    np.testing.assert_allclose(path.normal_at(0.25, 1), [0.0, 1.0])
    assert path.curvature_at(0.25) == 0.0


def test_sampling() -> None:
    path = _corner_path()
    np.testing.assert_allclose(path.get_points(), [[0, 0], [1, 0], [1, 2]])
    np.testing.assert_allclose(path.get_points(4), [[0, 0], [0.5, 0], [1, 0], [1, 1], [1, 2]])
    np.testing.assert_allclose(path.get_spaced_points(3), [[0, 0], [1, 0], [1, 1], [1, 2]])
    assert len(path.get_curvature_adaptive_ts()) == 3


def test_adaptive_points_follow_arc() -> None:
    path = CurvePath().move_to(10.0, 0.0).arc_to(-10.0, 0.0, 10.0, 0, 1).line_to(-10.0, -5.0)
    points = path.get_curvature_adaptive_points(0.25, 1.0)
    radii = np.linalg.norm(points[:-1], axis=1)
    np.testing.assert_allclose(radii, 10.0, atol=1e-9)
    np.testing.assert_allclose(points[-1], [-10.0, -5.0])
    ts = path.get_curvature_adaptive_ts(0.25, 1.0)
    assert ts[0] == 0.0 and ts[-1] == 1.0
    assert len(ts) == points.shape[0]


def test_part_of_cuts_across_curves() -> None:
    path = CurvePath().move_to(0.0, 0.0).line_to(1.0, 0.0).line_to(1.0, 1.0)
    assert path.part_of(0.25, 0.75).to_svg_path_d() == "M0.5 0L1 0L1 0.5"
    assert path.part_of(0.25, 0.5).to_svg_path_d() == "M0.5 0L1 0"
    assert path.part_of(0.5, 1.0).to_svg_path_d() == "M1 0L1 1"

    whole = path.part_of(0.0, 1.0)
    assert whole == path
    assert whole is not path


def test_part_of_rejects_reversed_range() -> None:
    with pytest.raises(ValueError):
        _corner_path().part_of(0.8, 0.2)


def test_calc_ts_are_global() -> None:
    path = _corner_path()
    np.testing.assert_allclose(path.calc_ts_by_x(0.5), [0.25])
    np.testing.assert_allclose(path.calc_ts_by_y(1.0), [0.75])


def test_box() -> None:
    path = CurvePath().move_to(1.0, 0.0).arc_to(-1.0, 0.0, 1.0, 0, 1)
    box = path.get_box()
    assert box is not None
    assert box.to_tuple() == pytest.approx((-1.0, 0.0, 2.0, 1.0))
    assert CurvePath().get_box() is None


def test_closest_point_and_distance() -> None:
    path = _corner_path()
    np.testing.assert_allclose(path.closest_point_to(point(2.0, 1.0)), [1.0, 1.0])
    assert path.get_distance(point(2.0, 1.0)) == pytest.approx(1.0)
    assert path.get_distance(point(2.0, 1.0), stroke_width=0.5) == pytest.approx(0.75)


def test_signed_distance_of_closed_path() -> None:
    square = _square()
    assert square.get_distance(point(0.5, 0.5)) == pytest.approx(-0.5)
    assert square.get_distance(point(0.5, 0.5), stroke_width=0.2) == pytest.approx(-0.6)
    assert square.get_distance(point(0.5, 0.5), filled=False) == pytest.approx(0.5)
    assert square.get_distance(point(2.0, 0.5), stroke_width=0.2) == pytest.approx(0.9)


def test_is_point_inside_matches_shapely() -> None:
    corners = [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (1.0, 1.0), (1.0, 2.0), (0.0, 2.0)]
    path = CurvePath().move_to(*corners[0])
    for x, y in corners[1:]:
        path.line_to(x, y)
    path.close_path()
    poly = Polygon(corners)

    for x in np.arange(-0.35, 2.4, 0.3):
        for y in np.arange(-0.35, 2.4, 0.3):
            p = point(float(x), float(y))
            expected = poly.contains(Point(float(x), float(y)))
            assert path.is_point_inside(p) == expected
            assert path.is_point_inside(p, "evenodd") == expected


def test_fill_rules_differ_on_double_loop() -> None:
    path = CurvePath.from_svg_path_d("M0 0L1 0L1 1L0 1L0 0L1 0L1 1L0 1Z")
    center = point(0.5, 0.5)
    assert path.is_point_inside(center, "nonzero")
    assert not path.is_point_inside(center, "evenodd")


def test_is_point_inside_edge_cases() -> None:
    assert not _corner_path().is_point_inside(point(0.5, 0.5))
    with pytest.raises(ValueError):
        _square().is_point_inside(point(0.5, 0.5), "winding")  # type: ignore[arg-type]


def test_circle_inside() -> None:
    circle = (
        CurvePath().move_to(1.0, 0.0).arc_to(-1.0, 0.0, 1.0, 0, 1).arc_to(1.0, 0.0, 1.0, 0, 1)
    )
    circle.close_path()
    assert circle.curve_count == 2
    assert circle.is_point_inside(point(0.0, 0.0))
    assert circle.is_point_inside(point(0.0, 0.9))
    assert circle.is_point_inside(point(0.0, -0.9))
    assert not circle.is_point_inside(point(0.8, 0.8))


def test_is_point_in_stroke() -> None:
    path = _corner_path()
    assert path.is_point_in_stroke(point(0.5, 0.1), 0.4)
    assert not path.is_point_in_stroke(point(0.5, 0.3), 0.4)
    # Joins and caps count as round.
    assert path.is_point_in_stroke(point(-0.1, -0.1), 0.4)
    assert not path.is_point_in_stroke(point(-0.2, -0.2), 0.4)


def test_builder_state_errors() -> None:
    with pytest.raises(ValueError):
        CurvePath().line_to(1.0, 0.0)
    with pytest.raises(ValueError):
        CurvePath().move_to(0.0, 0.0).move_to(1.0, 1.0)
    with pytest.raises(ValueError):
        CurvePath().move_to(0.0, 0.0).close_path()
    with pytest.raises(ValueError):
        _square().line_to(5.0, 5.0)
    with pytest.raises(ValueError):
        _square().close_path()


def test_close_path_adds_line_only_when_needed() -> None:
    open_triangle = CurvePath().move_to(0.0, 0.0).line_to(1.0, 0.0).line_to(0.0, 1.0)
    assert open_triangle.close_path().curve_count == 3

    loop = CurvePath().move_to(0.0, 0.0).line_to(1.0, 0.0).line_to(0.0, 1.0).line_to(0.0, 0.0)
    assert loop.close_path().curve_count == 3
    assert loop.closed


def test_relative_builders() -> None:
    path = (
        CurvePath()
        .move_to(1.0, 1.0)
        .line_by(1.0, 0.0)
        .v_line_by(1.0)
        .h_line_by(-1.0)
        .quadratic_bezier_by(0.0, -0.5, 0.0, -1.0)
    )
    assert path.to_svg_path_d() == "M1 1L2 1L2 2L1 2Q1 1.5 1 1"


def test_from_curves_and_start_point() -> None:
    path = CurvePath.from_curves(
        [
            LineCurve(point(0.0, 0.0), point(1.0, 0.0)),
            ArcCurve(point(1.0, 0.0), point(1.0, 2.0), 1.0, 0, 1),
        ],
        close=True,
    )
    np.testing.assert_allclose(path.start_point, [0.0, 0.0])
    np.testing.assert_allclose(path.end_point, [0.0, 0.0])
    assert path.closed
    assert path.curve_count == 3

    with pytest.raises(ValueError):
        CurvePath.from_curves([])


def test_json_round_trip() -> None:
    path = (
        CurvePath()
        .move_to(0.0, 0.0)
        .line_to(1.0, 0.0)
        .arc_to(2.0, 1.0, 1.0, 0, 1)
        .ellipse_to(0.0, 1.0, 1.0, 0.5, 0.0, 0, 1)
        .cubic_bezier_to(0.0, 0.5, -0.5, 0.5, 0.0, 0.0)
        .close_path()
    )
    data = path.to_json()
    assert data[0]["type"] == CurveType.MOVE_TO
    assert data[-1]["type"] == CurveType.CLOSE
    assert CurvePath.from_curve_data(data) == path

    data.pop()
    assert path.to_json()[-1]["type"] == CurveType.CLOSE


def test_from_curve_data_requires_move_to() -> None:
    with pytest.raises(ValueError):
        CurvePath.from_curve_data([])
    with pytest.raises(ValueError):
        CurvePath.from_curve_data([{"type": CurveType.LINE_TO, "x": 1.0, "y": 0.0}])


def test_svg_round_trip() -> None:
    d = "M0 0L1 0Q2 0 2 1C2 2 1 2 0 2L0 0Z"
    assert CurvePath.from_svg_path_d(d).to_svg_path_d() == d


def test_transform_and_clone() -> None:
    path = _corner_path()
    assert path.transform(identity()) == path
    assert path.clone() == path

    moved = path.transform(translation(1.0, 2.0))
    assert moved.to_svg_path_d() == "M1 2L2 2L2 4"

    turned = _square().transform(rotation(math.pi / 2.0))
    assert turned.closed
    assert turned.get_length() == pytest.approx(4.0)


def test_to_cubic_bezier_curve_path() -> None:
    circle = (
        CurvePath().move_to(1.0, 0.0).arc_to(-1.0, 0.0, 1.0, 0, 1).arc_to(1.0, 0.0, 1.0, 0, 1)
    )
    cubic = circle.to_cubic_bezier_curve_path()
    assert cubic.curve_count == 4
    assert cubic.get_length() == pytest.approx(2.0 * math.pi, rel=2e-3)
    np.testing.assert_allclose(cubic.end_point, circle.end_point, atol=1e-9)


def test_empty_path_state() -> None:
    path = CurvePath()
    assert path.get_length() == 0.0
    assert repr(path) == "CurvePath(curves=0, closed=False)"
    with pytest.raises(ValueError):
        _ = path.start_point
