import math

import numpy as np
import pytest

from src.curvegeom.algebra import point, scaling, translation
from src.curvegeom.curves import (
    ArcCurve,
    CubicBezierCurve,
    Curve,
    EllipseCurve,
    LineCurve,
    QuadraticBezierCurve,
    calc_arc_parameter,
)


def _sample_curves() -> list[Curve]:
    return [
        LineCurve(point(0.0, 0.0), point(3.0, 4.0)),
        ArcCurve(point(1.0, 0.0), point(0.0, 1.0), 1.0, 0, 1),
        ArcCurve(point(1.0, 0.0), point(-1.0, 0.0), 1.0, 1, 0),
        EllipseCurve(point(2.0, 0.0), point(0.0, 1.0), (2.0, 1.0), 0.0, 0, 1),
        QuadraticBezierCurve(point(0.0, 0.0), point(1.0, 2.0), point(2.0, 0.0)),
        CubicBezierCurve(point(0.0, 0.0), point(0.0, 1.0), point(1.0, 1.0), point(1.0, 0.0)),
    ]


def test_arc_from_endpoints() -> None:
    arc = ArcCurve(point(1.0, 0.0), point(0.0, 1.0), 1.0, 0, 1)
    np.testing.assert_allclose(arc.center, [0.0, 0.0], atol=1e-12)
    assert arc.start_angle == pytest.approx(0.0, abs=1e-12)
    assert arc.end_angle == pytest.approx(math.pi / 2.0)
    assert arc.get_length() == pytest.approx(math.pi / 2.0)
    np.testing.assert_allclose(arc.point_at(0.5), [math.sqrt(0.5), math.sqrt(0.5)])
    for t in (0.0, 0.3, 0.9):
        assert arc.curvature_at(t) == pytest.approx(1.0)


def test_arc_parameter_counter_clockwise() -> None:
    parameter = calc_arc_parameter(point(1.0, 0.0), point(0.0, 1.0), 1.0, 0, 0)
    # The short way round in the other direction has its center at (1, 1).
    np.testing.assert_allclose(parameter.center, [1.0, 1.0], atol=1e-12)
    assert parameter.end_angle < parameter.start_angle


def test_arc_rejects_bad_radius() -> None:
    with pytest.raises(ValueError):
        ArcCurve(point(0.0, 0.0), point(1.0, 0.0), 0.0, 0, 1)


def test_ellipse_from_endpoints() -> None:
    ellipse = EllipseCurve(point(2.0, 0.0), point(0.0, 1.0), (2.0, 1.0), 0.0, 0, 1)
    np.testing.assert_allclose(ellipse.center, [0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(
        ellipse.point_at(0.5), [2.0 * math.sqrt(0.5), math.sqrt(0.5)], atol=1e-12
    )
    # Quarter of the perimeter of a 2x1 ellipse.
    assert ellipse.get_length() == pytest.approx(2.4221, abs=1e-2)


@pytest.mark.parametrize("curve", _sample_curves())
def test_endpoints_are_exact(curve: Curve) -> None:
    np.testing.assert_allclose(curve.point_at(0.0), curve.start_point, atol=1e-9)
    np.testing.assert_allclose(curve.point_at(1.0), curve.end_point, atol=1e-9)
    points = curve.get_points()
    np.testing.assert_array_equal(points[0], curve.start_point)
    np.testing.assert_array_equal(points[-1], curve.end_point)


@pytest.mark.parametrize("curve", _sample_curves())
def test_length_parameter_maps_are_monotonic(curve: Curve) -> None:
    ts = [curve.t_at_length(curve.get_length() * k / 10.0) for k in range(11)]
    assert all(b >= a for a, b in zip(ts, ts[1:]))
    assert ts[0] == pytest.approx(0.0, abs=1e-12)
    assert ts[-1] == pytest.approx(1.0)

    for t in (0.1, 0.5, 0.8):
        assert curve.map_u2t(curve.map_t2u(t)) == pytest.approx(t, abs=1e-9)


@pytest.mark.parametrize("curve", _sample_curves())
def test_box_contains_samples(curve: Curve) -> None:
    box = curve.get_box().expanded(1e-9)
    for p in curve.get_points(50):
        assert box.contains_point(p)


@pytest.mark.parametrize("curve", _sample_curves())
def test_part_of_keeps_shape(curve: Curve) -> None:
    part = curve.part_of(0.25, 0.75)
    np.testing.assert_allclose(part.start_point, curve.point_at(0.25), atol=1e-9)
    np.testing.assert_allclose(part.end_point, curve.point_at(0.75), atol=1e-9)
    assert curve.part_of(0.0, 1.0) is curve


@pytest.mark.parametrize("curve", _sample_curves())
def test_cubic_conversion_follows_curve(curve: Curve) -> None:
    cubics = curve.to_cubic_bezier_curves()
    np.testing.assert_allclose(cubics[0].start_point, curve.start_point, atol=1e-9)
    np.testing.assert_allclose(cubics[-1].end_point, curve.end_point, atol=1e-9)
    for cubic in cubics:
        middle = cubic.point_at(0.5)
        nearest = curve.closest_point_to(middle)
        assert np.linalg.norm(middle - nearest) < 2e-3


def test_cubic_box_uses_extremes() -> None:
    cubic = CubicBezierCurve(point(0.0, 0.0), point(0.0, 1.0), point(1.0, 1.0), point(1.0, 0.0))
    box = cubic.get_box()
    assert box.height == pytest.approx(0.75)
    assert box.width == pytest.approx(1.0)


def test_quadratic_to_cubic_is_exact() -> None:
    quad = QuadraticBezierCurve(point(0.0, 0.0), point(1.0, 1.0), point(2.0, 0.0))
    (cubic,) = quad.to_cubic_bezier_curves()
    for t in (0.1, 0.3, 0.7):
        np.testing.assert_allclose(cubic.point_at(t), quad.point_at(t), atol=1e-12)


def test_line_closest_point_is_clamped() -> None:
    line = LineCurve(point(0.0, 0.0), point(2.0, 0.0))
    np.testing.assert_allclose(line.closest_point_to(point(1.0, 3.0)), [1.0, 0.0])
    np.testing.assert_allclose(line.closest_point_to(point(-1.0, 1.0)), [0.0, 0.0])
    np.testing.assert_allclose(line.closest_point_to(point(5.0, -1.0)), [2.0, 0.0])


def test_arc_closest_point() -> None:
    arc = ArcCurve(point(1.0, 0.0), point(0.0, 1.0), 1.0, 0, 1)
    np.testing.assert_allclose(arc.closest_point_to(point(2.0, 2.0)), [math.sqrt(0.5)] * 2)
    np.testing.assert_allclose(arc.closest_point_to(point(2.0, -1.0)), [1.0, 0.0], atol=1e-12)


def test_cubic_closest_point() -> None:
    cubic = CubicBezierCurve(point(0.0, 0.0), point(0.0, 1.0), point(1.0, 1.0), point(1.0, 0.0))
    nearest = cubic.closest_point_to(point(0.5, 2.0))
    np.testing.assert_allclose(nearest, [0.5, 0.75], atol=1e-3)


def test_calc_ts_by_axis() -> None:
    line = LineCurve(point(0.0, 0.0), point(2.0, 4.0))
    np.testing.assert_allclose(line.calc_ts_by_x(1.0), [0.5])
    np.testing.assert_allclose(line.calc_ts_by_y(1.0), [0.25])
    assert line.calc_ts_by_x(3.0) == []

    cubic = CubicBezierCurve(point(0.0, 0.0), point(0.0, 1.0), point(1.0, 1.0), point(1.0, 0.0))
    ts = cubic.calc_ts_by_y(0.5)
    assert len(ts) == 2
    for t in ts:
        assert cubic.point_at(t)[1] == pytest.approx(0.5, abs=1e-3)


def test_ray_crossings_signed() -> None:
    up = LineCurve(point(1.0, 0.0), point(1.0, 1.0))
    down = LineCurve(point(1.0, 1.0), point(1.0, 0.0))
    assert up.calc_ray_crossings(point(0.0, 0.5)) == [1]
    assert down.calc_ray_crossings(point(0.0, 0.5)) == [-1]
    assert up.calc_ray_crossings(point(2.0, 0.5)) == []
    # Half-open: the top end is not counted.
    assert up.calc_ray_crossings(point(0.0, 1.0)) == []


def test_arc_transform() -> None:
    arc = ArcCurve(point(1.0, 0.0), point(0.0, 1.0), 1.0, 0, 1)

    scaled = arc.transform(scaling(2.0))
    assert isinstance(scaled, ArcCurve)
    assert scaled.radius == pytest.approx(2.0)
    assert scaled.get_length() == pytest.approx(math.pi)

    stretched = arc.transform(scaling(2.0, 1.0))
    assert isinstance(stretched, EllipseCurve)
    np.testing.assert_allclose(stretched.point_at(0.5), [2.0 * math.sqrt(0.5), math.sqrt(0.5)], atol=1e-9)

    mirrored = arc.transform(scaling(-1.0, 1.0))
    assert isinstance(mirrored, ArcCurve)
    assert mirrored.clockwise_flag == 0
    np.testing.assert_allclose(mirrored.point_at(0.5), [-math.sqrt(0.5), math.sqrt(0.5)], atol=1e-9)


def test_transform_translates_bezier() -> None:
    cubic = CubicBezierCurve(point(0.0, 0.0), point(0.0, 1.0), point(1.0, 1.0), point(1.0, 0.0))
    moved = cubic.transform(translation(1.0, 2.0))
    np.testing.assert_allclose(moved.point_at(0.5), cubic.point_at(0.5) + [1.0, 2.0])


def test_equality_by_shape() -> None:
    a = LineCurve(point(0.0, 0.0), point(1.0, 0.0))
    b = LineCurve(point(0.0, 0.0), point(1.0, 0.0))
    c = LineCurve(point(0.0, 0.0), point(1.0, 1.0))
    assert a == b
    assert a != c
    assert a != CubicBezierCurve(point(0.0, 0.0), point(0.0, 0.0), point(1.0, 0.0), point(1.0, 0.0))


def test_curves_are_immutable() -> None:
    line = LineCurve(point(0.0, 0.0), point(1.0, 0.0))
    with pytest.raises(ValueError):
        line.start_point[0] = 5.0


def test_curvature_adaptive_sampling() -> None:
    line = LineCurve(point(0.0, 0.0), point(10.0, 0.0))
    assert line.get_curvature_adaptive_ts() == [0.0, 1.0]

    arc = ArcCurve(point(10.0, 0.0), point(-10.0, 0.0), 10.0, 0, 1)
    coarse = arc.get_curvature_adaptive_ts(max_pixel_diff=1.0)
    fine = arc.get_curvature_adaptive_ts(max_pixel_diff=0.01)
    assert len(fine) > len(coarse) >= 2
    assert fine[0] == 0.0 and fine[-1] == 1.0
