import pytest

from src.curvegeom.curve_path import CurvePath
from src.curvegeom.curve_path_group import CurvePathGroup
from src.curvegeom.polygon import curve_path_group_to_geometry, curve_path_to_polygon, filled_area
from src.curvegeom.reshape import GradientStroke, GradientWidthStroker

NESTED_SQUARES = "M0 0L4 0L4 4L0 4ZM1 1L3 1L3 3L1 3Z"


def test_square_polygon() -> None:
    square = CurvePath.from_svg_path_d("M0 0L2 0L2 2L0 2Z")
    poly = curve_path_to_polygon(square)
    assert poly.is_valid
    assert poly.area == pytest.approx(4.0)


def test_open_path_has_no_polygon() -> None:
    with pytest.raises(ValueError):
        curve_path_to_polygon(CurvePath.from_svg_path_d("M0 0L2 0L2 2"))
    assert filled_area(CurvePath.from_svg_path_d("M0 0L2 0L2 2")) == 0.0


def test_circle_area_converges() -> None:
    circle = CurvePath.from_svg_path_d("M10 0A10 10 0 0 1 -10 0A10 10 0 0 1 10 0Z")
    area = curve_path_to_polygon(circle, max_pixel_diff=0.01).area
    assert area == pytest.approx(314.159, rel=2e-3)


def test_fill_rules_on_nested_subpaths() -> None:
    group = CurvePathGroup.from_svg_path_d(NESTED_SQUARES)
    assert curve_path_group_to_geometry(group).area == pytest.approx(12.0)
    assert curve_path_group_to_geometry(group, fill_rule="nonzero").area == pytest.approx(16.0)
    assert filled_area(group) == pytest.approx(12.0)


def test_empty_geometry() -> None:
    group = CurvePathGroup.from_svg_path_d("M0 0L1 0")
    assert curve_path_group_to_geometry(group).is_empty


def test_stroke_outline_area() -> None:
    path = CurvePath.from_svg_path_d("M0 0L1 0L1 1")
    outline = GradientWidthStroker(path, 1.0, GradientStroke(0.2, 0.1)).generate()
    assert filled_area(outline) == pytest.approx(0.3, abs=1e-3)
