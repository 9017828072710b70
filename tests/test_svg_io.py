from pathlib import Path

import pytest

from src.curvegeom.curve_path import CurvePath
from src.curvegeom.export_svg import OUTLINED, REFERENCE, export_paths_svg, paths_viewbox
from src.curvegeom.svg_io import SvgCanvas, load_curve_path_groups, load_path_ds, load_svg_canvas

SVG_TEXT = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="40mm" height="30mm" viewBox="0 0 40 30">
  <path d="M0 0L10 0L10 20" fill="none" stroke="black"/>
  <path d="M20 5L30 5L30 15L20 15Z"/>
</svg>
"""


def _write_svg(tmp_path: Path) -> str:
    svg_path = tmp_path / "input.svg"
    svg_path.write_text(SVG_TEXT)
    return str(svg_path)


def test_load_path_ds(tmp_path: Path) -> None:
    ds = load_path_ds(_write_svg(tmp_path))
    assert len(ds) == 2


def test_load_curve_path_groups(tmp_path: Path) -> None:
    groups = load_curve_path_groups(_write_svg(tmp_path))
    assert len(groups) == 2
    assert groups[0].get_length() == pytest.approx(30.0)
    assert groups[1].get_length() == pytest.approx(40.0)
    box = groups[1].get_bounding_box()
    assert box is not None
    assert box.to_tuple() == pytest.approx((20.0, 5.0, 10.0, 10.0))


def test_load_svg_canvas(tmp_path: Path) -> None:
    canvas = load_svg_canvas(_write_svg(tmp_path))
    assert canvas.viewbox == (0.0, 0.0, 40.0, 30.0)
    assert canvas.size == ("40mm", "30mm")
    assert canvas.pixels_per_unit() == pytest.approx(96.0 / 25.4)


def test_load_svg_canvas_without_viewbox(tmp_path: Path) -> None:
    svg_path = tmp_path / "plain.svg"
    svg_path.write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" width="12" height="8">'
        '<path d="M0 0L1 1"/></svg>'
    )
    canvas = load_svg_canvas(str(svg_path))
    assert canvas.viewbox == (0.0, 0.0, 12.0, 8.0)
    assert canvas.size == ("12", "8")
    assert canvas.pixels_per_unit() == pytest.approx(1.0)


def test_paths_viewbox() -> None:
    square = CurvePath.from_svg_path_d("M0 0L1 0L1 1L0 1Z")
    assert paths_viewbox([square], pad=1.0) == pytest.approx((-1.0, -1.0, 3.0, 3.0))
    with pytest.raises(ValueError):
        paths_viewbox([])


def test_export_paths_svg(tmp_path: Path) -> None:
    square = CurvePath.from_svg_path_d("M0 0L1 0L1 1L0 1Z")
    line = CurvePath.from_svg_path_d("M0 0L1 1")
    out = tmp_path / "out.svg"
    export_paths_svg(str(out), [square], reference_paths=[line])

    text = out.read_text()
    assert 'd="M0 0L1 0L1 1L0 1L0 0Z"' in text
    assert 'd="M0 0L1 1"' in text
    assert "viewBox" in text


def test_export_keeps_input_canvas(tmp_path: Path) -> None:
    line = CurvePath.from_svg_path_d("M0 0L1 1")
    out = tmp_path / "canvas.svg"
    canvas = SvgCanvas(viewbox=(0.0, 0.0, 5.0, 5.0), size=("5mm", "5mm"))
    export_paths_svg(str(out), [line], style=OUTLINED, canvas=canvas)

    text = out.read_text()
    assert 'viewBox="0 0 5 5"' in text
    assert 'width="5mm"' in text
    assert 'fill="none"' in text


def test_path_style_attributes() -> None:
    assert OUTLINED.attributes() == {"fill": "none", "stroke": "#111111", "stroke_width": 1.0}
    attrs = REFERENCE.attributes()
    assert attrs["opacity"] == 0.5
    assert attrs["stroke_dasharray"] == "4,4"


def test_canvas_without_physical_width() -> None:
    assert SvgCanvas(viewbox=None, size=None).pixels_per_unit() is None
    assert SvgCanvas(viewbox=(0.0, 0.0, 10.0, 10.0), size=("100%", "100%")).pixels_per_unit() is None
    assert SvgCanvas(viewbox=(0.0, 0.0, 10.0, 10.0), size=("1in", "1in")).pixels_per_unit() == 9.6
