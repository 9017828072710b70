import sys
from pathlib import Path

import pytest

from src import reshape_svg
from src.curvegeom.svg_io import load_curve_path_groups
from src.utils import debug, debug_helpers

SVG_TEXT = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="40mm" height="30mm" viewBox="0 0 40 30">
  <path d="M5 5L25 5L25 25"/>
</svg>
"""


def _run(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, *extra: str) -> Path:
    src = tmp_path / "in.svg"
    src.write_text(SVG_TEXT)
    out = tmp_path / "out.svg"
    argv = ["reshape_svg", "--input", str(src), "--output", str(out), *extra]
    monkeypatch.setattr(sys, "argv", argv)
    reshape_svg.main()
    return out


def test_cli_strokes_paths(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out = _run(monkeypatch, tmp_path, "--start_width", "2", "--end_width", "1", "--line_cap", "round")
    assert "Saved:" in capsys.readouterr().out

    groups = load_curve_path_groups(str(out))
    # Reference path first, then the outline.
    assert len(groups) == 2
    # Both outline sides plus the caps.
    assert groups[1].get_length() > 2 * groups[0].get_length()
    assert 'viewBox="0 0 40 30"' in out.read_text()


def test_cli_smooths_without_stroke(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    out = _run(monkeypatch, tmp_path, "--smooth_radius", "5")
    groups = load_curve_path_groups(str(out))
    assert len(groups) == 1
    assert groups[0].get_length() < 40.0
    assert 'fill="none"' in out.read_text()


def test_cli_rejects_bad_view_scaling(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        _run(monkeypatch, tmp_path, "--view_scaling", "0")


def test_parse_dash_array() -> None:
    assert reshape_svg.parse_dash_array("2,1") == (2.0, 1.0)
    assert reshape_svg.parse_dash_array("2 1 0.5") == (2.0, 1.0, 0.5)
    assert reshape_svg.parse_dash_array("  ") is None
    assert reshape_svg.parse_dash_array(None) is None


def test_debug_logging(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(debug, "_verbose", True)
    debug.log("hello", tag="test")
    debug_helpers.log_points("pts", [[0.0, 1.0], [2.0, float("nan")], [4.0, -1.0]])
    debug_helpers.log_once("debug_logging_key", "first")
    debug_helpers.log_once("debug_logging_key", "second")

    out = capsys.readouterr().out
    assert "[test] hello" in out
    assert "pts: n=3 finite=2 x=[0, 4] y=[-1, 1]" in out
    assert "first" in out
    assert "second" not in out


def test_debug_silent_by_default(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(debug, "_verbose", False)
    debug.log("hidden")
    debug_helpers.log_points("pts", [[0.0, 0.0]])
    assert capsys.readouterr().out == ""
