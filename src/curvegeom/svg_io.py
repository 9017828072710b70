from __future__ import annotations

import re
from dataclasses import dataclass

from svgpathtools import svg2paths2  # type: ignore[reportMissingTypeStubs]

from .curve_path_group import CurvePathGroup

ViewBox = tuple[float, float, float, float]

# CSS pixels per unit.
_PX_PER_UNIT: dict[str, float] = {
    "": 1.0,
    "px": 1.0,
    "pt": 96.0 / 72.0,
    "pc": 16.0,
    "mm": 96.0 / 25.4,
    "cm": 96.0 / 2.54,
    "in": 96.0,
}

_LENGTH_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)([a-zA-Z]*)\s*$")


@dataclass(frozen=True)
class SvgCanvas:
    """
    viewbox: (minx, miny, width, height) in user units, taken from the width
             and height attributes when the file has no viewBox
    size: raw (width, height) attribute strings, units kept
    """

    viewbox: ViewBox | None
    size: tuple[str, str] | None

    def pixels_per_unit(self) -> float | None:
        """Screen pixels per user unit at 96 dpi, if the file pins a physical width."""
        if self.viewbox is None or self.size is None or self.viewbox[2] <= 0:
            return None
        width_px = _length_to_px(self.size[0])
        if width_px is None:
            return None
        return width_px / self.viewbox[2]


def load_path_ds(svg_path: str) -> list[str]:
    """
    The `d` string of every <path> in the file, shapes included.
    svgpathtools rewrites them with absolute commands, so relative `m` never
    reaches the parser.
    """
    paths = svg2paths2(svg_path)[0]
    if len(paths) == 0:
        raise ValueError("No <path> found in SVG.")
    return [p.d() for p in paths if len(p) > 0]


def load_curve_path_groups(svg_path: str) -> list[CurvePathGroup]:
    return [CurvePathGroup.from_svg_path_d(d) for d in load_path_ds(svg_path)]


def load_svg_canvas(svg_path: str) -> SvgCanvas:
    svg_result = svg2paths2(svg_path)
    attributes = svg_result[2] if len(svg_result) > 2 else {}

    width = attributes.get("width")
    height = attributes.get("height")
    size = (width, height) if width and height else None

    viewbox = _parse_viewbox(attributes.get("viewBox") or attributes.get("viewbox"))
    if viewbox is None and size is not None:
        w = _parse_length(size[0])
        h = _parse_length(size[1])
        if w is not None and h is not None:
            viewbox = (0.0, 0.0, w[0], h[0])

    return SvgCanvas(viewbox=viewbox, size=size)


def _parse_viewbox(raw: str | None) -> ViewBox | None:
    if not raw:
        return None
    parts = raw.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        minx, miny, w, h = (float(p) for p in parts)
    except ValueError:
        return None
    return minx, miny, w, h


def _parse_length(value: str) -> tuple[float, str] | None:
    # Percentages depend on the embedding viewport and are left unresolved.
    match = _LENGTH_RE.match(value)
    if match is None:
        return None
    return float(match.group(1)), match.group(2).lower()


def _length_to_px(value: str) -> float | None:
    parsed = _parse_length(value)
    if parsed is None or parsed[1] not in _PX_PER_UNIT:
        return None
    return parsed[0] * _PX_PER_UNIT[parsed[1]]
