from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

import svgwrite  # type: ignore[reportMissingTypeStubs]

from .algebra import Box
from .curve_path import CurvePath
from .curve_path_group import CurvePathGroup
from .svg_io import SvgCanvas, ViewBox

Drawable: TypeAlias = CurvePath | CurvePathGroup


@dataclass(frozen=True)
class SvgPathStyle:
    fill: str = "#000000"
    stroke: str = "none"
    stroke_width: float | str = 1.0
    opacity: float | None = None
    dasharray: str | None = None

    def attributes(self) -> dict[str, object]:
        attrs: dict[str, object] = {
            "fill": self.fill,
            "stroke": self.stroke,
            "stroke_width": self.stroke_width,
        }
        if self.opacity is not None:
            attrs["opacity"] = self.opacity
        if self.dasharray is not None:
            attrs["stroke_dasharray"] = self.dasharray
        return attrs


FILLED = SvgPathStyle()
OUTLINED = SvgPathStyle(fill="none", stroke="#111111")
REFERENCE = SvgPathStyle(fill="none", stroke="#777777", opacity=0.5, dasharray="4,4")


def _drawable_box(item: Drawable) -> Box | None:
    if isinstance(item, CurvePathGroup):
        return item.get_bounding_box()
    return item.get_box()


def paths_viewbox(paths: Sequence[Drawable], pad: float = 10.0) -> ViewBox:
    """(minx, miny, width, height) around every path, padded by `pad`."""
    boxes = [box for box in map(_drawable_box, paths) if box is not None]
    if not boxes:
        raise ValueError("No curves to export.")
    box = boxes[0]
    for other in boxes[1:]:
        box = box.union(other)
    padded = box.expanded(pad)
    return padded.x, padded.y, padded.width, padded.height


def export_paths_svg(
    out_path: str,
    paths: Sequence[Drawable],
    style: SvgPathStyle = FILLED,
    canvas: SvgCanvas | None = None,
    reference_paths: Sequence[Drawable] | None = None,
    reference_style: SvgPathStyle = REFERENCE,
) -> None:
    """
    paths: reshaped results, drawn on top with `style`
    canvas: viewBox and size to reuse, usually the input file's; a padded
            viewBox around all paths is used when it has none
    reference_paths: source paths drawn underneath for context
    """
    references = list(reference_paths or [])
    viewbox = canvas.viewbox if canvas is not None else None
    if viewbox is None:
        viewbox = paths_viewbox([*paths, *references])

    if canvas is not None and canvas.size is not None:
        dwg = svgwrite.Drawing(out_path, profile="tiny", size=canvas.size)
    else:
        dwg = svgwrite.Drawing(out_path, profile="tiny")
    dwg.attribs["viewBox"] = " ".join(f"{v:g}" for v in viewbox)

    layers = ((references, reference_style), (paths, style))
    for items, item_style in layers:
        attrs = item_style.attributes()
        for item in items:
            d = item.to_svg_path_d()
            if d:
                dwg.add(dwg.path(d=d, **attrs))

    dwg.save()
