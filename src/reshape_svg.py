from __future__ import annotations

import argparse
from typing import Protocol, cast

from .curvegeom.curve_path import CurvePath
from .curvegeom.curve_path_group import CurvePathGroup
from .curvegeom.export_svg import FILLED, OUTLINED, export_paths_svg
from .curvegeom.polygon import filled_area
from .curvegeom.reshape import (
    GradientStroke,
    ReshapeOptions,
    SmoothOptions,
    StrokeStyle,
    WaveOptions,
    reshape_curve_path,
)
from .curvegeom.svg_io import load_curve_path_groups, load_svg_canvas
from .curvegeom.types import LineCap, LineJoin
from .utils import debug


class CliArgs(Protocol):
    input: str
    output: str
    partial: list[float] | None
    smooth_radius: float | None
    wave_length: float | None
    amplitude_rate: float
    smooth_rate: float
    start_width: float | None
    end_width: float | None
    power: float
    index_range: list[int] | None
    line_cap: LineCap
    line_join: LineJoin
    miter_limit: float
    dash_array: str | None
    dash_offset: float
    view_scaling: float | None
    verbose: bool


def parse_dash_array(value: str | None) -> tuple[float, ...] | None:
    if value is None or not value.strip():
        return None
    return tuple(float(v) for v in value.replace(",", " ").split())


def build_options(args: CliArgs) -> tuple[StrokeStyle, ReshapeOptions]:
    style = StrokeStyle(
        line_cap=args.line_cap,
        line_join=args.line_join,
        miter_limit=args.miter_limit,
        dash_array=parse_dash_array(args.dash_array),
        dash_offset=args.dash_offset,
    )

    smooth = None
    if args.smooth_radius is not None:
        smooth = SmoothOptions(radius=args.smooth_radius)

    wave = None
    if args.wave_length is not None:
        wave = WaveOptions(
            wave_length=args.wave_length,
            amplitude_rate=args.amplitude_rate,
            smooth_rate=args.smooth_rate,
        )

    gradient = None
    if args.start_width is not None:
        end_width = args.start_width if args.end_width is None else args.end_width
        index_range = None
        if args.index_range is not None:
            index_range = (args.index_range[0], args.index_range[1])
        gradient = GradientStroke(
            start_width=args.start_width,
            end_width=end_width,
            power=args.power,
            index_range=index_range,
        )

    partial = None
    if args.partial is not None:
        partial = (args.partial[0], args.partial[1])

    options = ReshapeOptions(
        partial=partial,
        smooth=smooth,
        wave=wave,
        gradient_stroking=gradient,
    )
    return style, options


def main() -> None:
    ap = argparse.ArgumentParser(description="Reshape every path of an SVG file.")
    ap.add_argument("--input", required=True, help="Input SVG")
    ap.add_argument("--output", required=True, help="Output SVG for reshaped paths")
    ap.add_argument(
        "--partial",
        type=float,
        nargs=2,
        metavar=("START", "END"),
        default=None,
        help="Keep only the part between these global t values",
    )
    ap.add_argument("--smooth_radius", type=float, default=None, help="Corner rounding radius")
    ap.add_argument("--wave_length", type=float, default=None, help="Zig-zag period")
    ap.add_argument("--amplitude_rate", type=float, default=0.25)
    ap.add_argument(
        "--smooth_rate",
        type=float,
        default=0.0,
        help="0 keeps the zig-zag sharp, 1 rounds it into arcs",
    )
    ap.add_argument("--start_width", type=float, default=None, help="Stroke width at the start")
    ap.add_argument(
        "--end_width",
        type=float,
        default=None,
        help="Stroke width at the end (defaults to start_width)",
    )
    ap.add_argument("--power", type=float, default=1.0, help="Width ramp exponent")
    ap.add_argument(
        "--index_range",
        type=int,
        nargs=2,
        metavar=("A", "B"),
        default=None,
        help="Ramp the width across curves A..B-1 only",
    )
    ap.add_argument("--line_cap", choices=["butt", "round", "square"], default="butt")
    ap.add_argument("--line_join", choices=["miter", "round", "bevel"], default="miter")
    ap.add_argument("--miter_limit", type=float, default=10.0)
    ap.add_argument(
        "--dash_array",
        type=str,
        default=None,
        help="Dash pattern in stroke widths, e.g. '2,1'",
    )
    ap.add_argument("--dash_offset", type=float, default=0.0)
    ap.add_argument(
        "--view_scaling",
        type=float,
        default=None,
        help="Screen pixels per SVG unit; raises sampling density (default: from the document size)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")

    args = cast(CliArgs, ap.parse_args())
    debug.set_verbose(args.verbose)

    if args.view_scaling is not None and args.view_scaling <= 0:
        raise ValueError("view_scaling must be positive")

    style, options = build_options(args)
    canvas = load_svg_canvas(args.input)
    groups = load_curve_path_groups(args.input)
    view_scaling = args.view_scaling
    if view_scaling is None:
        view_scaling = canvas.pixels_per_unit() or 1.0
    debug.log(f"input: groups={len(groups)} viewbox={canvas.viewbox} view_scaling={view_scaling:.6g}")

    results: list[CurvePath | CurvePathGroup] = []
    for group_index, group in enumerate(groups):
        for path_index, path in enumerate(group.curve_paths):
            if path.get_length() == 0:
                debug.log(f"skip group={group_index} path={path_index}: zero length")
                continue
            reshaped = reshape_curve_path(path, view_scaling, style, options)
            results.append(reshaped.result)
            debug.log(
                f"group={group_index} path={path_index} "
                f"curves={path.curve_count} -> {type(reshaped.result).__name__}"
            )

    stroked = options.gradient_stroking is not None
    export_paths_svg(
        args.output,
        results,
        style=FILLED if stroked else OUTLINED,
        canvas=canvas,
        reference_paths=groups if stroked else None,
    )

    area = sum(filled_area(item, scaling=view_scaling) for item in results)
    print(f"Saved: {args.output}  paths={len(results)} area={area:.6g}")


if __name__ == "__main__":
    main()
