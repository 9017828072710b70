from __future__ import annotations

import math
import re
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from .curves import CubicBezierCurve, QuadraticBezierCurve
from .types import CurveData, CurveType

if TYPE_CHECKING:
    from .curve_path import CurvePath

_TOKEN_RE = re.compile(r"[a-zA-Z]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Values per command, keyed by upper-case letter.
_ARITY: dict[str, int] = {
    "M": 2,
    "L": 2,
    "H": 1,
    "V": 1,
    "C": 6,
    "S": 4,
    "Q": 4,
    "T": 2,
    "A": 7,
    "Z": 0,
}


def parse_svg_path_d(d: str) -> list[tuple[str, list[float]]]:
    """Split a `d` attribute into `(command, values)` pairs, as written."""
    commands: list[tuple[str, list[float]]] = []
    for token in _TOKEN_RE.findall(d):
        if token.isalpha():
            commands.append((token, []))
        elif not commands:
            raise ValueError(f"path data must start with a command, got {token!r}")
        else:
            commands[-1][1].append(float(token))
    return commands


def iter_svg_commands(d: str) -> Iterator[tuple[str, list[float]]]:
    """Yield one `(command, values)` pair per drawing step.

    Repeated value groups after a command repeat it, and extra pairs after `M`
    become `L` as SVG specifies.
    """
    for command, values in parse_svg_path_d(d):
        if command == "m":
            raise ValueError("relative moveto 'm' is not supported, use 'M'")

        upper = command.upper()
        arity = _ARITY.get(upper)
        if arity is None:
            raise ValueError(f"unknown path command {command!r}")

        if arity == 0:
            if values:
                raise ValueError(f"'{command}' command takes no values, got {len(values)}")
            yield command, []
            continue

        if not values or len(values) % arity != 0:
            raise ValueError(
                f"'{command}' command must have a multiple of {arity} values, got {len(values)}"
            )

        for index in range(0, len(values), arity):
            name = "L" if command == "M" and index > 0 else command
            yield name, values[index : index + arity]


def apply_svg_command(path: CurvePath, command: str, values: list[float]) -> None:
    """Append the curve described by one drawing step to `path`."""
    relative = command.islower()
    upper = command.upper()

    if upper == "M":
        path.move_to(values[0], values[1])
    elif upper == "L":
        (path.line_by if relative else path.line_to)(values[0], values[1])
    elif upper == "H":
        (path.h_line_by if relative else path.h_line_to)(values[0])
    elif upper == "V":
        (path.v_line_by if relative else path.v_line_to)(values[0])
    elif upper == "C":
        (path.cubic_bezier_by if relative else path.cubic_bezier_to)(*values)
    elif upper == "S":
        previous = path.curves[-1] if path.curves else None
        if not isinstance(previous, CubicBezierCurve):
            raise ValueError(f"'{command}' command must follow a cubic bezier curve")
        current = path.end_point
        control1 = current * 2.0 - previous.control_point2
        cx2, cy2, x, y = values
        if relative:
            cx2, cy2, x, y = cx2 + current[0], cy2 + current[1], x + current[0], y + current[1]
        path.cubic_bezier_to(float(control1[0]), float(control1[1]), cx2, cy2, x, y)
    elif upper == "Q":
        (path.quadratic_bezier_by if relative else path.quadratic_bezier_to)(*values)
    elif upper == "T":
        previous = path.curves[-1] if path.curves else None
        if not isinstance(previous, QuadraticBezierCurve):
            raise ValueError(f"'{command}' command must follow a quadratic bezier curve")
        current = path.end_point
        control = current * 2.0 - previous.control_point
        x, y = values
        if relative:
            x, y = x + current[0], y + current[1]
        path.quadratic_bezier_to(float(control[0]), float(control[1]), x, y)
    elif upper == "A":
        _apply_arc_command(path, command, values, relative)
    elif upper == "Z":
        path.close_path()
    else:
        raise ValueError(f"unknown path command {command!r}")


def _apply_arc_command(path: CurvePath, command: str, values: list[float], relative: bool) -> None:
    rx, ry, rotation, large_arc, sweep, x, y = values
    if large_arc not in (0, 1) or sweep not in (0, 1):
        raise ValueError(f"'{command}' command flags must be 0 or 1")
    if relative:
        current = path.end_point
        x, y = x + float(current[0]), y + float(current[1])

    rx = abs(rx)
    ry = abs(ry)
    if rx == 0 or ry == 0:
        # Zero radius arcs draw straight lines.
        path.line_to(x, y)
    elif rx == ry:
        path.arc_to(x, y, rx, int(large_arc), int(sweep))
    else:
        path.ellipse_to(x, y, rx, ry, math.radians(rotation), int(large_arc), int(sweep))


def format_number(value: float) -> str:
    """Round to 4 decimals and drop trailing zeros, `-0` prints as `0`."""
    rounded = round(float(value), 4)
    if rounded == 0:
        return "0"
    return f"{rounded:.4f}".rstrip("0").rstrip(".")


def make_svg_path_d(curve_data: Iterable[CurveData]) -> str:
    parts: list[str] = []
    for item in curve_data:
        parts.append(_format_curve_data(item))
    return "".join(parts)


def _format_curve_data(item: CurveData) -> str:
    kind = CurveType(item["type"])
    f = format_number

    if kind == CurveType.CLOSE:
        return "Z"

    x = f(item["x"])  # type: ignore[typeddict-item]
    y = f(item["y"])  # type: ignore[typeddict-item]

    if kind == CurveType.MOVE_TO:
        return f"M{x} {y}"
    if kind == CurveType.LINE_TO:
        return f"L{x} {y}"
    if kind == CurveType.ARC_TO:
        r = f(item["r"])  # type: ignore[typeddict-item]
        large = item["largeArcFlag"]  # type: ignore[typeddict-item]
        clockwise = item["clockwiseFlag"]  # type: ignore[typeddict-item]
        return f"A{r} {r} 0 {large} {clockwise} {x} {y}"
    if kind == CurveType.ELLIPSE_TO:
        rx = f(item["rx"])  # type: ignore[typeddict-item]
        ry = f(item["ry"])  # type: ignore[typeddict-item]
        rotation = f(math.degrees(item["xAxisAngle"]))  # type: ignore[typeddict-item]
        large = item["largeArcFlag"]  # type: ignore[typeddict-item]
        clockwise = item["clockwiseFlag"]  # type: ignore[typeddict-item]
        return f"A{rx} {ry} {rotation} {large} {clockwise} {x} {y}"
    if kind == CurveType.QUADRATIC_BEZIER_TO:
        cx = f(item["cx"])  # type: ignore[typeddict-item]
        cy = f(item["cy"])  # type: ignore[typeddict-item]
        return f"Q{cx} {cy} {x} {y}"
    if kind == CurveType.CUBIC_BEZIER_TO:
        cx1 = f(item["cx1"])  # type: ignore[typeddict-item]
        cy1 = f(item["cy1"])  # type: ignore[typeddict-item]
        cx2 = f(item["cx2"])  # type: ignore[typeddict-item]
        cy2 = f(item["cy2"])  # type: ignore[typeddict-item]
        return f"C{cx1} {cy1} {cx2} {cy2} {x} {y}"

    raise ValueError(f"unknown curve type {item['type']!r}")
