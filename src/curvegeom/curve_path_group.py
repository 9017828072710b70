from __future__ import annotations

from collections.abc import Iterable, Iterator

from .algebra import Box
from .curve_path import CurvePath
from .curves import Curve
from .svg_path_d import apply_svg_command, iter_svg_commands, make_svg_path_d
from .types import AffineMatrix, CurveData, CurveType, FillRule, Point2


class CurvePathGroup:
    """Several subpaths drawn as one shape, like a multi-`M` SVG path.

    Builders act on the last subpath; `move_to` starts a new one.
    """

    def __init__(self, curve_paths: Iterable[CurvePath] = ()) -> None:
        self.curve_paths: list[CurvePath] = list(curve_paths)

    @classmethod
    def from_curve_paths(cls, curve_paths: Iterable[CurvePath]) -> CurvePathGroup:
        return cls(curve_paths)

    @classmethod
    def from_curve_data(cls, curve_data: Iterable[CurveData]) -> CurvePathGroup:
        items = list(curve_data)
        if not items:
            raise ValueError("curve data is empty")
        if CurveType(items[0]["type"]) != CurveType.MOVE_TO:
            raise ValueError("curve data must start with MoveTo")

        group = cls()
        for item in items:
            if CurveType(item["type"]) == CurveType.MOVE_TO:
                group.add_curve_path(CurvePath())
            group.curve_paths[-1].add_curve_data(item)
        return group

    @classmethod
    def from_svg_path_d(cls, d: str) -> CurvePathGroup:
        """Each `M` starts a subpath, as does drawing on after a `Z`."""
        group = cls()
        for command, values in iter_svg_commands(d):
            if command == "M":
                group.move_to(values[0], values[1])
                continue
            last = group._last()
            if last.closed:
                start = last.start_point
                group.move_to(float(start[0]), float(start[1]))
            apply_svg_command(group._last(), command, values)
        return group

    def _last(self) -> CurvePath:
        if not self.curve_paths:
            raise ValueError("CurvePathGroup is empty; call move_to first")
        return self.curve_paths[-1]

    # Builders

    def add_curve_path(self, curve_path: CurvePath) -> CurvePathGroup:
        self.curve_paths.append(curve_path)
        return self

    def move_to(self, x: float, y: float) -> CurvePathGroup:
        return self.add_curve_path(CurvePath().move_to(x, y))

    def add_curve(self, curve: Curve) -> CurvePathGroup:
        if not self.curve_paths:
            self.add_curve_path(CurvePath())
        self._last().add_curve(curve)
        return self

    def line_to(self, x: float, y: float) -> CurvePathGroup:
        self._last().line_to(x, y)
        return self

    def line_by(self, dx: float, dy: float) -> CurvePathGroup:
        self._last().line_by(dx, dy)
        return self

    def h_line_to(self, x: float) -> CurvePathGroup:
        self._last().h_line_to(x)
        return self

    def h_line_by(self, dx: float) -> CurvePathGroup:
        self._last().h_line_by(dx)
        return self

    def v_line_to(self, y: float) -> CurvePathGroup:
        self._last().v_line_to(y)
        return self

    def v_line_by(self, dy: float) -> CurvePathGroup:
        self._last().v_line_by(dy)
        return self

    def arc_to(
        self,
        x: float,
        y: float,
        radius: float,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePathGroup:
        self._last().arc_to(x, y, radius, large_arc_flag, clockwise_flag)
        return self

    def arc_by(
        self,
        dx: float,
        dy: float,
        radius: float,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePathGroup:
        self._last().arc_by(dx, dy, radius, large_arc_flag, clockwise_flag)
        return self

    def ellipse_to(
        self,
        x: float,
        y: float,
        rx: float,
        ry: float,
        x_axis_angle: float = 0.0,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePathGroup:
        self._last().ellipse_to(x, y, rx, ry, x_axis_angle, large_arc_flag, clockwise_flag)
        return self

    def ellipse_by(
        self,
        dx: float,
        dy: float,
        rx: float,
        ry: float,
        x_axis_angle: float = 0.0,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePathGroup:
        self._last().ellipse_by(dx, dy, rx, ry, x_axis_angle, large_arc_flag, clockwise_flag)
        return self

    def quadratic_bezier_to(self, cx: float, cy: float, x: float, y: float) -> CurvePathGroup:
        self._last().quadratic_bezier_to(cx, cy, x, y)
        return self

    def quadratic_bezier_by(self, dcx: float, dcy: float, dx: float, dy: float) -> CurvePathGroup:
        self._last().quadratic_bezier_by(dcx, dcy, dx, dy)
        return self

    def cubic_bezier_to(
        self,
        cx1: float,
        cy1: float,
        cx2: float,
        cy2: float,
        x: float,
        y: float,
    ) -> CurvePathGroup:
        self._last().cubic_bezier_to(cx1, cy1, cx2, cy2, x, y)
        return self

    def cubic_bezier_by(
        self,
        dcx1: float,
        dcy1: float,
        dcx2: float,
        dcy2: float,
        dx: float,
        dy: float,
    ) -> CurvePathGroup:
        self._last().cubic_bezier_by(dcx1, dcy1, dcx2, dcy2, dx, dy)
        return self

    def close_path(self) -> CurvePathGroup:
        self._last().close_path()
        return self

    # Queries

    @property
    def start_point(self) -> Point2:
        if not self.curve_paths:
            raise ValueError("CurvePathGroup is empty")
        return self.curve_paths[0].start_point

    def get_bounding_box(self) -> Box | None:
        box: Box | None = None
        for curve_path in self.curve_paths:
            path_box = curve_path.get_box()
            if path_box is None:
                continue
            box = path_box if box is None else box.union(path_box)
        return box

    def get_length(self) -> float:
        return sum(curve_path.get_length() for curve_path in self.curve_paths)

    def is_point_inside(self, p: Point2, fill_rule: FillRule = "nonzero") -> bool:
        return any(curve_path.is_point_inside(p, fill_rule) for curve_path in self.curve_paths)

    def is_point_in_stroke(self, p: Point2, stroke_width: float) -> bool:
        return any(
            curve_path.is_point_in_stroke(p, stroke_width) for curve_path in self.curve_paths
        )

    def get_distance(
        self,
        p: Point2,
        stroke_width: float = 0.0,
        filled: bool = True,
        fill_rule: FillRule = "nonzero",
    ) -> float:
        paths = [curve_path for curve_path in self.curve_paths if curve_path.curves]
        if not paths:
            raise ValueError("CurvePathGroup has no curves")
        return min(
            curve_path.get_distance(p, stroke_width, filled, fill_rule) for curve_path in paths
        )

    # Derivation

    def transform(self, matrix: AffineMatrix) -> CurvePathGroup:
        return CurvePathGroup(curve_path.transform(matrix) for curve_path in self.curve_paths)

    def clone(self) -> CurvePathGroup:
        return CurvePathGroup(curve_path.clone() for curve_path in self.curve_paths)

    def equals(self, other: CurvePathGroup) -> bool:
        return (
            isinstance(other, CurvePathGroup)
            and len(self.curve_paths) == len(other.curve_paths)
            and all(a.equals(b) for a, b in zip(self.curve_paths, other.curve_paths))
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurvePathGroup):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __iter__(self) -> Iterator[CurvePath]:
        return iter(self.curve_paths)

    def __len__(self) -> int:
        return len(self.curve_paths)

    # Encoding

    def to_json(self) -> list[CurveData]:
        data: list[CurveData] = []
        for curve_path in self.curve_paths:
            data.extend(curve_path.to_json())
        return data

    def to_svg_path_d(self) -> str:
        return make_svg_path_d(self.to_json())

    def __repr__(self) -> str:
        return f"CurvePathGroup(paths={len(self.curve_paths)})"
