from __future__ import annotations

import math
from collections.abc import Callable, Iterable

import numpy as np

from .algebra import Box, distance, point, points_equal, transform_point
from .curves import (
    ArcCurve,
    CubicBezierCurve,
    Curve,
    EllipseCurve,
    LineCurve,
    QuadraticBezierCurve,
)
from .numeric import lookup_x_rate_by_y_rate, mix
from .svg_path_d import apply_svg_command, iter_svg_commands, make_svg_path_d
from .types import AffineMatrix, CurveData, CurveType, FillRule, Point2, Points, Vector2

# Closing a path adds a line only when the gap is larger than this.
CLOSE_EPSILON = 1e-9


class CurvePath:
    """An ordered chain of curves, optionally closed.

    A path starts empty, takes exactly one `move_to`, then any number of
    curves, and may be closed once. Closing is terminal.

    Two global parameters run over [0, 1]. `t` splits the range uniformly by
    curve count, so curve `i` owns `[i / n, (i + 1) / n]`. `u` is proportional
    to arc length across the whole path.
    """

    def __init__(self) -> None:
        self.curves: list[Curve] = []
        self.closed = False
        self._move_to_point: Point2 | None = None
        self._lengths: np.ndarray | None = None
        self._box: Box | None = None
        self._json: list[CurveData] | None = None

    # Construction

    @classmethod
    def from_curve_data(cls, curve_data: Iterable[CurveData]) -> CurvePath:
        items = list(curve_data)
        if not items:
            raise ValueError("curve data is empty")
        if CurveType(items[0]["type"]) != CurveType.MOVE_TO:
            raise ValueError("curve data must start with MoveTo")
        return cls().add_curve_data_list(items)

    @classmethod
    def from_curves(cls, curves: Iterable[Curve], close: bool = False) -> CurvePath:
        items = list(curves)
        if not items:
            raise ValueError("CurvePath.from_curves needs at least one curve")
        path = cls().add_curves(items)
        if close:
            path.close_path()
        return path

    @classmethod
    def from_svg_path_d(cls, d: str) -> CurvePath:
        path = cls()
        for command, values in iter_svg_commands(d):
            apply_svg_command(path, command, values)
        return path

    # State

    @property
    def start_point(self) -> Point2:
        if self.curves:
            return self.curves[0].start_point
        if self._move_to_point is not None:
            return self._move_to_point
        raise ValueError("CurvePath is empty; call move_to first")

    @property
    def end_point(self) -> Point2:
        if self.curves:
            return self.curves[-1].end_point
        return self.start_point

    @property
    def curve_count(self) -> int:
        return len(self.curves)

    def _require_curves(self) -> None:
        if not self.curves:
            raise ValueError("CurvePath has no curves")

    def _invalidate(self) -> None:
        self._lengths = None
        self._box = None
        self._json = None

    # Builders

    def add_curve(self, curve: Curve) -> CurvePath:
        if self.closed:
            raise ValueError("CurvePath is closed; cannot append curves")
        if not self.curves and self._move_to_point is None:
            self._move_to_point = curve.start_point
        self.curves.append(curve)
        self._invalidate()
        return self

    def add_curves(self, curves: Iterable[Curve]) -> CurvePath:
        for curve in curves:
            self.add_curve(curve)
        return self

    def add_curve_data(self, item: CurveData) -> CurvePath:
        kind = CurveType(item["type"])
        if kind == CurveType.MOVE_TO:
            return self.move_to(item["x"], item["y"])  # type: ignore[typeddict-item]
        if kind == CurveType.LINE_TO:
            return self.line_to(item["x"], item["y"])  # type: ignore[typeddict-item]
        if kind == CurveType.ARC_TO:
            return self.arc_to(
                item["x"],  # type: ignore[typeddict-item]
                item["y"],  # type: ignore[typeddict-item]
                item["r"],  # type: ignore[typeddict-item]
                item["largeArcFlag"],  # type: ignore[typeddict-item]
                item["clockwiseFlag"],  # type: ignore[typeddict-item]
            )
        if kind == CurveType.ELLIPSE_TO:
            return self.ellipse_to(
                item["x"],  # type: ignore[typeddict-item]
                item["y"],  # type: ignore[typeddict-item]
                item["rx"],  # type: ignore[typeddict-item]
                item["ry"],  # type: ignore[typeddict-item]
                item["xAxisAngle"],  # type: ignore[typeddict-item]
                item["largeArcFlag"],  # type: ignore[typeddict-item]
                item["clockwiseFlag"],  # type: ignore[typeddict-item]
            )
        if kind == CurveType.QUADRATIC_BEZIER_TO:
            return self.quadratic_bezier_to(
                item["cx"],  # type: ignore[typeddict-item]
                item["cy"],  # type: ignore[typeddict-item]
                item["x"],  # type: ignore[typeddict-item]
                item["y"],  # type: ignore[typeddict-item]
            )
        if kind == CurveType.CUBIC_BEZIER_TO:
            return self.cubic_bezier_to(
                item["cx1"],  # type: ignore[typeddict-item]
                item["cy1"],  # type: ignore[typeddict-item]
                item["cx2"],  # type: ignore[typeddict-item]
                item["cy2"],  # type: ignore[typeddict-item]
                item["x"],  # type: ignore[typeddict-item]
                item["y"],  # type: ignore[typeddict-item]
            )
        return self.close_path()

    def add_curve_data_list(self, curve_data: Iterable[CurveData]) -> CurvePath:
        for item in curve_data:
            self.add_curve_data(item)
        return self

    def move_to(self, x: float, y: float) -> CurvePath:
        if self.curves or self._move_to_point is not None:
            raise ValueError("move_to can only be called once per CurvePath")
        self._move_to_point = point(x, y)
        self._move_to_point.setflags(write=False)
        return self

    def _relative(self, dx: float, dy: float) -> tuple[float, float]:
        current = self.end_point
        return float(current[0]) + dx, float(current[1]) + dy

    def line_to(self, x: float, y: float) -> CurvePath:
        return self.add_curve(LineCurve(self.end_point, point(x, y)))

    def line_by(self, dx: float, dy: float) -> CurvePath:
        return self.line_to(*self._relative(dx, dy))

    def h_line_to(self, x: float) -> CurvePath:
        return self.line_to(x, float(self.end_point[1]))

    def h_line_by(self, dx: float) -> CurvePath:
        return self.line_by(dx, 0.0)

    def v_line_to(self, y: float) -> CurvePath:
        return self.line_to(float(self.end_point[0]), y)

    def v_line_by(self, dy: float) -> CurvePath:
        return self.line_by(0.0, dy)

    def arc_to(
        self,
        x: float,
        y: float,
        radius: float,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePath:
        return self.add_curve(
            ArcCurve(self.end_point, point(x, y), radius, large_arc_flag, clockwise_flag)
        )

    def arc_by(
        self,
        dx: float,
        dy: float,
        radius: float,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePath:
        return self.arc_to(*self._relative(dx, dy), radius, large_arc_flag, clockwise_flag)

    def ellipse_to(
        self,
        x: float,
        y: float,
        rx: float,
        ry: float,
        x_axis_angle: float = 0.0,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePath:
        return self.add_curve(
            EllipseCurve(
                self.end_point,
                point(x, y),
                (rx, ry),
                x_axis_angle,
                large_arc_flag,
                clockwise_flag,
            )
        )

    def ellipse_by(
        self,
        dx: float,
        dy: float,
        rx: float,
        ry: float,
        x_axis_angle: float = 0.0,
        large_arc_flag: int = 1,
        clockwise_flag: int = 1,
    ) -> CurvePath:
        return self.ellipse_to(
            *self._relative(dx, dy), rx, ry, x_axis_angle, large_arc_flag, clockwise_flag
        )

    def quadratic_bezier_to(self, cx: float, cy: float, x: float, y: float) -> CurvePath:
        return self.add_curve(QuadraticBezierCurve(self.end_point, point(cx, cy), point(x, y)))

    def quadratic_bezier_by(self, dcx: float, dcy: float, dx: float, dy: float) -> CurvePath:
        return self.quadratic_bezier_to(*self._relative(dcx, dcy), *self._relative(dx, dy))

    def cubic_bezier_to(
        self,
        cx1: float,
        cy1: float,
        cx2: float,
        cy2: float,
        x: float,
        y: float,
    ) -> CurvePath:
        return self.add_curve(
            CubicBezierCurve(self.end_point, point(cx1, cy1), point(cx2, cy2), point(x, y))
        )

    def cubic_bezier_by(
        self,
        dcx1: float,
        dcy1: float,
        dcx2: float,
        dcy2: float,
        dx: float,
        dy: float,
    ) -> CurvePath:
        return self.cubic_bezier_to(
            *self._relative(dcx1, dcy1),
            *self._relative(dcx2, dcy2),
            *self._relative(dx, dy),
        )

    def close_path(self) -> CurvePath:
        """Close with a line back to the start when the ends differ."""
        if self.closed:
            raise ValueError("CurvePath is already closed")
        if not self.curves:
            raise ValueError("cannot close a CurvePath without curves")
        if not points_equal(self.end_point, self.start_point, CLOSE_EPSILON):
            self.add_curve(LineCurve(self.end_point, self.start_point))
        self.closed = True
        self._invalidate()
        return self

    # Length and parameter maps

    def get_lengths(self) -> np.ndarray:
        """Cumulative curve lengths, one entry per curve."""
        if self._lengths is None:
            lengths = np.cumsum([curve.get_length() for curve in self.curves], dtype=np.float64)
            lengths.setflags(write=False)
            self._lengths = lengths
        return self._lengths

    def get_length(self) -> float:
        if not self.curves:
            return 0.0
        return float(self.get_lengths()[-1])

    def _local_index(self, x: float) -> int:
        return min(max(math.floor(x), 0), len(self.curves) - 1)

    def map_global_t_to_local(self, t: float) -> tuple[int, float]:
        self._require_curves()
        x = t * len(self.curves)
        index = self._local_index(x)
        return index, x - index

    def map_local_t_to_global(self, index: int, t: float) -> float:
        return (index + t) / len(self.curves)

    def map_global_u_to_local(self, u: float) -> tuple[int, float]:
        self._require_curves()
        x = lookup_x_rate_by_y_rate(u, self.get_lengths()) * len(self.curves)
        index = self._local_index(x)
        return index, x - index

    def map_local_u_to_global(self, index: int, u: float) -> float:
        lengths = self.get_lengths()
        total = float(lengths[-1])
        if total == 0:
            return self.map_local_t_to_global(index, u)
        start = float(lengths[index - 1]) if index > 0 else 0.0
        return mix(start, float(lengths[index]), u) / total

    def map_u2t(self, u: float) -> float:
        index, local_u = self.map_global_u_to_local(u)
        return self.map_local_t_to_global(index, self.curves[index].map_u2t(local_u))

    def map_t2u(self, t: float) -> float:
        index, local_t = self.map_global_t_to_local(t)
        return self.map_local_u_to_global(index, self.curves[index].map_t2u(local_t))

    def t_at_length(self, length: float) -> float:
        total = self.get_length()
        if total == 0:
            return 0.0
        return self.map_u2t(length / total)

    # Point queries

    def point_at(self, t: float) -> Point2:
        index, local_t = self.map_global_t_to_local(t)
        return self.curves[index].point_at(local_t)

    def spaced_point_at(self, u: float) -> Point2:
        return self.point_at(self.map_u2t(u))

    def point_at_length(self, length: float) -> Point2:
        return self.point_at(self.t_at_length(length))

    def tangent_at(self, t: float) -> Vector2:
        """Tangent of the owning curve with respect to its local `t`."""
        index, local_t = self.map_global_t_to_local(t)
        return self.curves[index].tangent_at(local_t)

    def normal_at(self, t: float, clockwise_flag: int) -> Vector2:
        index, local_t = self.map_global_t_to_local(t)
        return self.curves[index].normal_at(local_t, clockwise_flag)

    def curvature_at(self, t: float) -> float:
        index, local_t = self.map_global_t_to_local(t)
        return self.curves[index].curvature_at(local_t)

    def _join_points(self, chunks: list[Points]) -> Points:
        # Each chunk starts where the previous one ended.
        return np.vstack([chunks[0], *(chunk[1:] for chunk in chunks[1:])])

    def get_points(self, divisions: int | None = None) -> Points:
        """Per-curve samples joined end to end, or `divisions + 1` points uniform in `t`."""
        self._require_curves()
        if divisions is None:
            return self._join_points([curve.get_points() for curve in self.curves])
        return np.vstack([self.point_at(d / divisions) for d in range(divisions + 1)])

    def get_spaced_ts(self, divisions: int) -> list[float]:
        return [self.map_u2t(d / divisions) for d in range(divisions + 1)]

    def get_spaced_points(self, divisions: int | None = None) -> Points:
        self._require_curves()
        if divisions is None:
            return self._join_points([curve.get_spaced_points() for curve in self.curves])
        return np.vstack([self.point_at(t) for t in self.get_spaced_ts(divisions)])

    def get_curvature_adaptive_ts(
        self,
        max_pixel_diff: float = 0.25,
        scaling: float = 1.0,
        divisions: int | None = None,
    ) -> list[float]:
        ts: list[float] = []
        for index, curve in enumerate(self.curves):
            local = curve.get_curvature_adaptive_ts(max_pixel_diff, scaling, divisions)
            if ts:
                local = local[1:]
            ts.extend(self.map_local_t_to_global(index, t) for t in local)
        return ts

    def get_curvature_adaptive_points(
        self,
        max_pixel_diff: float = 0.25,
        scaling: float = 1.0,
        divisions: int | None = None,
    ) -> Points:
        self._require_curves()
        return self._join_points(
            [
                curve.get_curvature_adaptive_points(max_pixel_diff, scaling, divisions)
                for curve in self.curves
            ]
        )

    def get_box(self) -> Box | None:
        if not self.curves:
            return None
        if self._box is None:
            box = self.curves[0].get_box()
            for curve in self.curves[1:]:
                box = box.union(curve.get_box())
            self._box = box
        return self._box

    def _closest(self, p: Point2) -> tuple[Point2, float]:
        self._require_curves()
        best_point = self.curves[0].closest_point_to(p)
        best_distance = distance(best_point, p)
        for curve in self.curves[1:]:
            candidate = curve.closest_point_to(p)
            d = distance(candidate, p)
            if d < best_distance:
                best_point, best_distance = candidate, d
        return best_point, best_distance

    def closest_point_to(self, p: Point2) -> Point2:
        return self._closest(p)[0]

    def calc_ts_by_x(self, x: float) -> list[float]:
        """Global `t` values where the path crosses the vertical line at `x`."""
        ts: list[float] = []
        for index, curve in enumerate(self.curves):
            ts.extend(self.map_local_t_to_global(index, t) for t in curve.calc_ts_by_x(x))
        return ts

    def calc_ts_by_y(self, y: float) -> list[float]:
        ts: list[float] = []
        for index, curve in enumerate(self.curves):
            ts.extend(self.map_local_t_to_global(index, t) for t in curve.calc_ts_by_y(y))
        return ts

    # Hit testing

    def is_point_inside(self, p: Point2, fill_rule: FillRule = "nonzero") -> bool:
        """Winding test with a ray towards +x. Open paths contain nothing."""
        if fill_rule not in ("nonzero", "evenodd"):
            raise ValueError(f"unknown fill rule {fill_rule!r}")
        if not self.closed:
            return False

        box = self.get_box()
        if box is None or not box.contains_point(p):
            return False

        crossings: list[int] = []
        for curve in self.curves:
            crossings.extend(curve.calc_ray_crossings(p))

        if fill_rule == "nonzero":
            return sum(crossings) != 0
        return len(crossings) % 2 == 1

    def is_point_in_stroke(self, p: Point2, stroke_width: float) -> bool:
        """Distance test against every curve; caps and joins count as round."""
        box = self.get_box()
        half_width = stroke_width / 2.0
        if box is None or not box.expanded(half_width).contains_point(p):
            return False
        return any(
            distance(curve.closest_point_to(p), p) <= half_width for curve in self.curves
        )

    def get_distance(
        self,
        p: Point2,
        stroke_width: float = 0.0,
        filled: bool = True,
        fill_rule: FillRule = "nonzero",
    ) -> float:
        """Signed distance, negative inside the filled and stroked region."""
        _, d = self._closest(p)
        half_width = stroke_width / 2.0
        if filled and self.is_point_inside(p, fill_rule):
            return -(d + half_width)
        return d - half_width

    # Derivation

    def part_of(self, start_t: float, end_t: float) -> CurvePath:
        """The path between global `start_t` and `end_t`.

        Curves wholly inside the range are shared; the boundary curves are cut.
        """
        self._require_curves()
        if start_t > end_t:
            raise ValueError("start_t must not exceed end_t")
        if start_t <= 0 and end_t >= 1:
            return self.clone()

        start_index, start_local = self.map_global_t_to_local(start_t)
        end_index, end_local = self.map_global_t_to_local(end_t)
        if end_index > start_index and end_local == 0:
            end_index -= 1
            end_local = 1.0

        if start_index == end_index:
            curves = [self.curves[start_index].part_of(start_local, end_local)]
        else:
            curves = [
                self.curves[start_index].part_of(start_local, 1.0),
                *self.curves[start_index + 1 : end_index],
                self.curves[end_index].part_of(0.0, end_local),
            ]
        return CurvePath.from_curves(curves)

    def _with_curves(self, curves: list[Curve], move_to_point: Point2 | None) -> CurvePath:
        path = CurvePath()
        path._move_to_point = move_to_point
        path.curves = curves
        path.closed = self.closed
        return path

    def transform(self, matrix: AffineMatrix) -> CurvePath:
        move_to_point = None
        if self._move_to_point is not None:
            move_to_point = transform_point(matrix, self._move_to_point)
        return self._with_curves([curve.transform(matrix) for curve in self.curves], move_to_point)

    def clone(self) -> CurvePath:
        return self._with_curves(list(self.curves), self._move_to_point)

    def equals(self, other: CurvePath) -> bool:
        return (
            isinstance(other, CurvePath)
            and self.closed == other.closed
            and len(self.curves) == len(other.curves)
            and all(a.equals(b) for a, b in zip(self.curves, other.curves))
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurvePath):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def to_cubic_bezier_curve_path(self) -> CurvePath:
        curves: list[Curve] = []
        for curve in self.curves:
            curves.extend(curve.to_cubic_bezier_curves())
        return self._with_curves(curves, self._move_to_point)

    def make_mixer(self, to_path: CurvePath) -> Callable[[float], CurvePath]:
        """Interpolator from this path (`rate=0`) to `to_path` (`rate=1`)."""
        from .path_mixer import CurvePathMixer

        return CurvePathMixer(self, to_path).mix

    # Encoding

    def to_json(self) -> list[CurveData]:
        if self._json is None:
            start = self.start_point
            data: list[CurveData] = [
                {"type": CurveType.MOVE_TO, "x": float(start[0]), "y": float(start[1])}
            ]
            data.extend(curve.to_json() for curve in self.curves)
            if self.closed:
                data.append({"type": CurveType.CLOSE})
            self._json = data
        return list(self._json)

    def to_svg_path_d(self) -> str:
        return make_svg_path_d(self.to_json())

    def __repr__(self) -> str:
        return f"CurvePath(curves={len(self.curves)}, closed={self.closed})"
