from __future__ import annotations

from dataclasses import dataclass

from ...utils import debug, debug_helpers
from ..algebra import is_zero, normalize, points_equal, rotate_quarter
from ..curve_path import CurvePath
from ..curve_path_group import CurvePathGroup
from ..curves import Curve, LineCurve
from ..numeric import linear_step, mix
from ..types import Point2
from .dash_array import DashArrayGenerator
from .line_cap import make_round_line_cap_curves, make_square_line_cap_points
from .line_join import resolve_line_join
from .line_segments import connect_two_line_segments, make_radial, tie_edge_messes_knot
from .options import GradientStroke, StrokeStyle

MAX_PIXEL_DIFF = 0.25

# Dash parts shorter than this rate of the path length end the dash loop.
MIN_DASH_STEP_RATE = 1e-6

# Consecutive outline points closer than this are merged.
POINT_EPSILON = 1e-9


@dataclass(frozen=True)
class DashPart:
    path: CurvePath
    start_length: float


class _OutlineBuilder:
    """Collects polyline points and curves into one closed outline."""

    def __init__(self) -> None:
        self.curves: list[Curve] = []
        self._pending: list[Point2] = []

    def extend(self, points: list[Point2]) -> None:
        for p in points:
            if not self._pending or not points_equal(self._pending[-1], p, POINT_EPSILON):
                self._pending.append(p)

    def add_curve(self, curve: Curve) -> None:
        self.extend([curve.start_point])
        self._flush()
        self.curves.append(curve)
        self._pending = [curve.end_point]

    def _flush(self) -> None:
        for start, end in zip(self._pending, self._pending[1:]):
            self.curves.append(LineCurve(start, end))
        self._pending = self._pending[-1:]

    def finish(self) -> list[Curve]:
        self._flush()
        return self.curves


class GradientWidthStroker:
    """Outline of a path stroked with a width that varies along its length.

    Each curve is sampled curvature-adaptively and offset by half the local
    width to both sides. The left offsets run forward, an end cap crosses to
    the right offsets, which run backward, and a start cap closes the ring.
    With a dash pattern every dash is outlined on its own and the result is a
    `CurvePathGroup`.
    """

    def __init__(
        self,
        curve_path: CurvePath,
        view_scaling: float,
        gradient: GradientStroke,
        style: StrokeStyle | None = None,
    ) -> None:
        self.curve_path = curve_path
        self.view_scaling = view_scaling
        self.gradient = gradient
        self.style = style or StrokeStyle()

        self.total_length = curve_path.get_length()
        if self.total_length == 0:
            raise ValueError("cannot stroke a zero-length path")

        self.length_before_gradient = 0.0
        self.gradient_length = self.total_length
        if gradient.index_range is not None:
            count = curve_path.curve_count
            start = min(gradient.index_range[0], count)
            end = min(gradient.index_range[1], count)
            lengths = [curve.get_length() for curve in curve_path.curves]
            self.length_before_gradient = sum(lengths[:start])
            self.gradient_length = sum(lengths[start:end])

    # Width

    def gradient_rate_at_length(self, length: float) -> float:
        if self.gradient.index_range is None:
            return length / self.total_length
        if length < self.length_before_gradient:
            return 0.0
        return linear_step(length - self.length_before_gradient, 0.0, self.gradient_length)

    def stroke_width_at_length(self, length: float) -> float:
        rate = self.gradient_rate_at_length(length)
        return mix(self.gradient.start_width, self.gradient.end_width, rate**self.gradient.power)

    # Generation

    def generate(self) -> CurvePath | CurvePathGroup:
        if self.style.dash_array is None:
            return self._generate_one(self.curve_path, 0.0, None)

        parts = self.cut_to_dash_parts()
        debug.log(f"{len(parts)} dash parts", tag="stroker")
        paths = [self._generate_one(part.path, part.start_length, 1) for part in parts]
        return CurvePathGroup.from_curve_paths(paths)

    def cut_to_dash_parts(self) -> list[DashPart]:
        if self.style.dash_array is None:
            return []
        generator = DashArrayGenerator(self.style.dash_array, self.style.dash_offset)
        total = self.total_length
        current = 0.0
        parts: list[DashPart] = []

        for item in generator:
            width = self.stroke_width_at_length(current)
            start_length = current + item.empty * width
            end_length = current + (item.empty + item.solid) * width
            if start_length >= total or end_length - current < total * MIN_DASH_STEP_RATE:
                break

            end_rate = min(end_length / total, 1.0)
            if end_length > start_length:
                part = self.curve_path.part_of(
                    self.curve_path.map_u2t(start_length / total),
                    self.curve_path.map_u2t(end_rate),
                )
                if part.get_length() > 0:
                    parts.append(DashPart(part, start_length))

            if end_rate >= 1.0:
                break
            current = end_length

        return parts

    def _generate_one(
        self,
        path: CurvePath,
        start_length: float,
        divisions: int | None,
    ) -> CurvePath:
        left_list, right_list = self._sample_sides(path, start_length, divisions)
        if not left_list:
            raise ValueError("cannot stroke a path whose curves all have zero length")

        # The right side runs backward so the outline forms one ring.
        right_list = [list(reversed(points)) for points in reversed(right_list)]

        builder = _OutlineBuilder()
        self._connect_side(left_list, builder)
        self._add_cap(left_list[-1], right_list[0], builder)
        self._connect_side(right_list, builder)
        self._add_cap(right_list[-1], left_list[0], builder)

        return CurvePath.from_curves(builder.finish(), close=True)

    def _sample_sides(
        self,
        path: CurvePath,
        start_length: float,
        divisions: int | None,
    ) -> tuple[list[list[Point2]], list[list[Point2]]]:
        left_list: list[list[Point2]] = []
        right_list: list[list[Point2]] = []
        current_length = start_length
        sample_count = 0

        for curve in path.curves:
            length = curve.get_length()
            if length == 0:
                continue

            center: list[Point2] = []
            left: list[Point2] = []
            right: list[Point2] = []
            chord = normalize(curve.end_point - curve.start_point)
            ts = curve.get_curvature_adaptive_ts(MAX_PIXEL_DIFF, self.view_scaling, divisions)

            for t in ts:
                tangent = normalize(curve.tangent_at(t))
                if is_zero(tangent):
                    tangent = chord
                normal = rotate_quarter(tangent, 1)

                p = curve.point_at(t)
                width = self.stroke_width_at_length(current_length + curve.map_t2u(t) * length)
                offset = normal * (width / 2.0)

                center.append(p)
                left.append(p - offset)
                right.append(p + offset)

            left_list.append(tie_edge_messes_knot(left, center))
            right_list.append(tie_edge_messes_knot(right, center))
            current_length += length
            sample_count += len(ts)

        debug.log(f"{sample_count} samples over {len(left_list)} curves", tag="stroker")
        if left_list:
            debug_helpers.log_points_once("stroker_left", "stroker left side", left_list[0])
        return left_list, right_list

    def _connect_side(self, polylines: list[list[Point2]], builder: _OutlineBuilder) -> None:
        current = polylines[0]
        for following in polylines[1:]:
            connection = connect_two_line_segments(current, following)
            if connection.kind != "outer" or connection.point is None:
                builder.extend(connection.list1)
                current = connection.list2
                continue

            radial1 = make_radial(connection.list1, len(connection.list1) - 1, 1)
            radial2 = make_radial(connection.list2, 0, -1)
            join = resolve_line_join(
                radial1,
                radial2,
                connection.point,
                self.style.line_join,
                self.style.miter_limit,
            )
            if isinstance(join, list) and join:
                # The miter tip lies on both end edges, so it replaces their ends.
                builder.extend(connection.list1[:-1])
                current = [*join, *connection.list2[1:]]
                continue

            builder.extend(connection.list1)
            if not isinstance(join, list):
                builder.add_curve(join)
            current = connection.list2
        builder.extend(current)

    def _add_cap(
        self,
        from_points: list[Point2],
        to_points: list[Point2],
        builder: _OutlineBuilder,
    ) -> None:
        """Cap from the end of `from_points` to the start of `to_points`."""
        radial1 = make_radial(from_points, len(from_points) - 1, 1)
        radial2 = make_radial(to_points, 0, -1)

        if self.style.line_cap == "round":
            curves = make_round_line_cap_curves(radial1, radial2)
            if curves is not None:
                builder.add_curve(curves[0])
                builder.add_curve(curves[1])
        elif self.style.line_cap == "square":
            builder.extend(list(make_square_line_cap_points(radial1, radial2)))
        # A butt cap is the straight line the outline draws on its own.
