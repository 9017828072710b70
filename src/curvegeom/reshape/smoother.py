from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ...utils import debug
from ..algebra import RadialLine, dot, is_zero, normalize
from ..curve_path import CurvePath
from ..curves import CubicBezierCurve, Curve, LineCurve
from ..numeric import mix
from ..types import Point2

# Handle rate of a cubic close to a circular arc.
ARC_TENSION = 0.552
# Handle rate of a cubic matching a quadratic bezier through the corner point.
QUADRATIC_TENSION = 0.75
# Corners turning less than about 5 degrees stay sharp.
MAX_SMOOTH_DOT = 0.9962


@dataclass
class SmoothCorner:
    left_t: float
    right_t: float
    left_point: Point2
    right_point: Point2
    left_radius: float
    right_radius: float
    q_point: Point2 | None
    # 0 rounds like a quadratic bezier, 1 like a circular arc.
    arc_rate: float = 0.0


class CurvePathSmoother:
    """Round the corners between consecutive curves.

    Corner `i` joins curve `i - 1` to curve `i`; corner 0 is the closing joint
    and only exists on closed paths. Each corner is cut back by `radius` of
    arc length on both sides and bridged with a cubic.
    """

    def __init__(
        self,
        curve_path: CurvePath,
        radius: float,
        corner_indices: Sequence[int] | None = None,
    ) -> None:
        self.curve_path = curve_path
        self.radius = radius
        self.corner_indices = None if corner_indices is None else set(corner_indices)

    def _mod(self, index: int) -> int:
        return index % len(self.curve_path.curves)

    def generate(self) -> CurvePath:
        curves = self.curve_path.curves
        if not curves:
            return self.curve_path.clone()

        corners = [self._make_corner(index) for index in range(len(curves))]
        for index, corner in enumerate(corners):
            if corner is not None:
                corner.arc_rate = self._calc_arc_rate(corner, index, corners)

        smoothed: list[Curve] = []
        for index in range(len(curves)):
            self._fill_smooth_curve_at(index, corners, smoothed)

        return CurvePath.from_curves(smoothed, close=self.curve_path.closed)

    def _fill_smooth_curve_at(
        self,
        index: int,
        corners: list[SmoothCorner | None],
        out: list[Curve],
    ) -> None:
        curve = self.curve_path.curves[index]
        left = corners[index]
        right = corners[self._mod(index + 1)]

        if left is not None:
            if left.q_point is not None:
                tension = mix(QUADRATIC_TENSION, ARC_TENSION, left.arc_rate)
                out.append(
                    CubicBezierCurve(
                        left.left_point,
                        left.left_point + (left.q_point - left.left_point) * tension,
                        left.right_point + (left.q_point - left.right_point) * tension,
                        left.right_point,
                    )
                )
            else:
                out.append(LineCurve(left.left_point, left.right_point))

        if left is None and right is None:
            out.append(curve)
        else:
            start_t = left.right_t if left is not None else 0.0
            end_t = right.left_t if right is not None else 1.0
            out.append(curve.part_of(start_t, end_t))

    def _should_smooth_corner_at(self, index: int) -> bool:
        if not self.curve_path.closed and index == 0:
            return False
        if self.corner_indices is not None:
            return index in self.corner_indices
        return True

    def _make_corner(self, index: int) -> SmoothCorner | None:
        if not self._should_smooth_corner_at(index):
            return None

        curves = self.curve_path.curves
        closed = self.curve_path.closed
        left = curves[self._mod(index - 1)]
        right = curves[index]

        left_end_tangent = normalize(left.tangent_at(1.0))
        right_start_tangent = normalize(right.tangent_at(0.0))
        if is_zero(left_end_tangent) or is_zero(right_start_tangent):
            debug.log(f"corner {index} skipped, degenerate curve", tag="smoother")
            return None
        if dot(left_end_tangent, right_start_tangent) > MAX_SMOOTH_DOT:
            return None

        # The radius may not pass the middle of a curve, except at open ends.
        left_length = left.get_length()
        right_length = right.get_length()
        is_first = not closed and index == 1
        is_last = not closed and index == len(curves) - 1
        max_left = left_length if is_first else left_length / 2.0
        max_right = right_length if is_last else right_length / 2.0
        left_radius = min(self.radius, max_left)
        right_radius = min(self.radius, max_right)

        left_t = left.t_at_length(left_length - left_radius)
        right_t = right.t_at_length(right_radius)
        left_point = left.point_at(left_t)
        right_point = right.point_at(right_t)

        intersection = RadialLine(left_point, left.tangent_at(left_t)).intersect(
            RadialLine(right_point, right.tangent_at(right_t))
        )

        return SmoothCorner(
            left_t=left_t,
            right_t=right_t,
            left_point=left_point,
            right_point=right_point,
            left_radius=left_radius,
            right_radius=right_radius,
            q_point=None if intersection is None else intersection.point,
        )

    def _calc_arc_rate(
        self,
        corner: SmoothCorner,
        index: int,
        corners: list[SmoothCorner | None],
    ) -> float:
        """Close to 1 when little of the neighboring curves stays unrounded."""
        prev = corners[self._mod(index - 1)]
        following = corners[self._mod(index + 1)]
        left_curve = self.curve_path.curves[self._mod(index - 1)]
        right_curve = self.curve_path.curves[index]

        left_rest = left_curve.get_length() - corner.left_radius
        left_rest -= prev.right_radius if prev is not None else 0.0
        right_rest = right_curve.get_length() - corner.right_radius
        right_rest -= following.left_radius if following is not None else 0.0
        left_rest = max(0.0, left_rest)
        right_rest = max(0.0, right_rest)

        left_rate = 1.0 - left_rest / (left_rest + corner.left_radius + 0.0001)
        right_rate = 1.0 - right_rest / (right_rest + corner.right_radius + 0.0001)
        return max(left_rate, right_rate)
