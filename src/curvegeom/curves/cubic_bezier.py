from __future__ import annotations

import math
from typing import ClassVar

import numpy as np

from ..algebra import cross, frozen_point, transform_point
from ..numeric import solve_quadratic
from ..types import AffineMatrix, CubicBezierData, CurveType, Point2, Vector2
from .base import Curve


class CubicBezierCurve(Curve):
    curve_type: ClassVar[CurveType] = CurveType.CUBIC_BEZIER_TO

    def __init__(
        self,
        start_point: Point2,
        control_point1: Point2,
        control_point2: Point2,
        end_point: Point2,
    ) -> None:
        super().__init__(start_point, end_point)
        self.control_point1 = frozen_point(control_point1)
        self.control_point2 = frozen_point(control_point2)

    def point_at(self, t: float) -> Point2:
        mt = 1.0 - t
        return (
            self.start_point * (mt * mt * mt)
            + self.control_point1 * (3.0 * mt * mt * t)
            + self.control_point2 * (3.0 * mt * t * t)
            + self.end_point * (t * t * t)
        )

    def tangent_at(self, t: float) -> Vector2:
        mt = 1.0 - t
        return (
            (self.control_point1 - self.start_point) * (3.0 * mt * mt)
            + (self.control_point2 - self.control_point1) * (6.0 * mt * t)
            + (self.end_point - self.control_point2) * (3.0 * t * t)
        )

    def _second_derivative_at(self, t: float) -> Vector2:
        p0 = self.start_point
        p1 = self.control_point1
        p2 = self.control_point2
        p3 = self.end_point
        return (p2 - 2.0 * p1 + p0) * (6.0 * (1.0 - t)) + (p3 - 2.0 * p2 + p1) * (6.0 * t)

    def curvature_at(self, t: float) -> float:
        d1 = self.tangent_at(t)
        speed = math.hypot(float(d1[0]), float(d1[1]))
        if speed == 0:
            return math.inf
        return abs(cross(d1, self._second_derivative_at(t))) / speed**3

    def _calc_axis_extreme_ts(self, axis: int) -> list[float]:
        p0 = float(self.start_point[axis])
        p1 = float(self.control_point1[axis])
        p2 = float(self.control_point2[axis])
        p3 = float(self.end_point[axis])

        # Derivative is a*t^2 + b*t + c.
        a = -3.0 * p0 + 9.0 * p1 - 9.0 * p2 + 3.0 * p3
        b = 6.0 * p0 - 12.0 * p1 + 6.0 * p2
        c = -3.0 * p0 + 3.0 * p1

        if a == 0:
            roots: tuple[float, ...] = () if b == 0 else (-c / b,)
        else:
            roots = solve_quadratic(a, b, c) or ()

        return [t for t in roots if 0 < t < 1]

    def _calc_x_extreme_ts(self) -> list[float]:
        return self._calc_axis_extreme_ts(0)

    def _calc_y_extreme_ts(self) -> list[float]:
        return self._calc_axis_extreme_ts(1)

    def _part_of(self, start_t: float, end_t: float) -> CubicBezierCurve:
        # Endpoint tangents scaled to the sub-range keep the shape exact.
        scale = (end_t - start_t) / 3.0
        start = self.point_at(start_t)
        end = self.point_at(end_t)
        return CubicBezierCurve(
            start,
            start + self.tangent_at(start_t) * scale,
            end - self.tangent_at(end_t) * scale,
            end,
        )

    def transform(self, matrix: AffineMatrix) -> CubicBezierCurve:
        return CubicBezierCurve(
            transform_point(matrix, self.start_point),
            transform_point(matrix, self.control_point1),
            transform_point(matrix, self.control_point2),
            transform_point(matrix, self.end_point),
        )

    def to_cubic_bezier_curves(self) -> list[CubicBezierCurve]:
        return [self]

    def mix(self, other: CubicBezierCurve, rate: float) -> CubicBezierCurve:
        """Blend every control point towards `other`."""
        return CubicBezierCurve(
            self.start_point + (other.start_point - self.start_point) * rate,
            self.control_point1 + (other.control_point1 - self.control_point1) * rate,
            self.control_point2 + (other.control_point2 - self.control_point2) * rate,
            self.end_point + (other.end_point - self.end_point) * rate,
        )

    def to_json(self) -> CubicBezierData:
        return {
            "type": CurveType.CUBIC_BEZIER_TO,
            "x": float(self.end_point[0]),
            "y": float(self.end_point[1]),
            "cx1": float(self.control_point1[0]),
            "cy1": float(self.control_point1[1]),
            "cx2": float(self.control_point2[0]),
            "cy2": float(self.control_point2[1]),
        }

    def _shape_key(self) -> tuple[float, ...]:
        points = np.concatenate(
            [self.start_point, self.control_point1, self.control_point2, self.end_point]
        )
        return tuple(float(v) for v in points)
