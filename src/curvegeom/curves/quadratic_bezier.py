from __future__ import annotations

import math
from typing import ClassVar

import numpy as np

from ..algebra import cross, frozen_point, transform_point
from ..types import AffineMatrix, CurveType, Point2, QuadraticBezierData, Vector2
from .base import Curve
from .cubic_bezier import CubicBezierCurve


class QuadraticBezierCurve(Curve):
    curve_type: ClassVar[CurveType] = CurveType.QUADRATIC_BEZIER_TO

    def __init__(self, start_point: Point2, control_point: Point2, end_point: Point2) -> None:
        super().__init__(start_point, end_point)
        self.control_point = frozen_point(control_point)

    def point_at(self, t: float) -> Point2:
        mt = 1.0 - t
        return (
            self.start_point * (mt * mt)
            + self.control_point * (2.0 * mt * t)
            + self.end_point * (t * t)
        )

    def tangent_at(self, t: float) -> Vector2:
        return (self.control_point - self.start_point) * (2.0 * (1.0 - t)) + (
            self.end_point - self.control_point
        ) * (2.0 * t)

    def curvature_at(self, t: float) -> float:
        d1 = self.tangent_at(t)
        speed = math.hypot(float(d1[0]), float(d1[1]))
        if speed == 0:
            return math.inf
        d2 = (self.end_point - 2.0 * self.control_point + self.start_point) * 2.0
        return abs(cross(d1, d2)) / speed**3

    def _calc_axis_extreme_ts(self, axis: int) -> list[float]:
        p0 = float(self.start_point[axis])
        p1 = float(self.control_point[axis])
        p2 = float(self.end_point[axis])

        denom = p0 - 2.0 * p1 + p2
        if denom == 0:
            return []
        t = (p0 - p1) / denom
        return [t] if 0 < t < 1 else []

    def _calc_x_extreme_ts(self) -> list[float]:
        return self._calc_axis_extreme_ts(0)

    def _calc_y_extreme_ts(self) -> list[float]:
        return self._calc_axis_extreme_ts(1)

    def _part_of(self, start_t: float, end_t: float) -> QuadraticBezierCurve:
        start = self.point_at(start_t)
        control = start + self.tangent_at(start_t) * ((end_t - start_t) / 2.0)
        return QuadraticBezierCurve(start, control, self.point_at(end_t))

    def transform(self, matrix: AffineMatrix) -> QuadraticBezierCurve:
        return QuadraticBezierCurve(
            transform_point(matrix, self.start_point),
            transform_point(matrix, self.control_point),
            transform_point(matrix, self.end_point),
        )

    def to_cubic_bezier_curves(self) -> list[CubicBezierCurve]:
        return [
            CubicBezierCurve(
                self.start_point,
                self.start_point + (self.control_point - self.start_point) * (2.0 / 3.0),
                self.end_point + (self.control_point - self.end_point) * (2.0 / 3.0),
                self.end_point,
            )
        ]

    def mix(self, other: QuadraticBezierCurve, rate: float) -> QuadraticBezierCurve:
        return QuadraticBezierCurve(
            self.start_point + (other.start_point - self.start_point) * rate,
            self.control_point + (other.control_point - self.control_point) * rate,
            self.end_point + (other.end_point - self.end_point) * rate,
        )

    def to_json(self) -> QuadraticBezierData:
        return {
            "type": CurveType.QUADRATIC_BEZIER_TO,
            "x": float(self.end_point[0]),
            "y": float(self.end_point[1]),
            "cx": float(self.control_point[0]),
            "cy": float(self.control_point[1]),
        }

    def _shape_key(self) -> tuple[float, ...]:
        points = np.concatenate([self.start_point, self.control_point, self.end_point])
        return tuple(float(v) for v in points)
