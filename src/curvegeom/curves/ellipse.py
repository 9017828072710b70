from __future__ import annotations

import math
from typing import ClassVar

import numpy as np

from ..algebra import frozen_point, is_mirrored, transform_point
from ..numeric import pick_periodic_values_in_range
from ..types import AffineMatrix, CurveType, EllipseData, Point2, Vector2
from .arc_parameter import calc_cubic_piece_count, calc_ellipse_parameter, transform_ellipse_axes
from .base import Curve
from .cubic_bezier import CubicBezierCurve


class EllipseCurve(Curve):
    """Elliptical arc in SVG endpoint form, rotated by `x_axis_angle` radians."""

    curve_type: ClassVar[CurveType] = CurveType.ELLIPSE_TO

    def __init__(
        self,
        start_point: Point2,
        end_point: Point2,
        radius: Vector2 | tuple[float, float],
        x_axis_angle: float,
        large_arc_flag: int,
        clockwise_flag: int,
    ) -> None:
        radius_arr = frozen_point(radius)
        if not (radius_arr[0] > 0 and radius_arr[1] > 0):
            raise ValueError("ellipse radii must be positive")
        super().__init__(start_point, end_point)
        self.radius = radius_arr
        self.x_axis_angle = float(x_axis_angle)
        self.large_arc_flag = 1 if large_arc_flag else 0
        self.clockwise_flag = 1 if clockwise_flag else 0

        parameter = calc_ellipse_parameter(
            self.start_point,
            self.end_point,
            self.radius,
            self.x_axis_angle,
            self.large_arc_flag,
            self.clockwise_flag,
        )
        self.center = frozen_point(parameter.center)
        self.start_angle = parameter.start_angle
        self.end_angle = parameter.end_angle

    @property
    def angle_span(self) -> float:
        return self.end_angle - self.start_angle

    def _angle_at(self, t: float) -> float:
        return self.start_angle + self.angle_span * t

    def point_at(self, t: float) -> Point2:
        angle = self._angle_at(t)
        rx, ry = float(self.radius[0]), float(self.radius[1])
        cos_psi = math.cos(self.x_axis_angle)
        sin_psi = math.sin(self.x_axis_angle)
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return self.center + np.array(
            [
                rx * cos_psi * cos_a - ry * sin_psi * sin_a,
                rx * sin_psi * cos_a + ry * cos_psi * sin_a,
            ]
        )

    def tangent_at(self, t: float) -> Vector2:
        angle = self._angle_at(t)
        rx, ry = float(self.radius[0]), float(self.radius[1])
        cos_psi = math.cos(self.x_axis_angle)
        sin_psi = math.sin(self.x_axis_angle)
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return np.array(
            [
                -rx * sin_a * cos_psi - ry * cos_a * sin_psi,
                -rx * sin_a * sin_psi + ry * cos_a * cos_psi,
            ]
        ) * self.angle_span

    def curvature_at(self, t: float) -> float:
        angle = self._angle_at(t)
        rx, ry = float(self.radius[0]), float(self.radius[1])
        sin_a = math.sin(angle)
        cos_a = math.cos(angle)
        return rx * ry / (rx * rx * sin_a * sin_a + ry * ry * cos_a * cos_a) ** 1.5

    def _extreme_ts(self, angle: float) -> list[float]:
        if self.angle_span == 0:
            return []
        lo = min(self.start_angle, self.end_angle)
        hi = max(self.start_angle, self.end_angle)
        ts = [
            (value - self.start_angle) / self.angle_span
            for value in pick_periodic_values_in_range(angle, math.pi, lo, hi)
        ]
        return sorted(t for t in ts if 0 < t < 1)

    def _calc_x_extreme_ts(self) -> list[float]:
        rx, ry = float(self.radius[0]), float(self.radius[1])
        psi = self.x_axis_angle
        return self._extreme_ts(math.atan2(-ry * math.sin(psi), rx * math.cos(psi)))

    def _calc_y_extreme_ts(self) -> list[float]:
        rx, ry = float(self.radius[0]), float(self.radius[1])
        psi = self.x_axis_angle
        return self._extreme_ts(math.atan2(ry * math.cos(psi), rx * math.sin(psi)))

    def _part_of(self, start_t: float, end_t: float) -> EllipseCurve:
        span = self.angle_span * (end_t - start_t)
        clockwise_flag = self.clockwise_flag if end_t >= start_t else 1 - self.clockwise_flag
        return EllipseCurve(
            self.point_at(start_t),
            self.point_at(end_t),
            self.radius,
            self.x_axis_angle,
            1 if abs(span) > math.pi else 0,
            clockwise_flag,
        )

    def transform(self, matrix: AffineMatrix) -> EllipseCurve:
        radius, x_axis_angle = transform_ellipse_axes(matrix, self.radius, self.x_axis_angle)
        clockwise_flag = 1 - self.clockwise_flag if is_mirrored(matrix) else self.clockwise_flag
        return EllipseCurve(
            transform_point(matrix, self.start_point),
            transform_point(matrix, self.end_point),
            radius,
            x_axis_angle,
            self.large_arc_flag,
            clockwise_flag,
        )

    def to_cubic_bezier_curves(self) -> list[CubicBezierCurve]:
        count = calc_cubic_piece_count(self.angle_span)
        curves: list[CubicBezierCurve] = []

        for i in range(count):
            start_t = i / count
            end_t = (i + 1) / count
            p0 = self.point_at(start_t)
            p3 = self.point_at(end_t)
            tan0 = self.tangent_at(start_t)
            tan3 = self.tangent_at(end_t)
            middle = self.point_at((start_t + end_t) / 2.0)

            # P(0.5) = (p0 + 3p1 + 3p2 + p3) / 8 with p1 = p0 + l0*tan0 and
            # p2 = p3 - l3*tan3 gives a 2x2 system in (l0, l3).
            target = (middle - (p0 + p3) / 2.0) * (8.0 / 3.0)
            system = np.column_stack([tan0, -tan3])
            (l0, l3), *_ = np.linalg.lstsq(system, target, rcond=None)

            curves.append(CubicBezierCurve(p0, p0 + tan0 * l0, p3 - tan3 * l3, p3))

        return curves

    def to_json(self) -> EllipseData:
        return {
            "type": CurveType.ELLIPSE_TO,
            "x": float(self.end_point[0]),
            "y": float(self.end_point[1]),
            "rx": float(self.radius[0]),
            "ry": float(self.radius[1]),
            "xAxisAngle": self.x_axis_angle,
            "largeArcFlag": self.large_arc_flag,
            "clockwiseFlag": self.clockwise_flag,
            "cx": float(self.center[0]),
            "cy": float(self.center[1]),
            "startAngle": self.start_angle,
            "endAngle": self.end_angle,
        }

    def _shape_key(self) -> tuple[float, ...]:
        return (
            *map(float, self.start_point),
            *map(float, self.end_point),
            *map(float, self.radius),
            self.x_axis_angle,
            self.large_arc_flag,
            self.clockwise_flag,
        )
