from __future__ import annotations

import math
from typing import ClassVar

import numpy as np

from ..algebra import frozen_point, is_mirrored, is_similar, similarity_scale, transform_point
from ..numeric import (
    pick_closest_periodic_value_in_range,
    pick_periodic_values_in_range,
)
from ..types import AffineMatrix, ArcData, CurveType, Point2, Points, Vector2
from .arc_parameter import calc_arc_parameter, calc_cubic_piece_count, transform_ellipse_axes
from .base import Curve, calc_curvature_adaptive_divisions
from .cubic_bezier import CubicBezierCurve
from .ellipse import EllipseCurve


class ArcCurve(Curve):
    """Circular arc in SVG endpoint form.

    Center and angles are recovered once at construction. `t` interpolates the
    angle linearly, so it is already proportional to arc length.
    """

    curve_type: ClassVar[CurveType] = CurveType.ARC_TO

    def __init__(
        self,
        start_point: Point2,
        end_point: Point2,
        radius: float,
        large_arc_flag: int,
        clockwise_flag: int,
    ) -> None:
        if not radius > 0:
            raise ValueError("arc radius must be positive")
        super().__init__(start_point, end_point)
        self.radius = float(radius)
        self.large_arc_flag = 1 if large_arc_flag else 0
        self.clockwise_flag = 1 if clockwise_flag else 0

        parameter = calc_arc_parameter(
            self.start_point,
            self.end_point,
            self.radius,
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

    def _t_at_angle(self, angle: float) -> float:
        return (angle - self.start_angle) / self.angle_span

    def point_at(self, t: float) -> Point2:
        angle = self._angle_at(t)
        return self.center + self.radius * np.array([math.cos(angle), math.sin(angle)])

    def tangent_at(self, t: float) -> Vector2:
        angle = self._angle_at(t)
        return np.array([-math.sin(angle), math.cos(angle)]) * (self.radius * self.angle_span)

    def normal_at(self, t: float, clockwise_flag: int) -> Vector2:
        angle = self._angle_at(t)
        radial = np.array([math.cos(angle), math.sin(angle)])
        if self.clockwise_flag == (1 if clockwise_flag else 0):
            return -radial
        return radial

    def curvature_at(self, t: float = 0.0) -> float:
        return 1.0 / self.radius

    def get_length(self) -> float:
        return abs(self.angle_span) * self.radius

    def get_lengths(self, divisions: int | None = None) -> np.ndarray:
        n = self._divisions(divisions)
        return self.get_length() * np.arange(1, n + 1) / n

    def map_u2t(self, u: float) -> float:
        return float(u)

    def map_t2u(self, t: float) -> float:
        return float(t)

    def get_curvature_adaptive_ts(
        self,
        max_pixel_diff: float = 0.25,
        scaling: float = 1.0,
        divisions: int | None = None,
    ) -> list[float]:
        # Constant curvature, so uniform division is already optimal.
        count = calc_curvature_adaptive_divisions(
            math.sqrt(min(1.0 / self.radius, scaling)),
            self.get_length(),
            max_pixel_diff,
            scaling,
        )
        return [d / count for d in range(count + 1)]

    def get_curvature_adaptive_points(
        self,
        max_pixel_diff: float = 0.25,
        scaling: float = 1.0,
        divisions: int | None = None,
    ) -> Points:
        ts = self.get_curvature_adaptive_ts(max_pixel_diff, scaling, divisions)
        inner = [self.point_at(t) for t in ts[1:-1]]
        return np.vstack([self.start_point, *inner, self.end_point])

    def _angle_range(self) -> tuple[float, float]:
        return min(self.start_angle, self.end_angle), max(self.start_angle, self.end_angle)

    def _angles_to_ts(self, angles: list[float]) -> list[float]:
        if self.angle_span == 0:
            return []
        return sorted({self._t_at_angle(angle) for angle in angles})

    def _pick_angles(self, values: list[float], period: float) -> list[float]:
        lo, hi = self._angle_range()
        angles: list[float] = []
        for value in values:
            angles.extend(pick_periodic_values_in_range(value, period, lo, hi))
        return angles

    def _calc_x_extreme_ts(self) -> list[float]:
        ts = self._angles_to_ts(self._pick_angles([0.0], math.pi))
        return [t for t in ts if 0 < t < 1]

    def _calc_y_extreme_ts(self) -> list[float]:
        ts = self._angles_to_ts(self._pick_angles([math.pi / 2.0], math.pi))
        return [t for t in ts if 0 < t < 1]

    def closest_point_to(self, point: Point2) -> Point2:
        if self.angle_span == 0:
            return np.array(self.start_point)
        diff = np.asarray(point, dtype=np.float64) - self.center
        angle = math.atan2(float(diff[1]), float(diff[0]))
        lo, hi = self._angle_range()
        closest = pick_closest_periodic_value_in_range(angle, math.pi * 2.0, lo, hi)
        return self.point_at(self._t_at_angle(closest))

    def calc_ts_by_x(self, x: float) -> list[float]:
        cos_value = (x - float(self.center[0])) / self.radius
        if abs(cos_value) > 1:
            return []
        angle = math.acos(cos_value)
        return self._angles_to_ts(self._pick_angles([angle, -angle], math.pi * 2.0))

    def calc_ts_by_y(self, y: float) -> list[float]:
        sin_value = (y - float(self.center[1])) / self.radius
        if abs(sin_value) > 1:
            return []
        angle = math.asin(sin_value)
        return self._angles_to_ts(self._pick_angles([angle, math.pi - angle], math.pi * 2.0))

    def _part_of(self, start_t: float, end_t: float) -> ArcCurve:
        span = self.angle_span * (end_t - start_t)
        clockwise_flag = self.clockwise_flag if end_t >= start_t else 1 - self.clockwise_flag
        return ArcCurve(
            self.point_at(start_t),
            self.point_at(end_t),
            self.radius,
            1 if abs(span) > math.pi else 0,
            clockwise_flag,
        )

    def transform(self, matrix: AffineMatrix) -> ArcCurve | EllipseCurve:
        start = transform_point(matrix, self.start_point)
        end = transform_point(matrix, self.end_point)
        clockwise_flag = 1 - self.clockwise_flag if is_mirrored(matrix) else self.clockwise_flag

        if is_similar(matrix):
            return ArcCurve(
                start,
                end,
                self.radius * similarity_scale(matrix),
                self.large_arc_flag,
                clockwise_flag,
            )

        radius, x_axis_angle = transform_ellipse_axes(
            matrix, np.array([self.radius, self.radius]), 0.0
        )
        return EllipseCurve(start, end, radius, x_axis_angle, self.large_arc_flag, clockwise_flag)

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

            # Symmetric piece: P(0.5) - (p0 + p3) / 2 = 3/8 * l * (tan0 - tan3).
            tangent_diff = float(np.linalg.norm(tan0 - tan3))
            if tangent_diff == 0:
                handle = (end_t - start_t) / 3.0
            else:
                middle = self.point_at((start_t + end_t) / 2.0)
                offset = float(np.linalg.norm(middle - (p0 + p3) / 2.0))
                handle = offset / tangent_diff * 8.0 / 3.0

            curves.append(CubicBezierCurve(p0, p0 + tan0 * handle, p3 - tan3 * handle, p3))

        return curves

    def to_json(self) -> ArcData:
        return {
            "type": CurveType.ARC_TO,
            "x": float(self.end_point[0]),
            "y": float(self.end_point[1]),
            "r": self.radius,
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
            self.radius,
            self.large_arc_flag,
            self.clockwise_flag,
        )
