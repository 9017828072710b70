from __future__ import annotations

from typing import ClassVar

import numpy as np

from ..algebra import transform_point
from ..numeric import linear_step
from ..types import AffineMatrix, CurveType, LineData, Point2, Points, Vector2
from .base import Curve
from .cubic_bezier import CubicBezierCurve


class LineCurve(Curve):
    """Straight segment; `u` and `t` coincide."""

    DEFAULT_DIVISIONS: ClassVar[int] = 1
    curve_type: ClassVar[CurveType] = CurveType.LINE_TO

    def point_at(self, t: float) -> Point2:
        return self.start_point + (self.end_point - self.start_point) * t

    def tangent_at(self, t: float) -> Vector2:
        return self.end_point - self.start_point

    def curvature_at(self, t: float) -> float:
        return 0.0

    def get_lengths(self, divisions: int | None = None) -> np.ndarray:
        n = self._divisions(divisions)
        return self.get_length() * np.arange(1, n + 1) / n

    def get_length(self) -> float:
        return float(np.linalg.norm(self.end_point - self.start_point))

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
        return [0.0, 1.0]

    def get_curvature_adaptive_points(
        self,
        max_pixel_diff: float = 0.25,
        scaling: float = 1.0,
        divisions: int | None = None,
    ) -> Points:
        return np.vstack([self.start_point, self.end_point])

    def _calc_x_extreme_ts(self) -> list[float]:
        return []

    def _calc_y_extreme_ts(self) -> list[float]:
        return []

    def closest_point_to(self, point: Point2) -> Point2:
        direction = self.end_point - self.start_point
        length2 = float(np.dot(direction, direction))
        if length2 == 0:
            return np.array(self.start_point)
        t = float(np.dot(point - self.start_point, direction)) / length2
        return self.point_at(linear_step(t, 0.0, 1.0))

    def calc_ts_by_x(self, x: float) -> list[float]:
        return self._calc_ts_by_value(float(self.start_point[0]), float(self.end_point[0]), x)

    def calc_ts_by_y(self, y: float) -> list[float]:
        return self._calc_ts_by_value(float(self.start_point[1]), float(self.end_point[1]), y)

    @staticmethod
    def _calc_ts_by_value(start: float, end: float, value: float) -> list[float]:
        if start == end:
            return []
        t = (value - start) / (end - start)
        if 0 <= t <= 1:
            return [t]
        return []

    def _solve_piece(
        self,
        axis: int,
        value: float,
        start_t: float,
        end_t: float,
        start_v: float,
        end_v: float,
    ) -> float:
        return start_t + (end_t - start_t) * (value - start_v) / (end_v - start_v)

    def _part_of(self, start_t: float, end_t: float) -> LineCurve:
        return LineCurve(self.point_at(start_t), self.point_at(end_t))

    def transform(self, matrix: AffineMatrix) -> LineCurve:
        return LineCurve(
            transform_point(matrix, self.start_point),
            transform_point(matrix, self.end_point),
        )

    def to_cubic_bezier_curves(self) -> list[CubicBezierCurve]:
        return [
            CubicBezierCurve(
                self.start_point,
                self.point_at(1.0 / 3.0),
                self.point_at(2.0 / 3.0),
                self.end_point,
            )
        ]

    def to_json(self) -> LineData:
        return {
            "type": CurveType.LINE_TO,
            "x": float(self.end_point[0]),
            "y": float(self.end_point[1]),
        }

    def _shape_key(self) -> tuple[float, ...]:
        return (*map(float, self.start_point), *map(float, self.end_point))
