from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from ..algebra import Box, frozen_point, normalize, rotate_quarter
from ..numeric import lookup_x_rate_by_y_rate, lookup_y_rate_by_x_rate
from ..types import AffineMatrix, CurveData, CurveType, Point2, Points, Vector2

if TYPE_CHECKING:
    from .cubic_bezier import CubicBezierCurve

# Step used by the finite-difference defaults.
DIFF_STEP = 0.001
BISECTION_ITERATIONS = 12


class Curve(ABC):
    """A parametric curve segment from `start_point` to `end_point`.

    Two parameters run over [0, 1]: `t` is the variant's own generating
    parameter, `u` is proportional to arc length. Variants without a closed
    form map between them through a cumulative chord-length table sampled at
    `divisions` points. Curves are immutable; `part_of` and `transform` build
    new instances.
    """

    DEFAULT_DIVISIONS: ClassVar[int] = 12
    curve_type: ClassVar[CurveType]

    def __init__(self, start_point: Point2, end_point: Point2) -> None:
        self.start_point = frozen_point(start_point)
        self.end_point = frozen_point(end_point)
        self._lengths: dict[int, np.ndarray] = {}
        self._box: Box | None = None

    # Variant geometry

    @abstractmethod
    def point_at(self, t: float) -> Point2: ...

    @abstractmethod
    def _calc_x_extreme_ts(self) -> list[float]:
        """`t` values in (0, 1) where `dx/dt` is zero."""

    @abstractmethod
    def _calc_y_extreme_ts(self) -> list[float]:
        """`t` values in (0, 1) where `dy/dt` is zero."""

    @abstractmethod
    def _part_of(self, start_t: float, end_t: float) -> Curve: ...

    @abstractmethod
    def transform(self, matrix: AffineMatrix) -> Curve: ...

    @abstractmethod
    def to_cubic_bezier_curves(self) -> list[CubicBezierCurve]: ...

    @abstractmethod
    def to_json(self) -> CurveData: ...

    @abstractmethod
    def _shape_key(self) -> tuple[float, ...]:
        """Values compared by `equals`."""

    # Local differential geometry

    def tangent_at(self, t: float) -> Vector2:
        """Derivative with respect to `t`; its length is the local speed."""
        return (self.point_at(t + DIFF_STEP) - self.point_at(t)) / DIFF_STEP

    def normal_at(self, t: float, clockwise_flag: int) -> Vector2:
        return normalize(rotate_quarter(self.tangent_at(t), clockwise_flag))

    def curvature_at(self, t: float) -> float:
        p1 = self.point_at(t - DIFF_STEP)
        p2 = self.point_at(t)
        p3 = self.point_at(t + DIFF_STEP)

        # Circumcircle of three close points, 4 * area / (a * b * c).
        c = float(np.linalg.norm(p3 - p1))
        if c == 0:
            return 0.0
        twice_area = abs(
            p1[0] * (p2[1] - p3[1]) + p2[0] * (p3[1] - p1[1]) + p3[0] * (p1[1] - p2[1])
        )
        return float(8.0 * twice_area / c**3)

    # Length and the u <-> t maps

    def _divisions(self, divisions: int | None) -> int:
        n = self.DEFAULT_DIVISIONS if divisions is None else int(divisions)
        if n < 1:
            raise ValueError("divisions must be >= 1")
        return n

    def get_lengths(self, divisions: int | None = None) -> np.ndarray:
        """Cumulative chord lengths, one entry per division."""
        n = self._divisions(divisions)
        lengths = self._lengths.get(n)
        if lengths is None:
            points = self.get_points(n)
            lengths = np.cumsum(np.linalg.norm(np.diff(points, axis=0), axis=1))
            lengths.setflags(write=False)
            self._lengths[n] = lengths
        return lengths

    def get_length(self) -> float:
        return float(self.get_lengths()[-1])

    def map_u2t(self, u: float) -> float:
        return lookup_x_rate_by_y_rate(u, self.get_lengths())

    def map_t2u(self, t: float) -> float:
        return lookup_y_rate_by_x_rate(t, self.get_lengths())

    def t_at_length(self, length: float) -> float:
        total = self.get_length()
        if total == 0:
            return 0.0
        return self.map_u2t(length / total)

    def spaced_point_at(self, u: float) -> Point2:
        return self.point_at(self.map_u2t(u))

    def point_at_length(self, length: float) -> Point2:
        return self.point_at(self.t_at_length(length))

    # Sampling

    def get_points(self, divisions: int | None = None) -> Points:
        """`divisions + 1` points, uniform in `t`, endpoints exact."""
        n = self._divisions(divisions)
        inner = [self.point_at(d / n) for d in range(1, n)]
        return np.vstack([self.start_point, *inner, self.end_point])

    def get_spaced_ts(self, divisions: int | None = None) -> list[float]:
        """`divisions + 1` values of `t`, uniform in `u`."""
        n = self._divisions(divisions)
        return [0.0] + [self.map_u2t(d / n) for d in range(1, n + 1)]

    def get_spaced_points(self, divisions: int | None = None) -> Points:
        ts = self.get_spaced_ts(divisions)
        inner = [self.point_at(t) for t in ts[1:-1]]
        return np.vstack([self.start_point, *inner, self.end_point])

    def get_curvature_adaptive_ts(
        self,
        max_pixel_diff: float = 0.25,
        scaling: float = 1.0,
        divisions: int | None = None,
    ) -> list[float]:
        """Non-uniform `t` samples keeping chord sagitta under `max_pixel_diff`.

        A chord of arc length `s` on a circle of radius `R` deviates by about
        `s^2 / 8R`, so sample density follows `sqrt(curvature)`. Curvature is
        clamped to `scaling` so near-cusps do not explode the sample count.
        """
        n = self._divisions(divisions)
        samples = [
            math.sqrt(min(self.curvature_at((d - 0.5) / n), scaling))
            for d in range(1, n + 1)
        ]
        integral = np.cumsum(samples)
        average = float(integral[-1]) / n

        count = calc_curvature_adaptive_divisions(
            average, self.get_length(), max_pixel_diff, scaling
        )
        inner = [lookup_x_rate_by_y_rate(d / count, integral) for d in range(1, count)]
        return [0.0, *inner, 1.0]

    def get_curvature_adaptive_points(
        self,
        max_pixel_diff: float = 0.25,
        scaling: float = 1.0,
        divisions: int | None = None,
    ) -> Points:
        ts = self.get_curvature_adaptive_ts(max_pixel_diff, scaling, divisions)
        inner = [self.point_at(t) for t in ts[1:-1]]
        return np.vstack([self.start_point, *inner, self.end_point])

    # Derived curves

    def part_of(self, start_t: float, end_t: float) -> Curve:
        """The curve restricted to `[start_t, end_t]`.

        When `start_t > end_t` the result runs backwards.
        """
        if start_t <= 0 and end_t >= 1:
            return self
        return self._part_of(start_t, end_t)

    # Extremes, box and solving

    def calc_extreme_ts(self) -> list[float]:
        return sorted(set(self._calc_x_extreme_ts()) | set(self._calc_y_extreme_ts()))

    def get_box(self) -> Box:
        if self._box is None:
            points = [self.start_point, self.end_point]
            points.extend(self.point_at(t) for t in self.calc_extreme_ts())
            self._box = Box.from_points(points)
        return self._box

    def closest_point_to(self, point: Point2) -> Point2:
        """Coarse nearest sample, refined by bisection on the tangent sign."""
        n = self.DEFAULT_DIVISIONS
        points = self.get_points(n)
        d2 = np.sum((points - point) ** 2, axis=1)
        index = int(np.argmin(d2))
        min_t = index / n
        min_point = points[index]

        flag = 1 if float(np.dot(point - min_point, self.tangent_at(min_t))) > 0 else -1
        if (flag > 0 and index == n) or (flag < 0 and index == 0):
            return min_point

        # The nearest point lies between the seed and its neighbor on the
        # tangent side; the projected tangent changes sign there.
        lo, hi = sorted((min_t, min_t + flag / n))
        for _ in range(BISECTION_ITERATIONS):
            mid = (lo + hi) / 2.0
            if float(np.dot(point - self.point_at(mid), self.tangent_at(mid))) > 0:
                lo = mid
            else:
                hi = mid

        refined = self.point_at((lo + hi) / 2.0)
        if np.sum((refined - point) ** 2) < d2[index]:
            return refined
        return min_point

    def calc_ts_by_x(self, x: float) -> list[float]:
        return self._calc_ts_by_axis(0, x, self._calc_x_extreme_ts())

    def calc_ts_by_y(self, y: float) -> list[float]:
        return self._calc_ts_by_axis(1, y, self._calc_y_extreme_ts())

    def calc_ray_crossings(self, point: Point2) -> list[int]:
        """Signed crossings of the ray from `point` towards +x.

        Each monotonic piece covers the half-open y range `[min, max)`, so a
        ray through a joint between pieces or curves is counted once.
        """
        x = float(point[0])
        y = float(point[1])
        crossings: list[int] = []

        for start_t, end_t in self._monotonic_pieces(self._calc_y_extreme_ts()):
            start_y = float(self._exact_point_at(start_t)[1])
            end_y = float(self._exact_point_at(end_t)[1])
            if start_y == end_y or not (min(start_y, end_y) <= y < max(start_y, end_y)):
                continue

            t = self._solve_piece(1, y, start_t, end_t, start_y, end_y)
            if float(self._exact_point_at(t)[0]) >= x:
                crossings.append(1 if end_y > start_y else -1)

        return crossings

    def _exact_point_at(self, t: float) -> Point2:
        # Piece bounds at the ends must match neighbouring curves bit for bit.
        if t == 0:
            return self.start_point
        if t == 1:
            return self.end_point
        return self.point_at(t)

    @staticmethod
    def _monotonic_pieces(extreme_ts: list[float]) -> list[tuple[float, float]]:
        bounds = [0.0, *sorted(t for t in extreme_ts if 0 < t < 1), 1.0]
        return list(zip(bounds, bounds[1:]))

    def _calc_ts_by_axis(self, axis: int, value: float, extreme_ts: list[float]) -> list[float]:
        ts: list[float] = []

        for start_t, end_t in self._monotonic_pieces(extreme_ts):
            start_v = float(self._exact_point_at(start_t)[axis])
            end_v = float(self._exact_point_at(end_t)[axis])
            if start_v == end_v or not (min(start_v, end_v) <= value <= max(start_v, end_v)):
                continue

            t = self._solve_piece(axis, value, start_t, end_t, start_v, end_v)
            if not ts or ts[-1] != t:
                ts.append(t)

        return ts

    def _solve_piece(
        self,
        axis: int,
        value: float,
        start_t: float,
        end_t: float,
        start_v: float,
        end_v: float,
    ) -> float:
        if value == start_v:
            return start_t
        if value == end_v:
            return end_t

        flag = 1.0 if end_v > start_v else -1.0
        for _ in range(BISECTION_ITERATIONS):
            mid = (start_t + end_t) / 2.0
            if (float(self.point_at(mid)[axis]) - value) * flag < 0:
                start_t = mid
            else:
                end_t = mid
        return (start_t + end_t) / 2.0

    # Equality and encoding

    def equals(self, other: Curve) -> bool:
        return type(self) is type(other) and self._shape_key() == other._shape_key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Curve):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_json()})"


def calc_curvature_adaptive_divisions(
    average_curvature_sqrt: float,
    length: float,
    max_pixel_diff: float,
    scaling: float,
) -> int:
    """Number of chords keeping the sagitta under `max_pixel_diff` pixels.

    Sagitta of a chord with arc length `s` at radius `R` is about `s^2 / 8R`,
    hence `count = length / sqrt(8 * max_pixel_diff) * mean(sqrt(C)) * sqrt(scaling)`.
    """
    count = length / math.sqrt(8.0 * max_pixel_diff) * average_curvature_sqrt * math.sqrt(scaling)
    return max(math.floor(count), 1)
