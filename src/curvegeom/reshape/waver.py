from __future__ import annotations

import math

from ..algebra import normalize, rotate_quarter
from ..curve_path import CurvePath
from ..curves import Curve, LineCurve
from .smoother import CurvePathSmoother


class CurvePathWaver:
    """Turn every curve into a zig-zag of period `wave_length`.

    Peaks sit `amplitude_rate * wave_length` off the curve, alternating sides.
    Each curve gets its own whole number of waves, so the phase restarts at
    every curve joint. A positive `smooth_rate` rounds the zig-zag corners,
    up to circular arcs at 1.
    """

    def __init__(
        self,
        curve_path: CurvePath,
        wave_length: float,
        amplitude_rate: float,
        smooth_rate: float = 0.0,
    ) -> None:
        if wave_length <= 0:
            raise ValueError("wave_length must be positive")
        self.curve_path = curve_path
        self.wave_length = wave_length
        self.amplitude_rate = amplitude_rate
        self.smooth_rate = smooth_rate

    def generate(self) -> CurvePath:
        path = self._generate_wave_polyline()
        if self.smooth_rate:
            radius = (
                self.wave_length
                * math.sqrt(1.0 + self.amplitude_rate**2)
                / 2.0
                * self.smooth_rate
            )
            path = CurvePathSmoother(path, radius).generate()
        return path

    def _generate_wave_polyline(self) -> CurvePath:
        amplitude = self.amplitude_rate * self.wave_length
        curves: list[Curve] = []

        for curve in self.curve_path.curves:
            start = curve.start_point
            divisions = math.ceil(curve.get_length() / self.wave_length)

            for i in range(divisions):
                t = curve.map_u2t((i + 0.5) / divisions)
                flag = -1.0 if i % 2 == 0 else 1.0
                normal = rotate_quarter(normalize(curve.tangent_at(t)), 1)
                peak = curve.point_at(t) + normal * (amplitude * flag)

                curves.append(LineCurve(start, peak))
                start = peak

            curves.append(LineCurve(start, curve.end_point))

        return CurvePath.from_curves(curves, close=self.curve_path.closed)
