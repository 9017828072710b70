from __future__ import annotations

from typing import cast

import numpy as np

from ..utils import debug
from .curve_path import CurvePath
from .curves import CubicBezierCurve
from .numeric import linear_step

# Breakpoints closer than this (as a fraction of length) are merged.
BREAKPOINT_EPSILON = 1e-9


def _length_fractions(path: CurvePath) -> np.ndarray:
    total = path.get_length()
    if total == 0:
        raise ValueError("cannot mix a zero-length path")
    return np.asarray(path.get_lengths()[:-1], dtype=np.float64) / total


def merge_breakpoints(*fractions: np.ndarray) -> list[float]:
    """Sorted union of `[0, 1]` and every fraction, near-duplicates dropped."""
    values = sorted({0.0, 1.0, *(float(v) for arr in fractions for v in arr)})
    merged = [values[0]]
    for value in values[1:]:
        if value - merged[-1] > BREAKPOINT_EPSILON:
            merged.append(value)
    merged[-1] = 1.0
    return merged


def cut_at_breakpoints(path: CurvePath, breakpoints: list[float]) -> list[CubicBezierCurve]:
    """Split a cubic-only path so a piece boundary sits at every `u` breakpoint."""
    lengths = path.get_lengths()
    total = float(lengths[-1])
    pieces: list[CubicBezierCurve] = []

    for start_u, end_u in zip(breakpoints, breakpoints[1:]):
        index, _ = path.map_global_u_to_local((start_u + end_u) / 2.0)
        curve = path.curves[index]
        curve_start = float(lengths[index - 1]) if index > 0 else 0.0
        curve_end = float(lengths[index])

        local_start = linear_step(start_u * total, curve_start, curve_end)
        local_end = linear_step(end_u * total, curve_start, curve_end)
        piece = curve.part_of(curve.map_u2t(local_start), curve.map_u2t(local_end))
        pieces.append(cast(CubicBezierCurve, piece))

    return pieces


class CurvePathMixer:
    """Linear interpolation between two paths of any shape.

    Both paths become cubic beziers. When the curve counts differ, each is cut
    at the union of both paths' length breakpoints so the pieces pair up.
    """

    def __init__(self, from_path: CurvePath, to_path: CurvePath) -> None:
        if from_path.closed != to_path.closed:
            raise ValueError("cannot mix a closed path with an open path")
        self.closed = from_path.closed

        from_cubic = from_path.to_cubic_bezier_curve_path()
        to_cubic = to_path.to_cubic_bezier_curve_path()

        if from_cubic.curve_count == to_cubic.curve_count:
            self.from_curves = [c for c in from_cubic.curves if isinstance(c, CubicBezierCurve)]
            self.to_curves = [c for c in to_cubic.curves if isinstance(c, CubicBezierCurve)]
        else:
            breakpoints = merge_breakpoints(
                _length_fractions(from_cubic), _length_fractions(to_cubic)
            )
            self.from_curves = cut_at_breakpoints(from_cubic, breakpoints)
            self.to_curves = cut_at_breakpoints(to_cubic, breakpoints)
            debug.log(
                f"cut {from_cubic.curve_count} and {to_cubic.curve_count} curves "
                f"into {len(self.from_curves)} pairs",
                tag="mixer",
            )

    def mix(self, rate: float) -> CurvePath:
        curves = [a.mix(b, rate) for a, b in zip(self.from_curves, self.to_curves)]
        return CurvePath.from_curves(curves, close=self.closed)

    __call__ = mix
