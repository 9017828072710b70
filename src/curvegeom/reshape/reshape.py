from __future__ import annotations

from typing import NamedTuple

from ..curve_path import CurvePath
from ..curve_path_group import CurvePathGroup
from .options import ReshapeOptions, StrokeStyle
from .smoother import CurvePathSmoother
from .stroker import GradientWidthStroker
from .waver import CurvePathWaver


class ReshapedPaths(NamedTuple):
    # The reshaped center line, before stroking.
    continuous: CurvePath
    # The stroked outline, or `continuous` when no stroking is configured.
    result: CurvePath | CurvePathGroup


def reshape_curve_path(
    path: CurvePath,
    view_scaling: float = 1.0,
    style: StrokeStyle | None = None,
    options: ReshapeOptions | None = None,
) -> ReshapedPaths:
    """Apply `partial`, then `smooth`, then `wave`, then gradient stroking."""
    options = options or ReshapeOptions()
    continuous = path

    if options.partial is not None:
        continuous = continuous.part_of(*options.partial)

    if options.smooth is not None:
        continuous = CurvePathSmoother(
            continuous,
            options.smooth.radius,
            options.smooth.corner_indices,
        ).generate()

    if options.wave is not None:
        continuous = CurvePathWaver(
            continuous,
            options.wave.wave_length,
            options.wave.amplitude_rate,
            options.wave.smooth_rate,
        ).generate()

    result: CurvePath | CurvePathGroup = continuous
    if options.gradient_stroking is not None:
        result = GradientWidthStroker(
            continuous,
            view_scaling,
            options.gradient_stroking,
            style,
        ).generate()

    return ReshapedPaths(continuous, result)
