from .dash_array import DashArrayGenerator, DashItem
from .options import GradientStroke, ReshapeOptions, SmoothOptions, StrokeStyle, WaveOptions
from .reshape import ReshapedPaths, reshape_curve_path
from .smoother import CurvePathSmoother
from .stroker import GradientWidthStroker
from .waver import CurvePathWaver

__all__ = [
    "CurvePathSmoother",
    "CurvePathWaver",
    "DashArrayGenerator",
    "DashItem",
    "GradientStroke",
    "GradientWidthStroker",
    "ReshapeOptions",
    "ReshapedPaths",
    "SmoothOptions",
    "StrokeStyle",
    "WaveOptions",
    "reshape_curve_path",
]
