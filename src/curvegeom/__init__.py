from . import algebra, curves, export_svg, numeric, polygon, reshape, svg_io, svg_path_d
from .curve_path import CurvePath
from .curve_path_group import CurvePathGroup
from .path_mixer import CurvePathMixer

__all__ = [
    "CurvePath",
    "CurvePathGroup",
    "CurvePathMixer",
    "algebra",
    "curves",
    "export_svg",
    "numeric",
    "polygon",
    "reshape",
    "svg_io",
    "svg_path_d",
]
