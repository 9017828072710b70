from .arc import ArcCurve
from .arc_parameter import ArcParameter, calc_arc_parameter, calc_ellipse_parameter
from .base import Curve
from .cubic_bezier import CubicBezierCurve
from .ellipse import EllipseCurve
from .line import LineCurve
from .quadratic_bezier import QuadraticBezierCurve

__all__ = [
    "Curve",
    "LineCurve",
    "ArcCurve",
    "EllipseCurve",
    "QuadraticBezierCurve",
    "CubicBezierCurve",
    "ArcParameter",
    "calc_arc_parameter",
    "calc_ellipse_parameter",
]
