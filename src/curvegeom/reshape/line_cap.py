from __future__ import annotations

from ..algebra import RadialLine, distance, is_zero, normalize, rotate_quarter
from ..curves import CubicBezierCurve
from ..types import Point2
from .line_join import ARC_TENSION


def make_round_line_cap_curves(
    radial1: RadialLine,
    radial2: RadialLine,
) -> tuple[CubicBezierCurve, CubicBezierCurve] | None:
    """Two quarter-circle cubics from `radial1.point` around to `radial2.point`.

    Both radials point out of the stroke end. Returns None when the cap is
    degenerate (zero width, or sides running in opposite directions).
    """
    radius = distance(radial1.point, radial2.point) / 2.0
    vector = normalize(radial1.vector + radial2.vector) * radius
    if radius == 0 or is_zero(vector):
        return None

    center_point = (radial1.point + radial2.point) / 2.0 + vector
    center_radial = RadialLine(center_point, rotate_quarter(vector, 1))

    intersection1 = radial1.intersect(center_radial)
    intersection2 = radial2.intersect(center_radial)
    if intersection1 is None or intersection2 is None:
        return None
    q1 = intersection1.point
    q2 = intersection2.point

    return (
        CubicBezierCurve(
            radial1.point,
            radial1.point + (q1 - radial1.point) * ARC_TENSION,
            center_point + (q1 - center_point) * ARC_TENSION,
            center_point,
        ),
        CubicBezierCurve(
            center_point,
            center_point + (q2 - center_point) * ARC_TENSION,
            radial2.point + (q2 - radial2.point) * ARC_TENSION,
            radial2.point,
        ),
    )


def make_square_line_cap_points(radial1: RadialLine, radial2: RadialLine) -> tuple[Point2, Point2]:
    """Both corners of a square cap, half the stroke width out from each side."""
    half = distance(radial1.point, radial2.point) / 2.0
    return (
        radial1.point + radial1.vector * half,
        radial2.point + radial2.vector * half,
    )
