from __future__ import annotations

import math

from ..algebra import RadialLine, dot
from ..curves import CubicBezierCurve
from ..types import LineJoin, Point2

# Handle length of a cubic approximating a quarter circle, as a rate of the
# distance to the corner point: `(1 - sqrt(2) / 2) * 8 / 3`.
ARC_TENSION = 0.552


def calc_miter_ratio(radial1: RadialLine, radial2: RadialLine) -> float:
    """Miter length over stroke width, `1 / sin(theta / 2)`.

    `radial1` leaves the first edge forward and `radial2` leaves the second
    edge backward, so `theta` is the angle between the two edges.
    """
    cos_theta = min(max(dot(radial1.vector, radial2.vector), -1.0), 1.0)
    sin_half = math.sin(math.acos(cos_theta) / 2.0)
    if sin_half == 0:
        return math.inf
    return 1.0 / sin_half


def make_round_line_join(start: Point2, end: Point2, tip: Point2) -> CubicBezierCurve:
    return CubicBezierCurve(
        start,
        start + (tip - start) * ARC_TENSION,
        end + (tip - end) * ARC_TENSION,
        end,
    )


def resolve_line_join(
    radial1: RadialLine,
    radial2: RadialLine,
    tip: Point2,
    line_join: LineJoin,
    miter_limit: float,
) -> list[Point2] | CubicBezierCurve:
    """Geometry between `radial1.point` and `radial2.point` for an outer corner.

    Returns the extra polyline points (the miter tip, or none for a bevel),
    or a cubic for a round join. A miter over the limit falls back to bevel.
    """
    if line_join == "round":
        return make_round_line_join(radial1.point, radial2.point, tip)
    if line_join == "miter" and calc_miter_ratio(radial1, radial2) <= miter_limit:
        return [tip]
    return []
