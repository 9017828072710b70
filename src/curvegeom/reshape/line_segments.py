from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..algebra import RadialLine, dot, normalize, points_equal, segment_intersection
from ..types import Point2, Vector2

# Offset points closer than this are treated as the same vertex.
VERTEX_EPSILON = 1e-9

ConnectionKind = Literal["vertex", "outer", "none"]


@dataclass(frozen=True)
class SegmentsConnection:
    """How the tail of one polyline meets the head of the next.

    `vertex`: the polylines cross; `list1` ends and `list2` starts at `point`.
    `outer`: the tangent rays meet ahead of both ends at `point`, where a line
    join goes between `list1[-1]` and `list2[0]`.
    `none`: no usable meeting point; draw straight from `list1[-1]` to `list2[0]`.
    """

    kind: ConnectionKind
    list1: list[Point2]
    list2: list[Point2]
    point: Point2 | None = None


def make_normal_tangent(points: list[Point2], index: int, direction: int) -> Vector2:
    """Unit edge direction at `index`.

    With `direction=1` it points forward along the polyline, with `-1` it
    points backward. Falls back to the other neighbor at the ends.
    """
    if direction == 1:
        if index + 1 < len(points):
            return normalize(points[index + 1] - points[index])
        return normalize(points[index] - points[index - 1])
    if index > 0:
        return normalize(points[index - 1] - points[index])
    return normalize(points[index] - points[index + 1])


def make_radial(points: list[Point2], index: int, direction: int) -> RadialLine:
    return RadialLine(points[index], make_normal_tangent(points, index, direction))


def _outgoing_radial(points: list[Point2], index: int) -> RadialLine:
    # Ray leaving `points[index]` along the edge that arrives there.
    return RadialLine(points[index], normalize(points[index] - points[index - 1]))


def _incoming_radial(points: list[Point2], index: int) -> RadialLine:
    # Ray leaving `points[index]` backwards along the edge that departs there.
    return RadialLine(points[index], normalize(points[index] - points[index + 1]))


def connect_two_line_segments(
    segments1: list[Point2],
    segments2: list[Point2],
) -> SegmentsConnection:
    """Connect the tail of `segments1` to the head of `segments2`.

    The end rays are intersected first. When they meet ahead of both ends the
    corner is an outer one. Otherwise the polylines overlap, and points are
    retracted from the tail of `segments1` or the head of `segments2` until
    two edges cross (a vertex) or the retracted rays meet ahead (outer).
    Runs in O(m + n).
    """
    if len(segments1) < 2 or len(segments2) < 2:
        return SegmentsConnection("none", segments1, segments2)

    if points_equal(segments1[-1], segments2[0], VERTEX_EPSILON):
        return SegmentsConnection("vertex", segments1, segments2, segments1[-1])

    index1 = len(segments1) - 1
    index2 = 0
    radial1 = _outgoing_radial(segments1, index1)
    radial2 = _incoming_radial(segments2, index2)

    intersection = radial1.intersect(radial2)
    if intersection is None:
        return SegmentsConnection("none", segments1, segments2)
    if intersection.intersected:
        return SegmentsConnection("outer", segments1, segments2, intersection.point)

    while True:
        crossing = segment_intersection(
            segments1[index1 - 1],
            segments1[index1],
            segments2[index2],
            segments2[index2 + 1],
        )
        if crossing is not None:
            return SegmentsConnection(
                "vertex",
                [*segments1[:index1], crossing],
                [crossing, *segments2[index2 + 1 :]],
                crossing,
            )

        # Retract the side whose ray overshoots less.
        if intersection.mu < intersection.nu:
            index1 -= 1
            if index1 == 0:
                break
        else:
            index2 += 1
            if index2 == len(segments2) - 1:
                break

        radial1 = _outgoing_radial(segments1, index1)
        radial2 = _incoming_radial(segments2, index2)
        next_intersection = radial1.intersect(radial2)
        if next_intersection is None:
            break
        if next_intersection.intersected:
            return SegmentsConnection(
                "outer",
                segments1[: index1 + 1],
                segments2[index2:],
                next_intersection.point,
            )
        intersection = next_intersection

    return SegmentsConnection("none", segments1, segments2)


def tie_edge_messes_knot(side_points: list[Point2], central_points: list[Point2]) -> list[Point2]:
    """Drop end points of an offset polyline that run against the center line.

    When the stroke is wider than the curvature radius the offset polyline
    folds back on itself near the ends. Leading and trailing points whose edge
    direction opposes the center polyline are removed; at least two points are
    always kept.
    """
    count = len(side_points)
    if count < 3 or len(central_points) != count:
        return side_points

    start_crop = 0
    for index in range(count - 1):
        side = make_normal_tangent(side_points, index, 1)
        central = make_normal_tangent(central_points, index, 1)
        if dot(side, central) >= 0:
            break
        start_crop = index + 1

    end_crop = 0
    for index in range(count - 1, 0, -1):
        side = make_normal_tangent(side_points, index, -1)
        central = make_normal_tangent(central_points, index, -1)
        if dot(side, central) >= 0:
            break
        end_crop = count - index

    if start_crop == 0 and end_crop == 0:
        return side_points
    if count - start_crop - end_crop < 2:
        return side_points
    return side_points[start_crop : count - end_crop]
