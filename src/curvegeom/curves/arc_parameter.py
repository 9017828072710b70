from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np
from jaxtyping import jaxtyped

from ...utils import debug_helpers
from ..algebra import is_similar, point, similarity_scale
from ..types import AffineMatrix, Point2, Vector2, typechecker


class ArcParameter(NamedTuple):
    center: Point2
    start_angle: float
    end_angle: float


def _unit_circle_angles(
    dx: float,
    dy: float,
    large_arc_flag: int,
    clockwise_flag: int,
) -> tuple[float, float]:
    # (dx, dy) is the chord `start - end` mapped into unit circle space.
    flag = -1.0 if clockwise_flag else 1.0

    sin_b = math.sqrt(dx * dx + dy * dy) / 2.0 * flag
    if abs(sin_b) > 1.0:
        debug_helpers.log_once(
            "arc_radius_clamped",
            f"arc radius too small for its chord; clamping sinB={sin_b:.6g}",
        )
        sin_b = max(-1.0, min(1.0, sin_b))

    b = math.asin(sin_b)
    if large_arc_flag:
        b = math.pi * flag - b

    a = math.atan2(-dx * flag, dy * flag)
    return a + b, a - b


@jaxtyped(typechecker=typechecker)
def calc_arc_parameter(
    start: Point2,
    end: Point2,
    radius: float,
    large_arc_flag: int,
    clockwise_flag: int,
) -> ArcParameter:
    """Center and angles of an SVG-style arc given by its endpoints.

    Angles are not normalized and fall in [-2pi, 2pi]. The clockwise flag
    follows SVG: with flag 1 the end angle is numerically larger.
    """
    dx = float(start[0] - end[0]) / radius
    dy = float(start[1] - end[1]) / radius
    start_angle, end_angle = _unit_circle_angles(dx, dy, large_arc_flag, clockwise_flag)

    center = point(
        float(start[0]) - radius * math.cos(start_angle),
        float(start[1]) - radius * math.sin(start_angle),
    )
    return ArcParameter(center, start_angle, end_angle)


@jaxtyped(typechecker=typechecker)
def calc_ellipse_parameter(
    start: Point2,
    end: Point2,
    radius: Vector2,
    x_axis_angle: float,
    large_arc_flag: int,
    clockwise_flag: int,
) -> ArcParameter:
    """Ellipse counterpart of `calc_arc_parameter`.

    The chord is mapped into unit circle space by the inverse of
    `[[rx cos(psi), -ry sin(psi)], [rx sin(psi), ry cos(psi)]]`.
    """
    rx = float(radius[0])
    ry = float(radius[1])
    cos_psi = math.cos(x_axis_angle)
    sin_psi = math.sin(x_axis_angle)

    axes = np.array([[rx * cos_psi, -ry * sin_psi], [rx * sin_psi, ry * cos_psi]])
    dx, dy = np.linalg.solve(axes, np.asarray(start - end, dtype=np.float64))
    start_angle, end_angle = _unit_circle_angles(float(dx), float(dy), large_arc_flag, clockwise_flag)

    cos_start = math.cos(start_angle)
    sin_start = math.sin(start_angle)
    center = point(
        float(start[0]) - rx * cos_start * cos_psi + ry * sin_start * sin_psi,
        float(start[1]) - rx * cos_start * sin_psi - ry * sin_start * cos_psi,
    )
    return ArcParameter(center, start_angle, end_angle)


def calc_cubic_piece_count(angle_span: float) -> int:
    """Number of cubic pieces for an arc, each spanning at most 120 degrees."""
    return max(math.ceil(abs(angle_span) / (math.pi * 2.0 / 3.0)), 1)


def transform_ellipse_axes(
    matrix: AffineMatrix,
    radius: Vector2,
    x_axis_angle: float,
) -> tuple[Vector2, float]:
    """Radii and x-axis angle of the image of an ellipse under `matrix`.

    Similarity transforms scale and rotate the axes directly. Other linear maps
    go through the SVD of the mapped axis matrix, whose singular values are the
    new radii.
    """
    linear = matrix[:2, :2]
    cos_psi = math.cos(x_axis_angle)
    sin_psi = math.sin(x_axis_angle)
    axes = np.array(
        [[radius[0] * cos_psi, -radius[1] * sin_psi], [radius[0] * sin_psi, radius[1] * cos_psi]],
        dtype=np.float64,
    )
    mapped = linear @ axes

    if is_similar(matrix):
        scale = similarity_scale(matrix)
        new_radius = np.array([radius[0] * scale, radius[1] * scale], dtype=np.float64)
        return new_radius, math.atan2(float(mapped[1, 0]), float(mapped[0, 0]))

    u, s, _vt = np.linalg.svd(mapped)
    return np.array([s[0], s[1]], dtype=np.float64), math.atan2(float(u[1, 0]), float(u[0, 0]))
