from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from jaxtyping import jaxtyped

from .types import AffineMatrix, Point2, Points, Vector2, typechecker

EPSILON = 1e-12


def point(x: float, y: float) -> Point2:
    return np.array([x, y], dtype=np.float64)


def frozen_point(p: Point2 | tuple[float, float]) -> Point2:
    """Float64 copy of `p` that cannot be written to."""
    arr = np.array(p, dtype=np.float64).reshape(2)
    arr.setflags(write=False)
    return arr


def distance(a: Point2, b: Point2) -> float:
    return math.hypot(float(b[0] - a[0]), float(b[1] - a[1]))


def length(v: Vector2) -> float:
    return math.hypot(float(v[0]), float(v[1]))


def normalize(v: Vector2) -> Vector2:
    """Unit vector along `v`; a zero vector stays zero."""
    n = length(v)
    if n == 0:
        return np.zeros(2, dtype=np.float64)
    return np.asarray(v, dtype=np.float64) / n


def rotate(v: Vector2, angle: float) -> Vector2:
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([v[0] * c - v[1] * s, v[0] * s + v[1] * c], dtype=np.float64)


def rotate_quarter(v: Vector2, clockwise_flag: int) -> Vector2:
    """Rotate by +90 degrees when `clockwise_flag` is 1, by -90 degrees otherwise.

    With the y-down screen convention, +90 degrees turns clockwise.
    """
    if clockwise_flag:
        return np.array([-v[1], v[0]], dtype=np.float64)
    return np.array([v[1], -v[0]], dtype=np.float64)


def cross(a: Vector2, b: Vector2) -> float:
    return float(a[0] * b[1] - a[1] * b[0])


def dot(a: Vector2, b: Vector2) -> float:
    return float(a[0] * b[0] + a[1] * b[1])


def is_zero(v: Vector2, eps: float = EPSILON) -> bool:
    return abs(float(v[0])) <= eps and abs(float(v[1])) <= eps


def points_equal(a: Point2, b: Point2, eps: float = 0.0) -> bool:
    if eps == 0:
        return bool(a[0] == b[0] and a[1] == b[1])
    return abs(float(a[0] - b[0])) <= eps and abs(float(a[1] - b[1])) <= eps


def affine(a: float, b: float, c: float, d: float, e: float, f: float) -> AffineMatrix:
    """Affine matrix mapping `(x, y)` to `(a*x + c*y + e, b*x + d*y + f)`."""
    return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64)


def identity() -> AffineMatrix:
    return np.eye(3, dtype=np.float64)


def translation(tx: float, ty: float) -> AffineMatrix:
    return affine(1.0, 0.0, 0.0, 1.0, tx, ty)


def scaling(sx: float, sy: float | None = None) -> AffineMatrix:
    return affine(sx, 0.0, 0.0, sx if sy is None else sy, 0.0, 0.0)


def rotation(angle: float) -> AffineMatrix:
    c = math.cos(angle)
    s = math.sin(angle)
    return affine(c, s, -s, c, 0.0, 0.0)


def transform_point(matrix: AffineMatrix, p: Point2) -> Point2:
    return matrix[:2, :2] @ np.asarray(p, dtype=np.float64) + matrix[:2, 2]


def transform_vector(matrix: AffineMatrix, v: Vector2) -> Vector2:
    return matrix[:2, :2] @ np.asarray(v, dtype=np.float64)


def is_mirrored(matrix: AffineMatrix) -> bool:
    return bool(np.linalg.det(matrix[:2, :2]) < 0)


def is_similar(matrix: AffineMatrix, eps: float = 1e-9) -> bool:
    """Whether the matrix is uniform scale plus rotation, optionally mirrored."""
    (a, c), (b, d) = matrix[:2, :2]
    rotating = abs(a - d) <= eps and abs(b + c) <= eps
    mirroring = abs(a + d) <= eps and abs(b - c) <= eps
    return bool(rotating or mirroring)


def similarity_scale(matrix: AffineMatrix) -> float:
    return math.sqrt(abs(float(np.linalg.det(matrix[:2, :2]))))


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point2:
        return point(self.x + self.width / 2.0, self.y + self.height / 2.0)

    @classmethod
    def from_points(cls, points: Points | list[Point2]) -> Box:
        arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if arr.shape[0] == 0:
            raise ValueError("Box.from_points needs at least one point")
        minx, miny = arr.min(axis=0)
        maxx, maxy = arr.max(axis=0)
        return cls(float(minx), float(miny), float(maxx - minx), float(maxy - miny))

    def union(self, other: Box) -> Box:
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Box(x, y, max(self.right, other.right) - x, max(self.bottom, other.bottom) - y)

    def expand_to_contain(self, p: Point2) -> Box:
        x = min(self.x, float(p[0]))
        y = min(self.y, float(p[1]))
        right = max(self.right, float(p[0]))
        bottom = max(self.bottom, float(p[1]))
        return Box(x, y, right - x, bottom - y)

    def expanded(self, margin: float) -> Box:
        return Box(
            self.x - margin,
            self.y - margin,
            self.width + 2.0 * margin,
            self.height + 2.0 * margin,
        )

    def contains_point(self, p: Point2) -> bool:
        x = float(p[0])
        y = float(p[1])
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def to_tuple(self) -> tuple[float, float, float, float]:
        return self.x, self.y, self.width, self.height


@dataclass(frozen=True)
class RadialIntersection:
    point: Point2
    mu: float
    nu: float

    @property
    def intersected(self) -> bool:
        """Whether both rays reach the point going forward."""
        return self.mu >= 0 and self.nu >= 0


@dataclass(frozen=True)
class RadialLine:
    """A point plus a direction, modelling a tangent ray."""

    point: Point2
    vector: Vector2

    def intersect(self, other: RadialLine) -> RadialIntersection | None:
        """Intersection of the two infinite lines, None when parallel.

        `mu` and `nu` are measured in units of each line's own vector.
        """
        denom = cross(self.vector, other.vector)
        if abs(denom) <= EPSILON:
            return None

        diff = other.point - self.point
        mu = cross(diff, other.vector) / denom
        nu = cross(diff, self.vector) / denom
        return RadialIntersection(self.point + self.vector * mu, mu, nu)


@jaxtyped(typechecker=typechecker)
def segment_intersection(a: Point2, b: Point2, c: Point2, d: Point2) -> Point2 | None:
    """Crossing point of closed segments `ab` and `cd`, or None."""
    r = b - a
    s = d - c
    denom = cross(r, s)
    if abs(denom) <= EPSILON:
        return None

    diff = c - a
    t = cross(diff, s) / denom
    u = cross(diff, r) / denom
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return a + r * t
    return None
