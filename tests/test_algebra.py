import math

import numpy as np
import pytest

from src.curvegeom.algebra import (
    Box,
    RadialLine,
    distance,
    is_mirrored,
    is_similar,
    normalize,
    point,
    points_equal,
    rotate,
    rotate_quarter,
    rotation,
    scaling,
    segment_intersection,
    similarity_scale,
    transform_point,
    transform_vector,
    translation,
)


def test_rotate_quarter_directions() -> None:
    np.testing.assert_allclose(rotate_quarter(point(1.0, 0.0), 1), [0.0, 1.0])
    np.testing.assert_allclose(rotate_quarter(point(1.0, 0.0), 0), [0.0, -1.0])


def test_rotate_matches_quarter_turn() -> None:
    v = point(0.3, -0.7)
    np.testing.assert_allclose(rotate(v, math.pi / 2.0), rotate_quarter(v, 1), atol=1e-12)


def test_normalize() -> None:
    np.testing.assert_allclose(normalize(point(3.0, 4.0)), [0.6, 0.8])
    np.testing.assert_allclose(normalize(point(0.0, 0.0)), [0.0, 0.0])


def test_points_equal_with_tolerance() -> None:
    assert points_equal(point(1.0, 2.0), point(1.0, 2.0))
    assert not points_equal(point(1.0, 2.0), point(1.0, 2.0 + 1e-12))
    assert points_equal(point(1.0, 2.0), point(1.0, 2.0 + 1e-12), 1e-9)


def test_affine_helpers() -> None:
    m = translation(1.0, 2.0) @ scaling(2.0)
    np.testing.assert_allclose(transform_point(m, point(1.0, 1.0)), [3.0, 4.0])
    np.testing.assert_allclose(transform_vector(m, point(1.0, 1.0)), [2.0, 2.0])

    r = rotation(math.pi / 2.0)
    np.testing.assert_allclose(transform_point(r, point(1.0, 0.0)), [0.0, 1.0], atol=1e-12)


def test_similarity_checks() -> None:
    assert is_similar(rotation(0.3) @ scaling(2.0))
    assert is_similar(scaling(-1.0, 1.0))
    assert not is_similar(scaling(2.0, 1.0))
    assert is_mirrored(scaling(-1.0, 1.0))
    assert not is_mirrored(rotation(1.0))
    assert similarity_scale(rotation(0.3) @ scaling(3.0)) == pytest.approx(3.0)


def test_box_operations() -> None:
    box = Box.from_points([point(0.0, 1.0), point(2.0, -1.0)])
    assert box.to_tuple() == (0.0, -1.0, 2.0, 2.0)
    assert box.contains_point(point(1.0, 0.0))
    assert not box.contains_point(point(3.0, 0.0))

    union = box.union(Box(1.0, 0.0, 3.0, 3.0))
    assert union.to_tuple() == (0.0, -1.0, 4.0, 4.0)
    assert box.expanded(1.0).to_tuple() == (-1.0, -2.0, 4.0, 4.0)


def test_box_from_no_points() -> None:
    with pytest.raises(ValueError):
        Box.from_points([])


def test_radial_line_intersection() -> None:
    a = RadialLine(point(0.0, 0.0), point(1.0, 0.0))
    b = RadialLine(point(2.0, -1.0), point(0.0, 1.0))
    hit = a.intersect(b)
    assert hit is not None
    np.testing.assert_allclose(hit.point, [2.0, 0.0])
    assert hit.mu == pytest.approx(2.0)
    assert hit.nu == pytest.approx(1.0)
    assert hit.intersected

    behind = RadialLine(point(2.0, 1.0), point(0.0, 1.0))
    hit_behind = a.intersect(behind)
    assert hit_behind is not None
    assert not hit_behind.intersected


def test_radial_line_parallel() -> None:
    a = RadialLine(point(0.0, 0.0), point(1.0, 0.0))
    b = RadialLine(point(0.0, 1.0), point(-2.0, 0.0))
    assert a.intersect(b) is None


def test_segment_intersection() -> None:
    hit = segment_intersection(point(0.0, 0.0), point(2.0, 2.0), point(0.0, 2.0), point(2.0, 0.0))
    assert hit is not None
    np.testing.assert_allclose(hit, [1.0, 1.0])

    miss = segment_intersection(point(0.0, 0.0), point(1.0, 0.0), point(2.0, -1.0), point(2.0, 1.0))
    assert miss is None


def test_distance() -> None:
    assert distance(point(0.0, 0.0), point(3.0, 4.0)) == pytest.approx(5.0)
