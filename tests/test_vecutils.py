import math
from itertools import product

import pytest

from autorig.vector import Vector
from autorig.vecutils import (
    circle_intersection_area,
    distsq_to_line,
    distsq_to_seg,
    get_basis,
    proj_to_line,
    proj_to_seg,
    proj_to_tri,
)


@pytest.mark.parametrize(
    "n", [Vector(0.0, 0.0, 1.0), Vector(1.0, 2.0, 3.0), Vector(-5.0, 0.1, 0.2), Vector(0.3, 4.0, -0.2)]
)
def test_basis_is_orthonormal(n):
    v1, v2 = get_basis(n)
    assert v1.length() == pytest.approx(1.0)
    assert v2.length() == pytest.approx(1.0)
    assert v1 * v2 == pytest.approx(0.0, abs=1e-12)
    assert v1 * n == pytest.approx(0.0, abs=1e-12)
    assert v2 * n == pytest.approx(0.0, abs=1e-12)


def test_basis_of_zero_vector():
    assert get_basis(Vector(0.0, 0.0, 0.0)) == (Vector(1.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0))


def test_point_on_line_has_zero_distance():
    l = Vector(1.0, 1.0, 1.0)
    d = Vector(1.0, 2.0, -1.0)
    assert distsq_to_line(l + 3.0 * d, l, d) == pytest.approx(0.0, abs=1e-12)


def test_line_distance_matches_projection():
    l = Vector(0.0, 1.0, 0.0)
    d = Vector(1.0, 1.0, 0.5)
    v = Vector(2.0, -1.0, 3.0)
    p = proj_to_line(v, l, d)
    assert distsq_to_line(v, l, d) == pytest.approx((v - p).lengthsq())
    assert (v - p) * d == pytest.approx(0.0, abs=1e-12)


def test_segment_projection_clamps_to_endpoints():
    p1 = Vector(0.0, 0.0, 0.0)
    p2 = Vector(1.0, 0.0, 0.0)
    assert proj_to_seg(Vector(5.0, 1.0, 0.0), p1, p2) == p2
    assert proj_to_seg(Vector(-5.0, 1.0, 0.0), p1, p2) == p1
    mid = Vector(0.25, 3.0, -1.0)
    assert proj_to_seg(mid, p1, p2) == proj_to_line(mid, p1, p2 - p1)


@pytest.mark.parametrize(
    "v", [Vector(5.0, 1.0, 0.0), Vector(-2.0, 0.5, 1.0), Vector(0.4, 2.0, -3.0)]
)
def test_segment_distance_matches_projection(v):
    p1 = Vector(0.0, 0.0, 0.0)
    p2 = Vector(1.0, 0.0, 0.0)
    assert distsq_to_seg(v, p1, p2) == pytest.approx((v - proj_to_seg(v, p1, p2)).lengthsq())


def test_circles_apart_do_not_intersect():
    assert circle_intersection_area(5.0, 1.0, 2.0) == 0.0


def test_contained_circle_gives_its_area():
    assert circle_intersection_area(0.5, 2.0, 5.0) == pytest.approx(math.pi * 4.0)


def test_circle_area_symmetric_and_bounded():
    a = circle_intersection_area(1.5, 1.0, 2.0)
    b = circle_intersection_area(1.5, 2.0, 1.0)
    assert a == pytest.approx(b)
    assert 0.0 < a < math.pi * 1.0


def test_circle_area_decreases_with_distance():
    areas = [circle_intersection_area(d, 1.0, 1.0) for d in (0.2, 0.6, 1.0, 1.4, 1.8)]
    assert all(x > y for x, y in zip(areas, areas[1:]))


TRI = (Vector(0.0, 0.0, 0.0), Vector(1.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0))


def test_tri_projection_of_point_above_interior():
    p = proj_to_tri(Vector(0.2, 0.2, 5.0), *TRI)
    assert p[0] == pytest.approx(0.2)
    assert p[1] == pytest.approx(0.2)
    assert p[2] == pytest.approx(0.0)


def test_tri_projection_beyond_vertex():
    assert proj_to_tri(Vector(3.0, -1.0, 1.0), *TRI) == TRI[1]


def test_tri_projection_is_closest_point():
    coords = (-0.5, 0.1, 0.4, 1.2)
    for x, y, z in product(coords, coords, (-1.0, 0.5)):
        q = Vector(x, y, z)
        p = proj_to_tri(q, *TRI)
        assert p[2] == pytest.approx(0.0, abs=1e-12)
        assert p[0] >= -1e-12 and p[1] >= -1e-12 and p[0] + p[1] <= 1.0 + 1e-12
        for vert in TRI:
            assert (q - p).lengthsq() <= (q - vert).lengthsq() + 1e-12