import pytest

from autorig.deriv import Deriv
from autorig.multilinear import Multilinear
from autorig.rect import Rect
from autorig.vector import Vector, assign_corner

VALUES = [0.5, -1.0, 2.0, 3.5, 0.0, 4.0, -2.5, 1.25]


def test_corners_reproduce_values():
    m = Multilinear(3, VALUES)
    ones = Vector(1.0, 1.0, 1.0)
    zeros = Vector(0.0, 0.0, 0.0)
    for i, value in enumerate(VALUES):
        assert m.evaluate(assign_corner(i, ones, zeros)) == pytest.approx(value)


def test_constant_function():
    m = Multilinear(3, [2.5] * 8)
    for p in [(0.1, 0.2, 0.3), (0.9, 0.0, 0.5), (0.5, 0.5, 0.5)]:
        assert m.evaluate(p) == pytest.approx(2.5)


def test_linear_in_first_coordinate():
    m = Multilinear(3, [float(i & 1) for i in range(8)])
    for p in [Vector(0.1, 0.7, 0.3), Vector(0.8, 0.2, 0.9)]:
        assert m.evaluate(p) == pytest.approx(p[0])


def test_two_dimensional_center_is_mean():
    m = Multilinear(2, [1.0, 2.0, 3.0, 6.0])
    assert m.evaluate((0.5, 0.5)) == pytest.approx(sum([1.0, 2.0, 3.0, 6.0]) / 4)


def test_default_values_are_zero():
    m = Multilinear(2)
    assert m.evaluate((0.3, 0.4)) == 0.0
    assert len(m) == 4


def test_item_roundtrip():
    m = Multilinear(3)
    m[5] = 7.0
    assert m[5] == 7.0
    assert m.evaluate((1.0, 0.0, 1.0)) == pytest.approx(7.0)


def test_wrong_value_count():
    with pytest.raises(ValueError):
        Multilinear(3, [1.0, 2.0])


def test_wrong_point_dimension():
    with pytest.raises(ValueError):
        Multilinear(3).evaluate((0.5, 0.5))


def test_index_out_of_range():
    with pytest.raises(IndexError):
        Multilinear(2)[4] = 1.0


def test_integrate_empty_rect():
    assert Multilinear(3, VALUES).integrate(Rect.empty()) == 0.0


def test_integrate_constant():
    m = Multilinear(3, [2.5] * 8)
    r = Rect((0.1, 0.2, 0.3), (0.5, 0.6, 0.9))
    assert m.integrate(r) == pytest.approx(2.5 * r.content())


def test_derivative_through_deriv():
    m = Multilinear(3, [float(i & 1) for i in range(8)])
    p = Vector(Deriv.variable(0.3, 0), Deriv.variable(0.6, 1), Deriv.variable(0.2, 2))
    out = m.evaluate(p)
    assert float(out) == pytest.approx(0.3)
    assert out.get_deriv(0) == pytest.approx(1.0)
    assert out.get_deriv(1) == pytest.approx(0.0, abs=1e-12)