import math

import pytest

from autorig import deriv
from autorig.deriv import Deriv, atan2, fabs, power
from autorig.vector import Vector

H = 1e-6


def numeric(f, x):
    return (f(x + H) - f(x - H)) / (2 * H)


def test_variable_has_unit_derivative_in_its_slot():
    v = Deriv.variable(2.0, 3)
    assert v.get_deriv(3) == 1.0
    assert v.get_deriv(0) == 0.0
    assert float(v) == 2.0


def test_constant_has_no_derivatives():
    c = Deriv(4.5)
    assert c.get_deriv(0) == 0.0
    assert float(c) == 4.5


@pytest.mark.parametrize(
    "name",
    ["sqrt", "log", "log10", "exp", "sin", "cos", "tan", "acos", "asin", "atan", "fabs"],
)
def test_unary_derivatives_match_finite_differences(name):
    func = getattr(deriv, name)
    x0 = 0.3
    result = func(Deriv.variable(x0, 0))
    assert float(result) == pytest.approx(func(x0))
    assert result.get_deriv(0) == pytest.approx(numeric(func, x0), rel=1e-5)


def test_unary_functions_on_floats_match_math():
    assert deriv.sqrt(4.0) == math.sqrt(4.0)
    assert deriv.cos(0.7) == math.cos(0.7)


def test_fabs_derivative_is_negative_for_negative_input():
    assert fabs(Deriv.variable(-2.0, 0)).get_deriv(0) == -1.0
    assert fabs(Deriv.variable(2.0, 0)).get_deriv(0) == 1.0


def test_rational_expression_matches_finite_difference():
    def f(u):
        return (u * u + 3 * u - 1) / (u + 2)

    x0 = 0.8
    result = f(Deriv.variable(x0, 0))
    assert float(result) == pytest.approx(f(x0))
    assert result.get_deriv(0) == pytest.approx(numeric(f, x0), rel=1e-6)


def test_reflected_operators():
    def f(u):
        return 5.0 - 2.0 / u

    x0 = 1.7
    result = f(Deriv.variable(x0, 0))
    assert float(result) == pytest.approx(f(x0))
    assert result.get_deriv(0) == pytest.approx(numeric(f, x0), rel=1e-6)


def test_negation_flips_value_and_derivative():
    v = Deriv.variable(1.25, 0)
    n = -v
    assert float(n) == -float(v)
    assert n.get_deriv(0) == -v.get_deriv(0)


@pytest.mark.parametrize("func", [power, atan2])
def test_two_variable_partials(func):
    x0, y0 = 1.3, 0.6
    result = func(Deriv.variable(x0, 0), Deriv.variable(y0, 1))
    assert float(result) == pytest.approx(func(x0, y0))
    assert result.get_deriv(0) == pytest.approx(numeric(lambda t: func(t, y0), x0), rel=1e-5)
    assert result.get_deriv(1) == pytest.approx(numeric(lambda t: func(x0, t), y0), rel=1e-5)


def test_power_with_constant_exponent():
    x0 = 2.2
    result = power(Deriv.variable(x0, 0), 3.0)
    assert result.get_deriv(0) == pytest.approx(numeric(lambda t: t ** 3.0, x0), rel=1e-6)


def test_sparse_variables_stay_separate():
    a = Deriv.variable(2.0, 0)
    b = Deriv.variable(3.0, 5)
    p = a * b
    assert p.get_deriv(0) == float(b)
    assert p.get_deriv(5) == float(a)
    assert p.get_deriv(2) == 0.0


def test_comparisons_use_value_only():
    a = Deriv.variable(1.0, 0)
    b = Deriv(1.0)
    assert a == b
    assert a <= b and a >= b
    assert Deriv(0.5) < a
    assert a > 0.5
    assert max(Deriv(0.2), Deriv(0.9)) == 0.9


def test_unsupported_operand_raises_type_error():
    with pytest.raises(TypeError):
        Deriv(1.0) + "a"


def test_vector_length_of_derivs_matches_finite_difference():
    x0 = 0.4

    def length_at(t):
        return Vector(t, 2.0 * t, 1.0).length()

    t = Deriv.variable(x0, 0)
    result = Vector(t, 2.0 * t, Deriv(1.0)).length()
    assert float(result) == pytest.approx(length_at(x0))
    assert result.get_deriv(0) == pytest.approx(numeric(length_at, x0), rel=1e-5)


def test_deriv_scales_vector_from_left():
    s = Deriv.variable(2.0, 0)
    v = s * Vector(1.0, 3.0, -1.0)
    assert [float(c) for c in v] == [2.0, 6.0, -2.0]
    assert [c.get_deriv(0) for c in v] == [1.0, 3.0, -1.0]