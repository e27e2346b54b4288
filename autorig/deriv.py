"""Forward-mode automatic differentiation with sparse derivative vectors."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable

__all__ = [
    "Deriv",
    "sqrt",
    "log",
    "log10",
    "exp",
    "sin",
    "cos",
    "tan",
    "acos",
    "asin",
    "atan",
    "fabs",
    "power",
    "atan2",
]

_Number = (int, float)


def _recip(v: float) -> float:
    """Reciprocal that yields a signed infinity instead of raising."""
    if v == 0:
        return math.copysign(math.inf, v)
    return 1.0 / v


def _combine(fa: float, da: Mapping[int, float], fb: float, db: Mapping[int, float]) -> dict[int, float]:
    keys = set(da) | set(db)
    return {k: fa * da.get(k, 0.0) + fb * db.get(k, 0.0) for k in keys}


class Deriv:
    """A value together with its partial derivatives.

    Derivatives are stored sparsely by variable number; missing entries are
    zero.  Comparisons look only at the value.
    """

    __slots__ = ("x", "d")

    def __init__(self, x: float = 0.0, d: Any = None) -> None:
        if isinstance(x, Deriv):
            self.x = x.x
            self.d = dict(x.d)
            return
        self.x = x
        if d is None:
            self.d: dict[int, float] = {}
        elif isinstance(d, Mapping):
            self.d = dict(d)
        else:
            self.d = dict(enumerate(d))

    @classmethod
    def variable(cls, x: float, var_num: int) -> Deriv:
        """Return ``x`` marked as independent variable number ``var_num``."""
        return cls(x, {var_num: 1.0})

    def get_deriv(self, num: int = 0) -> float:
        """Return the partial derivative with respect to variable ``num``."""
        return self.d.get(num, 0.0)

    def _chain(self, value: float, slope: float) -> Deriv:
        return Deriv(value, {k: v * slope for k, v in self.d.items()})

    @staticmethod
    def _lift(other: Any) -> Deriv | None:
        if isinstance(other, Deriv):
            return other
        if isinstance(other, _Number):
            return Deriv(other)
        return None

    def __add__(self, other: Any) -> Deriv:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return Deriv(self.x + o.x, _combine(1.0, self.d, 1.0, o.d))

    def __radd__(self, other: Any) -> Deriv:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Deriv:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return Deriv(self.x - o.x, _combine(1.0, self.d, -1.0, o.d))

    def __rsub__(self, other: Any) -> Deriv:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return o.__sub__(self)

    def __mul__(self, other: Any) -> Deriv:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return Deriv(self.x * o.x, _combine(self.x, o.d, o.x, self.d))

    def __rmul__(self, other: Any) -> Deriv:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Deriv:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        denom = o.x * o.x
        return Deriv(
            self.x / o.x,
            {k: v / denom for k, v in _combine(o.x, self.d, -self.x, o.d).items()},
        )

    def __rtruediv__(self, other: Any) -> Deriv:
        o = self._lift(other)
        if o is None:
            return NotImplemented
        return o.__truediv__(self)

    def __pow__(self, exponent: Any) -> Deriv:
        if isinstance(exponent, _Number):
            if exponent == 0.5:
                return sqrt(self)
            value = math.pow(self.x, exponent)
            return self._chain(value, exponent * math.pow(self.x, exponent - 1))
        if isinstance(exponent, Deriv):
            return power(self, exponent)
        return NotImplemented

    def __neg__(self) -> Deriv:
        return Deriv(-self.x, {k: -v for k, v in self.d.items()})

    def __abs__(self) -> Deriv:
        return fabs(self)

    @staticmethod
    def _value(other: Any) -> Any:
        if isinstance(other, Deriv):
            return other.x
        if isinstance(other, _Number):
            return other
        return NotImplemented

    def __lt__(self, other: Any) -> bool:
        o = self._value(other)
        return NotImplemented if o is NotImplemented else self.x < o

    def __le__(self, other: Any) -> bool:
        o = self._value(other)
        return NotImplemented if o is NotImplemented else self.x <= o

    def __gt__(self, other: Any) -> bool:
        o = self._value(other)
        return NotImplemented if o is NotImplemented else self.x > o

    def __ge__(self, other: Any) -> bool:
        o = self._value(other)
        return NotImplemented if o is NotImplemented else self.x >= o

    def __eq__(self, other: object) -> bool:
        o = self._value(other)
        return NotImplemented if o is NotImplemented else self.x == o

    def __hash__(self) -> int:
        return hash(self.x)

    def __float__(self) -> float:
        return float(self.x)

    def __repr__(self) -> str:
        return f"Deriv({self.x!r}, {dict(sorted(self.d.items()))!r})"


def _unary(x: Any, func: Callable[[float], float], slope: Callable[[float], float]) -> Any:
    if isinstance(x, Deriv):
        return x._chain(func(x.x), slope(x.x))
    return func(x)


def sqrt(x: Any) -> Any:
    """Square root."""
    return _unary(x, math.sqrt, lambda v: 0.5 * _recip(math.sqrt(v)))


def log(x: Any) -> Any:
    """Natural logarithm."""
    return _unary(x, math.log, _recip)


def log10(x: Any) -> Any:
    """Base-10 logarithm."""
    return _unary(x, math.log10, lambda v: 0.43429448190325182765 * _recip(v))


def exp(x: Any) -> Any:
    """Exponential."""
    return _unary(x, math.exp, math.exp)


def sin(x: Any) -> Any:
    """Sine."""
    return _unary(x, math.sin, math.cos)


def cos(x: Any) -> Any:
    """Cosine."""
    return _unary(x, math.cos, lambda v: -math.sin(v))


def tan(x: Any) -> Any:
    """Tangent."""
    return _unary(x, math.tan, lambda v: _recip(math.cos(v) ** 2))


def acos(x: Any) -> Any:
    """Arc cosine."""
    return _unary(x, math.acos, lambda v: -_recip(math.sqrt(1.0 - v * v)))


def asin(x: Any) -> Any:
    """Arc sine."""
    return _unary(x, math.asin, lambda v: _recip(math.sqrt(1.0 - v * v)))


def atan(x: Any) -> Any:
    """Arc tangent."""
    return _unary(x, math.atan, lambda v: 1.0 / (1.0 + v * v))


def fabs(x: Any) -> Any:
    """Absolute value."""
    return _unary(x, math.fabs, lambda v: -1.0 if v < 0.0 else 1.0)


def _val(x: Any) -> float:
    return x.x if isinstance(x, Deriv) else x


def power(x: Any, y: Any) -> Any:
    """Return ``x`` raised to ``y``, differentiating through both."""
    xv, yv = _val(x), _val(y)
    value = math.pow(xv, yv)
    if not isinstance(x, Deriv) and not isinstance(y, Deriv):
        return value
    d: dict[int, float] = {}
    if isinstance(x, Deriv) and x.d:
        d = _combine(yv * math.pow(xv, yv - 1.0), x.d, 0.0, {})
    if isinstance(y, Deriv) and y.d:
        d = _combine(1.0, d, math.log(xv) * value, y.d)
    return Deriv(value, d)


def atan2(x: Any, y: Any) -> Any:
    """Return ``math.atan2(x, y)``, differentiating through both arguments."""
    xv, yv = _val(x), _val(y)
    value = math.atan2(xv, yv)
    if not isinstance(x, Deriv) and not isinstance(y, Deriv):
        return value
    denom = xv * xv + yv * yv
    dx = x.d if isinstance(x, Deriv) else {}
    dy = y.d if isinstance(y, Deriv) else {}
    return Deriv(value, _combine(yv / denom, dx, -xv / denom, dy))