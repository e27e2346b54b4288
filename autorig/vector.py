"""Small fixed-size vectors and scalar helpers used across the rigging code."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import Any

__all__ = [
    "Vector",
    "sqr",
    "cube",
    "quad",
    "round_half_up",
    "sign",
    "assign_corner",
    "bit_less",
]


def sqr(x: Any) -> Any:
    """Return ``x * x``."""
    return x * x


def cube(x: Any) -> Any:
    """Return ``x * x * x``."""
    return x * x * x


def quad(x: Any) -> Any:
    """Return the fourth power of ``x``."""
    return sqr(sqr(x))


def round_half_up(x: float) -> int:
    """Add one half and truncate toward zero."""
    return int(x + 0.5)


def sign(x: float) -> int:
    """Return 1 for positive values and -1 otherwise (zero included)."""
    return 1 if x > 0.0 else -1


class Vector:
    """An immutable vector whose components may be floats or other numbers.

    ``Vector(x, y, z)`` builds from components, ``Vector(iterable)`` from an
    iterable, and ``Vector()`` is the zero 3-vector.  ``*`` between two
    vectors is the dot product and ``%`` is the cross product.
    """

    __slots__ = ("_c",)

    def __init__(self, *args: Any) -> None:
        if not args:
            components: Iterable[Any] = (0.0, 0.0, 0.0)
        elif len(args) == 1 and isinstance(args[0], Iterable) and not isinstance(args[0], str):
            components = args[0]
        else:
            components = args
        self._c = tuple(components)

    def __getitem__(self, index: int) -> Any:
        return self._c[index]

    def __len__(self) -> int:
        return len(self._c)

    def __iter__(self):
        return iter(self._c)

    def __repr__(self) -> str:
        return f"Vector({', '.join(repr(c) for c in self._c)})"

    def __str__(self) -> str:
        return "[" + ", ".join(str(c) for c in self._c) + "]"

    def __hash__(self) -> int:
        return hash(self._c)

    def _check(self, other: Vector) -> None:
        if len(self._c) != len(other._c):
            raise ValueError(
                f"dimension mismatch: {len(self._c)} and {len(other._c)}"
            )

    def __add__(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check(other)
        return Vector(a + b for a, b in zip(self._c, other._c))

    def __sub__(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        self._check(other)
        return Vector(a - b for a, b in zip(self._c, other._c))

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Vector):
            return self.dot(other)
        return Vector(c * other for c in self._c)

    def __rmul__(self, other: Any) -> Vector:
        if isinstance(other, Vector):
            return NotImplemented
        return Vector(other * c for c in self._c)

    def __truediv__(self, scalar: Any) -> Vector:
        if isinstance(scalar, Vector):
            return NotImplemented
        return Vector(c / scalar for c in self._c)

    def __neg__(self) -> Vector:
        return Vector(-c for c in self._c)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return len(self._c) == len(other._c) and all(
            a == b for a, b in zip(self._c, other._c)
        )

    def __mod__(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.cross(other)

    def dot(self, other: Vector) -> Any:
        """Return the dot product with ``other``."""
        self._check(other)
        return sum((a * b for a, b in zip(self._c, other._c)), 0.0)

    def cross(self, other: Vector) -> Vector:
        """Return the cross product of two 3-vectors."""
        if len(self._c) != 3 or len(other._c) != 3:
            raise ValueError("cross product needs two 3-vectors")
        a0, a1, a2 = self._c
        b0, b1, b2 = other._c
        return Vector(a1 * b2 - a2 * b1, a2 * b0 - a0 * b2, a0 * b1 - a1 * b0)

    def apply(self, func: Callable[..., Any], other: Vector | None = None) -> Vector:
        """Apply ``func`` componentwise, pairing with ``other`` if given."""
        if other is None:
            return Vector(map(func, self._c))
        self._check(other)
        return Vector(map(func, self._c, other._c))

    def lengthsq(self) -> Any:
        """Return the squared Euclidean length."""
        return self.dot(self)

    def length(self) -> Any:
        """Return the Euclidean length."""
        sq = self.lengthsq()
        if isinstance(sq, (int, float)):
            return math.sqrt(sq)
        return sq ** 0.5

    def normalize(self) -> Vector:
        """Return the vector scaled to unit length; a zero vector gives NaNs."""
        length = self.length()
        if length == 0:
            return Vector(math.nan for _ in self._c)
        return self / length


def assign_corner(idx: int, v1: Vector, v2: Vector) -> Vector:
    """Pick component ``i`` from ``v1`` when bit ``i`` of ``idx`` is set, else from ``v2``."""
    if len(v1) != len(v2):
        raise ValueError("dimension mismatch")
    return Vector(
        a if idx & (1 << i) else b for i, (a, b) in enumerate(zip(v1, v2))
    )


def bit_less(v1: Vector, v2: Vector) -> int:
    """Return a bit mask with bit ``i`` set where ``v1[i] < v2[i]``."""
    if len(v1) != len(v2):
        raise ValueError("dimension mismatch")
    return sum(1 << i for i, (a, b) in enumerate(zip(v1, v2)) if a < b)