"""Rotations, similarity transforms and 3x3 matrices."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from numbers import Number
from typing import Any

from autorig.vector import Vector

__all__ = ["Quaternion", "Transform", "Matrix3"]


class Quaternion:
    """A quaternion ``r + v`` used to represent a rotation.

    The plain constructor stores its arguments as given; the class methods
    build unit quaternions.  ``q * p`` composes with another quaternion or
    rotates a 3-vector.
    """

    __slots__ = ("r", "v")

    def __init__(self, r: float = 1.0, v: Vector | None = None) -> None:
        self.r = r
        self.v = Vector(0.0, 0.0, 0.0) if v is None else Vector(v)

    @classmethod
    def normalized(cls, r: float, v: Vector) -> Quaternion:
        """Return ``r + v`` scaled to unit norm."""
        v = Vector(v)
        ratio = 1.0 / math.sqrt(r * r + v.lengthsq())
        return cls(r * ratio, v * ratio)

    @classmethod
    def from_axis_angle(cls, axis: Vector, angle: float) -> Quaternion:
        """Return the rotation by ``angle`` radians about ``axis``."""
        return cls(math.cos(angle * 0.5), math.sin(angle * 0.5) * Vector(axis).normalize())

    @classmethod
    def from_rotation(cls, source: Vector, target: Vector) -> Quaternion:
        """Return the smallest rotation taking the direction of ``source`` to that of ``target``."""
        source, target = Vector(source), Vector(target)
        from_sq, to_sq = source.lengthsq(), target.lengthsq()
        if from_sq < to_sq:
            if from_sq < 1e-16:
                return cls()
            mid = source * math.sqrt(to_sq / from_sq) + target
            denom = math.sqrt(mid.lengthsq() * to_sq)
            if denom == 0:
                raise ValueError("vectors point in opposite directions")
            fac = 1.0 / denom
            return cls((mid * target) * fac, (mid % target) * fac)
        if to_sq < 1e-16:
            return cls()
        mid = source + target * math.sqrt(from_sq / to_sq)
        denom = math.sqrt(mid.lengthsq() * from_sq)
        if denom == 0:
            raise ValueError("vectors point in opposite directions")
        fac = 1.0 / denom
        return cls((source * mid) * fac, (source % mid) * fac)

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Quaternion):
            return Quaternion(
                self.r * other.r - self.v * other.v,
                self.r * other.v + other.r * self.v + self.v % other.v,
            )
        if isinstance(other, Vector):
            return self._rotate(other)
        return NotImplemented

    def _rotate(self, p: Vector) -> Vector:
        r, v = self.r, self.v
        v2 = v + v
        vsq2 = Vector(a * b for a, b in zip(v, v2))
        rv2 = r * v2
        vv2 = Vector(v[1] * v2[2], v[0] * v2[2], v[0] * v2[1])
        return Vector(
            p[0] * (1.0 - vsq2[1] - vsq2[2]) + p[1] * (vv2[2] - rv2[2]) + p[2] * (vv2[1] + rv2[1]),
            p[1] * (1.0 - vsq2[2] - vsq2[0]) + p[2] * (vv2[0] - rv2[0]) + p[0] * (vv2[2] + rv2[2]),
            p[2] * (1.0 - vsq2[0] - vsq2[1]) + p[0] * (vv2[1] - rv2[1]) + p[1] * (vv2[0] + rv2[0]),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return (self.r == other.r and self.v == other.v) or (
            self.r == -other.r and self.v == -other.v
        )

    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, i: int) -> float:
        return self.r if i == 0 else self.v[i - 1]

    def __repr__(self) -> str:
        return f"Quaternion({self.r!r}, {self.v!r})"

    def inverse(self) -> Quaternion:
        """Return the inverse rotation."""
        return Quaternion(-self.r, self.v)

    def angle(self) -> float:
        """Return the rotation angle in radians."""
        return 2.0 * math.atan2(self.v.length(), self.r)

    def axis(self) -> Vector:
        """Return the unit rotation axis."""
        return self.v.normalize()


@dataclass(frozen=True)
class Transform:
    """The map ``v -> rot * (v * scale) + trans``."""

    rot: Quaternion = field(default_factory=Quaternion)
    scale: float = 1.0
    trans: Vector = field(default_factory=Vector)

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Transform):
            return Transform(
                self.rot * other.rot,
                self.scale * other.scale,
                self.trans + self.rot * (self.scale * other.trans),
            )
        if isinstance(other, Vector):
            return self.rot * (other * self.scale) + self.trans
        return NotImplemented

    def inverse(self) -> Transform:
        """Return the inverse transform."""
        inv_rot = self.rot.inverse()
        inv_scale = 1.0 / self.scale
        return Transform(inv_rot, inv_scale, (inv_rot * -self.trans) * inv_scale)

    def linear_component(self) -> Transform:
        """Return the transform without its translation."""
        return Transform(self.rot, self.scale)

    def mult3(self, v: Vector) -> Vector:
        """Apply rotation and scale only."""
        return self.rot * (v * self.scale)


class Matrix3:
    """An immutable 3x3 matrix stored row-major."""

    __slots__ = ("_m",)

    def __init__(self, values: Iterable[float] | None = None) -> None:
        m = (0.0,) * 9 if values is None else tuple(values)
        if len(m) != 9:
            raise ValueError("a 3x3 matrix needs 9 values")
        self._m = m

    @classmethod
    def diagonal(cls, diag: float) -> Matrix3:
        """Return ``diag`` times the identity."""
        return cls((diag, 0.0, 0.0, 0.0, diag, 0.0, 0.0, 0.0, diag))

    @classmethod
    def from_columns(cls, c1: Vector, c2: Vector, c3: Vector) -> Matrix3:
        """Build a matrix from its three columns."""
        return cls((c1[0], c2[0], c3[0], c1[1], c2[1], c3[1], c1[2], c2[2], c3[2]))

    def __getitem__(self, key: Any) -> float:
        if isinstance(key, tuple):
            row, col = key
            return self._m[row * 3 + col]
        return self._m[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix3):
            return NotImplemented
        return self._m == other._m

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        m = self._m
        return f"[[{m[0]},{m[1]},{m[2]}][{m[3]},{m[4]},{m[5]}][{m[6]},{m[7]},{m[8]}]]"

    def row(self, row: int) -> Vector:
        """Return row ``row``."""
        return Vector(self._m[row * 3 : row * 3 + 3])

    def column(self, col: int) -> Vector:
        """Return column ``col``."""
        return Vector(self._m[col], self._m[col + 3], self._m[col + 6])

    def __add__(self, other: Any) -> Matrix3:
        if not isinstance(other, Matrix3):
            return NotImplemented
        return Matrix3(a + b for a, b in zip(self._m, other._m))

    def __sub__(self, other: Any) -> Matrix3:
        if not isinstance(other, Matrix3):
            return NotImplemented
        return Matrix3(a - b for a, b in zip(self._m, other._m))

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Matrix3):
            return Matrix3.from_columns(*(self * other.column(i) for i in range(3)))
        if isinstance(other, Vector):
            m = self._m
            return Vector(
                m[0] * other[0] + m[1] * other[1] + m[2] * other[2],
                m[3] * other[0] + m[4] * other[1] + m[5] * other[2],
                m[6] * other[0] + m[7] * other[1] + m[8] * other[2],
            )
        if isinstance(other, Number):
            return Matrix3(a * other for a in self._m)
        return NotImplemented

    def __truediv__(self, scalar: Any) -> Matrix3:
        if not isinstance(scalar, Number):
            return NotImplemented
        return Matrix3(a / scalar for a in self._m)

    def transpose(self) -> Matrix3:
        """Return the transposed matrix."""
        m = self._m
        return Matrix3((m[0], m[3], m[6], m[1], m[4], m[7], m[2], m[5], m[8]))

    def inverse(self) -> Matrix3:
        """Return the inverse; the zero matrix when the determinant is zero."""
        d = self.det()
        if d == 0:
            return Matrix3()
        d = 1.0 / d
        m = self._m
        return Matrix3(
            (
                d * (m[4] * m[8] - m[5] * m[7]),
                d * (m[2] * m[7] - m[1] * m[8]),
                d * (m[1] * m[5] - m[2] * m[4]),
                d * (m[5] * m[6] - m[3] * m[8]),
                d * (m[0] * m[8] - m[2] * m[6]),
                d * (m[2] * m[3] - m[0] * m[5]),
                d * (m[3] * m[7] - m[4] * m[6]),
                d * (m[1] * m[6] - m[0] * m[7]),
                d * (m[0] * m[4] - m[1] * m[3]),
            )
        )

    def det(self) -> float:
        """Return the determinant."""
        m = self._m
        return (
            m[0] * (m[4] * m[8] - m[5] * m[7])
            - m[1] * (m[3] * m[8] - m[5] * m[6])
            + m[2] * (m[3] * m[7] - m[4] * m[6])
        )