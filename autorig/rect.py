"""Axis-aligned boxes in any number of dimensions."""

from __future__ import annotations

from collections.abc import Iterable
from functools import reduce
from operator import mul
from typing import Any

from autorig.vector import Vector, assign_corner, sqr

__all__ = ["Rect"]


def _as_vector(v: Any) -> Vector:
    return v if isinstance(v, Vector) else Vector(v)


def _zero(dim: int) -> Vector:
    return Vector((0.0,) * dim)


class Rect:
    """An axis-aligned box given by its low and high corners.

    A box whose high corner is below its low corner in any coordinate is
    empty.  ``&`` intersects two boxes and ``|`` gives their bounding box.
    """

    __slots__ = ("_empty", "lo", "hi")

    def __init__(self, lo: Any, hi: Any) -> None:
        lo = _as_vector(lo)
        hi = _as_vector(hi)
        if len(lo) != len(hi):
            raise ValueError(f"dimension mismatch: {len(lo)} and {len(hi)}")
        self.lo = lo
        self.hi = hi
        self._empty = any(h < l for h, l in zip(hi, lo))

    @classmethod
    def _make(cls, empty: bool, lo: Vector, hi: Vector) -> Rect:
        rect = cls.__new__(cls)
        rect._empty = empty
        rect.lo = lo
        rect.hi = hi
        return rect

    @classmethod
    def empty(cls) -> Rect:
        """Return an empty three-dimensional box."""
        return cls._make(True, _zero(3), _zero(3))

    @classmethod
    def from_point(cls, point: Any) -> Rect:
        """Return the degenerate box holding a single point."""
        point = _as_vector(point)
        return cls._make(False, point, point)

    @classmethod
    def from_points(cls, points: Iterable[Any]) -> Rect:
        """Return the bounding box of ``points``; empty if there are none."""
        it = iter(points)
        try:
            first = _as_vector(next(it))
        except StopIteration:
            return cls.empty()
        lo = hi = first
        for p in it:
            p = _as_vector(p)
            lo = lo.apply(min, p)
            hi = hi.apply(max, p)
        return cls._make(False, lo, hi)

    @property
    def dim(self) -> int:
        """Number of dimensions."""
        return len(self.lo)

    def is_empty(self) -> bool:
        """Return True if the box holds no points."""
        return self._empty

    def __and__(self, other: Rect) -> Rect:
        if not isinstance(other, Rect):
            return NotImplemented
        if not self._empty and not other._empty:
            return Rect(self.lo.apply(max, other.lo), self.hi.apply(min, other.hi))
        return Rect._make(True, _zero(self.dim), _zero(self.dim))

    def __or__(self, other: Rect) -> Rect:
        if not isinstance(other, Rect):
            return NotImplemented
        if self._empty:
            return other
        if other._empty:
            return self
        return Rect._make(False, self.lo.apply(min, other.lo), self.hi.apply(max, other.hi))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        if self._empty and other._empty:
            return True
        return self._empty == other._empty and self.lo == other.lo and self.hi == other.hi

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._empty:
            return "Rect()"
        return f"Rect({self.lo}, {self.hi})"

    def contains(self, other: Any) -> bool:
        """Return True if ``other`` (a box or a point) lies inside this box."""
        if isinstance(other, Rect):
            if other._empty:
                return True
            if self._empty:
                return False
            return not (
                any(a < b for a, b in zip(other.lo, self.lo))
                or any(a < b for a, b in zip(self.hi, other.hi))
            )
        point = _as_vector(other)
        if self._empty:
            return False
        return not (
            any(a < b for a, b in zip(point, self.lo))
            or any(a < b for a, b in zip(self.hi, point))
        )

    def size(self) -> Vector:
        """Return the edge lengths; zero for an empty box."""
        return _zero(self.dim) if self._empty else self.hi - self.lo

    def content(self) -> Any:
        """Return the volume (area, length) of the box."""
        if self._empty:
            return 0.0
        return reduce(mul, self.hi - self.lo)

    def diag_length(self) -> Any:
        """Return the length of the main diagonal."""
        if self._empty:
            return 0.0
        return (self.hi - self.lo).length()

    def center(self) -> Vector:
        """Return the midpoint of the box."""
        return (self.lo + self.hi) / 2.0

    def dist_sq_to(self, other: Any) -> Any:
        """Return the squared distance to a point or to another box."""
        out: Any = 0.0
        if isinstance(other, Rect):
            for lo, hi, olo, ohi in zip(self.lo, self.hi, other.lo, other.hi):
                if lo > ohi:
                    out = out + sqr(lo - ohi)
                elif hi < olo:
                    out = out + sqr(olo - hi)
            return out
        point = _as_vector(other)
        for lo, hi, p in zip(self.lo, self.hi, point):
            if lo > p:
                out = out + sqr(lo - p)
            elif hi < p:
                out = out + sqr(p - hi)
        return out

    def corner(self, idx: int) -> Vector:
        """Return the corner whose coordinate ``i`` is high when bit ``i`` of ``idx`` is set."""
        return assign_corner(idx, self.hi, self.lo)