"""Multilinear interpolation over the unit hypercube."""

from __future__ import annotations

from collections.abc import Sequence
from functools import reduce
from operator import mul
from typing import Any

from autorig.rect import Rect
from autorig.vector import Vector, assign_corner

__all__ = ["Multilinear"]


class Multilinear:
    """A function on the unit cube fixed by its values at the ``2**dim`` corners.

    Corner ``i`` has coordinate ``k`` equal to 1 when bit ``k`` of ``i`` is set.
    """

    def __init__(self, dim: int, values: Sequence[float] | None = None) -> None:
        if dim < 1:
            raise ValueError("dimension must be positive")
        self.dim = dim
        count = 1 << dim
        if values is None:
            self._values = [0.0] * count
        else:
            self._values = list(values)
            if len(self._values) != count:
                raise ValueError(f"expected {count} corner values, got {len(self._values)}")

    def __getitem__(self, idx: int) -> float:
        return self._values[idx]

    def __setitem__(self, idx: int, value: float) -> None:
        self._values[idx] = value

    def __len__(self) -> int:
        return len(self._values)

    def evaluate(self, v: Any) -> Any:
        """Interpolate at ``v``, a point in the unit cube."""
        v = v if isinstance(v, Vector) else Vector(v)
        if len(v) != self.dim:
            raise ValueError(f"expected a {self.dim}-vector")
        complement = Vector(1.0 - c for c in v)
        out: Any = 0.0
        for i, value in enumerate(self._values):
            factor = reduce(mul, assign_corner(i, v, complement))
            out = out + factor * value
        return out

    def integrate(self, rect: Rect) -> Any:
        """Integrate over ``rect``, given in unit-cube coordinates."""
        if rect.is_empty():
            return 0.0
        return self.evaluate(rect.center()) * rect.content()