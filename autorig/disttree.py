"""Octree-style distance fields built from multilinear cells."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Sequence
from typing import Any

from autorig.rect import Rect
from autorig.vector import Vector, round_half_up

__all__ = [
    "DEFAULT_TREE_TOL",
    "DistNode",
    "PointDistanceEvaluator",
    "build_distance_tree",
    "build_point_distance_tree",
]

DEFAULT_TREE_TOL = 0.003

Evaluator = Callable[[Vector], float]


def _unit_cube(dim: int = 3) -> Rect:
    return Rect(Vector((0.0,) * dim), Vector((1.0,) * dim))


class DistNode:
    """A cell of a distance field tree.

    Each cell stores the field's values at its corners and interpolates them
    multilinearly.  A split cell has ``2 ** dim`` children, child ``i`` sharing
    corner ``i`` with its parent and reaching to the parent's centre.
    """

    __slots__ = ("rect", "parent", "child_index", "children", "values")

    def __init__(
        self,
        rect: Rect | None = None,
        parent: DistNode | None = None,
        child_index: int = 0,
    ) -> None:
        if parent is not None:
            rect = Rect.from_point(parent.rect.corner(child_index)) | Rect.from_point(
                parent.rect.center()
            )
        elif rect is None:
            rect = _unit_cube()
        self.rect = rect
        self.parent = parent
        self.child_index = child_index
        self.children: list[DistNode] = []
        self.values: list[Any] = [0.0] * (1 << rect.dim)

    def __repr__(self) -> str:
        return f"DistNode({self.rect!r}, {len(self.children)} children)"

    @property
    def dim(self) -> int:
        """Number of dimensions."""
        return self.rect.dim

    @property
    def is_leaf(self) -> bool:
        """True if the cell has no children."""
        return not self.children

    def split(self) -> None:
        """Give this cell its children."""
        if self.children:
            raise ValueError("node is already split")
        self.children = [DistNode(parent=self, child_index=i) for i in range(1 << self.dim)]

    def count_nodes(self) -> int:
        """Return the number of cells in this subtree."""
        return 1 + sum(child.count_nodes() for child in self.children)

    def max_level(self) -> int:
        """Return the depth of the deepest leaf below this cell."""
        if not self.children:
            return 0
        return 1 + max(child.max_level() for child in self.children)

    def _child_for(self, point: Sequence[Any]) -> int:
        center = self.rect.center()
        return sum(1 << i for i in range(self.dim) if float(point[i]) > center[i])

    def locate(self, point: Sequence[Any]) -> DistNode:
        """Return the leaf cell that holds ``point``."""
        node = self
        while node.children:
            node = node.children[node._child_for(point)]
        return node

    def _interpolate(self, point: Sequence[Any]) -> Any:
        lo = self.rect.lo
        size = self.rect.size()
        local = [(point[i] - lo[i]) / size[i] for i in range(self.dim)]
        return self._interpolate_local(local)

    def _interpolate_local(self, local: Sequence[Any]) -> Any:
        out: Any = 0.0
        for idx, value in enumerate(self.values):
            factor: Any = 1.0
            for i, t in enumerate(local):
                factor = factor * (t if (idx >> i) & 1 else 1.0 - t)
            out = out + factor * value
        return out

    def evaluate(self, point: Sequence[Any]) -> Any:
        """Return the interpolated field value at ``point``.

        Coordinates may be floats or differentiable numbers.
        """
        return self.locate(point)._interpolate(point)

    def integrate(self, rect: Rect) -> Any:
        """Return the integral of the interpolated field over ``rect``."""
        r = rect & self.rect
        if r.is_empty():
            return 0.0
        if self.children:
            total: Any = 0.0
            for child in self.children:
                total = total + child.integrate(r)
            return total
        lo = self.rect.lo
        size = self.rect.size()
        adj = Rect(
            Vector((r.lo[i] - lo[i]) / size[i] for i in range(self.dim)),
            Vector((r.hi[i] - lo[i]) / size[i] for i in range(self.dim)),
        )
        if adj.is_empty():
            return 0.0
        local_integral = self._interpolate_local(list(adj.center())) * adj.content()
        return self.rect.content() * local_integral

    def _init_values(self, evaluator: Evaluator) -> None:
        self.values = [evaluator(self.rect.corner(i)) for i in range(1 << self.dim)]

    def _needs_split(self, evaluator: Evaluator, tol: float) -> bool:
        lo, hi, center = self.rect.lo, self.rect.hi, self.rect.center()
        choices = (lo, hi, center)
        for pick in itertools.product(range(3), repeat=self.dim):
            if 2 not in pick:
                continue
            point = Vector(choices[p][i] for i, p in enumerate(pick))
            if abs(self._interpolate(point) - evaluator(point)) > tol:
                return True
        return False

    def full_split(
        self,
        evaluator: Evaluator,
        tol: float = DEFAULT_TREE_TOL,
        level: int = 0,
        crop_outside: bool = False,
    ) -> None:
        """Sample ``evaluator`` at the corners and refine until within ``tol``.

        A cell is split when interpolation misses the field by more than
        ``tol`` at the midpoint of an edge, face or the cell itself; the root
        is always split.  With ``crop_outside`` cells lying wholly outside the
        surface (positive value beyond half the diagonal) are not refined.
        """
        rect = self.rect
        self._init_values(evaluator)

        next_crop = crop_outside
        if crop_outside and level > 0:
            center_value = evaluator(rect.center())
            half_diag = rect.size().length() * 0.5
            if center_value > half_diag:
                return
            if center_value < -half_diag:
                next_crop = False

        if level == 32 // self.dim:
            return
        if self.parent is not None and not self._needs_split(evaluator, tol):
            return

        self.split()
        set_rect = getattr(evaluator, "set_rect", None)
        for child in self.children:
            if set_rect is not None:
                set_rect(child.rect)
            child.full_split(evaluator, tol, level + 1, next_crop)


class PointDistanceEvaluator:
    """Distance to the nearest object of a projector, cached on a 1024-step grid."""

    def __init__(self, projector: Any) -> None:
        self.projector = projector
        self._cache: dict[tuple[int, ...], float] = {}

    def __call__(self, point: Any) -> float:
        point = Vector(point)
        key = tuple(round_half_up(c * 1023.0) for c in point)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        value = (point - Vector(self.projector.project(point))).length()
        self._cache[key] = value
        return value

    def set_rect(self, rect: Rect) -> None:
        """Accept the rectangle being refined; this evaluator does not use it."""


def build_distance_tree(
    evaluator: Evaluator, tol: float = DEFAULT_TREE_TOL, crop_outside: bool = False
) -> DistNode:
    """Build a distance tree over the unit cube."""
    root = DistNode()
    root.full_split(evaluator, tol, 0, crop_outside)
    return root


def build_point_distance_tree(projector: Any, tol: float = DEFAULT_TREE_TOL) -> DistNode:
    """Build a tree of the distance to the objects of ``projector``."""
    return build_distance_tree(PointDistanceEvaluator(projector), tol)