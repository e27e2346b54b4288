"""Nearest-point queries over points and triangles using a bounding-box tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple, Protocol

from autorig.rect import Rect
from autorig.vector import Vector
from autorig.vecutils import proj_to_tri

__all__ = ["Vec3Object", "Tri3Object", "ObjectProjector"]


class _Projectable(Protocol):
    def bounding_rect(self) -> Rect: ...

    def __getitem__(self, i: int) -> float: ...

    def project(self, point: Vector) -> Vector: ...


@dataclass(frozen=True)
class Vec3Object:
    """A single point."""

    v: Vector

    def bounding_rect(self) -> Rect:
        return Rect.from_point(self.v)

    def __getitem__(self, i: int) -> float:
        return self.v[i]

    def project(self, point: Vector) -> Vector:
        return self.v


@dataclass(frozen=True)
class Tri3Object:
    """A triangle."""

    v1: Vector
    v2: Vector
    v3: Vector

    def bounding_rect(self) -> Rect:
        return Rect.from_point(self.v1) | Rect.from_point(self.v2) | Rect.from_point(self.v3)

    def __getitem__(self, i: int) -> float:
        # Used only to order triangles, so the sum serves as well as the centroid.
        return self.v1[i] + self.v2[i] + self.v3[i]

    def project(self, point: Vector) -> Vector:
        return proj_to_tri(point, self.v1, self.v2, self.v3)


class _Node(NamedTuple):
    rect: Rect
    child1: int  # -1 for a leaf
    child2: int  # object index for a leaf


class ObjectProjector:
    """Finds the closest point on a set of objects to a query point."""

    def __init__(self, objs: Sequence[_Projectable] = ()) -> None:
        self._objs = list(objs)
        self._nodes: list[_Node] = []
        if not self._objs:
            self._dim = 0
            return
        self._dim = self._objs[0].bounding_rect().dim
        orders = [
            sorted(range(len(self._objs)), key=lambda i, d=d: self._objs[i][d])
            for d in range(self._dim)
        ]
        self._build(orders, 0)

    def _build(self, orders: list[list[int]], cur_dim: int) -> int:
        index = len(self._nodes)
        self._nodes.append(None)  # type: ignore[arg-type]
        num = len(orders[0])
        if num == 1:
            obj = orders[0][0]
            self._nodes[index] = _Node(self._objs[obj].bounding_rect(), -1, obj)
            return index
        left = set(orders[cur_dim][: num // 2])
        orders1 = [[i for i in order if i in left] for order in orders]
        orders2 = [[i for i in order if i not in left] for order in orders]
        next_dim = (cur_dim + 1) % self._dim
        c1 = self._build(orders1, next_dim)
        c2 = self._build(orders2, next_dim)
        self._nodes[index] = _Node(self._nodes[c1].rect | self._nodes[c2].rect, c1, c2)
        return index

    def project(self, point: Any) -> Vector:
        """Return the closest point to ``point`` over all objects."""
        if not self._nodes:
            raise ValueError("projector holds no objects")
        target = Vector(float(c) for c in point)
        nodes = self._nodes
        min_dist_sq = 1e37
        closest = Vector((0.0,) * self._dim)
        todo = [(nodes[0].rect.dist_sq_to(target), 0)]
        while todo:
            dist, cur = todo.pop()
            if dist > min_dist_sq:
                continue
            node = nodes[cur]
            if node.child1 >= 0:
                for child in (node.child1, node.child2):
                    d = nodes[child].rect.dist_sq_to(target)
                    if d < min_dist_sq:
                        todo.append((d, child))
                # Visit the nearer of the top two entries first.
                if len(todo) >= 2 and todo[-1][0] > todo[-2][0]:
                    todo[-1], todo[-2] = todo[-2], todo[-1]
                continue
            cur_pt = self._objs[node.child2].project(target)
            dist_sq = (target - cur_pt).lengthsq()
            if dist_sq <= min_dist_sq:
                min_dist_sq = dist_sq
                closest = cur_pt
        return closest