"""Geometric helpers: projections onto lines, segments and triangles."""

from __future__ import annotations

import math
from typing import Any

from autorig.deriv import acos, sqrt
from autorig.vector import Vector, sqr

__all__ = [
    "get_basis",
    "distsq_to_line",
    "proj_to_line",
    "distsq_to_seg",
    "proj_to_seg",
    "circle_intersection_area",
    "proj_to_tri",
]


def get_basis(n: Vector) -> tuple[Vector, Vector]:
    """Return two unit vectors orthogonal to ``n`` and to each other."""
    if n.lengthsq() < 1e-16:
        return Vector(1.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0)
    a0, a1, a2 = abs(n[0]), abs(n[1]), abs(n[2])
    if a0 <= a1 and a0 <= a2:
        v2 = Vector(1.0, 0.0, 0.0)
    elif a1 <= a2:
        v2 = Vector(0.0, 1.0, 0.0)
    else:
        v2 = Vector(0.0, 0.0, 1.0)
    v1 = (n % v2).normalize()
    v2 = (n % v1).normalize()
    return v1, v2


def distsq_to_line(v: Vector, l: Vector, direction: Vector) -> Any:
    """Squared distance from ``v`` to the line through ``l`` along ``direction``."""
    diff = v - l
    return max(0.0, diff.lengthsq() - sqr(diff * direction) / direction.lengthsq())


def proj_to_line(v: Vector, l: Vector, direction: Vector) -> Vector:
    """Project ``v`` onto the line through ``l`` along ``direction``."""
    return l + (((v - l) * direction) / direction.lengthsq()) * direction


def distsq_to_seg(v: Vector, p1: Vector, p2: Vector) -> Any:
    """Squared distance from ``v`` to the segment ``p1``-``p2``."""
    direction = p2 - p1
    difp2 = p2 - v
    if difp2 * direction < 0.0:
        return difp2.lengthsq()
    difp1 = v - p1
    dot = difp1 * direction
    if dot <= 0.0:
        return difp1.lengthsq()
    return max(0.0, difp1.lengthsq() - sqr(dot) / direction.lengthsq())


def proj_to_seg(v: Vector, p1: Vector, p2: Vector) -> Vector:
    """Closest point to ``v`` on the segment ``p1``-``p2``."""
    direction = p2 - p1
    if (p2 - v) * direction < 0.0:
        return p2
    dot = (v - p1) * direction
    if dot <= 0.0:
        return p1
    return p1 + (dot / direction.lengthsq()) * direction


def circle_intersection_area(d: Any, r1: Any, r2: Any) -> Any:
    """Area shared by two circles of radii ``r1``, ``r2`` whose centres are ``d`` apart."""
    tol = 1e-8
    if r1 + r2 <= d + tol:
        return 0.0
    if r1 + d <= r2 + tol:
        return math.pi * sqr(r1)
    if r2 + d <= r1 + tol:
        return math.pi * sqr(r2)
    sqrdif = sqr(r1) - sqr(r2)
    dsqrdif = sqr(d) - sqrdif
    a1 = sqr(r1) * acos((sqr(d) + sqrdif) / (2.0 * r1 * d))
    a2 = sqr(r2) * acos(dsqrdif / (2.0 * r2 * d))
    return a1 + a2 - 0.5 * sqrt(sqr(2.0 * d * r2) - sqr(dsqrdif))


def proj_to_tri(point: Vector, p1: Vector, p2: Vector, p3: Vector) -> Vector:
    """Closest point to ``point`` on the triangle ``p1``, ``p2``, ``p3``."""
    tolsq = 1e-16
    p2p1 = p2 - p1
    p3p1 = p3 - p1
    normal = p2p1 % p3p1

    if (p2p1 % (point - p1)) * normal >= 0.0:
        s2 = ((p3 - p2) % (point - p2)) * normal >= 0.0
        s3 = (p3p1 % (point - p3)) * normal <= 0.0
        if s2 and s3:
            if normal.lengthsq() < tolsq:
                return p1
            dot = (point - p3) * normal
            return point - (dot / normal.lengthsq()) * normal
        if not s3 and (s2 or (point - p3) * p3p1 >= 0.0):
            return proj_to_seg(point, p3, p1)
        return proj_to_seg(point, p2, p3)

    if (point - p1) * p2p1 < 0.0:
        return proj_to_seg(point, p3, p1)
    if (point - p2) * p2p1 > 0.0:
        return proj_to_seg(point, p2, p3)
    return proj_to_line(point, p1, p2p1)