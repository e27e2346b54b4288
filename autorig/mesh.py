"""Triangle meshes stored as half-edges, with readers for common text formats."""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from os import PathLike
from typing import TextIO

from autorig.rect import Rect
from autorig.utils import iter_word_lines
from autorig.vector import Vector

__all__ = ["MeshError", "MeshVertex", "MeshEdge", "Mesh"]

_log = logging.getLogger(__name__)

_INT_RE = re.compile(r"\s*[+-]?\d+")
_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class MeshError(ValueError):
    """Raised when a mesh cannot be read or its topology cannot be built."""


@dataclass
class MeshVertex:
    """A vertex; ``edge`` is a half-edge whose ``prev`` points at this vertex."""

    pos: Vector = field(default_factory=Vector)
    normal: Vector = field(default_factory=Vector)
    edge: int = -1


@dataclass
class MeshEdge:
    """A half-edge pointing to ``vertex``; it starts at ``prev``'s vertex."""

    vertex: int = -1
    prev: int = -1
    twin: int = -1


def _scan_int(word: str, line_num: int) -> int:
    match = _INT_RE.match(word)
    if match is None:
        raise MeshError(f"expected an integer on line {line_num}, got {word!r}")
    return int(match.group())


def _scan_float(word: str, line_num: int) -> float:
    match = _FLOAT_RE.match(word)
    if match is not None:
        return float(match.group())
    try:
        return float(word)
    except ValueError:
        raise MeshError(f"expected a number on line {line_num}, got {word!r}") from None


def _scan_xyz(words: list[str], line_num: int) -> tuple[float, float, float]:
    x, y, z = (_scan_float(w, line_num) for w in words[:3])
    return x, y, z


def _lines(stream: TextIO) -> Iterable[tuple[int, list[str]]]:
    """Yield numbered non-empty, non-comment lines."""
    for line_num, words in enumerate(iter_word_lines(stream), start=1):
        if words and not words[0].startswith("#"):
            yield line_num, words


_Parsed = tuple[list[Vector], list[int]]


def _read_obj(stream: TextIO) -> _Parsed:
    positions: list[Vector] = []
    corners: list[int] = []
    for line_num, words in _lines(stream):
        if len(words[0]) != 1:
            continue
        if words[0] == "v":
            if len(words) != 4:
                raise MeshError(f"error on line {line_num}")
            positions.append(Vector(_scan_xyz(words[1:], line_num)))
        elif words[0] == "f":
            if not 4 <= len(words) <= 15:
                raise MeshError(f"error on line {line_num}")
            idx = [_scan_int(w, line_num) - 1 for w in words[1:]]
            for j in range(2, len(idx)):
                corners.extend((idx[0], idx[j - 1], idx[j]))
    return positions, corners


def _read_counted(stream: TextIO, header: Callable[[list[str], int], int | None],
                  transform: Callable[[float, float, float], Vector]) -> _Parsed:
    """Read formats with a header, a vertex block, then 'n a b c' faces."""
    positions: list[Vector] = []
    corners: list[int] = []
    verts_left: int | None = None
    for line_num, words in _lines(stream):
        if verts_left is None:
            verts_left = header(words, line_num)
            continue
        if verts_left > 0:
            verts_left -= 1
            if len(words) < 3:
                raise MeshError(f"error on line {line_num}")
            positions.append(transform(*_scan_xyz(words, line_num)))
            continue
        if len(words) != 4:
            raise MeshError(f"error on line {line_num}")
        corners.extend(_scan_int(w, line_num) for w in words[1:4])
    return positions, corners


def _read_off(stream: TextIO) -> _Parsed:
    def header(words: list[str], line_num: int) -> int | None:
        if len(words) < 3:
            return None
        return _scan_int(words[0], line_num)

    return _read_counted(stream, header, lambda x, y, z: Vector(x, y, z))


def _read_ply(stream: TextIO) -> _Parsed:
    state = {"count": -1}

    def header(words: list[str], line_num: int) -> int | None:
        if words[0] == "end_header":
            if state["count"] < 0:
                raise MeshError("no vertex count in header")
            return state["count"]
        if len(words) >= 3 and words[0] == "element" and words[1] == "vertex":
            state["count"] = _scan_int(words[2], line_num)
        return None

    return _read_counted(stream, header, lambda x, y, z: Vector(-z, x, -y))


def _read_gts(stream: TextIO) -> _Parsed:
    positions: list[Vector] = []
    corners: list[int] = []
    fedges: list[tuple[int, int]] = []
    verts_left: int | None = None
    edges_left = -1
    for line_num, words in _lines(stream):
        if verts_left is None:
            if len(words) < 3:
                continue
            verts_left = _scan_int(words[0], line_num)
            edges_left = _scan_int(words[1], line_num)
            continue
        if verts_left > 0:
            verts_left -= 1
            if len(words) < 3:
                raise MeshError(f"error on line {line_num}")
            x, y, z = _scan_xyz(words, line_num)
            positions.append(Vector(-x, z, y))
            continue
        if edges_left > 0:
            edges_left -= 1
            if len(words) != 2:
                raise MeshError(f"error (edge) on line {line_num}")
            e1, e2 = (_scan_int(w, line_num) for w in words)
            fedges.append((e1 - 1, e2 - 1))
            continue
        if len(words) != 3:
            raise MeshError(f"error on line {line_num}")
        face = [_scan_int(w, line_num) - 1 for w in words]
        if any(not 0 <= a < len(fedges) for a in face):
            raise MeshError(f"invalid edge index on line {line_num}")
        for i in range(3):
            first, second = fedges[face[i]], fedges[face[(i + 1) % 3]]
            vertex = -1
            if first[0] in second:
                vertex = first[0]
            elif first[1] in second:
                vertex = first[1]
            corners.append(vertex)
    return positions, corners


def _read_stl(stream: TextIO) -> _Parsed:
    positions: list[Vector] = []
    corners: list[int] = []
    index: dict[Vector, int] = {}
    last: deque[int] = deque(maxlen=3)
    for line_num, words in _lines(stream):
        if words[0] == "vertex":
            if len(words) < 4:
                raise MeshError(f"error on line {line_num}")
            x, y, z = _scan_xyz(words[1:], line_num)
            cur = Vector(y, z, x)
            if cur not in index:
                index[cur] = len(positions)
                positions.append(cur)
            last.append(index[cur])
        elif words[0] == "endfacet":
            if len(last) < 3:
                raise MeshError(f"facet with fewer than three vertices on line {line_num}")
            if len(set(last)) < 3:
                _log.warning("duplicate vertex in triangle on line %d", line_num)
                continue
            corners.extend(last)
    return positions, corners


_READERS: dict[str, Callable[[TextIO], _Parsed]] = {
    "obj": _read_obj,
    "ply": _read_ply,
    "off": _read_off,
    "gts": _read_gts,
    "stl": _read_stl,
}


def _remove_duplicate_faces(corners: list[int]) -> list[int]:
    """Drop faces with the same vertex set in pairs; an odd count leaves one."""
    pending: dict[tuple[int, ...], tuple[int, int, int]] = {}
    for k in range(0, len(corners), 3):
        face = (corners[k], corners[k + 1], corners[k + 2])
        key = tuple(sorted(face))
        if key in pending:
            del pending[key]
        else:
            pending[key] = face
    return [v for face in pending.values() for v in face]


class Mesh:
    """A closed triangle mesh: vertices plus half-edges, three per face."""

    def __init__(self) -> None:
        self.vertices: list[MeshVertex] = []
        self.edges: list[MeshEdge] = []
        self.to_add = Vector(0.0, 0.0, 0.0)
        self.scale = 1.0

    def __repr__(self) -> str:
        return f"Mesh({len(self.vertices)} vertices, {len(self.edges)} edges)"

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> Mesh:
        """Read a mesh, choosing the format by the file extension."""
        name = str(path)
        fmt = name[-4:]
        if len(name) < 4 or fmt[0] != "." or fmt[1:] not in _READERS:
            raise MeshError(f"unknown mesh file type: {name}")
        _log.info("reading %s", name)
        with open(path, encoding="utf-8", errors="replace") as stream:
            mesh = cls.read(stream, fmt[1:])
        _log.info("read %s: %d vertices, %d edges", name, len(mesh.vertices), len(mesh.edges))
        return mesh

    @classmethod
    def read(cls, stream: TextIO, fmt: str) -> Mesh:
        """Read a mesh in format ``fmt`` (obj, ply, off, gts or stl) from a text stream."""
        reader = _READERS.get(fmt.lstrip("."))
        if reader is None:
            raise MeshError(f"unknown mesh format: {fmt}")
        positions, corners = reader(stream)
        mesh = cls()
        if not positions:
            mesh.edges = [MeshEdge(vertex=v) for v in corners]
            return mesh

        for v in corners:
            if not 0 <= v < len(positions):
                raise MeshError(f"invalid vertex index {v}")

        corners = _remove_duplicate_faces(corners)
        used = sorted(set(corners))
        remap = {old: new for new, old in enumerate(used)}
        mesh.vertices = [MeshVertex(pos=positions[old]) for old in used]
        mesh.edges = [MeshEdge(vertex=remap[v]) for v in corners]

        mesh.compute_topology()
        if not mesh.integrity_check():
            _log.warning("mesh read with integrity errors")
        mesh.compute_vertex_normals()
        return mesh

    def compute_topology(self) -> None:
        """Fill in ``prev`` and ``twin`` of every half-edge and each vertex's edge."""
        edges = self.edges
        for i, edge in enumerate(edges):
            edge.prev = (i - i % 3) + (i + 2) % 3
            edge.twin = -1
        half_edges: list[dict[int, int]] = [{} for _ in self.vertices]
        for i, edge in enumerate(edges):
            v1 = edge.vertex
            v2 = edges[edge.prev].vertex
            self.vertices[v1].edge = edges[edge.prev].prev
            if v2 in half_edges[v1]:
                raise MeshError(f"duplicate edge detected: {v1} to {v2}")
            half_edges[v1][v2] = i
            twin = half_edges[v2].get(v1)
            if twin is not None:
                edges[twin].twin = i
                edge.twin = twin

    def compute_vertex_normals(self) -> None:
        """Set each vertex normal to the normalized sum of adjacent face normals."""
        sums = [Vector(0.0, 0.0, 0.0) for _ in self.vertices]
        for k in range(0, len(self.edges), 3):
            i1, i2, i3 = (e.vertex for e in self.edges[k:k + 3])
            p1 = self.vertices[i1].pos
            normal = ((self.vertices[i2].pos - p1) % (self.vertices[i3].pos - p1)).normalize()
            for i in (i1, i2, i3):
                sums[i] = sums[i] + normal
        for vertex, total in zip(self.vertices, sums):
            vertex.normal = total.normalize()

    def normalize_bounding_box(self) -> None:
        """Scale and move the mesh so it sits centred in the unit cube, filling 0.9 of it."""
        box = Rect.from_points(v.pos for v in self.vertices)
        if box.is_empty():
            raise MeshError("cannot normalize an empty mesh")
        longest = max(box.size())
        if longest == 0:
            raise MeshError("cannot normalize a mesh of zero extent")
        cscale = 0.9 / longest
        ctoadd = Vector(0.5, 0.5, 0.5) - box.center() * cscale
        for vertex in self.vertices:
            vertex.pos = ctoadd + vertex.pos * cscale
        self.to_add = ctoadd + cscale * self.to_add
        self.scale *= cscale

    def write_obj(self, path: str | PathLike[str]) -> None:
        """Write the mesh as a Wavefront OBJ file."""
        with open(path, "w", encoding="utf-8") as out:
            for vertex in self.vertices:
                x, y, z = vertex.pos
                out.write(f"v {x:g} {y:g} {z:g}\n")
            for k in range(0, len(self.edges), 3):
                a, b, c = (e.vertex + 1 for e in self.edges[k:k + 3])
                out.write(f"f {a} {b} {c}\n")

    def is_connected(self) -> bool:
        """Return True if the mesh is a single connected component."""
        if not self.vertices:
            return False
        reached = [False] * len(self.vertices)
        reached[0] = True
        count = 1
        todo = deque([0])
        while todo:
            start = self.vertices[todo.popleft()].edge
            if start < 0:
                raise MeshError("vertex without an edge")
            cur = start
            while True:
                cur = self.edges[self.edges[cur].prev].twin
                if cur < 0:
                    raise MeshError("mesh has boundary edges")
                vtx = self.edges[cur].vertex
                if not reached[vtx]:
                    reached[vtx] = True
                    count += 1
                    todo.append(vtx)
                if cur == start:
                    break
        return count == len(self.vertices)

    def integrity_check(self) -> bool:
        """Return True if the half-edge structure describes a closed manifold."""
        try:
            self._verify()
        except MeshError as exc:
            _log.warning("mesh integrity error: %s", exc)
            return False
        return True

    def _verify(self) -> None:
        vertices, edges = self.vertices, self.edges
        vs, es = len(vertices), len(edges)

        def check(ok: bool, what: str) -> None:
            if not ok:
                raise MeshError(what)

        if vs == 0:
            check(es == 0, "edges without vertices")
            return
        check(es > 0, "vertices without edges")

        for v in vertices:
            check(0 <= v.edge < es, "vertex edge out of range")
        for e in edges:
            check(0 <= e.vertex < vs, "edge vertex out of range")
            check(0 <= e.prev < es, "edge prev out of range")
            check(0 <= e.twin < es, "edge twin out of range")

        for i, e in enumerate(edges):
            check(e.prev != i, "edge is its own prev")
            check(edges[edges[e.prev].prev].prev == i, "face is not a triangle")
            check(e.twin != i, "edge is its own twin")
            check(edges[e.twin].twin == i, "twins do not match")
            check(edges[e.twin].vertex == edges[e.prev].vertex, "twin and prev vertices differ")

        for i, v in enumerate(vertices):
            check(edges[edges[v.edge].prev].vertex == i, "vertex edge does not start at vertex")

        edge_count = [0] * vs
        for e in edges:
            edge_count[e.vertex] += 1
        for i, v in enumerate(vertices):
            start = cur = v.edge
            count = 0
            while True:
                cur = edges[edges[cur].prev].twin
                count += 1
                if cur == start or count > edge_count[i]:
                    break
            check(count == edge_count[i], "non-manifold vertex found")