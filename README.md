# autorig

Pure-Python building blocks for automatic rigging of character meshes:
small vector and matrix types, forward-mode automatic differentiation,
axis-aligned boxes, half-edge triangle meshes read from common text
formats, a bounding-box tree for closest-point queries and adaptive
octree distance fields. The package has no dependencies beyond the
standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `autorig.vector`: the immutable `Vector` type. `*` between two vectors is
  the dot product, `%` the cross product; `apply`, `lengthsq`, `length` and
  `normalize` are methods. Helpers: `sqr`, `cube`, `quad`, `round_half_up`,
  `sign`, `assign_corner` and `bit_less`.
- `autorig.deriv`: `Deriv`, a value carrying sparse partial derivatives
  (`Deriv.variable(x, n)` marks an independent variable, `get_deriv(n)` reads
  a partial), with the functions `sqrt`, `log`, `log10`, `exp`, `sin`, `cos`,
  `tan`, `acos`, `asin`, `atan`, `fabs`, `power` and `atan2`, which accept
  plain numbers as well.
- `autorig.rect`: `Rect`, an axis-aligned box with `&` (intersection),
  `|` (bounding box), `contains`, `size`, `content`, `diag_length`, `center`,
  `corner` and `dist_sq_to` for points or boxes.
- `autorig.vecutils`: `get_basis`, `distsq_to_line`, `proj_to_line`,
  `distsq_to_seg`, `proj_to_seg`, `proj_to_tri` and
  `circle_intersection_area`.
- `autorig.utils`: `read_words` and `iter_word_lines` split text streams into
  whitespace-separated words, joining lines that end in a backslash.
- `autorig.multilinear`: `Multilinear`, interpolation over the unit
  hypercube from its corner values, with `evaluate` and `integrate`.
- `autorig.pointprojector`: `ObjectProjector`, a bounding-box tree that
  returns the closest point on a set of `Vec3Object` points or `Tri3Object`
  triangles.
- `autorig.matrix`: dense `VectorN` and `Matrix` with `transpose`,
  `inverse` (raises `ValueError` on a singular matrix), `det`, and
  `get_eigensystem`, a Jacobi solver for symmetric matrices that returns
  eigenvalues by decreasing absolute value and, on request, the eigenvectors
  as columns.
- `autorig.transform`: `Quaternion` (with `from_axis_angle`,
  `from_rotation` and `normalized`), `Transform` for
  `v -> rot * (v * scale) + trans`, and `Matrix3`.
- `autorig.mesh`: `Mesh`, a closed triangle mesh stored as half-edges
  (`MeshVertex`, `MeshEdge`). `Mesh.from_file` picks the reader by extension
  (`.obj`, `.ply`, `.off`, `.gts`, ASCII `.stl`) and `Mesh.read` reads from a
  text stream. Reading drops duplicate face pairs and unused vertices, builds
  the topology and computes vertex normals. Unreadable input raises
  `MeshError`; a failed `integrity_check` is logged as a warning. Also:
  `is_connected`, `normalize_bounding_box` (fits the mesh into 0.9 of the
  unit cube, centred) and `write_obj`.
- `autorig.disttree`: `DistNode`, an adaptive tree of multilinear cells
  with `locate`, `evaluate`, `integrate`, `count_nodes` and `max_level`;
  `build_distance_tree` refines any callable field over the unit cube and
  `build_point_distance_tree` builds the distance to the objects of an
  `ObjectProjector`, using `PointDistanceEvaluator`.

## Examples

Reading a mesh and preparing it:

```python
import io
from autorig.mesh import Mesh

tetrahedron = """\
v 0 0 0
v 1 0 0
v 0 1 0
v 0 0 1
f 1 3 2
f 1 2 4
f 1 4 3
f 2 3 4
"""
mesh = Mesh.read(io.StringIO(tetrahedron), "obj")
print(mesh.integrity_check(), mesh.is_connected())
mesh.normalize_bounding_box()
mesh.write_obj("tetrahedron.obj")
```

Derivatives:

```python
from autorig.deriv import Deriv, sin

x = Deriv.variable(2.0, 0)
y = x * x + sin(x)
print(y.x, y.get_deriv(0))
```

A distance field to a set of points:

```python
from autorig.vector import Vector
from autorig.pointprojector import ObjectProjector, Vec3Object
from autorig.disttree import build_point_distance_tree

points = [Vec3Object(Vector(0.3, 0.5, 0.5)), Vec3Object(Vector(0.7, 0.5, 0.5))]
projector = ObjectProjector(points)
tree = build_point_distance_tree(projector, tol=0.05)
print(tree.count_nodes(), tree.evaluate(Vector(0.5, 0.5, 0.5)))
```

## What the package does not do

It provides the geometric pieces only. It has no skeleton definitions, no
step that places a skeleton's joints inside a mesh or refines such a
placement, no computation of skinning weights, and no command-line program.
Logging goes through the standard `logging` module under the `autorig`
logger names.