"""Dense vectors and matrices of arbitrary size, with a Jacobi eigen-solver."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from numbers import Number
from typing import Any

__all__ = ["VectorN", "Matrix", "get_eigensystem"]

_log = logging.getLogger(__name__)

_SINGULAR_TOL = 1e-10


class VectorN:
    """A mutable vector of any length."""

    __slots__ = ("_data",)

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._data = list(values)

    def __getitem__(self, index: int) -> Any:
        return self._data[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._data[index] = value

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"VectorN({self._data!r})"

    def __str__(self) -> str:
        return "[" + " ".join(str(x) for x in self._data) + "]"

    def _check(self, other: VectorN) -> None:
        if len(self._data) != len(other._data):
            raise ValueError(
                f"size mismatch: {len(self._data)} and {len(other._data)}"
            )

    def __add__(self, other: Any) -> VectorN:
        if not isinstance(other, VectorN):
            return NotImplemented
        self._check(other)
        return VectorN(a + b for a, b in zip(self._data, other._data))

    def __sub__(self, other: Any) -> VectorN:
        if not isinstance(other, VectorN):
            return NotImplemented
        self._check(other)
        return VectorN(a - b for a, b in zip(self._data, other._data))

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, VectorN):
            self._check(other)
            return sum((a * b for a, b in zip(self._data, other._data)), 0.0)
        if isinstance(other, Number):
            return VectorN(a * other for a in self._data)
        return NotImplemented

    def __rmul__(self, other: Any) -> VectorN:
        if isinstance(other, Number):
            return VectorN(other * a for a in self._data)
        return NotImplemented

    def __truediv__(self, scalar: Any) -> VectorN:
        if not isinstance(scalar, Number):
            return NotImplemented
        return VectorN(a / scalar for a in self._data)

    def __neg__(self) -> VectorN:
        return VectorN(-a for a in self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VectorN):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def lengthsq(self) -> float:
        """Return the squared Euclidean length."""
        return self * self

    def length(self) -> float:
        """Return the Euclidean length."""
        return math.sqrt(self.lengthsq())

    def sum(self) -> Any:
        """Return the sum of the components."""
        return sum(self._data, 0.0)

    def normalize(self) -> VectorN:
        """Return the vector scaled to unit length; a zero vector gives NaNs."""
        length = self.length()
        if length == 0:
            return VectorN(math.nan for _ in self._data)
        return self / length


class Matrix:
    """A mutable dense matrix stored as a list of row vectors."""

    __slots__ = ("_rows",)

    def __init__(self, rows: int = 0, cols: int = 0, fill: Any = 0.0) -> None:
        self._rows = [VectorN([fill] * cols) for _ in range(rows)]

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]]) -> Matrix:
        """Build a matrix from an iterable of rows of equal length."""
        out = cls()
        out._rows = [VectorN(row) for row in rows]
        if len({len(row) for row in out._rows}) > 1:
            raise ValueError("rows have different lengths")
        return out

    @classmethod
    def identity(cls, size: int, diag: Any = 1.0) -> Matrix:
        """Return a square matrix with ``diag`` on the diagonal."""
        out = cls(size, size)
        for i in range(size):
            out._rows[i][i] = diag
        return out

    @classmethod
    def diagonal(cls, values: Iterable[Any]) -> Matrix:
        """Return a square matrix with ``values`` on the diagonal."""
        values = list(values)
        out = cls(len(values), len(values))
        for i, value in enumerate(values):
            out._rows[i][i] = value
        return out

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, tuple):
            row, col = key
            return self._rows[row][col]
        return self._rows[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        if isinstance(key, tuple):
            row, col = key
            self._rows[row][col] = value
        else:
            self._rows[key] = VectorN(value)

    def rows(self) -> int:
        """Return the number of rows."""
        return len(self._rows)

    def cols(self) -> int:
        """Return the number of columns."""
        return len(self._rows[0]) if self._rows else 0

    def __repr__(self) -> str:
        return f"Matrix.from_rows({[list(r) for r in self._rows]!r})"

    def __str__(self) -> str:
        return "[" + "\n ".join(str(row) for row in self._rows) + "]"

    def sum(self) -> Any:
        """Return the sum of all entries."""
        return sum((row.sum() for row in self._rows), 0.0)

    def _same_shape(self, other: Matrix) -> None:
        if self.rows() != other.rows() or self.cols() != other.cols():
            raise ValueError("matrix shapes differ")

    def __add__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._same_shape(other)
        return Matrix.from_rows(a + b for a, b in zip(self._rows, other._rows))

    def __sub__(self, other: Any) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        self._same_shape(other)
        return Matrix.from_rows(a - b for a, b in zip(self._rows, other._rows))

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Matrix):
            if self.cols() != other.rows():
                raise ValueError("inner dimensions do not match")
            columns = [other.column(j) for j in range(other.cols())]
            return Matrix.from_rows([row * col for col in columns] for row in self._rows)
        if isinstance(other, VectorN):
            return VectorN(row * other for row in self._rows)
        if isinstance(other, Number):
            return Matrix.from_rows(row * other for row in self._rows)
        return NotImplemented

    def __truediv__(self, scalar: Any) -> Matrix:
        if not isinstance(scalar, Number):
            return NotImplemented
        return Matrix.from_rows(row / scalar for row in self._rows)

    def __neg__(self) -> Matrix:
        return Matrix.from_rows(-row for row in self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]

    def column(self, idx: int) -> VectorN:
        """Return column ``idx`` as a vector."""
        if not 0 <= idx < self.cols():
            raise IndexError(f"column {idx} out of range")
        return VectorN(row[idx] for row in self._rows)

    def transpose(self) -> Matrix:
        """Return the transposed matrix."""
        return Matrix.from_rows(self.column(i) for i in range(self.cols()))

    def _pivot(self, rows: list[VectorN], i: int) -> tuple[int, float]:
        pivot, biggest = -1, -1.0
        for j in range(i, len(rows)):
            cur = abs(rows[j][i])
            if cur > biggest:
                biggest, pivot = cur, j
        return pivot, biggest

    def inverse(self) -> Matrix:
        """Return the inverse by Gauss-Jordan elimination with partial pivoting."""
        if self.rows() != self.cols():
            raise ValueError("only square matrices can be inverted")
        n = self.rows()
        tmp = [VectorN(row) for row in self._rows]
        out = Matrix.identity(n)._rows
        for i in range(n):
            pivot, biggest = self._pivot(tmp, i)
            if biggest <= _SINGULAR_TOL:
                raise ValueError("matrix is singular")
            tmp[i], tmp[pivot] = tmp[pivot], tmp[i]
            out[i], out[pivot] = out[pivot], out[i]
            cur = tmp[i][i]
            tmp[i] = tmp[i] / cur
            out[i] = out[i] / cur
            for j in range(n):
                if j == i:
                    continue
                factor = tmp[j][i]
                tmp[j] = tmp[j] - tmp[i] * factor
                out[j] = out[j] - out[i] * factor
        return Matrix.from_rows(out)

    def det(self) -> Any:
        """Return the determinant; 0 when a pivot is negligibly small."""
        n = self.rows()
        tmp = [list(row) for row in self._rows]
        out = 1.0
        for i in range(n):
            pivot, biggest = -1, -1.0
            for j in range(i, n):
                cur = abs(tmp[j][i])
                if cur > biggest:
                    biggest, pivot = cur, j
            if biggest <= _SINGULAR_TOL:
                return 0.0
            tmp[i], tmp[pivot] = tmp[pivot], tmp[i]
            if pivot != i:
                out = -out
            cur = tmp[i][i]
            out *= cur
            for j in range(i + 1, n):
                fact = tmp[j][i] / cur
                for k in range(i + 1, n):
                    tmp[j][k] -= fact * tmp[i][k]
        return out


def _jacobi(row: int, col: int, a: list[list[float]], vecs: list[list[float]] | None) -> None:
    """Apply one Jacobi rotation zeroing ``a[row][col]`` (lower triangle only)."""
    off = a[row][col]
    if off == 0:
        return  # the rotation would be the identity
    num = a[row][row] - a[col][col]
    theta = num / (2.0 * off)
    if abs(theta) > 1e20:
        t = off / num
    else:
        t = (1.0 if theta > 0 else -1.0) / (abs(theta) + math.sqrt(theta * theta + 1.0))
    c = 1.0 / math.sqrt(t * t + 1.0)
    s = t * c
    tau = s / (1.0 + c)

    a[col][col] -= t * off
    a[row][row] += t * off

    for i in range(col):
        old = a[col][i]
        a[col][i] -= s * (a[row][i] + tau * a[col][i])
        a[row][i] += s * (old - tau * a[row][i])
    for i in range(col + 1, row):
        old = a[i][col]
        a[i][col] -= s * (a[row][i] + tau * a[i][col])
        a[row][i] += s * (old - tau * a[row][i])
    for i in range(row + 1, len(a)):
        old = a[i][col]
        a[i][col] -= s * (a[i][row] + tau * a[i][col])
        a[i][row] += s * (old - tau * a[i][row])

    if vecs is not None:
        for vrow in vecs:
            old = vrow[col]
            vrow[col] -= s * (vrow[row] + tau * vrow[col])
            vrow[row] += s * (old - tau * vrow[row])

    a[row][col] = 0.0


def get_eigensystem(m: Matrix, want_vectors: bool = False) -> Any:
    """Eigenvalues of a symmetric matrix, by decreasing absolute value.

    Only the lower triangle is read.  With ``want_vectors`` the result is a
    pair ``(values, vectors)`` whose columns are the matching eigenvectors.
    """
    if m.rows() != m.cols():
        raise ValueError("matrix must be square")
    size = m.rows()
    if size <= 1:
        raise ValueError("matrix must be at least 2x2")
    a = [list(row) for row in (m[i] for i in range(size))]
    vecs = (
        [[1.0 if i == j else 0.0 for j in range(size)] for i in range(size)]
        if want_vectors
        else None
    )

    tol = 1e-12
    sweeps = 0
    while True:
        sweeps += 1
        if sweeps >= 50:
            break
        biggest = -1.0
        for i in range(size):
            for j in range(i):
                biggest = max(biggest, abs(a[i][j]))
                _jacobi(i, j, a, vecs)
        if biggest < tol:
            break
    _log.debug("eigensystem finished after %d sweeps", sweeps)

    diag = [a[i][i] for i in range(size)]
    order = [i for _, i in sorted(((abs(d), i) for i, d in enumerate(diag)), reverse=True)]
    values = VectorN(diag[i] for i in order)
    if vecs is None:
        return values
    vectors = Matrix.from_rows([vrow[i] for i in order] for vrow in vecs)
    return values, vectors