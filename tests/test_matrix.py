import math

import pytest

from autorig.matrix import Matrix, VectorN, get_eigensystem


def close(a, b, tol=1e-9):
    return abs(a - b) < tol


def matrices_close(a, b, tol=1e-9):
    return a.rows() == b.rows() and a.cols() == b.cols() and all(
        close(a[i, j], b[i, j], tol) for i in range(a.rows()) for j in range(a.cols())
    )


def entries(m):
    return [m[i, j] for i in range(m.rows()) for j in range(m.cols())]


A = Matrix.from_rows([[4.0, 7.0, 2.0], [3.0, 6.0, 1.0], [2.0, 5.0, 3.0]])
B = Matrix.from_rows([[1.0, 2.0, 0.5], [0.0, 3.0, 1.0], [2.0, 1.0, 1.0]])
IDENT3 = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0]


def test_vector_dot_equals_lengthsq():
    v = VectorN([1.0, 2.0, 3.0])
    assert v * v == v.lengthsq()


def test_vector_sum():
    assert VectorN([1.0, 2.0, 3.0]).sum() == 6.0


def test_vector_normalize_unit_length():
    assert VectorN([3.0, -1.0, 2.0]).normalize().length() == pytest.approx(1.0, abs=1e-9)


def test_vector_arithmetic_round_trip():
    v = VectorN([1.0, 2.0])
    w = VectorN([0.5, -4.0])
    assert (v + w) - w == v
    assert -(-v) == v
    assert (v * 2.0) / 2.0 == v
    assert 2.0 * v == v * 2.0


def test_vector_size_mismatch_raises():
    with pytest.raises(ValueError):
        VectorN([1.0, 2.0]) + VectorN([1.0])


def test_vector_setitem():
    v = VectorN([0.0, 0.0])
    v[1] = 5.0
    assert list(v) == [0.0, 5.0]


def test_matrix_element_access_and_set():
    m = Matrix(2, 3)
    m[1, 2] = 7.0
    m[0][1] = 4.0
    assert m[1][2] == 7.0
    assert m[0, 1] == 4.0
    assert m.rows() == 2 and m.cols() == 3


def test_identity_is_multiplicative_unit():
    assert A * Matrix.identity(3) == A
    assert Matrix.identity(3) * A == A


def test_diagonal_matches_identity_with_diag():
    assert Matrix.diagonal([2.0, 2.0]) == Matrix.identity(2, 2.0)


def test_transpose_twice():
    m = Matrix.from_rows([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    t = m.transpose()
    assert t.rows() == 3 and t.cols() == 2
    assert t.transpose() == m
    assert list(t[2]) == list(m.column(2)) == [3.0, 6.0]


def test_inverse_product_is_identity():
    assert entries(A * A.inverse()) == pytest.approx(IDENT3, abs=1e-9)
    assert entries(A.inverse() * A) == pytest.approx(IDENT3, abs=1e-9)


def test_inverse_singular_raises():
    singular = Matrix.from_rows([[1.0, 2.0], [2.0, 4.0]])
    with pytest.raises(ValueError):
        singular.inverse()


def test_inverse_non_square_raises():
    with pytest.raises(ValueError):
        Matrix(2, 3).inverse()


def test_det_identity():
    assert Matrix.identity(4).det() == 1.0


def test_det_singular_is_zero():
    assert Matrix.from_rows([[1.0, 2.0], [2.0, 4.0]]).det() == 0.0


def test_det_multiplicative():
    assert (A * B).det() == pytest.approx(A.det() * B.det(), abs=1e-8)


def test_det_of_inverse():
    assert A.det() * A.inverse().det() == pytest.approx(1.0, abs=1e-9)


def test_det_row_swap_negates():
    swapped = Matrix.from_rows([A[1], A[0], A[2]])
    assert swapped.det() == pytest.approx(-A.det(), abs=1e-9)


def test_det_transpose_invariant():
    assert A.transpose().det() == pytest.approx(A.det(), abs=1e-9)


def test_matrix_vector_product_matches_column():
    e1 = VectorN([0.0, 1.0, 0.0])
    assert A * e1 == A.column(1)


def test_matrix_product_shape_mismatch_raises():
    with pytest.raises(ValueError):
        Matrix(2, 3) * Matrix(2, 3)


def test_matrix_scalar_ops_and_sum():
    assert (A * 2.0) / 2.0 == A
    assert (A + B) - B == A
    assert close((-A).sum(), -A.sum())
    assert close((A + A).sum(), 2 * A.sum())


def test_column_out_of_range():
    with pytest.raises(IndexError):
        A.column(3)


def test_eigen_diagonal_sorted_by_abs():
    values = get_eigensystem(Matrix.diagonal([1.0, -5.0, 3.0]))
    assert list(values) == [-5.0, 3.0, 1.0]


def test_eigen_identity_does_not_produce_nan():
    values, vectors = get_eigensystem(Matrix.identity(3), want_vectors=True)
    assert all(v == 1.0 for v in values)
    assert matrices_close(vectors * vectors.transpose(), Matrix.identity(3))


def test_eigen_vectors_satisfy_definition():
    m = Matrix.from_rows([[2.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 4.0]])
    values, vectors = get_eigensystem(m, want_vectors=True)
    for i, lam in enumerate(values):
        col = vectors.column(i)
        mv = m * col
        assert all(close(a, lam * b, 1e-8) for a, b in zip(mv, col))
    assert close(values.sum(), 9.0)
    mags = [abs(v) for v in values]
    assert mags == sorted(mags, reverse=True)
    assert matrices_close(vectors.transpose() * vectors, Matrix.identity(3), 1e-8)


def test_eigen_values_match_with_and_without_vectors():
    m = Matrix.from_rows([[5.0, 2.0], [2.0, 1.0]])
    alone = get_eigensystem(m)
    paired, _ = get_eigensystem(m, want_vectors=True)
    assert list(alone) == pytest.approx(list(paired), abs=1e-9)
    assert alone[0] * alone[1] == pytest.approx(m.det(), abs=1e-9)


def test_eigen_rejects_bad_shapes():
    with pytest.raises(ValueError):
        get_eigensystem(Matrix(2, 3))
    with pytest.raises(ValueError):
        get_eigensystem(Matrix.identity(1))


def test_normalize_zero_gives_nan():
    n = VectorN([0.0, 0.0]).normalize()
    assert n[0] == pytest.approx(math.nan, nan_ok=True)
    assert n[1] == pytest.approx(math.nan, nan_ok=True)