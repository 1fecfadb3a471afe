import numpy as np
import pytest

from numlin.linalg import (
    ADAT,
    InvalidMatrixSizeError,
    InvalidVectorSizeError,
    Matrix,
    SparseColumn,
    SparseMatrix,
)


def dense():
    return Matrix.fromrows([[1, 0, 2, 0], [0, 3, 0, 0], [4, 0, 0, 5]])


def test_fromdense():
    a = SparseMatrix.fromdense(dense())
    assert a.shape == (3, 4)
    assert a.nvals == 5
    assert a.col_ptr.tolist() == [0, 2, 3, 4, 5]
    assert a.row_ind.tolist() == [0, 2, 1, 0, 2]
    assert a.val.tolist() == [1.0, 4.0, 3.0, 2.0, 5.0]
    assert a.todense() == dense()

    assert SparseMatrix.fromdense(dense(), tol=2.5).nvals == 3


def test_ax_atx():
    a = SparseMatrix.fromdense(dense())
    assert a.ax([1, 2, 3, 4]).tolist() == [7.0, 6.0, 24.0]
    assert a.atx([1, 2, 3]).tolist() == [13.0, 6.0, 2.0, 15.0]

    with pytest.raises(InvalidVectorSizeError):
        a.ax([1, 2, 3])

    with pytest.raises(InvalidVectorSizeError):
        a.atx([1, 2, 3, 4])


def test_transpose():
    a = SparseMatrix.fromdense(dense())
    at = a.transpose()
    assert at.shape == (4, 3)
    assert at.nvals == a.nvals
    assert at.todense() == dense().T
    assert at.transpose().todense() == dense()

    for j in range(at.ncols):
        rows = at.row_ind[at.col_ptr[j] : at.col_ptr[j + 1]].tolist()
        assert rows == sorted(rows)


def test_adat():
    a = SparseMatrix.fromdense(dense())
    adat = ADAT(a, a.transpose())
    assert adat.ref.shape == (3, 3)

    for d in ([1.0, 1.0, 1.0, 1.0], [2.0, 0.5, 3.0, 0.25]):
        adat.update(d)
        full = dense().toarray()
        expected = full @ np.diag(d) @ full.T
        assert adat.ref.todense().toarray() == pytest.approx(expected)

    for j in range(3):
        rows = adat.ref.row_ind[adat.ref.col_ptr[j] : adat.ref.col_ptr[j + 1]].tolist()
        assert rows == sorted(rows)


def test_adat_pattern_is_fixed():
    a = SparseMatrix.fromdense(dense())
    adat = ADAT(a, a.transpose())
    nvals = adat.ref.nvals
    row_ind = adat.ref.row_ind.copy()
    adat.update([0.0, 0.0, 0.0, 0.0])
    assert adat.ref.nvals == nvals
    assert adat.ref.row_ind.tolist() == row_ind.tolist()
    assert adat.ref.val.tolist() == [0.0] * nvals


def test_adat_errors():
    a = SparseMatrix.fromdense(dense())

    with pytest.raises(InvalidMatrixSizeError):
        ADAT(a, a)

    adat = ADAT(a, a.transpose())

    with pytest.raises(InvalidVectorSizeError):
        adat.update([1.0, 1.0, 1.0])


def test_sparse_column():
    col = SparseColumn(5, 2)
    col.row_ind[:] = [1, 3]
    col.val[:] = [2.0, -1.0]
    assert col.todense().tolist() == [0.0, 2.0, 0.0, -1.0, 0.0]

    col.resize(3, 1)
    assert (col.nrows, col.nvals) == (3, 1)
    assert col.todense().tolist() == [0.0, 0.0, 0.0]

    with pytest.raises(InvalidVectorSizeError):
        col.resize(2, 3)
