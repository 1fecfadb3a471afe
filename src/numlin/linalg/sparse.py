import logging
from collections.abc import Sequence
from typing import Self

import numpy as np
import numpy.typing as npt

from numlin.linalg.exceptions import InvalidMatrixSizeError, InvalidVectorSizeError
from numlin.linalg.matrix import Matrix, asvector
from numlin.scalar import ScalarType, float64

logger = logging.getLogger(__name__)


class SparseColumn[T]:
    """Compressed sparse vector.

    Parameters
    ----------
    nrows : int
        Length of the dense vector.
    nvals : int
        Number of stored elements.
    scalar : ScalarType, default=float64

    Attributes
    ----------
    nrows : int
    nvals : int
    row_ind : ndarray
        Indices of the stored elements.
    val : ndarray
        Values of the stored elements.
    """

    __slots__ = ("nrows", "nvals", "row_ind", "val", "_scalar")
    nrows: int
    nvals: int
    row_ind: npt.NDArray
    val: npt.NDArray
    _scalar: ScalarType

    def __init__(self, nrows: int, nvals: int, *, scalar: ScalarType = float64):
        self._scalar = scalar
        self.resize(nrows, nvals)

    @property
    def scalar(self) -> ScalarType:
        return self._scalar

    def resize(self, nrows: int, nvals: int) -> None:
        """Reallocate the vector; stored elements are reset to zero."""
        if nrows < 0 or not 0 <= nvals <= nrows:
            raise InvalidVectorSizeError(nvals)

        self.nrows = nrows
        self.nvals = nvals
        self.row_ind = np.zeros(nvals, np.intp)
        self.val = self._scalar.zeros(nvals)

    def todense(self) -> npt.NDArray:
        result = self._scalar.zeros(self.nrows)
        result[self.row_ind] = self.val
        return result


class SparseMatrix[T]:
    """Sparse matrix in compressed sparse column (CSC) storage.

    The stored elements of column ``j`` are ``val[col_ptr[j]:col_ptr[j + 1]]``, lying
    in the rows ``row_ind[col_ptr[j]:col_ptr[j + 1]]``.

    Parameters
    ----------
    nrows : int
        Number of rows.
    ncols : int
        Number of columns.
    nvals : int
        Number of stored elements.
    scalar : ScalarType, default=float64

    Attributes
    ----------
    nrows : int
    ncols : int
    nvals : int
    col_ptr : ndarray
        Offsets of the columns, of length ``ncols + 1``.
    row_ind : ndarray
        Row indices of the stored elements.
    val : ndarray
        Values of the stored elements.

    Examples
    --------
    >>> from numlin.linalg import Matrix, SparseMatrix
    >>> a = SparseMatrix.fromdense(Matrix(2, 2, [1.0, 0.0, 2.0, 3.0]))
    >>> a.nvals
    3
    >>> a.ax([1.0, 1.0]).tolist()
    [1.0, 5.0]
    """

    __slots__ = ("nrows", "ncols", "nvals", "col_ptr", "row_ind", "val", "_scalar")
    nrows: int
    ncols: int
    nvals: int
    col_ptr: npt.NDArray
    row_ind: npt.NDArray
    val: npt.NDArray
    _scalar: ScalarType

    def __init__(
        self, nrows: int, ncols: int, nvals: int, *, scalar: ScalarType = float64
    ):
        if nrows < 0 or ncols < 0:
            raise InvalidMatrixSizeError(nrows, ncols)

        if nvals < 0:
            raise InvalidVectorSizeError(nvals)

        self.nrows = nrows
        self.ncols = ncols
        self.nvals = nvals
        self.col_ptr = np.zeros(ncols + 1, np.intp)
        self.row_ind = np.zeros(nvals, np.intp)
        self.val = scalar.zeros(nvals)
        self._scalar = scalar

    @property
    def scalar(self) -> ScalarType:
        return self._scalar

    @property
    def shape(self) -> tuple[int, int]:
        return (self.nrows, self.ncols)

    @classmethod
    def fromdense(cls, a: Matrix, tol: float = 0.0) -> Self:
        """Build a sparse matrix from the elements of `a` whose magnitude exceeds
        `tol`."""
        scalar = a.scalar
        keep = [
            [i for i in range(a.rows) if scalar.abs(a[i, j]) > tol]
            for j in range(a.cols)
        ]
        result = cls(a.rows, a.cols, sum(len(x) for x in keep), scalar=scalar)
        k = 0

        for j, rows in enumerate(keep):
            for i in rows:
                result.row_ind[k] = i
                result.val[k] = a[i, j]
                k += 1

            result.col_ptr[j + 1] = k

        return result

    def todense(self) -> Matrix:
        result = Matrix.zeros(self.nrows, self.ncols, scalar=self._scalar)

        for j in range(self.ncols):
            for k in range(self.col_ptr[j], self.col_ptr[j + 1]):
                result[self.row_ind[k], j] += self.val[k]

        return result

    def ax(self, x: Sequence | npt.NDArray) -> npt.NDArray:
        """Multiply ``a @ x``.

        Raises
        ------
        InvalidVectorSizeError
            If `x` does not have `ncols` elements.
        """
        vec = asvector(x, self._scalar, self.ncols)
        result = self._scalar.zeros(self.nrows)

        for j in range(self.ncols):
            for k in range(self.col_ptr[j], self.col_ptr[j + 1]):
                result[self.row_ind[k]] += self.val[k] * vec[j]

        return result

    def atx(self, x: Sequence | npt.NDArray) -> npt.NDArray:
        """Multiply ``a.T @ x``.

        Raises
        ------
        InvalidVectorSizeError
            If `x` does not have `nrows` elements.
        """
        vec = asvector(x, self._scalar, self.nrows)
        result = self._scalar.zeros(self.ncols)

        for j in range(self.ncols):
            tmp = self._scalar.ZERO

            for k in range(self.col_ptr[j], self.col_ptr[j + 1]):
                tmp += self.val[k] * vec[self.row_ind[k]]

            result[j] = tmp

        return result

    def transpose(self) -> Self:
        """Return the transposed matrix.

        Within each column of the result, the row indices appear in increasing order.
        """
        m, n = self.nrows, self.ncols
        result = type(self)(n, m, self.nvals, scalar=self._scalar)
        count = np.zeros(m, np.intp)

        for k in range(self.nvals):
            count[self.row_ind[k]] += 1

        for j in range(m):
            result.col_ptr[j + 1] = result.col_ptr[j] + count[j]

        count[:] = 0

        for i in range(n):
            for k in range(self.col_ptr[i], self.col_ptr[i + 1]):
                j = self.row_ind[k]
                index = result.col_ptr[j] + count[j]
                result.row_ind[index] = i
                result.val[index] = self.val[k]
                count[j] += 1

        return result

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} of shape ({self.nrows}, {self.ncols}) "
            f"with {self.nvals} stored elements>"
        )


class ADAT[T]:
    """Product ``a @ diag(d) @ a.T`` of sparse matrices, for a varying diagonal `d`.

    The sparsity pattern of the product is computed once on construction, after
    which :meth:`update` only recomputes the values. Until the first update, all
    values are zero.

    Parameters
    ----------
    a : SparseMatrix
        Matrix of shape ``(m, n)``.
    at : SparseMatrix
        Transpose of `a`, as returned by :meth:`SparseMatrix.transpose`.

    Raises
    ------
    InvalidMatrixSizeError
        If the shape of `at` is not the transpose of that of `a`.

    Examples
    --------
    >>> from numlin.linalg import ADAT, Matrix, SparseMatrix
    >>> a = SparseMatrix.fromdense(Matrix(2, 2, [1.0, 0.0, 1.0, 1.0]))
    >>> adat = ADAT(a, a.transpose())
    >>> adat.update([2.0, 3.0])
    >>> adat.ref.todense().tolist()
    [[2.0, 2.0], [2.0, 5.0]]
    """

    __slots__ = ("_a", "_at", "_adat")
    _a: SparseMatrix[T]
    _at: SparseMatrix[T]
    _adat: SparseMatrix[T]

    def __init__(self, a: SparseMatrix[T], at: SparseMatrix[T]):
        if at.shape != (a.ncols, a.nrows):
            raise InvalidMatrixSizeError(at.nrows, at.ncols)

        m = at.ncols
        done = [-1] * m
        pattern = []

        for j in range(m):
            rows = []

            for i in range(at.col_ptr[j], at.col_ptr[j + 1]):
                k = at.row_ind[i]

                for l in range(a.col_ptr[k], a.col_ptr[k + 1]):
                    h = a.row_ind[l]

                    if done[h] != j:
                        done[h] = j
                        rows.append(h)

            rows.sort()
            pattern.append(rows)

        adat = SparseMatrix(m, m, sum(len(x) for x in pattern), scalar=a.scalar)
        k = 0

        for j, rows in enumerate(pattern):
            adat.row_ind[k : k + len(rows)] = rows
            k += len(rows)
            adat.col_ptr[j + 1] = k

        logger.debug("pattern of order %d with %d stored elements", m, adat.nvals)
        self._a = a
        self._at = at
        self._adat = adat

    @property
    def ref(self) -> SparseMatrix[T]:
        """The product matrix, updated in place by :meth:`update`."""
        return self._adat

    def update(self, d: Sequence | npt.NDArray) -> None:
        """Recompute the values of the product for the diagonal `d`.

        Raises
        ------
        InvalidVectorSizeError
            If `d` does not have ``a.ncols`` elements.
        """
        a, at, adat = self._a, self._at, self._adat
        scalar = a.scalar
        diag = asvector(d, scalar, a.ncols)
        temp = scalar.zeros(a.ncols)
        temp2 = scalar.zeros(a.nrows)

        for i in range(a.nrows):
            for j in range(at.col_ptr[i], at.col_ptr[i + 1]):
                k = at.row_ind[j]
                temp[k] = at.val[j] * diag[k]

            for j in range(at.col_ptr[i], at.col_ptr[i + 1]):
                k = at.row_ind[j]

                for l in range(a.col_ptr[k], a.col_ptr[k + 1]):
                    h = a.row_ind[l]
                    temp2[h] += temp[k] * a.val[l]

            for j in range(adat.col_ptr[i], adat.col_ptr[i + 1]):
                k = adat.row_ind[j]
                adat.val[j] = temp2[k]
                temp2[k] = scalar.ZERO
