import logging
from collections.abc import MutableSequence, Sequence

import numpy.typing as npt

from numlin.linalg.exceptions import InvalidMatrixSizeError
from numlin.linalg.matrix import Matrix, asvector, output

logger = logging.getLogger(__name__)

TINY = 1.0e-10


def _check_compact(a: Matrix, m1: int, m2: int) -> None:
    if m1 < 0 or m2 < 0 or a.cols != m1 + m2 + 1:
        raise InvalidMatrixSizeError(a.rows, a.cols)


def banmul(
    a: Matrix,
    m1: int,
    m2: int,
    x: Sequence | npt.NDArray,
    b: MutableSequence | npt.NDArray | None = None,
):
    """Multiply ``a @ x`` for a band-diagonal matrix `a` in compact storage.

    Row ``i`` of the compact matrix holds the band elements of row ``i`` of the full
    matrix: the diagonal element at column `m1`, the `m1` subdiagonal elements to its
    left and the `m2` superdiagonal elements to its right. Entries that fall outside
    the full matrix are ignored.

    Parameters
    ----------
    a : Matrix
        Compact storage of shape ``(n, m1 + m2 + 1)``.
    m1 : int
        Number of subdiagonals.
    m2 : int
        Number of superdiagonals.
    x : Sequence | ndarray
        Vector of length ``n``.
    b : MutableSequence | ndarray, optional
        Buffer receiving the product.

    Examples
    --------
    >>> from numlin.linalg import Matrix, banmul
    >>> a = Matrix(3, 3, [0, 2, 1, 1, 2, 1, 1, 2, 0])
    >>> banmul(a, 1, 1, [1, 1, 1]).tolist()
    [3.0, 4.0, 3.0]
    """
    _check_compact(a, m1, m2)
    scalar = a.scalar
    n = a.rows
    vec = asvector(x, scalar, n)
    result = scalar.zeros(n)

    for i in range(n):
        k = i - m1
        row = a[i]
        tmp = scalar.ZERO

        for j in range(max(0, -k), min(m1 + m2 + 1, n - k)):
            tmp += row[j] * vec[j + k]

        result[i] = tmp

    return output(result, b)


class BandDecomposition:
    """LU decomposition of a band-diagonal matrix in compact storage, with partial
    pivoting restricted to the band.

    Parameters
    ----------
    a : Matrix
        Compact storage of shape ``(n, m1 + m2 + 1)`` (see :func:`banmul`).
    m1 : int
        Number of subdiagonals.
    m2 : int
        Number of superdiagonals.

    Attributes
    ----------
    n : int
    m1 : int
    m2 : int
    au : Matrix
        Upper-triangular factor in compact storage, diagonal first.
    al : Matrix
        Multipliers of the lower-triangular factor, shape ``(n, m1)``.
    indx : list[int]
        Row interchanged with row ``k`` at step ``k``.
    d : int
        Parity of the row permutation.

    Raises
    ------
    InvalidMatrixSizeError
        If `a` does not have ``m1 + m2 + 1`` columns.
    """

    __slots__ = ("n", "m1", "m2", "au", "al", "indx", "d")
    n: int
    m1: int
    m2: int
    au: Matrix
    al: Matrix
    indx: list[int]
    d: int

    def __init__(self, a: Matrix, m1: int, m2: int):
        _check_compact(a, m1, m2)
        scalar = a.scalar
        n = a.rows
        mm = m1 + m2 + 1
        au = a.copy()
        al = Matrix.zeros(n, m1, scalar=scalar)
        indx = []
        d = 1

        # shift the first m1 rows left so that every row starts with its diagonal
        l = m1

        for i in range(min(m1, n)):
            for j in range(m1 - i, mm):
                au[i, j - l] = au[i, j]

            l -= 1

            for j in range(mm - l - 1, mm):
                au[i, j] = scalar.ZERO

        l = m1

        for k in range(n):
            dum = au[k, 0]
            i = k

            if l < n:
                l += 1

            for j in range(k + 1, l):
                if scalar.abs(au[j, 0]) > scalar.abs(dum):
                    dum = au[j, 0]
                    i = j

            indx.append(i)

            if i != k:
                d = -d
                au.swap_rows(k, i)

            if au[k, 0] == scalar.ZERO:
                logger.debug("zero pivot at row %d replaced by %g", k, TINY)
                au[k, 0] = scalar.fromfloat(TINY)

            row_k = au[k]

            for i in range(k + 1, l):
                row_i = au[i]
                dum = row_i[0] / row_k[0]
                al[k, i - k - 1] = dum

                for j in range(1, mm):
                    row_i[j - 1] = row_i[j] - dum * row_k[j]

                row_i[mm - 1] = scalar.ZERO

        logger.debug("band decomposition of order %d (m1=%d, m2=%d)", n, m1, m2)
        self.n = n
        self.m1 = m1
        self.m2 = m2
        self.au = au
        self.al = al
        self.indx = indx
        self.d = d

    def solve(
        self,
        b: Sequence | npt.NDArray,
        x: MutableSequence | npt.NDArray | None = None,
    ):
        """Solve ``a @ x = b``.

        Raises
        ------
        InvalidVectorSizeError
            If `b` or `x` does not have length `n`.
        """
        n, m1, au, al = self.n, self.m1, self.au, self.al
        mm = m1 + self.m2 + 1
        result = asvector(b, au.scalar, n)
        l = m1

        for k in range(n):
            j = self.indx[k]

            if j != k:
                result[k], result[j] = result[j], result[k]

            if l < n:
                l += 1

            for j in range(k + 1, l):
                result[j] -= al[k, j - k - 1] * result[k]

        l = 1

        for i in reversed(range(n)):
            row = au[i]
            dum = result[i]

            for k in range(1, l):
                dum -= row[k] * result[k + i]

            result[i] = dum / row[0]

            if l < mm:
                l += 1

        return output(result, x)

    def det(self):
        """Return the determinant."""
        result = self.au.scalar.fromfloat(self.d)

        for i in range(self.n):
            result *= self.au[i, 0]

        return result
