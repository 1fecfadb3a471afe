import logging
from collections.abc import MutableSequence, Sequence

import mpmath
import numpy as np
import numpy.typing as npt

from numlin.context import getcontext
from numlin.linalg.exceptions import (
    InvalidMatrixSizeError,
    SingularMatrixError,
)
from numlin.linalg.matrix import Matrix, asvector, output

logger = logging.getLogger(__name__)

TINY = 1.0e-20
ZERO_ROW = 1.0e-7


class LUDecomposition:
    """LU decomposition with implicit partial pivoting (Crout's method).

    The factors share one matrix: the strict lower triangle holds the multipliers
    of the unit lower-triangular factor, the rest holds the upper-triangular factor.
    The input matrix is copied and left untouched.

    Parameters
    ----------
    a : Matrix
        Square matrix to be decomposed.

    Attributes
    ----------
    n : int
        Order of the matrix.
    lu : Matrix
        Row-permuted LU factors stored in place.
    indx : list[int]
        Row interchanged with row ``k`` at step ``k``.
    d : int
        Parity of the row permutation, ``1`` or ``-1``.

    Raises
    ------
    InvalidMatrixSizeError
        If `a` is not square.
    SingularMatrixError
        If a row of `a` is (almost) zero.

    Examples
    --------
    >>> from numlin.linalg import LUDecomposition, Matrix
    >>> a = Matrix(2, 2, [4.0, 3.0, 6.0, 3.0])
    >>> lu = LUDecomposition(a)
    >>> [round(float(v), 6) for v in lu.solve([10.0, 12.0])]
    [1.0, 2.0]
    >>> round(float(lu.det()), 6)
    -6.0
    """

    __slots__ = ("n", "lu", "indx", "d")
    n: int
    lu: Matrix
    indx: list[int]
    d: int

    def __init__(self, a: Matrix):
        if a.rows != a.cols:
            raise InvalidMatrixSizeError(a.rows, a.cols)

        scalar = a.scalar
        ZERO = scalar.ZERO
        n = a.rows
        lu = a.copy()
        vv = scalar.empty(n)
        indx = []
        d = 1

        for i in range(n):
            big = max((scalar.abs(x) for x in lu[i]), default=ZERO)

            if big < ZERO_ROW:
                raise SingularMatrixError("LUDecomposition")

            vv[i] = scalar.ONE / big

        for k in range(n):
            big = ZERO
            imax = k

            for i in range(k, n):
                temp = vv[i] * scalar.abs(lu[i, k])

                if temp > big:
                    big = temp
                    imax = i

            if k != imax:
                lu.swap_rows(k, imax)
                d = -d
                vv[imax] = vv[k]

            indx.append(imax)

            if lu[k, k] == ZERO:
                logger.debug("zero pivot at column %d replaced by %g", k, TINY)
                lu[k, k] = scalar.fromfloat(TINY)

            pivot = lu[k, k]
            row_k = lu[k]

            for i in range(k + 1, n):
                row_i = lu[i]
                temp = row_i[k] / pivot
                row_i[k] = temp

                for j in range(k + 1, n):
                    row_i[j] -= temp * row_k[j]

        logger.debug("LU decomposition of order %d, parity %d", n, d)
        self.n = n
        self.lu = lu
        self.indx = indx
        self.d = d

    def solve(
        self,
        b: Sequence | npt.NDArray,
        x: MutableSequence | npt.NDArray | None = None,
    ):
        """Solve ``a @ x = b``.

        Parameters
        ----------
        b : Sequence | ndarray
            Right-hand side of length `n`.
        x : MutableSequence | ndarray, optional
            Buffer of length `n` receiving the solution.

        Returns
        -------
        ndarray | MutableSequence
            `x` if given, otherwise a new vector.

        Raises
        ------
        InvalidVectorSizeError
            If `b` or `x` does not have length `n`.
        """
        n, lu, scalar = self.n, self.lu, self.lu.scalar
        ZERO = scalar.ZERO
        result = asvector(b, scalar, n)
        ii = 0

        for i in range(n):
            ip = self.indx[i]
            tmp = result[ip]
            result[ip] = result[i]
            row = lu[i]

            if ii != 0:
                for j in range(ii - 1, i):
                    tmp -= row[j] * result[j]
            elif tmp != ZERO:
                ii = i + 1

            result[i] = tmp

        for i in reversed(range(n)):
            row = lu[i]
            tmp = result[i]

            for j in range(i + 1, n):
                tmp -= row[j] * result[j]

            result[i] = tmp / row[i]

        return output(result, x)

    def solve_mat(self, b: Matrix, x: Matrix | None = None) -> Matrix:
        """Solve ``a @ x = b`` for every column of `b`.

        Raises
        ------
        InvalidMatrixSizeError
            If `b` does not have `n` rows or `x` does not have the shape of `b`.
        """
        if b.rows != self.n:
            raise InvalidMatrixSizeError(b.rows, b.cols)

        if x is None:
            x = Matrix.zeros(self.n, b.cols, scalar=self.lu.scalar)
        elif x.shape != b.shape:
            raise InvalidMatrixSizeError(x.rows, x.cols)

        for j in range(b.cols):
            col = self.solve(b.get_col(j))

            for i in range(self.n):
                x[i, j] = col[i]

        return x

    def inverse(self) -> Matrix:
        """Return the inverse matrix."""
        eye = Matrix.identity(self.n, scalar=self.lu.scalar)
        return self.solve_mat(eye)

    def det(self):
        """Return the determinant."""
        result = self.lu.scalar.fromfloat(self.d)

        for i in range(self.n):
            result *= self.lu[i, i]

        return result

    def mprove(
        self,
        a: Matrix,
        b: Sequence | npt.NDArray,
        x: MutableSequence | npt.NDArray,
    ):
        """Improve a solution `x` of ``a @ x = b`` by one step of iterative refinement.

        The residual ``a @ x - b`` is accumulated with the working precision of the
        current context before the correction is solved for.

        Parameters
        ----------
        a : Matrix
            The matrix this decomposition was computed from.
        b : Sequence | ndarray
            Right-hand side.
        x : MutableSequence | ndarray
            Approximate solution, improved in place.

        Returns
        -------
        MutableSequence | ndarray
            `x`.
        """
        n, scalar = self.n, self.lu.scalar

        if a.shape != (n, n):
            raise InvalidMatrixSizeError(a.rows, a.cols)

        rhs = asvector(b, scalar, n)
        sol = asvector(x, scalar, n)
        r = scalar.empty(n)

        with mpmath.workprec(getcontext().refine_precision):
            for i in range(n):
                row = a[i]
                terms = [mpmath.mpf(float(row[j])) * float(sol[j]) for j in range(n)]
                r[i] = scalar.fromfloat(float(mpmath.fsum(terms) - float(rhs[i])))

        correction = self.solve(r)
        size = float(np.max(np.abs(correction), initial=0.0))
        logger.debug("refinement correction of max norm %g", size)
        return output(sol - correction, x)
