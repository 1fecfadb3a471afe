import logging
import math
from collections.abc import MutableSequence, Sequence

import numpy.typing as npt

from numlin.linalg.exceptions import (
    InvalidMatrixSizeError,
    InvalidSizeError,
    NegativeValueNotAllowedError,
)
from numlin.linalg.matrix import Matrix, asvector, output

logger = logging.getLogger(__name__)


class CholeskyDecomposition:
    """Cholesky decomposition ``a = el @ el.T`` of a symmetric positive-definite
    matrix.

    Only the lower triangle of `a` is read.

    Parameters
    ----------
    a : Matrix
        Symmetric positive-definite matrix.

    Attributes
    ----------
    n : int
        Order of the matrix.
    el : Matrix
        Lower-triangular factor; its upper triangle is zero.

    Raises
    ------
    InvalidMatrixSizeError
        If `a` is not square.
    NegativeValueNotAllowedError
        If `a` is not positive definite.
    """

    __slots__ = ("n", "el")
    n: int
    el: Matrix

    def __init__(self, a: Matrix):
        if a.rows != a.cols:
            raise InvalidMatrixSizeError(a.rows, a.cols)

        scalar = a.scalar
        n = a.rows
        el = a.copy()

        for i in range(n):
            row_i = el[i]

            for j in range(i, n):
                row_j = el[j]
                tmp = row_i[j]

                for k in range(i):
                    tmp -= row_i[k] * row_j[k]

                if i == j:
                    if tmp <= scalar.ZERO:
                        logger.debug("non-positive pivot %g at row %d", tmp, i)
                        raise NegativeValueNotAllowedError

                    row_i[i] = scalar.sqrt(tmp)
                else:
                    row_j[i] = tmp / row_i[i]

        for i in range(n):
            for j in range(i):
                el[j, i] = scalar.ZERO

        logger.debug("Cholesky decomposition of order %d", n)
        self.n = n
        self.el = el

    def solve(
        self,
        b: Sequence | npt.NDArray,
        x: MutableSequence | npt.NDArray | None = None,
    ):
        """Solve ``a @ x = b``.

        Raises
        ------
        InvalidSizeError
            If `b` or `x` does not have length `n`.
        """
        n, el = self.n, self.el
        result = self.__vector(b)
        self.__check(x)

        for i in range(n):
            row = el[i]
            tmp = result[i]

            for j in range(i):
                tmp -= row[j] * result[j]

            result[i] = tmp / row[i]

        for i in reversed(range(n)):
            tmp = result[i]

            for j in range(i + 1, n):
                tmp -= el[j, i] * result[j]

            result[i] = tmp / el[i, i]

        return output(result, x)

    def elmult(
        self,
        y: Sequence | npt.NDArray,
        b: MutableSequence | npt.NDArray | None = None,
    ):
        """Multiply ``el @ y``.

        Raises
        ------
        InvalidSizeError
            If `y` or `b` does not have length `n`.
        """
        n, el = self.n, self.el
        vec = self.__vector(y)
        self.__check(b)
        result = el.scalar.zeros(n)

        for i in range(n):
            row = el[i]
            tmp = el.scalar.ZERO

            for j in range(i + 1):
                tmp += row[j] * vec[j]

            result[i] = tmp

        return output(result, b)

    def elsolve(
        self,
        b: Sequence | npt.NDArray,
        y: MutableSequence | npt.NDArray | None = None,
    ):
        """Solve ``el @ y = b``.

        Raises
        ------
        InvalidSizeError
            If `b` or `y` does not have length `n`.
        """
        n, el = self.n, self.el
        result = self.__vector(b)
        self.__check(y)

        for i in range(n):
            row = el[i]
            tmp = result[i]

            for j in range(i):
                tmp -= row[j] * result[j]

            result[i] = tmp / row[i]

        return output(result, y)

    def inverse(self) -> Matrix:
        """Return the inverse matrix."""
        n, el, scalar = self.n, self.el, self.el.scalar
        ainv = Matrix.zeros(n, n, scalar=scalar)

        for i in range(n):
            for j in range(i + 1):
                tmp = scalar.ONE if i == j else scalar.ZERO

                for k in reversed(range(j, i)):
                    tmp -= el[i, k] * ainv[j, k]

                ainv[j, i] = tmp / el[i, i]

        for i in reversed(range(n)):
            for j in range(i + 1):
                tmp = ainv[j, i]

                for k in range(i + 1, n):
                    tmp -= el[k, i] * ainv[j, k]

                ainv[i, j] = ainv[j, i] = tmp / el[i, i]

        return ainv

    def logdet(self) -> float:
        """Return the natural logarithm of the determinant."""
        return 2.0 * math.fsum(math.log(self.el[i, i]) for i in range(self.n))

    def __check(self, out):
        if out is not None and len(out) != self.n:
            raise InvalidSizeError

    def __vector(self, values):
        result = self.el.scalar.asarray(values)

        if len(result) != self.n:
            raise InvalidSizeError

        return result
