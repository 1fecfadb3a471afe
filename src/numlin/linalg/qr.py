import logging
from collections.abc import MutableSequence, Sequence

import numpy.typing as npt

from numlin.linalg.exceptions import InvalidMatrixSizeError, SingularMatrixError
from numlin.linalg.matrix import Matrix, asvector, output

logger = logging.getLogger(__name__)

TINY = 1.0e-5


class QRDecomposition:
    """QR decomposition by Householder reflections.

    A singular matrix does not make the construction fail; instead, `singular` is
    set and :meth:`rsolve` (and hence :meth:`solve`) raises.

    Parameters
    ----------
    a : Matrix
        Square matrix to be decomposed.

    Attributes
    ----------
    n : int
        Order of the matrix.
    qt : Matrix
        Transpose of the orthogonal factor.
    r : Matrix
        Upper-triangular factor.
    singular : bool
        ``True`` if `r` has a vanishing diagonal element.

    Raises
    ------
    InvalidMatrixSizeError
        If `a` is not square.
    """

    __slots__ = ("n", "qt", "r", "singular")
    n: int
    qt: Matrix
    r: Matrix
    singular: bool

    def __init__(self, a: Matrix):
        if a.rows != a.cols:
            raise InvalidMatrixSizeError(a.rows, a.cols)

        scalar = a.scalar
        ZERO = scalar.ZERO
        n = a.rows
        r = a.copy()
        c = scalar.zeros(n)
        d = scalar.zeros(n)
        singular = False

        for k in range(n - 1):
            scale = max(scalar.abs(r[i, k]) for i in range(k, n))

            if scale < TINY:
                singular = True
                continue

            for i in range(k, n):
                r[i, k] /= scale

            tmp = ZERO

            for i in range(k, n):
                tmp += r[i, k] * r[i, k]

            sigma = scalar.copysign(scalar.sqrt(tmp), r[k, k])
            r[k, k] += sigma
            c[k] = sigma * r[k, k]
            d[k] = -scale * sigma

            for j in range(k + 1, n):
                tmp = ZERO

                for i in range(k, n):
                    tmp += r[i, k] * r[i, j]

                tau = tmp / c[k]

                for i in range(k, n):
                    r[i, j] -= tau * r[i, k]

        if n > 0:
            d[n - 1] = r[n - 1, n - 1]

            if scalar.abs(d[n - 1]) < TINY:
                singular = True

        qt = Matrix.identity(n, scalar=scalar)

        for k in range(n - 1):
            if c[k] == ZERO:
                continue

            for j in range(n):
                tmp = ZERO

                for i in range(k, n):
                    tmp += r[i, k] * qt[i, j]

                tmp /= c[k]

                for i in range(k, n):
                    qt[i, j] -= tmp * r[i, k]

        for i in range(n):
            r[i, i] = d[i]

            for j in range(i):
                r[i, j] = ZERO

        if singular:
            logger.debug("QR decomposition of order %d is singular", n)

        self.n = n
        self.qt = qt
        self.r = r
        self.singular = singular

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
        SingularMatrixError
            If the matrix is singular.
        """
        return self.rsolve(self.qtmult(b), x)

    def qtmult(
        self,
        b: Sequence | npt.NDArray,
        x: MutableSequence | npt.NDArray | None = None,
    ):
        """Multiply ``qt @ b``."""
        return output(self.qt @ asvector(b, self.qt.scalar, self.n), x)

    def rsolve(
        self,
        b: Sequence | npt.NDArray,
        x: MutableSequence | npt.NDArray | None = None,
    ):
        """Solve ``r @ x = b`` by back substitution.

        Raises
        ------
        SingularMatrixError
            If the matrix is singular.
        """
        if self.singular:
            raise SingularMatrixError("QRDecomposition")

        n, r = self.n, self.r
        result = asvector(b, r.scalar, n)

        for i in reversed(range(n)):
            row = r[i]
            tmp = result[i]

            for j in range(i + 1, n):
                tmp -= row[j] * result[j]

            result[i] = tmp / row[i]

        return output(result, x)

    def update(self, u: Sequence | npt.NDArray, v: Sequence | npt.NDArray) -> None:
        """Replace the decomposition of ``a`` by that of ``a + outer(u, v)``.

        The update takes :math:`O(n^2)` operations by Givens rotations instead of
        a new decomposition. `singular` is re-evaluated afterwards.

        Raises
        ------
        InvalidVectorSizeError
            If `u` or `v` does not have length `n`.
        """
        n, r, scalar = self.n, self.r, self.r.scalar
        w = self.qtmult(u)
        v = asvector(v, scalar, n)

        if n == 0:
            return

        k = n - 1

        while k > 0 and w[k] == scalar.ZERO:
            k -= 1

        for i in reversed(range(k)):
            self.rotate(i, w[i], -w[i + 1])

            if w[i] == scalar.ZERO:
                w[i] = scalar.abs(w[i + 1])
            elif scalar.abs(w[i]) > scalar.abs(w[i + 1]):
                ratio = w[i + 1] / w[i]
                w[i] = scalar.abs(w[i]) * scalar.sqrt(scalar.ONE + ratio * ratio)
            else:
                ratio = w[i] / w[i + 1]
                w[i] = scalar.abs(w[i + 1]) * scalar.sqrt(scalar.ONE + ratio * ratio)

        r[0] += w[0] * v

        for i in range(k):
            self.rotate(i, r[i, i], -r[i + 1, i])

        self.singular = any(scalar.abs(r[i, i]) < TINY for i in range(n))

        if self.singular:
            logger.debug("QR decomposition became singular by the update")

    def rotate(self, i: int, a, b) -> None:
        """Apply the Givens rotation in the plane of rows ``i`` and ``i + 1`` defined by
        ``cos = a / sqrt(a**2 + b**2)`` and ``sin = b / sqrt(a**2 + b**2)``."""
        n, r, qt, scalar = self.n, self.r, self.qt, self.r.scalar

        if not 0 <= i < n - 1:
            raise IndexError("rotation plane out of range")

        if a == scalar.ZERO:
            c = scalar.ZERO
            s = scalar.ONE if b >= scalar.ZERO else -scalar.ONE
        elif scalar.abs(a) > scalar.abs(b):
            fact = b / a
            c = scalar.copysign(scalar.ONE / scalar.sqrt(scalar.ONE + fact * fact), a)
            s = fact * c
        else:
            fact = a / b
            s = scalar.copysign(scalar.ONE / scalar.sqrt(scalar.ONE + fact * fact), b)
            c = fact * s

        for j in range(i, n):
            y, w = r[i, j], r[i + 1, j]
            r[i, j] = c * y - s * w
            r[i + 1, j] = s * y + c * w

        for j in range(n):
            y, w = qt[i, j], qt[i + 1, j]
            qt[i, j] = c * y - s * w
            qt[i + 1, j] = s * y + c * w
