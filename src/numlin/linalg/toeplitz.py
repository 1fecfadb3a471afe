from collections.abc import MutableSequence, Sequence

import numpy.typing as npt

from numlin.linalg.exceptions import (
    InvalidVectorSizeError,
    ShouldNotArriveHereError,
    SingularPrincipleMinorError,
    ZeroDiagonalElementError,
)
from numlin.linalg.matrix import asvector, output
from numlin.scalar import ScalarType, resolve_scalar

TINY = 1.0e-7


def toeplz(
    r: Sequence | npt.NDArray,
    y: Sequence | npt.NDArray,
    x: MutableSequence | npt.NDArray | None = None,
    *,
    scalar: ScalarType | None = None,
):
    """Solve a Toeplitz linear system by Levinson's recursion.

    The system reads ``sum(r[n - 1 + i - j] * x[j] for j in range(n)) == y[i]``, so
    that `r` lists the ``2n - 1`` distinct elements of the matrix from its top-right
    to its bottom-left corner. Every leading principal submatrix must be
    nonsingular.

    Parameters
    ----------
    r : Sequence | ndarray
        Elements of the matrix, of length ``2n - 1``.
    y : Sequence | ndarray
        Right-hand side of length ``n``.
    x : MutableSequence | ndarray, optional
        Buffer receiving the solution.
    scalar : ScalarType, optional
        Type of the elements. Inferred from `y` if omitted.

    Raises
    ------
    InvalidVectorSizeError
        If `r` does not have length ``2n - 1``.
    ZeroDiagonalElementError
        If the diagonal element ``r[n - 1]`` is zero.
    SingularPrincipleMinorError
        If a leading principal submatrix is singular.

    Examples
    --------
    >>> from numlin.linalg import toeplz
    >>> [round(float(v), 6) for v in toeplz([1, 2, 3, 4, 0], [10, 16, 17])]
    [1.0, 2.0, 3.0]
    """
    if scalar is None:
        scalar = resolve_scalar(y)

    rhs = asvector(y, scalar)
    n = len(rhs)

    if n == 0:
        raise InvalidVectorSizeError(0)

    r = asvector(r, scalar, 2 * n - 1)
    n1 = n - 1

    if scalar.abs(r[n1]) < TINY:
        raise ZeroDiagonalElementError(0)

    result = scalar.zeros(n)
    result[0] = rhs[0] / r[n1]

    if n1 == 0:
        return output(result, x)

    g = scalar.zeros(n1)
    h = scalar.zeros(n1)
    g[0] = r[n1 - 1] / r[n1]
    h[0] = r[n1 + 1] / r[n1]

    for m in range(n):
        m1 = m + 1
        sxn = -rhs[m1]
        sd = -r[n1]

        for j in range(m1):
            sxn += r[n1 + m1 - j] * result[j]
            sd += r[n1 + m1 - j] * g[m - j]

        if scalar.abs(sd) < TINY:
            raise SingularPrincipleMinorError

        result[m1] = sxn / sd

        for j in range(m1):
            result[j] -= result[m1] * g[m - j]

        if m1 == n1:
            return output(result, x)

        sgn = -r[n1 - m1 - 1]
        shn = -r[n1 + m1 + 1]
        sgd = -r[n1]

        for j in range(m1):
            sgn += r[n1 + j - m1] * g[j]
            shn += r[n1 + m1 - j] * h[j]
            sgd += r[n1 + j - m1] * h[m - j]

        if scalar.abs(sgd) < TINY:
            raise SingularPrincipleMinorError

        g[m1] = sgn / sgd
        h[m1] = shn / sd
        k = m
        pp = g[m1]
        qq = h[m1]

        for j in range((m + 2) >> 1):
            pt1, pt2 = g[j], g[k]
            qt1, qt2 = h[j], h[k]
            g[j] = pt1 - pp * qt2
            g[k] = pt2 - pp * qt1
            h[j] = qt1 - qq * pt2
            h[k] = qt2 - qq * pt1
            k -= 1

    raise ShouldNotArriveHereError
