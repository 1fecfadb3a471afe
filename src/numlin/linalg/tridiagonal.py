import logging
from collections.abc import MutableSequence, Sequence

import numpy.typing as npt

from numlin.linalg.exceptions import (
    DivisionByZeroError,
    InvalidVectorSizeError,
    ZeroDiagonalElementError,
)
from numlin.linalg.matrix import asvector, output
from numlin.scalar import ScalarType, resolve_scalar

logger = logging.getLogger(__name__)

TINY = 1.0e-10


def tridiag(
    a: Sequence | npt.NDArray,
    b: Sequence | npt.NDArray,
    c: Sequence | npt.NDArray,
    r: Sequence | npt.NDArray,
    u: MutableSequence | npt.NDArray | None = None,
    *,
    scalar: ScalarType | None = None,
):
    """Solve a tridiagonal linear system by the Thomas algorithm.

    Row ``j`` of the system reads ``a[j] * u[j-1] + b[j] * u[j] + c[j] * u[j+1] =
    r[j]``, so that ``a[0]`` and ``c[n-1]`` are not used. No pivoting is performed.

    Parameters
    ----------
    a : Sequence | ndarray
        Subdiagonal.
    b : Sequence | ndarray
        Diagonal.
    c : Sequence | ndarray
        Superdiagonal.
    r : Sequence | ndarray
        Right-hand side.
    u : MutableSequence | ndarray, optional
        Buffer receiving the solution.
    scalar : ScalarType, optional
        Type of the elements. Inferred from `b` if omitted.

    Raises
    ------
    InvalidVectorSizeError
        If the lengths of the arguments differ.
    ZeroDiagonalElementError
        If ``b[0]`` is zero.
    DivisionByZeroError
        If a pivot vanishes during the elimination.

    Examples
    --------
    >>> from numlin.linalg import tridiag
    >>> tridiag([0, 1], [2, 2], [1, 0], [3, 3]).tolist()
    [1.0, 1.0]
    """
    if scalar is None:
        scalar = resolve_scalar(b)

    diag = asvector(b, scalar)
    n = len(diag)
    sub = asvector(a, scalar, n)
    sup = asvector(c, scalar, n)
    result = asvector(r, scalar, n)

    if n == 0:
        return output(result, u)

    if diag[0] == scalar.ZERO:
        raise ZeroDiagonalElementError(0)

    gam = scalar.zeros(n)
    bet = diag[0]
    result[0] /= bet

    for j in range(1, n):
        gam[j] = sup[j - 1] / bet
        bet = diag[j] - sub[j] * gam[j]

        if scalar.abs(bet) < TINY:
            logger.debug("pivot %g at row %d", bet, j)
            raise DivisionByZeroError

        result[j] = (result[j] - sub[j] * result[j - 1]) / bet

    for j in reversed(range(n - 1)):
        result[j] -= gam[j + 1] * result[j + 1]

    return output(result, u)


def cyclic(
    a: Sequence | npt.NDArray,
    b: Sequence | npt.NDArray,
    c: Sequence | npt.NDArray,
    alpha,
    beta,
    r: Sequence | npt.NDArray,
    x: MutableSequence | npt.NDArray | None = None,
    *,
    scalar: ScalarType | None = None,
):
    """Solve a cyclic tridiagonal linear system.

    The system is that of :func:`tridiag` with the corner elements `beta` in the
    top-right and `alpha` in the bottom-left. It is reduced to two tridiagonal
    systems by the Sherman-Morrison formula.

    Parameters
    ----------
    a, b, c : Sequence | ndarray
        Sub-, main- and superdiagonal.
    alpha
        Bottom-left corner element.
    beta
        Top-right corner element.
    r : Sequence | ndarray
        Right-hand side.
    x : MutableSequence | ndarray, optional
        Buffer receiving the solution.
    scalar : ScalarType, optional
        Type of the elements. Inferred from `b` if omitted.

    Raises
    ------
    InvalidVectorSizeError
        If the system has fewer than three unknowns or the lengths differ.
    ZeroDiagonalElementError
        If ``b[0]`` is zero.
    DivisionByZeroError
        If a pivot of the reduced systems vanishes.
    """
    if scalar is None:
        scalar = resolve_scalar(b)

    bb = asvector(b, scalar)
    n = len(bb)

    if n <= 2:
        raise InvalidVectorSizeError(n)

    alpha = scalar.fromfloat(alpha)
    beta = scalar.fromfloat(beta)

    if bb[0] == scalar.ZERO:
        raise ZeroDiagonalElementError(0)

    gamma = -bb[0]
    bb[0] -= gamma
    bb[n - 1] -= alpha * beta / gamma
    result = tridiag(a, bb, c, r, scalar=scalar)
    u = scalar.zeros(n)
    u[0] = gamma
    u[n - 1] = alpha
    z = tridiag(a, bb, c, u, scalar=scalar)
    fact = (result[0] + beta * result[n - 1] / gamma) / (
        scalar.ONE + z[0] + beta * z[n - 1] / gamma
    )
    result -= fact * z
    return output(result, x)
