import logging

from numlin.linalg.exceptions import InvalidMatrixSizeError, SingularMatrixError
from numlin.linalg.matrix import Matrix

logger = logging.getLogger(__name__)

TINY = 1.0e-7


def gauss_jordan(a: Matrix, b: Matrix) -> tuple[Matrix, Matrix]:
    """Solve ``a @ x = b`` by Gauss-Jordan elimination with full pivoting.

    Both arguments are overwritten: on return `a` holds its own inverse and `b` holds
    the solution vectors, one per column.

    Parameters
    ----------
    a : Matrix
        Square coefficient matrix.
    b : Matrix
        Right-hand sides with as many rows as `a`.

    Returns
    -------
    a : Matrix
        Inverse of the coefficient matrix.
    b : Matrix
        Solutions.

    Raises
    ------
    InvalidMatrixSizeError
        If `a` is not square or the row counts differ.
    SingularMatrixError
        If a pivot vanishes.

    Examples
    --------
    >>> from numlin.linalg import Matrix, gauss_jordan
    >>> a = Matrix(2, 2, [2.0, 0.0, 0.0, 4.0])
    >>> b = Matrix(2, 1, [1.0, 1.0])
    >>> ainv, x = gauss_jordan(a, b)
    >>> x.get_col(0).tolist()
    [0.5, 0.25]
    """
    if a.rows != a.cols:
        raise InvalidMatrixSizeError(a.rows, a.cols)

    if b.rows != a.rows:
        raise InvalidMatrixSizeError(b.rows, b.cols)

    if a.scalar is not b.scalar:
        raise TypeError

    scalar = a.scalar
    ZERO = scalar.ZERO
    n = a.rows
    indxc = [0] * n
    indxr = [0] * n
    ipiv = [0] * n

    for i in range(n):
        big = ZERO
        irow = icol = 0

        for j in range(n):
            if ipiv[j] == 1:
                continue

            row = a[j]

            for k in range(n):
                if ipiv[k] == 0 and scalar.abs(row[k]) >= big:
                    big = scalar.abs(row[k])
                    irow = j
                    icol = k

        ipiv[icol] += 1

        if irow != icol:
            a.swap_rows(irow, icol)
            b.swap_rows(irow, icol)

        indxr[i] = irow
        indxc[i] = icol

        if scalar.abs(a[icol, icol]) < TINY:
            raise SingularMatrixError("gauss_jordan")

        pivinv = scalar.ONE / a[icol, icol]
        a[icol, icol] = scalar.ONE
        a[icol] *= pivinv
        b[icol] *= pivinv

        for ll in range(n):
            if ll == icol:
                continue

            dum = a[ll, icol]
            a[ll, icol] = ZERO
            a[ll] -= dum * a[icol]
            b[ll] -= dum * b[icol]

    for k in reversed(range(n)):
        if indxr[k] != indxc[k]:
            a.swap_cols(indxr[k], indxc[k])

    logger.debug("Gauss-Jordan elimination of order %d with %d rhs", n, b.cols)
    return (a, b)
