from collections.abc import MutableSequence, Sequence

import numpy.typing as npt

from numlin.linalg.matrix import asvector, output
from numlin.scalar import ScalarType, resolve_scalar


def vander(
    x: Sequence | npt.NDArray,
    q: Sequence | npt.NDArray,
    w: MutableSequence | npt.NDArray | None = None,
    *,
    scalar: ScalarType | None = None,
):
    """Solve the Vandermonde system ``sum(x[i]**k * w[i] for i in range(n)) == q[k]``.

    The coefficients of the master polynomial are computed first, then each unknown
    by synthetic division, which takes :math:`O(n^2)` operations without forming the
    matrix. The abscissas must be distinct.

    Parameters
    ----------
    x : Sequence | ndarray
        Abscissas.
    q : Sequence | ndarray
        Right-hand side.
    w : MutableSequence | ndarray, optional
        Buffer receiving the solution.
    scalar : ScalarType, optional
        Type of the elements. Inferred from `q` if omitted.

    Raises
    ------
    InvalidVectorSizeError
        If `x` and `q` have different lengths.

    Examples
    --------
    >>> from numlin.linalg import vander
    >>> [round(float(v), 6) for v in vander([1, 2, 3], [9, 20, 50])]
    [2.0, 3.0, 4.0]
    """
    if scalar is None:
        scalar = resolve_scalar(q)

    rhs = asvector(q, scalar)
    n = len(rhs)
    xs = asvector(x, scalar, n)
    c = scalar.zeros(n)
    result = scalar.zeros(n)

    for i in range(n):
        xx = -xs[i]

        for j in range(n - i - 1, n - 1):
            c[j] += xx * c[j + 1]

        c[n - 1] += xx

    for i in range(n):
        xx = xs[i]
        b = t = scalar.ONE
        s = rhs[n - 1]

        for k in reversed(range(1, n)):
            b = c[k] + xx * b
            s += rhs[k - 1] * b
            t = xx * t + b

        result[i] = s / t

    return output(result, w)
