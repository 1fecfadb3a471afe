import logging
import math
from collections.abc import MutableSequence, Sequence

import numpy.typing as npt

from numlin.context import getcontext
from numlin.linalg.exceptions import ConvergenceError, InvalidMatrixSizeError
from numlin.linalg.matrix import Matrix, asvector, output

logger = logging.getLogger(__name__)


class SVD:
    """Singular value decomposition ``a = u @ diag(w) @ v.T``.

    The matrix is reduced to bidiagonal form by Householder reflections, and the
    bidiagonal matrix is diagonalized by the Golub-Kahan iteration with implicit
    shifts. Singular values are then sorted in descending order, and each pair of
    singular vectors is negated if most of their elements are negative.

    Parameters
    ----------
    a : Matrix
        Matrix of shape ``(m, n)`` to be decomposed.

    Attributes
    ----------
    m : int
        Number of rows of `a`.
    n : int
        Number of columns of `a`.
    u : Matrix
        Left singular vectors as columns, of shape ``(m, n)``.
    w : ndarray
        Singular values in descending order.
    v : Matrix
        Right singular vectors as columns, of shape ``(n, n)``.
    eps : float
        Machine epsilon of the scalar type.
    tsh : float
        Default threshold below which singular values are regarded as zero.

    Raises
    ------
    InvalidMatrixSizeError
        If `a` is empty.
    ConvergenceError
        If a singular value does not converge within
        :attr:`Context.max_svd_iterations <numlin.context.Context.max_svd_iterations>`
        sweeps.

    Examples
    --------
    >>> from numlin.linalg import SVD, Matrix
    >>> svd = SVD(Matrix(2, 2, [3.0, 0.0, 0.0, -4.0]))
    >>> [round(float(x), 6) for x in svd.w]
    [4.0, 3.0]
    >>> svd.rank()
    2
    """

    __slots__ = ("m", "n", "u", "w", "v", "eps", "tsh")
    m: int
    n: int
    u: Matrix
    w: npt.NDArray
    v: Matrix
    eps: float
    tsh: float

    def __init__(self, a: Matrix):
        if a.rows == 0 or a.cols == 0:
            raise InvalidMatrixSizeError(a.rows, a.cols)

        self.m = a.rows
        self.n = a.cols
        self.u = a.copy()
        self.v = Matrix.zeros(a.cols, a.cols, scalar=a.scalar)
        self.w = a.scalar.zeros(a.cols)
        self.eps = a.scalar.tofloat(a.scalar.EPSILON)
        self.__decompose()
        self.__reorder()
        self.tsh = 0.5 * math.sqrt(self.m + self.n + 1.0) * float(self.w[0]) * self.eps
        logger.debug("SVD of shape (%d, %d), w_max = %g", self.m, self.n, self.w[0])

    def solve(
        self,
        b: Sequence | npt.NDArray,
        x: MutableSequence | npt.NDArray | None = None,
        thresh: float | None = None,
    ):
        """Solve ``a @ x = b`` in the least-squares sense.

        Components along singular values not greater than `thresh` are discarded,
        which yields the pseudo-inverse solution.

        Parameters
        ----------
        b : Sequence | ndarray
            Right-hand side of length `m`.
        x : MutableSequence | ndarray, optional
            Buffer of length `n` receiving the solution.
        thresh : float, optional
            Threshold for singular values; `tsh` if omitted or negative.

        Raises
        ------
        InvalidVectorSizeError
            If `b` or `x` has a wrong length.
        """
        m, n, u, v, w = self.m, self.n, self.u, self.v, self.w
        scalar = u.scalar
        rhs = asvector(b, scalar, m)
        tsh = self.__threshold(thresh)
        tmp = scalar.zeros(n)

        for j in range(n):
            if w[j] > tsh:
                s = scalar.ZERO

                for i in range(m):
                    s += u[i, j] * rhs[i]

                tmp[j] = s / w[j]

        return output(v @ tmp, x)

    def solve_mat(
        self, b: Matrix, x: Matrix | None = None, thresh: float | None = None
    ) -> Matrix:
        """Solve ``a @ x = b`` for every column of `b`.

        Raises
        ------
        InvalidMatrixSizeError
            If `b` does not have `m` rows or `x` does not have shape ``(n, b.cols)``.
        """
        if b.rows != self.m:
            raise InvalidMatrixSizeError(b.rows, b.cols)

        if x is None:
            x = Matrix.zeros(self.n, b.cols, scalar=self.u.scalar)
        elif x.shape != (self.n, b.cols):
            raise InvalidMatrixSizeError(x.rows, x.cols)

        for j in range(b.cols):
            col = self.solve(b.get_col(j), thresh=thresh)

            for i in range(self.n):
                x[i, j] = col[i]

        return x

    def inv_condition(self) -> float:
        """Return the reciprocal of the condition number, or zero if the matrix is
        singular."""
        w = self.w

        if w[0] <= 0.0 or w[self.n - 1] <= 0.0:
            return 0.0

        return float(w[self.n - 1] / w[0])

    def rank(self, thresh: float | None = None) -> int:
        """Return the number of singular values greater than the threshold."""
        tsh = self.__threshold(thresh)
        return sum(1 for x in self.w if x > tsh)

    def nullity(self, thresh: float | None = None) -> int:
        """Return the number of singular values not greater than the threshold."""
        tsh = self.__threshold(thresh)
        return sum(1 for x in self.w if x <= tsh)

    def range(self, thresh: float | None = None) -> Matrix:
        """Return an orthonormal basis of the range as columns of an ``(m, rank)``
        matrix."""
        tsh = self.__threshold(thresh)
        cols = [j for j in range(self.n) if self.w[j] > tsh]
        return self.__columns(self.u, cols)

    def nullspace(self, thresh: float | None = None) -> Matrix:
        """Return an orthonormal basis of the null space as columns of an
        ``(n, nullity)`` matrix."""
        tsh = self.__threshold(thresh)
        cols = [j for j in range(self.n) if self.w[j] <= tsh]
        return self.__columns(self.v, cols)

    def __threshold(self, thresh: float | None) -> float:
        return self.tsh if thresh is None or thresh < 0.0 else thresh

    @staticmethod
    def __columns(a: Matrix, cols: list[int]) -> Matrix:
        result = Matrix.zeros(a.rows, len(cols), scalar=a.scalar)

        for k, j in enumerate(cols):
            for i in range(a.rows):
                result[i, k] = a[i, j]

        return result

    def __decompose(self) -> None:
        m, n, w = self.m, self.n, self.w
        scalar = self.u.scalar
        ZERO, ONE = scalar.ZERO, scalar.ONE
        itmax = getcontext().max_svd_iterations
        eps = self.eps
        u = self.u.toarray()
        v = self.v.toarray()
        rv1 = scalar.zeros(n)
        g = scale = anorm = ZERO
        l = 0

        # Householder reduction to bidiagonal form
        for i in range(n):
            l = i + 2
            rv1[i] = scale * g
            g = s = scale = ZERO

            if i < m:
                for k in range(i, m):
                    scale += scalar.abs(u[k, i])

                if scale != ZERO:
                    for k in range(i, m):
                        u[k, i] /= scale
                        s += u[k, i] * u[k, i]

                    f = u[i, i]
                    g = -scalar.copysign(scalar.sqrt(s), f)
                    h = f * g - s
                    u[i, i] = f - g

                    for j in range(l - 1, n):
                        s = ZERO

                        for k in range(i, m):
                            s += u[k, i] * u[k, j]

                        f = s / h

                        for k in range(i, m):
                            u[k, j] += f * u[k, i]

                    for k in range(i, m):
                        u[k, i] *= scale

            w[i] = scale * g
            g = s = scale = ZERO

            if i + 1 <= m and i + 1 != n:
                for k in range(l - 1, n):
                    scale += scalar.abs(u[i, k])

                if scale != ZERO:
                    for k in range(l - 1, n):
                        u[i, k] /= scale
                        s += u[i, k] * u[i, k]

                    f = u[i, l - 1]
                    g = -scalar.copysign(scalar.sqrt(s), f)
                    h = f * g - s
                    u[i, l - 1] = f - g

                    for k in range(l - 1, n):
                        rv1[k] = u[i, k] / h

                    for j in range(l - 1, m):
                        s = ZERO

                        for k in range(l - 1, n):
                            s += u[j, k] * u[i, k]

                        for k in range(l - 1, n):
                            u[j, k] += s * rv1[k]

                    for k in range(l - 1, n):
                        u[i, k] *= scale

            anorm = max(anorm, scalar.abs(w[i]) + scalar.abs(rv1[i]))

        # accumulation of right-hand transformations
        for i in reversed(range(n)):
            if i < n - 1:
                if g != ZERO:
                    for j in range(l, n):
                        v[j, i] = (u[i, j] / u[i, l]) / g

                    for j in range(l, n):
                        s = ZERO

                        for k in range(l, n):
                            s += u[i, k] * v[k, j]

                        for k in range(l, n):
                            v[k, j] += s * v[k, i]

                for j in range(l, n):
                    v[i, j] = v[j, i] = ZERO

            v[i, i] = ONE
            g = rv1[i]
            l = i

        # accumulation of left-hand transformations
        for i in reversed(range(min(m, n))):
            l = i + 1
            g = w[i]

            for j in range(l, n):
                u[i, j] = ZERO

            if g != ZERO:
                g = ONE / g

                for j in range(l, n):
                    s = ZERO

                    for k in range(l, m):
                        s += u[k, i] * u[k, j]

                    f = (s / u[i, i]) * g

                    for k in range(i, m):
                        u[k, j] += f * u[k, i]

                for j in range(i, m):
                    u[j, i] *= g
            else:
                for j in range(i, m):
                    u[j, i] = ZERO

            u[i, i] += ONE

        # diagonalization of the bidiagonal form
        for k in reversed(range(n)):
            for its in range(itmax):
                flag = True
                nm = 0

                for l in reversed(range(k + 1)):
                    nm = l - 1

                    if l == 0 or scalar.abs(rv1[l]) <= eps * anorm:
                        flag = False
                        break

                    if scalar.abs(w[nm]) <= eps * anorm:
                        break

                if flag:
                    # cancellation of rv1[l] if l > 0
                    c, s = ZERO, ONE

                    for i in range(l, k + 1):
                        f = s * rv1[i]
                        rv1[i] = c * rv1[i]

                        if scalar.abs(f) <= eps * anorm:
                            break

                        g = w[i]
                        h = scalar.norm(f, g)
                        w[i] = h
                        h = ONE / h
                        c = g * h
                        s = -f * h
                        self.__rotate(u, nm, i, c, s)

                z = w[k]

                if l == k:
                    if z < ZERO:
                        w[k] = -z
                        v[:, k] = -v[:, k]

                    break

                if its == itmax - 1:
                    raise ConvergenceError(f"no convergence in {itmax} SVD iterations")

                # shift from the bottom 2-by-2 minor
                x = w[l]
                nm = k - 1
                y = w[nm]
                g = rv1[nm]
                h = rv1[k]
                f = ((y - z) * (y + z) + (g - h) * (g + h)) / (2 * h * y)
                g = scalar.norm(f, ONE)
                f = ((x - z) * (x + z) + h * ((y / (f + scalar.copysign(g, f))) - h)) / x
                c = s = ONE

                # next QR transformation
                for j in range(l, nm + 1):
                    i = j + 1
                    g = rv1[i]
                    y = w[i]
                    h = s * g
                    g = c * g
                    z = scalar.norm(f, h)
                    rv1[j] = z
                    c = f / z
                    s = h / z
                    f = x * c + g * s
                    g = g * c - x * s
                    h = y * s
                    y *= c
                    self.__rotate(v, j, i, c, s)
                    z = scalar.norm(f, h)
                    w[j] = z

                    if z != ZERO:
                        z = ONE / z
                        c = f * z
                        s = h * z

                    f = c * g + s * y
                    x = c * y - s * g
                    self.__rotate(u, j, i, c, s)

                rv1[l] = ZERO
                rv1[k] = f
                w[k] = x

    @staticmethod
    def __rotate(a: npt.NDArray, j: int, i: int, c, s) -> None:
        y = a[:, j].copy()
        z = a[:, i].copy()
        a[:, j] = y * c + z * s
        a[:, i] = z * c - y * s

    def __reorder(self) -> None:
        m, n, w = self.m, self.n, self.w
        u = self.u.toarray()
        v = self.v.toarray()
        inc = 1

        while inc <= n:
            inc = 3 * inc + 1

        # Shell sort into descending order
        while inc > 1:
            inc //= 3

            for i in range(inc, n):
                sw = w[i]
                su = u[:, i].copy()
                sv = v[:, i].copy()
                j = i

                while w[j - inc] < sw:
                    w[j] = w[j - inc]
                    u[:, j] = u[:, j - inc]
                    v[:, j] = v[:, j - inc]
                    j -= inc

                    if j < inc:
                        break

                w[j] = sw
                u[:, j] = su
                v[:, j] = sv

        for k in range(n):
            s = int((u[:, k] < 0.0).sum()) + int((v[:, k] < 0.0).sum())

            if s > (m + n) // 2:
                u[:, k] = -u[:, k]
                v[:, k] = -v[:, k]
