import dataclasses
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy.typing as npt

from numlin.context import getcontext
from numlin.linalg.exceptions import InvalidMatrixSizeError
from numlin.linalg.matrix import asvector
from numlin.linalg.sparse import SparseMatrix
from numlin.scalar import ScalarType, float64

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class LinbcgResult:
    """Output of :meth:`Linbcg.solve`.

    Attributes
    ----------
    x : ndarray
        Last iterate.
    iter : int
        Number of iterations performed.
    err : float
        Estimated error of `x` in the norm selected by ``itol``.
    tol : float
        Tolerance the iteration was run with.
    """

    x: npt.NDArray
    iter: int
    err: float
    tol: float

    @property
    def converged(self) -> bool:
        return self.err <= self.tol


class Linbcg(ABC):
    """Abstract base class for solving sparse linear systems by the preconditioned
    biconjugate gradient method.

    Subclasses supply the operator and the preconditioner through :meth:`atimes` and
    :meth:`asolve`.

    Parameters
    ----------
    n : int
        Order of the system.
    scalar : ScalarType, default=float64

    Notes
    -----
    The convergence test of :meth:`solve` is selected by ``itol``:

    1. ``|a @ x - b| / |b|``.
    2. ``|inv(p) @ (a @ x - b)| / |inv(p) @ b|``, where ``p`` is the preconditioner.
    3. Estimated ``|x - x_true| / |x|`` in the Euclidean norm.
    4. Same as 3 in the maximum norm.
    """

    __slots__ = ("n", "_scalar")
    n: int
    _scalar: ScalarType

    def __init__(self, n: int, *, scalar: ScalarType = float64):
        self.n = n
        self._scalar = scalar

    @property
    def scalar(self) -> ScalarType:
        return self._scalar

    @abstractmethod
    def asolve(self, b: npt.NDArray, x: npt.NDArray, itrnsp: bool) -> None:
        """Solve ``p @ x = b`` (or ``p.T @ x = b`` if `itrnsp` is ``True``) for the
        preconditioner ``p`` and store the solution into `x`."""
        raise NotImplementedError

    @abstractmethod
    def atimes(self, x: npt.NDArray, r: npt.NDArray, itrnsp: bool) -> None:
        """Store ``a @ x`` (or ``a.T @ x`` if `itrnsp` is ``True``) into `r`."""
        raise NotImplementedError

    def snrm(self, sx: npt.NDArray, itol: int):
        """Return the Euclidean norm of `sx` if ``itol <= 3``, the maximum norm
        otherwise."""
        scalar = self._scalar

        if itol <= 3:
            ans = scalar.ZERO

            for x in sx:
                ans += x * x

            return scalar.sqrt(ans)

        return max((scalar.abs(x) for x in sx), default=scalar.ZERO)

    def solve(
        self,
        b: Sequence | npt.NDArray,
        x: Sequence | npt.NDArray,
        itol: int = 1,
        tol: float = 1e-10,
        itmax: int | None = None,
    ) -> LinbcgResult:
        """Solve ``a @ x = b`` iteratively.

        Running out of iterations is not an error; check
        :attr:`LinbcgResult.converged`.

        Parameters
        ----------
        b : Sequence | ndarray
            Right-hand side.
        x : Sequence | ndarray
            Initial guess. It is not modified.
        itol : int, default=1
            Convergence test, from 1 to 4 (see Notes of :class:`Linbcg`).
        tol : float, default=1e-10
            Tolerance of the convergence test.
        itmax : int, optional
            Maximum number of iterations (the default is ``10 * n``).

        Returns
        -------
        LinbcgResult

        Raises
        ------
        ValueError
            If `itol` is out of range.
        InvalidVectorSizeError
            If `b` or `x` does not have length `n`.
        """
        if itol not in (1, 2, 3, 4):
            raise ValueError(f"illegal itol: {itol!r}")

        if itmax is None:
            itmax = 10 * self.n

        scalar = self._scalar
        ZERO = scalar.ZERO
        eps = getcontext().linbcg_eps
        n = self.n
        rhs = asvector(b, scalar, n)
        sol = asvector(x, scalar, n)
        p = scalar.zeros(n)
        pp = scalar.zeros(n)
        r = scalar.zeros(n)
        z = scalar.zeros(n)
        zz = scalar.zeros(n)
        err = ZERO
        bkden = scalar.ONE
        znrm = ZERO

        self.atimes(sol, r, False)
        r[:] = rhs - r
        rr = r.copy()

        match itol:
            case 1:
                bnrm = self.snrm(rhs, itol)
                self.asolve(r, z, False)

            case 2:
                self.asolve(rhs, z, False)
                bnrm = self.snrm(z, itol)
                self.asolve(r, z, False)

            case _:
                self.asolve(rhs, z, False)
                bnrm = self.snrm(z, itol)
                self.asolve(r, z, False)
                znrm = self.snrm(z, itol)

        if bnrm == ZERO:
            logger.debug("zero right-hand side")
            return LinbcgResult(scalar.zeros(n), 0, 0.0, tol)

        it = 0

        while it < itmax:
            it += 1
            self.asolve(rr, zz, True)
            bknum = z @ rr

            if it == 1:
                p[:] = z
                pp[:] = zz
            else:
                bk = bknum / bkden
                p[:] = bk * p + z
                pp[:] = bk * pp + zz

            bkden = bknum
            self.atimes(p, z, False)
            ak = bknum / (z @ pp)
            self.atimes(pp, zz, True)
            sol += ak * p
            r -= ak * z
            rr -= ak * zz
            self.asolve(r, z, False)

            match itol:
                case 1:
                    err = self.snrm(r, itol) / bnrm

                case 2:
                    err = self.snrm(z, itol) / bnrm

                case _:
                    zm1nrm = znrm
                    znrm = self.snrm(z, itol)

                    if scalar.abs(zm1nrm - znrm) <= eps * znrm:
                        err = znrm / bnrm
                        continue

                    dxnrm = scalar.abs(ak) * self.snrm(p, itol)
                    err = znrm / scalar.abs(zm1nrm - znrm) * dxnrm
                    xnrm = self.snrm(sol, itol)

                    if err > 0.5 * xnrm:
                        err = znrm / bnrm
                        continue

                    err /= xnrm

            if err <= tol:
                break

        err = scalar.tofloat(err)

        if not err <= tol:
            logger.warning(
                "no convergence in %d iterations (err = %g, tol = %g)", it, err, tol
            )
        else:
            logger.debug("converged in %d iterations (err = %g)", it, err)

        return LinbcgResult(sol, it, err, tol)


class SparseLinbcg(Linbcg):
    """Biconjugate gradient solver for a :class:`SparseMatrix`, preconditioned by its
    diagonal.

    Rows without a nonzero diagonal element are left unscaled by the preconditioner.

    Parameters
    ----------
    mat : SparseMatrix
        Square coefficient matrix.

    Raises
    ------
    InvalidMatrixSizeError
        If `mat` is not square.

    Examples
    --------
    >>> from numlin.linalg import Matrix, SparseLinbcg, SparseMatrix
    >>> a = SparseMatrix.fromdense(Matrix(2, 2, [4.0, 1.0, 1.0, 3.0]))
    >>> res = SparseLinbcg(a).solve([1.0, 2.0], [0.0, 0.0])
    >>> res.converged
    True
    >>> [round(float(v), 6) for v in res.x]
    [0.090909, 0.636364]
    """

    __slots__ = ("mat", "_diag")
    mat: SparseMatrix
    _diag: npt.NDArray

    def __init__(self, mat: SparseMatrix):
        if mat.nrows != mat.ncols:
            raise InvalidMatrixSizeError(mat.nrows, mat.ncols)

        super().__init__(mat.nrows, scalar=mat.scalar)
        scalar = mat.scalar
        diag = scalar.full(mat.nrows, scalar.ONE)

        for j in range(mat.ncols):
            for k in range(mat.col_ptr[j], mat.col_ptr[j + 1]):
                if mat.row_ind[k] == j and mat.val[k] != scalar.ZERO:
                    diag[j] = mat.val[k]
                    break

        self.mat = mat
        self._diag = diag

    def asolve(self, b: npt.NDArray, x: npt.NDArray, itrnsp: bool) -> None:
        x[:] = b / self._diag

    def atimes(self, x: npt.NDArray, r: npt.NDArray, itrnsp: bool) -> None:
        r[:] = self.mat.atx(x) if itrnsp else self.mat.ax(x)
