import logging

import numpy as np
import pytest

from numlin.context import localcontext
from numlin.linalg import (
    InvalidMatrixSizeError,
    Linbcg,
    LinbcgResult,
    Matrix,
    SparseLinbcg,
    SparseMatrix,
)


def system():
    a = Matrix.fromrows(
        [
            [4, 1, 0, 0, 0],
            [-1, 5, 2, 0, 0],
            [0, 1, 6, -2, 0],
            [0, 0, 3, 7, 1],
            [1, 0, 0, -1, 5],
        ]
    )
    x = [1.0, -2.0, 3.0, 0.5, -1.0]
    return a, x, a @ x


@pytest.mark.parametrize("itol", [1, 2, 3, 4])
def test_solve(itol):
    a, x, b = system()
    solver = SparseLinbcg(SparseMatrix.fromdense(a))
    result = solver.solve(b, [0.0] * 5, itol=itol, tol=1e-9)
    assert isinstance(result, LinbcgResult)
    assert result.converged
    assert 0 < result.iter <= 50
    assert result.x.tolist() == pytest.approx(x, abs=1e-6)


def test_initial_guess_is_not_modified():
    a, x, b = system()
    guess = [1.0, 1.0, 1.0, 1.0, 1.0]
    result = SparseLinbcg(SparseMatrix.fromdense(a)).solve(b, guess)
    assert guess == [1.0, 1.0, 1.0, 1.0, 1.0]
    assert result.x.tolist() == pytest.approx(x, abs=1e-6)


def test_itmax(caplog):
    a, _, b = system()
    solver = SparseLinbcg(SparseMatrix.fromdense(a))

    with caplog.at_level(logging.WARNING, logger="numlin.linalg.linbcg"):
        result = solver.solve(b, [0.0] * 5, itmax=1)

    assert result.iter == 1
    assert not result.converged
    assert "no convergence" in caplog.text


def test_zero_rhs():
    a, _, _ = system()
    result = SparseLinbcg(SparseMatrix.fromdense(a)).solve([0.0] * 5, [0.0] * 5)
    assert result.iter == 0
    assert result.converged
    assert result.x.tolist() == [0.0] * 5


def test_context_eps():
    a, x, b = system()
    solver = SparseLinbcg(SparseMatrix.fromdense(a))

    with localcontext(linbcg_eps=1e-10):
        result = solver.solve(b, [0.0] * 5, itol=3, tol=1e-9)

    assert result.x.tolist() == pytest.approx(x, abs=1e-6)


def test_invalid_itol():
    a, _, b = system()

    with pytest.raises(ValueError):
        SparseLinbcg(SparseMatrix.fromdense(a)).solve(b, [0.0] * 5, itol=5)

    with pytest.raises(InvalidMatrixSizeError):
        SparseLinbcg(SparseMatrix(2, 3, 0))


def test_snrm():
    solver = SparseLinbcg(SparseMatrix.fromdense(Matrix.identity(2)))
    assert solver.snrm(np.array([3.0, -4.0]), 1) == pytest.approx(5.0)
    assert solver.snrm(np.array([3.0, -4.0]), 3) == pytest.approx(5.0)
    assert solver.snrm(np.array([3.0, -4.0]), 4) == pytest.approx(4.0)


def test_zero_diagonal_preconditioner():
    a = Matrix.fromrows([[0, 1], [1, 1]])
    solver = SparseLinbcg(SparseMatrix.fromdense(a))
    z = np.zeros(2)
    solver.asolve(np.array([2.0, 3.0]), z, False)
    assert z.tolist() == [2.0, 3.0]


class DenseLinbcg(Linbcg):
    def __init__(self, a):
        super().__init__(a.rows)
        self.a = a

    def asolve(self, b, x, itrnsp):
        x[:] = b

    def atimes(self, x, r, itrnsp):
        r[:] = (self.a.T if itrnsp else self.a) @ x


def test_custom_operator():
    a, x, b = system()
    result = DenseLinbcg(a).solve(b, [0.0] * 5)
    assert result.converged
    assert result.x.tolist() == pytest.approx(x, abs=1e-6)
