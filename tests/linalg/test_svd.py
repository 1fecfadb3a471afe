import random

import pytest

from numlin.context import localcontext
from numlin.linalg import SVD, ConvergenceError, InvalidMatrixSizeError, Matrix
from numlin.scalar import float32


def reconstruct(svd):
    result = Matrix.zeros(svd.m, svd.n)

    for i in range(svd.m):
        for j in range(svd.n):
            result[i, j] = sum(svd.u[i, k] * svd.w[k] * svd.v[j, k] for k in range(svd.n))

    return result


def assert_close(a, b, abs=1e-10):
    assert a.shape == b.shape

    for row, expected_row in zip(a.tolist(), b.tolist()):
        assert row == pytest.approx(expected_row, abs=abs)


def test_reconstruction():
    rng = random.Random(2)

    for m, n in ((1, 1), (3, 3), (5, 3), (6, 4)):
        a = Matrix(m, n, [rng.uniform(-1, 1) for _ in range(m * n)])
        svd = SVD(a)
        assert svd.u.shape == (m, n)
        assert svd.v.shape == (n, n)
        assert_close(reconstruct(svd), a)
        assert_close(svd.v.T @ svd.v, Matrix.identity(n))
        assert_close(svd.u.T @ svd.u, Matrix.identity(n))
        assert all(svd.w[i] >= svd.w[i + 1] for i in range(n - 1))
        assert all(x >= 0.0 for x in svd.w)
        assert svd.rank() + svd.nullity() == n



def test_reconstruction_wide():
    rng = random.Random(5)

    for m, n in ((1, 2), (2, 3), (3, 5)):
        a = Matrix(m, n, [rng.uniform(-1, 1) for _ in range(m * n)])
        svd = SVD(a)
        assert svd.u.shape == (m, n)
        assert svd.v.shape == (n, n)
        assert_close(reconstruct(svd), a)
        assert_close(svd.v.T @ svd.v, Matrix.identity(n))
        assert all(svd.w[i] >= svd.w[i + 1] for i in range(n - 1))
        assert svd.rank() + svd.nullity() == n
        assert svd.rank(thresh=1e-10) == m
        assert svd.nullity(thresh=1e-10) == n - m

        nullspace = svd.nullspace(thresh=1e-10)
        assert nullspace.shape == (n, n - m)

        for j in range(n - m):
            product = (a @ nullspace.get_col(j)).tolist()
            assert product == pytest.approx([0.0] * m, abs=1e-10)


def test_rank_deficient():
    a = Matrix.fromrows([[1, 2, 3], [2, 4, 6], [1, 0, 1], [0, 1, 1]])
    svd = SVD(a)
    assert_close(reconstruct(svd), a)
    assert svd.rank() == 2
    assert svd.nullity() == 1
    assert svd.inv_condition() == pytest.approx(0.0, abs=1e-12)

    nullspace = svd.nullspace()
    assert nullspace.shape == (3, 1)
    assert (a @ nullspace.get_col(0)).tolist() == pytest.approx([0.0] * 4, abs=1e-10)

    rng = svd.range()
    assert rng.shape == (4, 2)
    assert_close(rng.T @ rng, Matrix.identity(2))

    # every threshold below the smallest nonzero singular value keeps the rank
    assert svd.rank(thresh=1e-8) == 2
    assert svd.rank(thresh=float(svd.w[0])) == 0


def test_solve():
    a = Matrix.fromrows([[1, 1, -1], [-2, -1, 1], [-1, -2, 1]])
    svd = SVD(a)
    assert svd.solve([0, -1, -2]).tolist() == pytest.approx([1.0, 2.0, 3.0])

    b = Matrix.fromrows([[0, 1], [-1, -2], [-2, -1]])
    x = svd.solve_mat(b)
    assert x.get_col(0).tolist() == pytest.approx([1.0, 2.0, 3.0])
    assert_close(a @ x, b)


def test_least_squares():
    # fit of y = 1 + 2t through noisy-free samples
    ts = [0.0, 1.0, 2.0, 3.0]
    a = Matrix(4, 2, [v for t in ts for v in (1.0, t)])
    x = SVD(a).solve([1.0 + 2.0 * t for t in ts])
    assert x.tolist() == pytest.approx([1.0, 2.0])


def test_pseudo_inverse_solve():
    a = Matrix.fromrows([[1, 0], [0, 0]])
    svd = SVD(a)
    assert svd.rank() == 1
    assert svd.solve([3.0, 5.0]).tolist() == pytest.approx([3.0, 0.0])


def test_sign_normalization():
    svd = SVD(Matrix.fromrows([[-2, 0], [0, -1]]))
    assert svd.w.tolist() == pytest.approx([2.0, 1.0])

    for k in range(2):
        negatives = sum(1 for i in range(2) if svd.u[i, k] < 0.0)
        negatives += sum(1 for i in range(2) if svd.v[i, k] < 0.0)
        assert negatives <= 2


def test_idempotence():
    a = Matrix.fromrows([[4, 1, 2], [0, 3, 1], [2, 2, 5], [1, 0, 1]])
    svd1 = SVD(a)
    svd2 = SVD(a)
    assert svd1.u == svd2.u
    assert svd1.v == svd2.v
    assert svd1.w.tolist() == svd2.w.tolist()


def test_inv_condition():
    svd = SVD(Matrix.fromrows([[4, 0], [0, 2]]))
    assert svd.inv_condition() == pytest.approx(0.5)


def test_errors():
    with pytest.raises(InvalidMatrixSizeError):
        SVD(Matrix.zeros(0, 2))

    a = Matrix.fromrows([[4, 1, 2], [0, 3, 1], [2, 2, 5]])

    with localcontext(max_svd_iterations=1):
        with pytest.raises(ConvergenceError):
            SVD(a)


def test_float32():
    a = Matrix.fromrows([[3, 1], [1, 3], [0, 1]], scalar=float32)
    svd = SVD(a)
    assert svd.eps == pytest.approx(1.1920929e-07)
    assert_close(reconstruct(svd), Matrix.fromrows([[3, 1], [1, 3], [0, 1]]), abs=1e-5)
