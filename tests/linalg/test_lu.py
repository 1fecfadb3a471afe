import math
import random

import numpy as np
import pytest

from numlin.context import localcontext
from numlin.linalg import (
    InvalidMatrixSizeError,
    InvalidVectorSizeError,
    LUDecomposition,
    Matrix,
    SingularMatrixError,
)
from numlin.scalar import float32


def test_solve():
    rng = random.Random(0)

    for n in (1, 2, 5, 8):
        a = Matrix(n, n, [rng.uniform(-1, 1) for _ in range(n * n)])

        for i in range(n):
            a[i, i] += n

        x = [rng.uniform(-10, 10) for _ in range(n)]
        result = LUDecomposition(a).solve(a @ x)
        assert result.tolist() == pytest.approx(x, abs=1e-5)


def test_solve_into_buffer():
    a = Matrix.fromrows([[4, 3], [6, 3]])
    lu = LUDecomposition(a)
    x = [0.0, 0.0]
    assert lu.solve([10, 12], x) is x
    assert x == pytest.approx([1.0, 2.0])

    with pytest.raises(InvalidVectorSizeError):
        lu.solve([1.0, 2.0, 3.0])

    with pytest.raises(InvalidVectorSizeError):
        lu.solve([1.0, 2.0], [0.0])


def test_inverse():
    a = Matrix.fromrows([[1, 1, -1], [-2, -1, 1], [-1, -2, 1]])
    expected = [[-1, -1, 0], [-1, 0, -1], [-3, -1, -1]]
    ainv = LUDecomposition(a).inverse()

    for row, expected_row in zip(ainv.tolist(), expected):
        assert row == pytest.approx(expected_row, abs=1e-5)


def test_solve_mat():
    a = Matrix.fromrows([[2, 1], [1, 3]])
    b = Matrix.fromrows([[3, 1], [4, 2]])
    x = LUDecomposition(a).solve_mat(b)
    assert x.tolist()[0] == pytest.approx([1.0, 0.2])
    assert x.tolist()[1] == pytest.approx([1.0, 0.6])

    with pytest.raises(InvalidMatrixSizeError):
        LUDecomposition(a).solve_mat(Matrix.zeros(3, 1))


def test_det():
    a = Matrix.fromrows([[1, 1, -1], [-2, -1, 1], [-1, -2, 1]])
    assert LUDecomposition(a).det() == pytest.approx(-1.0)

    a = Matrix.fromrows([[0, 2], [3, 0]])
    assert LUDecomposition(a).det() == pytest.approx(-6.0)

    a = Matrix.fromrows([[2, 0, 0], [0, 3, 0], [0, 0, 4]])
    assert LUDecomposition(a).det() == pytest.approx(24.0)


def test_singular():
    with pytest.raises(SingularMatrixError):
        LUDecomposition(Matrix.fromrows([[1, 2], [0, 0]]))

    with pytest.raises(InvalidMatrixSizeError):
        LUDecomposition(Matrix.zeros(2, 3))


def test_mprove():
    n = 6
    a = Matrix(n, n, [1 / (i + j + 1) for i in range(n) for j in range(n)])
    x_true = [1.0] * n
    b = a @ x_true
    lu = LUDecomposition(a)
    x = lu.solve(b)

    with localcontext(refine_precision=200):
        assert lu.mprove(a, b, x) is x

    assert x.tolist() == pytest.approx(x_true, abs=1e-6)


def test_idempotence():
    a = Matrix.fromrows([[3, 1, 2], [6, 3, 4], [3, 1, 5]])
    lu1 = LUDecomposition(a)
    lu2 = LUDecomposition(a)
    assert lu1.lu == lu2.lu
    assert lu1.indx == lu2.indx
    assert lu1.d == lu2.d
    assert a == Matrix.fromrows([[3, 1, 2], [6, 3, 4], [3, 1, 5]])


def test_float32():
    a = Matrix.fromrows([[4, 3], [6, 3]], scalar=float32)
    x = LUDecomposition(a).solve([10, 12])
    assert x.dtype == np.float32
    assert x.tolist() == pytest.approx([1.0, 2.0], abs=1e-5)


def test_rbf_interpolation():
    points = [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0), (0.5, 0.5)]
    values = [math.sin(x) + math.cos(y) for x, y in points]
    n = len(points)

    def phi(p, q):
        return math.sqrt((p[0] - q[0]) ** 2 + (p[1] - q[1]) ** 2 + 1.0)

    a = Matrix(n, n, [phi(p, q) for p in points for q in points])
    w = LUDecomposition(a).solve(values)

    for p, value in zip(points, values):
        interp = sum(w[i] * phi(p, points[i]) for i in range(n))
        assert interp == pytest.approx(value, abs=1e-8)
