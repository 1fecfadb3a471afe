import pytest

from numlin.linalg import (
    InvalidVectorSizeError,
    ShouldNotArriveHereError,
    SingularPrincipleMinorError,
    ZeroDiagonalElementError,
    toeplz,
)


def toeplitz_product(r, y):
    n = len(y)
    return [sum(r[n - 1 + i - j] * x for j, x in enumerate(y)) for i in range(n)]


def test_toeplz():
    x = toeplz([1.0, 2.0, 3.0, 4.0, 0.0], [10.0, 16.0, 17.0])
    assert x.tolist() == pytest.approx([1.0, 2.0, 3.0], abs=1e-7)


def test_toeplz_larger():
    r = [0.5, -1.0, 2.0, 1.0, 6.0, 1.5, 0.25, -0.5, 1.0]
    x_true = [1.0, -2.0, 0.5, 3.0, -1.0]
    y = toeplitz_product(r, x_true)
    assert toeplz(r, y).tolist() == pytest.approx(x_true, abs=1e-7)


def test_toeplz_order_one():
    assert toeplz([4.0], [2.0]).tolist() == [0.5]


def test_toeplz_errors():
    with pytest.raises(ZeroDiagonalElementError):
        toeplz([1.0, 0.0, 1.0], [1.0, 1.0])

    with pytest.raises(SingularPrincipleMinorError):
        toeplz([1.0, 1.0, 1.0], [1.0, 1.0])

    with pytest.raises(InvalidVectorSizeError):
        toeplz([1.0, 2.0, 3.0, 4.0], [1.0, 1.0])


def test_should_not_arrive_here_is_assertion():
    assert issubclass(ShouldNotArriveHereError, AssertionError)
