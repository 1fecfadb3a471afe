import pytest

from numlin.linalg import InvalidVectorSizeError, vander


def test_vander():
    w = vander([1.0, 2.0, 3.0], [9.0, 20.0, 50.0])
    assert w.tolist() == pytest.approx([2.0, 3.0, 4.0], abs=1e-5)


def test_vander_moments():
    x = [-1.0, 0.5, 2.0, 3.0]
    w_true = [0.25, -1.0, 2.0, 0.5]
    q = [sum(w * xi**k for xi, w in zip(x, w_true)) for k in range(len(x))]
    assert vander(x, q).tolist() == pytest.approx(w_true, abs=1e-9)


def test_vander_errors():
    with pytest.raises(InvalidVectorSizeError):
        vander([1.0, 2.0], [1.0, 2.0, 3.0])
