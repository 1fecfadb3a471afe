import numpy as np
import pytest

from numlin.scalar import (
    Float32Scalar,
    Float64Scalar,
    ScalarType,
    float32,
    float64,
    resolve_scalar,
)


def test_constants():
    assert isinstance(float64, ScalarType)
    assert float64.ZERO == 0.0 and float64.ONE == 1.0
    assert float64.EPSILON == np.finfo(np.float64).eps
    assert float32.EPSILON == np.finfo(np.float32).eps
    assert float32.dtype == np.float32
    assert repr(float32) == "<Float32Scalar>"


def test_arithmetic():
    assert float64.sqrt(float64.fromfloat(2.0)) == pytest.approx(1.4142135623730951)
    assert type(float32.sqrt(float32.fromfloat(2.0))) is np.float32
    assert float64.abs(-3.0) == 3.0
    assert float64.square(3.0) == 9.0
    assert float64.norm(3.0, 4.0) == 5.0
    assert float64.tofloat(np.float64(1.5)) == 1.5


def test_copysign():
    assert float64.copysign(2.0, -1.0) == -2.0
    assert float64.copysign(-2.0, 1.0) == 2.0
    assert float64.copysign(-2.0, 0.0) == 2.0
    assert float64.copysign(2.0, -0.5) == -2.0


def test_buffers():
    assert float32.zeros(3).dtype == np.float32
    assert float64.full(2, 7.0).tolist() == [7.0, 7.0]
    assert float64.asarray((1, 2)).tolist() == [1.0, 2.0]
    assert float64.empty((2, 2)).shape == (2, 2)

    with pytest.raises(ValueError):
        float64.asarray([[1.0], [2.0]])


def test_asarray_copies():
    values = np.array([1.0, 2.0])
    result = float64.asarray(values)
    result[0] = 5.0
    assert values[0] == 1.0


def test_resolve_scalar():
    assert resolve_scalar(np.zeros(2, np.float32)) is float32
    assert resolve_scalar(np.zeros(2)) is float64
    assert resolve_scalar([1.0, 2.0]) is float64


def test_classes():
    assert isinstance(float32, Float32Scalar)
    assert isinstance(float64, Float64Scalar)
