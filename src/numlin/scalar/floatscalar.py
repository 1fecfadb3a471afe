import math

import numpy as np
import numpy.typing as npt

from numlin.scalar.scalar import ScalarType


class Float32Scalar(ScalarType[np.float32]):
    """Single-precision scalar type."""

    __slots__ = ()
    dtype = np.dtype(np.float32)
    ZERO = np.float32(0.0)
    ONE = np.float32(1.0)
    EPSILON = np.finfo(np.float32).eps

    def sqrt(self, value):
        return np.sqrt(np.float32(value))


class Float64Scalar(ScalarType[np.float64]):
    """Double-precision scalar type."""

    __slots__ = ()
    dtype = np.dtype(np.float64)
    ZERO = np.float64(0.0)
    ONE = np.float64(1.0)
    EPSILON = np.finfo(np.float64).eps

    def sqrt(self, value):
        return np.float64(math.sqrt(value))


float32 = Float32Scalar()
float64 = Float64Scalar()


def resolve_scalar(values: npt.NDArray | object) -> ScalarType:
    """Return the scalar type matching the dtype of `values`.

    Single-precision arrays map to :data:`float32`; anything else maps to
    :data:`float64`.
    """
    if isinstance(values, np.ndarray) and values.dtype == np.float32:
        return float32

    return float64
