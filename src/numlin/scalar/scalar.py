from abc import ABC, abstractmethod
from collections.abc import Iterable

import numpy as np
import numpy.typing as npt

from numlin.typing import ComparableScalar


class ScalarType[T: ComparableScalar](ABC):
    """Provides the arithmetic required by the solvers and basic constants.

    Every matrix and solver is parametrized by one instance of this class, which
    fixes the floating type of all its elements.

    Notes
    -----
    Classes that inherit from this must define the class constants `ZERO`, `ONE`,
    `EPSILON`, and `dtype`, where `EPSILON` is the machine epsilon and `dtype` is
    the NumPy dtype of buffers holding such numbers.
    """

    __slots__ = ()
    ZERO: T
    ONE: T
    EPSILON: T
    dtype: np.dtype

    def fromfloat(self, value: float) -> T:
        """Convert the float literal to a number."""
        return self.dtype.type(value)

    def tofloat(self, value: T) -> float:
        """Convert the number to a built-in float."""
        return float(value)

    def abs(self, value: T) -> T:
        """Absolute value."""
        return value if value >= self.ZERO else -value

    @abstractmethod
    def sqrt(self, value: T) -> T:
        """Square root of a non-negative number."""
        raise NotImplementedError

    def square(self, value: T) -> T:
        return value * value

    def copysign(self, value: T, sign: T) -> T:
        """Return `value` with the sign of `sign`.

        A zero `sign` is regarded as positive.
        """
        if sign < self.ZERO:
            return value if value < self.ZERO else -value

        return -value if value < self.ZERO else value

    def norm(self, a: T, b: T) -> T:
        """Return ``sqrt(a**2 + b**2)``."""
        return self.sqrt(a * a + b * b)

    def empty(self, n: int | tuple[int, ...]) -> npt.NDArray:
        """Return a new buffer of given shape, without initializing entries."""
        return np.empty(n, self.dtype)

    def zeros(self, n: int | tuple[int, ...]) -> npt.NDArray:
        """Return a new buffer of given shape, filled with zeros."""
        return np.zeros(n, self.dtype)

    def full(self, n: int | tuple[int, ...], value: T | float) -> npt.NDArray:
        """Return a new buffer of given shape, filled with `value`."""
        return np.full(n, value, self.dtype)

    def asarray(self, values: Iterable[T | float] | npt.NDArray) -> npt.NDArray:
        """Return a one-dimensional copy of `values` with the dtype of the type."""
        if not isinstance(values, np.ndarray):
            values = list(values)

        result = np.array(values, dtype=self.dtype)

        if result.ndim != 1:
            raise ValueError("expected a one-dimensional sequence")

        return result

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"
