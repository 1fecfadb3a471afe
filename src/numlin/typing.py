"""
#############################
Typing (:mod:`numlin.typing`)
#############################

This module provides type definitions commonly used between modules.

.. autoclass:: Scalar
    :show-inheritance:
    :no-members:

.. autoclass:: ComparableScalar
    :show-inheritance:
    :no-members:

"""

from abc import abstractmethod
from typing import Protocol, Self, SupportsAbs


class Scalar(Protocol):
    """Protocol that ensures scalar-like behavior.

    Objects implementing this protocol must have four arithmetic operations and
    negation defined, and the arithmetic operations must be compatible with floats.
    """

    __slots__ = ()

    @abstractmethod
    def __add__(self, rhs: Self | float) -> Self: ...

    @abstractmethod
    def __sub__(self, rhs: Self | float) -> Self: ...

    @abstractmethod
    def __mul__(self, rhs: Self | float) -> Self: ...

    @abstractmethod
    def __truediv__(self, rhs: Self | float) -> Self: ...

    @abstractmethod
    def __radd__(self, lhs: Self | float) -> Self: ...

    @abstractmethod
    def __rsub__(self, lhs: Self | float) -> Self: ...

    @abstractmethod
    def __rmul__(self, lhs: Self | float) -> Self: ...

    @abstractmethod
    def __rtruediv__(self, lhs: Self | float) -> Self: ...

    @abstractmethod
    def __neg__(self) -> Self: ...


class ComparableScalar(Scalar, SupportsAbs, Protocol):
    """Protocol for totally ordered :class:`Scalar`, like a real number."""

    __slots__ = ()

    @abstractmethod
    def __lt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __le__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __gt__(self, rhs: Self) -> bool: ...

    @abstractmethod
    def __ge__(self, rhs: Self) -> bool: ...
