from collections.abc import Iterator, MutableSequence, Sequence
from typing import Any, Self, overload

import numpy as np
import numpy.typing as npt

from numlin.linalg.exceptions import InvalidMatrixSizeError, InvalidVectorSizeError
from numlin.scalar import ScalarType, float64
from numlin.typing import ComparableScalar


class rowiter(Iterator):
    __slots__ = ("_iter", "_matrix")
    _iter: Iterator
    _matrix: "Matrix"

    def __init__(self, a: "Matrix", /):
        self._iter = iter(range(a.rows))
        self._matrix = a

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> npt.NDArray:
        return self._matrix[next(self._iter)]


class Matrix[T1: ComparableScalar]:
    """Dense row-major matrix.

    Parameters
    ----------
    rows : int
        Number of rows.
    cols : int
        Number of columns.
    data : Sequence | ndarray
        ``rows * cols`` elements in row-major order.
    scalar : ScalarType, default=float64
        Type of the elements.

    Raises
    ------
    InvalidMatrixSizeError
        If the length of `data` is not ``rows * cols``.

    Examples
    --------
    >>> from numlin.linalg import Matrix
    >>> a = Matrix(2, 3, [1, 2, 3, 4, 5, 6])
    >>> a.shape
    (2, 3)
    >>> a[1].tolist()
    [4.0, 5.0, 6.0]
    >>> float(a[0, 2])
    3.0
    """

    __slots__ = ("_rows", "_cols", "_data", "_scalar")
    __array_ufunc__ = None
    _rows: int
    _cols: int
    _data: npt.NDArray
    _scalar: ScalarType[T1]

    def __init__(
        self,
        rows: int,
        cols: int,
        data: Sequence[T1 | float] | npt.NDArray,
        *,
        scalar: ScalarType[T1] = float64,
        **kwargs,
    ):
        if not isinstance(scalar, ScalarType):
            raise TypeError

        if rows < 0 or cols < 0:
            raise InvalidMatrixSizeError(rows, cols)

        self._scalar = scalar
        self._rows = rows
        self._cols = cols

        if kwargs.get("_skipcheck"):
            self._data = data  # type: ignore
            return

        data = np.asarray(data, dtype=scalar.dtype).reshape(-1).copy()

        if len(data) != rows * cols:
            raise InvalidMatrixSizeError(rows, cols)

        self._data = data

    @property
    def cols(self) -> int:
        """Number of columns."""
        return self._cols

    @property
    def data(self) -> npt.NDArray:
        """Backing buffer in row-major order."""
        return self._data

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self._rows

    @property
    def scalar(self) -> ScalarType[T1]:
        return self._scalar

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def T(self) -> Self:
        """Shorthand for :meth:`transpose`."""
        return self.transpose()

    @classmethod
    def empty(cls, rows: int, cols: int, *, scalar: ScalarType[T1] = float64) -> Self:
        """Return a new matrix of given shape, without initializing entries."""
        data = scalar.empty(rows * cols)
        return cls(rows, cols, data, scalar=scalar, _skipcheck=True)

    @classmethod
    def full(
        cls,
        rows: int,
        cols: int,
        value: T1 | float,
        *,
        scalar: ScalarType[T1] = float64,
    ) -> Self:
        """Return a new matrix of given shape, filled with `value`."""
        data = scalar.full(rows * cols, value)
        return cls(rows, cols, data, scalar=scalar, _skipcheck=True)

    @classmethod
    def fromrows(
        cls,
        rows: Sequence[Sequence[T1 | float]] | npt.NDArray,
        *,
        scalar: ScalarType[T1] = float64,
    ) -> Self:
        """Build a matrix from a nested sequence of rows.

        Examples
        --------
        >>> from numlin.linalg import Matrix
        >>> Matrix.fromrows([[1, 2], [3, 4]]).get_col(1).tolist()
        [2.0, 4.0]
        """
        tmp = np.array(rows, dtype=scalar.dtype)

        if tmp.ndim != 2:
            raise ValueError("expected a two-dimensional sequence")

        return cls(tmp.shape[0], tmp.shape[1], tmp.reshape(-1), scalar=scalar)

    @classmethod
    def identity(cls, n: int, *, scalar: ScalarType[T1] = float64) -> Self:
        """Return the identity matrix of order `n`."""
        return cls.pseudo_identity(n, n, scalar=scalar)

    @classmethod
    def pseudo_identity(
        cls, rows: int, cols: int, *, scalar: ScalarType[T1] = float64
    ) -> Self:
        """Return a matrix with ones on the diagonal and zeros elsewhere."""
        result = cls.zeros(rows, cols, scalar=scalar)

        for i in range(min(rows, cols)):
            result[i, i] = scalar.ONE

        return result

    @classmethod
    def zeros(cls, rows: int, cols: int, *, scalar: ScalarType[T1] = float64) -> Self:
        """Return a new matrix of given shape, filled with zeros."""
        data = scalar.zeros(rows * cols)
        return cls(rows, cols, data, scalar=scalar, _skipcheck=True)

    def assign(self, rows: int, cols: int, value: T1 | float) -> None:
        """Reshape the matrix to ``(rows, cols)`` and fill it with `value`."""
        self._rows = rows
        self._cols = cols
        self._data = self._scalar.full(rows * cols, value)

    def copy(self) -> Self:
        """Return a copy of the matrix."""
        cls, data = type(self), self._data.copy()
        return cls(self._rows, self._cols, data, scalar=self._scalar, _skipcheck=True)

    def get_col(self, j: int) -> npt.NDArray:
        """Return a copy of the `j`-th column."""
        if not 0 <= j < self._cols:
            raise IndexError("column index out of range")

        return self._data[j :: self._cols].copy()

    def resize(self, rows: int, cols: int) -> None:
        """Change the shape of the matrix.

        The buffer is reallocated only if the number of elements changes, in which
        case its contents are unspecified. Use this only when every element is
        overwritten afterwards.
        """
        if rows * cols != len(self._data):
            self._data = self._scalar.empty(rows * cols)

        self._rows = rows
        self._cols = cols

    def swap_cols(self, i: int, j: int) -> None:
        """Interchange the `i`-th and `j`-th columns in place."""
        if not (0 <= i < self._cols and 0 <= j < self._cols):
            raise IndexError("column index out of range")

        if i == j:
            return

        view = self._data.reshape(self._rows, self._cols)
        view[:, [i, j]] = view[:, [j, i]]

    def swap_rows(self, i: int, j: int) -> None:
        """Interchange the `i`-th and `j`-th rows in place."""
        if not (0 <= i < self._rows and 0 <= j < self._rows):
            raise IndexError("row index out of range")

        if i == j:
            return

        tmp = self[i].copy()
        self[i] = self[j]
        self[j] = tmp

    def toarray(self) -> npt.NDArray:
        """Return a two-dimensional view of the buffer."""
        return self._data.reshape(self._rows, self._cols)

    def tolist(self) -> list[list[float]]:
        return self.toarray().tolist()

    def transpose(self) -> Self:
        """Return a transposed copy of the matrix."""
        cls, data = type(self), self.toarray().T.reshape(-1).copy()
        return cls(self._cols, self._rows, data, scalar=self._scalar, _skipcheck=True)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._rows}, {self._cols}, "
            f"{self._data.tolist()!r}, scalar={self._scalar!r})"
        )

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        if other._scalar is not self._scalar or other.shape != self.shape:
            return False

        return bool(np.all(other._data == self._data))

    def __len__(self) -> int:
        return self._rows

    def __iter__(self) -> rowiter:
        return rowiter(self)

    @overload
    def __getitem__(self, key: int) -> npt.NDArray: ...

    @overload
    def __getitem__(self, key: tuple[int, int]) -> T1: ...

    def __getitem__(self, key):
        match key:
            case (int() | np.integer() as i, int() | np.integer() as j):
                return self._data[self.__index(i, j)]

            case int() | np.integer():
                if not -self._rows <= key < self._rows:
                    raise IndexError("row index out of range")

                i = key % self._rows if self._rows else key
                return self._data[i * self._cols : (i + 1) * self._cols]

            case _:
                raise TypeError

    @overload
    def __setitem__(
        self, key: int, value: Sequence[T1 | float] | npt.NDArray
    ) -> None: ...

    @overload
    def __setitem__(self, key: tuple[int, int], value: T1 | float) -> None: ...

    def __setitem__(self, key, value):
        match key:
            case (int() | np.integer() as i, int() | np.integer() as j):
                self._data[self.__index(i, j)] = value

            case int() | np.integer():
                row = self[key]

                if np.ndim(value) != 0 and len(value) != self._cols:
                    raise InvalidVectorSizeError(len(value))

                row[:] = value

            case _:
                raise TypeError

    def __add__(self, rhs: Self | T1 | float) -> Self:
        return self.copy().__iadd__(rhs)

    def __radd__(self, lhs: T1 | float) -> Self:
        return self.copy().__iadd__(lhs)

    def __iadd__(self, rhs: Self | T1 | float) -> Self:
        match rhs:
            case Matrix():
                if rhs.shape != self.shape:
                    raise InvalidMatrixSizeError(rhs.rows, rhs.cols)

                self._data += rhs._data

            case float() | int() | np.floating() | np.integer():
                self._data += rhs

            case _:
                return NotImplemented

        return self

    def __mul__(self, rhs: Self | T1 | float) -> Self:
        return self.copy().__imul__(rhs)

    def __rmul__(self, lhs: T1 | float) -> Self:
        return self.copy().__imul__(lhs)

    def __imul__(self, rhs: Self | T1 | float) -> Self:
        match rhs:
            case Matrix():
                if rhs.shape != self.shape:
                    raise InvalidMatrixSizeError(rhs.rows, rhs.cols)

                self._data *= rhs._data

            case float() | int() | np.floating() | np.integer():
                self._data *= rhs

            case _:
                return NotImplemented

        return self

    def __neg__(self) -> Self:
        return self.copy().__imul__(-self._scalar.ONE)

    def __matmul__(self, rhs: Self | Sequence[T1 | float] | npt.NDArray) -> Any:
        """Matrix-matrix or matrix-vector product."""
        ZERO = self._scalar.ZERO

        if isinstance(rhs, Matrix):
            if self._cols != rhs.rows:
                raise InvalidMatrixSizeError(rhs.rows, rhs.cols)

            result = self.zeros(self._rows, rhs.cols, scalar=self._scalar)

            for i in range(self._rows):
                row, out = self[i], result[i]

                for j in range(rhs.cols):
                    tmp = ZERO

                    for k in range(self._cols):
                        tmp += row[k] * rhs[k, j]

                    out[j] = tmp

            return result

        if isinstance(rhs, (str, bytes)) or not isinstance(rhs, (Sequence, np.ndarray)):
            return NotImplemented

        x = asvector(rhs, self._scalar, self._cols)
        result = self._scalar.zeros(self._rows)

        for i in range(self._rows):
            row = self[i]
            tmp = ZERO

            for k in range(self._cols):
                tmp += row[k] * x[k]

            result[i] = tmp

        return result

    def __copy__(self) -> Self:
        return self.copy()

    def __index(self, i: int, j: int) -> int:
        if not (-self._rows <= i < self._rows and -self._cols <= j < self._cols):
            raise IndexError("matrix index out of range")

        return (i % self._rows) * self._cols + j % self._cols


def asvector[T: ComparableScalar](
    values: Sequence[T | float] | npt.NDArray,
    scalar: ScalarType[T],
    size: int | None = None,
) -> npt.NDArray:
    """Return a copy of `values` as a vector of `scalar`.

    Raises
    ------
    InvalidVectorSizeError
        If `size` is given and differs from the length of `values`.
    """
    result = scalar.asarray(values)

    if size is not None and len(result) != size:
        raise InvalidVectorSizeError(len(result))

    return result


def output[T: ComparableScalar](
    result: npt.NDArray, out: MutableSequence[T] | npt.NDArray | None
) -> Any:
    """Store `result` into `out` if given; return whichever holds the result.

    Raises
    ------
    InvalidVectorSizeError
        If the length of `out` differs from that of `result`.
    """
    if out is None:
        return result

    if len(out) != len(result):
        raise InvalidVectorSizeError(len(out))

    out[:] = result
    return out
