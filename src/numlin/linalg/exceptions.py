class LinAlgError(ValueError):
    """Error raised by :mod:`numlin.linalg` functions."""


class InvalidSizeError(LinAlgError):
    """Operands of an operation have inconsistent sizes."""

    def __init__(self, message: str = "Invalid vector or matrix size"):
        super().__init__(message)


class InvalidVectorSizeError(InvalidSizeError):
    """Vector whose length does not match the problem dimension.

    Attributes
    ----------
    size : int
        Length of the offending vector.
    """

    size: int

    def __init__(self, size: int):
        super().__init__(f"Invalid vector size : {size}")
        self.size = size


class InvalidMatrixSizeError(InvalidSizeError):
    """Matrix whose shape does not fit the operation.

    Attributes
    ----------
    rows : int
    cols : int
    """

    rows: int
    cols: int

    def __init__(self, rows: int, cols: int):
        super().__init__(f"Invalid matrix size : (row, col) = ({rows}, {cols})")
        self.rows = rows
        self.cols = cols


class SingularMatrixError(LinAlgError):
    """Matrix is numerically singular.

    Attributes
    ----------
    name : str
        Routine that detected the singularity.
    """

    name: str

    def __init__(self, name: str):
        super().__init__(f"Matrix is singular : {name}")
        self.name = name


class ZeroDiagonalElementError(LinAlgError):
    """Diagonal element the algorithm divides by is zero.

    Attributes
    ----------
    index : int
        Row (and column) of the diagonal element.
    """

    index: int

    def __init__(self, index: int):
        super().__init__(
            f"Diagonal element of the matrix is zero at row = col = {index}"
        )
        self.index = index


class DivisionByZeroError(LinAlgError, ZeroDivisionError):
    """Computed divisor vanished during elimination."""

    def __init__(self, message: str = "Try to divide by zero."):
        super().__init__(message)


class SingularPrincipleMinorError(LinAlgError):
    """Leading principal minor of a Toeplitz matrix is singular."""

    def __init__(self, message: str = "Singular principle minor"):
        super().__init__(message)


class NegativeValueNotAllowedError(LinAlgError):
    """Matrix handed to the Cholesky decomposition is not positive definite."""

    def __init__(self, message: str = "Negative value not allowed"):
        super().__init__(message)


class ConvergenceError(LinAlgError):
    """Iteration did not converge within the permitted number of steps."""


class ShouldNotArriveHereError(AssertionError):
    """Recursion ended without reaching its terminating step.

    This signals a defect of the algorithm, not a problem of the input.
    """

    def __init__(self, message: str = "Should not arrive here"):
        super().__init__(message)
