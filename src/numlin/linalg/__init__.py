"""
#################################################
Numerical linear algebra (:mod:`numlin.linalg`)
#################################################

.. currentmodule:: numlin.linalg

This module provides dense and sparse matrices together with direct and iterative
solvers of linear systems.

Matrices
========

.. autosummary::
    :toctree: generated/

    Matrix
    SparseColumn
    SparseMatrix
    ADAT

Decompositions
==============

.. autosummary::
    :toctree: generated/

    LUDecomposition
    CholeskyDecomposition
    QRDecomposition
    BandDecomposition
    SVD

Solvers
=======

.. autosummary::
    :toctree: generated/

    banmul
    cyclic
    gauss_jordan
    toeplz
    tridiag
    vander
    Linbcg
    LinbcgResult
    SparseLinbcg

Exceptions
==========

.. autosummary::
    :toctree: generated/

    LinAlgError
    InvalidSizeError
    InvalidVectorSizeError
    InvalidMatrixSizeError
    SingularMatrixError
    ZeroDiagonalElementError
    DivisionByZeroError
    SingularPrincipleMinorError
    NegativeValueNotAllowedError
    ConvergenceError
    ShouldNotArriveHereError

"""

from .banded import BandDecomposition, banmul
from .cholesky import CholeskyDecomposition
from .exceptions import (
    ConvergenceError,
    DivisionByZeroError,
    InvalidMatrixSizeError,
    InvalidSizeError,
    InvalidVectorSizeError,
    LinAlgError,
    NegativeValueNotAllowedError,
    ShouldNotArriveHereError,
    SingularMatrixError,
    SingularPrincipleMinorError,
    ZeroDiagonalElementError,
)
from .gaussjordan import gauss_jordan
from .linbcg import Linbcg, LinbcgResult, SparseLinbcg
from .lu import LUDecomposition
from .matrix import Matrix
from .qr import QRDecomposition
from .sparse import ADAT, SparseColumn, SparseMatrix
from .svd import SVD
from .toeplitz import toeplz
from .tridiagonal import cyclic, tridiag
from .vandermonde import vander

__all__ = [
    "ADAT",
    "BandDecomposition",
    "CholeskyDecomposition",
    "ConvergenceError",
    "DivisionByZeroError",
    "InvalidMatrixSizeError",
    "InvalidSizeError",
    "InvalidVectorSizeError",
    "LUDecomposition",
    "LinAlgError",
    "Linbcg",
    "LinbcgResult",
    "Matrix",
    "NegativeValueNotAllowedError",
    "QRDecomposition",
    "SVD",
    "ShouldNotArriveHereError",
    "SingularMatrixError",
    "SingularPrincipleMinorError",
    "SparseColumn",
    "SparseLinbcg",
    "SparseMatrix",
    "ZeroDiagonalElementError",
    "banmul",
    "cyclic",
    "gauss_jordan",
    "toeplz",
    "tridiag",
    "vander",
]
