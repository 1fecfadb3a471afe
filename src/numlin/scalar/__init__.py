"""
#######################################
Scalar types (:mod:`numlin.scalar`)
#######################################

.. currentmodule:: numlin.scalar

This module provides the scalar abstraction the solvers are written against.

Scalar types
============

.. autosummary::
    :toctree: generated/

    ScalarType
    Float32Scalar
    Float64Scalar

Instances
=========

.. autosummary::
    :toctree: generated/

    float32
    float64
    resolve_scalar

"""

from .floatscalar import Float32Scalar, Float64Scalar, float32, float64, resolve_scalar
from .scalar import ScalarType

__all__ = [
    "Float32Scalar",
    "Float64Scalar",
    "ScalarType",
    "float32",
    "float64",
    "resolve_scalar",
]
