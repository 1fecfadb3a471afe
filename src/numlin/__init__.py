import logging

from .context import Context, getcontext, localcontext, setcontext
from .linalg import LinAlgError, Matrix
from .scalar import float32, float64

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Context",
    "getcontext",
    "localcontext",
    "setcontext",
    "LinAlgError",
    "Matrix",
    "float32",
    "float64",
]
