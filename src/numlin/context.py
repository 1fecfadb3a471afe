"""
###############################
Context (:mod:`numlin.context`)
###############################

.. currentmodule:: numlin.context

This module provides the tunable settings of the iterative algorithms.

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext

"""

import contextlib
import contextvars
from typing import Self


class Context:
    """Create a new context.

    Parameters
    ----------
    max_svd_iterations : int, default=30
        Maximum number of implicit-shift sweeps spent on one singular value before
        :class:`numlin.linalg.SVD` gives up.
    linbcg_eps : float, default=1e-14
        Relative size below which two successive residual norms are regarded as
        equal by the error estimates of :class:`numlin.linalg.Linbcg`.
    refine_precision : int, default=113
        Working precision in bits used to accumulate residuals in
        :meth:`numlin.linalg.LUDecomposition.mprove`.
    """

    __slots__ = ("_max_svd_iterations", "_linbcg_eps", "_refine_precision")
    _max_svd_iterations: int
    _linbcg_eps: float
    _refine_precision: int

    def __init__(
        self,
        max_svd_iterations: int = 30,
        linbcg_eps: float = 1e-14,
        refine_precision: int = 113,
    ):
        if max_svd_iterations < 1:
            raise ValueError("max_svd_iterations must be positive")

        if not linbcg_eps > 0.0:
            raise ValueError("linbcg_eps must be positive")

        if refine_precision < 53:
            raise ValueError("refine_precision must be at least 53 bits")

        self._max_svd_iterations = max_svd_iterations
        self._linbcg_eps = linbcg_eps
        self._refine_precision = refine_precision

    @property
    def max_svd_iterations(self) -> int:
        return self._max_svd_iterations

    @property
    def linbcg_eps(self) -> float:
        return self._linbcg_eps

    @property
    def refine_precision(self) -> int:
        return self._refine_precision

    def copy(self) -> Self:
        return self.replace()

    def replace(self, **kwargs) -> Self:
        """Return a copy of the context with the given settings replaced."""
        settings = {
            "max_svd_iterations": self._max_svd_iterations,
            "linbcg_eps": self._linbcg_eps,
            "refine_precision": self._refine_precision,
        }

        for key, value in kwargs.items():
            if key not in settings:
                raise TypeError(f"unknown setting: {key!r}")

            if value is not None:
                settings[key] = value

        return self.__class__(**settings)

    def __repr__(self):
        return (
            f"{type(self).__name__}(max_svd_iterations={self._max_svd_iterations!r}, "
            f"linbcg_eps={self._linbcg_eps!r}, "
            f"refine_precision={self._refine_precision!r})"
        )

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("numlin")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    if not isinstance(ctx, Context):
        raise TypeError

    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None,
    *,
    max_svd_iterations: int | None = None,
    linbcg_eps: float | None = None,
    refine_precision: int | None = None,
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Examples
    --------
    >>> from numlin.context import getcontext, localcontext
    >>> with localcontext(max_svd_iterations=75):
    ...     getcontext().max_svd_iterations
    75
    >>> getcontext().max_svd_iterations
    30
    """
    if ctx is None:
        ctx = getcontext()

    ctx = ctx.replace(
        max_svd_iterations=max_svd_iterations,
        linbcg_eps=linbcg_eps,
        refine_precision=refine_precision,
    )
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)
