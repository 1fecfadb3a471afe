import importlib
import logging

import pytest


@pytest.mark.parametrize(
    "name",
    [
        "numlin",
        "numlin.context",
        "numlin.linalg",
        "numlin.scalar",
        "numlin.typing",
    ],
)
def test_import(name):
    assert importlib.import_module(name).__name__ == name


def test_exports():
    import numlin
    from numlin import linalg

    for name in numlin.__all__:
        assert hasattr(numlin, name)

    for name in linalg.__all__:
        assert hasattr(linalg, name)

    assert numlin.Matrix is linalg.Matrix
    assert numlin.Matrix.__type_params__[0].__name__ == "T1"


def test_null_handler():
    handlers = logging.getLogger("numlin").handlers
    assert any(isinstance(x, logging.NullHandler) for x in handlers)
