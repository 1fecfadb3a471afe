import threading

import pytest

from numlin.context import Context, getcontext, localcontext, setcontext


def test_defaults():
    ctx = Context()
    assert ctx.max_svd_iterations == 30
    assert ctx.linbcg_eps == 1e-14
    assert ctx.refine_precision == 113


def test_validation():
    with pytest.raises(ValueError):
        Context(max_svd_iterations=0)

    with pytest.raises(ValueError):
        Context(linbcg_eps=0.0)

    with pytest.raises(ValueError):
        Context(refine_precision=32)

    with pytest.raises(TypeError):
        Context().replace(unknown=1)


def test_replace():
    ctx = Context().replace(max_svd_iterations=75)
    assert ctx.max_svd_iterations == 75
    assert ctx.refine_precision == 113
    assert ctx.copy().max_svd_iterations == 75


def test_localcontext():
    before = getcontext()

    with localcontext(max_svd_iterations=10) as ctx:
        assert getcontext() is ctx
        assert ctx.max_svd_iterations == 10

        with localcontext(refine_precision=200):
            assert getcontext().max_svd_iterations == 10
            assert getcontext().refine_precision == 200

    assert getcontext() is before


def test_setcontext():
    def target():
        setcontext(Context(max_svd_iterations=5))
        results.append(getcontext().max_svd_iterations)

    results = []
    thread = threading.Thread(target=target)
    thread.start()
    thread.join()
    assert results == [5]
    assert getcontext().max_svd_iterations == 30

    with pytest.raises(TypeError):
        setcontext(None)
