#
# tests/test_middleware_chain.py
#

import pytest
from unittest import mock

from perch.errors import ConfigurationError
from perch.middleware_chain import MiddlewareChain, MiddlewareNode


def recording_middleware(name, calls):
    def mw(req, res, next):
        calls.append(name + ' before')
        next(req, res)
        calls.append(name + ' after')
    return mw


def test_empty_chain_returns_handler():
    handler = mock.Mock()
    assert MiddlewareChain()(handler) is handler


def test_none_handler_raises():
    with pytest.raises(ConfigurationError):
        MiddlewareChain(mock.Mock())(None)


def test_non_callable_middleware_raises():
    with pytest.raises(ConfigurationError):
        MiddlewareChain(mock.Mock(), 'not-callable')


def test_first_middleware_is_outermost():
    calls = []
    chain = MiddlewareChain(
        recording_middleware('m0', calls),
        recording_middleware('m1', calls),
    )
    handler = chain(lambda req, res: calls.append('handler'))

    handler(mock.sentinel.req, mock.sentinel.res)

    assert calls == [
        'm0 before',
        'm1 before',
        'handler',
        'm1 after',
        'm0 after',
    ]


def test_short_circuit_skips_rest_of_chain():
    inner = mock.Mock()
    handler = mock.Mock()

    def blocker(req, res, next):
        res.blocked = True

    composed = MiddlewareChain(blocker, inner)(handler)
    res = mock.Mock()
    composed(mock.Mock(), res)

    assert res.blocked
    assert not inner.called
    assert not handler.called


def test_middleware_may_replace_request():
    handler = mock.Mock()
    derived = mock.sentinel.derived

    def replacer(req, res, next):
        next(derived, res)

    MiddlewareChain(replacer)(handler)(mock.sentinel.req, mock.sentinel.res)
    handler.assert_called_once_with(derived, mock.sentinel.res)


def test_node_passes_next():
    func = mock.Mock()
    handler = mock.Mock()
    node = MiddlewareNode(func, handler)
    node(mock.sentinel.req, mock.sentinel.res)
    func.assert_called_once_with(mock.sentinel.req, mock.sentinel.res, handler)


def test_add_concatenates_in_order():
    a, b, c = mock.Mock(), mock.Mock(), mock.Mock()
    chain = MiddlewareChain(a) + MiddlewareChain(b, c)
    assert list(chain) == [a, b, c]
    assert list(reversed(chain)) == [c, b, a]


def test_contains_and_len():
    a, b = mock.Mock(), mock.Mock()
    chain = MiddlewareChain(a)
    assert a in chain
    assert b not in chain
    assert len(chain) == 1
