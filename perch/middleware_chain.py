#
# perch/middleware_chain.py
#
"""
Provides the MiddlewareChain class, which composes an ordered list of
middleware around a terminal handler.

A handler is a callable ``handler(req, res)``. A middleware is a callable
``middleware(req, res, next)`` where ``next`` is the handler for the rest
of the chain. Middleware runs code before and after calling ``next``,
may call it with a derived request (``next(new_req, res)``), or answer the
request itself and return without calling it at all.
"""

from perch.errors import ConfigurationError


class MiddlewareNode:
    """
    One link of a composed chain: a middleware function and the handler
    that follows it. Calling the node calls the middleware with that
    handler as ``next``.
    """

    __slots__ = [
        'func',
        'next',
    ]

    def __init__(self, func, next):
        self.func = func
        self.next = next

    def __call__(self, req, res):
        return self.func(req, res, self.next)

    def __repr__(self):
        return "<MiddlewareNode %r -> %r>" % (self.func, self.next)


class MiddlewareChain:
    """
    An ordered, immutable collection of middleware.

    The first middleware given is the outermost one: calling the handler
    produced by ``MiddlewareChain(m0, m1)(h)`` runs m0's code before
    ``next``, then m1's, then h, then m1's code after ``next``, then m0's.

    .. code:: python

        chain = MiddlewareChain(Recovery(), Logger(), CORS('*'))
        handler = chain(get_users)
    """

    def __init__(self, *middleware):
        self.mw_list = tuple(middleware)
        for mw in self.mw_list:
            if not callable(mw):
                raise ConfigurationError("middleware %r is not callable" % (mw, ))

    def __call__(self, handler):
        """
        Wrap `handler` in every middleware of this chain.

        Args:
            handler (callable): The terminal handler, called with
                (req, res) once all middleware passed the request on.

        Returns:
            callable: A handler running the whole chain.

        Raises:
            ConfigurationError: If handler is None.
        """
        if handler is None:
            raise ConfigurationError("cannot build a middleware chain around a None handler")

        # wrap from the innermost middleware outwards
        for mw in reversed(self.mw_list):
            handler = MiddlewareNode(mw, handler)
        return handler

    def __add__(self, other):
        """A new chain running this chain's middleware before `other`'s."""
        if isinstance(other, MiddlewareChain):
            other = other.mw_list
        return MiddlewareChain(*self.mw_list, *other)

    def __contains__(self, func):
        return any(func is mw for mw in self.mw_list)

    def __len__(self):
        return len(self.mw_list)

    def __iter__(self):
        return iter(self.mw_list)

    def __reversed__(self):
        return reversed(self.mw_list)

    def __repr__(self):
        return "MiddlewareChain(%s)" % ', '.join(map(repr, self.mw_list))
