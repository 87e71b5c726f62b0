#
# perch/router.py
#

import logging
from functools import partialmethod
from collections import OrderedDict

from perch.errors import ConfigurationError
from perch.http.methods import HTTPMethod
from perch.middleware_chain import MiddlewareChain
from perch.responses import Response

logger = logging.getLogger(__name__)


class Route:
    """
    A dispatch key, the handler answering it and the middleware wrapped
    around that handler (first one outermost).

    The key has the form "METHOD /path", as produced by
    :meth:`perch.PathBuilder.methods`. A key with no method ("/path")
    answers every method.

    .. code:: python

        users = PathBuilder('users')
        Route(users.methods().GET, list_users, [Recovery(), Logger()])
    """

    __slots__ = ('method_and_path', 'handler', 'middleware')

    def __init__(self, method_and_path, handler, middleware=()):
        self.method_and_path = method_and_path
        self.handler = handler
        self.middleware = tuple(middleware)

    @property
    def method(self):
        """The method part of the key, None for keys matching any method."""
        return split_key(self.method_and_path)[0]

    @property
    def path(self):
        return split_key(self.method_and_path)[1]

    def compose(self):
        """
        Build the handler serving this route: its handler wrapped in its
        middleware.

        Returns:
            tuple: The dispatch key and the composed handler.

        Raises:
            ConfigurationError: If the route has no handler.
        """
        if self.handler is None:
            raise ConfigurationError("handler is None for route %s" % self.method_and_path)
        return self.method_and_path, MiddlewareChain(*self.middleware)(self.handler)

    def __repr__(self):
        return "Route(%r, %r)" % (self.method_and_path, self.handler)


def split_key(key):
    """
    Split a dispatch key into (method, path); method is None if the key is
    a bare path.
    """
    key = key.strip()
    if key.startswith('/'):
        return None, key
    method, _, path = key.partition(' ')
    return method.upper(), path.strip()


def route_key(method, path):
    """Join a method (or None) and a path into a dispatch key."""
    if method is None:
        return path
    return "%s %s" % (method, path)


class Router:
    """
    The router holds all the 'routes': composed handlers, each registered
    under a dispatch key "METHOD /path". A request is dispatched to the
    handler whose key exactly matches its method and path; a route
    registered under a bare path answers any method.

    Routes are added once, before serving, either as :class:`Route` values:
        router.add_route(Route("GET /home", cb, [Logger()]))
    or with the decorator helpers:
        @router.get("/home")
        def home(req, res):
            ...

    Middleware given to the router itself runs, outermost, around every
    request: matched ones, and the 404 and 405 answers for unmatched ones.
    """

    def __init__(self, middleware=()):
        self.middleware = tuple(middleware)
        self.routes = OrderedDict()
        self._handler = MiddlewareChain(*self.middleware)(self.dispatch)
        self.log = logger.getChild("id=%x" % id(self))

    def add_route(self, route):
        """
        Compose a route with its middleware and register it.

        Raises:
            ConfigurationError: If the route has no handler or its key is
                already registered.
        """
        key, handler = route.compose()
        method, path = split_key(key)
        key = route_key(method, path)
        if key in self.routes:
            raise ConfigurationError("a route for %s is already registered" % key)
        self.log.info("Adding route %s -> %r", key, route.handler)
        self.routes[key] = handler
        return self

    def add_routes(self, routes):
        for route in routes:
            self.add_route(route)
        return self

    def _add_route(self, method, path, handler=None, middleware=()):
        """The implementation of the verb helpers"""
        if handler is not None:
            return self.add_route(Route(route_key(method, path), handler, middleware))
        else:
            # return a lambda that will return the 'func' argument
            return lambda func: (
                self.add_route(Route(route_key(method, path), func, middleware)),
                func
            )[1]

    all = partialmethod(_add_route, None)
    get = partialmethod(_add_route, HTTPMethod.GET)
    post = partialmethod(_add_route, HTTPMethod.POST)
    put = partialmethod(_add_route, HTTPMethod.PUT)
    patch = partialmethod(_add_route, HTTPMethod.PATCH)
    delete = partialmethod(_add_route, HTTPMethod.DELETE)

    def match(self, method, path):
        """
        Returns the handler registered for method and path, or None.
        An exact "METHOD /path" key wins over a bare "/path" key.
        """
        handler = self.routes.get("%s %s" % (method, path))
        if handler is None:
            handler = self.routes.get(path)
        return handler

    def allowed_methods(self, path):
        """The methods registered for `path`, in registration order."""
        return [method
                for method, route_path in map(split_key, self.routes)
                if route_path == path and method is not None]

    def __call__(self, req, res):
        """Run a request through the router middleware and dispatch it."""
        return self._handler(req, res)

    def dispatch(self, req, res):
        """
        Call the route matching the request. Unknown paths are answered
        with 404; a path registered only for other methods with 405 and an
        Allow header.
        """
        handler = self.match(req.method, req.path)
        if handler is not None:
            return handler(req, res)

        allowed = self.allowed_methods(req.path)
        if allowed:
            res.set('Allow', ', '.join(allowed))
            Response.send(res, 405, "Method not allowed")
        else:
            Response.not_found(res, "Not found")

    def __contains__(self, key):
        method, path = split_key(key)
        return route_key(method, path) in self.routes

    def __len__(self):
        return len(self.routes)

    def __iter__(self):
        return iter(self.routes)
