#
# perch/server.py
#
"""
Binding of a perch router to the standard library's threaded http server.

.. code:: python

    users = PathBuilder('users')

    server = APIServer('127.0.0.1:8000', [
        Route(users.methods().GET, list_users, [Recovery(), Logger()]),
        Route(users.methods().POST, create_user, [Recovery(), Logger()]),
    ])
    server.listen_and_serve()

Each request is handled on its own thread; perch adds no locking of its own.
"""

import os
import socket
import logging

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from perch.http import HTTPRequest, HTTPResponse, Context
from perch.router import Router

logger = logging.getLogger(__name__)

DEFAULT_ADDR = '127.0.0.1:8000'


def parse_address(addr):
    """
    Split a 'host:port' listen address into the (host, port) pair given to
    the socket bind call. An empty host (':8080') binds every interface;
    IPv6 hosts are written in brackets ('[::1]:8080').
    """
    host, sep, port = addr.rpartition(':')
    if not sep:
        raise ValueError("Listen address %r is not of the form host:port" % addr)
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    return host, int(port)


class HTTPServer(ThreadingHTTPServer):
    """The transport: one daemon thread per request."""

    daemon_threads = True


class HTTPServerV6(HTTPServer):
    address_family = socket.AF_INET6


class RequestHandler(BaseHTTPRequestHandler):
    """
    Adapter from :mod:`http.server` to perch: wraps each request in an
    HTTPRequest/HTTPResponse pair and hands them to the server's router.
    The class is subclassed per :class:`APIServer` with the `app`
    attribute set.
    """

    app = None
    server_version = HTTPResponse.SERVER_INFO
    sys_version = ''

    def handle_perch_request(self):
        context = Context.background()
        req = HTTPRequest(self, context)
        res = HTTPResponse(self, self.app)
        try:
            self.app.handle_client_request(req, res)
            res.end()
        except Exception:
            logger.exception("Unhandled error answering %s %s; the connection is dropped "
                             "(add Recovery middleware to answer with a 500)",
                             self.command, self.path)
            self.close_connection = True
        finally:
            context.cancel()

    do_GET = handle_perch_request
    do_HEAD = handle_perch_request
    do_POST = handle_perch_request
    do_PUT = handle_perch_request
    do_PATCH = handle_perch_request
    do_DELETE = handle_perch_request
    do_OPTIONS = handle_perch_request

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class APIServer:
    """
    A set of routes served on a listen address.

    The routes are composed and registered when the server is constructed,
    so an invalid route table raises :class:`perch.errors.ConfigurationError`
    before anything is served. :meth:`listen_and_serve` then blocks until
    :meth:`shutdown` is called from another thread or the listener fails.
    """

    def __init__(self,
                 addr=None,
                 routes=(),
                 name=__name__,
                 middleware=(),
                 **kw
                 ):
        """
        Creates a server object.

        Args:
            addr (str or None): 'host:port' to listen on. Defaults to the
                PERCH_ADDR environment variable, then to '127.0.0.1:8000'.

            routes (iterable of perch.Route): The route table.

            name (str): Identifies the server in logs.

            middleware (iterable): Middleware run around every request,
                unmatched ones included, outside of each route's own
                middleware.

        Keyword Args:
            Options merged over the defaults in `config`, readable with
            ``srv['name']``. Names with dashes ('x-powered-by',
            'socket-timeout') are set with :meth:`enable`,
            :meth:`disable` or item assignment.
        """
        self.name = name
        self.addr = addr or os.getenv('PERCH_ADDR', DEFAULT_ADDR)

        self.config = {
            'x-powered-by': True,
            'socket-timeout': None,
        }
        self.config.update(kw)

        self.router = Router(middleware)
        self.router.add_routes(routes)

        self.httpd = None
        self.log = logger.getChild("id=%x" % id(self))

    #
    # Route adding functions
    #
    # These forward to the router and may be used as decorators, as in:
    #
    #    @srv.get('/health')
    #    def health(req, res):
    #        ...
    #

    def all(self, path, handler=None, middleware=()):
        """Register a handler answering every method on path."""
        return self.router.all(path, handler, middleware)

    def get(self, path, handler=None, middleware=()):
        """Register a handler for GET requests on path."""
        return self.router.get(path, handler, middleware)

    def post(self, path, handler=None, middleware=()):
        """Register a handler for POST requests on path."""
        return self.router.post(path, handler, middleware)

    def put(self, path, handler=None, middleware=()):
        """Register a handler for PUT requests on path."""
        return self.router.put(path, handler, middleware)

    def patch(self, path, handler=None, middleware=()):
        """Register a handler for PATCH requests on path."""
        return self.router.patch(path, handler, middleware)

    def delete(self, path, handler=None, middleware=()):
        """Register a handler for DELETE requests on path."""
        return self.router.delete(path, handler, middleware)

    def handle_client_request(self, req, res):
        """
        Entry point for every request: dispatches the request/response
        pair to the router.
        """
        self.router(req, res)

    #
    # Configuration functions
    #

    def enable(self, name):
        """Turn the option `name` on."""
        self.config[name] = True

    def disable(self, name):
        """Turn the option `name` off."""
        self.config[name] = False

    def enabled(self, name):
        """
        The truth value of option `name`, or None when the option was never
        set. Responses consult this for 'x-powered-by' on every request, so
        toggling an option takes effect while serving.
        """
        if name not in self.config:
            return None
        return bool(self.config[name])

    def __getitem__(self, name):
        return self.config[name]

    def __setitem__(self, name, value):
        self.config[name] = value

    def __contains__(self, name):
        return name in self.config

    #
    # Server lifecycle
    #

    def make_handler_class(self):
        """A RequestHandler subclass bound to this server."""
        return type('RequestHandler', (RequestHandler, ), {
            'app': self,
            'timeout': self.config.get('socket-timeout'),
        })

    def create_server(self):
        """
        Bind the listening socket without serving yet.

        Returns:
            HTTPServer: The bound transport.

        Raises:
            OSError: If the address cannot be bound.
            ValueError: If the address is malformed.
        """
        host, port = parse_address(self.addr)
        server_class = HTTPServerV6 if ':' in host else HTTPServer
        self.httpd = server_class((host, port), self.make_handler_class())
        return self.httpd

    @property
    def server_address(self):
        """The (host, port) actually bound, None before binding."""
        if self.httpd is None:
            return None
        return self.httpd.server_address[:2]

    def listen_and_serve(self):
        """
        Serve requests, blocking until :meth:`shutdown` is called or the
        listener fails. Bind and listener errors propagate to the caller.
        """
        if self.httpd is None:
            self.create_server()

        self.log.info("Server %s is listening on %s", self.name, self.addr)
        try:
            self.httpd.serve_forever()
        finally:
            self.httpd.server_close()
            self.httpd = None
            self.log.info("Server %s stopped", self.name)

    def shutdown(self):
        """
        Stop a server running :meth:`listen_and_serve` in another thread and
        wait for its loop to exit.
        Must not be called from the serving thread itself.
        """
        httpd = self.httpd
        if httpd is not None:
            httpd.shutdown()
