#
# perch/http/request.py
#

import copy
import logging

from urllib.parse import urlsplit, parse_qs, unquote

from .context import Context
from .errors import HTTPErrorBadRequest

logger = logging.getLogger(__name__)


class HTTPRequest:
    """
    Helper class which normalizes access to client information of an
    incoming http request.
    The object is intended to be mutable, with middleware adding
    members for maximum flexibility; the one exception is the request
    context, which is replaced by deriving a new request with
    :meth:`with_context`.

    The HTTPRequest is always paired with a HTTPResponse object to reply
    back to the client.

    Object construction should only happen in the server's request
    handler; not by any middleware or auxillary function.
    """

    _handler = None
    headers = None

    def __init__(self, handler, context=None):
        """
        Parameters:
            handler (http.server.BaseHTTPRequestHandler): The transport's
                handler which has already parsed the request line and
                headers.
            context (Context or None): The cancellation context of the
                request, a fresh background context if None.
        """
        self.log = logger.getChild("id=%x" % id(self))
        self._handler = handler
        self._body = _Body(handler)
        self.headers = handler.headers
        self.context = context if context is not None else Context.background()

        url = urlsplit(handler.path)
        self.path = unquote(url.path) or '/'
        self.query = parse_qs(url.query)

        self.log.debug("%s %s", self.method, self.path)

    def param(self, name, default=None):
        """
        Return the first value of query parameter 'name' if found, else
        return provided 'default'.
        """
        try:
            return self.query[name][0]
        except (KeyError, IndexError):
            return default

    def body(self):
        """
        Read the complete request body.
        Returns the bytes of the body which the user should decode, an
        empty bytes object if the request has none.
        The body is read once; requests derived via :meth:`with_context`
        share it.
        """
        return self._body.read()

    def with_context(self, context):
        """
        Returns a shallow copy of this request carrying `context`.
        The original request is left unchanged.
        """
        req = copy.copy(self)
        req.context = context
        return req

    def type_is(self, mime_type):
        """
        returns True if content-type of the request matches the
        mime_type parameter.
        """
        content_type = self.headers.get('Content-Type', '')
        return content_type.split(';')[0].strip() == mime_type

    @property
    def method(self):
        return self._handler.command

    @property
    def ip(self):
        return self._handler.client_address[0]

    @property
    def remote_addr(self):
        """The caller's address as 'host:port'."""
        return "%s:%s" % tuple(self._handler.client_address[:2])

    @property
    def hostname(self):
        return self.headers.get('Host')

    @property
    def protocol(self):
        """
        The name of the protocol being used
        """
        return self._handler.request_version


class _Body:
    """The lazily read, cached body of one request."""

    def __init__(self, handler):
        self._handler = handler
        self._data = None

    def read(self):
        if self._data is None:
            try:
                length = int(self._handler.headers.get('Content-Length') or 0)
            except ValueError:
                raise HTTPErrorBadRequest("Invalid Content-Length") from None
            self._data = self._handler.rfile.read(length) if length > 0 else b''
            logger.debug("Read body of %d bytes", len(self._data))
        return self._data
