#
# perch/http/response.py
#

import sys
import logging

from collections import OrderedDict

from perch.__meta__ import version as perch_version

logger = logging.getLogger(__name__)


class HTTPResponse:
    """
    The response sink handed to every handler and middleware.

    It wraps the transport's request handler (a
    :class:`http.server.BaseHTTPRequestHandler`) and keeps the outgoing
    headers until the status line is written. The status line and headers
    may only be written once; after that, only body bytes can follow.
    The :mod:`perch.responses` helpers (``Response.ok(res, data)`` and
    friends) take care of formatting, headers and status for you.

    Parameters
    ----------
    handler : http.server.BaseHTTPRequestHandler
        The transport's handler for the current connection
    app : perch.APIServer, optional
        Server whose configuration controls default headers
    """
    SERVER_INFO = 'perch/{perch_version} Python/{py_version}'.format(
        py_version=".".join(map(str, sys.version_info[:2])),
        perch_version=perch_version,
    )

    has_sent_headers = False
    status_code = None
    headers = None

    def __init__(self, handler, app=None):
        self._handler = handler
        self.app = app
        self.headers = Headers()
        self.log = logger.getChild("id=%x" % id(self))

    def _set_default_headers(self):
        """
        Create some default headers that should be sent along with every HTTP
        response
        """
        if self.app is not None and self.app.enabled('x-powered-by'):
            self.headers.setdefault('X-Powered-By', 'perch')

    def write_head(self, status):
        """
        Sends the status line and headers to the client.
        A second call is ignored (and logged): the client already has a
        status.

        Parameters
        ----------
        status : int
            The HTTP status code
        """
        if self.has_sent_headers:
            self.log.warning("superfluous write_head(%d), status %d already sent",
                             status, self.status_code)
            return

        self._set_default_headers()
        self.status_code = int(status)
        self._handler.send_response(self.status_code)
        for key, value in self.headers.items():
            self._handler.send_header(key, value)
        self._handler.end_headers()
        self.has_sent_headers = True

    def write(self, data):
        """
        Write body bytes, sending a 200 status line first if none has been
        written yet.
        """
        if not self.has_sent_headers:
            self.write_head(200)
        data = data.encode() if isinstance(data, str) else data
        self.stream.write(data)

    def end(self):
        """
        Finish the response. If nothing was written, an empty 200 response
        is sent.
        """
        if not self.has_sent_headers:
            self.write_head(200)
        self.stream.flush()

    def set(self, header, value=None):
        """Set header to the value"""
        if value is None:
            for k, v in header.items():
                self.headers[k] = v
        else:
            self.headers[header] = value

    def header(self, header, value=None):
        """Alias for 'set()'"""
        self.set(header, value)

    def set_type(self, res_type):
        self.set('Content-Type', res_type)

    def get(self, field):
        """Get a header"""
        return self.headers[field]

    @property
    def info(self):
        return self.SERVER_INFO

    @property
    def stream(self):
        """The writable file object the body is sent through."""
        return self._handler.wfile


class Headers:
    """
    Outgoing response headers.

    Names are matched without regard to case but sent with the spelling of
    the last assignment. A value may be a callable, evaluated when the
    headers are written; None values are not sent. Newlines in names are
    escaped so a name can never start a second header line.
    """

    def __init__(self):
        self._fields = OrderedDict()

    @staticmethod
    def _key(name):
        name = name.replace("\n", r"\n")
        return name, name.casefold()

    def __getitem__(self, name):
        return self._fields[self._key(name)[1]][1]

    def __setitem__(self, name, value):
        name, folded = self._key(name)
        self._fields[folded] = (name, value)

    def __contains__(self, name):
        return self._key(name)[1] in self._fields

    def get(self, name, default=None):
        try:
            return self[name]
        except KeyError:
            return default

    def setdefault(self, name, default=None):
        if name not in self:
            self[name] = default
        return self[name]

    def items(self):
        """(name, value) string pairs ready to be sent."""
        for name, value in self._fields.values():
            if callable(value):
                value = value()
            if value is not None:
                yield name, str(value)
