#
# perch/responses.py
#
"""
Structured responses: JSON, gzip-compressed JSON and binary downloads.

Every helper takes the response sink as its first argument. The named
helpers of the :data:`Response` table all funnel into :func:`send`:

.. code:: python

    from perch import Response

    def get_user(req, res):
        Response.ok(res, {'id': 42})          # -> {"id": 42}

    def get_pair(req, res):
        Response.ok(res, 'a', 'b')            # -> ["a", "b"]

    def gone(req, res):
        Response.send(res, 410)               # no body

Payloads are classified by :meth:`Payload.of`: no values means no body, a
single value is the body itself, several values are sent as one JSON array.
"""

import os
import json
import gzip as _gzip
import shutil
import logging

from functools import partialmethod
from http import HTTPStatus

logger = logging.getLogger(__name__)

JSON_TYPE = 'application/json'
OCTET_STREAM_TYPE = 'application/octet-stream'

COPY_CHUNK_SIZE = 64 * 1024


class Payload:
    """
    The body of a structured response: :class:`NoBody`, :class:`Single` or
    :class:`Multiple`. Use :meth:`Payload.of` to build one from positional
    arguments.
    """

    __slots__ = ()

    is_empty = False

    @staticmethod
    def of(*data):
        """
        Classify response arguments.

        Zero arguments, or a single None, give NO_BODY; exactly one argument
        gives a Single holding that value unwrapped; more give a Multiple
        holding all of them in order.
        """
        if not data or (len(data) == 1 and data[0] is None):
            return NO_BODY
        if len(data) == 1:
            return Single(data[0])
        return Multiple(data)

    @property
    def value(self):
        """The object handed to the json encoder."""
        raise NotImplementedError

    def iterencode(self):
        """
        Yields the JSON encoding of the payload in chunks.
        Raises TypeError or ValueError, possibly after some chunks have
        already been produced, if the value cannot be serialized.
        """
        if self.is_empty:
            return iter(())
        return _encoder.iterencode(self.value)

    def encode(self):
        """The complete JSON encoding as bytes (empty for NoBody)."""
        return ''.join(self.iterencode()).encode()


class NoBody(Payload):
    __slots__ = ()

    is_empty = True

    @property
    def value(self):
        return None

    def __repr__(self):
        return 'NO_BODY'


class Single(Payload):
    __slots__ = ('_value',)

    def __init__(self, value):
        self._value = value

    @property
    def value(self):
        return self._value

    def __repr__(self):
        return 'Single(%r)' % (self._value, )


class Multiple(Payload):
    __slots__ = ('_values',)

    def __init__(self, values):
        self._values = tuple(values)

    @property
    def value(self):
        return list(self._values)

    def __repr__(self):
        return 'Multiple(%r)' % (self._values, )


NO_BODY = NoBody()

# NaN and Infinity have no JSON representation
_encoder = json.JSONEncoder(allow_nan=False)


def send(res, status, *data):
    """
    Generic structured response which all the named responses use.

    The payload is encoded before anything is written; if it cannot be
    encoded the response is downgraded to a 500 with no body.

    Parameters
    ----------
    res : perch.http.HTTPResponse
        The response sink
    status : int
        The HTTP status code
    data : mixed
        Payload values, see :meth:`Payload.of`
    """
    if status == HTTPStatus.NO_CONTENT:
        res.write_head(HTTPStatus.NO_CONTENT)
        return

    payload = Payload.of(*data)
    try:
        body = payload.encode()
    except (TypeError, ValueError) as error:
        logger.error("Could not encode %d response: %s", status, error)
        res.write_head(HTTPStatus.INTERNAL_SERVER_ERROR)
        return

    res.set_type(JSON_TYPE)
    res.write_head(status)
    if body:
        res.write(body)


def gzip(res, status, *data):
    """
    Like :func:`send`, but the JSON body is compressed on the fly.

    The status line is written before encoding starts, so an encoding
    error part way through cannot change the response anymore; it is only
    logged and the client receives a truncated body.
    """
    if status == HTTPStatus.NO_CONTENT:
        res.write_head(HTTPStatus.NO_CONTENT)
        return

    payload = Payload.of(*data)

    res.set('Content-Encoding', 'gzip')
    res.set_type(JSON_TYPE)
    res.write_head(status)

    with _gzip.GzipFile(fileobj=res.stream, mode='wb') as gz:
        try:
            for chunk in payload.iterencode():
                gz.write(chunk.encode())
        except (TypeError, ValueError) as error:
            logger.error("Could not encode gzip %d response after headers were sent: %s",
                         status, error)


def _set_attachment_headers(res, filename):
    res.set_type(OCTET_STREAM_TYPE)
    res.set('Content-Disposition', 'attachment; filename="%s"' % filename)


def stream_bytes(res, status, data, filename):
    """
    Send raw bytes as a file download named `filename`.
    """
    _set_attachment_headers(res, filename)
    res.write_head(status)
    res.write(data)


def stream_file(res, status, path, filename):
    """
    Send the file at `path` as a download named `filename`, then remove the
    directory containing it.

    This is meant for files produced into a temporary directory for the
    sole purpose of being downloaded. If the file cannot be opened a 500 is
    sent and nothing is removed. Once the status line is out, copy errors
    and cleanup errors are logged only. The working directory, its
    ancestors and filesystem roots are never removed, so a bare relative
    filename only loses the file handle, not its directory.

    Parameters
    ----------
    res : perch.http.HTTPResponse
        The response sink
    status : int
        The HTTP status code used on success
    path : str or os.PathLike
        File to send; its parent directory is deleted afterwards
    filename : str
        Name offered to the client in the Content-Disposition header
    """
    try:
        f = open(path, 'rb')
    except OSError as error:
        logger.error("Could not open %s for streaming: %s", path, error)
        send(res, HTTPStatus.INTERNAL_SERVER_ERROR)
        return

    try:
        with f:
            _set_attachment_headers(res, filename)
            res.write_head(status)

            size = 0
            try:
                for chunk in iter(lambda: f.read(COPY_CHUNK_SIZE), b''):
                    res.write(chunk)
                    size += len(chunk)
            except OSError as error:
                logger.error("Streaming failed: %s", error)

            logger.info("Copied %d bytes", size)
    finally:
        _remove_parent_dir(path)


def _remove_parent_dir(path):
    tmp_dir = os.path.dirname(os.fspath(path))
    if tmp_dir in ("", os.curdir) or _is_protected_dir(tmp_dir):
        logger.warning("Refusing to remove %r, the parent of %s", tmp_dir or os.curdir, path)
        return
    try:
        shutil.rmtree(tmp_dir)
    except OSError as error:
        logger.error("Failed to clean up temp dir: %s", error)


def _is_protected_dir(directory):
    """The working directory, one of its ancestors, or a filesystem root."""
    directory = os.path.realpath(directory)
    cwd = os.path.realpath(os.getcwd())
    if os.path.dirname(directory) == directory:
        return True
    return cwd == directory or cwd.startswith(directory.rstrip(os.sep) + os.sep)


class ApiResponses:
    """
    The table of structured responses, available as :data:`Response`.

    Each named response takes the sink followed by any number of payload
    values and sends them with its status code through :func:`send`.
    """

    def _send_status(self, status, res, *data):
        send(res, status, *data)

    # 200
    ok = partialmethod(_send_status, HTTPStatus.OK)
    created = partialmethod(_send_status, HTTPStatus.CREATED)

    def no_content(self, res, *data):
        """Always an empty 204, whatever data is given."""
        send(res, HTTPStatus.NO_CONTENT)

    # 400
    bad_request = partialmethod(_send_status, HTTPStatus.BAD_REQUEST)
    unauthorized = partialmethod(_send_status, HTTPStatus.UNAUTHORIZED)
    forbidden = partialmethod(_send_status, HTTPStatus.FORBIDDEN)
    not_found = partialmethod(_send_status, HTTPStatus.NOT_FOUND)
    too_many_requests = partialmethod(_send_status, HTTPStatus.TOO_MANY_REQUESTS)

    # 500
    server_error = partialmethod(_send_status, HTTPStatus.INTERNAL_SERVER_ERROR)

    # misc
    send = staticmethod(send)
    gzip = staticmethod(gzip)
    stream_bytes = staticmethod(stream_bytes)
    stream_file = staticmethod(stream_file)


Response = ApiResponses()
