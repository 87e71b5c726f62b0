#
# perch/http/errors.py
#
"""
Custom Exception subclasses relating to specific http errors.

Raising one of these from a handler (with the Recovery middleware in place)
answers the client with the error's status code and message instead of an
opaque server error.
"""

from http import HTTPStatus


class HTTPError(Exception):
    """
    Generic HTTP Exception.

    Must be constructed with a code number, may be given an optional message.
    It is recommended to use one of the subclasses which is defined below.
    A helper function exists to get the appropriate error from a code:
        raise HTTPError.get_from_code(404)()
        raise HTTPErrorNotFound()
    """

    status = HTTPStatus.INTERNAL_SERVER_ERROR
    _msg = None

    def __init__(self, msg=None, code=None):
        """
        Construct an http error, if code or message not defined, use default.
        """
        self.code = int(code or self.status)
        if msg is not None:
            self._msg = str(msg)
        super().__init__(self.msg)

    @classmethod
    def get_from_code(cls, code):
        """
        A simple way of getting the Exception class of an http error from http
        error code. Returns None for codes without a dedicated class.
        """
        return code_to_error.get(code)

    @property
    def msg(self):
        if self._msg:
            return self._msg
        try:
            return HTTPStatus(self.code).phrase
        except ValueError:
            return ''


class HTTPErrorBadRequest(HTTPError):
    status = HTTPStatus.BAD_REQUEST


class HTTPErrorUnauthorized(HTTPError):
    status = HTTPStatus.UNAUTHORIZED


class HTTPErrorForbidden(HTTPError):
    status = HTTPStatus.FORBIDDEN


class HTTPErrorNotFound(HTTPError):
    status = HTTPStatus.NOT_FOUND


class HTTPErrorMethodNotAllowed(HTTPError):
    status = HTTPStatus.METHOD_NOT_ALLOWED


class HTTPErrorRequestTimeout(HTTPError):
    status = HTTPStatus.REQUEST_TIMEOUT


class HTTPErrorTooManyRequests(HTTPError):
    status = HTTPStatus.TOO_MANY_REQUESTS


class HTTPErrorInternalServerError(HTTPError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR


code_to_error = {
    400: HTTPErrorBadRequest,
    401: HTTPErrorUnauthorized,
    403: HTTPErrorForbidden,
    404: HTTPErrorNotFound,
    405: HTTPErrorMethodNotAllowed,
    408: HTTPErrorRequestTimeout,
    429: HTTPErrorTooManyRequests,

    500: HTTPErrorInternalServerError,
}

__all__ = [
    # generic error
    'HTTPError',

    #  -- 4XX errors
    'HTTPErrorBadRequest',
    'HTTPErrorUnauthorized',
    'HTTPErrorForbidden',
    'HTTPErrorNotFound',
    'HTTPErrorMethodNotAllowed',
    'HTTPErrorRequestTimeout',
    'HTTPErrorTooManyRequests',

    #  -- 5XX errors
    'HTTPErrorInternalServerError',
]
