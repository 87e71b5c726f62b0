#
# perch/middleware/recovery.py
#
"""
The fault boundary of the middleware chain.
"""

import logging

from termcolor import colored

from perch.http.errors import HTTPError
from perch.responses import Response

logger = logging.getLogger(__name__)


def call_protected(handler, req, res):
    """
    Call `handler` and return the exception it raised, or None if it
    returned normally.
    """
    try:
        handler(req, res)
    except Exception as error:
        return error
    return None


class Recovery:
    """
    Middleware turning exceptions raised further down the chain into
    responses instead of dropped connections.

    An :class:`perch.http.HTTPError` is answered with its own status code
    and message. Anything else is logged with its traceback and answered
    with an opaque "500 Internal server error". If the response was already
    started, the exception can only be logged.

    Place it first in the chain so that it covers every other middleware.
    """

    SERVER_ERROR_MESSAGE = "Internal server error"

    def __init__(self, log=None):
        self.log = log or logger

    def __call__(self, req, res, next):
        error = call_protected(next, req, res)
        if error is None:
            return

        if isinstance(error, HTTPError):
            self.log.info("%s %s raised %d %s", req.method, req.path, error.code, error.msg)
        else:
            self.log.error(colored("[panic] %r", 'red'), error, exc_info=error)

        if res.has_sent_headers:
            self.log.error("Response to %s %s already started with status %d, "
                           "cannot send error", req.method, req.path, res.status_code)
        elif isinstance(error, HTTPError):
            Response.send(res, error.code, error.msg)
        else:
            Response.server_error(res, self.SERVER_ERROR_MESSAGE)
