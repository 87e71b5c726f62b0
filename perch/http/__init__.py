#
# perch/http/__init__.py
#
# flake8: noqa
#
"""
Sub-package dealing with the HTTP objects perch hands to handlers: the
request, the response sink, headers, methods, the request context and the
http error classes. The transport itself is :mod:`http.server`.
"""

from .errors import *
from .errors import __all__ as http_errors
from .methods import HTTPMethod
from .context import Context
from .request import HTTPRequest
from .response import HTTPResponse, Headers

from http import HTTPStatus


__all__ = [
    'Context',
    'Headers',
    'HTTPMethod',
    'HTTPRequest',
    'HTTPResponse',
    'HTTPStatus',
]

__all__.extend(http_errors)
