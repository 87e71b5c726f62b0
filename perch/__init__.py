#
# perch/__init__.py
#
# flake8: noqa
#
#   Copyright (c) 2026 The Perch Developers
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
"""
A small toolkit for JSON APIs served by the standard library's threaded
http server.

A handler is any callable taking the request and the response sink,
``handler(req, res)``; a middleware is a callable taking one more
argument, the next handler of the chain, ``mw(req, res, next)``.
Routes bind a "METHOD /path" key to a handler and the middleware wrapped
around it, and an APIServer serves a table of routes:

.. code:: python

    from perch import APIServer, PathBuilder, Route, Response
    from perch.middleware import Recovery, Logger

    def hello(req, res):
        Response.ok(res, {'hello': 'world'})

    hello_path = PathBuilder('hello')
    APIServer(':8000', [
        Route(hello_path.methods().GET, hello, [Recovery(), Logger()]),
    ]).listen_and_serve()

Structured responses (JSON, gzip, file downloads) live in
`perch.responses`; the default middleware in `perch.middleware`.
"""

from .__meta__ import (
    version as __version__,
    author as __author__,
    date as __date__,
    copyright as __copyright__,
    license as __license__,
)

from . import http
from .errors import (
    PerchError,
    ConfigurationError,
    Cancelled,
    DeadlineExceeded,
)
from .responses import (
    Response,
    Payload,
)
from .decode import (
    decode_json,
    DecodeError,
)
from .middleware_chain import (
    MiddlewareChain,
)
from .path_builder import (
    PathBuilder,
    HTTPMethods,
)
from .router import (
    Route,
    Router,
)
from .server import (
    APIServer,
)
from . import middleware

__all__ = [
    "APIServer",
    "Cancelled",
    "ConfigurationError",
    "DeadlineExceeded",
    "DecodeError",
    "HTTPMethods",
    "MiddlewareChain",
    "PathBuilder",
    "Payload",
    "PerchError",
    "Response",
    "Route",
    "Router",
    "decode_json",
]
