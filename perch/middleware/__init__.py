#
# perch/middleware/__init__.py
#
# flake8: noqa
#
"""
Implementation of the default middleware.

A middleware is any callable ``mw(req, res, next)``; the classes here are
configured on construction and then used as such callables:

.. code:: python

    Route("GET /reports", get_reports, [
        Recovery(),
        Logger(),
        CORS("https://example.com"),
        StaticBearerAuth(API_KEY),
        Timeout(5),
    ])
"""

from .auth import (
    Auth,
    StaticBearerAuth,
    HeaderAuth,
)
from .cors import CORS
from .logger import Logger
from .recovery import Recovery, call_protected
from .timeout import Timeout


__all__ = [
    'Auth',
    'CORS',
    'HeaderAuth',
    'Logger',
    'Recovery',
    'StaticBearerAuth',
    'Timeout',
    'call_protected',
]
