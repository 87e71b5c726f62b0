#
# perch/errors.py
#
"""
Exceptions raised by perch itself, as opposed to the http errors in
:mod:`perch.http.errors` which map directly onto response status codes.
"""


class PerchError(Exception):
    """Base class of all perch specific exceptions."""


class ConfigurationError(PerchError):
    """
    The route table is invalid (a route without a handler, a key
    registered twice).
    Raised while routes are registered, so a server never starts serving
    with a broken table.
    """


class Cancelled(PerchError):
    """The request context was cancelled."""


class DeadlineExceeded(Cancelled):
    """The request context's deadline passed."""
