#
# perch/middleware/auth.py
#
import hmac
import logging

from perch.responses import Response

logger = logging.getLogger(__name__)


class Auth:
    """
    Authentication middleware used to validate services.

    Subclasses implement :meth:`do_authentication`. A request failing it is
    answered with "401 Invalid token" and goes no further down the chain;
    the client is never told why.
    """

    UNAUTHORIZED_MESSAGE = "Invalid token"

    def __init__(self, header='Authorization'):
        self.header = header
        self.log = logger.getChild("id=%x" % id(self))

    def __call__(self, req, res, next):
        if not self.do_authentication(req):
            self.log.debug("Rejected %s %s from %s", req.method, req.path, req.remote_addr)
            Response.unauthorized(res, self.UNAUTHORIZED_MESSAGE)
            return
        next(req, res)

    def fields(self, req):
        """The whitespace separated fields of the credential header."""
        return (req.headers.get(self.header) or '').split()

    def bearer_token(self, req):
        """
        The token of a "Bearer <token>" header (the scheme is case
        insensitive), None if the header has any other shape.
        """
        fields = self.fields(req)
        if len(fields) != 2 or fields[0].lower() != 'bearer':
            return None
        return fields[1]

    def do_authentication(self, req):
        """
        Unimplemented check to be overloaded by subclasses; returns whether
        the request may proceed.
        """
        raise NotImplementedError


class StaticBearerAuth(Auth):
    """
    Accepts requests carrying "Authorization: Bearer <expected_key>".
    """

    def __init__(self, expected_key):
        super().__init__()
        self.expected_key = expected_key

    def do_authentication(self, req):
        token = self.bearer_token(req)
        if token is None:
            return False
        return hmac.compare_digest(token.encode(), self.expected_key.encode())


class HeaderAuth(Auth):
    """
    Validates a token taken from a configurable header with a caller
    supplied predicate.

    With `require_bearer` the header must read "Bearer <token>"; otherwise
    the first whitespace separated field of the header is the token.
    """

    def __init__(self, validator, header='Authorization', require_bearer=True):
        super().__init__(header)
        self.validator = validator
        self.require_bearer = require_bearer

    def do_authentication(self, req):
        if self.require_bearer:
            token = self.bearer_token(req)
        else:
            token = next(iter(self.fields(req)), None)

        if token is None:
            return False
        return bool(self.validator(token))
