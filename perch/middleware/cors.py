#
# perch/middleware/cors.py
#

from http import HTTPStatus

from perch.http.methods import HTTPMethod


class CORS:
    """
    Middleware adding fixed cross-origin headers to every response.

    Preflight (OPTIONS) requests are answered right here with an empty 204
    and never reach the handler.
    """

    ALLOW_HEADERS = "Content-Type, Authorization"
    ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"

    def __init__(self, origin):
        self.origin = origin

    def __call__(self, req, res, next):
        res.set({
            'Access-Control-Allow-Origin': self.origin,
            'Access-Control-Allow-Headers': self.ALLOW_HEADERS,
            'Access-Control-Allow-Methods': self.ALLOW_METHODS,
        })

        if req.method == HTTPMethod.OPTIONS:
            res.write_head(HTTPStatus.NO_CONTENT)
            return

        next(req, res)
