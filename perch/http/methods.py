#
# perch/http/methods.py
#
# flake8: noqa
#

import enum


class HTTPMethod(str, enum.Enum):
    """
    Enumerated value of HTTP methods perch knows how to route.
    Members compare equal to their plain string names.
    """
    GET     = 'GET'
    POST    = 'POST'
    PUT     = 'PUT'
    PATCH   = 'PATCH'
    DELETE  = 'DELETE'
    HEAD    = 'HEAD'
    OPTIONS = 'OPTIONS'

    def __str__(self):
        return self.value
