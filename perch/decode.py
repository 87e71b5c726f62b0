#
# perch/decode.py
#
"""
Decoding of JSON request bodies.
"""

import json
import dataclasses

from perch.http.errors import HTTPErrorBadRequest


class DecodeError(HTTPErrorBadRequest):
    """
    The request body could not be decoded.
    The underlying json or type error is kept as ``__cause__``.

    Being a 400 http error, it is answered with "400 Bad Request" by the
    Recovery middleware if the handler lets it escape.
    """


def decode_json(req, into=None):
    """
    Decode the JSON body of a request.

    Args:
        req (perch.http.HTTPRequest): The request whose body is decoded.
        into (type or callable or None): Optional target. A dataclass is
            constructed from a decoded JSON object, taking only the keys
            which match its fields (unknown keys are ignored). Any other
            callable is called with the decoded value.

    Returns:
        The decoded value, or the object built by `into`.

    Raises:
        DecodeError: The body is not valid JSON (an empty body included)
            or does not fit `into`.
    """
    raw = req.body()
    try:
        value = json.loads(raw)
    except ValueError as error:
        raise DecodeError("Invalid JSON body") from error

    if into is None:
        return value

    try:
        if dataclasses.is_dataclass(into) and isinstance(into, type):
            if not isinstance(value, dict):
                raise TypeError("expected a JSON object, found %s" % type(value).__name__)
            names = {field.name for field in dataclasses.fields(into) if field.init}
            return into(**{k: v for k, v in value.items() if k in names})
        return into(value)
    except (TypeError, ValueError) as error:
        raise DecodeError("Invalid JSON body") from error
