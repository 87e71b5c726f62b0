#
# tests/test_http_errors.py
#

import pytest

from perch.http.errors import (
    HTTPError,
    HTTPErrorNotFound,
    HTTPErrorTooManyRequests,
    code_to_error,
)


def test_default_message():
    error = HTTPErrorNotFound()
    assert error.code == 404
    assert error.msg == 'Not Found'
    assert str(error) == 'Not Found'


def test_custom_message():
    error = HTTPErrorTooManyRequests("slow down")
    assert error.code == 429
    assert error.msg == "slow down"


def test_generic_error_with_code():
    error = HTTPError("teapot", code=418)
    assert error.code == 418
    assert error.msg == "teapot"


def test_unknown_code_has_empty_message():
    assert HTTPError(code=599).msg == ''


@pytest.mark.parametrize("code", sorted(code_to_error))
def test_get_from_code(code):
    cls = HTTPError.get_from_code(code)
    assert issubclass(cls, HTTPError)
    assert cls().code == code


def test_get_from_unknown_code():
    assert HTTPError.get_from_code(418) is None
