#
# tests/test_http_methods.py
#

import pytest

from perch.http import HTTPMethod


@pytest.mark.parametrize("name", [
    'GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'HEAD', 'OPTIONS',
])
def test_method_is_its_name(name):
    method = HTTPMethod[name]
    assert method == name
    assert str(method) == name
    assert "%s /x" % method == name + " /x"
