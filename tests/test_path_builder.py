#
# tests/test_path_builder.py
#

import pytest

from perch.path_builder import PathBuilder, HTTPMethods


@pytest.mark.parametrize("base, expected", [
    ('', '/'),
    ('/', '/'),
    ('users', '/users'),
    ('/users', '/users'),
    ('/users/', '/users'),
    ('api/v1', '/api/v1'),
])
def test_normalized_base(base, expected):
    assert PathBuilder(base).path == expected


@pytest.mark.parametrize("base, parts, expected", [
    ('users', (':id', ), '/users/:id'),
    ('users', ('/:id/', ), '/users/:id'),
    ('users', (':id', 'profile'), '/users/:id/profile'),
    ('', ('users', ), '/users'),
    ('/', ('/users', ), '/users'),
])
def test_append(base, parts, expected):
    assert PathBuilder(base).append(*parts).path == expected


def test_append_nothing_returns_same_path():
    users = PathBuilder('users')
    assert users.append() == users
    assert users.append('/') == users


def test_append_leaves_original_untouched():
    users = PathBuilder('users')
    users.append('admins')
    assert users.path == '/users'


def test_immutable():
    users = PathBuilder('users')
    with pytest.raises(AttributeError):
        users._base = '/other'


def test_methods():
    keys = PathBuilder('users').append(':id').methods()
    assert isinstance(keys, HTTPMethods)
    assert keys.GET == 'GET /users/:id'
    assert keys.POST == 'POST /users/:id'
    assert keys.PUT == 'PUT /users/:id'
    assert keys.PATCH == 'PATCH /users/:id'
    assert keys.DELETE == 'DELETE /users/:id'


def test_root_methods():
    assert PathBuilder().methods().GET == 'GET /'


def test_str_and_hash():
    assert str(PathBuilder('a/b')) == '/a/b'
    assert {PathBuilder('a'), PathBuilder('/a/')} == {PathBuilder('a')}
