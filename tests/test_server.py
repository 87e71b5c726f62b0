#
# tests/test_server.py
#

import json
import threading
import http.client

import pytest

import perch
from perch import APIServer, PathBuilder, Route, Response, decode_json
from perch.errors import ConfigurationError
from perch.middleware import CORS, Recovery
from perch.server import parse_address

users = PathBuilder('users')


def list_users(req, res):
    Response.ok(res, [{'id': 1}])


def create_user(req, res):
    Response.created(res, decode_json(req))


def silent(req, res):
    pass


def crash(req, res):
    raise RuntimeError("boom")


@pytest.fixture
def routes():
    return [
        Route(users.methods().GET, list_users),
        Route(users.methods().POST, create_user, [Recovery()]),
        Route('GET /silent', silent),
        Route('GET /crash', crash),
        Route('GET /recovered', crash, [Recovery()]),
    ]


@pytest.fixture
def server(routes):
    srv = APIServer('127.0.0.1:0', routes)
    srv.create_server()
    thread = threading.Thread(target=srv.listen_and_serve, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    thread.join(5)


@pytest.fixture
def request_to(server):
    host, port = server.server_address

    def do_request(method, path, body=None, headers={}):
        conn = http.client.HTTPConnection(host, port, timeout=5)
        try:
            conn.request(method, path, body=body, headers=headers)
            response = conn.getresponse()
            return response, response.read()
        finally:
            conn.close()

    return do_request


@pytest.mark.parametrize("addr, expected", [
    ('127.0.0.1:8000', ('127.0.0.1', 8000)),
    (':8080', ('', 8080)),
    ('localhost:0', ('localhost', 0)),
    ('[::1]:9000', ('::1', 9000)),
])
def test_parse_address(addr, expected):
    assert parse_address(addr) == expected


@pytest.mark.parametrize("addr", ['8080', 'localhost:http'])
def test_parse_bad_address(addr):
    with pytest.raises(ValueError):
        parse_address(addr)


def test_addr_from_environment(monkeypatch):
    monkeypatch.setenv('PERCH_ADDR', ':9999')
    assert APIServer().addr == ':9999'
    assert APIServer('127.0.0.1:1').addr == '127.0.0.1:1'


def test_default_addr(monkeypatch):
    monkeypatch.delenv('PERCH_ADDR', raising=False)
    assert APIServer().addr == perch.server.DEFAULT_ADDR


def test_invalid_routes_fail_at_construction():
    with pytest.raises(ConfigurationError):
        APIServer(':0', [
            Route(users.methods().GET, list_users),
            Route(users.methods().GET, list_users),
        ])
    with pytest.raises(ConfigurationError):
        APIServer(':0', [Route(users.methods().GET, None)])


def test_config():
    srv = APIServer(':0', custom='value')
    assert srv['custom'] == 'value'
    assert srv.enabled('x-powered-by')
    srv.disable('x-powered-by')
    assert srv.enabled('x-powered-by') is False
    srv.enable('x-powered-by')
    assert srv['x-powered-by'] is True
    assert srv.enabled('no-such-setting') is None
    srv['other'] = 1
    assert 'other' in srv


def test_decorator_routes():
    srv = APIServer(':0')

    @srv.get('/health')
    def health(req, res):
        pass

    assert 'GET /health' in srv.router


def test_no_server_address_before_bind():
    assert APIServer(':0').server_address is None


def test_get(request_to):
    response, body = request_to('GET', '/users')
    assert response.status == 200
    assert response.getheader('Content-Type') == 'application/json'
    assert response.getheader('Server').startswith('perch/')
    assert response.getheader('X-Powered-By') == 'perch'
    assert json.loads(body) == [{'id': 1}]


def test_powered_by_disabled(server, request_to):
    server.disable('x-powered-by')
    response, _ = request_to('GET', '/users')
    assert response.getheader('X-Powered-By') is None


def test_post_json(request_to):
    response, body = request_to('POST', '/users', body=b'{"name": "ann"}',
                                headers={'Content-Type': 'application/json'})
    assert response.status == 201
    assert json.loads(body) == {'name': 'ann'}


def test_post_malformed_json_is_400(request_to):
    response, body = request_to('POST', '/users', body=b'{"name":')
    assert response.status == 400
    assert json.loads(body) == "Invalid JSON body"


def test_unknown_path(request_to):
    response, body = request_to('GET', '/nope')
    assert response.status == 404
    assert json.loads(body) == "Not found"


def test_wrong_method(request_to):
    response, _ = request_to('DELETE', '/users')
    assert response.status == 405
    assert response.getheader('Allow') == 'GET, POST'


def test_silent_handler_is_empty_200(request_to):
    response, body = request_to('GET', '/silent')
    assert response.status == 200
    assert body == b''


def test_recovered_panic(request_to):
    response, body = request_to('GET', '/recovered')
    assert response.status == 500
    assert json.loads(body) == "Internal server error"


def test_unrecovered_panic_drops_connection(request_to):
    with pytest.raises((http.client.HTTPException, ConnectionError)):
        request_to('GET', '/crash')


def test_server_keeps_serving_after_panic(request_to):
    with pytest.raises((http.client.HTTPException, ConnectionError)):
        request_to('GET', '/crash')
    response, _ = request_to('GET', '/users')
    assert response.status == 200


def test_unsupported_method_answered_by_transport(request_to):
    response, _ = request_to('TRACE', '/users')
    assert response.status == 501


@pytest.fixture
def cors_server():
    srv = APIServer('127.0.0.1:0',
                    [Route(users.methods().GET, list_users)],
                    middleware=[CORS('https://example.com')])
    srv.create_server()
    thread = threading.Thread(target=srv.listen_and_serve, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    thread.join(5)


def test_server_wide_cors_answers_preflight(cors_server):
    host, port = cors_server.server_address
    conn = http.client.HTTPConnection(host, port, timeout=5)
    try:
        conn.request('OPTIONS', '/users')
        response = conn.getresponse()
        body = response.read()
    finally:
        conn.close()

    assert response.status == 204
    assert body == b''
    assert response.getheader('Access-Control-Allow-Origin') == 'https://example.com'
