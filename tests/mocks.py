#
# tests/mocks.py
#
"""
Stand-ins for the http.server request handler, and fixtures building
perch requests and responses around them.
"""

import io
import http.client

import pytest
from unittest import mock

import perch


class FakeHandler:
    """
    The parts of http.server.BaseHTTPRequestHandler that perch's request
    and response objects use; everything written is kept for inspection.
    """

    request_version = 'HTTP/1.1'

    def __init__(self,
                 method='GET',
                 path='/',
                 headers=(),
                 body=b'',
                 client_address=('127.0.0.1', 52114)):
        self.command = method
        self.path = path
        self.client_address = client_address
        self.headers = http.client.HTTPMessage()
        for key, value in dict(headers).items():
            self.headers[key] = value
        if body and 'Content-Length' not in self.headers:
            self.headers['Content-Length'] = str(len(body))

        self.rfile = io.BytesIO(body)
        self.wfile = io.BytesIO()

        self.status = None
        self.sent_headers = []
        self.ended_headers = False

    def send_response(self, code, message=None):
        self.status = code

    def send_header(self, keyword, value):
        self.sent_headers.append((keyword, value))

    def end_headers(self):
        self.ended_headers = True

    def sent_header(self, name):
        """The value of the first sent header called name, or None."""
        for key, value in self.sent_headers:
            if key.lower() == name.lower():
                return value
        return None

    @property
    def body(self):
        return self.wfile.getvalue()


@pytest.fixture
def handler_factory():
    return FakeHandler


@pytest.fixture
def handler():
    return FakeHandler()


@pytest.fixture
def mock_app():
    app = mock.Mock(spec=perch.APIServer)
    app.enabled.return_value = True
    return app


@pytest.fixture
def req_factory():
    def build(method='GET', path='/', headers=(), body=b'', context=None):
        return perch.http.HTTPRequest(FakeHandler(method, path, headers, body), context)
    return build


@pytest.fixture
def req(req_factory):
    return req_factory()


@pytest.fixture
def res(handler):
    return perch.http.HTTPResponse(handler)
