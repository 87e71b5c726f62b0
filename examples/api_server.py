#
# examples/api_server.py
#
"""
A small user registry showing routes, middleware and structured responses.

Run with:

    PERCH_ADDR=127.0.0.1:8000 API_KEY=secret python examples/api_server.py

then try:

    curl localhost:8000/users
    curl -H 'Authorization: Bearer secret' -d '{"name": "ann"}' localhost:8000/users
"""

import os
import logging
import threading
from dataclasses import dataclass, asdict

from perch import APIServer, PathBuilder, Route, Response, decode_json
from perch.middleware import CORS, Logger, Recovery, StaticBearerAuth, Timeout


@dataclass
class User:
    name: str
    email: str = ''


users = {}
users_lock = threading.Lock()


def list_users(req, res):
    with users_lock:
        Response.ok(res, [asdict(user) for user in users.values()])


def create_user(req, res):
    user = decode_json(req, User)
    with users_lock:
        users[user.name] = user
    Response.created(res, asdict(user))


def export_users(req, res):
    with users_lock:
        Response.gzip(res, 200, *(asdict(user) for user in users.values()))


def main():
    logging.basicConfig(level=logging.INFO)

    common = [Recovery(), Logger(), CORS('*'), Timeout(10)]
    protected = common + [StaticBearerAuth(os.getenv('API_KEY', 'secret'))]

    users_path = PathBuilder('users')
    export_path = users_path.append('export')

    server = APIServer(routes=[
        Route(users_path.methods().GET, list_users, common),
        Route(users_path.methods().POST, create_user, protected),
        Route(export_path.methods().GET, export_users, protected),
    ])
    server.listen_and_serve()


if __name__ == '__main__':
    main()
