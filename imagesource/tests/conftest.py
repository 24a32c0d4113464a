"""Pytest configuration and shared fixtures for image source tests."""
import os
import tempfile
import threading

# Keep test logs out of the working tree and off the console.
os.environ.setdefault('LOG_DIR', os.path.join(tempfile.gettempdir(), 'imagesource-test-logs'))
os.environ.setdefault('ENVIRONMENT', 'test')
# The local origin server must be reached directly even behind a proxy.
for _var in ('NO_PROXY', 'no_proxy'):
    os.environ[_var] = ','.join(filter(None, [os.environ.get(_var), '127.0.0.1', 'localhost']))

import pytest
from flask import Flask, Response
from werkzeug.serving import make_server
from werkzeug.wrappers import Request

from imagesource.tests.image_fixtures import FIXTURE_IMAGE


class OriginServer:
    """Local upstream serving fixture images over real HTTP."""

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.hits = {}

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"


def _build_origin_app(server: OriginServer) -> Flask:
    app = Flask('origin')

    def _count(name):
        server.hits[name] = server.hits.get(name, 0) + 1

    @app.route('/image.jpg')
    def image():
        _count('image')
        return Response(FIXTURE_IMAGE, mimetype='image/jpeg')

    @app.route('/stream.jpg')
    def stream():
        # Generator body: no Content-Length header is sent
        _count('stream')
        chunk = 16 * 1024
        return Response(
            (FIXTURE_IMAGE[i:i + chunk] for i in range(0, len(FIXTURE_IMAGE), chunk)),
            mimetype='image/jpeg',
        )

    @app.route('/declared.webp')
    def declared():
        # Declared type differs from what the bytes look like
        _count('declared')
        return Response(FIXTURE_IMAGE, content_type='image/webp; charset=binary')

    @app.route('/untyped')
    def untyped():
        _count('untyped')
        return Response(FIXTURE_IMAGE, mimetype='application/octet-stream')

    @app.route('/missing')
    def missing():
        _count('missing')
        return Response(b'Not found', status=404)

    @app.route('/broken')
    def broken():
        _count('broken')
        return Response(b'Internal error', status=500)

    return app


@pytest.fixture(scope='session')
def origin_server():
    server = OriginServer('127.0.0.1', 0)
    http_server = make_server('127.0.0.1', 0, _build_origin_app(server), threaded=True)
    server.port = http_server.socket.getsockname()[1]

    thread = threading.Thread(target=http_server.serve_forever, daemon=True)
    thread.start()
    yield server
    http_server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def make_request():
    """Factory for inbound requests, e.g. make_request(url='http://...')."""

    def _make(url=None, method='GET', **kwargs):
        query = {'url': url} if url is not None else {}
        return Request.from_values(path='/api/image', query_string=query, method=method, **kwargs)

    return _make
