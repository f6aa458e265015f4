"""
Pytest configuration and fixtures for http-req-core tests.
"""

import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import responses as responses_lib

from http_req.core.client import Client


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def trace_logger():
    """Dedicated logger for trace assertions (propagates to caplog)."""
    logger = logging.getLogger("tests.trace")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def client():
    """Client with default configuration."""
    client = Client()
    yield client
    client.close()


class _EchoHandler(BaseHTTPRequestHandler):
    """
    /old -> 307 на /new, остальные пути отвечают 200 с телом запроса.

    Каждое полученное тело записывается в server.received как (path, body).
    """

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def _handle(self):
        body = self._read_body()
        self.server.received.append((self.path, body))

        if self.path == "/old":
            self.send_response(307)
            self.send_header("Location", "/new")
            self.send_header("Content-Length", "0")
            self.end_headers()
            return

        payload = body or b"ok"
        self.send_response(200)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = do_POST = do_PUT = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_server(monkeypatch):
    """Настоящий HTTP сервер на 127.0.0.1 (без моков транспорта)."""
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")

    server = ThreadingHTTPServer(("127.0.0.1", 0), _EchoHandler)
    server.received = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def local_url(local_server):
    host, port = local_server.server_address
    return f"http://{host}:{port}"
