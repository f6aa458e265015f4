"""Тесты для Client."""

import logging
import threading

import pytest
import requests
import responses

from http_req.core.client import (
    Client,
    new_client,
    FORM_CONTENT_TYPE,
    CONFIGURED_LOGGER_NAME,
)
from http_req.core.config import (
    RequestConfig,
    trace_body,
    trace_headers,
    timeout,
    skip_redirects,
    with_logging,
)
from http_req.core.exceptions import (
    ConnectionError,
    HTTPStatusError,
    RedirectSkippedError,
    RequestBuildError,
    TimeoutError,
    TransportError,
)
from http_req.core.logging import LoggingConfig


def request_body(call) -> bytes:
    body = call.request.body
    if isinstance(body, str):
        body = body.encode()
    return body


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Construction
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestClientInit:
    """Тесты инициализации."""

    def test_default_config(self):
        with Client() as client:
            assert client.config == RequestConfig()
            assert client.logger is logging.getLogger("http_req")

    def test_options_applied(self):
        with Client(timeout(5), trace_body()) as client:
            assert client.config.timeout == 5
            assert client.config.trace_body is True

    def test_options_override_config(self):
        base = RequestConfig(timeout=10, skip_redirects=True)
        with Client(timeout(3), config=base) as client:
            assert client.config.timeout == 3
            assert client.config.skip_redirects is True

    def test_new_client(self):
        client = new_client(skip_redirects(), logger=logging.getLogger("tests.client"))
        try:
            assert isinstance(client, Client)
            assert client.config.skip_redirects is True
            assert client.logger.name == "tests.client"
        finally:
            client.close()

    def test_immutable(self):
        with Client() as client:
            with pytest.raises(RuntimeError, match="immutable"):
                client.timeout = 10

    def test_logging_config_builds_owned_logger(self):
        logging_config = LoggingConfig.create(level="DEBUG", enable_console=False)
        client = Client(with_logging(logging_config))

        assert client.logger.name == CONFIGURED_LOGGER_NAME
        assert client.logger.level == logging.DEBUG

        client.close()
        client.close()

    def test_injected_logger_wins_over_logging_config(self, trace_logger):
        logging_config = LoggingConfig.create(level="DEBUG", enable_console=False)
        with Client(with_logging(logging_config), logger=trace_logger) as client:
            assert client.logger is trace_logger

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP methods
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestMethods:
    """Тесты HTTP методов."""

    @pytest.mark.parametrize("method", ["GET", "HEAD", "DELETE"])
    def test_bodyless_methods(self, client, mock_responses, base_url, method):
        """GET/HEAD/DELETE без тела и без Content-Type."""
        mock_responses.add(method, f"{base_url}/movies/1", status=200)

        response = getattr(client, method.lower())(f"{base_url}/movies/1")

        assert response.status_code == 200
        request = mock_responses.calls[0].request
        assert request.method == method
        assert "Content-Type" not in request.headers
        assert not request.body

    def test_get_returns_open_response(self, client, mock_responses, base_url):
        """Успешный ответ возвращается вызывающему."""
        mock_responses.add(responses.GET, f"{base_url}/movies", json=[{"title": "Up"}])

        response = client.get(f"{base_url}/movies")

        assert response.json() == [{"title": "Up"}]
        response.close()

    def test_post_form(self, client, mock_responses, base_url):
        """POST отправляет form-urlencoded тело с отсортированными ключами."""
        mock_responses.add(responses.POST, f"{base_url}/movies", status=201)

        response = client.post(f"{base_url}/movies", {"b": "2", "a": "1"})

        assert response.status_code == 201
        call = mock_responses.calls[0]
        assert call.request.method == "POST"
        assert call.request.headers["Content-Type"] == FORM_CONTENT_TYPE
        assert request_body(call) == b"a=1&b=2"

    def test_put_uses_put_method(self, client, mock_responses, base_url):
        """PUT действительно отправляет PUT."""
        mock_responses.add(responses.PUT, f"{base_url}/movies/1", status=204)

        response = client.put(f"{base_url}/movies/1", {"title": "Up"})

        assert response.status_code == 204
        call = mock_responses.calls[0]
        assert call.request.method == "PUT"
        assert call.request.headers["Content-Type"] == FORM_CONTENT_TYPE
        assert request_body(call) == b"title=Up"

    def test_execute_with_json(self, client, mock_responses, base_url):
        """execute() с произвольным Content-Type."""
        mock_responses.add(responses.POST, f"{base_url}/search", json={"ok": True})

        client.execute("POST", f"{base_url}/search", "application/json", '{"q":"way"}')

        call = mock_responses.calls[0]
        assert call.request.headers["Content-Type"] == "application/json"
        assert call.request.headers["Content-Length"] == "11"
        assert request_body(call) == b'{"q":"way"}'

    def test_empty_form(self, client, mock_responses, base_url):
        """Пустая форма - запрос без тела, но с Content-Type."""
        mock_responses.add(responses.POST, f"{base_url}/ping", status=200)

        client.post(f"{base_url}/ping", {})

        call = mock_responses.calls[0]
        assert call.request.headers["Content-Type"] == FORM_CONTENT_TYPE
        assert not call.request.body

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Status classification
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestStatusHandling:
    """Тесты обработки статусов."""

    @pytest.mark.parametrize("status", [200, 201, 204, 226])
    def test_success_statuses(self, client, mock_responses, base_url, status):
        mock_responses.add(responses.GET, f"{base_url}/r", status=status)
        assert client.get(f"{base_url}/r").status_code == status

    def test_404_raises_with_body(self, client, mock_responses, base_url):
        """404 -> HTTPStatusError с полным телом."""
        mock_responses.add(responses.GET, f"{base_url}/missing", body="not found", status=404)

        with pytest.raises(HTTPStatusError) as exc_info:
            client.get(f"{base_url}/missing")

        err = exc_info.value
        assert err.status_code == 404
        assert err.body == "not found"
        assert "404" in str(err)
        assert "not found" in str(err)

    @pytest.mark.parametrize("status", [227, 304, 400, 500, 503])
    def test_outside_band_raises(self, client, mock_responses, base_url, status):
        mock_responses.add(responses.GET, f"{base_url}/r", status=status, body="")
        with pytest.raises(HTTPStatusError) as exc_info:
            client.get(f"{base_url}/r")
        assert exc_info.value.status_code == status

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Redirects
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestRedirects:
    """Тесты политики редиректов."""

    def test_follows_by_default(self, client, mock_responses, base_url):
        mock_responses.add(
            responses.GET, f"{base_url}/old", status=302, headers={"Location": f"{base_url}/new"}
        )
        mock_responses.add(responses.GET, f"{base_url}/new", json={"moved": True})

        response = client.get(f"{base_url}/old")

        assert response.status_code == 200
        assert response.url == f"{base_url}/new"
        assert [r.status_code for r in response.history] == [302]

    def test_skip_redirects_raises(self, mock_responses, base_url):
        mock_responses.add(
            responses.GET, f"{base_url}/old", status=302, headers={"Location": f"{base_url}/new"}
        )

        with Client(skip_redirects()) as client:
            with pytest.raises(RedirectSkippedError) as exc_info:
                client.get(f"{base_url}/old")

        err = exc_info.value
        assert isinstance(err, TransportError)
        assert err.status_code == 302
        assert err.location == f"{base_url}/new"
        assert len(mock_responses.calls) == 1

    def test_skip_redirects_ignores_plain_3xx(self, mock_responses, base_url):
        """3xx без Location - обычный неуспешный статус."""
        mock_responses.add(responses.GET, f"{base_url}/cached", status=304)

        with Client(skip_redirects()) as client:
            with pytest.raises(HTTPStatusError):
                client.get(f"{base_url}/cached")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Transport errors
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestTransportErrors:
    """Тесты ошибок транспорта."""

    def test_timeout(self, mock_responses, base_url):
        mock_responses.add(
            responses.GET,
            f"{base_url}/slow",
            body=requests.exceptions.ReadTimeout("read timed out"),
        )

        with Client(timeout(0.5)) as client:
            with pytest.raises(TimeoutError) as exc_info:
                client.get(f"{base_url}/slow")

        assert exc_info.value.timeout == 0.5
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ReadTimeout)

    def test_connection_error(self, client, mock_responses, base_url):
        mock_responses.add(
            responses.GET,
            f"{base_url}/down",
            body=requests.exceptions.ConnectionError("Connection refused"),
        )

        with pytest.raises(ConnectionError, match="Connection refused"):
            client.get(f"{base_url}/down")

    def test_invalid_url(self, client):
        with pytest.raises(RequestBuildError):
            client.get("movies")

    def test_unsupported_scheme(self, client):
        with pytest.raises(RequestBuildError):
            client.get("ftp://api.example.com/movies")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Tracing
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _traces(caplog):
    return [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]


class TestTracing:
    """Тесты trace через инжектированный логгер."""

    def test_no_trace_by_default(self, mock_responses, base_url, trace_logger, caplog):
        mock_responses.add(responses.GET, f"{base_url}/movies", json=[])

        with Client(logger=trace_logger) as client, caplog.at_level(logging.DEBUG, "tests.trace"):
            client.get(f"{base_url}/movies")

        assert _traces(caplog) == []

    def test_trace_success(self, mock_responses, base_url, trace_logger, caplog):
        mock_responses.add(responses.GET, f"{base_url}/movies", json={"x": 1})

        with Client(trace_body(), logger=trace_logger) as client, caplog.at_level(logging.DEBUG, "tests.trace"):
            response = client.get(f"{base_url}/movies")

        traces = _traces(caplog)
        assert len(traces) == 1
        assert traces[0].startswith("\ncurl -sS -L -XGET \\\n")
        assert f'    "{base_url}/movies"\n\nHTTP/1.1 200 OK\n{{\n   "x": 1\n}}\n' in traces[0]
        assert response.json() == {"x": 1}

    def test_trace_captures_post_body(self, mock_responses, base_url, trace_logger, caplog):
        mock_responses.add(responses.POST, f"{base_url}/movies", status=201, body="created")

        with Client(trace_body(), logger=trace_logger) as client, caplog.at_level(logging.DEBUG, "tests.trace"):
            client.post(f"{base_url}/movies", {"title": "Up", "year": "2009"})

        trace = _traces(caplog)[0]
        assert "-XPOST" in trace
        assert f"    -H'Content-Type: {FORM_CONTENT_TYPE}' \\\n" in trace
        assert "    -d'title=Up&year=2009' \\\n" in trace
        assert trace.endswith("created\n")

    def test_trace_on_failure(self, mock_responses, base_url, trace_logger, caplog):
        """Trace пишется до классификации статуса."""
        mock_responses.add(responses.GET, f"{base_url}/missing", body="not found", status=404)

        with Client(trace_body(), logger=trace_logger) as client, caplog.at_level(logging.DEBUG, "tests.trace"):
            with pytest.raises(HTTPStatusError) as exc_info:
                client.get(f"{base_url}/missing")

        traces = _traces(caplog)
        assert len(traces) == 1
        assert "HTTP/1.1 404 Not Found\nnot found\n" in traces[0]
        assert exc_info.value.body == "not found"

    def test_trace_headers_only(self, mock_responses, base_url, trace_logger, caplog):
        """trace_headers без trace_body тоже включает trace."""
        mock_responses.add(
            responses.GET, f"{base_url}/movies", json=[], headers={"X-Total-Count": "0"}
        )

        with Client(trace_headers(), logger=trace_logger) as client, caplog.at_level(logging.DEBUG, "tests.trace"):
            client.get(f"{base_url}/movies")

        trace = _traces(caplog)[0]
        assert "X-Total-Count: 0\n" in trace

    def test_skip_redirects_trace_has_no_L(self, mock_responses, base_url, trace_logger, caplog):
        mock_responses.add(responses.GET, f"{base_url}/movies", json=[])

        with Client(trace_body(), skip_redirects(), logger=trace_logger) as client, \
                caplog.at_level(logging.DEBUG, "tests.trace"):
            client.get(f"{base_url}/movies")

        assert _traces(caplog)[0].startswith("\ncurl -sS -XGET")

    def test_no_trace_on_transport_error(self, mock_responses, base_url, trace_logger, caplog):
        mock_responses.add(
            responses.GET, f"{base_url}/down", body=requests.exceptions.ConnectionError("refused")
        )

        with Client(trace_body(), logger=trace_logger) as client, caplog.at_level(logging.DEBUG, "tests.trace"):
            with pytest.raises(ConnectionError):
                client.get(f"{base_url}/down")

        assert _traces(caplog) == []

    def test_debug_lifecycle_messages(self, mock_responses, base_url, trace_logger, caplog):
        mock_responses.add(responses.GET, f"{base_url}/movies", json=[])

        with Client(logger=trace_logger) as client, caplog.at_level(logging.DEBUG, "tests.trace"):
            client.get(f"{base_url}/movies")

        debug = [r for r in caplog.records if r.levelno == logging.DEBUG and r.name == "tests.trace"]
        assert [r.getMessage() for r in debug] == ["Request started", "Request completed"]
        assert debug[1].status_code == 200
        assert debug[1].method == "GET"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Sessions / threads
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestSessions:
    """Тесты сессий и потоков."""

    def test_session_reused_in_thread(self, client):
        assert client.session is client.session

    def test_session_per_thread(self):
        client = Client(skip_redirects())
        sessions = []
        lock = threading.Lock()

        def worker():
            session = client.session
            with lock:
                sessions.append(session)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(s) for s in sessions}) == 5
        assert all(s.skip_redirects for s in sessions)
        assert client._session_manager.get_active_sessions_count() == 5

        client.close()
        assert client._session_manager.get_active_sessions_count() == 0

    def test_concurrent_requests(self, mock_responses, base_url):
        mock_responses.add(responses.GET, f"{base_url}/movies", json=[])
        errors = []
        statuses = []

        with Client() as client:
            def worker():
                try:
                    statuses.append(client.get(f"{base_url}/movies").status_code)
                except Exception as e:
                    errors.append(e)

            threads = [threading.Thread(target=worker) for _ in range(10)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert errors == []
        assert statuses == [200] * 10

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Real transport (без responses)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestRealTransport:
    """Тесты через настоящий сокет: таймауты urllib3 и повторная отправка тела."""

    @pytest.mark.parametrize("method", ["post", "put"])
    def test_307_resends_form_body(self, local_server, local_url, method):
        """307 повторяет запрос с тем же телом, а не зависает до таймаута."""
        with Client(timeout(5)) as client:
            response = getattr(client, method)(f"{local_url}/old", {"a": "1"})

        assert response.status_code == 200
        assert response.text == "a=1"
        assert local_server.received == [("/old", b"a=1"), ("/new", b"a=1")]

    def test_307_trace_shows_body_once(self, local_server, local_url, trace_logger, caplog):
        """После перемотки capture содержит тело одной отправки."""
        with Client(timeout(5), trace_body(), logger=trace_logger) as client, \
                caplog.at_level(logging.DEBUG, "tests.trace"):
            client.post(f"{local_url}/old", {"a": "1", "b": "2"})

        trace = _traces(caplog)[0]
        assert "    -d'a=1&b=2' \\\n" in trace
        assert trace.endswith("HTTP/1.0 200 OK\na=1&b=2\n")

    def test_307_refused_with_skip_redirects(self, local_server, local_url):
        with Client(timeout(5), skip_redirects()) as client:
            with pytest.raises(RedirectSkippedError) as exc_info:
                client.post(f"{local_url}/old", {"a": "1"})

        assert exc_info.value.status_code == 307
        assert local_server.received == [("/old", b"a=1")]

    @pytest.mark.parametrize("seconds", [0, -1, None])
    def test_non_positive_timeout_means_no_deadline(self, local_server, local_url, seconds):
        """timeout <= 0 и None - запрос без дедлайна, а не ValueError из urllib3."""
        with Client(timeout(seconds)) as client:
            response = client.get(f"{local_url}/")

        assert response.status_code == 200
        assert response.text == "ok"
        assert client.config.timeout == seconds

    def test_positive_timeout_passed_through(self, local_url):
        with Client(timeout(2.5)) as client:
            assert client._transport_timeout() == 2.5
            assert client.get(f"{local_url}/").status_code == 200
