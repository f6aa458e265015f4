# src/http_req/core/client.py
import io
import logging
import time
from typing import Optional, Union

import requests

from .config import RequestConfig, RequestOption
from .exceptions import HTTPStatusError, classify_requests_exception
from .logging import HTTPReqLogger, DEFAULT_LOGGER_NAME
from .session_manager import ThreadSafeSessionManager, TransportSession
from .tee import TeeReader
from .tracing import CurlTracer
from .utils import FormValues, encode_form, is_success

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Loggers built from config.logging stop propagation; keep them off the package logger
CONFIGURED_LOGGER_NAME = f"{DEFAULT_LOGGER_NAME}.client"


class Client:
    """
    HTTP клиент с конфигурируемым таймаутом, политикой редиректов и trace.

    Features:
        - Immutable конфигурация, один клиент безопасно используется из многих потоков
        - Thread-safe: каждый поток получает собственную сессию
        - Curl-trace запроса и ответа через инжектируемый логгер
        - Статус вне 200-226 превращается в HTTPStatusError с телом ответа

    Example:
        >>> with Client(trace_headers(), timeout(10)) as client:
        ...     response = client.get("https://api.example.com/movies")
        ...     movies = decode_json(response, List[Movie])
    """

    def __init__(
        self,
        *options: RequestOption,
        config: Optional[RequestConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize client.

        Args:
            *options: Options applied on top of config (or the defaults)
            config: RequestConfig instance
            logger: Sink for traces and debug messages. Defaults to a logger
                built from config.logging, or the "http_req" logger.
        """
        config = (config or RequestConfig()).with_options(*options)

        owned_logger: Optional[HTTPReqLogger] = None
        if logger is None:
            if config.logging is not None:
                owned_logger = HTTPReqLogger(config.logging, name=CONFIGURED_LOGGER_NAME)
                logger = owned_logger.logger
            else:
                logger = logging.getLogger(DEFAULT_LOGGER_NAME)

        object.__setattr__(self, '_config', config)
        object.__setattr__(self, '_logger', logger)
        object.__setattr__(self, '_owned_logger', owned_logger)
        object.__setattr__(self, '_tracer', CurlTracer(config, logger))
        object.__setattr__(
            self,
            '_session_manager',
            ThreadSafeSessionManager(session_factory=self._create_session)
        )
        object.__setattr__(self, '_initialized', True)

    def __setattr__(self, name, value):
        """Запретить изменение после init (immutability)."""
        if hasattr(self, '_initialized'):
            raise RuntimeError(
                f"Cannot modify '{name}' - Client is immutable. "
                f"Create new instance instead."
            )
        object.__setattr__(self, name, value)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _create_session(self) -> requests.Session:
        return TransportSession(skip_redirects=self._config.skip_redirects)

    def _transport_timeout(self) -> Optional[float]:
        """Таймаут для requests: ноль и отрицательные значения = без дедлайна."""
        timeout = self._config.timeout
        if timeout is not None and timeout <= 0:
            return None
        return timeout

    def close(self):
        """
        Закрывает все сессии (из всех потоков) и логгер, созданный клиентом.

        Безопасно вызывать повторно.
        """
        self._session_manager.close_all()
        if self._owned_logger is not None:
            self._owned_logger.close()

    # ==================== HTTP методы ====================

    def get(self, url: str) -> requests.Response:
        """Выполняет GET запрос."""
        return self.execute("GET", url)

    def head(self, url: str) -> requests.Response:
        """Выполняет HEAD запрос."""
        return self.execute("HEAD", url)

    def delete(self, url: str) -> requests.Response:
        """Выполняет DELETE запрос."""
        return self.execute("DELETE", url)

    def post(self, url: str, values: FormValues) -> requests.Response:
        """Выполняет POST запрос с form-urlencoded телом."""
        return self.execute("POST", url, FORM_CONTENT_TYPE, encode_form(values))

    def put(self, url: str, values: FormValues) -> requests.Response:
        """Выполняет PUT запрос с form-urlencoded телом."""
        return self.execute("PUT", url, FORM_CONTENT_TYPE, encode_form(values))

    def execute(
        self,
        method: str,
        url: str,
        content_type: str = "",
        body: Union[str, bytes, None] = None,
    ) -> requests.Response:
        """
        Send one request and classify the outcome.

        Args:
            method: HTTP method
            url: Absolute URL
            content_type: Content-Type header value ("" = not set)
            body: Request body, sent through a capturing reader when tracing

        Returns:
            Response with status 200-226. The caller owns it and must close it.

        Raises:
            TransportError: DNS/connection failure, timeout, refused redirect
            RequestBuildError: URL or headers could not be prepared
            HTTPStatusError: Any other status; carries the full body text
        """
        if isinstance(body, str):
            body = body.encode("utf-8")

        data = None
        if body:
            data = TeeReader(io.BytesIO(body), length=len(body))

        headers = {}
        if content_type:
            headers["Content-Type"] = content_type

        session = self.session
        try:
            prepared = session.prepare_request(
                requests.Request(method=method, url=url, headers=headers, data=data)
            )
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, url) from e

        self._logger.debug(
            "Request started",
            extra={"method": method, "url": url, "timeout": self._config.timeout}
        )
        start_time = time.time()

        # Proxies and CA bundle from the environment, as Session.request() does
        settings = session.merge_environment_settings(prepared.url, {}, None, None, None)

        try:
            response = session.send(prepared, timeout=self._transport_timeout(), **settings)
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, url, self._config.timeout) from e

        # The capture only fills while the transport reads the body
        if self._config.tracing:
            self._tracer.trace(prepared, response, data.captured if data is not None else b"")

        self._logger.debug(
            "Request completed",
            extra={
                "method": method,
                "url": url,
                "status_code": response.status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
        )

        if is_success(response.status_code):
            return response

        try:
            text = response.text
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, url) from e
        finally:
            response.close()

        raise HTTPStatusError(response.status_code, url, text)

    # ==================== Свойства ====================

    @property
    def session(self) -> requests.Session:
        """Сессия текущего потока."""
        return self._session_manager.get_session()

    @property
    def config(self) -> RequestConfig:
        return self._config

    @property
    def logger(self) -> logging.Logger:
        return self._logger


def new_client(*options: RequestOption, **kwargs) -> Client:
    """
    Create a client from options.

    Example:
        >>> client = new_client(trace_body(), skip_redirects())
    """
    return Client(*options, **kwargs)
