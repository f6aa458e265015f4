"""
Иерархия исключений HTTP Request клиента.

Классификация:
- TransportError - запрос не дошел до ответа (DNS, соединение, таймаут, редирект)
- HTTPStatusError - ответ получен, но статус не 2xx
- DecodeError - тело ответа не является валидным JSON
"""

from typing import Optional

import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPReqError(Exception):
    """Базовое исключение HTTP Request клиента."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RequestBuildError(HTTPReqError):
    """Не удалось собрать запрос (невалидный URL, схема и т.п.)."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TRANSPORT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(HTTPReqError):
    """
    Ошибка транспорта - ответа нет.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)


class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Значение таймаута
    """

    def __init__(self, message: str, url: Optional[str] = None, timeout: Optional[float] = None):
        self.timeout = timeout
        msg = message
        if timeout is not None:
            msg += f" (timeout: {timeout}s)"
        super().__init__(msg, url)


class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - DNS resolution failed
    - Connection refused
    - Connection reset
    """
    pass


class RedirectSkippedError(TransportError):
    """
    Редирект отклонен (skip_redirects=True).

    Args:
        url: URL, вернувший 3xx
        location: Куда сервер предлагал перейти
        status_code: HTTP статус редиректа
    """

    def __init__(self, url: str, location: Optional[str] = None, status_code: Optional[int] = None):
        self.location = location
        self.status_code = status_code
        msg = "Skip redirects"
        if status_code:
            msg += f": HTTP {status_code}"
        if location:
            msg += f" -> {location}"
        super().__init__(msg, url)


class TooManyRedirectsError(TransportError):
    """Превышен лимит редиректов."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RESPONSE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPStatusError(HTTPReqError):
    """
    Статус ответа вне диапазона 200-226.

    Тело ответа уже прочитано и закрыто, доступно только как текст.

    Args:
        status_code: HTTP статус
        url: URL
        body: Полный текст тела ответа
    """

    def __init__(self, status_code: int, url: str, body: str = ""):
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(f"Error making HTTP request. HTTP Status {status_code}: {body}")


class DecodeError(HTTPReqError, ValueError):
    """
    Синтаксическая ошибка JSON с контекстом.

    Args:
        offset: Байтовое смещение (с 1) после ошибочного байта
        input: Полный буфер, который не удалось разобрать
        error: Исходная ошибка json

    Examples:
        >>> err = DecodeError(6, b'{"a":}')
        >>> str(err)
        'syntax error near: `}`'
    """

    def __init__(self, offset: int, input: bytes, error: Optional[Exception] = None):
        self.offset = offset
        self.input = input
        self.error = error
        context = input[max(offset - 1, 0):].decode("utf-8", errors="replace")
        super().__init__(f"syntax error near: `{context}`")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None
) -> HTTPReqError:
    """
    Конвертировать requests.exceptions в наши исключения.

    Текст исходной ошибки сохраняется в сообщении.

    Args:
        exc: Исключение из requests
        url: URL запроса
        timeout: Таймаут запроса (для TimeoutError)

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout("timed out")
        >>> our_exc = classify_requests_exception(exc, "https://example.com", 5)
        >>> assert isinstance(our_exc, TimeoutError)
    """
    detail = str(exc)

    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError(f"Request timeout: {detail}", url, timeout)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError(f"Connection error: {detail}", url)

    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        return TooManyRedirectsError(f"Too many redirects: {detail}", url)

    elif isinstance(exc, (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
        requests.exceptions.InvalidHeader,
    )):
        return RequestBuildError(f"Invalid request: {detail}", url)

    elif isinstance(exc, requests.exceptions.RequestException):
        return TransportError(f"Request failed: {detail}", url)

    else:
        return HTTPReqError(detail)
