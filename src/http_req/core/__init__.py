"""Core HTTP Request модули."""

from .config import (
    RequestConfig,
    RequestOption,
    new_config,
    trace_body,
    trace_headers,
    timeout,
    skip_redirects,
    with_logging,
)
from .exceptions import (
    HTTPReqError,
    RequestBuildError,
    TransportError,
    TimeoutError,
    ConnectionError,
    RedirectSkippedError,
    TooManyRedirectsError,
    HTTPStatusError,
    DecodeError,
    classify_requests_exception,
)
from .utils import is_success, encode_form
from .decoding import decode_json
from .tracing import CurlTracer
from .client import Client, new_client, JSON_CONTENT_TYPE, FORM_CONTENT_TYPE

__all__ = [
    # Config
    "RequestConfig",
    "RequestOption",
    "new_config",
    "trace_body",
    "trace_headers",
    "timeout",
    "skip_redirects",
    "with_logging",
    # Core
    "Client",
    "new_client",
    "CurlTracer",
    "is_success",
    "encode_form",
    "decode_json",
    "JSON_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
    # Exceptions
    "HTTPReqError",
    "RequestBuildError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "RedirectSkippedError",
    "TooManyRedirectsError",
    "HTTPStatusError",
    "DecodeError",
    "classify_requests_exception",
]
