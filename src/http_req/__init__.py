"""HTTP Request - configurable request wrapper with curl-style tracing."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.client import Client, new_client, JSON_CONTENT_TYPE, FORM_CONTENT_TYPE
from .core.config import (
    RequestConfig,
    new_config,
    trace_body,
    trace_headers,
    timeout,
    skip_redirects,
    with_logging,
)
from .core.exceptions import (
    HTTPReqError,
    RequestBuildError,
    TransportError,
    TimeoutError,
    ConnectionError,
    RedirectSkippedError,
    TooManyRedirectsError,
    HTTPStatusError,
    DecodeError,
)
from .core.utils import is_success, encode_form
from .core.decoding import decode_json
from .core.logging import LoggingConfig, HTTPReqLogger
from .core.env_config import load_from_env

# Users can configure logging themselves using logging.getLogger('http_req')
logging.getLogger('http_req').addHandler(logging.NullHandler())

try:
    __version__ = version("http-req-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Core
    "Client",
    "new_client",
    "is_success",
    "encode_form",
    "decode_json",
    "JSON_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",

    # Config
    "RequestConfig",
    "new_config",
    "trace_body",
    "trace_headers",
    "timeout",
    "skip_redirects",
    "with_logging",
    "load_from_env",

    # Logging
    "LoggingConfig",
    "HTTPReqLogger",

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

    # Version
    "__version__",
]
