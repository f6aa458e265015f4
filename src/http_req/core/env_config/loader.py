"""
Configuration loader from environment variables and .env files.
"""

from typing import Optional

from ..config import RequestConfig
from ..logging.config import LoggingConfig, LogFormat, LogLevel
from .settings import HTTPReqSettings


def load_from_env(env_file: Optional[str] = None, **overrides) -> RequestConfig:
    """
    Load RequestConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (HTTP_REQ_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Path to a .env file
        **overrides: Explicit values for any HTTPReqSettings field

    Returns:
        RequestConfig instance

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(".env.staging", trace_headers=True)
    """
    settings = HTTPReqSettings(_env_file=env_file)
    if overrides:
        settings = settings.model_copy(update=overrides)

    logging_config = None
    if settings.log_level:
        logging_config = LoggingConfig(
            level=LogLevel(settings.log_level.upper()),
            format=LogFormat(settings.log_format.lower()),
            enable_console=settings.log_enable_console,
            enable_file=bool(settings.log_file_path),
            file_path=settings.log_file_path,
        )

    return RequestConfig(
        timeout=settings.timeout,
        skip_redirects=settings.skip_redirects,
        trace_body=settings.trace_body,
        trace_headers=settings.trace_headers,
        logging=logging_config,
    )
