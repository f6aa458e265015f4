"""
Pydantic settings for environment configuration.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HTTPReqSettings(BaseSettings):
    """
    Client configuration from environment variables.

    Reads from:
    1. Environment variables (HTTP_REQ_*)
    2. .env file
    3. Defaults

    Example .env file:
        HTTP_REQ_TIMEOUT=10
        HTTP_REQ_SKIP_REDIRECTS=true
        HTTP_REQ_TRACE_HEADERS=true
        HTTP_REQ_LOG_LEVEL=INFO
        HTTP_REQ_LOG_FILE_PATH=/var/log/requests.log
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_REQ_',
        env_file=None,
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # No bounds on purpose: the transport interprets the value
    timeout: Optional[float] = Field(default=30.0, description="Request timeout in seconds")
    skip_redirects: bool = False
    trace_body: bool = False
    trace_headers: bool = False

    # Logging (enabled only when log_level is set)
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    log_format: Literal["json", "text", "colored"] = "text"
    log_enable_console: bool = True
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v
