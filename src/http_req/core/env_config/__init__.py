"""
Environment-based configuration.

Example:
    >>> from http_req.core.env_config import load_from_env
    >>> client = Client(config=load_from_env())
"""

from .loader import load_from_env
from .settings import HTTPReqSettings

__all__ = [
    "load_from_env",
    "HTTPReqSettings",
]
