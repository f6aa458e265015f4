"""
Log filters.
"""

import logging
from typing import Any, Dict


class ExtraFieldsFilter(logging.Filter):
    """
    Filter that adds extra static fields to all log records.

    Fields already present on a record (passed via `extra=`) win.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "movies", "env": "prod"}))
        >>> logger.info("Started")  # Will include service and env
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
