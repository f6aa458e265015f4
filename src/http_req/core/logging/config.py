"""
Куда и в каком виде клиент пишет trace и debug сообщения.

Curl-trace идет одной INFO записью на запрос, "Request started" /
"Request completed" - DEBUG записями с полями method, url, status_code,
duration_ms.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """json - одна строка на запись (многострочный trace внутри "message")."""
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Логгер, который Client создает сам, если ему не передали logger.

    INFO показывает только trace (если trace_body / trace_headers включены),
    DEBUG добавляет жизненный цикл каждого запроса.

    Attributes:
        level: Минимальный уровень записей
        format: json / text / colored
        enable_console: Писать в stdout
        enable_file: Писать в ротируемый файл (нужен file_path)
        file_path: Путь к файлу trace
        max_bytes: Размер файла до ротации
        backup_count: Сколько старых файлов хранить
        extra_fields: Статические поля в каждой записи (service, env, ...)

    Example:
        >>> traces = LoggingConfig.create(
        ...     level="INFO",
        ...     format="json",
        ...     enable_console=False,
        ...     enable_file=True,
        ...     file_path="logs/movies-trace.log",
        ... )
        >>> client = Client(trace_body(), with_logging(traces))
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        enable_console: bool = True,
        enable_file: bool = False,
        file_path: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        extra_fields: Optional[Dict[str, Any]] = None
    ) -> "LoggingConfig":
        """
        Собрать конфиг из строк (как они приходят из HTTP_REQ_LOG_*).

        Регистр level и format не важен; неизвестное значение - ValueError.
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            enable_console=enable_console,
            enable_file=enable_file,
            file_path=file_path,
            max_bytes=max_bytes,
            backup_count=backup_count,
            extra_fields=extra_fields or {}
        )
