"""
Система конфигурации для HTTP Request клиента.

Конфиг immutable (frozen dataclass) для потокобезопасности: один экземпляр
может обслуживать сколько угодно параллельных запросов.

Конфиг собирается из дефолтов и списка опций, которые применяются по порядку:

    >>> config = RequestConfig.create(trace_body(), timeout(10))
    >>> config = RequestConfig.create(trace_headers(True), skip_redirects(True))
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_TIMEOUT = 30.0

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RequestConfig:
    """
    Конфигурация запросов клиента.

    Args:
        timeout: Таймаут запроса (сек). Передается транспорту как есть,
            None - без таймаута
        skip_redirects: Не следовать редиректам, 3xx превращается в ошибку
        trace_body: Логировать curl-эквивалент запроса и тело ответа
        trace_headers: То же, плюс все заголовки ответа
        logging: Конфигурация логирования (None = логгер пакета)

    Examples:
        >>> RequestConfig()
        >>> RequestConfig(timeout=5, trace_body=True)
        >>> RequestConfig.create(trace_headers(), skip_redirects())
    """
    timeout: Optional[float] = DEFAULT_TIMEOUT
    skip_redirects: bool = False
    trace_body: bool = False
    trace_headers: bool = False
    logging: Optional['LoggingConfig'] = None

    @property
    def tracing(self) -> bool:
        """Включен ли trace (любой из двух флагов)."""
        return self.trace_body or self.trace_headers

    @classmethod
    def create(cls, *options: 'RequestOption') -> 'RequestConfig':
        """
        Создать конфиг из дефолтов и опций.

        Опции применяются в порядке передачи, поздняя опция перекрывает
        раннюю для того же поля.

        Args:
            *options: Опции (trace_body, trace_headers, timeout, ...)

        Returns:
            RequestConfig instance

        Examples:
            >>> RequestConfig.create()
            >>> RequestConfig.create(timeout(5), trace_body())
        """
        return cls().with_options(*options)

    def with_options(self, *options: 'RequestOption') -> 'RequestConfig':
        """
        Создать новый конфиг с примененными опциями.

        Example:
            >>> verbose = config.with_options(trace_headers())
        """
        config = self
        for option in options:
            config = option(config)
        return config


RequestOption = Callable[[RequestConfig], RequestConfig]

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# OPTIONS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def trace_body(enabled: bool = True) -> RequestOption:
    """Включить/выключить trace запроса и тела ответа."""
    return lambda config: replace(config, trace_body=enabled)


def trace_headers(enabled: bool = True) -> RequestOption:
    """Включить/выключить trace с полными заголовками ответа."""
    return lambda config: replace(config, trace_headers=enabled)


def timeout(seconds: Optional[float]) -> RequestOption:
    """Изменить таймаут (по умолчанию 30 секунд). Без валидации."""
    return lambda config: replace(config, timeout=seconds)


def skip_redirects(enabled: bool = True) -> RequestOption:
    """Включить/выключить пропуск редиректов."""
    return lambda config: replace(config, skip_redirects=enabled)


def with_logging(logging_config: Optional['LoggingConfig']) -> RequestOption:
    """Задать конфигурацию логирования."""
    return lambda config: replace(config, logging=logging_config)


def new_config(*options: RequestOption) -> RequestConfig:
    """Shortcut для RequestConfig.create()."""
    return RequestConfig.create(*options)
