"""
Система конфигурации для HTTP Callback.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
Конфиг читается один раз при dispatch запроса, поэтому замена конфига
клиента не влияет на запросы, которые уже выполняются.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .executors import CallbackExecutor
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# STATUS RANGE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class StatusRange:
    """
    Диапазон статусов, считающихся успешными (включительно).

    Examples:
        >>> StatusRange()              # 200..299
        >>> StatusRange(200, 399)      # редиректы тоже успех
    """
    low: int = 200
    high: int = 299

    def __post_init__(self):
        """Валидация."""
        if not 100 <= self.low <= self.high <= 599:
            raise ValueError(
                f"invalid status range {self.low}..{self.high} "
                f"(expected 100 <= low <= high <= 599)"
            )

    def __contains__(self, status_code: int) -> bool:
        return self.low <= status_code <= self.high

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов транспорта.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
    """
    connect: float = 5
    read: float = 30

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SECURITY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class SecurityConfig:
    """
    Конфигурация безопасности.

    Args:
        max_response_size: Максимальный размер тела ответа (байты)
        verify_ssl: Проверять SSL сертификаты
        allow_redirects: Разрешать редиректы (выполняет транспорт)

    Examples:
        >>> SecurityConfig(max_response_size=50*1024*1024)  # 50MB
        >>> SecurityConfig(verify_ssl=False)  # Для тестов
    """
    max_response_size: int = 100 * 1024 * 1024  # 100MB
    verify_ssl: bool = True
    allow_redirects: bool = True

    def __post_init__(self):
        """Валидация."""
        if self.max_response_size <= 0:
            raise ValueError("max_response_size must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# EXECUTOR CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ExecutorConfig:
    """
    Конфигурация фонового пула, выполняющего запросы.

    Args:
        max_workers: Максимум параллельных запросов
        thread_name_prefix: Префикс имён рабочих потоков
    """
    max_workers: int = 8
    thread_name_prefix: str = "http-callback"

    def __post_init__(self):
        """Валидация."""
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """Convert mapping to immutable MappingProxyType."""
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


def _freeze_params(
    params: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]]
) -> Tuple[Tuple[str, str], ...]:
    """Normalize params to an ordered tuple of (key, value) string pairs."""
    if not params:
        return ()
    items = params.items() if isinstance(params, Mapping) else params
    return tuple((str(key), str(value)) for key, value in items)


@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация HTTPCallbackClient.

    Immutable конфигурация для потокобезопасности.

    Args:
        base_path: Базовый URL, добавляется к относительным путям
        base_headers: Дефолтные заголовки
        base_params: Дефолтные query параметры (упорядоченные пары)
        callback_executor: Где выполняются callback (None = ImmediateExecutor)
        success_status: Диапазон успешных статусов
        timeout: Конфигурация таймаутов
        security: Конфигурация безопасности
        executor: Конфигурация фонового пула

    Examples:
        >>> config = ClientConfig(base_path="https://httpbin.org")
        >>> config = ClientConfig.create(
        ...     base_path="https://httpbin.org",
        ...     base_headers={"foo": "bar"},
        ...     base_params=[("key", "value")],
        ... )
    """
    base_path: Optional[str] = None
    base_headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    base_params: Tuple[Tuple[str, str], ...] = ()
    callback_executor: Optional['CallbackExecutor'] = field(default=None, compare=False)
    success_status: StatusRange = field(default_factory=StatusRange)

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    logging: Optional['LoggingConfig'] = None  # None = no logging

    def __post_init__(self):
        """Normalize base_path and freeze mutable containers."""
        if not isinstance(self.base_headers, MappingProxyType):
            object.__setattr__(self, 'base_headers', _freeze_dict(self.base_headers))
        if not isinstance(self.base_params, tuple) or any(
            not isinstance(pair, tuple) for pair in self.base_params
        ):
            object.__setattr__(self, 'base_params', _freeze_params(self.base_params))

        if self.base_path:
            normalized = self.base_path.rstrip('/')
            if normalized != self.base_path:
                object.__setattr__(self, 'base_path', normalized)

    @classmethod
    def create(
        cls,
        base_path: Optional[str] = None,
        base_headers: Optional[Dict[str, str]] = None,
        base_params: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None,
        callback_executor: Optional['CallbackExecutor'] = None,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        verify_ssl: bool = True,
        max_workers: Optional[int] = None,
        success_status: Union[Tuple[int, int], StatusRange, None] = None,
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_path: Базовый URL
            base_headers: Заголовки
            base_params: Query параметры (dict или список пар)
            callback_executor: Executor для callback
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            verify_ssl: Проверять SSL
            max_workers: Размер фонового пула
            success_status: (low, high) или StatusRange
            logging: Конфигурация логирования (None = отключить логирование)

        Returns:
            ClientConfig instance

        Examples:
            >>> config = ClientConfig.create(timeout=60)
            >>> config = ClientConfig.create(timeout=(5, 60), success_status=(200, 399))
        """
        if isinstance(timeout, TimeoutConfig):
            timeout_cfg = timeout
        elif isinstance(timeout, tuple):
            timeout_cfg = TimeoutConfig(connect=timeout[0], read=timeout[1])
        else:
            timeout_cfg = TimeoutConfig(connect=5, read=timeout)

        if success_status is None:
            status_cfg = StatusRange()
        elif isinstance(success_status, StatusRange):
            status_cfg = success_status
        else:
            status_cfg = StatusRange(*success_status)

        executor_cfg = ExecutorConfig(max_workers=max_workers) if max_workers else ExecutorConfig()

        return cls(
            base_path=base_path,
            base_headers=_freeze_dict(base_headers),
            base_params=_freeze_params(base_params),
            callback_executor=callback_executor,
            success_status=status_cfg,
            timeout=timeout_cfg,
            security=SecurityConfig(verify_ssl=verify_ssl),
            executor=executor_cfg,
            logging=logging,
            **kwargs
        )

    def with_headers(self, headers: Mapping[str, str]) -> 'ClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.base_headers)
        merged.update(headers)
        return replace(self, base_headers=_freeze_dict(merged))

    def with_params(self, params: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]) -> 'ClientConfig':
        """Создать новый конфиг с дополнительными query параметрами (в конец)."""
        return replace(self, base_params=self.base_params + _freeze_params(params))

    def with_callback_executor(self, callback_executor: 'CallbackExecutor') -> 'ClientConfig':
        """Создать новый конфиг с другим callback executor."""
        return replace(self, callback_executor=callback_executor)
