"""
Настройки логирования пайплайна запросов.

Логирование выключено, пока в ClientConfig.logging не передан LoggingConfig.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"  # одна JSON запись на строку
    TEXT = "text"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Куда и как писать события пайплайна.

    Attributes:
        level: Минимальный уровень
        format: json или text
        enable_console: Писать в stdout
        enable_file: Писать в файл с ротацией (нужен file_path)
        file_path: Путь к файлу лога
        max_bytes: Размер файла до ротации
        backup_count: Сколько старых файлов хранить
        enable_request_id: Добавлять request_id текущего запроса в каждую запись
        mask_sensitive: Маскировать токены/пароли в полях записей
        logger_name: Имя stdlib логгера (None = http_callback.<host>)
        extra_fields: Статические поля для каждой записи (service, env, ...)

    Example:
        >>> LoggingConfig.create(level="DEBUG", format="json")
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    enable_request_id: bool = True
    mask_sensitive: bool = True
    logger_name: Optional[str] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Приведение строк к enum и валидация."""
        object.__setattr__(self, 'level', _coerce(LogLevel, self.level, str.upper))
        object.__setattr__(self, 'format', _coerce(LogFormat, self.format, str.lower))

        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

    @property
    def levelno(self) -> int:
        """Числовой уровень для stdlib logging."""
        return {
            LogLevel.DEBUG: 10,
            LogLevel.INFO: 20,
            LogLevel.WARNING: 30,
            LogLevel.ERROR: 40,
            LogLevel.CRITICAL: 50,
        }[self.level]

    @classmethod
    def create(
        cls,
        level: Union[str, LogLevel] = "INFO",
        format: Union[str, LogFormat] = "text",
        extra_fields: Optional[Dict[str, Any]] = None,
        **kwargs: Any
    ) -> "LoggingConfig":
        """
        Конструктор со строковыми значениями.

        Example:
            >>> LoggingConfig.create(
            ...     level="debug",
            ...     format="json",
            ...     enable_file=True,
            ...     file_path="/tmp/http_callback.log",
            ... )
        """
        return cls(level=level, format=format, extra_fields=dict(extra_fields or {}), **kwargs)


def _coerce(enum_class, value, normalize):
    if isinstance(value, enum_class):
        return value
    return enum_class(normalize(value))
