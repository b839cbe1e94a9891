"""
Logger for the request pipeline.

Wraps a stdlib logger: keyword arguments become record fields and are
masked for sensitive values before they reach any handler.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

from .config import LoggingConfig
from .filters import ExtraFieldsFilter, RequestIdFilter
from .formatters import get_formatter
from ...utils.sanitizer import mask_sensitive_data


def _create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: List[logging.Filter],
) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters:
        handler.addFilter(f)
    return handler


def _create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int,
    backup_count: int,
    filters: List[logging.Filter],
) -> RotatingFileHandler:
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters:
        handler.addFilter(f)
    return handler


class RequestLogger:
    """
    Structured logger used by the execution engine.

    Example:
        >>> logger = RequestLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request completed", method="GET", status_code=200)
        >>> logger.close()
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "http_callback"):
        """
        Args:
            config: Logging configuration (defaults if None)
            name: stdlib logger name
        """
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = self.config.levelno
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters: List[logging.Filter] = []
        if self.config.enable_request_id:
            filters.append(RequestIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(_create_console_handler(level, formatter, filters))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(_create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters,
            ))

    def _log(self, level: int, message: str, exc_info: Any = None, **kwargs: Any) -> None:
        extra = mask_sensitive_data(kwargs) if self.config.mask_sensitive else kwargs
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: Any = None, **kwargs: Any) -> None:
        """
        Log error message.

        Example:
            >>> logger.error("Transport failed", error_type="TimeoutError")
        """
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def critical(self, message: str, exc_info: Any = None, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, exc_info=exc_info, **kwargs)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.

        Example:
            >>> with RequestLogger(config) as logger:
            ...     logger.info("Processing...")
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
