"""
Форматтеры записей пайплайна.

Поля, переданные через extra= (method, url, status_code, duration_ms, ...),
попадают в вывод как есть; стандартные атрибуты LogRecord отбрасываются.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

# Атрибуты любого LogRecord; всё остальное пришло через extra=
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    'message', 'asctime', 'taskName',
}


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Поля записи, добавленные вызывающим кодом."""
    return {
        key: value for key, value in record.__dict__.items()
        if key not in _RECORD_FIELDS and not key.startswith('_')
    }


class JSONFormatter(logging.Formatter):
    """
    Одна JSON запись на строку (для сборщиков логов).

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123000+00:00", "level": "INFO",
         "logger": "http_callback.httpbin.org", "thread": "http-callback_0",
         "message": "Request completed", "status_code": 200}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
            **record_fields(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    Строка для человека: [время] [уровень] [логгер] сообщение key=value ...

    Example output:
        [2024-01-15 10:30:45] [WARNING] [http_callback] Request rejected by status status_code=404
    """

    default_time_format = '%Y-%m-%d %H:%M:%S'
    default_msec_format = None

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"[{self.formatTime(record)}] [{record.levelname}] "
            f"[{record.name}] {record.getMessage()}"
        )
        fields = record_fields(record)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


_FORMATTERS = {
    "json": JSONFormatter,
    "text": TextFormatter,
}


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Форматтер по имени формата.

    Raises:
        ValueError: Неизвестный формат
    """
    try:
        return _FORMATTERS[format_type.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown format type: {format_type}. Available: {', '.join(_FORMATTERS)}"
        ) from None
