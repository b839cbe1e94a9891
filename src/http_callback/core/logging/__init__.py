"""
Logging system for HTTP Callback.

Example:
    >>> from http_callback.core.logging import LoggingConfig
    >>> config = ClientConfig.create(
    ...     base_path="https://httpbin.org",
    ...     logging=LoggingConfig.create(level="DEBUG", format="json"),
    ... )
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import RequestLogger
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    RequestIdFilter,
    ExtraFieldsFilter,
    set_request_id,
    get_request_id,
    clear_request_id,
)

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "RequestLogger",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    # Filters
    "RequestIdFilter",
    "ExtraFieldsFilter",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
]
