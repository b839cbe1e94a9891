"""
Log filters adding request context to records.
"""

import logging
import threading
from typing import Any, Dict, Optional

# Thread-local storage: each worker thread processes one request at a time
_request_id_storage = threading.local()


def set_request_id(request_id: str) -> None:
    """Bind a request id to the current thread."""
    _request_id_storage.value = request_id


def get_request_id() -> Optional[str]:
    """Request id bound to the current thread, or None."""
    return getattr(_request_id_storage, 'value', None)


def clear_request_id() -> None:
    """Unbind the request id from the current thread."""
    if hasattr(_request_id_storage, 'value'):
        delattr(_request_id_storage, 'value')


class RequestIdFilter(logging.Filter):
    """Adds request_id to records logged while a request is bound."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = get_request_id()
        if request_id and not hasattr(record, 'request_id'):
            record.request_id = request_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service, environment, ...) to all records.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "api"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
