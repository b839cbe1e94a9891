"""
Tests for log formatters and filters.
"""

import json
import logging
import sys
import threading

import pytest

from http_callback.core.logging.filters import (
    ExtraFieldsFilter,
    RequestIdFilter,
    clear_request_id,
    get_request_id,
    set_request_id,
)
from http_callback.core.logging.formatters import JSONFormatter, TextFormatter, get_formatter


def make_record(msg="Request completed", **extra):
    record = logging.LogRecord(
        name="http_callback",
        level=logging.INFO,
        pathname="engine.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_format(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "http_callback"
        assert data["message"] == "Request completed"
        assert data["timestamp"].endswith("+00:00")

    def test_extra_fields_included(self):
        record = make_record(method="GET", status_code=200, duration_ms=12.5)
        data = json.loads(JSONFormatter().format(record))

        assert data["method"] == "GET"
        assert data["status_code"] == 200
        assert data["duration_ms"] == 12.5
        assert "pathname" not in data

    def test_non_serializable_extra(self):
        record = make_record(payload=object())
        data = json.loads(JSONFormatter().format(record))
        assert data["payload"].startswith("<object")

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_format(self):
        output = TextFormatter().format(make_record(method="GET", status_code=404))

        assert "[INFO] [http_callback] Request completed" in output
        assert "method=GET" in output
        assert "status_code=404" in output

    def test_no_extra(self):
        output = TextFormatter().format(make_record("plain"))
        assert output.endswith("plain")


class TestGetFormatter:
    """Tests for get_formatter."""

    def test_known(self):
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert isinstance(get_formatter("TEXT"), TextFormatter)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown format type"):
            get_formatter("xml")


class TestFilters:
    """Tests for request id and extra fields filters."""

    def teardown_method(self):
        clear_request_id()

    def test_request_id_added(self):
        set_request_id("req-1")
        record = make_record()

        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "req-1"

    def test_no_request_id_bound(self):
        record = make_record()
        RequestIdFilter().filter(record)
        assert not hasattr(record, "request_id")

    def test_explicit_request_id_kept(self):
        set_request_id("req-1")
        record = make_record(request_id="explicit")
        RequestIdFilter().filter(record)
        assert record.request_id == "explicit"

    def test_request_id_is_thread_local(self):
        set_request_id("main")
        seen = []

        thread = threading.Thread(target=lambda: seen.append(get_request_id()))
        thread.start()
        thread.join()

        assert seen == [None]
        assert get_request_id() == "main"

    def test_clear(self):
        set_request_id("req-1")
        clear_request_id()
        clear_request_id()
        assert get_request_id() is None

    def test_extra_fields(self):
        record = make_record(service="explicit")
        ExtraFieldsFilter({"service": "api", "env": "test"}).filter(record)

        assert record.service == "explicit"
        assert record.env == "test"
