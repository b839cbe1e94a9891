"""
Tests for Response capture.
"""

import pytest
import requests
import responses

from http_callback.core.exceptions import ResponseTooLargeError
from http_callback.core.response import Response


def fetch(url, **kwargs):
    """Open a streamed requests.Response the way the transport does."""
    return requests.get(url, stream=True, **kwargs)


class TestResponseValue:
    """Test Response accessors."""

    def test_header_case_insensitive(self):
        response = Response(url="https://example.com", status_code=200, headers={"Content-Type": "text/plain"})
        assert response.header("content-type") == "text/plain"
        assert response.content_type == "text/plain"
        assert response.header("X-Missing", "default") == "default"

    def test_headers_immutable(self):
        response = Response(url="https://example.com", status_code=200, headers={"A": "1"})
        with pytest.raises(TypeError):
            response.headers["B"] = "2"

    def test_charset_fallback_utf8(self):
        response = Response(url="https://example.com", status_code=200, data="привет".encode("utf-8"))
        assert response.charset == "utf-8"
        assert response.text() == "привет"

    def test_declared_charset(self):
        response = Response(
            url="https://example.com",
            status_code=200,
            data="café".encode("latin-1"),
            encoding="ISO-8859-1",
        )
        assert response.text() == "café"

    def test_unknown_charset_falls_back(self):
        response = Response(url="https://example.com", status_code=200, data=b"abc", encoding="no-such-charset")
        assert response.charset == "utf-8"

    def test_explicit_charset_override(self):
        response = Response(url="https://example.com", status_code=200, data="é".encode("latin-1"))
        assert response.text("latin-1") == "é"
        with pytest.raises(UnicodeDecodeError):
            response.text()

    def test_content_length(self):
        assert Response(url="u", status_code=200, data=b"12345").content_length == 5

    def test_str(self):
        response = Response(url="https://example.com/x", status_code=404, data=b"")
        assert str(response) == "<-- 404 (https://example.com/x) length=0"


class TestFromTransport:
    """Test Response.from_transport."""

    @responses.activate
    def test_captures_everything(self):
        responses.add(
            responses.GET,
            "https://api.example.com/get",
            body=b'{"ok": true}',
            status=201,
            headers={"X-Custom": "1"},
            content_type="application/json; charset=utf-8",
        )

        response = Response.from_transport(fetch("https://api.example.com/get"))

        assert response.status_code == 201
        assert response.url == "https://api.example.com/get"
        assert response.data == b'{"ok": true}'
        assert response.header("x-custom") == "1"
        assert response.encoding == "utf-8"

    @responses.activate
    def test_no_charset_declared(self):
        responses.add(
            responses.GET,
            "https://api.example.com/get",
            body=b"{}",
            content_type="application/json",
        )

        response = Response.from_transport(fetch("https://api.example.com/get"))

        assert response.encoding is None
        assert response.charset == "utf-8"

    @responses.activate
    def test_size_limit_exceeded(self):
        responses.add(responses.GET, "https://api.example.com/big", body=b"x" * 2048)

        with pytest.raises(ResponseTooLargeError) as exc_info:
            Response.from_transport(fetch("https://api.example.com/big"), max_size=1024)

        assert exc_info.value.max_size == 1024

    @responses.activate
    def test_size_limit_not_exceeded(self):
        responses.add(responses.GET, "https://api.example.com/small", body=b"x" * 512)

        response = Response.from_transport(fetch("https://api.example.com/small"), max_size=1024)
        assert response.content_length == 512

    @responses.activate
    def test_empty_body(self):
        responses.add(responses.HEAD, "https://api.example.com/head", status=200)

        response = Response.from_transport(requests.head("https://api.example.com/head", stream=True))
        assert response.data == b""

    @responses.activate
    def test_head_content_length_not_checked_against_limit(self):
        responses.add(
            responses.HEAD,
            "https://api.example.com/file",
            headers={"Content-Length": "209715200"},
        )

        raw = requests.head("https://api.example.com/file", stream=True)
        response = Response.from_transport(raw, max_size=1024)

        assert response.status_code == 200
        assert response.header("Content-Length") == "209715200"
        assert response.data == b""

    @responses.activate
    def test_no_content_status_not_checked_against_limit(self):
        responses.add(
            responses.GET,
            "https://api.example.com/empty",
            status=204,
            headers={"Content-Length": "4096"},
        )

        response = Response.from_transport(fetch("https://api.example.com/empty"), max_size=1024)

        assert response.status_code == 204
        assert response.data == b""
