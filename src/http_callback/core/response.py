"""
Response capture.

Materializes the transport's output into an immutable value object before
any decoding happens. Deserializers only ever see full body bytes.
"""

import codecs
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import requests

from .exceptions import ResponseTooLargeError

DEFAULT_CHARSET = "utf-8"

# Content-Length on these describes the entity, not a body that will be sent
_BODYLESS_STATUSES = frozenset({204, 304})


def _expects_body(response: requests.Response) -> bool:
    method = getattr(response.request, "method", None)
    if method and method.upper() == "HEAD":
        return False
    return response.status_code >= 200 and response.status_code not in _BODYLESS_STATUSES


def _declared_charset(content_type: Optional[str]) -> Optional[str]:
    """charset parameter of Content-Type, if present."""
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.strip().lower() == "charset":
            return value.strip("\"' ") or None
    return None


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response.

    Attributes:
        url: Final URL (after redirects performed by the transport)
        status_code: HTTP status
        reason: Reason phrase
        headers: Response headers (use header() for case-insensitive lookup)
        data: Full body bytes
        encoding: Charset declared by Content-Type, if any
        elapsed: Seconds between sending and receiving headers
    """

    url: str
    status_code: int
    reason: str = ""
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    data: bytes = b""
    encoding: Optional[str] = None
    elapsed: float = 0.0

    def __post_init__(self):
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    @classmethod
    def from_transport(
        cls,
        response: requests.Response,
        max_size: Optional[int] = None,
        chunk_size: int = 8192,
    ) -> 'Response':
        """
        Capture a completed requests.Response.

        The body is read to completion. I/O errors raised while reading
        propagate as requests exceptions so the transport can classify them.

        Args:
            response: Response opened by the transport (may be streamed)
            max_size: Body size limit in bytes, None = unlimited
            chunk_size: Read chunk size

        Raises:
            ResponseTooLargeError: Body exceeds max_size
        """
        url = str(response.url)

        try:
            content_length = response.headers.get('Content-Length')
            if (
                max_size is not None
                and content_length
                and content_length.isdigit()
                and _expects_body(response)
            ):
                if int(content_length) > max_size:
                    raise ResponseTooLargeError(int(content_length), max_size, url)

            chunks = []
            size = 0
            for chunk in response.iter_content(chunk_size=chunk_size):
                if not chunk:
                    continue
                size += len(chunk)
                if max_size is not None and size > max_size:
                    raise ResponseTooLargeError(size, max_size, url)
                chunks.append(chunk)
        finally:
            response.close()

        return cls(
            url=url,
            status_code=response.status_code,
            reason=response.reason or "",
            headers=dict(response.headers),
            data=b"".join(chunks),
            encoding=_declared_charset(response.headers.get("Content-Type")),
            elapsed=response.elapsed.total_seconds() if response.elapsed else 0.0,
        )

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    @property
    def content_type(self) -> Optional[str]:
        return self.header('Content-Type')

    @property
    def content_length(self) -> int:
        return len(self.data)

    @property
    def charset(self) -> str:
        """Declared charset if Python knows it, otherwise UTF-8."""
        if self.encoding:
            try:
                return codecs.lookup(self.encoding).name
            except LookupError:
                pass
        return DEFAULT_CHARSET

    def text(self, charset: Optional[str] = None) -> str:
        """
        Decode the body.

        Raises:
            LookupError: Unknown charset
            UnicodeDecodeError: Body is not valid in the charset
        """
        return self.data.decode(charset or self.charset)

    def __str__(self) -> str:
        return f"<-- {self.status_code} ({self.url}) length={self.content_length}"
