"""Request value object and the chainable builder returned by the client."""

import base64
import json
import shlex
import uuid
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import (
    TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Tuple, TypeVar, Union,
)
from urllib.parse import urlencode

from .config import ClientConfig, StatusRange, TimeoutConfig, _freeze_params
from .deserializers import (
    BytesDeserializer,
    JsonDeserializer,
    ResponseDeserializable,
    StringDeserializer,
)
from .utils import build_url, merge_headers, merge_params

if TYPE_CHECKING:
    from .callbacks import Callback
    from .engine import ExecutionEngine

T = TypeVar("T")


@dataclass(frozen=True)
class Request:
    """
    Immutable HTTP request.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Full URL without query string
        headers: Request headers
        params: Ordered query parameters
        data: Raw body (bytes or str)
        json_body: Body to be sent as JSON
        timeout: (connect, read) override, None = client default
        auth: (username, password) for basic auth
        request_id: Unique identifier, used as the log correlation id

    Example:
        >>> req = Request('GET', 'https://httpbin.org/get', params=(('a', '1'),))
        >>> req.full_url
        'https://httpbin.org/get?a=1'
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    params: Tuple[Tuple[str, str], ...] = ()
    data: Optional[Union[bytes, str]] = None
    json_body: Any = None
    timeout: Optional[Tuple[float, float]] = None
    auth: Optional[Tuple[str, str]] = field(default=None, repr=False)
    validator: Optional[StatusRange] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()), compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'method', self.method.upper())
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    @property
    def full_url(self) -> str:
        """URL with the query string appended."""
        if not self.params:
            return self.url
        separator = '&' if '?' in self.url else '?'
        return f"{self.url}{separator}{urlencode(self.params)}"

    def merged_with(self, config: ClientConfig) -> 'Request':
        """
        Apply client defaults: base path, base headers, base params.

        Request values take precedence on collision.
        """
        return replace(
            self,
            url=build_url(config.base_path, self.url),
            headers=MappingProxyType(merge_headers(config.base_headers, self.headers)),
            params=merge_params(config.base_params, self.params),
        )

    def curl(self) -> str:
        """
        Render the request as a cURL command (for diagnostics).

        Example:
            >>> Request('GET', 'https://httpbin.org/get').curl()
            'curl -i https://httpbin.org/get'
        """
        parts = ["curl", "-i"]
        if self.method != "GET":
            parts += ["-X", self.method]
        for name, value in self.headers.items():
            parts += ["-H", f"{name}:{value}"]
        if self.auth:
            token = base64.b64encode(f"{self.auth[0]}:{self.auth[1]}".encode()).decode()
            parts += ["-H", f"Authorization:Basic {token}"]
        if self.json_body is not None:
            parts += ["-d", json.dumps(self.json_body)]
        elif self.data is not None:
            body = self.data.decode("utf-8", "replace") if isinstance(self.data, bytes) else self.data
            parts += ["-d", body]
        parts.append(self.full_url)
        return " ".join(shlex.quote(part) for part in parts)

    def __str__(self) -> str:
        return f"--> {self.method} ({self.full_url})"


class RequestBuilder:
    """
    Chainable builder for one request.

    Builders are cheap and single-use friendly: every terminal operation
    takes a snapshot of the current state, merges client defaults and
    hands the resulting Request to the engine. The Request is returned
    for inspection only; the outcome is delivered to the callback.

    Example:
        >>> client.get("/headers").header("X-Trace", "1").response_json(callback)
    """

    def __init__(
        self,
        engine: 'ExecutionEngine',
        config: ClientConfig,
        method: str,
        path: str,
        params: Optional[Any] = None,
    ):
        self._engine = engine
        self._config = config
        self._method = method
        self._path = path
        self._headers: Dict[str, str] = {}
        self._params = _freeze_params(params)
        self._data: Optional[Union[bytes, str]] = None
        self._json: Any = None
        self._timeout: Optional[Tuple[float, float]] = None
        self._auth: Optional[Tuple[str, str]] = None
        self._validator: Optional[StatusRange] = None

    # ==================== Построение ====================

    def header(self, name: str, value: Any) -> 'RequestBuilder':
        """Set one header (replaces the previous value)."""
        self._headers[name] = str(value)
        return self

    def headers(self, headers: Mapping[str, Any]) -> 'RequestBuilder':
        """Set several headers."""
        for name, value in headers.items():
            self.header(name, value)
        return self

    def param(self, key: str, value: Any) -> 'RequestBuilder':
        """Append one query parameter."""
        self._params = self._params + ((str(key), str(value)),)
        return self

    def body(self, data: Union[bytes, str]) -> 'RequestBuilder':
        """Set raw body."""
        self._data = data
        self._json = None
        return self

    def json(self, payload: Any) -> 'RequestBuilder':
        """Set JSON body (Content-Type is set by the transport)."""
        self._json = payload
        self._data = None
        return self

    def timeout(self, timeout: Union[float, Tuple[float, float]]) -> 'RequestBuilder':
        """Override transport timeout for this request."""
        if isinstance(timeout, tuple):
            self._timeout = TimeoutConfig(*timeout).as_tuple()
        else:
            self._timeout = TimeoutConfig(connect=self._config.timeout.connect, read=timeout).as_tuple()
        return self

    def authenticate(self, username: str, password: str) -> 'RequestBuilder':
        """Use HTTP basic auth."""
        self._auth = (username, password)
        return self

    def validate(self, low: int, high: int) -> 'RequestBuilder':
        """Override the accepted status range for this request."""
        self._validator = StatusRange(low, high)
        return self

    def build(self) -> Request:
        """Build the request with client defaults applied."""
        request = Request(
            method=self._method,
            url=self._path,
            headers=dict(self._headers),
            params=self._params,
            data=self._data,
            json_body=self._json,
            timeout=self._timeout,
            auth=self._auth,
            validator=self._validator,
        )
        return request.merged_with(self._config)

    # ==================== Терминальные операции ====================

    def response(self, callback: 'Callback[bytes]') -> Request:
        """Deliver the raw body bytes."""
        return self.response_object(BytesDeserializer(), callback)

    def response_string(self, callback: 'Callback[str]', charset: Optional[str] = None) -> Request:
        """Deliver the body decoded as text."""
        return self.response_object(StringDeserializer(charset), callback)

    def response_json(self, callback: 'Callback[Any]') -> Request:
        """Deliver the body parsed into a Json document."""
        return self.response_object(JsonDeserializer(), callback)

    def response_object(
        self,
        deserializer: Union[ResponseDeserializable[T], Callable[[str], T]],
        callback: 'Callback[T]',
    ) -> Request:
        """
        Deliver the body converted by a caller-supplied deserializer.

        Args:
            deserializer: ResponseDeserializable instance or plain callable (text -> T)
            callback: Callable(request, response, result) or Handler

        Returns:
            The dispatched Request
        """
        request = self.build()
        self._engine.submit(
            request,
            deserializer,
            callback,
            config=self._config,
        )
        return request
