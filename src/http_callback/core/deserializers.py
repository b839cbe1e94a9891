"""
Deserialization strategies: Response body -> typed value.

A deserializer implements one (or both) of two entry points:

- deserialize_bytes(data) - binary content
- deserialize_text(content) - body decoded with the response charset

The engine calls exactly one of them, preferring the byte-based entry
point when both are implemented. Whatever a deserializer raises is
wrapped into DeserializationError and delivered as Failure.

Objects that do not subclass ResponseDeserializable are accepted too;
on those a plain deserialize(content) method receives the decoded text.

Example:
    >>> class HeadersDeserializer(ResponseDeserializable[dict]):
    ...     def deserialize_text(self, content: str) -> dict:
    ...         return json.loads(content)["headers"]
"""

import json
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import TypeAdapter

from .exceptions import ConfigurationError, DeserializationError
from .response import Response
from .result import Failure, Result, Success

T = TypeVar("T")


class ResponseDeserializable(Generic[T]):
    """
    Base class for caller-supplied deserializers.

    Subclasses override deserialize_bytes and/or deserialize_text.
    Instances must be stateless: one deserializer may serve many
    concurrent requests.
    """

    def deserialize_bytes(self, data: bytes) -> T:
        raise NotImplementedError

    def deserialize_text(self, content: str) -> T:
        raise NotImplementedError

    def deserialize(self, response: Response) -> T:
        """
        Convert the response body.

        Raises:
            ConfigurationError: Neither entry point is implemented
        """
        if _overrides(self, "deserialize_bytes"):
            return self.deserialize_bytes(response.data)
        if _overrides(self, "deserialize_text"):
            return self.deserialize_text(response.text())
        raise ConfigurationError(
            f"{type(self).__name__} implements neither deserialize_bytes nor deserialize_text"
        )


def _overrides(deserializer: ResponseDeserializable, name: str) -> bool:
    return getattr(type(deserializer), name) is not getattr(ResponseDeserializable, name)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BUILT-IN
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class BytesDeserializer(ResponseDeserializable[bytes]):
    """Raw body bytes."""

    def deserialize_bytes(self, data: bytes) -> bytes:
        return data


class StringDeserializer(ResponseDeserializable[str]):
    """
    Body decoded as text.

    Args:
        charset: Charset to force, None = declared charset or UTF-8
    """

    def __init__(self, charset: Optional[str] = None):
        self.charset = charset

    def deserialize(self, response: Response) -> str:
        return response.text(self.charset)


class Json:
    """
    Generic JSON document.

    Args:
        content: JSON text

    Raises:
        json.JSONDecodeError: content is not well-formed JSON

    Example:
        >>> doc = Json('{"origin": "127.0.0.1"}')
        >>> doc.obj()["origin"]
        '127.0.0.1'
    """

    def __init__(self, content: str):
        self.content = content
        self.value = json.loads(content)

    def obj(self) -> Dict[str, Any]:
        """Document as an object; TypeError if the root is not an object."""
        if not isinstance(self.value, dict):
            raise TypeError(f"JSON root is {type(self.value).__name__}, not an object")
        return self.value

    def array(self) -> List[Any]:
        """Document as an array; TypeError if the root is not an array."""
        if not isinstance(self.value, list):
            raise TypeError(f"JSON root is {type(self.value).__name__}, not an array")
        return self.value

    def dumps(self, **kwargs: Any) -> str:
        return json.dumps(self.value, **kwargs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Json):
            return self.value == other.value
        return NotImplemented

    def __repr__(self) -> str:
        return f"Json({self.content!r})"


class JsonDeserializer(ResponseDeserializable[Json]):
    """Body parsed into a Json document."""

    def deserialize_text(self, content: str) -> Json:
        return Json(content)


class ModelDeserializer(ResponseDeserializable[T]):
    """
    Body validated into a typed object with pydantic.

    Works for BaseModel subclasses, dataclasses, TypedDicts and plain
    typing constructs (anything TypeAdapter accepts).

    Example:
        >>> class HeadersModel(BaseModel):
        ...     headers: Dict[str, str] = {}
        >>> client.get("/headers").response_object(ModelDeserializer(HeadersModel), cb)
    """

    def __init__(self, model: Any):
        self.model = model
        self._adapter = TypeAdapter(model)

    def deserialize_bytes(self, data: bytes) -> T:
        return self._adapter.validate_json(data)


class FunctionDeserializer(ResponseDeserializable[T]):
    """
    Adapt a plain callable.

    Args:
        func: Callable receiving body text (or bytes when binary=True)
        binary: Pass raw bytes instead of text
    """

    def __init__(self, func: Callable[[Any], T], binary: bool = False):
        self.func = func
        self.binary = binary

    def deserialize(self, response: Response) -> T:
        if self.binary:
            return self.func(response.data)
        return self.func(response.text())


_DUCK_ENTRY_POINTS = ("deserialize_bytes", "deserialize_text", "deserialize")


class _DuckDeserializer(ResponseDeserializable[T]):
    """
    Wrap an object exposing the entry points without subclassing.

    A bare deserialize(content) method is the text entry point.
    """

    def __init__(self, target: Any):
        self.target = target

    def deserialize(self, response: Response) -> T:
        if callable(getattr(self.target, "deserialize_bytes", None)):
            return self.target.deserialize_bytes(response.data)
        if callable(getattr(self.target, "deserialize_text", None)):
            return self.target.deserialize_text(response.text())
        return self.target.deserialize(response.text())


DeserializerLike = Union[ResponseDeserializable[T], Callable[[str], T], Any]


def as_deserializer(deserializer: DeserializerLike) -> ResponseDeserializable:
    """
    Normalize what callers pass to response_object().

    Raises:
        ConfigurationError: Object is not usable as a deserializer
    """
    if isinstance(deserializer, ResponseDeserializable):
        return deserializer
    if any(callable(getattr(deserializer, name, None)) for name in _DUCK_ENTRY_POINTS):
        return _DuckDeserializer(deserializer)
    if callable(deserializer):
        return FunctionDeserializer(deserializer)
    raise ConfigurationError(f"{deserializer!r} is not a deserializer")


def decode(deserializer: ResponseDeserializable[T], response: Response) -> Result[T]:
    """
    Run a deserializer and wrap the outcome.

    Never raises: decoder exceptions become Failure(DeserializationError)
    with the response attached and the original exception as cause.
    """
    try:
        return Success(deserializer.deserialize(response))
    except DeserializationError as exc:
        if exc.response is None:
            exc.response = response
        return Failure(exc)
    except Exception as exc:
        return Failure(DeserializationError(
            f"{type(deserializer).__name__} failed: {exc}",
            cause=exc,
            response=response,
        ))
