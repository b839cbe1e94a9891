"""
Callback dispatch: two caller-facing shapes over one delivery primitive.

- Unified callable: callback(request, response, result)
- Handler: on_success(request, response, value) / on_failure(request, response, error)

Example:
    >>> def on_done(request, response, result):
    ...     value, error = result
    >>> client.get("/get").response_string(on_done)

    >>> class PrintHandler(Handler[str]):
    ...     def on_success(self, request, response, value):
    ...         print(value)
    ...     def on_failure(self, request, response, error):
    ...         print(error)
    >>> client.get("/get").response_string(PrintHandler())
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar, Union

from .exceptions import ConfigurationError, RequestError
from .response import Response
from .result import Failure, Result, Success

if TYPE_CHECKING:
    from .request import Request

T = TypeVar("T")


class Handler(ABC, Generic[T]):
    """Split callback: exactly one method fires per request."""

    @abstractmethod
    def on_success(self, request: 'Request', response: Response, value: T) -> None:
        """Called with the decoded value."""

    @abstractmethod
    def on_failure(self, request: 'Request', response: Optional[Response], error: RequestError) -> None:
        """Called with the error; response is None for transport failures."""


Callback = Union[
    Callable[['Request', Optional[Response], Result[T]], Any],
    Handler[T],
]


class Delivery(ABC):
    """Internal delivery primitive both callback shapes reduce to."""

    @abstractmethod
    def deliver(self, request: 'Request', response: Optional[Response], result: Result) -> None:
        ...


class FunctionDelivery(Delivery):
    """Unified callable: receives the Result as-is."""

    def __init__(self, callback: Callable[..., Any]):
        self.callback = callback

    def deliver(self, request, response, result):
        self.callback(request, response, result)


class HandlerDelivery(Delivery):
    """Split handler: the Result variant selects the method."""

    def __init__(self, handler: Any):
        self.handler = handler

    def deliver(self, request, response, result):
        if isinstance(result, Success):
            self.handler.on_success(request, response, result.value)
        elif isinstance(result, Failure):
            self.handler.on_failure(request, response, result.error)
        else:
            raise TypeError(f"not a Result: {result!r}")


def as_delivery(callback: Callback) -> Delivery:
    """
    Adapt a caller callback to the delivery primitive.

    Objects with on_success/on_failure are handlers even without
    subclassing Handler.

    Raises:
        ConfigurationError: callback is neither shape
    """
    if isinstance(callback, Delivery):
        return callback
    if callable(getattr(callback, "on_success", None)) and callable(getattr(callback, "on_failure", None)):
        return HandlerDelivery(callback)
    if callable(callback):
        return FunctionDelivery(callback)
    raise ConfigurationError(f"{callback!r} is neither a callable nor a Handler")
