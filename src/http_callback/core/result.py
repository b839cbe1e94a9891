"""
Two-variant outcome of a request: Success(value) or Failure(error).

Example:
    >>> value, error = result          # positional access
    >>> match result:                  # exhaustive handling
    ...     case Success(value): ...
    ...     case Failure(error): ...
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar, Union

from .exceptions import RequestError

T = TypeVar("T")
U = TypeVar("U")


class _ResultMixin:
    """Shared accessors for both variants."""

    def __iter__(self) -> Iterator[Any]:
        yield self.value
        yield self.error

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)

    @property
    def is_failure(self) -> bool:
        return isinstance(self, Failure)


@dataclass(frozen=True)
class Success(_ResultMixin, Generic[T]):
    """Successful outcome carrying the decoded value."""

    value: T

    @property
    def error(self) -> None:
        return None

    def get(self) -> T:
        return self.value

    def fold(self, success: Callable[[T], U], failure: Callable[[RequestError], U]) -> U:
        return success(self.value)

    def map(self, func: Callable[[T], U]) -> 'Success[U]':
        return Success(func(self.value))


@dataclass(frozen=True)
class Failure(_ResultMixin):
    """Failed outcome carrying the RequestError."""

    error: RequestError

    def __post_init__(self):
        if self.error is None:
            raise ValueError("Failure requires an error")

    @property
    def value(self) -> None:
        return None

    def get(self):
        """Raise the wrapped error."""
        raise self.error

    def fold(self, success: Callable[[Any], U], failure: Callable[[RequestError], U]) -> U:
        return failure(self.error)

    def map(self, func: Callable[[Any], Any]) -> 'Failure':
        return self


Result = Union[Success[T], Failure]
