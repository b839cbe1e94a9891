"""Core HTTP Callback модули."""

from .config import (
    StatusRange,
    TimeoutConfig,
    SecurityConfig,
    ExecutorConfig,
    ClientConfig,
)
from .exceptions import (
    HTTPCallbackException,
    RequestError,
    TransportError,
    TimeoutError,
    ConnectionError,
    SSLError,
    ResponseTooLargeError,
    HTTPStatusError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    DeserializationError,
    CallbackDispatchError,
    ConfigurationError,
    classify_requests_exception,
    classify_status,
)
from .response import Response
from .result import Result, Success, Failure
from .deserializers import (
    ResponseDeserializable,
    BytesDeserializer,
    StringDeserializer,
    Json,
    JsonDeserializer,
    ModelDeserializer,
    FunctionDeserializer,
)
from .callbacks import Handler, Callback
from .executors import CallbackExecutor, ImmediateExecutor, ThreadPoolCallbackExecutor
from .request import Request, RequestBuilder
from .transport import Transport, RequestsTransport
from .engine import ExecutionEngine
from .client import HTTPCallbackClient
from .env_config import ClientSettings, load_from_env

__all__ = [
    # Config
    "StatusRange",
    "TimeoutConfig",
    "SecurityConfig",
    "ExecutorConfig",
    "ClientConfig",
    "ClientSettings",
    "load_from_env",
    # Core
    "HTTPCallbackClient",
    "ExecutionEngine",
    "Request",
    "RequestBuilder",
    "Response",
    "Transport",
    "RequestsTransport",
    # Result / callbacks
    "Result",
    "Success",
    "Failure",
    "Handler",
    "Callback",
    "CallbackExecutor",
    "ImmediateExecutor",
    "ThreadPoolCallbackExecutor",
    # Deserializers
    "ResponseDeserializable",
    "BytesDeserializer",
    "StringDeserializer",
    "Json",
    "JsonDeserializer",
    "ModelDeserializer",
    "FunctionDeserializer",
    # Exceptions
    "HTTPCallbackException",
    "RequestError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "SSLError",
    "ResponseTooLargeError",
    "HTTPStatusError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "DeserializationError",
    "CallbackDispatchError",
    "ConfigurationError",
    "classify_requests_exception",
    "classify_status",
]
