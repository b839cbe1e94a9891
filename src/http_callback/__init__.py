"""HTTP Callback - asynchronous HTTP requests with typed callback delivery."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.client import HTTPCallbackClient
from .core.config import (
    ClientConfig,
    StatusRange,
    TimeoutConfig,
    SecurityConfig,
    ExecutorConfig,
)
from .core.env_config import load_from_env
from .core.request import Request, RequestBuilder
from .core.response import Response
from .core.result import Result, Success, Failure
from .core.callbacks import Handler
from .core.executors import ImmediateExecutor, ThreadPoolCallbackExecutor
from .core.deserializers import (
    ResponseDeserializable,
    BytesDeserializer,
    StringDeserializer,
    Json,
    JsonDeserializer,
    ModelDeserializer,
    FunctionDeserializer,
)
from .core.exceptions import (
    HTTPCallbackException,
    RequestError,
    TransportError,
    TimeoutError,
    ConnectionError,
    HTTPStatusError,
    NotFoundError,
    ServerError,
    DeserializationError,
    CallbackDispatchError,
    ConfigurationError,
)
from .core.logging import LoggingConfig

# Users can configure logging themselves using logging.getLogger('http_callback')
logging.getLogger('http_callback').addHandler(logging.NullHandler())

try:
    __version__ = version("http-callback-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "HTTPCallbackClient",
    "Request",
    "RequestBuilder",
    "Response",

    # Config
    "ClientConfig",
    "StatusRange",
    "TimeoutConfig",
    "SecurityConfig",
    "ExecutorConfig",
    "LoggingConfig",
    "load_from_env",

    # Result / callbacks
    "Result",
    "Success",
    "Failure",
    "Handler",
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
    "HTTPStatusError",
    "NotFoundError",
    "ServerError",
    "DeserializationError",
    "CallbackDispatchError",
    "ConfigurationError",

    # Version
    "__version__",
]
