# src/http_callback/core/client.py
from dataclasses import replace
from typing import Any, Optional
from urllib.parse import urlparse
import threading

from .config import ClientConfig
from .engine import ExecutionEngine
from .logging import RequestLogger
from .request import RequestBuilder
from .transport import Transport


class HTTPCallbackClient:
    """
    Asynchronous HTTP client with callback delivery.

    Every terminal operation returns at once; the outcome arrives through
    the callback on the configured callback executor.

    Features:
        - Background worker pool, one thread-local Session per worker
        - Pluggable deserializers (text, JSON, pydantic models, custom)
        - Unified callback or split Handler
        - Immutable config, swapped atomically with configure()

    Example:
        >>> config = ClientConfig.create(
        ...     base_path="https://httpbin.org",
        ...     base_headers={"foo": "bar"},
        ...     base_params=[("key", "value")],
        ... )
        >>> with HTTPCallbackClient(config) as client:
        ...     client.get("/user-agent").response_string(
        ...         lambda request, response, result: print(result.value)
        ...     )
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        **kwargs: Any
    ):
        """
        Args:
            config: ClientConfig instance
            transport: Custom transport (RequestsTransport if None)
            **kwargs: Passed to ClientConfig.create() when config is None
        """
        if config is None:
            config = ClientConfig.create(**kwargs)

        self._config = config
        self._config_lock = threading.Lock()

        request_logger: Optional[RequestLogger] = None
        if config.logging:
            logger_name = config.logging.logger_name or "http_callback"
            if not config.logging.logger_name and config.base_path:
                domain = urlparse(config.base_path).netloc
                if domain:
                    logger_name = f"http_callback.{domain}"
            request_logger = RequestLogger(config=config.logging, name=logger_name)

        self._engine = ExecutionEngine(
            executor_config=config.executor,
            transport=transport,
            request_logger=request_logger,
        )

    # ==================== Конфигурация ====================

    @property
    def config(self) -> ClientConfig:
        """Current config snapshot (read-only)."""
        with self._config_lock:
            return self._config

    def configure(self, **changes: Any) -> ClientConfig:
        """
        Replace config fields for requests built from now on.

        Requests already built or in flight keep the snapshot they were
        built with. Worker pool and logging settings are fixed at
        construction and are not affected.

        Example:
            >>> client.configure(base_headers={"X-Token": "abc"})
        """
        with self._config_lock:
            self._config = replace(self._config, **changes)
            return self._config

    # ==================== HTTP методы ====================

    def request(self, method: str, path: str, params: Optional[Any] = None) -> RequestBuilder:
        """
        Start building a request.

        Args:
            method: HTTP method
            path: Path relative to base_path, or absolute URL
            params: Query params (dict or list of pairs)
        """
        return RequestBuilder(self._engine, self.config, method, path, params)

    def get(self, path: str, params: Optional[Any] = None) -> RequestBuilder:
        return self.request("GET", path, params)

    def post(self, path: str, params: Optional[Any] = None) -> RequestBuilder:
        return self.request("POST", path, params)

    def put(self, path: str, params: Optional[Any] = None) -> RequestBuilder:
        return self.request("PUT", path, params)

    def patch(self, path: str, params: Optional[Any] = None) -> RequestBuilder:
        return self.request("PATCH", path, params)

    def delete(self, path: str, params: Optional[Any] = None) -> RequestBuilder:
        return self.request("DELETE", path, params)

    def head(self, path: str, params: Optional[Any] = None) -> RequestBuilder:
        return self.request("HEAD", path, params)

    # ==================== Жизненный цикл ====================

    @property
    def pending_count(self) -> int:
        return self._engine.pending_count

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until in-flight requests are handed to their callbacks.

        Raises:
            CallbackDispatchError: a callback executor rejected a delivery
        """
        return self._engine.wait(timeout)

    def close(self, wait: bool = True) -> None:
        """
        Shut down workers and close sessions.

        Raises:
            CallbackDispatchError: a callback executor rejected a delivery
        """
        self._engine.close(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
