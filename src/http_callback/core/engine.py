# src/http_callback/core/engine.py
"""
Execution engine: runs one request end to end off the calling thread.

Pipeline per request (strictly sequential, on a worker thread):

    transport.send -> status validation -> deserialization -> Result
    -> delivery on the callback executor

Every submitted request is delivered exactly once. Request-level errors
only reach callers as Failure; a callback executor that rejects the
delivery is fatal and is re-raised from wait()/close().
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from typing import List, Optional, Set, Tuple

from .callbacks import Callback, Delivery, as_delivery
from .config import ClientConfig, ExecutorConfig
from .deserializers import DeserializerLike, ResponseDeserializable, as_deserializer, decode
from .exceptions import (
    CallbackDispatchError,
    HTTPCallbackException,
    TransportError,
    classify_status,
)
from .executors import ImmediateExecutor
from .logging import RequestLogger
from .logging.filters import clear_request_id, set_request_id
from .request import Request
from .response import Response
from .result import Failure, Result
from .transport import RequestsTransport, Transport
from ..utils.sanitizer import mask_headers, mask_url

# Fallback for events that must never vanish when no LoggingConfig is set
logger = logging.getLogger(__name__)


class ExecutionEngine:
    """
    Background executor for the request pipeline.

    Args:
        executor_config: Worker pool settings
        transport: Transport (RequestsTransport if None)
        request_logger: Structured logger (None = only fatal events are logged)

    Example:
        >>> engine = ExecutionEngine()
        >>> engine.submit(request, StringDeserializer(), callback, config=config)
        >>> engine.close()
    """

    def __init__(
        self,
        executor_config: Optional[ExecutorConfig] = None,
        transport: Optional[Transport] = None,
        request_logger: Optional[RequestLogger] = None,
    ):
        executor_config = executor_config or ExecutorConfig()
        self._transport = transport or RequestsTransport(pool_maxsize=executor_config.max_workers)
        self._workers = ThreadPoolExecutor(
            max_workers=executor_config.max_workers,
            thread_name_prefix=executor_config.thread_name_prefix,
        )
        self._default_callback_executor = ImmediateExecutor()
        self._logger = request_logger

        self._lock = threading.Lock()
        self._pending: Set[Future] = set()
        self._fatal_errors: List[BaseException] = []
        self._closed = False
        self._released = False

    # ==================== Dispatch ====================

    def submit(
        self,
        request: Request,
        deserializer: DeserializerLike,
        callback: Callback,
        config: ClientConfig,
    ) -> Future:
        """
        Schedule a request and return immediately.

        Args:
            request: Request with client defaults already merged
            deserializer: Deserializer (or plain callable / duck-typed object)
            callback: Callable(request, response, result) or Handler
            config: Config snapshot used for the whole execution

        Returns:
            Future of the worker task (internal bookkeeping, carries no outcome)

        Raises:
            ConfigurationError: deserializer or callback has the wrong shape
            RuntimeError: engine is closed
        """
        strategy = as_deserializer(deserializer)
        delivery = as_delivery(callback)

        with self._lock:
            if self._closed:
                raise RuntimeError("ExecutionEngine is closed")
            if self._logger:
                self._logger.debug(
                    "Request dispatched",
                    method=request.method,
                    url=mask_url(request.full_url),
                    headers=mask_headers(dict(request.headers)),
                    request_id=request.request_id,
                    deserializer=type(strategy).__name__,
                )
            future = self._workers.submit(self._execute, request, strategy, delivery, config)
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        self._release_if_idle()

    # ==================== Pipeline (worker thread) ====================

    def _execute(
        self,
        request: Request,
        deserializer: ResponseDeserializable,
        delivery: Delivery,
        config: ClientConfig,
    ) -> None:
        try:
            set_request_id(request.request_id)
            try:
                response, result = self._exchange(request, deserializer, config)
            finally:
                clear_request_id()
            self._dispatch(request, response, result, delivery, config)
        except BaseException as exc:
            with self._lock:
                self._fatal_errors.append(exc)
            raise

    def _exchange(
        self,
        request: Request,
        deserializer: ResponseDeserializable,
        config: ClientConfig,
    ) -> Tuple[Optional[Response], Result]:
        start_time = time.monotonic()
        url = mask_url(request.full_url)

        try:
            response = self._transport.send(request, config)
        except TransportError as exc:
            self._log_transport_failure(request, url, exc, start_time)
            return None, Failure(exc)
        except Exception as exc:
            error = TransportError(f"Transport failed: {exc}", request.url, cause=exc)
            self._log_transport_failure(request, url, error, start_time)
            return None, Failure(error)

        accepted = request.validator or config.success_status
        if response.status_code not in accepted:
            error = classify_status(response)
            if self._logger:
                self._logger.warning(
                    "Request rejected by status",
                    method=request.method,
                    url=url,
                    status_code=response.status_code,
                    accepted=f"{accepted.low}-{accepted.high}",
                    duration_ms=self._elapsed_ms(start_time),
                )
            return response, Failure(error)

        result = decode(deserializer, response)

        if self._logger:
            if isinstance(result, Failure):
                self._logger.warning(
                    "Response deserialization failed",
                    method=request.method,
                    url=url,
                    status_code=response.status_code,
                    deserializer=type(deserializer).__name__,
                    error=str(result.error),
                    duration_ms=self._elapsed_ms(start_time),
                )
            else:
                self._logger.info(
                    "Request completed",
                    method=request.method,
                    url=url,
                    status_code=response.status_code,
                    response_size=response.content_length,
                    duration_ms=self._elapsed_ms(start_time),
                )

        return response, result

    def _dispatch(
        self,
        request: Request,
        response: Optional[Response],
        result: Result,
        delivery: Delivery,
        config: ClientConfig,
    ) -> None:
        executor = config.callback_executor or self._default_callback_executor
        try:
            executor.submit(self._deliver, delivery, request, response, result)
        except Exception as exc:
            error = CallbackDispatchError(
                f"Callback executor rejected delivery of {request}",
                request=request,
                cause=exc,
            )
            self._critical("Callback dispatch rejected", request, error)
            raise error

    def _deliver(
        self,
        delivery: Delivery,
        request: Request,
        response: Optional[Response],
        result: Result,
    ) -> None:
        """Runs on the callback executor. Caller exceptions stay with the caller's request."""
        try:
            delivery.deliver(request, response, result)
        except Exception as exc:
            if self._logger:
                self._logger.error(
                    "Callback raised",
                    exc_info=exc,
                    method=request.method,
                    url=mask_url(request.full_url),
                    request_id=request.request_id,
                    error_type=type(exc).__name__,
                )
            else:
                logger.exception("Callback raised for %s", request)

    # ==================== Logging helpers ====================

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.monotonic() - start_time) * 1000, 2)

    def _log_transport_failure(
        self,
        request: Request,
        url: str,
        error: TransportError,
        start_time: float,
    ) -> None:
        if self._logger:
            self._logger.error(
                "Request failed",
                method=request.method,
                url=url,
                error=str(error),
                error_type=type(error).__name__,
                duration_ms=self._elapsed_ms(start_time),
            )

    def _critical(self, message: str, request: Request, error: HTTPCallbackException) -> None:
        if self._logger:
            self._logger.critical(
                message,
                exc_info=error,
                method=request.method,
                url=mask_url(request.full_url),
                request_id=request.request_id,
            )
        else:
            logger.critical("%s: %s", message, error, exc_info=error)

    # ==================== Lifecycle ====================

    @property
    def pending_count(self) -> int:
        """Requests submitted but not yet delivered."""
        with self._lock:
            return sum(1 for future in self._pending if not future.done())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every submitted request has been handed to its callback executor.

        Args:
            timeout: Seconds to wait, None = no limit

        Returns:
            True if nothing is pending anymore

        Raises:
            CallbackDispatchError: a delivery was rejected (first one; the rest are cleared)
        """
        with self._lock:
            pending = list(self._pending)
        _, not_done = wait_futures(pending, timeout=timeout)
        self._raise_fatal()
        return not not_done

    def _raise_fatal(self) -> None:
        with self._lock:
            errors, self._fatal_errors = self._fatal_errors, []
        if errors:
            raise errors[0]

    def close(self, wait: bool = True) -> None:
        """
        Stop accepting requests and release workers and connections.

        Requests accepted before close() still run to completion and are
        delivered. With wait=False the transport and the default callback
        executor are released by the last in-flight request; a rejected
        delivery among them can still be collected with wait().

        Args:
            wait: Wait for in-flight requests first

        Raises:
            CallbackDispatchError: a delivery was rejected
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

        try:
            self._workers.shutdown(wait=wait)
            self._raise_fatal()
        finally:
            self._release_if_idle()

    def _release_if_idle(self) -> None:
        """Release shared resources once closed and nothing is in flight (runs once)."""
        with self._lock:
            if not self._closed or self._pending or self._released:
                return
            self._released = True

        self._default_callback_executor.shutdown()
        self._transport.close()
        if self._logger:
            self._logger.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
