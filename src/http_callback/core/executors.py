"""
Callback execution contexts.

Any object with an Executor-style submit(fn, *args) works as a callback
executor, including concurrent.futures executors. A submit that raises
(for example RuntimeError after shutdown) is a fatal dispatch error.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Protocol


class CallbackExecutor(Protocol):
    """Minimal executor interface the engine relies on."""

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        ...


class ImmediateExecutor:
    """
    Run callbacks inline on the submitting thread.

    Used as the default: the callback runs on the worker thread that
    finished the request.
    """

    def __init__(self):
        self._shutdown = False
        self._lock = threading.Lock()

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new callbacks after shutdown")

        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._shutdown = True


class ThreadPoolCallbackExecutor(ThreadPoolExecutor):
    """
    Dedicated callback thread.

    With the default single worker, callbacks run one at a time in
    submission order, away from the network workers.
    """

    def __init__(self, max_workers: int = 1, thread_name_prefix: str = "http-callback-cb"):
        super().__init__(max_workers=max_workers, thread_name_prefix=thread_name_prefix)
