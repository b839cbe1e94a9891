"""
Pytest configuration and fixtures for http-callback-core tests.
"""

import threading

import pytest
import responses as responses_lib

from http_callback.core.client import HTTPCallbackClient
from http_callback.core.config import ClientConfig
from http_callback.core.logging.config import LoggingConfig


class CallbackRecorder:
    """
    Unified callback that records every delivery.

    Example:
        def test_get(client, recorder):
            client.get("/get").response_string(recorder)
            request, response, result = recorder.wait_one()
    """

    def __init__(self, expected: int = 1):
        self.calls = []
        self.threads = []
        self._expected = expected
        self._lock = threading.Lock()
        self._done = threading.Event()

    def __call__(self, request, response, result):
        with self._lock:
            self.calls.append((request, response, result))
            self.threads.append(threading.current_thread().name)
            if len(self.calls) >= self._expected:
                self._done.set()

    def wait(self, timeout: float = 5.0) -> bool:
        return self._done.wait(timeout)

    def wait_one(self, timeout: float = 5.0):
        assert self.wait(timeout), "callback was not invoked"
        assert len(self.calls) == 1
        return self.calls[0]


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def config(base_url):
    """Client config pointing at the test base URL."""
    return ClientConfig.create(base_path=base_url, timeout=10, max_workers=4)


@pytest.fixture
def client(config):
    """HTTPCallbackClient instance (callbacks run on worker threads)."""
    client = HTTPCallbackClient(config)
    yield client
    client.close()


@pytest.fixture
def recorder():
    """Records a single callback delivery."""
    return CallbackRecorder()


@pytest.fixture
def make_recorder():
    """Factory for recorders expecting several deliveries."""
    return CallbackRecorder


@pytest.fixture
def logging_config():
    """LoggingConfig fixture for testing."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
