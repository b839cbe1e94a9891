"""
Tests for ExecutionEngine: delivery guarantees, fatal dispatch errors, lifecycle.
"""

import threading

import pytest
import responses

from http_callback.core.config import ClientConfig, ExecutorConfig, StatusRange
from http_callback.core.deserializers import StringDeserializer
from http_callback.core.engine import ExecutionEngine
from http_callback.core.exceptions import CallbackDispatchError, ConfigurationError, TransportError
from http_callback.core.executors import ImmediateExecutor
from http_callback.core.request import Request
from http_callback.core.response import Response
from http_callback.core.result import Success
from http_callback.core.transport import Transport


class StubTransport(Transport):
    """Returns a fixed response, or raises a fixed exception."""

    def __init__(self, response=None, exception=None, gate=None):
        self.response = response
        self.exception = exception
        self.gate = gate
        self.closed = False
        self.calls = 0

    def send(self, request, config):
        self.calls += 1
        if self.gate is not None:
            self.gate.wait(5)
        if self.exception is not None:
            raise self.exception
        return self.response

    def close(self):
        self.closed = True


class RejectingExecutor:
    """Callback executor that refuses every task."""

    def submit(self, fn, *args, **kwargs):
        raise RuntimeError("queue full")


@pytest.fixture
def ok_response():
    return Response(url="https://api.example.com/get", status_code=200, data=b"ok")


@pytest.fixture
def request_():
    return Request("GET", "https://api.example.com/get")


class TestDelivery:
    """Each submitted request is delivered exactly once."""

    def test_success(self, request_, ok_response, recorder):
        engine = ExecutionEngine(transport=StubTransport(response=ok_response))
        engine.submit(request_, StringDeserializer(), recorder, config=ClientConfig())
        engine.wait(5)

        request, response, result = recorder.wait_one()
        assert request is request_
        assert response is ok_response
        assert result == Success("ok")
        engine.close()

    def test_unexpected_transport_exception_wrapped(self, request_, recorder):
        engine = ExecutionEngine(transport=StubTransport(exception=OSError("socket closed")))
        engine.submit(request_, StringDeserializer(), recorder, config=ClientConfig())

        _, response, result = recorder.wait_one()
        assert response is None
        assert isinstance(result.error, TransportError)
        assert isinstance(result.error.cause, OSError)
        engine.close()

    def test_status_outside_range(self, request_, recorder):
        response = Response(url=request_.url, status_code=302, data=b"")
        engine = ExecutionEngine(transport=StubTransport(response=response))
        engine.submit(request_, StringDeserializer(), recorder, config=ClientConfig())

        _, delivered, result = recorder.wait_one()
        assert delivered is response
        assert result.error.status_code == 302
        engine.close()

    def test_configured_status_range(self, request_, recorder):
        response = Response(url=request_.url, status_code=302, data=b"moved")
        engine = ExecutionEngine(transport=StubTransport(response=response))
        config = ClientConfig.create(success_status=(200, 399))
        engine.submit(request_, StringDeserializer(), recorder, config=config)

        _, _, result = recorder.wait_one()
        assert result == Success("moved")
        engine.close()

    def test_request_validator_overrides_config(self, recorder):
        response = Response(url="https://api.example.com/404", status_code=404, data=b"missing")
        engine = ExecutionEngine(transport=StubTransport(response=response))
        request = Request("GET", "https://api.example.com/404", validator=StatusRange(200, 499))
        engine.submit(request, StringDeserializer(), recorder, config=ClientConfig())

        _, _, result = recorder.wait_one()
        assert result == Success("missing")
        engine.close()

    def test_callback_exception_does_not_kill_engine(self, request_, ok_response, make_recorder):
        engine = ExecutionEngine(transport=StubTransport(response=ok_response))

        def broken(request, response, result):
            raise ValueError("caller bug")

        engine.submit(request_, StringDeserializer(), broken, config=ClientConfig())
        assert engine.wait(5)

        recorder = make_recorder()
        engine.submit(request_, StringDeserializer(), recorder, config=ClientConfig())
        _, _, result = recorder.wait_one()
        assert result == Success("ok")
        engine.close()

    def test_custom_callback_executor(self, request_, ok_response, recorder):
        executor = ImmediateExecutor()
        engine = ExecutionEngine(
            executor_config=ExecutorConfig(thread_name_prefix="engine-test"),
            transport=StubTransport(response=ok_response),
        )
        engine.submit(request_, StringDeserializer(), recorder, config=ClientConfig(callback_executor=executor))

        recorder.wait_one()
        assert recorder.threads[0].startswith("engine-test")
        engine.close()


class TestFatalDispatch:
    """A rejecting callback executor is fatal and surfaces from wait()/close()."""

    def test_wait_raises(self, request_, ok_response):
        engine = ExecutionEngine(transport=StubTransport(response=ok_response))
        config = ClientConfig(callback_executor=RejectingExecutor())
        engine.submit(request_, StringDeserializer(), print, config=config)

        with pytest.raises(CallbackDispatchError) as exc_info:
            engine.wait(5)

        assert exc_info.value.request is request_
        assert isinstance(exc_info.value.cause, RuntimeError)
        engine.close()

    def test_close_raises(self, request_, ok_response):
        transport = StubTransport(response=ok_response)
        engine = ExecutionEngine(transport=transport)
        config = ClientConfig(callback_executor=RejectingExecutor())
        engine.submit(request_, StringDeserializer(), print, config=config)

        with pytest.raises(CallbackDispatchError):
            engine.close()

        assert transport.closed

    def test_error_reported_once(self, request_, ok_response):
        engine = ExecutionEngine(transport=StubTransport(response=ok_response))
        engine.submit(request_, StringDeserializer(), print, config=ClientConfig(callback_executor=RejectingExecutor()))

        with pytest.raises(CallbackDispatchError):
            engine.wait(5)
        assert engine.wait(5) is True
        engine.close()


class TestLifecycle:
    """Test pending tracking, wait and close."""

    def test_pending_count(self, request_, ok_response):
        gate = threading.Event()
        engine = ExecutionEngine(transport=StubTransport(response=ok_response, gate=gate))
        engine.submit(request_, StringDeserializer(), print, config=ClientConfig())

        assert engine.pending_count == 1
        assert engine.wait(0.05) is False

        gate.set()
        assert engine.wait(5) is True
        assert engine.pending_count == 0
        engine.close()

    def test_submit_after_close(self, request_, ok_response):
        engine = ExecutionEngine(transport=StubTransport(response=ok_response))
        engine.close()

        with pytest.raises(RuntimeError):
            engine.submit(request_, StringDeserializer(), print, config=ClientConfig())

    def test_close_idempotent(self, ok_response):
        transport = StubTransport(response=ok_response)
        with ExecutionEngine(transport=transport) as engine:
            pass
        engine.close()
        assert transport.closed

    def test_close_waits_for_in_flight(self, request_, ok_response, recorder):
        engine = ExecutionEngine(transport=StubTransport(response=ok_response))
        engine.submit(request_, StringDeserializer(), recorder, config=ClientConfig())
        engine.close()

        assert len(recorder.calls) == 1

    def test_close_without_wait_still_delivers_in_flight(self, request_, ok_response, recorder):
        gate = threading.Event()
        transport = StubTransport(response=ok_response, gate=gate)
        engine = ExecutionEngine(transport=transport)
        engine.submit(request_, StringDeserializer(), recorder, config=ClientConfig())

        engine.close(wait=False)
        assert not transport.closed

        gate.set()
        _, response, result = recorder.wait_one()
        assert response is ok_response
        assert result == Success("ok")
        assert engine.wait(5) is True

    def test_close_without_wait_keeps_rejections_for_wait(self, request_, ok_response):
        gate = threading.Event()
        engine = ExecutionEngine(transport=StubTransport(response=ok_response, gate=gate))
        config = ClientConfig(callback_executor=RejectingExecutor())
        engine.submit(request_, StringDeserializer(), print, config=config)

        engine.close(wait=False)
        gate.set()

        with pytest.raises(CallbackDispatchError):
            engine.wait(5)

    def test_invalid_callback_rejected_synchronously(self, request_, ok_response):
        transport = StubTransport(response=ok_response)
        engine = ExecutionEngine(transport=transport)
        with pytest.raises(ConfigurationError):
            engine.submit(request_, StringDeserializer(), "not a callback", config=ClientConfig())
        engine.close()
        assert transport.calls == 0


class TestWithRequestsTransport:
    """Engine with the default transport."""

    @responses.activate
    def test_default_transport(self, recorder):
        responses.add(responses.GET, "https://api.example.com/get", body="hello")

        with ExecutionEngine() as engine:
            engine.submit(Request("GET", "https://api.example.com/get"), StringDeserializer(), recorder, config=ClientConfig())
            engine.wait(5)

        _, response, result = recorder.wait_one()
        assert response.status_code == 200
        assert result.value == "hello"
