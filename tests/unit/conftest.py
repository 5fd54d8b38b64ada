"""
Shared fixtures for provider unit tests.

The FakeTransport stands in for the HTTP layer: each test scripts a
responder that returns a TransportResponse, raises, or never answers.
"""

import inspect
from collections.abc import Callable
from typing import Any

import pytest

from jsonrpc_http_provider import ProviderMetrics
from jsonrpc_http_provider.transport import TransportRequest, TransportResponse

BLOCK_NUMBER_BODY = '{"jsonrpc":"2.0","id":1,"result":"0x10"}'


class FakeTransport:
    """Scripted TransportProtocol double recording every request."""

    def __init__(self, responder: Callable[[TransportRequest], Any] | None = None):
        self.requests: list[TransportRequest] = []
        self.responder = responder or (
            lambda request: TransportResponse(200, BLOCK_NUMBER_BODY)
        )
        self.closed = False

    async def send(self, request: TransportRequest) -> TransportResponse:
        self.requests.append(request)
        outcome = self.responder(request)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Wall clock the test moves by hand."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def transport():
    """FakeTransport answering every request with a block number."""
    return FakeTransport()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def metrics():
    """Counters without Prometheus forwarding."""
    return ProviderMetrics()


@pytest.fixture
def callback_recorder():
    """Callback collecting every (error, result) invocation."""

    class Recorder:
        def __init__(self):
            self.calls: list[tuple[Any, Any]] = []

        def __call__(self, error, result):
            self.calls.append((error, result))

    return Recorder()
