"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from gamepad_bridge.models import EventBatch

_CLOSED = object()


class FakeWebSocket:
    """In-memory stand-in for a websockets client connection.

    Inbound frames are fed with ``feed``; ``drop`` ends the inbound
    stream as if the peer went away.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self.fail_sends = False
        self._incoming: asyncio.Queue = asyncio.Queue()

    async def send(self, message: str) -> None:
        if self.fail_sends:
            raise ConnectionError("send failed")
        self.sent.append(message)

    def feed(self, data: str | bytes) -> None:
        self._incoming.put_nowait(data)

    def drop(self, code: int = 1006, reason: str = "connection lost") -> None:
        self.close_code = code
        self.close_reason = reason
        self._incoming.put_nowait(_CLOSED)

    async def close(self) -> None:
        if self.close_code is None:
            self.close_code = 1000
        self.closed = True
        self._incoming.put_nowait(_CLOSED)

    def __aiter__(self) -> FakeWebSocket:
        return self

    async def __anext__(self) -> str | bytes:
        item = await self._incoming.get()
        if item is _CLOSED:
            self.closed = True
            raise StopAsyncIteration
        return item


class FakeConnector:
    """Connector that hands out FakeWebSockets.

    Set ``refuse`` to reject attempts, ``hang`` to never complete the
    handshake.
    """

    def __init__(self, refuse: bool = False, hang: bool = False) -> None:
        self.refuse = refuse
        self.hang = hang
        self.calls = 0
        self.sockets: list[FakeWebSocket] = []

    async def __call__(self, url: str, open_timeout: float) -> FakeWebSocket:
        self.calls += 1
        if self.hang:
            await asyncio.sleep(3600)
        if self.refuse:
            raise ConnectionRefusedError(111, "Connection refused")
        websocket = FakeWebSocket()
        self.sockets.append(websocket)
        return websocket

    @property
    def last(self) -> FakeWebSocket:
        return self.sockets[-1]


class RecordingSink:
    """EventSink that records every batch it is given."""

    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.batches: list[EventBatch] = []

    def send(self, batch: EventBatch) -> bool:
        self.batches.append(batch)
        return self.accept


async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.001)


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def wait_until():
    """Poll a predicate on the running loop until it holds."""
    return _wait_until
