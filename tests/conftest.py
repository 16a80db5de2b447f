from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable

import pytest

from sensorfeed._websocket import TransportFrame


class FakeConnection:
    """In-memory connection driven by the test."""

    def __init__(self) -> None:
        self._frames_queue: asyncio.Queue[TransportFrame | None] = asyncio.Queue()
        self.closed = False

    def send(self, data: str | bytes) -> None:
        self._frames_queue.put_nowait(TransportFrame.message(data))

    def fail(self, error: BaseException) -> None:
        self._frames_queue.put_nowait(TransportFrame.failure(error))

    def drop(self) -> None:
        """Simulate the peer closing the connection."""
        self._frames_queue.put_nowait(None)

    def __aiter__(self) -> AsyncIterator[TransportFrame]:
        return self._frames()

    async def _frames(self) -> AsyncIterator[TransportFrame]:
        while True:
            frame = await self._frames_queue.get()
            if frame is None:
                return
            yield frame

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._frames_queue.put_nowait(None)


class FakeConnector:
    """Records connection attempts; fails the next ones when told to."""

    def __init__(self) -> None:
        self.urls: list[str] = []
        self.attempt_times: list[float] = []
        self.connections: list[FakeConnection] = []
        self.pending_failures: list[BaseException] = []

    @property
    def attempts(self) -> int:
        return len(self.urls)

    @property
    def latest(self) -> FakeConnection:
        return self.connections[-1]

    async def connect(self, url: str) -> FakeConnection:
        self.urls.append(url)
        self.attempt_times.append(asyncio.get_running_loop().time())
        if self.pending_failures:
            raise self.pending_failures.pop(0)
        connection = FakeConnection()
        self.connections.append(connection)
        return connection


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll *predicate* on the running loop until it holds or *timeout* elapses."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached before timeout")
        await asyncio.sleep(0.001)


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()
