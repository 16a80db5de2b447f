"""Internal WebSocket transport built on aiohttp.

The connection manager only depends on the :class:`Connector` and
:class:`Connection` protocols, so tests can drive it with in-memory doubles
while production code uses :class:`AiohttpWebSocketConnector`.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

import aiohttp

from sensorfeed._redact import redact_url
from sensorfeed.exceptions import SensorFeedTransportError

_logger = logging.getLogger(__name__)


class FrameKind(StrEnum):
    MESSAGE = "message"
    ERROR = "error"


@dataclass(frozen=True)
class TransportFrame:
    """One inbound event from an open connection.

    End of iteration means the connection closed.
    """

    kind: FrameKind
    data: str | bytes | None = None
    error: BaseException | None = None

    @classmethod
    def message(cls, data: str | bytes) -> TransportFrame:
        return cls(kind=FrameKind.MESSAGE, data=data)

    @classmethod
    def failure(cls, error: BaseException) -> TransportFrame:
        return cls(kind=FrameKind.ERROR, error=error)


class Connection(Protocol):
    """An open, receive-only feed connection."""

    def __aiter__(self) -> AsyncIterator[TransportFrame]:
        ...

    async def close(self) -> None:
        ...


class Connector(Protocol):
    """Opens feed connections.

    ``connect`` returning means the connection is open; raising means the
    attempt failed.
    """

    async def connect(self, url: str) -> Connection:
        ...


class AiohttpConnection:
    """Adapts an aiohttp client WebSocket to the :class:`Connection` protocol."""

    def __init__(self, ws: aiohttp.ClientWebSocketResponse, *, endpoint: str) -> None:
        self._ws = ws
        self._endpoint = endpoint

    @property
    def closed(self) -> bool:
        return self._ws.closed

    def __aiter__(self) -> AsyncIterator[TransportFrame]:
        return self._frames()

    async def _frames(self) -> AsyncIterator[TransportFrame]:
        # aiohttp stops iterating on CLOSE/CLOSING/CLOSED frames.
        async for msg in self._ws:
            if msg.type == aiohttp.WSMsgType.TEXT:
                yield TransportFrame.message(msg.data)
            elif msg.type == aiohttp.WSMsgType.BINARY:
                yield TransportFrame.message(bytes(msg.data))
            elif msg.type == aiohttp.WSMsgType.ERROR:
                cause = self._ws.exception()
                error = SensorFeedTransportError(
                    f"WebSocket error from {self._endpoint}: {cause or msg.data}",
                    endpoint=self._endpoint,
                )
                if cause is not None:
                    error.__cause__ = cause
                yield TransportFrame.failure(error)
            else:
                _logger.debug("Ignoring WebSocket frame type=%s", msg.type)
        _logger.debug("WebSocket closed endpoint=%s code=%s", self._endpoint, self._ws.close_code)

    async def close(self) -> None:
        if not self._ws.closed:
            await self._ws.close()


class AiohttpWebSocketConnector:
    """Opens WebSocket connections on a shared :class:`aiohttp.ClientSession`."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        heartbeat: float | None = None,
    ) -> None:
        self._session = session
        self._heartbeat = heartbeat

    async def connect(self, url: str) -> AiohttpConnection:
        endpoint = redact_url(url)
        _logger.debug("WebSocket connect %s heartbeat=%s", endpoint, self._heartbeat)
        try:
            ws = await self._session.ws_connect(url, heartbeat=self._heartbeat)
        except (aiohttp.ClientError, OSError) as exc:
            raise SensorFeedTransportError(
                f"Connection to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        return AiohttpConnection(ws, endpoint=endpoint)
