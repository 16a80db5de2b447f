"""Feed connection lifecycle.

Owns:
- the single live transport connection and the task pumping its frames
- the connectivity flag presented to the display layer
- the fixed-delay reconnect timer
- routing decoded readings into the group store
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from sensorfeed._redact import redact_url
from sensorfeed._websocket import Connection, Connector, FrameKind
from sensorfeed.codec import decode
from sensorfeed.config import FeedConfig
from sensorfeed.exceptions import ConnectionLost, DecodeError, SensorFeedError, SensorFeedTransportError
from sensorfeed.models.connectivity import ConnectionPhase, ConnectivityState
from sensorfeed.models.reading import Reading

_RUNNING_PHASES = frozenset({ConnectionPhase.CONNECTING, ConnectionPhase.OPEN, ConnectionPhase.CLOSED})


@dataclasses.dataclass(slots=True)
class ConnectionStats:
    """Counters kept by :class:`ConnectionManager` for observability."""

    connect_attempts: int = 0
    messages_received: int = 0
    readings_merged: int = 0
    decode_failures: int = 0
    transport_errors: int = 0
    last_connected_at: datetime | None = None
    last_disconnected_at: datetime | None = None


class ConnectionManager:
    """Connect, stay connected, and feed readings to the store.

    Lifecycle::

        IDLE -> CONNECTING -> OPEN -> CLOSED -> CONNECTING -> ...
                                 \\------ stop() from anywhere ------> STOPPED

    Every close schedules exactly one reconnect after
    ``config.reconnect_delay_ms``; there is no backoff and no retry ceiling.
    Transport errors are reported but never change state by themselves.
    """

    def __init__(
        self,
        config: FeedConfig,
        *,
        connector: Connector,
        store_merge: Callable[[Reading], Any],
        on_phase_change: Callable[[ConnectionPhase], None] | None = None,
        on_connectivity_change: Callable[[ConnectivityState], None] | None = None,
        on_error: Callable[[SensorFeedError], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._connector = connector
        self._store_merge = store_merge
        self._on_phase_change = on_phase_change
        self._on_connectivity_change = on_connectivity_change
        self._on_error = on_error
        self._logger = logger or logging.getLogger(__name__)

        self._loop: asyncio.AbstractEventLoop | None = None
        self._url: str = ""
        self._phase = ConnectionPhase.IDLE
        self._connectivity = ConnectivityState.DISCONNECTED
        self._task: asyncio.Task[None] | None = None
        self._connection: Connection | None = None
        self._retry_handle: asyncio.TimerHandle | None = None
        # Bumped on every connection attempt and on stop(); callbacks carrying
        # an older value belong to a superseded attempt and are ignored.
        self._attempt = 0
        self._stats = ConnectionStats()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def phase(self) -> ConnectionPhase:
        return self._phase

    @property
    def connectivity(self) -> ConnectivityState:
        return self._connectivity

    @property
    def is_running(self) -> bool:
        """Whether the manager is connecting, connected or waiting to retry."""
        return self._phase in _RUNNING_PHASES

    @property
    def retry_pending(self) -> bool:
        return self._retry_handle is not None

    @property
    def endpoint(self) -> str:
        """Redacted WebSocket URL, empty until started."""
        return redact_url(self._url) if self._url else ""

    @property
    def stats(self) -> ConnectionStats:
        """A copy of the current counters."""
        return dataclasses.replace(self._stats)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin connecting. No-op while already running.

        Raises
        ------
        SensorFeedConfigError
            If the endpoint address cannot be used.
        SensorFeedError
            If called outside a running event loop.
        """
        if self.is_running:
            return

        url = self._config.websocket_url()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise SensorFeedError("ConnectionManager.start() requires a running event loop") from exc

        self._loop = loop
        self._url = url
        self._logger.info("Starting feed connection to %s", self.endpoint)
        self._begin_connect()

    async def stop(self) -> None:
        """Shut down: cancel any pending reconnect and close the connection.

        Safe to call in any phase and more than once. Once this returns no
        further merge, connectivity change or connection attempt happens.
        """
        if self._phase is ConnectionPhase.STOPPED and self._task is None and self._connection is None:
            return

        self._attempt += 1
        self._cancel_retry()
        self._set_phase(ConnectionPhase.STOPPED)
        self._set_connectivity(ConnectivityState.DISCONNECTED)

        # Detach before awaiting: a start() during the await owns the new ones.
        task, self._task = self._task, None
        connection, self._connection = self._connection, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        if connection is not None:
            await self._close_quietly(connection)
        self._logger.info("Feed connection stopped")

    # ------------------------------------------------------------------
    # Transport events
    # ------------------------------------------------------------------

    def _begin_connect(self) -> None:
        assert self._loop is not None  # noqa: S101
        self._attempt += 1
        self._stats.connect_attempts += 1
        self._set_phase(ConnectionPhase.CONNECTING)
        self._task = self._loop.create_task(
            self._run_connection(self._attempt),
            name=f"sensorfeed-connection-{self._attempt}",
        )

    async def _run_connection(self, attempt: int) -> None:
        try:
            connection = await self._connector.connect(self._url)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._handle_error(attempt, exc)
            self._handle_close(attempt)
            return

        if attempt != self._attempt:
            await self._close_quietly(connection)
            return

        self._connection = connection
        self._handle_open(attempt)

        cancelled = False
        try:
            async for frame in connection:
                if frame.kind is FrameKind.MESSAGE and frame.data is not None:
                    self._handle_message(attempt, frame.data)
                elif frame.error is not None:
                    self._handle_error(attempt, frame.error)
        except asyncio.CancelledError:
            cancelled = True
            raise
        except Exception as exc:
            self._handle_error(attempt, exc)
        finally:
            if self._connection is connection:
                self._connection = None
            await self._close_quietly(connection)
            if not cancelled:
                self._handle_close(attempt)

    def _handle_open(self, attempt: int) -> None:
        if attempt != self._attempt or self._phase is not ConnectionPhase.CONNECTING:
            return
        self._stats.last_connected_at = datetime.now(UTC)
        self._logger.info("Feed connected to %s", self.endpoint)
        self._set_phase(ConnectionPhase.OPEN)
        self._set_connectivity(ConnectivityState.CONNECTED)

    def _handle_message(self, attempt: int, payload: str | bytes) -> None:
        if attempt != self._attempt or self._phase is not ConnectionPhase.OPEN:
            return
        self._stats.messages_received += 1
        try:
            reading = decode(payload)
        except DecodeError as exc:
            self._stats.decode_failures += 1
            self._logger.warning("Dropping malformed feed message: %s payload=%s", exc, exc.preview)
            return
        self._logger.debug(
            "Reading group=%s temperature=%s humidity=%s",
            reading.group_id,
            reading.temperature,
            reading.humidity,
        )
        self._store_merge(reading)
        self._stats.readings_merged += 1

    def _handle_error(self, attempt: int, exc: BaseException) -> None:
        if attempt != self._attempt or self._phase is ConnectionPhase.STOPPED:
            return
        self._stats.transport_errors += 1
        if isinstance(exc, SensorFeedTransportError):
            error = exc
            self._logger.warning("Feed transport error: %s", exc)
        else:
            error = SensorFeedTransportError(f"Feed connection failed: {exc!r}", endpoint=self.endpoint)
            error.__cause__ = exc
            self._logger.warning("Unexpected feed connection failure", exc_info=exc)
        self._notify(self._on_error, error)

    def _handle_close(self, attempt: int) -> None:
        if attempt != self._attempt or self._phase not in _RUNNING_PHASES:
            return
        assert self._loop is not None  # noqa: S101
        self._stats.last_disconnected_at = datetime.now(UTC)
        delay = self._config.reconnect_delay
        self._logger.info("Feed disconnected from %s; reconnecting in %.1fs", self.endpoint, delay)
        self._set_phase(ConnectionPhase.CLOSED)
        self._set_connectivity(ConnectivityState.DISCONNECTED)
        self._notify(self._on_error, ConnectionLost(f"Connection to {self.endpoint} closed", endpoint=self.endpoint))

        self._cancel_retry()
        self._retry_handle = self._loop.call_later(delay, self._retry, attempt)

    def _retry(self, attempt: int) -> None:
        self._retry_handle = None
        if attempt != self._attempt or self._phase is not ConnectionPhase.CLOSED:
            return
        self._logger.info("Attempting to reconnect to %s", self.endpoint)
        self._begin_connect()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _cancel_retry(self) -> None:
        handle, self._retry_handle = self._retry_handle, None
        if handle is not None:
            handle.cancel()

    def _set_phase(self, phase: ConnectionPhase) -> None:
        if phase is self._phase:
            return
        self._logger.debug("Feed phase %s -> %s", self._phase, phase)
        self._phase = phase
        self._notify(self._on_phase_change, phase)

    def _set_connectivity(self, state: ConnectivityState) -> None:
        if state is self._connectivity:
            return
        self._connectivity = state
        self._notify(self._on_connectivity_change, state)

    async def _close_quietly(self, connection: Connection) -> None:
        try:
            await connection.close()
        except Exception:
            self._logger.debug("Feed connection close failed", exc_info=True)

    def _notify(self, listener: Callable[[Any], None] | None, value: Any) -> None:
        if listener is None:
            return
        try:
            listener(value)
        except Exception:
            self._logger.exception("Feed listener %r failed", listener)
