"""High-level async client for a live sensor feed."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from sensorfeed._websocket import AiohttpWebSocketConnector, Connector
from sensorfeed.config import FeedConfig
from sensorfeed.connection import ConnectionManager, ConnectionStats
from sensorfeed.exceptions import SensorFeedError
from sensorfeed.models.connectivity import ConnectionPhase, ConnectivityState
from sensorfeed.models.reading import GroupSnapshot, Reading
from sensorfeed.presentation import DashboardView
from sensorfeed.state.store import GroupStore

_logger = logging.getLogger(__name__)


class SensorFeedClient:
    """Async client that keeps the latest reading of every sensor group.

    Usage::

        async with SensorFeedClient(FeedConfig(endpoint_address=url)) as client:
            view = client.view()

    The connection is opened on enter and kept alive (reconnecting after
    every drop) until exit.
    """

    def __init__(
        self,
        config: FeedConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        connector: Connector | None = None,
        store: GroupStore | None = None,
        on_update: Callable[[DashboardView], None] | None = None,
        on_error: Callable[[SensorFeedError], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._connector = connector
        self._store = store if store is not None else GroupStore()
        self._on_update = on_update
        self._on_error = on_error
        self._manager: ConnectionManager | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SensorFeedClient:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def start(self) -> None:
        """Open the feed. Raises :class:`SensorFeedConfigError` on a bad endpoint."""
        if self._manager is not None and self._manager.is_running:
            return

        # Validate before allocating a session so a bad address leaks nothing.
        self._config.websocket_url()

        connector = self._connector
        if connector is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            connector = AiohttpWebSocketConnector(
                self._http_session,
                heartbeat=self._config.heartbeat_seconds,
            )

        # A fresh manager per start keeps it bound to the current session.
        self._manager = ConnectionManager(
            self._config,
            connector=connector,
            store_merge=self._merge,
            on_connectivity_change=self._connectivity_changed,
            on_error=self._on_error,
            logger=_logger,
        )
        self._manager.start()

    async def close(self) -> None:
        """Stop the feed and release owned resources."""
        if self._manager is not None:
            await self._manager.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def store(self) -> GroupStore:
        return self._store

    @property
    def connectivity(self) -> ConnectivityState:
        if self._manager is None:
            return ConnectivityState.DISCONNECTED
        return self._manager.connectivity

    @property
    def phase(self) -> ConnectionPhase:
        if self._manager is None:
            return ConnectionPhase.IDLE
        return self._manager.phase

    @property
    def stats(self) -> ConnectionStats:
        if self._manager is None:
            return ConnectionStats()
        return self._manager.stats

    def snapshot(self) -> tuple[GroupSnapshot, ...]:
        """Latest reading per group, ordered by group id."""
        return self._store.snapshot()

    def view(self) -> DashboardView:
        """Connectivity plus ordered snapshot, ready for a presenter."""
        return DashboardView.build(self.connectivity, self._store.snapshot())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _merge(self, reading: Reading) -> None:
        self._store.merge(reading)
        self._emit_update()

    def _connectivity_changed(self, _state: ConnectivityState) -> None:
        self._emit_update()

    def _emit_update(self) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(self.view())
        except Exception:
            _logger.exception("on_update callback failed")
