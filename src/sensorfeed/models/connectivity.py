"""Connection lifecycle enums."""

from __future__ import annotations

from enum import StrEnum


class ConnectivityState(StrEnum):
    """Whether the feed connection is currently open."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class ConnectionPhase(StrEnum):
    """Connection manager lifecycle.

    ``CLOSED`` always means a reconnect is pending; ``STOPPED`` is the
    shutdown condition reached through :meth:`ConnectionManager.stop`.
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    STOPPED = "stopped"
