"""Custom exception hierarchy for sensorfeed."""

from __future__ import annotations


class SensorFeedError(Exception):
    """Base exception for all sensorfeed errors."""


class SensorFeedConfigError(SensorFeedError):
    """Invalid or missing configuration.

    This is the only error :meth:`ConnectionManager.start` raises; it marks a
    startup failure, as opposed to a runtime connectivity failure which is
    always recovered by reconnecting.
    """


class DecodeError(SensorFeedError):
    """Inbound payload is not a valid reading."""

    def __init__(self, message: str, *, preview: str = "") -> None:
        self.preview = preview
        super().__init__(message)


class SensorFeedTransportError(SensorFeedError):
    """WebSocket-level failure (connect refused, protocol error, abnormal frame)."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class ConnectionLost(SensorFeedTransportError):
    """The feed connection closed.

    Reported to ``on_error`` listeners only; never raised to callers because a
    reconnect is always scheduled.
    """
