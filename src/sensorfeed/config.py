"""Client configuration for sensorfeed."""

from __future__ import annotations

import dataclasses
from urllib.parse import urlsplit, urlunsplit

from sensorfeed.exceptions import SensorFeedConfigError

DEFAULT_RECONNECT_DELAY_MS = 3000

# Browser WebSocket semantics: http(s) URLs are upgraded to ws(s).
_SCHEME_MAP: dict[str, str] = {
    "ws": "ws",
    "wss": "wss",
    "http": "ws",
    "https": "wss",
}


def normalize_endpoint(address: str) -> str:
    """Return the WebSocket URL for *address*.

    Raises
    ------
    SensorFeedConfigError
        When the address is empty, has an unsupported scheme or no host.
    """
    value = address.strip() if isinstance(address, str) else ""
    if not value:
        raise SensorFeedConfigError("Endpoint address is empty")

    try:
        parts = urlsplit(value)
        # Accessing .port validates the port component.
        _ = parts.port
    except ValueError as exc:
        raise SensorFeedConfigError(f"Endpoint address is not a valid URL: {value!r}") from exc

    scheme = _SCHEME_MAP.get(parts.scheme.lower())
    if scheme is None:
        raise SensorFeedConfigError(
            f"Unsupported endpoint scheme {parts.scheme!r} (expected ws, wss, http or https)"
        )
    if not parts.hostname:
        raise SensorFeedConfigError(f"Endpoint address has no host: {value!r}")

    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


@dataclasses.dataclass(frozen=True)
class FeedConfig:
    """Feed connection configuration.

    Parameters
    ----------
    endpoint_address : str
        URL of the WebSocket feed. ``http``/``https`` addresses are mapped to
        ``ws``/``wss``. The address is validated when the connection manager
        starts, so an unusable address surfaces as a startup failure.
    reconnect_delay_ms : int
        Fixed wait, in milliseconds, between a dropped connection and the next
        connection attempt. Must be a positive integer. Defaults to 3000.
    heartbeat_seconds : float or None
        WebSocket ping interval used to detect half-open connections.
        ``None`` disables heartbeats.
    """

    endpoint_address: str
    reconnect_delay_ms: int = DEFAULT_RECONNECT_DELAY_MS
    heartbeat_seconds: float | None = 30.0

    def __post_init__(self) -> None:
        delay = self.reconnect_delay_ms
        if isinstance(delay, bool) or not isinstance(delay, int):
            raise SensorFeedConfigError(f"reconnect_delay_ms must be an integer, got {delay!r}")
        if delay <= 0:
            raise SensorFeedConfigError(f"reconnect_delay_ms must be > 0, got {delay}")
        if self.heartbeat_seconds is not None and self.heartbeat_seconds <= 0:
            raise SensorFeedConfigError(f"heartbeat_seconds must be > 0 or None, got {self.heartbeat_seconds}")

    @property
    def reconnect_delay(self) -> float:
        """Reconnect delay in seconds."""
        return self.reconnect_delay_ms / 1000.0

    def websocket_url(self) -> str:
        """Validated WebSocket URL for :attr:`endpoint_address`."""
        return normalize_endpoint(self.endpoint_address)
