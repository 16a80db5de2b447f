from __future__ import annotations

import pytest

from sensorfeed.config import DEFAULT_RECONNECT_DELAY_MS, FeedConfig, normalize_endpoint
from sensorfeed.exceptions import SensorFeedConfigError


def test_defaults() -> None:
    config = FeedConfig(endpoint_address="wss://feed.example.org")
    assert config.reconnect_delay_ms == DEFAULT_RECONNECT_DELAY_MS == 3000
    assert config.reconnect_delay == 3.0
    assert config.heartbeat_seconds == 30.0


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("ws://localhost:8080/feed", "ws://localhost:8080/feed"),
        ("wss://feed.example.org", "wss://feed.example.org"),
        ("http://10.0.0.5:3000", "ws://10.0.0.5:3000"),
        ("https://iot.example.org/", "wss://iot.example.org/"),
        ("  HTTPS://iot.example.org?room=1  ", "wss://iot.example.org?room=1"),
    ],
)
def test_normalize_endpoint(address: str, expected: str) -> None:
    assert normalize_endpoint(address) == expected


@pytest.mark.parametrize(
    "address",
    [
        "",
        "   ",
        "iot.example.org",
        "ftp://iot.example.org",
        "ws://",
        "ws://host:notaport",
        "ws://[::1",
    ],
)
def test_normalize_endpoint_rejects_unusable_addresses(address: str) -> None:
    with pytest.raises(SensorFeedConfigError):
        normalize_endpoint(address)


def test_invalid_endpoint_only_fails_when_resolved() -> None:
    config = FeedConfig(endpoint_address="nonsense")
    with pytest.raises(SensorFeedConfigError):
        config.websocket_url()


@pytest.mark.parametrize("delay", [0, -1, 1.5, "3000", True])
def test_reconnect_delay_must_be_positive_integer(delay: object) -> None:
    with pytest.raises(SensorFeedConfigError):
        FeedConfig(endpoint_address="ws://localhost", reconnect_delay_ms=delay)  # type: ignore[arg-type]


def test_heartbeat_can_be_disabled() -> None:
    config = FeedConfig(endpoint_address="ws://localhost", heartbeat_seconds=None)
    assert config.heartbeat_seconds is None
    with pytest.raises(SensorFeedConfigError):
        FeedConfig(endpoint_address="ws://localhost", heartbeat_seconds=0)
