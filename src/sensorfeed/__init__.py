"""sensorfeed - Async Python client for live sensor-group WebSocket feeds."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sensorfeed")
except PackageNotFoundError:
    __version__ = "0+local"
from sensorfeed.client import SensorFeedClient
from sensorfeed.codec import decode
from sensorfeed.config import DEFAULT_RECONNECT_DELAY_MS, FeedConfig
from sensorfeed.connection import ConnectionManager, ConnectionStats
from sensorfeed.exceptions import (
    ConnectionLost,
    DecodeError,
    SensorFeedConfigError,
    SensorFeedError,
    SensorFeedTransportError,
)
from sensorfeed.models import ConnectionPhase, ConnectivityState, GroupSnapshot, Reading
from sensorfeed.presentation import DashboardView, Presenter
from sensorfeed.state import GroupStore

__all__ = [
    "__version__",
    "DEFAULT_RECONNECT_DELAY_MS",
    "ConnectionLost",
    "ConnectionManager",
    "ConnectionPhase",
    "ConnectionStats",
    "ConnectivityState",
    "DashboardView",
    "DecodeError",
    "FeedConfig",
    "GroupSnapshot",
    "GroupStore",
    "Presenter",
    "Reading",
    "SensorFeedClient",
    "SensorFeedConfigError",
    "SensorFeedError",
    "SensorFeedTransportError",
    "decode",
]
