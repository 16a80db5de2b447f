"""Value objects exchanged between the codec, store, manager and presenter."""

from sensorfeed.models.connectivity import ConnectionPhase, ConnectivityState
from sensorfeed.models.reading import GroupSnapshot, Reading

__all__ = [
    "ConnectionPhase",
    "ConnectivityState",
    "GroupSnapshot",
    "Reading",
]
