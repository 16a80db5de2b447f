"""Deterministic in-memory group store.

This is the only component allowed to mutate per-group state.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime

from sensorfeed.models.reading import GroupSnapshot, Reading


def _utcnow() -> datetime:
    return datetime.now(UTC)


class GroupStore:
    """Latest-value store keyed by group id.

    A reading for a known group replaces the previous snapshot outright; no
    fields are carried over. Groups are never evicted, so a silent group keeps
    its last-known values and its age is visible through ``received_at``.

    All map access happens under one lock that is held only for the dict
    operation itself, so :meth:`snapshot` never observes a half-applied
    :meth:`merge` even when read from another thread.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._groups: dict[str, GroupSnapshot] = {}

    def merge(self, reading: Reading, now: datetime | None = None) -> GroupSnapshot:
        """Record *reading* as the current value of its group."""
        received_at = now if now is not None else self._clock()
        snapshot = GroupSnapshot.from_reading(reading, received_at)
        with self._lock:
            self._groups[reading.group_id] = snapshot
        return snapshot

    def snapshot(self) -> tuple[GroupSnapshot, ...]:
        """Return all groups ordered by group id (plain string comparison)."""
        with self._lock:
            entries = list(self._groups.values())
        entries.sort(key=lambda entry: entry.group_id)
        return tuple(entries)

    def get(self, group_id: str) -> GroupSnapshot | None:
        with self._lock:
            return self._groups.get(group_id)

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return not self._groups

    def __len__(self) -> int:
        with self._lock:
            return len(self._groups)

    def __contains__(self, group_id: object) -> bool:
        with self._lock:
            return group_id in self._groups
