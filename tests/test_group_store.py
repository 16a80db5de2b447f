from __future__ import annotations

import random
import string
from datetime import UTC, datetime, timedelta

from sensorfeed.models.reading import Reading
from sensorfeed.state.store import GroupStore


def _dt(seconds: int = 0) -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC) + timedelta(seconds=seconds)


def _values(store: GroupStore) -> list[tuple[str, float, float]]:
    return [(s.group_id, s.temperature, s.humidity) for s in store.snapshot()]


def test_store_starts_empty() -> None:
    store = GroupStore()
    assert store.is_empty
    assert len(store) == 0
    assert store.snapshot() == ()
    assert store.get("A") is None


def test_snapshot_is_sorted_by_group_id() -> None:
    store = GroupStore()
    store.merge(Reading(groupName="B", temperature=21.5, humidity=40.0), _dt())
    store.merge(Reading(groupName="A", temperature=19.0, humidity=55.2), _dt())

    assert _values(store) == [("A", 19.0, 55.2), ("B", 21.5, 40.0)]


def test_sorting_is_plain_string_comparison() -> None:
    store = GroupStore()
    for group in ["group-10", "Group-2", "group-2", "a", "B"]:
        store.merge(Reading(groupName=group, temperature=0.0, humidity=0.0))

    assert [s.group_id for s in store.snapshot()] == ["B", "Group-2", "a", "group-10", "group-2"]


def test_new_reading_replaces_previous_snapshot() -> None:
    store = GroupStore()
    store.merge(Reading(groupName="A", temperature=19.0, humidity=55.2), _dt(0))
    store.merge(Reading(groupName="A", temperature=25.0, humidity=30.0), _dt(5))

    snapshot = store.get("A")
    assert snapshot is not None
    assert (snapshot.temperature, snapshot.humidity) == (25.0, 30.0)
    assert snapshot.received_at == _dt(5)
    assert len(store) == 1


def test_received_at_comes_from_store_clock() -> None:
    store = GroupStore(clock=lambda: _dt(42))
    snapshot = store.merge(Reading(groupName="A", temperature=1.0, humidity=2.0))
    assert snapshot.received_at == _dt(42)
    assert snapshot.age_seconds(_dt(50)) == 8.0


def test_merging_identical_reading_twice_is_idempotent() -> None:
    reading = Reading(groupName="A", temperature=19.0, humidity=55.2)

    once = GroupStore()
    once.merge(reading, _dt(0))

    twice = GroupStore()
    twice.merge(reading, _dt(0))
    twice.merge(reading, _dt(9))

    assert _values(once) == _values(twice)


def test_snapshot_does_not_mutate_store_and_is_fresh() -> None:
    store = GroupStore()
    store.merge(Reading(groupName="A", temperature=1.0, humidity=2.0))

    first = store.snapshot()
    store.merge(Reading(groupName="B", temperature=3.0, humidity=4.0))
    second = store.snapshot()

    assert [s.group_id for s in first] == ["A"]
    assert [s.group_id for s in second] == ["A", "B"]
    assert store.snapshot() == second


def test_one_entry_per_group_matching_latest_reading() -> None:
    rng = random.Random(1234)
    groups = list(string.ascii_uppercase[:8])
    store = GroupStore()
    latest: dict[str, tuple[float, float]] = {}

    for step in range(500):
        group = rng.choice(groups)
        temperature = round(rng.uniform(-10, 40), 2)
        humidity = round(rng.uniform(0, 100), 2)
        store.merge(Reading(groupName=group, temperature=temperature, humidity=humidity), _dt(step))
        latest[group] = (temperature, humidity)

        if step % 50 == 0:
            ids = [s.group_id for s in store.snapshot()]
            assert ids == sorted(ids)

    assert _values(store) == [(group, *latest[group]) for group in sorted(latest)]


def test_groups_are_never_evicted() -> None:
    store = GroupStore()
    store.merge(Reading(groupName="silent", temperature=1.0, humidity=1.0), _dt(0))
    for step in range(1, 100):
        store.merge(Reading(groupName="busy", temperature=float(step), humidity=1.0), _dt(step * 3600))

    assert "silent" in store
    silent = store.get("silent")
    assert silent is not None
    assert silent.received_at == _dt(0)
