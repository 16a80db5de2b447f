#!/usr/bin/env python3
"""Console watcher for a live sensor feed.

Connects to the feed, keeps reconnecting on drops, and reprints the sorted
per-group table whenever a reading arrives or connectivity changes.

Use this to eyeball a feed endpoint without a dashboard.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from sensorfeed import DashboardView, FeedConfig, SensorFeedClient, SensorFeedConfigError  # noqa: E402

_LOG = logging.getLogger("watch_feed")


class ConsolePresenter:
    """Plain-text :class:`sensorfeed.Presenter`."""

    def __init__(self, *, stale_after: float) -> None:
        self._stale_after = stale_after

    def render(self, view: DashboardView) -> None:
        status = "Connected" if view.is_connected else "Disconnected"
        print(f"\n[{datetime.now(UTC):%H:%M:%S}] {status}")
        if view.waiting_for_data:
            print("  waiting for sensor data...")
            return
        for group in view.groups:
            age = group.age_seconds()
            marker = " (stale)" if age >= self._stale_after else ""
            print(
                f"  {group.group_id:<20} {group.temperature:6.1f} C  {group.humidity:5.1f} %"
                f"  {age:5.0f}s ago{marker}"
            )


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch a live sensor-group feed in the terminal.",
    )
    parser.add_argument(
        "endpoint",
        help="Feed address (ws://, wss://, http:// or https://).",
    )
    parser.add_argument(
        "--reconnect-delay-ms",
        type=int,
        default=3000,
        help="Fixed wait before reconnecting after a drop.",
    )
    parser.add_argument(
        "--stale-after",
        type=float,
        default=60.0,
        help="Mark groups silent for this many seconds as stale.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


async def _watch(args: argparse.Namespace) -> None:
    config = FeedConfig(endpoint_address=args.endpoint, reconnect_delay_ms=args.reconnect_delay_ms)
    presenter = ConsolePresenter(stale_after=args.stale_after)
    async with SensorFeedClient(config, on_update=presenter.render) as client:
        presenter.render(client.view())
        if args.duration > 0:
            await asyncio.sleep(args.duration)
        else:
            await asyncio.Event().wait()
    stats = client.stats
    print(
        f"\n[watch] attempts={stats.connect_attempts} messages={stats.messages_received} "
        f"merged={stats.readings_merged} malformed={stats.decode_failures}"
    )


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(_watch(args))
    except SensorFeedConfigError as exc:
        _LOG.error("Cannot start: %s", exc)
        return 2
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
