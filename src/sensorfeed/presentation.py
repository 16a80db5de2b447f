"""Boundary between the feed core and whatever renders it.

The core only produces :class:`DashboardView` values; drawing them (layout,
colours, icons) belongs to a :class:`Presenter` supplied by the application.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from sensorfeed.models.connectivity import ConnectivityState
from sensorfeed.models.reading import GroupSnapshot


@dataclass(frozen=True)
class DashboardView:
    """Everything a presenter needs for one render pass.

    ``waiting_for_data`` depends only on ``groups``: connected-but-empty and
    disconnected-but-populated are both valid, distinct views.
    """

    connectivity: ConnectivityState
    groups: tuple[GroupSnapshot, ...] = ()

    @property
    def is_connected(self) -> bool:
        return self.connectivity is ConnectivityState.CONNECTED

    @property
    def waiting_for_data(self) -> bool:
        return not self.groups

    @classmethod
    def build(cls, connectivity: ConnectivityState, groups: Iterable[GroupSnapshot]) -> DashboardView:
        return cls(connectivity=connectivity, groups=tuple(groups))


class Presenter(Protocol):
    """Renders a :class:`DashboardView`. Implemented outside this package."""

    def render(self, view: DashboardView) -> None:
        ...
