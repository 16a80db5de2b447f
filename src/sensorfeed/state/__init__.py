"""State/store layer.

This package is the single source of truth for the latest reading of every
sensor group seen on the feed.
"""

from sensorfeed.state.store import GroupStore

__all__ = ["GroupStore"]
