"""Shared test fixtures for mindshare tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from mindshare.leaderboard_client import LiveEntry

# Type alias for the live_entry_factory fixture
LiveEntryFactory = Callable[..., LiveEntry]


@dataclass
class FakeRow:
    """Stand-in for a stored snapshot row."""

    rank: int
    username: str
    handle: str
    mindshare: float = 0.0
    season: str = "s1"


def api_entry(
    rank: int,
    username: str | None = None,
    display_name: str | None = None,
) -> dict[str, Any]:
    """One upstream JSON entry as the live API returns it."""
    username = username or f"user{rank}"
    return {
        "rank": rank,
        "username": username,
        "twitterId": str(1000 + rank),
        "displayName": display_name if display_name is not None else username.title(),
        "mindshare": round(1.0 / rank, 6),
        "mindshareDelta": 0.01,
        "snaps": 10,
        "snapsDelta": 1,
    }


def api_page(start_rank: int, count: int) -> dict[str, Any]:
    """A successful upstream envelope holding *count* entries from *start_rank*."""
    return {
        "success": True,
        "data": [api_entry(start_rank + i) for i in range(count)],
    }


@pytest.fixture
def live_entry_factory() -> LiveEntryFactory:
    """Return a factory that builds :class:`LiveEntry` objects with defaults."""

    def _make(
        rank: int = 1,
        username: str = "alice",
        display_name: str = "Alice",
        mindshare: float = 0.5,
    ) -> LiveEntry:
        return LiveEntry(
            rank=rank,
            username=username,
            display_name=display_name,
            mindshare=mindshare,
        )

    return _make
