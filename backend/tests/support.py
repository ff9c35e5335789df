"""Shared helpers for the backend tests: test database and a fake live API."""

from __future__ import annotations

import contextlib
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from mindshare.leaderboard_client import PAGE_SIZE, LeaderboardClient, LiveEntry
from mindshare.seasons import Timeframe
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backend.api.schemas.leaderboard import EntryInput
from backend.api.services.leaderboard_store import save_entries

# In-memory SQLite for test isolation
sqlite_engine = create_async_engine("sqlite+aiosqlite:///", echo=False)
sqlite_session_factory = async_sessionmaker(
    bind=sqlite_engine, class_=AsyncSession, expire_on_commit=False
)


class FakeLeaderboardClient(LeaderboardClient):
    """Serves the live listing from memory, paging it like the upstream API.

    Only the transport is replaced, so page walking and matching run the
    real client code.  ``failing`` makes every page fail; ``fail_after``
    makes pages after that number fail.
    """

    def __init__(self) -> None:
        super().__init__("http://live.test/api")
        self.windows: dict[str, list[LiveEntry]] = {str(t): [] for t in Timeframe}
        self.failing = False
        self.fail_after: int | None = None
        self.requests: list[tuple[str, int]] = []

    def _open(self) -> Any:
        return contextlib.nullcontext()

    async def _get_page(
        self, client: Any, timeframe: Timeframe | str, page: int
    ) -> list[LiveEntry] | None:
        self.requests.append((str(timeframe), page))
        if self.failing or (self.fail_after is not None and page > self.fail_after):
            return None
        listing = self.windows[str(timeframe)]
        start = (page - 1) * PAGE_SIZE
        return listing[start : start + PAGE_SIZE]

    def set_window(self, timeframe: Timeframe | str, entries: Sequence[LiveEntry]) -> None:
        self.windows[str(timeframe)] = sorted(entries, key=lambda e: e.rank)

    def set_all_windows(self, entries: Sequence[LiveEntry]) -> None:
        for timeframe in Timeframe:
            self.set_window(timeframe, entries)


def live(rank: int, username: str, display_name: str = "", mindshare: float = 1.0) -> LiveEntry:
    """Shorthand for building a live entry."""
    return LiveEntry(
        rank=rank,
        username=username,
        display_name=display_name,
        mindshare=mindshare,
        mindshare_delta=0.1,
    )


def filler(count: int, start_rank: int = 1) -> list[LiveEntry]:
    """*count* unrelated live entries starting at *start_rank*."""
    return [live(start_rank + i, f"filler{start_rank + i}", "Filler") for i in range(count)]


async def seed_entries(
    season: str,
    rows: Sequence[tuple[int, str, str]],
    *,
    scraped_at: datetime | None = None,
    mindshare: float = 100.0,
) -> int:
    """Store ``(rank, username, handle)`` rows as one batch for *season*."""
    entries = [
        EntryInput(rank=rank, username=username, handle=handle, mindshare=mindshare)
        for rank, username, handle in rows
    ]
    async with sqlite_session_factory() as db:
        saved = await save_entries(
            db, season, entries, scraped_at=scraped_at or datetime.now(UTC)
        )
        await db.commit()
    return saved
