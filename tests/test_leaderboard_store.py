"""Unit tests for the leaderboard store service."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backend.api.db.models import Base, LeaderboardEntry
from backend.api.schemas.leaderboard import EntryInput
from backend.api.services.leaderboard_store import (
    get_latest_entries,
    get_latest_scrape_time,
    save_entries,
)

# In-memory SQLite for isolated unit tests
_engine = create_async_engine("sqlite+aiosqlite:///", echo=False)
_session_factory = async_sessionmaker(bind=_engine, class_=AsyncSession, expire_on_commit=False)

_T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _entries(*ranks: int, prefix: str = "user") -> list[EntryInput]:
    return [
        EntryInput(rank=r, username=f"{prefix.title()} {r}", handle=f"@{prefix}{r}", mindshare=r)
        for r in ranks
    ]


@pytest_asyncio.fixture(autouse=True)
async def _setup_db() -> None:  # type: ignore[misc]
    """Create tables before each test and drop them after."""
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield  # type: ignore[misc]
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


class TestSaveEntries:
    @pytest.mark.asyncio
    async def test_batch_shares_one_timestamp(self) -> None:
        async with _session_factory() as db:
            saved = await save_entries(db, "s1", _entries(1, 2, 3))
            await db.commit()

            times = (await db.execute(select(LeaderboardEntry.scraped_at).distinct())).all()

        assert saved == 3
        assert len(times) == 1

    @pytest.mark.asyncio
    async def test_empty_batch_is_noop(self) -> None:
        async with _session_factory() as db:
            assert await save_entries(db, "s2", []) == 0
            count = (await db.execute(select(func.count(LeaderboardEntry.id)))).scalar_one()
        assert count == 0

    @pytest.mark.asyncio
    async def test_unit_defaults_by_season(self) -> None:
        async with _session_factory() as db:
            await save_entries(db, "s1", _entries(1), scraped_at=_T0)
            await save_entries(db, "s5", _entries(1), scraped_at=_T0)
            await db.commit()

            s1 = await get_latest_entries(db, "s1")
            s5 = await get_latest_entries(db, "s5")

        assert s1[0].mindshare_unit == "prize_usd"
        assert s5[0].mindshare_unit == "score"

    @pytest.mark.asyncio
    async def test_explicit_unit(self) -> None:
        async with _session_factory() as db:
            await save_entries(db, "s4", _entries(1), unit="score", scraped_at=_T0)
            await db.commit()
            rows = await get_latest_entries(db, "s4")
        assert rows[0].mindshare_unit == "score"

    @pytest.mark.asyncio
    async def test_unknown_season_rejected(self) -> None:
        async with _session_factory() as db:
            with pytest.raises(ValueError):
                await save_entries(db, "s9", _entries(1))


class TestLatestEntries:
    @pytest.mark.asyncio
    async def test_ordered_by_rank(self) -> None:
        async with _session_factory() as db:
            await save_entries(db, "s1", _entries(2, 1, 3), scraped_at=_T0)
            await db.commit()
            rows = await get_latest_entries(db, "s1")

        assert [r.rank for r in rows] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_newest_batch_supersedes_older(self) -> None:
        async with _session_factory() as db:
            await save_entries(db, "s5", _entries(1, 2, 3, prefix="old"), scraped_at=_T0)
            await save_entries(
                db, "s5", _entries(1, 2, prefix="new"), scraped_at=_T0 + timedelta(minutes=5)
            )
            await db.commit()
            rows = await get_latest_entries(db, "s5")

        assert [r.handle for r in rows] == ["@new1", "@new2"]

    @pytest.mark.asyncio
    async def test_seasons_are_isolated(self) -> None:
        async with _session_factory() as db:
            await save_entries(db, "s1", _entries(1, 2, 3), scraped_at=_T0)
            await save_entries(db, "s2", _entries(1), scraped_at=_T0 + timedelta(hours=1))
            await db.commit()
            rows = await get_latest_entries(db, "s1")

        assert len(rows) == 3
        assert {r.season for r in rows} == {"s1"}

    @pytest.mark.asyncio
    async def test_empty_season(self) -> None:
        async with _session_factory() as db:
            assert await get_latest_entries(db, "s3") == []
            assert await get_latest_scrape_time(db, "s3") is None

