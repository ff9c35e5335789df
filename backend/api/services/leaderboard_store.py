"""Service layer for season snapshot storage and retrieval."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from mindshare.seasons import MindshareUnit, Season, default_unit
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.db.models import LeaderboardEntry
from backend.api.schemas.leaderboard import EntryInput

logger = logging.getLogger(__name__)


async def save_entries(
    db: AsyncSession,
    season: Season | str,
    entries: Sequence[EntryInput],
    *,
    unit: MindshareUnit | None = None,
    scraped_at: datetime | None = None,
) -> int:
    """Insert one scrape batch for *season*.

    All rows share a single ``scraped_at`` so the batch can later be
    identified as a whole.  Returns the number of rows inserted.
    """
    if not entries:
        return 0

    season = Season(season)
    batch_unit = unit or default_unit(season)
    batch_time = scraped_at or datetime.now(UTC)
    db.add_all(
        LeaderboardEntry(
            season=str(season),
            rank=e.rank,
            username=e.username,
            handle=e.handle,
            mindshare=e.mindshare,
            mindshare_unit=str(batch_unit),
            scraped_at=batch_time,
        )
        for e in entries
    )
    await db.flush()
    logger.info("Stored %d %s entries scraped at %s", len(entries), season, batch_time.isoformat())
    return len(entries)


async def get_latest_scrape_time(db: AsyncSession, season: Season | str) -> datetime | None:
    """Return the ``scraped_at`` of the newest batch for *season*."""
    result = await db.execute(
        select(func.max(LeaderboardEntry.scraped_at)).where(
            LeaderboardEntry.season == str(season)
        )
    )
    return result.scalar_one_or_none()


async def get_latest_entries(db: AsyncSession, season: Season | str) -> list[LeaderboardEntry]:
    """Return the newest batch for *season*, ordered by rank ascending."""
    latest = await get_latest_scrape_time(db, season)
    if latest is None:
        return []

    result = await db.execute(
        select(LeaderboardEntry)
        .where(
            LeaderboardEntry.season == str(season),
            LeaderboardEntry.scraped_at == latest,
        )
        .order_by(LeaderboardEntry.rank.asc(), LeaderboardEntry.id.asc())
    )
    return list(result.scalars().all())

