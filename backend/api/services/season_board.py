"""Build the full ranked list for one season."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from mindshare.handles import avatar_url, display_handle
from mindshare.leaderboard_client import DEFAULT_MAX_PAGES, LeaderboardClient
from mindshare.seasons import LIVE_SEASON, MindshareUnit, Season, parse_season, parse_timeframe
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.schemas.leaderboard import LeaderboardResponse, LeaderboardRow
from backend.api.services.leaderboard_store import get_latest_entries

logger = logging.getLogger(__name__)


async def get_season_leaderboard(
    db: AsyncSession,
    client: LeaderboardClient,
    season: str,
    range_: str | None = None,
    *,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> LeaderboardResponse:
    """Return the leaderboard for *season*.

    Historical seasons come from the latest stored batch; the live season is
    fetched from the upstream API for the requested window (default 30d).
    An unknown season yields an empty response with a message, not an error.
    """
    parsed = parse_season(season)
    if parsed is None:
        return LeaderboardResponse(
            season=season,
            count=0,
            last_updated=None,
            message=f"Season {season} not found.",
            data=[],
        )
    if parsed is LIVE_SEASON:
        return await _live_leaderboard(client, range_, max_pages)
    return await _stored_leaderboard(db, parsed)


async def _stored_leaderboard(db: AsyncSession, season: Season) -> LeaderboardResponse:
    entries = await get_latest_entries(db, season)
    data = [
        LeaderboardRow(
            id=e.id,
            season=e.season,
            rank=e.rank,
            username=e.username,
            handle=e.handle,
            mindshare=e.mindshare,
            mindshare_unit=e.mindshare_unit,
            avatar_url=avatar_url(e.handle),
        )
        for e in entries
    ]
    return LeaderboardResponse(
        season=str(season),
        count=len(data),
        last_updated=entries[0].scraped_at.isoformat() if entries else None,
        data=data,
    )


async def _live_leaderboard(
    client: LeaderboardClient,
    range_: str | None,
    max_pages: int,
) -> LeaderboardResponse:
    timeframe = parse_timeframe(range_)
    live = await client.fetch_all(timeframe, max_pages=max_pages)
    logger.info("Live leaderboard %s: %d entries", timeframe, len(live))
    data = [
        LeaderboardRow(
            id=0,
            season=str(LIVE_SEASON),
            rank=e.rank,
            username=e.display_name or e.username,
            handle=display_handle(e.username),
            mindshare=e.mindshare,
            mindshare_unit=str(MindshareUnit.SCORE),
            mindshare_delta=e.mindshare_delta,
            avatar_url=avatar_url(e.username),
        )
        for e in live
    ]
    return LeaderboardResponse(
        season=str(LIVE_SEASON),
        range=str(timeframe),
        count=len(data),
        last_updated=datetime.now(UTC).isoformat(),
        data=data,
    )
