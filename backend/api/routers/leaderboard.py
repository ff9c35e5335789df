"""Season leaderboard endpoint."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from mindshare.leaderboard_client import LeaderboardClient
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.config import Settings
from backend.api.db.database import get_db
from backend.api.dependencies import get_leaderboard_client, get_settings
from backend.api.schemas.leaderboard import LeaderboardResponse
from backend.api.services.season_board import get_season_leaderboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{season}",
    response_model=LeaderboardResponse,
    response_model_exclude_unset=True,
)
async def season_leaderboard(
    season: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    client: Annotated[LeaderboardClient, Depends(get_leaderboard_client)],
    settings: Annotated[Settings, Depends(get_settings)],
    range_: Annotated[
        str | None, Query(alias="range", description="Live window: 24h, 7d or 30d")
    ] = None,
) -> LeaderboardResponse:
    """Ranked list for a season; ``s5`` is read live for the chosen window."""
    try:
        return await get_season_leaderboard(
            db, client, season, range_, max_pages=settings.live_max_pages
        )
    except Exception:
        logger.exception("Error fetching leaderboard for %s", season)
        raise HTTPException(status_code=500, detail="Failed to fetch leaderboard data") from None
