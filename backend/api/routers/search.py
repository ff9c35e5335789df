"""User search and autocomplete endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from mindshare.leaderboard_client import LeaderboardClient
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.config import Settings
from backend.api.db.database import get_db
from backend.api.dependencies import get_leaderboard_client, get_settings
from backend.api.schemas.search import SearchResponse, SuggestionsResponse
from backend.api.services.rank_search import SearchTermTooShort, search_user, suggest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search/{username:path}", response_model=SearchResponse)
async def search(
    username: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    client: Annotated[LeaderboardClient, Depends(get_leaderboard_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SearchResponse:
    """A user's rank in every historical season and each live window."""
    try:
        return await search_user(db, client, username, max_pages=settings.search_max_pages)
    except SearchTermTooShort as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    except Exception:
        logger.exception("Error searching for user %r", username)
        raise HTTPException(status_code=500, detail="Failed to search for user") from None


@router.get("/suggestions/{query:path}", response_model=SuggestionsResponse)
async def suggestions(
    query: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    client: Annotated[LeaderboardClient, Depends(get_leaderboard_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuggestionsResponse:
    """Autocomplete candidates.  Never fails: errors yield an empty list."""
    try:
        return await suggest(
            db,
            client,
            query,
            limit=settings.suggestion_limit,
            max_rank=settings.suggestion_max_rank,
            live_pages=settings.live_max_pages,
        )
    except Exception:
        logger.exception("Error fetching suggestions for %r", query)
        return SuggestionsResponse(suggestions=[])
