"""Cross-season user search and autocomplete.

Historical seasons are read from the latest stored batch of each season, the
live season from the upstream API.  The merge rules live in
:mod:`mindshare.reconciliation`; this module does the fetching.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

from mindshare.handles import normalize_search_term
from mindshare.leaderboard_client import DEFAULT_MAX_PAGES, SEARCH_MAX_PAGES, LeaderboardClient
from mindshare.reconciliation import (
    SUGGESTION_LIMIT,
    SUGGESTION_MAX_RANK,
    LiveRanks,
    SeasonRank,
    Suggestion,
    find_stored_match,
    live_suggestion_candidates,
    merge_suggestions,
    resolve_identity,
    suggestion_candidates,
)
from mindshare.seasons import HISTORICAL_SEASONS, Timeframe
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.schemas.search import (
    LiveRanksSchema,
    SearchResponse,
    SeasonRankSchema,
    SuggestionSchema,
    SuggestionsResponse,
)
from backend.api.services.leaderboard_store import get_latest_entries

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


class SearchTermTooShort(ValueError):
    """The normalized search term has fewer than two characters."""


async def search_user(
    db: AsyncSession,
    client: LeaderboardClient,
    raw_term: str,
    *,
    max_pages: int = SEARCH_MAX_PAGES,
) -> SearchResponse:
    """Report a user's rank in every season.

    The three live windows are looked up concurrently while the historical
    seasons are scanned.

    Raises:
        SearchTermTooShort: if the term is shorter than two characters once
            ``@`` and URL parts are stripped.
    """
    term = normalize_search_term(raw_term)
    if len(term) < MIN_SEARCH_LENGTH:
        raise SearchTermTooShort(f"Username must be at least {MIN_SEARCH_LENGTH} characters")

    live_lookup = asyncio.gather(
        client.find_user(term, Timeframe.DAY, max_pages=max_pages),
        client.find_user(term, Timeframe.WEEK, max_pages=max_pages),
        client.find_user(term, Timeframe.MONTH, max_pages=max_pages),
    )

    try:
        historical: list[SeasonRank] = []
        for season in HISTORICAL_SEASONS:
            rows = await get_latest_entries(db, season)
            historical.append(SeasonRank.from_row(str(season), find_stored_match(rows, term)))
    except Exception:
        live_lookup.cancel()
        raise

    day, week, month = await live_lookup
    live = LiveRanks.from_matches(day, week, month)
    identity = resolve_identity(term, month, week, day, historical)

    return SearchResponse(
        searched_username=identity.searched_username,
        display_name=identity.display_name,
        handle=identity.handle,
        profile_pic=identity.profile_pic,
        results=[
            SeasonRankSchema(
                season=r.season,
                rank=r.rank,
                username=r.username,
                handle=r.handle,
                found=r.found,
            )
            for r in historical
        ],
        s5=LiveRanksSchema(
            rank_24h=live.rank_24h,
            rank_7d=live.rank_7d,
            rank_30d=live.rank_30d,
            mindshare_24h=live.mindshare_24h,
            mindshare_7d=live.mindshare_7d,
            mindshare_30d=live.mindshare_30d,
            found=live.found,
        ),
        timestamp=datetime.now(UTC).isoformat(),
    )


async def suggest(
    db: AsyncSession,
    client: LeaderboardClient,
    raw_query: str,
    *,
    limit: int = SUGGESTION_LIMIT,
    max_rank: int = SUGGESTION_MAX_RANK,
    live_pages: int = DEFAULT_MAX_PAGES,
) -> SuggestionsResponse:
    """Autocomplete candidates for a partial handle or name.

    Scans s4 down to s1, then the live 30-day listing, keeping the best rank
    per handle.  The live listing is best effort: if it fails, historical
    matches are still returned.
    """
    term = normalize_search_term(raw_query)
    if not term:
        return SuggestionsResponse(suggestions=[])

    candidates: list[Suggestion] = []
    for season in reversed(HISTORICAL_SEASONS):
        rows = await get_latest_entries(db, season)
        candidates.extend(suggestion_candidates(rows, term, str(season), max_rank))

    try:
        live = await client.fetch_all(Timeframe.MONTH, max_pages=live_pages)
        candidates.extend(live_suggestion_candidates(live, term, max_rank))
    except Exception:
        logger.warning("Live suggestions unavailable for %r", term, exc_info=True)

    merged = merge_suggestions(candidates, limit)
    return SuggestionsResponse(
        suggestions=[
            SuggestionSchema(username=s.username, handle=s.handle, rank=s.rank, season=s.season)
            for s in merged
        ]
    )
