"""Merge stored historical ranks with live-season lookups.

Historical seasons come from database snapshots, the live season from the
upstream API over three rolling windows.  The functions here take the already
fetched rows and decide which of them describe the searched user, which
identity to report, and which autocomplete suggestions to offer.  No I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from mindshare.handles import avatar_url, display_handle, matches_term, normalize_handle
from mindshare.leaderboard_client import LiveEntry
from mindshare.seasons import LIVE_SEASON

SUGGESTION_LIMIT = 4
SUGGESTION_MAX_RANK = 1500


class StoredRow(Protocol):
    """The columns of a stored snapshot row that matching relies on."""

    rank: int
    username: str
    handle: str


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeasonRank:
    """A user's standing in one historical season."""

    season: str
    rank: int | None = None
    username: str | None = None
    handle: str | None = None
    found: bool = False

    @classmethod
    def from_row(cls, season: str, row: StoredRow | None) -> SeasonRank:
        if row is None:
            return cls(season=season)
        return cls(
            season=season,
            rank=row.rank,
            username=row.username,
            handle=row.handle,
            found=True,
        )


@dataclass(frozen=True)
class LiveRanks:
    """A user's live-season rank and score in each rolling window."""

    rank_24h: int | None = None
    rank_7d: int | None = None
    rank_30d: int | None = None
    mindshare_24h: float | None = None
    mindshare_7d: float | None = None
    mindshare_30d: float | None = None
    found: bool = False

    @classmethod
    def from_matches(
        cls,
        day: LiveEntry | None,
        week: LiveEntry | None,
        month: LiveEntry | None,
    ) -> LiveRanks:
        return cls(
            rank_24h=day.rank if day else None,
            rank_7d=week.rank if week else None,
            rank_30d=month.rank if month else None,
            mindshare_24h=day.mindshare if day else None,
            mindshare_7d=week.mindshare if week else None,
            mindshare_30d=month.mindshare if month else None,
            found=any(m is not None for m in (day, week, month)),
        )


@dataclass(frozen=True)
class Identity:
    """How a searched user is presented: name, handle and avatar."""

    searched_username: str
    display_name: str
    handle: str
    profile_pic: str


def find_stored_match(rows: Iterable[StoredRow], term: str) -> StoredRow | None:
    """Return the first row identifying *term*, in iteration order.

    Matching is case-insensitive substring on the normalized handle (in both
    directions) or on the display name.
    """
    for row in rows:
        if matches_term(row.handle, row.username, term, bidirectional=True):
            return row
    return None


def resolve_identity(
    term: str,
    live_30d: LiveEntry | None,
    live_7d: LiveEntry | None,
    live_24h: LiveEntry | None,
    historical: Sequence[SeasonRank],
) -> Identity:
    """Pick the display identity for a search.

    Precedence: live 30d, 7d, 24h match, then the first historical season
    with a match, then the raw term.
    """
    live = live_30d or live_7d or live_24h
    if live is not None:
        handle = live.handle or term
        return Identity(
            searched_username=handle,
            display_name=live.display_name or live.username,
            handle=display_handle(handle),
            profile_pic=avatar_url(handle),
        )

    first = next((r for r in historical if r.found and r.handle), None)
    if first is not None:
        handle = normalize_handle(first.handle) or term
        return Identity(
            searched_username=handle,
            display_name=first.username or handle,
            handle=display_handle(handle),
            profile_pic=avatar_url(handle),
        )

    return Identity(
        searched_username=term,
        display_name=term,
        handle=display_handle(term),
        profile_pic=avatar_url(term),
    )


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Suggestion:
    """An autocomplete candidate."""

    username: str
    handle: str
    rank: int
    season: str


def suggestion_candidates(
    rows: Iterable[StoredRow],
    term: str,
    season: str,
    max_rank: int = SUGGESTION_MAX_RANK,
) -> list[Suggestion]:
    """Stored rows matching *term* within the rank ceiling."""
    return [
        Suggestion(
            username=row.username,
            handle=normalize_handle(row.handle),
            rank=row.rank,
            season=season,
        )
        for row in rows
        if row.rank <= max_rank and matches_term(row.handle, row.username, term)
    ]


def live_suggestion_candidates(
    entries: Iterable[LiveEntry],
    term: str,
    max_rank: int = SUGGESTION_MAX_RANK,
) -> list[Suggestion]:
    """Live entries matching *term* within the rank ceiling."""
    return [
        Suggestion(
            username=entry.display_name or entry.username,
            handle=entry.handle,
            rank=entry.rank,
            season=str(LIVE_SEASON),
        )
        for entry in entries
        if entry.rank <= max_rank and matches_term(entry.username, entry.display_name, term)
    ]


def merge_suggestions(
    candidates: Iterable[Suggestion],
    limit: int = SUGGESTION_LIMIT,
) -> list[Suggestion]:
    """Keep the best rank per handle, sort ascending and truncate.

    On equal ranks the candidate seen first wins.
    """
    best: dict[str, Suggestion] = {}
    for candidate in candidates:
        existing = best.get(candidate.handle)
        if existing is None or candidate.rank < existing.rank:
            best[candidate.handle] = candidate
    return sorted(best.values(), key=lambda s: s.rank)[:limit]
