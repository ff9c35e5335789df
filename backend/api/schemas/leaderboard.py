"""Pydantic schemas for season leaderboard endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EntryInput(BaseModel):
    """One ranked row to be stored as part of a scrape batch."""

    rank: int = Field(ge=1)
    username: str
    handle: str
    mindshare: float = 0.0


class LeaderboardRow(BaseModel):
    """A single row of a season leaderboard."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    season: str
    rank: int
    username: str
    handle: str
    mindshare: float
    mindshare_unit: str = Field(alias="mindshareUnit")
    mindshare_delta: float | None = Field(default=None, alias="mindshareDelta")
    avatar_url: str = Field(alias="avatarUrl")


class LeaderboardResponse(BaseModel):
    """Response for a season leaderboard.

    ``range`` is only present for the live season and ``message`` only for
    an unknown season.
    """

    model_config = ConfigDict(populate_by_name=True)

    season: str
    range: str | None = None
    count: int
    last_updated: str | None = Field(alias="lastUpdated")
    data: list[LeaderboardRow]
    message: str | None = None
