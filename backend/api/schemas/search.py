"""Pydantic schemas for user search and autocomplete endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SeasonRankSchema(BaseModel):
    """A user's rank in one historical season."""

    season: str
    rank: int | None
    username: str | None
    handle: str | None
    found: bool


class LiveRanksSchema(BaseModel):
    """A user's live-season rank and score per rolling window."""

    model_config = ConfigDict(populate_by_name=True)

    rank_24h: int | None = Field(alias="rank24h")
    rank_7d: int | None = Field(alias="rank7d")
    rank_30d: int | None = Field(alias="rank30d")
    mindshare_24h: float | None = Field(alias="mindshare24h")
    mindshare_7d: float | None = Field(alias="mindshare7d")
    mindshare_30d: float | None = Field(alias="mindshare30d")
    found: bool


class SearchResponse(BaseModel):
    """Unified cross-season report for one searched user."""

    model_config = ConfigDict(populate_by_name=True)

    searched_username: str = Field(alias="searchedUsername")
    display_name: str = Field(alias="displayName")
    handle: str
    profile_pic: str = Field(alias="profilePic")
    results: list[SeasonRankSchema]
    s5: LiveRanksSchema
    timestamp: str


class SuggestionSchema(BaseModel):
    """An autocomplete candidate."""

    username: str
    handle: str
    rank: int
    season: str


class SuggestionsResponse(BaseModel):
    """Up to a handful of autocomplete candidates, best rank first."""

    suggestions: list[SuggestionSchema]
