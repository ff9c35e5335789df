"""Pydantic schemas for scraper control endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TriggerResponse(BaseModel):
    """Outcome of a manually triggered scrape."""

    success: bool
    message: str


class ScraperStatus(BaseModel):
    """Whether a scrape is running and how the last one went."""

    model_config = ConfigDict(populate_by_name=True)

    running: bool
    last_run_at: str | None = Field(default=None, alias="lastRunAt")
    last_result: str | None = Field(default=None, alias="lastResult")
