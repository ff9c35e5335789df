"""FastAPI dependency injection functions."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from mindshare.leaderboard_client import LeaderboardClient

from backend.api.config import Settings
from backend.api.services.scheduler import ScrapeScheduler


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings."""
    return Settings()


@lru_cache(maxsize=1)
def _client_for(base_url: str, timeout_s: float, user_agent: str) -> LeaderboardClient:
    return LeaderboardClient(base_url, timeout_s=timeout_s, user_agent=user_agent)


def get_leaderboard_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> LeaderboardClient:
    """Return the live leaderboard client configured from settings."""
    return _client_for(
        settings.leaderboard_api_url,
        settings.request_timeout_s,
        settings.user_agent,
    )


@lru_cache(maxsize=1)
def get_scheduler() -> ScrapeScheduler:
    """Return the process-wide scrape scheduler."""
    settings = get_settings()
    return ScrapeScheduler(
        get_leaderboard_client(settings),
        interval_s=settings.scrape_interval_s,
        max_pages=settings.live_max_pages,
        page_url=settings.creator_program_url,
        request_timeout_s=settings.request_timeout_s,
        user_agent=settings.user_agent,
    )
