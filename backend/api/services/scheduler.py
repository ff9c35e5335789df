"""Periodic live-season snapshots.

:class:`ScrapeScheduler` owns an ``asyncio.Lock`` that marks a run in
progress.  A run requested while another is active is skipped, not queued.
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from mindshare.leaderboard_client import DEFAULT_MAX_PAGES, LeaderboardClient
from mindshare.page_scraper import (
    BROWSER_USER_AGENT,
    CREATOR_PROGRAM_URL,
    REQUEST_TIMEOUT_S,
    ScrapedRow,
    scrape_creator_page,
)
from mindshare.seasons import LIVE_SEASON, MindshareUnit, Timeframe
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.api.db.database import async_session_factory, session_scope
from backend.api.schemas.leaderboard import EntryInput
from backend.api.services.leaderboard_store import save_entries

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 60.0

PageScraper = Callable[[str], Awaitable[list[ScrapedRow]]]


@dataclass
class ScrapeResult:
    """What a single scheduler run did."""

    skipped: bool = False
    saved: int = 0
    source: str | None = None  # "api" | "page" | None
    error: str | None = None
    finished_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def success(self) -> bool:
        return not self.skipped and self.error is None

    def describe(self) -> str:
        if self.skipped:
            return "Scraper already running, run skipped"
        if self.error is not None:
            return f"Scrape failed: {self.error}"
        if self.saved == 0:
            return f"No entries scraped for {LIVE_SEASON}"
        return f"Saved {self.saved} entries for {LIVE_SEASON} from {self.source}"


class ScrapeScheduler:
    """Snapshot the live season into the store on a fixed interval."""

    def __init__(
        self,
        client: LeaderboardClient,
        *,
        interval_s: float = DEFAULT_INTERVAL_S,
        max_pages: int = DEFAULT_MAX_PAGES,
        page_url: str = CREATOR_PROGRAM_URL,
        request_timeout_s: float = REQUEST_TIMEOUT_S,
        user_agent: str = BROWSER_USER_AGENT,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        page_scraper: PageScraper | None = None,
    ) -> None:
        self.client = client
        self.interval_s = interval_s
        self.max_pages = max_pages
        self.page_url = page_url
        self._session_factory = session_factory
        self._page_scraper: PageScraper = page_scraper or functools.partial(
            scrape_creator_page, timeout_s=request_timeout_s, user_agent=user_agent
        )
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self.last_result: ScrapeResult | None = None

    def is_running(self) -> bool:
        """True while a snapshot run holds the lock."""
        return self._lock.locked()

    async def _collect(self) -> tuple[list[EntryInput], str | None]:
        live = await self.client.fetch_all(Timeframe.MONTH, max_pages=self.max_pages)
        if live:
            return (
                [
                    EntryInput(
                        rank=e.rank,
                        username=e.display_name or e.username,
                        handle=f"@{e.username}",
                        mindshare=e.mindshare,
                    )
                    for e in live
                ],
                "api",
            )

        logger.info("Live API returned no entries, scraping %s", self.page_url)
        rows = await self._page_scraper(self.page_url)
        if rows:
            return (
                [
                    EntryInput(
                        rank=r.rank,
                        username=r.username,
                        handle=r.handle,
                        mindshare=r.mindshare,
                    )
                    for r in rows
                ],
                "page",
            )
        return [], None

    async def run_once(self) -> ScrapeResult:
        """Take one snapshot unless a run is already in progress."""
        if self._lock.locked():
            logger.info("Scraper already running, skipping")
            return ScrapeResult(skipped=True)

        async with self._lock:
            logger.info("Starting scraper run")
            try:
                entries, source = await self._collect()
                saved = 0
                if entries:
                    async with session_scope(self._session_factory) as db:
                        saved = await save_entries(
                            db, LIVE_SEASON, entries, unit=MindshareUnit.SCORE
                        )
                result = ScrapeResult(saved=saved, source=source)
            except Exception as exc:
                logger.exception("Error during scraper run")
                result = ScrapeResult(error=str(exc) or type(exc).__name__)

            logger.info(result.describe())
            self.last_result = result
            return result

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_s)

    def start(self) -> None:
        """Run immediately, then every ``interval_s`` seconds."""
        if self._task is not None and not self._task.done():
            return
        logger.info("Starting scraper scheduler (every %.0fs)", self.interval_s)
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to exit."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
