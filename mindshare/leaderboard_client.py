"""Async client for the third-party live leaderboard API.

The upstream exposes one paginated listing per rolling window and no search
or bulk endpoint, so everything here is a linear page walk::

    GET <base_url>?timeframe=30d&sortBy=mindshare&page=1
    -> {"success": true, "data": [{"rank": 1, "username": ..., ...}, ...]}

Pages hold up to :data:`PAGE_SIZE` rank-ordered entries.  A short page is the
last one.  Any failed page (bad status, transport error, malformed payload)
ends the walk and whatever was collected so far is returned; nothing in this
module raises to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from mindshare.handles import normalize_handle, normalize_search_term
from mindshare.seasons import Timeframe

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://leaderboard-bice-mu.vercel.app/api/zama"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
REQUEST_TIMEOUT_S = 20.0
PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 15
SEARCH_MAX_PAGES = 50


@dataclass(frozen=True)
class LiveEntry:
    """One ranked participant as reported by the live API."""

    rank: int
    username: str
    display_name: str
    mindshare: float
    mindshare_delta: float = 0.0
    twitter_id: str = ""
    snaps: int = 0
    snaps_delta: int = 0

    @property
    def handle(self) -> str:
        return normalize_handle(self.username)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> LiveEntry:
        """Build an entry from one upstream JSON object.

        Raises ``KeyError``/``TypeError``/``ValueError``/``OverflowError`` on a
        malformed row, including a missing, null or blank ``username``.
        """
        username = raw["username"]
        if not isinstance(username, str) or not username.strip():
            raise ValueError(f"invalid username {username!r}")
        return cls(
            rank=int(raw["rank"]),
            username=username,
            display_name=str(raw.get("displayName") or ""),
            mindshare=float(raw.get("mindshare") or 0.0),
            mindshare_delta=float(raw.get("mindshareDelta") or 0.0),
            twitter_id=str(raw.get("twitterId") or ""),
            snaps=int(raw.get("snaps") or 0),
            snaps_delta=int(raw.get("snapsDelta") or 0),
        )


def _entry_matches(entry: LiveEntry, term: str) -> bool:
    """Exact handle match, or the term appears in the display name."""
    return entry.handle == term or term in entry.display_name.lower()


class LeaderboardClient:
    """Page-walking reader for the live leaderboard.

    A new ``httpx.AsyncClient`` is opened per walk and reused for every page
    of that walk.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        timeout_s: float = REQUEST_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    def _open(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_s,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
        )

    async def _get_page(
        self,
        client: httpx.AsyncClient,
        timeframe: Timeframe | str,
        page: int,
    ) -> list[LiveEntry] | None:
        params = {"timeframe": str(timeframe), "sortBy": "mindshare", "page": str(page)}
        try:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict) or not payload.get("success"):
                logger.warning("Leaderboard API page %d (%s) reported failure", page, timeframe)
                return None
            data = payload.get("data")
            if not isinstance(data, list):
                logger.warning("Leaderboard API page %d (%s) has no data list", page, timeframe)
                return None
            return [LiveEntry.from_api(raw) for raw in data]
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Leaderboard API returned status %d for page %d (%s)",
                exc.response.status_code,
                page,
                timeframe,
            )
            return None
        except (httpx.RequestError, ValueError, KeyError, TypeError, OverflowError) as exc:
            logger.warning("Leaderboard API page %d (%s) failed: %s", page, timeframe, exc)
            return None

    async def fetch_page(self, timeframe: Timeframe | str, page: int) -> list[LiveEntry] | None:
        """Fetch a single page.

        Returns:
            The page's entries (possibly empty), or ``None`` if the page
            could not be retrieved or parsed.
        """
        async with self._open() as client:
            return await self._get_page(client, timeframe, page)

    async def fetch_all(
        self,
        timeframe: Timeframe | str,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> list[LiveEntry]:
        """Collect entries page by page until a stop condition is hit.

        Stops on a failed page, an empty page, a short page (fewer than
        :data:`PAGE_SIZE` entries) or after *max_pages* pages.

        Args:
            timeframe: Rolling window to read.
            max_pages: Upper bound on the number of requests.

        Returns:
            All entries collected, in page order.  Partial on failure.
        """
        entries: list[LiveEntry] = []
        async with self._open() as client:
            for page in range(1, max_pages + 1):
                batch = await self._get_page(client, timeframe, page)
                if not batch:
                    break
                entries.extend(batch)
                if len(batch) < PAGE_SIZE:
                    break
        logger.debug("Fetched %d live entries for %s", len(entries), timeframe)
        return entries

    async def find_user(
        self,
        term: str,
        timeframe: Timeframe | str,
        max_pages: int = SEARCH_MAX_PAGES,
    ) -> LiveEntry | None:
        """Walk pages until an entry matches *term*.

        The term is normalized first.  An entry matches when its normalized
        handle equals the term or its display name contains it.  Since pages
        are rank-ordered the first hit is also the best-ranked one.
        """
        needle = normalize_search_term(term)
        if not needle:
            return None
        async with self._open() as client:
            for page in range(1, max_pages + 1):
                batch = await self._get_page(client, timeframe, page)
                if not batch:
                    return None
                for entry in batch:
                    if _entry_matches(entry, needle):
                        return entry
                if len(batch) < PAGE_SIZE:
                    return None
        return None
