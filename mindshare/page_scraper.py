"""Scrape the public creator-program page for live-season standings.

Used as a fallback snapshot source when the ranking API returns nothing.
The page layout is undocumented, so parsing is best effort: table rows first,
then a regex pass over the raw text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

CREATOR_PROGRAM_URL = "https://www.zama.org/programs/creator-program"
REQUEST_TIMEOUT_S = 20.0
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

_HANDLE_RE = re.compile(r"@[\w]+")
_MEDALS = {"🥇": 1, "🥈": 2, "🥉": 3}

# "<medal or rank> <country code> <name> @handle <score>" then the plain form.
_TEXT_PATTERNS = (
    re.compile(r"(🥇|🥈|🥉|\d+)\s+[A-Z]{2}\s+([\w ]+?)\s+(@\w+)\s+([\d.]+)"),
    re.compile(r"(\d+)\s+([\w ]+?)\s+(@\w+)\s+([\d.]+)"),
)


@dataclass(frozen=True)
class ScrapedRow:
    """One leaderboard line recovered from the HTML page."""

    rank: int
    username: str
    handle: str
    mindshare: float


def _parse_rank(text: str) -> int | None:
    for medal, rank in _MEDALS.items():
        if medal in text:
            return rank
    digits = re.sub(r"\D", "", text)
    return int(digits) if digits else None


def _parse_float(text: str) -> float:
    try:
        return float(text.strip().rstrip("%"))
    except ValueError:
        return 0.0


def _parse_table(soup: BeautifulSoup) -> list[ScrapedRow]:
    rows: list[ScrapedRow] = []
    for tr in soup.find_all("tr"):
        cells = tr.find_all("td")
        if len(cells) < 3:
            continue
        rank = _parse_rank(cells[0].get_text(strip=True))
        if rank is None:
            continue

        name_cell = cells[1]
        name_text = name_cell.get_text(" ", strip=True)
        span = name_cell.find("span")
        username = span.get_text(strip=True) if span else name_text.split("@")[0].strip()
        handle_match = _HANDLE_RE.search(name_text)
        handle = handle_match.group(0) if handle_match else f"@user{rank}"

        mindshare = _parse_float(cells[2].get_text(strip=True))
        if username and mindshare > 0:
            rows.append(
                ScrapedRow(rank=rank, username=username, handle=handle, mindshare=mindshare)
            )
    return rows


def _parse_text(text: str) -> list[ScrapedRow]:
    for pattern in _TEXT_PATTERNS:
        rows: list[ScrapedRow] = []
        for match in pattern.finditer(text):
            rank = _parse_rank(match.group(1))
            username = match.group(2).strip()
            mindshare = _parse_float(match.group(4))
            if rank is None or not username or mindshare <= 0:
                continue
            rows.append(
                ScrapedRow(rank=rank, username=username, handle=match.group(3), mindshare=mindshare)
            )
        if rows:
            return rows
    return []


def parse_leaderboard_html(html: str) -> list[ScrapedRow]:
    """Extract leaderboard rows from the creator-program page.

    Tries ``<tr>`` rows with at least three ``<td>`` cells (rank, name with
    ``@handle``, score).  When no row parses, falls back to scanning the
    page text.  Rows with a non-positive score are dropped.

    Returns:
        Rows sorted by rank; empty if nothing could be recognised.
    """
    soup = BeautifulSoup(html, "html.parser")
    rows = _parse_table(soup)
    if not rows:
        logger.info("Table parsing found no rows, falling back to text parsing")
        rows = _parse_text(soup.get_text(" "))
    return sorted(rows, key=lambda r: r.rank)


async def fetch_creator_page(
    url: str = CREATOR_PROGRAM_URL,
    *,
    timeout_s: float = REQUEST_TIMEOUT_S,
    user_agent: str = BROWSER_USER_AGENT,
) -> str | None:
    """Download the creator-program page, or ``None`` on any failure."""
    headers = {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }
    try:
        async with httpx.AsyncClient(timeout=timeout_s, headers=headers) as client:
            response = await client.get(url)
            response.raise_for_status()
        return response.text
    except httpx.HTTPStatusError as exc:
        logger.warning("Creator page returned status %d", exc.response.status_code)
        return None
    except httpx.RequestError as exc:
        logger.warning("Creator page fetch failed: %s", exc)
        return None


async def scrape_creator_page(
    url: str = CREATOR_PROGRAM_URL,
    *,
    timeout_s: float = REQUEST_TIMEOUT_S,
    user_agent: str = BROWSER_USER_AGENT,
) -> list[ScrapedRow]:
    """Fetch and parse the creator-program page in one step."""
    html = await fetch_creator_page(url, timeout_s=timeout_s, user_agent=user_agent)
    if html is None:
        return []
    rows = parse_leaderboard_html(html)
    logger.info("Scraped %d rows from %s", len(rows), url)
    return rows
