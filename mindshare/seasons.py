"""Season, timeframe and score-unit vocabulary shared by every layer.

Seasons ``s1``-``s4`` are closed and served from stored snapshots; ``s5`` is
the live season, read from the upstream ranking API over a rolling window.
"""

from __future__ import annotations

from enum import StrEnum


class Season(StrEnum):
    """The five fixed ranking periods of the creator program."""

    S1 = "s1"
    S2 = "s2"
    S3 = "s3"
    S4 = "s4"
    S5 = "s5"

    @property
    def is_historical(self) -> bool:
        return self is not LIVE_SEASON


class Timeframe(StrEnum):
    """Rolling window used by live-season queries."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"


class MindshareUnit(StrEnum):
    """What the ``mindshare`` number of a row measures."""

    PRIZE_USD = "prize_usd"
    SCORE = "score"


LIVE_SEASON = Season.S5
HISTORICAL_SEASONS: tuple[Season, ...] = (Season.S1, Season.S2, Season.S3, Season.S4)
DEFAULT_TIMEFRAME = Timeframe.MONTH

# Order in which live windows are consulted when resolving a user's identity.
TIMEFRAME_PRECEDENCE: tuple[Timeframe, ...] = (Timeframe.MONTH, Timeframe.WEEK, Timeframe.DAY)


def parse_season(value: str | None) -> Season | None:
    """Return the :class:`Season` for *value*, or ``None`` if unknown."""
    if not value:
        return None
    try:
        return Season(value.strip().lower())
    except ValueError:
        return None


def parse_timeframe(value: str | None) -> Timeframe:
    """Map a ``range`` query value to a :class:`Timeframe`.

    Anything other than ``24h``, ``7d`` or ``30d`` falls back to 30 days.
    """
    if value:
        try:
            return Timeframe(value.strip().lower())
        except ValueError:
            pass
    return DEFAULT_TIMEFRAME


def default_unit(season: Season) -> MindshareUnit:
    """Closed seasons were seeded from prize tables; the live season is a score."""
    return MindshareUnit.PRIZE_USD if season.is_historical else MindshareUnit.SCORE
