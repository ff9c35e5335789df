"""SQLAlchemy 2.0 async ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class LeaderboardEntry(Base):
    """One row of a season snapshot.

    Rows are append-only.  A scrape batch is the set of rows sharing one
    ``scraped_at``; the latest batch of a season supersedes earlier ones.
    Ranks are meant to be unique within a batch but this is not enforced.
    """

    __tablename__ = "leaderboard_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    season: Mapped[str] = mapped_column(String, nullable=False)  # s1 .. s5
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    username: Mapped[str] = mapped_column(String, nullable=False)
    handle: Mapped[str] = mapped_column(String, nullable=False)  # as ingested
    mindshare: Mapped[float] = mapped_column(Float, nullable=False)
    mindshare_unit: Mapped[str] = mapped_column(String, nullable=False, default="score")
    scraped_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_leaderboard_entries_season", "season"),
        Index("ix_leaderboard_entries_season_scraped_at", "season", "scraped_at"),
    )
