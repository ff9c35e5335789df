"""Load a historical season snapshot from CSV into the store.

Usage::

    python -m backend.api.seed data/s1.csv --season s1
    python -m backend.api.seed data/s4.csv --season s4 --unit score
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from mindshare.batch_io import parse_snapshot_csv
from mindshare.seasons import MindshareUnit, Season, default_unit
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.api.db.database import async_session_factory, session_scope
from backend.api.schemas.leaderboard import EntryInput
from backend.api.services.leaderboard_store import save_entries

logger = logging.getLogger(__name__)


async def seed_from_csv(
    path: Path,
    season: Season,
    unit: MindshareUnit | None = None,
    *,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> int:
    """Store the rows of *path* as one new batch for *season*."""
    rows = parse_snapshot_csv(str(path))
    if not rows:
        logger.warning("No usable rows in %s", path)
        return 0

    entries = [
        EntryInput(rank=r.rank, username=r.username, handle=r.handle, mindshare=r.mindshare)
        for r in rows
    ]
    async with session_scope(session_factory) as db:
        return await save_entries(db, season, entries, unit=unit or default_unit(season))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed a season snapshot from CSV")
    parser.add_argument("csv", type=Path, help="CSV with rank,username,handle,mindshare")
    parser.add_argument("--season", required=True, choices=[s.value for s in Season])
    parser.add_argument(
        "--unit",
        choices=[u.value for u in MindshareUnit],
        help="What the mindshare column measures (default depends on season)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    season = Season(args.season)
    unit = MindshareUnit(args.unit) if args.unit else None
    saved = asyncio.run(seed_from_csv(args.csv, season, unit))
    logger.info("Seeded %d %s entries from %s", saved, season, args.csv)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
