"""create leaderboard entries

Revision ID: 5e0a1c7d9b21
Revises:
Create Date: 2026-10-19 10:12:04.318806

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5e0a1c7d9b21"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_NOW = sa.text("now()")


def upgrade() -> None:
    """Create the snapshot table and its season indexes."""
    op.create_table(
        "leaderboard_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("season", sa.String(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("handle", sa.String(), nullable=False),
        sa.Column("mindshare", sa.Float(), nullable=False),
        sa.Column(
            "mindshare_unit",
            sa.String(),
            nullable=False,
            server_default="score",
        ),
        sa.Column(
            "scraped_at",
            sa.DateTime(timezone=True),
            server_default=_NOW,
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leaderboard_entries_season", "leaderboard_entries", ["season"])
    op.create_index(
        "ix_leaderboard_entries_season_scraped_at",
        "leaderboard_entries",
        ["season", "scraped_at"],
    )


def downgrade() -> None:
    """Drop the snapshot table."""
    op.drop_index("ix_leaderboard_entries_season_scraped_at", table_name="leaderboard_entries")
    op.drop_index("ix_leaderboard_entries_season", table_name="leaderboard_entries")
    op.drop_table("leaderboard_entries")
