"""Load historical snapshot batches from CSV.

Closed seasons are seeded from tables extracted offline (prize PDFs and the
like).  The extraction itself is out of band; this module only reads its
output, a CSV with a header row::

    rank,username,handle,mindshare
    1,Alice,https://x.com/alice,5000
    2,Bob,@bob,2500
"""

from __future__ import annotations

import io
from dataclasses import dataclass

import pandas as pd

REQUIRED_COLUMNS = ("rank", "username", "handle")


@dataclass(frozen=True)
class SnapshotRow:
    """A single ranked row ready to be stored."""

    rank: int
    username: str
    handle: str
    mindshare: float


def parse_snapshot_csv(source: str | io.IOBase) -> list[SnapshotRow]:
    """Parse a snapshot CSV file.

    Parameters
    ----------
    source:
        File path or file-like object containing the CSV data.

    Returns
    -------
    Rows sorted by rank.  Rows without a rank or handle, or with a
    non-positive rank, are dropped.  A missing or unparseable ``mindshare``
    becomes ``0.0`` and a missing ``username`` falls back to the handle.
    """
    df = pd.read_csv(source, dtype=str, keep_default_na=False)  # type: ignore[arg-type]
    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        msg = f"Snapshot CSV is missing column(s): {', '.join(missing)}"
        raise ValueError(msg)

    if "mindshare" not in df.columns:
        df["mindshare"] = ""

    df["handle"] = df["handle"].str.strip()
    df["username"] = df["username"].str.strip()
    df["rank"] = pd.to_numeric(df["rank"], errors="coerce")
    # Prize columns are often formatted like "$1,250"
    df["mindshare"] = pd.to_numeric(
        df["mindshare"].str.replace(r"[$,\s]", "", regex=True), errors="coerce"
    ).fillna(0.0)

    df = df.dropna(subset=["rank"])
    df = df[(df["rank"] > 0) & (df["handle"] != "")]
    df = df.sort_values("rank", kind="stable").reset_index(drop=True)

    return [
        SnapshotRow(
            rank=int(row.rank),
            username=row.username or row.handle,
            handle=row.handle,
            mindshare=float(row.mindshare),
        )
        for row in df.itertuples(index=False)
    ]
