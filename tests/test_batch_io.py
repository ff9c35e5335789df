"""Tests for mindshare.batch_io."""

from __future__ import annotations

import io

import pytest

from mindshare.batch_io import SnapshotRow, parse_snapshot_csv


def _csv(text: str) -> io.StringIO:
    return io.StringIO(text.strip() + "\n")


class TestParseSnapshotCsv:
    def test_basic(self) -> None:
        rows = parse_snapshot_csv(
            _csv(
                """
rank,username,handle,mindshare
2,Bob,@bob,2500
1,Alice,https://x.com/alice,5000
"""
            )
        )
        assert rows == [
            SnapshotRow(rank=1, username="Alice", handle="https://x.com/alice", mindshare=5000.0),
            SnapshotRow(rank=2, username="Bob", handle="@bob", mindshare=2500.0),
        ]

    def test_prize_formatting_is_stripped(self) -> None:
        rows = parse_snapshot_csv(_csv('rank,username,handle,mindshare\n1,A,@a,"$1,250"'))
        assert rows[0].mindshare == 1250.0

    def test_header_case_and_whitespace(self) -> None:
        rows = parse_snapshot_csv(_csv(" Rank , Username ,HANDLE\n3,Carol,@carol"))
        assert rows == [SnapshotRow(rank=3, username="Carol", handle="@carol", mindshare=0.0)]

    def test_bad_rows_dropped(self) -> None:
        rows = parse_snapshot_csv(
            _csv(
                """
rank,username,handle,mindshare
abc,Nope,@nope,1
0,Zero,@zero,1
4,NoHandle,,1
5,,@anon,oops
"""
            )
        )
        assert rows == [SnapshotRow(rank=5, username="@anon", handle="@anon", mindshare=0.0)]

    def test_missing_required_column(self) -> None:
        with pytest.raises(ValueError, match="handle"):
            parse_snapshot_csv(_csv("rank,username,mindshare\n1,A,5"))

    def test_from_path(self, tmp_path) -> None:
        path = tmp_path / "s1.csv"
        path.write_text("rank,username,handle,mindshare\n1,Alice,@alice,10\n")
        rows = parse_snapshot_csv(str(path))
        assert len(rows) == 1
        assert rows[0].handle == "@alice"
