"""Tests for the git log parser."""

from datetime import datetime, timedelta, timezone

import pytest

from git_moar.exceptions import LogParseError
from git_moar.history.models import CommitRecord, FileChange
from git_moar.history.parser import (
    DEFAULT_FORMAT,
    LEGACY_FORMAT,
    LogFormat,
    parse_git_log,
    parse_log,
    parse_timestamp,
)


class TestLogFormat:
    def test_default_pretty_uses_unit_separator_and_refs(self):
        assert DEFAULT_FORMAT.pretty == "%H%x1f%an%x1f%ae%x1f%aI%x1f%s%x1f%D"

    def test_legacy_pretty_is_pipe_delimited(self):
        assert LEGACY_FORMAT.pretty == "%H|%an|%ae|%ad|%s"

    def test_custom_separator_without_refs(self):
        assert LogFormat(separator=";", include_refs=False).pretty == "%H;%an;%ae;%aI;%s"


class TestParseTimestamp:
    def test_strict_iso(self):
        ts = parse_timestamp("2024-01-15T10:30:00+01:00")
        assert ts == datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)
        assert ts.utcoffset() == timedelta(hours=1)

    def test_git_iso_format(self):
        ts = parse_timestamp("2024-01-15 10:30:00 +0100")
        assert ts is not None
        assert ts.utcoffset() == timedelta(hours=1)
        assert ts.hour == 10

    def test_naive_is_utc(self):
        ts = parse_timestamp("2024-01-15T10:30:00")
        assert ts.tzinfo is not None
        assert ts.utcoffset() == timedelta(0)

    def test_garbage_returns_none(self):
        assert parse_timestamp("yesterday-ish") is None
        assert parse_timestamp("") is None


class TestParseLog:
    def test_round_trip_preserves_records(self, commit_factory, log_builder, base_time):
        records = [
            commit_factory(
                id=f"{i:040x}",
                email=f"dev{i % 3}@x.com",
                name=f"Dev {i % 3}",
                when=base_time - timedelta(hours=i),
                files=[(f"src/mod{j}.py", i + j, j) for j in range(i % 4)],
                summary=f"Change number {i}",
            )
            for i in range(12)
        ]

        result = parse_log(log_builder(records))

        assert len(result.records) == len(records)
        assert result.skipped_lines == 0
        for parsed, expected in zip(result.records, records):
            assert parsed.id == expected.id
            assert parsed.author_email == expected.author_email
            assert parsed.timestamp == expected.timestamp
            assert parsed.files == expected.files
            assert parsed.additions == sum(f.additions for f in expected.files)
            assert parsed.deletions == sum(f.deletions for f in expected.files)

    def test_preserves_emission_order(self, alice_bob_log):
        ids = [r.id for r in parse_git_log(alice_bob_log)]
        assert ids == ["c3" * 20, "c2" * 20, "c1" * 20]

    def test_commit_without_files(self):
        text = "\x1f".join(["abc", "Alice", "a@x.com", "2024-01-15T10:00:00+00:00", "Merge x", ""])
        records = parse_git_log(text)
        assert len(records) == 1
        assert records[0].files == ()
        assert records[0].additions == 0

    def test_consecutive_headers(self):
        header = "\x1f".join(["{id}", "Alice", "a@x.com", "2024-01-15T10:00:00+00:00", "msg", ""])
        text = "\n".join([header.format(id="one"), header.format(id="two"), "3\t1\tfile.py"])
        records = parse_git_log(text)
        assert [r.id for r in records] == ["one", "two"]
        assert records[0].files == ()
        assert records[1].additions == 3

    def test_binary_files_are_flagged_with_zero_counts(self):
        header = "\x1f".join(["abc", "Alice", "a@x.com", "2024-01-15T10:00:00+00:00", "Add logo", ""])
        text = f"{header}\n-\t-\tassets/logo.png\n4\t0\tREADME.md\n"
        record = parse_git_log(text)[0]
        logo, readme = record.files
        assert logo == FileChange("assets/logo.png", 0, 0, binary=True)
        assert not readme.binary
        assert record.additions == 4

    def test_summary_containing_separator_survives(self):
        sep = "\x1f"
        text = sep.join(["abc", "Alice", "a@x.com", "2024-01-15T10:00:00+00:00", f"odd{sep}summary", "HEAD -> main"])
        record = parse_git_log(text)[0]
        assert record.summary == f"odd{sep}summary"
        assert record.refs == "HEAD -> main"

    def test_legacy_pipe_format(self):
        text = (
            "abc|Alice|a@x.com|2024-01-15 10:00:00 +0000|fix: login | logout\n"
            "10\t2\tauth.py\n"
        )
        record = parse_git_log(text, LEGACY_FORMAT)[0]
        assert record.summary == "fix: login | logout"
        assert record.refs == ""
        assert record.additions == 10

    def test_malformed_header_drops_commit_and_its_files(self):
        good = "\x1f".join(["good", "Alice", "a@x.com", "2024-01-15T10:00:00+00:00", "ok", ""])
        bad = "\x1f".join(["bad", "Alice", "a@x.com", "not a date", "broken", ""])
        text = "\n".join([good, "1\t1\ta.py", bad, "5\t5\tb.py", "7\t0\tc.py"])

        result = parse_log(text)

        assert [r.id for r in result.records] == ["good"]
        assert result.records[0].additions == 1
        assert result.skipped_lines == 3

    def test_unrecognised_lines_are_counted(self):
        header = "\x1f".join(["abc", "Alice", "a@x.com", "2024-01-15T10:00:00+00:00", "msg", ""])
        text = "\n".join(["warning: something", header, "1\t0\ta.py", "stray text", ""])
        result = parse_log(text)
        assert len(result.records) == 1
        assert result.skipped_lines == 2

    def test_file_lines_before_any_header_are_skipped(self):
        result = parse_log("3\t1\torphan.py\n")
        assert result.records == ()
        assert result.skipped_lines == 1

    def test_empty_input(self):
        result = parse_log("")
        assert result.records == ()
        assert result.skipped_lines == 0


class TestCommitRecordInvariant:
    def test_build_derives_totals(self):
        record = CommitRecord.build(
            id="abc",
            author="Alice",
            author_email="a@x.com",
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
            summary="x",
            files=[FileChange("a", 3, 1), FileChange("b", 2, 2)],
        )
        assert (record.additions, record.deletions, record.churn) == (5, 3, 8)

    def test_mismatched_totals_raise(self):
        with pytest.raises(LogParseError):
            CommitRecord(
                id="abc",
                author="Alice",
                author_email="a@x.com",
                timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
                summary="x",
                additions=10,
                files=(FileChange("a", 3, 0),),
            )
