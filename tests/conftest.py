"""Shared test fixtures for git-moar tests."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence

import pytest

from git_moar.history.models import CommitRecord, FileChange
from git_moar.history.parser import DEFAULT_FORMAT, LogFormat

BASE_TIME = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)  # a Monday


def make_commit(
    id: str = "a" * 40,
    email: str = "alice@x.com",
    name: str = "Alice",
    when: Optional[datetime] = None,
    files: Sequence[tuple] = (),
    summary: str = "Update things",
    refs: str = "",
    branch: str = "unknown",
) -> CommitRecord:
    """Build a CommitRecord; ``files`` holds (filename, additions, deletions) tuples."""
    return CommitRecord.build(
        id=id,
        author=name,
        author_email=email,
        timestamp=when or BASE_TIME,
        summary=summary,
        files=[FileChange(f, a, d) for f, a, d in files],
        branch=branch,
        refs=refs,
    )


def header_line(
    commit_id: str,
    name: str,
    email: str,
    date: str,
    summary: str,
    refs: str = "",
    log_format: LogFormat = DEFAULT_FORMAT,
) -> str:
    fields = [commit_id, name, email, date, summary]
    if log_format.include_refs:
        fields.append(refs)
    return log_format.separator.join(fields)


def build_log(records: Iterable[CommitRecord], log_format: LogFormat = DEFAULT_FORMAT) -> str:
    """Render records the way ``git log --pretty=format:... --numstat`` prints them."""
    blocks = []
    for r in records:
        lines = [
            header_line(
                r.id, r.author, r.author_email, r.timestamp.isoformat(), r.summary, r.refs, log_format
            )
        ]
        for f in r.files:
            added = "-" if f.binary else str(f.additions)
            deleted = "-" if f.binary else str(f.deletions)
            lines.append(f"{added}\t{deleted}\t{f.filename}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


class FakeResolver:
    """In-memory BranchResolver that records how it was called."""

    def __init__(self, branches=None, current=None, error=None):
        self.branches = branches or {}
        self.current = current
        self.error = error
        self.calls = []

    def resolve_branches(self, commit_ids):
        ids = list(commit_ids)
        self.calls.append(ids)
        if self.error is not None:
            raise self.error
        return {cid: list(self.branches.get(cid, [])) for cid in ids}

    def current_branch(self):
        return self.current


@pytest.fixture
def alice_bob_commits():
    """Two commits by alice (+50/-10, +20/-5) and one by bob (+5/-0)."""
    return [
        make_commit(
            id="c3" * 20,
            email="bob@x.com",
            name="Bob",
            when=BASE_TIME + timedelta(hours=30),
            files=[("src/app.py", 5, 0)],
            summary="Add config loader",
        ),
        make_commit(
            id="c2" * 20,
            when=BASE_TIME + timedelta(hours=12),
            files=[("src/app.py", 15, 5), ("README.md", 5, 0)],
            summary="fix: handle empty input",
        ),
        make_commit(
            id="c1" * 20,
            when=BASE_TIME,
            files=[("src/app.py", 50, 10)],
            summary="feat: initial app",
        ),
    ]


@pytest.fixture
def alice_bob_log(alice_bob_commits):
    return build_log(alice_bob_commits)


@pytest.fixture
def base_time():
    """Monday 2024-01-15 10:00 UTC."""
    return BASE_TIME


@pytest.fixture
def commit_factory():
    """``make_commit`` as a fixture."""
    return make_commit


@pytest.fixture
def log_builder():
    """``build_log`` as a fixture."""
    return build_log


@pytest.fixture
def resolver_factory():
    """``FakeResolver`` as a fixture."""
    return FakeResolver
