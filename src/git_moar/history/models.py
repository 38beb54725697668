"""Data models for commit history and its aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ..exceptions import LogParseError

UNKNOWN_BRANCH = "unknown"


@dataclass(frozen=True)
class FileChange:
    filename: str  # repo-relative path as emitted by git, renames not normalized
    additions: int
    deletions: int
    binary: bool = False  # numstat reported "-"; counts are 0

    @property
    def churn(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class CommitRecord:
    """One logical commit.

    ``author_email`` is the identity key; ``author`` is display-only and may
    vary in spelling between commits of the same person.
    """

    id: str  # full commit hash
    author: str
    author_email: str
    timestamp: datetime  # timezone-aware authored time
    summary: str
    branch: str = UNKNOWN_BRANCH
    refs: str = ""  # raw %D decoration, may be empty
    additions: int = 0
    deletions: int = 0
    files: tuple[FileChange, ...] = ()

    def __post_init__(self) -> None:
        if self.additions != sum(f.additions for f in self.files):
            raise LogParseError(self.id, "additions do not match file changes")
        if self.deletions != sum(f.deletions for f in self.files):
            raise LogParseError(self.id, "deletions do not match file changes")

    @classmethod
    def build(
        cls,
        id: str,
        author: str,
        author_email: str,
        timestamp: datetime,
        summary: str,
        files: Iterable[FileChange] = (),
        branch: str = UNKNOWN_BRANCH,
        refs: str = "",
    ) -> "CommitRecord":
        """Create a record whose totals are derived from ``files``."""
        files = tuple(files)
        return cls(
            id=id,
            author=author,
            author_email=author_email,
            timestamp=timestamp,
            summary=summary,
            branch=branch,
            refs=refs,
            additions=sum(f.additions for f in files),
            deletions=sum(f.deletions for f in files),
            files=files,
        )

    @property
    def churn(self) -> int:
        return self.additions + self.deletions

    @property
    def short_id(self) -> str:
        return self.id[:7]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author": self.author,
            "author_email": self.author_email,
            "timestamp": self.timestamp.isoformat(),
            "summary": self.summary,
            "branch": self.branch,
            "additions": self.additions,
            "deletions": self.deletions,
            "files": [
                {
                    "filename": f.filename,
                    "additions": f.additions,
                    "deletions": f.deletions,
                    "binary": f.binary,
                }
                for f in self.files
            ],
        }


@dataclass(frozen=True)
class TimingStats:
    avg_hours: int = 0
    avg_days: float = 0.0  # derived from avg_hours / 24, one decimal

    def to_dict(self) -> dict:
        return {"avg_hours": self.avg_hours, "avg_days": self.avg_days}


@dataclass(frozen=True)
class AuthorSummary:
    email: str
    display_name: str  # name on the author's most recent commit
    commits: tuple[CommitRecord, ...]  # most recent first
    total_commits: int
    total_additions: int
    total_deletions: int
    avg_additions: int
    avg_deletions: int
    avg_time_between_commits: TimingStats = field(default_factory=TimingStats)

    def to_dict(self, include_commits: bool = False) -> dict:
        data = {
            "email": self.email,
            "display_name": self.display_name,
            "total_commits": self.total_commits,
            "total_additions": self.total_additions,
            "total_deletions": self.total_deletions,
            "avg_additions": self.avg_additions,
            "avg_deletions": self.avg_deletions,
            "avg_time_between_commits": self.avg_time_between_commits.to_dict(),
        }
        if include_commits:
            data["commits"] = [c.id for c in self.commits]
        return data


@dataclass(frozen=True)
class ProjectSummary:
    total_commits: int = 0
    total_authors: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    avg_additions: int = 0
    avg_deletions: int = 0
    avg_time_between_commits: TimingStats = field(default_factory=TimingStats)

    def to_dict(self) -> dict:
        return {
            "total_commits": self.total_commits,
            "total_authors": self.total_authors,
            "total_additions": self.total_additions,
            "total_deletions": self.total_deletions,
            "avg_additions": self.avg_additions,
            "avg_deletions": self.avg_deletions,
            "avg_time_between_commits": self.avg_time_between_commits.to_dict(),
        }
