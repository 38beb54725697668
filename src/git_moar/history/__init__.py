"""Commit history: parsing, branch attribution and aggregation."""

from .aggregate import aggregate_by_author, aggregate_project, timing_stats
from .branches import (
    BranchAttributor,
    BranchResolver,
    GitBranchResolver,
    branch_from_decoration,
    choose_branch,
    normalize_branch_candidates,
)
from .extractor import GitLogExtractor, RepoInfo, branch_url, commit_url, normalize_remote_url
from .filters import apply_filters
from .models import (
    UNKNOWN_BRANCH,
    AuthorSummary,
    CommitRecord,
    FileChange,
    ProjectSummary,
    TimingStats,
)
from .parser import DEFAULT_FORMAT, LEGACY_FORMAT, LogFormat, ParseResult, parse_git_log, parse_log
from .periods import parse_period_to_days, parse_period_to_git_since

__all__ = [
    "UNKNOWN_BRANCH",
    "AuthorSummary",
    "BranchAttributor",
    "BranchResolver",
    "CommitRecord",
    "DEFAULT_FORMAT",
    "FileChange",
    "GitBranchResolver",
    "GitLogExtractor",
    "LEGACY_FORMAT",
    "LogFormat",
    "ParseResult",
    "ProjectSummary",
    "RepoInfo",
    "TimingStats",
    "aggregate_by_author",
    "aggregate_project",
    "apply_filters",
    "branch_from_decoration",
    "branch_url",
    "choose_branch",
    "commit_url",
    "normalize_branch_candidates",
    "normalize_remote_url",
    "parse_git_log",
    "parse_log",
    "parse_period_to_days",
    "parse_period_to_git_since",
    "timing_stats",
]
