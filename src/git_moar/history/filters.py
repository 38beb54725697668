"""Config-driven author and path filters applied before analysis."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import PurePosixPath
from typing import Sequence

from ..config import FilterConfig
from ..logging_config import get_logger
from .models import CommitRecord, FileChange

logger = get_logger(__name__)


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def _keep_file(change: FileChange, filters: FilterConfig) -> bool:
    name = change.filename
    basename = PurePosixPath(name).name
    for pattern in filters.exclude_patterns:
        if fnmatch(name, pattern) or fnmatch(basename, pattern):
            return False
    if filters.include_extensions is not None:
        allowed = {_normalize_extension(e) for e in filters.include_extensions}
        return PurePosixPath(name).suffix.lower() in allowed
    return True


def _excluded_author(commit: CommitRecord, excluded: set[str]) -> bool:
    return commit.author_email.lower() in excluded or commit.author.lower() in excluded


def apply_filters(commits: Sequence[CommitRecord], filters: FilterConfig) -> list[CommitRecord]:
    """Drop excluded authors and file entries; totals are recomputed.

    Commits left with no files after path filtering are kept: an empty commit
    still counts toward commit totals and timing.
    """
    excluded = {a.lower() for a in filters.exclude_authors}
    path_filtering = bool(filters.exclude_patterns) or filters.include_extensions is not None

    if not excluded and not path_filtering:
        return list(commits)

    result: list[CommitRecord] = []
    dropped = 0
    for commit in commits:
        if excluded and _excluded_author(commit, excluded):
            dropped += 1
            continue
        if path_filtering:
            kept = [f for f in commit.files if _keep_file(f, filters)]
            if len(kept) != len(commit.files):
                commit = CommitRecord.build(
                    id=commit.id,
                    author=commit.author,
                    author_email=commit.author_email,
                    timestamp=commit.timestamp,
                    summary=commit.summary,
                    files=kept,
                    branch=commit.branch,
                    refs=commit.refs,
                )
        result.append(commit)

    if dropped:
        logger.debug("Filtered out %d commits by excluded authors", dropped)
    return result
