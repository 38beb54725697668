"""Fold a commit sequence into per-author and per-project summaries."""

from __future__ import annotations

from typing import Sequence

from ..math import Statistics, round_half_up, round_int
from .models import AuthorSummary, CommitRecord, ProjectSummary, TimingStats


def timing_stats(commits: Sequence[CommitRecord]) -> TimingStats:
    """Mean gap between consecutive commits.

    Hours are rounded to an int first; days derive from the rounded hours so
    the two figures never drift apart.
    """
    if len(commits) < 2:
        return TimingStats()

    stamps = sorted(c.timestamp.timestamp() for c in commits)
    gaps_hours = [d / 3600.0 for d in Statistics.diffs(stamps)]
    avg_hours = round_int(Statistics.mean(gaps_hours))
    return TimingStats(avg_hours=avg_hours, avg_days=round_half_up(avg_hours / 24, 1))


def _average(total: int, count: int) -> int:
    return round_int(total / count) if count else 0


def _summarize_author(email: str, commits: list[CommitRecord]) -> AuthorSummary:
    ordered = sorted(commits, key=lambda c: c.timestamp, reverse=True)
    total_additions = sum(c.additions for c in ordered)
    total_deletions = sum(c.deletions for c in ordered)
    count = len(ordered)
    return AuthorSummary(
        email=email,
        display_name=ordered[0].author if ordered else email,
        commits=tuple(ordered),
        total_commits=count,
        total_additions=total_additions,
        total_deletions=total_deletions,
        avg_additions=_average(total_additions, count),
        avg_deletions=_average(total_deletions, count),
        avg_time_between_commits=timing_stats(ordered),
    )


def aggregate_by_author(commits: Sequence[CommitRecord]) -> list[AuthorSummary]:
    """Group by author email, in order of first appearance."""
    groups: dict[str, list[CommitRecord]] = {}
    for commit in commits:
        groups.setdefault(commit.author_email, []).append(commit)
    return [_summarize_author(email, group) for email, group in groups.items()]


def aggregate_project(commits: Sequence[CommitRecord]) -> ProjectSummary:
    total_additions = sum(c.additions for c in commits)
    total_deletions = sum(c.deletions for c in commits)
    count = len(commits)
    return ProjectSummary(
        total_commits=count,
        total_authors=len({c.author_email for c in commits}),
        total_additions=total_additions,
        total_deletions=total_deletions,
        avg_additions=_average(total_additions, count),
        avg_deletions=_average(total_deletions, count),
        avg_time_between_commits=timing_stats(commits),
    )
