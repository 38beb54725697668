"""Per-repository analysis and multi-repository scans.

``analyze_repository`` runs the whole pipeline for one repository: log query,
parsing, filters, branch attribution, then every analytic over the same
immutable commit sequence. It fails soft: a path that is not a repository, a
failed log query or an empty period all yield an empty report.

``scan_repositories`` finds repositories under a directory and analyzes them
on a bounded thread pool. Each analysis builds its own report.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

from .analytics.classifier import (
    MessageQuality,
    ReferencedIssue,
    TypeStat,
    message_quality,
    referenced_issues,
    type_stats,
)
from .analytics.hotspots import FileHotspot, HotspotStats, detect_hotspots, hotspot_recommendations, hotspot_stats
from .analytics.productivity import ProductivityInsights, productivity_insights, productivity_recommendations
from .analytics.quality import (
    QualityMetrics,
    TechnicalDebt,
    calculate_quality_metrics,
    health_recommendations,
    technical_debt,
)
from .analytics.recommendations import Recommendation
from .config import DEFAULT_CONFIG, ReportConfig
from .exceptions import AnalysisError, InvalidPathError
from .history.aggregate import aggregate_by_author, aggregate_project
from .history.branches import BranchAttributor, BranchResolver, GitBranchResolver
from .history.extractor import GitLogExtractor, RepoInfo, branch_url, commit_url
from .history.filters import apply_filters
from .history.models import AuthorSummary, CommitRecord, ProjectSummary
from .history.parser import LogFormat, parse_log
from .history.periods import parse_period_to_days, parse_period_to_git_since
from .loc import LocReport, count_lines
from .logging_config import get_logger

logger = get_logger(__name__)

SKIP_SCAN_DIRS = frozenset({"node_modules", "vendor"})


class LogSource(Protocol):
    """What the pipeline needs from a git adapter; ``GitLogExtractor`` is one."""

    log_format: LogFormat

    def is_git_repo(self) -> bool:
        ...

    def log(
        self,
        since: Optional[str] = None,
        until: Optional[str] = None,
        branches: Sequence[str] = (),
        all_branches: bool = False,
    ) -> Optional[str]:
        ...

    def repo_info(self) -> RepoInfo:
        ...


@dataclass(frozen=True)
class RepositoryReport:
    repo: RepoInfo
    commits: tuple[CommitRecord, ...] = ()  # most recent first
    authors: tuple[AuthorSummary, ...] = ()
    project: ProjectSummary = field(default_factory=ProjectSummary)
    period: Optional[str] = None
    period_days: float = 0.0
    skipped_lines: int = 0
    loc: Optional[LocReport] = None
    commit_types: tuple[TypeStat, ...] = ()
    message_quality: Optional[MessageQuality] = None
    issues: tuple[ReferencedIssue, ...] = ()
    quality: Optional[QualityMetrics] = None
    productivity: Optional[ProductivityInsights] = None
    hotspots: tuple[FileHotspot, ...] = ()
    hotspot_stats: Optional[HotspotStats] = None
    technical_debt: Optional[TechnicalDebt] = None
    recommendations: tuple[Recommendation, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.commits

    @property
    def total_loc(self) -> int:
        return self.loc.total if self.loc else 0

    def to_dict(self) -> dict:
        url = self.repo.url
        commits = []
        for c in self.commits:
            data = c.to_dict()
            data["url"] = commit_url(url, c.id)
            data["branch_url"] = branch_url(url, c.branch)
            commits.append(data)

        return {
            "repo": self.repo.to_dict(),
            "period": self.period,
            "period_days": self.period_days,
            "skipped_lines": self.skipped_lines,
            "stats": self.project.to_dict(),
            "users": [a.to_dict(include_commits=True) for a in self.authors],
            "commits": commits,
            "loc": self.loc.to_dict() if self.loc else None,
            "commit_types": [t.to_dict() for t in self.commit_types],
            "message_quality": self.message_quality.to_dict() if self.message_quality else None,
            "issues": [i.to_dict() for i in self.issues],
            "quality": self.quality.to_dict() if self.quality else None,
            "productivity": self.productivity.to_dict() if self.productivity else None,
            "hotspots": [h.to_dict() for h in self.hotspots],
            "hotspot_stats": self.hotspot_stats.to_dict() if self.hotspot_stats else None,
            "technical_debt": self.technical_debt.to_dict() if self.technical_debt else None,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


def _span_days(commits: Sequence[CommitRecord]) -> float:
    """Days covered by the commits, at least one."""
    if not commits:
        return 1.0
    stamps = [c.timestamp for c in commits]
    return max(1.0, (max(stamps) - min(stamps)).total_seconds() / 86400.0)


def analyze_repository(
    path: Union[str, Path],
    config: ReportConfig = DEFAULT_CONFIG,
    *,
    since: Optional[str] = None,
    until: Optional[str] = None,
    branches: Sequence[str] = (),
    all_branches: bool = False,
    period: Optional[str] = None,
    extractor: Optional[LogSource] = None,
    resolver: Optional[BranchResolver] = None,
    count_loc: bool = True,
) -> RepositoryReport:
    """Analyze one repository and return its report.

    Args:
        path: Repository working tree
        config: Report configuration
        since: git ``--since`` value; ignored when ``period`` is given
        until: git ``--until`` value
        branches: Refs to include; empty means the checked-out branch
        all_branches: Include every local and remote ref
        period: Shorthand period (``7d``); sets ``since`` and the rate divisor
        extractor: Log source, defaults to a GitLogExtractor for ``path``
        resolver: Branch-containment resolver for the attribution fallback
        count_loc: Count lines of code in the working tree

    Returns:
        The report; ``is_empty`` is True when nothing could be analyzed.
    """
    path = Path(path)
    options = config.analysis
    source = extractor or GitLogExtractor(str(path), timeout=options.git_timeout)
    empty = RepositoryReport(repo=RepoInfo(name=path.resolve().name, path=str(path.resolve())), period=period)

    if not source.is_git_repo():
        logger.warning("Not a git repository, skipping: %s", path)
        return empty

    if period:
        since = parse_period_to_git_since(period)

    try:
        raw = source.log(since=since, until=until, branches=branches, all_branches=all_branches)
        if not raw or not raw.strip():
            logger.info("No commits found in %s", path)
            return empty

        parsed = parse_log(raw, source.log_format)
        logger.debug("Parsed %d commits from %s, %d lines skipped", len(parsed.records), path, parsed.skipped_lines)
        commits = apply_filters(parsed.records, config.filters)
        if not commits:
            logger.info("No commits left after filters in %s", path)
            return empty

        if resolver is None and options.resolve_branches:
            resolver = GitBranchResolver(
                str(path),
                timeout=options.branch_query_timeout,
                workers=options.branch_workers,
                retries=options.branch_query_retries,
            )
        attributor = BranchAttributor(resolver, use_fallback=options.resolve_branches)
        commits = sorted(attributor.attribute(commits), key=lambda c: c.timestamp, reverse=True)
    except AnalysisError as e:
        logger.warning("Analysis failed for %s: %s", path, e)
        return empty

    return _build_report(
        source.repo_info(),
        commits,
        config,
        period=period,
        period_days=parse_period_to_days(period) if period else _span_days(commits),
        skipped_lines=parsed.skipped_lines,
        loc=count_lines(path, detailed=True) if count_loc else None,
    )


def _build_report(
    repo: RepoInfo,
    commits: list[CommitRecord],
    config: ReportConfig,
    period: Optional[str],
    period_days: float,
    skipped_lines: int,
    loc: Optional[LocReport],
) -> RepositoryReport:
    stats_cfg = config.stats
    recommendations: list[Recommendation] = []

    quality = None
    if stats_cfg.show_quality_metrics:
        quality = calculate_quality_metrics(commits, loc.stats if loc else None)
        recommendations.extend(health_recommendations(quality))

    productivity = None
    if stats_cfg.show_productivity:
        productivity = productivity_insights(commits, period_days, config.tzinfo)
        recommendations.extend(productivity_recommendations(productivity))

    hotspots: list[FileHotspot] = []
    if stats_cfg.show_hotspots:
        hotspots = detect_hotspots(commits, config.analysis.hotspot_limit)
        recommendations.extend(hotspot_recommendations(hotspots))

    show_types = config.widgets.show_commit_classification
    jira = config.integrations
    issues = referenced_issues(
        commits,
        jira_base_url=jira.jira_base_url if jira.jira_enabled else None,
        jira_project_key=jira.jira_project_key if jira.jira_enabled else None,
    )

    return RepositoryReport(
        repo=repo,
        commits=tuple(commits),
        authors=tuple(aggregate_by_author(commits)),
        project=aggregate_project(commits),
        period=period,
        period_days=period_days,
        skipped_lines=skipped_lines,
        loc=loc,
        commit_types=tuple(type_stats(commits)) if show_types else (),
        message_quality=message_quality(commits) if show_types else None,
        issues=tuple(issues),
        quality=quality,
        productivity=productivity,
        hotspots=tuple(hotspots),
        hotspot_stats=hotspot_stats(hotspots) if stats_cfg.show_hotspots else None,
        technical_debt=technical_debt(hotspots) if stats_cfg.show_hotspots else None,
        recommendations=tuple(recommendations),
    )


# ---------------------------------------------------------------------------
# Tree scans
# ---------------------------------------------------------------------------


def find_git_repositories(base_dir: Union[str, Path]) -> list[Path]:
    """Directories under ``base_dir`` (inclusive) that contain a ``.git`` entry.

    Hidden directories, ``node_modules`` and ``vendor`` are not descended
    into. Nested repositories are reported too.
    """
    root = Path(base_dir)
    if not root.is_dir():
        logger.warning("Directory not found: %s", root)
        return []

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=lambda e: logger.debug("%s", e)):
        if ".git" in dirnames or ".git" in filenames:
            found.append(Path(dirpath))
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d not in SKIP_SCAN_DIRS)
    return found


def scan_repositories(
    base_dir: Union[str, Path],
    config: ReportConfig = DEFAULT_CONFIG,
    period: str = "7d",
    workers: Optional[int] = None,
) -> list[RepositoryReport]:
    """Analyze every repository under ``base_dir`` active in ``period``.

    Returns the non-empty reports in discovery order. A repository whose
    analysis raises is logged and skipped; the scan continues.

    Raises:
        InvalidPathError: If ``base_dir`` is not a directory.
    """
    if not Path(base_dir).is_dir():
        raise InvalidPathError(Path(base_dir), "not a directory")

    repos = find_git_repositories(base_dir)
    logger.info("Found %d git repositories under %s", len(repos), base_dir)
    if not repos:
        return []

    max_workers = max(1, min(workers or config.analysis.workers, len(repos)))
    reports: list[RepositoryReport] = []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            (repo, executor.submit(analyze_repository, repo, config, period=period)) for repo in repos
        ]
        for repo, future in futures:
            try:
                report = future.result()
            except Exception as e:
                logger.warning("Could not analyze %s, skipping: %s", repo, e)
                continue
            if not report.is_empty:
                reports.append(report)

    return reports


# ---------------------------------------------------------------------------
# Ordering and totals for presentation
# ---------------------------------------------------------------------------

_COMMIT_SORT_KEYS = {
    "date": lambda c: c.timestamp,
    "additions": lambda c: c.additions,
    "deletions": lambda c: c.deletions,
}

_REPORT_SORT_KEYS = {
    "commits": lambda r: r.project.total_commits,
    "loc": lambda r: r.total_loc,
    "additions": lambda r: r.project.total_additions,
    "deletions": lambda r: r.project.total_deletions,
}


def sort_commits(commits: Sequence[CommitRecord], sort_by: str = "date", order: str = "desc") -> list[CommitRecord]:
    key = _COMMIT_SORT_KEYS.get(sort_by, _COMMIT_SORT_KEYS["date"])
    return sorted(commits, key=key, reverse=order != "asc")


def sort_reports(
    reports: Sequence[RepositoryReport], sort_by: str = "commits", order: str = "desc"
) -> list[RepositoryReport]:
    key = _REPORT_SORT_KEYS.get(sort_by, _REPORT_SORT_KEYS["commits"])
    return sorted(reports, key=key, reverse=order != "asc")


def overall_stats(reports: Sequence[RepositoryReport]) -> dict:
    return {
        "total_projects": len(reports),
        "total_commits": sum(r.project.total_commits for r in reports),
        "total_additions": sum(r.project.total_additions for r in reports),
        "total_deletions": sum(r.project.total_deletions for r in reports),
        "total_loc": sum(r.total_loc for r in reports),
    }
