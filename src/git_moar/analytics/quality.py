"""Code quality and repository health metrics.

Every metric is a pure function of the commit sequence, guarded so empty or
degenerate input returns a defined constant rather than NaN or infinity.

Health score starts at 100 and applies independent deductions:

    bus factor == 1: -20, == 2: -10
    ownership concentration > 0.7: -15, > 0.5: -8
    avg commit size > 500: -10, > 200: -5
    comment ratio < 5: -10, < 10: -5
    stability > 3 or < 0.5: -10
    churn rate > 1000: -10, > 500: -5

The result is clamped to [0, 100].
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

from ..history.models import CommitRecord
from ..loc import LineStats
from ..math import Gini, round_half_up, round_int
from .hotspots import FileHotspot
from .recommendations import Recommendation

BUS_FACTOR_COVERAGE = 0.8


@dataclass(frozen=True)
class QualityMetrics:
    churn_rate: int = 0
    bus_factor: int = 0
    ownership_concentration: float = 0.0
    avg_commit_size: int = 0
    code_stability: float = 1.0
    comment_ratio: float = 0.0
    health_score: int = 100

    def to_dict(self) -> dict:
        return {
            "churn_rate": self.churn_rate,
            "bus_factor": self.bus_factor,
            "ownership_concentration": self.ownership_concentration,
            "avg_commit_size": self.avg_commit_size,
            "code_stability": self.code_stability,
            "comment_ratio": self.comment_ratio,
            "health_score": self.health_score,
            "health_rating": health_rating(self.health_score).label,
        }


def _author_key(commit: CommitRecord) -> str:
    return commit.author_email or commit.author


def churn_rate(commits: Sequence[CommitRecord]) -> int:
    """Mean lines changed per commit."""
    if not commits:
        return 0
    return round_int(sum(c.churn for c in commits) / len(commits))


def bus_factor(commits: Sequence[CommitRecord]) -> int:
    """Fewest authors whose commits cover 80% of all commits."""
    if not commits:
        return 0
    counts = sorted(Counter(_author_key(c) for c in commits).values(), reverse=True)
    threshold = sum(counts) * BUS_FACTOR_COVERAGE

    covered = 0
    for needed, count in enumerate(counts, start=1):
        covered += count
        if covered >= threshold:
            return needed
    return len(counts)


def ownership_concentration(commits: Sequence[CommitRecord]) -> float:
    """Gini coefficient over per-author added lines, two decimals."""
    additions: dict[str, int] = {}
    for c in commits:
        key = _author_key(c)
        additions[key] = additions.get(key, 0) + c.additions
    return round_half_up(Gini.gini_coefficient(list(additions.values())), 2)


def avg_commit_size(commits: Sequence[CommitRecord]) -> int:
    """Mean added lines per commit."""
    if not commits:
        return 0
    return round_int(sum(c.additions for c in commits) / len(commits))


def code_stability(commits: Sequence[CommitRecord]) -> float:
    """Additions per deletion.

    Pure additions report 2 and an empty history 1, so neither reads as
    infinite growth.
    """
    additions = sum(c.additions for c in commits)
    deletions = sum(c.deletions for c in commits)
    if deletions == 0:
        return 2.0 if additions > 0 else 1.0
    return round_half_up(additions / deletions, 2)


def comment_ratio(stats: Optional[LineStats]) -> float:
    """Comment lines as a percentage of source lines."""
    if stats is None or not stats.source:
        return 0.0
    return round_half_up(stats.comment / stats.source * 100, 1)


DeductionRule = tuple[Callable[[QualityMetrics], bool], int]

# Each group is a tier list: only its first matching rule deducts.
HEALTH_DEDUCTIONS: tuple[tuple[DeductionRule, ...], ...] = (
    ((lambda m: m.bus_factor == 1, 20), (lambda m: m.bus_factor == 2, 10)),
    ((lambda m: m.ownership_concentration > 0.7, 15), (lambda m: m.ownership_concentration > 0.5, 8)),
    ((lambda m: m.avg_commit_size > 500, 10), (lambda m: m.avg_commit_size > 200, 5)),
    ((lambda m: m.comment_ratio < 5, 10), (lambda m: m.comment_ratio < 10, 5)),
    ((lambda m: m.code_stability > 3 or m.code_stability < 0.5, 10),),
    ((lambda m: m.churn_rate > 1000, 10), (lambda m: m.churn_rate > 500, 5)),
)


def health_score(
    metrics: QualityMetrics,
    deductions: Sequence[Sequence[DeductionRule]] = HEALTH_DEDUCTIONS,
) -> int:
    score = 100
    for group in deductions:
        score -= next((points for applies, points in group if applies(metrics)), 0)
    return max(0, min(100, score))


def calculate_quality_metrics(
    commits: Sequence[CommitRecord], loc_stats: Optional[LineStats] = None
) -> QualityMetrics:
    metrics = QualityMetrics(
        churn_rate=churn_rate(commits),
        bus_factor=bus_factor(commits),
        ownership_concentration=ownership_concentration(commits),
        avg_commit_size=avg_commit_size(commits),
        code_stability=code_stability(commits),
        comment_ratio=comment_ratio(loc_stats),
    )
    return replace(metrics, health_score=health_score(metrics))


@dataclass(frozen=True)
class HealthRating:
    label: str
    minimum: int


# Highest minimum first
HEALTH_RATINGS = (
    HealthRating("Excellent", 90),
    HealthRating("Good", 75),
    HealthRating("Fair", 60),
    HealthRating("Poor", 40),
    HealthRating("Critical", 0),
)


def health_rating(score: int) -> HealthRating:
    for rating in HEALTH_RATINGS:
        if score >= rating.minimum:
            return rating
    return HEALTH_RATINGS[-1]


def health_recommendations(metrics: QualityMetrics) -> list[Recommendation]:
    recommendations = []

    if metrics.bus_factor <= 2:
        recommendations.append(
            Recommendation(
                severity="high",
                category="Bus Factor",
                message=(
                    f"Only {metrics.bus_factor} contributor(s) account for 80% of commits. "
                    "Consider distributing knowledge and code ownership."
                ),
                action="Encourage pair programming and code reviews",
            )
        )

    if metrics.ownership_concentration > 0.6:
        recommendations.append(
            Recommendation(
                severity="medium",
                category="Code Ownership",
                message="High code ownership concentration detected. Some contributors may be overworked.",
                action="Balance workload across team members",
            )
        )

    if metrics.avg_commit_size > 300:
        recommendations.append(
            Recommendation(
                severity="medium",
                category="Commit Size",
                message=(
                    f"Average commit size is {metrics.avg_commit_size} lines. "
                    "Smaller, atomic commits are recommended."
                ),
                action="Break down changes into smaller, focused commits",
            )
        )

    if metrics.comment_ratio < 10:
        recommendations.append(
            Recommendation(
                severity="low",
                category="Documentation",
                message=f"Comment ratio is {metrics.comment_ratio}%. Consider adding more code documentation.",
                action="Add comments for complex logic and public APIs",
            )
        )

    if metrics.churn_rate > 500:
        recommendations.append(
            Recommendation(
                severity="medium",
                category="Code Churn",
                message=(
                    f"High code churn detected ({metrics.churn_rate} lines per commit). "
                    "This may indicate unstable requirements."
                ),
                action="Review requirements and architecture decisions",
            )
        )

    return recommendations


@dataclass(frozen=True)
class TechnicalDebt:
    hotspot_count: int = 0
    avg_hotspot_changes: int = 0
    files_with_high_churn: int = 0
    multi_author_files: int = 0

    def to_dict(self) -> dict:
        return {
            "hotspot_count": self.hotspot_count,
            "avg_hotspot_changes": self.avg_hotspot_changes,
            "files_with_high_churn": self.files_with_high_churn,
            "multi_author_files": self.multi_author_files,
        }


def technical_debt(hotspots: Sequence[FileHotspot], top: int = 10) -> TechnicalDebt:
    """Debt indicators from the ranked hotspot list."""
    leading = list(hotspots[:top])
    return TechnicalDebt(
        hotspot_count=len(leading),
        avg_hotspot_changes=round_int(sum(h.changes for h in leading) / len(leading)) if leading else 0,
        files_with_high_churn=sum(1 for h in hotspots if h.churn > 500),
        multi_author_files=sum(1 for h in hotspots if h.author_count > 3),
    )
