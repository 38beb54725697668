"""File hotspot detection.

A hotspot is a file with high combined change frequency, churn and author
count:

    score = changes * ln(churn + 1) * sqrt(author_count)

The logarithm keeps one giant commit from dominating; the square root does
the same for author count. Risk is a separate point system read from the
tier tables below.

Files are keyed by the path git reported. A renamed file shows up as two
unrelated entries.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional, Sequence

from ..history.models import CommitRecord
from ..math import round_half_up, round_int
from .recommendations import Recommendation


class RiskLevel(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# (threshold, points): first tier whose threshold is exceeded applies
CHANGE_TIERS = ((20, 30), (10, 20), (5, 10))
CHURN_TIERS = ((1000, 30), (500, 20), (200, 10))
AUTHOR_TIERS = ((5, 20), (3, 10))
SINGLE_OWNER_POINTS = 15

HIGH_RISK_POINTS = 60
MEDIUM_RISK_POINTS = 30


def _tier_points(value: int, tiers: Sequence[tuple[int, int]]) -> int:
    for threshold, points in tiers:
        if value > threshold:
            return points
    return 0


def risk_points(changes: int, churn: int, author_count: int) -> int:
    points = _tier_points(changes, CHANGE_TIERS) + _tier_points(churn, CHURN_TIERS)
    if author_count == 1:
        points += SINGLE_OWNER_POINTS
    else:
        points += _tier_points(author_count, AUTHOR_TIERS)
    return points


def risk_level(changes: int, churn: int, author_count: int) -> RiskLevel:
    points = risk_points(changes, churn, author_count)
    if points > HIGH_RISK_POINTS:
        return RiskLevel.HIGH
    if points > MEDIUM_RISK_POINTS:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def hotspot_score(changes: int, churn: int, author_count: int) -> float:
    return changes * math.log(churn + 1) * math.sqrt(author_count)


@dataclass(frozen=True)
class FileHotspot:
    filename: str
    changes: int
    additions: int
    deletions: int
    churn: int
    author_count: int
    authors: tuple[str, ...]  # sorted emails
    last_changed: Optional[datetime]
    hotspot_score: float
    risk_level: RiskLevel
    risk_points: int

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "changes": self.changes,
            "additions": self.additions,
            "deletions": self.deletions,
            "churn": self.churn,
            "author_count": self.author_count,
            "authors": list(self.authors),
            "last_changed": self.last_changed.isoformat() if self.last_changed else None,
            "hotspot_score": round(self.hotspot_score, 2),
            "risk_level": self.risk_level.value,
        }


class _FileAccumulator:
    __slots__ = ("changes", "additions", "deletions", "authors", "last_changed")

    def __init__(self) -> None:
        self.changes = 0
        self.additions = 0
        self.deletions = 0
        self.authors: set[str] = set()
        self.last_changed: Optional[datetime] = None


def detect_hotspots(commits: Sequence[CommitRecord], limit: int = 20) -> list[FileHotspot]:
    """Rank files by hotspot score, highest first, at most ``limit`` entries.

    Equal scores keep the order in which files were first seen.
    """
    stats: dict[str, _FileAccumulator] = {}
    for commit in commits:
        for change in commit.files:
            acc = stats.get(change.filename)
            if acc is None:
                acc = stats[change.filename] = _FileAccumulator()
            acc.changes += 1
            acc.additions += change.additions
            acc.deletions += change.deletions
            acc.authors.add(commit.author_email or commit.author)
            if acc.last_changed is None or commit.timestamp > acc.last_changed:
                acc.last_changed = commit.timestamp

    hotspots = []
    for filename, acc in stats.items():
        churn = acc.additions + acc.deletions
        author_count = len(acc.authors)
        hotspots.append(
            FileHotspot(
                filename=filename,
                changes=acc.changes,
                additions=acc.additions,
                deletions=acc.deletions,
                churn=churn,
                author_count=author_count,
                authors=tuple(sorted(acc.authors)),
                last_changed=acc.last_changed,
                hotspot_score=hotspot_score(acc.changes, churn, author_count),
                risk_level=risk_level(acc.changes, churn, author_count),
                risk_points=risk_points(acc.changes, churn, author_count),
            )
        )

    hotspots.sort(key=lambda h: h.hotspot_score, reverse=True)
    return hotspots[: max(0, limit)]


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


def knowledge_silos(hotspots: Sequence[FileHotspot]) -> list[FileHotspot]:
    return [h for h in hotspots if h.author_count == 1]


def frequently_changed_files(
    hotspots: Sequence[FileHotspot], threshold: int = 10
) -> list[FileHotspot]:
    return [h for h in hotspots if h.changes >= threshold]


def high_churn_files(hotspots: Sequence[FileHotspot], threshold: int = 500) -> list[FileHotspot]:
    return [h for h in hotspots if h.churn >= threshold]


@dataclass(frozen=True)
class RefactorCandidate:
    hotspot: FileHotspot
    reasons: tuple[str, ...]


def refactor_candidates(hotspots: Sequence[FileHotspot]) -> list[RefactorCandidate]:
    """Files that change often, churn heavily and have several authors."""
    candidates = []
    for h in hotspots:
        if not (h.changes > 10 and h.churn > 500 and h.author_count > 2):
            continue
        reasons = []
        if h.changes > 15:
            reasons.append("High change frequency")
        if h.churn > 1000:
            reasons.append("High code churn")
        if h.author_count > 4:
            reasons.append("Many contributors")
        candidates.append(RefactorCandidate(hotspot=h, reasons=tuple(reasons)))
    return candidates


@dataclass(frozen=True)
class ExtensionVolatility:
    extension: str
    files: int
    total_changes: int
    avg_changes_per_file: float
    total_churn: int
    avg_churn_per_file: int


def _extension(filename: str) -> str:
    suffix = PurePosixPath(filename).suffix
    return suffix[1:] if suffix else "no-ext"


def file_type_volatility(hotspots: Sequence[FileHotspot]) -> list[ExtensionVolatility]:
    """Per-extension change totals, most changed first."""
    grouped: dict[str, list[FileHotspot]] = {}
    for h in hotspots:
        grouped.setdefault(_extension(h.filename), []).append(h)

    result = []
    for ext, files in grouped.items():
        changes = sum(h.changes for h in files)
        churn = sum(h.churn for h in files)
        result.append(
            ExtensionVolatility(
                extension=ext,
                files=len(files),
                total_changes=changes,
                avg_changes_per_file=round_half_up(changes / len(files), 1),
                total_churn=churn,
                avg_churn_per_file=round_int(churn / len(files)),
            )
        )
    return sorted(result, key=lambda v: v.total_changes, reverse=True)


@dataclass(frozen=True)
class HotspotStats:
    total_hotspots: int = 0
    high_risk: int = 0
    medium_risk: int = 0
    low_risk: int = 0
    avg_changes_per_file: float = 0.0
    avg_churn_per_file: int = 0

    def to_dict(self) -> dict:
        return {
            "total_hotspots": self.total_hotspots,
            "high_risk": self.high_risk,
            "medium_risk": self.medium_risk,
            "low_risk": self.low_risk,
            "avg_changes_per_file": self.avg_changes_per_file,
            "avg_churn_per_file": self.avg_churn_per_file,
        }


def hotspot_stats(hotspots: Sequence[FileHotspot]) -> HotspotStats:
    if not hotspots:
        return HotspotStats()
    n = len(hotspots)
    return HotspotStats(
        total_hotspots=n,
        high_risk=sum(1 for h in hotspots if h.risk_level is RiskLevel.HIGH),
        medium_risk=sum(1 for h in hotspots if h.risk_level is RiskLevel.MEDIUM),
        low_risk=sum(1 for h in hotspots if h.risk_level is RiskLevel.LOW),
        avg_changes_per_file=round_half_up(sum(h.changes for h in hotspots) / n, 1),
        avg_churn_per_file=round_int(sum(h.churn for h in hotspots) / n),
    )


def hotspot_recommendations(hotspots: Sequence[FileHotspot]) -> list[Recommendation]:
    recommendations = []

    high_risk = [h for h in hotspots if h.risk_level is RiskLevel.HIGH]
    if high_risk:
        recommendations.append(
            Recommendation(
                severity="high",
                category="High Risk Files",
                message=f"{len(high_risk)} file(s) identified as high-risk hotspots.",
                action="Review these files for potential refactoring or better modularization",
                files=tuple(h.filename for h in high_risk[:5]),
            )
        )

    silos = knowledge_silos(hotspots)
    if len(silos) > 5:
        recommendations.append(
            Recommendation(
                severity="medium",
                category="Knowledge Silos",
                message=f"{len(silos)} file(s) are maintained by single authors.",
                action="Encourage code reviews and knowledge sharing for these files",
            )
        )

    candidates = refactor_candidates(hotspots)
    if candidates:
        recommendations.append(
            Recommendation(
                severity="medium",
                category="Refactoring Needed",
                message=f"{len(candidates)} file(s) show signs of needing refactoring.",
                action="Consider breaking down complex files or improving architecture",
                files=tuple(c.hotspot.filename for c in candidates[:5]),
            )
        )

    return recommendations
