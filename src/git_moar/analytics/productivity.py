"""Productivity insights: when, how fast, how steadily and how jointly a team works.

Hours and weekdays are read in local time: each commit's own recorded UTC
offset, or ``tz`` when one is given. Weekday 0 is Sunday.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..history.models import CommitRecord
from ..math import Statistics, percent, round_half_up, round_int
from .recommendations import Recommendation

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

WORKDAY_START_HOUR = 9
WORKDAY_END_HOUR = 18  # exclusive

SECONDS_PER_DAY = 86400.0


def _local(commit: CommitRecord, tz: Optional[tzinfo]) -> datetime:
    return commit.timestamp.astimezone(tz) if tz is not None else commit.timestamp


def _weekday(moment: datetime) -> int:
    return (moment.weekday() + 1) % 7


def _mode(counts: list[int]) -> int:
    """Index of the largest bucket; ties resolve to the lowest index."""
    return counts.index(max(counts))


@dataclass(frozen=True)
class PeakHour:
    hour: int = 0
    commits: int = 0
    percentage: float = 0.0

    @property
    def formatted(self) -> str:
        return f"{self.hour}:00"


@dataclass(frozen=True)
class PeakDay:
    day: int = 0
    day_name: str = "Unknown"
    commits: int = 0
    percentage: float = 0.0


def peak_hours(commits: Sequence[CommitRecord], tz: Optional[tzinfo] = None) -> PeakHour:
    if not commits:
        return PeakHour()
    counts = [0] * 24
    for c in commits:
        counts[_local(c, tz).hour] += 1
    hour = _mode(counts)
    return PeakHour(hour=hour, commits=counts[hour], percentage=percent(counts[hour], len(commits)))


def peak_days(commits: Sequence[CommitRecord], tz: Optional[tzinfo] = None) -> PeakDay:
    if not commits:
        return PeakDay()
    counts = [0] * 7
    for c in commits:
        counts[_weekday(_local(c, tz))] += 1
    day = _mode(counts)
    return PeakDay(
        day=day,
        day_name=DAY_NAMES[day],
        commits=counts[day],
        percentage=percent(counts[day], len(commits)),
    )


@dataclass(frozen=True)
class Velocity:
    lines_per_day: int = 0
    commits_per_day: float = 0.0
    level: str = "Unknown"
    total_lines: int = 0


def velocity(commits: Sequence[CommitRecord], period_days: float) -> Velocity:
    """Added lines and commits per day over the analysis period."""
    if not commits or not period_days or period_days <= 0:
        return Velocity()

    total_lines = sum(c.additions for c in commits)
    lines_per_day = round_int(total_lines / period_days)
    if lines_per_day > 500:
        level = "High"
    elif lines_per_day > 200:
        level = "Medium"
    else:
        level = "Low"

    return Velocity(
        lines_per_day=lines_per_day,
        commits_per_day=round_half_up(len(commits) / period_days, 2),
        level=level,
        total_lines=total_lines,
    )


@dataclass(frozen=True)
class Rhythm:
    consistency: str = "Unknown"
    avg_days_between_commits: float = 0.0
    rhythm_score: int = 0
    standard_deviation: float = 0.0


def rhythm(commits: Sequence[CommitRecord]) -> Rhythm:
    """Consistency of commit spacing.

    ``score = max(0, 100 - stddev * 10)`` over the day intervals between
    consecutive commits, so a steady cadence scores high.
    """
    if len(commits) < 2:
        return Rhythm()

    stamps = sorted(c.timestamp.timestamp() for c in commits)
    intervals = [d / SECONDS_PER_DAY for d in Statistics.diffs(stamps)]
    mean_interval = Statistics.mean(intervals)
    stddev = Statistics.pstdev(intervals)
    score = max(0.0, 100 - stddev * 10)

    if score > 70:
        consistency = "Highly Consistent"
    elif score > 50:
        consistency = "Consistent"
    elif score > 30:
        consistency = "Somewhat Consistent"
    else:
        consistency = "Irregular"

    return Rhythm(
        consistency=consistency,
        avg_days_between_commits=round_half_up(mean_interval, 2),
        rhythm_score=round_int(score),
        standard_deviation=round_half_up(stddev, 2),
    )


@dataclass(frozen=True)
class Collaboration:
    score: float = 0.0
    multi_author_files: int = 0
    total_files: int = 0
    level: str = "None"


def collaboration(commits: Sequence[CommitRecord]) -> Collaboration:
    """Share of touched files that more than one author worked on."""
    if not commits:
        return Collaboration()

    authors_by_file: dict[str, set[str]] = {}
    for c in commits:
        for f in c.files:
            authors_by_file.setdefault(f.filename, set()).add(c.author_email or c.author)

    total = len(authors_by_file)
    shared = sum(1 for authors in authors_by_file.values() if len(authors) > 1)
    score = percent(shared, total)

    if score > 50:
        level = "High"
    elif score > 25:
        level = "Medium"
    else:
        level = "Low"

    return Collaboration(score=score, multi_author_files=shared, total_files=total, level=level)


@dataclass(frozen=True)
class FocusTime:
    working_hours_commits: int = 0
    working_hours_percent: float = 0.0
    after_hours_commits: int = 0
    after_hours_percent: float = 0.0
    weekend_commits: int = 0
    weekend_percent: float = 0.0
    work_life_balance: str = "Unknown"


def focus_time(commits: Sequence[CommitRecord], tz: Optional[tzinfo] = None) -> FocusTime:
    """Split commits into working hours (9-18, Mon-Fri), after hours and weekend."""
    if not commits:
        return FocusTime()

    working = after_hours = weekend = 0
    for c in commits:
        moment = _local(c, tz)
        day = _weekday(moment)
        if day in (0, 6):
            weekend += 1
        elif WORKDAY_START_HOUR <= moment.hour < WORKDAY_END_HOUR:
            working += 1
        else:
            after_hours += 1

    total = len(commits)
    after_pct = percent(after_hours, total)
    weekend_pct = percent(weekend, total)

    if after_pct > 40 or weekend_pct > 30:
        balance = "Poor"
    elif after_pct > 25 or weekend_pct > 15:
        balance = "Fair"
    else:
        balance = "Good"

    return FocusTime(
        working_hours_commits=working,
        working_hours_percent=percent(working, total),
        after_hours_commits=after_hours,
        after_hours_percent=after_pct,
        weekend_commits=weekend,
        weekend_percent=weekend_pct,
        work_life_balance=balance,
    )


_FEATURE_PREFIX_RE = re.compile(r"^(feat|feature)")
_FEATURE_WORD_RE = re.compile(r"\b(add|new|implement)\b")


@dataclass(frozen=True)
class TimeToValue:
    avg_days_between_features: float = 0.0
    feature_count: int = 0


def time_to_value(commits: Sequence[CommitRecord]) -> TimeToValue:
    """Mean days between consecutive feature commits."""
    features = [
        c
        for c in commits
        if _FEATURE_PREFIX_RE.match(c.summary.lower()) or _FEATURE_WORD_RE.search(c.summary.lower())
    ]
    if len(features) < 2:
        return TimeToValue(feature_count=len(features))

    stamps = sorted(c.timestamp.timestamp() for c in features)
    gaps = [d / SECONDS_PER_DAY for d in Statistics.diffs(stamps)]
    return TimeToValue(
        avg_days_between_features=round_half_up(Statistics.mean(gaps), 1),
        feature_count=len(features),
    )


@dataclass(frozen=True)
class ProductivityInsights:
    peak_hour: PeakHour
    peak_day: PeakDay
    velocity: Velocity
    rhythm: Rhythm
    collaboration: Collaboration
    focus_time: FocusTime
    time_to_value: TimeToValue

    def to_dict(self) -> dict:
        return {
            "peak_hour": {
                "hour": self.peak_hour.hour,
                "formatted": self.peak_hour.formatted,
                "commits": self.peak_hour.commits,
                "percentage": self.peak_hour.percentage,
            },
            "peak_day": {
                "day": self.peak_day.day,
                "day_name": self.peak_day.day_name,
                "commits": self.peak_day.commits,
                "percentage": self.peak_day.percentage,
            },
            "velocity": {
                "lines_per_day": self.velocity.lines_per_day,
                "commits_per_day": self.velocity.commits_per_day,
                "level": self.velocity.level,
                "total_lines": self.velocity.total_lines,
            },
            "rhythm": {
                "consistency": self.rhythm.consistency,
                "avg_days_between_commits": self.rhythm.avg_days_between_commits,
                "rhythm_score": self.rhythm.rhythm_score,
                "standard_deviation": self.rhythm.standard_deviation,
            },
            "collaboration": {
                "score": self.collaboration.score,
                "multi_author_files": self.collaboration.multi_author_files,
                "total_files": self.collaboration.total_files,
                "level": self.collaboration.level,
            },
            "focus_time": {
                "working_hours_percent": self.focus_time.working_hours_percent,
                "after_hours_percent": self.focus_time.after_hours_percent,
                "weekend_percent": self.focus_time.weekend_percent,
                "work_life_balance": self.focus_time.work_life_balance,
            },
            "time_to_value": {
                "avg_days_between_features": self.time_to_value.avg_days_between_features,
                "feature_count": self.time_to_value.feature_count,
            },
        }


def productivity_insights(
    commits: Sequence[CommitRecord], period_days: float, tz: Optional[tzinfo] = None
) -> ProductivityInsights:
    return ProductivityInsights(
        peak_hour=peak_hours(commits, tz),
        peak_day=peak_days(commits, tz),
        velocity=velocity(commits, period_days),
        rhythm=rhythm(commits),
        collaboration=collaboration(commits),
        focus_time=focus_time(commits, tz),
        time_to_value=time_to_value(commits),
    )


def productivity_recommendations(insights: ProductivityInsights) -> list[Recommendation]:
    recommendations = []

    if insights.focus_time.work_life_balance == "Poor":
        recommendations.append(
            Recommendation(
                severity="medium",
                category="Work-Life Balance",
                message=(
                    f"{insights.focus_time.after_hours_percent}% of commits are after hours and "
                    f"{insights.focus_time.weekend_percent}% on weekends."
                ),
                action="Consider reviewing workload distribution and deadlines",
            )
        )

    # "Unknown" rhythm (fewer than two commits) scores 0 but says nothing
    if insights.rhythm.consistency != "Unknown" and insights.rhythm.rhythm_score < 50:
        recommendations.append(
            Recommendation(
                severity="low",
                category="Development Rhythm",
                message="Inconsistent commit patterns detected.",
                action="Establish regular development cycles and sprint planning",
            )
        )

    if insights.collaboration.level != "None" and insights.collaboration.score < 25:
        recommendations.append(
            Recommendation(
                severity="low",
                category="Collaboration",
                message="Low collaboration detected. Most files are worked on by single authors.",
                action="Encourage pair programming and cross-functional code reviews",
            )
        )

    if insights.velocity.level == "Low":
        recommendations.append(
            Recommendation(
                severity="info",
                category="Velocity",
                message="Development velocity is below optimal levels.",
                action="Review blockers, technical debt, and process bottlenecks",
            )
        )

    return recommendations
