"""Classify commits by message and measure message hygiene.

Classification is a two-stage rule table. Conventional-commit prefixes
(``feat:``, ``fix(parser):``) are checked first; keyword groups second, in a
fixed order where bug language outranks everything else. The first match
wins, so ``"feat: fix bug"`` is a feature.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from ..history.models import CommitRecord
from ..math import percent, round_int


class Category(Enum):
    FEATURE = "feature"
    BUGFIX = "bugfix"
    REFACTOR = "refactor"
    DOCS = "docs"
    TEST = "test"
    CHORE = "chore"
    STYLE = "style"
    PERF = "perf"
    CI = "ci"
    BUILD = "build"
    REVERT = "revert"
    MERGE = "merge"
    RELEASE = "release"
    OTHER = "other"


def _prefix(types: str) -> re.Pattern:
    return re.compile(rf"^({types})(\(.+\))?:", re.IGNORECASE)


def _keywords(*words: str) -> re.Pattern:
    return re.compile(r"\b(" + "|".join(words) + r")\b")


PREFIX_RULES: tuple[tuple[re.Pattern, Category], ...] = (
    (_prefix("feat|feature"), Category.FEATURE),
    (_prefix("fix|bugfix"), Category.BUGFIX),
    (_prefix("refactor"), Category.REFACTOR),
    (_prefix("docs"), Category.DOCS),
    (_prefix("test"), Category.TEST),
    (_prefix("chore"), Category.CHORE),
    (_prefix("style"), Category.STYLE),
    (_prefix("perf"), Category.PERF),
    (_prefix("ci"), Category.CI),
    (_prefix("build"), Category.BUILD),
    (_prefix("revert"), Category.REVERT),
)

# Matched against the lower-cased message
KEYWORD_RULES: tuple[tuple[re.Pattern, Category], ...] = (
    (_keywords("fix", "bug", "issue", "error", "resolve", "patch"), Category.BUGFIX),
    (_keywords("add", "new", "create", "implement", "introduce"), Category.FEATURE),
    (_keywords("update", "change", "modify", "improve", "enhance", "refine"), Category.REFACTOR),
    (_keywords("test", "spec", "testing"), Category.TEST),
    (_keywords("doc", "readme", "comment", "documentation"), Category.DOCS),
    (_keywords("format", "indent", "whitespace", "prettier", "eslint"), Category.STYLE),
    (_keywords("merge", "rebase"), Category.MERGE),
    (_keywords("release", "version", "bump"), Category.RELEASE),
)


def classify(message: Optional[str]) -> Category:
    if not message:
        return Category.OTHER

    for pattern, category in PREFIX_RULES:
        if pattern.match(message):
            return category

    lowered = message.lower()
    for pattern, category in KEYWORD_RULES:
        if pattern.search(lowered):
            return category

    return Category.OTHER


def type_breakdown(commits: Iterable[CommitRecord]) -> dict[Category, int]:
    """Commit count per category, in order of first occurrence."""
    return dict(Counter(classify(c.summary) for c in commits))


@dataclass(frozen=True)
class TypeStat:
    category: Category
    count: int
    percentage: float

    def to_dict(self) -> dict:
        return {"type": self.category.value, "count": self.count, "percentage": self.percentage}


def type_stats(commits: Sequence[CommitRecord]) -> list[TypeStat]:
    """Breakdown with one-decimal percentages, most frequent first."""
    total = len(commits)
    stats = [
        TypeStat(category=category, count=count, percentage=percent(count, total))
        for category, count in type_breakdown(commits).items()
    ]
    # sorted() is stable: equal counts keep first-occurrence order
    return sorted(stats, key=lambda s: s.count, reverse=True)


# ---------------------------------------------------------------------------
# Issue references
# ---------------------------------------------------------------------------

_JIRA_RE = re.compile(r"([A-Z]+-\d+)")
_ISSUE_RE = re.compile(r"#(\d+)")


@dataclass(frozen=True)
class IssueReference:
    kind: str  # "jira" | "issue"
    ref: str
    url: Optional[str] = None
    number: Optional[int] = None

    def to_dict(self) -> dict:
        return {"kind": self.kind, "ref": self.ref, "url": self.url, "number": self.number}


@dataclass(frozen=True)
class ReferencedIssue:
    reference: IssueReference
    commit_ids: tuple[str, ...]

    def to_dict(self) -> dict:
        return {**self.reference.to_dict(), "commits": list(self.commit_ids)}


def extract_issue_references(
    message: str, jira_base_url: Optional[str] = None
) -> list[IssueReference]:
    """JIRA keys (``PROJ-123``) followed by ``#123`` issue references."""
    refs: list[IssueReference] = []
    base = jira_base_url.rstrip("/") if jira_base_url else None
    for key in _JIRA_RE.findall(message or ""):
        refs.append(IssueReference(kind="jira", ref=key, url=f"{base}/browse/{key}" if base else None))
    for number in _ISSUE_RE.findall(message or ""):
        refs.append(IssueReference(kind="issue", ref=f"#{number}", number=int(number)))
    return refs


def referenced_issues(
    commits: Iterable[CommitRecord],
    jira_base_url: Optional[str] = None,
    jira_project_key: Optional[str] = None,
) -> list[ReferencedIssue]:
    """Issues cited across commits, in first-seen order, with the citing commit ids.

    With ``jira_project_key`` set, JIRA keys from other projects are dropped.
    """
    found: dict[tuple[str, str], tuple[IssueReference, list[str]]] = {}
    for commit in commits:
        for ref in extract_issue_references(commit.summary, jira_base_url):
            if ref.kind == "jira" and jira_project_key and not ref.ref.startswith(f"{jira_project_key}-"):
                continue
            _, ids = found.setdefault((ref.kind, ref.ref), (ref, []))
            if commit.id not in ids:
                ids.append(commit.id)
    return [ReferencedIssue(ref, tuple(ids)) for ref, ids in found.values()]


# ---------------------------------------------------------------------------
# Message quality
# ---------------------------------------------------------------------------

_CONVENTIONAL_RE = re.compile(
    r"^(feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert)(\(.+\))?:", re.IGNORECASE
)
_TRAILING_PUNCT_RE = re.compile(r"[.!?]$")
_LEADING_VERB_RE = re.compile(
    r"^(add|fix|update|remove|refactor|implement|create|modify|improve|enhance)", re.IGNORECASE
)
_ANY_ISSUE_RE = re.compile(r"#\d+|[A-Z]+-\d+")
_MERGE_RE = re.compile(r"^merge\s", re.IGNORECASE)

GOOD_SUMMARY_LENGTH = (10, 72)
VERBOSE_SUMMARY_LENGTH = 100


@dataclass(frozen=True)
class MessageQuality:
    conventional_commits_percent: float = 0.0
    good_length_percent: float = 0.0
    has_description_percent: float = 0.0
    no_punctuation_percent: float = 0.0
    overall_score: int = 0

    def to_dict(self) -> dict:
        return {
            "conventional_commits_percent": self.conventional_commits_percent,
            "good_length_percent": self.good_length_percent,
            "has_description_percent": self.has_description_percent,
            "no_punctuation_percent": self.no_punctuation_percent,
            "overall_score": self.overall_score,
        }


def message_quality(commits: Sequence[CommitRecord]) -> MessageQuality:
    """Score commit messages against common conventions.

    The overall score weights conventional prefixes at 30%, summary length
    and description at 25% each, and the absence of trailing punctuation at
    20%.
    """
    total = len(commits)
    if total == 0:
        return MessageQuality()

    conventional = good_length = described = unpunctuated = 0
    low, high = GOOD_SUMMARY_LENGTH
    for commit in commits:
        lines = (commit.summary or "").split("\n")
        summary = lines[0]
        if _CONVENTIONAL_RE.match(summary):
            conventional += 1
        if low <= len(summary) <= high:
            good_length += 1
        if any(line.strip() for line in lines[1:]):
            described += 1
        if not _TRAILING_PUNCT_RE.search(summary.strip()):
            unpunctuated += 1

    weighted = conventional * 0.3 + good_length * 0.25 + described * 0.25 + unpunctuated * 0.2
    return MessageQuality(
        conventional_commits_percent=percent(conventional, total),
        good_length_percent=percent(good_length, total),
        has_description_percent=percent(described, total),
        no_punctuation_percent=percent(unpunctuated, total),
        overall_score=round_int(weighted / total * 100),
    )


@dataclass(frozen=True)
class PatternStat:
    pattern: str
    count: int
    percentage: float


def commit_patterns(commits: Sequence[CommitRecord]) -> list[PatternStat]:
    counts = {
        "starts_with_verb": 0,
        "has_issue_reference": 0,
        "is_one_word": 0,
        "is_merge_commit": 0,
        "is_verbose": 0,
    }
    for commit in commits:
        message = commit.summary or ""
        summary = message.split("\n")[0]
        if _LEADING_VERB_RE.match(summary):
            counts["starts_with_verb"] += 1
        if _ANY_ISSUE_RE.search(message):
            counts["has_issue_reference"] += 1
        if len(summary.split()) == 1:
            counts["is_one_word"] += 1
        if _MERGE_RE.match(summary):
            counts["is_merge_commit"] += 1
        if len(summary) > VERBOSE_SUMMARY_LENGTH:
            counts["is_verbose"] += 1

    total = len(commits)
    return [PatternStat(name, count, percent(count, total)) for name, count in counts.items()]
