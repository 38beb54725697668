"""Best-effort branch attribution for commits.

Two tiers: the ref decoration printed with the log (free) and, for commits
without a usable decoration, a branch-containment query. The containment
query sits behind the ``BranchResolver`` protocol so it can be batched,
cached or faked in tests.
"""

from __future__ import annotations

import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol, Sequence

from ..logging_config import get_logger
from .models import UNKNOWN_BRANCH, CommitRecord

logger = get_logger(__name__)

DEFAULT_BRANCH_REFS = ("main", "master", "origin/main", "origin/master")


class BranchResolver(Protocol):
    """Answers "which branches contain these commits"."""

    def resolve_branches(self, commit_ids: Iterable[str]) -> dict[str, list[str]]:
        ...

    def current_branch(self) -> Optional[str]:
        ...


# ---------------------------------------------------------------------------
# Fast path: %D decoration
# ---------------------------------------------------------------------------


def _split_refs(refs: str) -> list[str]:
    return [r.strip() for r in refs.split(",") if r.strip()]


def branch_from_decoration(refs: str) -> Optional[str]:
    """Pick a branch from ``%D`` text such as ``HEAD -> main, origin/main, tag: v1``.

    The checked-out pointer wins, then the default branch names, then the
    first ref that is neither a tag nor a HEAD pointer.
    """
    entries = _split_refs(refs)
    if not entries:
        return None

    for entry in entries:
        if entry.startswith("HEAD -> "):
            target = entry[len("HEAD -> "):].strip()
            if target:
                return target

    names = [e for e in entries if not e.startswith("tag:") and not e.startswith("HEAD")]
    names = [n for n in names if not n.endswith("/HEAD")]

    for default in DEFAULT_BRANCH_REFS:
        if default in names:
            return default

    return names[0] if names else None


# ---------------------------------------------------------------------------
# Slow path: containment candidates and priority table
# ---------------------------------------------------------------------------


def normalize_branch_candidates(lines: Iterable[str]) -> list[str]:
    """Clean ``git branch -a --contains`` output into branch names."""
    seen: list[str] = []
    for raw in lines:
        name = raw.strip()
        if name[:2] in ("* ", "+ "):
            # current branch, or checked out in another worktree
            name = name[2:].strip()
        if not name:
            continue
        if name.startswith("remotes/origin/"):
            name = "origin/" + name[len("remotes/origin/"):]
        if "HEAD ->" in name or name == "HEAD" or name.startswith("("):
            # symbolic pointers and "(HEAD detached at abc123)"
            continue
        if name not in seen:
            seen.append(name)
    return seen


def _is_remote(name: str) -> bool:
    return name.startswith("origin/") or name.startswith("remotes/")


def _named(target: str) -> Callable[[Sequence[str], Optional[str]], Optional[str]]:
    def rule(candidates: Sequence[str], current: Optional[str]) -> Optional[str]:
        return target if target in candidates else None

    return rule


def _current(candidates: Sequence[str], current: Optional[str]) -> Optional[str]:
    return current if current and current in candidates else None


def _first_local(candidates: Sequence[str], current: Optional[str]) -> Optional[str]:
    return next((c for c in candidates if not _is_remote(c)), None)


def _first_remote(candidates: Sequence[str], current: Optional[str]) -> Optional[str]:
    return next((c for c in candidates if _is_remote(c)), None)


# Evaluated in order; first rule returning a name wins.
BRANCH_PRIORITY: tuple[Callable[[Sequence[str], Optional[str]], Optional[str]], ...] = (
    _current,
    _named("main"),
    _named("master"),
    _first_local,
    _named("origin/main"),
    _named("origin/master"),
    _first_remote,
)


def choose_branch(candidates: Sequence[str], current: Optional[str] = None) -> str:
    """Apply ``BRANCH_PRIORITY`` to the containing branches of one commit."""
    for rule in BRANCH_PRIORITY:
        chosen = rule(candidates, current)
        if chosen:
            return chosen
    return UNKNOWN_BRANCH


# ---------------------------------------------------------------------------
# git-backed resolver
# ---------------------------------------------------------------------------


class GitBranchResolver:
    """Run ``git branch -a --contains`` per commit on a bounded thread pool.

    Every query has a timeout and ``retries`` extra attempts. Exhausted or
    failed queries resolve to an empty candidate list. Results are cached for
    the resolver's lifetime.
    """

    def __init__(
        self,
        repo_path: str,
        timeout: float = 10.0,
        workers: int = 4,
        retries: int = 1,
    ):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout = timeout
        self.workers = max(1, workers)
        self.retries = max(0, retries)
        self._cache: dict[str, list[str]] = {}
        self._current: Optional[str] = None
        self._current_loaded = False

    def _run(self, args: list[str]) -> Optional[str]:
        cmd = ["git", "-C", self.repo_path, *args]
        for attempt in range(self.retries + 1):
            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired:
                logger.debug("git %s timed out (attempt %d)", " ".join(args), attempt + 1)
                continue
            except (FileNotFoundError, OSError) as e:
                logger.debug("git unavailable: %s", e)
                return None
            if result.returncode == 0:
                return result.stdout
            logger.debug("git %s failed: %s", " ".join(args), result.stderr.strip())
            # A non-zero exit (unknown commit, not a repo) will not improve on retry
            return None
        return None

    def current_branch(self) -> Optional[str]:
        if not self._current_loaded:
            output = self._run(["branch", "--show-current"])
            self._current = output.strip() if output and output.strip() else None
            self._current_loaded = True
        return self._current

    def _contains(self, commit_id: str) -> list[str]:
        output = self._run(["branch", "-a", "--contains", commit_id])
        if output is None:
            return []
        return normalize_branch_candidates(output.splitlines())

    def resolve_branches(self, commit_ids: Iterable[str]) -> dict[str, list[str]]:
        commit_ids = list(commit_ids)
        pending = [cid for cid in dict.fromkeys(commit_ids) if cid not in self._cache]
        if pending:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                for cid, branches in zip(pending, pool.map(self._contains, pending)):
                    self._cache[cid] = branches
        return {cid: self._cache[cid] for cid in commit_ids}


# ---------------------------------------------------------------------------
# Attribution
# ---------------------------------------------------------------------------


class BranchAttributor:
    """Assign a branch label to every commit.

    Attribution is display enrichment; it never raises. Commits that neither
    tier can place get ``UNKNOWN_BRANCH``.
    """

    def __init__(self, resolver: Optional[BranchResolver] = None, use_fallback: bool = True):
        self.resolver = resolver
        self.use_fallback = use_fallback and resolver is not None

    def attribute(self, records: Sequence[CommitRecord]) -> list[CommitRecord]:
        labels: dict[str, str] = {}
        unresolved: list[str] = []

        for record in records:
            branch = branch_from_decoration(record.refs) if record.refs else None
            if branch:
                labels[record.id] = branch
            else:
                unresolved.append(record.id)

        if unresolved and self.use_fallback:
            labels.update(self._fallback(unresolved))

        return [replace(r, branch=labels.get(r.id, UNKNOWN_BRANCH)) for r in records]

    def _fallback(self, commit_ids: list[str]) -> dict[str, str]:
        if self.resolver is None:
            return {}
        try:
            candidates = self.resolver.resolve_branches(commit_ids)
            current = self.resolver.current_branch()
        except Exception as e:
            logger.warning("Branch resolution failed, using '%s': %s", UNKNOWN_BRANCH, e)
            return {}

        return {cid: choose_branch(candidates.get(cid, []), current) for cid in commit_ids}
