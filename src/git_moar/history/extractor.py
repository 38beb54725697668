"""Run git log queries and read repository metadata via subprocess."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import quote

from ..exceptions import GitCommandError
from ..logging_config import get_logger
from .models import UNKNOWN_BRANCH
from .parser import DEFAULT_FORMAT, LogFormat, parse_timestamp

logger = get_logger(__name__)

# git@github.com:owner/repo.git
_SSH_REMOTE_RE = re.compile(r"^git@([^:]+):([^/]+)/(.+?)(?:\.git)?$")


@dataclass(frozen=True)
class RepoInfo:
    name: str
    path: str
    url: str = ""
    current_branch: Optional[str] = None
    first_commit: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "url": self.url,
            "current_branch": self.current_branch,
            "first_commit": self.first_commit.isoformat() if self.first_commit else None,
        }


def normalize_remote_url(remote: str) -> str:
    """Turn an SSH or ``.git`` remote into a browsable HTTPS URL."""
    remote = remote.strip()
    match = _SSH_REMOTE_RE.match(remote)
    if match:
        host, owner, repo = match.groups()
        return f"https://{host}/{owner}/{repo}"
    if remote.endswith(".git"):
        return remote[:-4]
    return remote


def _is_known_host(repo_url: str) -> bool:
    return "github.com" in repo_url or "gitlab.com" in repo_url


def commit_url(repo_url: str, commit_id: str) -> str:
    if not repo_url or not _is_known_host(repo_url):
        return "#"
    return f"{repo_url}/commit/{commit_id}"


def branch_url(repo_url: str, branch: str) -> str:
    if not repo_url or not branch or branch == UNKNOWN_BRANCH or not _is_known_host(repo_url):
        return "#"
    if branch.startswith("origin/"):
        branch = branch[len("origin/"):]
    return f"{repo_url}/tree/{quote(branch, safe='')}"


class GitLogExtractor:
    """Build and run the log query for one repository."""

    def __init__(
        self,
        repo_path: str,
        log_format: LogFormat = DEFAULT_FORMAT,
        timeout: float = 120.0,
    ):
        self.repo_path = str(Path(repo_path).resolve())
        self.log_format = log_format
        self.timeout = timeout

    def _run(self, args: Sequence[str], timeout: Optional[float] = None) -> str:
        cmd = ["git", "-C", self.repo_path, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout or self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise GitCommandError(cmd, "timed out")
        except (FileNotFoundError, OSError) as e:
            raise GitCommandError(cmd, str(e))
        if result.returncode != 0:
            raise GitCommandError(cmd, result.stderr.strip(), result.returncode)
        return result.stdout

    def is_git_repo(self) -> bool:
        try:
            self._run(["rev-parse", "--git-dir"], timeout=5)
            return True
        except GitCommandError:
            return False

    def log_command(
        self,
        since: Optional[str] = None,
        until: Optional[str] = None,
        branches: Sequence[str] = (),
        all_branches: bool = False,
    ) -> list[str]:
        """Arguments for the log query (without the ``git -C`` prefix)."""
        args = ["log", f"--pretty=format:{self.log_format.pretty}", "--date=iso", "--numstat"]
        if all_branches:
            args.append("--all")
        else:
            args.extend(branches)
        if since:
            args.append(f"--since={since}")
        if until:
            args.append(f"--until={until}")
        return args

    def log(
        self,
        since: Optional[str] = None,
        until: Optional[str] = None,
        branches: Sequence[str] = (),
        all_branches: bool = False,
    ) -> Optional[str]:
        """Raw log text, or None if the query fails."""
        try:
            return self._run(self.log_command(since, until, branches, all_branches))
        except GitCommandError as e:
            logger.warning("git log failed in %s: %s", self.repo_path, e)
            return None

    def _optional(self, args: Sequence[str]) -> str:
        try:
            return self._run(args, timeout=10).strip()
        except GitCommandError as e:
            logger.debug("%s", e)
            return ""

    def repo_info(self) -> RepoInfo:
        remote = self._optional(["config", "--get", "remote.origin.url"])
        branch = self._optional(["branch", "--show-current"])
        first_line = self._optional(["log", "--reverse", "--format=%aI"]).splitlines()
        return RepoInfo(
            name=Path(self.repo_path).name,
            path=self.repo_path,
            url=normalize_remote_url(remote) if remote else "",
            current_branch=branch or None,
            first_commit=parse_timestamp(first_line[0]) if first_line else None,
        )
