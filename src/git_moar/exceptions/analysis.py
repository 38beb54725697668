"""Analysis-related exceptions: log parsing and git commands."""

from typing import Dict, List, Optional

from .base import GitMoarError


class AnalysisError(GitMoarError):
    """Base class for analysis-related errors."""
    pass


class LogParseError(AnalysisError):
    """Raised when parsed commit data breaks a structural invariant."""

    def __init__(self, commit_id: str, reason: str):
        super().__init__(
            f"Inconsistent commit record: {commit_id}",
            details={"commit": commit_id, "reason": reason},
        )
        self.commit_id = commit_id


class GitCommandError(AnalysisError):
    """Raised when a git subprocess fails or times out."""

    def __init__(self, command: List[str], reason: str, returncode: Optional[int] = None):
        details: Dict[str, str] = {"command": " ".join(command), "reason": reason}
        if returncode is not None:
            details["returncode"] = str(returncode)

        super().__init__(f"git command failed: {command[-1] if command else ''}", details=details)
        self.command = command
        self.returncode = returncode

