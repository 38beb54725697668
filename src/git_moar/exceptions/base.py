"""Root of the git-moar exception hierarchy."""

from typing import Dict, Optional


class GitMoarError(Exception):
    """Anything git-moar raises on purpose.

    ``details`` holds structured context (config key, path, commit id, git
    command). Its ``reason`` entry is appended to the rendered message; the
    other entries are for callers and log records.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    @property
    def reason(self) -> Optional[str]:
        return self.details.get("reason") or None

    def __str__(self) -> str:
        if self.reason:
            return f"{self.message} ({self.reason})"
        return self.message
