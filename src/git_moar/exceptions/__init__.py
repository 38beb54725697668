"""Exception hierarchy for git-moar."""

from .analysis import (
    AnalysisError,
    GitCommandError,
    LogParseError,
)
from .base import GitMoarError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "GitMoarError",
    "AnalysisError",
    "GitCommandError",
    "LogParseError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
]
