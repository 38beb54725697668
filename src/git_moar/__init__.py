"""
git-moar - activity reports from git history

Parses ``git log --numstat`` output into immutable commit records, attributes
each commit to a branch, and derives per-author summaries, commit
classification, file hotspots, health scores and productivity insights for one
repository or a whole directory of them.
"""

__version__ = "0.3.0"

from .config import DEFAULT_CONFIG, ReportConfig, load_config
from .pipeline import RepositoryReport, analyze_repository, scan_repositories

__all__ = [
    "analyze_repository",  # Single repository
    "scan_repositories",  # Every active repository under a directory
    "RepositoryReport",
    "ReportConfig",
    "DEFAULT_CONFIG",
    "load_config",
]
