"""Lines-of-code counter.

Walks a repository working tree and classifies every line of recognised
source files as source, comment or blank.

Adding a language:
  1. Add a LanguageSyntax entry to LANGUAGES.
  2. Map its extensions in EXTENSIONS.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LanguageSyntax:
    """Comment markers for one language."""

    name: str
    line_comments: tuple[str, ...] = ()
    # (open, close) pairs; a block runs until the close marker
    block_comments: tuple[tuple[str, str], ...] = ()


_C_STYLE = dict(line_comments=("//",), block_comments=(("/*", "*/"),))

LANGUAGES = {
    "js": LanguageSyntax("js", **_C_STYLE),
    "jsx": LanguageSyntax("jsx", **_C_STYLE),
    "ts": LanguageSyntax("ts", **_C_STYLE),
    "tsx": LanguageSyntax("tsx", **_C_STYLE),
    "php": LanguageSyntax("php", line_comments=("//", "#"), block_comments=(("/*", "*/"),)),
    "py": LanguageSyntax("py", line_comments=("#",), block_comments=(('"""', '"""'), ("'''", "'''"))),
    "java": LanguageSyntax("java", **_C_STYLE),
    "c": LanguageSyntax("c", **_C_STYLE),
    "cpp": LanguageSyntax("cpp", **_C_STYLE),
    "cs": LanguageSyntax("cs", **_C_STYLE),
    "go": LanguageSyntax("go", **_C_STYLE),
    "rb": LanguageSyntax("rb", line_comments=("#",), block_comments=(("=begin", "=end"),)),
    "rust": LanguageSyntax("rust", **_C_STYLE),
}

EXTENSIONS = {
    ".js": "js",
    ".jsx": "jsx",
    ".ts": "ts",
    ".tsx": "tsx",
    ".php": "php",
    ".py": "py",
    ".java": "java",
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "cs",
    ".go": "go",
    ".rb": "rb",
    ".rs": "rust",
}

SKIP_DIRS = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        "out",
        "vendor",
        "coverage",
        "target",
        "bin",
        "obj",
    }
)


@dataclass
class LineStats:
    source: int = 0
    comment: int = 0
    blank: int = 0
    total: int = 0

    def add(self, other: "LineStats") -> None:
        self.source += other.source
        self.comment += other.comment
        self.blank += other.blank
        self.total += other.total

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "comment": self.comment,
            "blank": self.blank,
            "total": self.total,
        }


@dataclass
class LanguageStats:
    source: int = 0
    comment: int = 0
    blank: int = 0
    files: int = 0

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "comment": self.comment,
            "blank": self.blank,
            "files": self.files,
        }


@dataclass
class LocReport:
    total: int = 0
    by_language: dict[str, LanguageStats] = field(default_factory=dict)
    by_directory: dict[str, int] = field(default_factory=dict)
    stats: LineStats = field(default_factory=LineStats)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_language": {k: v.to_dict() for k, v in self.by_language.items()},
            "by_directory": dict(self.by_directory),
            "stats": self.stats.to_dict(),
        }


def count_file_lines(text: str, syntax: LanguageSyntax) -> LineStats:
    """Classify each line of ``text``.

    A line that opens a block comment or starts with a line comment marker is
    a comment line; lines inside a block are comments until the close marker.
    """
    stats = LineStats()
    closing: Optional[str] = None

    for raw in text.splitlines():
        stats.total += 1
        line = raw.strip()

        if closing is not None:
            stats.comment += 1
            if closing in line:
                closing = None
            continue

        if not line:
            stats.blank += 1
            continue

        if any(line.startswith(marker) for marker in syntax.line_comments):
            stats.comment += 1
            continue

        opened = next((pair for pair in syntax.block_comments if line.startswith(pair[0])), None)
        if opened is not None:
            stats.comment += 1
            start, end = opened
            if end not in line[len(start):]:
                closing = end
            continue

        stats.source += 1

    return stats


def _language_for(path: Path) -> Optional[LanguageSyntax]:
    key = EXTENSIONS.get(path.suffix)
    return LANGUAGES.get(key) if key else None


def _walk(root: Path):
    for dirpath, dirnames, filenames in os.walk(root, onerror=lambda e: logger.debug("%s", e)):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS and not d.startswith("."))
        for name in sorted(filenames):
            yield Path(dirpath) / name


def count_lines(path: Union[str, Path], detailed: bool = False) -> Union[int, LocReport]:
    """Count source lines under ``path``.

    Returns the total number of source lines, or a LocReport with per-language
    and per-top-level-directory breakdowns when ``detailed`` is set. Files that
    cannot be read are skipped.
    """
    root = Path(path)
    report = LocReport()

    if not root.is_dir():
        logger.debug("Not a directory, no lines counted: %s", root)
        return report if detailed else 0

    for file_path in _walk(root):
        syntax = _language_for(file_path)
        if syntax is None:
            continue
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping %s: %s", file_path, e)
            continue

        stats = count_file_lines(text, syntax)
        report.total += stats.source
        report.stats.add(stats)

        lang = report.by_language.setdefault(syntax.name, LanguageStats())
        lang.source += stats.source
        lang.comment += stats.comment
        lang.blank += stats.blank
        lang.files += 1

        rel_parts = file_path.relative_to(root).parts
        top = rel_parts[0] if len(rel_parts) > 1 else "root"
        report.by_directory[top] = report.by_directory.get(top, 0) + stats.source

    return report if detailed else report.total
