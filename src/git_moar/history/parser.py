"""Parse ``git log --numstat`` output into CommitRecords."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..logging_config import get_logger
from .models import CommitRecord, FileChange

logger = get_logger(__name__)

UNIT_SEPARATOR = "\x1f"


@dataclass(frozen=True)
class LogFormat:
    """Field layout of a commit header line.

    Header fields are hash, author name, author email, ISO date and subject.
    With ``include_refs`` the ref decoration (%D) is appended as a final
    field, after the subject.
    """

    separator: str = UNIT_SEPARATOR
    include_refs: bool = True
    date_field: str = "%aI"  # "%ad" relies on --date=iso

    @property
    def pretty(self) -> str:
        """Value for ``git log --pretty=format:``."""
        sep = "%x1f" if self.separator == UNIT_SEPARATOR else self.separator
        fields = ["%H", "%an", "%ae", self.date_field, "%s"]
        if self.include_refs:
            fields.append("%D")
        return sep.join(fields)


DEFAULT_FORMAT = LogFormat()
# The original pipe-delimited query: breaks when a subject contains "|"
LEGACY_FORMAT = LogFormat(separator="|", include_refs=False, date_field="%ad")

# additions, deletions ("-" for binary), tab, filename
_FILE_LINE_RE = re.compile(r"^(\d+|-)[ \t]+(\d+|-)\t(.+)$")


@dataclass(frozen=True)
class ParseResult:
    records: tuple[CommitRecord, ...]
    skipped_lines: int = 0


@dataclass
class _Pending:
    id: str
    author: str
    email: str
    timestamp: datetime
    summary: str
    refs: str
    files: list[FileChange]

    def finish(self) -> CommitRecord:
        return CommitRecord.build(
            id=self.id,
            author=self.author,
            author_email=self.email,
            timestamp=self.timestamp,
            summary=self.summary,
            files=self.files,
            refs=self.refs,
        )


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse git's ISO-like dates into an aware datetime.

    Accepts strict ISO 8601 (``%aI``) and git's ``--date=iso`` form
    (``2024-01-15 10:30:00 +0100``). Naive values are taken as UTC.
    Returns None when the text is not a date.
    """
    text = text.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.strptime(text, "%Y-%m-%d %H:%M:%S %z")
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _split_header(line: str, log_format: LogFormat) -> Optional[tuple[str, ...]]:
    """Split a header line into (hash, name, email, date, subject, refs)."""
    sep = log_format.separator
    parts = line.split(sep, 4)
    if len(parts) < 4:
        return None

    rest = parts[4] if len(parts) == 5 else ""
    refs = ""
    if log_format.include_refs and sep in rest:
        # Decoration is always the last field; the subject may contain sep
        rest, refs = rest.rsplit(sep, 1)

    commit_id, name, email, date = (p.strip() for p in parts[:4])
    if not commit_id:
        return None
    return commit_id, name, email, date, rest, refs.strip()


def parse_log(text: str, log_format: LogFormat = DEFAULT_FORMAT) -> ParseResult:
    """Parse a mixed header/numstat log stream.

    A header line contains the separator and is not a numstat line. Numstat
    lines belong to the most recent header. A header with an unparseable date
    drops that commit; its numstat lines are skipped with it. Anything else
    is skipped and counted.

    Records keep the order in which the log emitted them.
    """
    records: list[CommitRecord] = []
    skipped = 0
    current: Optional[_Pending] = None

    for raw_line in text.split("\n"):
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue

        file_match = _FILE_LINE_RE.match(line)

        if file_match is None and log_format.separator in line:
            if current is not None:
                records.append(current.finish())
                current = None

            fields = _split_header(line, log_format)
            timestamp = parse_timestamp(fields[3]) if fields else None
            if fields is None or timestamp is None:
                logger.debug("Skipping malformed header: %r", line[:120])
                skipped += 1
                continue

            commit_id, name, email, _date, summary, refs = fields
            current = _Pending(
                id=commit_id,
                author=name,
                email=email,
                timestamp=timestamp,
                summary=summary,
                refs=refs,
                files=[],
            )
        elif file_match is not None and current is not None:
            added, deleted, filename = file_match.groups()
            binary = added == "-" or deleted == "-"
            current.files.append(
                FileChange(
                    filename=filename,
                    additions=0 if added == "-" else int(added),
                    deletions=0 if deleted == "-" else int(deleted),
                    binary=binary,
                )
            )
        else:
            skipped += 1

    if current is not None:
        records.append(current.finish())

    if skipped:
        logger.debug("Skipped %d unrecognised log lines", skipped)

    return ParseResult(records=tuple(records), skipped_lines=skipped)


def parse_git_log(text: str, log_format: LogFormat = DEFAULT_FORMAT) -> list[CommitRecord]:
    """Parse a log stream and return only the records."""
    return list(parse_log(text, log_format).records)
