"""Period shorthand (``7d``, ``2w``, ``3m``) for log queries and rates."""

import re
from typing import Optional

DEFAULT_PERIOD_DAYS = 7.0

_PERIOD_RE = re.compile(r"^(\d+)([hdwmy])$", re.IGNORECASE)

_UNIT_NAMES = {
    "h": "hours",
    "d": "days",
    "w": "weeks",
    "m": "months",
    "y": "years",
}

# Calendar approximations: a month is 30 days, a year 365
_UNIT_DAYS = {
    "h": 1 / 24,
    "d": 1.0,
    "w": 7.0,
    "m": 30.0,
    "y": 365.0,
}


def _match(period: str) -> Optional[tuple[int, str]]:
    match = _PERIOD_RE.match(period.strip())
    if not match:
        return None
    return int(match.group(1)), match.group(2).lower()


def parse_period_to_git_since(period: str) -> str:
    """``"7d"`` -> ``"7 days ago"``; anything else is passed through to git."""
    parsed = _match(period)
    if parsed is None:
        return period
    amount, unit = parsed
    return f"{amount} {_UNIT_NAMES[unit]} ago"


def parse_period_to_days(period: str) -> float:
    """Length of a shorthand period in days.

    Unrecognised or zero-length periods count as a week so rates stay finite.
    """
    parsed = _match(period)
    if parsed is None:
        return DEFAULT_PERIOD_DAYS
    amount, unit = parsed
    days = amount * _UNIT_DAYS[unit]
    return days if days > 0 else DEFAULT_PERIOD_DAYS
