"""Shared CLI helpers."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import ReportConfig, load_config

console = Console()


def resolve_config(config: Optional[Path] = None, **overrides) -> ReportConfig:
    """Build the report config from CLI options; None-valued options are ignored."""
    return load_config(config_file=config, **overrides)


def write_json(target: Path, payload: dict) -> Path:
    """Write a report payload with a generation timestamp."""
    document = {"generated_at": datetime.now(timezone.utc).isoformat(), **payload}
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return target


def signed(value: int, sign: str) -> str:
    return f"{sign}{value:,}"
