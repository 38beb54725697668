"""Configuration loading and management for git-moar.

Configuration is an explicit, immutable ``ReportConfig`` built once at process
start and handed to every component that needs it. Sources are merged in
priority order:
    1. Defaults (defined in the dataclasses below)
    2. Global config (~/.git-moar.toml)
    3. Project config (./.git-moar.toml)
    4. Explicit config file
    5. Environment variables (GIT_MOAR_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(hotspot_limit=10)
    >>> config.analysis.hotspot_limit
    10
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ConfigurationError, InvalidConfigError

Theme = Literal["dark", "light"]

CONFIG_FILENAME = ".git-moar.toml"

DEFAULT_CHART_COLORS = (
    "#22c55e",
    "#dc2626",
    "#1e40af",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#10b981",
    "#f97316",
)


@dataclass(frozen=True)
class ChartConfig:
    """Chart toggles consumed by the report renderer."""

    enabled: bool = True
    library: str = "chartjs"
    show_activity_chart: bool = True
    show_contributor_pie: bool = True
    show_language_bar: bool = True
    show_heatmap: bool = True
    show_commit_type_breakdown: bool = True
    colors: tuple[str, ...] = DEFAULT_CHART_COLORS

    def __post_init__(self) -> None:
        if not self.colors:
            raise InvalidConfigError("charts.colors", self.colors, "at least one color required")


@dataclass(frozen=True)
class StatsConfig:
    """Which derived analytics are computed for a report."""

    currency: str = "$"
    show_line_value: bool = True
    line_value: float = 50.0
    show_productivity: bool = True
    show_quality_metrics: bool = True
    show_hotspots: bool = True

    def __post_init__(self) -> None:
        if self.line_value < 0:
            raise InvalidConfigError("stats.line_value", self.line_value, "must be non-negative")


@dataclass(frozen=True)
class FilterConfig:
    """Commit and file filters applied before analysis.

    Attributes:
        exclude_authors: Author emails or names whose commits are dropped
        include_extensions: If set, only files with these extensions count
        exclude_patterns: Glob patterns of files to drop from every commit
    """

    exclude_authors: tuple[str, ...] = ()
    include_extensions: Optional[tuple[str, ...]] = None
    exclude_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class IntegrationsConfig:
    """Issue-tracker links for JIRA keys found in commit summaries.

    When enabled, keys get browse URLs under ``jira_base_url``, and a set
    ``jira_project_key`` keeps only that project's keys.
    """

    jira_enabled: bool = False
    jira_base_url: Optional[str] = None
    jira_project_key: Optional[str] = None


@dataclass(frozen=True)
class WidgetConfig:
    # show_time_saved is only read by HTML renderers
    show_code_value: bool = True
    show_time_saved: bool = True
    show_health_score: bool = True
    show_bus_factor: bool = True
    show_commit_classification: bool = True


@dataclass(frozen=True)
class AnalysisOptions:
    """Pipeline tuning.

    Attributes:
        hotspot_limit: Maximum number of hotspots kept per repository
        resolve_branches: Run the slow branch-containment fallback
        branch_query_timeout: Seconds allowed per containment query
        branch_query_retries: Extra attempts per containment query
        branch_workers: Parallel containment queries per repository
        workers: Parallel repository analyses in a tree scan
        git_timeout: Seconds allowed for the main log query
    """

    hotspot_limit: int = 20
    resolve_branches: bool = True
    branch_query_timeout: float = 10.0
    branch_query_retries: int = 1
    branch_workers: int = 4
    workers: int = 4
    git_timeout: float = 120.0

    def __post_init__(self) -> None:
        if self.hotspot_limit < 1:
            raise InvalidConfigError("analysis.hotspot_limit", self.hotspot_limit, "must be at least 1")
        if self.branch_query_timeout <= 0:
            raise InvalidConfigError(
                "analysis.branch_query_timeout", self.branch_query_timeout, "must be positive"
            )
        if self.branch_query_retries < 0:
            raise InvalidConfigError(
                "analysis.branch_query_retries", self.branch_query_retries, "must be non-negative"
            )
        if self.branch_workers < 1:
            raise InvalidConfigError("analysis.branch_workers", self.branch_workers, "must be at least 1")
        if self.workers < 1:
            raise InvalidConfigError("analysis.workers", self.workers, "must be at least 1")
        if self.git_timeout <= 0:
            raise InvalidConfigError("analysis.git_timeout", self.git_timeout, "must be positive")


_SECTIONS: dict[str, type] = {
    "charts": ChartConfig,
    "stats": StatsConfig,
    "filters": FilterConfig,
    "integrations": IntegrationsConfig,
    "widgets": WidgetConfig,
    "analysis": AnalysisOptions,
}


@dataclass(frozen=True)
class ReportConfig:
    """Top-level configuration for a git-moar run.

    ``timezone`` is an IANA zone name used for hour/day bucketing. When None,
    each commit's own recorded offset is used.

    ``theme``, ``logo``, ``custom_css`` and ``charts`` are carried for HTML
    report renderers and do not affect the terminal report.
    """

    theme: Theme = "dark"
    company_name: Optional[str] = None
    logo: Optional[str] = None
    custom_css: Optional[str] = None
    timezone: Optional[str] = None
    date_format: str = "%Y-%m-%d %H:%M"

    charts: ChartConfig = field(default_factory=ChartConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    integrations: IntegrationsConfig = field(default_factory=IntegrationsConfig)
    widgets: WidgetConfig = field(default_factory=WidgetConfig)
    analysis: AnalysisOptions = field(default_factory=AnalysisOptions)

    def __post_init__(self) -> None:
        if self.theme not in ("dark", "light"):
            raise InvalidConfigError("theme", self.theme, "expected 'dark' or 'light'")
        if self.timezone is not None:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise InvalidConfigError("timezone", self.timezone, "unknown IANA timezone")

    @property
    def tzinfo(self):
        """Configured timezone as a tzinfo, or None for per-commit offsets."""
        if self.timezone is None:
            return None
        return ZoneInfo(self.timezone)


DEFAULT_CONFIG = ReportConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> ReportConfig:
    """Load configuration with auto-discovery and merging.

    Keyword overrides may name top-level fields (``timezone="UTC"``) or any
    field of the ``analysis`` section (``workers=8``). Overrides whose value is
    None are ignored so CLI options can be passed through unconditionally.

    Raises:
        ConfigurationError: If a config file is missing or invalid, or a key
            is unknown.
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / CONFIG_FILENAME
    if global_config.exists():
        _merge_into(merged, _read_config_file(global_config, "global"))

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists() and project_config != global_config:
        _merge_into(merged, _read_config_file(project_config, "project"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        _merge_into(merged, _read_config_file(config_file, "explicit"))

    _merge_into(merged, _load_env_vars())

    analysis_names = {f.name for f in fields(AnalysisOptions)}
    top_names = {f.name for f in fields(ReportConfig)}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in top_names and key not in _SECTIONS:
            merged[key] = value
        elif key in analysis_names:
            merged.setdefault("analysis", {})[key] = value
        else:
            raise ConfigurationError(f"Unknown configuration override: {key}")

    return build_config(merged)


def build_config(data: dict[str, Any]) -> ReportConfig:
    """Build a validated ReportConfig from a (TOML-shaped) mapping."""
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in _SECTIONS:
            if not isinstance(value, dict):
                raise ConfigurationError(f"[{key}] must be a table")
            kwargs[key] = _build_section(key, value)
        else:
            kwargs[key] = value

    try:
        return ReportConfig(**kwargs)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _build_section(name: str, values: dict[str, Any]) -> Any:
    cls = _SECTIONS[name]
    cleaned = {k: tuple(v) if isinstance(v, list) else v for k, v in values.items()}
    try:
        return cls(**cleaned)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [{name}] config: {e}")


def _merge_into(target: dict[str, Any], source: dict[str, Any]) -> None:
    """Merge ``source`` into ``target``, one level deep for section tables."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key] = {**target[key], **value}
        else:
            target[key] = value


def _read_config_file(path: Path, label: str) -> dict[str, Any]:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} config '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GIT_MOAR_* environment variables.

    Top-level scalars use ``GIT_MOAR_<FIELD>`` (e.g. GIT_MOAR_TIMEZONE);
    analysis options use ``GIT_MOAR_ANALYSIS_<FIELD>``
    (e.g. GIT_MOAR_ANALYSIS_WORKERS).
    """
    result: dict[str, Any] = {}

    top_hints = get_type_hints(ReportConfig)
    for f in fields(ReportConfig):
        if f.name in _SECTIONS:
            continue
        env_key = f"GIT_MOAR_{f.name.upper()}"
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        try:
            parsed = _parse_env_value(raw, top_hints[f.name])
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[f.name] = parsed

    analysis_hints = get_type_hints(AnalysisOptions)
    for f in fields(AnalysisOptions):
        env_key = f"GIT_MOAR_ANALYSIS_{f.name.upper()}"
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        try:
            parsed = _parse_env_value(raw, analysis_hints[f.name])
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result.setdefault("analysis", {})[f.name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the hinted type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)


SAMPLE_CONFIG = """\
# git-moar configuration
# theme, logo, custom_css and [charts] are read by HTML report renderers;
# the terminal report ignores them.
theme = "dark"
company_name = "My Company"
# timezone = "Europe/Berlin"

[charts]
enabled = true
show_activity_chart = true
show_contributor_pie = true
show_language_bar = true
show_heatmap = true

[stats]
currency = "$"
show_line_value = true
line_value = 50
show_productivity = true
show_quality_metrics = true

[filters]
exclude_authors = ["bot@example.com", "dependabot[bot]"]
exclude_patterns = ["*.test.js", "*.spec.ts"]

[integrations]
jira_enabled = false
# jira_base_url = "https://jira.example.com"
# jira_project_key = "PROJ"

[widgets]
show_code_value = true
show_health_score = true
show_bus_factor = true

[analysis]
hotspot_limit = 20
resolve_branches = true
branch_query_timeout = 10
"""


def write_sample_config(directory: Path, overwrite: bool = False) -> Path:
    """Write a sample ``.git-moar.toml`` into ``directory`` and return its path."""
    target = Path(directory) / CONFIG_FILENAME
    if target.exists() and not overwrite:
        raise ConfigurationError(f"Config file already exists: {target}")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return target
