"""Rich tables for repository reports."""

from typing import Sequence

from rich.table import Table

from ..analytics.hotspots import RiskLevel
from ..analytics.quality import health_rating
from ..config import DEFAULT_CONFIG, ReportConfig
from ..history.models import AuthorSummary, CommitRecord
from ..pipeline import RepositoryReport
from ._common import signed

_RISK_STYLE = {
    RiskLevel.HIGH: "red",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "green",
}


def summary_table(report: RepositoryReport, config: ReportConfig = DEFAULT_CONFIG) -> Table:
    stats = report.project
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Commits", f"{stats.total_commits:,}")
    table.add_row("Contributors", f"{stats.total_authors:,}")
    table.add_row("Lines added", f"[green]{signed(stats.total_additions, '+')}[/green]")
    table.add_row("Lines deleted", f"[red]{signed(stats.total_deletions, '-')}[/red]")
    if config.stats.show_line_value and config.widgets.show_code_value:
        value = stats.total_additions * config.stats.line_value
        table.add_row("Code value", f"{config.stats.currency}{value:,.0f}")
    timing = stats.avg_time_between_commits
    table.add_row("Avg time between commits", f"{timing.avg_hours}h ({timing.avg_days}d)")
    if report.loc is not None:
        table.add_row("Lines of code", f"{report.loc.total:,}")
    if report.skipped_lines:
        table.add_row("Skipped log lines", str(report.skipped_lines))
    return table


def authors_table(authors: Sequence[AuthorSummary]) -> Table:
    table = Table(title="Contributors", show_header=True, pad_edge=True)
    table.add_column("Author", min_width=16)
    table.add_column("Email", style="dim")
    table.add_column("Commits", justify="right")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Deleted", justify="right", style="red")
    table.add_column("Avg +/-", justify="right")
    table.add_column("Avg gap", justify="right")

    for a in sorted(authors, key=lambda a: a.total_commits, reverse=True):
        table.add_row(
            a.display_name,
            a.email,
            str(a.total_commits),
            signed(a.total_additions, "+"),
            signed(a.total_deletions, "-"),
            f"{a.avg_additions}/{a.avg_deletions}",
            f"{a.avg_time_between_commits.avg_days}d",
        )
    return table


def commits_table(commits: Sequence[CommitRecord], date_format: str) -> Table:
    table = Table(title="Commits", show_header=True, pad_edge=True)
    table.add_column("Hash", style="cyan", no_wrap=True)
    table.add_column("Branch", style="magenta")
    table.add_column("Date", no_wrap=True)
    table.add_column("Author")
    table.add_column("Summary", overflow="fold")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")

    for c in commits:
        table.add_row(
            c.short_id,
            c.branch,
            c.timestamp.strftime(date_format),
            c.author,
            c.summary,
            str(c.additions),
            str(c.deletions),
        )
    return table


def hotspots_table(report: RepositoryReport, limit: int = 10) -> Table:
    table = Table(title="Hotspots", show_header=True, pad_edge=True)
    table.add_column("File", overflow="fold")
    table.add_column("Changes", justify="right")
    table.add_column("Churn", justify="right")
    table.add_column("Authors", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Risk")

    for h in report.hotspots[:limit]:
        style = _RISK_STYLE[h.risk_level]
        table.add_row(
            h.filename,
            str(h.changes),
            f"{h.churn:,}",
            str(h.author_count),
            f"{h.hotspot_score:.1f}",
            f"[{style}]{h.risk_level.value}[/{style}]",
        )
    return table


def quality_table(report: RepositoryReport, config: ReportConfig = DEFAULT_CONFIG) -> Table:
    q = report.quality
    table = Table(title="Health", show_header=False, pad_edge=True)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    if q is None:
        return table
    widgets = config.widgets
    if widgets.show_health_score:
        table.add_row("Health score", f"[bold]{q.health_score}[/bold] ({health_rating(q.health_score).label})")
    if widgets.show_bus_factor:
        table.add_row("Bus factor", str(q.bus_factor))
    table.add_row("Ownership concentration", f"{q.ownership_concentration:.2f}")
    table.add_row("Churn per commit", str(q.churn_rate))
    table.add_row("Avg commit size", str(q.avg_commit_size))
    table.add_row("Code stability", f"{q.code_stability:.2f}")
    table.add_row("Comment ratio", f"{q.comment_ratio}%")
    return table


def projects_table(reports: Sequence[RepositoryReport]) -> Table:
    table = Table(title="Active projects", show_header=True, pad_edge=True)
    table.add_column("Project", style="bold")
    table.add_column("Commits", justify="right")
    table.add_column("Authors", justify="right")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Deleted", justify="right", style="red")
    table.add_column("LOC", justify="right")
    table.add_column("Health", justify="right")

    for r in reports:
        health = str(r.quality.health_score) if r.quality else "-"
        table.add_row(
            r.repo.name,
            f"{r.project.total_commits:,}",
            str(r.project.total_authors),
            signed(r.project.total_additions, "+"),
            signed(r.project.total_deletions, "-"),
            f"{r.total_loc:,}",
            health,
        )
    return table
