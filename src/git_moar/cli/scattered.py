"""Scattered command -- activity across every repository under a directory."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..exceptions import GitMoarError
from ..logging_config import setup_logging
from ..pipeline import overall_stats, scan_repositories, sort_reports
from . import app
from ._common import console, resolve_config, signed, write_json
from ._tables import projects_table


@app.command()
def scattered(
    directory: Path = typer.Option(
        Path("."),
        "--dir",
        "-d",
        help="Directory to scan for git repositories",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    period: str = typer.Option(
        "7d",
        "--period",
        "-p",
        help="Analysis period, e.g. 1d, 7d, 2w, 3m",
    ),
    sort_by: str = typer.Option(
        "commits",
        "--sort-by",
        help="Sort projects by: commits | loc | additions | deletions",
        click_type=click.Choice(["commits", "loc", "additions", "deletions"], case_sensitive=False),
    ),
    sort_order: str = typer.Option(
        "desc",
        "--sort-order",
        help="Sort order: asc | desc",
        click_type=click.Choice(["asc", "desc"], case_sensitive=False),
    ),
    json_file: Optional[Path] = typer.Option(
        None,
        "--json",
        help="Write the full scan payload to this JSON file",
        dir_okay=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Repositories analyzed in parallel",
        min=1,
        max=32,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
):
    """
    Summarize recent activity across all repositories under a directory.

    [bold cyan]Examples:[/bold cyan]

      git-moar scattered

      git-moar scattered -p 1d -d ~/Code --sort-by loc
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)

    try:
        cfg = resolve_config(config, workers=workers)
        console.print(f"[cyan]Scanning {directory.resolve()} for activity in the last {period}...[/cyan]")
        reports = scan_repositories(directory, cfg, period=period)
    except GitMoarError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not reports:
        console.print("[yellow]No activity found for the specified period.[/yellow]")
        raise typer.Exit(1)

    reports = sort_reports(reports, sort_by.lower(), sort_order.lower())
    totals = overall_stats(reports)

    console.print()
    if cfg.company_name:
        console.print(f"[bold cyan]{cfg.company_name}[/bold cyan]")
    console.print(projects_table(reports))
    console.print(
        f"[bold]{totals['total_projects']}[/bold] projects, "
        f"[bold]{totals['total_commits']:,}[/bold] commits, "
        f"[green]{signed(totals['total_additions'], '+')}[/green] / "
        f"[red]{signed(totals['total_deletions'], '-')}[/red] lines, "
        f"{totals['total_loc']:,} LOC"
    )

    if json_file is not None:
        written = write_json(
            json_file,
            {
                "period": period,
                "overall": totals,
                "projects": [r.to_dict() for r in reports],
            },
        )
        console.print(f"\nReport saved to: [bold green]{written}[/bold green]")
