"""Snitch command -- who committed what in one repository."""

from pathlib import Path
from typing import List, Optional

import click
import typer

from ..exceptions import GitMoarError
from ..logging_config import setup_logging
from ..pipeline import analyze_repository, sort_commits
from . import app
from ._common import console, resolve_config, write_json
from ._tables import authors_table, commits_table, hotspots_table, quality_table, summary_table


@app.command()
def snitch(
    path: Path = typer.Argument(
        Path("."),
        help="Repository to analyze (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    start_date: Optional[str] = typer.Option(
        None,
        "--start-date",
        "-s",
        help="Only commits after this date (any format git accepts)",
    ),
    end_date: Optional[str] = typer.Option(
        None,
        "--end-date",
        "-e",
        help="Only commits before this date",
    ),
    all_branches: bool = typer.Option(
        False,
        "--all-branches",
        "-a",
        help="Include commits from all local and remote branches",
    ),
    branch: Optional[List[str]] = typer.Option(
        None,
        "--branch",
        "-b",
        help="Branch to include (repeatable)",
    ),
    sort_by: str = typer.Option(
        "date",
        "--sort-by",
        help="Sort commits by: date | additions | deletions",
        click_type=click.Choice(["date", "additions", "deletions"], case_sensitive=False),
    ),
    sort_order: str = typer.Option(
        "desc",
        "--sort-order",
        help="Sort order: asc | desc",
        click_type=click.Choice(["asc", "desc"], case_sensitive=False),
    ),
    limit: int = typer.Option(
        50,
        "--limit",
        "-n",
        help="Commits to show in the table",
        min=0,
    ),
    json_file: Optional[Path] = typer.Option(
        None,
        "--json",
        help="Write the full report payload to this JSON file",
        dir_okay=False,
    ),
    no_branches: bool = typer.Option(
        False,
        "--no-branches",
        help="Skip the per-commit branch-containment queries",
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
    Report commits, contributors, hotspots and health for one repository.

    [bold cyan]Examples:[/bold cyan]

      git-moar snitch

      git-moar snitch --start-date 2024-01-01 --end-date 2024-03-31

      git-moar snitch --all-branches --sort-by additions

      git-moar snitch --branch main --branch develop --json report.json
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)
    branches = list(branch or [])

    if all_branches and branches:
        console.print(
            "[yellow]Warning:[/yellow] both --all-branches and --branch given; "
            "--all-branches takes precedence."
        )
        branches = []

    try:
        cfg = resolve_config(config, resolve_branches=False if no_branches else None)
        report = analyze_repository(
            path,
            cfg,
            since=start_date,
            until=end_date,
            branches=branches,
            all_branches=all_branches,
        )
    except GitMoarError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if report.is_empty:
        console.print("[yellow]No commits found for the specified criteria.[/yellow]")
        raise typer.Exit(1)

    if all_branches:
        scope = "All branches"
    elif branches:
        scope = f"Branches: {', '.join(branches)}"
    else:
        scope = f"Current branch: {report.repo.current_branch or 'unknown'}"

    console.print()
    title = f"{cfg.company_name} / {report.repo.name}" if cfg.company_name else report.repo.name
    console.print(f"[bold cyan]{title}[/bold cyan] -- {scope}")
    console.print()
    console.print(summary_table(report, cfg))
    console.print()
    console.print(authors_table(report.authors))

    commits = sort_commits(report.commits, sort_by.lower(), sort_order.lower())
    if limit:
        console.print(commits_table(commits[:limit], cfg.date_format))
        if len(commits) > limit:
            console.print(f"[dim]... {len(commits) - limit} more commits[/dim]")

    if report.hotspots:
        console.print(hotspots_table(report))
    if report.quality is not None:
        console.print(quality_table(report, cfg))
    if report.issues:
        refs = ", ".join(i.reference.ref for i in report.issues[:10])
        console.print(f"Referenced issues ({len(report.issues)}): {refs}")

    if json_file is not None:
        payload = report.to_dict()
        by_id = {d["id"]: d for d in payload["commits"]}
        payload["commits"] = [by_id[c.id] for c in commits]
        payload["options"] = {
            "start_date": start_date,
            "end_date": end_date,
            "all_branches": all_branches,
            "branches": branches,
            "sort_by": sort_by,
            "sort_order": sort_order,
        }
        written = write_json(json_file, payload)
        console.print(f"\nReport saved to: [bold green]{written}[/bold green]")
