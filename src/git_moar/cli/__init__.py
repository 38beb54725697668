"""CLI entry point; registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="git-moar",
    help="git-moar - who did what, where, and how healthy it looks",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """Activity reports from git history."""
    if version:
        console.print(f"[bold cyan]git-moar[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


def main() -> None:
    app()


# Import subcommands to register them
from .init import init as _init  # noqa: F401, E402
from .scattered import scattered as _scattered  # noqa: F401, E402
from .snitch import snitch as _snitch  # noqa: F401, E402
