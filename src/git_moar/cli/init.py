"""Init command -- write a sample configuration file."""

from pathlib import Path

import typer

from ..config import write_sample_config
from ..exceptions import ConfigurationError
from . import app
from ._common import console


@app.command()
def init(
    directory: Path = typer.Argument(
        Path("."),
        help="Where to write .git-moar.toml",
        file_okay=False,
        dir_okay=True,
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Create a sample .git-moar.toml."""
    try:
        target = write_sample_config(directory, overwrite=force)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"Config written to: [bold green]{target}[/bold green]")
