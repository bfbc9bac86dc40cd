# foldkeep/cli/cli.py
"""
foldkeep CLI - Main application.

Commands:
    foldkeep init      Create the persistence directory for a project
    foldkeep show      List tracked files and their stored folds
    foldkeep doctor    Validate every persisted document

NOTE: Commands use lazy loading - imports only happen when a command is invoked.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from foldkeep.logging.logger import configure_logging

app = typer.Typer(
    name="foldkeep",
    help="foldkeep - persistent code-folding state. Start with: foldkeep init",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Persist code-folding state across editor sessions."""
    if verbose:
        configure_logging(logging.DEBUG)


# =============================================================================
# LAZY COMMANDS
# =============================================================================


@app.command("init")
def init(
    root: Path = typer.Argument(Path("."), help="Project root directory."),
) -> None:
    """Create the persistence directory and empty documents."""
    from foldkeep.cli.commands import init as mod

    mod.command(root=root)


@app.command("show")
def show(
    root: Path = typer.Argument(Path("."), help="Project root directory."),
    folds: bool = typer.Option(False, "--folds", "-f", help="List every stored fold."),
) -> None:
    """List tracked files, their record ids and stored folds."""
    from foldkeep.cli.commands import show as mod

    mod.command(root=root, folds=folds)


@app.command("doctor")
def doctor(
    root: Path = typer.Argument(Path("."), help="Project root directory."),
) -> None:
    """Validate the mapping and every fold record document."""
    from foldkeep.cli.commands import doctor as mod

    mod.command(root=root)


@app.command("version")
def version() -> None:
    """Show the foldkeep version."""
    from foldkeep import __version__

    typer.echo(f"foldkeep version {__version__}")


if __name__ == "__main__":
    app()
