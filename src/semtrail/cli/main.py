"""Typer application and logging setup."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from semtrail import __version__
from semtrail.cli.commands.changelog import run_changelog
from semtrail.cli.commands.version import OUTPUT_FORMATS, run_version

app = typer.Typer(
    name="semtrail",
    help="Next semantic version and changelog from git history",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich, keeping stdout clean."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"semtrail {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    _version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the semtrail version and exit",
    ),
) -> None:
    """Next semantic version and changelog from git history."""


@app.command()
def version(
    path: Optional[str] = typer.Argument(None, help="Path to the git repository"),
    ref: str = typer.Option("HEAD", "--ref", "-r", help="Commit to compute the version for"),
    output_format: str = typer.Option(
        "text", "--format", "-f", help=f"Output format: {', '.join(OUTPUT_FORMATS)}"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Compute the next version from tags and commit history."""
    if output_format not in OUTPUT_FORMATS:
        err_console.print(f"[red]Unknown format:[/] {output_format}")
        raise typer.Exit(2)
    configure_logging(verbose)
    run_version(path, ref, output_format, console, err_console)


@app.command()
def changelog(
    path: Optional[str] = typer.Argument(None, help="Path to the git repository"),
    ref: str = typer.Option("HEAD", "--ref", "-r", help="Commit the next version is tagged on"),
    categorize: Optional[bool] = typer.Option(
        None, "--categorize/--no-categorize", help="Group entries by commit category"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the markdown changelog for every release and the next one."""
    configure_logging(verbose)
    run_changelog(path, ref, categorize, console, err_console)


if __name__ == "__main__":
    app()
