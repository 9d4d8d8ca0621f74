"""Implementation of the 'changelog' command.

Prints the changelog markdown to stdout; persisting it is up to the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from semtrail.config import load_config
from semtrail.core.engine import VersionEngine
from semtrail.exceptions import SemtrailError
from semtrail.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console


def run_changelog(
    path: str | None,
    ref: str,
    categorize: bool | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the changelog command.

    Args:
        path: Optional path to the repository
        ref: Commit the prospective version would be tagged on
        categorize: Group entries by category; None uses the configuration
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        engine = VersionEngine(GitRepository(project_path), config)
        changelog = engine.generate_changelog(ref=ref, categorize=categorize)
    except SemtrailError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(changelog, markup=False, highlight=False, soft_wrap=True, end="")
