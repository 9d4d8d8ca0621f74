"""Implementation of the 'version' command.

The version command prints the next version and the reason for it, either
as a table or as CI variables for the pipeline to apply.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from semtrail.config import load_config
from semtrail.core.engine import VersionEngine, ci_variables
from semtrail.exceptions import SemtrailError
from semtrail.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

OUTPUT_FORMATS = ("text", "json", "env")


def run_version(
    path: str | None,
    ref: str,
    output_format: str,
    console: Console,
    err_console: Console,
) -> None:
    """Run the version command.

    Args:
        path: Optional path to the repository
        ref: Commit the version is computed for
        output_format: One of "text", "json" or "env"
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        engine = VersionEngine(GitRepository(project_path), config)
        info = engine.get_version_info(ref)
    except SemtrailError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    variables = ci_variables(info)

    if output_format == "json":
        console.print_json(json.dumps(variables))
        return
    if output_format == "env":
        for key, value in variables.items():
            console.print(f"{key}={value}", markup=False, highlight=False, soft_wrap=True)
        return

    previous = str(info.previous_version) if info.previous_version else "[dim]none[/]"
    table = Table(title="Version", show_header=False, title_justify="left")
    table.add_column(style="cyan")
    table.add_column()
    table.add_row("Previous version", previous)
    table.add_row("New version", f"[green]{info.version}[/]")
    table.add_row("Bump type", str(info.decision.type))
    table.add_row("Reason", escape(info.decision.reason))
    table.add_row("Commits", f"{info.first_commit_hash[:7]}...{info.last_commit_hash[:7]}")
    console.print(table)
