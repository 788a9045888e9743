"""Status command for CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from cmdep.cli.formatting import _format_status_with_color
from cmdep.cli.main import _fail, app, load_fetch_context
from cmdep.config import MANIFEST_ENV_VARS
from cmdep.core.exceptions import CmdepError
from cmdep.core.models import FilePackage


@app.command()
def status(
    root: Path | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Project root. Defaults to the nearest directory with .cmdep, CMakeLists.txt or .git.",
    ),
    manifest: Path | None = typer.Option(
        None,
        "--manifest",
        "-m",
        envvar=MANIFEST_ENV_VARS,
        help="Package manifest (Python file defining 'packages').",
    ),
    cache_dir: Path | None = typer.Option(
        None,
        "--cache-dir",
        "-c",
        help="Cache root. Defaults to $CMDEP_DIR or <root>/3rdparty.",
    ),
) -> None:
    """Show cache state (cached/missing) per package without fetching."""
    try:
        cache, packages = load_fetch_context(root, manifest, cache_dir)
    except CmdepError as e:
        raise _fail(e) from None

    if not packages:
        typer.echo("No packages declared in the manifest.")
        return

    # Build Rich table
    table = Table()
    table.add_column("Name", no_wrap=True)
    table.add_column("Version", no_wrap=True)
    table.add_column("Kind", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Path", overflow="fold")

    for pkg in packages:
        kind = "file" if isinstance(pkg, FilePackage) else "archive"
        table.add_row(
            pkg.name,
            pkg.version,
            kind,
            _format_status_with_color(cache.status(pkg)),
            str(cache.cache_path(pkg)),
        )

    # Print table using Rich Console
    console = Console(force_terminal=True)
    console.print(table)
