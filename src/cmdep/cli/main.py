"""CLI commands for cmdep."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from cmdep.config import MANIFEST_ENV_VARS
from cmdep.core.exceptions import CmdepError


if TYPE_CHECKING:
    from cmdep import DependencyCache
    from cmdep.core.models import PackageSpec
    from cmdep.core.ports import ProgressReporter


app = typer.Typer(
    name="cmdep",
    help="Fetch pinned third-party packages for native builds.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; WARNING by default, DEBUG with -v."""
    from rich.logging import RichHandler

    root = logging.getLogger("cmdep")
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.addHandler(RichHandler(show_path=False, rich_tracebacks=False))
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(error: CmdepError) -> typer.Exit:
    """Print an error with its recovery hint and return the exit to raise."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    return typer.Exit(1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log cache hits, downloads and verification steps.",
    ),
) -> None:
    """Fetch pinned third-party packages for native builds."""
    _configure_logging(verbose)


def load_fetch_context(
    root: Path | None,
    manifest: Path | None,
    cache_dir: Path | None,
    progress: ProgressReporter | None = None,
) -> tuple[DependencyCache, list[PackageSpec]]:
    """Resolve the project root, load the manifest and build the cache.

    Only the filesystem is consulted; no build configuration is needed.

    Raises:
        CmdepError: If the manifest is missing or malformed.
    """
    from cmdep import DependencyCache
    from cmdep.config import find_project_root
    from cmdep.discovery import discover_manifest, load_manifest

    # An explicit --root is the project root; only the default searches upward
    project_root = root.resolve() if root is not None else find_project_root()
    if manifest is None:
        manifest = discover_manifest(project_root)
    elif not manifest.is_absolute():
        manifest = Path.cwd() / manifest

    packages = load_manifest(manifest)
    if cache_dir is not None and not cache_dir.is_absolute():
        cache_dir = Path.cwd() / cache_dir
    cache = DependencyCache.from_directory(
        project_root, cache_root=cache_dir, progress=progress, search_parents=False
    )
    return cache, packages


@app.command()
def fetch(
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
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Don't show download progress.",
    ),
) -> None:
    """Fetch every package in the manifest and print its bindings."""
    from cmdep import RichProgressReporter

    progress = None if quiet else RichProgressReporter()
    try:
        cache, packages = load_fetch_context(root, manifest, cache_dir, progress)
        if progress is None:
            results = cache.fetch_many(packages)
        else:
            with progress:
                results = cache.fetch_many(packages)
    except CmdepError as e:
        raise _fail(e) from None

    for result in results:
        for key, value in result.bindings().items():
            typer.echo(f"{key}={value}")


@app.command(name="install-dir")
def install_dir_command(
    name: str = typer.Argument(..., help="Package name."),
    version: str = typer.Argument(..., help="Package version."),
    build_root: Path = typer.Option(
        Path("build"),
        "--build-root",
        "-b",
        help="Build root the install directory lives under.",
    ),
) -> None:
    """Print the install directory of an externally built package."""
    from cmdep.core.naming import install_dir

    root = build_root if build_root.is_absolute() else Path.cwd() / build_root
    typer.echo(str(install_dir(name, version, root)))


def main() -> None:
    """Entry point for the CLI."""
    app()
