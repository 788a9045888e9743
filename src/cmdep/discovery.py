"""Manifest discovery and loading.

Manifests are Python files declaring a ``packages`` list (see
cmdep.manifest). Loading executes the file in a throwaway module and
validates every entry before anything touches the network.
"""

from __future__ import annotations

import importlib.util
import sys
import traceback
from pathlib import Path

from cmdep.core.exceptions import ConfigError, ManifestLoadError
from cmdep.core.models import ArchivePackage, FilePackage, PackageSpec


def discover_manifest(root: Path) -> Path | None:
    """Return ``<root>/.cmdep/packages.py`` if it exists."""
    candidate = root / ".cmdep" / "packages.py"
    return candidate if candidate.is_file() else None


def _error_line(exc: BaseException, path: Path) -> int | None:
    """Line in the manifest where exc was raised, if the manifest is on the stack."""
    if isinstance(exc, SyntaxError):
        return exc.lineno
    resolved = str(path.resolve())
    line = None
    for frame in traceback.extract_tb(exc.__traceback__):
        if frame.filename == resolved or frame.filename == str(path):
            line = frame.lineno
    return line


def load_manifest(path: Path | None) -> list[PackageSpec]:
    """Load a manifest file and return its package declarations in order.

    Args:
        path: Path to the manifest Python file.

    Returns:
        The declared packages, in declaration order.

    Raises:
        ConfigError: If no manifest was given or the file doesn't exist.
        ManifestLoadError: If the file fails to execute, has no ``packages``
            list, or declares something that isn't a package.
    """
    if path is None:
        raise ConfigError(
            "No package manifest given; set CMDEP_PACKAGES_FILE or pass --manifest"
        )
    if not path.is_file():
        raise ConfigError(f"Package manifest not found: {path}")

    # Generate a unique module name to avoid conflicts
    module_name = f"_cmdep_manifest_{path.stem}_{id(path)}"

    spec = importlib.util.spec_from_file_location(module_name, path.resolve())
    if spec is None or spec.loader is None:
        raise ManifestLoadError(f"Could not load manifest from {path}", manifest_path=path)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module

    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ManifestLoadError(
            f"Failed to load manifest {path}: {e}",
            manifest_path=path,
            line=_error_line(e, path),
            cause=e,
        ) from e
    finally:
        # Clean up to avoid polluting sys.modules
        sys.modules.pop(module_name, None)

    packages = getattr(module, "packages", None)
    if not isinstance(packages, list | tuple):
        raise ManifestLoadError(
            f"Manifest {path} must define a 'packages' list", manifest_path=path
        )

    for index, entry in enumerate(packages):
        if not isinstance(entry, ArchivePackage | FilePackage):
            raise ManifestLoadError(
                f"Entry {index} of {path} is not a package declaration: {entry!r}",
                manifest_path=path,
            )

    return list(packages)
