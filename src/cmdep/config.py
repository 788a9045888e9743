"""Configuration utilities for cmdep.

This module provides utilities for project configuration and path resolution.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path


# Checked in order; the first one set wins. The last two are legacy names.
CACHE_ROOT_ENV_VARS = ("CMDEP_DIR", "CMDEP_3RD_PARTY_DIR", "POINTS_3RD_PARTY_DIR")

MANIFEST_ENV_VARS = ["CMDEP_PACKAGES_FILE", "CMDEP_3RD_PARTY_PACKAGES_FILE"]

DEFAULT_CACHE_DIRNAME = "3rdparty"


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root directory by walking up from start directory.

    Searches for marker files in the following priority order:
    1. .cmdep - Explicit project marker
    2. CMakeLists.txt - Native project root
    3. .git - Version control root

    Nested CMake projects are common, so the outermost CMakeLists.txt is not
    searched for; the nearest marker wins.

    Args:
        start: Directory to start searching from. If None, uses current directory.

    Returns:
        Path to project root directory. Returns start directory if no markers found.

    Example:
        >>> from cmdep.config import find_project_root
        >>> root = find_project_root()
        >>> cache_root = root / "3rdparty"
    """
    if start is None:
        start = Path.cwd()

    markers = [".cmdep", "CMakeLists.txt", ".git"]
    current = start.resolve()

    for parent in [current, *current.parents]:
        for marker in markers:
            if (parent / marker).exists():
                return parent

    return start.resolve()


def resolve_cache_root(
    project_root: Path,
    override: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Resolve the directory fetched packages are cached under.

    Priority: explicit override, then CMDEP_DIR, CMDEP_3RD_PARTY_DIR and
    POINTS_3RD_PARTY_DIR, then ``<project_root>/3rdparty``. Relative values
    are taken relative to project_root.

    Returns:
        Absolute cache root path.
    """
    env = os.environ if env is None else env
    chosen: Path | str | None = override
    if not chosen:
        chosen = next((env[k] for k in CACHE_ROOT_ENV_VARS if env.get(k)), None)
    root = Path(chosen) if chosen else Path(DEFAULT_CACHE_DIRNAME)
    if not root.is_absolute():
        root = project_root / root
    return Path(os.path.abspath(root))
