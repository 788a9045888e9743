"""Install-path naming.

Pure functions that map a package identity onto the directories and files
an external build installs. No I/O and no sanitising: a name containing
path separators produces a malformed path, which is a caller error.
"""

from __future__ import annotations

from pathlib import Path

from cmdep.core.models import ArtifactKind, Platform


def install_dir(name: str, version: str, build_root: Path) -> Path:
    """Return ``<build_root>/<name>_<version>_install``.

    Example:
        >>> install_dir("zlib", "1.3.1", Path("/build")).as_posix()
        '/build/zlib_1.3.1_install'
    """
    return build_root / f"{name}_{version}_install"


def binary_dir(name: str, version: str, build_root: Path) -> Path:
    """Return the scratch build directory ``<build_root>/<name>_<version>_build``."""
    return build_root / f"{name}_{version}_build"


def step_name(name: str, version: str) -> str:
    """Return the build step name for a package identity."""
    return f"{name}_{version}_external"


def library_filename(
    library: str, kind: ArtifactKind, platform: Platform, postfix: str = ""
) -> str:
    """Conventional on-disk filename of an installed library.

    For Windows shared libraries this is the runtime DLL; the import
    library is named by import_library_filename().
    """
    if platform is Platform.WINDOWS:
        ext = ".dll" if kind is ArtifactKind.SHARED else ".lib"
        return f"{library}{postfix}{ext}"
    if kind is ArtifactKind.STATIC:
        return f"lib{library}{postfix}.a"
    ext = ".dylib" if platform is Platform.DARWIN else ".so"
    return f"lib{library}{postfix}{ext}"


def import_library_filename(library: str, postfix: str = "") -> str:
    return f"{library}{postfix}.lib"


def artifact_locations(
    install: Path,
    library: str,
    kind: ArtifactKind,
    platform: Platform,
    debug_postfix: str = "d",
) -> dict[str, tuple[Path, Path | None]]:
    """Per-configuration (library, import library) paths under an install dir.

    Args:
        install: The package's install directory.
        library: Library base name.
        kind: Shared or static.
        platform: Linking model that decides prefixes and extensions.
        debug_postfix: Suffix of Debug library names.

    Returns:
        ``{"Debug": (lib, implib), "Release": (lib, implib)}`` where implib
        is only set for shared libraries on Windows.
    """
    locations: dict[str, tuple[Path, Path | None]] = {}
    for config, postfix in (("Debug", debug_postfix), ("Release", "")):
        filename = library_filename(library, kind, platform, postfix)
        if platform is Platform.WINDOWS and kind is ArtifactKind.SHARED:
            lib = install / "bin" / filename
            implib: Path | None = install / "lib" / import_library_filename(
                library, postfix
            )
        else:
            lib = install / "lib" / filename
            implib = None
        locations[config] = (lib, implib)
    return locations
