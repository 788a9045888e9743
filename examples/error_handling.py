"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from pathlib import Path

from cmdep import (
    ArchiveExtractor,
    # Exceptions
    CmdepError,
    ConfigError,
    DependencyCache,
    FetchResult,
    IntegrityError,
    StorageNotFoundError,
    create_router,
    load_manifest,
    package,
)


cache = DependencyCache(
    root=Path("./3rdparty"),
    storage=create_router(),
    archive=ArchiveExtractor(),
)


# Pattern 1: Validate the manifest before anything else
def load_or_explain(path: Path) -> list:
    """Load a manifest, printing where it went wrong."""
    try:
        return load_manifest(path)
    except ConfigError as e:
        print(f"Manifest problem: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        raise


# Pattern 2: A mirror that no longer has the archive
def fetch_or_none(url: str, sha256: str) -> FetchResult | None:
    """Fetch a package, returning None if the source is gone."""
    try:
        return cache.fetch(package("libfoo", "1.2.0", url=url, hash=f"SHA256={sha256}"))
    except StorageNotFoundError as e:
        print(f"Source not found: {e.source}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 3: Upstream re-published the archive under the same URL
def fetch_strict(url: str, sha256: str) -> FetchResult:
    """Fetch a package, reporting both digests on a mismatch."""
    try:
        return cache.fetch(package("libfoo", "1.2.0", url=url, hash=f"SHA256={sha256}"))
    except IntegrityError as e:
        print(f"{e.package}: expected {e.expected}, got {e.actual}")
        raise


# Pattern 4: Catch-all for any cmdep error
def fetch_all_safely(manifest: Path) -> list[FetchResult]:
    """Fetch everything, printing a hint for any library error."""
    try:
        return cache.fetch_all(manifest)
    except CmdepError as e:
        print(f"cmdep error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return []
