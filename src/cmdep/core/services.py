"""Core domain services for cmdep."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from cmdep.core.fetch_operations import fetch_archive, fetch_single_file
from cmdep.core.models import ArchivePackage, FetchResult, FilePackage, PackageSpec
from cmdep.core.ports import (
    ArchivePort,
    NullProgressReporter,
    ProgressReporter,
    SourceValidator,
    StoragePort,
)


if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

CacheState = Literal["cached", "missing"]


class DependencyCache:
    """Fetches pinned packages once and keeps them under a cache root.

    The existence of a package's cache path is the only cache-hit signal:
    once present it is never re-downloaded or re-verified, even if the
    declared URL or hash changes.
    """

    def __init__(
        self,
        root: Path,
        storage: StoragePort,
        archive: ArchivePort,
        progress: ProgressReporter | None = None,
    ) -> None:
        self._root = root
        self._storage = storage
        self._archive = archive
        self._progress = progress or NullProgressReporter()

    @classmethod
    def from_directory(
        cls,
        directory: Path | None = None,
        cache_root: Path | str | None = None,
        progress: ProgressReporter | None = None,
        search_parents: bool = True,
    ) -> DependencyCache:
        """Create a cache with auto-discovered project root and default adapters.

        Args:
            directory: Start directory for root discovery (defaults to cwd).
            cache_root: Explicit cache root; falls back to the environment and
                then to ``<project_root>/3rdparty``.
            progress: Optional progress reporter for download feedback.
            search_parents: When False, directory is the project root as
                given and no marker search happens.

        Returns:
            DependencyCache with the default storage router and extractor.
        """
        from cmdep.adapters.archive import ArchiveExtractor
        from cmdep.adapters.storage import create_router
        from cmdep.config import find_project_root, resolve_cache_root

        if search_parents or directory is None:
            project_root = find_project_root(directory)
        else:
            project_root = Path(directory).resolve()
        return cls(
            root=resolve_cache_root(project_root, cache_root),
            storage=create_router(),
            archive=ArchiveExtractor(),
            progress=progress,
        )

    @property
    def root(self) -> Path:
        """Absolute directory packages are cached under."""
        return self._root

    def fetch_package(self, package: ArchivePackage) -> FetchResult:
        """Fetch an archive package unless its directory already exists.

        Raises:
            FetchError: If the download fails.
            IntegrityError: If the archive doesn't match its hash.
        """
        return fetch_archive(
            package, self._root, self._storage, self._archive, self._progress
        )

    def fetch_file(self, package: FilePackage) -> FetchResult:
        """Fetch a single-file package unless the file already exists.

        Raises:
            FetchError: If the download fails.
            IntegrityError: If the file doesn't match its hash.
        """
        return fetch_single_file(package, self._root, self._storage, self._progress)

    def fetch(self, package: PackageSpec) -> FetchResult:
        """Fetch either form of package."""
        if isinstance(package, FilePackage):
            return self.fetch_file(package)
        return self.fetch_package(package)

    def fetch_many(self, packages: Iterable[PackageSpec]) -> list[FetchResult]:
        """Fetch packages in order, stopping at the first failure.

        Every source is checked against the storage before the first
        download, so an unroutable URL late in the list fails without
        side effects.

        Raises:
            ConfigError: If a source can never be downloaded.
        """
        packages = list(packages)
        if isinstance(self._storage, SourceValidator):
            for p in packages:
                self._storage.validate(p.url)
        return [self.fetch(p) for p in packages]

    def fetch_all(self, manifest_path: Path | None) -> list[FetchResult]:
        """Load a manifest and fetch every package it declares, in order.

        The whole manifest is loaded and validated before the first
        download, so a malformed manifest fails without side effects. No
        build-host state is involved, so this works standalone.

        Raises:
            ConfigError: If the manifest is missing or malformed.
            FetchError: If a download fails.
            IntegrityError: If a download doesn't match its hash.
        """
        from cmdep.discovery import load_manifest

        packages = load_manifest(manifest_path)
        logger.info("Fetching %d package(s) into %s", len(packages), self._root)
        return self.fetch_many(packages)

    def cache_path(self, package: PackageSpec) -> Path:
        """The path whose existence marks package as cached."""
        source_dir = self._root / package.dirname
        if isinstance(package, FilePackage):
            return source_dir / package.destination
        return source_dir

    def status(self, package: PackageSpec) -> CacheState:
        """Get cache state for a package without touching the network."""
        return "cached" if self.cache_path(package).exists() else "missing"
