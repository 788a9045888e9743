"""Fetch operation implementations for DependencyCache.

This module contains the internal fetch logic that DependencyCache
delegates to. These are implementation details and should not be used
directly.

The canonical cache path is only ever created by a rename of fully
verified (and, for archives, fully extracted) content, so an interrupted
fetch never leaves something that looks like a cache hit.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from cmdep.core.exceptions import IntegrityError
from cmdep.core.models import ArchivePackage, FetchResult, FilePackage


if TYPE_CHECKING:
    from cmdep.core.models import ContentHash
    from cmdep.core.ports import ArchivePort, ProgressReporter, StoragePort

logger = logging.getLogger(__name__)

# Chunk size for hashing files (64KB)
_CHUNK_SIZE = 64 * 1024

# Scratch area under the cache root, distinct from every cache entry
STAGING_DIRNAME = "CMakeArtifacts"


def staging_dir(root: Path, name: str, version: str) -> Path:
    """Scratch directory used while fetching an archive package."""
    return root / STAGING_DIRNAME / f"{name}-sub-{version}"


def compute_digest(path: Path, algorithm: str) -> str:
    """Hex digest of a file using a hashlib algorithm name."""
    h = hashlib.new(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_digest(path: Path, expected: ContentHash, package: str, source: str) -> None:
    """Check a downloaded file against its declared hash.

    Raises:
        IntegrityError: If the digests differ.
    """
    actual = compute_digest(path, expected.hashlib_name)
    if actual != expected.digest:
        raise IntegrityError(
            package=package,
            source=source,
            algorithm=expected.algorithm,
            expected=expected.digest,
            actual=actual,
        )
    logger.debug("%s verified: %s", expected.algorithm, path.name)


def _archive_filename(url: str) -> str:
    """Derive a filename for the downloaded archive from its URL.

    The name only labels the staged file; extractors detect the format from
    its contents. Query strings and fragments are dropped.
    """
    path = urlsplit(url).path if "://" in url else url
    filename = path.rstrip("/").rsplit("/", 1)[-1]
    return filename or "archive"


def _download(
    name: str,
    url: str,
    dest: Path,
    storage: StoragePort,
    progress: ProgressReporter,
) -> None:
    callback = progress.start_task(name, 0)
    try:
        storage.download(url, dest, callback)
    finally:
        progress.finish_task(name)


def _content_root(extracted: Path) -> Path:
    """Strip a single top-level directory, as most source tarballs have one."""
    entries = list(extracted.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return extracted


def fetch_archive(
    package: ArchivePackage,
    root: Path,
    storage: StoragePort,
    archive: ArchivePort,
    progress: ProgressReporter,
) -> FetchResult:
    """Fetch, verify and extract an archive package into the cache root."""
    source_dir = root / package.dirname
    result = FetchResult(name=package.name, source_dir=source_dir, version=package.version)

    if source_dir.exists():
        logger.debug("Cache hit: %s -> %s", package.dirname, source_dir)
        return result

    logger.info("Fetching %s from %s", package.dirname, package.url)
    scratch = staging_dir(root, package.name, package.version)
    # Leftovers of an interrupted run are never reused
    shutil.rmtree(scratch, ignore_errors=True)
    scratch.mkdir(parents=True)

    try:
        downloaded = scratch / _archive_filename(package.url)
        _download(package.name, package.url, downloaded, storage, progress)
        verify_digest(downloaded, package.hash, package.name, package.url)

        extracted = scratch / "extract"
        extracted.mkdir()
        archive.extract(downloaded, extracted)

        source_dir.parent.mkdir(parents=True, exist_ok=True)
        _content_root(extracted).replace(source_dir)
    finally:
        shutil.rmtree(scratch, ignore_errors=True)

    logger.info("Populated %s", source_dir)
    return result


def fetch_single_file(
    package: FilePackage,
    root: Path,
    storage: StoragePort,
    progress: ProgressReporter,
) -> FetchResult:
    """Fetch and verify a single-file package into the cache root."""
    source_dir = root / package.dirname
    dest = source_dir / package.destination
    result = FetchResult(name=package.name, source_dir=source_dir, version=package.version)

    if dest.exists():
        logger.debug("Cache hit: %s -> %s", package.dirname, dest)
        return result

    logger.info("Fetching %s/%s from %s", package.dirname, package.destination, package.url)
    dest.parent.mkdir(parents=True, exist_ok=True)

    # Download next to the destination so the final rename stays on one filesystem
    with tempfile.NamedTemporaryFile(
        delete=False, dir=dest.parent, prefix=f".{dest.name}.", suffix=".part"
    ) as tmp_file:
        tmp_path = Path(tmp_file.name)

    try:
        _download(package.name, package.url, tmp_path, storage, progress)
        verify_digest(tmp_path, package.hash, package.name, package.url)
        tmp_path.replace(dest)
    finally:
        tmp_path.unlink(missing_ok=True)

    logger.info("Saved %s", dest)
    return result
