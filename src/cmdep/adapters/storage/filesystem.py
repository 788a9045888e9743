"""Filesystem storage adapter for local package sources."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from cmdep.core.exceptions import FetchError, StorageAccessError, StorageNotFoundError


if TYPE_CHECKING:
    from cmdep.core.ports import ProgressCallback


# Chunk size for reading files (64KB)
_CHUNK_SIZE = 64 * 1024


class FilesystemStorage:
    """Storage adapter for local filesystem sources.

    Implements StoragePort for ``file://`` URLs and bare paths, which is how
    vendored mirrors and test fixtures are usually referenced.
    """

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        """Copy a file from source to destination with progress reporting.

        Args:
            source: Path to source file.
            dest: Destination path.
            progress: Callback function(bytes_downloaded, total_bytes).

        Raises:
            StorageNotFoundError: If source file does not exist.
            StorageAccessError: If source file cannot be read.
            FetchError: For other I/O failures.
        """
        source_path = Path(source)
        try:
            total_size = source_path.stat().st_size
        except FileNotFoundError as e:
            raise StorageNotFoundError(
                f"File not found: {source}",
                source=source,
                cause=e,
            ) from e

        bytes_copied = 0
        try:
            with source_path.open("rb") as src, dest.open("wb") as dst:
                for chunk in iter(lambda: src.read(_CHUNK_SIZE), b""):
                    dst.write(chunk)
                    bytes_copied += len(chunk)
                    progress(bytes_copied, total_size)
        except PermissionError as e:
            raise StorageAccessError(
                f"Permission denied: {source}", source=source, cause=e
            ) from e
        except IsADirectoryError as e:
            raise StorageNotFoundError(
                f"Not a file: {source}", source=source, cause=e
            ) from e
        except OSError as e:
            raise FetchError(f"Failed to copy {source}: {e}", source=source, cause=e) from e
