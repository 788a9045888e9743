"""Archive extraction adapter for tar and zip sources."""

from __future__ import annotations

import tarfile
import zipfile
from pathlib import Path

from cmdep.core.exceptions import FetchError


class ArchiveExtractor:
    """Extracts tar (plain, gz, bz2, xz) and zip archives.

    Implements ArchivePort. The format is sniffed from the file contents,
    not its name. Members that would land outside the destination are
    rejected.
    """

    def extract(self, archive: Path, dest: Path) -> None:
        """Extract archive into dest.

        Raises:
            FetchError: If the archive is unreadable, of an unknown format,
                or contains unsafe members.
        """
        try:
            if tarfile.is_tarfile(archive):
                with tarfile.open(archive) as tar:
                    tar.extractall(dest, filter="data")
            elif zipfile.is_zipfile(archive):
                with zipfile.ZipFile(archive) as zf:
                    self._check_zip_members(zf, dest)
                    zf.extractall(dest)
            else:
                raise FetchError(
                    f"Unsupported archive format: {archive.name}", source=str(archive)
                )
        except (tarfile.TarError, zipfile.BadZipFile, OSError) as e:
            raise FetchError(
                f"Failed to extract {archive.name}: {e}", source=str(archive), cause=e
            ) from e

    def _check_zip_members(self, zf: zipfile.ZipFile, dest: Path) -> None:
        root = dest.resolve()
        for name in zf.namelist():
            target = (root / name).resolve()
            if target != root and root not in target.parents:
                raise FetchError(
                    f"Refusing to extract '{name}' outside {dest}", source=name
                )
