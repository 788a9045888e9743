"""Scheme-based routing between storage backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cmdep.core.exceptions import ConfigError
from cmdep.core.ports import SourceValidator


if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from cmdep.core.ports import ProgressCallback, StoragePort


_FILE_PREFIX = "file://"


def parse_uri_scheme(uri: str) -> str | None:
    """Lower-cased URI scheme, or None for local paths.

    Single-letter schemes are Windows drive letters (``C://...``), not
    schemes.
    """
    scheme, sep, _ = uri.partition("://")
    if not sep or len(scheme) < 2:
        return None
    return scheme.lower()


def strip_file_scheme(uri: str) -> str:
    """``file:///mirror/a.tgz`` -> ``/mirror/a.tgz``; other strings unchanged."""
    return uri.removeprefix(_FILE_PREFIX)


class RouterStorage:
    """StoragePort that hands each URL to the backend for its scheme.

    Args:
        backends: Scheme to adapter. The None key handles plain paths.
    """

    def __init__(self, backends: Mapping[str | None, StoragePort]) -> None:
        self._backends = dict(backends)

    def backend_for(self, uri: str) -> tuple[StoragePort, str]:
        """Pick the backend for uri and the location to hand it.

        Raises:
            ConfigError: If no backend is registered for the scheme.
        """
        scheme = parse_uri_scheme(uri)
        backend = self._backends.get(scheme)
        if backend is None:
            where = f"scheme '{scheme}'" if scheme else "local paths"
            raise ConfigError(f"No storage backend registered for {where}: {uri}")
        return backend, strip_file_scheme(uri) if scheme == "file" else uri

    def validate(self, source: str) -> None:
        """Check the scheme is routable and the backend accepts the location.

        Raises:
            ConfigError: If source could never be downloaded.
        """
        backend, location = self.backend_for(source)
        if isinstance(backend, SourceValidator):
            backend.validate(location)

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        backend, location = self.backend_for(source)
        backend.download(location, dest, progress)


def create_router(
    s3_client: Any | None = None, http_client: Any | None = None
) -> RouterStorage:
    """Router for http, https, s3, file and plain-path sources.

    Args:
        s3_client: boto3 S3 client; created lazily when omitted.
        http_client: httpx client; a redirect-following one when omitted.
    """
    from cmdep.adapters.storage.filesystem import FilesystemStorage
    from cmdep.adapters.storage.http import HttpStorage
    from cmdep.adapters.storage.s3 import S3Storage

    local = FilesystemStorage()
    web = HttpStorage(client=http_client)
    return RouterStorage(
        {
            "http": web,
            "https": web,
            "s3": S3Storage(client=s3_client),
            "file": local,
            None: local,
        }
    )
