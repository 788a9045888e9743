"""HTTP(S) storage adapter using httpx."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from cmdep.core.exceptions import FetchError, StorageAccessError, StorageNotFoundError


if TYPE_CHECKING:
    from pathlib import Path

    from cmdep.core.ports import ProgressCallback


# Default timeout for connect/read (seconds); downloads themselves are streamed
_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


class HttpStorage:
    """Storage adapter for http:// and https:// package URLs.

    Implements StoragePort by streaming the response body to disk.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        """Initialize HTTP storage.

        Args:
            client: Optional httpx client (e.g. with a MockTransport in tests).
                If not provided, creates a redirect-following client.
        """
        self._client = client or httpx.Client(follow_redirects=True, timeout=_TIMEOUT)

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        """Download a URL to a local path with progress reporting.

        Args:
            source: http(s) URL.
            dest: Local destination path.
            progress: Callback function(bytes_downloaded, total_bytes).

        Raises:
            StorageNotFoundError: On 404/410.
            StorageAccessError: On 401/403.
            FetchError: On any other HTTP status or transport failure.
        """
        try:
            with self._client.stream("GET", source) as response:
                if response.status_code >= 400:
                    raise self._translate_status(response.status_code, source)
                total_size = int(response.headers.get("Content-Length", 0) or 0)
                bytes_downloaded = 0
                # Raw bytes: the pinned hash covers what the server sent, so a
                # Content-Encoding must not be undone
                with dest.open("wb") as f:
                    for chunk in response.iter_raw():
                        f.write(chunk)
                        bytes_downloaded += len(chunk)
                        progress(bytes_downloaded, total_size)
        except httpx.HTTPError as e:
            raise FetchError(
                f"Download failed: {source} ({e.__class__.__name__}: {e})",
                source=source,
                cause=e,
            ) from e

    def close(self) -> None:
        self._client.close()

    def _translate_status(self, status: int, source: str) -> FetchError:
        """Translate an HTTP error status to a domain exception."""
        if status in (404, 410):
            return StorageNotFoundError(f"Not found (HTTP {status}): {source}", source=source)
        if status in (401, 403):
            return StorageAccessError(f"Access denied (HTTP {status}): {source}", source=source)
        return FetchError(f"HTTP {status} while downloading {source}", source=source)
