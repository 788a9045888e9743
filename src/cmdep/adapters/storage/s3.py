"""S3 storage adapter for packages mirrored to a bucket."""

from __future__ import annotations

from typing import TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cmdep.core.exceptions import (
    ConfigError,
    FetchError,
    StorageAccessError,
    StorageNotFoundError,
)


if TYPE_CHECKING:
    from pathlib import Path

    from mypy_boto3_s3 import S3Client

    from cmdep.core.ports import ProgressCallback


_CHUNK_SIZE = 64 * 1024

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NoSuchBucket"})
_DENIED_CODES = frozenset({"403", "AccessDenied"})


def split_s3_uri(uri: str) -> tuple[str, str]:
    """Split ``s3://bucket/key`` into (bucket, key).

    Raises:
        ConfigError: If uri is not an s3 URI or has no key.
    """
    scheme, sep, rest = uri.partition("://")
    bucket, _, key = rest.partition("/")
    if scheme.lower() != "s3" or not sep or not bucket or not key:
        raise ConfigError(f"Invalid S3 URI '{uri}': expected s3://bucket/key")
    return bucket, key


class S3Storage:
    """Downloads package sources with boto3 ``get_object``.

    The client is created on first use, so a router can hold this adapter
    on machines without AWS credentials as long as no s3:// URL is fetched.
    """

    def __init__(self, client: S3Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> S3Client:
        if self._client is None:
            self._client = boto3.client("s3")
        return self._client

    def validate(self, source: str) -> None:
        split_s3_uri(source)

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        """Stream an object to dest.

        Raises:
            ConfigError: If source is not a valid s3 URI.
            StorageNotFoundError: If the bucket or key does not exist.
            StorageAccessError: If access is denied.
            FetchError: For any other S3 or transport failure.
        """
        bucket, key = split_s3_uri(source)
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            total = response["ContentLength"]
            done = 0
            with dest.open("wb") as out:
                for chunk in response["Body"].iter_chunks(_CHUNK_SIZE):
                    out.write(chunk)
                    done += len(chunk)
                    progress(done, total)
        except ClientError as e:
            raise _client_error(e, source) from e
        except BotoCoreError as e:
            raise FetchError(f"S3 error for {source}: {e}", source=source, cause=e) from e


def _client_error(error: ClientError, source: str) -> FetchError:
    code = error.response.get("Error", {}).get("Code", "")
    if code in _NOT_FOUND_CODES:
        return StorageNotFoundError(f"No such S3 object: {source}", source=source, cause=error)
    if code in _DENIED_CODES:
        return StorageAccessError(f"S3 access denied: {source}", source=source, cause=error)
    return FetchError(f"S3 error ({code}) for {source}", source=source, cause=error)
