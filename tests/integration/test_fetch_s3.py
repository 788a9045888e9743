"""Integration tests for fetching packages mirrored to S3."""

from __future__ import annotations

from pathlib import Path

import pytest

from cmdep.adapters.archive import ArchiveExtractor
from cmdep.adapters.storage import create_router
from cmdep.core.exceptions import StorageNotFoundError
from cmdep.core.services import DependencyCache
from cmdep.manifest import file, package


@pytest.mark.storage
@pytest.mark.tier(2)
class TestFetchFromS3:
    """DependencyCache with the default router and a moto-backed bucket."""

    def test_archive_from_s3(self, s3_client, libfoo_tarball, cache_root: Path) -> None:
        s3_client.put_object(
            Bucket="test-bucket",
            Key="mirror/libfoo-1.2.0.tar.gz",
            Body=libfoo_tarball.path.read_bytes(),
        )
        cache = DependencyCache(
            cache_root, create_router(s3_client=s3_client), ArchiveExtractor()
        )

        result = cache.fetch(
            package(
                "libfoo",
                "1.2.0",
                url="s3://test-bucket/mirror/libfoo-1.2.0.tar.gz",
                hash=libfoo_tarball.hash,
            )
        )

        assert (result.source_dir / "include" / "foo.h").read_bytes() == b"int foo(void);\n"

    def test_file_from_s3(self, s3_client, cache_root: Path) -> None:
        import hashlib

        body = b"-----BEGIN CERTIFICATE-----\n"
        s3_client.put_object(Bucket="test-bucket", Key="certs/cacert.pem", Body=body)
        cache = DependencyCache(
            cache_root, create_router(s3_client=s3_client), ArchiveExtractor()
        )

        result = cache.fetch(
            file(
                "cacert",
                "2024",
                url="s3://test-bucket/certs/cacert.pem",
                destination="cacert.pem",
                hash=f"SHA1={hashlib.sha1(body).hexdigest()}",  # noqa: S324
            )
        )

        assert (result.source_dir / "cacert.pem").read_bytes() == body

    def test_missing_object(self, s3_client, cache_root: Path) -> None:
        cache = DependencyCache(
            cache_root, create_router(s3_client=s3_client), ArchiveExtractor()
        )

        with pytest.raises(StorageNotFoundError):
            cache.fetch(
                package(
                    "libfoo",
                    "1.2.0",
                    url="s3://test-bucket/nope.tar.gz",
                    hash="SHA256=" + "0" * 64,
                )
            )

        assert not (cache_root / "libfoo-1.2.0").exists()
