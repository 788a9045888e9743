"""Declarations used inside package manifest files.

A manifest is a Python file with a module-level ``packages`` list::

    from cmdep.manifest import file, package

    packages = [
        package(
            "zlib",
            "1.3.1",
            url="https://zlib.net/zlib-1.3.1.tar.gz",
            hash="SHA256=9a93b2b7dfdac77ceba5a558a580e74667dd6fede4585b91eefb60f03b72df23",
        ),
        file(
            "cacert",
            "2024-07-02",
            url="https://curl.se/ca/cacert-2024-07-02.pem",
            destination="cacert.pem",
            hash="SHA256=1bf458412568e134a4514f5e170a328d11091e071c7110955c9884ed87972ac9",
        ),
    ]
"""

from __future__ import annotations

from cmdep.core.models import ArchivePackage, ContentHash, FilePackage


def package(name: str, version: str, url: str, hash: str) -> ArchivePackage:  # noqa: A002
    """Declare an archive extracted into ``<root>/<name>-<version>``."""
    return ArchivePackage(
        name=name, version=version, url=url, hash=ContentHash.parse(hash)
    )


def file(  # noqa: A001
    name: str,
    version: str,
    url: str,
    destination: str,
    hash: str,  # noqa: A002
) -> FilePackage:
    """Declare a single file stored as ``<root>/<name>-<version>/<destination>``."""
    return FilePackage(
        name=name,
        version=version,
        url=url,
        destination=destination,
        hash=ContentHash.parse(hash),
    )


__all__ = ["file", "package"]
