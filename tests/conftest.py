"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for the test suite.
"""

from __future__ import annotations

import hashlib
import io
import tarfile
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from cmdep.adapters.storage import FilesystemStorage
from cmdep.core.exceptions import FetchError
from cmdep.core.ports import ProgressCallback


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and services")
    config.addinivalue_line("markers", "storage: Storage adapters (http, s3, filesystem)")
    config.addinivalue_line("markers", "cache: Fetch cache behaviour")
    config.addinivalue_line("markers", "build: External build driver and runner")
    config.addinivalue_line("markers", "link: Target link resolution")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


@dataclass
class Fixture:
    """A source archive on disk and its pinned hash."""

    path: Path
    sha256: str
    members: dict[str, bytes] = field(default_factory=dict)

    @property
    def hash(self) -> str:
        return f"SHA256={self.sha256}"


def write_tarball(path: Path, members: dict[str, bytes]) -> Fixture:
    """Write a .tar.gz with the given member paths and contents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    digest = hashlib.sha256(path.read_bytes()).hexdigest()
    return Fixture(path=path, sha256=digest, members=members)


@pytest.fixture
def libfoo_tarball(tmp_path: Path) -> Fixture:
    """libfoo 1.2.0 source tarball with a single top-level directory."""
    return write_tarball(
        tmp_path / "mirror" / "libfoo-1.2.0.tar.gz",
        {
            "libfoo-1.2.0/CMakeLists.txt": b"project(libfoo C)\n",
            "libfoo-1.2.0/include/foo.h": b"int foo(void);\n",
            "libfoo-1.2.0/src/foo.c": b"int foo(void) { return 42; }\n",
        },
    )


class CountingStorage:
    """StoragePort that copies local files and counts transfers."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._fs = FilesystemStorage()

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        self.calls.append(source)
        self._fs.download(source, dest, progress)


class OfflineStorage:
    """StoragePort that behaves like a machine with no network."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        self.calls.append(source)
        raise FetchError(f"Network unreachable: {source}", source=source)


@pytest.fixture
def counting_storage() -> CountingStorage:
    return CountingStorage()


@pytest.fixture
def offline_storage() -> OfflineStorage:
    return OfflineStorage()


@pytest.fixture
def make_tarball():
    """Factory writing .tar.gz fixtures: make_tarball(path, {member: bytes})."""
    return write_tarball


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "3rdparty"
