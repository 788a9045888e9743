"""cmdep - pinned dependency fetching and external builds for native projects.

This library fetches third-party archives and single files pinned by URL
and content hash into a deterministic on-disk cache, registers isolated
CMake configure/build/install cycles for packages that need them, and
resolves how consumer targets link against the results.

Example:
    >>> from cmdep import DependencyCache, package
    >>> cache = DependencyCache.from_directory()
    >>> zlib = cache.fetch_package(
    ...     package("zlib", "1.3.1", url="https://zlib.net/zlib-1.3.1.tar.gz",
    ...             hash="SHA256=9a93b2b7dfdac77ceba5a558a580e74667dd6fede4585b91eefb60f03b72df23")
    ... )
    >>> zlib.bindings()["zlib_SOURCE_DIR"]  # doctest: +SKIP
"""

from cmdep.adapters.archive import ArchiveExtractor
from cmdep.adapters.host import BuildGraph
from cmdep.adapters.runner import SubprocessStepRunner
from cmdep.adapters.storage import (
    FilesystemStorage,
    HttpStorage,
    RouterStorage,
    S3Storage,
    create_router,
)
from cmdep.config import find_project_root, resolve_cache_root
from cmdep.core.exceptions import (
    CmdepError,
    ConfigError,
    ExternalBuildError,
    FetchError,
    IntegrityError,
    ManifestLoadError,
    StorageAccessError,
    StorageNotFoundError,
    UnresolvedDependencyError,
)
from cmdep.core.external_build import ExternalBuildDriver, ExternalRecordRegistry
from cmdep.core.linking import LinkResolution, LinkResolver
from cmdep.core.models import (
    ArchivePackage,
    ArtifactKind,
    ArtifactSpec,
    BuildSettings,
    ContentHash,
    ExternalBuildRecord,
    ExternalBuildStep,
    FetchResult,
    FilePackage,
    LinkScope,
    Platform,
)
from cmdep.core.naming import install_dir
from cmdep.core.ports import (
    ArchivePort,
    BuildHostPort,
    NullProgressReporter,
    ProgressCallback,
    ProgressReporter,
    StepRunnerPort,
    StoragePort,
)
from cmdep.core.services import DependencyCache
from cmdep.discovery import load_manifest
from cmdep.manifest import file, package
from cmdep.progress import RichProgressReporter


__version__ = "0.3.0"

__all__ = [
    "ArchiveExtractor",
    "ArchivePackage",
    "ArchivePort",
    "ArtifactKind",
    "ArtifactSpec",
    "BuildGraph",
    "BuildHostPort",
    "BuildSettings",
    "CmdepError",
    "ConfigError",
    "ContentHash",
    "DependencyCache",
    "ExternalBuildDriver",
    "ExternalBuildError",
    "ExternalBuildRecord",
    "ExternalBuildStep",
    "ExternalRecordRegistry",
    "FetchError",
    "FetchResult",
    "FilePackage",
    "FilesystemStorage",
    "HttpStorage",
    "IntegrityError",
    "LinkResolution",
    "LinkResolver",
    "LinkScope",
    "ManifestLoadError",
    "NullProgressReporter",
    "Platform",
    "ProgressCallback",
    "ProgressReporter",
    "RichProgressReporter",
    "RouterStorage",
    "S3Storage",
    "StepRunnerPort",
    "StorageAccessError",
    "StorageNotFoundError",
    "StoragePort",
    "SubprocessStepRunner",
    "UnresolvedDependencyError",
    "__version__",
    "create_router",
    "file",
    "find_project_root",
    "install_dir",
    "load_manifest",
    "package",
    "resolve_cache_root",
]
