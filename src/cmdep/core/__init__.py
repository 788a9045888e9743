"""Core domain module for cmdep.

This module contains pure Python domain models, port definitions and the
fetch, external build and link resolution services. Adapters for real
transports, archives, build hosts and processes live in cmdep.adapters.
"""

from cmdep.core.models import (
    ArchivePackage,
    ArtifactSpec,
    BuildSettings,
    ContentHash,
    ExternalBuildRecord,
    FetchResult,
    FilePackage,
)
from cmdep.core.ports import ArchivePort, BuildHostPort, ProgressCallback, StoragePort


__all__ = [
    "ArchivePackage",
    "ArchivePort",
    "ArtifactSpec",
    "BuildHostPort",
    "BuildSettings",
    "ContentHash",
    "ExternalBuildRecord",
    "FetchResult",
    "FilePackage",
    "ProgressCallback",
    "StoragePort",
]
