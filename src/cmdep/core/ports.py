"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
The build host (targets, link directives, build-order edges) is an
external collaborator and is reached only through BuildHostPort.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from pathlib import Path

    from cmdep.core.models import ExternalBuildStep, LinkScope

ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class StoragePort(Protocol):
    """Transport for package sources (HTTP, S3, local filesystem)."""

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        """Download a file from source to a local path.

        Raises:
            FetchError: On transport failure. Subclasses distinguish
                missing sources and access problems.
        """
        ...


@runtime_checkable
class SourceValidator(Protocol):
    """Storage that can reject a source without touching the network."""

    def validate(self, source: str) -> None:
        """Raise ConfigError if source can never be downloaded."""
        ...


@runtime_checkable
class ArchivePort(Protocol):
    """Archive extraction primitive."""

    def extract(self, archive: Path, dest: Path) -> None:
        """Extract archive into the (existing, empty) dest directory."""
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports download progress to the user.

    The core domain uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a download task.

        Args:
            name: Human-readable name for the task (package name).
            total: Total bytes to download (0 when unknown).

        Returns:
            A ProgressCallback to call with (bytes_downloaded, total_bytes).
        """
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete."""
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _downloaded, _total: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name  # Unused but required by protocol


@runtime_checkable
class BuildHostPort(Protocol):
    """The host build system's target model.

    cmdep never compiles or links anything itself; it only tells the host
    which directives to apply to which target.
    """

    def has_target(self, name: str) -> bool:
        """Return True if name is a target the host knows about."""
        ...

    def add_external_step(self, step: ExternalBuildStep) -> None:
        """Register an external build step.

        Registering a step with an existing name replaces it.
        """
        ...

    def add_dependency(self, consumer: str, step: str) -> None:
        """Order consumer after the named step."""
        ...

    def link_libraries(
        self, consumer: str, scope: LinkScope, items: Iterable[str | Path]
    ) -> None:
        """The host's native link directive."""
        ...

    def add_include_directories(
        self, consumer: str, scope: LinkScope, dirs: Iterable[Path]
    ) -> None:
        ...

    def add_compile_definitions(
        self, consumer: str, scope: LinkScope, definitions: Iterable[str]
    ) -> None:
        ...

    def add_build_rpath(self, consumer: str, directory: Path) -> None:
        """Extend the runtime library search path of consumer."""
        ...

    def add_runtime_artifact(self, consumer: str, path: Path) -> None:
        """Record a file consumer loads at run time (e.g. a Windows DLL)."""
        ...


@runtime_checkable
class StepRunnerPort(Protocol):
    """Executes a registered external build step."""

    def run(self, step: ExternalBuildStep) -> None:
        """Run configure, build and install.

        Raises:
            ExternalBuildError: If any stage fails.
        """
        ...
