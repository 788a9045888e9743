"""Domain exceptions for cmdep.

All library errors inherit from CmdepError, allowing callers to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.

Every error is fatal to the current configure or build run. Nothing in
cmdep retries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class CmdepError(Exception):
    """Base class for all cmdep exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class ConfigError(CmdepError):
    """Raised for missing or invalid configuration.

    Always raised before any network or filesystem mutation happens.
    """

    pass


class ManifestLoadError(ConfigError):
    """Raised when a package manifest cannot be loaded.

    Attributes:
        manifest_path: Path to the manifest file that failed to load.
        line: Line number where the error occurred (if available).
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        manifest_path: Path,
        line: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.manifest_path = manifest_path
        self.line = line
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the manifest file at the specific line."""
        if self.line:
            return f"Check {self.manifest_path.name} at line {self.line}"
        return f"Check {self.manifest_path.name} for syntax or import errors"


class FetchError(CmdepError):
    """Raised when a package source cannot be transferred.

    Attributes:
        source: The URL/path that caused the error.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest re-running once the source is reachable."""
        return (
            f"Check network access to {self.source}; "
            "nothing was written to the cache, so re-running is safe"
        )


class StorageNotFoundError(FetchError):
    """Raised when the requested file/object doesn't exist at the source."""

    @property
    def recovery_hint(self) -> str:
        """Suggest verifying the URL."""
        return f"Verify the source URL exists: {self.source}"


class StorageAccessError(FetchError):
    """Raised when access is denied to the source (permissions, credentials)."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking permissions."""
        return "Check credentials and bucket/path permissions"


class IntegrityError(CmdepError):
    """Raised when downloaded bytes don't match the declared content hash.

    Attributes:
        package: Name of the package being fetched.
        source: The URL the bytes were downloaded from.
        algorithm: Hash algorithm (e.g. "SHA256").
        expected: Declared hex digest.
        actual: Hex digest of the downloaded bytes.
    """

    def __init__(
        self,
        package: str,
        source: str,
        algorithm: str,
        expected: str,
        actual: str,
    ) -> None:
        self.package = package
        self.source = source
        self.algorithm = algorithm
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{algorithm} mismatch for package '{package}' from {source}: "
            f"expected {expected}, got {actual}"
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest verifying the pinned hash."""
        return (
            f"Verify the pinned hash for '{self.package}'; if the upstream "
            "artifact legitimately changed, pin a new version and hash"
        )


class ExternalBuildError(CmdepError):
    """Raised when an external configure/build/install step fails.

    Attributes:
        package: Name of the package being built.
        stage: The failed stage ("configure", "build" or "install").
        returncode: Exit status of the failed command.
        command: The command line that failed.
    """

    def __init__(
        self,
        package: str,
        stage: str,
        returncode: int,
        command: Sequence[str],
    ) -> None:
        self.package = package
        self.stage = stage
        self.returncode = returncode
        self.command = list(command)
        super().__init__(
            f"External {stage} of '{package}' failed with exit status {returncode}"
        )

    @property
    def recovery_hint(self) -> str:
        """Show the failed command so it can be re-run by hand."""
        return f"Re-run manually to inspect: {' '.join(self.command)}"


class UnresolvedDependencyError(CmdepError):
    """Raised when a link dependency is neither external nor a known target.

    Attributes:
        name: The dependency name that could not be resolved.
        consumer: The target that requested it.
    """

    def __init__(self, name: str, consumer: str) -> None:
        self.name = name
        self.consumer = consumer
        super().__init__(
            f"Dependency '{name}' of target '{consumer}' is neither an "
            "external build record nor a known target"
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest declaring the target before linking."""
        return (
            f"Declare '{self.name}' (or build it externally) before "
            f"linking '{self.consumer}' against it"
        )
