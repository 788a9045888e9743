"""Core domain models for cmdep.

These models are pure Python dataclasses with no I/O dependencies.
They represent pinned package sources, fetch results, the settings that
are forwarded into external builds, and the records those builds leave
behind for the link resolver.
"""

from __future__ import annotations

import hashlib
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Self

from cmdep.core.exceptions import ConfigError


# Algorithm tag -> hashlib name. Tags follow CMake's URL_HASH vocabulary.
HASH_ALGORITHMS: dict[str, str] = {
    "MD5": "md5",
    "SHA1": "sha1",
    "SHA224": "sha224",
    "SHA256": "sha256",
    "SHA384": "sha384",
    "SHA512": "sha512",
    "SHA3_224": "sha3_224",
    "SHA3_256": "sha3_256",
    "SHA3_384": "sha3_384",
    "SHA3_512": "sha3_512",
}

_TRUTHY = {"1", "on", "true", "yes", "y"}
_FALSY = {"0", "off", "false", "no", "n"}


@dataclass(frozen=True, slots=True)
class ContentHash:
    """An algorithm-tagged digest such as ``SHA256=<hex>``.

    Attributes:
        algorithm: Upper-case algorithm tag (e.g. "SHA256").
        digest: Lower-case hex digest.
    """

    algorithm: str
    digest: str

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse an ``<ALGO>=<hex-digest>`` string.

        Raises:
            ConfigError: If the string is malformed, the algorithm is unknown,
                or the digest has the wrong length for the algorithm.
        """
        algo, sep, digest = value.partition("=")
        algo = algo.strip().upper()
        digest = digest.strip().lower()
        if not sep or not algo or not digest:
            raise ConfigError(
                f"Invalid hash '{value}': expected '<ALGO>=<hex-digest>'"
            )
        if algo not in HASH_ALGORITHMS:
            supported = ", ".join(HASH_ALGORITHMS)
            raise ConfigError(
                f"Unsupported hash algorithm '{algo}' (supported: {supported})"
            )
        expected_len = hashlib.new(HASH_ALGORITHMS[algo]).digest_size * 2
        if len(digest) != expected_len or any(
            c not in "0123456789abcdef" for c in digest
        ):
            raise ConfigError(
                f"Invalid {algo} digest '{digest}': expected {expected_len} hex characters"
            )
        return cls(algorithm=algo, digest=digest)

    @property
    def hashlib_name(self) -> str:
        """Name of the algorithm as understood by hashlib."""
        return HASH_ALGORITHMS[self.algorithm]

    def __str__(self) -> str:
        return f"{self.algorithm}={self.digest}"


def _require(value: str, what: str, name: str = "") -> None:
    if not value:
        owner = f" of package '{name}'" if name else ""
        raise ConfigError(f"Package {what}{owner} cannot be empty")


@dataclass(frozen=True, slots=True)
class ArchivePackage:
    """A pinned archive that is extracted into ``<root>/<name>-<version>``.

    Attributes:
        name: Unique identifier for the dependency.
        version: Opaque version string (never parsed or compared).
        url: Where to download the archive from (http(s), s3, file or path).
        hash: Expected content hash of the archive bytes.

    Example:
        >>> pkg = ArchivePackage(
        ...     name="zlib",
        ...     version="1.3.1",
        ...     url="https://zlib.net/zlib-1.3.1.tar.gz",
        ...     hash=ContentHash.parse("SHA256=" + "0" * 64),
        ... )
        >>> pkg.dirname
        'zlib-1.3.1'
    """

    name: str
    version: str
    url: str
    hash: ContentHash

    def __post_init__(self) -> None:
        """Validate package fields after initialization."""
        _require(self.name, "name")
        _require(self.version, "version", self.name)
        _require(self.url, "url", self.name)

    @property
    def dirname(self) -> str:
        """Directory name of the cache entry under the cache root."""
        return f"{self.name}-{self.version}"


@dataclass(frozen=True, slots=True)
class FilePackage:
    """A pinned single file stored as ``<root>/<name>-<version>/<destination>``.

    Attributes:
        name: Unique identifier for the dependency.
        version: Opaque version string.
        url: Where to download the file from.
        destination: Filename inside the package directory.
        hash: Expected content hash of the file.
    """

    name: str
    version: str
    url: str
    destination: str
    hash: ContentHash

    def __post_init__(self) -> None:
        """Validate package fields after initialization."""
        _require(self.name, "name")
        _require(self.version, "version", self.name)
        _require(self.url, "url", self.name)
        _require(self.destination, "destination filename", self.name)

    @property
    def dirname(self) -> str:
        """Directory name of the cache entry under the cache root."""
        return f"{self.name}-{self.version}"


PackageSpec = ArchivePackage | FilePackage


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Where a fetched package lives, returned instead of mutating caller scope.

    Attributes:
        name: The package name.
        source_dir: Absolute path of the package directory.
        version: The package version.
    """

    name: str
    source_dir: Path
    version: str

    def bindings(self) -> dict[str, str]:
        """Variables a downstream build declaration can consume.

        Returns:
            ``{"<name>_SOURCE_DIR": ..., "<name>_VERSION": ...}``
        """
        return {
            f"{self.name}_SOURCE_DIR": str(self.source_dir),
            f"{self.name}_VERSION": self.version,
        }


class Platform(StrEnum):
    """Linking model of the target platform."""

    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "windows"

    @classmethod
    def current(cls) -> Platform:
        """Platform of the running interpreter."""
        if sys.platform.startswith(("win", "cygwin")):
            return cls.WINDOWS
        if sys.platform == "darwin":
            return cls.DARWIN
        return cls.LINUX


class ArtifactKind(StrEnum):
    SHARED = "shared"
    STATIC = "static"


class LinkScope(StrEnum):
    """Visibility of a link directive, mirroring CMake's keywords."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    INTERFACE = "INTERFACE"


@dataclass(frozen=True, slots=True)
class ArtifactSpec:
    """An artifact an external build installs, and its exported interface.

    Attributes:
        target: Target name consumers link against.
        kind: Whether the artifact is a shared or static library.
        include_dirs: Include directories; relative entries are resolved
            under the package's install directory.
        compile_definitions: Definitions consumers must compile with.
        library: Library base name on disk, when it differs from target.
    """

    target: str
    kind: ArtifactKind = ArtifactKind.SHARED
    include_dirs: tuple[str, ...] = ("include",)
    compile_definitions: frozenset[str] = frozenset()
    library: str | None = None

    @property
    def library_name(self) -> str:
        return self.library or self.target


def _flag(env: Mapping[str, str], key: str) -> bool | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigError(f"{key} must be a boolean (ON/OFF), got '{value}'")


@dataclass(frozen=True, slots=True)
class BuildSettings:
    """The parent build's configuration, forwarded into external builds.

    Flags are kept as raw strings so they reach the external build exactly
    as the parent build uses them.

    Attributes:
        build_type: Active configuration name (e.g. "Debug", "Release").
        c_compiler: Path to the C compiler, if pinned.
        cxx_compiler: Path to the C++ compiler, if pinned.
        c_flags: C compiler flags.
        cxx_flags: C++ compiler flags.
        sanitizer_flags: Sanitizer instrumentation flags, appended to both
            compile and link flags.
        cache_launcher: Pre-resolved compiler launcher (ccache, sccache).
        position_independent_code: Forwarded when not None.
        generator: CMake generator name.
        generator_platform: Generator platform (e.g. "x64" for Visual Studio).
        platform: Linking model used to name installed artifacts.
        debug_postfix: Suffix appended to Debug library names.
        cmake_program: The cmake executable to invoke.
    """

    build_type: str = "Release"
    c_compiler: str | None = None
    cxx_compiler: str | None = None
    c_flags: str = ""
    cxx_flags: str = ""
    sanitizer_flags: str = ""
    cache_launcher: str | None = None
    position_independent_code: bool | None = None
    generator: str | None = None
    generator_platform: str | None = None
    platform: Platform = field(default_factory=Platform.current)
    debug_postfix: str = "d"
    cmake_program: str = "cmake"

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None) -> Self:
        """Build settings from environment variables.

        Reads CMDEP_BUILD_TYPE, CC, CXX, CFLAGS, CXXFLAGS,
        CMDEP_SANITIZER_FLAGS, CMDEP_CACHE_LAUNCHER, CMDEP_PIC,
        CMAKE_GENERATOR and CMAKE_GENERATOR_PLATFORM.

        Raises:
            ConfigError: If CMDEP_PIC is not a recognised boolean.
        """
        env = os.environ if env is None else env
        return cls(
            build_type=env.get("CMDEP_BUILD_TYPE", "Release"),
            c_compiler=env.get("CC") or None,
            cxx_compiler=env.get("CXX") or None,
            c_flags=env.get("CFLAGS", ""),
            cxx_flags=env.get("CXXFLAGS", ""),
            sanitizer_flags=env.get("CMDEP_SANITIZER_FLAGS", ""),
            cache_launcher=env.get("CMDEP_CACHE_LAUNCHER") or None,
            position_independent_code=_flag(env, "CMDEP_PIC"),
            generator=env.get("CMAKE_GENERATOR") or None,
            generator_platform=env.get("CMAKE_GENERATOR_PLATFORM") or None,
        )

    @property
    def is_debug(self) -> bool:
        return is_debug_configuration(self.build_type)


def is_debug_configuration(configuration: str | None) -> bool:
    """Return True only for the Debug configuration.

    Comparison is case-insensitive. Every other configuration, including
    RelWithDebInfo, MinSizeRel and an empty/unset one, selects Release
    artifacts.
    """
    return (configuration or "").strip().lower() == "debug"


@dataclass(frozen=True, slots=True)
class ExternalBuildStep:
    """An isolated configure/build/install cycle for one package.

    Attributes:
        name: Step name, unique per (package, version).
        package: The package name.
        version: The package version.
        source_dir: Directory holding the package's CMakeLists.txt.
        binary_dir: Scratch build directory.
        install_dir: Install prefix.
        configure_command: Command line of the configure stage.
        build_command: Command line of the build stage.
        install_command: Command line of the install stage.
    """

    name: str
    package: str
    version: str
    source_dir: Path
    binary_dir: Path
    install_dir: Path
    configure_command: tuple[str, ...]
    build_command: tuple[str, ...]
    install_command: tuple[str, ...]

    def stages(self) -> list[tuple[str, tuple[str, ...]]]:
        """The three stages in execution order."""
        return [
            ("configure", self.configure_command),
            ("build", self.build_command),
            ("install", self.install_command),
        ]


@dataclass(frozen=True, slots=True)
class ExternalBuildRecord:
    """What a consumer needs to link against an externally built target.

    Written by the external build driver, or directly by callers that
    integrate a third-party build by hand.

    Attributes:
        target: Target name the record is keyed by.
        lib_debug: Library used by the Debug configuration.
        lib_release: Library used by every other configuration.
        implib_debug: Windows import library for Debug (shared only).
        implib_release: Windows import library for Release (shared only).
        include_dirs: Include directories to propagate, in order.
        compile_definitions: Definitions to propagate.
        step: Name of the build step consumers must be ordered after.
        external: Always True; kept as an explicit flag for callers.
    """

    target: str
    lib_debug: Path
    lib_release: Path
    implib_debug: Path | None = None
    implib_release: Path | None = None
    include_dirs: tuple[Path, ...] = ()
    compile_definitions: frozenset[str] = frozenset()
    step: str | None = None
    external: bool = True

    def library(self, configuration: str | None) -> Path:
        """Library path for a build configuration."""
        if is_debug_configuration(configuration):
            return self.lib_debug
        return self.lib_release

    def import_library(self, configuration: str | None) -> Path | None:
        """Import library path for a build configuration, if recorded."""
        if is_debug_configuration(configuration):
            return self.implib_debug
        return self.implib_release
