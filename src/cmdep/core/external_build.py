"""External build driver.

Registers an isolated CMake configure/build/install cycle for a package
and records where its artifacts will be installed, so that consumers can
be linked against them before they exist.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cmdep.core import naming
from cmdep.core.models import (
    ArtifactSpec,
    ExternalBuildRecord,
    ExternalBuildStep,
    Platform,
)


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from pathlib import Path

    from cmdep.core.models import BuildSettings
    from cmdep.core.ports import BuildHostPort

logger = logging.getLogger(__name__)


class ExternalRecordRegistry:
    """External build records keyed by target name.

    Registering a target again overwrites its previous record.
    """

    def __init__(self, records: Iterable[ExternalBuildRecord] = ()) -> None:
        self._records: dict[str, ExternalBuildRecord] = {}
        for record in records:
            self.register(record)

    def register(self, record: ExternalBuildRecord) -> None:
        self._records[record.target] = record

    def get(self, target: str) -> ExternalBuildRecord | None:
        return self._records.get(target)

    def __contains__(self, target: object) -> bool:
        return target in self._records

    def __iter__(self) -> Iterator[ExternalBuildRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


def _join_flags(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def configure_arguments(settings: BuildSettings, install: Path) -> list[str]:
    """CMake cache arguments that reproduce the parent build's configuration.

    Sanitizer flags are appended unchanged to both compile and link flags;
    the external build must be instrumented exactly like its consumers.
    """
    args: list[str] = []
    if settings.generator:
        args += ["-G", settings.generator]
    if settings.generator_platform:
        args += ["-A", settings.generator_platform]

    args.append(f"-DCMAKE_INSTALL_PREFIX={install}")
    if settings.build_type:
        args.append(f"-DCMAKE_BUILD_TYPE={settings.build_type}")
    if settings.c_compiler:
        args.append(f"-DCMAKE_C_COMPILER={settings.c_compiler}")
    if settings.cxx_compiler:
        args.append(f"-DCMAKE_CXX_COMPILER={settings.cxx_compiler}")

    c_flags = _join_flags(settings.c_flags, settings.sanitizer_flags)
    cxx_flags = _join_flags(settings.cxx_flags, settings.sanitizer_flags)
    if c_flags:
        args.append(f"-DCMAKE_C_FLAGS={c_flags}")
    if cxx_flags:
        args.append(f"-DCMAKE_CXX_FLAGS={cxx_flags}")
    if settings.sanitizer_flags:
        for kind in ("EXE", "SHARED", "MODULE"):
            args.append(f"-DCMAKE_{kind}_LINKER_FLAGS={settings.sanitizer_flags}")

    if settings.cache_launcher:
        args.append(f"-DCMAKE_C_COMPILER_LAUNCHER={settings.cache_launcher}")
        args.append(f"-DCMAKE_CXX_COMPILER_LAUNCHER={settings.cache_launcher}")
    if settings.position_independent_code is not None:
        pic = "ON" if settings.position_independent_code else "OFF"
        args.append(f"-DCMAKE_POSITION_INDEPENDENT_CODE={pic}")
    if settings.debug_postfix:
        args.append(f"-DCMAKE_DEBUG_POSTFIX={settings.debug_postfix}")
    return args


def _as_artifact(artifact: str | ArtifactSpec) -> ArtifactSpec:
    if isinstance(artifact, ArtifactSpec):
        return artifact
    return ArtifactSpec(target=artifact)


def make_record(
    artifact: ArtifactSpec,
    install: Path,
    step: str,
    platform: Platform,
    debug_postfix: str,
) -> ExternalBuildRecord:
    """Build the record for one artifact installed under install."""
    locations = naming.artifact_locations(
        install, artifact.library_name, artifact.kind, platform, debug_postfix
    )
    lib_debug, implib_debug = locations["Debug"]
    lib_release, implib_release = locations["Release"]
    include_dirs = tuple(install / d for d in artifact.include_dirs)
    return ExternalBuildRecord(
        target=artifact.target,
        lib_debug=lib_debug,
        lib_release=lib_release,
        implib_debug=implib_debug,
        implib_release=implib_release,
        include_dirs=include_dirs,
        compile_definitions=artifact.compile_definitions,
        step=step,
    )


class ExternalBuildDriver:
    """Registers external builds with a host and records their artifacts.

    Args:
        host: The build host steps are registered with.
        records: Registry the artifact records are written to.
        settings: Parent build configuration to forward.
        build_root: Directory install and binary dirs are created under.
    """

    def __init__(
        self,
        host: BuildHostPort,
        records: ExternalRecordRegistry,
        settings: BuildSettings,
        build_root: Path,
    ) -> None:
        self._host = host
        self._records = records
        self._settings = settings
        self._build_root = build_root

    @property
    def records(self) -> ExternalRecordRegistry:
        return self._records

    def install_dir(self, name: str, version: str) -> Path:
        return naming.install_dir(name, version, self._build_root)

    def build_external(
        self,
        name: str,
        version: str,
        source_dir: Path,
        extra_args: Sequence[str] = (),
        artifacts: Sequence[str | ArtifactSpec] = (),
    ) -> ExternalBuildStep:
        """Register the configure/build/install step for a package.

        Args:
            name: Package name.
            version: Package version.
            source_dir: Directory with the package's CMakeLists.txt,
                usually the FetchResult.source_dir of the package.
            extra_args: Extra configure arguments, appended after the
                forwarded ones so they take precedence.
            artifacts: Targets the build produces. Plain strings are shared
                libraries with an ``include`` directory and no definitions.

        Returns:
            The registered step.
        """
        settings = self._settings
        install = self.install_dir(name, version)
        build = naming.binary_dir(name, version, self._build_root)
        cmake = settings.cmake_program
        config = settings.build_type or "Release"

        configure = [
            cmake,
            "-S",
            str(source_dir),
            "-B",
            str(build),
            *configure_arguments(settings, install),
            *extra_args,
        ]
        step = ExternalBuildStep(
            name=naming.step_name(name, version),
            package=name,
            version=version,
            source_dir=source_dir,
            binary_dir=build,
            install_dir=install,
            configure_command=tuple(configure),
            build_command=(cmake, "--build", str(build), "--config", config),
            install_command=(cmake, "--install", str(build), "--config", config),
        )
        self._host.add_external_step(step)
        logger.info("Registered external build %s -> %s", step.name, install)

        for artifact in artifacts:
            record = make_record(
                _as_artifact(artifact),
                install,
                step.name,
                settings.platform,
                settings.debug_postfix,
            )
            self._records.register(record)
            logger.debug("Recorded external target %s (%s)", record.target, step.name)

        return step
