"""Target link resolution.

Links a consumer against a list of dependencies, each of which is either
an ordinary host target (linked with the host's native directive, nothing
more) or an externally built target described by an ExternalBuildRecord.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cmdep.core.exceptions import UnresolvedDependencyError
from cmdep.core.models import LinkScope, Platform


if TYPE_CHECKING:
    from collections.abc import Sequence

    from cmdep.core.external_build import ExternalRecordRegistry
    from cmdep.core.models import BuildSettings, ExternalBuildRecord
    from cmdep.core.ports import BuildHostPort

logger = logging.getLogger(__name__)

# libfoo.so, libfoo.so.1, libfoo.so.1.2.3, libfoo.dylib, libfoo.1.dylib
_SHARED_OBJECT = re.compile(r"\.(so(\.\d+)*|dylib)$")


def is_shared_object(path: Path) -> bool:
    """True for Unix shared libraries, which need an RPATH entry to be found."""
    return bool(_SHARED_OBJECT.search(path.name))


@dataclass(frozen=True, slots=True)
class LinkResolution:
    """What was applied to the consumer for one dependency.

    Attributes:
        name: The dependency name.
        external: Whether it was resolved through an external build record.
        linked: What was passed to the link directive (name or file path).
        runtime: Runtime-loaded file recorded separately (Windows DLLs).
        rpath: Directory added to the consumer's runtime search path.
    """

    name: str
    external: bool
    linked: str | Path
    runtime: Path | None = None
    rpath: Path | None = None


def partition_dependencies(
    dependencies: Sequence[str], records: ExternalRecordRegistry
) -> tuple[list[ExternalBuildRecord], list[str]]:
    """Split dependency names into external records and ordinary names."""
    externals: list[ExternalBuildRecord] = []
    ordinary: list[str] = []
    for name in dependencies:
        record = records.get(name)
        if record is not None and record.external:
            externals.append(record)
        else:
            ordinary.append(name)
    return externals, ordinary


class LinkResolver:
    """Applies link directives for ordinary and externally built targets.

    Args:
        host: The build host whose targets are modified.
        records: External build records, keyed by target name.
        configuration: Active build configuration. Only "Debug" (any case)
            selects Debug libraries; everything else selects Release.
        platform: Linking model (Windows import libraries vs RPATH). Must be
            the platform the records were named for; from_settings() takes
            both this and configuration from the driver's BuildSettings.
    """

    def __init__(
        self,
        host: BuildHostPort,
        records: ExternalRecordRegistry,
        configuration: str | None = None,
        platform: Platform | None = None,
    ) -> None:
        self._host = host
        self._records = records
        self._configuration = configuration
        self._platform = platform or Platform.current()

    @classmethod
    def from_settings(
        cls,
        host: BuildHostPort,
        records: ExternalRecordRegistry,
        settings: BuildSettings,
    ) -> LinkResolver:
        """Resolver using the configuration and platform the records were built for."""
        return cls(host, records, settings.build_type, settings.platform)

    def link_targets(
        self,
        consumer: str,
        scope: LinkScope,
        dependencies: Sequence[str],
    ) -> list[LinkResolution]:
        """Link consumer against every dependency in one call.

        Every name is checked before the consumer is modified, so an
        unresolved name leaves the consumer untouched.

        Returns:
            One LinkResolution per dependency, in input order.

        Raises:
            UnresolvedDependencyError: If a name is neither an external
                record nor a target known to the host.
        """
        externals, ordinary = partition_dependencies(dependencies, self._records)
        for name in ordinary:
            if not self._host.has_target(name):
                raise UnresolvedDependencyError(name, consumer)

        # Link order matters for static archives, so directives follow the
        # input order; runs of ordinary names share one directive
        externals_by_name = {r.target: r for r in externals}
        resolutions: list[LinkResolution] = []
        pending: list[str] = []
        for name in dependencies:
            record = externals_by_name.get(name)
            if record is None:
                pending.append(name)
                continue
            resolutions += self._link_ordinary(consumer, scope, pending)
            pending = []
            resolutions.append(self._link_external(consumer, scope, record))
        resolutions += self._link_ordinary(consumer, scope, pending)
        return resolutions

    def _link_ordinary(
        self, consumer: str, scope: LinkScope, names: list[str]
    ) -> list[LinkResolution]:
        if not names:
            return []
        self._host.link_libraries(consumer, scope, names)
        return [LinkResolution(name=n, external=False, linked=n) for n in names]

    def _link_external(
        self, consumer: str, scope: LinkScope, record: ExternalBuildRecord
    ) -> LinkResolution:
        host = self._host
        if record.step is not None:
            host.add_dependency(consumer, record.step)

        library = record.library(self._configuration)
        runtime: Path | None = None
        rpath: Path | None = None

        if self._platform is Platform.WINDOWS:
            implib = record.import_library(self._configuration)
            if implib is not None:
                linked = implib
                runtime = library
                host.add_runtime_artifact(consumer, runtime)
            else:
                linked = library
        else:
            linked = library
            if is_shared_object(library):
                rpath = library.parent
                host.add_build_rpath(consumer, rpath)

        host.link_libraries(consumer, scope, [linked])
        if record.include_dirs:
            host.add_include_directories(consumer, scope, record.include_dirs)
        if record.compile_definitions:
            host.add_compile_definitions(
                consumer, scope, sorted(record.compile_definitions)
            )

        logger.debug("Linked %s -> %s (%s)", consumer, record.target, linked)
        return LinkResolution(
            name=record.target,
            external=True,
            linked=linked,
            runtime=runtime,
            rpath=rpath,
        )
