"""In-memory build host adapter implementing BuildHostPort."""

from __future__ import annotations

from dataclasses import dataclass, field
from graphlib import CycleError, TopologicalSorter
from pathlib import Path
from typing import TYPE_CHECKING

from cmdep.core.exceptions import ConfigError


if TYPE_CHECKING:
    from collections.abc import Iterable

    from cmdep.core.models import ExternalBuildStep, LinkScope
    from cmdep.core.ports import StepRunnerPort


@dataclass
class Target:
    """A host target and the directives applied to it.

    Attributes:
        name: Target name.
        links: (scope, item) pairs in the order they were linked.
        dependencies: Build-order dependencies (step or target names).
        include_dirs: (scope, dir) pairs.
        compile_definitions: (scope, definition) pairs.
        rpaths: Runtime library search path entries.
        runtime_artifacts: Files loaded at run time.
    """

    name: str
    links: list[tuple[LinkScope, str | Path]] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    include_dirs: list[tuple[LinkScope, Path]] = field(default_factory=list)
    compile_definitions: list[tuple[LinkScope, str]] = field(default_factory=list)
    rpaths: list[Path] = field(default_factory=list)
    runtime_artifacts: list[Path] = field(default_factory=list)

    @property
    def linked_items(self) -> list[str | Path]:
        return [item for _scope, item in self.links]


class BuildGraph:
    """A minimal host build graph: targets, external steps and order edges.

    Useful for driving external builds without a surrounding build system,
    and for inspecting exactly what the link resolver applied.
    """

    def __init__(self) -> None:
        self._targets: dict[str, Target] = {}
        self._steps: dict[str, ExternalBuildStep] = {}

    def add_target(self, name: str) -> Target:
        """Declare a target (idempotent)."""
        if name in self._steps:
            raise ConfigError(f"'{name}' is already an external build step")
        return self._targets.setdefault(name, Target(name))

    def target(self, name: str) -> Target:
        try:
            return self._targets[name]
        except KeyError:
            raise ConfigError(f"Unknown target '{name}'") from None

    @property
    def steps(self) -> dict[str, ExternalBuildStep]:
        return dict(self._steps)

    # BuildHostPort

    def has_target(self, name: str) -> bool:
        return name in self._targets

    def add_external_step(self, step: ExternalBuildStep) -> None:
        self._steps[step.name] = step

    def add_dependency(self, consumer: str, step: str) -> None:
        deps = self.target(consumer).dependencies
        if step not in deps:
            deps.append(step)

    def link_libraries(
        self, consumer: str, scope: LinkScope, items: Iterable[str | Path]
    ) -> None:
        self.target(consumer).links.extend((scope, item) for item in items)

    def add_include_directories(
        self, consumer: str, scope: LinkScope, dirs: Iterable[Path]
    ) -> None:
        self.target(consumer).include_dirs.extend((scope, d) for d in dirs)

    def add_compile_definitions(
        self, consumer: str, scope: LinkScope, definitions: Iterable[str]
    ) -> None:
        self.target(consumer).compile_definitions.extend(
            (scope, d) for d in definitions
        )

    def add_build_rpath(self, consumer: str, directory: Path) -> None:
        rpaths = self.target(consumer).rpaths
        if directory not in rpaths:
            rpaths.append(directory)

    def add_runtime_artifact(self, consumer: str, path: Path) -> None:
        artifacts = self.target(consumer).runtime_artifacts
        if path not in artifacts:
            artifacts.append(path)

    # Scheduling

    def build_order(self) -> list[str]:
        """Steps and targets in an order where each follows its dependencies.

        Raises:
            ConfigError: If the dependencies form a cycle.
        """
        sorter: TopologicalSorter[str] = TopologicalSorter()
        for name in self._steps:
            sorter.add(name)
        for target in self._targets.values():
            linked_targets = [
                item
                for item in target.linked_items
                if isinstance(item, str) and item in self._targets
            ]
            sorter.add(target.name, *target.dependencies, *linked_targets)
        try:
            return list(sorter.static_order())
        except CycleError as e:
            raise ConfigError(f"Dependency cycle: {' -> '.join(e.args[1])}") from e

    def execute(self, runner: StepRunnerPort) -> list[str]:
        """Run every registered external step in build order.

        Stops at the first failure; the runner's ExternalBuildError
        propagates unchanged.

        Returns:
            Names of the steps that ran.
        """
        ran: list[str] = []
        for name in self.build_order():
            step = self._steps.get(name)
            if step is not None:
                runner.run(step)
                ran.append(name)
        return ran
