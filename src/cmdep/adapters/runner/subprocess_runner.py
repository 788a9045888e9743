"""Runs external build steps as child processes."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from cmdep.core.exceptions import ExternalBuildError


if TYPE_CHECKING:
    from collections.abc import Mapping

    from cmdep.core.models import ExternalBuildStep

logger = logging.getLogger(__name__)


class SubprocessStepRunner:
    """Implements StepRunnerPort with subprocess.run.

    Each stage runs in its own process with the step's binary directory
    created beforehand. Output is inherited from the parent unless
    capture_output is set.
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, *, capture_output: bool = False
    ) -> None:
        self._env = dict(env) if env is not None else None
        self._capture_output = capture_output

    def run(self, step: ExternalBuildStep) -> None:
        """Configure, build and install one package.

        Raises:
            ExternalBuildError: On the first stage that exits non-zero or
                whose program cannot be started.
        """
        step.binary_dir.mkdir(parents=True, exist_ok=True)
        for stage, command in step.stages():
            logger.info("[%s] %s: %s", step.package, stage, " ".join(command))
            try:
                completed = subprocess.run(  # noqa: S603
                    list(command),
                    check=False,
                    env=self._env,
                    capture_output=self._capture_output,
                )
            except OSError as e:
                logger.error("[%s] %s could not start: %s", step.package, stage, e)
                raise ExternalBuildError(step.package, stage, 127, command) from e
            if completed.returncode != 0:
                raise ExternalBuildError(
                    step.package, stage, completed.returncode, command
                )
        logger.info("[%s] installed into %s", step.package, step.install_dir)
