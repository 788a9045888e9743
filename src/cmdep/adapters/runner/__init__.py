"""Step runner adapters."""

from cmdep.adapters.runner.subprocess_runner import SubprocessStepRunner


__all__ = ["SubprocessStepRunner"]
