"""Progress reporting adapters."""

from cmdep.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
