"""Rich progress bars for package downloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


if TYPE_CHECKING:
    from types import TracebackType

    from rich.console import Console

    from cmdep.core.ports import ProgressCallback


class RichProgressReporter:
    """One progress bar per package download, with speed and ETA.

    Most servers only reveal the size once the response starts, so a task
    may begin with an unknown total that the first callback fills in.

    Example:
        with RichProgressReporter() as reporter:
            cache = DependencyCache.from_directory(progress=reporter)
            cache.fetch_all(Path(".cmdep/packages.py"))
    """

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        self._active: dict[str, TaskID] = {}
        self._running = False

    def __enter__(self) -> RichProgressReporter:
        self._start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()
        self._running = False

    def _start(self) -> None:
        if not self._running:
            self._progress.start()
            self._running = True

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Add a bar for name; total 0 means not known yet."""
        # Used outside a with-block the display starts on the first task
        self._start()
        task_id = self._progress.add_task(name, total=total or None)
        self._active[name] = task_id

        def advance(downloaded: int, total_bytes: int) -> None:
            fields: dict[str, int] = {"completed": downloaded}
            if total_bytes:
                fields["total"] = total_bytes
            self._progress.update(task_id, **fields)

        return advance

    def finish_task(self, name: str) -> None:
        """Fill the bar for name; unknown names are ignored."""
        task_id = self._active.pop(name, None)
        if task_id is None:
            return
        task = self._progress.tasks[task_id]
        done = task.total or task.completed
        self._progress.update(task_id, total=done, completed=done)
