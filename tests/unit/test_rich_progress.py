"""Unit tests for RichProgressReporter adapter."""

from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console


def _quiet_console() -> Console:
    return Console(file=StringIO(), force_terminal=False)


@pytest.mark.progress
class TestRichProgressReporter:
    """Tests for RichProgressReporter."""

    def test_rich_reporter_satisfies_protocol(self) -> None:
        """RichProgressReporter should implement ProgressReporter."""
        from cmdep.core.ports import ProgressReporter
        from cmdep.progress import RichProgressReporter

        assert isinstance(RichProgressReporter(), ProgressReporter)

    def test_unknown_total_is_filled_from_callback(self) -> None:
        """A task started with total=0 picks up the size from the transfer."""
        from cmdep.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            callback = reporter.start_task("libfoo", 0)
            task = reporter._progress.tasks[0]
            assert task.total is None

            callback(100, 1000)
            assert task.total == 1000
            assert task.completed == 100

    def test_finish_task_marks_complete(self) -> None:
        from cmdep.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            callback = reporter.start_task("libfoo", 0)
            callback(300, 0)
            reporter.finish_task("libfoo")

            task = reporter._progress.tasks[0]
            assert task.total == 300
            assert task.completed == 300

    def test_finish_unknown_task_is_ignored(self) -> None:
        from cmdep.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            reporter.finish_task("never-started")

    def test_multiple_tasks(self) -> None:
        from cmdep.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            cb1 = reporter.start_task("zlib", 1000)
            cb2 = reporter.start_task("libfoo", 2000)
            cb1(500, 1000)
            cb2(1000, 2000)
            reporter.finish_task("zlib")
            reporter.finish_task("libfoo")

            assert [t.completed for t in reporter._progress.tasks] == [1000, 2000]


@pytest.mark.progress
class TestRichProgressReporterIntegration:
    """RichProgressReporter driving a real fetch."""

    def test_fetch_with_rich_progress(self, libfoo_tarball, cache_root: Path) -> None:
        from cmdep.adapters.archive import ArchiveExtractor
        from cmdep.adapters.storage import FilesystemStorage
        from cmdep.core.services import DependencyCache
        from cmdep.manifest import package
        from cmdep.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            cache = DependencyCache(
                cache_root, FilesystemStorage(), ArchiveExtractor(), progress=reporter
            )
            result = cache.fetch(
                package(
                    "libfoo",
                    "1.2.0",
                    url=str(libfoo_tarball.path),
                    hash=libfoo_tarball.hash,
                )
            )

        assert (result.source_dir / "CMakeLists.txt").exists()
