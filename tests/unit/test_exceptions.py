"""Unit tests for domain exception hierarchy."""

from pathlib import Path

import pytest

from cmdep.core.exceptions import (
    CmdepError,
    ConfigError,
    ExternalBuildError,
    FetchError,
    IntegrityError,
    ManifestLoadError,
    StorageAccessError,
    StorageNotFoundError,
    UnresolvedDependencyError,
)


@pytest.mark.core
class TestHierarchy:
    """Every library error is catchable as CmdepError."""

    @pytest.mark.parametrize(
        "cls",
        [
            ConfigError,
            ManifestLoadError,
            FetchError,
            StorageNotFoundError,
            StorageAccessError,
            IntegrityError,
            ExternalBuildError,
            UnresolvedDependencyError,
        ],
    )
    def test_subclass_of_base(self, cls: type) -> None:
        assert issubclass(cls, CmdepError)

    def test_manifest_load_error_is_config_error(self) -> None:
        assert issubclass(ManifestLoadError, ConfigError)

    def test_storage_errors_are_fetch_errors(self) -> None:
        assert issubclass(StorageNotFoundError, FetchError)
        assert issubclass(StorageAccessError, FetchError)

    def test_base_recovery_hint_is_none(self) -> None:
        assert CmdepError("boom").recovery_hint is None


@pytest.mark.core
class TestMessages:
    """Errors name the offending package/target and the failed check."""

    def test_integrity_error_names_expected_and_actual(self) -> None:
        err = IntegrityError("libfoo", "https://x/foo.tgz", "SHA256", "aaa", "bbb")
        message = str(err)
        assert "libfoo" in message
        assert "expected aaa" in message
        assert "got bbb" in message
        assert err.recovery_hint is not None and "libfoo" in err.recovery_hint

    def test_unresolved_dependency_names_target_and_consumer(self) -> None:
        err = UnresolvedDependencyError("missing_lib", "app")
        assert "missing_lib" in str(err)
        assert "app" in str(err)
        assert err.name == "missing_lib"

    def test_external_build_error_carries_command(self) -> None:
        err = ExternalBuildError("zlib", "build", 2, ["cmake", "--build", "b"])
        assert "zlib" in str(err)
        assert "build" in str(err)
        assert err.returncode == 2
        assert "cmake --build b" in err.recovery_hint

    def test_fetch_error_stores_source_and_cause(self) -> None:
        cause = OSError("timeout")
        err = FetchError("Download failed", source="https://x", cause=cause)
        assert err.source == "https://x"
        assert err.cause is cause

    def test_not_found_hint_mentions_source(self) -> None:
        err = StorageNotFoundError("gone", source="https://x/foo.tgz")
        assert "https://x/foo.tgz" in err.recovery_hint

    def test_manifest_load_error_hint_uses_line(self) -> None:
        err = ManifestLoadError("bad", manifest_path=Path("/p/packages.py"), line=7)
        assert err.recovery_hint == "Check packages.py at line 7"

    def test_manifest_load_error_hint_without_line(self) -> None:
        err = ManifestLoadError("bad", manifest_path=Path("/p/packages.py"))
        assert "packages.py" in err.recovery_hint
