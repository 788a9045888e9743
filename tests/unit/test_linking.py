"""Unit tests for the target link resolver."""

from __future__ import annotations

from pathlib import Path

import pytest

from cmdep.adapters.host import BuildGraph
from cmdep.core.exceptions import UnresolvedDependencyError
from cmdep.core.external_build import ExternalRecordRegistry
from cmdep.core.linking import LinkResolver, is_shared_object
from cmdep.core.models import BuildSettings, ExternalBuildRecord, LinkScope, Platform


INSTALL = Path("/build/libfoo_1.2.0_install")

FOO = ExternalBuildRecord(
    target="foo",
    lib_debug=INSTALL / "lib" / "libfood.so",
    lib_release=INSTALL / "lib" / "libfoo.so",
    include_dirs=(INSTALL / "include",),
    compile_definitions=frozenset({"FOO_SHARED", "FOO_API=1"}),
    step="libfoo_1.2.0_external",
)

FOO_WIN = ExternalBuildRecord(
    target="foo",
    lib_debug=INSTALL / "bin" / "food.dll",
    lib_release=INSTALL / "bin" / "foo.dll",
    implib_debug=INSTALL / "lib" / "food.lib",
    implib_release=INSTALL / "lib" / "foo.lib",
    include_dirs=(INSTALL / "include",),
    step="libfoo_1.2.0_external",
)


def _setup(
    *records: ExternalBuildRecord,
    configuration: str | None = "Release",
    platform: Platform = Platform.LINUX,
) -> tuple[LinkResolver, BuildGraph]:
    graph = BuildGraph()
    graph.add_target("app")
    resolver = LinkResolver(
        graph, ExternalRecordRegistry(records), configuration, platform
    )
    return resolver, graph


@pytest.mark.link
class TestIsSharedObject:
    @pytest.mark.parametrize(
        "name", ["libfoo.so", "libfoo.so.1", "libfoo.so.1.2.3", "libfoo.dylib"]
    )
    def test_shared(self, name: str) -> None:
        assert is_shared_object(Path("/lib") / name)

    @pytest.mark.parametrize("name", ["libfoo.a", "foo.lib", "foo.dll", "libso.txt"])
    def test_not_shared(self, name: str) -> None:
        assert not is_shared_object(Path("/lib") / name)


@pytest.mark.link
class TestExternalDependencies:
    """Linking against records written by the external build driver."""

    @pytest.mark.tier(1)
    def test_release_links_release_library(self) -> None:
        resolver, graph = _setup(FOO)

        resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        app = graph.target("app")
        assert app.linked_items == [FOO.lib_release]
        assert app.dependencies == ["libfoo_1.2.0_external"]

    @pytest.mark.parametrize("configuration", ["Debug", "debug", "DEBUG"])
    def test_debug_links_debug_library(self, configuration: str) -> None:
        resolver, graph = _setup(FOO, configuration=configuration)

        resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        assert graph.target("app").linked_items == [FOO.lib_debug]

    @pytest.mark.parametrize("configuration", ["RelWithDebInfo", "MinSizeRel", "", None])
    def test_other_configurations_use_release(self, configuration: str | None) -> None:
        resolver, graph = _setup(FOO, configuration=configuration)

        resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        assert graph.target("app").linked_items == [FOO.lib_release]

    def test_interface_propagates_with_scope(self) -> None:
        resolver, graph = _setup(FOO)

        resolver.link_targets("app", LinkScope.PUBLIC, ["foo"])

        app = graph.target("app")
        assert app.include_dirs == [(LinkScope.PUBLIC, INSTALL / "include")]
        assert app.compile_definitions == [
            (LinkScope.PUBLIC, "FOO_API=1"),
            (LinkScope.PUBLIC, "FOO_SHARED"),
        ]
        assert app.links == [(LinkScope.PUBLIC, FOO.lib_release)]

    def test_shared_object_adds_rpath(self) -> None:
        resolver, graph = _setup(FOO)

        [resolution] = resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        assert graph.target("app").rpaths == [INSTALL / "lib"]
        assert resolution.rpath == INSTALL / "lib"
        assert resolution.external

    def test_static_library_adds_no_rpath(self) -> None:
        static = ExternalBuildRecord(
            "foo", INSTALL / "lib" / "libfood.a", INSTALL / "lib" / "libfoo.a"
        )
        resolver, graph = _setup(static)

        resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        assert graph.target("app").rpaths == []

    def test_windows_links_import_library_and_records_dll(self) -> None:
        resolver, graph = _setup(FOO_WIN, platform=Platform.WINDOWS)

        [resolution] = resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        app = graph.target("app")
        assert app.linked_items == [INSTALL / "lib" / "foo.lib"]
        assert app.runtime_artifacts == [INSTALL / "bin" / "foo.dll"]
        assert app.rpaths == []
        assert resolution.runtime == INSTALL / "bin" / "foo.dll"

    def test_windows_static_links_library_directly(self) -> None:
        static = ExternalBuildRecord(
            "foo", INSTALL / "lib" / "food.lib", INSTALL / "lib" / "foo.lib"
        )
        resolver, graph = _setup(static, platform=Platform.WINDOWS)

        resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        app = graph.target("app")
        assert app.linked_items == [INSTALL / "lib" / "foo.lib"]
        assert app.runtime_artifacts == []

    def test_from_settings_uses_settings_platform_and_configuration(self) -> None:
        graph = BuildGraph()
        graph.add_target("app")
        settings = BuildSettings(build_type="Debug", platform=Platform.WINDOWS)
        resolver = LinkResolver.from_settings(
            graph, ExternalRecordRegistry([FOO_WIN]), settings
        )

        [resolution] = resolver.link_targets("app", LinkScope.PRIVATE, ["foo"])

        assert graph.target("app").linked_items == [INSTALL / "lib" / "food.lib"]
        assert resolution.runtime == INSTALL / "bin" / "food.dll"

    def test_hand_written_record_without_step(self) -> None:
        """Records for hand-integrated builds add no ordering edge."""
        record = ExternalBuildRecord(
            "vendor", Path("/opt/v/libvd.a"), Path("/opt/v/libv.a")
        )
        resolver, graph = _setup(record)

        resolver.link_targets("app", LinkScope.PRIVATE, ["vendor"])

        app = graph.target("app")
        assert app.linked_items == [Path("/opt/v/libv.a")]
        assert app.dependencies == []


@pytest.mark.link
class TestOrdinaryDependencies:
    """Names that are ordinary host targets pass straight through."""

    def test_ordinary_targets_link_by_name_only(self) -> None:
        resolver, graph = _setup()
        graph.add_target("util")
        graph.add_target("log")

        resolutions = resolver.link_targets("app", LinkScope.PRIVATE, ["util", "log"])

        app = graph.target("app")
        assert app.links == [(LinkScope.PRIVATE, "util"), (LinkScope.PRIVATE, "log")]
        assert app.dependencies == []
        assert app.include_dirs == []
        assert app.rpaths == []
        assert [r.external for r in resolutions] == [False, False]

    def test_mixed_list_keeps_input_order(self) -> None:
        """Static archives resolve left to right, so order is preserved."""
        resolver, graph = _setup(FOO)
        graph.add_target("util")
        graph.add_target("log")

        resolutions = resolver.link_targets(
            "app", LinkScope.PRIVATE, ["util", "foo", "log"]
        )

        assert [r.name for r in resolutions] == ["util", "foo", "log"]
        assert graph.target("app").linked_items == ["util", FOO.lib_release, "log"]

    def test_unresolved_name_raises_before_any_change(self) -> None:
        resolver, graph = _setup(FOO)
        graph.add_target("util")

        with pytest.raises(UnresolvedDependencyError) as exc_info:
            resolver.link_targets("app", LinkScope.PRIVATE, ["foo", "util", "missing_lib"])

        assert exc_info.value.name == "missing_lib"
        assert exc_info.value.consumer == "app"
        app = graph.target("app")
        assert app.links == []
        assert app.dependencies == []
        assert app.include_dirs == []

    def test_empty_dependency_list_is_a_no_op(self) -> None:
        resolver, graph = _setup()

        assert resolver.link_targets("app", LinkScope.PRIVATE, []) == []
        assert graph.target("app").links == []
