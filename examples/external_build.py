"""Fetch, build externally, and link a consumer.

The external build is registered with a BuildGraph, which can execute it
with a SubprocessStepRunner (requires cmake on PATH). Consumers can be
linked against the artifacts before they exist; the graph orders the
external step first.
"""

from cmdep import (
    BuildGraph,
    BuildSettings,
    DependencyCache,
    ExternalBuildDriver,
    ExternalRecordRegistry,
    LinkResolver,
    LinkScope,
    SubprocessStepRunner,
    package,
)


cache = DependencyCache.from_directory()
libfoo = cache.fetch(
    package(
        "libfoo",
        "1.2.0",
        url="https://example.com/libfoo-1.2.0.tar.gz",
        hash="SHA256=" + "0" * 64,
    )
)

# Forward CC, CXX, CFLAGS, CMDEP_SANITIZER_FLAGS, ... into the external build
settings = BuildSettings.from_environment()

graph = BuildGraph()
graph.add_target("app")
records = ExternalRecordRegistry()
driver = ExternalBuildDriver(graph, records, settings, build_root=cache.root.parent / "build")
driver.build_external(
    "libfoo",
    libfoo.version,
    libfoo.source_dir,
    extra_args=["-DLIBFOO_BUILD_TESTS=OFF"],
    artifacts=["foo"],
)

# "foo" resolves to the installed library; "m" would need graph.add_target("m")
resolver = LinkResolver.from_settings(graph, records, settings)
for resolution in resolver.link_targets("app", LinkScope.PRIVATE, ["foo"]):
    print(f"{resolution.name}: {resolution.linked}")

# Runs configure/build/install for every registered step, in order
graph.execute(SubprocessStepRunner())
