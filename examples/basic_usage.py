"""Basic fetch example.

This example shows the simplest usage pattern: declare a pinned package,
create a cache, and fetch it. The first fetch downloads, verifies and
extracts; every later fetch returns the cached directory immediately.
"""

from pathlib import Path

from cmdep import ArchiveExtractor, DependencyCache, FilesystemStorage, package


# Declare a package pinned by URL and content hash
zlib = package(
    "zlib",
    "1.3.1",
    url="https://zlib.net/zlib-1.3.1.tar.gz",
    hash="SHA256=9a93b2b7dfdac77ceba5a558a580e74667dd6fede4585b91eefb60f03b72df23",
)

# Option 1: Manual wiring (full control over adapters)
# Use this for a vendored mirror or custom storage backends
cache = DependencyCache(
    root=Path("./3rdparty"),
    storage=FilesystemStorage(),
    archive=ArchiveExtractor(),
)

# Option 2: Factory method (recommended for most cases)
# Auto-discovers project root, honours $CMDEP_DIR, wires up RouterStorage
# cache = DependencyCache.from_directory()

# Fetch downloads if not cached, returns where the sources live
result = cache.fetch(zlib)
print(f"Sources available at: {result.source_dir}")

# The variables a build declaration consumes
for key, value in result.bindings().items():
    print(f"{key}={value}")

# A manifest file (.cmdep/packages.py) declares several packages at once
# results = cache.fetch_all(Path(".cmdep/packages.py"))
