"""Storage backend adapters."""

from cmdep.adapters.storage.filesystem import FilesystemStorage
from cmdep.adapters.storage.http import HttpStorage
from cmdep.adapters.storage.router import RouterStorage, create_router
from cmdep.adapters.storage.s3 import S3Storage


__all__ = ["FilesystemStorage", "HttpStorage", "RouterStorage", "S3Storage", "create_router"]
