"""Archive extraction adapters."""

from cmdep.adapters.archive.extractor import ArchiveExtractor


__all__ = ["ArchiveExtractor"]
