"""Build host adapters."""

from cmdep.adapters.host.graph import BuildGraph, Target


__all__ = ["BuildGraph", "Target"]
