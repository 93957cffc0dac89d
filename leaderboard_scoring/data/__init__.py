"""Snapshot loading, validation and indexing."""

from .index import SnapshotIndex, as_index
from .loaders import build_snapshot, load_snapshot

__all__ = ["SnapshotIndex", "as_index", "build_snapshot", "load_snapshot"]
