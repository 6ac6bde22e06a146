"""skillgraph storage layer."""

from skillgraph.storage.base import StorageBackend
from skillgraph.storage.sqlite_store import SQLiteStore

__all__ = ["SQLiteStore", "StorageBackend"]
