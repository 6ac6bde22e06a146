"""Abstract storage interface for skill records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """Persists the flat list of skill records produced by ``SkillGraph.save``."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize database schema and connections."""

    @abstractmethod
    async def close(self) -> None:
        """Close all connections."""

    @abstractmethod
    async def load_records(self) -> list[dict[str, Any]]:
        """Return every stored record in insertion order, unvalidated."""

    @abstractmethod
    async def save_records(self, records: list[dict[str, Any]]) -> int:
        """Replace all stored records. Returns the number written."""

    @abstractmethod
    async def upsert_records(self, records: list[dict[str, Any]]) -> int:
        """Insert or update the given records, keeping existing positions."""

    @abstractmethod
    async def count_skills(self) -> int:
        """Count stored skills."""

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Summary numbers for status output."""
