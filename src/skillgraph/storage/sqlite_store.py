"""SQLite storage backend for skill records, in WAL mode."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import aiosqlite

from skillgraph.storage.base import StorageBackend

logger = logging.getLogger(__name__)

_UPSERT_SQL = """INSERT INTO skills (name, position, experience, last_modified, dependencies)
   VALUES (:name, (SELECT COALESCE(MAX(position), -1) + 1 FROM skills),
   :experience, :last_modified, :dependencies)
   ON CONFLICT(name) DO UPDATE SET
   experience = excluded.experience,
   last_modified = excluded.last_modified,
   dependencies = excluded.dependencies"""


class SQLiteStore(StorageBackend):
    """SQLite-based skill record storage."""

    def __init__(self, db_path: Path, *, wal_mode: bool = True) -> None:
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Create database and apply schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self.db_path))
        self._db.row_factory = aiosqlite.Row

        if self.wal_mode:
            await self._db.execute("PRAGMA journal_mode=WAL")

        await self._db.executescript(_load_sql("skills.sql"))
        await self._db.commit()
        logger.info("Initialized SQLite store at %s", self.db_path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Store not initialized. Call initialize() first.")
        return self._db

    async def load_records(self) -> list[dict[str, Any]]:
        cursor = await self.db.execute(
            "SELECT name, experience, last_modified, dependencies FROM skills ORDER BY position"
        )
        rows = await cursor.fetchall()
        return [_row_to_record(row) for row in rows]

    async def save_records(self, records: list[dict[str, Any]]) -> int:
        rows = [
            {**_serialize_record(record), "position": index}
            for index, record in enumerate(records)
        ]
        try:
            await self.db.execute("DELETE FROM skills")
            await self.db.executemany(
                """INSERT INTO skills (name, position, experience, last_modified, dependencies)
                   VALUES (:name, :position, :experience, :last_modified, :dependencies)""",
                rows,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.debug("Saved %d skill record(s)", len(rows))
        return len(rows)

    async def upsert_records(self, records: list[dict[str, Any]]) -> int:
        for record in records:
            await self.db.execute(_UPSERT_SQL, _serialize_record(record))
        await self.db.commit()
        return len(records)

    async def count_skills(self) -> int:
        cursor = await self.db.execute("SELECT COUNT(*) FROM skills")
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def get_stats(self) -> dict[str, Any]:
        cursor = await self.db.execute(
            "SELECT COUNT(*) AS skills, COALESCE(SUM(experience), 0) AS experience,"
            " MAX(last_modified) AS last_award FROM skills"
        )
        row = await cursor.fetchone()
        return {
            "skills": row["skills"],
            "experience": row["experience"],
            "last_award": row["last_award"],
            "db_path": str(self.db_path),
        }


# --- Helpers ---


def _load_sql(filename: str) -> str:
    """Load SQL file from the schema package."""
    schema_dir = Path(__file__).parent.parent / "schema"
    return (schema_dir / filename).read_text()


def _row_to_record(row: aiosqlite.Row) -> dict[str, Any]:
    """Convert a row to a record; undecodable dependencies are passed through raw."""
    record = dict(row)
    try:
        record["dependencies"] = json.loads(record["dependencies"])
    except (json.JSONDecodeError, TypeError):
        logger.warning("Undecodable dependencies for skill %r", record.get("name"))
    return record


def _serialize_record(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": record["name"],
        "experience": record["experience"],
        "last_modified": record["last_modified"],
        "dependencies": json.dumps(record.get("dependencies") or []),
    }
