"""Shared test fixtures for skillgraph."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillgraph.config import Config
from skillgraph.core.graph import SkillGraph
from skillgraph.models.skill import Skill
from skillgraph.storage.sqlite_store import SQLiteStore

NOW = 1_700_000_000.0


@pytest.fixture
def tmp_db(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
async def store(tmp_db: Path) -> SQLiteStore:
    s = SQLiteStore(tmp_db)
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(home_path=tmp_path)


def make_graph(*rows: tuple) -> SkillGraph:
    """Build a graph from ``(name, experience, dependencies)`` tuples."""
    graph = SkillGraph()
    for name, experience, *rest in rows:
        deps = rest[0] if rest else []
        graph.add(Skill(name=name, experience=experience, last_modified=NOW, dependencies=deps))
    return graph
