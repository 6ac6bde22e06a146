"""FastMCP server exposing award, status, skill and export tools."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Any, Literal

from fastmcp import FastMCP
from pydantic import Field

from skillgraph.config import Config
from skillgraph.core.engine import SkillEngine
from skillgraph.core.exporter import to_dot, to_node_link
from skillgraph.events.bus import EventBus
from skillgraph.models.skill import Dependency
from skillgraph.storage.sqlite_store import SQLiteStore

logger = logging.getLogger(__name__)


def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, default=str)


def _error(message: str) -> str:
    return _json({"_v": "1.0", "error": message})


def create_server(db_path: str, config: Config | None = None) -> FastMCP:
    """Create a FastMCP server with 4 tools over one skill session."""
    mcp = FastMCP("skillgraph")
    config = config or Config()

    state: dict[str, Any] = {}
    # One in-flight operation at a time
    _lock = asyncio.Lock()

    async def _engine() -> SkillEngine:
        if "init_failed" in state:
            raise RuntimeError(f"skillgraph init previously failed for {db_path}")
        if "engine" not in state:
            try:
                store = SQLiteStore(Path(db_path), wal_mode=config.wal_mode)
                await store.initialize()
            except Exception as e:
                state["init_failed"] = True
                logger.error("Failed to initialize database: %s", e)
                raise RuntimeError(f"skillgraph init failed: {db_path}") from e
            engine = SkillEngine(store, EventBus(), config)
            await engine.load()
            state["engine"] = engine
        return state["engine"]

    @mcp.tool()
    async def sg_award(
        skills: Annotated[list[str], Field(description="Skill names to award")],
        exp: Annotated[
            int | None,
            Field(description="Base experience (default from config)", ge=0),
        ] = None,
        offset_days: Annotated[
            int,
            Field(description="Days early (+) or overdue (-)"),
        ] = 0,
        randomize: Annotated[
            bool,
            Field(description="Use a random award amount"),
        ] = False,
        depends_on: Annotated[
            list[str] | None,
            Field(description="Dependencies NAME[:WEIGHT] for newly created skills"),
        ] = None,
    ) -> str:
        """Award experience to skills; creates unknown skills."""
        names = [s.strip() for s in skills if s and s.strip()]
        if not names:
            return _error("at least one skill name is required")
        try:
            parsed = [Dependency.from_text(d) for d in depends_on or []]
        except ValueError as e:
            return _error(str(e))

        async with _lock:
            engine = await _engine()
            base = engine.random_award_amount() if randomize else exp
            deps = {name: parsed for name in names} if parsed else None
            results = await engine.award(
                names, base, deadline_offset_days=offset_days, dependencies=deps
            )
            return _json(
                {
                    "_v": "1.0",
                    "results": [r.to_response() for r in results],
                    "status": engine.refresh(),
                }
            )

    @mcp.tool()
    async def sg_status() -> str:
        """Status line and store statistics."""
        async with _lock:
            engine = await _engine()
            stats = await engine.store.get_stats()
            return _json({"_v": "1.0", "status": engine.refresh(), **stats})

    @mcp.tool()
    async def sg_skill(
        name: Annotated[str, Field(description="Skill name")],
    ) -> str:
        """Level, progress and rustiness of one skill."""
        if not name or not name.strip():
            return _error("name is required")
        async with _lock:
            engine = await _engine()
            info = engine.skill_info(name.strip())
        if info is None:
            return _error(f"Skill not found: {name.strip()}")
        return _json(info)

    @mcp.tool()
    async def sg_export(
        format: Annotated[
            Literal["json", "dot"],
            Field(description="Output format"),
        ] = "json",
    ) -> str:
        """Export the skill graph for rendering."""
        async with _lock:
            engine = await _engine()
            snapshot = engine.snapshot()
        if format == "dot":
            return _json({"_v": "1.0", "dot": to_dot(snapshot, config.dot_style)})
        return _json(to_node_link(snapshot))

    return mcp
