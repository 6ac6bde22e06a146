"""Skill session engine.

Owns one SkillGraph for the session together with its store, event bus and
configuration. The graph is loaded once, mutated only through ``award``, and
persisted after each award (touched skills) or explicitly via ``save``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from skillgraph.config import Config
from skillgraph.core import award as award_ops
from skillgraph.core.aggregator import total_experience
from skillgraph.core.decay import rustiness
from skillgraph.core.display import render_display
from skillgraph.core.exporter import export_snapshot
from skillgraph.core.graph import LoadReport, SkillGraph
from skillgraph.events.bus import EventBus
from skillgraph.events.types import EventType
from skillgraph.models.award import AwardResult
from skillgraph.models.snapshot import GraphDescription
from skillgraph.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class SkillEngine:
    """Engine for awarding, inspecting and exporting skills."""

    def __init__(
        self,
        store: StorageBackend,
        event_bus: EventBus,
        config: Config | None = None,
    ) -> None:
        """Initialize SkillEngine.

        Args:
            store: Storage backend holding skill records
            event_bus: Event bus for publishing events
            config: Session configuration (defaults when omitted)
        """
        self.store = store
        self.event_bus = event_bus
        self.config = config or Config()
        self.levels = self.config.level_table
        self.graph = SkillGraph()

    async def load(self) -> LoadReport:
        """Replace the in-memory graph with the stored records."""
        records = await self.store.load_records()
        graph = SkillGraph()
        report = graph.load(records)
        self.graph = graph

        await self.event_bus.emit(EventType.GRAPH_LOADED, report.to_response())
        logger.info(
            "Loaded %d skill(s), rejected %d record(s)", report.loaded, len(report.rejected)
        )
        return report

    async def save(self) -> int:
        """Persist the whole graph as a flat list."""
        count = await self.store.save_records(self.graph.save())
        await self.event_bus.emit(EventType.GRAPH_SAVED, {"skills": count})
        return count

    async def award(
        self,
        skill_names: Iterable[str],
        base_exp: int | None = None,
        *,
        deadline_offset_days: int = 0,
        now: float | None = None,
        dependencies: Mapping[str, Sequence[Any]] | None = None,
    ) -> list[AwardResult]:
        """Award experience and persist the touched skills.

        Args:
            skill_names: Skills to award (created when unknown)
            base_exp: Base award; the configured default when omitted
            deadline_offset_days: Days early (positive) or overdue (negative)
            now: Award time in epoch seconds
            dependencies: Dependency lists for newly created skills

        Returns:
            Per-skill results, failures included

        Raises:
            ValueError: If base_exp is negative
        """
        if base_exp is None:
            base_exp = self.config.default_award

        results = award_ops.award(
            self.graph,
            skill_names,
            base_exp,
            deadline_offset_days,
            now,
            levels=self.levels,
            dependencies=dependencies,
        )

        touched = [
            self.graph.get(result.skill_name).to_storage() for result in results if result.ok
        ]
        if touched:
            await self.store.upsert_records(touched)

        for result in results:
            await self._emit_result(result)
        return results

    async def _emit_result(self, result: AwardResult) -> None:
        if not result.ok:
            await self.event_bus.emit(
                EventType.AWARD_FAILED, {"skill": result.skill_name, "error": result.error}
            )
            return
        if result.created:
            await self.event_bus.emit(EventType.SKILL_CREATED, {"skill": result.skill_name})
        await self.event_bus.emit(
            EventType.SKILL_AWARDED,
            {"skill": result.skill_name, "exp_awarded": result.exp_awarded},
        )
        if result.new_level:
            logger.info("%s reached level %s", result.skill_name, result.new_level)
            await self.event_bus.emit(
                EventType.SKILL_LEVEL_UP,
                {"skill": result.skill_name, "level": result.new_level},
            )

    def random_award_amount(self) -> int:
        return award_ops.some_exp(self.config.default_award, self.config.random_delta)

    def refresh(self) -> str:
        """Current status line from the configured template and focus skills."""
        return render_display(
            self.graph,
            self.config.display_format,
            self.config.focus_skills,
            self.levels,
        )

    def snapshot(self, now: float | None = None) -> GraphDescription:
        return export_snapshot(
            self.graph,
            time.time() if now is None else now,
            self.config.rusty_after,
            self.config.very_rusty_after,
            frozenset(self.config.excluded_levels),
            self.levels,
        )

    def skill_info(self, name: str, now: float | None = None) -> dict[str, Any] | None:
        """Level, progress and rustiness of one skill."""
        skill = self.graph.get(name)
        if skill is None:
            return None
        now = time.time() if now is None else now
        total = total_experience(self.graph, name)
        current, upcoming = self.levels.level_for(total)
        return {
            "_v": "1.0",
            "name": skill.name,
            "experience": skill.experience,
            "total_experience": total,
            "level": current.name,
            "next_level": upcoming.name,
            "percentage": round(self.levels.percentage_within_level(total), 1),
            "rustiness": rustiness(
                skill.last_modified, now, self.config.rusty_after, self.config.very_rusty_after
            ).value,
            "last_modified": skill.last_modified,
            "dependencies": [dep.to_storage() for dep in skill.dependencies],
        }
