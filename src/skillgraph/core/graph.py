"""In-memory skill graph: the single source of truth for a session."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from skillgraph.models.skill import Skill

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    """Counts from a load pass; rejected entries carry their reason."""

    loaded: int = 0
    rejected: list[tuple[int, str]] = field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        return {
            "loaded": self.loaded,
            "rejected": len(self.rejected),
            "errors": [f"record {index}: {reason}" for index, reason in self.rejected],
        }


class SkillGraph:
    """Insertion-ordered mapping of skill name to Skill.

    Skills are added lazily (on first award) and never removed. Dependency
    references are not required to resolve; dangling names are tolerated.
    """

    def __init__(self, skills: Iterable[Skill] = ()) -> None:
        self._skills: dict[str, Skill] = {}
        for skill in skills:
            self.add(skill)

    def __contains__(self, name: object) -> bool:
        return name in self._skills

    def __len__(self) -> int:
        return len(self._skills)

    def __iter__(self) -> Iterator[Skill]:
        return iter(self._skills.values())

    def get(self, name: str) -> Skill | None:
        return self._skills.get(name)

    def names(self) -> list[str]:
        return list(self._skills)

    def add(self, skill: Skill) -> Skill:
        if skill.name in self._skills:
            raise ValueError(f"Skill already exists: {skill.name}")
        self._skills[skill.name] = skill
        return skill

    def load(self, records: Iterable[Any]) -> LoadReport:
        """Populate from a flat list of skill records.

        Malformed or duplicate records are skipped and reported; they never
        abort the rest of the load.
        """
        report = LoadReport()
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                reason = f"expected a mapping, got {type(record).__name__}"
            else:
                try:
                    skill = Skill.model_validate(record)
                except ValidationError as e:
                    reason = f"invalid record: {e.error_count()} validation error(s)"
                    logger.debug("Record %d failed validation: %s", index, e)
                else:
                    if skill.name in self._skills:
                        reason = f"duplicate skill name {skill.name!r}"
                    else:
                        self._skills[skill.name] = skill
                        report.loaded += 1
                        continue
            logger.warning("Skipping skill record %d: %s", index, reason)
            report.rejected.append((index, reason))
        return report

    def save(self) -> list[dict[str, Any]]:
        """Flat list of records in insertion order, loadable by ``load``."""
        return [skill.to_storage() for skill in self._skills.values()]
