"""Update engine: applies experience awards to skills in a graph."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from skillgraph.core.aggregator import total_experience
from skillgraph.core.graph import SkillGraph
from skillgraph.core.levels import DEFAULT_LEVELS, LevelTable
from skillgraph.models.award import AwardResult
from skillgraph.models.skill import Skill

logger = logging.getLogger(__name__)


def deadline_adjustment(base_exp: int, diff: int) -> int:
    """Bonus or penalty for finishing ``diff`` days relative to a deadline.

    Early (``diff >= 0``) work earns ``diff`` as a bonus. Overdue work loses
    ``-diff`` points, capped so at most half of ``base_exp`` is removed.
    """
    if diff >= 0:
        return diff
    return max(diff, -(base_exp // 2))


def some_exp(low: int, delta: int, rng: random.Random | None = None) -> int:
    """Randomized award amount in ``[low, low + delta]``."""
    rng = rng or random
    return low + rng.randint(0, delta)


def _dedupe(names: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return list(seen)


def award(
    graph: SkillGraph,
    skill_names: Iterable[str],
    base_exp: int,
    deadline_offset_days: int = 0,
    now: float | None = None,
    *,
    levels: LevelTable = DEFAULT_LEVELS,
    dependencies: Mapping[str, Sequence[Any]] | None = None,
) -> list[AwardResult]:
    """Award experience to each named skill, creating unknown skills.

    Args:
        graph: Skill graph to mutate
        skill_names: Skills to award; duplicates are applied once
        base_exp: Base award before the deadline adjustment
        deadline_offset_days: Days early (positive) or overdue (negative)
        now: Award time in epoch seconds (defaults to the current time)
        levels: Level table used for level-up detection
        dependencies: Dependency lists for skills created by this award

    Returns:
        One AwardResult per distinct skill name, in input order. Failures
        are reported per skill and never roll back other skills.

    Raises:
        ValueError: If base_exp is negative
    """
    if base_exp < 0:
        raise ValueError(f"base_exp must be non-negative, got {base_exp}")

    now = time.time() if now is None else now
    amount = base_exp + deadline_adjustment(base_exp, deadline_offset_days)
    dependencies = dependencies or {}

    results: list[AwardResult] = []
    names = (n.strip() if isinstance(n, str) else n for n in skill_names)
    for name in _dedupe(names):
        try:
            results.append(_award_one(graph, name, amount, now, levels, dependencies))
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning("Award to %r failed: %s", name, e)
            results.append(AwardResult(skill_name=str(name), error=str(e)))
    return results


def _award_one(
    graph: SkillGraph,
    name: str,
    amount: int,
    now: float,
    levels: LevelTable,
    dependencies: Mapping[str, Sequence[Any]],
) -> AwardResult:
    if not isinstance(name, str) or not name:
        raise ValueError("Skill name cannot be empty")

    skill = graph.get(name)
    created = skill is None
    if created:
        before = 0
        skill = Skill(
            name=name,
            experience=amount,
            last_modified=now,
            dependencies=dependencies.get(name),
        )
        graph.add(skill)
    else:
        before = total_experience(graph, name)
        skill.experience += amount
        skill.last_modified = now

    after = total_experience(graph, name)
    old_level, _ = levels.level_for(before)
    new_level, _ = levels.level_for(after)
    level_up = new_level.name if new_level.threshold > old_level.threshold else None

    logger.info(
        "Awarded %d exp to %s (total %d -> %d)%s",
        amount,
        name,
        before,
        after,
        f", reached {level_up}" if level_up else "",
    )
    return AwardResult(
        skill_name=name,
        exp_awarded=amount,
        new_level=level_up,
        created=created,
    )
