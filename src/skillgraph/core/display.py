"""Status line formatting.

Recognized placeholders:

    %t  total raw experience across all skills
    %p  percentage through the current level (of the total)
    %f  percentage through the level of the weakest focus skill
    %l  current level name
    %n  next level name
    %%  a literal percent sign
"""

from __future__ import annotations

import re
from collections.abc import Collection

from skillgraph.core.aggregator import grand_total, total_experience
from skillgraph.core.graph import SkillGraph
from skillgraph.core.levels import DEFAULT_LEVELS, LevelTable

DEFAULT_FORMAT = "%l %p%% (%t exp, focus %f%%)"

_PLACEHOLDER = re.compile(r"%(.)", re.DOTALL)


def focus_experience(graph: SkillGraph, focus: Collection[str]) -> int | None:
    """Minimum total experience among the focus skills, or None without focus."""
    if not focus:
        return None
    return min(total_experience(graph, name) for name in focus)


def render_display(
    graph: SkillGraph,
    template: str = DEFAULT_FORMAT,
    focus: Collection[str] = (),
    levels: LevelTable = DEFAULT_LEVELS,
) -> str:
    total = grand_total(graph)
    current, upcoming = levels.level_for(total)
    percent = levels.percentage_within_level(total)
    weakest = focus_experience(graph, focus)
    focus_percent = percent if weakest is None else levels.percentage_within_level(weakest)

    values = {
        "t": str(total),
        "p": str(int(percent)),
        "f": str(int(focus_percent)),
        "l": current.name,
        "n": upcoming.name,
        "%": "%",
    }
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)
