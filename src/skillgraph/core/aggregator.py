"""Experience aggregation over the skill dependency graph.

A skill's total experience is its own raw experience plus the weighted,
rounded totals of its dependencies. The exclusion set handed to each
dependency holds the path so far *and every sibling dependency name* of the
current skill ("sibling-exclusive propagation"):

    total(n, seen) = exp(n) + sum(round(w * total(d, seen | {n} | deps(n))))
                     for (d, w) in deps(n) if d not in seen

This is not a DAG sum. In a diamond A -> {B, C}, B -> D, C -> D the shared
ancestor D is counted once through B and once through C, while an edge
B -> C is ignored below A because C is already a sibling there. The result
depends only on the graph, so totals are always recomputed, never cached.
"""

from __future__ import annotations

from dataclasses import dataclass

from skillgraph.core.graph import SkillGraph
from skillgraph.models.skill import Dependency, Skill


@dataclass
class _Frame:
    skill: Skill
    weight: float
    child_seen: frozenset[str]
    pending: list[Dependency]
    total: int = 0
    cursor: int = 0


def _frame(skill: Skill, seen: frozenset[str], weight: float) -> _Frame:
    child_seen = seen | {skill.name} | set(skill.dependency_names())
    pending = [dep for dep in skill.dependencies if dep.name not in seen]
    return _Frame(
        skill=skill,
        weight=weight,
        child_seen=child_seen,
        pending=pending,
        total=skill.experience,
    )


def total_experience(
    graph: SkillGraph, name: str, visited: frozenset[str] | set[str] | None = None
) -> int:
    """Total experience of ``name``; unknown names resolve to 0.

    Walks the graph with an explicit stack so deep chains never hit the
    interpreter recursion limit. Every frame's exclusion set contains its
    own name, so a path can never revisit a skill and cycles terminate.
    """
    root = graph.get(name)
    if root is None:
        return 0

    seen = frozenset(visited or ()) | {name}
    stack = [_frame(root, seen, 1.0)]
    while True:
        top = stack[-1]
        if top.cursor < len(top.pending):
            dep = top.pending[top.cursor]
            top.cursor += 1
            child = graph.get(dep.name)
            if child is not None:
                stack.append(_frame(child, top.child_seen, dep.weight))
            continue

        stack.pop()
        if not stack:
            return top.total
        stack[-1].total += round(top.weight * top.total)


def grand_total(graph: SkillGraph) -> int:
    """Sum of raw experience over every skill in the graph."""
    return sum(skill.experience for skill in graph)
