"""Graph exporter: renderable snapshot of the skill graph.

The snapshot is abstract (nodes and weighted edges with level, size and
rustiness). ``to_dot`` renders it as Graphviz DOT text through networkx and
pydot, and ``to_node_link`` as node-link JSON, for an external
layout tool; this module never runs that tool itself.
"""

from __future__ import annotations

import math
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from skillgraph.core.aggregator import total_experience
from skillgraph.core.decay import RUSTY_AFTER, VERY_RUSTY_AFTER, rustiness
from skillgraph.core.graph import SkillGraph
from skillgraph.core.levels import DEFAULT_LEVELS, LevelTable
from skillgraph.models.snapshot import EdgeDescriptor, GraphDescription, NodeDescriptor


@dataclass
class DotStyle:
    """Visual styling for DOT output, keyed by rustiness."""

    node_shape: str = "box"
    fill_colors: dict[str, str] = field(
        default_factory=lambda: {
            "fresh": "palegreen",
            "rusty": "orange",
            "very_rusty": "firebrick",
        }
    )
    font_colors: dict[str, str] = field(
        default_factory=lambda: {
            "fresh": "black",
            "rusty": "black",
            "very_rusty": "white",
        }
    )
    min_font_size: float = 10.0
    max_font_size: float = 28.0
    max_pen_width: float = 4.0


def export_snapshot(
    graph: SkillGraph,
    now: float,
    rusty_after: float = RUSTY_AFTER,
    very_rusty_after: float = VERY_RUSTY_AFTER,
    excluded_levels: Collection[str] = frozenset(),
    levels: LevelTable = DEFAULT_LEVELS,
) -> GraphDescription:
    """Describe every skill whose current level is not excluded.

    Size is ``sqrt(total / max_total)`` with ``max_total`` taken over the
    whole graph, or 0 for every node when no skill has any experience.
    Edges pointing at excluded or unknown skills are dropped.
    """
    totals = {skill.name: total_experience(graph, skill.name) for skill in graph}
    max_total = max(totals.values(), default=0)

    included: dict[str, NodeDescriptor] = {}
    for skill in graph:
        total = totals[skill.name]
        current, _ = levels.level_for(total)
        if current.name in excluded_levels:
            continue
        size = math.sqrt(total / max_total) if max_total > 0 else 0.0
        included[skill.name] = NodeDescriptor(
            name=skill.name,
            label=f"{skill.name.capitalize()}\n{current.name} ({total})",
            level=current.name,
            total_experience=total,
            size=min(size, 1.0),
            rustiness=rustiness(skill.last_modified, now, rusty_after, very_rusty_after).value,
        )

    edges = [
        EdgeDescriptor(source=skill.name, target=dep.name, weight=dep.weight)
        for skill in graph
        if skill.name in included
        for dep in skill.dependencies
        if dep.name in included
    ]
    return GraphDescription(nodes=list(included.values()), edges=edges)


def to_networkx(description: GraphDescription) -> nx.DiGraph:
    """Snapshot as a directed graph; node and edge data carry every field."""
    graph = nx.DiGraph(name="skills")
    for node in description.nodes:
        graph.add_node(node.name, **node.model_dump())
    for edge in description.edges:
        graph.add_edge(edge.source, edge.target, weight=edge.weight, label=edge.label)
    return graph


def to_node_link(description: GraphDescription) -> dict[str, Any]:
    """JSON-ready node-link payload of a snapshot."""
    data = nx.node_link_data(to_networkx(description), edges="edges")
    return {"_v": "1.0", **data}


def _dot_id(value: str) -> str:
    # pydot leaves pre-quoted strings alone; colons would otherwise read as ports
    if ":" in value:
        return '"{}"'.format(value.replace('"', '\\"'))
    return value


def to_dot(description: GraphDescription, style: DotStyle | None = None) -> str:
    """Render a snapshot as a Graphviz ``digraph`` via pydot."""
    style = style or DotStyle()
    graph = nx.DiGraph(name="skills")
    graph.graph["node"] = {"shape": style.node_shape, "style": "filled"}
    font_span = style.max_font_size - style.min_font_size
    for node in description.nodes:
        graph.add_node(
            _dot_id(node.name),
            label=_dot_id(node.label.replace("\n", "\\n")),
            fillcolor=style.fill_colors.get(node.rustiness, "white"),
            fontcolor=style.font_colors.get(node.rustiness, "black"),
            fontsize=f"{style.min_font_size + font_span * node.size:.1f}",
            penwidth=f"{1.0 + (style.max_pen_width - 1.0) * node.size:.1f}",
        )
    for edge in description.edges:
        graph.add_edge(_dot_id(edge.source), _dot_id(edge.target), label=edge.label)
    return nx.nx_pydot.to_pydot(graph).to_string()
