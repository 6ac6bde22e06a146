"""Tests for graph snapshot export and DOT rendering."""

from __future__ import annotations

import json
import math

import networkx as nx
import pydot
from conftest import NOW, make_graph

from skillgraph.core.decay import DAY
from skillgraph.core.exporter import (
    DotStyle,
    export_snapshot,
    to_dot,
    to_networkx,
    to_node_link,
)
from skillgraph.core.graph import SkillGraph
from skillgraph.core.levels import LevelTable
from skillgraph.models.skill import Skill

LEVELS = LevelTable([(0, "Dabbling"), (50, "Novice")])


def test_all_zero_graph_has_zero_sizes():
    graph = make_graph(("a", 0), ("b", 0, ["a"]))
    snapshot = export_snapshot(graph, NOW)
    assert [node.size for node in snapshot.nodes] == [0.0, 0.0]


def test_empty_graph_exports_empty_description():
    snapshot = export_snapshot(SkillGraph(), NOW)
    assert snapshot.nodes == []
    assert snapshot.edges == []


def test_size_is_sqrt_of_share_of_max_total():
    graph = make_graph(("big", 100), ("small", 25))
    snapshot = export_snapshot(graph, NOW)
    assert snapshot.node("big").size == 1.0
    assert math.isclose(snapshot.node("small").size, 0.5)


def test_nodes_carry_level_total_and_rustiness():
    graph = SkillGraph()
    graph.add(Skill(name="old", experience=60, last_modified=NOW - 40 * DAY))
    graph.add(Skill(name="new", experience=10, last_modified=NOW))
    snapshot = export_snapshot(graph, NOW, 7 * DAY, 30 * DAY, levels=LEVELS)

    old = snapshot.node("old")
    assert old.level == "Novice"
    assert old.total_experience == 60
    assert old.rustiness == "very_rusty"
    assert old.label.startswith("Old")
    assert snapshot.node("new").rustiness == "fresh"


def test_edges_keep_weights():
    graph = make_graph(("python", 10, [["programming", 0.5]]), ("programming", 20))
    snapshot = export_snapshot(graph, NOW)
    [edge] = snapshot.edges
    assert (edge.source, edge.target, edge.weight) == ("python", "programming", 0.5)
    assert edge.label == "0.5"


def test_excluded_levels_drop_nodes_and_their_edges():
    graph = make_graph(("expert", 100, ["beginner"]), ("beginner", 1), ("mid", 60, ["expert"]))
    snapshot = export_snapshot(graph, NOW, excluded_levels={"Dabbling"}, levels=LEVELS)
    assert [node.name for node in snapshot.nodes] == ["expert", "mid"]
    assert [(e.source, e.target) for e in snapshot.edges] == [("mid", "expert")]


def test_dangling_edges_are_omitted():
    graph = make_graph(("a", 1, ["ghost"]))
    assert export_snapshot(graph, NOW).edges == []


def test_export_does_not_mutate_graph():
    graph = make_graph(("a", 5, ["b"]), ("b", 3))
    before = graph.save()
    export_snapshot(graph, NOW + 100 * DAY)
    assert graph.save() == before


def _parse_dot(text: str) -> nx.DiGraph:
    [parsed] = pydot.graph_from_dot_data(text)
    return nx.nx_pydot.from_pydot(parsed)


def _unquote(value: str) -> str:
    return value.strip('"')


def test_to_dot_renders_nodes_and_edges():
    graph = make_graph(("python", 10, [["programming", 0.5]]), ("programming", 20))
    dot = to_dot(export_snapshot(graph, NOW), DotStyle(node_shape="ellipse"))
    assert dot.startswith("digraph")
    assert "shape=ellipse" in dot

    parsed = _parse_dot(dot)
    assert set(parsed.nodes) == {"python", "programming"}
    assert _unquote(parsed.edges["python", "programming"]["label"]) == "0.5"
    assert _unquote(parsed.nodes["python"]["fillcolor"]) == "palegreen"
    assert _unquote(parsed.nodes["python"]["label"]).startswith("Python\\n")


def test_to_dot_quotes_names_with_colons():
    graph = make_graph(("c:plus", 1, ["c"]), ("c", 1))
    dot = to_dot(export_snapshot(graph, NOW))
    assert '"c:plus" -> c' in dot


def test_to_networkx_carries_node_and_edge_data():
    graph = make_graph(("python", 10, [["programming", 0.5]]), ("programming", 20))
    g = to_networkx(export_snapshot(graph, NOW))
    assert g.nodes["python"]["total_experience"] == 20
    assert g.nodes["programming"]["rustiness"] == "fresh"
    assert g.edges["python", "programming"]["weight"] == 0.5


def test_to_node_link_is_json_ready():
    graph = make_graph(("python", 10, [["programming", 0.5]]), ("programming", 20))
    data = json.loads(json.dumps(to_node_link(export_snapshot(graph, NOW))))
    assert data["_v"] == "1.0"
    assert data["directed"] is True
    assert [node["id"] for node in data["nodes"]] == ["python", "programming"]
    [edge] = data["edges"]
    assert (edge["source"], edge["target"], edge["label"]) == ("python", "programming", "0.5")
