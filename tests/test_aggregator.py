"""Tests for experience aggregation (sibling-exclusive propagation)."""

from __future__ import annotations

from conftest import make_graph

from skillgraph.core.aggregator import grand_total, total_experience


def test_no_dependencies_total_is_raw_experience():
    graph = make_graph(("a", 7), ("b", 0), ("c", 1234))
    for skill in graph:
        assert total_experience(graph, skill.name) == skill.experience


def test_unknown_skill_totals_zero():
    graph = make_graph(("a", 7))
    assert total_experience(graph, "nope") == 0


def test_weighted_dependency():
    graph = make_graph(("python", 10, [["programming", 0.5]]), ("programming", 20))
    assert total_experience(graph, "python") == 20


def test_bare_name_dependency_has_unit_weight():
    graph = make_graph(("python", 10, ["programming"]), ("programming", 20))
    assert total_experience(graph, "python") == 30


def test_dangling_dependency_contributes_nothing():
    graph = make_graph(("a", 5, ["ghost", ["phantom", 3.0]]))
    assert total_experience(graph, "a") == 5


def test_two_node_cycle_terminates():
    graph = make_graph(("a", 1, ["b"]), ("b", 2, ["a"]))
    assert total_experience(graph, "a") == 3
    assert total_experience(graph, "b") == 3


def test_self_loop_is_ignored():
    graph = make_graph(("a", 4, ["a"]))
    assert total_experience(graph, "a") == 4


def test_longer_cycle_terminates():
    graph = make_graph(("a", 1, ["b"]), ("b", 10, ["c"]), ("c", 100, ["a"]))
    assert total_experience(graph, "a") == 111
    assert total_experience(graph, "c") == 111


def test_diamond_counts_shared_ancestor_once_per_branch():
    # A -> {B, C}, B -> D, C -> D: D reaches A through both branches.
    graph = make_graph(
        ("A", 0, ["B", "C"]),
        ("B", 0, ["D"]),
        ("C", 0, ["D"]),
        ("D", 100),
    )
    assert total_experience(graph, "B") == 100
    assert total_experience(graph, "A") == 200


def test_sibling_edge_is_excluded_below_parent():
    # B -> C is ignored under A because C is already one of A's dependencies.
    graph = make_graph(("A", 1, ["B", "C"]), ("B", 10, ["C"]), ("C", 100))
    assert total_experience(graph, "B") == 110
    assert total_experience(graph, "A") == 111


def test_explicit_visited_set_excludes_names():
    graph = make_graph(("a", 1, ["b", "c"]), ("b", 10), ("c", 100))
    assert total_experience(graph, "a", visited={"b"}) == 101


def test_rounding_uses_round_half_even():
    graph = make_graph(("a", 0, [["b", 0.5]]), ("b", 5), ("c", 0, [["d", 0.5]]), ("d", 7))
    assert total_experience(graph, "a") == 2
    assert total_experience(graph, "c") == 4


def test_weights_compound_along_a_chain():
    graph = make_graph(("a", 0, [["b", 2.0]]), ("b", 1, [["c", 0.5]]), ("c", 10))
    # b = 1 + round(0.5 * 10) = 6, a = round(2 * 6) = 12
    assert total_experience(graph, "a") == 12


def test_deep_chain_does_not_recurse():
    depth = 2000
    rows = [(f"s{i}", 1, [f"s{i + 1}"]) for i in range(depth - 1)]
    rows.append((f"s{depth - 1}", 1))
    graph = make_graph(*rows)
    assert total_experience(graph, "s0") == depth


def test_totals_are_recomputed_after_changes():
    graph = make_graph(("a", 1, ["b"]), ("b", 2))
    assert total_experience(graph, "a") == 3
    graph.get("b").experience = 40
    assert total_experience(graph, "a") == 41


def test_grand_total_sums_raw_experience():
    graph = make_graph(("a", 1, ["b"]), ("b", 2))
    assert grand_total(graph) == 3
