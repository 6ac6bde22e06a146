"""Tests for status line formatting."""

from __future__ import annotations

from conftest import make_graph

from skillgraph.core.display import focus_experience, render_display
from skillgraph.core.graph import SkillGraph
from skillgraph.core.levels import LevelTable

LEVELS = LevelTable([(0, "Dabbling"), (500, "Novice"), (1500, "Apprentice")])


def test_all_placeholders():
    graph = make_graph(("a", 100), ("b", 150))
    line = render_display(graph, "%t|%p|%l|%n|%%", levels=LEVELS)
    assert line == "250|50|Dabbling|Novice|%"


def test_focus_uses_weakest_focus_skill():
    graph = make_graph(("a", 1000), ("b", 750))
    line = render_display(graph, "%f", focus=["a", "b"], levels=LEVELS)
    # b has 750 total: 25% of the way from 500 to 1500
    assert line == "25"


def test_focus_missing_skill_counts_as_zero():
    graph = make_graph(("a", 1000))
    assert focus_experience(graph, ["a", "never-done"]) == 0


def test_focus_uses_total_experience():
    graph = make_graph(("a", 0, ["b"]), ("b", 250))
    assert focus_experience(graph, ["a"]) == 250


def test_empty_focus_falls_back_to_overall_percentage():
    graph = make_graph(("a", 250))
    assert render_display(graph, "%p/%f", levels=LEVELS) == "50/50"


def test_percentages_are_truncated():
    graph = make_graph(("a", 499))
    assert render_display(graph, "%p", levels=LEVELS) == "99"


def test_top_level_shows_full_bar():
    graph = make_graph(("a", 5000))
    assert render_display(graph, "%l %p %n", levels=LEVELS) == "Apprentice 100 Apprentice"


def test_unknown_placeholders_left_alone():
    assert render_display(SkillGraph(), "%x %l", levels=LEVELS) == "%x Dabbling"
