"""Tests for the recursive tree layout."""

from __future__ import annotations

import copy

from stepviz.engine.config import TreeLayoutConfig
from stepviz.engine.layout.tree_layout import compute_tree_layout, resolve_root
from tests.conftest import BST_TREE


def test_bst_positions():
    result = compute_tree_layout(BST_TREE["nodes"], BST_TREE["edges"], "n1")
    positions = {n["id"]: (n["x"], n["y"]) for n in result.nodes}
    assert len(set(positions.values())) == 5
    assert positions["n1"] == (400, 50)
    assert positions["n2"][1] == positions["n3"][1] == 130
    assert positions["n4"][1] == 210
    # Parents are centered over their children
    assert positions["n2"][0] == (positions["n4"][0] + positions["n5"][0]) / 2
    assert positions["n2"][0] < positions["n1"][0] < positions["n3"][0]
    assert result.content_width >= 800
    assert result.content_height == 400


def test_input_nodes_not_modified():
    nodes = copy.deepcopy(BST_TREE["nodes"])
    compute_tree_layout(nodes, BST_TREE["edges"])
    assert nodes == BST_TREE["nodes"]


def test_unreachable_nodes_go_to_side_column():
    nodes = [{"id": "a", "value": 1}, {"id": "b", "value": 2}, {"id": "c", "value": 3}, {"id": "d", "value": 4}]
    result = compute_tree_layout(nodes, [{"from": "a", "to": "b"}])
    assert result.position_of("a") == (400, 50)
    assert result.position_of("b") == (400, 130)
    assert result.position_of("c") == (900, 50)
    assert result.position_of("d") == (1020, 130)
    assert result.content_width == 1170


def test_explicit_coordinates_are_trusted():
    nodes = [{"id": "a", "x": 100, "y": 40}, {"id": "b", "x": 950, "y": 300}]
    result = compute_tree_layout(nodes, [{"from": "a", "to": "b"}])
    assert result.position_of("b") == (950, 300)
    assert result.content_width == 1050
    assert result.content_height == 400


def test_cycle_and_duplicates_are_safe():
    nodes = [{"id": "a"}, {"id": "b"}, {"id": "b"}, {"value": "no id"}]
    edges = [{"from": "a", "to": "b"}, {"from": "b", "to": "a"}, {"from": "b", "to": "ghost"}]
    result = compute_tree_layout(nodes, edges, "a")
    assert [n["id"] for n in result.nodes] == ["a", "b"]
    assert result.position_of("b")[1] == 130


def test_empty_tree():
    result = compute_tree_layout([], [])
    assert result.nodes == []
    assert (result.content_width, result.content_height) == (800, 400)


def test_resolve_root():
    edges = [{"from": "a", "to": "b"}]
    assert resolve_root(["a", "b"], edges, "b") == "b"
    assert resolve_root(["b", "a"], edges) == "a"
    assert resolve_root(["a", "b", "c"], edges, "zzz") == "a"
    assert resolve_root([], []) is None


def test_wide_tree_grows_past_minimum_width():
    nodes = [{"id": 0}] + [{"id": i} for i in range(1, 21)]
    edges = [{"from": 0, "to": i} for i in range(1, 21)]
    result = compute_tree_layout(nodes, edges, config=TreeLayoutConfig(min_subtree_width=60))
    xs = sorted(n["x"] for n in result.nodes if n["id"] != 0)
    assert all(b - a == 60 for a, b in zip(xs, xs[1:]))
    assert result.content_width == 20 * 60 + 200 + 150


def test_non_finite_coordinates_fall_back_to_computed_layout():
    nodes = [{"id": "a", "x": float("inf"), "y": 0}, {"id": "b", "x": 10, "y": 80}]
    result = compute_tree_layout(nodes, [{"from": "a", "to": "b"}])
    assert result.position_of("a") == (400, 50)
    assert result.position_of("b") == (400, 130)
