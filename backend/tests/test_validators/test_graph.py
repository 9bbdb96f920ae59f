"""Tests for the graph validator and its traversal helpers."""

from __future__ import annotations

from stepviz.engine.formats import expected_format
from stepviz.engine.types import CanonicalType
from stepviz.engine.validators.graph import GraphValidator, adjacency, has_cycle, is_connected
from tests.conftest import CYCLIC_DIGRAPH


def _validate(data):
    return GraphValidator().validate(data)


def _vertices(*ids):
    return [{"id": v, "label": v} for v in ids]


def test_directed_cycle_detected():
    result = _validate(CYCLIC_DIGRAPH)
    assert result.is_valid
    assert "Cycles detected in directed graph" in result.edge_cases


def test_cycle_helpers():
    ids = ["A", "B", "C"]
    adj = adjacency(ids, CYCLIC_DIGRAPH["edges"], directed=True)
    assert has_cycle(ids, adj)
    dag = adjacency(ids, [{"from": "A", "to": "B"}, {"from": "B", "to": "C"}], directed=True)
    assert not has_cycle(ids, dag)
    assert is_connected(ids, adjacency(ids, [{"from": "A", "to": "B"}, {"from": "B", "to": "C"}], False))


def test_undirected_graph_has_no_cycle_edge_case():
    data = {**CYCLIC_DIGRAPH, "directed": False}
    result = _validate(data)
    assert "Cycles detected in directed graph" not in result.edge_cases


def test_expected_format_is_clean():
    result = _validate(expected_format(CanonicalType.GRAPH))
    assert result.is_valid
    assert result.pitfalls == []


def test_missing_vertices_gives_fallback():
    result = _validate({"edges": []})
    assert not result.is_valid
    assert result.errors[0] == "vertices: is required but was None"
    assert result.sanitized_data["vertices"][0]["id"] == "v1"


def test_edge_integrity():
    data = {"vertices": _vertices("A"), "edges": [{"from": "A", "to": "Q"}, {"from": "A"}]}
    result = _validate(data)
    assert "edges[0].to: References non-existent vertex: Q" in result.errors
    assert "edges[1].to: is required but was None" in result.errors


def test_weights_and_self_loops():
    data = {
        "vertices": _vertices("A", "B"),
        "edges": [{"from": "A", "to": "B", "weight": -2}, {"from": "B", "to": "B", "weight": "heavy"}],
        "algorithm": "dijkstra",
    }
    result = _validate(data)
    assert "edges[1].weight: must be a valid number but was 'heavy'" in result.errors
    assert any("Negative weight edge" in e for e in result.edge_cases)
    assert any("use Bellman-Ford" in p for p in result.pitfalls)


def test_disconnected_traversal_pitfall():
    data = {
        "vertices": _vertices("A", "B", "C", "D"),
        "edges": [{"from": "A", "to": "B"}, {"from": "C", "to": "D"}],
        "algorithm": "bfs",
    }
    result = _validate(data)
    assert "Disconnected graph detected - may affect traversal algorithms" in result.edge_cases
    assert "DFS/BFS on disconnected graph will not visit all vertices" in result.pitfalls


def test_density_edge_cases():
    complete = {
        "vertices": _vertices("A", "B", "C"),
        "edges": [{"from": "A", "to": "B"}, {"from": "B", "to": "C"}, {"from": "A", "to": "C"}],
    }
    assert any("Complete graph" in e for e in _validate(complete).edge_cases)

    sparse = {"vertices": _vertices("A", "B", "C", "D"), "edges": [{"from": "A", "to": "B"}]}
    assert any("Sparse graph" in e for e in _validate(sparse).edge_cases)


def test_duplicate_and_unweighted_edges():
    data = {
        "vertices": _vertices("A", "B", "C"),
        "edges": [{"from": "A", "to": "B"}, {"from": "B", "to": "A"}, {"from": "B", "to": "C", "weight": 1}],
        "algorithm": "bellman_ford",
    }
    result = _validate(data)
    assert "Duplicate edges detected: A-B" in result.pitfalls
    assert "2 edges missing weights for weighted algorithm" in result.pitfalls


def test_high_degree_vertex():
    hub = {
        "vertices": _vertices("H", "A", "B", "C", "D", "E"),
        "edges": [{"from": "H", "to": v} for v in "ABCDE"],
    }
    assert any("Vertex H has very high degree" in p for p in _validate(hub).pitfalls)


def test_directed_flag_coerced():
    result = _validate({"vertices": _vertices("A"), "edges": [], "directed": 1})
    assert result.sanitized_data["directed"] is True


def test_malformed_vertices_are_dropped():
    data = {
        "vertices": [{"id": "A", "x": float("inf"), "y": 20}, 7, {"label": "no id"}, {"id": "B"}],
        "edges": [{"from": "A", "to": "B"}, {"from": "A", "to": "ghost"}, "junk"],
    }
    result = _validate(data)
    assert not result.is_valid
    assert "vertices[0].x: must be a valid number but was inf" in result.errors
    assert result.sanitized_data["vertices"] == [{"id": "A", "y": 20}, {"id": "B"}]
    assert result.sanitized_data["edges"] == [{"from": "A", "to": "B"}]


def test_no_usable_vertices_gives_fallback():
    result = _validate({"vertices": [1, 2], "edges": []})
    assert not result.is_valid
    assert "vertices[0]: must be an object" in result.errors
    assert [v["id"] for v in result.sanitized_data["vertices"]] == ["v1"]


def test_duplicate_edges_compare_ids_exactly():
    data = {
        "vertices": _vertices(1, "1", "a-b", "c", "a", "b-c"),
        "edges": [{"from": 1, "to": "c"}, {"from": "1", "to": "c"}, {"from": "a-b", "to": "c"}, {"from": "a", "to": "b-c"}],
        "directed": True,
    }
    assert not any("Duplicate edges" in p for p in _validate(data).pitfalls)

    data["edges"].append({"from": 1, "to": "c"})
    assert "Duplicate edges detected: 1->c" in _validate(data).pitfalls


def test_degree_ignores_unknown_endpoints():
    data = {
        "vertices": _vertices("A", "B", "C", "D", "E"),
        "edges": [{"from": "ghost", "to": v} for v in "ABCDE"],
    }
    result = _validate(data)
    assert not any("high degree" in p for p in result.pitfalls)
