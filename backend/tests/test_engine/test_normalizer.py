"""Tests for slim projections."""

from __future__ import annotations

import copy

from stepviz.engine.formats import expected_format
from stepviz.engine.normalizer import slim
from stepviz.engine.types import CanonicalType
from stepviz.engine.validation import validate_visualization_data


def test_every_type_has_a_projection():
    for canonical_type in CanonicalType:
        sanitized = validate_visualization_data(expected_format(canonical_type), canonical_type).sanitized_data
        assert isinstance(slim(canonical_type, sanitized), dict)


def test_tree_projection_keeps_render_fields_only():
    sanitized = {
        "nodes": [{"id": "a"}],
        "edges": [],
        "traversalPath": ["a"],
        "currentNode": "a",
        "treeType": "bst",
        "operations": ["insert"],
    }
    assert slim(CanonicalType.TREE, sanitized) == {
        "nodes": [{"id": "a"}],
        "edges": [],
        "traversalPath": ["a"],
        "currentNode": "a",
    }


def test_optional_none_fields_are_omitted():
    projected = slim(CanonicalType.ARRAY, {"arrays": [], "pointers": [], "operations": [], "window": None})
    assert "window" not in projected
    projected = slim(CanonicalType.RECURSION, {"callStack": [], "currentCall": None, "baseCase": True})
    assert projected == {"callStack": [], "baseCase": True}


def test_graph_projection():
    sanitized = validate_visualization_data(expected_format(CanonicalType.GRAPH), "graph").sanitized_data
    projected = slim(CanonicalType.GRAPH, sanitized)
    assert set(projected) == {"vertices", "edges", "algorithm", "directed"}
    assert projected["algorithm"] == "dijkstra"


def test_projection_is_pure():
    sanitized = expected_format(CanonicalType.ARRAY)
    before = copy.deepcopy(sanitized)
    first = slim(CanonicalType.ARRAY, sanitized)
    first["arrays"][0]["values"].append(99)
    assert sanitized == before
    assert slim(CanonicalType.ARRAY, sanitized) == slim(CanonicalType.ARRAY, sanitized)


def test_hybrid_keeps_everything():
    data = {"arrays": [], "string": "ab", "hashMap": {}, "pointers": [], "operations": [], "extra": 1}
    assert slim(CanonicalType.HYBRID, data) == data
