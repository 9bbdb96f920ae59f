"""Tests for fallback instances and error categorization."""

from __future__ import annotations

from stepviz.engine.fallback import (
    ErrorCategory,
    FallbackResolver,
    categorize_error,
    fallback_instance,
    resolve_fallback,
)
from stepviz.engine.types import CanonicalType
from stepviz.engine.validation import validate_visualization_data


def test_every_type_has_a_fallback_instance():
    for canonical_type in CanonicalType:
        assert isinstance(fallback_instance(canonical_type), dict)


def test_fallback_instances_are_renderable():
    tree = fallback_instance(CanonicalType.TREE)
    assert tree["nodes"] == [{"id": "root", "value": "Empty", "x": 500, "y": 50, "state": "normal"}]
    graph = fallback_instance(CanonicalType.GRAPH)
    assert graph["vertices"][0]["id"] == "v1"
    assert (graph["vertices"][0]["x"], graph["vertices"][0]["y"]) == (500, 250)
    assert fallback_instance(CanonicalType.ARRAY)["arrays"][0]["values"] == [1, 2, 3, 4, 5]
    assert fallback_instance(CanonicalType.STRING)["string"] == "Example String"


def test_fallback_instances_validate():
    for canonical_type in CanonicalType:
        result = validate_visualization_data(fallback_instance(canonical_type), canonical_type)
        assert result.is_valid, (canonical_type, result.errors)


def test_fallback_instances_are_fresh_copies():
    first = fallback_instance(CanonicalType.ARRAY)
    first["arrays"][0]["values"].clear()
    assert fallback_instance(CanonicalType.ARRAY)["arrays"][0]["values"] == [1, 2, 3, 4, 5]


def test_categorize_in_order():
    assert categorize_error(AttributeError("'NoneType' object has no attribute 'get'")) is ErrorCategory.RENDERING
    assert categorize_error("Cannot read properties of undefined") is ErrorCategory.RENDERING
    assert categorize_error(TimeoutError("request timed out")) is ErrorCategory.NETWORK
    assert categorize_error(RecursionError("maximum recursion depth exceeded")) is ErrorCategory.PERFORMANCE
    assert categorize_error("validation failed") is ErrorCategory.DATA_VALIDATION
    assert categorize_error("malformed payload") is ErrorCategory.INVALID_STRUCTURE
    assert categorize_error("nodes: is required but was None") is ErrorCategory.MISSING_FIELDS
    assert categorize_error("expected list") is ErrorCategory.TYPE_MISMATCH
    assert categorize_error("something odd") is ErrorCategory.GENERIC


def test_no_data_only_without_message():
    assert categorize_error(None, None) is ErrorCategory.NO_DATA
    assert categorize_error(None, {"a": 1}) is ErrorCategory.GENERIC
    assert categorize_error() is ErrorCategory.GENERIC


def test_resolver_unknown_type_resolves_to_array():
    resolution = FallbackResolver().resolve("heap")
    assert resolution.canonical_type is CanonicalType.ARRAY
    assert resolution.instance == fallback_instance(CanonicalType.ARRAY)


def test_resolver_never_raises_on_hostile_errors():
    class Hostile:
        def __str__(self):
            raise RuntimeError("boom")

    resolution = resolve_fallback("tree", Hostile())
    assert resolution.category is ErrorCategory.GENERIC
    assert resolution.canonical_type is CanonicalType.TREE


def test_resolution_to_dict():
    payload = resolve_fallback(CanonicalType.GRAPH, ValueError("invalid edge")).to_dict()
    assert payload["category"] == "invalid-structure"
    assert payload["canonicalType"] == "graph"
    assert payload["title"] == "Invalid Data Structure"
    assert payload["tips"]
