"""Tests for the array validator."""

from __future__ import annotations

from stepviz.engine.config import PipelineConfig
from stepviz.engine.validators.array import ArrayValidator
from tests.conftest import SORT_ARRAY


def _validate(data, config=None):
    return ArrayValidator(config).validate(data)


def _with_highlights(values, highlights):
    return {"arrays": [{"name": "a", "values": values, "highlights": highlights}]}


def test_clean_payload():
    result = _validate(SORT_ARRAY)
    assert result.is_valid
    assert result.errors == []
    assert result.sanitized_data["arrays"][0]["values"] == [5, 3, 8, 1]


def test_bare_list_and_single_array_shapes():
    bare = _validate([3, 1, 2]).sanitized_data
    assert bare["arrays"] == [{"name": "Array", "values": [3, 1, 2], "highlights": {}}]
    assert bare["pointers"] == [] and bare["operations"] == []

    single = _validate({"array": [1, 2], "name": "nums"}).sanitized_data
    assert single["arrays"][0]["name"] == "nums"


def test_missing_arrays_uses_fallback():
    result = _validate({"pointers": []})
    assert not result.is_valid
    assert result.errors[0] == "arrays: is required but was None"
    assert result.sanitized_data["arrays"][0]["values"] == [1, 2, 3, 4, 5]


def test_null_payload():
    result = _validate(None)
    assert not result.is_valid
    assert "Data is null or undefined" in result.errors
    assert result.sanitized_data["arrays"]


def test_inverted_window():
    result = _validate(_with_highlights([1, 2, 3, 4, 5], {"window": {"start": 3, "end": 1}}))
    assert not result.is_valid
    assert any("Window start index cannot be greater than end index" in e for e in result.errors)
    assert any("off-by-one" in p for p in result.pitfalls)


def test_window_edge_cases():
    single = _validate(_with_highlights([1, 2, 3], {"window": {"start": 1, "end": 1}}))
    assert "Single-element window detected" in single.edge_cases
    full = _validate(_with_highlights([1, 2, 3], {"window": {"start": 0, "end": 2}}))
    assert "Window spans entire array" in full.edge_cases


def test_highlight_bounds_have_no_false_positives():
    values = [10, 20, 30]
    result = _validate(_with_highlights(values, {"current": [0, 2], "target": [-1, 3], "visited": [1]}))
    flagged = [e for e in result.errors if "out of bounds" in e]
    assert len(flagged) == 2
    assert all("highlights.target" in e for e in flagged)
    assert "Index -1 out of bounds (array length: 3)" in flagged[0]
    assert "Index 3 out of bounds (array length: 3)" in flagged[1]


def test_duplicate_highlight_indices_warn():
    result = _validate(_with_highlights([1, 2, 3], {"sorted": [1, 1]}))
    assert result.is_valid
    assert any("Duplicate indices in sorted" in w for w in result.warnings)


def test_pointers_checked_against_longest_array():
    data = {
        "arrays": [{"name": "a", "values": [1, 2]}, {"name": "b", "values": [1, 2, 3, 4]}],
        "pointers": [{"name": "p", "position": 3}, {"name": "q", "position": 4}],
    }
    result = _validate(data)
    assert result.errors == ["pointers[1].position: Position 4 out of bounds (max: 3)"]


def test_pointer_collision():
    data = {
        "arrays": [{"name": "a", "values": [4, 9, 2]}],
        "pointers": [{"name": "l", "position": 1}, {"name": "r", "position": 1}],
    }
    result = _validate(data)
    assert result.is_valid
    assert result.edge_cases.count("Multiple pointers at position 1 - ensure proper visual handling") == 1
    assert "Multiple pointers at same position - ensure visual clarity" in result.pitfalls


def test_pointer_requires_string_name():
    data = {"arrays": [{"name": "a", "values": [1, 2]}], "pointers": [{"name": 5, "position": 0}]}
    result = _validate(data)
    assert result.errors == ["pointers[0].name: must be a string but was number"]


def test_operations():
    data = {
        "arrays": [{"name": "a", "values": [1, 2, 3]}],
        "operations": [
            "partition around pivot",
            {"type": "swap", "indices": [0]},
            {"type": "compare", "indices": [1]},
            {"type": "access", "indices": [7]},
            {"type": "rotate", "indices": [0]},
        ],
    }
    result = _validate(data)
    assert "operations[1].indices: Swap operation must have exactly 2 indices" in result.errors
    assert "operations[2].indices: Compare operation must have at least 2 indices" in result.errors
    assert "operations[3].indices: Index 7 out of bounds (max: 2)" in result.errors
    assert "operations[4].type: Unknown operation type: rotate" in result.warnings
    assert not any(e.startswith("operations[0]") for e in result.errors)


def test_pedagogical_edge_cases():
    assert any("only one element" in e for e in _validate([7]).edge_cases)
    assert any("all identical" in e for e in _validate([2, 2, 2]).edge_cases)
    assert any("ascending" in e for e in _validate([1, 2, 3]).edge_cases)
    assert any("descending" in e for e in _validate([3, 2, 1]).edge_cases)
    assert any("negative" in e for e in _validate([3, -2, 1]).edge_cases)
    assert any("very large numbers" in e for e in _validate([1, 2_000_000, 3]).edge_cases)
    assert any("Null value at index 1" in e for e in _validate([1, None, 3]).edge_cases)


def test_pedagogical_pitfalls():
    assert any("zero or empty" in p for p in _validate([0, 4, 2]).pitfalls)
    assert any("mixed data types" in p for p in _validate([1, "a", 2]).pitfalls)
    off_by_one = _validate(_with_highlights([1, 2, 3], {"window": {"start": 0, "end": 3}}))
    assert any("Window end equals array length" in p for p in off_by_one.pitfalls)


def test_large_array_threshold():
    config = PipelineConfig(large_array_threshold=5)
    result = _validate(list(range(6, 0, -1)), config)
    assert result.is_valid
    assert any("Large array with 6 elements" in w for w in result.warnings)
    assert any("virtualization" in p for p in result.pitfalls)


def test_malformed_array_entries_are_dropped():
    result = _validate({"arrays": [{"name": "a"}, [1, 2], {"name": "b", "values": [4, 5]}]})
    assert not result.is_valid
    assert "arrays[0].values: is required but was None" in result.errors
    assert "arrays[1]: must be an object" in result.errors
    assert result.sanitized_data["arrays"] == [{"name": "b", "values": [4, 5], "highlights": {}}]


def test_no_usable_arrays_gives_fallback():
    result = _validate({"arrays": [{"name": "a"}, [1, 2]]})
    assert not result.is_valid
    assert result.sanitized_data["arrays"][0]["name"] == "Example Array"
