"""Tests for the string and DP validators."""

from __future__ import annotations

from stepviz.engine.validators.dp import DPValidator, find_matrix
from stepviz.engine.validators.string import StringValidator


def test_string_pointers():
    data = {"string": "abc", "pointers": [{"name": "l", "position": -1}, {"name": "r", "position": 3}]}
    result = StringValidator().validate(data)
    assert "pointers[0].position: Position -1 cannot be negative" in result.errors
    assert "pointers[1].position: Position 3 out of bounds (max: 2)" in result.warnings


def test_empty_string_allows_start_pointer():
    result = StringValidator().validate({"string": "", "pointers": [{"name": "l", "position": 0}]})
    assert result.is_valid
    assert result.warnings == []
    assert any("Empty string" in e for e in result.edge_cases)


def test_string_aliases_and_shape():
    result = StringValidator().validate({"text": "hello"})
    assert result.is_valid
    assert result.sanitized_data == {
        "string": "hello",
        "pointers": [],
        "hashMap": {},
        "results": None,
        "calculations": [],
        "subarrays": [],
    }
    assert StringValidator().validate("x").sanitized_data["string"] == "x"


def test_absent_string_is_valid():
    result = StringValidator().validate({"pointers": []})
    assert result.is_valid
    assert result.sanitized_data["string"] == ""


def test_find_matrix_priority():
    assert find_matrix({"table": [[1]], "matrix": [[2]]}) == [[2]]
    assert find_matrix({"values": [[1, 2]]}) == [[1, 2]]
    assert find_matrix({"rows": ["a"], "cols": ["b"], "values": [5]}) == [5]
    assert find_matrix({"memo": [[0, 1], [1, 1]]}) == [[0, 1], [1, 1]]
    assert find_matrix({"memo": [1, 2]}) is None


def test_dp_missing_matrix_is_warning_only():
    result = DPValidator().validate({"answer": 3})
    assert result.is_valid
    assert result.warnings == ["DP matrix empty or not detected"]
    assert result.sanitized_data == {"matrix": []}


def test_dp_first_row_not_list():
    result = DPValidator().validate({"matrix": [1, 2, 3]})
    assert not result.is_valid
    assert result.errors == ["matrix: DP matrix first row is not a list"]
    assert result.sanitized_data == {"matrix": []}


def test_dp_ragged_rows_warn():
    result = DPValidator().validate({"dp": [[0, 1], [1]]})
    assert result.is_valid
    assert "matrix: rows have different lengths" in result.warnings
    assert result.sanitized_data["matrix"] == [[0, 1], [1]]


def test_dp_bare_matrix_and_single_cell():
    result = DPValidator().validate([[0]])
    assert result.sanitized_data == {"matrix": [[0]]}
    assert any("Single-cell" in e for e in result.edge_cases)
