"""DP table validation. Finds the first 2-D matrix among candidate fields."""

from __future__ import annotations

from typing import Any

from stepviz.engine.registry import validator
from stepviz.engine.types import CanonicalType
from stepviz.engine.validators.base import BaseValidator, ValidationResult

MATRIX_FIELDS = ("matrix", "table", "dp")


def _is_2d(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and isinstance(value[0], list)


def find_matrix(data: dict[str, Any]) -> Any:
    """First matching candidate, in priority order; None when nothing fits."""
    for key in MATRIX_FIELDS:
        if isinstance(data.get(key), list):
            return data[key]
    values = data.get("values")
    if _is_2d(values):
        return values
    if isinstance(data.get("rows"), list) and isinstance(data.get("cols"), list) and isinstance(values, list):
        return values
    for value in data.values():
        if _is_2d(value):
            return value
    return None


@validator(CanonicalType.DP, description="2-D matrix detection")
class DPValidator(BaseValidator):
    def _validate(self, data: Any) -> ValidationResult:
        if isinstance(data, list):
            matrix = data if _is_2d(data) else None
        elif isinstance(data, dict):
            matrix = find_matrix(data)
        else:
            matrix = None

        if not matrix:
            self.add_warning("DP matrix empty or not detected")
            matrix = []
        elif not isinstance(matrix[0], list):
            self.add_error("DP matrix first row is not a list", "matrix")
            matrix = []
        else:
            widths = {len(row) if isinstance(row, list) else -1 for row in matrix}
            if -1 in widths:
                self.add_error("every row must be a list", "matrix")
                matrix = [row for row in matrix if isinstance(row, list)]
            elif len(widths) > 1:
                self.add_warning("rows have different lengths", "matrix")
            elif len(matrix) == 1 and len(matrix[0]) <= 1:
                self.add_edge_case("Single-cell DP table - check base case handling")

        return self.result({"matrix": matrix})
