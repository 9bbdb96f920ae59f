"""Array payload validation: bounds and highlight indices."""

from __future__ import annotations

from typing import Any

from stepviz.engine.registry import validator
from stepviz.engine.types import CanonicalType
from stepviz.engine.validators.base import BaseValidator, ValidationResult, is_number

INDEX_HIGHLIGHTS = ("current", "target", "comparison", "sorted", "visited", "subarray")
OPERATION_TYPES = ("swap", "compare", "access", "insert", "delete", "move")


def _max_index(arrays: list[Any]) -> int:
    lengths = [
        len(a["values"]) for a in arrays
        if isinstance(a, dict) and isinstance(a.get("values"), list)
    ]
    return max(lengths) - 1 if lengths else -1


def _value_kind(value: Any) -> str:
    if is_number(value):
        return "number"
    return type(value).__name__


@validator(CanonicalType.ARRAY, description="Arrays, highlights, pointers and operations")
class ArrayValidator(BaseValidator):
    def _validate(self, data: Any) -> ValidationResult:
        sanitized = self.sanitize(data)

        arrays = sanitized.get("arrays")
        if not self.exists(arrays, "arrays") or not self.is_list(arrays, "arrays"):
            return self.fallback_result()

        for i, array_data in enumerate(arrays):
            self.validate_single_array(array_data, f"arrays[{i}]")

        if sanitized.get("pointers"):
            self.validate_pointers(sanitized["pointers"], arrays)

        if sanitized.get("operations"):
            self._validate_operations(sanitized["operations"], arrays)

        usable = [a for a in arrays if isinstance(a, dict) and isinstance(a.get("values"), list)]
        self._detect_edge_cases(usable)
        self._detect_pitfalls(usable, sanitized.get("pointers") or [])

        if arrays and not usable:
            return self.fallback_result()
        sanitized["arrays"] = usable
        return self.result(sanitized)

    @staticmethod
    def sanitize(data: Any) -> dict[str, Any]:
        """Fold a bare list, ``{array: [...]}`` or ``{arrays: [...]}`` into one shape."""
        if isinstance(data, list):
            return {
                "arrays": [{"name": "Array", "values": list(data), "highlights": {}}],
                "pointers": [],
                "operations": [],
            }
        if not isinstance(data, dict):
            return {"arrays": None, "pointers": [], "operations": []}

        if isinstance(data.get("array"), list) and "arrays" not in data:
            return {
                "arrays": [{
                    "name": data.get("name") or "Array",
                    "values": list(data["array"]),
                    "highlights": data.get("highlights") or {},
                }],
                "pointers": data.get("pointers") or [],
                "operations": data.get("operations") or [],
            }

        arrays = data.get("arrays")
        if isinstance(arrays, list):
            arrays = [
                {**a, "highlights": a.get("highlights") or {}} if isinstance(a, dict) else a
                for a in arrays
            ]
        sanitized = {
            "arrays": arrays,
            "pointers": data.get("pointers") or [],
            "operations": data.get("operations") or [],
        }
        for key in ("highlights", "window", "hashMap", "subarrays", "calculations", "results"):
            if data.get(key) is not None:
                sanitized[key] = data[key]
        return sanitized

    # ── Structure ──

    def validate_single_array(self, array_data: Any, prefix: str) -> None:
        if not isinstance(array_data, dict):
            self.add_error("must be an object", prefix)
            return

        values = array_data.get("values")
        if not self.exists(values, f"{prefix}.values") or not self.is_list(values, f"{prefix}.values"):
            return

        if not values:
            self.add_edge_case("Empty array detected - ensure empty state is handled properly")

        if len(values) > self.config.large_array_threshold:
            self.add_warning(
                f"Large array with {len(values)} elements may impact performance",
                f"{prefix}.values",
            )
            self.add_pitfall("Large datasets can cause rendering performance issues - consider virtualization")

        for index, value in enumerate(values):
            if value is None:
                self.add_edge_case(f"Null value at index {index} - ensure proper null handling")

        highlights = array_data.get("highlights")
        if isinstance(highlights, dict) and highlights:
            self._validate_highlights(highlights, len(values), f"{prefix}.highlights")

    def _validate_highlights(self, highlights: dict[str, Any], length: int, prefix: str) -> None:
        window = highlights.get("window")
        if isinstance(window, dict):
            start, end = window.get("start"), window.get("end")
            if self.is_number(start, f"{prefix}.window.start") and self.is_number(end, f"{prefix}.window.end"):
                if start < 0 or end < 0:
                    self.add_error("Window indices cannot be negative", f"{prefix}.window")
                if start >= length or end >= length:
                    self.add_error(f"Window indices out of bounds (array length: {length})", f"{prefix}.window")
                if start > end:
                    self.add_error("Window start index cannot be greater than end index", f"{prefix}.window")
                    self.add_pitfall("Invalid window range detected - ensure start <= end (possible off-by-one error)")
                if start == end:
                    self.add_edge_case("Single-element window detected")
                if end - start + 1 == length:
                    self.add_edge_case("Window spans entire array")

        for category in INDEX_HIGHLIGHTS:
            indices = highlights.get(category)
            if not isinstance(indices, list):
                continue
            field_name = f"{prefix}.{category}"
            for index in indices:
                if not self.is_number(index, field_name):
                    continue
                if index < 0 or index >= length:
                    self.add_error(f"Index {index} out of bounds (array length: {length})", field_name)
            hashable = [i for i in indices if is_number(i)]
            if len(set(hashable)) != len(hashable):
                self.add_warning(f"Duplicate indices in {category} highlighting", field_name)

    def validate_pointers(self, pointers: Any, arrays: list[Any]) -> None:
        if not self.is_list(pointers, "pointers"):
            return

        max_index = _max_index(arrays)
        positions = [p.get("position") for p in pointers if isinstance(p, dict)]
        reported: set[Any] = set()

        for i, pointer in enumerate(pointers):
            prefix = f"pointers[{i}]"
            if not isinstance(pointer, dict):
                self.add_error("must be an object", prefix)
                continue

            name = pointer.get("name")
            if not self.exists(name, f"{prefix}.name") or not self.is_string(name, f"{prefix}.name"):
                continue

            position = pointer.get("position")
            if not self.exists(position, f"{prefix}.position") or not self.is_number(position, f"{prefix}.position"):
                continue

            if position < 0 or position > max_index:
                self.add_error(f"Position {position} out of bounds (max: {max_index})", f"{prefix}.position")

            if positions.count(position) > 1 and position not in reported:
                reported.add(position)
                self.add_edge_case(f"Multiple pointers at position {position} - ensure proper visual handling")

    def _validate_operations(self, operations: Any, arrays: list[Any]) -> None:
        if not self.is_list(operations, "operations"):
            return

        max_index = _max_index(arrays)
        for i, operation in enumerate(operations):
            prefix = f"operations[{i}]"
            if operation is None:
                self.add_warning("operation is null", prefix)
                continue
            # Bare strings are descriptive and trusted
            if isinstance(operation, str):
                continue
            if not isinstance(operation, dict):
                self.add_error("must be an object or string", prefix)
                continue

            op_type = operation.get("type")
            if op_type is not None and not self.is_string(op_type, f"{prefix}.type"):
                continue
            if op_type not in OPERATION_TYPES:
                self.add_warning(f"Unknown operation type: {op_type}", f"{prefix}.type")

            indices = operation.get("indices")
            if indices is None or not self.is_list(indices, f"{prefix}.indices"):
                continue
            for index in indices:
                if not is_number(index) or index < 0 or index > max_index:
                    self.add_error(f"Index {index} out of bounds (max: {max_index})", f"{prefix}.indices")

            if op_type == "swap" and len(indices) != 2:
                self.add_error("Swap operation must have exactly 2 indices", f"{prefix}.indices")
            if op_type == "compare" and len(indices) < 2:
                self.add_error("Compare operation must have at least 2 indices", f"{prefix}.indices")

    # ── Pedagogical detections ──

    def _detect_edge_cases(self, arrays: list[dict[str, Any]]) -> None:
        for index, array_data in enumerate(arrays):
            values = array_data["values"]
            if len(values) == 1:
                self.add_edge_case(
                    f"Array {index} has only one element - ensure single-element algorithms work correctly"
                )
            if len(values) > 1 and all(v == values[0] for v in values):
                self.add_edge_case(
                    f"Array {index} has all identical elements - may affect sorting/searching algorithms"
                )

            comparable = len(values) > 1 and (
                all(is_number(v) for v in values) or all(isinstance(v, str) for v in values)
            )
            if comparable:
                pairs = list(zip(values, values[1:]))
                if all(b >= a for a, b in pairs):
                    self.add_edge_case(f"Array {index} is already sorted in ascending order")
                elif all(b <= a for a, b in pairs):
                    self.add_edge_case(f"Array {index} is sorted in descending order")

            numbers = [v for v in values if is_number(v)]
            if any(v < 0 for v in numbers):
                self.add_edge_case(f"Array {index} contains negative numbers - ensure proper handling")
            if any(abs(v) > self.config.large_value_magnitude for v in numbers):
                self.add_edge_case(
                    f"Array {index} contains very large numbers - may affect visualization scaling"
                )

    def _detect_pitfalls(self, arrays: list[dict[str, Any]], pointers: list[Any]) -> None:
        for index, array_data in enumerate(arrays):
            values = array_data["values"]
            window = (array_data.get("highlights") or {}).get("window")
            if isinstance(window, dict) and window.get("end") == len(values) and values:
                self.add_pitfall(
                    f"Array {index}: Window end equals array length - potential off-by-one error"
                )
            if any((is_number(v) and v == 0) or v == "" for v in values):
                self.add_pitfall(f"Array {index} contains zero or empty values - ensure these are intentional")
            kinds = {_value_kind(v) for v in values if v is not None}
            if len(kinds) > 1:
                self.add_pitfall(f"Array {index} contains mixed data types - may cause comparison issues")

        valid_pointers = [p for p in pointers if isinstance(p, dict) and is_number(p.get("position"))]
        if not valid_pointers:
            return

        positions = [p["position"] for p in valid_pointers]
        if len(set(positions)) != len(positions):
            self.add_pitfall("Multiple pointers at same position - ensure visual clarity")

        for array_index, array_data in enumerate(arrays):
            last = len(array_data["values"]) - 1
            for pointer in valid_pointers:
                name = pointer.get("name")
                if pointer["position"] == 0:
                    self.add_pitfall(
                        f"Pointer '{name}' at start of array {array_index} - check boundary conditions"
                    )
                if pointer["position"] == last and last > 0:
                    self.add_pitfall(
                        f"Pointer '{name}' at end of array {array_index} - check boundary conditions"
                    )
