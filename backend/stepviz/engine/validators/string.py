"""String payload validation. Light-weight, pointer bounds only."""

from __future__ import annotations

from typing import Any

from stepviz.engine.registry import validator
from stepviz.engine.types import CanonicalType
from stepviz.engine.validators.base import BaseValidator, ValidationResult, is_number

STRING_FIELDS = ("string", "text", "input")


def extract_string(data: Any) -> str:
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        for key in STRING_FIELDS:
            if isinstance(data.get(key), str):
                return data[key]
    return ""


@validator(CanonicalType.STRING, description="String text and pointer positions")
class StringValidator(BaseValidator):
    def _validate(self, data: Any) -> ValidationResult:
        text = extract_string(data)
        fields = data if isinstance(data, dict) else {}

        if isinstance(data, dict):
            for key in STRING_FIELDS:
                if key in data and data[key] is not None and not isinstance(data[key], str):
                    self.add_warning(f"expected a string but got {type(data[key]).__name__}", key)
        elif not isinstance(data, str):
            self.add_warning(f"expected an object or string but got {type(data).__name__}", "data")

        pointers = fields.get("pointers") if isinstance(fields.get("pointers"), list) else []
        for i, pointer in enumerate(pointers):
            position = pointer.get("position") if isinstance(pointer, dict) else None
            if not is_number(position):
                continue
            # Position 0 on an empty string is the usual sliding-window start
            if position < 0:
                self.add_error(f"Position {position} cannot be negative", f"pointers[{i}].position")
            elif text and position >= len(text):
                self.add_warning(
                    f"Position {position} out of bounds (max: {len(text) - 1})",
                    f"pointers[{i}].position",
                )

        if not text:
            self.add_edge_case("Empty string - ensure empty input is handled properly")
        elif len(text) == 1:
            self.add_edge_case("Single-character string - check loop bounds")

        sanitized = {
            "string": text,
            "pointers": pointers,
            "hashMap": fields.get("hashMap") if isinstance(fields.get("hashMap"), dict) else {},
            "results": fields.get("results"),
            "calculations": fields.get("calculations") or [],
            "subarrays": fields.get("subarrays") or [],
        }
        for key in ("highlights", "operations"):
            if fields.get(key) is not None:
                sanitized[key] = fields[key]
        return self.result(sanitized)
