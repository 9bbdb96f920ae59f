"""Validator base class and the ValidationResult every validator returns."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar

from stepviz.engine.config import PipelineConfig
from stepviz.engine.types import CanonicalType


@dataclass
class ValidationResult:
    """Outcome of validating one visualization payload.

    ``sanitized_data`` always matches the canonical schema of the validated
    type, even when ``is_valid`` is False.
    """

    is_valid: bool
    sanitized_data: dict[str, Any]
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    edge_cases: list[str] = field(default_factory=list)
    pitfalls: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "sanitizedData": self.sanitized_data,
            "edgeCases": list(self.edge_cases),
            "pitfalls": list(self.pitfalls),
        }


def is_number(value: Any) -> bool:
    """True for finite real numbers; bools, NaN and infinities do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def has_id(item: Any) -> bool:
    return isinstance(item, dict) and item.get("id") is not None


def drop_bad_coordinates(item: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``item`` without ``x``/``y`` entries that are not finite numbers."""
    return {k: v for k, v in item.items() if k not in ("x", "y") or is_number(v)}


def type_name(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "list"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class BaseValidator:
    """Collects errors, warnings, edge cases and pitfalls for one validation run.

    Subclasses set ``canonical_type`` and implement ``_validate``. Instances are
    cheap; the dispatcher creates a fresh one per call so no state leaks
    between steps.
    """

    canonical_type: ClassVar[CanonicalType]

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self.config = config or PipelineConfig()
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.edge_cases: list[str] = []
        self.pitfalls: list[str] = []

    # ── Collection ──

    def add_error(self, message: str, field_name: str | None = None) -> None:
        self.errors.append(f"{field_name}: {message}" if field_name else message)

    def add_warning(self, message: str, field_name: str | None = None) -> None:
        self.warnings.append(f"{field_name}: {message}" if field_name else message)

    def add_edge_case(self, message: str) -> None:
        self.edge_cases.append(message)

    def add_pitfall(self, message: str) -> None:
        self.pitfalls.append(message)

    # ── Primitive checks ──

    def exists(self, value: Any, field_name: str) -> bool:
        if value is None:
            self.add_error("is required but was None", field_name)
            return False
        return True

    def is_list(self, value: Any, field_name: str) -> bool:
        if not isinstance(value, list):
            self.add_error(f"must be a list but was {type_name(value)}", field_name)
            return False
        return True

    def is_number(self, value: Any, field_name: str) -> bool:
        if not is_number(value):
            self.add_error(f"must be a valid number but was {value!r}", field_name)
            return False
        return True

    def is_string(self, value: Any, field_name: str) -> bool:
        if not isinstance(value, str):
            self.add_error(f"must be a string but was {type_name(value)}", field_name)
            return False
        return True

    def in_range(self, value: float, lo: float, hi: float, field_name: str) -> bool:
        if value < lo or value > hi:
            self.add_error(f"must be between {lo} and {hi} but was {value}", field_name)
            return False
        return True

    # ── Lifecycle ──

    def reset(self) -> None:
        self.errors = []
        self.warnings = []
        self.edge_cases = []
        self.pitfalls = []

    def result(self, sanitized: dict[str, Any]) -> ValidationResult:
        return ValidationResult(
            is_valid=not self.errors,
            sanitized_data=sanitized,
            errors=list(self.errors),
            warnings=list(self.warnings),
            edge_cases=list(self.edge_cases),
            pitfalls=list(self.pitfalls),
        )

    def fallback_result(self) -> ValidationResult:
        """Result carrying the type's fallback instance; always invalid."""
        from stepviz.engine.fallback import fallback_instance

        if not self.errors:
            self.add_error("Data could not be normalized")
        res = self.result(fallback_instance(self.canonical_type))
        res.is_valid = False
        return res

    def validate(self, data: Any) -> ValidationResult:
        self.reset()
        if data is None:
            self.add_error("Data is null or undefined")
            return self.fallback_result()
        return self._validate(data)

    def _validate(self, data: Any) -> ValidationResult:
        raise NotImplementedError
