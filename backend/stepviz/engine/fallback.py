"""Fallback instances and error categorization.

When a payload cannot be normalized, or its type is unknown, the renderer
still receives a minimal self-consistent instance of the canonical schema plus
a categorized explanation. The same taxonomy is used for unexpected runtime
failures so messaging stays consistent regardless of where a failure began.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from stepviz.engine.types import CanonicalType, map_to_canonical_type

logger = logging.getLogger(__name__)


class ErrorCategory(str, enum.Enum):
    DATA_VALIDATION = "data-validation"
    RENDERING = "rendering"
    PERFORMANCE = "performance"
    NETWORK = "network"
    INVALID_STRUCTURE = "invalid-structure"
    MISSING_FIELDS = "missing-fields"
    TYPE_MISMATCH = "type-mismatch"
    NO_DATA = "no-data"
    GENERIC = "generic"


@dataclass(frozen=True)
class CategoryInfo:
    title: str
    description: str
    tips: tuple[str, ...] = ()


CATEGORY_INFO: dict[ErrorCategory, CategoryInfo] = {
    ErrorCategory.RENDERING: CategoryInfo(
        "Rendering Error",
        "Check that all data properties exist before accessing them and that optional fields are handled.",
        (
            "Guard property access on optional fields",
            "Validate data shape before rendering",
            "Inspect the logged traceback for details",
        ),
    ),
    ErrorCategory.NETWORK: CategoryInfo(
        "Network Error",
        "Network connectivity or API service issue detected.",
        (
            "Check your internet connection",
            "Verify API credentials and endpoint",
            "Retry the request",
        ),
    ),
    ErrorCategory.PERFORMANCE: CategoryInfo(
        "Performance Error",
        "Check for unbounded recursion or excessive work while preparing the visualization.",
        (
            "Ensure recursive structures terminate",
            "Reduce the size of the visualized data",
            "Memoize expensive computations",
        ),
    ),
    ErrorCategory.DATA_VALIDATION: CategoryInfo(
        "Data Validation Error",
        "Some required data properties are missing or misnamed.",
        (
            "Check that all required data properties are present",
            "Verify nested objects contain expected fields",
            "Regenerate the analysis if data seems incomplete",
        ),
    ),
    ErrorCategory.INVALID_STRUCTURE: CategoryInfo(
        "Invalid Data Structure",
        "The visualization data has an invalid or unexpected structure.",
        (
            "Check that all required fields are present",
            "Verify data types match expected formats",
            "Check for missing or null values",
        ),
    ),
    ErrorCategory.MISSING_FIELDS: CategoryInfo(
        "Missing Required Data",
        "Some required data fields are missing from the visualization.",
        (
            "Ensure all required properties are included",
            "Check the expected data format for this visualization type",
            "Try regenerating the analysis",
        ),
    ),
    ErrorCategory.TYPE_MISMATCH: CategoryInfo(
        "Data Type Mismatch",
        "The data types don't match what's expected for this visualization.",
        (
            "Check that lists are actually lists",
            "Verify numeric values are numbers, not strings",
            "Review the data format requirements",
        ),
    ),
    ErrorCategory.NO_DATA: CategoryInfo(
        "No Data Provided",
        "No visualization data was provided to render.",
        (
            "Ensure the algorithm analysis completed successfully",
            "Check that the analysis service returned step data",
            "Try re-running the analysis",
        ),
    ),
    ErrorCategory.GENERIC: CategoryInfo(
        "Visualization Error",
        "An error occurred while processing the visualization data.",
        (
            "Re-run the analysis",
            "Verify your input data is valid and complete",
        ),
    ),
}

# Checked in order; first match wins.
_RENDERING_RE = re.compile(
    r"cannot read propert|undefined is not a function|failed to render|reading.*undefined"
    r"|object has no attribute|'nonetype'|not subscriptable"
)
_NETWORK_WORDS = ("network", "failed to fetch", "timeout", "timed out", "connection")
_PERFORMANCE_WORDS = ("maximum call stack", "recursion depth", "out of memory", "performance")
_VALIDATION_WORDS = ("missing required property", "validation")
_INVALID_WORDS = ("invalid", "malformed")
_MISSING_WORDS = ("missing", "required")
_TYPE_WORDS = ("type", "expected")

_UNSET: Any = object()


def _message_of(error: Any) -> str:
    if error is None:
        return ""
    if isinstance(error, BaseException):
        text = str(error) or type(error).__name__
    elif isinstance(error, str):
        text = error
    elif isinstance(error, dict):
        text = str(error.get("message", ""))
    else:
        text = str(getattr(error, "message", "") or error)
    return text


def categorize_error(error: Any = None, data: Any = _UNSET) -> ErrorCategory:
    """Map an error (exception, message or None) into the fixed taxonomy."""
    try:
        message = _message_of(error).lower()
    except Exception:  # str() of an arbitrary object can itself raise
        message = ""

    if message:
        if _RENDERING_RE.search(message):
            return ErrorCategory.RENDERING
        if any(w in message for w in _NETWORK_WORDS):
            return ErrorCategory.NETWORK
        if any(w in message for w in _PERFORMANCE_WORDS):
            return ErrorCategory.PERFORMANCE
        if any(w in message for w in _VALIDATION_WORDS):
            return ErrorCategory.DATA_VALIDATION
        if any(w in message for w in _INVALID_WORDS):
            return ErrorCategory.INVALID_STRUCTURE
        if any(w in message for w in _MISSING_WORDS):
            return ErrorCategory.MISSING_FIELDS
        if any(w in message for w in _TYPE_WORDS):
            return ErrorCategory.TYPE_MISMATCH
        return ErrorCategory.GENERIC

    if data is None:
        return ErrorCategory.NO_DATA
    return ErrorCategory.GENERIC


def fallback_instance(canonical_type: CanonicalType) -> dict[str, Any]:
    """Minimal self-consistent instance of a type's canonical schema."""
    match canonical_type:
        case CanonicalType.ARRAY:
            return {
                "arrays": [{"name": "Example Array", "values": [1, 2, 3, 4, 5], "highlights": {}}],
                "pointers": [],
                "operations": [],
            }
        case CanonicalType.STRING:
            return {
                "string": "Example String",
                "pointers": [],
                "hashMap": {},
                "results": None,
                "calculations": [],
                "subarrays": [],
            }
        case CanonicalType.HASHMAP:
            return {"hashMap": {}, "highlights": {}, "operations": []}
        case CanonicalType.TREE:
            return {
                "nodes": [{"id": "root", "value": "Empty", "x": 500, "y": 50, "state": "normal"}],
                "edges": [],
                "traversalPath": [],
                "currentNode": None,
                "traversalType": "none",
                "operations": [],
                "treeType": "binary",
                "rootId": "root",
            }
        case CanonicalType.GRAPH:
            return {
                "vertices": [{"id": "v1", "label": "Empty", "x": 500, "y": 250, "state": "unvisited"}],
                "edges": [],
                "algorithm": "none",
                "currentVertex": None,
                "visitedOrder": [],
                "directed": False,
            }
        case CanonicalType.LINKEDLIST:
            return {
                "nodes": [{"id": "n1", "value": "Empty", "next": None}],
                "head": "n1",
                "tail": "n1",
                "operations": [],
            }
        case CanonicalType.RECURSION:
            return {
                "callStack": [{"function": "main", "params": {}, "level": 0, "state": "active"}],
                "currentCall": 0,
                "baseCase": False,
            }
        case CanonicalType.DP:
            return {"matrix": [[0]]}
        case CanonicalType.STACK | CanonicalType.QUEUE:
            return {"elements": [], "operations": []}
        case CanonicalType.RESULTS:
            return {"results": {}, "supportingData": None, "statistics": None}
        case CanonicalType.HYBRID:
            return {"arrays": [], "string": "", "hashMap": {}, "pointers": [], "operations": []}
    raise ValueError(f"No fallback instance for type: {canonical_type!r}")


@dataclass
class FallbackResolution:
    instance: dict[str, Any]
    category: ErrorCategory
    canonical_type: CanonicalType
    title: str = ""
    description: str = ""
    tips: list[str] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "instance": self.instance,
            "category": self.category.value,
            "canonicalType": self.canonical_type.value,
            "title": self.title,
            "description": self.description,
            "tips": list(self.tips),
            "message": self.message,
        }


class FallbackResolver:
    """Produces fallback instances with categorized explanations. Never raises."""

    def resolve(
        self,
        canonical_type: CanonicalType | str | None,
        error: Any = None,
        data: Any = _UNSET,
    ) -> FallbackResolution:
        resolved = map_to_canonical_type(canonical_type) if canonical_type is not None else None
        if resolved is None:
            logger.debug("Fallback for unknown type %r resolves to array", canonical_type)
            resolved = CanonicalType.ARRAY

        try:
            category = categorize_error(error, data)
            message = _message_of(error)
        except Exception:
            logger.exception("Error categorization failed")
            category, message = ErrorCategory.GENERIC, ""

        info = CATEGORY_INFO[category]
        return FallbackResolution(
            instance=fallback_instance(resolved),
            category=category,
            canonical_type=resolved,
            title=info.title,
            description=info.description,
            tips=list(info.tips),
            message=message,
        )


_resolver = FallbackResolver()


def resolve_fallback(
    canonical_type: CanonicalType | str | None,
    error: Any = None,
    data: Any = _UNSET,
) -> FallbackResolution:
    return _resolver.resolve(canonical_type, error, data)
