"""Slim projections: the minimal field set each renderer consumes."""

from __future__ import annotations

import copy
from typing import Any

from stepviz.engine.types import CanonicalType

# type → (required fields with defaults, optional fields)
_PROJECTIONS: dict[CanonicalType, tuple[dict[str, Any], tuple[str, ...]]] = {
    CanonicalType.ARRAY: (
        {"arrays": [], "pointers": [], "operations": []},
        ("highlights", "window", "hashMap", "subarrays", "calculations", "results"),
    ),
    CanonicalType.STRING: (
        {"string": "", "pointers": [], "operations": []},
        ("hashMap", "highlights", "calculations", "results", "subarrays"),
    ),
    CanonicalType.HASHMAP: ({"hashMap": {}}, ("highlights", "operations")),
    CanonicalType.TREE: ({"nodes": [], "edges": [], "traversalPath": [], "currentNode": None}, ()),
    CanonicalType.GRAPH: ({"vertices": [], "edges": [], "algorithm": "none", "directed": False}, ()),
    CanonicalType.LINKEDLIST: ({"nodes": []}, ("head", "tail")),
    CanonicalType.STACK: ({"elements": []}, ()),
    CanonicalType.QUEUE: ({"elements": []}, ()),
    CanonicalType.DP: ({"matrix": []}, ()),
    CanonicalType.RECURSION: ({"callStack": []}, ("currentCall", "baseCase")),
    CanonicalType.RESULTS: ({"results": None}, ("supportingData", "statistics")),
}


def slim(canonical_type: CanonicalType, sanitized: dict[str, Any]) -> dict[str, Any]:
    """Project sanitized data onto the type's renderer fields.

    Pure: the input is not modified and the output shares no containers
    with it. Optional fields that are None are left out. Hybrid payloads
    keep every field.
    """
    if not isinstance(sanitized, dict):
        return {}
    if canonical_type is CanonicalType.HYBRID:
        return copy.deepcopy(sanitized)

    required, optional = _PROJECTIONS[canonical_type]
    projected: dict[str, Any] = {}
    for key, default in required.items():
        value = sanitized.get(key)
        projected[key] = value if value is not None else default
    for key in optional:
        if sanitized.get(key) is not None:
            projected[key] = sanitized[key]
    return copy.deepcopy(projected)
