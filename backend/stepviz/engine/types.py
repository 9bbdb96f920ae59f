"""Canonical visualization types and the alias table that folds producer hints into them."""

from __future__ import annotations

import enum


class CanonicalType(str, enum.Enum):
    ARRAY = "array"
    STRING = "string"
    HASHMAP = "hashmap"
    TREE = "tree"
    GRAPH = "graph"
    LINKEDLIST = "linkedlist"
    RECURSION = "recursion"
    DP = "dp"
    STACK = "stack"
    QUEUE = "queue"
    RESULTS = "results"
    HYBRID = "hybrid"

    @property
    def is_spatial(self) -> bool:
        return self in (CanonicalType.TREE, CanonicalType.GRAPH)


# Producer spellings seen in the wild → canonical value.
_ALIASES: dict[str, CanonicalType] = {
    "window": CanonicalType.ARRAY,
    "pointers": CanonicalType.ARRAY,
    "linked_list": CanonicalType.LINKEDLIST,
    "strings": CanonicalType.STRING,
    "char_array": CanonicalType.STRING,
    "substring": CanonicalType.STRING,
    "text": CanonicalType.STRING,
    "hash_map": CanonicalType.HASHMAP,
    "hash-map": CanonicalType.HASHMAP,
    "map": CanonicalType.HASHMAP,
    "dictionary": CanonicalType.HASHMAP,
    "frequency": CanonicalType.HASHMAP,
    "counter": CanonicalType.HASHMAP,
    "dp_table": CanonicalType.DP,
    "dynamic_programming": CanonicalType.DP,
    "summary": CanonicalType.RESULTS,
    "mixed": CanonicalType.HYBRID,
    "binary_search_tree": CanonicalType.TREE,
}

# Human titles and render modes, keyed by the raw (pre-alias) hint where it matters.
_TITLES: dict[str, str] = {
    "array": "Array Visualization",
    "string": "String Visualization",
    "hashmap": "HashMap Visualization",
    "dp": "DP Table Visualization",
    "tree": "Tree Visualization",
    "graph": "Graph Visualization",
    "linkedlist": "Linked List Visualization",
    "stack": "Stack Visualization",
    "queue": "Queue Visualization",
    "recursion": "Recursion Visualization",
    "window": "Sliding Window Visualization",
    "pointers": "Two Pointers Visualization",
    "hybrid": "Hybrid Visualization",
    "results": "Algorithm Results",
}

_MODES: dict[str, str] = {
    "window": "window",
    "pointers": "pointers",
    "dp": "dp",
}


def map_to_canonical_type(hint: str | CanonicalType | None) -> CanonicalType | None:
    """Fold a producer type hint into a CanonicalType, or None if unrecognised."""
    if hint is None:
        return None
    if isinstance(hint, CanonicalType):
        return hint
    if not isinstance(hint, str):
        return None
    key = hint.strip().lower()
    if not key:
        return None
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return CanonicalType(key)
    except ValueError:
        return None


def describe_type(hint: str | CanonicalType | None) -> tuple[str, str]:
    """Return (title, mode) for a raw hint or canonical type."""
    if isinstance(hint, CanonicalType):
        key = hint.value
    else:
        key = (hint or "").strip().lower()

    canonical = map_to_canonical_type(key)
    if key in _TITLES:
        title = _TITLES[key]
    elif canonical is not None:
        title = _TITLES[canonical.value]
    else:
        title = f"{hint or 'Unknown'} Visualization"

    if key in _MODES:
        mode = _MODES[key]
    elif canonical is CanonicalType.DP:
        mode = "dp"
    else:
        mode = "default"
    return title, mode
