"""Expected data format per canonical type.

These payloads double as developer documentation (served by
``GET /api/formats``), as the example content shown next to a failed
visualization, and as test fixtures. Each one must validate cleanly.
"""

from __future__ import annotations

import copy
from typing import Any

from stepviz.engine.types import CanonicalType

EXPECTED_FORMATS: dict[CanonicalType, dict[str, Any]] = {
    CanonicalType.ARRAY: {
        "arrays": [
            {
                "name": "Array Name",
                "values": [1, 2, 3, 4, 5],
                "highlights": {
                    "current": [0],
                    "window": {"start": 1, "end": 3},
                },
            }
        ],
        "pointers": [{"name": "left", "position": 0, "color": "#ff0000"}],
        "operations": [{"type": "swap", "indices": [0, 4], "description": "Swapping elements"}],
    },
    CanonicalType.STRING: {
        "string": "abcabcbb",
        "pointers": [{"name": "left", "position": 0}, {"name": "right", "position": 2}],
        "hashMap": {"a": 0, "b": 1, "c": 2},
    },
    CanonicalType.HASHMAP: {
        "hashMap": {"apple": 2, "banana": 1},
        "highlights": {"keys": ["apple"]},
        "operations": [{"type": "insert", "key": "banana", "value": 1}],
    },
    CanonicalType.TREE: {
        "nodes": [
            {"id": "n1", "value": 8, "state": "current"},
            {"id": "n2", "value": 3, "state": "normal"},
            {"id": "n3", "value": 10, "state": "normal"},
        ],
        "edges": [{"from": "n1", "to": "n2"}, {"from": "n1", "to": "n3"}],
        "traversalPath": ["n1"],
        "currentNode": "n1",
        "traversalType": "preorder",
        "treeType": "bst",
        "rootId": "n1",
    },
    CanonicalType.GRAPH: {
        "vertices": [
            {"id": "A", "label": "A", "state": "current"},
            {"id": "B", "label": "B", "state": "unvisited"},
            {"id": "C", "label": "C", "state": "unvisited"},
        ],
        "edges": [
            {"from": "A", "to": "B", "weight": 4},
            {"from": "B", "to": "C", "weight": 1},
        ],
        "algorithm": "dijkstra",
        "currentVertex": "A",
        "visitedOrder": ["A"],
        "directed": False,
    },
    CanonicalType.LINKEDLIST: {
        "nodes": [
            {"id": "n1", "value": 1, "next": "n2"},
            {"id": "n2", "value": 2, "next": None},
        ],
        "head": "n1",
        "tail": "n2",
    },
    CanonicalType.RECURSION: {
        "callStack": [
            {"function": "fib", "params": {"n": 3}, "level": 0, "state": "active"},
            {"function": "fib", "params": {"n": 2}, "level": 1, "state": "active"},
        ],
        "currentCall": 1,
        "baseCase": False,
    },
    CanonicalType.DP: {
        "matrix": [
            [0, 0, 0],
            [0, 1, 1],
            [0, 1, 2],
        ],
    },
    CanonicalType.STACK: {
        "elements": [3, 1, 4],
        "top": 2,
        "capacity": 10,
    },
    CanonicalType.QUEUE: {
        "elements": [3, 1, 4],
        "front": 0,
        "rear": 2,
        "capacity": 10,
    },
    CanonicalType.RESULTS: {
        "results": {"answer": 3, "explanation": "Longest substring without repeats is 'abc'"},
        "statistics": {"comparisons": 12},
    },
    CanonicalType.HYBRID: {
        "arrays": [{"name": "nums", "values": [2, 7, 11, 15], "highlights": {"current": [1]}}],
        "hashMap": {"2": 0, "7": 1, "11": 2, "15": 3},
        "pointers": [{"name": "i", "position": 1}],
    },
}


def expected_format(canonical_type: CanonicalType) -> dict[str, Any]:
    """Deep copy of the documented example for a type."""
    return copy.deepcopy(EXPECTED_FORMATS[canonical_type])
