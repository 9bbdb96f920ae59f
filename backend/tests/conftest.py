"""Shared test fixtures."""

from __future__ import annotations

import pytest

from stepviz.engine.config import PipelineConfig
from stepviz.engine.formats import expected_format
from stepviz.engine.types import CanonicalType
from stepviz.engine.validation import register_validators

register_validators()


# Sample payloads, one per structure the pipeline sees most often

SORT_ARRAY = {
    "arrays": [
        {
            "name": "nums",
            "values": [5, 3, 8, 1],
            "highlights": {"current": [1], "comparison": [0, 1]},
        }
    ],
    "pointers": [{"name": "i", "position": 1}],
    "operations": [{"type": "compare", "indices": [0, 1]}],
}

BST_TREE = {
    "nodes": [
        {"id": "n1", "value": 8},
        {"id": "n2", "value": 3},
        {"id": "n3", "value": 10},
        {"id": "n4", "value": 1},
        {"id": "n5", "value": 6},
    ],
    "edges": [
        {"from": "n1", "to": "n2"},
        {"from": "n1", "to": "n3"},
        {"from": "n2", "to": "n4"},
        {"from": "n2", "to": "n5"},
    ],
    "treeType": "bst",
    "rootId": "n1",
}

CYCLIC_DIGRAPH = {
    "vertices": [{"id": "A"}, {"id": "B"}, {"id": "C"}],
    "edges": [
        {"from": "A", "to": "B"},
        {"from": "B", "to": "C"},
        {"from": "C", "to": "A"},
    ],
    "directed": True,
}

HYBRID_PAYLOAD = {
    "arrays": [{"name": "nums", "values": [2, 7, 11, 15]}],
    "hashMap": {"a": 1, "b": 2, "c": 3, "d": 4},
}

CALL_STACK_PAYLOAD = {
    "callStack": [{"function": "fib", "params": {"n": 4}, "level": 0}],
}


def make_step(viz_type: str | None, data, number: int = 1, **extra) -> dict:
    visualization = {"data": data}
    if viz_type is not None:
        visualization["type"] = viz_type
    return {
        "stepNumber": number,
        "title": f"Step {number}",
        "description": "",
        "visualization": visualization,
        **extra,
    }


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig(layout_seed=7)


@pytest.fixture
def sample_steps() -> list[dict]:
    return [
        make_step("array", SORT_ARRAY, 1),
        make_step("tree", BST_TREE, 2),
        make_step("graph", expected_format(CanonicalType.GRAPH), 3),
        make_step(None, CALL_STACK_PAYLOAD, 4),
    ]
