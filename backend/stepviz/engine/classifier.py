"""Type classification: decide which canonical schema a step payload uses.

A producer hint is trusted only when the payload carries that type's
required marker; otherwise the payload's own structure decides.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from stepviz.engine.config import PipelineConfig
from stepviz.engine.types import CanonicalType, map_to_canonical_type
from stepviz.engine.validators.dp import find_matrix
from stepviz.engine.validators.string import STRING_FIELDS

logger = logging.getLogger(__name__)

_HASHMAP_FIELDS = ("hashMap", "map", "dictionary")

# Algorithm families → the structure they are usually visualized on
_ALGORITHM_TYPES: dict[str, CanonicalType] = {
    "sliding_window": CanonicalType.ARRAY,
    "two_pointer": CanonicalType.ARRAY,
    "two_pointers": CanonicalType.ARRAY,
    "binary_search": CanonicalType.ARRAY,
    "sorting": CanonicalType.ARRAY,
    "dfs": CanonicalType.GRAPH,
    "bfs": CanonicalType.GRAPH,
    "graph": CanonicalType.GRAPH,
    "tree_traversal": CanonicalType.TREE,
    "linked_list": CanonicalType.LINKEDLIST,
    "recursion": CanonicalType.RECURSION,
    "backtracking": CanonicalType.RECURSION,
}


@dataclass
class StructureFlags:
    """Which structures a payload carries, with the sizes the hybrid rule needs."""

    array: bool = False
    string: bool = False
    hashmap: bool = False
    tree: bool = False
    graph: bool = False
    linkedlist: bool = False
    nodes: bool = False
    elements: bool = False
    results: bool = False
    pointers: bool = False
    call_stack: bool = False
    matrix: bool = False
    queue_markers: bool = False

    array_size: int = 0
    string_length: int = 0
    hashmap_size: int = 0

    @property
    def presence_count(self) -> int:
        return sum((
            self.array, self.string, self.hashmap, self.tree, self.graph,
            self.linkedlist, self.elements, self.results, self.pointers,
            self.call_stack, self.matrix,
        ))

    def strong_count(self, config: PipelineConfig) -> int:
        return sum((
            self.array and self.array_size >= config.hybrid_array_min_elements,
            self.string and self.string_length >= config.hybrid_string_min_length,
            self.hashmap and self.hashmap_size > config.hybrid_hashmap_threshold,
        ))


def _is_2d(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and isinstance(value[0], list)


def _non_empty(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (dict, list, str)):
        return bool(value)
    return True


def structure_flags(data: Any) -> StructureFlags:
    flags = StructureFlags()

    if isinstance(data, list):
        flags.array = True
        flags.array_size = len(data)
        flags.matrix = _is_2d(data)
        return flags
    if isinstance(data, str):
        flags.string = True
        flags.string_length = len(data)
        return flags
    if not isinstance(data, dict):
        return flags

    arrays = data.get("arrays")
    if isinstance(arrays, list):
        flags.array = True
        flags.array_size = sum(
            len(a["values"]) if isinstance(a, dict) and isinstance(a.get("values"), list) else 1
            for a in arrays
        )
    elif isinstance(data.get("array"), list):
        flags.array = True
        flags.array_size = len(data["array"])

    for key in STRING_FIELDS:
        if isinstance(data.get(key), str):
            flags.string = True
            flags.string_length = len(data[key])
            break

    for key in _HASHMAP_FIELDS:
        if isinstance(data.get(key), dict) and data[key]:
            flags.hashmap = True
            flags.hashmap_size = len(data[key])
            break

    nodes = data.get("nodes")
    edges = data.get("edges")
    flags.nodes = isinstance(nodes, list)
    node_dicts = [n for n in nodes if isinstance(n, dict)] if flags.nodes else []
    flags.tree = (
        "tree" in data
        or "root" in data
        or any("parent" in n for n in node_dicts)
        or (flags.nodes and isinstance(edges, list))
    )
    flags.graph = "graph" in data or (isinstance(data.get("vertices"), list) and isinstance(edges, list))
    flags.linkedlist = any("next" in n for n in node_dicts) or "head" in data

    flags.elements = isinstance(data.get("elements"), list)
    flags.queue_markers = "front" in data or "rear" in data
    flags.results = _non_empty(data.get("results"))
    flags.pointers = isinstance(data.get("pointers"), list) and bool(data["pointers"])
    flags.call_stack = isinstance(data.get("callStack"), list)
    flags.matrix = _is_2d(find_matrix(data))
    return flags


def _hint_supported(hint: CanonicalType, flags: StructureFlags) -> bool:
    """Does the payload carry the marker the hinted type requires?"""
    match hint:
        case CanonicalType.RECURSION:
            return flags.call_stack
        case CanonicalType.TREE:
            return flags.tree
        case CanonicalType.GRAPH:
            return flags.graph
        case CanonicalType.ARRAY:
            return flags.array or flags.pointers
        case CanonicalType.DP:
            return flags.matrix or flags.array
        case CanonicalType.STRING:
            return flags.string
        case CanonicalType.HASHMAP:
            return flags.hashmap
        case CanonicalType.LINKEDLIST:
            return flags.nodes
        case CanonicalType.STACK | CanonicalType.QUEUE:
            return flags.elements
        case CanonicalType.RESULTS:
            return flags.results
        case CanonicalType.HYBRID:
            return flags.presence_count >= 2
    return False


def detect_structure(data: Any, config: PipelineConfig | None = None) -> CanonicalType:
    """Classify by structure alone, ignoring any producer hint."""
    config = config or PipelineConfig()
    if not isinstance(data, dict) or not data:
        return CanonicalType.ARRAY

    flags = structure_flags(data)
    if flags.strong_count(config) >= 2:
        return CanonicalType.HYBRID

    if flags.results and not (flags.array or flags.hashmap or flags.string):
        return CanonicalType.RESULTS
    if flags.matrix:
        return CanonicalType.DP
    if flags.string and (not flags.array or flags.pointers):
        return CanonicalType.STRING
    if flags.hashmap and (flags.hashmap_size > config.hybrid_hashmap_threshold or not flags.array):
        return CanonicalType.HASHMAP
    if flags.call_stack:
        return CanonicalType.RECURSION
    if flags.tree:
        return CanonicalType.TREE
    if flags.graph:
        return CanonicalType.GRAPH
    if flags.linkedlist:
        return CanonicalType.LINKEDLIST
    if flags.elements:
        return CanonicalType.QUEUE if flags.queue_markers else CanonicalType.STACK
    return CanonicalType.ARRAY


def payload_data(visualization: Any) -> Any:
    """The ``data`` of a visualization, or its inline fields when ``data`` is absent."""
    if not isinstance(visualization, dict):
        return None
    if "data" in visualization:
        return visualization["data"]
    return {k: v for k, v in visualization.items() if k != "type"}


def classify(visualization: Any, config: PipelineConfig | None = None) -> CanonicalType:
    """Resolve the canonical type of a step's ``visualization`` object."""
    config = config or PipelineConfig()
    data = payload_data(visualization)
    raw_hint = visualization.get("type") if isinstance(visualization, dict) else None

    if raw_hint is not None:
        hint = map_to_canonical_type(raw_hint)
        if hint is None:
            logger.warning("Ignoring unknown visualization type hint %r", raw_hint)
        elif _hint_supported(hint, structure_flags(data)):
            return hint
        else:
            logger.warning(
                "Type mismatch: hint %r lacks its required structure, detecting from data",
                raw_hint,
            )

    return detect_structure(data, config)


def detect_analysis_type(analysis: Any) -> CanonicalType:
    """Session-level primary type from an analysis envelope.

    Uses the first declared data structure when present, else maps the
    algorithm family. Defaults to array.
    """
    if not isinstance(analysis, dict):
        return CanonicalType.ARRAY

    structures = analysis.get("dataStructures")
    if isinstance(structures, list) and structures:
        declared = map_to_canonical_type(structures[0])
        if declared is not None:
            return declared

    algorithm = analysis.get("algorithmType")
    if isinstance(algorithm, str):
        key = algorithm.strip().lower()
        if key.startswith("dp") or key.startswith("dynamic"):
            return CanonicalType.DP
        if key in _ALGORITHM_TYPES:
            return _ALGORITHM_TYPES[key]
        declared = map_to_canonical_type(key)
        if declared is not None:
            return declared
    return CanonicalType.ARRAY
