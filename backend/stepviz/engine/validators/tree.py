"""Tree payload validation: referential integrity, shape and BST checks."""

from __future__ import annotations

import math
from typing import Any

from stepviz.engine.registry import validator
from stepviz.engine.types import CanonicalType
from stepviz.engine.validators.base import (
    BaseValidator,
    ValidationResult,
    drop_bad_coordinates,
    has_id,
    is_number,
)

NODE_STATES = ("normal", "visited", "current", "target", "highlighted")
BST_TYPES = ("bst", "binary_search_tree")
BINARY_TYPES = ("binary", "bst", "binary_search_tree")


def children_map(edges: list[dict[str, Any]], known: set[Any] | None = None) -> dict[Any, list[Any]]:
    """Parent id → child ids in edge order; edges with unknown endpoints are skipped."""
    children: dict[Any, list[Any]] = {}
    for edge in edges:
        src, dst = edge.get("from"), edge.get("to")
        if src is None or dst is None:
            continue
        if known is not None and (src not in known or dst not in known):
            continue
        children.setdefault(src, []).append(dst)
    return children


def find_roots(node_ids: list[Any], edges: list[dict[str, Any]]) -> list[Any]:
    has_incoming = {e.get("to") for e in edges}
    return [nid for nid in node_ids if nid not in has_incoming]


def subtree_heights(node_ids: list[Any], children: dict[Any, list[Any]]) -> dict[Any, int]:
    """Height (in nodes) of every subtree; cycles are cut where they close."""
    heights: dict[Any, int] = {}
    for start in node_ids:
        if start in heights:
            continue
        on_path: set[Any] = {start}
        stack: list[tuple[Any, int]] = [(start, 0)]
        while stack:
            node, child_idx = stack[-1]
            kids = children.get(node, [])
            if child_idx < len(kids):
                stack[-1] = (node, child_idx + 1)
                kid = kids[child_idx]
                if kid not in heights and kid not in on_path:
                    on_path.add(kid)
                    stack.append((kid, 0))
                continue
            stack.pop()
            on_path.discard(node)
            heights[node] = 1 + max((heights.get(k, 0) for k in kids), default=0)
    return heights


def max_breadth(root: Any, children: dict[Any, list[Any]]) -> int:
    widest = 0
    seen = {root}
    level = [root]
    while level:
        widest = max(widest, len(level))
        nxt = []
        for node in level:
            for kid in children.get(node, []):
                if kid not in seen:
                    seen.add(kid)
                    nxt.append(kid)
        level = nxt
    return widest


def _numeric(value: Any) -> float | None:
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


@validator(CanonicalType.TREE, description="Nodes, edges, shape, BST ordering and balance")
class TreeValidator(BaseValidator):
    def _validate(self, data: Any) -> ValidationResult:
        if not isinstance(data, dict):
            self.add_error(f"must be an object but was {type(data).__name__}", "data")
            return self.fallback_result()

        sanitized = self.sanitize(data)
        nodes = sanitized["nodes"]
        if not self.exists(nodes, "nodes") or not self.is_list(nodes, "nodes"):
            return self.fallback_result()

        if not isinstance(sanitized["edges"], list):
            self.add_warning("edges must be a list; ignoring", "edges")
            sanitized["edges"] = []

        for i, node in enumerate(nodes):
            self._validate_node(node, f"nodes[{i}]")

        node_ids = [n["id"] for n in nodes if has_id(n)]
        known = set(node_ids)
        for i, edge in enumerate(sanitized["edges"]):
            self._validate_edge(edge, known, f"edges[{i}]")

        edges = [e for e in sanitized["edges"] if isinstance(e, dict)]
        self._detect_edge_cases(node_ids, edges, known)
        self._detect_pitfalls(sanitized, nodes, edges, known)

        usable = [drop_bad_coordinates(n) for n in nodes if has_id(n)]
        if nodes and not usable:
            return self.fallback_result()
        sanitized["nodes"] = usable
        sanitized["edges"] = [e for e in edges if e.get("from") in known and e.get("to") in known]
        return self.result(sanitized)

    @staticmethod
    def sanitize(data: dict[str, Any]) -> dict[str, Any]:
        return {
            "nodes": data.get("nodes"),
            "edges": data.get("edges") or [],
            "traversalPath": data.get("traversalPath") or [],
            "currentNode": data.get("currentNode"),
            "traversalType": data.get("traversalType") or "none",
            "operations": data.get("operations") or [],
            "treeType": data.get("treeType") or "binary",
            "rootId": data.get("rootId"),
        }

    def _validate_node(self, node: Any, prefix: str) -> None:
        if not isinstance(node, dict):
            self.add_error("must be an object", prefix)
            return
        if not self.exists(node.get("id"), f"{prefix}.id"):
            return
        if node.get("value") is None:
            self.add_warning("Node value is missing", f"{prefix}.value")
        for axis in ("x", "y"):
            if axis in node and node[axis] is not None and not self.is_number(node[axis], f"{prefix}.{axis}"):
                return
        state = node.get("state")
        if state and state not in NODE_STATES:
            self.add_warning(f"Unknown node state: {state}", f"{prefix}.state")

    def _validate_edge(self, edge: Any, known: set[Any], prefix: str) -> None:
        if not isinstance(edge, dict):
            self.add_error("must be an object", prefix)
            return
        src, dst = edge.get("from"), edge.get("to")
        if not self.exists(src, f"{prefix}.from") or not self.exists(dst, f"{prefix}.to"):
            return
        if src not in known:
            self.add_error(f"References non-existent node: {src}", f"{prefix}.from")
        if dst not in known:
            self.add_error(f"References non-existent node: {dst}", f"{prefix}.to")
        if src == dst:
            self.add_edge_case("Self-loop detected - ensure proper handling")

    def _detect_edge_cases(self, node_ids: list[Any], edges: list[dict[str, Any]], known: set[Any]) -> None:
        if not node_ids:
            self.add_edge_case("Empty tree - ensure empty state is handled properly")
            return

        if len(node_ids) == 1:
            self.add_edge_case("Single node tree - ensure single-node algorithms work correctly")
        else:
            referenced = {e.get("from") for e in edges} | {e.get("to") for e in edges}
            disconnected = [nid for nid in node_ids if nid not in referenced]
            if disconnected:
                self.add_edge_case(f"{len(disconnected)} disconnected nodes detected")

        roots = find_roots(node_ids, edges)
        if len(roots) > 1:
            self.add_edge_case(f"Multiple root nodes detected ({len(roots)}) - may indicate forest structure")
        if not roots:
            self.add_edge_case("No root node found - may indicate circular structure")
            return

        children = children_map(edges, known)
        heights = subtree_heights(node_ids, children)
        depth = heights.get(roots[0], 1)
        if depth > self.config.deep_tree_threshold:
            self.add_edge_case(f"Very deep tree (depth: {depth}) - may affect visualization performance")

        breadth = max_breadth(roots[0], children)
        if breadth > self.config.wide_tree_threshold:
            self.add_edge_case(f"Very wide tree (max width: {breadth}) - may affect visualization layout")

    def _detect_pitfalls(
        self,
        sanitized: dict[str, Any],
        nodes: list[Any],
        edges: list[dict[str, Any]],
        known: set[Any],
    ) -> None:
        tree_type = str(sanitized["treeType"]).lower()
        node_ids = [n["id"] for n in nodes if has_id(n)]
        children = children_map(edges, known)

        if tree_type in BST_TYPES:
            violations = self.bst_violations(nodes, edges, children)
            if violations:
                self.add_pitfall("BST property violations detected - tree may not be a valid BST")

        if tree_type in BINARY_TYPES:
            for node_id, kids in children.items():
                if len(kids) > 2:
                    self.add_pitfall(f"Node {node_id} has {len(kids)} children in binary tree")

            if len(node_ids) >= 3 and self.is_unbalanced(node_ids, children):
                self.add_pitfall("Tree is significantly unbalanced - may affect algorithm performance")

        if sanitized["traversalType"] != "none" and not sanitized["traversalPath"]:
            self.add_pitfall("Traversal type specified but no traversal path provided")

    @staticmethod
    def bst_violations(
        nodes: list[Any],
        edges: list[dict[str, Any]],
        children: dict[Any, list[Any]],
    ) -> list[str]:
        """Walk from the root with (low, high) bounds; first child is left, second right."""
        values = {n["id"]: n.get("value") for n in nodes if has_id(n)}
        roots = find_roots(list(values), edges)
        if not roots:
            return []

        violations: list[str] = []
        seen: set[Any] = set()
        stack: list[tuple[Any, float, float]] = [(roots[0], float("-inf"), float("inf"))]
        while stack:
            node_id, low, high = stack.pop()
            if node_id in seen or node_id not in values:
                continue
            seen.add(node_id)
            value = _numeric(values[node_id])
            if value is None:
                continue
            if value <= low or value >= high:
                violations.append(f"Node {node_id} (value: {values[node_id]}) violates BST property")
            kids = children.get(node_id, [])
            if len(kids) >= 1:
                stack.append((kids[0], low, value))
            if len(kids) >= 2:
                stack.append((kids[1], value, high))
        return violations

    @staticmethod
    def is_unbalanced(node_ids: list[Any], children: dict[Any, list[Any]]) -> bool:
        heights = subtree_heights(node_ids, children)
        for node_id in node_ids:
            kids = children.get(node_id, [])
            left = heights.get(kids[0], 0) if kids else 0
            right = heights.get(kids[1], 0) if len(kids) > 1 else 0
            if abs(left - right) > 1:
                return True
        return False
