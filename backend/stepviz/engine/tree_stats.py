"""Shape statistics for tree payloads, shown next to the rendered tree."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any

from stepviz.engine.layout.tree_layout import resolve_root
from stepviz.engine.validators.tree import children_map, subtree_heights


@dataclass
class TreeStats:
    node_count: int = 0
    height: int = 0
    leaf_count: int = 0
    diameter: int = 0
    balanced: bool = True
    complete: bool = True
    perfect: bool = True
    full: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeCount": self.node_count,
            "height": self.height,
            "leafCount": self.leaf_count,
            "diameter": self.diameter,
            "isBalanced": self.balanced,
            "isComplete": self.complete,
            "isPerfect": self.perfect,
            "isFull": self.full,
        }


def _diameter(node_ids: list[Any], edges: list[dict[str, Any]], known: set[Any]) -> int:
    """Longest shortest path (in edges) between any two nodes, ignoring direction."""
    adj: dict[Any, list[Any]] = {nid: [] for nid in node_ids}
    for edge in edges:
        src, dst = edge.get("from"), edge.get("to")
        if src in known and dst in known:
            adj[src].append(dst)
            adj[dst].append(src)

    best = 0
    for start in node_ids:
        dist = {start: 0}
        queue = deque([start])
        while queue:
            node = queue.popleft()
            for nxt in adj[node]:
                if nxt not in dist:
                    dist[nxt] = dist[node] + 1
                    queue.append(nxt)
        best = max(best, max(dist.values()))
    return best


def _is_complete(root: Any, children: dict[Any, list[Any]]) -> bool:
    """Level order with left/right slots: no node may follow an empty slot."""
    seen = {root}
    queue = deque([root])
    gap = False
    while queue:
        node = queue.popleft()
        kids = children.get(node, [])
        for slot in (kids[0] if kids else None, kids[1] if len(kids) > 1 else None):
            if slot is None:
                gap = True
            elif gap or slot in seen:
                return False
            else:
                seen.add(slot)
                queue.append(slot)
    return True


def compute_tree_stats(nodes: list[Any], edges: list[Any], root_id: Any = None) -> TreeStats:
    node_ids = []
    for node in nodes or []:
        if isinstance(node, dict) and node.get("id") is not None and node["id"] not in node_ids:
            node_ids.append(node["id"])
    if not node_ids:
        return TreeStats()

    known = set(node_ids)
    edge_dicts = [e for e in edges or [] if isinstance(e, dict)]
    children = children_map(edge_dicts, known)
    heights = subtree_heights(node_ids, children)
    root = resolve_root(node_ids, edge_dicts, root_id)

    leaves = [nid for nid in node_ids if not children.get(nid)]
    full = all(len(children.get(nid, [])) in (0, 2) for nid in node_ids)

    balanced = True
    for nid in node_ids:
        kids = children.get(nid, [])
        left = heights.get(kids[0], 0) if kids else 0
        right = heights.get(kids[1], 0) if len(kids) > 1 else 0
        if abs(left - right) > 1:
            balanced = False
            break

    # Perfect: full, and every leaf sits at the same depth below the root
    depths: dict[Any, int] = {root: 0}
    queue = deque([root])
    while queue:
        node = queue.popleft()
        for kid in children.get(node, []):
            if kid not in depths:
                depths[kid] = depths[node] + 1
                queue.append(kid)
    leaf_depths = {depths[nid] for nid in leaves if nid in depths}
    perfect = full and len(depths) == len(node_ids) and len(leaf_depths) <= 1

    return TreeStats(
        node_count=len(node_ids),
        height=heights.get(root, 1),
        leaf_count=len(leaves),
        diameter=_diameter(node_ids, edge_dicts, known),
        balanced=balanced,
        complete=_is_complete(root, children) and len(depths) == len(node_ids),
        perfect=perfect,
        full=full,
    )
