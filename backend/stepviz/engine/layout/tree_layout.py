"""Recursive subtree-width tree layout.

Each node's subtree gets ``max(min_subtree_width, sum of children widths)``
of horizontal room; parents are centered over their children. Nodes the
root cannot reach are stacked in a diagonal side column, so no node is
ever dropped.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from stepviz.engine.config import TreeLayoutConfig
from stepviz.engine.layout.result import LayoutResult
from stepviz.engine.validators.base import is_number
from stepviz.engine.validators.tree import children_map, find_roots

logger = logging.getLogger(__name__)


def _unique_nodes(nodes: list[Any]) -> list[dict[str, Any]]:
    seen: set[Any] = set()
    unique = []
    for node in nodes or []:
        if not isinstance(node, dict) or node.get("id") is None or node["id"] in seen:
            continue
        seen.add(node["id"])
        unique.append(node)
    return unique


def resolve_root(node_ids: list[Any], edges: list[dict[str, Any]], root_id: Any = None) -> Any:
    """Explicit root, else the only node without a parent, else the first node."""
    if root_id is not None and root_id in node_ids:
        return root_id
    roots = find_roots(node_ids, edges)
    if len(roots) == 1:
        return roots[0]
    return node_ids[0] if node_ids else None


def _spanning_children(root: Any, children: dict[Any, list[Any]]) -> dict[Any, list[Any]]:
    """BFS tree from root: each node is claimed by the first parent that reaches it."""
    tree: dict[Any, list[Any]] = {root: []}
    queue = deque([root])
    while queue:
        node = queue.popleft()
        for kid in children.get(node, []):
            if kid in tree:
                continue
            tree[kid] = []
            tree[node].append(kid)
            queue.append(kid)
    return tree


def _subtree_widths(root: Any, tree: dict[Any, list[Any]], min_width: float) -> dict[Any, float]:
    order = [root]
    for node in order:
        order.extend(tree[node])
    widths: dict[Any, float] = {}
    for node in reversed(order):
        widths[node] = max(min_width, sum(widths[k] for k in tree[node]))
    return widths


def compute_tree_layout(
    nodes: list[Any],
    edges: list[Any],
    root_id: Any = None,
    config: TreeLayoutConfig | None = None,
) -> LayoutResult:
    """Assign ``x``/``y`` to every node. Input node dicts are copied, never modified."""
    config = config or TreeLayoutConfig()
    unique = _unique_nodes(nodes)
    if not unique:
        return LayoutResult([], config.min_content_width, config.min_content_height)

    if all(is_number(n.get("x")) and is_number(n.get("y")) for n in unique):
        max_x = max(n["x"] for n in unique)
        max_y = max(n["y"] for n in unique)
        return LayoutResult(
            nodes=[dict(n) for n in unique],
            content_width=max(max_x + config.explicit_padding, config.min_content_width),
            content_height=max(max_y + config.level_height, config.min_content_height),
        )

    node_ids = [n["id"] for n in unique]
    edge_dicts = [e for e in edges or [] if isinstance(e, dict)]
    known = set(node_ids)
    root = resolve_root(node_ids, [e for e in edge_dicts if e.get("from") in known], root_id)

    tree = _spanning_children(root, children_map(edge_dicts, known))
    widths = _subtree_widths(root, tree, config.min_subtree_width)
    base_width = max(widths[root] + config.tree_margin, config.min_content_width)

    positions: dict[Any, tuple[float, float]] = {root: (base_width / 2, config.top_y)}
    stack = [root]
    while stack:
        node = stack.pop()
        x, y = positions[node]
        left = x - widths[node] / 2
        for kid in tree[node]:
            positions[kid] = (left + widths[kid] / 2, y + config.level_height)
            left += widths[kid]
            stack.append(kid)

    orphans = [nid for nid in node_ids if nid not in positions]
    rightmost = base_width
    for i, nid in enumerate(orphans):
        x = base_width + config.side_offset_x + config.side_step_x * i
        positions[nid] = (x, config.top_y + config.side_step_y * i)
        rightmost = max(rightmost, x)
    if orphans:
        logger.debug("Tree layout: %d unreachable nodes placed in side column", len(orphans))

    placed = []
    for node in unique:
        x, y = positions[node["id"]]
        placed.append({**node, "x": x, "y": y})

    max_y = max(y for _, y in positions.values())
    return LayoutResult(
        nodes=placed,
        content_width=max(rightmost + config.right_padding, base_width + config.right_padding, config.min_content_width),
        content_height=max(max_y + config.level_height, config.min_content_height),
    )
