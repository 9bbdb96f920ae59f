"""Graph payload validation: edge integrity, connectivity and algorithm fit."""

from __future__ import annotations

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

VERTEX_STATES = ("unvisited", "visited", "current", "target")
WEIGHTED_ALGORITHMS = ("dijkstra", "bellman_ford", "floyd_warshall")

# DFS colouring for cycle detection
_WHITE, _GRAY, _BLACK = 0, 1, 2


def adjacency(
    vertex_ids: list[Any],
    edges: list[dict[str, Any]],
    directed: bool,
) -> dict[Any, list[Any]]:
    """Adjacency list over known vertices; undirected graphs get both directions."""
    adj: dict[Any, list[Any]] = {vid: [] for vid in vertex_ids}
    for edge in edges:
        src, dst = edge.get("from"), edge.get("to")
        if src not in adj or dst not in adj:
            continue
        adj[src].append(dst)
        if not directed:
            adj[dst].append(src)
    return adj


def is_connected(vertex_ids: list[Any], adj: dict[Any, list[Any]]) -> bool:
    """Reachability from the first vertex covers every vertex."""
    if len(vertex_ids) <= 1:
        return True
    visited: set[Any] = set()
    stack = [vertex_ids[0]]
    while stack:
        vid = stack.pop()
        if vid in visited:
            continue
        visited.add(vid)
        stack.extend(n for n in adj.get(vid, []) if n not in visited)
    return len(visited) == len(set(vertex_ids))


def has_cycle(vertex_ids: list[Any], adj: dict[Any, list[Any]]) -> bool:
    """White/gray/black DFS; a gray neighbour closes a cycle."""
    color = {vid: _WHITE for vid in vertex_ids}
    for start in vertex_ids:
        if color[start] != _WHITE:
            continue
        color[start] = _GRAY
        stack: list[tuple[Any, int]] = [(start, 0)]
        while stack:
            vid, idx = stack[-1]
            neighbours = adj.get(vid, [])
            if idx < len(neighbours):
                stack[-1] = (vid, idx + 1)
                nxt = neighbours[idx]
                if color.get(nxt) == _GRAY:
                    return True
                if color.get(nxt) == _WHITE:
                    color[nxt] = _GRAY
                    stack.append((nxt, 0))
            else:
                color[vid] = _BLACK
                stack.pop()
    return False


@validator(CanonicalType.GRAPH, description="Vertices, edges, connectivity, cycles and algorithm pitfalls")
class GraphValidator(BaseValidator):
    def _validate(self, data: Any) -> ValidationResult:
        if not isinstance(data, dict):
            self.add_error(f"must be an object but was {type(data).__name__}", "data")
            return self.fallback_result()

        sanitized = self.sanitize(data)
        vertices = sanitized["vertices"]
        if not self.exists(vertices, "vertices") or not self.is_list(vertices, "vertices"):
            return self.fallback_result()

        if not isinstance(sanitized["edges"], list):
            self.add_warning("edges must be a list; ignoring", "edges")
            sanitized["edges"] = []

        for i, vertex in enumerate(vertices):
            self._validate_vertex(vertex, f"vertices[{i}]")

        vertex_ids = [v["id"] for v in vertices if has_id(v)]
        known = set(vertex_ids)
        for i, edge in enumerate(sanitized["edges"]):
            self._validate_edge(edge, known, f"edges[{i}]")

        edges = [e for e in sanitized["edges"] if isinstance(e, dict)]
        adj = adjacency(vertex_ids, edges, sanitized["directed"])
        connected = is_connected(vertex_ids, adj)

        self._detect_edge_cases(vertex_ids, edges, adj, connected, sanitized["directed"])
        self._detect_pitfalls(sanitized, vertex_ids, edges, connected)

        # Renderers only get vertices with ids and edges between them
        usable = [drop_bad_coordinates(v) for v in vertices if has_id(v)]
        if vertices and not usable:
            return self.fallback_result()
        sanitized["vertices"] = usable
        sanitized["edges"] = [e for e in edges if e.get("from") in known and e.get("to") in known]
        return self.result(sanitized)

    @staticmethod
    def sanitize(data: dict[str, Any]) -> dict[str, Any]:
        directed = data.get("directed")
        return {
            "vertices": data.get("vertices"),
            "edges": data.get("edges") or [],
            "algorithm": data.get("algorithm") or "none",
            "currentVertex": data.get("currentVertex"),
            "visitedOrder": data.get("visitedOrder") or [],
            "directed": bool(directed) if directed is not None else False,
        }

    def _validate_vertex(self, vertex: Any, prefix: str) -> None:
        if not isinstance(vertex, dict):
            self.add_error("must be an object", prefix)
            return
        if not self.exists(vertex.get("id"), f"{prefix}.id"):
            return
        for key in ("x", "y", "distance"):
            if vertex.get(key) is not None and not self.is_number(vertex[key], f"{prefix}.{key}"):
                return
        state = vertex.get("state")
        if state and state not in VERTEX_STATES:
            self.add_warning(f"Unknown vertex state: {state}", f"{prefix}.state")

    def _validate_edge(self, edge: Any, known: set[Any], prefix: str) -> None:
        if not isinstance(edge, dict):
            self.add_error("must be an object", prefix)
            return
        src, dst = edge.get("from"), edge.get("to")
        if not self.exists(src, f"{prefix}.from") or not self.exists(dst, f"{prefix}.to"):
            return
        if src not in known:
            self.add_error(f"References non-existent vertex: {src}", f"{prefix}.from")
        if dst not in known:
            self.add_error(f"References non-existent vertex: {dst}", f"{prefix}.to")

        weight = edge.get("weight")
        if weight is not None and not self.is_number(weight, f"{prefix}.weight"):
            return
        if src == dst:
            self.add_edge_case("Self-loop detected in graph")
        if weight is not None and weight < 0:
            self.add_edge_case("Negative weight edge detected - ensure algorithm supports negative weights")

    def _detect_edge_cases(
        self,
        vertex_ids: list[Any],
        edges: list[dict[str, Any]],
        adj: dict[Any, list[Any]],
        connected: bool,
        directed: bool,
    ) -> None:
        n, m = len(vertex_ids), len(edges)
        if n == 0:
            self.add_edge_case("Empty graph - ensure empty state is handled properly")
            return
        if n == 1:
            self.add_edge_case("Single vertex graph - ensure single-vertex algorithms work correctly")

        if not connected:
            self.add_edge_case("Disconnected graph detected - may affect traversal algorithms")

        max_edges = n * (n - 1) if directed else n * (n - 1) // 2
        if n > 1 and m == max_edges:
            self.add_edge_case("Complete graph detected - may affect algorithm performance")

        if m > 2 * n:
            self.add_edge_case(f"Dense graph ({m} edges, {n} vertices) - may affect visualization performance")
        if m < n - 1:
            self.add_edge_case("Sparse graph detected - may be disconnected")

        if directed and has_cycle(vertex_ids, adj):
            self.add_edge_case("Cycles detected in directed graph")

    def _detect_pitfalls(
        self,
        sanitized: dict[str, Any],
        vertex_ids: list[Any],
        edges: list[dict[str, Any]],
        connected: bool,
    ) -> None:
        algorithm = str(sanitized["algorithm"]).lower()
        directed = sanitized["directed"]

        if algorithm == "dijkstra" and any(is_number(e.get("weight")) and e["weight"] < 0 for e in edges):
            self.add_pitfall("Dijkstra's algorithm doesn't work with negative weights - use Bellman-Ford instead")

        if algorithm in ("dfs", "bfs") and not connected:
            self.add_pitfall("DFS/BFS on disconnected graph will not visit all vertices")

        seen: set[Any] = set()
        duplicates: list[str] = []
        for edge in edges:
            src, dst = edge.get("from"), edge.get("to")
            key = (src, dst) if directed else frozenset((src, dst))
            if key in seen:
                label = f"{src}->{dst}" if directed else "-".join(sorted((str(src), str(dst))))
                duplicates.append(label)
            seen.add(key)
        if duplicates:
            self.add_pitfall(f"Duplicate edges detected: {', '.join(duplicates)}")

        if algorithm in WEIGHTED_ALGORITHMS:
            missing = sum(1 for e in edges if e.get("weight") is None)
            if missing:
                self.add_pitfall(f"{missing} edges missing weights for weighted algorithm")

        known = set(vertex_ids)
        degrees: dict[Any, int] = {}
        for edge in edges:
            src, dst = edge.get("from"), edge.get("to")
            if src in known:
                degrees[src] = degrees.get(src, 0) + 1
            if not directed and dst in known:
                degrees[dst] = degrees.get(dst, 0) + 1
        limit = len(vertex_ids) * self.config.high_degree_ratio
        for vertex_id, degree in degrees.items():
            if degree > limit:
                self.add_pitfall(
                    f"Vertex {vertex_id} has very high degree ({degree}) - may affect visualization clarity"
                )
