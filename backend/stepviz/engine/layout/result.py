"""Positioned output shared by the tree and graph layouts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LayoutResult:
    nodes: list[dict[str, Any]] = field(default_factory=list)
    content_width: float = 800.0
    content_height: float = 400.0
    stable: bool = True
    iterations: int = 0

    def position_of(self, node_id: Any) -> tuple[float, float] | None:
        for node in self.nodes:
            if node.get("id") == node_id:
                return node["x"], node["y"]
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": self.nodes,
            "contentWidth": self.content_width,
            "contentHeight": self.content_height,
            "stable": self.stable,
            "iterations": self.iterations,
        }
