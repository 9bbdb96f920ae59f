"""Pipeline configuration: thresholds and layout constants."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ForceLayoutConfig:
    """Physics constants for the force-directed graph layout."""

    width: float = 800.0
    height: float = 400.0
    center_x: float = 400.0
    center_y: float = 200.0
    # Initial jitter box around the center for vertices without coordinates
    jitter: float = 200.0
    repulsion: float = 1000.0
    attraction: float = 0.01
    damping: float = 0.9
    # Springs only pull when longer than this
    min_distance: float = 50.0
    max_iterations: int = 1000
    stability_threshold: float = 0.1
    # Vertices are clamped to [margin, size - margin]
    margin: float = 50.0
    min_content_width: float = 800.0
    content_padding: float = 200.0


@dataclass
class TreeLayoutConfig:
    """Spacing constants for the recursive tree layout."""

    level_height: float = 80.0
    top_y: float = 50.0
    min_subtree_width: float = 60.0
    min_content_width: float = 800.0
    min_content_height: float = 400.0
    # Horizontal margin added around the root's subtree
    tree_margin: float = 200.0
    # Explicit-coordinate trees get this much room past the rightmost node
    explicit_padding: float = 100.0
    # Unreachable nodes go in a diagonal side column
    side_offset_x: float = 100.0
    side_step_x: float = 120.0
    side_step_y: float = 80.0
    right_padding: float = 150.0


@dataclass
class PipelineConfig:
    """Tunables for the visualization data pipeline."""

    # Classifier: a structure is "strong" once it passes these sizes.
    # Two strong structures in one payload make it a hybrid.
    hybrid_hashmap_threshold: int = 3  # hashMap needs > 3 entries
    hybrid_array_min_elements: int = 1
    hybrid_string_min_length: int = 1

    # Array validator
    large_array_threshold: int = 1000
    large_value_magnitude: float = 1_000_000

    # Tree validator
    deep_tree_threshold: int = 10
    wide_tree_threshold: int = 20

    # Graph validator: degree above this fraction of |V| is flagged
    high_degree_ratio: float = 0.8

    # Generic validators
    deep_recursion_threshold: int = 50

    tree_layout: TreeLayoutConfig = field(default_factory=TreeLayoutConfig)
    force_layout: ForceLayoutConfig = field(default_factory=ForceLayoutConfig)

    # Seed for graph layout jitter; None draws fresh entropy
    layout_seed: int | None = None
