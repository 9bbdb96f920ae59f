"""Visualization engine: processes each step once and caches the bundle."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

import numpy as np

from stepviz.engine.cache import StepCache
from stepviz.engine.classifier import classify, detect_structure, payload_data
from stepviz.engine.config import PipelineConfig
from stepviz.engine.fallback import FallbackResolution, FallbackResolver
from stepviz.engine.layout.force_layout import ForceLayout, ForceLayoutTask, settle
from stepviz.engine.layout.result import LayoutResult
from stepviz.engine.layout.scheduler import FrameScheduler, ManualFrameScheduler
from stepviz.engine.layout.tree_layout import compute_tree_layout
from stepviz.engine.normalizer import slim
from stepviz.engine.tree_stats import TreeStats, compute_tree_stats
from stepviz.engine.types import CanonicalType, describe_type, map_to_canonical_type
from stepviz.engine.validation import validate_visualization_data
from stepviz.engine.validators.base import ValidationResult

logger = logging.getLogger(__name__)


def _merge(*lists: Any) -> list[Any]:
    """Concatenate list-valued inputs in order, dropping repeats; non-lists are skipped."""
    merged: list[Any] = []
    for items in lists:
        if not isinstance(items, list):
            continue
        for item in items:
            if item not in merged:
                merged.append(item)
    return merged


def enhance_step(step: Any, validation: ValidationResult) -> dict[str, Any]:
    """Copy of the step with detected edge cases, pitfalls and warnings folded in."""
    base = dict(step) if isinstance(step, dict) else {}
    base["edgeCases"] = _merge(base.get("edgeCases"), validation.edge_cases)
    base["pitfalls"] = _merge(base.get("pitfalls"), validation.pitfalls)
    base["validationWarnings"] = _merge(base.get("validationWarnings"), validation.warnings)
    return base


@dataclass
class StepBundle:
    """Everything a renderer needs for one step."""

    index: int
    canonical_type: CanonicalType
    detected_type: CanonicalType
    validation: ValidationResult
    slim_data: dict[str, Any]
    layout: LayoutResult | None = None
    edge_cases: list[str] = field(default_factory=list)
    pitfalls: list[str] = field(default_factory=list)
    validation_warnings: list[str] = field(default_factory=list)
    fallback: FallbackResolution | None = None
    title: str = ""
    mode: str = "default"
    tree_stats: TreeStats | None = None
    stage_errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid and not self.stage_errors

    @property
    def errors(self) -> list[str]:
        return list(self.validation.errors) + [f"{stage}: {msg}" for stage, msg in self.stage_errors.items()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "canonicalType": self.canonical_type.value,
            "detectedType": self.detected_type.value,
            "title": self.title,
            "mode": self.mode,
            "sanitizedData": self.validation.sanitized_data,
            "slimData": self.slim_data,
            "layout": self.layout.to_dict() if self.layout else None,
            "treeStats": self.tree_stats.to_dict() if self.tree_stats else None,
            "isValid": self.is_valid,
            "errors": self.errors,
            "edgeCases": list(self.edge_cases),
            "pitfalls": list(self.pitfalls),
            "validationWarnings": list(self.validation_warnings),
            "fallback": self.fallback.to_dict() if self.fallback else None,
        }


class VisualizationEngine:
    """Processes one step sequence. Owns its cache and its running graph animation.

    Steps are computed lazily on first visit and never recomputed. A new step
    sequence needs a new engine.
    """

    def __init__(
        self,
        steps: Iterable[Any],
        config: PipelineConfig | None = None,
        scheduler: FrameScheduler | None = None,
        settle_graphs: bool = True,
    ) -> None:
        self.steps = list(steps)
        self.config = config or PipelineConfig()
        self.scheduler = scheduler or ManualFrameScheduler()
        self.settle_graphs = settle_graphs
        self.cache = StepCache()
        self.resolver = FallbackResolver()
        self.current_index: int | None = None
        self._animation: ForceLayoutTask | None = None
        self._closed = False

    def __len__(self) -> int:
        return len(self.steps)

    def __enter__(self) -> VisualizationEngine:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ── Public API ──

    def process(self, index: int) -> StepBundle:
        if not 0 <= index < len(self.steps):
            raise IndexError(f"Step index {index} out of range (0..{len(self.steps) - 1})")
        return self.cache.get_or_compute(index, self._compute)

    def process_all(self) -> list[StepBundle]:
        return [self.process(i) for i in range(len(self.steps))]

    def select_step(self, index: int) -> StepBundle:
        """Make ``index`` the current step, stopping any graph animation of the previous one."""
        self.cancel_animation()
        self.current_index = index
        return self.process(index)

    def animate_graph(
        self,
        index: int,
        on_frame: Callable[[LayoutResult], None] | None = None,
        on_complete: Callable[[LayoutResult], None] | None = None,
    ) -> ForceLayoutTask | None:
        """Start a frame-by-frame force layout for a graph step. None for other types."""
        bundle = self.process(index)
        if bundle.canonical_type is not CanonicalType.GRAPH:
            return None
        self.cancel_animation()
        layout = ForceLayout(
            bundle.slim_data.get("vertices", []),
            bundle.slim_data.get("edges", []),
            self.config.force_layout,
            self._layout_rng(index),
        )
        self._animation = ForceLayoutTask(layout, self.scheduler, on_frame, on_complete).start()
        return self._animation

    def cancel_animation(self) -> None:
        if self._animation is not None:
            self._animation.cancel()
            self._animation = None

    def close(self) -> None:
        if self._closed:
            return
        self.cancel_animation()
        self._closed = True
        logger.debug("Engine closed after %d cached steps", len(self.cache))

    # ── Stages ──

    def _layout_rng(self, index: int) -> np.random.Generator:
        # Seeded per step so results don't depend on visit order
        if self.config.layout_seed is None:
            return np.random.default_rng()
        return np.random.default_rng([self.config.layout_seed, index])

    def _compute(self, index: int) -> StepBundle:
        t0 = time.perf_counter()
        step = self.steps[index]
        visualization = step.get("visualization") if isinstance(step, dict) else None
        data = payload_data(visualization)
        stage_errors: dict[str, str] = {}
        failure: Exception | None = None

        canonical = detected = CanonicalType.ARRAY
        try:
            canonical = classify(visualization, self.config)
            detected = detect_structure(data, self.config)
        except Exception as e:
            stage_errors["classify"] = str(e)
            failure = e
            logger.warning("Step %d: classify FAILED: %s", index, e)

        validation = validate_visualization_data(data, canonical, self.config)

        try:
            slim_data = slim(canonical, validation.sanitized_data)
        except Exception as e:
            stage_errors["slim"] = str(e)
            failure = failure or e
            slim_data = {}
            logger.warning("Step %d: slim FAILED: %s", index, e)

        layout: LayoutResult | None = None
        stats: TreeStats | None = None
        try:
            if canonical is CanonicalType.TREE:
                layout = compute_tree_layout(
                    slim_data.get("nodes", []),
                    slim_data.get("edges", []),
                    validation.sanitized_data.get("rootId"),
                    self.config.tree_layout,
                )
                stats = compute_tree_stats(
                    slim_data.get("nodes", []),
                    slim_data.get("edges", []),
                    validation.sanitized_data.get("rootId"),
                )
            elif canonical is CanonicalType.GRAPH and self.settle_graphs:
                layout = settle(ForceLayout(
                    slim_data.get("vertices", []),
                    slim_data.get("edges", []),
                    self.config.force_layout,
                    self._layout_rng(index),
                ))
        except Exception as e:
            stage_errors["layout"] = str(e)
            failure = failure or e
            logger.warning("Step %d: layout FAILED: %s", index, e)

        fallback: FallbackResolution | None = None
        if failure is not None:
            fallback = self.resolver.resolve(canonical, failure, data)
        elif data is None:
            fallback = self.resolver.resolve(canonical, None, None)
        elif not validation.is_valid:
            fallback = self.resolver.resolve(canonical, "; ".join(validation.errors), data)
        if fallback is not None and not slim_data:
            slim_data = slim(fallback.canonical_type, fallback.instance)

        enhanced = enhance_step(step, validation)
        hint = visualization.get("type") if isinstance(visualization, dict) else None
        title, mode = describe_type(hint if map_to_canonical_type(hint) is canonical else canonical)

        bundle = StepBundle(
            index=index,
            canonical_type=canonical,
            detected_type=detected,
            validation=validation,
            slim_data=slim_data,
            layout=layout,
            edge_cases=enhanced["edgeCases"],
            pitfalls=enhanced["pitfalls"],
            validation_warnings=enhanced["validationWarnings"],
            fallback=fallback,
            title=title,
            mode=mode,
            tree_stats=stats,
            stage_errors=stage_errors,
        )
        logger.info(
            "Step %d: %s (valid=%s, %d errors, %d edge cases, %d pitfalls) in %.1fms",
            index,
            canonical.value,
            bundle.is_valid,
            len(bundle.errors),
            len(bundle.edge_cases),
            len(bundle.pitfalls),
            (time.perf_counter() - t0) * 1000,
        )
        return bundle
