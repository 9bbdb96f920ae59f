"""Per-engine memo of processed steps, keyed by step index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterator

if TYPE_CHECKING:
    from stepviz.engine.pipeline import StepBundle

logger = logging.getLogger(__name__)


class StepCache:
    """Write-once store of StepBundles.

    Owned by a single VisualizationEngine; a new step sequence gets a new
    engine and therefore a new cache.
    """

    def __init__(self) -> None:
        self._bundles: dict[int, StepBundle] = {}
        self.hits = 0
        self.misses = 0

    def get(self, index: int) -> StepBundle | None:
        return self._bundles.get(index)

    def get_or_compute(self, index: int, compute: Callable[[int], StepBundle]) -> StepBundle:
        bundle = self._bundles.get(index)
        if bundle is not None:
            self.hits += 1
            logger.debug("Step %d: cache hit", index)
            return bundle
        self.misses += 1
        bundle = compute(index)
        self._bundles[index] = bundle
        return bundle

    def clear(self) -> None:
        self._bundles.clear()

    def __contains__(self, index: object) -> bool:
        return index in self._bundles

    def __len__(self) -> int:
        return len(self._bundles)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._bundles))
