"""Force-directed graph layout as an explicit state machine.

``ForceLayout.step()`` advances exactly one physics iteration. Callers
either drive it per frame through ``ForceLayoutTask`` (cancellable) or run
it to completion with ``settle()``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np

from stepviz.engine.config import ForceLayoutConfig
from stepviz.engine.layout.result import LayoutResult
from stepviz.engine.layout.scheduler import FrameScheduler
from stepviz.engine.validators.base import is_number

logger = logging.getLogger(__name__)


class ForceLayout:
    """Repulsion between all vertex pairs, spring attraction along edges."""

    def __init__(
        self,
        vertices: list[Any],
        edges: list[Any],
        config: ForceLayoutConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or ForceLayoutConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

        seen: set[Any] = set()
        self.vertices: list[dict[str, Any]] = []
        for vertex in vertices or []:
            if isinstance(vertex, dict) and vertex.get("id") is not None and vertex["id"] not in seen:
                seen.add(vertex["id"])
                self.vertices.append(vertex)

        index = {v["id"]: i for i, v in enumerate(self.vertices)}
        pairs = [
            (index[e["from"]], index[e["to"]])
            for e in edges or []
            if isinstance(e, dict) and e.get("from") in index and e.get("to") in index and e["from"] != e["to"]
        ]
        self._edges = np.array(pairs, dtype=int).reshape(-1, 2)

        n = len(self.vertices)
        self.positions = np.zeros((n, 2))
        self.velocities = np.zeros((n, 2))
        center = np.array([self.config.center_x, self.config.center_y])
        for i, vertex in enumerate(self.vertices):
            if is_number(vertex.get("x")) and is_number(vertex.get("y")):
                self.positions[i] = (vertex["x"], vertex["y"])
            else:
                self.positions[i] = center + (self.rng.random(2) - 0.5) * self.config.jitter

        self.iteration = 0
        self.max_speed = float("inf")

    @property
    def stable(self) -> bool:
        return self.max_speed < self.config.stability_threshold

    @property
    def done(self) -> bool:
        return not self.vertices or self.iteration >= self.config.max_iterations or self.stable

    def step(self) -> bool:
        """Run one iteration. Returns False once the layout has terminated."""
        if self.done:
            return False

        cfg = self.config
        forces = np.zeros_like(self.positions)

        delta = self.positions[:, None, :] - self.positions[None, :, :]
        dist = np.linalg.norm(delta, axis=2)
        np.fill_diagonal(dist, np.inf)
        # Coincident vertices exert no force on each other
        dist[dist == 0] = np.inf
        magnitude = cfg.repulsion / dist**2
        forces += np.sum(delta / dist[:, :, None] * magnitude[:, :, None], axis=1)

        if len(self._edges):
            src, dst = self._edges[:, 0], self._edges[:, 1]
            pull = self.positions[dst] - self.positions[src]
            length = np.linalg.norm(pull, axis=1)
            stretched = length > cfg.min_distance
            if np.any(stretched):
                excess = cfg.attraction * (length[stretched] - cfg.min_distance)
                spring = pull[stretched] / length[stretched, None] * excess[:, None]
                np.add.at(forces, src[stretched], spring)
                np.add.at(forces, dst[stretched], -spring)

        self.velocities = (self.velocities + forces) * cfg.damping
        self.positions += self.velocities
        np.clip(self.positions[:, 0], cfg.margin, cfg.width - cfg.margin, out=self.positions[:, 0])
        np.clip(self.positions[:, 1], cfg.margin, cfg.height - cfg.margin, out=self.positions[:, 1])

        self.max_speed = float(np.max(np.linalg.norm(self.velocities, axis=1)))
        self.iteration += 1
        return True

    def result(self) -> LayoutResult:
        placed = [
            {**vertex, "x": float(x), "y": float(y)}
            for vertex, (x, y) in zip(self.vertices, self.positions)
        ]
        if len(self.positions):
            span = float(np.max(self.positions[:, 0]) - np.min(self.positions[:, 0]))
        else:
            span = 0.0
        return LayoutResult(
            nodes=placed,
            content_width=max(span + self.config.content_padding, self.config.min_content_width),
            content_height=self.config.height,
            stable=self.stable or not self.vertices,
            iterations=self.iteration,
        )


def settle(layout: ForceLayout) -> LayoutResult:
    """Run the layout to termination without frames."""
    while layout.step():
        pass
    logger.debug(
        "Force layout settled: %d vertices in %d iterations (stable=%s)",
        len(layout.vertices),
        layout.iteration,
        layout.stable,
    )
    return layout.result()


class ForceLayoutTask:
    """Drives a ForceLayout one step per scheduler frame.

    ``cancel()`` is idempotent; once it returns no further step or callback runs.
    """

    def __init__(
        self,
        layout: ForceLayout,
        scheduler: FrameScheduler,
        on_frame: Callable[[LayoutResult], None] | None = None,
        on_complete: Callable[[LayoutResult], None] | None = None,
    ) -> None:
        self.layout = layout
        self.scheduler = scheduler
        self.on_frame = on_frame
        self.on_complete = on_complete
        self._handle: Any = None
        self._started = False
        self._cancelled = False
        self._completed = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def running(self) -> bool:
        return self._started and not (self._cancelled or self._completed)

    def start(self) -> ForceLayoutTask:
        if self._started or self._cancelled:
            return self
        self._started = True
        self._schedule()
        return self

    def cancel(self) -> None:
        if self._cancelled or self._completed:
            return
        self._cancelled = True
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None
        logger.debug("Force layout cancelled at iteration %d", self.layout.iteration)

    def _schedule(self) -> None:
        self._handle = self.scheduler.request_frame(self._frame)

    def _frame(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        self.layout.step()
        if self.on_frame is not None:
            self.on_frame(self.layout.result())
        # on_frame may have cancelled us
        if self._cancelled:
            return
        if self.layout.done:
            self._completed = True
            if self.on_complete is not None:
                self.on_complete(self.layout.result())
            return
        self._schedule()
