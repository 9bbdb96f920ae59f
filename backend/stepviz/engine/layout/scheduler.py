"""Frame schedulers that drive incremental layouts one step per frame."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    def request_frame(self, callback: FrameCallback) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class ManualFrameScheduler:
    """Frames run only when ``tick()`` is called. Used by tests and synchronous callers."""

    def __init__(self) -> None:
        self._pending: dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def tick(self) -> int:
        """Run every callback requested before this tick. Returns how many ran."""
        due = list(self._pending.items())
        ran = 0
        for handle, callback in due:
            # An earlier callback in this tick may have cancelled it
            if self._pending.pop(handle, None) is None:
                continue
            callback()
            ran += 1
        return ran

    def run_until_idle(self, max_ticks: int = 10_000) -> int:
        ticks = 0
        while self._pending and ticks < max_ticks:
            self.tick()
            ticks += 1
        return ticks


class AsyncioFrameScheduler:
    """Schedules frames on an asyncio loop at a fixed interval.

    Without an explicit loop it must be created inside a running loop.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        interval: float = 1 / 60,
    ) -> None:
        self.loop = loop or asyncio.get_running_loop()
        self.interval = interval

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.interval, callback)

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()
