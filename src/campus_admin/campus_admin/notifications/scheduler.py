from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple

from ..common.datetime_utils import monotonic_ms

Clock = Callable[[], int]


class TimerHandle:
    __slots__ = ("deadline_ms", "_callback", "cancelled", "fired")

    def __init__(self, deadline_ms: int, callback: Callable[[], None]):
        self.deadline_ms = deadline_ms
        self._callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def _run(self) -> None:
        self.fired = True
        self._callback()


class DeadlineScheduler:
    """Single-threaded timer queue.

    ``call_later`` registers a callback at ``now + delay_ms`` and returns a
    handle that can be cancelled on its own. Nothing runs until ``run_due``
    pumps the queue; due callbacks fire in deadline order, ties in
    registration order.
    """

    def __init__(self, clock: Clock = monotonic_ms):
        self._clock = clock
        self._heap: List[Tuple[int, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> int:
        return int(self._clock())

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now() + max(0, int(delay_ms)), callback)
        heapq.heappush(self._heap, (handle.deadline_ms, next(self._seq), handle))
        return handle

    def run_due(self, now_ms: Optional[int] = None) -> int:
        now = self.now() if now_ms is None else int(now_ms)
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle._run()
            fired += 1
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if h.active)

    def clear(self) -> None:
        for _, _, handle in self._heap:
            handle.cancel()
        self._heap.clear()
