"""
Cooperative run loop used to let pending UI work settle before a snapshot.

Work is scheduled with call_soon()/call_later() and serviced by
run_once()/drain_pending(). Nothing here blocks waiting for new work:
a drain only runs what is ready now.
"""

import heapq
import itertools
import time
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Tuple

from snapcase.config import OneTimeGate, SnapshotConfig

__all__ = [
    'RunLoop',
]


class RunLoop:
    """Single-threaded queue of ready callbacks and timers."""

    _main_gate: OneTimeGate = None

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._ready: Deque[Tuple[Callable[..., Any], tuple]] = deque()
        self._timers: List[Tuple[float, int, Callable[..., Any], tuple]] = []
        self._sequence = itertools.count()

    @classmethod
    def main(cls) -> 'RunLoop':
        """The process-wide run loop."""
        return cls._main_gate.get()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        self._ready.append((callback, args))

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        heapq.heappush(self._timers, (self._clock() + max(delay, 0.0), next(self._sequence), callback, args))

    @property
    def pending(self) -> int:
        """Number of callbacks and timers not run yet."""
        return len(self._ready) + len(self._timers)

    def _collect_due_timers(self) -> None:
        now = self._clock()
        while self._timers and self._timers[0][0] <= now:
            _, _, callback, args = heapq.heappop(self._timers)
            self._ready.append((callback, args))

    def run_once(self) -> bool:
        """
        Run a single ready callback.

        Returns:
            True if a callback was run, False if nothing was ready
        """
        self._collect_due_timers()
        if not self._ready:
            return False
        callback, args = self._ready.popleft()
        callback(*args)
        return True

    def drain_pending(self, budget: Optional[float] = None) -> bool:
        """
        Run everything that is ready now, including work scheduled while draining.

        A total time budget is used in case there is a non-stop stream of
        work. This is a best effort: running out of time only prints a warning.

        Args:
            budget: Maximum time to spend (uses config default if None)

        Returns:
            True if nothing ready is left, False if the budget ran out
        """
        budget = SnapshotConfig.DRAIN_BUDGET if budget is None else budget

        start = self._clock()
        while self.run_once():
            if self._clock() - start > budget:
                print("  Warning: unable to run all immediately pending work, the snapshot might be incorrect")
                return False
        return True


RunLoop._main_gate = OneTimeGate(RunLoop)
