"""
Scheduler - Deferred callbacks driven by the host's tick.

The engine never sleeps. Anything that has to "wait" (reveal delay,
flip-back delay, preview, win-to-restart) registers a callback with a
deadline, and the host advances time with advance(dt) from its update
loop. Callbacks run on the caller's thread, in deadline order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import heapq
import itertools
import logging
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class Timer:
    """A pending deferred callback. Ordered by (deadline, sequence)."""
    deadline: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    name: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler:
    """
    Min-heap of timers on a virtual clock.

    Usage:
        scheduler = Scheduler()
        scheduler.call_later(0.6, flip_back, name="flip_back")

        # In the host update loop
        scheduler.advance(dt)
    """

    def __init__(self):
        self._now = 0.0
        self._heap: list[Timer] = []
        self._counter = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(
        self,
        delay: float,
        callback: Callable[[], None],
        *,
        name: str = "",
    ) -> Timer:
        """Run callback once the clock has moved delay seconds forward."""
        timer = Timer(
            deadline=self._now + max(0.0, delay),
            sequence=next(self._counter),
            callback=callback,
            name=name,
        )
        heapq.heappush(self._heap, timer)
        return timer

    def cancel(self, timer: Timer | None):
        """Cancel a timer. Cancelling a fired or cancelled timer is a no-op."""
        if timer is not None and timer.active:
            timer.cancelled = True

    def advance(self, dt: float) -> int:
        """
        Move the clock forward and run everything that came due.

        Callbacks scheduled by callbacks run in the same call if their
        deadline is already reached. Returns the number of callbacks run.
        """
        if dt < 0:
            raise ValueError(f"Cannot move the clock backwards: {dt}")

        target = self._now + dt
        ran = 0
        while self._heap and self._heap[0].deadline <= target:
            timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            # Callbacks observe the clock at their own deadline
            self._now = max(self._now, timer.deadline)
            timer.fired = True
            logger.debug("TIMER_FIRED", extra={"timer": timer.name, "at": self._now})
            timer.callback()
            ran += 1
        self._now = target
        return ran

    def pending(self) -> list[Timer]:
        """Active timers in firing order."""
        return sorted(t for t in self._heap if t.active)

    def has_pending(self) -> bool:
        return any(t.active for t in self._heap)

    def clear(self):
        """Cancel every pending timer."""
        for timer in self._heap:
            timer.cancelled = True
        self._heap.clear()


class InputGate:
    """
    Global click lock held while the board preview is showing.

    Owned by the session controller so its lifecycle stays auditable:
    only the preview locks it, and new game / restore always release it.
    """

    def __init__(self):
        self._locked = False
        self._reason: str | None = None

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def reason(self) -> str | None:
        return self._reason

    def lock(self, reason: str):
        self._locked = True
        self._reason = reason

    def release(self):
        self._locked = False
        self._reason = None
