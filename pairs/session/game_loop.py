"""
Game Loop - Host-side driver that feeds real time into the controller.

The controller only knows about tick(dt). The loop owns the clock:
- sync(): event-driven hosts (HTTP) call it before handling input
- pump(): blocking hosts (terminal) call it to let pending delays play out

Clock and sleep are injectable so tests can run on fake time.
"""

from __future__ import annotations
from enum import Enum
import time
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .controller import SessionController


class LoopState(Enum):
    """What the host should do next."""
    IDLE = "idle"  # No game yet
    WAITING_INPUT = "waiting_input"  # Player may pick a card
    BUSY = "busy"  # Preview or comparison playing out
    GAME_OVER = "game_over"  # Won; restart pending


class GameLoop:
    """
    Usage:
        loop = GameLoop(controller)
        controller.resume()

        while running:
            loop.sync()
            ...
    """

    def __init__(
        self,
        controller: SessionController,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.controller = controller
        self.clock = clock
        self._last = clock()

    @property
    def state(self) -> LoopState:
        from .controller import SessionPhase

        phase = self.controller.phase
        if phase is SessionPhase.IDLE:
            return LoopState.IDLE
        if phase is SessionPhase.COMPLETE:
            return LoopState.GAME_OVER
        if phase in (SessionPhase.PREVIEW, SessionPhase.COMPARING):
            return LoopState.BUSY
        return LoopState.WAITING_INPUT

    def sync(self) -> float:
        """Advance the controller by the wall time since the last sync."""
        now = self.clock()
        dt = max(0.0, now - self._last)
        self._last = now
        if dt > 0:
            self.controller.tick(dt)
        return dt

    def step(self, dt: float) -> int:
        """Advance by a fixed amount, independent of the clock."""
        return self.controller.tick(dt)

    def pump(
        self,
        max_seconds: float = 10.0,
        frame: float = 1 / 30,
        sleep: Callable[[float], None] = time.sleep,
        until: Callable[[], bool] | None = None,
    ) -> float:
        """
        Block until no deferred callbacks are pending, or until the
        optional until() predicate turns true.

        Returns the number of frame-seconds waited; stops after
        max_seconds either way.
        """
        waited = 0.0
        self.sync()
        while self.controller.scheduler.has_pending() and waited < max_seconds:
            if until is not None and until():
                break
            sleep(frame)
            self.sync()
            waited += frame
        return waited
