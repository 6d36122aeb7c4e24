"""
Session Module - One pairs game at a time.

The session controller is built once by the process entry point and
handed its collaborators (config, presenter, save store, scheduler):
nothing is looked up globally.

- SessionController: selection/comparison state machine, scoring, win
- Presenter: outbound UI notifications (faces, sounds, counters)
- GameLoop: feeds host time into the controller
"""

from .controller import (
    SessionController,
    SessionPhase,
    Selection,
    SelectionKind,
    SelectionResult,
)
from .presenter import (
    Presenter,
    NullPresenter,
    EventLogPresenter,
    TerminalPresenter,
    PresentationEvent,
    SoundBank,
    SoundKind,
)
from .game_loop import GameLoop, LoopState

__all__ = [
    "SessionController",
    "SessionPhase",
    "Selection",
    "SelectionKind",
    "SelectionResult",
    "Presenter",
    "NullPresenter",
    "EventLogPresenter",
    "TerminalPresenter",
    "PresentationEvent",
    "SoundBank",
    "SoundKind",
    "GameLoop",
    "LoopState",
]
