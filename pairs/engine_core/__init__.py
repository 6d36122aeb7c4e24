"""
Engine Core - Board model, layout generation and timing primitives.

The engine core:
1. Models the board (cards, fixed layouts)
2. Generates shuffled pair layouts
3. Defines the error taxonomy
4. Provides the tick-driven scheduler and the input gate
"""

from .state import BONUS_ID, Board, BoardLayout, Card
from .layout import (
    BoardPlan,
    choose_layout,
    draw_face_indices,
    generate_card_ids,
    plan_board,
    shuffle_in_place,
)
from .errors import (
    PairsError,
    ConfigurationError,
    InvariantViolation,
    MissingResource,
    PersistenceError,
)
from .scheduler import InputGate, Scheduler, Timer

__all__ = [
    "BONUS_ID",
    "Board",
    "BoardLayout",
    "Card",
    "BoardPlan",
    "choose_layout",
    "draw_face_indices",
    "generate_card_ids",
    "plan_board",
    "shuffle_in_place",
    "PairsError",
    "ConfigurationError",
    "InvariantViolation",
    "MissingResource",
    "PersistenceError",
    "InputGate",
    "Scheduler",
    "Timer",
]
