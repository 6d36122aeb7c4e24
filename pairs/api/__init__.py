"""
API Module - Local HTTP presentation adapter.

Exposes the single game session over REST so a browser or app can:
1. Start or resume a game
2. Forward card clicks
3. Replay presentation events (flips, sounds, counters)
4. Clear the save slot

There is exactly one session per process; nothing here is multi-user.
"""

from .schemas import (
    # Requests
    NewGameRequest,
    TickRequest,
    # Responses
    GameStateResponse,
    SelectResponse,
    ResumeResponse,
    ClearSaveResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    BoardInfo,
    CardInfo,
    EventInfo,
    # Enums
    LayoutName,
    PhaseName,
    SelectionOutcome,
    ErrorCode,
)
from .service import GameService
from .app import create_app

__all__ = [
    # Requests
    "NewGameRequest",
    "TickRequest",
    # Responses
    "GameStateResponse",
    "SelectResponse",
    "ResumeResponse",
    "ClearSaveResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "BoardInfo",
    "CardInfo",
    "EventInfo",
    # Enums
    "LayoutName",
    "PhaseName",
    "SelectionOutcome",
    "ErrorCode",
    # Service
    "GameService",
    "create_app",
]
