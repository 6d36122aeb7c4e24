"""
Pydantic Schemas for API - Request/response models for the local game UI.

The HTTP API is a presentation adapter: a browser or app renders the
board, forwards clicks, and replays the queued presentation events
(flips, sounds, counter updates) it gets back.

Error Codes:
- INVALID_POSITION: Slot does not exist on the current board
- VALIDATION_ERROR: Request body or parameter is invalid
- CONFIGURATION_ERROR: Board cannot be built with current settings
- INTERNAL_ERROR: Anything else
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class LayoutName(str, Enum):
    """Board layouts."""
    TWO_BY_TWO = "two_by_two"
    THREE_BY_THREE = "three_by_three"
    FIVE_BY_SIX = "five_by_six"


class PhaseName(str, Enum):
    """Session phases."""
    IDLE = "idle"
    PREVIEW = "preview"
    READY = "ready"
    SINGLE_SELECTED = "single_selected"
    COMPARING = "comparing"
    COMPLETE = "complete"


class SelectionOutcome(str, Enum):
    """What a card pick did."""
    IGNORED = "ignored"
    BONUS = "bonus"
    FIRST_PICK = "first_pick"
    COMPARING = "comparing"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_POSITION = "INVALID_POSITION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """
    One slot on the board.

    Identity fields are only filled in while the card is face-up.
    """
    position: int
    is_face_up: bool
    is_matched: bool
    card_id: Optional[int] = None
    face_index: Optional[int] = None
    is_bonus: Optional[bool] = None


class BoardInfo(BaseModel):
    """Board shape and cards in position order."""
    layout: LayoutName
    rows: int
    cols: int
    slot_count: int
    cards: list[CardInfo] = Field(default_factory=list)


class EventInfo(BaseModel):
    """A presentation event to replay client-side."""
    kind: str = Field(description="face, sound, score or moves")
    position: Optional[int] = None
    face_up: Optional[bool] = None
    instant: Optional[bool] = None
    sound: Optional[str] = None
    value: Optional[int] = None


# =============================================================================
# Request Models
# =============================================================================

class NewGameRequest(BaseModel):
    """
    Start a new game.

    POST /api/v1/game
    """
    layout: Optional[LayoutName] = Field(
        None, description="Board layout; random if omitted"
    )


class TickRequest(BaseModel):
    """
    Advance the game clock explicitly.

    POST /api/v1/game/tick
    """
    seconds: float = Field(..., ge=0, le=60)


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Full session state plus queued presentation events."""
    phase: PhaseName
    score: int
    moves: int
    elapsed_time: float
    input_locked: bool
    games_started: int
    board: Optional[BoardInfo] = None
    events: list[EventInfo] = Field(default_factory=list)
    save_error: Optional[str] = None
    api_version: str = "v1"


class SelectResponse(BaseModel):
    """Result of picking a card."""
    position: int
    outcome: SelectionOutcome
    state: GameStateResponse


class ResumeResponse(BaseModel):
    """Result of resuming the saved session."""
    restored: bool
    state: GameStateResponse


class ClearSaveResponse(BaseModel):
    """Result of deleting the save slot."""
    success: bool
    had_save: bool


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str


class ErrorResponse(BaseModel):
    """Standard error body."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None
