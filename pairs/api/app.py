"""
FastAPI Application - Local HTTP front end for one pairs session.

Endpoints:
    GET    /api/v1/health                        Health check
    GET    /api/v1/game                          Current state + queued events
    POST   /api/v1/game                          Start a new game
    POST   /api/v1/game/resume                   Resume the saved game
    POST   /api/v1/game/cards/{position}/select  Pick a card
    POST   /api/v1/game/tick                     Advance game time explicitly
    DELETE /api/v1/save                          Delete the save slot

Game time follows the server's monotonic clock; every request first
lets any due delays (reveal, flip-back, preview, restart) play out.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging
import os

logger = logging.getLogger(__name__)

# Environment configuration
PAIRS_ENV = os.getenv("PAIRS_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Body
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from ..engine_core.errors import ConfigurationError, InvariantViolation
    from .service import GameService
    from .schemas import (
        NewGameRequest,
        TickRequest,
        GameStateResponse,
        SelectResponse,
        ResumeResponse,
        ClearSaveResponse,
        HealthResponse,
        ErrorResponse,
        ErrorCode,
    )

    app = FastAPI(
        title="Pairs API",
        description="""
Memory-matching card game - local presentation adapter.

## Flow

1. `POST /game/resume` (or `POST /game`) to get a board
2. Replay the returned `events` (flips, sounds, counters)
3. `POST /game/cards/{position}/select` for each click
4. Poll `GET /game` while `phase` is `preview` or `comparing`

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_POSITION` | Slot does not exist on the current board |
| `VALIDATION_ERROR` | Invalid request |
| `CONFIGURATION_ERROR` | Board cannot be built with current settings |
| `INTERNAL_ERROR` | Unexpected failure |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    game_service = service or GameService.create()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request, exc: ConfigurationError):
        logger.error("CONFIGURATION_ERROR", extra={"error": exc.message})
        return make_error_response(
            ErrorCode.CONFIGURATION_ERROR, exc.message, status_code=500, details=exc.details
        )

    @app.exception_handler(InvariantViolation)
    async def invariant_violation_handler(request, exc: InvariantViolation):
        logger.error("INVARIANT_VIOLATION", extra={"error": exc.message})
        return make_error_response(
            ErrorCode.INTERNAL_ERROR, exc.message, status_code=500, details=exc.details
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return game_service.health()

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/game",
        response_model=GameStateResponse,
        tags=["Game"],
        summary="Get the current game state",
    )
    async def get_game() -> GameStateResponse:
        """
        Get board, counters and phase.

        Resumes the saved game (or deals a new one) on first call.
        Queued presentation events are returned once and then dropped.
        """
        return game_service.get_state()

    @app.post(
        "/api/v1/game",
        response_model=GameStateResponse,
        tags=["Game"],
        summary="Start a new game",
    )
    async def new_game(
        body: Optional[NewGameRequest] = Body(None),
    ) -> GameStateResponse:
        """Deal a new board. Any game in progress and its save are discarded."""
        layout = body.layout if body else None
        return game_service.new_game(layout)

    @app.post(
        "/api/v1/game/resume",
        response_model=ResumeResponse,
        tags=["Game"],
        summary="Resume the saved game",
    )
    async def resume_game() -> ResumeResponse:
        """Restore the save slot, or start a new game if there is none."""
        return game_service.resume()

    @app.post(
        "/api/v1/game/cards/{position}/select",
        response_model=SelectResponse,
        responses={404: {"model": ErrorResponse, "description": "No such slot"}},
        tags=["Game"],
        summary="Pick a card",
    )
    async def select_card(position: int) -> Union[SelectResponse, JSONResponse]:
        """
        Forward a click on a slot.

        `outcome` is `ignored` for clicks during the preview or a
        comparison, and for cards already face-up or matched.
        """
        response = game_service.select(position)
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code,
                response.error,
                status_code=404,
                details=response.details,
            )
        return response

    @app.post(
        "/api/v1/game/tick",
        response_model=GameStateResponse,
        tags=["Game"],
        summary="Advance game time",
    )
    async def tick(body: TickRequest) -> GameStateResponse:
        """Advance game time by `seconds` on top of the server clock."""
        return game_service.tick(body.seconds)

    # =========================================================================
    # Save slot
    # =========================================================================

    @app.delete(
        "/api/v1/save",
        response_model=ClearSaveResponse,
        tags=["Save"],
        summary="Delete the save slot",
    )
    async def clear_save() -> ClearSaveResponse:
        """Delete the saved session. Deleting an empty slot succeeds."""
        return game_service.clear_save()

    return app


# For running directly: uvicorn pairs.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
