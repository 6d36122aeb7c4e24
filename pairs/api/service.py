"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Owns the one session controller and its game loop
2. Syncs the loop clock before every request
3. Translates engine state into response schemas
4. Drains queued presentation events into each response

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass
import random
import time
from typing import Callable

from .. import __version__
from ..config import GameConfig
from ..engine_core.errors import InvariantViolation
from ..engine_core.state import Board, BoardLayout
from ..session import EventLogPresenter, GameLoop, SessionController, SessionPhase
from .schemas import (
    BoardInfo,
    CardInfo,
    ClearSaveResponse,
    ErrorCode,
    ErrorResponse,
    EventInfo,
    GameStateResponse,
    HealthResponse,
    LayoutName,
    PhaseName,
    ResumeResponse,
    SelectionOutcome,
    SelectResponse,
)


_LAYOUT_NAMES: dict[BoardLayout, LayoutName] = {
    BoardLayout.TWO_BY_TWO: LayoutName.TWO_BY_TWO,
    BoardLayout.THREE_BY_THREE: LayoutName.THREE_BY_THREE,
    BoardLayout.FIVE_BY_SIX: LayoutName.FIVE_BY_SIX,
}
_LAYOUTS_BY_NAME = {name: layout for layout, name in _LAYOUT_NAMES.items()}


@dataclass
class GameService:
    """
    Main API service for the local game client.

    Usage:
        service = GameService.create(GameConfig.from_env())

        state = service.get_state()
        response = service.select(4)
    """
    controller: SessionController
    loop: GameLoop
    presenter: EventLogPresenter

    @classmethod
    def create(
        cls,
        config: GameConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> GameService:
        config = config or GameConfig.from_env()
        presenter = EventLogPresenter()
        controller = SessionController.from_config(config, presenter=presenter, rng=rng)
        loop = GameLoop(controller, clock=clock)
        return cls(controller=controller, loop=loop, presenter=presenter)

    # =========================================================================
    # Operations
    # =========================================================================

    def health(self) -> HealthResponse:
        return HealthResponse(version=__version__)

    def new_game(self, layout: LayoutName | None = None) -> GameStateResponse:
        """Start a new game, abandoning the current one."""
        self.loop.sync()
        self.controller.start_new_game(_LAYOUTS_BY_NAME[layout] if layout else None)
        return self._build_state()

    def resume(self) -> ResumeResponse:
        """Continue from the save slot, or start fresh."""
        self.loop.sync()
        restored = self.controller.resume()
        return ResumeResponse(restored=restored, state=self._build_state())

    def get_state(self) -> GameStateResponse:
        self._prepare()
        return self._build_state()

    def select(self, position: int) -> SelectResponse | ErrorResponse:
        """Forward a click on a slot to the controller."""
        self._prepare()
        try:
            result = self.controller.select_position(position)
        except InvariantViolation as e:
            return ErrorResponse(
                error=e.message,
                error_code=ErrorCode.INVALID_POSITION,
                details=e.details,
            )
        return SelectResponse(
            position=position,
            outcome=SelectionOutcome(result.value),
            state=self._build_state(),
        )

    def tick(self, seconds: float) -> GameStateResponse:
        """Advance game time by an explicit amount (for clients that drive time)."""
        self._prepare()
        self.loop.step(seconds)
        return self._build_state()

    def clear_save(self) -> ClearSaveResponse:
        """Delete the save slot; the live session keeps running."""
        store = self.controller.store
        had_save = store is not None and store.exists()
        self.controller.clear_save()
        success = store is None or not store.exists()
        return ClearSaveResponse(success=success, had_save=had_save)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _prepare(self):
        """Sync the clock, resuming the saved game on first use."""
        if self.controller.phase is SessionPhase.IDLE:
            self.controller.resume()
        self.loop.sync()

    def _build_state(self) -> GameStateResponse:
        controller = self.controller
        events = [EventInfo(**event.to_dict()) for event in self.presenter.drain()]
        return GameStateResponse(
            phase=PhaseName(controller.phase.value),
            score=controller.score,
            moves=controller.moves,
            elapsed_time=round(controller.elapsed_time, 3),
            input_locked=controller.input_gate.locked,
            games_started=controller.games_started,
            board=_board_info(controller.board) if controller.board else None,
            events=events,
            save_error=controller.last_save_error,
        )


def _board_info(board: Board) -> BoardInfo:
    cards = []
    for card in board.cards:
        info = CardInfo(
            position=card.position,
            is_face_up=card.is_face_up,
            is_matched=card.is_matched,
        )
        if card.is_face_up:
            info.card_id = card.card_id
            info.face_index = card.face_index
            info.is_bonus = card.is_bonus
        cards.append(info)

    layout = board.layout
    return BoardInfo(
        layout=_LAYOUT_NAMES[layout],
        rows=layout.rows,
        cols=layout.cols,
        slot_count=layout.slot_count,
        cards=cards,
    )
