"""
Session Controller - The pairs game state machine.

LIFECYCLE:
1. start_new_game(): reset counters, clear the save, build a board,
   show every card for a short preview (input locked)
2. Player picks cards:
   - bonus card: scored and matched at once, never part of a pair
   - first pick: held as the pending selection
   - second pick: comparison starts; further picks are ignored
3. Comparison resolves after the reveal delay:
   - match: both matched, score += match_score
   - mismatch: both flip back after the flip-back delay
   - either way: moves += 1, selection cleared, session saved, win check
4. Win: save cleared, new game starts after a short delay

Timing is never a blocking sleep. Delays are scheduled on the injected
Scheduler and run when the host calls tick(dt).

The controller is the only writer of board and session state; the save
codec writes card flags only through restore().
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Callable

from ..config import GameConfig
from ..engine_core.errors import InvariantViolation, MissingResource, PersistenceError
from ..engine_core.layout import choose_layout, plan_board
from ..engine_core.scheduler import InputGate, Scheduler, Timer
from ..engine_core.state import Board, BoardLayout, Card
from ..persistence import SaveRecord, SaveStore, restore_board, snapshot
from .presenter import NullPresenter, Presenter, SoundKind

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    """Where the session is in its lifecycle."""
    IDLE = "idle"  # No board yet
    PREVIEW = "preview"  # All cards shown, input locked
    READY = "ready"  # Waiting for a first pick
    SINGLE_SELECTED = "single_selected"  # One card pending
    COMPARING = "comparing"  # Two cards in flight
    COMPLETE = "complete"  # Won, waiting for restart


class SelectionKind(Enum):
    EMPTY = "empty"
    ONE_CARD = "one_card"
    COMPARING = "comparing"


class SelectionResult(Enum):
    """What a pick did."""
    IGNORED = "ignored"
    BONUS = "bonus"
    FIRST_PICK = "first_pick"
    COMPARING = "comparing"


@dataclass
class Selection:
    """The (at most two) cards picked this turn."""
    first: Card | None = None
    second: Card | None = None

    @property
    def kind(self) -> SelectionKind:
        if self.second is not None:
            return SelectionKind.COMPARING
        if self.first is not None:
            return SelectionKind.ONE_CARD
        return SelectionKind.EMPTY

    def clear(self):
        self.first = None
        self.second = None


class SessionController:
    """
    Owns session state and mediates every board mutation.

    Usage:
        controller = SessionController.from_config(GameConfig.from_env())
        controller.resume()

        # Host update loop
        controller.tick(dt)

        # Presentation adapter
        controller.select_position(3)
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        presenter: Presenter | None = None,
        store: SaveStore | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or GameConfig()
        self.presenter = presenter or NullPresenter()
        self.store = store
        self.scheduler = scheduler or Scheduler()
        self.rng = rng or random.Random()
        self.input_gate = InputGate()

        self.board: Board | None = None
        self.score = 0
        self.moves = 0
        self.elapsed_time = 0.0
        self.selection = Selection()
        self.games_started = 0
        self.last_save_error: str | None = None

        self._complete = False
        self._timers: list[Timer] = []

    @classmethod
    def from_config(
        cls,
        config: GameConfig,
        presenter: Presenter | None = None,
        rng: random.Random | None = None,
    ) -> SessionController:
        """Wire a controller with the save slot described by config."""
        store = SaveStore(save_dir=config.save_dir, filename=config.save_filename)
        return cls(config=config, presenter=presenter, store=store, rng=rng)

    # =========================================================================
    # State queries
    # =========================================================================

    @property
    def phase(self) -> SessionPhase:
        if self.board is None:
            return SessionPhase.IDLE
        if self._complete:
            return SessionPhase.COMPLETE
        if self.input_gate.locked:
            return SessionPhase.PREVIEW
        kind = self.selection.kind
        if kind is SelectionKind.COMPARING:
            return SessionPhase.COMPARING
        if kind is SelectionKind.ONE_CARD:
            return SessionPhase.SINGLE_SELECTED
        return SessionPhase.READY

    @property
    def is_comparing(self) -> bool:
        return self.selection.kind is SelectionKind.COMPARING

    @property
    def is_complete(self) -> bool:
        return self._complete

    # =========================================================================
    # New game / preview
    # =========================================================================

    def start_new_game(self, layout: BoardLayout | None = None) -> Board:
        """
        Throw away the current session and deal a new board.

        Any in-flight comparison, preview or pending restart is abandoned
        first. If the board cannot be generated the error propagates and
        the previous board is left untouched.
        """
        self._abandon_pending()

        layout = layout or choose_layout(self.rng)
        plan = plan_board(layout, self.config.art_count, rng=self.rng)
        board = Board.build(layout, plan.card_ids, plan.face_indices)

        self._clear_save()
        self.board = board
        self.score = 0
        self.moves = 0
        self.elapsed_time = 0.0
        self._complete = False
        self.games_started += 1

        logger.info(
            "NEW_GAME",
            extra={
                "layout": layout.label,
                "slots": layout.slot_count,
                "bonus_position": plan.bonus_position,
            },
        )

        self._refresh_counters()
        self._start_preview()
        return board

    def _start_preview(self):
        board = self.board
        self.input_gate.lock("preview")
        for card in board.cards:
            card.is_face_up = True
            self._render(card, True, instant=True)

        if self.config.preview_duration <= 0:
            self._end_preview()
        else:
            self._schedule(self.config.preview_duration, self._end_preview, "preview")

    def _end_preview(self):
        for card in self.board.cards:
            if not card.is_matched:
                card.is_face_up = False
                self._render(card, False)
        self.input_gate.release()

    # =========================================================================
    # Selection
    # =========================================================================

    def select_position(self, position: int) -> SelectionResult:
        """
        Pick the card in a slot.

        Raises:
            InvariantViolation: if the slot does not exist
        """
        if self.board is None:
            return SelectionResult.IGNORED
        return self.notify_card_selected(self.board.card_at(position))

    def notify_card_selected(self, card: Card) -> SelectionResult:
        """
        Handle a click on a card.

        Ignored while input is locked, while a comparison is in flight,
        once the game is complete, or if the card is already matched or
        face-up.
        """
        if self.board is None or self._complete or self.input_gate.locked:
            return SelectionResult.IGNORED
        if self.is_comparing:
            return SelectionResult.IGNORED
        if card.is_matched or card.is_face_up:
            return SelectionResult.IGNORED
        if self.board.cards[card.position] is not card:
            logger.warning("STALE_CARD_SELECTED", extra={"position": card.position})
            return SelectionResult.IGNORED

        card.is_face_up = True
        self._play(SoundKind.FLIP)

        if card.is_bonus:
            self._render(card, True, instant=True)
            self._collect_bonus(card)
            return SelectionResult.BONUS

        self._render(card, True)

        if self.selection.first is None:
            self.selection.first = card
            return SelectionResult.FIRST_PICK

        self.selection.second = card
        self._schedule(self.config.reveal_delay, self._resolve_comparison, "reveal")
        return SelectionResult.COMPARING

    def _collect_bonus(self, card: Card):
        card.is_matched = True
        self.score += self.config.bonus_points
        logger.info(
            "BONUS_COLLECTED",
            extra={"points": self.config.bonus_points, "score": self.score},
        )
        self._play(SoundKind.MATCH)
        self._refresh_counters()
        self._persist()
        self.check_for_win()

    # =========================================================================
    # Comparison
    # =========================================================================

    def _resolve_comparison(self):
        first, second = self.selection.first, self.selection.second
        if first is None or second is None:
            return

        if first.matches(second):
            first.is_matched = True
            second.is_matched = True
            self.score += self.config.match_score
            logger.info(
                "MATCH",
                extra={
                    "positions": [first.position, second.position],
                    "score": self.score,
                },
            )
            self._play(SoundKind.MATCH)
            self._finish_turn()
        else:
            logger.info("MISMATCH", extra={"positions": [first.position, second.position]})
            self._play(SoundKind.MISMATCH)
            self._schedule(
                self.config.mismatch_flip_back_delay, self._flip_back, "flip_back"
            )

    def _flip_back(self):
        for card in (self.selection.first, self.selection.second):
            if card is not None:
                card.is_face_up = False
                self._render(card, False)
        self._finish_turn()

    def _finish_turn(self):
        self.moves += 1
        self.selection.clear()
        self._refresh_counters()
        self._persist()
        self.check_for_win()

    # =========================================================================
    # Win
    # =========================================================================

    def check_for_win(self) -> bool:
        """
        Declare the win once every card is matched.

        The save is cleared so a finished game is never resumed, and a
        new game is scheduled after win_restart_delay.
        """
        if self.board is None or not self.board.all_matched():
            return False
        if self._complete:
            return True

        self._complete = True
        logger.info(
            "GAME_WON",
            extra={
                "score": self.score,
                "moves": self.moves,
                "elapsed": round(self.elapsed_time, 2),
            },
        )
        self._play(SoundKind.WIN)
        self._clear_save()
        self._schedule(self.config.win_restart_delay, self._restart_after_win, "restart")
        return True

    def _restart_after_win(self):
        self.start_new_game()

    # =========================================================================
    # Save / restore
    # =========================================================================

    def snapshot(self) -> SaveRecord | None:
        """Current session as a save record (None before the first board)."""
        if self.board is None:
            return None
        return snapshot(self.board, self.score, self.moves, self.elapsed_time)

    def resume(self) -> bool:
        """
        Continue the saved session, or start a new game.

        Returns True if a save was restored. A save that does not fit its
        layout is reported, deleted and replaced by a new game.
        """
        record = self.store.load() if self.store is not None else None
        if record is None:
            self.start_new_game()
            return False

        try:
            self.restore(record)
        except InvariantViolation as e:
            logger.error(
                "SAVE_REJECTED",
                extra={"error": e.message, "details": e.details},
            )
            self._clear_save()
            self.start_new_game()
            return False
        return True

    def restore(self, record: SaveRecord) -> Board:
        """
        Replace the session with a saved one.

        The saved arrangement is used as-is (no layout generation). A
        single unmatched face-up card becomes the pending pick again;
        more than one is turned back face-down.

        Raises:
            InvariantViolation: if the record does not fit its layout
        """
        board = restore_board(record, self.config.art_count)

        self._abandon_pending()
        self.board = board
        self.score = record.score
        self.moves = record.moves
        self.elapsed_time = record.time
        self._complete = False

        stray = [c for c in board.face_up_unmatched() if not c.is_bonus]
        if len(stray) == 1:
            self.selection.first = stray[0]
        else:
            for card in stray:
                card.is_face_up = False

        for card in board.cards:
            self._render(card, card.is_face_up, instant=True)
        self._refresh_counters()

        logger.info(
            "GAME_RESTORED",
            extra={
                "layout": board.layout.label,
                "score": self.score,
                "moves": self.moves,
                "matched": board.matched_count,
            },
        )
        self.check_for_win()
        return board

    def clear_save(self):
        """Delete the persisted session without touching the live one."""
        self._clear_save()

    # =========================================================================
    # Host clock
    # =========================================================================

    def tick(self, dt: float) -> int:
        """
        Advance the session clock by dt seconds.

        Elapsed play time stops once the game is complete. Returns the
        number of deferred callbacks that ran.
        """
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        if self.board is not None and not self._complete:
            self.elapsed_time += dt
        return self.scheduler.advance(dt)

    # =========================================================================
    # Internals
    # =========================================================================

    def _schedule(self, delay: float, callback: Callable[[], None], name: str):
        self._timers = [t for t in self._timers if t.active]
        self._timers.append(self.scheduler.call_later(delay, callback, name=name))

    def _abandon_pending(self):
        for timer in self._timers:
            self.scheduler.cancel(timer)
        self._timers.clear()
        self.selection.clear()
        self.input_gate.release()

    def _persist(self):
        if self.store is None or self.board is None:
            return
        try:
            self.store.save(self.snapshot())
            self.last_save_error = None
        except PersistenceError as e:
            self.last_save_error = e.message
            logger.error("SAVE_FAILED", extra={"error": e.message, "details": e.details})

    def _clear_save(self):
        if self.store is None:
            return
        try:
            self.store.clear()
        except PersistenceError as e:
            self.last_save_error = e.message
            logger.error("SAVE_CLEAR_FAILED", extra={"error": e.message})

    def _render(self, card: Card, face_up: bool, instant: bool = False):
        try:
            self.presenter.render_face(card, face_up, instant)
        except MissingResource as e:
            logger.debug("RESOURCE_MISSING", extra={"resource": e.resource})

    def _play(self, kind: SoundKind):
        try:
            self.presenter.play_sound(kind)
        except MissingResource as e:
            logger.debug("RESOURCE_MISSING", extra={"resource": e.resource})

    def _refresh_counters(self):
        try:
            self.presenter.refresh_score_display(self.score)
        except MissingResource as e:
            logger.debug("RESOURCE_MISSING", extra={"resource": e.resource})
        try:
            self.presenter.refresh_moves_display(self.moves)
        except MissingResource as e:
            logger.debug("RESOURCE_MISSING", extra={"resource": e.resource})
