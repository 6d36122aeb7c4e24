"""
Save Record - Flat snapshot of a session, and the board codec around it.

JSON shape (camelCase, as written to disk):
    {
      "layoutType": 1,
      "score": 150,
      "moves": 3,
      "time": 12.5,
      "cardIds": [0, 1, 0, ...],       # -1 = bonus
      "matchedStates": [true, ...],
      "faceUpStates": [true, ...],
      "faceIds": [7, 2, 7, ...]        # optional, art per slot
    }

All per-slot sequences are indexed by board position and must have the
same length.
"""

from __future__ import annotations
from collections import Counter
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..engine_core.errors import InvariantViolation
from ..engine_core.state import BONUS_ID, Board, BoardLayout


class SaveRecord(BaseModel):
    """Durable snapshot of board + counters."""
    layout_type: int = Field(alias="layoutType", ge=0)
    score: int = Field(0, ge=0)
    moves: int = Field(0, ge=0)
    time: float = Field(0.0, ge=0.0, description="Elapsed seconds")
    card_ids: list[int] = Field(alias="cardIds")
    matched_states: list[bool] = Field(alias="matchedStates")
    face_up_states: list[bool] = Field(alias="faceUpStates")
    face_ids: Optional[list[int]] = Field(None, alias="faceIds")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_parallel_lengths(self) -> SaveRecord:
        count = len(self.card_ids)
        lengths = {
            "matchedStates": len(self.matched_states),
            "faceUpStates": len(self.face_up_states),
        }
        if self.face_ids is not None:
            lengths["faceIds"] = len(self.face_ids)
        bad = {k: v for k, v in lengths.items() if v != count}
        if bad:
            raise ValueError(
                f"Per-slot sequences must all have {count} entries, got {bad}"
            )
        return self

    @property
    def layout(self) -> BoardLayout:
        return BoardLayout.from_value(self.layout_type)

    @property
    def count(self) -> int:
        return len(self.card_ids)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def snapshot(board: Board, score: int, moves: int, elapsed: float) -> SaveRecord:
    """Capture the board and counters in board-position order."""
    return SaveRecord(
        layout_type=board.layout.value,
        score=score,
        moves=moves,
        time=elapsed,
        card_ids=[c.card_id for c in board.cards],
        matched_states=[c.is_matched for c in board.cards],
        face_up_states=[c.is_face_up for c in board.cards],
        face_ids=[c.face_index for c in board.cards],
    )


def restore_board(record: SaveRecord, art_count: int = 0) -> Board:
    """
    Rebuild the saved board without regenerating it.

    Matched cards are always face-up, whatever the record says.
    Records written without faceIds get art derived from the pair id.

    Raises:
        InvariantViolation: unknown layout, slot count mismatch, or an
            arrangement that cannot be won (unpaired ids, misplaced bonus,
            half-matched pair)
    """
    layout = record.layout
    if record.count != layout.slot_count:
        raise InvariantViolation(
            f"Save has {record.count} cards but a {layout.label} board has "
            f"{layout.slot_count} slots",
            details={"expected": layout.slot_count, "actual": record.count},
        )

    _check_pairing(record, layout)

    face_ids = record.face_ids
    if face_ids is None:
        face_ids = [
            cid if cid == BONUS_ID or art_count <= 0 else cid % art_count
            for cid in record.card_ids
        ]

    board = Board.build(layout, list(record.card_ids), list(face_ids))
    for card, matched, face_up in zip(
        board.cards, record.matched_states, record.face_up_states
    ):
        card.is_matched = matched
        card.is_face_up = face_up or matched
    return board


def _check_pairing(record: SaveRecord, layout: BoardLayout):
    """Every pair id exactly twice, and the layout's bonus count of BONUS_ID."""
    counts = Counter(record.card_ids)
    bonus_count = counts.pop(BONUS_ID, 0)
    problems = {}
    if bonus_count != layout.bonus_count:
        problems["bonus_count"] = bonus_count
    unpaired = sorted(cid for cid, n in counts.items() if n != 2 or cid < 0)
    if unpaired:
        problems["unpaired_ids"] = unpaired

    matched_by_id: dict[int, set[bool]] = {}
    for cid, matched in zip(record.card_ids, record.matched_states):
        if cid != BONUS_ID:
            matched_by_id.setdefault(cid, set()).add(matched)
    half_matched = sorted(cid for cid, flags in matched_by_id.items() if len(flags) > 1)
    if half_matched:
        problems["half_matched_ids"] = half_matched

    if problems:
        raise InvariantViolation(
            f"Save does not hold a playable {layout.label} arrangement",
            details=problems,
        )
