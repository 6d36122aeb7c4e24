"""
Layout Generator - Produces the shuffled card identities for a new board.

This module handles:
- Splitting a slot count into pairs plus an optional bonus slot
- Drawing art for each pair from a shuffled pool (variety before repeats)
- Uniform Fisher-Yates shuffle of the full sequence
- Layout-specific bonus placement (centre slot on 3x3)

Everything takes an optional random.Random so tests can seed it.
Generation holds no state once the sequence is returned.
"""

from __future__ import annotations
from dataclasses import dataclass
import random
from typing import Any, MutableSequence

from .errors import ConfigurationError, InvariantViolation
from .state import BONUS_ID, BoardLayout


@dataclass(frozen=True)
class BoardPlan:
    """Card ids and art indices for every slot of a new board."""
    layout: BoardLayout
    card_ids: list[int]
    face_indices: list[int]

    @property
    def bonus_position(self) -> int | None:
        try:
            return self.card_ids.index(BONUS_ID)
        except ValueError:
            return None


def shuffle_in_place(items: MutableSequence[Any], rng: random.Random) -> None:
    """Fisher-Yates shuffle; every permutation is equally likely."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def generate_card_ids(
    slot_count: int,
    bonus_allowed: bool,
    *,
    rng: random.Random | None = None,
    bonus_slot: int | None = None,
) -> list[int]:
    """
    Generate the shuffled id sequence for a board.

    Args:
        slot_count: Number of slots on the board
        bonus_allowed: Whether an odd slot count may hold a bonus card
        rng: Random source (module-level random if omitted)
        bonus_slot: Slot the bonus card is swapped into after the shuffle

    Returns:
        List of length slot_count; pair ids 0..n-1 appear exactly twice,
        BONUS_ID at most once.

    Raises:
        InvariantViolation: if the slots cannot be filled exactly
    """
    if slot_count < 0:
        raise InvariantViolation(
            f"Slot count must be non-negative, got {slot_count}",
            details={"slot_count": slot_count},
        )
    rng = rng or random.Random()

    bonus_count = 1 if bonus_allowed and slot_count % 2 == 1 else 0
    pair_count = (slot_count - bonus_count) // 2

    ids: list[int] = []
    for pair_id in range(pair_count):
        ids.append(pair_id)
        ids.append(pair_id)
    if bonus_count:
        ids.append(BONUS_ID)

    if len(ids) != slot_count:
        raise InvariantViolation(
            f"Generated {len(ids)} cards for {slot_count} slots",
            details={
                "expected": slot_count,
                "actual": len(ids),
                "bonus_allowed": bonus_allowed,
            },
        )

    shuffle_in_place(ids, rng)

    # Placement override wins over the random position
    if bonus_count and bonus_slot is not None:
        if not 0 <= bonus_slot < slot_count:
            raise InvariantViolation(
                f"Bonus slot {bonus_slot} is outside a {slot_count}-slot board",
                details={"bonus_slot": bonus_slot, "slot_count": slot_count},
            )
        current = ids.index(BONUS_ID)
        ids[current], ids[bonus_slot] = ids[bonus_slot], ids[current]

    return ids


def draw_face_indices(
    pair_count: int,
    art_count: int,
    *,
    rng: random.Random | None = None,
) -> list[int]:
    """
    Choose which art asset each pair shows.

    Draws from a shuffled pool of range(art_count) and only starts
    reusing assets (cyclically) once every asset has been used.

    Raises:
        ConfigurationError: if no art is available
    """
    if art_count <= 0:
        raise ConfigurationError(
            "No card art available to build a board",
            details={"art_count": art_count},
        )
    rng = rng or random.Random()

    pool = list(range(art_count))
    shuffle_in_place(pool, rng)
    return [pool[i % len(pool)] for i in range(pair_count)]


def plan_board(
    layout: BoardLayout,
    art_count: int,
    *,
    rng: random.Random | None = None,
) -> BoardPlan:
    """
    Build the full plan for a layout: ids, art, bonus placement.

    Art is drawn first so a configuration error aborts before any
    shuffling work is done.
    """
    rng = rng or random.Random()

    faces_by_pair = draw_face_indices(layout.pair_count, art_count, rng=rng)
    card_ids = generate_card_ids(
        layout.slot_count,
        bonus_allowed=layout.has_bonus,
        rng=rng,
        bonus_slot=layout.bonus_slot,
    )
    face_indices = [
        BONUS_ID if cid == BONUS_ID else faces_by_pair[cid]
        for cid in card_ids
    ]

    if len(card_ids) != layout.slot_count:
        raise InvariantViolation(
            f"Plan for {layout.label} has {len(card_ids)} cards",
            details={"expected": layout.slot_count, "actual": len(card_ids)},
        )

    return BoardPlan(layout=layout, card_ids=card_ids, face_indices=face_indices)


def choose_layout(rng: random.Random | None = None) -> BoardLayout:
    """Pick one of the fixed layouts uniformly at random."""
    rng = rng or random.Random()
    return rng.choice(list(BoardLayout))
