"""
Board State - Cards on the table and the layout they sit in.

Design principles:
- Plain mutable dataclasses: the session controller is the only writer
- Position-indexed: card i always lives in slot i
- Layout is one of three fixed shapes, never free-form
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .errors import InvariantViolation


BONUS_ID = -1


class BoardLayout(Enum):
    """Fixed board shapes. Values are the persisted layout codes."""
    TWO_BY_TWO = 0
    THREE_BY_THREE = 1
    FIVE_BY_SIX = 2

    @classmethod
    def from_value(cls, value: int) -> BoardLayout:
        """Look up a layout by its persisted code."""
        try:
            return cls(value)
        except ValueError:
            raise InvariantViolation(
                f"Unknown layout type: {value}",
                details={"layout_type": value},
            ) from None

    @property
    def rows(self) -> int:
        return _GRID_SHAPES[self][0]

    @property
    def cols(self) -> int:
        return _GRID_SHAPES[self][1]

    @property
    def slot_count(self) -> int:
        return self.rows * self.cols

    @property
    def has_bonus(self) -> bool:
        """Odd boards carry exactly one bonus slot."""
        return self.slot_count % 2 == 1

    @property
    def bonus_count(self) -> int:
        return 1 if self.has_bonus else 0

    @property
    def pair_count(self) -> int:
        return (self.slot_count - self.bonus_count) // 2

    @property
    def bonus_slot(self) -> int | None:
        """Fixed slot the bonus card is moved to, if the layout pins one."""
        if self is BoardLayout.THREE_BY_THREE:
            return self.slot_count // 2
        return None

    @property
    def label(self) -> str:
        return f"{self.rows}x{self.cols}"


_GRID_SHAPES: dict[BoardLayout, tuple[int, int]] = {
    BoardLayout.TWO_BY_TWO: (2, 2),
    BoardLayout.THREE_BY_THREE: (3, 3),
    BoardLayout.FIVE_BY_SIX: (5, 6),
}


@dataclass
class Card:
    """
    One card on the board.

    card_id names the pair class (two cards share it) or is BONUS_ID.
    face_index is the art asset drawn on the front; pairs share it.
    """
    position: int
    card_id: int
    face_index: int = BONUS_ID
    is_matched: bool = False
    is_face_up: bool = False

    @property
    def is_bonus(self) -> bool:
        return self.card_id == BONUS_ID

    def matches(self, other: Card) -> bool:
        """Symmetric match predicate."""
        return self.card_id == other.card_id

    def __hash__(self):
        return hash(self.position)


@dataclass
class Board:
    """
    The set of cards currently in play plus the active layout.
    """
    layout: BoardLayout
    cards: list[Card] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        layout: BoardLayout,
        card_ids: list[int],
        face_indices: list[int] | None = None,
    ) -> Board:
        """
        Populate a board of the given layout.

        Raises InvariantViolation if the id (or face) sequence does not
        have exactly one entry per slot.
        """
        expected = layout.slot_count
        if len(card_ids) != expected:
            raise InvariantViolation(
                f"Board {layout.label} needs {expected} cards, got {len(card_ids)}",
                details={"expected": expected, "actual": len(card_ids)},
            )
        if face_indices is None:
            face_indices = list(card_ids)
        if len(face_indices) != expected:
            raise InvariantViolation(
                f"Board {layout.label} needs {expected} faces, got {len(face_indices)}",
                details={"expected": expected, "actual": len(face_indices)},
            )

        cards = [
            Card(position=i, card_id=cid, face_index=face)
            for i, (cid, face) in enumerate(zip(card_ids, face_indices))
        ]
        return cls(layout=layout, cards=cards)

    @property
    def slot_count(self) -> int:
        return len(self.cards)

    def card_at(self, position: int) -> Card:
        """Get the card in a slot."""
        if position < 0 or position >= len(self.cards):
            raise InvariantViolation(
                f"No slot {position} on a {self.layout.label} board",
                details={"position": position, "slot_count": len(self.cards)},
            )
        return self.cards[position]

    def card_ids(self) -> list[int]:
        return [c.card_id for c in self.cards]

    def unmatched(self) -> list[Card]:
        return [c for c in self.cards if not c.is_matched]

    def face_up_unmatched(self) -> list[Card]:
        return [c for c in self.cards if c.is_face_up and not c.is_matched]

    def all_matched(self) -> bool:
        """Bonus cards are matched on pick, so this is the win condition."""
        return all(c.is_matched for c in self.cards)

    @property
    def matched_count(self) -> int:
        return sum(1 for c in self.cards if c.is_matched)
