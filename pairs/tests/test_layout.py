"""
Tests for layout generation.

Tests:
- Pairing invariant for even and odd slot counts
- Bonus placement on the 3x3 board
- Shuffle is a uniform permutation
- Art drawing and configuration errors
"""

from collections import Counter
import itertools
import random

import pytest

from ..engine_core.errors import ConfigurationError, InvariantViolation
from ..engine_core.layout import (
    choose_layout,
    draw_face_indices,
    generate_card_ids,
    plan_board,
    shuffle_in_place,
)
from ..engine_core.state import BONUS_ID, BoardLayout


class TestGenerateCardIds:
    """Tests for generate_card_ids."""

    @pytest.mark.parametrize("slot_count", [0, 2, 4, 10, 30])
    def test_even_slots_have_only_pairs(self, slot_count):
        """Even boards: no bonus, every id exactly twice."""
        ids = generate_card_ids(slot_count, bonus_allowed=True, rng=random.Random(slot_count))

        assert len(ids) == slot_count
        assert BONUS_ID not in ids
        counts = Counter(ids)
        assert all(n == 2 for n in counts.values())
        assert sorted(counts) == list(range(slot_count // 2))

    @pytest.mark.parametrize("slot_count", [1, 3, 9, 15])
    def test_odd_slots_have_one_bonus(self, slot_count):
        """Odd boards: exactly one bonus, the rest are pairs."""
        ids = generate_card_ids(slot_count, bonus_allowed=True, rng=random.Random(slot_count))

        assert len(ids) == slot_count
        counts = Counter(ids)
        assert counts.pop(BONUS_ID) == 1
        assert all(n == 2 for n in counts.values())

    def test_odd_slots_without_bonus_fail(self):
        """An odd board cannot be filled with pairs alone."""
        with pytest.raises(InvariantViolation) as exc_info:
            generate_card_ids(9, bonus_allowed=False)

        assert exc_info.value.details["expected"] == 9
        assert exc_info.value.details["actual"] == 8

    def test_negative_slot_count_fails(self):
        with pytest.raises(InvariantViolation):
            generate_card_ids(-2, bonus_allowed=False)

    def test_bonus_slot_override(self):
        """Bonus always ends up in the requested slot."""
        for seed in range(200):
            ids = generate_card_ids(9, bonus_allowed=True, rng=random.Random(seed), bonus_slot=4)
            assert ids[4] == BONUS_ID
            assert ids.count(BONUS_ID) == 1

    def test_bonus_slot_out_of_range_fails(self):
        with pytest.raises(InvariantViolation):
            generate_card_ids(9, bonus_allowed=True, bonus_slot=9)

    def test_bonus_slot_ignored_without_bonus(self):
        """Even boards have no bonus to move."""
        ids = generate_card_ids(4, bonus_allowed=True, rng=random.Random(1), bonus_slot=2)
        assert BONUS_ID not in ids

    def test_same_seed_same_layout(self):
        first = generate_card_ids(30, bonus_allowed=False, rng=random.Random(42))
        second = generate_card_ids(30, bonus_allowed=False, rng=random.Random(42))
        assert first == second


class TestShuffle:
    """Tests for the Fisher-Yates shuffle."""

    def test_shuffle_is_permutation(self):
        """Multiset of items is unchanged."""
        items = [0, 0, 1, 1, 2, 2, BONUS_ID]
        shuffled = items.copy()
        shuffle_in_place(shuffled, random.Random(5))

        assert Counter(shuffled) == Counter(items)

    def test_shuffle_is_uniform(self):
        """Every permutation of three items shows up about equally often."""
        rng = random.Random(2024)
        counts = Counter()
        for _ in range(6000):
            items = ["a", "b", "c"]
            shuffle_in_place(items, rng)
            counts[tuple(items)] += 1

        assert set(counts) == set(itertools.permutations(["a", "b", "c"]))
        for n in counts.values():
            assert 800 < n < 1200

    def test_shuffle_empty_and_single(self):
        empty: list[int] = []
        shuffle_in_place(empty, random.Random(0))
        assert empty == []

        single = [7]
        shuffle_in_place(single, random.Random(0))
        assert single == [7]


class TestDrawFaceIndices:
    """Tests for art selection."""

    def test_distinct_when_pool_is_large_enough(self):
        faces = draw_face_indices(15, 20, rng=random.Random(3))

        assert len(faces) == 15
        assert len(set(faces)) == 15
        assert all(0 <= f < 20 for f in faces)

    def test_whole_pool_used_before_repeats(self):
        """Reuse is cyclic and only starts after every asset is used."""
        faces = draw_face_indices(10, 4, rng=random.Random(8))

        assert sorted(faces[:4]) == [0, 1, 2, 3]
        assert faces[4:8] == faces[:4]
        assert faces[8:] == faces[:2]

    def test_empty_pool_fails_loudly(self):
        with pytest.raises(ConfigurationError):
            draw_face_indices(2, 0)


class TestPlanBoard:
    """Tests for full board plans."""

    @pytest.mark.parametrize("layout", list(BoardLayout))
    def test_plan_fits_layout(self, layout):
        plan = plan_board(layout, art_count=15, rng=random.Random(11))

        assert len(plan.card_ids) == layout.slot_count
        assert len(plan.face_indices) == layout.slot_count
        assert (plan.bonus_position is not None) == layout.has_bonus

    def test_three_by_three_bonus_is_centred(self):
        for seed in range(100):
            plan = plan_board(BoardLayout.THREE_BY_THREE, art_count=15, rng=random.Random(seed))
            assert plan.bonus_position == 4
            assert plan.face_indices[4] == BONUS_ID

    def test_pairs_share_art(self):
        """Both cards of a pair show the same face; different pairs differ."""
        plan = plan_board(BoardLayout.FIVE_BY_SIX, art_count=15, rng=random.Random(6))

        face_by_id = {}
        for cid, face in zip(plan.card_ids, plan.face_indices):
            assert face_by_id.setdefault(cid, face) == face
        assert len(set(face_by_id.values())) == 15

    def test_no_art_aborts_plan(self):
        with pytest.raises(ConfigurationError):
            plan_board(BoardLayout.TWO_BY_TWO, art_count=0)


class TestChooseLayout:

    def test_all_layouts_reachable(self):
        rng = random.Random(99)
        seen = {choose_layout(rng) for _ in range(200)}
        assert seen == set(BoardLayout)
