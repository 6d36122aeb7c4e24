"""
Tests for the command-line front end.
"""

import random

import pytest

from .. import session
from ..cli import main, render_board
from ..engine_core.layout import plan_board
from ..engine_core.state import BONUS_ID, Board, BoardLayout


class TestRenderBoard:

    def test_face_down_cards_show_slot(self):
        board = Board.build(BoardLayout.TWO_BY_TWO, [0, 1, 0, 1], [0, 1, 0, 1])

        lines = render_board(board).splitlines()

        assert len(lines) == 2
        assert lines[0].split() == ["#0", "#1"]
        assert lines[1].split() == ["#2", "#3"]

    def test_faces_and_matches(self):
        board = Board.build(
            BoardLayout.THREE_BY_THREE,
            [0, 0, 1, 1, BONUS_ID, 2, 2, 3, 3],
            [2, 2, 0, 0, BONUS_ID, 1, 1, 3, 3],
        )
        board.cards[0].is_face_up = True
        board.cards[2].is_matched = board.cards[2].is_face_up = True

        cells = render_board(board).split()

        assert cells[0] == "C"
        assert cells[2] == "a"
        assert cells[4] == "#4"

    def test_reveal_shows_everything(self):
        board = Board.build(BoardLayout.TWO_BY_TWO, [0, 1, 0, 1], [0, 1, 0, 1])
        assert render_board(board, reveal=True).split() == ["A", "B", "A", "B"]

    def test_no_board(self):
        assert render_board(None) == ""


class TestCommands:

    def test_clear_save(self, monkeypatch, tmp_path, capsys):
        save = tmp_path / "card_matching.json"
        save.write_text("{}")
        monkeypatch.setenv("PAIRS_SAVE_DIR", str(tmp_path))

        main(["clear-save"])

        assert not save.exists()
        assert "Save cleared" in capsys.readouterr().out

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])


class TestPlay:
    """Terminal game on fake time."""

    @pytest.fixture(autouse=True)
    def fake_time_loop(self, monkeypatch, fake_clock, tmp_path):
        """Run the CLI's game loop on a clock advanced by its own sleeps."""

        class FakeTimeLoop(session.GameLoop):
            def __init__(self, controller):
                super().__init__(controller, clock=fake_clock)

            def pump(self, max_seconds=10.0, frame=1 / 30, sleep=None, until=None):
                return super().pump(max_seconds, frame, sleep=fake_clock.advance, until=until)

        monkeypatch.setattr(session, "GameLoop", FakeTimeLoop)
        monkeypatch.setenv("PAIRS_SAVE_DIR", str(tmp_path))

    def feed(self, monkeypatch, lines):
        answers = iter(lines)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    def test_winning_match_is_announced(self, monkeypatch, capsys):
        plan = plan_board(BoardLayout.TWO_BY_TWO, 15, rng=random.Random(1))
        positions = {}
        for position, cid in enumerate(plan.card_ids):
            positions.setdefault(cid, []).append(str(position))
        (a1, a2), (b1, b2) = positions.values()
        self.feed(monkeypatch, [a1, a2, b1, b2, "q"])

        main(["play", "--layout", "2x2", "--seed", "1"])

        out = capsys.readouterr().out
        assert "You won! Score 200 in 2 moves." in out
        assert out.index("You won!") < out.index("New game!")
        assert out.rstrip().endswith("Bye.")

    def test_quit_saves_progress(self, monkeypatch, capsys, tmp_path):
        plan = plan_board(BoardLayout.TWO_BY_TWO, 15, rng=random.Random(1))
        first = plan.card_ids[0]
        partner = plan.card_ids.index(first, 1)
        self.feed(monkeypatch, ["0", str(partner), "q"])

        main(["play", "--layout", "2x2", "--seed", "1"])

        out = capsys.readouterr().out
        assert "You won!" not in out
        assert "Progress saved." in out
        assert (tmp_path / "card_matching.json").exists()
