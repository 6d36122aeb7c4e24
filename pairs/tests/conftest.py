"""
Pytest fixtures for Pairs tests.
"""

import random

import pytest

from ..config import GameConfig
from ..engine_core.state import Board, BoardLayout
from ..persistence import SaveRecord, SaveStore
from ..session import EventLogPresenter, SessionController


LAYOUTS_BY_SIZE = {layout.slot_count: layout for layout in BoardLayout}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def config(tmp_path) -> GameConfig:
    """Default timings, save slot under tmp_path."""
    return GameConfig(
        match_score=100,
        bonus_points=50,
        reveal_delay=0.15,
        mismatch_flip_back_delay=0.6,
        preview_duration=1.0,
        win_restart_delay=1.0,
        art_count=15,
        save_dir=tmp_path / "saves",
    )


@pytest.fixture
def presenter() -> EventLogPresenter:
    return EventLogPresenter()


@pytest.fixture
def store(config: GameConfig) -> SaveStore:
    return SaveStore(save_dir=config.save_dir, filename=config.save_filename)


@pytest.fixture
def controller(config, presenter, store) -> SessionController:
    """Controller with a seeded rng and no board yet."""
    return SessionController(
        config=config,
        presenter=presenter,
        store=store,
        rng=random.Random(1234),
    )


@pytest.fixture
def make_record():
    """Factory for save records with a known arrangement."""

    def _make(
        card_ids,
        matched=None,
        face_up=None,
        score=0,
        moves=0,
        time=0.0,
        layout=None,
    ) -> SaveRecord:
        count = len(card_ids)
        layout = layout or LAYOUTS_BY_SIZE[count]
        return SaveRecord(
            layout_type=layout.value,
            score=score,
            moves=moves,
            time=time,
            card_ids=list(card_ids),
            matched_states=list(matched) if matched else [False] * count,
            face_up_states=list(face_up) if face_up else [False] * count,
        )

    return _make


@pytest.fixture
def deal(controller, make_record):
    """Put a known arrangement on the controller's board (no preview)."""

    def _deal(card_ids, **kwargs) -> Board:
        return controller.restore(make_record(card_ids, **kwargs))

    return _deal


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
