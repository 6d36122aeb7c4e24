"""
Presenter - Outbound interface from the session controller to the UI.

A Presenter receives fire-and-forget notifications:
- render_face: show a card face-up or face-down (instant or animated)
- play_sound: play a one-shot effect
- refresh_score_display / refresh_moves_display: update counters

The controller never waits on a presenter. Presenters raise
MissingResource for absent optional assets; the controller logs and
carries on.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path
from typing import Any, Callable, TYPE_CHECKING

from ..engine_core.errors import MissingResource

if TYPE_CHECKING:
    from ..engine_core.state import Card

logger = logging.getLogger(__name__)


class SoundKind(Enum):
    """One-shot effects the controller asks for."""
    FLIP = "flip"
    MATCH = "match"
    MISMATCH = "mismatch"
    WIN = "win"


class Presenter(ABC):
    """
    Abstract base class for presentation adapters.
    """

    @abstractmethod
    def render_face(self, card: Card, face_up: bool, instant: bool = False):
        """Show the card face-up or face-down."""
        pass

    @abstractmethod
    def play_sound(self, kind: SoundKind):
        """Play a one-shot sound effect."""
        pass

    @abstractmethod
    def refresh_score_display(self, score: int):
        """Redraw the score counter."""
        pass

    def refresh_moves_display(self, moves: int):
        """Redraw the move counter. Optional."""
        pass


class NullPresenter(Presenter):
    """Headless presenter; ignores every notification."""

    def render_face(self, card: Card, face_up: bool, instant: bool = False):
        pass

    def play_sound(self, kind: SoundKind):
        pass

    def refresh_score_display(self, score: int):
        pass


@dataclass
class PresentationEvent:
    """A recorded notification, for clients that poll for UI work."""
    kind: str  # "face", "sound", "score", "moves"
    position: int | None = None
    face_up: bool | None = None
    instant: bool | None = None
    sound: str | None = None
    value: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass
class EventLogPresenter(Presenter):
    """
    Records notifications so a remote client can replay them.

    Usage:
        presenter = EventLogPresenter()
        ...
        for event in presenter.drain():
            send(event.to_dict())
    """
    events: list[PresentationEvent] = field(default_factory=list)
    max_events: int = 500

    def _record(self, event: PresentationEvent):
        self.events.append(event)
        if len(self.events) > self.max_events:
            del self.events[: len(self.events) - self.max_events]

    def render_face(self, card: Card, face_up: bool, instant: bool = False):
        self._record(PresentationEvent(
            kind="face", position=card.position, face_up=face_up, instant=instant,
        ))

    def play_sound(self, kind: SoundKind):
        self._record(PresentationEvent(kind="sound", sound=kind.value))

    def refresh_score_display(self, score: int):
        self._record(PresentationEvent(kind="score", value=score))

    def refresh_moves_display(self, moves: int):
        self._record(PresentationEvent(kind="moves", value=moves))

    def drain(self) -> list[PresentationEvent]:
        """Return and forget all recorded events."""
        events = self.events.copy()
        self.events.clear()
        return events


class SoundBank:
    """
    Maps sound kinds to clip files.

    lookup() raises MissingResource for kinds with no clip configured
    or whose file is gone.
    """

    def __init__(self, clips: dict[str, str] | None = None):
        self.clips = {k: Path(v).expanduser() for k, v in (clips or {}).items()}

    def lookup(self, kind: SoundKind) -> Path:
        path = self.clips.get(kind.value)
        if path is None or not path.exists():
            raise MissingResource(
                f"sound:{kind.value}",
                details={"path": str(path) if path else None},
            )
        return path


class TerminalPresenter(Presenter):
    """
    Text presenter for the CLI.

    Faces are drawn by the CLI's board printer; this presenter only
    reports sounds and counters. Sound playback is delegated to an
    optional player callable (clip path -> None).
    """

    def __init__(
        self,
        sound_bank: SoundBank | None = None,
        player: Callable[[Path], None] | None = None,
        write: Callable[[str], None] = print,
    ):
        self.sound_bank = sound_bank or SoundBank()
        self.player = player
        self.write = write
        self.score = 0
        self.moves = 0

    def render_face(self, card: Card, face_up: bool, instant: bool = False):
        pass

    def play_sound(self, kind: SoundKind):
        clip = self.sound_bank.lookup(kind)
        if self.player is not None:
            self.player(clip)

    def refresh_score_display(self, score: int):
        if score != self.score:
            self.write(f"Score: {score}")
        self.score = score

    def refresh_moves_display(self, moves: int):
        self.moves = moves
