"""
Game configuration.

Defaults match the shipped game; every field can be overridden with a
PAIRS_<FIELD> environment variable, e.g. PAIRS_REVEAL_DELAY=0.3 or
PAIRS_SAVE_DIR=~/saves.
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .engine_core.errors import ConfigurationError


class GameConfig(BaseSettings):
    """Scoring, timing and storage settings for a session."""

    model_config = SettingsConfigDict(env_prefix="PAIRS_", frozen=True)

    match_score: int = Field(100, ge=0)
    bonus_points: int = Field(50, ge=0)

    # Seconds
    reveal_delay: float = Field(0.15, ge=0)
    mismatch_flip_back_delay: float = Field(0.6, ge=0)
    preview_duration: float = Field(1.5, ge=0)
    win_restart_delay: float = Field(1.0, ge=0)

    # Number of distinct front images available
    art_count: int = 15

    save_dir: Optional[Path] = None
    save_filename: str = Field("card_matching.json", min_length=1)

    # SoundKind value -> clip path, for hosts that play audio
    sound_clips: dict[str, str] = Field(default_factory=dict)

    def __init__(self, **values):
        try:
            super().__init__(**values)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid game configuration",
                details={
                    "errors": [
                        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                        for err in e.errors()
                    ]
                },
            ) from e
        except SettingsError as e:
            raise ConfigurationError(f"Invalid PAIRS_* setting: {e}") from e

    @field_validator("save_dir")
    @classmethod
    def _expand_save_dir(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    @classmethod
    def from_env(cls, **overrides) -> GameConfig:
        """Build a config from PAIRS_* environment variables; keyword overrides win."""
        return cls(**overrides)

    def with_overrides(self, **changes) -> GameConfig:
        return type(self)(**{**self.model_dump(), **changes})
