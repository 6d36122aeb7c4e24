"""
Save Store - File-backed single save slot.

The store:
- Keeps one JSON file in a per-user directory (~/.pairs by default)
- Writes atomically (temp file + rename)
- Treats a missing file as "no save", not an error
- Drops unreadable or invalid files and reports them as "no save"
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
import tempfile

from pydantic import ValidationError

from ..engine_core.errors import PersistenceError
from .record import SaveRecord

logger = logging.getLogger(__name__)


DEFAULT_SAVE_DIR = Path.home() / ".pairs"
DEFAULT_SAVE_FILENAME = "card_matching.json"


class SaveStore:
    """
    Usage:
        store = SaveStore(save_dir="~/.pairs")

        record = store.load()
        if record is None:
            ...  # start fresh

        store.save(record)
        store.clear()
    """

    def __init__(
        self,
        save_dir: str | Path | None = None,
        filename: str = DEFAULT_SAVE_FILENAME,
    ):
        if save_dir is None:
            save_dir = DEFAULT_SAVE_DIR
        self.save_dir = Path(save_dir).expanduser()
        self.filename = filename

    @property
    def path(self) -> Path:
        return self.save_dir / self.filename

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, record: SaveRecord):
        """
        Overwrite the save slot.

        Raises:
            PersistenceError: if the file cannot be written
        """
        try:
            self.save_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.save_dir, prefix=".save-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(record.to_json())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(
                f"Could not write save file: {e}",
                details={"path": str(self.path)},
            ) from e

        logger.info(
            "GAME_SAVED",
            extra={"path": str(self.path), "score": record.score, "moves": record.moves},
        )

    def load(self) -> SaveRecord | None:
        """
        Read the save slot.

        Returns None when there is no save, or when the file is unreadable
        (the bad file is removed so the next start is clean).
        """
        if not self.path.exists():
            logger.info("NO_SAVE_FOUND", extra={"path": str(self.path)})
            return None

        try:
            text = self.path.read_text(encoding="utf-8")
            record = SaveRecord.model_validate_json(text)
        except (OSError, ValidationError, json.JSONDecodeError) as e:
            logger.warning(
                "SAVE_UNREADABLE",
                extra={"path": str(self.path), "error": str(e)},
            )
            self.path.unlink(missing_ok=True)
            return None

        logger.info("GAME_LOADED", extra={"path": str(self.path)})
        return record

    def clear(self):
        """
        Delete the save slot. No-op if there is nothing saved.

        Raises:
            PersistenceError: if an existing file cannot be removed
        """
        if not self.path.exists():
            return
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise PersistenceError(
                f"Could not remove save file: {e}",
                details={"path": str(self.path)},
            ) from e
        logger.info("SAVE_CLEARED", extra={"path": str(self.path)})
