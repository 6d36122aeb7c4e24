"""
Errors - Failure taxonomy for the pairs engine.

Categories:
- ConfigurationError: fatal, the game cannot be set up as configured
- InvariantViolation: fatal, data breaks a board/save invariant
- MissingResource: recoverable, a presentation asset is absent
- PersistenceError: save slot I/O failed; the session keeps running

"No save present" is not an error: SaveStore.load() returns None.
"""

from __future__ import annotations
from typing import Any


class PairsError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(PairsError):
    """Raised when configuration makes a board impossible to build."""


class InvariantViolation(PairsError):
    """Raised when generated or loaded data breaks a board invariant."""


class MissingResource(PairsError):
    """Raised by presenters when an optional asset is not available."""

    def __init__(self, resource: str, details: dict[str, Any] | None = None):
        self.resource = resource
        super().__init__(f"Missing resource: {resource}", details)


class PersistenceError(PairsError):
    """Raised when the save slot cannot be written or removed."""
