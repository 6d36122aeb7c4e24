"""
Persistence - The single local save slot.

One record per user, overwritten after every resolved turn and removed
when a game is won or a new game starts. A record is a flat snapshot of
the board and session counters; restoring it rebuilds the board exactly
as saved instead of generating a new layout.
"""

from .record import SaveRecord, snapshot, restore_board
from .store import SaveStore

__all__ = [
    "SaveRecord",
    "snapshot",
    "restore_board",
    "SaveStore",
]
