"""
Pairs - Memory-matching card game engine

A session controller for the classic "pairs" game. The engine provides:
- Shuffled board layouts (2x2, 3x3 with a bonus card, 5x6)
- A two-pick selection/comparison state machine with scoring
- A timed preview and tick-driven delays
- A single local save slot for resuming a game
"""

__version__ = "0.1.0"
