"""
MonArena - Wagered creature battles with commit-reveal moves.

A deterministic, single-writer battle engine. The engine provides:
- Player enrollment with a starter creature and a starting balance
- Challenges with escrowed wagers
- Commit-reveal rounds, so neither side sees the other's move early
- Deterministic damage resolution
- Settlement of the escrow to the winner
"""

__version__ = "0.1.0"

from .config import ArenaConfig
from .arena import Arena
from .engine_core import make_commitment, generate_salt

__all__ = [
    "ArenaConfig",
    "Arena",
    "make_commitment",
    "generate_salt",
]
