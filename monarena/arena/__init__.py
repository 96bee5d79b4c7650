"""
Arena Module - Owns the live arena state.

The store is the single writer: every mutating call is applied under
one lock to a copy-on-write working state and committed only if it
succeeds. The Arena facade exposes the caller-facing operations on top of it.
"""

from .store import ArenaStore, HistoryEntry
from .manager import Arena

__all__ = [
    "ArenaStore",
    "HistoryEntry",
    "Arena",
]
