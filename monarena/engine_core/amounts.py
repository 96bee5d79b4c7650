"""
Bounded integer arithmetic for balances and hit points.

Money behaves like an unsigned ledger value: additions are checked
against the configured ceiling. Hit points saturate at zero.
"""

from ..config import UINT256_MAX
from .errors import balance_overflow


def checked_add(balance: int, amount: int, identity: str, ceiling: int = UINT256_MAX) -> int:
    """Add to a balance, raising BalanceOverflow past the ceiling."""
    total = balance + amount
    if total > ceiling:
        raise balance_overflow(identity)
    return total


def saturating_sub(value: int, amount: int) -> int:
    """Subtract, flooring at zero."""
    return max(0, value - amount)
