"""
Arena configuration.

Defaults: 1000 coins and one level-5 starter per enrolled player.
Values can be overridden from the environment.
"""

from __future__ import annotations
from dataclasses import dataclass
import os

UINT256_MAX = 2**256 - 1


@dataclass(frozen=True)
class ArenaConfig:
    """Tunable economy and enrollment parameters."""
    starting_money: int = 1000
    starter_level: int = 5
    starter_ids: tuple[int, ...] = (1, 2, 3)

    # Money is bounded like the unsigned ledger it models
    max_money: int = UINT256_MAX

    # Victory award for the winner's roster creature
    experience_per_level_defeated: int = 2

    @classmethod
    def from_env(cls) -> ArenaConfig:
        """
        Build a config from MONARENA_* environment variables.

        Unset variables keep their defaults.
        """
        defaults = cls()
        starters = os.getenv("MONARENA_STARTERS")
        return cls(
            starting_money=int(os.getenv("MONARENA_STARTING_MONEY", defaults.starting_money)),
            starter_level=int(os.getenv("MONARENA_STARTER_LEVEL", defaults.starter_level)),
            starter_ids=(
                tuple(int(s) for s in starters.split(",") if s.strip())
                if starters else defaults.starter_ids
            ),
        )
