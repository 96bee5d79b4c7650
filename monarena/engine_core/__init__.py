"""
Engine Core - Deterministic battle state management.

The engine is the runtime that:
1. Holds ArenaState (players and battles)
2. Applies actions via the reducer
3. Binds and verifies hidden moves (commitment protocol)
4. Resolves rounds (turn resolver)
5. Pays out escrow (settlement)
"""

from .state import ArenaState, Battle, BattleStatus, Creature, Player
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action
from .commitment import make_commitment, verify_commitment, generate_salt
from .resolver import TurnResolver, DamageModel, RoundOutcome
from .settlement import settle, refund_challenger, SettlementResult
from .errors import (
    ArenaError,
    ValidationError,
    StateError,
    AuthorizationError,
    ResourceError,
    IntegrityError,
    NotFoundError,
)

__all__ = [
    "ArenaState",
    "Battle",
    "BattleStatus",
    "Creature",
    "Player",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "make_commitment",
    "verify_commitment",
    "generate_salt",
    "TurnResolver",
    "DamageModel",
    "RoundOutcome",
    "settle",
    "refund_challenger",
    "SettlementResult",
    "ArenaError",
    "ValidationError",
    "StateError",
    "AuthorizationError",
    "ResourceError",
    "IntegrityError",
    "NotFoundError",
]
