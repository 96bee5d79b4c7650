"""
Errors - Failure taxonomy for arena operations.

Every failed operation raises exactly one of these. The reducer turns
them into failed ActionResults; the store discards the working copy so
nothing a failed operation touched is ever committed.

Kinds:
- ValidationError: bad input (InvalidStarter, InvalidWager, ...)
- StateError: wrong lifecycle state (InvalidState, AlreadyCommitted, ...)
- AuthorizationError: caller may not do this (WrongCaller, SelfChallenge)
- ResourceError: not enough (or too much) money
- IntegrityError: reveal does not match the stored commitment
- NotFoundError: no such battle
"""

from __future__ import annotations
from typing import Any


class ArenaError(Exception):
    """
    Base for every arena failure.

    Carries a machine-readable code and the offending identifier
    (identity, battle id, starter id, ...) exactly as the caller gave it.
    """
    kind = "ArenaError"

    def __init__(self, code: str, identifier: Any = None, message: str | None = None):
        self.code = code
        self.identifier = identifier
        self.message = message or code
        super().__init__(f"{code}: {self.message} [{identifier!r}]")

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "code": self.code,
            "identifier": self.identifier,
            "message": self.message,
        }


class ValidationError(ArenaError):
    kind = "ValidationError"


class StateError(ArenaError):
    kind = "StateError"


class AuthorizationError(ArenaError):
    kind = "AuthorizationError"


class ResourceError(ArenaError):
    kind = "ResourceError"


class IntegrityError(ArenaError):
    kind = "IntegrityError"


class NotFoundError(ArenaError):
    kind = "NotFoundError"


# Shorthand constructors, one per failure code

def invalid_starter(starter_id: Any) -> ValidationError:
    return ValidationError("InvalidStarter", starter_id, "Invalid starter choice")


def invalid_wager(wager: Any) -> ValidationError:
    return ValidationError("InvalidWager", wager, "Wager must be a non-negative integer")


def invalid_commitment(commitment: Any) -> ValidationError:
    return ValidationError(
        "InvalidCommitment", commitment, "Commitment must be a 32-byte hex digest"
    )


def invalid_move(move_id: Any) -> ValidationError:
    return ValidationError("InvalidMove", move_id, "Move id must be in 0..255")


def invalid_salt(salt: Any) -> ValidationError:
    return ValidationError("InvalidSalt", salt, "Salt must be an unsigned 256-bit integer")


def already_enrolled(identity: str) -> StateError:
    return StateError("AlreadyEnrolled", identity, "Already enrolled")


def not_enrolled(identity: str) -> StateError:
    return StateError("NotEnrolled", identity, "Player is not enrolled")


def invalid_state(battle_id: int, status: Any) -> StateError:
    return StateError(
        "InvalidState", battle_id, f"Battle {battle_id} is {getattr(status, 'name', status)}"
    )


def already_committed(identity: str) -> StateError:
    return StateError("AlreadyCommitted", identity, "Move already committed this round")


def already_revealed(identity: str) -> StateError:
    return StateError("AlreadyRevealed", identity, "Move already revealed this round")


def wrong_caller(identity: str) -> AuthorizationError:
    return AuthorizationError("WrongCaller", identity, "Caller may not act on this battle")


def self_challenge(identity: str) -> AuthorizationError:
    return AuthorizationError("SelfChallenge", identity, "Cannot challenge yourself")


def insufficient_funds(identity: str) -> ResourceError:
    return ResourceError("InsufficientFunds", identity, "Balance is lower than the wager")


def balance_overflow(identity: str) -> ResourceError:
    return ResourceError("BalanceOverflow", identity, "Balance would exceed the maximum")


def invalid_reveal(identity: str) -> IntegrityError:
    return IntegrityError(
        "InvalidReveal", identity, "Revealed move does not match the commitment"
    )


def battle_not_found(battle_id: Any) -> NotFoundError:
    return NotFoundError("NotFound", battle_id, f"Battle {battle_id} not found")
