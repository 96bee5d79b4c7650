"""
Action System - Actions, payloads, and results.

Actions represent every mutating arena operation:
1. Enrollment
2. Challenge lifecycle (challenge, accept, reject)
3. Round protocol (commit, reveal)

All state changes flow through actions. Each action carries the
pre-authenticated identity of the caller that issued it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ArenaError


class ActionType(Enum):
    """Types of actions in the system."""
    # Player registry
    ENROLL = "enroll"

    # Challenge lifecycle
    CHALLENGE = "challenge"
    ACCEPT_CHALLENGE = "accept_challenge"
    REJECT_CHALLENGE = "reject_challenge"

    # Round protocol
    COMMIT_MOVE = "commit_move"
    REVEAL_MOVE = "reveal_move"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    This is a generic container; validation happens in the reducer.
    """
    caller: str

    # Enrollment
    starter_id: int | None = None

    # Challenge
    opponent: str | None = None
    wager: int | None = None

    # Everything after the challenge targets a battle
    battle_id: int | None = None

    # Round protocol
    commitment: str | None = None
    move_id: int | None = None
    salt: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the arena state.

    Actions are:
    - Logged for replay
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload
    timestamp: float | None = None
    action_id: str | None = None

    @classmethod
    def enroll(cls, caller: str, starter_id: int) -> Action:
        """Factory for enrollment."""
        return cls(
            action_type=ActionType.ENROLL,
            payload=ActionPayload(caller=caller, starter_id=starter_id),
        )

    @classmethod
    def challenge(cls, caller: str, opponent: str, wager: int) -> Action:
        """Factory for issuing a challenge."""
        return cls(
            action_type=ActionType.CHALLENGE,
            payload=ActionPayload(caller=caller, opponent=opponent, wager=wager),
        )

    @classmethod
    def accept(cls, caller: str, battle_id: int) -> Action:
        """Factory for accepting a challenge."""
        return cls(
            action_type=ActionType.ACCEPT_CHALLENGE,
            payload=ActionPayload(caller=caller, battle_id=battle_id),
        )

    @classmethod
    def reject(cls, caller: str, battle_id: int) -> Action:
        """Factory for rejecting a challenge."""
        return cls(
            action_type=ActionType.REJECT_CHALLENGE,
            payload=ActionPayload(caller=caller, battle_id=battle_id),
        )

    @classmethod
    def commit(cls, caller: str, battle_id: int, commitment: str) -> Action:
        """Factory for a move commitment."""
        return cls(
            action_type=ActionType.COMMIT_MOVE,
            payload=ActionPayload(caller=caller, battle_id=battle_id, commitment=commitment),
        )

    @classmethod
    def reveal(cls, caller: str, battle_id: int, move_id: int, salt: int) -> Action:
        """Factory for a move reveal (decommitment)."""
        return cls(
            action_type=ActionType.REVEAL_MOVE,
            payload=ActionPayload(
                caller=caller, battle_id=battle_id, move_id=move_id, salt=salt,
            ),
        )

    def describe(self) -> dict[str, Any]:
        """Loggable summary. Never includes the salt."""
        p = self.payload
        summary: dict[str, Any] = {"type": self.action_type.value, "caller": p.caller}
        for name in ("starter_id", "opponent", "wager", "battle_id", "commitment", "move_id"):
            value = getattr(p, name)
            if value is not None:
                summary[name] = value
        return summary


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - The failure (if failed): message, code, kind and the exception itself
    - Human-readable changes and any value the operation returns
    """
    success: bool
    new_state: Any | None = None  # ArenaState
    error: str | None = None
    error_code: str | None = None
    error_kind: str | None = None
    exception: ArenaError | None = None

    # Return value of the operation (e.g. the new battle id)
    value: Any = None

    state_changes: list[str] = field(default_factory=list)

    # Round details when a reveal resolved a round
    round_outcome: Any | None = None  # RoundOutcome
    settlement: Any | None = None  # SettlementResult

    @classmethod
    def failure(cls, exc: ArenaError) -> ActionResult:
        """Create a failure result from a taxonomy error."""
        return cls(
            success=False,
            error=exc.message,
            error_code=exc.code,
            error_kind=exc.kind,
            exception=exc,
        )

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        value: Any = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            value=value,
        )
