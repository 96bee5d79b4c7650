"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the arena.
All responses include explicit types for OpenAPI schema generation.

Error kinds (HTTP status):
- ValidationError (422): malformed input, e.g. InvalidStarter, InvalidMove
- StateError (409): wrong lifecycle state, e.g. InvalidState, AlreadyCommitted
- AuthorizationError (403): WrongCaller, SelfChallenge; 401 when no identity
- ResourceError (402): InsufficientFunds, BalanceOverflow
- IntegrityError (400): InvalidReveal
- NotFoundError (404): NotFound
"""

from enum import Enum
from typing import Optional, Any, Union
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorKind(str, Enum):
    """Failure taxonomy."""
    VALIDATION = "ValidationError"
    STATE = "StateError"
    AUTHORIZATION = "AuthorizationError"
    RESOURCE = "ResourceError"
    INTEGRITY = "IntegrityError"
    NOT_FOUND = "NotFoundError"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_STARTER = "InvalidStarter"
    INVALID_WAGER = "InvalidWager"
    INVALID_COMMITMENT = "InvalidCommitment"
    INVALID_MOVE = "InvalidMove"
    INVALID_SALT = "InvalidSalt"
    ALREADY_ENROLLED = "AlreadyEnrolled"
    NOT_ENROLLED = "NotEnrolled"
    INVALID_STATE = "InvalidState"
    ALREADY_COMMITTED = "AlreadyCommitted"
    ALREADY_REVEALED = "AlreadyRevealed"
    WRONG_CALLER = "WrongCaller"
    SELF_CHALLENGE = "SelfChallenge"
    MISSING_IDENTITY = "MissingIdentity"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    BALANCE_OVERFLOW = "BalanceOverflow"
    INVALID_REVEAL = "InvalidReveal"
    NOT_FOUND = "NotFound"


# =============================================================================
# Shared Models
# =============================================================================

class CreatureInfo(BaseModel):
    """A creature, in a roster or in a battle."""
    species_id: int
    species_name: Optional[str] = None
    level: int
    max_hp: int
    current_hp: int
    attack: int
    defense: int
    speed: int
    experience: int = 0

    model_config = {"from_attributes": True}


class SpeciesInfo(BaseModel):
    """Base stats of a species."""
    id: int
    name: str
    hp: int
    attack: int
    defense: int
    speed: int
    is_starter: bool = False

    model_config = {"from_attributes": True}


class MoveInfo(BaseModel):
    """A move and its power."""
    id: int
    name: str
    power: int

    model_config = {"from_attributes": True}


class RoundOutcomeInfo(BaseModel):
    """Result of one resolved round; lists are ordered [challenger, challenged]."""
    round_index: int
    moves: list[int]
    damage: list[int]
    applied: list[int]
    hp_after: list[int]
    finished: bool = False
    winner: Optional[str] = None


class SettlementInfo(BaseModel):
    """Escrow payout at the end of a battle."""
    payouts: dict[str, int] = Field(default_factory=dict)
    experience_awarded: dict[str, int] = Field(default_factory=dict)
    draw: bool = False


# =============================================================================
# Request Models
# =============================================================================

class EnrollRequest(BaseModel):
    """Request to enroll the caller."""
    starter_id: int = Field(..., description="Species id of the starter creature")


class ChallengeRequest(BaseModel):
    """Request to challenge another player."""
    opponent: str = Field(..., description="Identity of the challenged player")
    wager: int = Field(..., description="Amount each side puts in escrow")


class CommitmentRequest(BaseModel):
    """Request to commit a hidden move."""
    commitment: str = Field(
        ..., description="Hex SHA-256 of move_id|round|battle_id|salt (0x prefix optional)"
    )


class RevealRequest(BaseModel):
    """Request to reveal a committed move."""
    move_id: int = Field(..., description="Move id, 0-255")
    salt: Union[int, str] = Field(
        ..., description="Salt used in the commitment: integer or 0x-prefixed hex"
    )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    kind: ErrorKind = Field(..., description="Failure category")
    identifier: Optional[Any] = Field(None, description="The offending identifier, verbatim")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class PlayerResponse(BaseModel):
    """A player's balance and roster."""
    identity: str
    money: int
    roster: list[CreatureInfo] = Field(default_factory=list)
    enrolled: bool = True
    api_version: str = "v1"


class BattleResponse(BaseModel):
    """Snapshot of a battle."""
    battle_id: int
    players: list[str]
    wager: int
    status: int = Field(..., description="0 pending, 1 rejected, 2 active, 3 awaiting reveal, 4 finished")
    status_name: str
    turn: int
    round: int
    commitments: list[Optional[str]] = Field(default_factory=list)
    revealed_moves: list[Optional[int]] = Field(default_factory=list)
    escrow: int = 0
    winner: Optional[str] = None
    api_version: str = "v1"


class RevealResponse(BaseModel):
    """Response after a reveal; round details when it completed the round."""
    battle: BattleResponse
    round_resolved: bool = False
    round: Optional[RoundOutcomeInfo] = None
    settlement: Optional[SettlementInfo] = None
    api_version: str = "v1"


class HistoryEntryInfo(BaseModel):
    """One applied action."""
    sequence: int
    action_id: str
    timestamp: float
    action_type: str
    caller: str
    battle_id: Optional[int] = None
    details: dict[str, Any] = Field(default_factory=dict)
    changes: list[str] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    """Applied actions, oldest first."""
    battle_id: Optional[int] = None
    entries: list[HistoryEntryInfo]
    count: int


class SpeciesListResponse(BaseModel):
    species: list[SpeciesInfo]
    count: int


class MoveListResponse(BaseModel):
    moves: list[MoveInfo]
    count: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
