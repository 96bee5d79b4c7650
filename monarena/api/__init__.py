"""
API Module - HTTP interface.

Exposes the arena via a REST API. Clients:
1. Enroll with a starter
2. Challenge, accept or reject
3. Commit and reveal moves each round
4. Read battles, creatures, balances and history

Caller identity comes from the hosting environment (X-Caller-Identity).
"""

from .schemas import (
    # Requests
    EnrollRequest,
    ChallengeRequest,
    CommitmentRequest,
    RevealRequest,
    # Responses
    PlayerResponse,
    BattleResponse,
    RevealResponse,
    HistoryResponse,
    ErrorResponse,
    # Shared
    CreatureInfo,
    RoundOutcomeInfo,
    SettlementInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "EnrollRequest",
    "ChallengeRequest",
    "CommitmentRequest",
    "RevealRequest",
    # Responses
    "PlayerResponse",
    "BattleResponse",
    "RevealResponse",
    "HistoryResponse",
    "ErrorResponse",
    # Shared
    "CreatureInfo",
    "RoundOutcomeInfo",
    "SettlementInfo",
    # Service
    "APIService",
    "create_app",
]
