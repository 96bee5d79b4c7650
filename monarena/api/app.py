"""
FastAPI Application - REST API for the arena.

Endpoints:
    POST   /api/v1/players                        Enroll the caller
    GET    /api/v1/players/me                     Caller's balance and roster
    POST   /api/v1/battles                        Challenge another player
    GET    /api/v1/battles/{id}                   Battle snapshot
    POST   /api/v1/battles/{id}/accept            Accept a challenge
    POST   /api/v1/battles/{id}/reject            Reject a challenge
    GET    /api/v1/battles/{id}/pokemon           Caller's active creature
    POST   /api/v1/battles/{id}/commitments       Commit a hidden move
    POST   /api/v1/battles/{id}/reveals           Reveal a committed move
    GET    /api/v1/battles/{id}/history           Applied actions for a battle
    GET    /api/v1/catalog/species                Species table
    GET    /api/v1/catalog/moves                  Move table

Caller identity:
    Every identity-bound endpoint reads the X-Caller-Identity header. The
    hosting environment authenticates callers before the request reaches
    this app; the header value is trusted as-is.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import os

from fastapi import FastAPI, Header, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..arena import Arena
from ..config import ArenaConfig
from .service import APIService
from .schemas import (
    # Request models
    EnrollRequest,
    ChallengeRequest,
    CommitmentRequest,
    RevealRequest,
    # Response models
    PlayerResponse,
    BattleResponse,
    RevealResponse,
    HistoryResponse,
    SpeciesListResponse,
    MoveListResponse,
    ErrorResponse,
    HealthResponse,
    CreatureInfo,
    # Enums
    ErrorCode,
    ErrorKind,
)

# Environment configuration
MONARENA_ENV = os.getenv("MONARENA_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
IDENTITY_HEADER = "X-Caller-Identity"

KIND_STATUS = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.STATE: status.HTTP_409_CONFLICT,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.RESOURCE: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorKind.INTEGRITY: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (400, 401, 402, 403, 404, 409, 422)
}


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="MonArena API",
        description="""
Wagered creature battles with commit-reveal moves.

## Round Flow

1. Both players `POST /commitments` with `sha256(move_id | round | battle_id | salt)`
2. Once both are in, the battle is `AWAITING_REVEAL`
3. Both players `POST /reveals` with `move_id` and `salt`
4. The second reveal resolves the round; at 0 hp the battle finishes and
   the escrow is paid out

## Error Kinds

| Kind | Status |
|------|--------|
| `ValidationError` | 422 |
| `StateError` | 409 |
| `AuthorizationError` | 403 (401 without identity) |
| `ResourceError` | 402 |
| `IntegrityError` | 400 |
| `NotFoundError` | 404 |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse, status_code: Optional[int] = None) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code or KIND_STATUS[error.kind],
            content=error.model_dump(mode="json"),
        )

    def missing_identity() -> JSONResponse:
        return make_error_response(
            ErrorResponse(
                error=f"Missing {IDENTITY_HEADER} header",
                error_code=ErrorCode.MISSING_IDENTITY,
                kind=ErrorKind.AUTHORIZATION,
            ),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    def respond(response, status_code: int = status.HTTP_200_OK):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))

    Identity = Annotated[Optional[str], Header(alias=IDENTITY_HEADER)]

    # =========================================================================
    # Player Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/players",
        response_model=PlayerResponse,
        status_code=status.HTTP_201_CREATED,
        responses=ERROR_RESPONSES,
        tags=["Players"],
        summary="Enroll the caller with a starter creature",
    )
    async def enroll(request: EnrollRequest, caller: Identity = None) -> Union[PlayerResponse, JSONResponse]:
        if not caller:
            return missing_identity()
        return respond(api_service.enroll(caller, request), status.HTTP_201_CREATED)

    @app.get(
        "/api/v1/players/me",
        response_model=PlayerResponse,
        responses=ERROR_RESPONSES,
        tags=["Players"],
        summary="Get the caller's balance and roster",
    )
    async def get_player(caller: Identity = None) -> Union[PlayerResponse, JSONResponse]:
        if not caller:
            return missing_identity()
        return respond(api_service.get_player(caller))

    # =========================================================================
    # Battle Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/battles",
        response_model=BattleResponse,
        status_code=status.HTTP_201_CREATED,
        responses=ERROR_RESPONSES,
        tags=["Battles"],
        summary="Challenge another player",
    )
    async def challenge(request: ChallengeRequest, caller: Identity = None) -> Union[BattleResponse, JSONResponse]:
        """Escrows the wager from the caller and opens a PENDING battle."""
        if not caller:
            return missing_identity()
        return respond(api_service.challenge(caller, request), status.HTTP_201_CREATED)

    @app.get(
        "/api/v1/battles/{battle_id}",
        response_model=BattleResponse,
        responses=ERROR_RESPONSES,
        tags=["Battles"],
        summary="Get a battle",
    )
    async def get_battle(battle_id: int) -> Union[BattleResponse, JSONResponse]:
        return respond(api_service.get_battle(battle_id))

    @app.post(
        "/api/v1/battles/{battle_id}/accept",
        response_model=BattleResponse,
        responses=ERROR_RESPONSES,
        tags=["Battles"],
        summary="Accept a challenge",
    )
    async def accept_challenge(battle_id: int, caller: Identity = None) -> Union[BattleResponse, JSONResponse]:
        if not caller:
            return missing_identity()
        return respond(api_service.accept_challenge(caller, battle_id))

    @app.post(
        "/api/v1/battles/{battle_id}/reject",
        response_model=BattleResponse,
        responses=ERROR_RESPONSES,
        tags=["Battles"],
        summary="Reject a challenge",
    )
    async def reject_challenge(battle_id: int, caller: Identity = None) -> Union[BattleResponse, JSONResponse]:
        if not caller:
            return missing_identity()
        return respond(api_service.reject_challenge(caller, battle_id))

    @app.get(
        "/api/v1/battles/{battle_id}/pokemon",
        response_model=CreatureInfo,
        responses=ERROR_RESPONSES,
        tags=["Battles"],
        summary="Get the caller's active creature in a battle",
    )
    async def get_battle_pokemon(battle_id: int, caller: Identity = None) -> Union[CreatureInfo, JSONResponse]:
        if not caller:
            return missing_identity()
        return respond(api_service.get_battle_pokemon(caller, battle_id))

    @app.get(
        "/api/v1/battles/{battle_id}/history",
        response_model=HistoryResponse,
        responses=ERROR_RESPONSES,
        tags=["Battles"],
        summary="Applied actions for a battle",
    )
    async def battle_history(battle_id: int) -> Union[HistoryResponse, JSONResponse]:
        return respond(api_service.history(battle_id))

    # =========================================================================
    # Round Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/battles/{battle_id}/commitments",
        response_model=BattleResponse,
        responses=ERROR_RESPONSES,
        tags=["Rounds"],
        summary="Commit a hidden move for the current round",
    )
    async def submit_commitment(
        battle_id: int,
        request: CommitmentRequest,
        caller: Identity = None,
    ) -> Union[BattleResponse, JSONResponse]:
        if not caller:
            return missing_identity()
        return respond(api_service.submit_commitment(caller, battle_id, request))

    @app.post(
        "/api/v1/battles/{battle_id}/reveals",
        response_model=RevealResponse,
        responses=ERROR_RESPONSES,
        tags=["Rounds"],
        summary="Reveal a committed move",
    )
    async def submit_reveal(
        battle_id: int,
        request: RevealRequest,
        caller: Identity = None,
    ) -> Union[RevealResponse, JSONResponse]:
        """
        Reveal move and salt. The second reveal of a round resolves it;
        the response then carries the round outcome and, if the battle
        ended, the settlement.
        """
        if not caller:
            return missing_identity()
        return respond(api_service.submit_reveal(caller, battle_id, request))

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/catalog/species",
        response_model=SpeciesListResponse,
        tags=["Catalog"],
        summary="List species",
    )
    async def list_species() -> SpeciesListResponse:
        return api_service.list_species()

    @app.get(
        "/api/v1/catalog/moves",
        response_model=MoveListResponse,
        tags=["Catalog"],
        summary="List moves",
    )
    async def list_moves() -> MoveListResponse:
        return api_service.list_moves()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="monarena",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "MonArena API",
            "version": __version__,
            "env": MONARENA_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn monarena.api.app:app
app = create_app(APIService(arena=Arena(ArenaConfig.from_env())))
