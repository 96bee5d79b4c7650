"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to Arena calls
2. Converts ArenaErrors to ErrorResponses
3. Formats snapshots as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

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
    SpeciesListResponse,
    MoveListResponse,
    ErrorResponse,
    # Shared
    CreatureInfo,
    RoundOutcomeInfo,
    SettlementInfo,
    HistoryEntryInfo,
    SpeciesInfo,
    MoveInfo,
)
from ..arena import Arena, HistoryEntry
from ..catalog import SPECIES, MOVES, get_species
from ..engine_core import errors
from ..engine_core.errors import ArenaError
from ..engine_core.state import Battle, Creature, Player


def parse_salt(value: Union[int, str]) -> int:
    """Accept a salt as an integer or a 0x-prefixed hex string."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        except ValueError:
            raise errors.invalid_salt(value) from None
    raise errors.invalid_salt(value)


def error_response(exc: ArenaError) -> ErrorResponse:
    """Convert an ArenaError to an ErrorResponse."""
    return ErrorResponse(
        error=exc.message,
        error_code=exc.code,
        kind=exc.kind,
        identifier=exc.identifier,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        service.enroll("ash", EnrollRequest(starter_id=1))
        battle = service.challenge("ash", ChallengeRequest(opponent="gary", wager=69))
        service.accept_challenge("gary", battle.battle_id)
    """
    arena: Arena = field(default_factory=Arena)

    def enroll(self, caller: str, request: EnrollRequest) -> PlayerResponse | ErrorResponse:
        try:
            player = self.arena.enroll(caller, request.starter_id)
        except ArenaError as e:
            return error_response(e)
        return self._player_response(player)

    def get_player(self, caller: str) -> PlayerResponse | ErrorResponse:
        try:
            player = self.arena.get_player(caller)
        except ArenaError as e:
            return error_response(e)
        return self._player_response(player)

    def challenge(self, caller: str, request: ChallengeRequest) -> BattleResponse | ErrorResponse:
        try:
            battle_id = self.arena.challenge(caller, request.opponent, request.wager)
            battle = self.arena.get_battle(battle_id)
        except ArenaError as e:
            return error_response(e)
        return self._battle_response(battle)

    def accept_challenge(self, caller: str, battle_id: int) -> BattleResponse | ErrorResponse:
        try:
            battle = self.arena.accept_challenge(caller, battle_id)
        except ArenaError as e:
            return error_response(e)
        return self._battle_response(battle)

    def reject_challenge(self, caller: str, battle_id: int) -> BattleResponse | ErrorResponse:
        try:
            battle = self.arena.reject_challenge(caller, battle_id)
        except ArenaError as e:
            return error_response(e)
        return self._battle_response(battle)

    def get_battle(self, battle_id: int) -> BattleResponse | ErrorResponse:
        try:
            battle = self.arena.get_battle(battle_id)
        except ArenaError as e:
            return error_response(e)
        return self._battle_response(battle)

    def get_battle_pokemon(self, caller: str, battle_id: int) -> CreatureInfo | ErrorResponse:
        try:
            creature = self.arena.get_battle_pokemon(caller, battle_id)
        except ArenaError as e:
            return error_response(e)
        return self._creature_info(creature)

    def submit_commitment(
        self,
        caller: str,
        battle_id: int,
        request: CommitmentRequest,
    ) -> BattleResponse | ErrorResponse:
        try:
            battle = self.arena.submit_move_commitment(caller, request.commitment, battle_id)
        except ArenaError as e:
            return error_response(e)
        return self._battle_response(battle)

    def submit_reveal(
        self,
        caller: str,
        battle_id: int,
        request: RevealRequest,
    ) -> RevealResponse | ErrorResponse:
        try:
            salt = parse_salt(request.salt)
            result = self.arena.submit_move_decommitment(caller, request.move_id, battle_id, salt)
            battle = self.arena.get_battle(battle_id)
        except ArenaError as e:
            return error_response(e)

        outcome = result.round_outcome
        settlement = result.settlement
        return RevealResponse(
            battle=self._battle_response(battle),
            round_resolved=outcome is not None,
            round=RoundOutcomeInfo(
                round_index=outcome.round_index,
                moves=outcome.moves,
                damage=outcome.damage,
                applied=outcome.applied,
                hp_after=outcome.hp_after,
                finished=outcome.finished,
                winner=(
                    battle.players[outcome.winner_slot]
                    if outcome.winner_slot is not None else None
                ),
            ) if outcome else None,
            settlement=SettlementInfo(
                payouts=settlement.payouts,
                experience_awarded=settlement.experience_awarded,
                draw=settlement.draw,
            ) if settlement else None,
        )

    def history(self, battle_id: int | None = None) -> HistoryResponse | ErrorResponse:
        try:
            entries = self.arena.history(battle_id)
        except ArenaError as e:
            return error_response(e)
        return HistoryResponse(
            battle_id=battle_id,
            entries=[self._history_entry(e) for e in entries],
            count=len(entries),
        )

    def list_species(self) -> SpeciesListResponse:
        species = [
            SpeciesInfo(
                id=s.id,
                name=s.name,
                hp=s.hp,
                attack=s.attack,
                defense=s.defense,
                speed=s.speed,
                is_starter=s.id in self.arena.config.starter_ids,
            )
            for s in SPECIES.values()
        ]
        return SpeciesListResponse(species=species, count=len(species))

    def list_moves(self) -> MoveListResponse:
        moves = [MoveInfo.model_validate(m) for m in sorted(MOVES.values(), key=lambda m: m.id)]
        return MoveListResponse(moves=moves, count=len(moves))

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _creature_info(self, creature: Creature) -> CreatureInfo:
        species = get_species(creature.species_id)
        return CreatureInfo(
            species_id=creature.species_id,
            species_name=species.name if species else None,
            level=creature.level,
            max_hp=creature.max_hp,
            current_hp=creature.current_hp,
            attack=creature.attack,
            defense=creature.defense,
            speed=creature.speed,
            experience=creature.experience,
        )

    def _player_response(self, player: Player) -> PlayerResponse:
        return PlayerResponse(
            identity=player.identity,
            money=player.money,
            roster=[self._creature_info(c) for c in player.roster],
            enrolled=player.enrolled,
        )

    def _battle_response(self, battle: Battle) -> BattleResponse:
        return BattleResponse(
            battle_id=battle.battle_id,
            players=list(battle.players),
            wager=battle.wager,
            status=int(battle.status),
            status_name=battle.status.name,
            turn=battle.turn,
            round=battle.round,
            commitments=list(battle.commitments),
            revealed_moves=list(battle.revealed_moves),
            escrow=battle.escrow,
            winner=battle.winner,
        )

    def _history_entry(self, entry: HistoryEntry) -> HistoryEntryInfo:
        return HistoryEntryInfo(
            sequence=entry.sequence,
            action_id=entry.action_id,
            timestamp=entry.timestamp,
            action_type=entry.action_type.value,
            caller=entry.caller,
            battle_id=entry.battle_id,
            details=entry.details,
            changes=entry.changes,
        )
