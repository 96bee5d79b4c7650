"""
Tests for API layer.

Tests:
- API service methods
- Request/response serialization
- Error handling
"""

import pytest

from ..api.schemas import (
    EnrollRequest,
    ChallengeRequest,
    CommitmentRequest,
    RevealRequest,
    ErrorResponse,
    ErrorCode,
    ErrorKind,
)
from ..api.service import APIService, parse_salt
from ..engine_core import make_commitment
from ..engine_core.errors import ValidationError


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    @pytest.fixture
    def battle_id(self, service):
        """An accepted battle between ash and gary."""
        service.enroll("ash", EnrollRequest(starter_id=1))
        service.enroll("gary", EnrollRequest(starter_id=2))
        battle = service.challenge("ash", ChallengeRequest(opponent="gary", wager=69))
        service.accept_challenge("gary", battle.battle_id)
        return battle.battle_id

    def play_round(self, service, battle_id, salts=(11, 22)):
        round_index = service.get_battle(battle_id).round
        for who, salt in zip(("ash", "gary"), salts):
            commitment = make_commitment(100, round_index, battle_id, salt)
            service.submit_commitment(who, battle_id, CommitmentRequest(commitment=commitment))
        response = None
        for who, salt in zip(("ash", "gary"), salts):
            response = service.submit_reveal(who, battle_id, RevealRequest(move_id=100, salt=salt))
        return response

    def test_enroll(self, service):
        response = service.enroll("ash", EnrollRequest(starter_id=1))

        assert response.identity == "ash"
        assert response.money == 1000
        assert response.enrolled is True
        assert response.roster[0].species_name == "Bulbasaur"

    def test_enroll_invalid_starter(self, service):
        response = service.enroll("ash", EnrollRequest(starter_id=7))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_STARTER
        assert response.kind == ErrorKind.VALIDATION
        assert response.identifier == 7

    def test_challenge_returns_pending_battle(self, service):
        service.enroll("ash", EnrollRequest(starter_id=1))
        service.enroll("gary", EnrollRequest(starter_id=2))

        response = service.challenge("ash", ChallengeRequest(opponent="gary", wager=69))

        assert response.battle_id == 0
        assert response.status == 0
        assert response.status_name == "PENDING"
        assert response.escrow == 69

    def test_get_missing_battle(self, service):
        response = service.get_battle(5)

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.NOT_FOUND
        assert response.kind == ErrorKind.NOT_FOUND

    def test_reveal_reports_round(self, service, battle_id):
        response = self.play_round(service, battle_id)

        assert response.round_resolved
        assert response.round.damage == [11, 10]
        assert response.round.hp_after == [35, 28]
        assert response.settlement is None
        assert response.battle.turn == 4

    def test_first_reveal_has_no_round(self, service, battle_id):
        for who, salt in (("ash", 11), ("gary", 22)):
            commitment = make_commitment(100, 0, battle_id, salt)
            service.submit_commitment(who, battle_id, CommitmentRequest(commitment=commitment))

        response = service.submit_reveal("ash", battle_id, RevealRequest(move_id=100, salt=11))

        assert not response.round_resolved
        assert response.round is None
        assert response.battle.revealed_moves == [100, None]

    def test_full_battle_settles(self, service, battle_id):
        responses = [self.play_round(service, battle_id) for _ in range(4)]
        final = responses[-1]

        assert final.round.finished
        assert final.round.winner == "ash"
        assert final.settlement.payouts == {"ash": 138}
        assert final.settlement.experience_awarded == {"ash": 10}
        assert final.battle.status_name == "FINISHED"
        assert service.get_player("ash").money == 1069

    def test_hex_salt_reveal(self, service, battle_id):
        salt = 0xDEADBEEF
        for who in ("ash", "gary"):
            commitment = make_commitment(100, 0, battle_id, salt)
            service.submit_commitment(who, battle_id, CommitmentRequest(commitment=commitment))

        response = service.submit_reveal("ash", battle_id, RevealRequest(move_id=100, salt="0xdeadbeef"))
        assert not isinstance(response, ErrorResponse)

    def test_bad_reveal_error(self, service, battle_id):
        for who, salt in (("ash", 11), ("gary", 22)):
            commitment = make_commitment(100, 0, battle_id, salt)
            service.submit_commitment(who, battle_id, CommitmentRequest(commitment=commitment))

        response = service.submit_reveal("ash", battle_id, RevealRequest(move_id=100, salt=22))

        assert response.error_code == ErrorCode.INVALID_REVEAL
        assert response.kind == ErrorKind.INTEGRITY

    def test_battle_pokemon(self, service, battle_id):
        response = service.get_battle_pokemon("gary", battle_id)
        assert response.species_name == "Charmander"
        assert response.current_hp == 39

    def test_history(self, service, battle_id):
        response = service.history(battle_id)

        assert response.count == 2
        assert [e.action_type for e in response.entries] == ["challenge", "accept_challenge"]

    def test_catalog(self, service):
        species = service.list_species()
        moves = service.list_moves()

        starters = [s.id for s in species.species if s.is_starter]
        assert starters == [1, 2, 3]
        assert any(m.id == 100 and m.power == 100 for m in moves.moves)
        assert moves.count == len(moves.moves)


class TestParseSalt:
    """Tests for salt parsing."""

    @pytest.mark.parametrize("value,expected", [
        (5, 5),
        ("5", 5),
        ("0x10", 16),
        ("0XfF", 255),
    ])
    def test_accepted_forms(self, value, expected):
        assert parse_salt(value) == expected

    @pytest.mark.parametrize("value", ["salt", "0xzz", "", True, None])
    def test_rejected_forms(self, value):
        with pytest.raises(ValidationError) as exc:
            parse_salt(value)
        assert exc.value.code == "InvalidSalt"
