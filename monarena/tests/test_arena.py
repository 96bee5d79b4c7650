"""
Integration tests for the Arena facade.

Tests:
- Full battle from enrollment to settlement
- Rejection and failure paths through the store
- History log
- Concurrent callers
"""

import threading

import pytest

from ..arena import Arena, ArenaStore
from ..config import ArenaConfig
from ..engine_core import BattleStatus, make_commitment
from ..engine_core.action import ActionType
from ..engine_core.errors import (
    AuthorizationError,
    IntegrityError,
    NotFoundError,
    ResourceError,
    StateError,
    ValidationError,
)
from .conftest import STRIKE, CHALLENGER_SALT, play_round


class TestFullBattle:
    """The complete fixture battle between two starters."""

    def test_strike_until_knockout(self, arena, active_battle):
        """Four rounds of Strike: Bulbasaur wins with 5 hp left."""
        hp_trace = []
        for _ in range(4):
            result = play_round(arena, active_battle)
            hp_trace.append(result.round_outcome.hp_after)

        assert hp_trace == [[35, 28], [25, 17], [15, 6], [5, 0]]

        battle = arena.get_battle(active_battle)
        assert battle.status == BattleStatus.FINISHED
        assert battle.winner == "ash"
        assert battle.turn == 16
        assert battle.escrow == 0

        ash = arena.get_player("ash")
        gary = arena.get_player("gary")
        assert ash.money == 1069
        assert gary.money == 931
        assert ash.active_creature.experience == 10
        assert gary.active_creature.experience == 0

    def test_final_reveal_carries_settlement(self, arena, active_battle):
        for _ in range(3):
            assert play_round(arena, active_battle).settlement is None
        result = play_round(arena, active_battle)

        assert result.new_state is None
        assert result.round_outcome.finished
        assert result.settlement.payouts == {"ash": 138}

    def test_money_is_conserved(self, arena, active_battle):
        """Balances plus escrow always add up to what was handed out."""
        def total():
            battle = arena.get_battle(active_battle)
            return arena.get_player("ash").money + arena.get_player("gary").money + battle.escrow

        assert total() == 2000
        for _ in range(4):
            play_round(arena, active_battle)
            assert total() == 2000

    def test_roster_hp_untouched_by_battle(self, arena, active_battle):
        play_round(arena, active_battle)
        assert arena.get_player("ash").active_creature.current_hp == 45
        assert arena.get_battle_pokemon("ash", active_battle).current_hp == 35

    def test_finished_battle_rejects_moves(self, arena, active_battle):
        for _ in range(4):
            play_round(arena, active_battle)

        commitment = make_commitment(STRIKE, 4, active_battle, CHALLENGER_SALT)
        with pytest.raises(StateError) as exc:
            arena.submit_move_commitment("ash", commitment, active_battle)
        assert exc.value.code == "InvalidState"

    def test_rematch_with_earned_experience(self, arena, active_battle):
        """A new battle snapshots the roster creature again, at full hp."""
        for _ in range(4):
            play_round(arena, active_battle)

        battle_id = arena.challenge("gary", "ash", 10)
        assert battle_id == active_battle + 1
        arena.accept_challenge("ash", battle_id)

        creature = arena.get_battle_pokemon("ash", battle_id)
        assert creature.current_hp == 45
        assert creature.experience == 10


class TestFailures:
    """Failures raise and leave the arena unchanged."""

    def test_enroll_twice(self, arena):
        arena.enroll("ash", 1)
        with pytest.raises(StateError) as exc:
            arena.enroll("ash", 2)
        assert exc.value.code == "AlreadyEnrolled"
        assert arena.get_player("ash").active_creature.species_id == 1

    def test_invalid_starter(self, arena):
        with pytest.raises(ValidationError):
            arena.enroll("ash", 9)
        with pytest.raises(StateError) as exc:
            arena.get_player("ash")
        assert exc.value.code == "NotEnrolled"

    def test_insufficient_funds_creates_no_battle(self, arena):
        arena.enroll("ash", 1)
        arena.enroll("gary", 2)

        with pytest.raises(ResourceError):
            arena.challenge("ash", "gary", 5000)
        with pytest.raises(NotFoundError):
            arena.get_battle(0)
        assert arena.challenge("ash", "gary", 5) == 0

    def test_reject_refunds_and_terminates(self, arena):
        arena.enroll("ash", 1)
        arena.enroll("gary", 2)
        battle_id = arena.challenge("ash", "gary", 69)

        battle = arena.reject_challenge("gary", battle_id)

        assert battle.status == BattleStatus.REJECTED
        assert arena.get_player("ash").money == 1000
        with pytest.raises(StateError):
            arena.accept_challenge("gary", battle_id)

    def test_bad_reveal_keeps_round_open(self, arena, active_battle):
        """After an InvalidReveal the right reveal still works."""
        for who, salt in (("ash", CHALLENGER_SALT), ("gary", CHALLENGER_SALT + 1)):
            arena.submit_move_commitment(
                who, make_commitment(STRIKE, 0, active_battle, salt), active_battle
            )

        with pytest.raises(IntegrityError):
            arena.submit_move_decommitment("ash", STRIKE, active_battle, 1)

        battle = arena.get_battle(active_battle)
        assert battle.turn == 2
        assert battle.revealed_moves == [None, None]
        arena.submit_move_decommitment("ash", STRIKE, active_battle, CHALLENGER_SALT)


class TestBattlePokemon:
    """Tests for get_battle_pokemon visibility."""

    def test_pending_battle(self, arena):
        arena.enroll("ash", 1)
        arena.enroll("gary", 2)
        battle_id = arena.challenge("ash", "gary", 1)

        with pytest.raises(StateError) as exc:
            arena.get_battle_pokemon("ash", battle_id)
        assert exc.value.code == "InvalidState"

    def test_outsider(self, arena, active_battle):
        with pytest.raises(AuthorizationError) as exc:
            arena.get_battle_pokemon("misty", active_battle)
        assert exc.value.code == "WrongCaller"

    def test_unknown_battle(self, arena):
        with pytest.raises(NotFoundError):
            arena.get_battle_pokemon("ash", 42)

    def test_each_side_sees_own_creature(self, arena, active_battle):
        assert arena.get_battle_pokemon("ash", active_battle).species_id == 1
        assert arena.get_battle_pokemon("gary", active_battle).species_id == 2

    def test_snapshot_is_a_copy(self, arena, active_battle):
        creature = arena.get_battle_pokemon("ash", active_battle)
        creature.current_hp = 0
        assert arena.get_battle_pokemon("ash", active_battle).current_hp == 45


class TestHistory:
    """Tests for the applied-action log."""

    def test_only_applied_actions_logged(self, arena, active_battle):
        with pytest.raises(ResourceError):
            arena.challenge("ash", "gary", 10_000)

        entries = arena.history()
        assert [e.action_type for e in entries] == [
            ActionType.ENROLL,
            ActionType.ENROLL,
            ActionType.CHALLENGE,
            ActionType.ACCEPT_CHALLENGE,
        ]
        assert [e.sequence for e in entries] == [0, 1, 2, 3]

    def test_filter_by_battle(self, arena, active_battle):
        play_round(arena, active_battle)

        entries = arena.history(active_battle)
        assert len(entries) == 6
        assert entries[0].action_type == ActionType.CHALLENGE
        assert all(e.battle_id == active_battle for e in entries)

    def test_salt_not_logged(self, arena, active_battle):
        play_round(arena, active_battle)
        reveals = [e for e in arena.history(active_battle) if e.action_type == ActionType.REVEAL_MOVE]
        assert reveals
        assert all("salt" not in e.details for e in reveals)

    def test_unknown_battle_history(self, arena):
        with pytest.raises(NotFoundError):
            arena.history(3)


class TestConcurrency:
    """Parallel callers are serialized by the store."""

    def test_parallel_challenges_get_unique_ids(self):
        arena = Arena(config=ArenaConfig(starting_money=100))
        arena.enroll("gary", 2)
        callers = [f"trainer{i}" for i in range(16)]
        for caller in callers:
            arena.enroll(caller, 1)

        ids = []
        errors = []

        def issue(caller):
            try:
                ids.append(arena.challenge(caller, "gary", 10))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=issue, args=(c,)) for c in callers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert sorted(ids) == list(range(16))

    def test_parallel_accepts_only_one_wins(self, arena):
        """The same pending battle can be accepted exactly once."""
        arena.enroll("ash", 1)
        arena.enroll("gary", 2)
        battle_id = arena.challenge("ash", "gary", 100)

        outcomes = []

        def accept():
            try:
                arena.accept_challenge("gary", battle_id)
                outcomes.append("ok")
            except StateError:
                outcomes.append("state")

        threads = [threading.Thread(target=accept) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert arena.get_player("gary").money == 900

    def test_shared_store(self):
        """Two facades over one store see the same state."""
        store = ArenaStore()
        first = Arena(store=store)
        second = Arena(store=store)

        first.enroll("ash", 1)
        assert second.get_player("ash").money == 1000
