"""
Pytest fixtures for MonArena tests.
"""

import pytest

from ..arena import Arena
from ..config import ArenaConfig
from ..engine_core.action import Action
from ..engine_core.commitment import make_commitment
from ..engine_core.reducer import Reducer
from ..engine_core.state import ArenaState

STRIKE = 100
CHALLENGER_SALT = 0xC0FFEE
OPPONENT_SALT = 0xBEEF


@pytest.fixture
def config() -> ArenaConfig:
    return ArenaConfig()


@pytest.fixture
def reducer(config) -> Reducer:
    return Reducer(config=config)


@pytest.fixture
def enrolled_state(reducer) -> ArenaState:
    """State with ash (Bulbasaur) and gary (Charmander) enrolled."""
    state = ArenaState()
    for caller, starter in (("ash", 1), ("gary", 2)):
        result = reducer.apply(state, Action.enroll(caller, starter))
        assert result.success
        state = result.new_state
    return state


@pytest.fixture
def pending_state(reducer, enrolled_state) -> ArenaState:
    """ash has challenged gary for 69 (battle 0)."""
    result = reducer.apply(enrolled_state, Action.challenge("ash", "gary", 69))
    assert result.success
    return result.new_state


@pytest.fixture
def active_state(reducer, pending_state) -> ArenaState:
    """Battle 0 accepted and waiting for commitments."""
    result = reducer.apply(pending_state, Action.accept("gary", 0))
    assert result.success
    return result.new_state


@pytest.fixture
def arena() -> Arena:
    """A fresh arena with default economy."""
    return Arena()


@pytest.fixture
def active_battle(arena) -> int:
    """Enroll ash and gary in `arena`, challenge and accept. Returns the battle id."""
    arena.enroll("ash", 1)
    arena.enroll("gary", 2)
    battle_id = arena.challenge("ash", "gary", 69)
    arena.accept_challenge("gary", battle_id)
    return battle_id


def play_round(arena, battle_id, moves=(STRIKE, STRIKE), salts=(CHALLENGER_SALT, OPPONENT_SALT)):
    """Commit then reveal one move per player. Returns the second reveal's result."""
    battle = arena.get_battle(battle_id)
    round_index = battle.round
    for who, move, salt in zip(battle.players, moves, salts):
        arena.submit_move_commitment(who, make_commitment(move, round_index, battle_id, salt), battle_id)
    result = None
    for who, move, salt in zip(battle.players, moves, salts):
        result = arena.submit_move_decommitment(who, move, battle_id, salt)
    return result
