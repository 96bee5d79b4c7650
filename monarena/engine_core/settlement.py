"""
Settlement - Pays out a battle's escrow.

Invoked exactly once, when a battle transitions to FINISHED:
- Decisive result: the whole escrow (2 x wager) goes to the winner, and
  the winner's roster creature earns a victory award of
  experience_per_level_defeated per level of the defeated creature.
- Double knockout: a draw; each side gets its own wager back.

Rejected challenges never reach settlement; refund_challenger() handles
them inline.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..config import ArenaConfig
from ..logging_config import get_logger, format_context
from .amounts import checked_add
from .state import ArenaState, Battle, BattleStatus

logger = get_logger(__name__)


@dataclass
class SettlementResult:
    """Who received what."""
    battle_id: int
    payouts: dict[str, int] = field(default_factory=dict)
    experience_awarded: dict[str, int] = field(default_factory=dict)
    draw: bool = False


def _credit(state: ArenaState, identity: str, amount: int, config: ArenaConfig):
    player = state.edit_player(identity)
    player.money = checked_add(player.money, amount, identity, config.max_money)


def settle(state: ArenaState, battle: Battle, config: ArenaConfig) -> SettlementResult:
    """
    Transfer the escrow of a finished battle.

    Mutates `state` and `battle` (the reducer's working copies). The
    victory award is the only change ever made to a roster creature
    outside a battle; all other creature changes happen to the battle
    snapshots inside TurnResolver.
    """
    if battle.status != BattleStatus.FINISHED:
        raise ValueError(f"Battle {battle.battle_id} is not finished")

    result = SettlementResult(battle_id=battle.battle_id)

    if battle.winner is None:
        result.draw = True
        for identity in battle.players:
            _credit(state, identity, battle.wager, config)
            result.payouts[identity] = battle.wager
    else:
        _credit(state, battle.winner, battle.escrow, config)
        result.payouts[battle.winner] = battle.escrow

        loser_slot = 1 - battle.index_of(battle.winner)
        defeated = battle.creatures[loser_slot]
        award = defeated.level * config.experience_per_level_defeated
        winner = state.edit_player(battle.winner)
        winner.active_creature.experience += award
        result.experience_awarded[battle.winner] = award

    battle.escrow = 0

    logger.info(format_context(
        "Battle settled",
        {
            "battle": battle.battle_id,
            "winner": battle.winner,
            "draw": result.draw,
            "payouts": result.payouts,
        },
    ))
    return result


def refund_challenger(state: ArenaState, battle: Battle, config: ArenaConfig) -> int:
    """Return the challenger's wager from escrow. Returns the amount refunded."""
    amount = battle.wager
    _credit(state, battle.challenger, amount, config)
    battle.escrow -= amount
    logger.info(format_context(
        "Challenge refunded",
        {"battle": battle.battle_id, "challenger": battle.challenger, "amount": amount},
    ))
    return amount
