"""
Turn Resolver - Applies a round's revealed moves.

Resolution is simultaneous: both damages are computed from the
pre-round snapshot, then both are applied. Speed does not decide who
hits first, and a creature knocked out this round still lands its hit.

The damage function is deterministic and parameterized:

    level_factor = (2 * level) // level_divisor + level_offset
    damage       = ((level_factor * power * attack) // defense) // scale + base

Moves with zero power deal no damage. With the default coefficients a
level-5 attacker using a 100-power move deals 11 damage at 49 attack
into 43 defense, and 10 damage at 52 attack into 49 defense.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..catalog.moves import get_move
from ..logging_config import get_logger, format_context
from .amounts import saturating_sub
from .state import Battle, BattleStatus, Creature

logger = get_logger(__name__)


@dataclass(frozen=True)
class DamageModel:
    """Coefficients of the damage function."""
    level_divisor: int = 5
    level_offset: int = 2
    scale: int = 50
    base: int = 2

    def damage(self, power: int, attacker: Creature, defender: Creature) -> int:
        """Damage dealt by attacker to defender with a move of given power."""
        if power <= 0:
            return 0
        level_factor = (2 * attacker.level) // self.level_divisor + self.level_offset
        # Defense of 0 would divide by zero; treat it as 1
        defense = max(defender.defense, 1)
        return ((level_factor * power * attacker.attack) // defense) // self.scale + self.base


@dataclass
class RoundOutcome:
    """
    What happened in one resolved round.

    damage[i] is the damage computed for slot i's attack;
    applied[i] is the hp it actually removed from the other side.
    """
    round_index: int
    moves: list[int]
    damage: list[int] = field(default_factory=list)
    applied: list[int] = field(default_factory=list)
    hp_after: list[int] = field(default_factory=list)
    finished: bool = False
    winner_slot: int | None = None  # None on a draw or when not finished

    @property
    def is_draw(self) -> bool:
        return self.finished and self.winner_slot is None


@dataclass
class TurnResolver:
    """
    Resolves rounds once both reveals are in.

    Stateless apart from the damage coefficients; mutates the battle it
    is handed (which is always the reducer's working copy).
    """
    damage_model: DamageModel = field(default_factory=DamageModel)

    def resolve(self, battle: Battle) -> RoundOutcome:
        """
        Apply both revealed moves and advance the battle status.

        Returns the RoundOutcome. Sets status to FINISHED (with winner)
        if any creature reaches 0 hp, otherwise back to ACTIVE.
        """
        moves = [m for m in battle.revealed_moves]
        if any(m is None for m in moves):
            raise ValueError(f"Battle {battle.battle_id} has unrevealed moves")

        creatures = battle.creatures
        outcome = RoundOutcome(round_index=battle.round, moves=moves)

        # Compute both hits against the pre-round snapshot
        for slot in (0, 1):
            attacker = creatures[slot]
            defender = creatures[1 - slot]
            power = get_move(moves[slot]).power
            outcome.damage.append(self.damage_model.damage(power, attacker, defender))

        hp_before = [c.current_hp for c in creatures]
        for slot in (0, 1):
            attacker = creatures[slot]
            defender = creatures[1 - slot]
            defender.current_hp = saturating_sub(hp_before[1 - slot], outcome.damage[slot])
            applied = hp_before[1 - slot] - defender.current_hp
            outcome.applied.append(applied)
            if applied > 0:
                attacker.experience += applied

        outcome.hp_after = [c.current_hp for c in creatures]

        fainted = [c.is_fainted for c in creatures]
        if any(fainted):
            outcome.finished = True
            if not all(fainted):
                outcome.winner_slot = fainted.index(False)
            battle.status = BattleStatus.FINISHED
            battle.winner = (
                battle.players[outcome.winner_slot]
                if outcome.winner_slot is not None else None
            )
        else:
            battle.status = BattleStatus.ACTIVE

        logger.debug(format_context(
            "Round resolved",
            {
                "battle": battle.battle_id,
                "round": outcome.round_index,
                "damage": outcome.damage,
                "hp": outcome.hp_after,
                "finished": outcome.finished,
            },
        ))
        return outcome
