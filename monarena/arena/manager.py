"""
Arena - Caller-facing surface of the battle system.

Every mutating method takes the caller's identity first. Identities are
opaque strings already authenticated by the hosting environment; the
arena trusts them as given.

Failures raise the ArenaError subclass describing them (see
engine_core.errors); a failed call leaves the arena unchanged.

Usage:
    arena = Arena()
    arena.enroll("ash", 1)
    arena.enroll("gary", 2)
    battle_id = arena.challenge("ash", "gary", 69)
    arena.accept_challenge("gary", battle_id)

    salt = generate_salt()
    arena.submit_move_commitment("ash", make_commitment(100, 0, battle_id, salt), battle_id)
    ...
    arena.submit_move_decommitment("ash", 100, battle_id, salt)
"""

from __future__ import annotations

from ..config import ArenaConfig
from ..engine_core import errors
from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.resolver import TurnResolver
from ..engine_core.state import Battle, BattleStatus, Creature, Player
from .store import ArenaStore, HistoryEntry


class Arena:
    """
    The battle registry and player registry behind one facade.

    Thread-safe: all state lives in an ArenaStore.
    """

    def __init__(
        self,
        config: ArenaConfig | None = None,
        resolver: TurnResolver | None = None,
        store: ArenaStore | None = None,
    ):
        self.config = config or ArenaConfig()
        self.store = store or ArenaStore(
            reducer=Reducer(config=self.config, resolver=resolver or TurnResolver())
        )

    def _apply(self, action: Action) -> ActionResult:
        result = self.store.apply(action)
        if not result.success:
            raise result.exception
        return result

    # =========================================================================
    # Player registry
    # =========================================================================

    def enroll(self, caller: str, starter_id: int) -> Player:
        """Enroll the caller with a starter. Returns the new player."""
        self._apply(Action.enroll(caller, starter_id))
        return self.get_player(caller)

    def get_player(self, caller: str) -> Player:
        """Snapshot of the caller's player record."""
        player = self.store.view(lambda s: s.get_player(caller))
        if player is None:
            raise errors.not_enrolled(caller)
        return player

    # =========================================================================
    # Battle registry
    # =========================================================================

    def challenge(self, caller: str, opponent: str, wager: int) -> int:
        """Challenge an opponent. Returns the new battle id."""
        return self._apply(Action.challenge(caller, opponent, wager)).value

    def accept_challenge(self, caller: str, battle_id: int) -> Battle:
        self._apply(Action.accept(caller, battle_id))
        return self.get_battle(battle_id)

    def reject_challenge(self, caller: str, battle_id: int) -> Battle:
        self._apply(Action.reject(caller, battle_id))
        return self.get_battle(battle_id)

    def get_battle(self, battle_id: int) -> Battle:
        """Snapshot of a battle. Not restricted to participants."""
        battle = self.store.view(lambda s: s.get_battle(battle_id))
        if battle is None:
            raise errors.battle_not_found(battle_id)
        return battle

    def get_battle_pokemon(self, caller: str, battle_id: int) -> Creature:
        """
        Snapshot of the caller's active creature in a battle.

        Only participants may look, and only once the battle was accepted.
        """
        battle = self.get_battle(battle_id)
        slot = battle.index_of(caller)
        if slot is None:
            raise errors.wrong_caller(caller)
        creature = battle.creatures[slot]
        if creature is None or battle.status in {BattleStatus.PENDING, BattleStatus.REJECTED}:
            raise errors.invalid_state(battle_id, battle.status)
        return creature

    # =========================================================================
    # Round protocol
    # =========================================================================

    def submit_move_commitment(self, caller: str, commitment: str, battle_id: int) -> Battle:
        """Lock in a hidden move for the current round."""
        self._apply(Action.commit(caller, battle_id, commitment))
        return self.get_battle(battle_id)

    def submit_move_decommitment(
        self,
        caller: str,
        move_id: int,
        battle_id: int,
        salt: int,
    ) -> ActionResult:
        """
        Reveal a committed move.

        Returns the ActionResult; when this reveal completed the round,
        round_outcome (and on the last round, settlement) are set.
        """
        result = self._apply(Action.reveal(caller, battle_id, move_id, salt))
        # Keep the committed state private
        result.new_state = None
        return result

    # =========================================================================
    # History
    # =========================================================================

    def history(self, battle_id: int | None = None) -> list[HistoryEntry]:
        """Applied actions, oldest first."""
        if battle_id is not None:
            self.get_battle(battle_id)
        return self.store.history(battle_id)
