"""
Reducer - Applies actions to arena state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- (state, action) -> ActionResult; the input state is never touched
- Handlers run against a working copy, copying only the records they
  edit, and raise ArenaError on the first failed check, so a failed
  action has no partial effects
- Delegates round resolution to TurnResolver and payouts to Settlement
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..catalog.species import get_species
from ..config import ArenaConfig
from . import errors
from .action import Action, ActionType, ActionResult
from .commitment import normalize_commitment, verify_commitment, pack_commitment_preimage
from .errors import ArenaError
from .resolver import TurnResolver
from .settlement import settle, refund_challenger
from .state import ArenaState, Battle, BattleStatus, Creature, Player


def _is_uint(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass
class Reducer:
    """
    Reducer applies actions to arena state.

    Stateless - all state is in ArenaState.
    Config provides the economy; the resolver provides the damage model.
    """
    config: ArenaConfig = field(default_factory=ArenaConfig)
    resolver: TurnResolver = field(default_factory=TurnResolver)

    def apply(self, state: ArenaState, action: Action) -> ActionResult:
        """
        Apply an action to the arena state.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            raise ValueError(f"No handler for action type: {action.action_type}")

        working = state.working_copy()
        try:
            return handler(working, action)
        except ArenaError as e:
            return ActionResult.failure(e)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.ENROLL: self._handle_enroll,
            ActionType.CHALLENGE: self._handle_challenge,
            ActionType.ACCEPT_CHALLENGE: self._handle_accept,
            ActionType.REJECT_CHALLENGE: self._handle_reject,
            ActionType.COMMIT_MOVE: self._handle_commit,
            ActionType.REVEAL_MOVE: self._handle_reveal,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Lookups
    # =========================================================================

    def _require_player(self, state: ArenaState, identity: str, edit: bool = False) -> Player:
        player = state.edit_player(identity) if edit else state.get_player(identity)
        if not player:
            raise errors.not_enrolled(identity)
        return player

    def _require_battle(self, state: ArenaState, battle_id: int) -> Battle:
        battle = state.edit_battle(battle_id)
        if not battle:
            raise errors.battle_not_found(battle_id)
        return battle

    def _require_slot(self, battle: Battle, identity: str) -> int:
        slot = battle.index_of(identity)
        if slot is None:
            raise errors.wrong_caller(identity)
        return slot

    def _require_status(self, battle: Battle, status: BattleStatus):
        if battle.status != status:
            raise errors.invalid_state(battle.battle_id, battle.status)

    # =========================================================================
    # Player registry
    # =========================================================================

    def _handle_enroll(self, state: ArenaState, action: Action) -> ActionResult:
        """Enroll the caller with one starter creature."""
        caller = action.payload.caller
        starter_id = action.payload.starter_id

        if state.get_player(caller):
            raise errors.already_enrolled(caller)

        species = get_species(starter_id) if _is_uint(starter_id) else None
        if species is None or starter_id not in self.config.starter_ids:
            raise errors.invalid_starter(starter_id)

        state.add_player(Player(
            identity=caller,
            money=self.config.starting_money,
            roster=[Creature.from_species(species, self.config.starter_level)],
        ))

        return ActionResult.success_with_state(
            state,
            changes=[f"{caller} enrolled with {species.name}"],
        )

    # =========================================================================
    # Challenge lifecycle
    # =========================================================================

    def _handle_challenge(self, state: ArenaState, action: Action) -> ActionResult:
        """Open a battle and escrow the challenger's wager."""
        caller = action.payload.caller
        opponent = action.payload.opponent
        wager = action.payload.wager

        player = self._require_player(state, caller, edit=True)
        if opponent == caller:
            raise errors.self_challenge(caller)
        self._require_player(state, opponent)

        if not _is_uint(wager):
            raise errors.invalid_wager(wager)
        if player.money < wager:
            raise errors.insufficient_funds(caller)

        player.money -= wager
        battle = Battle(
            battle_id=state.next_battle_id,
            players=[caller, opponent],
            wager=wager,
            escrow=wager,
        )
        state.add_battle(battle)
        state.next_battle_id += 1

        return ActionResult.success_with_state(
            state,
            changes=[f"{caller} challenged {opponent} for {wager} (battle {battle.battle_id})"],
            value=battle.battle_id,
        )

    def _handle_accept(self, state: ArenaState, action: Action) -> ActionResult:
        """Match the wager and lock in both active creatures."""
        caller = action.payload.caller
        battle = self._require_battle(state, action.payload.battle_id)

        if caller != battle.challenged:
            raise errors.wrong_caller(caller)
        self._require_status(battle, BattleStatus.PENDING)

        player = self._require_player(state, caller, edit=True)
        if player.money < battle.wager:
            raise errors.insufficient_funds(caller)

        player.money -= battle.wager
        battle.escrow += battle.wager
        battle.creatures = [
            state.get_player(identity).active_creature.battle_snapshot()
            for identity in battle.players
        ]
        battle.status = BattleStatus.ACTIVE

        return ActionResult.success_with_state(
            state,
            changes=[f"{caller} accepted battle {battle.battle_id}"],
        )

    def _handle_reject(self, state: ArenaState, action: Action) -> ActionResult:
        """Decline a pending challenge; the challenger gets the wager back."""
        caller = action.payload.caller
        battle = self._require_battle(state, action.payload.battle_id)

        if caller != battle.challenged:
            raise errors.wrong_caller(caller)
        self._require_status(battle, BattleStatus.PENDING)

        refund_challenger(state, battle, self.config)
        battle.status = BattleStatus.REJECTED

        return ActionResult.success_with_state(
            state,
            changes=[f"{caller} rejected battle {battle.battle_id}"],
        )

    # =========================================================================
    # Round protocol
    # =========================================================================

    def _handle_commit(self, state: ArenaState, action: Action) -> ActionResult:
        """Store the caller's hidden move for this round."""
        caller = action.payload.caller
        battle = self._require_battle(state, action.payload.battle_id)

        slot = self._require_slot(battle, caller)
        self._require_status(battle, BattleStatus.ACTIVE)
        if battle.commitments[slot] is not None:
            raise errors.already_committed(caller)

        battle.commitments[slot] = normalize_commitment(action.payload.commitment)
        battle.turn += 1
        if battle.all_committed():
            battle.status = BattleStatus.AWAITING_REVEAL

        return ActionResult.success_with_state(
            state,
            changes=[f"{caller} committed a move in battle {battle.battle_id}"],
        )

    def _handle_reveal(self, state: ArenaState, action: Action) -> ActionResult:
        """
        Check a reveal against the stored commitment.

        The second reveal of a round resolves it.
        """
        caller = action.payload.caller
        move_id = action.payload.move_id
        salt = action.payload.salt
        battle = self._require_battle(state, action.payload.battle_id)

        slot = self._require_slot(battle, caller)
        self._require_status(battle, BattleStatus.AWAITING_REVEAL)
        if battle.revealed_moves[slot] is not None:
            raise errors.already_revealed(caller)

        # Raises InvalidMove / InvalidSalt before any hashing
        pack_commitment_preimage(move_id, battle.round, battle.battle_id, salt)
        if not verify_commitment(
            battle.commitments[slot], move_id, battle.round, battle.battle_id, salt
        ):
            raise errors.invalid_reveal(caller)

        battle.revealed_moves[slot] = move_id
        battle.turn += 1
        changes = [f"{caller} revealed move {move_id} in battle {battle.battle_id}"]

        if not battle.all_revealed():
            return ActionResult.success_with_state(state, changes=changes)

        outcome = self.resolver.resolve(battle)
        battle.clear_round()
        changes.append(
            f"Round {outcome.round_index} dealt {outcome.damage[0]} and {outcome.damage[1]}"
        )

        settlement = None
        if battle.status == BattleStatus.FINISHED:
            settlement = settle(state, battle, self.config)
            changes.append(
                f"Battle {battle.battle_id} finished: "
                + ("draw" if settlement.draw else f"{battle.winner} wins")
            )

        result = ActionResult.success_with_state(state, changes=changes)
        result.round_outcome = outcome
        result.settlement = settlement
        return result


def apply_action(
    state: ArenaState,
    action: Action,
    config: ArenaConfig | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(config=config or ArenaConfig())
    return reducer.apply(state, action)
