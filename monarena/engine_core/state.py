"""
Arena State - The keyed ledger the engine operates on.

Design principles:
- One container: players by identity, battles by id
- Serializable: plain dataclasses, no live references between records
- Copy-on-write: an action works on a working_copy() and copies only
  the records it edits, so a failed action leaves the committed state
  untouched
- All quantities are non-negative integers
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import IntEnum

from ..catalog.species import Species


class BattleStatus(IntEnum):
    """
    Battle lifecycle.

    PENDING -> REJECTED (terminal)
    PENDING -> ACTIVE -> AWAITING_REVEAL -> ACTIVE ... -> FINISHED (terminal)
    """
    PENDING = 0
    REJECTED = 1
    ACTIVE = 2
    AWAITING_REVEAL = 3
    FINISHED = 4


@dataclass
class Creature:
    """
    A creature instance.

    Roster creatures persist across battles. Battles work on a snapshot
    copied from roster[0] at acceptance time.
    """
    species_id: int
    level: int
    max_hp: int
    current_hp: int
    attack: int
    defense: int
    speed: int
    experience: int = 0

    @classmethod
    def from_species(cls, species: Species, level: int) -> Creature:
        """Create a creature at full hp with the species' base stats."""
        return cls(
            species_id=species.id,
            level=level,
            max_hp=species.hp,
            current_hp=species.hp,
            attack=species.attack,
            defense=species.defense,
            speed=species.speed,
        )

    @property
    def is_fainted(self) -> bool:
        return self.current_hp == 0

    def battle_snapshot(self) -> Creature:
        """Copy of this creature restored to full hp."""
        snapshot = deepcopy(self)
        snapshot.current_hp = snapshot.max_hp
        return snapshot


@dataclass
class Player:
    """An enrolled participant: balance plus an ordered roster."""
    identity: str
    money: int = 0
    roster: list[Creature] = field(default_factory=list)
    # Records are only created by enrollment
    enrolled: bool = True

    @property
    def active_creature(self) -> Creature:
        """The default active creature (first roster entry)."""
        return self.roster[0]


@dataclass
class Battle:
    """
    One wagered encounter between a challenger (slot 0) and the
    challenged player (slot 1).

    Per-round slots (commitments, revealed_moves) are cleared after
    every resolved round.
    """
    battle_id: int
    players: list[str]
    wager: int
    status: BattleStatus = BattleStatus.PENDING
    turn: int = 0

    commitments: list[str | None] = field(default_factory=lambda: [None, None])
    revealed_moves: list[int | None] = field(default_factory=lambda: [None, None])

    # Taken at acceptance
    creatures: list[Creature | None] = field(default_factory=lambda: [None, None])

    # Funds held by the battle until settlement or refund
    escrow: int = 0

    winner: str | None = None

    @property
    def challenger(self) -> str:
        return self.players[0]

    @property
    def challenged(self) -> str:
        return self.players[1]

    @property
    def round(self) -> int:
        """Current round index; each round is four turn increments."""
        return self.turn // 4

    def index_of(self, identity: str) -> int | None:
        """Slot of a participant, or None for outsiders."""
        for i, player in enumerate(self.players):
            if player == identity:
                return i
        return None

    def all_committed(self) -> bool:
        return all(c is not None for c in self.commitments)

    def all_revealed(self) -> bool:
        return all(m is not None for m in self.revealed_moves)

    def clear_round(self):
        """Reset per-round commitment and reveal slots."""
        self.commitments = [None, None]
        self.revealed_moves = [None, None]


@dataclass
class ArenaState:
    """
    Complete arena state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    players: dict[str, Player] = field(default_factory=dict)
    battles: dict[int, Battle] = field(default_factory=dict)
    next_battle_id: int = 0

    # Records already copied into (or created in) this state
    _own_players: set[str] = field(default_factory=set, repr=False, compare=False)
    _own_battles: set[int] = field(default_factory=set, repr=False, compare=False)

    def get_player(self, identity: str) -> Player | None:
        """Get an enrolled player by identity."""
        return self.players.get(identity)

    def get_battle(self, battle_id: int) -> Battle | None:
        """Get a battle by ID."""
        return self.battles.get(battle_id)

    def working_copy(self) -> ArenaState:
        """
        Copy for applying one action.

        The record maps are new, the records themselves are shared until
        edit_player / edit_battle copies them, so the cost is proportional
        to the records an action touches.
        """
        return ArenaState(
            players=dict(self.players),
            battles=dict(self.battles),
            next_battle_id=self.next_battle_id,
        )

    def edit_player(self, identity: str) -> Player | None:
        """This state's private copy of a player, made on first edit."""
        if identity not in self._own_players:
            player = self.players.get(identity)
            if player is None:
                return None
            self.players[identity] = deepcopy(player)
            self._own_players.add(identity)
        return self.players[identity]

    def edit_battle(self, battle_id: int) -> Battle | None:
        """This state's private copy of a battle, made on first edit."""
        if battle_id not in self._own_battles:
            battle = self.battles.get(battle_id)
            if battle is None:
                return None
            self.battles[battle_id] = deepcopy(battle)
            self._own_battles.add(battle_id)
        return self.battles[battle_id]

    def add_player(self, player: Player):
        self.players[player.identity] = player
        self._own_players.add(player.identity)

    def add_battle(self, battle: Battle):
        self.battles[battle.battle_id] = battle
        self._own_battles.add(battle.battle_id)
