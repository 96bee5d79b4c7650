"""
Moves - Static move table.

Move ids occupy one byte (0-255) because they are packed into commitment
hashes as a single byte. Any id in that range can be committed and
revealed; ids without an entry here resolve as Splash (power 0, no damage).
"""

from dataclasses import dataclass

MOVE_ID_MIN = 0
MOVE_ID_MAX = 255


@dataclass(frozen=True)
class Move:
    """A move and its base power."""
    id: int
    name: str
    power: int


SPLASH = Move(id=0, name="Splash", power=0)
SCRATCH = Move(id=10, name="Scratch", power=40)
TACKLE = Move(id=33, name="Tackle", power=50)
VINE_WHIP = Move(id=22, name="Vine Whip", power=45)
EMBER = Move(id=52, name="Ember", power=40)
WATER_GUN = Move(id=55, name="Water Gun", power=40)
HEADBUTT = Move(id=29, name="Headbutt", power=70)
BODY_SLAM = Move(id=34, name="Body Slam", power=85)
STRIKE = Move(id=100, name="Strike", power=100)
HYPER_BEAM = Move(id=63, name="Hyper Beam", power=150)


MOVES: dict[int, Move] = {
    m.id: m
    for m in [
        SPLASH, SCRATCH, TACKLE, VINE_WHIP, EMBER, WATER_GUN,
        HEADBUTT, BODY_SLAM, STRIKE, HYPER_BEAM,
    ]
}


def is_valid_move_id(move_id: int) -> bool:
    """Check that a move id fits in one byte."""
    return (
        isinstance(move_id, int)
        and not isinstance(move_id, bool)
        and MOVE_ID_MIN <= move_id <= MOVE_ID_MAX
    )


def get_move(move_id: int) -> Move:
    """Look up a move, falling back to Splash for unlisted ids."""
    return MOVES.get(move_id, SPLASH)
