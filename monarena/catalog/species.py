"""
Species - Static base-stat table.

Each species defines the stats a freshly created creature starts with.
Creatures are created at the starter level with exactly these stats,
so a level-5 Bulbasaur has 45 hp, 49 attack, 49 defense, 45 speed.

This is a fixed input table; there is no content pipeline.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Species:
    """Base stats for one species."""
    id: int
    name: str
    hp: int
    attack: int
    defense: int
    speed: int


# ============================================================================
# Starters
# ============================================================================

BULBASAUR = Species(id=1, name="Bulbasaur", hp=45, attack=49, defense=49, speed=45)
CHARMANDER = Species(id=2, name="Charmander", hp=39, attack=52, defense=43, speed=65)
SQUIRTLE = Species(id=3, name="Squirtle", hp=44, attack=48, defense=65, speed=43)

# ============================================================================
# Others
# ============================================================================

PIKACHU = Species(id=4, name="Pikachu", hp=35, attack=55, defense=40, speed=90)
EEVEE = Species(id=5, name="Eevee", hp=55, attack=55, defense=50, speed=55)
GEODUDE = Species(id=6, name="Geodude", hp=40, attack=80, defense=100, speed=20)


SPECIES: dict[int, Species] = {
    s.id: s
    for s in [BULBASAUR, CHARMANDER, SQUIRTLE, PIKACHU, EEVEE, GEODUDE]
}


def get_species(species_id: int) -> Species | None:
    """Look up a species by id."""
    return SPECIES.get(species_id)
