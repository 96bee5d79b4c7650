"""
Catalog - Fixed species and move tables.

The catalog has no mutable state. It answers two questions:
- What stats does a new creature of species N start with?
- How strong is move N?
"""

from .species import Species, SPECIES, get_species
from .moves import Move, MOVES, MOVE_ID_MIN, MOVE_ID_MAX, get_move, is_valid_move_id

__all__ = [
    "Species",
    "SPECIES",
    "get_species",
    "Move",
    "MOVES",
    "MOVE_ID_MIN",
    "MOVE_ID_MAX",
    "get_move",
    "is_valid_move_id",
]
