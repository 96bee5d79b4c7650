"""
Commitment Protocol - Hash-binding of hidden moves.

Each round, both players first submit H(move_id, round, battle_id, salt)
and only later reveal move_id and salt. Neither side learns the other's
move before both are locked in, and neither can switch moves after
seeing the other's commitment.

Binding the round and battle id into the hash means a commitment cannot
be replayed in a later round or in another battle.

Encoding (packed, like an ABI-packed tuple):
    move_id    1 byte
    round     32 bytes, big-endian
    battle_id 32 bytes, big-endian
    salt      32 bytes, big-endian

H is SHA-256; the digest travels as 64 lowercase hex characters.
"""

from __future__ import annotations
import hashlib
import hmac
import re
import secrets

from ..catalog.moves import is_valid_move_id
from ..config import UINT256_MAX
from .errors import invalid_commitment, invalid_move, invalid_salt

_HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")


def _uint256(value: int) -> bytes:
    return value.to_bytes(32, "big")


def _is_uint256(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT256_MAX


def pack_commitment_preimage(move_id: int, round_index: int, battle_id: int, salt: int) -> bytes:
    """Pack the commitment inputs into their wire layout."""
    if not is_valid_move_id(move_id):
        raise invalid_move(move_id)
    if not _is_uint256(salt):
        raise invalid_salt(salt)
    return bytes([move_id]) + _uint256(round_index) + _uint256(battle_id) + _uint256(salt)


def make_commitment(move_id: int, round_index: int, battle_id: int, salt: int) -> str:
    """
    Compute the commitment a player submits for a round.

    Args:
        move_id: Move to commit to (0-255)
        round_index: Battle round, i.e. battle.turn // 4 at commit time
        battle_id: Battle the move is for
        salt: Secret 256-bit value, revealed together with the move

    Returns:
        64-character hex digest
    """
    preimage = pack_commitment_preimage(move_id, round_index, battle_id, salt)
    return hashlib.sha256(preimage).hexdigest()


def normalize_commitment(commitment: str) -> str:
    """
    Canonicalize a submitted digest.

    Accepts an optional 0x prefix and either letter case.
    """
    if not isinstance(commitment, str):
        raise invalid_commitment(commitment)
    digest = commitment.lower()
    if digest.startswith("0x"):
        digest = digest[2:]
    if not _HEX_DIGEST.match(digest):
        raise invalid_commitment(commitment)
    return digest


def verify_commitment(
    commitment: str,
    move_id: int,
    round_index: int,
    battle_id: int,
    salt: int,
) -> bool:
    """Check a reveal against a stored commitment."""
    expected = make_commitment(move_id, round_index, battle_id, salt)
    return hmac.compare_digest(expected, normalize_commitment(commitment))


def generate_salt() -> int:
    """Unpredictable salt for client-side commitment construction."""
    return secrets.randbits(256)
