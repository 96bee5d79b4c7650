"""
Tests for the commitment protocol.
"""

import hashlib

import pytest

from ..config import UINT256_MAX
from ..engine_core.commitment import (
    make_commitment,
    normalize_commitment,
    pack_commitment_preimage,
    verify_commitment,
    generate_salt,
)
from ..engine_core.errors import ValidationError


class TestPreimage:
    """Tests for the packed encoding."""

    def test_layout(self):
        """move (1 byte) + round, battle, salt (32 bytes each, big-endian)."""
        preimage = pack_commitment_preimage(100, 2, 7, 1)

        assert len(preimage) == 97
        assert preimage[0] == 100
        assert preimage[1:33] == (2).to_bytes(32, "big")
        assert preimage[33:65] == (7).to_bytes(32, "big")
        assert preimage[65:] == (1).to_bytes(32, "big")

    def test_digest_is_sha256_of_preimage(self):
        expected = hashlib.sha256(pack_commitment_preimage(100, 0, 0, 42)).hexdigest()
        assert make_commitment(100, 0, 0, 42) == expected

    def test_max_salt_accepted(self):
        assert len(make_commitment(0, 0, 0, UINT256_MAX)) == 64

    @pytest.mark.parametrize("move_id", [-1, 256, "100", None, True])
    def test_invalid_move(self, move_id):
        with pytest.raises(ValidationError) as exc:
            make_commitment(move_id, 0, 0, 1)
        assert exc.value.code == "InvalidMove"

    @pytest.mark.parametrize("salt", [-1, UINT256_MAX + 1, "1", None])
    def test_invalid_salt(self, salt):
        with pytest.raises(ValidationError) as exc:
            make_commitment(100, 0, 0, salt)
        assert exc.value.code == "InvalidSalt"


class TestBinding:
    """A commitment binds every input."""

    def test_deterministic(self):
        assert make_commitment(100, 1, 2, 3) == make_commitment(100, 1, 2, 3)

    @pytest.mark.parametrize("changed", [
        (33, 1, 2, 3),
        (100, 2, 2, 3),
        (100, 1, 3, 3),
        (100, 1, 2, 4),
    ])
    def test_any_input_changes_digest(self, changed):
        assert make_commitment(*changed) != make_commitment(100, 1, 2, 3)

    def test_verify(self):
        commitment = make_commitment(100, 1, 2, 3)

        assert verify_commitment(commitment, 100, 1, 2, 3)
        assert not verify_commitment(commitment, 100, 1, 2, 4)
        assert not verify_commitment(commitment, 100, 0, 2, 3)


class TestNormalize:
    """Tests for digest canonicalization."""

    def test_prefix_and_case(self):
        digest = make_commitment(100, 0, 0, 1)
        assert normalize_commitment("0x" + digest) == digest
        assert normalize_commitment("0X" + digest.upper()) == digest

    @pytest.mark.parametrize("bad", ["", "0x", "g" * 64, "a" * 63, "a" * 65, b"a" * 64])
    def test_rejects_malformed(self, bad):
        with pytest.raises(ValidationError) as exc:
            normalize_commitment(bad)
        assert exc.value.code == "InvalidCommitment"


class TestSalt:
    def test_generated_salts_fit_and_differ(self):
        salts = {generate_salt() for _ in range(8)}
        assert len(salts) == 8
        assert all(0 <= s <= UINT256_MAX for s in salts)
