"""Tests for nullifier derivation."""

import hashlib

import pytest
from hypothesis import given, strategies as st, settings, HealthCheck

from zkspend.core.nullifier import (
    create_nullifier_data,
    derive_nullifier,
    generate_salt,
    verify_nullifier,
)
from zkspend.core.types import NullifierData
from zkspend.exceptions import MalformedInputError

WALLET = b"\x01" * 20
SALT = b"\x00" * 32
TIMESTAMP = 1_700_000_000


class TestDeriveNullifier:
    """Tests for derive_nullifier."""

    def test_matches_reference_layout(self):
        """Test nullifier is SHA256(wallet || salt || timestamp_be8)."""
        expected = hashlib.sha256(WALLET + SALT + TIMESTAMP.to_bytes(8, "big")).digest()
        assert derive_nullifier(WALLET, SALT, TIMESTAMP) == expected

    def test_timestamp_is_big_endian(self):
        """Test the little-endian encoding gives a different nullifier."""
        little = hashlib.sha256(WALLET + SALT + TIMESTAMP.to_bytes(8, "little")).digest()
        assert derive_nullifier(WALLET, SALT, TIMESTAMP) != little

    def test_deterministic(self):
        """Test same inputs give the same nullifier."""
        assert derive_nullifier(WALLET, SALT, TIMESTAMP) == derive_nullifier(WALLET, SALT, TIMESTAMP)

    def test_output_size(self):
        """Test nullifier is 32 bytes."""
        assert len(derive_nullifier(WALLET, SALT, TIMESTAMP)) == 32

    def test_wallet_byte_change(self):
        """Test changing one wallet byte changes the nullifier."""
        other = b"\x02" + WALLET[1:]
        assert derive_nullifier(other, SALT, TIMESTAMP) != derive_nullifier(WALLET, SALT, TIMESTAMP)

    def test_salt_byte_change(self):
        """Test changing one salt byte changes the nullifier."""
        other = SALT[:-1] + b"\x01"
        assert derive_nullifier(WALLET, other, TIMESTAMP) != derive_nullifier(WALLET, SALT, TIMESTAMP)

    def test_timestamp_change(self):
        """Test changing the timestamp changes the nullifier."""
        assert derive_nullifier(WALLET, SALT, TIMESTAMP + 1) != derive_nullifier(WALLET, SALT, TIMESTAMP)

    def test_wrong_wallet_length(self):
        """Test 19- and 21-byte wallets are rejected."""
        with pytest.raises(MalformedInputError):
            derive_nullifier(b"\x01" * 19, SALT, TIMESTAMP)
        with pytest.raises(MalformedInputError):
            derive_nullifier(b"\x01" * 21, SALT, TIMESTAMP)

    def test_wrong_salt_length(self):
        """Test short salts are rejected."""
        with pytest.raises(MalformedInputError):
            derive_nullifier(WALLET, b"\x00" * 16, TIMESTAMP)

    def test_timestamp_out_of_range(self):
        """Test negative and over-wide timestamps are rejected."""
        with pytest.raises(MalformedInputError):
            derive_nullifier(WALLET, SALT, -1)
        with pytest.raises(MalformedInputError):
            derive_nullifier(WALLET, SALT, 2**64)

    @given(
        st.binary(min_size=20, max_size=20),
        st.binary(min_size=32, max_size=32),
        st.integers(min_value=0, max_value=2**64 - 1),
    )
    @settings(max_examples=50, suppress_health_check=[HealthCheck.too_slow])
    def test_verify_accepts_derived(self, wallet, salt, timestamp):
        """Property: a derived nullifier always verifies."""
        nullifier = derive_nullifier(wallet, salt, timestamp)
        assert verify_nullifier(wallet, NullifierData(salt=salt, timestamp=timestamp), nullifier)


class TestVerifyNullifier:
    """Tests for verify_nullifier."""

    def test_rejects_other_wallet(self):
        """Test a nullifier does not verify under another wallet."""
        nullifier = derive_nullifier(WALLET, SALT, TIMESTAMP)
        data = NullifierData(salt=SALT, timestamp=TIMESTAMP)
        assert not verify_nullifier(b"\x02" * 20, data, nullifier)

    def test_rejects_wrong_length(self):
        """Test a truncated nullifier is a rejection."""
        nullifier = derive_nullifier(WALLET, SALT, TIMESTAMP)
        data = NullifierData(salt=SALT, timestamp=TIMESTAMP)
        assert not verify_nullifier(WALLET, data, nullifier[:31])


class TestSalt:
    """Tests for salt generation."""

    def test_salt_size(self):
        """Test salts are 32 bytes."""
        assert len(generate_salt()) == 32

    def test_salts_unique(self):
        """Test fresh salts do not repeat."""
        salts = {generate_salt() for _ in range(100)}
        assert len(salts) == 100

    def test_same_wallet_unlinkable(self):
        """Test two notes from one wallet at one instant get different nullifiers."""
        first = create_nullifier_data(timestamp=TIMESTAMP)
        second = create_nullifier_data(timestamp=TIMESTAMP)
        assert derive_nullifier(WALLET, first.salt, first.timestamp) != derive_nullifier(
            WALLET, second.salt, second.timestamp
        )

    def test_create_nullifier_data_uses_clock(self):
        """Test a timestamp is captured when none is given."""
        data = create_nullifier_data()
        assert data.timestamp > TIMESTAMP

    def test_salt_hidden_from_repr(self):
        """Test salt never shows up in repr."""
        data = NullifierData(salt=b"\xab" * 32, timestamp=TIMESTAMP)
        assert "salt" not in repr(data)
