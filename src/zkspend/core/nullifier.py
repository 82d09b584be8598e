"""Nullifier derivation.

    nullifier = SHA256(wallet || salt || timestamp)

with the 20-byte wallet identity, a 32-byte salt and the timestamp as an
8-byte big-endian integer, concatenated in exactly this order. The salt
must come from a CSPRNG with full 256-bit entropy: it is what makes two
notes from the same wallet produce unlinkable nullifiers. The timestamp is
for auditability only.
"""

import hmac
import secrets
import time
from typing import Optional

from zkspend.core.types import NullifierData, WALLET_SIZE, SALT_SIZE, NULLIFIER_SIZE
from zkspend.exceptions import MalformedInputError
from zkspend.utils.encoding import is_u64, u64_to_bytes
from zkspend.utils.hash import hash_concatenate


def generate_salt() -> bytes:
    """
    Generate a fresh nullifier salt.

    Returns:
        bytes: 32 bytes from the OS CSPRNG
    """
    return secrets.token_bytes(SALT_SIZE)


def current_timestamp() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())


def create_nullifier_data(timestamp: Optional[int] = None) -> NullifierData:
    """Draw a fresh salt and capture the timestamp."""
    if timestamp is None:
        timestamp = current_timestamp()
    return NullifierData(salt=generate_salt(), timestamp=timestamp)


def derive_nullifier(wallet: bytes, salt: bytes, timestamp: int) -> bytes:
    """
    Derive the one-time nullifier for a note.

    Args:
        wallet: Wallet identity (20 bytes)
        salt: Random salt (32 bytes)
        timestamp: Unix seconds (u64)

    Returns:
        bytes: 32-byte nullifier

    Raises:
        MalformedInputError: If any input has the wrong width or range
    """
    if not isinstance(wallet, bytes) or len(wallet) != WALLET_SIZE:
        raise MalformedInputError(f"Wallet must be {WALLET_SIZE} bytes")
    if not isinstance(salt, bytes) or len(salt) != SALT_SIZE:
        raise MalformedInputError(f"Salt must be {SALT_SIZE} bytes")
    if not is_u64(timestamp):
        raise MalformedInputError("Timestamp must be an unsigned 64-bit integer")

    return hash_concatenate(wallet, salt, u64_to_bytes(timestamp))


def verify_nullifier(wallet: bytes, nullifier_data: NullifierData, expected_nullifier: bytes) -> bool:
    """Recompute the nullifier and compare in constant time."""
    if not isinstance(expected_nullifier, bytes) or len(expected_nullifier) != NULLIFIER_SIZE:
        return False
    computed = derive_nullifier(wallet, nullifier_data.salt, nullifier_data.timestamp)
    return hmac.compare_digest(computed, expected_nullifier)
