"""Pedersen commitments hiding the spent amount.

A commitment to amount v with blinding factor r is the group element

    C = v*G + r*H

in the prime-order subgroup of Ed25519. H is the standard Ed25519 base point
and G is hashed onto the curve from a fixed domain-separation string, so
nobody knows log_H(G). The scheme is perfectly hiding, computationally
binding and additively homomorphic:

    commit(v1, r1) + commit(v2, r2) == commit(v1 + v2, r1 + r2)

Group operations run in libsodium through nacl.bindings.

Encodings:
    - Points: standard compressed Ed25519 encoding, 32 bytes. The neutral
      element is (0, 1), i.e. 0x01 followed by 31 zero bytes.
    - Scalars: 32 bytes big-endian, canonical (strictly below the group order).
"""

import hmac
import secrets
from dataclasses import dataclass
from typing import Optional, Union

import nacl.bindings
from nacl.exceptions import CryptoError

from zkspend.core.types import AmountCommitment
from zkspend.exceptions import MalformedInputError
from zkspend.utils.hash import hash_concatenate

# Order of the Ed25519 prime-order subgroup
CURVE_ORDER = 2**252 + 27742317777372353535851937790883648493
COFACTOR = 8

POINT_SIZE = 32
SCALAR_SIZE = 32
IDENTITY_ENCODING = b"\x01" + b"\x00" * (POINT_SIZE - 1)

G_DOMAIN = b"zkspend/pedersen/G"


@dataclass(frozen=True)
class Generators:
    """The two fixed, independent generator points (encoded)."""

    G: bytes
    H: bytes


def _le(scalar: int) -> bytes:
    return scalar.to_bytes(SCALAR_SIZE, "little")


def is_valid_point(data: bytes) -> bool:
    """Check for a canonical encoding of a prime-order subgroup element."""
    if not isinstance(data, bytes) or len(data) != POINT_SIZE:
        return False
    if data == IDENTITY_ENCODING:
        return True
    return bool(nacl.bindings.crypto_core_ed25519_is_valid_point(data))


def ensure_point(data: bytes) -> bytes:
    """
    Validate a point encoding.

    Raises:
        MalformedInputError: If data is not a valid subgroup element
    """
    if not is_valid_point(data):
        raise MalformedInputError(f"Not a valid {POINT_SIZE}-byte Ed25519 group element")
    return data


def point_add(first: bytes, second: bytes) -> bytes:
    """Add two encoded group elements."""
    if first == IDENTITY_ENCODING:
        return second
    if second == IDENTITY_ENCODING:
        return first
    return nacl.bindings.crypto_core_ed25519_add(first, second)


def point_mul(point: bytes, scalar: int) -> bytes:
    """Multiply an encoded group element by a canonical scalar."""
    if scalar == 0 or point == IDENTITY_ENCODING:
        return IDENTITY_ENCODING
    return nacl.bindings.crypto_scalarmult_ed25519_noclamp(_le(scalar), point)


def hash_to_curve(domain: bytes, max_attempts: int = 1024) -> bytes:
    """
    Map a domain-separation string onto the prime-order subgroup.

    Try-and-increment: hash (domain || counter) to a candidate encoding,
    accept the first valid point and clear the cofactor.
    """
    for counter in range(max_attempts):
        candidate = hash_concatenate(domain, counter.to_bytes(4, "big"))
        if not is_valid_point(candidate) or candidate == IDENTITY_ENCODING:
            continue
        point = point_mul(candidate, COFACTOR)
        if point != IDENTITY_ENCODING:
            return point
    raise RuntimeError(f"Could not hash {domain!r} onto Ed25519")


_generators: Optional[Generators] = None


def get_generators() -> Generators:
    """Get or create the global generator pair."""
    global _generators
    if _generators is None:
        H = nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(_le(1))
        G = hash_to_curve(G_DOMAIN)
        _generators = Generators(G=G, H=H)
    return _generators


def scalar_to_bytes(scalar: int) -> bytes:
    """
    Encode a canonical scalar as 32 big-endian bytes.

    Raises:
        MalformedInputError: If scalar is negative or not below the group order
    """
    if not isinstance(scalar, int) or not 0 <= scalar < CURVE_ORDER:
        raise MalformedInputError("Scalar must be in [0, group order)")
    return scalar.to_bytes(SCALAR_SIZE, "big")


def bytes_to_scalar(data: bytes) -> int:
    """Decode 32 big-endian bytes as a canonical scalar."""
    if len(data) != SCALAR_SIZE:
        raise MalformedInputError(f"Scalar encoding must be {SCALAR_SIZE} bytes")
    scalar = int.from_bytes(data, "big")
    if scalar >= CURVE_ORDER:
        raise MalformedInputError("Scalar is not reduced modulo the group order")
    return scalar


class PedersenCommitment:
    """
    Pedersen commitment scheme over the Ed25519 prime-order subgroup.

    All methods are static; the only state is the immutable generator pair.
    """

    @staticmethod
    def generate_blinding_factor() -> int:
        """
        Generate a uniformly random non-zero blinding scalar.

        Implementation: secrets.randbelow(n - 1) + 1
        """
        return secrets.randbelow(CURVE_ORDER - 1) + 1

    @staticmethod
    def commit(amount: int, blinding_factor: int) -> bytes:
        """
        Commit to an amount.

        Args:
            amount: Secret amount
            blinding_factor: Secret blinding scalar

        Returns:
            bytes: Compressed commitment (32 bytes)

        Raises:
            ValueError: If either opening value is outside [0, group order)
        """
        if not 0 <= amount < CURVE_ORDER or not 0 <= blinding_factor < CURVE_ORDER:
            raise ValueError("Amount and blinding factor must be in [0, group order)")
        gens = get_generators()
        return point_add(point_mul(gens.G, amount), point_mul(gens.H, blinding_factor))

    @staticmethod
    def verify(commitment: Union[bytes, AmountCommitment], amount: int, blinding_factor: int) -> bool:
        """
        Check that a commitment opens to (amount, blinding_factor).

        A mismatch is a protocol-level rejection, so it returns False
        rather than raising.
        """
        if isinstance(commitment, AmountCommitment):
            commitment = commitment.commitment
        if not isinstance(commitment, bytes) or len(commitment) != POINT_SIZE:
            return False
        try:
            expected = PedersenCommitment.commit(amount, blinding_factor)
        except (ValueError, TypeError, CryptoError):
            return False
        return hmac.compare_digest(expected, commitment)

    @staticmethod
    def new(amount: int) -> AmountCommitment:
        """Commit to an amount under a fresh random blinding factor."""
        blinding_factor = PedersenCommitment.generate_blinding_factor()
        return AmountCommitment(
            commitment=PedersenCommitment.commit(amount, blinding_factor),
            amount=amount,
            blinding_factor=blinding_factor,
        )

    @staticmethod
    def add(first: AmountCommitment, second: AmountCommitment) -> AmountCommitment:
        """
        Homomorphically add two commitments.

        Sums the group elements and the underlying openings. The blinding
        factors add modulo the group order.

        Raises:
            MalformedInputError: If either commitment is not a valid point
        """
        point = point_add(ensure_point(first.commitment), ensure_point(second.commitment))
        return AmountCommitment(
            commitment=point,
            amount=first.amount + second.amount,
            blinding_factor=(first.blinding_factor + second.blinding_factor) % CURVE_ORDER,
        )
