"""Data model for one spend verification session."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from zkspend.utils.encoding import bytes_to_hex, hex_to_bytes, u64_to_bytes, bytes_to_u64

WALLET_SIZE = 20
NULLIFIER_SIZE = 32
SALT_SIZE = 32
ROOT_SIZE = 32
PUBLIC_OUTPUTS_SIZE = ROOT_SIZE + NULLIFIER_SIZE + 8


@dataclass(frozen=True)
class NullifierData:
    """Salt and timestamp a nullifier was derived from."""

    salt: bytes = field(repr=False)
    timestamp: int  # Unix seconds, u64


@dataclass(frozen=True)
class AmountCommitment:
    """
    Pedersen commitment to an amount.

    Invariant: commitment == amount*G + blinding_factor*H
    """

    commitment: bytes  # Compressed group element
    amount: int = field(repr=False)  # Secret, never leaves the engine
    blinding_factor: int = field(repr=False)  # Secret scalar


@dataclass(frozen=True)
class SpendNote:
    """The note being spent. Lives for one proving session only."""

    wallet: bytes = field(repr=False)
    nullifier: bytes
    amount_commitment: AmountCommitment
    nullifier_data: NullifierData


@dataclass(frozen=True)
class MerkleProof:
    """
    Sibling path from a leaf to the root.

    indices[i] is True when the running hash is the left child at level i.
    """

    path: Tuple[bytes, ...]
    indices: Tuple[bool, ...]

    def __post_init__(self):
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "indices", tuple(self.indices))

    @property
    def depth(self) -> int:
        return len(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary"""
        return {
            "path": [bytes_to_hex(sibling) for sibling in self.path],
            "indices": list(self.indices),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "MerkleProof":
        """Deserialize from dictionary"""
        from zkspend.models.schemas import MerkleProofPayload

        payload = MerkleProofPayload.model_validate(data)
        return MerkleProof(
            path=[hex_to_bytes(sibling) for sibling in payload.path],
            indices=payload.indices,
        )


@dataclass(frozen=True)
class SpendVerificationInput:
    """Complete, self-contained input to one verification pass."""

    spend_note: SpendNote
    merkle_proof: MerkleProof
    merkle_root: bytes
    expected_amount: int


@dataclass(frozen=True)
class PublicOutputs:
    """
    The only values a verification pass discloses.

    Byte layout: [0,32) merkle_root, [32,64) nullifier, [64,72) amount (u64 big-endian).
    """

    merkle_root: bytes
    nullifier: bytes
    amount: int

    def to_bytes(self) -> bytes:
        return self.merkle_root + self.nullifier + u64_to_bytes(self.amount)

    @staticmethod
    def from_bytes(data: bytes) -> "PublicOutputs":
        if len(data) != PUBLIC_OUTPUTS_SIZE:
            raise ValueError(f"Public outputs must be {PUBLIC_OUTPUTS_SIZE} bytes, got {len(data)}")
        return PublicOutputs(
            merkle_root=data[0:32],
            nullifier=data[32:64],
            amount=bytes_to_u64(data[64:72]),
        )


@dataclass(frozen=True)
class SpendProof:
    """
    Transportable result of a successful proving session.

    Carries the claimed public triple next to the opaque artifact so a
    verifier can cross-check it against the artifact's own outputs.
    """

    artifact: bytes = field(repr=False)
    merkle_root: bytes
    nullifier: bytes
    amount: int

    @property
    def claimed_outputs(self) -> PublicOutputs:
        return PublicOutputs(merkle_root=self.merkle_root, nullifier=self.nullifier, amount=self.amount)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary"""
        return {
            "artifact": bytes_to_hex(self.artifact),
            "merkle_root": bytes_to_hex(self.merkle_root),
            "nullifier": bytes_to_hex(self.nullifier),
            "amount": self.amount,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SpendProof":
        """Deserialize from dictionary, validating field widths."""
        from zkspend.models.schemas import SpendProofPayload

        payload = SpendProofPayload.model_validate(data)
        return SpendProof(
            artifact=hex_to_bytes(payload.artifact),
            merkle_root=hex_to_bytes(payload.merkle_root),
            nullifier=hex_to_bytes(payload.nullifier),
            amount=payload.amount,
        )
