"""Wire format of SpendVerificationInput as handed to a proving backend.

Fields, in this exact order, integers big-endian:

    wallet              20
    nullifier           32
    commitment          32   compressed Ed25519 point
    amount               8   private
    blinding_factor     32
    salt                32
    timestamp            8
    path_len             4
    path                N*32
    indices             N*1  0x00 / 0x01
    merkle_root         32
    expected_amount      8
"""

from zkspend.core.engine import MAX_PATH_LENGTH, SpendVerificationEngine
from zkspend.core.pedersen import POINT_SIZE, SCALAR_SIZE, scalar_to_bytes, bytes_to_scalar
from zkspend.core.types import (
    AmountCommitment,
    MerkleProof,
    NullifierData,
    SpendNote,
    SpendVerificationInput,
    WALLET_SIZE,
    NULLIFIER_SIZE,
    SALT_SIZE,
    ROOT_SIZE,
)
from zkspend.exceptions import MalformedInputError
from zkspend.utils.encoding import u64_to_bytes
from zkspend.utils.hash import HASH_SIZE


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise MalformedInputError(message)


def serialize_input(spend_input: SpendVerificationInput) -> bytes:
    """
    Encode a SpendVerificationInput for the prover.

    Raises:
        MalformedInputError: If any field has the wrong width or range
    """
    note = spend_input.spend_note
    commitment = note.amount_commitment
    proof = spend_input.merkle_proof

    SpendVerificationEngine.validate_input(spend_input)

    parts = [
        note.wallet,
        note.nullifier,
        commitment.commitment,
        u64_to_bytes(commitment.amount),
        scalar_to_bytes(commitment.blinding_factor),
        note.nullifier_data.salt,
        u64_to_bytes(note.nullifier_data.timestamp),
        len(proof.path).to_bytes(4, "big"),
        b"".join(proof.path),
        bytes(1 if bit else 0 for bit in proof.indices),
        spend_input.merkle_root,
        u64_to_bytes(spend_input.expected_amount),
    ]
    return b"".join(parts)


class _Reader:
    """Sequential reader over an input buffer."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int, name: str) -> bytes:
        end = self.offset + size
        _require(end <= len(self.data), f"Input truncated while reading {name}")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def take_int(self, size: int, name: str) -> int:
        return int.from_bytes(self.take(size, name), "big")


def deserialize_input(data: bytes) -> SpendVerificationInput:
    """
    Decode a serialized SpendVerificationInput.

    Raises:
        MalformedInputError: If data is truncated, over-long or not canonical
    """
    _require(isinstance(data, bytes), "Serialized input must be bytes")
    reader = _Reader(data)

    wallet = reader.take(WALLET_SIZE, "wallet")
    nullifier = reader.take(NULLIFIER_SIZE, "nullifier")
    commitment = reader.take(POINT_SIZE, "commitment")
    amount = reader.take_int(8, "amount")
    blinding_factor = bytes_to_scalar(reader.take(SCALAR_SIZE, "blinding_factor"))
    salt = reader.take(SALT_SIZE, "salt")
    timestamp = reader.take_int(8, "timestamp")

    path_len = reader.take_int(4, "path_len")
    _require(path_len <= MAX_PATH_LENGTH, f"Merkle path longer than {MAX_PATH_LENGTH}")
    path = [reader.take(HASH_SIZE, "path") for _ in range(path_len)]
    raw_indices = reader.take(path_len, "indices")
    _require(all(b in (0, 1) for b in raw_indices), "Direction bits must be 0 or 1")
    indices = [b == 1 for b in raw_indices]

    merkle_root = reader.take(ROOT_SIZE, "merkle_root")
    expected_amount = reader.take_int(8, "expected_amount")
    _require(reader.offset == len(data), "Trailing bytes after serialized input")

    return SpendVerificationInput(
        spend_note=SpendNote(
            wallet=wallet,
            nullifier=nullifier,
            amount_commitment=AmountCommitment(
                commitment=commitment,
                amount=amount,
                blinding_factor=blinding_factor,
            ),
            nullifier_data=NullifierData(salt=salt, timestamp=timestamp),
        ),
        merkle_proof=MerkleProof(path=path, indices=indices),
        merkle_root=merkle_root,
        expected_amount=expected_amount,
    )

