"""Spend verification engine.

One pure verification pass over a SpendVerificationInput. The checks run
in a fixed order and the first failure aborts the pass:

    1. Nullifier       nullifier == SHA256(wallet || salt || timestamp)
    2. Amount          commitment opens to (amount, blinding_factor)
                       and amount == expected_amount
    3. Membership      leaf(note) folds up the Merkle path to merkle_root

On success the pass discloses exactly (merkle_root, nullifier, amount).
The engine draws no randomness, reads no clock and performs no I/O, so it
can run anywhere the proving backend executes it.
"""

from zkspend.core.merkle_tree import verify_merkle_proof
from zkspend.core.nullifier import verify_nullifier
from zkspend.core.pedersen import CURVE_ORDER, POINT_SIZE, PedersenCommitment, scalar_to_bytes
from zkspend.core.types import (
    PublicOutputs,
    SpendNote,
    SpendVerificationInput,
    WALLET_SIZE,
    NULLIFIER_SIZE,
    SALT_SIZE,
    ROOT_SIZE,
)
from zkspend.exceptions import (
    InvalidAmountCommitmentError,
    InvalidMerkleProofError,
    InvalidNullifierError,
    MalformedInputError,
)
from zkspend.utils.encoding import is_u64, u64_to_bytes
from zkspend.utils.hash import HASH_SIZE, hash_concatenate

MAX_PATH_LENGTH = 256


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise MalformedInputError(message)


def _check_width(name: str, value: bytes, size: int) -> None:
    _require(isinstance(value, bytes) and len(value) == size, f"{name} must be {size} bytes")


class SpendVerificationEngine:
    """Validates one spend note and emits its public outputs."""

    @staticmethod
    def compute_leaf_hash(note: SpendNote) -> bytes:
        """
        Compute the Merkle leaf committed for a note.

        leaf = SHA256(wallet || nullifier || commitment || blinding_factor
                      || salt || timestamp)

        The blinding factor is 32 bytes big-endian, the timestamp 8 bytes
        big-endian.
        """
        commitment = note.amount_commitment
        return hash_concatenate(
            note.wallet,
            note.nullifier,
            commitment.commitment,
            scalar_to_bytes(commitment.blinding_factor),
            note.nullifier_data.salt,
            u64_to_bytes(note.nullifier_data.timestamp),
        )

    @staticmethod
    def validate_input(spend_input: SpendVerificationInput) -> None:
        """
        Check field widths and ranges.

        Raises:
            MalformedInputError: On the first structural problem found
        """
        note = spend_input.spend_note
        commitment = note.amount_commitment
        proof = spend_input.merkle_proof

        _check_width("wallet", note.wallet, WALLET_SIZE)
        _check_width("nullifier", note.nullifier, NULLIFIER_SIZE)
        _check_width("commitment", commitment.commitment, POINT_SIZE)
        _check_width("salt", note.nullifier_data.salt, SALT_SIZE)
        _check_width("merkle_root", spend_input.merkle_root, ROOT_SIZE)
        _require(is_u64(commitment.amount), "amount must be an unsigned 64-bit integer")
        _require(is_u64(note.nullifier_data.timestamp), "timestamp must be an unsigned 64-bit integer")
        _require(is_u64(spend_input.expected_amount), "expected_amount must be an unsigned 64-bit integer")
        _require(
            isinstance(commitment.blinding_factor, int) and 0 <= commitment.blinding_factor < CURVE_ORDER,
            "blinding_factor must be a canonical scalar",
        )
        _require(len(proof.path) == len(proof.indices), "Merkle path and indices differ in length")
        _require(len(proof.path) <= MAX_PATH_LENGTH, f"Merkle path longer than {MAX_PATH_LENGTH}")
        for sibling in proof.path:
            _check_width("Merkle sibling", sibling, HASH_SIZE)

    @staticmethod
    def verify(spend_input: SpendVerificationInput) -> PublicOutputs:
        """
        Run the full verification pass.

        Args:
            spend_input: Complete input for one session

        Returns:
            PublicOutputs: (merkle_root, nullifier, expected_amount)

        Raises:
            MalformedInputError: If the input is structurally invalid
            InvalidNullifierError: If the nullifier check fails
            InvalidAmountCommitmentError: If the commitment check fails
            InvalidMerkleProofError: If the membership check fails
        """
        SpendVerificationEngine.validate_input(spend_input)
        note = spend_input.spend_note
        commitment = note.amount_commitment

        # 1. Nullifier
        if not verify_nullifier(note.wallet, note.nullifier_data, note.nullifier):
            raise InvalidNullifierError("Nullifier does not match wallet, salt and timestamp")

        # 2. Amount commitment
        opens = PedersenCommitment.verify(
            commitment.commitment, commitment.amount, commitment.blinding_factor
        )
        if not opens or commitment.amount != spend_input.expected_amount:
            raise InvalidAmountCommitmentError("Commitment does not open to the expected amount")

        # 3. Merkle membership
        leaf = SpendVerificationEngine.compute_leaf_hash(note)
        if not verify_merkle_proof(leaf, spend_input.merkle_proof, spend_input.merkle_root):
            raise InvalidMerkleProofError("Note leaf does not fold up to the Merkle root")

        return PublicOutputs(
            merkle_root=spend_input.merkle_root,
            nullifier=note.nullifier,
            amount=spend_input.expected_amount,
        )


# Convenience aliases
compute_leaf_hash = SpendVerificationEngine.compute_leaf_hash
verify_spend = SpendVerificationEngine.verify
