"""Custom exceptions for the spend verification protocol."""

from enum import Enum


class FailureKind(str, Enum):
    """Reason a spend was rejected."""
    INVALID_NULLIFIER = "InvalidNullifier"
    INVALID_AMOUNT_COMMITMENT = "InvalidAmountCommitment"
    INVALID_MERKLE_PROOF = "InvalidMerkleProof"
    MALFORMED_INPUT = "MalformedInput"
    PROVING_FAILURE = "ProvingFailure"
    VERIFICATION_FAILURE = "VerificationFailure"
    OUTPUT_MISMATCH = "OutputMismatch"
    DOUBLE_SPEND = "DoubleSpend"
    MERKLE_TREE = "MerkleTree"


class SpendProtocolError(Exception):
    """Base exception for all spend protocol errors."""
    kind = None


# Engine content checks
class SpendVerificationError(SpendProtocolError):
    """Base exception for the engine's three content checks."""
    pass


class InvalidNullifierError(SpendVerificationError):
    """Raised when the nullifier does not match wallet, salt and timestamp."""
    kind = FailureKind.INVALID_NULLIFIER


class InvalidAmountCommitmentError(SpendVerificationError):
    """Raised when the amount commitment does not open to the claimed amount."""
    kind = FailureKind.INVALID_AMOUNT_COMMITMENT


class InvalidMerkleProofError(SpendVerificationError):
    """Raised when the note leaf does not fold up to the claimed root."""
    kind = FailureKind.INVALID_MERKLE_PROOF


class MalformedInputError(SpendProtocolError):
    """Raised when input is structurally invalid (widths, ranges, lengths)."""
    kind = FailureKind.MALFORMED_INPUT


# Host facade errors
class ProvingFailureError(SpendProtocolError):
    """Raised when the proving capability errors."""
    kind = FailureKind.PROVING_FAILURE


class VerificationFailureError(SpendProtocolError):
    """Raised when the verifying capability rejects an artifact."""
    kind = FailureKind.VERIFICATION_FAILURE


class OutputMismatchError(SpendProtocolError):
    """Raised when decoded public outputs disagree with a proof's claims."""
    kind = FailureKind.OUTPUT_MISMATCH

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"Public output mismatch on {field}")


# Spent set
class DoubleSpendError(SpendProtocolError):
    """Raised when a nullifier has already been spent."""
    kind = FailureKind.DOUBLE_SPEND


# Merkle Tree Errors
class MerkleTreeError(SpendProtocolError):
    """Base exception for Merkle tree builder errors."""
    kind = FailureKind.MERKLE_TREE


class TreeHeightExceededError(MerkleTreeError):
    """Raised when the tree is full."""
    pass


class InvalidLeafIndexError(MerkleTreeError):
    """Raised when leaf index is invalid."""
    pass
