"""Host-facing proof generation and verification.

ProofGenerator assembles a SpendVerificationInput, hands it to a proving
backend and wraps the resulting artifact with the claimed public triple.
ProofVerifier checks an artifact with the backend and then compares the
artifact's own public outputs with the triple the proof claims.
"""

import hmac
import logging
import secrets
import time
from typing import Callable, Optional

from zkspend.config import get_settings
from zkspend.core.nullifier import derive_nullifier
from zkspend.core.pedersen import CURVE_ORDER, PedersenCommitment
from zkspend.core.types import (
    AmountCommitment,
    MerkleProof,
    NullifierData,
    PublicOutputs,
    SpendNote,
    SpendProof,
    SpendVerificationInput,
    SALT_SIZE,
    NULLIFIER_SIZE,
    ROOT_SIZE,
)
from zkspend.crypto.backend import ProvingBackend, get_backend
from zkspend.exceptions import (
    MalformedInputError,
    OutputMismatchError,
    ProvingFailureError,
    SpendProtocolError,
    VerificationFailureError,
)
from zkspend.utils.encoding import is_u64
from zkspend.utils.serialization import serialize_input

logger = logging.getLogger(__name__)


class ProofGenerator:
    """
    Generates spend proofs. One call is one proving session.

    The randomness source must provide token_bytes(n) and randbelow(n);
    the default is the secrets module, which draws from the OS CSPRNG
    and keeps no state shared between sessions.
    """

    def __init__(
        self,
        backend: Optional[ProvingBackend] = None,
        rng=secrets,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend or get_backend()
        self.rng = rng
        self.clock = clock

    def mint_note(self, wallet: bytes, amount: int) -> SpendNote:
        """
        Create a spend note with fresh salt, blinding factor and timestamp.

        Args:
            wallet: Wallet identity (20 bytes)
            amount: Amount to commit to

        Returns:
            SpendNote: Note whose leaf can be inserted into a tree
        """
        if not is_u64(amount):
            raise MalformedInputError("Amount must be an unsigned 64-bit integer")
        nullifier_data = NullifierData(
            salt=self.rng.token_bytes(SALT_SIZE),
            timestamp=int(self.clock()),
        )
        blinding_factor = self.rng.randbelow(CURVE_ORDER - 1) + 1
        amount_commitment = AmountCommitment(
            commitment=PedersenCommitment.commit(amount, blinding_factor),
            amount=amount,
            blinding_factor=blinding_factor,
        )
        nullifier = derive_nullifier(wallet, nullifier_data.salt, nullifier_data.timestamp)

        return SpendNote(
            wallet=wallet,
            nullifier=nullifier,
            amount_commitment=amount_commitment,
            nullifier_data=nullifier_data,
        )

    def prove_note(self, note: SpendNote, merkle_proof: MerkleProof, merkle_root: bytes) -> SpendProof:
        """
        Prove a spend of an existing note.

        Raises:
            MalformedInputError: If the assembled input is structurally invalid
            SpendVerificationError: If the backend's engine run rejects the note
            ProvingFailureError: If the backend errors for any other reason
        """
        spend_input = SpendVerificationInput(
            spend_note=note,
            merkle_proof=merkle_proof,
            merkle_root=merkle_root,
            expected_amount=note.amount_commitment.amount,
        )
        serialized = serialize_input(spend_input)

        try:
            artifact = self.backend.prove(serialized)
        except SpendProtocolError as e:
            logger.warning(f"Proving rejected: {type(e).__name__}")
            raise
        except Exception as e:
            logger.error(f"Proving backend failed: {e}", exc_info=True)
            raise ProvingFailureError(f"Proving backend failed: {e}") from e

        logger.info(
            f"Generated spend proof: root={merkle_root.hex()[:16]}... "
            f"nullifier={note.nullifier.hex()[:16]}..."
        )
        return SpendProof(
            artifact=artifact,
            merkle_root=merkle_root,
            nullifier=note.nullifier,
            amount=note.amount_commitment.amount,
        )

    def prove_spend(
        self,
        wallet: bytes,
        amount: int,
        merkle_proof: MerkleProof,
        merkle_root: bytes,
    ) -> SpendProof:
        """
        Mint a fresh note for (wallet, amount) and prove its spend.

        The Merkle proof must authenticate the leaf of the note minted in
        this call, so with the default randomness source this only
        succeeds for callers that control the tree contents.
        """
        note = self.mint_note(wallet, amount)
        return self.prove_note(note, merkle_proof, merkle_root)


class ProofVerifier:
    """Verifies spend proofs against a backend and an expected program."""

    def __init__(self, backend: Optional[ProvingBackend] = None, program_id: Optional[bytes] = None):
        self.backend = backend or get_backend()
        self.program_id = program_id or get_settings().program_id_bytes

    def verify_spend(self, proof: SpendProof) -> PublicOutputs:
        """
        Verify a spend proof.

        1. The backend must accept the artifact for the expected program.
        2. The artifact's decoded outputs must equal the proof's claimed
           root, nullifier and amount byte-for-byte.

        Returns:
            PublicOutputs: The verified public triple

        Raises:
            VerificationFailureError: If the artifact is rejected
            OutputMismatchError: If the claims disagree with the artifact
        """
        try:
            journal = self.backend.verify(proof.artifact, self.program_id)
        except SpendProtocolError:
            raise
        except Exception as e:
            raise VerificationFailureError(f"Verifying backend failed: {e}") from e

        try:
            decoded = PublicOutputs.from_bytes(journal)
        except (TypeError, ValueError) as e:
            raise VerificationFailureError(f"Undecodable public outputs: {e}") from e

        claimed = proof.claimed_outputs
        for field, value, size in (
            ("merkle_root", claimed.merkle_root, ROOT_SIZE),
            ("nullifier", claimed.nullifier, NULLIFIER_SIZE),
        ):
            if not isinstance(value, bytes) or len(value) != size:
                raise OutputMismatchError(field, f"Claimed {field} is not {size} bytes")
        if not is_u64(claimed.amount):
            raise OutputMismatchError("amount", "Claimed amount is not an unsigned 64-bit integer")

        if not hmac.compare_digest(decoded.merkle_root, claimed.merkle_root):
            raise OutputMismatchError("merkle_root")
        if not hmac.compare_digest(decoded.nullifier, claimed.nullifier):
            raise OutputMismatchError("nullifier")
        if decoded.amount != claimed.amount:
            raise OutputMismatchError("amount")

        return decoded

    def is_valid(self, proof: SpendProof) -> bool:
        """Accept/reject decision over both artifact validity and output match."""
        try:
            self.verify_spend(proof)
        except SpendProtocolError as e:
            logger.info(f"Spend proof rejected ({type(e).__name__}): {e}")
            return False
        return True
