"""Proving capability interface and the in-process reference backend.

The spend protocol only needs two operations from a proving system:

    prove(serialized_input)          -> artifact
    verify(artifact, program_id)     -> public outputs (72 bytes)

Any succinct proving system can sit behind this interface. The
LocalProvingBackend runs the verification engine directly and seals the
resulting journal with an HMAC keyed by a backend secret, so artifacts
cannot be forged or re-bound to other outputs by anyone without the key.

Artifact layout (LocalProvingBackend):
    [0,72)    journal (public outputs)
    [72,104)  program identity
    [104,136) seal = HMAC-SHA256(seal_key, program_id || journal)
"""

import hashlib
import hmac
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Optional

from zkspend.config import SPEND_PROGRAM_ID, get_settings
from zkspend.core.engine import SpendVerificationEngine
from zkspend.core.types import PUBLIC_OUTPUTS_SIZE
from zkspend.exceptions import VerificationFailureError
from zkspend.utils.serialization import deserialize_input

logger = logging.getLogger(__name__)

PROGRAM_ID_SIZE = 32
SEAL_SIZE = 32
ARTIFACT_SIZE = PUBLIC_OUTPUTS_SIZE + PROGRAM_ID_SIZE + SEAL_SIZE


class ProvingBackend(ABC):
    """Opaque proving / verifying capability."""

    @abstractmethod
    def prove(self, serialized_input: bytes) -> bytes:
        """Execute the spend program on serialized input and return an artifact."""

    @abstractmethod
    def verify(self, artifact: bytes, program_id: bytes) -> bytes:
        """
        Check that artifact attests a correct run of program_id.

        Returns:
            bytes: The artifact's embedded public outputs

        Raises:
            VerificationFailureError: If the artifact is rejected
        """


class LocalProvingBackend(ProvingBackend):
    """
    In-process backend that executes the engine and seals its journal.

    Only holders of seal_key can produce artifacts this backend accepts.
    """

    def __init__(self, seal_key: Optional[bytes] = None, program_id: Optional[bytes] = None):
        settings = get_settings()
        if seal_key is None:
            seal_key = settings.seal_key_bytes or secrets.token_bytes(32)
        if len(seal_key) != 32:
            raise ValueError("Seal key must be 32 bytes")
        if program_id is None:
            program_id = settings.program_id_bytes
        if len(program_id) != PROGRAM_ID_SIZE:
            raise ValueError(f"Program identity must be {PROGRAM_ID_SIZE} bytes")

        self._seal_key = seal_key
        self.program_id = program_id

    def _seal(self, program_id: bytes, journal: bytes) -> bytes:
        return hmac.new(self._seal_key, program_id + journal, hashlib.sha256).digest()

    def prove(self, serialized_input: bytes) -> bytes:
        """
        Decode the input, run the engine and seal the journal.

        Engine failures propagate as their typed errors and no artifact
        is produced.
        """
        spend_input = deserialize_input(serialized_input)
        outputs = SpendVerificationEngine.verify(spend_input)
        journal = outputs.to_bytes()

        logger.debug(f"Sealed journal for nullifier {outputs.nullifier.hex()[:16]}...")
        return journal + self.program_id + self._seal(self.program_id, journal)

    def verify(self, artifact: bytes, program_id: bytes) -> bytes:
        if not isinstance(artifact, bytes) or len(artifact) != ARTIFACT_SIZE:
            raise VerificationFailureError(f"Artifact must be {ARTIFACT_SIZE} bytes")

        journal = artifact[:PUBLIC_OUTPUTS_SIZE]
        attested_id = artifact[PUBLIC_OUTPUTS_SIZE:PUBLIC_OUTPUTS_SIZE + PROGRAM_ID_SIZE]
        seal = artifact[PUBLIC_OUTPUTS_SIZE + PROGRAM_ID_SIZE:]

        if not hmac.compare_digest(attested_id, program_id):
            raise VerificationFailureError("Artifact attests a different program")
        if not hmac.compare_digest(seal, self._seal(attested_id, journal)):
            raise VerificationFailureError("Artifact seal is invalid")

        return journal


_backend: Optional[ProvingBackend] = None


def get_backend() -> ProvingBackend:
    """Get or create the global backend instance."""
    global _backend
    if _backend is None:
        _backend = LocalProvingBackend()
    return _backend


def set_backend(backend: Optional[ProvingBackend]) -> None:
    """Install a backend as the process default (None resets it)."""
    global _backend
    _backend = backend
