"""Pytest configuration and fixtures."""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from zkspend.config import reset_settings
from zkspend.core.engine import SpendVerificationEngine
from zkspend.core.merkle_tree import compute_merkle_root
from zkspend.core.nullifier import derive_nullifier
from zkspend.core.pedersen import PedersenCommitment
from zkspend.core.types import (
    AmountCommitment,
    MerkleProof,
    NullifierData,
    SpendNote,
    SpendVerificationInput,
)
from zkspend.crypto.backend import LocalProvingBackend, set_backend

SCENARIO_WALLET = b"\x01" * 20
SCENARIO_AMOUNT = 1_000_000
SCENARIO_SALT = b"\x00" * 32
SCENARIO_TIMESTAMP = 1_700_000_000
SCENARIO_BLINDING = 0x1234567890ABCDEF


class FixedRandomness:
    """Deterministic stand-in for the secrets module."""

    def __init__(self, salt: bytes, blinding_factor: int):
        self.salt = salt
        self.blinding_factor = blinding_factor

    def token_bytes(self, n: int) -> bytes:
        assert n == len(self.salt)
        return self.salt

    def randbelow(self, n: int) -> int:
        return self.blinding_factor - 1


def build_note(wallet=SCENARIO_WALLET, amount=SCENARIO_AMOUNT, salt=SCENARIO_SALT,
               timestamp=SCENARIO_TIMESTAMP, blinding_factor=SCENARIO_BLINDING) -> SpendNote:
    """Build a consistent spend note."""
    return SpendNote(
        wallet=wallet,
        nullifier=derive_nullifier(wallet, salt, timestamp),
        amount_commitment=AmountCommitment(
            commitment=PedersenCommitment.commit(amount, blinding_factor),
            amount=amount,
            blinding_factor=blinding_factor,
        ),
        nullifier_data=NullifierData(salt=salt, timestamp=timestamp),
    )


def build_input(note: SpendNote, depth: int = 3) -> SpendVerificationInput:
    """Place a note under a depth-level path of fixed siblings and compute its root."""
    proof = MerkleProof(
        path=[bytes([level + 1]) * 32 for level in range(depth)],
        indices=[level % 2 == 0 for level in range(depth)],
    )
    leaf = SpendVerificationEngine.compute_leaf_hash(note)
    return SpendVerificationInput(
        spend_note=note,
        merkle_proof=proof,
        merkle_root=compute_merkle_root(leaf, proof),
        expected_amount=note.amount_commitment.amount,
    )


@pytest.fixture
def scenario_note():
    """Note from the reference scenario (wallet 0x01*20, amount 1,000,000)."""
    return build_note()


@pytest.fixture
def scenario_input(scenario_note):
    """Depth-3 verification input for the reference scenario."""
    return build_input(scenario_note)


@pytest.fixture
def backend():
    """Local backend with a fixed seal key, installed as the process default."""
    backend = LocalProvingBackend(seal_key=b"\x42" * 32)
    set_backend(backend)
    yield backend
    set_backend(None)


@pytest.fixture
def clean_settings():
    """Re-read settings for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def note_factory():
    """Factory for consistent spend notes (defaults to the reference scenario)."""
    return build_note


@pytest.fixture
def input_factory():
    """Factory placing a note under a fixed sibling path."""
    return build_input


@pytest.fixture
def fixed_rng():
    """Factory for deterministic randomness sources."""
    return FixedRandomness
