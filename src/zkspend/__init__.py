"""Main package initialization."""

__version__ = "0.1.0"
__author__ = "Spend Verification Team"
__description__ = "Private spend verification: nullifiers, Pedersen commitments and Merkle membership"

from .core.types import (
    AmountCommitment,
    MerkleProof,
    NullifierData,
    PublicOutputs,
    SpendNote,
    SpendProof,
    SpendVerificationInput,
)
from .core.pedersen import PedersenCommitment
from .core.merkle_tree import MerkleTree, verify_merkle_proof
from .core.nullifier import derive_nullifier
from .core.engine import SpendVerificationEngine
from .core.zkproof import ProofGenerator, ProofVerifier
from .crypto.backend import LocalProvingBackend, ProvingBackend

__all__ = [
    "AmountCommitment",
    "MerkleProof",
    "NullifierData",
    "PublicOutputs",
    "SpendNote",
    "SpendProof",
    "SpendVerificationInput",
    "PedersenCommitment",
    "MerkleTree",
    "verify_merkle_proof",
    "derive_nullifier",
    "SpendVerificationEngine",
    "ProofGenerator",
    "ProofVerifier",
    "LocalProvingBackend",
    "ProvingBackend",
]
