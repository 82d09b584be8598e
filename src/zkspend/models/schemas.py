"""Pydantic transport models for spend proofs."""

from typing import List

from pydantic import BaseModel, Field, field_validator

HEX_32_PATTERN = r"^(0x)?[0-9a-fA-F]{64}$"
HEX_PATTERN = r"^(0x)?([0-9a-fA-F]{2})+$"


class MerkleProofPayload(BaseModel):
    """Hex-encoded Merkle proof."""
    path: List[str] = Field(..., description="Sibling hashes, leaf to root (hex)")
    indices: List[bool] = Field(..., description="Direction bits, True = running hash on the left")

    @field_validator("path")
    @classmethod
    def _siblings_are_32_bytes(cls, path: List[str]) -> List[str]:
        for sibling in path:
            digits = sibling[2:] if sibling.startswith("0x") else sibling
            if len(digits) != 64:
                raise ValueError("Every sibling must be 32 bytes")
            bytes.fromhex(digits)
        return path


class PublicOutputsPayload(BaseModel):
    """Hex-encoded public outputs."""
    merkle_root: str = Field(..., pattern=HEX_32_PATTERN, description="Merkle root (hex)")
    nullifier: str = Field(..., pattern=HEX_32_PATTERN, description="Nullifier (hex)")
    amount: int = Field(..., ge=0, lt=2**64, description="Disclosed amount")


class SpendProofPayload(PublicOutputsPayload):
    """Hex-encoded spend proof as carried between generator and verifier."""
    artifact: str = Field(..., pattern=HEX_PATTERN, description="Opaque proving artifact (hex)")
