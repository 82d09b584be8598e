"""Append-only set of spent nullifiers.

Reference implementation of the spent-set provider a host consults after a
spend proof verifies. Every nullifier may be registered once; a second
registration is a double-spend attempt.

Example Usage:
    >>> verifier = ProofVerifier(backend)
    >>> outputs = verifier.verify_spend(proof)
    >>> spent.ensure_unspent(outputs.nullifier)
    >>> spent.register(outputs.nullifier, merkle_root=outputs.merkle_root)
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from zkspend.exceptions import DoubleSpendError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NullifierRecord:
    """Record of a spent nullifier."""

    nullifier: str  # hex
    spent_at: str  # ISO-8601 UTC
    merkle_root_at_spending: Optional[str] = None  # hex


class NullifierSet:
    """
    Maintains the set of spent nullifiers.

    Key properties:
      - Nullifiers are never removed
      - Registration is idempotent only in the sense that it fails the second time
      - The set reveals nothing about which note a nullifier came from
    """

    def __init__(self):
        """Initialize empty nullifier set."""
        self.records: Dict[bytes, NullifierRecord] = {}

    def is_spent(self, nullifier: bytes) -> bool:
        """Check if a nullifier has been spent."""
        return nullifier in self.records

    def ensure_unspent(self, nullifier: bytes) -> None:
        """
        Raise if a nullifier has been spent.

        Raises:
            DoubleSpendError: If the nullifier is already registered
        """
        if self.is_spent(nullifier):
            raise DoubleSpendError(f"Nullifier {nullifier.hex()[:16]}... already spent")

    def register(self, nullifier: bytes, merkle_root: Optional[bytes] = None) -> bool:
        """
        Register a nullifier as spent.

        Args:
            nullifier: 32-byte nullifier
            merkle_root: Root the spend was proven against

        Returns:
            True if registered, False if already spent (double-spend)
        """
        if not isinstance(nullifier, bytes) or len(nullifier) != 32:
            raise ValueError("Nullifier must be 32 bytes")

        if self.is_spent(nullifier):
            logger.warning(f"Double-spend attempt for nullifier {nullifier.hex()[:16]}...")
            return False

        self.records[nullifier] = NullifierRecord(
            nullifier=nullifier.hex(),
            spent_at=datetime.now(timezone.utc).isoformat(),
            merkle_root_at_spending=merkle_root.hex() if merkle_root else None,
        )
        logger.info(f"Registered nullifier {nullifier.hex()[:16]}...")
        return True

    def get_record(self, nullifier: bytes) -> Optional[NullifierRecord]:
        """Get spending record for a nullifier."""
        return self.records.get(nullifier)

    @property
    def size(self) -> int:
        """Get number of spent nullifiers."""
        return len(self.records)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, nullifier: bytes) -> bool:
        return self.is_spent(nullifier)

    def serialize(self) -> str:
        """Serialize nullifier set to JSON."""
        return json.dumps(
            {
                "records": [asdict(record) for record in self.records.values()],
                "total_spent": self.size,
            }
        )

    @classmethod
    def deserialize(cls, json_str: str) -> "NullifierSet":
        """Deserialize nullifier set from JSON."""
        data = json.loads(json_str)

        nullifier_set = cls()
        for record_data in data["records"]:
            record = NullifierRecord(
                nullifier=record_data["nullifier"],
                spent_at=record_data["spent_at"],
                merkle_root_at_spending=record_data.get("merkle_root_at_spending"),
            )
            nullifier_set.records[bytes.fromhex(record.nullifier)] = record

        return nullifier_set
