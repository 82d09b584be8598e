"""Merkle accumulator over spend-note leaves.

Membership is proven with a sibling path and one direction bit per level.
At level i the running hash is combined with path[i]:

    indices[i] is True   ->  SHA256(current || path[i])
    indices[i] is False  ->  SHA256(path[i] || current)

The verifier never decides whether a root is authoritative; callers must
reconcile the root against ledger state first.
"""

import hmac
from typing import Dict, List, Optional, Tuple

from zkspend.config import get_settings
from zkspend.core.types import MerkleProof
from zkspend.utils.hash import HASH_SIZE, merkle_fold
from zkspend.exceptions import (
    TreeHeightExceededError,
    InvalidLeafIndexError,
    MalformedInputError,
)


def compute_merkle_root(leaf: bytes, proof: MerkleProof) -> bytes:
    """
    Fold a leaf up its sibling path.

    Raises:
        MalformedInputError: If path and indices differ in length
    """
    if len(proof.path) != len(proof.indices):
        raise MalformedInputError(
            f"Merkle path has {len(proof.path)} siblings but {len(proof.indices)} direction bits"
        )

    current = leaf
    for sibling, current_is_left in zip(proof.path, proof.indices):
        current = merkle_fold(current, sibling, bool(current_is_left))
    return current


def verify_merkle_proof(leaf: bytes, proof: MerkleProof, root: bytes) -> bool:
    """
    Verify that leaf folds up to root.

    Tree depth is implicit in the path length. There is no fallback:
    a truncated, reordered or tampered path simply fails.

    Args:
        leaf: Leaf bytes
        proof: Sibling path and direction bits
        root: Claimed root (32 bytes)

    Returns:
        bool: True iff the reconstructed root equals root byte-for-byte

    Raises:
        MalformedInputError: If path and indices differ in length
    """
    computed = compute_merkle_root(leaf, proof)
    return hmac.compare_digest(computed, bytes(root))


class MerkleTree:
    """
    Fixed-height sparse Merkle tree for building membership proofs.

    - Leaves are 32-byte note hashes, appended left to right
    - Empty positions hold NULL_LEAF
    - Internal nodes are SHA256(left || right)
    """

    NULL_LEAF = b"\x00" * HASH_SIZE

    def __init__(self, tree_height: Optional[int] = None):
        """
        Initialize empty Merkle tree.

        Args:
            tree_height: Height of the tree (default: settings.merkle_tree_depth)

        Raises:
            ValueError: If height is invalid
        """
        if tree_height is None:
            tree_height = get_settings().merkle_tree_depth
        if tree_height < 1 or tree_height > 64:
            raise ValueError("Tree height must be between 1 and 64")

        self.height = tree_height
        self.max_leaves = 2**tree_height
        self.leaves: List[bytes] = []

        # (level, position) -> hash
        self.nodes: Dict[Tuple[int, int], bytes] = {}

        # Root of an all-empty subtree at each level
        self._empty: List[bytes] = [self.NULL_LEAF]
        for _ in range(self.height):
            self._empty.append(merkle_fold(self._empty[-1], self._empty[-1], True))
        self._root = self._empty[self.height]

    def _node(self, level: int, position: int) -> bytes:
        return self.nodes.get((level, position), self._empty[level])

    def insert(self, leaf: bytes) -> int:
        """
        Append a leaf and return its index.

        Raises:
            TreeHeightExceededError: If tree is full
            ValueError: If leaf format is invalid
        """
        if not isinstance(leaf, bytes) or len(leaf) != HASH_SIZE:
            raise ValueError(f"Leaf must be {HASH_SIZE} bytes")

        if len(self.leaves) >= self.max_leaves:
            raise TreeHeightExceededError(f"Tree is full (max {self.max_leaves} leaves)")

        leaf_index = len(self.leaves)
        self.leaves.append(leaf)
        self.nodes[(0, leaf_index)] = leaf

        position = leaf_index
        for level in range(self.height):
            if position % 2 == 0:
                parent = merkle_fold(self._node(level, position), self._node(level, position + 1), True)
            else:
                parent = merkle_fold(self._node(level, position), self._node(level, position - 1), False)
            position >>= 1
            self.nodes[(level + 1, position)] = parent

        self._root = self.nodes[(self.height, 0)]
        return leaf_index

    def get_proof(self, leaf_index: int) -> MerkleProof:
        """
        Return the sibling path and direction bits for a leaf.

        Raises:
            InvalidLeafIndexError: If leaf index is invalid
        """
        if leaf_index < 0 or leaf_index >= len(self.leaves):
            raise InvalidLeafIndexError(f"Invalid leaf index: {leaf_index}")

        path = []
        indices = []
        position = leaf_index

        for level in range(self.height):
            path.append(self._node(level, position ^ 1))
            indices.append(position % 2 == 0)
            position >>= 1

        return MerkleProof(path=path, indices=indices)

    def verify(self, leaf: bytes, proof: MerkleProof) -> bool:
        """Verify a proof against the current root."""
        return verify_merkle_proof(leaf, proof, self.root)

    @property
    def root(self) -> bytes:
        """Get the current Merkle root hash."""
        return self._root

    def get_state(self) -> dict:
        """
        Get the current state of the tree for serialization.

        Returns:
            dict: Tree state including leaves, height, and root
        """
        return {
            "height": self.height,
            "max_leaves": self.max_leaves,
            "num_leaves": len(self.leaves),
            "leaves": [leaf.hex() for leaf in self.leaves],
            "root": self.root.hex(),
        }

    def __len__(self) -> int:
        """Return the number of leaves in the tree."""
        return len(self.leaves)

    def __repr__(self) -> str:
        return (
            f"MerkleTree(height={self.height}, "
            f"leaves={len(self.leaves)}/{self.max_leaves}, "
            f"root={self.root.hex()[:16]}...)"
        )
