"""Cryptographic hash utilities."""

import hashlib
from typing import Union

HASH_SIZE = 32  # SHA-256 output size


def sha256(data: Union[bytes, str]) -> bytes:
    """
    Compute SHA-256 hash of data.

    Args:
        data: Bytes or string to hash

    Returns:
        bytes: 32-byte SHA-256 hash
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).digest()


def hash_concatenate(*data: Union[bytes, str]) -> bytes:
    """
    Hash concatenated data.

    Args:
        *data: Multiple bytes or strings to concatenate and hash

    Returns:
        bytes: SHA-256 hash of concatenated data
    """
    hasher = hashlib.sha256()
    for item in data:
        if isinstance(item, str):
            item = item.encode('utf-8')
        hasher.update(item)
    return hasher.digest()


def merkle_fold(current: bytes, sibling: bytes, current_is_left: bool) -> bytes:
    """
    Compute the parent of a node and its sibling.

    The direction bit selects the concatenation order:
    True hashes (current || sibling), False hashes (sibling || current).

    Args:
        current: Hash being folded up the tree
        sibling: Sibling hash at this level
        current_is_left: Direction bit for this level

    Returns:
        bytes: Parent hash (32 bytes)
    """
    if current_is_left:
        return hash_concatenate(current, sibling)
    return hash_concatenate(sibling, current)
