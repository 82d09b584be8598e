"""Proving capability and spent-set modules"""

from zkspend.crypto.backend import (
    ProvingBackend,
    LocalProvingBackend,
    SPEND_PROGRAM_ID,
    get_backend,
    set_backend,
)

from zkspend.crypto.nullifier import (
    NullifierRecord,
    NullifierSet,
)

__all__ = [
    'ProvingBackend',
    'LocalProvingBackend',
    'SPEND_PROGRAM_ID',
    'get_backend',
    'set_backend',
    'NullifierRecord',
    'NullifierSet',
]
