"""Persisted vault snapshot.

The state store holds one snapshot per vault: the storage layout plus the
host's block marker, which is not itself a storage slot.
"""

from __future__ import annotations

from pydantic import BaseModel

from pagevault.vault.layout import StorageLayout


class VaultSnapshot(BaseModel):
    """Last committed state of a vault."""

    layout: StorageLayout
    block_number: int = 0
