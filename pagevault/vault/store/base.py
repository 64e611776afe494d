"""State store interface for vault snapshots.

The state store holds the proxy's persistent layout between calls.  One
snapshot per vault is rewritten on every committed mutating call and read
once when the proxy opens.  The interface is async to support both local
filesystem and remote (S3) backends.

Event records are not part of the snapshot; they go to the event sinks.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pagevault.vault.models.snapshot import VaultSnapshot


@runtime_checkable
class StateStore(Protocol):
    """Async protocol for reading and writing vault snapshots.

    Storage layout (keyed by vault_id):
        {root}/vaults/{vault_id}/state.json
    """

    async def write_snapshot(self, vault_id: str, snapshot: VaultSnapshot) -> None:
        """Replace the stored snapshot.  Must be all-or-nothing."""
        ...

    async def read_snapshot(self, vault_id: str) -> VaultSnapshot:
        """Read the stored snapshot.  Raises ``FileNotFoundError`` if not found."""
        ...

    async def exists(self, vault_id: str) -> bool:
        """Check whether a snapshot exists for the given vault."""
        ...

    async def delete(self, vault_id: str) -> None:
        """Delete the stored snapshot.  No-op if not found."""
        ...
