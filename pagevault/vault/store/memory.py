"""In-memory state store.

Keeps each snapshot as serialised JSON so that readers get an independent
copy, exactly as they would from the file or S3 backends.  Nothing survives
the process; intended for tests and throwaway deployments.
"""

from __future__ import annotations

from pagevault.vault.models.snapshot import VaultSnapshot


class MemoryStateStore:
    """Dict-backed implementation of the StateStore protocol."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def write_snapshot(self, vault_id: str, snapshot: VaultSnapshot) -> None:
        self._data[vault_id] = snapshot.model_dump_json()

    async def read_snapshot(self, vault_id: str) -> VaultSnapshot:
        try:
            raw = self._data[vault_id]
        except KeyError:
            msg = f"Vault snapshot not found: {vault_id}"
            raise FileNotFoundError(msg) from None
        return VaultSnapshot.model_validate_json(raw)

    async def exists(self, vault_id: str) -> bool:
        return vault_id in self._data

    async def delete(self, vault_id: str) -> None:
        self._data.pop(vault_id, None)
