"""Local filesystem state store.

One JSON file per vault under the data root, optionally namespaced::

    {data_root}/{prefix}/vaults/{vault_id}/state.json
    {data_root}/vaults/{vault_id}/state.json        (no prefix)

Every write goes to a temporary file in the vault's directory, is flushed
to disk, and is then renamed over ``state.json``.  The rename is the commit
point: a crash before it leaves the previous snapshot untouched.

File I/O runs in the thread pool via ``anyio.to_thread.run_sync``.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from functools import partial
from pathlib import Path

from anyio import to_thread

from pagevault.vault.models.snapshot import VaultSnapshot

_STATE_FILE = "state.json"


class LocalStateStore:
    """Local filesystem implementation of the StateStore protocol."""

    def __init__(self, data_root: str | Path, prefix: str | None = None) -> None:
        root = Path(data_root) / prefix if prefix else Path(data_root)
        self._vaults = root / "vaults"

    def snapshot_path(self, vault_id: str) -> Path:
        return self._vaults / vault_id / _STATE_FILE

    async def write_snapshot(self, vault_id: str, snapshot: VaultSnapshot) -> None:
        payload = snapshot.model_dump_json(indent=2)
        await to_thread.run_sync(partial(_replace_file, self.snapshot_path(vault_id), payload))

    async def read_snapshot(self, vault_id: str) -> VaultSnapshot:
        path = self.snapshot_path(vault_id)
        raw = await to_thread.run_sync(partial(path.read_text, encoding="utf-8"))
        return VaultSnapshot.model_validate_json(raw)

    async def exists(self, vault_id: str) -> bool:
        return await to_thread.run_sync(self.snapshot_path(vault_id).is_file)

    async def delete(self, vault_id: str) -> None:
        vault_dir = self.snapshot_path(vault_id).parent
        await to_thread.run_sync(partial(shutil.rmtree, vault_dir, ignore_errors=True))


def _replace_file(path: Path, payload: str) -> None:
    """Write *payload* to a sibling temp file, fsync it, then rename over *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".state-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise
