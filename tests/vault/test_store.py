"""Unit tests for the local and in-memory snapshot stores.

No database or Docker required -- uses a temporary directory.
"""

from __future__ import annotations

import json

import pytest

from pagevault.vault.layout import StorageLayout
from pagevault.vault.models.snapshot import VaultSnapshot
from pagevault.vault.store.base import StateStore
from pagevault.vault.store.local import LocalStateStore
from pagevault.vault.store.memory import MemoryStateStore


def _snapshot(block: int = 0, **pages: str) -> VaultSnapshot:
    layout = StorageLayout(privileged_writer="0x" + "a" * 40, logic_address="0x" + "c" * 40)
    for index, (page_id, content) in enumerate(pages.items()):
        layout.page_content[page_id] = content
        layout.page_last_modified[page_id] = block
        layout.page_exists_flag[page_id] = True
        layout.page_id_order.append(page_id)
        layout.page_id_position[page_id] = index
    layout.total_page_count = len(pages)
    return VaultSnapshot(layout=layout, block_number=block)


@pytest.fixture
def store(tmp_path) -> LocalStateStore:
    return LocalStateStore(tmp_path)


@pytest.fixture
def prefixed_store(tmp_path) -> LocalStateStore:
    return LocalStateStore(tmp_path, prefix="tenant")


def test_stores_satisfy_protocol(tmp_path) -> None:
    assert isinstance(LocalStateStore(tmp_path), StateStore)
    assert isinstance(MemoryStateStore(), StateStore)


async def test_write_and_read_snapshot(store: LocalStateStore) -> None:
    await store.write_snapshot("v1", _snapshot(3, home="hello", about="us"))

    result = await store.read_snapshot("v1")
    assert result.block_number == 3
    assert result.layout.page_id_order == ["home", "about"]
    assert result.layout.page_content == {"home": "hello", "about": "us"}
    assert result.layout.page_id_position == {"home": 0, "about": 1}


async def test_read_snapshot_not_found(store: LocalStateStore) -> None:
    with pytest.raises(FileNotFoundError):
        await store.read_snapshot("nonexistent")


async def test_exists(store: LocalStateStore) -> None:
    assert await store.exists("v1") is False
    await store.write_snapshot("v1", _snapshot())
    assert await store.exists("v1") is True


async def test_delete(store: LocalStateStore) -> None:
    await store.write_snapshot("v1", _snapshot())

    await store.delete("v1")
    assert await store.exists("v1") is False

    # Delete non-existent is a no-op.
    await store.delete("nonexistent")


async def test_overwrite_replaces_snapshot(store: LocalStateStore) -> None:
    await store.write_snapshot("v1", _snapshot(1, a="1"))
    await store.write_snapshot("v1", _snapshot(2, b="2"))

    result = await store.read_snapshot("v1")
    assert result.block_number == 2
    assert result.layout.page_id_order == ["b"]


async def test_no_temp_files_left(store: LocalStateStore) -> None:
    await store.write_snapshot("v1", _snapshot(1, a="1"))
    await store.write_snapshot("v1", _snapshot(2, a="2"))

    files = sorted(p.name for p in store.snapshot_path("v1").parent.iterdir())
    assert files == ["state.json"]


async def test_snapshot_file_is_json(store: LocalStateStore) -> None:
    await store.write_snapshot("v1", _snapshot(5, home="hello"))

    data = json.loads(store.snapshot_path("v1").read_text(encoding="utf-8"))
    assert data["block_number"] == 5
    assert data["layout"]["page_content"] == {"home": "hello"}


async def test_vaults_isolated(store: LocalStateStore) -> None:
    await store.write_snapshot("a", _snapshot(1, only_a="x"))
    await store.write_snapshot("b", _snapshot(2, only_b="y"))

    a = await store.read_snapshot("a")
    b = await store.read_snapshot("b")
    assert a.layout.page_id_order == ["only_a"]
    assert b.layout.page_id_order == ["only_b"]


async def test_prefixed_path_layout(prefixed_store: LocalStateStore, tmp_path) -> None:
    await prefixed_store.write_snapshot("v1", _snapshot())
    assert (tmp_path / "tenant" / "vaults" / "v1" / "state.json").exists()


async def test_unprefixed_path_layout(store: LocalStateStore, tmp_path) -> None:
    await store.write_snapshot("v1", _snapshot())
    assert (tmp_path / "vaults" / "v1" / "state.json").exists()


async def test_prefixes_isolated(tmp_path) -> None:
    alice = LocalStateStore(tmp_path, prefix="alice")
    bob = LocalStateStore(tmp_path, prefix="bob")

    await alice.write_snapshot("v1", _snapshot(1))
    assert await bob.exists("v1") is False


# ---------------------------------------------------------------------------
# MemoryStateStore
# ---------------------------------------------------------------------------


async def test_memory_store_roundtrip() -> None:
    store = MemoryStateStore()
    assert await store.exists("v1") is False

    await store.write_snapshot("v1", _snapshot(4, a="1"))
    result = await store.read_snapshot("v1")
    assert result.block_number == 4
    assert result.layout.page_content == {"a": "1"}

    await store.delete("v1")
    with pytest.raises(FileNotFoundError):
        await store.read_snapshot("v1")


async def test_memory_store_returns_copies() -> None:
    store = MemoryStateStore()
    await store.write_snapshot("v1", _snapshot(1, a="1"))

    first = await store.read_snapshot("v1")
    first.layout.page_content["a"] = "mutated"

    second = await store.read_snapshot("v1")
    assert second.layout.page_content == {"a": "1"}
