"""Integration tests for S3StateStore against a real S3 endpoint.

Marked with @pytest.mark.s3 and skipped unless PAGEVAULT_S3_* variables are
set.  Each test uses a unique key prefix and removes what it writes.

Required env vars:
    PAGEVAULT_S3_ENDPOINT
    PAGEVAULT_S3_BUCKET
    PAGEVAULT_S3_ACCESS_KEY
    PAGEVAULT_S3_SECRET_KEY
"""

from __future__ import annotations

import os
import uuid

import pytest

from pagevault.vault.catalog import default_catalog
from pagevault.vault.layout import StorageLayout
from pagevault.vault.models.snapshot import VaultSnapshot
from pagevault.vault.proxy import PageProxy
from pagevault.vault.store.s3 import S3StateStore

_S3_ENDPOINT = os.environ.get("PAGEVAULT_S3_ENDPOINT")
_S3_BUCKET = os.environ.get("PAGEVAULT_S3_BUCKET")
_S3_ACCESS_KEY = os.environ.get("PAGEVAULT_S3_ACCESS_KEY")
_S3_SECRET_KEY = os.environ.get("PAGEVAULT_S3_SECRET_KEY")

_s3_configured = all([_S3_ENDPOINT, _S3_BUCKET, _S3_ACCESS_KEY, _S3_SECRET_KEY])
_skip_reason = "S3 tests require PAGEVAULT_S3_ENDPOINT, _BUCKET, _ACCESS_KEY and _SECRET_KEY"

pytestmark = [pytest.mark.s3, pytest.mark.skipif(not _s3_configured, reason=_skip_reason)]

WRITER = "0x" + "a" * 40


@pytest.fixture
def s3_store() -> S3StateStore:
    assert _S3_ENDPOINT and _S3_BUCKET and _S3_ACCESS_KEY and _S3_SECRET_KEY
    return S3StateStore(
        bucket=_S3_BUCKET,
        endpoint_url=_S3_ENDPOINT,
        access_key=_S3_ACCESS_KEY,
        secret_key=_S3_SECRET_KEY,
        prefix=f"test-{uuid.uuid4().hex[:8]}",
        path_style=os.environ.get("PAGEVAULT_S3_PATH_STYLE", "").lower() in ("1", "true"),
    )


async def test_write_and_read_snapshot(s3_store: S3StateStore) -> None:
    layout = StorageLayout(privileged_writer=WRITER, logic_address="0x" + "c" * 40)
    layout.page_content["home"] = "hello"
    try:
        await s3_store.write_snapshot("v1", VaultSnapshot(layout=layout, block_number=9))

        result = await s3_store.read_snapshot("v1")
        assert result.block_number == 9
        assert result.layout.page_content == {"home": "hello"}
    finally:
        await s3_store.delete("v1")


async def test_read_snapshot_not_found(s3_store: S3StateStore) -> None:
    with pytest.raises(FileNotFoundError):
        await s3_store.read_snapshot("nonexistent")


async def test_exists_and_delete(s3_store: S3StateStore) -> None:
    assert await s3_store.exists("v1") is False
    snapshot = VaultSnapshot(layout=StorageLayout(privileged_writer=WRITER, logic_address="0x" + "c" * 40))
    try:
        await s3_store.write_snapshot("v1", snapshot)
        assert await s3_store.exists("v1") is True
    finally:
        await s3_store.delete("v1")
    assert await s3_store.exists("v1") is False

    # Delete non-existent is a no-op.
    await s3_store.delete("nonexistent")


async def test_vault_survives_reopen(s3_store: S3StateStore) -> None:
    catalog = default_catalog()
    logic = catalog.address_of_version("v2.0.0")
    try:
        proxy = await PageProxy.open(s3_store, catalog, vault_id="v1", genesis_writer=WRITER, genesis_logic=logic)
        await proxy.call(WRITER, "set_pages", ["a", "b"], ["1", "2"])

        reopened = await PageProxy.open(s3_store, catalog, vault_id="v1")
        assert reopened.block_number == 1
        assert await reopened.call(None, "get_all_page_ids") == ["a", "b"]
    finally:
        await s3_store.delete("v1")
