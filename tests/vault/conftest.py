"""Shared fixtures for vault tests.

Everything here runs in process: an in-memory snapshot store, the default
catalog and an in-memory event sink.  No Docker required.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from pagevault.vault.app import app
from pagevault.vault.catalog import LogicCatalog, default_catalog
from pagevault.vault.client import PageStoreClient
from pagevault.vault.proxy import PageProxy
from pagevault.vault.sinks import MemoryEventSink
from pagevault.vault.store.memory import MemoryStateStore

WRITER = "0x" + "a" * 40
OTHER = "0x" + "b" * 40

WRITER_TOKEN = "writer-token"
OTHER_TOKEN = "other-token"


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def catalog() -> LogicCatalog:
    return default_catalog()


@pytest.fixture
def sink() -> MemoryEventSink:
    return MemoryEventSink()


@pytest.fixture
def v1_address(catalog: LogicCatalog) -> str:
    return catalog.address_of_version("v1.0.0")


@pytest.fixture
def v2_address(catalog: LogicCatalog) -> str:
    return catalog.address_of_version("v2.0.0")


@pytest.fixture
async def proxy(store: MemoryStateStore, catalog: LogicCatalog, sink: MemoryEventSink, v2_address: str) -> PageProxy:
    """Fresh vault on the v2 build with ``WRITER`` as privileged writer."""
    return await PageProxy.open(
        store,
        catalog,
        vault_id="test",
        genesis_writer=WRITER,
        genesis_logic=v2_address,
        sinks=[sink],
    )


@pytest.fixture
def writer(proxy: PageProxy) -> PageStoreClient:
    return PageStoreClient(proxy, WRITER)


@pytest.fixture
def anon(proxy: PageProxy) -> PageStoreClient:
    return PageStoreClient(proxy, None)


@pytest.fixture
async def client(proxy: PageProxy, sink: MemoryEventSink) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the app with the in-memory ``proxy``.

    The app lifespan does NOT run under ``ASGITransport``, so state fields
    are pre-set here.
    """
    app.state.db_engine = None
    app.state.db_session_factory = None
    app.state.redis = None
    app.state.proxy = proxy
    app.state.recent_events = sink
    app.state.token_accounts = {WRITER_TOKEN: WRITER, OTHER_TOKEN: OTHER}

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.proxy = None
