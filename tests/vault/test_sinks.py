"""Tests for event sinks.

The in-memory sink runs anywhere; the Redis stream sink needs Docker.
"""

from __future__ import annotations

import json

import pytest

from pagevault.vault.client import PageStoreClient
from pagevault.vault.models.enums import EventType
from pagevault.vault.models.events import VaultEvent
from pagevault.vault.proxy import PageProxy
from pagevault.vault.sinks import EventSink, MemoryEventSink, RedisStreamEventSink


def _event(block: int, log_index: int = 0, page_id: str = "a") -> VaultEvent:
    return VaultEvent(
        vault_id="test",
        block_number=block,
        log_index=log_index,
        event_type=EventType.PAGE_UPDATED,
        payload={"page_id": page_id, "content": "x", "created": True},
    )


def test_sinks_satisfy_protocol() -> None:
    assert isinstance(MemoryEventSink(), EventSink)
    assert isinstance(RedisStreamEventSink(None, "s"), EventSink)  # type: ignore[arg-type]


async def test_memory_sink_recent_is_newest_first() -> None:
    sink = MemoryEventSink()
    await sink.publish([_event(1), _event(2)])
    await sink.publish([_event(3)])

    assert [e.block_number for e in sink.events] == [1, 2, 3]
    assert [e.block_number for e in sink.recent(2)] == [3, 2]


async def test_memory_sink_is_bounded() -> None:
    sink = MemoryEventSink(maxlen=2)
    await sink.publish([_event(1), _event(2), _event(3)])
    assert [e.block_number for e in sink.events] == [2, 3]


async def test_memory_sink_clear() -> None:
    sink = MemoryEventSink()
    await sink.publish([_event(1)])
    sink.clear()
    assert sink.events == []


def test_event_page_id() -> None:
    assert _event(1, page_id="home").page_id == "home"
    upgrade = VaultEvent(
        vault_id="test",
        block_number=1,
        log_index=0,
        event_type=EventType.LOGIC_UPGRADED,
        payload={"old": "0x1", "new": "0x2"},
    )
    assert upgrade.page_id is None


# ---------------------------------------------------------------------------
# Redis stream
# ---------------------------------------------------------------------------


@pytest.mark.integration
async def test_redis_sink_appends_in_order(redis_client) -> None:
    sink = RedisStreamEventSink(redis_client, "test:events", maxlen=1000)
    await sink.publish([_event(1, 0, "a"), _event(1, 1, "b")])
    await sink.publish([_event(2, 0, "c")])

    entries = await redis_client.xrange("test:events")
    decoded = [json.loads(fields[b"event"]) for _, fields in entries]
    assert [(e["block_number"], e["log_index"], e["payload"]["page_id"]) for e in decoded] == [
        (1, 0, "a"),
        (1, 1, "b"),
        (2, 0, "c"),
    ]
    assert decoded[0]["event_type"] == "page_updated"


@pytest.mark.integration
async def test_redis_sink_skips_empty_batch(redis_client) -> None:
    sink = RedisStreamEventSink(redis_client, "test:events")
    await sink.publish([])
    assert await redis_client.exists("test:events") == 0


@pytest.mark.integration
async def test_proxy_publishes_to_redis(redis_client, proxy: PageProxy, writer: PageStoreClient) -> None:
    proxy.add_sink(RedisStreamEventSink(redis_client, "test:vault"))

    await writer.set_pages(["a", "b"], ["1", "2"])

    entries = await redis_client.xrange("test:vault")
    types = [json.loads(fields[b"event"])["event_type"] for _, fields in entries]
    assert types == ["page_updated", "page_updated", "pages_batch_updated"]
