"""Event sinks: where committed log records go.

The proxy publishes every committed call's records, in order, to each sink.
A sink failure is logged and never rolls back the call -- the state change
is already durable by the time sinks run.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import redis.asyncio as aioredis

    from pagevault.vault.models.events import VaultEvent


@runtime_checkable
class EventSink(Protocol):
    async def publish(self, events: list[VaultEvent]) -> None:
        """Deliver one committed call's records, in log order."""
        ...


class MemoryEventSink:
    """Keeps the most recent records in process for inspection."""

    def __init__(self, maxlen: int | None = 10_000) -> None:
        self._events: deque[VaultEvent] = deque(maxlen=maxlen)

    async def publish(self, events: list[VaultEvent]) -> None:
        self._events.extend(events)

    @property
    def events(self) -> list[VaultEvent]:
        return list(self._events)

    def recent(self, limit: int = 50) -> list[VaultEvent]:
        """Return up to *limit* records, newest first."""
        return list(reversed(self._events))[:limit]

    def clear(self) -> None:
        self._events.clear()


class RedisStreamEventSink:
    """Appends records to a Redis stream for external indexers.

    Each record becomes one stream entry with a single ``event`` field holding
    the JSON envelope.  ``maxlen`` trims approximately, like ``XADD MAXLEN ~``.
    """

    def __init__(self, client: aioredis.Redis, stream: str, maxlen: int | None = None) -> None:
        self._client = client
        self._stream = stream
        self._maxlen = maxlen

    @property
    def stream(self) -> str:
        return self._stream

    async def publish(self, events: list[VaultEvent]) -> None:
        if not events:
            return
        async with self._client.pipeline(transaction=True) as pipe:
            for event in events:
                pipe.xadd(
                    self._stream,
                    {"event": event.model_dump_json()},
                    maxlen=self._maxlen,
                    approximate=True,
                )
            await pipe.execute()
