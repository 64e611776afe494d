"""Event journal operations.

Records are written by ``DatabaseEventSink`` after each committed call and
read back by the events router.  Rows are never updated or deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from pagevault.vault.db.tables import PageEventRow
from pagevault.vault.models.enums import EventType

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from pagevault.vault.models.events import VaultEvent


def _to_row(event: VaultEvent) -> PageEventRow:
    return PageEventRow(
        vault_id=event.vault_id,
        block_number=event.block_number,
        log_index=event.log_index,
        event_type=str(event.event_type),
        page_id=event.page_id,
        payload=event.payload,
        emitted_at=event.timestamp,
    )


async def record_events(db: AsyncSession, events: list[VaultEvent]) -> None:
    """Append *events* to the journal in one transaction."""
    db.add_all([_to_row(event) for event in events])
    await db.commit()


async def list_events(
    db: AsyncSession,
    *,
    vault_id: str | None = None,
    event_type: str | None = None,
    page_id: str | None = None,
    since_block: int | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[PageEventRow]:
    """List journal rows in log order (oldest first) with optional filters.

    Raises ``ValueError`` if ``event_type`` is not a known event type.
    """
    stmt = select(PageEventRow).order_by(PageEventRow.block_number, PageEventRow.log_index)

    if vault_id is not None:
        stmt = stmt.where(PageEventRow.vault_id == vault_id)
    if event_type is not None:
        try:
            kind = EventType(event_type)
        except ValueError:
            msg = f"Unknown event type: {event_type}"
            raise ValueError(msg) from None
        stmt = stmt.where(PageEventRow.event_type == str(kind))
    if page_id is not None:
        stmt = stmt.where(PageEventRow.page_id == page_id)
    if since_block is not None:
        stmt = stmt.where(PageEventRow.block_number >= since_block)

    stmt = stmt.limit(limit).offset(offset)
    result = await db.execute(stmt)
    return list(result.scalars().all())


class DatabaseEventSink:
    """Event sink that appends every committed record to PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def publish(self, events: list[VaultEvent]) -> None:
        if not events:
            return
        async with self._session_factory() as db:
            await record_events(db, events)
