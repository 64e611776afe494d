"""Integration tests for the PostgreSQL event journal.

Verifies the Alembic migration, the savepoint isolation used by every DB
test, and the journal's record/list operations.
"""

from __future__ import annotations

import pytest
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from pagevault.vault.db.tables import PageEventRow
from pagevault.vault.managers.events import list_events, record_events
from pagevault.vault.models.enums import EventType
from pagevault.vault.models.events import VaultEvent

pytestmark = pytest.mark.integration


def _event(block: int, log_index: int, event_type: EventType, vault_id: str = "test", **payload) -> VaultEvent:
    return VaultEvent(
        vault_id=vault_id,
        block_number=block,
        log_index=log_index,
        event_type=event_type,
        payload=payload,
    )


async def test_alembic_migrations_applied(db_session: AsyncSession) -> None:
    result = await db_session.execute(
        text("SELECT table_name FROM information_schema.tables WHERE table_schema = 'public' ORDER BY table_name")
    )
    tables = sorted(row[0] for row in result)
    assert "page_events" in tables


async def test_savepoint_rollback_isolation(db_session: AsyncSession) -> None:
    await record_events(db_session, [_event(1, 0, EventType.PAGE_UPDATED, vault_id="isolation", page_id="a")])

    rows = await list_events(db_session, vault_id="isolation")
    assert len(rows) == 1


async def test_savepoint_rollback_clean_state(db_session: AsyncSession) -> None:
    result = await db_session.execute(select(PageEventRow).where(PageEventRow.vault_id == "isolation"))
    assert result.scalar_one_or_none() is None, "Savepoint rollback did not clean up previous test's data"


async def test_record_and_list_in_log_order(db_session: AsyncSession) -> None:
    await record_events(
        db_session,
        [
            _event(2, 0, EventType.PAGE_DELETED, page_id="a"),
            _event(1, 1, EventType.PAGE_UPDATED, page_id="b", content="2", created=True),
            _event(1, 0, EventType.PAGE_UPDATED, page_id="a", content="1", created=True),
        ],
    )

    rows = await list_events(db_session, vault_id="test")
    assert [(r.block_number, r.log_index) for r in rows] == [(1, 0), (1, 1), (2, 0)]
    assert rows[0].page_id == "a"
    assert rows[0].payload == {"page_id": "a", "content": "1", "created": True}
    assert rows[0].event_type == "page_updated"


async def test_list_filters(db_session: AsyncSession) -> None:
    await record_events(
        db_session,
        [
            _event(1, 0, EventType.PAGE_UPDATED, page_id="a"),
            _event(2, 0, EventType.PAGE_UPDATED, page_id="b"),
            _event(3, 0, EventType.PAGE_DELETED, page_id="a"),
            _event(4, 0, EventType.LOGIC_UPGRADED, old="0x1", new="0x2"),
            _event(1, 0, EventType.PAGE_UPDATED, vault_id="elsewhere", page_id="a"),
        ],
    )

    by_page = await list_events(db_session, vault_id="test", page_id="a")
    assert [r.block_number for r in by_page] == [1, 3]

    by_type = await list_events(db_session, vault_id="test", event_type="logic_upgraded")
    assert len(by_type) == 1
    assert by_type[0].page_id is None

    since = await list_events(db_session, vault_id="test", since_block=3)
    assert [r.block_number for r in since] == [3, 4]

    window = await list_events(db_session, vault_id="test", limit=2, offset=1)
    assert [r.block_number for r in window] == [2, 3]


async def test_list_rejects_unknown_type(db_session: AsyncSession) -> None:
    with pytest.raises(ValueError, match="Unknown event type"):
        await list_events(db_session, event_type="page_exploded")
