"""Event log endpoints (read-only).

``/recent`` serves the in-process buffer and always works; ``/list`` queries
the PostgreSQL journal and needs PAGEVAULT_DATABASE_URL.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from pagevault.vault.db.tables import PageEventRow
from pagevault.vault.deps import DbSession, Proxy, RecentEvents
from pagevault.vault.managers import events as events_manager
from pagevault.vault.models.api import EventResponse
from pagevault.vault.models.events import VaultEvent

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/recent", response_model=list[VaultEvent])
async def recent_events(sink: RecentEvents, limit: int = Query(50, ge=1, le=1000)) -> list[VaultEvent]:
    """Latest records committed by this process, newest first."""
    return sink.recent(limit)


@router.get("/list", response_model=list[EventResponse])
async def list_events(
    db: DbSession,
    proxy: Proxy,
    event_type: str | None = Query(None, description="Filter by event type (e.g. 'page_updated')."),
    page_id: str | None = Query(None),
    since_block: int | None = Query(None, ge=0),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[PageEventRow]:
    """Journal rows for this vault in log order (oldest first)."""
    try:
        return await events_manager.list_events(
            db,
            vault_id=proxy.vault_id,
            event_type=event_type,
            page_id=page_id,
            since_block=since_block,
            limit=limit,
            offset=offset,
        )
    except ValueError as exc:
        raise HTTPException(422, detail=str(exc)) from None
