"""FastAPI dependency injection for the proxy, caller identity and DB sessions.

Usage in route handlers::

    @router.post("/{page_id}/set")
    async def set_page(page_id: str, body: PageWrite, proxy: Proxy, caller: Caller) -> None:
        ...

Caller identity comes from ``Authorization: Bearer <token>``.  A missing or
unknown token is not an error here: the caller is anonymous (``None``), which
is enough for every read and is rejected by the vault itself on writes.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pagevault.vault.proxy import PageProxy
from pagevault.vault.sinks import MemoryEventSink

_bearer = HTTPBearer(auto_error=False)


def get_proxy(request: Request) -> PageProxy:
    proxy: PageProxy | None = request.app.state.proxy
    if proxy is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Vault not initialised.",
        )
    return proxy


def get_recent_events(request: Request) -> MemoryEventSink:
    return request.app.state.recent_events


def get_caller(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str | None:
    """Resolve the bearer token to an account, or None for anonymous callers."""
    if credentials is None:
        return None
    accounts: dict[str, str] = request.app.state.token_accounts
    return accounts.get(credentials.credentials)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async SQLAlchemy session, closing it after the request."""
    session_factory = request.app.state.db_session_factory
    if session_factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Event journal not configured (PAGEVAULT_DATABASE_URL is unset).",
        )
    session: AsyncSession = session_factory()
    try:
        yield session
    finally:
        await session.close()


# -- Annotated type aliases for concise route signatures ---------------------

Proxy = Annotated[PageProxy, Depends(get_proxy)]
"""Annotated dependency: the vault's address layer."""

Caller = Annotated[str | None, Depends(get_caller)]
"""Annotated dependency: authenticated account, or None."""

RecentEvents = Annotated[MemoryEventSink, Depends(get_recent_events)]
"""Annotated dependency: in-process sink holding the latest records."""

DbSession = Annotated[AsyncSession, Depends(get_db)]
"""Annotated dependency: async SQLAlchemy session (auto-closed after request)."""
