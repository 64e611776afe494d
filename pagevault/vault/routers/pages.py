"""Page endpoints (RPC-style).

Thin HTTP adapter -- every handler forwards one operation through the proxy
on behalf of the bearer-token caller.  Writes use POST; reads use GET and
need no token.

Page ids may contain slashes, so id-addressed routes put the verb last
(``/{page_id}/get``) and collection routes use a single path segment.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from pagevault.vault.deps import Caller, Proxy
from pagevault.vault.models.api import (
    PageBatchWrite,
    PageContentsResponse,
    PageCountResponse,
    PageExistsResponse,
    PageIdsResponse,
    PageInfoResponse,
    PageResponse,
    PageSearchResponse,
    PageWindowResponse,
    PageWrite,
)
from pagevault.vault.routers._http import vault_errors

router = APIRouter(prefix="/pages", tags=["pages"])


# -- Writes --------------------------------------------------------------------


@router.post("/batch-set", status_code=status.HTTP_204_NO_CONTENT)
async def set_pages(body: PageBatchWrite, proxy: Proxy, caller: Caller) -> None:
    """Write several pages; all succeed or none are applied."""
    with vault_errors():
        await proxy.call(caller, "set_pages", body.page_ids, body.contents)


@router.post("/{page_id:path}/set", status_code=status.HTTP_204_NO_CONTENT)
async def set_page(page_id: str, body: PageWrite, proxy: Proxy, caller: Caller) -> None:
    """Create or overwrite a page."""
    with vault_errors():
        await proxy.call(caller, "set_page", page_id, body.content)


@router.post("/{page_id:path}/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_page(page_id: str, proxy: Proxy, caller: Caller) -> None:
    with vault_errors():
        await proxy.call(caller, "delete_page", page_id)


# -- Collection reads ----------------------------------------------------------


@router.get("/count", response_model=PageCountResponse)
async def get_total_pages(proxy: Proxy, caller: Caller) -> PageCountResponse:
    with vault_errors():
        total = await proxy.call(caller, "get_total_pages")
    return PageCountResponse(total=total)


@router.get("/ids", response_model=PageIdsResponse)
async def get_all_page_ids(proxy: Proxy, caller: Caller) -> PageIdsResponse:
    """Every page id in registry order.  Prefer ``/list`` for large vaults."""
    with vault_errors():
        page_ids = await proxy.call(caller, "get_all_page_ids")
    return PageIdsResponse(page_ids=page_ids)


@router.get("/by-index", response_model=PageIdsResponse)
async def get_page_id_by_index(proxy: Proxy, caller: Caller, index: int = Query(..., ge=0)) -> PageIdsResponse:
    with vault_errors():
        page_id = await proxy.call(caller, "get_page_id_by_index", index)
    return PageIdsResponse(page_ids=[page_id])


@router.get("/list", response_model=PageWindowResponse)
async def get_page_ids(
    proxy: Proxy,
    caller: Caller,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=0, le=1000),
) -> PageWindowResponse:
    """One window of page ids.  ``offset`` must be below the page count."""
    with vault_errors():
        page_ids = await proxy.call(caller, "get_page_ids", offset, limit)
    return PageWindowResponse(offset=offset, limit=limit, page_ids=page_ids)


@router.get("/contents", response_model=PageContentsResponse)
async def get_pages_with_content(
    proxy: Proxy,
    caller: Caller,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=0, le=1000),
) -> PageContentsResponse:
    with vault_errors():
        page_ids, contents, markers = await proxy.call(caller, "get_pages_with_content", offset, limit)
    return PageContentsResponse(
        offset=offset,
        limit=limit,
        page_ids=page_ids,
        contents=contents,
        last_modified=markers,
    )


@router.get("/search", response_model=PageSearchResponse)
async def search_pages(proxy: Proxy, caller: Caller, term: str = Query("")) -> PageSearchResponse:
    """Case-sensitive substring match on page ids, in registry order."""
    with vault_errors():
        page_ids = await proxy.call(caller, "search_pages", term)
    return PageSearchResponse(term=term, page_ids=page_ids)


# -- Single-page reads ---------------------------------------------------------


@router.get("/{page_id:path}/get", response_model=PageResponse)
async def get_page(page_id: str, proxy: Proxy, caller: Caller) -> PageResponse:
    """Page content; empty for ids that do not exist."""
    with vault_errors():
        content = await proxy.call(caller, "get_page", page_id)
    return PageResponse(page_id=page_id, content=content)


@router.get("/{page_id:path}/info", response_model=PageInfoResponse)
async def get_page_info(page_id: str, proxy: Proxy, caller: Caller) -> PageInfoResponse:
    with vault_errors():
        content, last_modified, exists = await proxy.call(caller, "get_page_info", page_id)
    return PageInfoResponse(page_id=page_id, content=content, last_modified=last_modified, exists=exists)


@router.get("/{page_id:path}/exists", response_model=PageExistsResponse)
async def page_exists(page_id: str, proxy: Proxy, caller: Caller) -> PageExistsResponse:
    with vault_errors():
        exists = await proxy.call(caller, "page_exists", page_id)
    return PageExistsResponse(page_id=page_id, exists=exists)
