"""Typed client for a vault.

Binds a proxy to one caller identity and exposes each operation as a plain
async method.  Every method goes through ``PageProxy.call`` exactly as an
external request would, so the client adds no behaviour of its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pagevault.vault.proxy import PageProxy


class PageStoreClient:
    def __init__(self, proxy: PageProxy, caller: str | None = None) -> None:
        self._proxy = proxy
        self._caller = caller

    @property
    def caller(self) -> str | None:
        return self._caller

    def as_caller(self, caller: str | None) -> PageStoreClient:
        return PageStoreClient(self._proxy, caller)

    # -- Address layer ---------------------------------------------------------

    async def upgrade_logic(self, new_target: str) -> None:
        await self._proxy.call(self._caller, "upgrade_logic", new_target)

    async def transfer_writer(self, new_writer: str) -> None:
        await self._proxy.call(self._caller, "transfer_writer", new_writer)

    async def logic_address(self) -> str:
        return await self._proxy.call(self._caller, "logic_address")

    async def privileged_writer(self) -> str:
        return await self._proxy.call(self._caller, "privileged_writer")

    # -- Writes ----------------------------------------------------------------

    async def set_page(self, page_id: str, content: str) -> None:
        await self._proxy.call(self._caller, "set_page", page_id, content)

    async def set_pages(self, page_ids: list[str], contents: list[str]) -> None:
        await self._proxy.call(self._caller, "set_pages", page_ids, contents)

    async def delete_page(self, page_id: str) -> None:
        await self._proxy.call(self._caller, "delete_page", page_id)

    # -- Reads -----------------------------------------------------------------

    async def get_page(self, page_id: str) -> str:
        return await self._proxy.call(self._caller, "get_page", page_id)

    async def get_page_info(self, page_id: str) -> tuple[str, int, bool]:
        return await self._proxy.call(self._caller, "get_page_info", page_id)

    async def page_exists(self, page_id: str) -> bool:
        return await self._proxy.call(self._caller, "page_exists", page_id)

    async def get_last_updated(self, page_id: str) -> int:
        return await self._proxy.call(self._caller, "get_last_updated", page_id)

    async def get_total_pages(self) -> int:
        return await self._proxy.call(self._caller, "get_total_pages")

    async def get_all_page_ids(self) -> list[str]:
        return await self._proxy.call(self._caller, "get_all_page_ids")

    async def get_page_id_by_index(self, index: int) -> str:
        return await self._proxy.call(self._caller, "get_page_id_by_index", index)

    async def get_page_ids(self, offset: int, limit: int) -> list[str]:
        return await self._proxy.call(self._caller, "get_page_ids", offset, limit)

    async def get_pages_with_content(self, offset: int, limit: int) -> tuple[list[str], list[str], list[int]]:
        return await self._proxy.call(self._caller, "get_pages_with_content", offset, limit)

    async def search_pages(self, term: str) -> list[str]:
        return await self._proxy.call(self._caller, "search_pages", term)

    # -- Introspection ---------------------------------------------------------

    async def get_version(self) -> str:
        return await self._proxy.call(self._caller, "get_version")

    async def get_features(self) -> list[str]:
        return await self._proxy.call(self._caller, "get_features")
