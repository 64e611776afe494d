"""Logic build v2.0.0: batch writes, pagination and id search.

Extends v1 without touching the storage layout, so upgrading from v1 needs
no migration.
"""

from __future__ import annotations

from typing import ClassVar

from pagevault.vault.context import CallContext
from pagevault.vault.errors import InvalidArgument, OutOfRange
from pagevault.vault.layout import StorageSlots
from pagevault.vault.logic.base import mutating, require_content, require_page_id, require_writer, view
from pagevault.vault.logic.v1 import PageRegistryV1
from pagevault.vault.models.enums import EventType


class PageRegistryV2(PageRegistryV1):
    version: ClassVar[str] = "v2.0.0"
    features: ClassVar[tuple[str, ...]] = (
        *PageRegistryV1.features,
        "batch-updates",
        "pagination",
        "content-pages",
        "id-search",
    )

    # -- Writes ----------------------------------------------------------------

    @mutating
    def set_pages(self, slots: StorageSlots, ctx: CallContext, page_ids: list[str], contents: list[str]) -> None:
        """Write several pages in input order; all pairs are validated first."""
        require_writer(slots, ctx)
        if len(page_ids) != len(contents):
            msg = f"Batch length mismatch: {len(page_ids)} ids, {len(contents)} contents"
            raise InvalidArgument(msg)
        if not page_ids:
            msg = "Batch must not be empty"
            raise InvalidArgument(msg)
        for page_id, content in zip(page_ids, contents, strict=True):
            require_page_id(page_id)
            require_content(content)

        for page_id, content in zip(page_ids, contents, strict=True):
            self._write_page(slots, ctx, page_id, content)
        ctx.emit(EventType.PAGES_BATCH_UPDATED, count=len(page_ids), page_ids=list(page_ids))

    # -- Discovery -------------------------------------------------------------

    @view
    def get_page_ids(self, slots: StorageSlots, ctx: CallContext, offset: int, limit: int) -> list[str]:
        """Ids in ``[offset, min(offset + limit, length))``."""
        window = _window(slots, offset, limit)
        return [slots.order[i] for i in window]

    @view
    def get_pages_with_content(
        self, slots: StorageSlots, ctx: CallContext, offset: int, limit: int
    ) -> tuple[list[str], list[str], list[int]]:
        """Parallel ``(ids, contents, last_modified)`` for one window of the registry."""
        window = _window(slots, offset, limit)
        page_ids = [slots.order[i] for i in window]
        contents = [slots.content(page_id) for page_id in page_ids]
        markers = [slots.last_modified(page_id) for page_id in page_ids]
        return page_ids, contents, markers

    @view
    def search_pages(self, slots: StorageSlots, ctx: CallContext, term: str) -> list[str]:
        """Ids containing ``term`` (case-sensitive), in registry order."""
        if not term:
            msg = "Search term must not be empty"
            raise InvalidArgument(msg)
        return [page_id for page_id in slots.order if term in page_id]


def _window(slots: StorageSlots, offset: int, limit: int) -> range:
    length = len(slots.order)
    if offset < 0 or offset >= length:
        msg = f"Offset {offset} out of range (registry length {length})"
        raise OutOfRange(msg)
    if limit < 0:
        msg = f"Limit must not be negative, got {limit}"
        raise InvalidArgument(msg)
    return range(offset, min(offset + limit, length))
