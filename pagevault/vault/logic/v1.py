"""Logic build v1.0.0: page CRUD over the registry.

Registry structure (all slots live in the proxy's layout):

- ``page_id_order`` is a dense, insertion-ordered list of existing ids and
  the only source for enumeration.
- ``page_id_position`` maps each existing id to its slot in that list, so a
  delete can find the slot in O(1), move the last id into it, and shrink.

Writes to an existing id update content and marker in place; the id keeps
its slot.  Deletes reorder exactly one other id (the previous last).
"""

from __future__ import annotations

from typing import ClassVar

from pagevault.vault.context import CallContext
from pagevault.vault.errors import NotFound, OutOfRange
from pagevault.vault.layout import StorageSlots
from pagevault.vault.logic.base import (
    mutating,
    require_content,
    require_page_id,
    require_writer,
    view,
)
from pagevault.vault.models.enums import EventType


class PageRegistryV1:
    version: ClassVar[str] = "v1.0.0"
    features: ClassVar[tuple[str, ...]] = ("page-crud", "registry-enumeration", "upgradeable-logic")
    storage_layout: ClassVar[tuple[tuple[str, str], ...]] = (
        ("privileged_writer", "str"),
        ("logic_address", "str"),
        ("page_content", "dict[str, str]"),
        ("page_last_modified", "dict[str, int]"),
        ("page_exists_flag", "dict[str, bool]"),
        ("total_page_count", "int"),
        ("page_id_order", "list[str]"),
        ("page_id_position", "dict[str, int]"),
    )

    # -- Writes ----------------------------------------------------------------

    @mutating
    def set_page(self, slots: StorageSlots, ctx: CallContext, page_id: str, content: str) -> None:
        """Create or overwrite a page."""
        require_writer(slots, ctx)
        require_page_id(page_id)
        require_content(content)
        self._write_page(slots, ctx, page_id, content)

    @mutating
    def delete_page(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> None:
        """Remove a page, filling its registry slot with the last id."""
        require_writer(slots, ctx)
        if not slots.exists(page_id):
            msg = f"Page '{page_id}' does not exist"
            raise NotFound(msg)

        slots.clear_content(page_id)
        slots.set_exists(page_id, False)
        slots.set_total_page_count(slots.total_page_count - 1)

        index = slots.position(page_id)
        last_index = len(slots.order) - 1
        if index != last_index:
            moved = slots.order[last_index]
            slots.place_id(index, moved)
            slots.set_position(moved, index)
        slots.pop_id()
        slots.drop_position(page_id)

        ctx.emit(EventType.PAGE_DELETED, page_id=page_id)

    def _write_page(self, slots: StorageSlots, ctx: CallContext, page_id: str, content: str) -> None:
        created = not slots.exists(page_id)
        if created:
            index = slots.append_id(page_id)
            slots.set_position(page_id, index)
            slots.set_exists(page_id, True)
            slots.set_total_page_count(slots.total_page_count + 1)
        slots.put_content(page_id, content, ctx.block_number)
        ctx.emit(EventType.PAGE_UPDATED, page_id=page_id, content=content, created=created)

    # -- Reads -----------------------------------------------------------------

    @view
    def get_page(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> str:
        return slots.content(page_id)

    @view
    def get_page_info(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> tuple[str, int, bool]:
        """Return ``(content, last_modified, exists)``."""
        return slots.content(page_id), slots.last_modified(page_id), slots.exists(page_id)

    @view
    def page_exists(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> bool:
        return slots.exists(page_id)

    @view
    def get_last_updated(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> int:
        return slots.last_modified(page_id)

    @view
    def get_total_pages(self, slots: StorageSlots, ctx: CallContext) -> int:
        return slots.total_page_count

    @view
    def get_all_page_ids(self, slots: StorageSlots, ctx: CallContext) -> list[str]:
        """Every existing id in current registry order.  Unbounded."""
        return list(slots.order)

    @view
    def get_page_id_by_index(self, slots: StorageSlots, ctx: CallContext, index: int) -> str:
        if index < 0 or index >= len(slots.order):
            msg = f"Index {index} out of range (registry length {len(slots.order)})"
            raise OutOfRange(msg)
        return slots.order[index]

    # -- Introspection ---------------------------------------------------------

    @view
    def get_version(self, slots: StorageSlots, ctx: CallContext) -> str:
        return self.version

    @view
    def get_features(self, slots: StorageSlots, ctx: CallContext) -> list[str]:
        return list(self.features)
