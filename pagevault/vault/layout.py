"""Persistent storage layout shared by the proxy and every logic build.

The proxy owns the only ``StorageLayout`` instance.  Logic builds never hold
fields of their own; they receive a ``StorageSlots`` capability bound to the
proxy's layout for the duration of one call and read or write through it.

Because a logic build is swapped without migrating data, each build declares
the layout it was written against (``storage_layout``) and the catalog
refuses to deploy one whose declaration differs from ``layout_signature()``
field-for-field.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from pydantic import BaseModel, Field

from pagevault.vault.errors import ReadOnlyViolation


class StorageLayout(BaseModel):
    """The eight persistent slots, in declaration order."""

    privileged_writer: str
    logic_address: str
    page_content: dict[str, str] = Field(default_factory=dict)
    page_last_modified: dict[str, int] = Field(default_factory=dict)
    page_exists_flag: dict[str, bool] = Field(default_factory=dict)
    total_page_count: int = 0
    page_id_order: list[str] = Field(default_factory=list)
    page_id_position: dict[str, int] = Field(default_factory=dict)

    def clone(self) -> StorageLayout:
        """Return a working copy whose containers can be mutated independently.

        Values are immutable (str/int/bool), so copying the containers is a
        full copy.
        """
        return StorageLayout(
            privileged_writer=self.privileged_writer,
            logic_address=self.logic_address,
            page_content=dict(self.page_content),
            page_last_modified=dict(self.page_last_modified),
            page_exists_flag=dict(self.page_exists_flag),
            total_page_count=self.total_page_count,
            page_id_order=list(self.page_id_order),
            page_id_position=dict(self.page_id_position),
        )


def _type_name(annotation: object) -> str:
    if isinstance(annotation, type) and not getattr(annotation, "__args__", None):
        return annotation.__name__
    return str(annotation)


def layout_signature(model: type[BaseModel] = StorageLayout) -> tuple[tuple[str, str], ...]:
    """Return ``((field_name, type_name), ...)`` in declaration order."""
    return tuple((name, _type_name(field.annotation)) for name, field in model.model_fields.items())


class StorageSlots:
    """Capability handed to logic code for one call.

    Reads go straight to the bound layout.  Every write goes through a named
    method so that a read-only binding (used for view calls) can reject it
    with ``ReadOnlyViolation`` before anything changes.
    """

    __slots__ = ("_layout", "_read_only")

    def __init__(self, layout: StorageLayout, *, read_only: bool) -> None:
        self._layout = layout
        self._read_only = read_only

    @property
    def read_only(self) -> bool:
        return self._read_only

    def _guard(self, slot: str) -> None:
        if self._read_only:
            msg = f"Write to '{slot}' attempted during a read-only call"
            raise ReadOnlyViolation(msg)

    # -- Identity slots --------------------------------------------------------

    @property
    def privileged_writer(self) -> str:
        return self._layout.privileged_writer

    @property
    def logic_address(self) -> str:
        return self._layout.logic_address

    def set_privileged_writer(self, account: str) -> None:
        self._guard("privileged_writer")
        self._layout.privileged_writer = account

    def set_logic_address(self, address: str) -> None:
        self._guard("logic_address")
        self._layout.logic_address = address

    # -- Page slots: reads -----------------------------------------------------

    def content(self, page_id: str) -> str:
        return self._layout.page_content.get(page_id, "")

    def last_modified(self, page_id: str) -> int:
        return self._layout.page_last_modified.get(page_id, 0)

    def exists(self, page_id: str) -> bool:
        return self._layout.page_exists_flag.get(page_id, False)

    def position(self, page_id: str) -> int:
        return self._layout.page_id_position.get(page_id, 0)

    @property
    def total_page_count(self) -> int:
        return self._layout.total_page_count

    @property
    def order(self) -> Sequence[str]:
        """``page_id_order``; a read-only binding hands out a tuple copy."""
        if self._read_only:
            return tuple(self._layout.page_id_order)
        return self._layout.page_id_order

    @property
    def positions(self) -> Mapping[str, int]:
        return MappingProxyType(self._layout.page_id_position)

    # -- Page slots: writes ----------------------------------------------------

    def put_content(self, page_id: str, content: str, marker: int) -> None:
        self._guard("page_content")
        self._layout.page_content[page_id] = content
        self._layout.page_last_modified[page_id] = marker

    def clear_content(self, page_id: str) -> None:
        self._guard("page_content")
        self._layout.page_content.pop(page_id, None)
        self._layout.page_last_modified.pop(page_id, None)

    def set_exists(self, page_id: str, flag: bool) -> None:
        self._guard("page_exists_flag")
        if flag:
            self._layout.page_exists_flag[page_id] = True
        else:
            self._layout.page_exists_flag.pop(page_id, None)

    def set_total_page_count(self, count: int) -> None:
        self._guard("total_page_count")
        self._layout.total_page_count = count

    def append_id(self, page_id: str) -> int:
        """Append to ``page_id_order`` and return the new slot index."""
        self._guard("page_id_order")
        self._layout.page_id_order.append(page_id)
        return len(self._layout.page_id_order) - 1

    def place_id(self, index: int, page_id: str) -> None:
        self._guard("page_id_order")
        self._layout.page_id_order[index] = page_id

    def pop_id(self) -> str:
        self._guard("page_id_order")
        return self._layout.page_id_order.pop()

    def set_position(self, page_id: str, index: int) -> None:
        self._guard("page_id_position")
        self._layout.page_id_position[page_id] = index

    def drop_position(self, page_id: str) -> None:
        self._guard("page_id_position")
        self._layout.page_id_position.pop(page_id, None)
