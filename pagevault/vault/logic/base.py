"""Logic build interface.

A logic build is a stateless algorithm module: it owns no storage and is
always executed by the proxy against the proxy's own layout.  Every public
operation receives the storage capability and the call context as its first
two arguments, followed by the caller's arguments untouched.

Operations are tagged ``@view`` or ``@mutating``.  The proxy only forwards to
tagged methods, binds view calls to a read-only capability, and serialises
mutating calls.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar, Literal, Protocol, TypeVar, runtime_checkable

from pagevault.vault.context import CallContext
from pagevault.vault.errors import InvalidArgument, Unauthorized
from pagevault.vault.layout import StorageSlots

ZERO_ADDRESS = "0x" + "0" * 40

CallKind = Literal["view", "mutating"]

_F = TypeVar("_F", bound=Callable[..., Any])


def view(fn: _F) -> _F:
    """Mark an operation as read-only."""
    fn.__vault_call__ = "view"  # type: ignore[attr-defined]
    return fn


def mutating(fn: _F) -> _F:
    """Mark an operation as state-changing."""
    fn.__vault_call__ = "mutating"  # type: ignore[attr-defined]
    return fn


def call_kind(fn: object) -> CallKind | None:
    """Return the tag set by ``view``/``mutating``, or None for untagged attributes."""
    return getattr(fn, "__vault_call__", None)


def is_zero_account(account: str | None) -> bool:
    """True for None, empty, and all-zero hex identifiers (``0x0``, ``0x000...``)."""
    if not account:
        return True
    return account.lower().removeprefix("0x").strip("0") == ""


def require_writer(slots: StorageSlots, ctx: CallContext) -> None:
    if ctx.caller is None or ctx.caller != slots.privileged_writer:
        msg = f"Caller '{ctx.caller}' is not the privileged writer"
        raise Unauthorized(msg)


def require_page_id(page_id: str) -> None:
    if not page_id:
        msg = "Page id must not be empty"
        raise InvalidArgument(msg)


def require_content(content: str) -> None:
    if not content:
        msg = "Content must not be empty"
        raise InvalidArgument(msg)


@runtime_checkable
class PageLogic(Protocol):
    """Full operation set of the current reference build (``v2.0.0``).

    Older builds implement a subset; calls to operations a build lacks fail
    with ``DelegatedFailure`` at the proxy.
    """

    version: ClassVar[str]
    features: ClassVar[tuple[str, ...]]
    storage_layout: ClassVar[tuple[tuple[str, str], ...]]

    # -- Writes ----------------------------------------------------------------

    def set_page(self, slots: StorageSlots, ctx: CallContext, page_id: str, content: str) -> None: ...

    def set_pages(self, slots: StorageSlots, ctx: CallContext, page_ids: list[str], contents: list[str]) -> None: ...

    def delete_page(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> None: ...

    # -- Reads -----------------------------------------------------------------

    def get_page(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> str: ...

    def get_page_info(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> tuple[str, int, bool]: ...

    def page_exists(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> bool: ...

    def get_last_updated(self, slots: StorageSlots, ctx: CallContext, page_id: str) -> int: ...

    def get_total_pages(self, slots: StorageSlots, ctx: CallContext) -> int: ...

    def get_all_page_ids(self, slots: StorageSlots, ctx: CallContext) -> list[str]: ...

    def get_page_id_by_index(self, slots: StorageSlots, ctx: CallContext, index: int) -> str: ...

    def get_page_ids(self, slots: StorageSlots, ctx: CallContext, offset: int, limit: int) -> list[str]: ...

    def get_pages_with_content(
        self, slots: StorageSlots, ctx: CallContext, offset: int, limit: int
    ) -> tuple[list[str], list[str], list[int]]: ...

    def search_pages(self, slots: StorageSlots, ctx: CallContext, term: str) -> list[str]: ...

    # -- Introspection ---------------------------------------------------------

    def get_version(self, slots: StorageSlots, ctx: CallContext) -> str: ...

    def get_features(self, slots: StorageSlots, ctx: CallContext) -> list[str]: ...
