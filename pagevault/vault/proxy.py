"""Address layer: the vault's stable identity.

The proxy owns the only persistent layout and the pointer to the current
logic build.  A small set of operations run here directly (upgrade, writer
transfer and the two identity reads); every other operation name is
forwarded to the logic build found at ``logic_address``, which executes
against the proxy's layout through a ``StorageSlots`` capability.

Execution model:

- Mutating calls are serialised by one lock.  Each runs against a clone of
  the committed layout at ``block_number + 1``; only when it returns
  normally is the clone persisted and swapped in as the committed snapshot.
  Any exception discards the clone, so a rejected call leaves storage
  untouched.  Persist-and-swap runs to completion even if the caller is
  cancelled half way.
- Events are handed to the sinks after the lock is released, chained so
  that sinks still receive them in commit order.  The caller waits for its
  own events to be delivered; a slow sink delays callers but not commits.
- View calls run without the lock against the committed snapshot with a
  read-only capability, so they always observe a fully applied state and
  cannot change it.
- The logic build is resolved once when the call starts.

Failures raised by logic as ``PageStoreError`` propagate verbatim.  Anything
else (unknown operation, no build at the address, a bug in the build)
surfaces as ``DelegatedFailure`` carrying the inner message unchanged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger

from pagevault.vault.context import CallContext
from pagevault.vault.errors import DelegatedFailure, InvalidArgument, PageStoreError
from pagevault.vault.layout import StorageLayout, StorageSlots
from pagevault.vault.logic.base import call_kind, is_zero_account, require_writer
from pagevault.vault.models.enums import EventType
from pagevault.vault.models.events import VaultEvent
from pagevault.vault.models.snapshot import VaultSnapshot

if TYPE_CHECKING:
    from pagevault.vault.catalog import LogicCatalog
    from pagevault.vault.sinks import EventSink
    from pagevault.vault.store.base import StateStore

_T = TypeVar("_T")


class PageProxy:
    """Stable front of one vault.  Create with ``await PageProxy.open(...)``."""

    def __init__(
        self,
        store: StateStore,
        catalog: LogicCatalog,
        vault_id: str,
        snapshot: VaultSnapshot,
        sinks: Iterable[EventSink] = (),
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._vault_id = vault_id
        self._snapshot = snapshot
        self._sinks = list(sinks)
        self._lock = asyncio.Lock()
        self._publication: asyncio.Future[None] | None = None

    @classmethod
    async def open(
        cls,
        store: StateStore,
        catalog: LogicCatalog,
        *,
        vault_id: str = "default",
        genesis_writer: str | None = None,
        genesis_logic: str | None = None,
        sinks: Iterable[EventSink] = (),
    ) -> PageProxy:
        """Load the vault's snapshot, or initialise it on first open.

        Genesis arguments are only used when no snapshot exists; both must be
        non-zero in that case.
        """
        if await store.exists(vault_id):
            snapshot = await store.read_snapshot(vault_id)
            logger.info(
                "Vault {}: loaded (block={}, pages={}, logic={})",
                vault_id,
                snapshot.block_number,
                snapshot.layout.total_page_count,
                snapshot.layout.logic_address,
            )
        else:
            if is_zero_account(genesis_writer):
                msg = "Genesis writer must not be the zero address"
                raise InvalidArgument(msg)
            if is_zero_account(genesis_logic):
                msg = "Genesis logic must not be the zero address"
                raise InvalidArgument(msg)
            snapshot = VaultSnapshot(
                layout=StorageLayout(privileged_writer=genesis_writer, logic_address=genesis_logic),
            )
            await store.write_snapshot(vault_id, snapshot)
            logger.info("Vault {}: initialised (writer={}, logic={})", vault_id, genesis_writer, genesis_logic)

        proxy = cls(store, catalog, vault_id, snapshot, sinks)
        if snapshot.layout.logic_address not in catalog:
            logger.warning(
                "Vault {}: no build deployed at {} -- forwarded calls will fail",
                vault_id,
                snapshot.layout.logic_address,
            )
        return proxy

    # -- Introspection ---------------------------------------------------------

    @property
    def vault_id(self) -> str:
        return self._vault_id

    @property
    def block_number(self) -> int:
        return self._snapshot.block_number

    @property
    def snapshot(self) -> VaultSnapshot:
        """Last committed snapshot.  Treat as read-only."""
        return self._snapshot

    @property
    def catalog(self) -> LogicCatalog:
        return self._catalog

    def add_sink(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    # -- Dispatch --------------------------------------------------------------

    async def call(self, caller: str | None, operation: str, *args: Any, value: int = 0) -> Any:
        """Entry point for every external call."""
        if operation == "upgrade_logic":
            return await self.upgrade_logic(caller, *args)
        if operation == "transfer_writer":
            return await self.transfer_writer(caller, *args)
        if operation == "logic_address":
            return self.logic_address()
        if operation == "privileged_writer":
            return self.privileged_writer()
        return await self.forward(caller, operation, *args, value=value)

    async def forward(self, caller: str | None, operation: str, *args: Any, value: int = 0) -> Any:
        """Run *operation* from the current logic build against this vault's storage."""
        address = self._snapshot.layout.logic_address
        logic = self._catalog.resolve(address)
        if logic is None:
            msg = f"No logic build deployed at {address}"
            raise DelegatedFailure(operation, msg)

        method = None if operation.startswith("_") else getattr(logic, operation, None)
        kind = call_kind(method)
        if method is None or kind is None:
            msg = f"Operation '{operation}' is not provided by logic {logic.version}"
            raise DelegatedFailure(operation, msg)

        if kind == "view":
            return self._static_call(caller, operation, method, args, value)
        return await self._transact(
            caller,
            operation,
            lambda slots, ctx: _invoke(operation, method, slots, ctx, args),
            value=value,
        )

    # -- Direct operations -----------------------------------------------------

    def logic_address(self) -> str:
        return self._snapshot.layout.logic_address

    def privileged_writer(self) -> str:
        return self._snapshot.layout.privileged_writer

    async def upgrade_logic(self, caller: str | None, new_target: str) -> None:
        """Point the vault at another logic build.  Storage is not touched."""

        def apply(slots: StorageSlots, ctx: CallContext) -> None:
            require_writer(slots, ctx)
            if is_zero_account(new_target):
                msg = "Logic target must not be the zero address"
                raise InvalidArgument(msg)
            old = slots.logic_address
            if new_target == old:
                msg = f"Logic target is already {old}"
                raise InvalidArgument(msg)
            slots.set_logic_address(new_target)
            ctx.emit(EventType.LOGIC_UPGRADED, old=old, new=new_target)

        await self._transact(caller, "upgrade_logic", apply)
        if new_target not in self._catalog:
            logger.warning("Vault {}: upgraded to {} which has no deployed build", self._vault_id, new_target)
        else:
            logger.info("Vault {}: logic upgraded to {}", self._vault_id, new_target)

    async def transfer_writer(self, caller: str | None, new_writer: str) -> None:
        """Hand the privileged-writer role to another account."""

        def apply(slots: StorageSlots, ctx: CallContext) -> None:
            require_writer(slots, ctx)
            if is_zero_account(new_writer):
                msg = "New writer must not be the zero address"
                raise InvalidArgument(msg)
            old = slots.privileged_writer
            if new_writer == old:
                msg = f"Writer is already {old}"
                raise InvalidArgument(msg)
            slots.set_privileged_writer(new_writer)
            ctx.emit(EventType.WRITER_TRANSFERRED, old=old, new=new_writer)

        await self._transact(caller, "transfer_writer", apply)
        logger.info("Vault {}: privileged writer transferred to {}", self._vault_id, new_writer)

    # -- Execution -------------------------------------------------------------

    def _static_call(
        self,
        caller: str | None,
        operation: str,
        method: Callable[..., _T],
        args: tuple[Any, ...],
        value: int,
    ) -> _T:
        snapshot = self._snapshot
        ctx = CallContext(
            caller=caller,
            operation=operation,
            block_number=snapshot.block_number,
            value=value,
            read_only=True,
        )
        slots = StorageSlots(snapshot.layout, read_only=True)
        return _invoke(operation, method, slots, ctx, args)

    async def _transact(
        self,
        caller: str | None,
        operation: str,
        apply: Callable[[StorageSlots, CallContext], _T],
        *,
        value: int = 0,
    ) -> _T:
        async with self._lock:
            committed = self._snapshot
            block = committed.block_number + 1
            working = committed.layout.clone()
            ctx = CallContext(caller=caller, operation=operation, block_number=block, value=value)

            result = apply(StorageSlots(working, read_only=False), ctx)

            events = [
                VaultEvent(
                    vault_id=self._vault_id,
                    block_number=block,
                    log_index=index,
                    event_type=pending.event_type,
                    payload=pending.payload,
                )
                for index, pending in enumerate(ctx.events)
            ]
            snapshot = VaultSnapshot(layout=working, block_number=block)
            publication = await _run_to_completion(self._commit(operation, snapshot, events))

        if publication is not None:
            await asyncio.shield(publication)
        return result

    async def _commit(
        self,
        operation: str,
        snapshot: VaultSnapshot,
        events: list[VaultEvent],
    ) -> asyncio.Future[None] | None:
        """Persist *snapshot*, swap it in and queue its events behind earlier commits."""
        await self._store.write_snapshot(self._vault_id, snapshot)
        self._snapshot = snapshot
        logger.debug(
            "Vault {}: committed {} at block {} ({} events)",
            self._vault_id,
            operation,
            snapshot.block_number,
            len(events),
        )
        if not events:
            return None
        self._publication = asyncio.ensure_future(self._publish(events, after=self._publication))
        return self._publication

    async def _publish(self, events: list[VaultEvent], *, after: asyncio.Future[None] | None) -> None:
        if after is not None:
            await after
        for sink in self._sinks:
            try:
                await sink.publish(events)
            except Exception:
                logger.exception("Vault {}: event sink {} failed", self._vault_id, type(sink).__name__)


async def _run_to_completion(aw: Awaitable[_T]) -> _T:
    """Await *aw* even if the calling task is cancelled meanwhile.

    A cancellation that arrives first is re-raised once *aw* has finished, so
    the caller never abandons a half-applied commit.
    """
    task = asyncio.ensure_future(aw)
    cancelled = False
    while True:
        try:
            result = await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                raise
            cancelled = True
        else:
            break
    if cancelled:
        raise asyncio.CancelledError
    return result


def _invoke(
    operation: str,
    method: Callable[..., _T],
    slots: StorageSlots,
    ctx: CallContext,
    args: tuple[Any, ...],
) -> _T:
    try:
        return method(slots, ctx, *args)
    except PageStoreError:
        raise
    except Exception as exc:
        payload = str(exc) or type(exc).__name__
        logger.warning("Delegated call {} failed: {}", operation, payload)
        raise DelegatedFailure(operation, payload) from exc
