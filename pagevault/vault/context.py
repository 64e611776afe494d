"""Per-call execution context.

Created by the proxy when a call enters the vault and handed to the logic
build together with the storage capability.  Discarded when the call ends;
only the events it collected survive, and only if the call commits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pagevault.vault.errors import ReadOnlyViolation
from pagevault.vault.models.enums import EventType


@dataclass(frozen=True)
class PendingEvent:
    """An event raised during a call that has not been committed yet."""

    event_type: EventType
    payload: dict[str, Any]


@dataclass
class CallContext:
    """Host-level facts about the call in flight."""

    # -- Identity --------------------------------------------------------------
    caller: str | None
    operation: str

    # -- Host environment ------------------------------------------------------
    block_number: int
    """Block marker the call executes at (committed block + 1 for writes)."""

    value: int = 0
    """Funds forwarded with the call; passed through untouched."""

    read_only: bool = False

    # -- Collected output ------------------------------------------------------
    events: list[PendingEvent] = field(default_factory=list)

    def emit(self, event_type: EventType, **payload: Any) -> None:
        if self.read_only:
            msg = f"Event '{event_type}' emitted during a read-only call"
            raise ReadOnlyViolation(msg)
        self.events.append(PendingEvent(event_type=event_type, payload=payload))
