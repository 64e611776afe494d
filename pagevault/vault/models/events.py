"""Append-only log records.

One record per page touched by a mutating call, plus a summary record for
batch writes and one record per identity change.  Records carry enough for an
external indexer to mirror the registry without reading any storage slot.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from pagevault.vault.models.enums import EventType


class VaultEvent(BaseModel):
    """Log record envelope published to every event sink after commit."""

    vault_id: str
    block_number: int
    log_index: int
    event_type: EventType
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def page_id(self) -> str | None:
        return self.payload.get("page_id")
