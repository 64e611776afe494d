"""Enumerations shared across the vault."""

from __future__ import annotations

from enum import StrEnum


class EventType(StrEnum):
    """Kinds of append-only log records emitted by committed calls."""

    PAGE_UPDATED = "page_updated"
    PAGE_DELETED = "page_deleted"
    PAGES_BATCH_UPDATED = "pages_batch_updated"
    LOGIC_UPGRADED = "logic_upgraded"
    WRITER_TRANSFERRED = "writer_transferred"


class StateStoreKind(StrEnum):
    """Snapshot persistence backends selectable via settings."""

    MEMORY = "memory"
    LOCAL = "local"
    S3 = "s3"
