"""Data models for the page vault."""

from pagevault.vault.models.api import (
    BuildResponse,
    EventResponse,
    IdentityResponse,
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
    TransferRequest,
    UpgradeRequest,
)
from pagevault.vault.models.enums import EventType, StateStoreKind
from pagevault.vault.models.events import VaultEvent
from pagevault.vault.models.snapshot import VaultSnapshot

__all__ = [
    # API schemas
    "BuildResponse",
    "EventResponse",
    # Enums
    "EventType",
    "IdentityResponse",
    "PageBatchWrite",
    "PageContentsResponse",
    "PageCountResponse",
    "PageExistsResponse",
    "PageIdsResponse",
    "PageInfoResponse",
    "PageResponse",
    "PageSearchResponse",
    "PageWindowResponse",
    "PageWrite",
    "StateStoreKind",
    "TransferRequest",
    "UpgradeRequest",
    # Events
    "VaultEvent",
    # Persistence
    "VaultSnapshot",
]
