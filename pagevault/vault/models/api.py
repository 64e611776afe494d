"""API request / response schemas.

These thin schemas sit between HTTP and the proxy.  Operation results come
back from the logic build as plain values and tuples; the routers wrap them
here so responses are self-describing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


class PageWrite(BaseModel):
    """Input for writing one page.  Content is stored as-is."""

    content: str


class PageBatchWrite(BaseModel):
    """Input for writing several pages at once.  Parallel lists, applied in order."""

    page_ids: list[str]
    contents: list[str]


class PageResponse(BaseModel):
    page_id: str
    content: str


class PageInfoResponse(BaseModel):
    page_id: str
    content: str
    last_modified: int = Field(description="Block marker of the last write; 0 if never written or deleted.")
    exists: bool


class PageExistsResponse(BaseModel):
    page_id: str
    exists: bool


class PageCountResponse(BaseModel):
    total: int


class PageIdsResponse(BaseModel):
    page_ids: list[str]


class PageWindowResponse(BaseModel):
    offset: int
    limit: int
    page_ids: list[str]


class PageContentsResponse(BaseModel):
    """One window of the registry with content and markers in parallel lists."""

    offset: int
    limit: int
    page_ids: list[str]
    contents: list[str]
    last_modified: list[int]


class PageSearchResponse(BaseModel):
    term: str
    page_ids: list[str]


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class IdentityResponse(BaseModel):
    vault_id: str
    privileged_writer: str
    logic_address: str
    version: str
    features: list[str]
    block_number: int


class BuildResponse(BaseModel):
    address: str
    version: str
    features: list[str]
    active: bool


class UpgradeRequest(BaseModel):
    new_target: str


class TransferRequest(BaseModel):
    new_writer: str


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventResponse(BaseModel):
    """Serialized journal row returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    vault_id: str
    block_number: int
    log_index: int
    event_type: str
    page_id: str | None = None
    payload: dict[str, Any]
    emitted_at: datetime
