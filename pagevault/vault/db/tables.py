"""SQLAlchemy ORM models for PostgreSQL.

PostgreSQL holds the event journal: every committed log record, queryable by
type, page and block.  The page registry itself lives in the state store
snapshot, not here.  Alembic reads ``Base.metadata`` to autogenerate
migration scripts.

Uses SQLAlchemy 2.0 declarative style with ``Mapped`` type annotations.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Identity, Index, Integer, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Timezone-aware timestamp type for all datetime columns.
TimestampTZ = DateTime(timezone=True)


class Base(DeclarativeBase):
    """Declarative base with naming convention for constraints."""

    pass


# Apply naming convention to the metadata for deterministic constraint names.
Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class PageEventRow(Base):
    __tablename__ = "page_events"
    __table_args__ = (
        Index("ix_page_events_vault_block", "vault_id", "block_number", "log_index", unique=True),
        Index("ix_page_events_page_id", "page_id"),
        Index("ix_page_events_event_type", "event_type"),
    )

    event_id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    vault_id: Mapped[str]
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False)
    log_index: Mapped[int] = mapped_column(Integer, nullable=False)
    event_type: Mapped[str]
    page_id: Mapped[str | None] = mapped_column(Text)
    payload: Mapped[dict] = mapped_column(JSONB, nullable=False, server_default="{}")
    emitted_at: Mapped[datetime] = mapped_column(TimestampTZ, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())
