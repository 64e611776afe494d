"""page events journal

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "page_events",
        sa.Column("event_id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("vault_id", sa.String(), nullable=False),
        sa.Column("block_number", sa.BigInteger(), nullable=False),
        sa.Column("log_index", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("page_id", sa.Text(), nullable=True),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), server_default="{}", nullable=False),
        sa.Column("emitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("event_id", name=op.f("pk_page_events")),
    )
    op.create_index(
        "ix_page_events_vault_block",
        "page_events",
        ["vault_id", "block_number", "log_index"],
        unique=True,
    )
    op.create_index("ix_page_events_page_id", "page_events", ["page_id"], unique=False)
    op.create_index("ix_page_events_event_type", "page_events", ["event_type"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_page_events_event_type", table_name="page_events")
    op.drop_index("ix_page_events_page_id", table_name="page_events")
    op.drop_index("ix_page_events_vault_block", table_name="page_events")
    op.drop_table("page_events")
