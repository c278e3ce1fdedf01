"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates:
- trip (destinations, budget and collaborators as JSON documents)
- activity (one row per scheduled activity)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

json_document = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create trip and activity tables."""
    op.create_table(
        "trip",
        sa.Column("trip_id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("destinations", json_document, nullable=False),
        sa.Column("budget", json_document, nullable=False),
        sa.Column("collaborators", json_document, nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_trip_owner_start", "trip", ["owner_id", "start_date"])

    op.create_table(
        "activity",
        sa.Column("activity_id", sa.Uuid(), primary_key=True),
        sa.Column("trip_id", sa.Uuid(), nullable=False),
        sa.Column("destination_id", sa.Uuid(), nullable=True),
        sa.Column("destination_city", sa.Text(), nullable=False),
        sa.Column("destination_country", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False, server_default="other"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Text(), nullable=False),
        sa.Column("end_time", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cost_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("cost_currency", sa.Text(), nullable=False, server_default="USD"),
        sa.Column("location_name", sa.Text(), nullable=False, server_default=""),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["trip_id"], ["trip.trip_id"]),
    )
    op.create_index("idx_activity_trip_date_start", "activity", ["trip_id", "date", "start_time"])
    op.create_index("idx_activity_destination", "activity", ["destination_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_activity_destination", table_name="activity")
    op.drop_index("idx_activity_trip_date_start", table_name="activity")
    op.drop_table("activity")
    op.drop_index("idx_trip_owner_start", table_name="trip")
    op.drop_table("trip")
