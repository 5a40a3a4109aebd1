"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-06-02

Creates the tables the booking service reads and writes:
- Users (profile rows mirrored from the auth service)
- Technician details and availability
- Bookings
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("full_name", sa.String(200)),
        sa.Column("phone_number", sa.String(20)),
        sa.Column("role", sa.String(20), nullable=False, server_default="CUSTOMER"),
        sa.Column("is_active", sa.Boolean, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('CUSTOMER', 'TECHNICIAN', 'ADMIN')", name="ck_users_role"),
    )

    op.create_table(
        "technician_details",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
            index=True,
        ),
        sa.Column("specialization", sa.String(100)),
        sa.Column("experience", sa.Text),
        sa.Column("approval_status", sa.String(20), server_default="PENDING"),
        sa.Column("is_available", sa.Boolean, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("customer_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("technician_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), index=True),
        sa.Column("service_id", sa.Integer, nullable=False),
        sa.Column("service_type", sa.String(100), nullable=False),
        sa.Column("problem_description", sa.Text, nullable=False),
        sa.Column("customer_location", sa.Text, nullable=False),
        sa.Column("price_rwf", sa.Integer, nullable=False),
        sa.Column("duration", sa.Integer, server_default="60"),
        sa.Column("scheduled_date", sa.DateTime(timezone=True)),
        sa.Column("customer_notes", sa.Text),
        sa.Column("status", sa.String(20), server_default="pending", index=True),
        sa.Column("technician_notes", sa.Text),
        sa.Column("confirmed_at", sa.DateTime(timezone=True)),
        sa.Column("scheduled_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'scheduled', 'in_progress', 'completed', 'cancelled', 'expired')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint(
            "completed_at IS NULL OR cancelled_at IS NULL",
            name="ck_bookings_single_terminal_timestamp",
        ),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("bookings")
    op.drop_table("technician_details")
    op.drop_table("users")
