"""User-related database models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from techcare.database import Base


class User(Base):
    """Profile row mirrored from the hosted auth service."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('CUSTOMER', 'TECHNICIAN', 'ADMIN')", name="ck_users_role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    full_name: Mapped[str | None] = mapped_column(String(200))
    phone_number: Mapped[str | None] = mapped_column(String(20))
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="CUSTOMER"
    )  # CUSTOMER, TECHNICIAN, ADMIN
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    technician_details: Mapped["TechnicianDetails | None"] = relationship(
        "TechnicianDetails", back_populates="user", uselist=False
    )


class TechnicianDetails(Base):
    """Technician profile and availability flag."""

    __tablename__ = "technician_details"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True
    )
    specialization: Mapped[str | None] = mapped_column(String(100))
    experience: Mapped[str | None] = mapped_column(Text)
    approval_status: Mapped[str] = mapped_column(
        String(20), default="PENDING"
    )  # PENDING, APPROVED, REJECTED
    is_available: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="technician_details")
