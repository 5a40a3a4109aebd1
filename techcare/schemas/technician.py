"""Technician-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictBool


class AvailabilityUpdate(BaseModel):
    """Schema for toggling availability. Only real booleans are accepted."""

    model_config = ConfigDict(extra="forbid")

    is_available: StrictBool


class TechnicianDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    specialization: str | None = None
    approval_status: str
    is_available: bool
    updated_at: datetime | None = None


class AvailabilityEnvelope(BaseModel):
    success: bool = True
    technician: TechnicianDetailsResponse
    message: str


class ApprovalEnvelope(BaseModel):
    success: bool = True
    technician: TechnicianDetailsResponse
    previous_status: str
    message: str
