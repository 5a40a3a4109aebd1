"""Booking-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    model_config = ConfigDict(extra="forbid")

    customer_id: UUID
    technician_id: UUID
    service_id: int = Field(..., ge=1)
    service_type: str = Field(..., min_length=1, max_length=100)
    problem_description: str = Field(..., min_length=1, max_length=2000)
    customer_location: str = Field(..., min_length=1, max_length=500)
    price_rwf: int = Field(..., ge=0)
    duration: int | None = Field(None, ge=1, le=24 * 60)
    scheduled_date: datetime | None = None
    customer_notes: str | None = Field(None, max_length=1000)


class BookingStatusUpdate(BaseModel):
    """Schema for changing a booking's status.

    ``status`` is matched case-insensitively against the status enumeration.
    ``expected_status`` is the status the caller last saw; the update is
    rejected if the booking has moved on since.
    """

    model_config = ConfigDict(extra="forbid")

    status: str
    notes: str | None = Field(None, max_length=2000)
    expected_status: str | None = None


class AssignTechnicianRequest(BaseModel):
    """Schema for an admin assigning a technician."""

    model_config = ConfigDict(extra="forbid")

    technician_id: UUID


class CustomerSummary(BaseModel):
    """Customer contact details shown to technicians."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str | None = None
    phone_number: str | None = None
    email: str | None = None


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: UUID
    technician_id: UUID | None

    service_id: int
    service_type: str
    problem_description: str
    customer_location: str
    price_rwf: int
    duration: int | None = None
    scheduled_date: datetime | None = None
    customer_notes: str | None = None

    status: str
    technician_notes: str | None = None

    confirmed_at: datetime | None = None
    scheduled_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TechnicianBookingResponse(BookingResponse):
    """Booking with the customer's contact details attached."""

    customer: CustomerSummary


class BookingEnvelope(BaseModel):
    success: bool = True
    booking: BookingResponse


class BookingUpdateEnvelope(BookingEnvelope):
    message: str


class BookingListEnvelope(BaseModel):
    success: bool = True
    bookings: list[BookingResponse]


class TechnicianBookingListEnvelope(BaseModel):
    success: bool = True
    bookings: list[TechnicianBookingResponse]
    count: int
