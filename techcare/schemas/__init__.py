"""Pydantic schemas for API validation."""

from techcare.schemas.access import AccessCheckResponse, HomeRouteResponse
from techcare.schemas.booking import (
    AssignTechnicianRequest,
    BookingCreate,
    BookingEnvelope,
    BookingListEnvelope,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdateEnvelope,
    CustomerSummary,
    TechnicianBookingListEnvelope,
    TechnicianBookingResponse,
)
from techcare.schemas.technician import (
    ApprovalEnvelope,
    AvailabilityEnvelope,
    AvailabilityUpdate,
    TechnicianDetailsResponse,
)

__all__ = [
    # Access
    "AccessCheckResponse",
    "HomeRouteResponse",
    # Booking
    "AssignTechnicianRequest",
    "BookingCreate",
    "BookingEnvelope",
    "BookingListEnvelope",
    "BookingResponse",
    "BookingStatusUpdate",
    "BookingUpdateEnvelope",
    "CustomerSummary",
    "TechnicianBookingListEnvelope",
    "TechnicianBookingResponse",
    # Technician
    "ApprovalEnvelope",
    "AvailabilityEnvelope",
    "AvailabilityUpdate",
    "TechnicianDetailsResponse",
]
