"""Booking endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from techcare.api.deps import Bookings, CurrentIdentity, Technicians
from techcare.core.exceptions import (
    AuthorizationError,
    CollaboratorError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from techcare.core.permissions import assert_self_or_admin, require_admin, require_customer
from techcare.domain.access_policy import authorize_participant_read
from techcare.domain.auth_session import Identity
from techcare.domain.booking_state import BookingRecord, assign_technician, transition
from techcare.domain.booking_status import normalize_status
from techcare.domain.technician_approval import ApprovalStatus
from techcare.models.booking import Booking
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
from techcare.services.booking_store import BookingStore

logger = logging.getLogger(__name__)

router = APIRouter()


def anonymous_customer(customer_id: UUID) -> CustomerSummary:
    """Stand-in when the customer's profile is not readable."""
    return CustomerSummary(
        id=customer_id,
        full_name="Anonymous Customer",
        phone_number="+250 000 000 000",
        email="anonymous@techcare.rw",
    )


async def get_booking_or_404(bookings: BookingStore, booking_id: UUID) -> Booking:
    booking = await bookings.get(booking_id)
    if not booking:
        raise NotFoundError("Booking", str(booking_id))
    return booking


@router.post("", response_model=BookingEnvelope)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[Identity, Depends(require_customer)],
    bookings: Bookings,
    technicians: Technicians,
) -> BookingEnvelope:
    """Create a new booking in ``pending``."""
    if booking_data.customer_id != current_user.user_id:
        raise AuthorizationError("Customers can only create bookings for themselves")

    technician = await technicians.get_details(booking_data.technician_id)
    if not technician:
        raise NotFoundError("Technician", str(booking_data.technician_id))
    if not technician.is_available:
        raise ValidationError("Selected technician is currently unavailable", fields=["technician_id"])

    booking = await bookings.create(booking_data)
    return BookingEnvelope(booking=BookingResponse.model_validate(booking))


@router.get("")
async def describe_booking_api() -> dict:
    """Describe the booking endpoints."""
    return {
        "message": "Booking API is working",
        "endpoints": {
            "POST /api/bookings": "Create a new booking",
            "GET /api/bookings/{id}": "Get a booking",
            "PUT /api/bookings/{id}/status": "Update a booking's status",
            "PUT /api/bookings/{id}/assign-technician": "Assign a technician (admin)",
            "GET /api/bookings/customer/{customerId}": "List a customer's bookings",
            "GET /api/bookings/technician/{technicianId}": "List a technician's bookings",
        },
    }


@router.get("/customer/{customer_id}", response_model=BookingListEnvelope)
async def list_customer_bookings(
    customer_id: UUID,
    current_user: CurrentIdentity,
    bookings: Bookings,
    status_filter: str | None = Query(default=None, alias="status"),
) -> BookingListEnvelope:
    """Get a customer's bookings, newest first."""
    assert_self_or_admin(current_user, customer_id, "bookings")
    status = normalize_status(status_filter).value if status_filter else None

    results = await bookings.list_by_customer(customer_id, status)
    logger.info(f"Found {len(results)} bookings for customer {customer_id}")
    return BookingListEnvelope(bookings=[BookingResponse.model_validate(b) for b in results])


@router.get("/technician/{technician_id}", response_model=TechnicianBookingListEnvelope)
async def list_technician_bookings(
    technician_id: UUID,
    current_user: CurrentIdentity,
    bookings: Bookings,
    technicians: Technicians,
    status_filter: str | None = Query(default=None, alias="status"),
) -> TechnicianBookingListEnvelope:
    """Get a technician's bookings with customer contact details attached."""
    assert_self_or_admin(current_user, technician_id, "bookings")
    status = normalize_status(status_filter).value if status_filter else None

    results = await bookings.list_by_technician(technician_id, status)

    customer_ids = list({b.customer_id for b in results})
    try:
        customers = await technicians.get_customers(customer_ids)
    except CollaboratorError as e:
        logger.warning(f"Customer details unavailable for technician {technician_id}: {e.detail}")
        customers = {}

    enriched = []
    for booking in results:
        customer = customers.get(booking.customer_id)
        enriched.append(
            TechnicianBookingResponse(
                **BookingResponse.model_validate(booking).model_dump(),
                customer=(
                    CustomerSummary.model_validate(customer)
                    if customer
                    else anonymous_customer(booking.customer_id)
                ),
            )
        )

    logger.info(f"Found {len(enriched)} bookings for technician {technician_id}")
    return TechnicianBookingListEnvelope(bookings=enriched, count=len(enriched))


@router.get("/{booking_id}", response_model=BookingEnvelope)
async def get_booking(
    booking_id: UUID,
    current_user: CurrentIdentity,
    bookings: Bookings,
) -> BookingEnvelope:
    """Get a booking by ID."""
    booking = await get_booking_or_404(bookings, booking_id)
    authorize_participant_read(current_user, booking.customer_id, booking.technician_id)
    return BookingEnvelope(booking=BookingResponse.model_validate(booking))


@router.put("/{booking_id}/status", response_model=BookingUpdateEnvelope)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    current_user: CurrentIdentity,
    bookings: Bookings,
) -> BookingUpdateEnvelope:
    """Move a booking to a new status.

    The assigned technician may set any status; the customer may cancel.
    """
    target = normalize_status(request.status)
    expected = normalize_status(request.expected_status) if request.expected_status else None

    booking = await get_booking_or_404(bookings, booking_id)
    record = BookingRecord.from_model(booking)

    updated = transition(record, target, current_user, notes=request.notes)
    if expected is not None and expected is not record.status:
        raise ConflictError(
            f"Booking {booking_id} is {record.status.value}, not {expected.value}; reload and try again"
        )

    saved = await bookings.update_status(booking.status, updated)

    logger.info(
        f"Booking status updated: {booking_id} {record.status.value} -> {target.value}",
        extra={"booking_id": booking_id, "user_id": current_user.user_id},
    )
    return BookingUpdateEnvelope(
        booking=BookingResponse.model_validate(saved),
        message=f"Booking status updated to {target.value}",
    )


@router.put("/{booking_id}/assign-technician", response_model=BookingUpdateEnvelope)
async def assign_booking_technician(
    booking_id: UUID,
    request: AssignTechnicianRequest,
    current_user: Annotated[Identity, Depends(require_admin)],
    bookings: Bookings,
    technicians: Technicians,
) -> BookingUpdateEnvelope:
    """Assign an approved, available technician to a booking (admin only)."""
    booking = await get_booking_or_404(bookings, booking_id)

    technician = await technicians.get_details(request.technician_id)
    approved = technician is not None and technician.approval_status == ApprovalStatus.APPROVED.value
    if not approved or not technician.is_available:
        raise ValidationError("Technician not found or not available", fields=["technician_id"])

    record = assign_technician(BookingRecord.from_model(booking), request.technician_id, current_user)
    saved = await bookings.assign_technician(booking.status, record)

    logger.info(
        f"Technician {request.technician_id} assigned to booking {booking_id}",
        extra={"booking_id": booking_id, "user_id": current_user.user_id},
    )
    return BookingUpdateEnvelope(
        booking=BookingResponse.model_validate(saved),
        message="Technician assigned successfully",
    )
