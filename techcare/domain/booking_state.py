"""Booking state machine.

Any non-terminal status may move to any status an authorized actor asks for.
Terminal bookings never change again. Each status timestamp is written the
first time its status is reached and is kept on later re-entries.
"""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from techcare.core.exceptions import AlreadyFinalized, AuthorizationError
from techcare.domain.access_policy import authorize_status_change
from techcare.domain.auth_session import Identity
from techcare.domain.booking_status import BookingStatus, normalize_status
from techcare.domain.roles import Role

STATUS_TIMESTAMPS: dict[BookingStatus, str] = {
    BookingStatus.CONFIRMED: "confirmed_at",
    BookingStatus.SCHEDULED: "scheduled_at",
    BookingStatus.COMPLETED: "completed_at",
    BookingStatus.CANCELLED: "cancelled_at",
}


@dataclass(frozen=True)
class BookingRecord:
    """The workflow-relevant part of a booking row."""

    id: UUID
    customer_id: UUID
    technician_id: UUID | None
    status: BookingStatus
    confirmed_at: datetime | None = None
    scheduled_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    technician_notes: str | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, booking: Any) -> "BookingRecord":
        return cls(
            id=booking.id,
            customer_id=booking.customer_id,
            technician_id=booking.technician_id,
            status=normalize_status(booking.status),
            confirmed_at=booking.confirmed_at,
            scheduled_at=booking.scheduled_at,
            completed_at=booking.completed_at,
            cancelled_at=booking.cancelled_at,
            technician_notes=booking.technician_notes,
            updated_at=booking.updated_at,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


def assert_not_finalized(booking: BookingRecord) -> None:
    if booking.is_terminal:
        raise AlreadyFinalized(booking.status.value)


def transition(
    booking: BookingRecord,
    requested_status: "str | BookingStatus",
    actor: Identity,
    notes: str | None = None,
    now: datetime | None = None,
) -> BookingRecord:
    """Compute the booking that results from moving to ``requested_status``.

    Checks run in order: status value, actor, terminal state. Nothing is
    persisted here.
    """
    target = normalize_status(requested_status)
    authorize_status_change(actor, booking.customer_id, booking.technician_id, target)
    assert_not_finalized(booking)

    now = now or datetime.now(UTC)
    changes: dict[str, Any] = {"status": target, "updated_at": now}

    timestamp_field = STATUS_TIMESTAMPS.get(target)
    if timestamp_field and getattr(booking, timestamp_field) is None:
        changes[timestamp_field] = now

    if notes:
        changes["technician_notes"] = notes

    return replace(booking, **changes)


def assign_technician(
    booking: BookingRecord,
    technician_user_id: UUID,
    actor: Identity,
    now: datetime | None = None,
) -> BookingRecord:
    """Attach a technician to a booking (admin only). Status is unchanged."""
    if actor.role is not Role.ADMIN:
        raise AuthorizationError("Only admins can assign technicians")
    assert_not_finalized(booking)
    return replace(
        booking,
        technician_id=technician_user_id,
        updated_at=now or datetime.now(UTC),
    )
