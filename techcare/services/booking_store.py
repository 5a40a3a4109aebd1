"""Booking persistence against the hosted database."""

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from techcare.core.exceptions import ConflictError
from techcare.domain.booking_state import BookingRecord
from techcare.domain.booking_status import BookingStatus
from techcare.models.booking import Booking
from techcare.schemas.booking import BookingCreate
from techcare.services.base import collaborator_errors

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60


class BookingStore:
    """Create, read and update bookings.

    Writes that depend on a previously read status are compare-and-swap on
    that status, so a concurrent change makes the write fail instead of
    silently overwriting it.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: BookingCreate) -> Booking:
        booking = Booking(
            customer_id=data.customer_id,
            technician_id=data.technician_id,
            service_id=data.service_id,
            service_type=data.service_type,
            problem_description=data.problem_description,
            customer_location=data.customer_location,
            price_rwf=data.price_rwf,
            duration=data.duration or DEFAULT_DURATION_MINUTES,
            scheduled_date=data.scheduled_date,
            customer_notes=data.customer_notes,
            status=BookingStatus.PENDING.value,
        )
        with collaborator_errors("booking create"):
            self.db.add(booking)
            await self.db.flush()
            await self.db.refresh(booking)
        logger.info(f"Booking created: {booking.id}", extra={"booking_id": booking.id})
        return booking

    async def get(self, booking_id: UUID) -> Booking | None:
        with collaborator_errors("booking fetch"):
            result = await self.db.execute(select(Booking).where(Booking.id == booking_id))
            return result.scalar_one_or_none()

    async def update_status(self, seen_status: str, record: BookingRecord) -> Booking:
        """Persist a transition computed from a booking last seen in ``seen_status``."""
        values = {
            "status": record.status.value,
            "confirmed_at": record.confirmed_at,
            "scheduled_at": record.scheduled_at,
            "completed_at": record.completed_at,
            "cancelled_at": record.cancelled_at,
            "technician_notes": record.technician_notes,
            "updated_at": record.updated_at,
        }
        return await self._compare_and_swap(record.id, seen_status, values, "booking status update")

    async def assign_technician(self, seen_status: str, record: BookingRecord) -> Booking:
        values = {"technician_id": record.technician_id, "updated_at": record.updated_at}
        return await self._compare_and_swap(record.id, seen_status, values, "technician assignment")

    async def list_by_customer(self, customer_id: UUID, status: str | None = None) -> list[Booking]:
        query = select(Booking).where(Booking.customer_id == customer_id)
        return await self._list(query, status, "customer bookings fetch")

    async def list_by_technician(self, technician_id: UUID, status: str | None = None) -> list[Booking]:
        query = select(Booking).where(Booking.technician_id == technician_id)
        return await self._list(query, status, "technician bookings fetch")

    async def _list(self, query, status: str | None, operation: str) -> list[Booking]:
        if status:
            query = query.where(Booking.status == status)
        query = query.order_by(Booking.created_at.desc())
        with collaborator_errors(operation):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def _compare_and_swap(
        self, booking_id: UUID, seen_status: str, values: dict, operation: str
    ) -> Booking:
        stmt = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == seen_status)
            .values(**values)
            .returning(Booking)
            .execution_options(synchronize_session="fetch")
        )
        with collaborator_errors(operation):
            result = await self.db.execute(stmt)
            booking = result.scalar_one_or_none()

        if booking is None:
            logger.warning(
                f"Stale write rejected for booking {booking_id} (expected status {seen_status})",
                extra={"booking_id": booking_id},
            )
            raise ConflictError(
                f"Booking {booking_id} is no longer {seen_status}; reload and try again"
            )
        return booking
