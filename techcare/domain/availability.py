"""Technician availability toggle."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from techcare.core.exceptions import AuthorizationError


@dataclass(frozen=True)
class AvailabilityChange:
    technician_user_id: UUID
    is_available: bool
    updated_at: datetime


def set_availability(
    technician_user_id: UUID,
    actor_user_id: UUID,
    desired: bool,
    now: datetime | None = None,
) -> AvailabilityChange:
    """Only the technician may flip their own flag.

    ``updated_at`` is refreshed on every call, including ones that repeat
    the current value.
    """
    if actor_user_id != technician_user_id:
        raise AuthorizationError("Technicians can only change their own availability")
    return AvailabilityChange(
        technician_user_id=technician_user_id,
        is_available=desired,
        updated_at=now or datetime.now(UTC),
    )
