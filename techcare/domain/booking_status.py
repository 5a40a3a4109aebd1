"""Booking status enumeration."""

from enum import Enum

from techcare.core.exceptions import InvalidStatus


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.EXPIRED}
)

VALID_STATUSES = tuple(s.value for s in BookingStatus)


def normalize_status(value: "str | BookingStatus | None") -> BookingStatus:
    """Parse a status in any case, rejecting anything outside the enumeration."""
    if isinstance(value, BookingStatus):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidStatus(value, VALID_STATUSES)
    try:
        return BookingStatus(value.strip().lower())
    except ValueError:
        raise InvalidStatus(value, VALID_STATUSES)
