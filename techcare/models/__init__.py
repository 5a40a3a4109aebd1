"""Database models."""

from techcare.models.booking import Booking
from techcare.models.user import TechnicianDetails, User

__all__ = [
    "Booking",
    "TechnicianDetails",
    "User",
]
