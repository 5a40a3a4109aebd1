"""Shared fixtures: in-memory stores wired into the app, plus token helpers."""

import copy
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from starlette.testclient import TestClient

from techcare.api.deps import get_booking_store, get_technician_store
from techcare.core.exceptions import CollaboratorError, ConflictError
from techcare.core.security import create_access_token
from techcare.database import get_db
from techcare.domain.availability import AvailabilityChange
from techcare.domain.booking_state import BookingRecord
from techcare.domain.technician_approval import ApprovalChange
from techcare.main import app


# =============================================================================
# IN-MEMORY STORES
# =============================================================================


class FakeBookingStore:
    """Mirrors ``BookingStore`` including its compare-and-swap writes."""

    def __init__(self) -> None:
        self.bookings: dict[UUID, SimpleNamespace] = {}
        self.after_get: Callable[[SimpleNamespace], None] | None = None
        self._clock = datetime(2025, 6, 1, 8, 0, tzinfo=UTC)

    def add(self, customer_id: UUID, technician_id: UUID | None, status: str = "pending", **fields) -> SimpleNamespace:
        self._clock += timedelta(minutes=1)
        booking = SimpleNamespace(
            id=uuid4(),
            customer_id=customer_id,
            technician_id=technician_id,
            service_id=1,
            service_type="Laptop repair",
            problem_description="Screen flickers",
            customer_location="Kigali, Nyarugenge",
            price_rwf=15000,
            duration=60,
            scheduled_date=None,
            customer_notes=None,
            status=status,
            technician_notes=None,
            confirmed_at=None,
            scheduled_at=None,
            completed_at=None,
            cancelled_at=None,
            created_at=self._clock,
            updated_at=self._clock,
        )
        for key, value in fields.items():
            setattr(booking, key, value)
        self.bookings[booking.id] = booking
        return booking

    async def create(self, data):
        fields = data.model_dump(exclude={"customer_id", "technician_id"})
        fields["duration"] = fields["duration"] or 60
        return self.add(data.customer_id, data.technician_id, **fields)

    async def get(self, booking_id: UUID):
        booking = self.bookings.get(booking_id)
        if booking is None:
            return None
        snapshot = copy.copy(booking)
        if self.after_get:
            self.after_get(booking)
        return snapshot

    async def update_status(self, seen_status: str, record: BookingRecord):
        values = {
            "status": record.status.value,
            "confirmed_at": record.confirmed_at,
            "scheduled_at": record.scheduled_at,
            "completed_at": record.completed_at,
            "cancelled_at": record.cancelled_at,
            "technician_notes": record.technician_notes,
            "updated_at": record.updated_at,
        }
        return self._compare_and_swap(record.id, seen_status, values)

    async def assign_technician(self, seen_status: str, record: BookingRecord):
        values = {"technician_id": record.technician_id, "updated_at": record.updated_at}
        return self._compare_and_swap(record.id, seen_status, values)

    async def list_by_customer(self, customer_id: UUID, status: str | None = None):
        return self._list(lambda b: b.customer_id == customer_id, status)

    async def list_by_technician(self, technician_id: UUID, status: str | None = None):
        return self._list(lambda b: b.technician_id == technician_id, status)

    def _list(self, predicate, status):
        rows = [b for b in self.bookings.values() if predicate(b) and (not status or b.status == status)]
        return sorted(rows, key=lambda b: b.created_at, reverse=True)

    def _compare_and_swap(self, booking_id: UUID, seen_status: str, values: dict):
        booking = self.bookings.get(booking_id)
        if booking is None or booking.status != seen_status:
            raise ConflictError(f"Booking {booking_id} is no longer {seen_status}; reload and try again")
        for key, value in values.items():
            setattr(booking, key, value)
        return copy.copy(booking)


class FakeTechnicianStore:
    """Mirrors ``TechnicianStore`` over plain dicts."""

    def __init__(self) -> None:
        self.users: dict[UUID, SimpleNamespace] = {}
        self.details: dict[UUID, SimpleNamespace] = {}
        self.customers_unavailable = False

    def add_user(self, role: str, full_name: str = "Test User", **fields) -> SimpleNamespace:
        user_id = uuid4()
        user = SimpleNamespace(
            id=user_id,
            email=f"{user_id.hex[:8]}@example.rw",
            full_name=full_name,
            phone_number="+250 788 000 000",
            role=role,
            is_active=True,
        )
        for key, value in fields.items():
            setattr(user, key, value)
        self.users[user_id] = user
        return user

    def add_technician(self, approval_status: str = "APPROVED", is_available: bool = True) -> SimpleNamespace:
        user = self.add_user("TECHNICIAN", full_name="Jean Technician")
        self.details[user.id] = SimpleNamespace(
            id=uuid4(),
            user_id=user.id,
            specialization="Computers",
            experience="5 years",
            approval_status=approval_status,
            is_available=is_available,
            updated_at=datetime(2025, 5, 1, tzinfo=UTC),
        )
        return user

    async def get_details(self, user_id: UUID):
        return self.details.get(user_id)

    async def set_availability(self, change: AvailabilityChange):
        details = self.details.get(change.technician_user_id)
        if details is None:
            return None
        details.is_available = change.is_available
        details.updated_at = change.updated_at
        return details

    async def get_technician_user(self, user_id: UUID):
        user = self.users.get(user_id)
        return user if user and user.role == "TECHNICIAN" else None

    async def set_approval_status(self, change: ApprovalChange):
        details = self.details.get(change.technician_user_id)
        if details is None or details.approval_status != change.previous_status.value:
            raise ConflictError(f"Technician {change.technician_user_id} is no longer {change.previous_status.value}")
        details.approval_status = change.approval_status.value
        details.updated_at = change.updated_at
        return details

    async def get_user_role(self, user_id: UUID):
        user = self.users.get(user_id)
        return user.role if user and user.is_active else None

    async def get_customers(self, user_ids: list[UUID]):
        if self.customers_unavailable:
            raise CollaboratorError("permission denied for table users")
        return {uid: self.users[uid] for uid in user_ids if uid in self.users}


# =============================================================================
# APP FIXTURES
# =============================================================================


@pytest.fixture
def booking_store():
    return FakeBookingStore()


@pytest.fixture
def technician_store():
    return FakeTechnicianStore()


@pytest.fixture
def client(booking_store, technician_store):
    async def no_db():
        yield None

    app.dependency_overrides[get_db] = no_db
    app.dependency_overrides[get_booking_store] = lambda: booking_store
    app.dependency_overrides[get_technician_store] = lambda: technician_store
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# AUTH FIXTURES
# =============================================================================


def auth_headers(user_id: UUID, role: str | None = None) -> dict[str, str]:
    token = create_access_token(str(user_id), role=role, email="user@example.rw")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer(technician_store):
    return technician_store.add_user("CUSTOMER", full_name="Aline Customer")


@pytest.fixture
def technician(technician_store):
    return technician_store.add_technician()


@pytest.fixture
def admin(technician_store):
    return technician_store.add_user("ADMIN", full_name="Site Admin")


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer.id, "CUSTOMER")


@pytest.fixture
def technician_headers(technician):
    return auth_headers(technician.id, "TECHNICIAN")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin.id, "ADMIN")

