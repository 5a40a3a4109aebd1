"""Tests for the booking endpoints."""

from uuid import uuid4

from tests.conftest import auth_headers


def booking_payload(customer_id, technician_id, **overrides):
    payload = {
        "customer_id": str(customer_id),
        "technician_id": str(technician_id),
        "service_id": 3,
        "service_type": "Phone repair",
        "problem_description": "Battery drains fast",
        "customer_location": "Kigali, Gasabo",
        "price_rwf": 20000,
    }
    payload.update(overrides)
    return payload


class TestCreateBooking:
    def test_customer_creates_pending_booking(self, client, customer, technician, customer_headers):
        response = client.post(
            "/api/bookings",
            json=booking_payload(customer.id, technician.id),
            headers=customer_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["booking"]["status"] == "pending"
        assert body["booking"]["duration"] == 60

    def test_missing_fields_are_listed(self, client, customer, customer_headers):
        response = client.post(
            "/api/bookings",
            json={"customer_id": str(customer.id), "service_type": ""},
            headers=customer_headers,
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error.startswith("Missing required fields: ")
        for field in ("technician_id", "service_id", "service_type", "price_rwf"):
            assert field in error

    def test_unknown_fields_are_rejected(self, client, customer, technician, customer_headers):
        response = client.post(
            "/api/bookings",
            json=booking_payload(customer.id, technician.id, discount_code="FREE"),
            headers=customer_headers,
        )
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid fields: discount_code: unexpected field"}

    def test_unavailable_technician(self, client, customer, technician_store, customer_headers):
        busy = technician_store.add_technician(is_available=False)
        response = client.post(
            "/api/bookings", json=booking_payload(customer.id, busy.id), headers=customer_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Selected technician is currently unavailable"

    def test_unknown_technician(self, client, customer, customer_headers):
        missing = uuid4()
        response = client.post(
            "/api/bookings", json=booking_payload(customer.id, missing), headers=customer_headers
        )
        assert response.status_code == 404
        assert response.json()["error"] == f"Technician with ID {missing} not found"

    def test_customers_book_for_themselves_only(self, client, technician, customer_headers):
        response = client.post(
            "/api/bookings", json=booking_payload(uuid4(), technician.id), headers=customer_headers
        )
        assert response.status_code == 403

    def test_technicians_cannot_book(self, client, customer, technician, technician_headers):
        response = client.post(
            "/api/bookings",
            json=booking_payload(customer.id, technician.id),
            headers=technician_headers,
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Role 'TECHNICIAN' is not authorized for this action"

    def test_requires_authentication(self, client, customer, technician):
        response = client.post("/api/bookings", json=booking_payload(customer.id, technician.id))
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Authentication required"}


class TestGetBooking:
    def test_participant_reads_booking(self, client, booking_store, customer, technician, customer_headers):
        booking = booking_store.add(customer.id, technician.id)
        response = client.get(f"/api/bookings/{booking.id}", headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["booking"]["id"] == str(booking.id)

    def test_not_found(self, client, customer_headers):
        missing = uuid4()
        response = client.get(f"/api/bookings/{missing}", headers=customer_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": f"Booking with ID {missing} not found"}

    def test_malformed_id(self, client, customer_headers):
        response = client.get("/api/bookings/not-a-uuid", headers=customer_headers)
        assert response.status_code == 400
        assert "booking_id" in response.json()["error"]

    def test_outsider_is_forbidden(self, client, booking_store, customer, technician):
        booking = booking_store.add(customer.id, technician.id)
        response = client.get(f"/api/bookings/{booking.id}", headers=auth_headers(uuid4(), "CUSTOMER"))
        assert response.status_code == 403

    def test_api_description(self, client):
        response = client.get("/api/bookings")
        assert response.status_code == 200
        assert response.json()["message"] == "Booking API is working"


class TestUpdateStatus:
    def test_technician_confirms(self, client, booking_store, customer, technician, technician_headers):
        booking = booking_store.add(customer.id, technician.id)
        response = client.put(
            f"/api/bookings/{booking.id}/status",
            json={"status": "CONFIRMED", "notes": "On my way"},
            headers=technician_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Booking status updated to confirmed"
        assert body["booking"]["status"] == "confirmed"
        assert body["booking"]["technician_notes"] == "On my way"
        assert body["booking"]["confirmed_at"] is not None
        assert body["booking"]["scheduled_at"] is None
        assert body["booking"]["completed_at"] is None
        assert body["booking"]["cancelled_at"] is None

    def test_timestamp_set_once(self, client, booking_store, customer, technician, technician_headers):
        booking = booking_store.add(customer.id, technician.id)
        url = f"/api/bookings/{booking.id}/status"
        first = client.put(url, json={"status": "confirmed"}, headers=technician_headers).json()
        client.put(url, json={"status": "pending"}, headers=technician_headers)
        again = client.put(url, json={"status": "confirmed"}, headers=technician_headers).json()
        assert again["booking"]["confirmed_at"] == first["booking"]["confirmed_at"]

    def test_terminal_booking_is_rejected(self, client, booking_store, customer, technician, technician_headers):
        booking = booking_store.add(customer.id, technician.id, status="completed")
        response = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "pending"}, headers=technician_headers
        )
        assert response.status_code == 409
        assert booking_store.bookings[booking.id].status == "completed"

    def test_invalid_status(self, client, booking_store, customer, technician, technician_headers):
        booking = booking_store.add(customer.id, technician.id)
        response = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "done"}, headers=technician_headers
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid status. Must be one of: pending, confirmed")
        assert booking_store.bookings[booking.id].status == "pending"

    def test_missing_status(self, client, booking_store, customer, technician, technician_headers):
        booking = booking_store.add(customer.id, technician.id)
        response = client.put(f"/api/bookings/{booking.id}/status", json={}, headers=technician_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: status"

    def test_not_found(self, client, technician_headers):
        response = client.put(
            f"/api/bookings/{uuid4()}/status", json={"status": "confirmed"}, headers=technician_headers
        )
        assert response.status_code == 404

    def test_customer_may_cancel(self, client, booking_store, customer, technician, customer_headers):
        booking = booking_store.add(customer.id, technician.id)
        response = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "cancelled"}, headers=customer_headers
        )
        assert response.status_code == 200
        assert response.json()["booking"]["cancelled_at"] is not None

    def test_customer_may_not_confirm(self, client, booking_store, customer, technician, customer_headers):
        booking = booking_store.add(customer.id, technician.id)
        response = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "confirmed"}, headers=customer_headers
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Customers can only cancel their bookings"
        assert booking_store.bookings[booking.id].status == "pending"

    def test_other_technician_is_forbidden(self, client, booking_store, customer, technician):
        booking = booking_store.add(customer.id, technician.id)
        response = client.put(
            f"/api/bookings/{booking.id}/status",
            json={"status": "confirmed"},
            headers=auth_headers(uuid4(), "TECHNICIAN"),
        )
        assert response.status_code == 403

    def test_concurrent_change_is_a_conflict(self, client, booking_store, customer, technician, technician_headers):
        booking = booking_store.add(customer.id, technician.id)

        def customer_cancels_meanwhile(row):
            row.status = "cancelled"

        booking_store.after_get = customer_cancels_meanwhile
        response = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "completed"}, headers=technician_headers
        )
        assert response.status_code == 409
        assert "reload and try again" in response.json()["error"]
        assert booking_store.bookings[booking.id].status == "cancelled"

    def test_expected_status_mismatch(self, client, booking_store, customer, technician, technician_headers):
        booking = booking_store.add(customer.id, technician.id, status="scheduled")
        response = client.put(
            f"/api/bookings/{booking.id}/status",
            json={"status": "in_progress", "expected_status": "confirmed"},
            headers=technician_headers,
        )
        assert response.status_code == 409
        assert booking_store.bookings[booking.id].status == "scheduled"


class TestAssignTechnician:
    def test_admin_assigns_available_technician(self, client, booking_store, technician_store, customer, admin_headers):
        booking = booking_store.add(customer.id, None)
        technician = technician_store.add_technician()
        response = client.put(
            f"/api/bookings/{booking.id}/assign-technician",
            json={"technician_id": str(technician.id)},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Technician assigned successfully"
        assert booking_store.bookings[booking.id].technician_id == technician.id

    def test_unapproved_technician(self, client, booking_store, technician_store, customer, admin_headers):
        booking = booking_store.add(customer.id, None)
        pending = technician_store.add_technician(approval_status="PENDING")
        response = client.put(
            f"/api/bookings/{booking.id}/assign-technician",
            json={"technician_id": str(pending.id)},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Technician not found or not available"

    def test_admin_only(self, client, booking_store, customer, technician, customer_headers):
        booking = booking_store.add(customer.id, None)
        response = client.put(
            f"/api/bookings/{booking.id}/assign-technician",
            json={"technician_id": str(technician.id)},
            headers=customer_headers,
        )
        assert response.status_code == 403

    def test_finished_booking(self, client, booking_store, customer, technician, admin_headers):
        booking = booking_store.add(customer.id, None, status="cancelled")
        response = client.put(
            f"/api/bookings/{booking.id}/assign-technician",
            json={"technician_id": str(technician.id)},
            headers=admin_headers,
        )
        assert response.status_code == 409


class TestListBookings:
    def test_customer_lists_own_bookings_newest_first(self, client, booking_store, customer, technician, customer_headers):
        older = booking_store.add(customer.id, technician.id)
        newer = booking_store.add(customer.id, technician.id, status="confirmed")
        booking_store.add(uuid4(), technician.id)

        response = client.get(f"/api/bookings/customer/{customer.id}", headers=customer_headers)
        assert response.status_code == 200
        ids = [b["id"] for b in response.json()["bookings"]]
        assert ids == [str(newer.id), str(older.id)]

        filtered = client.get(
            f"/api/bookings/customer/{customer.id}", params={"status": "Confirmed"}, headers=customer_headers
        )
        assert [b["id"] for b in filtered.json()["bookings"]] == [str(newer.id)]

    def test_customer_cannot_list_others(self, client, customer_headers):
        response = client.get(f"/api/bookings/customer/{uuid4()}", headers=customer_headers)
        assert response.status_code == 403

    def test_technician_list_includes_customer(self, client, booking_store, customer, technician, technician_headers):
        booking_store.add(customer.id, technician.id)
        response = client.get(f"/api/bookings/technician/{technician.id}", headers=technician_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["bookings"][0]["customer"]["full_name"] == "Aline Customer"

    def test_technician_list_falls_back_to_anonymous_customer(
        self, client, booking_store, technician_store, customer, technician, technician_headers
    ):
        booking_store.add(customer.id, technician.id)
        technician_store.customers_unavailable = True
        response = client.get(f"/api/bookings/technician/{technician.id}", headers=technician_headers)
        assert response.status_code == 200
        summary = response.json()["bookings"][0]["customer"]
        assert summary["full_name"] == "Anonymous Customer"
        assert summary["email"] == "anonymous@techcare.rw"

    def test_role_is_read_from_profile_when_token_has_none(self, client, booking_store, customer, technician):
        booking_store.add(customer.id, technician.id)
        response = client.get(
            f"/api/bookings/technician/{technician.id}", headers=auth_headers(technician.id)
        )
        assert response.status_code == 200
        assert response.json()["count"] == 1
