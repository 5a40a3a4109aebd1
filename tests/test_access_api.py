"""Tests for the navigation access endpoints."""

from tests.conftest import auth_headers


class TestAccessCheck:
    def test_guest_on_protected_page_goes_to_login(self, client):
        response = client.get("/api/access/check", params={"path": "/profile"})
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "path": "/profile",
            "decision": "deny",
            "redirect_to": "/login",
        }

    def test_bad_token_counts_as_guest(self, client):
        response = client.get(
            "/api/access/check",
            params={"path": "/admin"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.json()["redirect_to"] == "/login"

    def test_wrong_role_goes_to_own_dashboard(self, client, technician_headers):
        response = client.get("/api/access/check", params={"path": "/admin/users"}, headers=technician_headers)
        body = response.json()
        assert body["decision"] == "deny"
        assert body["redirect_to"] == "/technician/dashboard"

    def test_allowed(self, client, admin_headers):
        response = client.get("/api/access/check", params={"path": "/admin"}, headers=admin_headers)
        assert response.json()["decision"] == "allow"
        assert response.json()["redirect_to"] is None

    def test_signed_in_user_skips_login_page(self, client, customer_headers):
        response = client.get("/api/access/check", params={"path": "/login"}, headers=customer_headers)
        assert response.json()["redirect_to"] == "/dashboard"

    def test_path_is_required(self, client):
        response = client.get("/api/access/check")
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: path"


class TestHomeRoute:
    def test_technician_home(self, client, technician_headers):
        response = client.get("/api/access/home", headers=technician_headers)
        assert response.json() == {
            "success": True,
            "role": "TECHNICIAN",
            "home_route": "/technician/dashboard",
            "post_signup_route": "/signup/pending-approval",
        }

    def test_unrecognised_role_gets_default_dashboard(self, client, technician_store):
        user = technician_store.add_user("SUPERVISOR")
        response = client.get("/api/access/home", headers=auth_headers(user.id))
        body = response.json()
        assert body["role"] is None
        assert body["home_route"] == "/dashboard"

    def test_requires_authentication(self, client):
        response = client.get("/api/access/home")
        assert response.status_code == 401
