"""
tests/test_auth_routes.py -- Integration tests for /api/v1/auth/*.

Coverage:
  - register: 201 with token, role "user", duplicate email 409, bad email 400
  - login: valid 200 with no-store header, wrong password 401, same message
    for unknown email, deactivated account 401
  - me: 200 with token, 401 without or with a garbage token
  - change-password: wrong current password 400, success lets the new
    password log in
"""

from __future__ import annotations

PASSWORD = "testpass123"


def _register(api, email: str, password: str = "secret-pass-1"):
    return api.client.post(
        "/api/v1/auth/register",
        json={"name": "Meera", "email": email, "password": password},
    )


class TestRegister:
    def test_register_returns_token(self, api) -> None:
        """A new account is created with role user and a usable token."""
        resp = _register(api, "meera@example.com")
        assert resp.status_code == 201, resp.text
        assert resp.headers["cache-control"] == "no-store"
        data = resp.json()["data"]
        assert data["tokenType"] == "bearer"
        assert data["user"]["role"] == "user"
        assert data["user"]["email"] == "meera@example.com"
        assert "hashedPassword" not in data["user"]

        me = api.client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200
        assert me.json()["data"]["email"] == "meera@example.com"

    def test_duplicate_email(self, api) -> None:
        """Registering an existing email (any case) is a conflict."""
        _register(api, "twice@example.com")
        resp = _register(api, "TWICE@example.com")
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "conflict"

    def test_invalid_email(self, api) -> None:
        """A malformed email fails validation and names the field."""
        resp = _register(api, "not-an-email")
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "validation_failed"
        assert "email" in body["message"]
        assert body["errors"][0]["field"] == "email"

    def test_short_password(self, api) -> None:
        resp = _register(api, "short@example.com", password="12345")
        assert resp.status_code == 400
        assert "password" in resp.json()["message"]


class TestLogin:
    def test_valid_login(self, api) -> None:
        """Seeded accounts log in with the shared test password."""
        resp = api.client.post("/api/v1/auth/login", json={"email": api.users["user"].email, "password": PASSWORD})
        assert resp.status_code == 200, resp.text
        assert resp.headers["cache-control"] == "no-store"
        data = resp.json()["data"]
        assert data["token"]
        assert data["user"]["lastLogin"] is not None

    def test_wrong_password(self, api) -> None:
        resp = api.client.post(
            "/api/v1/auth/login", json={"email": api.users["user"].email, "password": "wrong-password"}
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password."

    def test_unknown_email_same_message(self, api) -> None:
        """Unknown email and wrong password are indistinguishable to the caller."""
        resp = api.client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password."

    def test_deactivated_account(self, api) -> None:
        _register(api, "leaving@example.com", password=PASSWORD)
        account = api.accounts.get_by_email("leaving@example.com")
        api.accounts.deactivate(account.id)
        resp = api.client.post("/api/v1/auth/login", json={"email": "leaving@example.com", "password": PASSWORD})
        assert resp.status_code == 401


class TestMe:
    def test_me_with_token(self, api) -> None:
        """The moderator sees both explicit and effective permissions."""
        resp = api.client.get("/api/v1/auth/me", headers=api.headers("moderator"))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["role"] == "moderator"
        assert "create_course" in data["permissions"]
        assert "create_college" in data["effectivePermissions"]

    def test_me_without_token(self, api) -> None:
        resp = api.client.get("/api/v1/auth/me")
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "unauthorized"

    def test_me_with_garbage_token(self, api) -> None:
        resp = api.client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401


class TestChangePassword:
    def test_wrong_current_password(self, api) -> None:
        resp = api.client.post(
            "/api/v1/auth/change-password",
            json={"currentPassword": "nope-nope", "newPassword": "brand-new-pass"},
            headers=api.headers("user"),
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Current password is incorrect."

    def test_change_then_login(self, api) -> None:
        """After a change only the new password authenticates."""
        token = _register(api, "rotate@example.com", password=PASSWORD).json()["data"]["token"]
        resp = api.client.post(
            "/api/v1/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "rotated-pass-9"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 200, resp.text

        old = api.client.post("/api/v1/auth/login", json={"email": "rotate@example.com", "password": PASSWORD})
        new = api.client.post("/api/v1/auth/login", json={"email": "rotate@example.com", "password": "rotated-pass-9"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_requires_auth(self, api) -> None:
        resp = api.client.post(
            "/api/v1/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "whatever-1"},
        )
        assert resp.status_code == 401
