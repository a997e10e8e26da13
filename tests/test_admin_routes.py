"""
tests/test_admin_routes.py -- Integration tests for /api/v1/admin/*.

Coverage:
  - dashboard and analytics: view_analytics grant required, camelCase shape
  - users list: manage_users required; role/isActive/search filters
  - user writes: admin role only; self-deactivation and self-deletion are
    refused with code self_modification; last active admin is protected
  - explicit null on a non-nullable field is a 400, never a silent write
  - delete deactivates rather than removing
"""

from __future__ import annotations

import pytest


def _new_user(api, email: str, **overrides) -> dict:
    body = {"name": "Staff", "email": email, "password": "staff-pass-1", **overrides}
    resp = api.client.post("/api/v1/admin/users", json=body, headers=api.headers("admin"))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestDashboard:
    def test_dashboard_shape(self, api) -> None:
        resp = api.client.get("/api/v1/admin/dashboard", headers=api.headers("moderator"))
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        assert data["overview"]["totalAdmins"] >= 1
        assert data["overview"]["totalUsers"] >= 4
        assert {"recentUsers", "recentCourses", "recentColleges"} <= set(data["recentActivity"])
        roles = {r["key"]: r["count"] for r in data["analytics"]["usersByRole"]}
        assert roles["moderator"] >= 2
        assert len(data["latestData"]["users"]) <= 5

    def test_dashboard_requires_grant(self, api) -> None:
        assert api.client.get("/api/v1/admin/dashboard", headers=api.headers("bare_moderator")).status_code == 403
        assert api.client.get("/api/v1/admin/dashboard").status_code == 401

    def test_analytics_period(self, api) -> None:
        resp = api.client.get("/api/v1/admin/analytics", params={"period": 7}, headers=api.headers("admin"))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["period"] == "7 days"
        assert sum(d["count"] for d in data["trends"]["users"]) >= 4
        assert "courses" in data["topPerformers"]

    def test_analytics_period_bounds(self, api) -> None:
        resp = api.client.get("/api/v1/admin/analytics", params={"period": 0}, headers=api.headers("admin"))
        assert resp.status_code == 400


class TestUserList:
    def test_requires_manage_users(self, api) -> None:
        assert api.client.get("/api/v1/admin/users", headers=api.headers("moderator")).status_code == 403

    def test_filters(self, api) -> None:
        _new_user(api, "filter-me@example.com", name="Filterable Person", role="moderator")
        resp = api.client.get(
            "/api/v1/admin/users",
            params={"role": "moderator", "search": "filterable"},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 200
        emails = [u["email"] for u in resp.json()["data"]]
        assert emails == ["filter-me@example.com"]

    def test_inactive_filter(self, api) -> None:
        user = _new_user(api, "inactive-one@example.com", isActive=False)
        resp = api.client.get("/api/v1/admin/users", params={"isActive": "false"}, headers=api.headers("admin"))
        assert user["id"] in [u["id"] for u in resp.json()["data"]]


class TestUserWrites:
    def test_create_with_permissions(self, api) -> None:
        data = _new_user(api, "editor@example.com", role="moderator", permissions=["create_course"])
        assert data["role"] == "moderator"
        assert data["permissions"] == ["create_course"]
        assert "edit_college" in data["effectivePermissions"]

    def test_create_duplicate(self, api) -> None:
        _new_user(api, "dupe-staff@example.com")
        resp = api.client.post(
            "/api/v1/admin/users",
            json={"name": "Again", "email": "dupe-staff@example.com", "password": "staff-pass-1"},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 409

    def test_unknown_permission_rejected(self, api) -> None:
        resp = api.client.post(
            "/api/v1/admin/users",
            json={"name": "X", "email": "x-perm@example.com", "password": "staff-pass-1", "permissions": ["fly"]},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 400

    @pytest.mark.parametrize("who", ["moderator", "user"])
    def test_writes_need_admin_role(self, api, who: str) -> None:
        target = api.id_of("user")
        assert api.client.put(f"/api/v1/admin/users/{target}", json={"name": "X"}, headers=api.headers(who)).status_code == 403
        assert api.client.delete(f"/api/v1/admin/users/{target}", headers=api.headers(who)).status_code == 403

    def test_update_fields(self, api) -> None:
        user = _new_user(api, "promote-me@example.com")
        resp = api.client.put(
            f"/api/v1/admin/users/{user['id']}",
            json={"role": "moderator", "permissions": ["view_analytics"]},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        assert data["role"] == "moderator"
        assert data["permissions"] == ["view_analytics"]

    def test_phone_can_be_cleared(self, api) -> None:
        user = _new_user(api, "clear-phone@example.com", phone="9876543210")
        resp = api.client.put(f"/api/v1/admin/users/{user['id']}", json={"phone": None}, headers=api.headers("admin"))
        assert resp.status_code == 200, resp.text
        assert resp.json()["data"].get("phone") is None

    def test_empty_update(self, api) -> None:
        user = _new_user(api, "empty-update@example.com")
        resp = api.client.put(f"/api/v1/admin/users/{user['id']}", json={}, headers=api.headers("admin"))
        assert resp.status_code == 400

    def test_delete_deactivates(self, api) -> None:
        user = _new_user(api, "leaver@example.com")
        resp = api.client.delete(f"/api/v1/admin/users/{user['id']}", headers=api.headers("admin"))
        assert resp.status_code == 200
        stored = api.accounts.get_by_id(user["id"])
        assert stored is not None
        assert stored.is_active is False

    def test_missing_user(self, api) -> None:
        assert api.client.delete("/api/v1/admin/users/999999", headers=api.headers("admin")).status_code == 404
        assert api.client.put("/api/v1/admin/users/999999", json={"name": "X"}, headers=api.headers("admin")).status_code == 404


class TestSelfModification:
    def test_cannot_delete_self(self, api) -> None:
        resp = api.client.delete(f"/api/v1/admin/users/{api.id_of('admin')}", headers=api.headers("admin"))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "self_modification"
        assert api.accounts.get_by_id(api.id_of("admin")).is_active is True

    def test_cannot_deactivate_self(self, api) -> None:
        resp = api.client.put(
            f"/api/v1/admin/users/{api.id_of('admin')}",
            json={"isActive": False},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "self_modification"

    def test_null_active_flag_rejected(self, api) -> None:
        resp = api.client.put(
            f"/api/v1/admin/users/{api.id_of('admin')}",
            json={"isActive": None},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "isActive"
        assert api.accounts.get_by_id(api.id_of("admin")).is_active is True

    def test_can_edit_own_name(self, api) -> None:
        resp = api.client.put(
            f"/api/v1/admin/users/{api.id_of('admin')}",
            json={"name": "Chief Admin"},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 200


class TestLastAdmin:
    def test_other_admin_can_be_removed(self, api) -> None:
        """With two active admins, one may deactivate the other."""
        second = _new_user(api, "second-admin@example.com", role="admin")
        resp = api.client.delete(f"/api/v1/admin/users/{second['id']}", headers=api.headers("admin"))
        assert resp.status_code == 200
        assert api.accounts.count_active_admins() == 1

    def test_last_admin_cannot_be_demoted(self, api) -> None:
        assert api.accounts.count_active_admins() == 1
        resp = api.client.put(
            f"/api/v1/admin/users/{api.id_of('admin')}",
            json={"role": "user"},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "validation_failed"
        assert api.accounts.get_by_id(api.id_of("admin")).role == "admin"

    def test_last_admin_survives_null_fields(self, api) -> None:
        target = f"/api/v1/admin/users/{api.id_of('admin')}"
        for body in ({"isActive": None}, {"role": None}):
            resp = api.client.put(target, json=body, headers=api.headers("admin"))
            assert resp.status_code == 400, body
            assert resp.json()["error"]["code"] == "validation_failed"
        stored = api.accounts.get_by_id(api.id_of("admin"))
        assert stored.is_active is True
        assert stored.role == "admin"
        assert api.accounts.count_active_admins() == 1
