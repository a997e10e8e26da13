"""
tests/test_content_routes.py -- Integration tests for /api/v1/content.

Coverage:
  - public GET returns active snapshots only, with no-cache headers
  - version: 1 on create, unchanged on identical save, +1 on change
  - create without sections -> 400; metadata-only update keeps version
  - unknown page keys -> 400
  - admin/initialize creates only missing pages; history reports version
"""

from __future__ import annotations


def _save(api, page: str, body: dict):
    return api.client.post(f"/api/v1/content/{page}", json=body, headers=api.headers("admin"))


class TestContentVersioning:
    def test_create_then_identical_then_changed(self, api) -> None:
        sections = {"mission": {"title": "Our Mission", "content": "Guide every student."}}

        created = _save(api, "about", {"sections": sections})
        assert created.status_code == 201, created.text
        assert created.json()["data"]["version"] == 1

        same = _save(api, "about", {"sections": sections})
        assert same.status_code == 200
        assert same.json()["data"]["version"] == 1

        changed = _save(api, "about", {"sections": {**sections, "vision": {"title": "Vision"}}})
        assert changed.json()["data"]["version"] == 2

        history = api.client.get("/api/v1/content/about/history", headers=api.headers("admin"))
        assert history.status_code == 200
        data = history.json()["data"]
        assert data["version"] == 2
        assert data["lastUpdatedBy"] == api.id_of("admin")

    def test_create_without_sections(self, api) -> None:
        resp = _save(api, "contact", {"isActive": True})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"]["code"] == "validation_failed"
        assert body["errors"][0]["field"] == "sections"

    def test_unknown_page(self, api) -> None:
        resp = _save(api, "pricing", {"sections": {}})
        assert resp.status_code == 400


class TestPublicContent:
    def test_no_cache_headers(self, api) -> None:
        _save(api, "footer", {"sections": {"copyright": "2026"}})
        resp = api.client.get("/api/v1/content/footer")
        assert resp.status_code == 200
        assert resp.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        assert resp.headers["pragma"] == "no-cache"
        assert resp.headers["expires"] == "0"
        assert resp.json()["data"]["sections"] == {"copyright": "2026"}

    def test_inactive_page_hidden(self, api) -> None:
        _save(api, "home", {"sections": {"hero": {"title": "Hi"}}})
        hidden = _save(api, "home", {"isActive": False})
        assert hidden.json()["data"]["version"] == 1
        assert api.client.get("/api/v1/content/home").status_code == 404
        _save(api, "home", {"isActive": True})
        assert api.client.get("/api/v1/content/home").status_code == 200

    def test_writes_need_admin(self, api) -> None:
        resp = api.client.post("/api/v1/content/home", json={"sections": {}}, headers=api.headers("moderator"))
        assert resp.status_code == 403


class TestContentAdmin:
    def test_initialize_and_list(self, api) -> None:
        resp = api.client.post("/api/v1/content/admin/initialize", headers=api.headers("admin"))
        assert resp.status_code == 200, resp.text
        lines = resp.json()["data"]
        assert len(lines) == 4
        assert all(line.endswith(("created", "already exists")) for line in lines)

        listing = api.client.get("/api/v1/content/admin/all", headers=api.headers("admin"))
        assert {c["page"] for c in listing.json()["data"]} == {"home", "about", "contact", "footer"}

        again = api.client.post("/api/v1/content/admin/initialize", headers=api.headers("admin")).json()["data"]
        assert all(line.endswith("already exists") for line in again)

    def test_delete(self, api) -> None:
        _save(api, "contact", {"sections": {"phone": "+91 9000000000"}})
        assert api.client.delete("/api/v1/content/contact", headers=api.headers("admin")).status_code == 200
        assert api.client.get("/api/v1/content/contact").status_code == 404
        assert api.client.delete("/api/v1/content/contact", headers=api.headers("admin")).status_code == 404
