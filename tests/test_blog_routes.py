"""
tests/test_blog_routes.py -- Integration tests for /api/v1/blogs.

Coverage:
  - publishedAt stamped on first publish and never moved afterwards
  - public list/detail only show published posts; detail counts a view
  - slug conflicts on create and update -> 409 with a fixed message
  - admin/all, admin/stats require the admin role
  - delete archives instead of removing
  - meta/categories is public
"""

from __future__ import annotations

import pytest


def _blog_body(slug: str, **overrides) -> dict:
    body = {
        "title": f"Guide {slug}",
        "slug": slug,
        "excerpt": "Everything you need to know.",
        "content": "Admissions season is here. " * 5,
        "category": "Admissions",
    }
    body.update(overrides)
    return body


def _create(api, slug: str, **overrides) -> dict:
    resp = api.client.post("/api/v1/blogs", json=_blog_body(slug, **overrides), headers=api.headers("admin"))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestPublishing:
    def test_draft_has_no_published_at(self, api) -> None:
        data = _create(api, "draft-only")
        assert data["status"] == "draft"
        assert data["publishedAt"] is None
        assert data["author"] == api.id_of("admin")
        assert data["url"] == "/blogs/draft-only"

    def test_published_at_set_once(self, api) -> None:
        """Publishing stamps publishedAt; unpublish and republish keep it."""
        blog_id = _create(api, "cbse-results")["id"]
        headers = api.headers("admin")

        first = api.client.put(f"/api/v1/blogs/{blog_id}", json={"status": "published"}, headers=headers)
        stamped = first.json()["data"]["publishedAt"]
        assert stamped is not None

        api.client.put(f"/api/v1/blogs/{blog_id}", json={"status": "draft"}, headers=headers)
        again = api.client.put(f"/api/v1/blogs/{blog_id}", json={"status": "published"}, headers=headers)
        assert again.json()["data"]["publishedAt"] == stamped

        edited = api.client.put(f"/api/v1/blogs/{blog_id}", json={"title": "CBSE results 2026"}, headers=headers)
        assert edited.json()["data"]["publishedAt"] == stamped

    def test_client_cannot_set_published_at(self, api) -> None:
        data = _create(api, "sneaky-post", publishedAt="2001-01-01T00:00:00+00:00")
        assert data["publishedAt"] is None


class TestPublicReads:
    def test_list_only_published(self, api) -> None:
        _create(api, "public-visible", status="published", category="News")
        _create(api, "public-hidden", category="News")
        resp = api.client.get("/api/v1/blogs", params={"category": "News"})
        slugs = [b["slug"] for b in resp.json()["data"]]
        assert "public-visible" in slugs
        assert "public-hidden" not in slugs

    def test_detail_by_slug_counts_view(self, api) -> None:
        _create(api, "jee-tips", status="published")
        first = api.client.get("/api/v1/blogs/jee-tips")
        assert first.status_code == 200
        second = api.client.get("/api/v1/blogs/jee-tips")
        assert second.json()["data"]["views"] == first.json()["data"]["views"] + 1

    def test_draft_detail_is_404(self, api) -> None:
        _create(api, "not-yet")
        assert api.client.get("/api/v1/blogs/not-yet").status_code == 404

    def test_categories_public(self, api) -> None:
        _create(api, "career-paths", category="Career")
        resp = api.client.get("/api/v1/blogs/meta/categories")
        assert resp.status_code == 200
        assert "Career" in resp.json()["data"]

    def test_search(self, api) -> None:
        _create(api, "neet-cutoff", status="published", title="NEET cutoff explained")
        resp = api.client.get("/api/v1/blogs", params={"search": "cutoff"})
        assert [b["slug"] for b in resp.json()["data"]] == ["neet-cutoff"]


class TestSlugConflicts:
    def test_create_conflict(self, api) -> None:
        _create(api, "same-slug")
        resp = api.client.post("/api/v1/blogs", json=_blog_body("same-slug"), headers=api.headers("admin"))
        assert resp.status_code == 409
        assert resp.json()["message"] == "Blog with this slug already exists"

    def test_update_conflict(self, api) -> None:
        _create(api, "taken-slug")
        other = _create(api, "free-slug")
        resp = api.client.put(
            f"/api/v1/blogs/{other['id']}", json={"slug": "taken-slug"}, headers=api.headers("admin")
        )
        assert resp.status_code == 409

    def test_update_own_slug_is_fine(self, api) -> None:
        own = _create(api, "keep-slug")
        resp = api.client.put(
            f"/api/v1/blogs/{own['id']}", json={"slug": "keep-slug"}, headers=api.headers("admin")
        )
        assert resp.status_code == 200

    def test_bad_slug_pattern(self, api) -> None:
        resp = api.client.post("/api/v1/blogs", json=_blog_body("Not A Slug"), headers=api.headers("admin"))
        assert resp.status_code == 400
        assert "slug" in resp.json()["message"]


class TestAdminBlogRoutes:
    @pytest.mark.parametrize("who", ["moderator", "user"])
    def test_non_admin_forbidden(self, api, who: str) -> None:
        assert api.client.get("/api/v1/blogs/admin/all", headers=api.headers(who)).status_code == 403
        assert api.client.post("/api/v1/blogs", json=_blog_body("nope-slug"), headers=api.headers(who)).status_code == 403

    def test_admin_all_includes_drafts(self, api) -> None:
        _create(api, "admin-sees-draft")
        resp = api.client.get("/api/v1/blogs/admin/all", params={"limit": 100}, headers=api.headers("admin"))
        assert "admin-sees-draft" in [b["slug"] for b in resp.json()["data"]]

    def test_stats(self, api) -> None:
        resp = api.client.get("/api/v1/blogs/admin/stats", headers=api.headers("admin"))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["totalBlogs"] >= data["publishedBlogs"] + data["draftBlogs"]

    def test_delete_archives(self, api) -> None:
        blog = _create(api, "to-archive", status="published")
        resp = api.client.delete(f"/api/v1/blogs/{blog['id']}", headers=api.headers("admin"))
        assert resp.status_code == 200
        assert api.client.get("/api/v1/blogs/to-archive").status_code == 404
        assert api.cms.get_blog(blog["id"]).status == "archived"

    def test_featured_image_upload(self, api) -> None:
        blog = _create(api, "with-picture")
        resp = api.client.post(
            f"/api/v1/blogs/{blog['id']}/image",
            files={"image": ("hero.jpg", b"\xff\xd8\xff" + b"\x00" * 16, "image/jpeg")},
            headers=api.headers("admin"),
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["featuredImage"].endswith(".jpg")
