"""Unit tests for cms/effects.py -- the write-time invariants, without a database.

Covers:
- popup activation emits DeactivateOtherPopups; other popup writes emit nothing
- content version: 1 on create, +1 on section change, unchanged otherwise
- blog published_at: stamped on first publish, never overwritten
- records of other types pass through untouched
"""

from cms.effects import DeactivateOtherPopups, compute_write_effects
from cms.models import Blog, College, ContentPage, Popup

NOW = "2026-01-15T10:00:00+00:00"


def _blog(**overrides) -> Blog:
    fields = dict(
        title="Entrance exams",
        slug="entrance-exams",
        excerpt="All about entrance exams.",
        content="x" * 60,
        category="Education",
    )
    fields.update(overrides)
    return Blog(**fields)


class TestPopupEffects:
    def test_create_active_deactivates_all_others(self):
        effects = compute_write_effects(None, Popup(title="Sale", content="50% off"))
        assert effects.side_effects == [DeactivateOtherPopups(keep_id=None)]

    def test_create_inactive_has_no_side_effects(self):
        effects = compute_write_effects(None, Popup(title="Sale", content="50% off", is_active=False))
        assert effects.side_effects == []

    def test_activation_keeps_self(self):
        old = Popup(id=7, title="Sale", content="50% off", is_active=False)
        new = Popup(id=7, title="Sale", content="50% off", is_active=True)
        assert compute_write_effects(old, new).side_effects == [DeactivateOtherPopups(keep_id=7)]

    def test_already_active_edit_has_no_side_effects(self):
        old = Popup(id=7, title="Sale", content="50% off", is_active=True)
        new = Popup(id=7, title="Big sale", content="50% off", is_active=True)
        assert compute_write_effects(old, new).side_effects == []

    def test_deactivation_has_no_side_effects(self):
        old = Popup(id=7, title="Sale", content="50% off", is_active=True)
        new = Popup(id=7, title="Sale", content="50% off", is_active=False)
        assert compute_write_effects(old, new).side_effects == []


class TestContentEffects:
    def test_create_starts_at_version_one(self):
        effects = compute_write_effects(None, ContentPage(page="home", sections={"a": 1}, version=9))
        assert effects.record.version == 1

    def test_changed_sections_bump_version(self):
        old = ContentPage(page="home", sections={"a": 1}, version=3)
        new = ContentPage(page="home", sections={"a": 2}, version=3)
        assert compute_write_effects(old, new).record.version == 4

    def test_identical_sections_keep_version(self):
        old = ContentPage(page="home", sections={"a": [1, 2], "b": "x"}, version=3)
        new = ContentPage(page="home", sections={"b": "x", "a": [1, 2]}, version=3)
        assert compute_write_effects(old, new).record.version == 3

    def test_metadata_only_write_keeps_version(self):
        old = ContentPage(page="home", sections={"a": 1}, version=2, is_active=True)
        new = ContentPage(page="home", sections={"a": 1}, version=2, is_active=False)
        effects = compute_write_effects(old, new)
        assert effects.record.version == 2
        assert effects.record.is_active is False


class TestBlogEffects:
    def test_create_published_stamps_now(self):
        effects = compute_write_effects(None, _blog(status="published"), now=NOW)
        assert effects.record.published_at == NOW

    def test_create_draft_leaves_empty(self):
        effects = compute_write_effects(None, _blog(), now=NOW)
        assert effects.record.published_at is None

    def test_publish_transition_stamps_now(self):
        old = _blog(id=1)
        new = _blog(id=1, status="published")
        assert compute_write_effects(old, new, now=NOW).record.published_at == NOW

    def test_republish_keeps_first_timestamp(self):
        first = "2025-06-01T00:00:00+00:00"
        old = _blog(id=1, status="draft", published_at=first)
        new = _blog(id=1, status="published", published_at=first)
        assert compute_write_effects(old, new, now=NOW).record.published_at == first

    def test_edit_while_published_keeps_timestamp(self):
        first = "2025-06-01T00:00:00+00:00"
        old = _blog(id=1, status="published", published_at=first)
        new = _blog(id=1, status="published", published_at=first, title="Renamed")
        assert compute_write_effects(old, new, now=NOW).record.published_at == first


def test_other_records_pass_through():
    college = College(name="IIT Delhi", description="Engineering", address="Hauz Khas, New Delhi")
    effects = compute_write_effects(None, college)
    assert effects.record is college
    assert effects.side_effects == []
