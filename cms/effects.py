"""
cms/effects.py -- Write-time invariants as one pure function.

Every store write path calls compute_write_effects(old, new, now) before it
persists anything. The function returns the record to write plus a list of
side-effect operations the store must apply in the same write:

  Popup        is_active being set true (on create, or false -> true)
               -> DeactivateOtherPopups(keep_id)
  ContentPage  sections changed -> version = old.version + 1
               sections unchanged (metadata-only write) -> version kept
  Blog         status enters "published" and published_at is empty
               -> published_at = now; never overwritten afterwards

old is None for inserts. Nothing here touches the database, so the rules are
tested without a store.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional

from cms.models import Blog, BlogStatus, ContentPage, Popup


@dataclass(frozen=True)
class DeactivateOtherPopups:
    """Set is_active=false on every popup except keep_id (None = all existing)."""

    keep_id: Optional[int] = None


@dataclass
class WriteEffects:
    record: Any
    side_effects: list = field(default_factory=list)


def compute_write_effects(old: Any, new: Any, now: Optional[str] = None) -> WriteEffects:
    """Return the final record and the side effects for writing new over old."""
    now = now or datetime.now(timezone.utc).isoformat()
    if isinstance(new, Popup):
        return _popup_effects(old, new)
    if isinstance(new, ContentPage):
        return _content_effects(old, new)
    if isinstance(new, Blog):
        return _blog_effects(old, new, now)
    return WriteEffects(record=new)


def _popup_effects(old: Optional[Popup], new: Popup) -> WriteEffects:
    activating = new.is_active and (old is None or not old.is_active)
    if not activating:
        return WriteEffects(record=new)
    return WriteEffects(record=new, side_effects=[DeactivateOtherPopups(keep_id=new.id)])


def _content_effects(old: Optional[ContentPage], new: ContentPage) -> WriteEffects:
    if old is None:
        return WriteEffects(record=replace(new, version=1))
    # Structural comparison: dict/list equality ignores key order and identity.
    if new.sections != old.sections:
        return WriteEffects(record=replace(new, version=old.version + 1))
    return WriteEffects(record=replace(new, version=old.version))


def _blog_effects(old: Optional[Blog], new: Blog, now: str) -> WriteEffects:
    was_published = old is not None and old.status == BlogStatus.published.value
    if new.status == BlogStatus.published.value and not was_published and not new.published_at:
        return WriteEffects(record=replace(new, published_at=now))
    return WriteEffects(record=new)
