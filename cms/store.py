"""
cms/store.py -- SQLAlchemy-backed persistence layer for site content.

Uses SQLAlchemy Core (not ORM) so the domain dataclasses in cms/models.py
remain the authoritative domain representation.

Pattern: Repository + Data Mapper. CMSStore is the repository (one clean
interface per entity). The _row_to_* functions are the mappers (they translate
raw DB rows into domain dataclasses). Route handlers never touch SQL directly.

Write path: every insert/update builds the candidate record, runs
cms.effects.compute_write_effects(old, new), applies the returned side effects
and writes the final record inside one engine.begin() transaction. No other
code path writes popups, content pages or blogs.

Soft delete: courses and colleges move to status "deleted", blogs to
"archived". Popups and content pages are removed outright.

Nested fields (fees, syllabus, tags, sections, ...) are stored as JSON text.

Security: all queries use bound parameters. No f-strings in SQL. Search terms
are bound into ILIKE patterns, never interpolated.

Usage:
    store = CMSStore()                               # DATABASE_URL from settings
    store = CMSStore("postgresql://user:pw@host/db") # explicit URL
    course_id = store.create_course(course)
    store.soft_delete_course(course_id, actor_id=1)
    store.close()
"""

import json
from dataclasses import asdict, replace
from typing import Any, Callable, Optional

from sqlalchemy import (
    Column,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    and_,
    func,
    select,
)
from sqlalchemy.engine import Connection, Engine

from cms.effects import DeactivateOtherPopups, compute_write_effects
from cms.models import (
    Blog,
    BlogStatus,
    College,
    CollegeStatus,
    ContentPage,
    Course,
    CourseStatus,
    Fees,
    Popup,
    SyllabusItem,
)
from core.config import get_settings
from core.db import make_engine, now_iso
from core.pagination import PageResult, contains_any, fetch_page, order_clause

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_courses = Table(
    "courses",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(100), nullable=False),
    Column("description", Text, nullable=False),
    Column("category", String(50), nullable=False),
    Column("level", String(50)),
    Column("duration", String(50), nullable=False),
    Column("fees_min", Float, nullable=False),
    Column("fees_max", Float, nullable=False),
    Column("eligibility", Text, nullable=False),
    Column("image", Text, nullable=False, server_default=""),
    Column("featured", Integer, nullable=False, server_default="0"),
    Column("trending", Integer, nullable=False, server_default="0"),
    Column("rating", Float, nullable=False, server_default="0"),
    Column("enrollments", Integer, nullable=False, server_default="0"),
    Column("views", Integer, nullable=False, server_default="0"),
    Column("syllabus", Text, nullable=False, server_default="[]"),  # JSON [{topic, description}]
    Column("career_opportunities", Text, nullable=False, server_default="[]"),  # JSON [str]
    Column("top_colleges", Text, nullable=False, server_default="[]"),  # JSON [college id]
    Column("status", String(20), nullable=False, server_default="active"),
    Column("created_by", Integer),
    Column("updated_by", Integer),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_colleges = Table(
    "colleges",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("description", Text, nullable=False),
    Column("address", Text, nullable=False),
    Column("image", Text, nullable=False, server_default=""),
    Column("website", String(500)),
    Column("status", String(20), nullable=False, server_default="active"),
    Column("created_by", Integer),
    Column("updated_by", Integer),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_blogs = Table(
    "blogs",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(200), nullable=False),
    Column("slug", String(200), nullable=False, unique=True),
    Column("excerpt", String(300), nullable=False),
    Column("content", Text, nullable=False),
    Column("featured_image", Text, nullable=False, server_default=""),
    Column("category", String(50), nullable=False),
    Column("tags", Text, nullable=False, server_default="[]"),  # JSON [str]
    Column("author", Integer),
    Column("status", String(20), nullable=False, server_default="draft"),
    Column("featured", Integer, nullable=False, server_default="0"),
    Column("views", Integer, nullable=False, server_default="0"),
    Column("likes", Integer, nullable=False, server_default="0"),
    Column("published_at", String(32)),
    Column("seo_title", String(200)),
    Column("seo_description", String(160)),
    Column("read_time", Integer, nullable=False, server_default="5"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_popups = Table(
    "popups",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(200), nullable=False),
    Column("content", Text, nullable=False),
    Column("button_text", String(100), nullable=False, server_default="Learn More"),
    Column("button_link", Text),
    Column("is_active", Integer, nullable=False, server_default="1"),
    Column("display_delay", Integer, nullable=False, server_default="30000"),
    Column("background_color", String(20), nullable=False, server_default="#ffffff"),
    Column("text_color", String(20), nullable=False, server_default="#333333"),
    Column("button_color", String(20), nullable=False, server_default="#007bff"),
    Column("created_by", Integer),
    Column("updated_by", Integer),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_content_pages = Table(
    "content_pages",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("page", String(20), nullable=False, unique=True),
    Column("sections", Text, nullable=False),  # opaque JSON document
    Column("last_updated_by", Integer),
    Column("version", Integer, nullable=False, server_default="1"),
    Column("is_active", Integer, nullable=False, server_default="1"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

# API sort keys -> column names, per table
_COURSE_SORTABLE = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "rating": "rating",
    "enrollments": "enrollments",
    "feesMin": "fees_min",
}
_COLLEGE_SORTABLE = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": "name",
}
_BLOG_SORTABLE = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "publishedAt": "published_at",
    "title": "title",
    "views": "views",
    "likes": "likes",
}


def _split_sort(sort: Optional[str]) -> tuple[Optional[str], str]:
    """'-publishedAt' -> ('publishedAt', 'desc'); 'title' -> ('title', 'asc')."""
    if not sort:
        return None, "desc"
    if sort.startswith("-"):
        return sort[1:], "desc"
    return sort, "asc"


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CMSStore:
    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Shared write plumbing
    # ------------------------------------------------------------------

    def _apply_side_effects(self, conn: Connection, side_effects: list) -> None:
        for op in side_effects:
            if isinstance(op, DeactivateOtherPopups):
                stmt = _popups.update().values(is_active=0, updated_at=now_iso())
                if op.keep_id is not None:
                    stmt = stmt.where(_popups.c.id != op.keep_id)
                conn.execute(stmt)
            else:
                raise ValueError(f"Unknown side effect: {op!r}")

    def _insert(self, table: Table, record: Any, to_values: Callable[[Any], dict]) -> int:
        effects = compute_write_effects(None, record)
        now = now_iso()
        values = to_values(effects.record)
        values.update(created_at=now, updated_at=now)
        with self.engine.begin() as conn:
            self._apply_side_effects(conn, effects.side_effects)
            result = conn.execute(table.insert().values(**values))
            return result.inserted_primary_key[0]

    def _update(
        self,
        table: Table,
        old: Any,
        fields: dict,
        to_values: Callable[[Any], dict],
    ) -> None:
        effects = compute_write_effects(old, replace(old, **fields))
        values = to_values(effects.record)
        values["updated_at"] = now_iso()
        with self.engine.begin() as conn:
            self._apply_side_effects(conn, effects.side_effects)
            conn.execute(table.update().where(table.c.id == old.id).values(**values))

    def _get(self, table: Table, record_id: int, mapper: Callable[[Any], Any]) -> Any:
        with self.engine.connect() as conn:
            row = conn.execute(table.select().where(table.c.id == record_id)).fetchone()
        return mapper(row) if row is not None else None

    def _count(self, table: Table, *conditions) -> int:
        stmt = select(func.count()).select_from(table)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        with self.engine.connect() as conn:
            return conn.execute(stmt).scalar() or 0

    def _daily_created(self, table: Table, since: str, *conditions) -> list[dict]:
        day = func.substr(table.c.created_at, 1, 10)
        stmt = (
            select(day.label("date"), func.count().label("n"))
            .where(and_(table.c.created_at >= since, *conditions))
            .group_by(day)
            .order_by(day)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [{"date": r.date, "count": r.n} for r in rows]

    def _select(self, stmt, mapper: Callable[[Any], Any]) -> list:
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [mapper(r) for r in rows]

    def _bump(self, table: Table, record_id: int, column: str) -> None:
        with self.engine.connect() as conn:
            conn.execute(
                table.update().where(table.c.id == record_id).values({column: table.c[column] + 1})
            )
            conn.commit()

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------

    def create_course(self, course: Course) -> int:
        return self._insert(_courses, course, _course_values)

    def get_course(self, course_id: int, include_deleted: bool = False) -> Optional[Course]:
        course = self._get(_courses, course_id, _row_to_course)
        if course is not None and course.status == CourseStatus.deleted.value and not include_deleted:
            return None
        return course

    def list_courses(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        level: Optional[str] = None,
        featured: Optional[bool] = None,
        trending: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "desc",
        status: str = CourseStatus.active.value,
    ) -> PageResult[Course]:
        """One page of courses. Public callers only ever see status "active"."""
        conditions = [_courses.c.status == status]
        if category:
            conditions.append(contains_any(category, _courses.c.category))
        if level:
            conditions.append(_courses.c.level == level)
        if featured is not None:
            conditions.append(_courses.c.featured == (1 if featured else 0))
        if trending is not None:
            conditions.append(_courses.c.trending == (1 if trending else 0))
        if search:
            conditions.append(
                contains_any(search, _courses.c.title, _courses.c.description, _courses.c.category)
            )
        return fetch_page(
            self.engine,
            _courses,
            _row_to_course,
            page=page,
            limit=limit,
            where=and_(*conditions),
            order_by=order_clause(_courses, sort_by, sort_order, _COURSE_SORTABLE),
        )

    def update_course(self, course_id: int, actor_id: int, **fields) -> Optional[Course]:
        """Apply a partial update. Returns the updated course, or None if not found."""
        old = self.get_course(course_id)
        if old is None:
            return None
        if isinstance(fields.get("fees"), dict):
            fields["fees"] = Fees(**fields["fees"])
        if "syllabus" in fields:
            fields["syllabus"] = [_as_syllabus(s) for s in fields["syllabus"]]
        self._update(_courses, old, {**fields, "updated_by": actor_id}, _course_values)
        return self.get_course(course_id)

    def soft_delete_course(self, course_id: int, actor_id: int) -> bool:
        old = self.get_course(course_id)
        if old is None:
            return False
        self._update(
            _courses, old, {"status": CourseStatus.deleted.value, "updated_by": actor_id}, _course_values
        )
        return True

    def increment_course_views(self, course_id: int) -> None:
        self._bump(_courses, course_id, "views")

    def count_courses(self, status: str = CourseStatus.active.value, since: Optional[str] = None) -> int:
        conditions = [_courses.c.status == status]
        if since:
            conditions.append(_courses.c.created_at >= since)
        return self._count(_courses, *conditions)

    def course_counts_by_category(self, limit: int = 10) -> list[dict]:
        stmt = (
            select(_courses.c.category, func.count().label("n"))
            .where(_courses.c.status == CourseStatus.active.value)
            .group_by(_courses.c.category)
            .order_by(func.count().desc())
            .limit(limit)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [{"category": r.category, "count": r.n} for r in rows]

    def daily_courses(self, since: str) -> list[dict]:
        return self._daily_created(_courses, since, _courses.c.status == CourseStatus.active.value)

    def latest_courses(self, limit: int = 5) -> list[Course]:
        stmt = (
            _courses.select()
            .where(_courses.c.status == CourseStatus.active.value)
            .order_by(_courses.c.created_at.desc(), _courses.c.id.desc())
            .limit(limit)
        )
        return self._select(stmt, _row_to_course)

    def top_courses(self, limit: int = 10) -> list[Course]:
        """Best-rated active courses, enrollments as tiebreaker."""
        stmt = (
            _courses.select()
            .where(_courses.c.status == CourseStatus.active.value)
            .order_by(_courses.c.rating.desc(), _courses.c.enrollments.desc())
            .limit(limit)
        )
        return self._select(stmt, _row_to_course)

    # ------------------------------------------------------------------
    # Colleges
    # ------------------------------------------------------------------

    def create_college(self, college: College) -> int:
        """Raises sqlalchemy.exc.IntegrityError if the name is taken."""
        return self._insert(_colleges, college, _college_values)

    def get_college(self, college_id: int, include_deleted: bool = False) -> Optional[College]:
        college = self._get(_colleges, college_id, _row_to_college)
        if college is not None and college.status == CollegeStatus.deleted.value and not include_deleted:
            return None
        return college

    def list_colleges(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "desc",
        status: str = CollegeStatus.active.value,
    ) -> PageResult[College]:
        """One page of colleges. search matches name, description or address."""
        conditions = [_colleges.c.status == status]
        if search:
            conditions.append(
                contains_any(search, _colleges.c.name, _colleges.c.description, _colleges.c.address)
            )
        return fetch_page(
            self.engine,
            _colleges,
            _row_to_college,
            page=page,
            limit=limit,
            where=and_(*conditions),
            order_by=order_clause(_colleges, sort_by, sort_order, _COLLEGE_SORTABLE),
        )

    def update_college(self, college_id: int, actor_id: int, **fields) -> Optional[College]:
        old = self.get_college(college_id)
        if old is None:
            return None
        self._update(_colleges, old, {**fields, "updated_by": actor_id}, _college_values)
        return self.get_college(college_id)

    def soft_delete_college(self, college_id: int, actor_id: int) -> bool:
        old = self.get_college(college_id)
        if old is None:
            return False
        self._update(
            _colleges, old, {"status": CollegeStatus.deleted.value, "updated_by": actor_id}, _college_values
        )
        return True

    def count_colleges(self, status: str = CollegeStatus.active.value, since: Optional[str] = None) -> int:
        conditions = [_colleges.c.status == status]
        if since:
            conditions.append(_colleges.c.created_at >= since)
        return self._count(_colleges, *conditions)

    def daily_colleges(self, since: str) -> list[dict]:
        return self._daily_created(_colleges, since, _colleges.c.status == CollegeStatus.active.value)

    def latest_colleges(self, limit: int = 5) -> list[College]:
        stmt = (
            _colleges.select()
            .where(_colleges.c.status == CollegeStatus.active.value)
            .order_by(_colleges.c.created_at.desc(), _colleges.c.id.desc())
            .limit(limit)
        )
        return self._select(stmt, _row_to_college)

    # ------------------------------------------------------------------
    # Blogs
    # ------------------------------------------------------------------

    def create_blog(self, blog: Blog) -> int:
        """Raises sqlalchemy.exc.IntegrityError if the slug is taken."""
        return self._insert(_blogs, blog, _blog_values)

    def get_blog(self, blog_id: int) -> Optional[Blog]:
        return self._get(_blogs, blog_id, _row_to_blog)

    def get_blog_by_slug(self, slug: str, published_only: bool = True) -> Optional[Blog]:
        stmt = _blogs.select().where(_blogs.c.slug == slug)
        if published_only:
            stmt = stmt.where(_blogs.c.status == BlogStatus.published.value)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_blog(row) if row is not None else None

    def slug_taken(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        conditions = [_blogs.c.slug == slug]
        if exclude_id is not None:
            conditions.append(_blogs.c.id != exclude_id)
        return self._count(_blogs, *conditions) > 0

    def list_blogs(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = BlogStatus.published.value,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        sort: Optional[str] = "-publishedAt",
    ) -> PageResult[Blog]:
        """One page of blogs. status=None lists every status (admin view).

        sort is a single key with an optional leading '-' for descending.
        """
        conditions = []
        if status:
            conditions.append(_blogs.c.status == status)
        if category and category != "all":
            conditions.append(_blogs.c.category == category)
        if featured is not None:
            conditions.append(_blogs.c.featured == (1 if featured else 0))
        if search:
            conditions.append(contains_any(search, _blogs.c.title, _blogs.c.content, _blogs.c.excerpt))
        sort_by, sort_order = _split_sort(sort)
        return fetch_page(
            self.engine,
            _blogs,
            _row_to_blog,
            page=page,
            limit=limit,
            where=and_(*conditions) if conditions else None,
            order_by=order_clause(_blogs, sort_by, sort_order, _BLOG_SORTABLE),
        )

    def update_blog(self, blog_id: int, **fields) -> Optional[Blog]:
        """Raises sqlalchemy.exc.IntegrityError if a new slug collides."""
        old = self.get_blog(blog_id)
        if old is None:
            return None
        self._update(_blogs, old, fields, _blog_values)
        return self.get_blog(blog_id)

    def archive_blog(self, blog_id: int) -> bool:
        old = self.get_blog(blog_id)
        if old is None:
            return False
        self._update(_blogs, old, {"status": BlogStatus.archived.value}, _blog_values)
        return True

    def increment_blog_views(self, blog_id: int) -> None:
        self._bump(_blogs, blog_id, "views")

    def blog_categories(self) -> list[str]:
        stmt = select(_blogs.c.category).distinct().order_by(_blogs.c.category)
        with self.engine.connect() as conn:
            return [r.category for r in conn.execute(stmt).fetchall()]

    def blog_stats(self) -> dict:
        with self.engine.connect() as conn:
            total_views = conn.execute(select(func.coalesce(func.sum(_blogs.c.views), 0))).scalar()
        return {
            "total_blogs": self._count(_blogs),
            "published_blogs": self._count(_blogs, _blogs.c.status == BlogStatus.published.value),
            "draft_blogs": self._count(_blogs, _blogs.c.status == BlogStatus.draft.value),
            "featured_blogs": self._count(_blogs, _blogs.c.featured == 1),
            "total_views": int(total_views or 0),
        }

    # ------------------------------------------------------------------
    # Popups
    # ------------------------------------------------------------------

    def create_popup(self, popup: Popup) -> int:
        """Insert a popup. If it is created active, every other popup is deactivated."""
        return self._insert(_popups, popup, _popup_values)

    def get_popup(self, popup_id: int) -> Optional[Popup]:
        return self._get(_popups, popup_id, _row_to_popup)

    def get_active_popup(self) -> Optional[Popup]:
        # Newest first, so a transiently violated invariant still yields one answer.
        stmt = (
            _popups.select()
            .where(_popups.c.is_active == 1)
            .order_by(_popups.c.updated_at.desc(), _popups.c.id.desc())
            .limit(1)
        )
        rows = self._select(stmt, _row_to_popup)
        return rows[0] if rows else None

    def list_popups(self, *, page: int = 1, limit: int = 10) -> PageResult[Popup]:
        return fetch_page(
            self.engine,
            _popups,
            _row_to_popup,
            page=page,
            limit=limit,
            order_by=_popups.c.created_at.desc(),
        )

    def update_popup(self, popup_id: int, actor_id: int, **fields) -> Optional[Popup]:
        old = self.get_popup(popup_id)
        if old is None:
            return None
        self._update(_popups, old, {**fields, "updated_by": actor_id}, _popup_values)
        return self.get_popup(popup_id)

    def toggle_popup(self, popup_id: int, actor_id: int) -> Optional[Popup]:
        """Flip is_active. Activation re-applies the single-active rule."""
        old = self.get_popup(popup_id)
        if old is None:
            return None
        return self.update_popup(popup_id, actor_id, is_active=not old.is_active)

    def delete_popup(self, popup_id: int) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(_popups.delete().where(_popups.c.id == popup_id))
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Content pages
    # ------------------------------------------------------------------

    def get_content(self, page: str, active_only: bool = False) -> Optional[ContentPage]:
        stmt = _content_pages.select().where(_content_pages.c.page == page)
        if active_only:
            stmt = stmt.where(_content_pages.c.is_active == 1)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_content(row) if row is not None else None

    def list_content(self) -> list[ContentPage]:
        return self._select(_content_pages.select().order_by(_content_pages.c.updated_at.desc()), _row_to_content)

    def save_content(
        self,
        page: str,
        actor_id: int,
        sections: Any = None,
        is_active: Optional[bool] = None,
    ) -> tuple[ContentPage, bool]:
        """Create or update the snapshot for page. Returns (snapshot, created).

        sections=None means "not supplied": allowed on update (metadata-only
        write, version unchanged), rejected on create.
        """
        old = self.get_content(page)
        if old is None:
            if sections is None:
                raise ValueError("sections are required to create a content page")
            new = ContentPage(
                page=page,
                sections=sections,
                last_updated_by=actor_id,
                is_active=True if is_active is None else is_active,
            )
            self._insert(_content_pages, new, _content_values)
            return self.get_content(page), True

        fields: dict = {"last_updated_by": actor_id}
        if sections is not None:
            fields["sections"] = sections
        if is_active is not None:
            fields["is_active"] = is_active
        self._update(_content_pages, old, fields, _content_values)
        return self.get_content(page), False

    def delete_content(self, page: str) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(_content_pages.delete().where(_content_pages.c.page == page))
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(select(1))
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Value builders (dataclass -> column dict) and row mappers (row -> dataclass)
# ---------------------------------------------------------------------------


def _as_syllabus(item: Any) -> SyllabusItem:
    return item if isinstance(item, SyllabusItem) else SyllabusItem(**item)


def _course_values(c: Course) -> dict:
    return {
        "title": c.title,
        "description": c.description,
        "category": c.category,
        "level": c.level,
        "duration": c.duration,
        "fees_min": c.fees.min,
        "fees_max": c.fees.max,
        "eligibility": c.eligibility,
        "image": c.image or "",
        "featured": 1 if c.featured else 0,
        "trending": 1 if c.trending else 0,
        "rating": c.rating,
        "enrollments": c.enrollments,
        "views": c.views,
        "syllabus": json.dumps([asdict(_as_syllabus(s)) for s in c.syllabus]),
        "career_opportunities": json.dumps(c.career_opportunities),
        "top_colleges": json.dumps(c.top_colleges),
        "status": c.status,
        "created_by": c.created_by,
        "updated_by": c.updated_by,
    }


def _row_to_course(row) -> Course:
    return Course(
        id=row.id,
        title=row.title,
        description=row.description,
        category=row.category,
        level=row.level,
        duration=row.duration,
        fees=Fees(min=row.fees_min, max=row.fees_max),
        eligibility=row.eligibility,
        image=row.image or "",
        featured=bool(row.featured),
        trending=bool(row.trending),
        rating=row.rating,
        enrollments=row.enrollments,
        views=row.views,
        syllabus=[SyllabusItem(**s) for s in json.loads(row.syllabus or "[]")],
        career_opportunities=json.loads(row.career_opportunities or "[]"),
        top_colleges=json.loads(row.top_colleges or "[]"),
        status=row.status,
        created_by=row.created_by,
        updated_by=row.updated_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _college_values(c: College) -> dict:
    return {
        "name": c.name,
        "description": c.description,
        "address": c.address,
        "image": c.image or "",
        "website": c.website,
        "status": c.status,
        "created_by": c.created_by,
        "updated_by": c.updated_by,
    }


def _row_to_college(row) -> College:
    return College(
        id=row.id,
        name=row.name,
        description=row.description,
        address=row.address,
        image=row.image or "",
        website=row.website,
        status=row.status,
        created_by=row.created_by,
        updated_by=row.updated_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _blog_values(b: Blog) -> dict:
    return {
        "title": b.title,
        "slug": b.slug,
        "excerpt": b.excerpt,
        "content": b.content,
        "featured_image": b.featured_image or "",
        "category": b.category,
        "tags": json.dumps(b.tags),
        "author": b.author,
        "status": b.status,
        "featured": 1 if b.featured else 0,
        "views": b.views,
        "likes": b.likes,
        "published_at": b.published_at,
        "seo_title": b.seo_title,
        "seo_description": b.seo_description,
        "read_time": b.read_time,
    }


def _row_to_blog(row) -> Blog:
    return Blog(
        id=row.id,
        title=row.title,
        slug=row.slug,
        excerpt=row.excerpt,
        content=row.content,
        featured_image=row.featured_image or "",
        category=row.category,
        tags=json.loads(row.tags or "[]"),
        author=row.author,
        status=row.status,
        featured=bool(row.featured),
        views=row.views,
        likes=row.likes,
        published_at=row.published_at,
        seo_title=row.seo_title,
        seo_description=row.seo_description,
        read_time=row.read_time,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _popup_values(p: Popup) -> dict:
    return {
        "title": p.title,
        "content": p.content,
        "button_text": p.button_text,
        "button_link": p.button_link,
        "is_active": 1 if p.is_active else 0,
        "display_delay": p.display_delay,
        "background_color": p.background_color,
        "text_color": p.text_color,
        "button_color": p.button_color,
        "created_by": p.created_by,
        "updated_by": p.updated_by,
    }


def _row_to_popup(row) -> Popup:
    return Popup(
        id=row.id,
        title=row.title,
        content=row.content,
        button_text=row.button_text,
        button_link=row.button_link,
        is_active=bool(row.is_active),
        display_delay=row.display_delay,
        background_color=row.background_color,
        text_color=row.text_color,
        button_color=row.button_color,
        created_by=row.created_by,
        updated_by=row.updated_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _content_values(c: ContentPage) -> dict:
    return {
        "page": c.page,
        "sections": json.dumps(c.sections),
        "last_updated_by": c.last_updated_by,
        "version": c.version,
        "is_active": 1 if c.is_active else 0,
    }


def _row_to_content(row) -> ContentPage:
    return ContentPage(
        id=row.id,
        page=row.page,
        sections=json.loads(row.sections),
        last_updated_by=row.last_updated_by,
        version=row.version,
        is_active=bool(row.is_active),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
