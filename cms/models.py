"""
cms/models.py -- Domain dataclasses for the site's catalog and editable content.

These are pure data containers with zero logic. Write-time invariants (version
bump, publish timestamp, single active popup) live in cms/effects.py; the
store applies them.

id is None before the record is written to the database. Timestamps are ISO
8601 UTC strings set by the store. created_by / updated_by / author /
last_updated_by are Account ids.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class CourseCategory(str, Enum):
    engineering = "Engineering"
    medical = "Medical"
    management = "Management"
    arts = "Arts"
    science = "Science"
    commerce = "Commerce"
    law = "Law"
    other = "Other"


class CourseStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    draft = "draft"
    deleted = "deleted"


class CollegeStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    deleted = "deleted"


class BlogCategory(str, Enum):
    education = "Education"
    career = "Career"
    admissions = "Admissions"
    tips = "Tips"
    news = "News"
    technology = "Technology"
    other = "Other"


class BlogStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class ContentPageKey(str, Enum):
    home = "home"
    about = "about"
    contact = "contact"
    footer = "footer"


@dataclass
class Fees:
    min: float
    max: float


@dataclass
class SyllabusItem:
    topic: str
    description: str


@dataclass
class Course:
    title: str
    description: str
    category: str
    duration: str
    fees: Fees
    eligibility: str
    id: Optional[int] = None
    level: Optional[str] = None
    image: str = ""
    featured: bool = False
    trending: bool = False
    rating: float = 0.0
    enrollments: int = 0
    views: int = 0
    syllabus: list[SyllabusItem] = field(default_factory=list)
    career_opportunities: list[str] = field(default_factory=list)
    top_colleges: list[int] = field(default_factory=list)
    status: str = CourseStatus.active.value
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class College:
    name: str
    description: str
    address: str
    id: Optional[int] = None
    image: str = ""
    website: Optional[str] = None
    status: str = CollegeStatus.active.value
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Blog:
    """A blog post.

    published_at is derived: set once, the first time status becomes
    "published", and never overwritten afterwards.
    """

    title: str
    slug: str
    excerpt: str
    content: str
    category: str
    id: Optional[int] = None
    featured_image: str = ""
    tags: list[str] = field(default_factory=list)
    author: Optional[int] = None
    status: str = BlogStatus.draft.value
    featured: bool = False
    views: int = 0
    likes: int = 0
    published_at: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    read_time: int = 5
    created_at: str = ""
    updated_at: str = ""

    @property
    def url(self) -> str:
        return f"/blogs/{self.slug}"


@dataclass
class Popup:
    """A promotional popup. At most one popup is active at any time."""

    title: str
    content: str
    id: Optional[int] = None
    button_text: str = "Learn More"
    button_link: Optional[str] = None
    is_active: bool = True
    display_delay: int = 30000  # milliseconds
    background_color: str = "#ffffff"
    text_color: str = "#333333"
    button_color: str = "#007bff"
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ContentPage:
    """The single current snapshot of one page's editable sections.

    sections is an opaque JSON document owned by the frontend. version starts
    at 1 and increases by exactly one each time sections changes.
    """

    page: str
    sections: Any
    last_updated_by: Optional[int] = None
    id: Optional[int] = None
    version: int = 1
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""
