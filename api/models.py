"""
API request and response models for the Admissionshala REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
cms/models.py, which own the internal domain representation. Route handlers
map between the two.

Wire format: JSON keys are camelCase (alias_generator=to_camel); Python
attributes stay snake_case. populate_by_name=True lets tests and handlers
build models with either spelling.

Every success body is an envelope: {success, message?, data?, pagination?}.
Every failure body is an ErrorResponse: {success: false, message, error, errors?}.

Separation of concerns: domain dataclasses = domain truth; api/ models = API contract.
"""

from dataclasses import asdict
from typing import Any, ClassVar, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from auth.models import Account, Permission, Role
from auth.permissions import effective_permissions, sorted_permissions
from cms.models import BlogCategory, BlogStatus, CourseCategory
from core.pagination import PageResult

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"
PHONE_PATTERN = r"^[6-9]\d{9}$"
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

# "deleted" is reached only through DELETE, never written directly.
_CourseWriteStatus = Literal["active", "inactive", "draft"]
_CollegeWriteStatus = Literal["active", "inactive"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Base for request bodies: trims strings, stores enum values as plain str."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
    )


class UpdateModel(RequestModel):
    """Base for partial-update bodies: omitted fields are untouched.

    An explicit null is refused unless the field is listed in _nullable,
    so a NOT NULL column can never be cleared through a PUT.
    """

    model_config = ConfigDict(validate_default=False)

    _nullable: ClassVar[frozenset[str]] = frozenset()

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name not in cls._nullable:
            raise ValueError("may not be null")
        return value


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_page(cls, result: PageResult) -> "PaginationMeta":
        return cls(
            current_page=result.page,
            total_pages=result.total_pages,
            total_items=result.total,
            items_per_page=result.limit,
            has_next_page=result.has_next,
            has_prev_page=result.has_prev,
        )


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PagedResponse(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: list[T]
    pagination: PaginationMeta


class FieldError(CamelModel):
    """One violated constraint: which field, and what was wrong with it."""

    field: str
    message: str
    location: str = "body"


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    message: str
    error: ErrorDetail
    errors: Optional[list[FieldError]] = None


class HealthResponse(CamelModel):
    """Response for GET /api/v1/health."""

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class RegisterRequest(RequestModel):
    name: str = Field(min_length=1, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)


class LoginRequest(RequestModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class ChangePasswordRequest(RequestModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=6, max_length=128)


class AccountCreate(RequestModel):
    """Request body for POST /api/v1/admin/users."""

    name: str = Field(min_length=1, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    role: Role = Role.user
    permissions: list[Permission] = Field(default_factory=list)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    is_active: bool = True


class AccountUpdate(UpdateModel):
    """Request body for PUT /api/v1/admin/users/{id}. Omitted fields are untouched."""

    _nullable: ClassVar[frozenset[str]] = frozenset({"phone"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    role: Optional[Role] = None
    permissions: Optional[list[Permission]] = None
    is_active: Optional[bool] = None
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    avatar: Optional[str] = Field(default=None, max_length=500)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)


class AccountResponse(CamelModel):
    """Public view of an Account. The password hash never leaves the store."""

    id: int
    name: str
    email: str
    role: str
    permissions: list[str]
    effective_permissions: list[str]
    is_active: bool
    avatar: str = ""
    phone: Optional[str] = None
    last_login: Optional[str] = None
    created_at: str = ""

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            role=account.role,
            permissions=sorted(account.permissions),
            effective_permissions=sorted_permissions(effective_permissions(account)),
            is_active=account.is_active,
            avatar=account.avatar,
            phone=account.phone,
            last_login=account.last_login,
            created_at=account.created_at or "",
        )


class AuthPayload(CamelModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: AccountResponse


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


class FeesModel(RequestModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "FeesModel":
        if self.min > self.max:
            raise ValueError("fees.min must not exceed fees.max")
        return self


class SyllabusItemModel(RequestModel):
    topic: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)


class CourseCreate(RequestModel):
    """Request body for POST /api/v1/courses."""

    title: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=3, max_length=1000)
    category: CourseCategory
    level: Optional[str] = Field(default=None, max_length=50)
    duration: str = Field(min_length=1, max_length=50)
    fees: FeesModel
    eligibility: str = Field(min_length=5, max_length=500)
    image: str = Field(default="", max_length=500)
    featured: bool = False
    trending: bool = False
    rating: float = Field(default=0, ge=0, le=5)
    syllabus: list[SyllabusItemModel] = Field(default_factory=list)
    career_opportunities: list[str] = Field(default_factory=list)
    top_colleges: list[int] = Field(default_factory=list)
    status: _CourseWriteStatus = "active"


class CourseUpdate(UpdateModel):
    """Request body for PUT /api/v1/courses/{id}. Omitted fields are untouched."""

    _nullable: ClassVar[frozenset[str]] = frozenset({"level"})

    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, min_length=3, max_length=1000)
    category: Optional[CourseCategory] = None
    level: Optional[str] = Field(default=None, max_length=50)
    duration: Optional[str] = Field(default=None, min_length=1, max_length=50)
    fees: Optional[FeesModel] = None
    eligibility: Optional[str] = Field(default=None, min_length=5, max_length=500)
    image: Optional[str] = Field(default=None, max_length=500)
    featured: Optional[bool] = None
    trending: Optional[bool] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    syllabus: Optional[list[SyllabusItemModel]] = None
    career_opportunities: Optional[list[str]] = None
    top_colleges: Optional[list[int]] = None
    status: Optional[_CourseWriteStatus] = None


class CourseResponse(CamelModel):
    id: int
    title: str
    description: str
    category: str
    level: Optional[str] = None
    duration: str
    fees: FeesModel
    eligibility: str
    image: str = ""
    featured: bool
    trending: bool
    rating: float
    enrollments: int
    views: int
    syllabus: list[SyllabusItemModel]
    career_opportunities: list[str]
    top_colleges: list[int]
    status: str
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: str
    updated_at: str


# ---------------------------------------------------------------------------
# Colleges
# ---------------------------------------------------------------------------


def _check_website(value: Optional[str]) -> Optional[str]:
    if value and not value.startswith(("http://", "https://")):
        raise ValueError("Website must be a valid URL starting with http:// or https://")
    return value


class CollegeCreate(RequestModel):
    """Request body for POST /api/v1/colleges."""

    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=5000)
    address: str = Field(min_length=1, max_length=500)
    image: str = Field(default="", max_length=500)
    website: Optional[str] = Field(default=None, max_length=500)
    status: _CollegeWriteStatus = "active"

    @field_validator("website")
    @classmethod
    def check_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_website(value)


class CollegeUpdate(UpdateModel):
    _nullable: ClassVar[frozenset[str]] = frozenset({"website"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    address: Optional[str] = Field(default=None, min_length=1, max_length=500)
    image: Optional[str] = Field(default=None, max_length=500)
    website: Optional[str] = Field(default=None, max_length=500)
    status: Optional[_CollegeWriteStatus] = None

    @field_validator("website")
    @classmethod
    def check_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_website(value)


class CollegeResponse(CamelModel):
    id: int
    name: str
    description: str
    address: str
    image: str = ""
    website: Optional[str] = None
    status: str
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: str
    updated_at: str


class CollegeStats(CamelModel):
    total_colleges: int
    recent_colleges: int


# ---------------------------------------------------------------------------
# Blogs
# ---------------------------------------------------------------------------


class BlogCreate(RequestModel):
    """Request body for POST /api/v1/blogs.

    published_at is not accepted: it is stamped the first time status becomes
    "published".
    """

    title: str = Field(min_length=3, max_length=200)
    slug: str = Field(min_length=3, max_length=200, pattern=SLUG_PATTERN)
    excerpt: str = Field(min_length=10, max_length=300)
    content: str = Field(min_length=50)
    category: BlogCategory
    featured_image: str = Field(default="", max_length=500)
    tags: list[str] = Field(default_factory=list, max_length=20)
    status: BlogStatus = BlogStatus.draft
    featured: bool = False
    seo_title: Optional[str] = Field(default=None, max_length=200)
    seo_description: Optional[str] = Field(default=None, max_length=160)
    read_time: int = Field(default=5, ge=1, le=240)


class BlogUpdate(UpdateModel):
    _nullable: ClassVar[frozenset[str]] = frozenset({"seo_title", "seo_description"})

    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    slug: Optional[str] = Field(default=None, min_length=3, max_length=200, pattern=SLUG_PATTERN)
    excerpt: Optional[str] = Field(default=None, min_length=10, max_length=300)
    content: Optional[str] = Field(default=None, min_length=50)
    category: Optional[BlogCategory] = None
    featured_image: Optional[str] = Field(default=None, max_length=500)
    tags: Optional[list[str]] = Field(default=None, max_length=20)
    status: Optional[BlogStatus] = None
    featured: Optional[bool] = None
    seo_title: Optional[str] = Field(default=None, max_length=200)
    seo_description: Optional[str] = Field(default=None, max_length=160)
    read_time: Optional[int] = Field(default=None, ge=1, le=240)


class BlogResponse(CamelModel):
    id: int
    title: str
    slug: str
    url: str
    excerpt: str
    content: str
    featured_image: str = ""
    category: str
    tags: list[str]
    author: Optional[int] = None
    status: str
    featured: bool
    views: int
    likes: int
    published_at: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    read_time: int
    created_at: str
    updated_at: str

    @classmethod
    def from_blog(cls, blog) -> "BlogResponse":
        return cls.model_validate({**asdict(blog), "url": blog.url})


class BlogStats(CamelModel):
    total_blogs: int
    published_blogs: int
    draft_blogs: int
    featured_blogs: int
    total_views: int


# ---------------------------------------------------------------------------
# Popups
# ---------------------------------------------------------------------------


class PopupCreate(RequestModel):
    """Request body for POST /api/v1/popup."""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=5000)
    button_text: str = Field(default="Learn More", max_length=100)
    button_link: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    display_delay: int = Field(default=30000, ge=5000, le=120000)
    background_color: str = Field(default="#ffffff", max_length=20)
    text_color: str = Field(default="#333333", max_length=20)
    button_color: str = Field(default="#007bff", max_length=20)


class PopupUpdate(UpdateModel):
    _nullable: ClassVar[frozenset[str]] = frozenset({"button_link"})

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    button_text: Optional[str] = Field(default=None, max_length=100)
    button_link: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    display_delay: Optional[int] = Field(default=None, ge=5000, le=120000)
    background_color: Optional[str] = Field(default=None, max_length=20)
    text_color: Optional[str] = Field(default=None, max_length=20)
    button_color: Optional[str] = Field(default=None, max_length=20)


class PopupResponse(CamelModel):
    id: int
    title: str
    content: str
    button_text: str
    button_link: Optional[str] = None
    is_active: bool
    display_delay: int
    background_color: str
    text_color: str
    button_color: str
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: str
    updated_at: str


# ---------------------------------------------------------------------------
# Content pages
# ---------------------------------------------------------------------------


class ContentSave(RequestModel):
    """Request body for POST /api/v1/content/{page}.

    sections is required when the page does not exist yet; the handler
    enforces that because only the store knows.
    """

    sections: Optional[Any] = None
    is_active: Optional[bool] = None


class ContentResponse(CamelModel):
    id: int
    page: str
    sections: Any
    last_updated_by: Optional[int] = None
    version: int
    is_active: bool
    created_at: str
    updated_at: str


class ContentHistory(CamelModel):
    page: str
    version: int
    last_updated: str
    last_updated_by: Optional[int] = None


# ---------------------------------------------------------------------------
# Admin dashboard and analytics
# ---------------------------------------------------------------------------


class CountByKey(CamelModel):
    key: str
    count: int


class DailyCount(CamelModel):
    date: str
    count: int


class DashboardOverview(CamelModel):
    total_users: int
    total_courses: int
    total_colleges: int
    total_admins: int


class RecentActivity(CamelModel):
    recent_users: int
    recent_courses: int
    recent_colleges: int


class DashboardBreakdown(CamelModel):
    users_by_role: list[CountByKey]
    courses_by_category: list[CountByKey]


class LatestData(CamelModel):
    courses: list[CourseResponse]
    colleges: list[CollegeResponse]
    users: list[AccountResponse]


class DashboardData(CamelModel):
    overview: DashboardOverview
    recent_activity: RecentActivity
    analytics: DashboardBreakdown
    latest_data: LatestData


class Trends(CamelModel):
    users: list[DailyCount]
    courses: list[DailyCount]
    colleges: list[DailyCount]


class TopPerformers(CamelModel):
    courses: list[CourseResponse]
    colleges: list[CollegeResponse]


class AnalyticsData(CamelModel):
    trends: Trends
    top_performers: TopPerformers
    period: str
