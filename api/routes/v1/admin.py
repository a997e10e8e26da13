"""
api/routes/v1/admin.py -- Admin panel: dashboard, analytics and user management.

Routes:
  GET    /api/v1/admin/dashboard        -- view_analytics
  GET    /api/v1/admin/analytics        -- view_analytics; ?period=N days (default 30)
  GET    /api/v1/admin/users            -- manage_users; paginated, filterable
  POST   /api/v1/admin/users            -- admin role
  PUT    /api/v1/admin/users/{id}       -- admin role; partial update
  DELETE /api/v1/admin/users/{id}       -- admin role; deactivates, never removes

Guards on the target account (checked after authorization):
  - An admin cannot deactivate or delete their own account (SelfModification).
  - The last active admin cannot be deactivated, deleted or demoted; there
    would be no recovery path without database access.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request

from api.models import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    AnalyticsData,
    ApiResponse,
    CollegeResponse,
    CountByKey,
    CourseResponse,
    DailyCount,
    DashboardBreakdown,
    DashboardData,
    DashboardOverview,
    LatestData,
    PagedResponse,
    PaginationMeta,
    RecentActivity,
    TopPerformers,
    Trends,
)
from auth.dependencies import require_admin, require_permission
from auth.models import Account, Permission, Role
from auth.store import AccountStore
from cms.store import CMSStore
from core.errors import Conflict, NotFound, SelfModification, ValidationFailed

router = APIRouter()

_NOT_FOUND = "User not found"


def _days_ago(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def _courses(items) -> list[CourseResponse]:
    return [CourseResponse.model_validate(asdict(c)) for c in items]


def _colleges(items) -> list[CollegeResponse]:
    return [CollegeResponse.model_validate(asdict(c)) for c in items]


def _guard_last_admin(accounts: AccountStore, target: Account) -> None:
    if target.role == Role.admin.value and target.is_active and accounts.count_active_admins() <= 1:
        raise ValidationFailed("Cannot remove the last active admin account.")


# ---------------------------------------------------------------------------
# Dashboard and analytics
# ---------------------------------------------------------------------------


@router.get("/admin/dashboard", response_model=ApiResponse[DashboardData])
def dashboard(
    request: Request,
    current_user: Account = Depends(require_permission(Permission.view_analytics)),
) -> ApiResponse[DashboardData]:
    accounts: AccountStore = request.app.state.account_store
    cms: CMSStore = request.app.state.cms_store
    since = _days_ago(30)
    data = DashboardData(
        overview=DashboardOverview(
            total_users=accounts.count_accounts(),
            total_courses=cms.count_courses(),
            total_colleges=cms.count_colleges(),
            total_admins=accounts.count_active_admins(),
        ),
        recent_activity=RecentActivity(
            recent_users=accounts.count_accounts(since=since),
            recent_courses=cms.count_courses(since=since),
            recent_colleges=cms.count_colleges(since=since),
        ),
        analytics=DashboardBreakdown(
            users_by_role=[CountByKey(key=r["role"], count=r["count"]) for r in accounts.counts_by_role()],
            courses_by_category=[
                CountByKey(key=r["category"], count=r["count"]) for r in cms.course_counts_by_category()
            ],
        ),
        latest_data=LatestData(
            courses=_courses(cms.latest_courses()),
            colleges=_colleges(cms.latest_colleges()),
            users=[AccountResponse.from_account(a) for a in accounts.latest()],
        ),
    )
    return ApiResponse(data=data)


@router.get("/admin/analytics", response_model=ApiResponse[AnalyticsData])
def analytics(
    request: Request,
    period: int = Query(30, ge=1, le=365),
    current_user: Account = Depends(require_permission(Permission.view_analytics)),
) -> ApiResponse[AnalyticsData]:
    accounts: AccountStore = request.app.state.account_store
    cms: CMSStore = request.app.state.cms_store
    since = _days_ago(period)
    data = AnalyticsData(
        trends=Trends(
            users=[DailyCount(**d) for d in accounts.daily_signups(since)],
            courses=[DailyCount(**d) for d in cms.daily_courses(since)],
            colleges=[DailyCount(**d) for d in cms.daily_colleges(since)],
        ),
        top_performers=TopPerformers(
            courses=_courses(cms.top_courses()),
            colleges=_colleges(cms.latest_colleges(limit=10)),
        ),
        period=f"{period} days",
    )
    return ApiResponse(data=data)


# ---------------------------------------------------------------------------
# User management
# ---------------------------------------------------------------------------


@router.get("/admin/users", response_model=PagedResponse[AccountResponse])
def list_users(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: Optional[Role] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None, max_length=200),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    current_user: Account = Depends(require_permission(Permission.manage_users)),
) -> PagedResponse[AccountResponse]:
    accounts: AccountStore = request.app.state.account_store
    result = accounts.list_accounts(
        page=page,
        limit=limit,
        role=role.value if role else None,
        is_active=is_active,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return PagedResponse(
        data=[AccountResponse.from_account(a) for a in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.post("/admin/users", response_model=ApiResponse[AccountResponse], status_code=201)
def create_user(
    request: Request,
    body: AccountCreate,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[AccountResponse]:
    accounts: AccountStore = request.app.state.account_store
    if accounts.get_by_email(body.email) is not None:
        raise Conflict("User already exists with this email")
    account = Account(
        name=body.name,
        email=body.email,
        role=body.role,
        permissions=list(body.permissions),
        phone=body.phone,
        is_active=body.is_active,
    )
    account_id = accounts.create_account(account, password=body.password)
    created = accounts.get_by_id(account_id)
    return ApiResponse(message="User created successfully", data=AccountResponse.from_account(created))


@router.put("/admin/users/{user_id}", response_model=ApiResponse[AccountResponse])
def update_user(
    request: Request,
    user_id: int,
    body: AccountUpdate,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[AccountResponse]:
    accounts: AccountStore = request.app.state.account_store
    target = accounts.get_by_id(user_id)
    if target is None:
        raise NotFound(_NOT_FOUND)

    updates = body.model_dump(exclude_unset=True)
    if "is_active" in updates and not updates["is_active"]:
        if target.id == current_user.id:
            raise SelfModification("You cannot deactivate your own account.")
        _guard_last_admin(accounts, target)
    if "role" in updates and updates["role"] != Role.admin.value:
        _guard_last_admin(accounts, target)
    if not updates:
        raise ValidationFailed("No fields to update.")

    accounts.update_account(user_id, **updates)
    updated = accounts.get_by_id(user_id)
    return ApiResponse(message="User updated successfully", data=AccountResponse.from_account(updated))


@router.delete("/admin/users/{user_id}", response_model=ApiResponse[None])
def delete_user(
    request: Request,
    user_id: int,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[None]:
    """Soft delete: the account is deactivated so authored content keeps its author."""
    accounts: AccountStore = request.app.state.account_store
    if user_id == current_user.id:
        raise SelfModification("You cannot delete your own account.")
    target = accounts.get_by_id(user_id)
    if target is None:
        raise NotFound(_NOT_FOUND)
    _guard_last_admin(accounts, target)
    accounts.deactivate(user_id)
    return ApiResponse(message="User deactivated successfully")
