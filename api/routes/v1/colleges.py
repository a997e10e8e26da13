"""
api/routes/v1/colleges.py -- College directory endpoints.

Routes:
  GET    /api/v1/colleges                 -- public, paginated, active only
  GET    /api/v1/colleges/stats/overview  -- view_analytics
  GET    /api/v1/colleges/{id}            -- public
  POST   /api/v1/colleges                 -- create_college
  PUT    /api/v1/colleges/{id}            -- edit_college; partial update
  DELETE /api/v1/colleges/{id}            -- delete_college; soft delete
  POST   /api/v1/colleges/{id}/image      -- edit_college; multipart "image" field

College names are unique. A duplicate name on create or rename surfaces as
IntegrityError from the store and leaves as 409 via the handler in api/main.py.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from api.models import (
    ApiResponse,
    CollegeCreate,
    CollegeResponse,
    CollegeStats,
    CollegeUpdate,
    PagedResponse,
    PaginationMeta,
)
from api.uploads import store_image
from auth.dependencies import require_permission
from auth.models import Account, Permission
from cms.models import College
from cms.store import CMSStore
from core.errors import NotFound

router = APIRouter()

_NOT_FOUND = "College not found"


def _to_response(college: College) -> CollegeResponse:
    return CollegeResponse.model_validate(asdict(college))


@router.get("/colleges", response_model=PagedResponse[CollegeResponse])
def list_colleges(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
) -> PagedResponse[CollegeResponse]:
    store: CMSStore = request.app.state.cms_store
    result = store.list_colleges(page=page, limit=limit, search=search, sort_by=sort_by, sort_order=sort_order)
    return PagedResponse(
        data=[_to_response(c) for c in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get("/colleges/stats/overview", response_model=ApiResponse[CollegeStats])
def college_stats(
    request: Request,
    current_user: Account = Depends(require_permission(Permission.view_analytics)),
) -> ApiResponse[CollegeStats]:
    store: CMSStore = request.app.state.cms_store
    since = (datetime.now(timezone.utc) - timedelta(days=30)).isoformat()
    return ApiResponse(
        data=CollegeStats(
            total_colleges=store.count_colleges(),
            recent_colleges=store.count_colleges(since=since),
        )
    )


@router.get("/colleges/{college_id}", response_model=ApiResponse[CollegeResponse])
def get_college(request: Request, college_id: int) -> ApiResponse[CollegeResponse]:
    store: CMSStore = request.app.state.cms_store
    college = store.get_college(college_id)
    if college is None:
        raise NotFound(_NOT_FOUND)
    return ApiResponse(data=_to_response(college))


@router.post("/colleges", response_model=ApiResponse[CollegeResponse], status_code=201)
def create_college(
    request: Request,
    body: CollegeCreate,
    current_user: Account = Depends(require_permission(Permission.create_college)),
) -> ApiResponse[CollegeResponse]:
    store: CMSStore = request.app.state.cms_store
    college = College(**body.model_dump(), created_by=current_user.id, updated_by=current_user.id)
    college_id = store.create_college(college)
    return ApiResponse(message="College created successfully", data=_to_response(store.get_college(college_id)))


@router.put("/colleges/{college_id}", response_model=ApiResponse[CollegeResponse])
def update_college(
    request: Request,
    college_id: int,
    body: CollegeUpdate,
    current_user: Account = Depends(require_permission(Permission.edit_college)),
) -> ApiResponse[CollegeResponse]:
    store: CMSStore = request.app.state.cms_store
    updated = store.update_college(college_id, current_user.id, **body.model_dump(exclude_unset=True))
    if updated is None:
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="College updated successfully", data=_to_response(updated))


@router.delete("/colleges/{college_id}", response_model=ApiResponse[None])
def delete_college(
    request: Request,
    college_id: int,
    current_user: Account = Depends(require_permission(Permission.delete_college)),
) -> ApiResponse[None]:
    store: CMSStore = request.app.state.cms_store
    if not store.soft_delete_college(college_id, current_user.id):
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="College deleted successfully")


@router.post("/colleges/{college_id}/image", response_model=ApiResponse[CollegeResponse])
def upload_college_image(
    request: Request,
    college_id: int,
    image: UploadFile = File(...),
    current_user: Account = Depends(require_permission(Permission.edit_college)),
) -> ApiResponse[CollegeResponse]:
    store: CMSStore = request.app.state.cms_store
    if store.get_college(college_id) is None:
        raise NotFound(_NOT_FOUND)
    url = store_image(request, image)
    updated = store.update_college(college_id, current_user.id, image=url)
    return ApiResponse(message="Image uploaded successfully", data=_to_response(updated))
