"""
api/routes/v1/courses.py -- Course catalog endpoints.

Routes:
  GET    /api/v1/courses             -- public, paginated, active courses only
  GET    /api/v1/courses/{id}        -- public; counts a view
  POST   /api/v1/courses             -- create_course
  PUT    /api/v1/courses/{id}        -- edit_course; partial update
  DELETE /api/v1/courses/{id}        -- delete_course; soft delete (status "deleted")
  POST   /api/v1/courses/{id}/image  -- edit_course; multipart "image" field

Deleted courses are invisible to every read, including the write routes:
editing a deleted course is a 404.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from api.models import ApiResponse, CourseCreate, CourseResponse, CourseUpdate, PagedResponse, PaginationMeta
from api.uploads import store_image
from auth.dependencies import require_permission
from auth.models import Account, Permission
from cms.models import Course, Fees, SyllabusItem
from cms.store import CMSStore
from core.errors import NotFound

router = APIRouter()

_NOT_FOUND = "Course not found"


def _to_response(course: Course) -> CourseResponse:
    return CourseResponse.model_validate(asdict(course))


@router.get("/courses", response_model=PagedResponse[CourseResponse])
def list_courses(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None, max_length=100),
    level: Optional[str] = Query(None, max_length=50),
    featured: Optional[bool] = None,
    trending: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=200),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
) -> PagedResponse[CourseResponse]:
    store: CMSStore = request.app.state.cms_store
    result = store.list_courses(
        page=page,
        limit=limit,
        category=category,
        level=level,
        featured=featured,
        trending=trending,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return PagedResponse(
        data=[_to_response(c) for c in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.get("/courses/{course_id}", response_model=ApiResponse[CourseResponse])
def get_course(request: Request, course_id: int) -> ApiResponse[CourseResponse]:
    store: CMSStore = request.app.state.cms_store
    course = store.get_course(course_id)
    if course is None:
        raise NotFound(_NOT_FOUND)
    store.increment_course_views(course_id)
    course.views += 1
    return ApiResponse(data=_to_response(course))


@router.post("/courses", response_model=ApiResponse[CourseResponse], status_code=201)
def create_course(
    request: Request,
    body: CourseCreate,
    current_user: Account = Depends(require_permission(Permission.create_course)),
) -> ApiResponse[CourseResponse]:
    store: CMSStore = request.app.state.cms_store
    fields = body.model_dump(exclude={"fees", "syllabus"})
    course = Course(
        **fields,
        fees=Fees(min=body.fees.min, max=body.fees.max),
        syllabus=[SyllabusItem(topic=s.topic, description=s.description) for s in body.syllabus],
        created_by=current_user.id,
        updated_by=current_user.id,
    )
    course_id = store.create_course(course)
    return ApiResponse(message="Course created successfully", data=_to_response(store.get_course(course_id)))


@router.put("/courses/{course_id}", response_model=ApiResponse[CourseResponse])
def update_course(
    request: Request,
    course_id: int,
    body: CourseUpdate,
    current_user: Account = Depends(require_permission(Permission.edit_course)),
) -> ApiResponse[CourseResponse]:
    store: CMSStore = request.app.state.cms_store
    updated = store.update_course(course_id, current_user.id, **body.model_dump(exclude_unset=True))
    if updated is None:
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="Course updated successfully", data=_to_response(updated))


@router.delete("/courses/{course_id}", response_model=ApiResponse[None])
def delete_course(
    request: Request,
    course_id: int,
    current_user: Account = Depends(require_permission(Permission.delete_course)),
) -> ApiResponse[None]:
    store: CMSStore = request.app.state.cms_store
    if not store.soft_delete_course(course_id, current_user.id):
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="Course deleted successfully")


@router.post("/courses/{course_id}/image", response_model=ApiResponse[CourseResponse])
def upload_course_image(
    request: Request,
    course_id: int,
    image: UploadFile = File(...),
    current_user: Account = Depends(require_permission(Permission.edit_course)),
) -> ApiResponse[CourseResponse]:
    store: CMSStore = request.app.state.cms_store
    if store.get_course(course_id) is None:
        raise NotFound(_NOT_FOUND)
    url = store_image(request, image)
    updated = store.update_course(course_id, current_user.id, image=url)
    return ApiResponse(message="Image uploaded successfully", data=_to_response(updated))
