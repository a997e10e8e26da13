"""
api/routes/v1/content.py -- Editable page content (home, about, contact, footer).

Routes:
  GET    /api/v1/content/{page}             -- public; active snapshots only; never cached
  GET    /api/v1/content/admin/all          -- admin
  POST   /api/v1/content/admin/initialize   -- admin; creates missing default pages
  POST   /api/v1/content/{page}             -- admin; create or update
  DELETE /api/v1/content/{page}             -- admin; hard delete
  GET    /api/v1/content/{page}/history     -- admin; version metadata

Each page has exactly one snapshot. version starts at 1 and is bumped by the
store only when sections actually change, so saving identical content (or
toggling isActive alone) keeps the version.
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request, Response

from api.models import ApiResponse, ContentHistory, ContentResponse, ContentSave
from auth.dependencies import require_admin
from auth.models import Account
from cms.defaults import initialize_content
from cms.models import ContentPage, ContentPageKey
from cms.store import CMSStore
from core.errors import NotFound, ValidationFailed

router = APIRouter()

_NOT_FOUND = "Content not found"


def _to_response(content: ContentPage) -> ContentResponse:
    return ContentResponse.model_validate(asdict(content))


@router.get("/content/admin/all", response_model=ApiResponse[list[ContentResponse]])
def list_content(
    request: Request,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[list[ContentResponse]]:
    store: CMSStore = request.app.state.cms_store
    return ApiResponse(data=[_to_response(c) for c in store.list_content()])


@router.post("/content/admin/initialize", response_model=ApiResponse[list[str]])
def initialize(
    request: Request,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[list[str]]:
    store: CMSStore = request.app.state.cms_store
    results = initialize_content(store, current_user.id)
    return ApiResponse(message="Default content initialization completed", data=results)


@router.get("/content/{page}", response_model=ApiResponse[ContentResponse])
def get_content(request: Request, response: Response, page: ContentPageKey) -> ApiResponse[ContentResponse]:
    store: CMSStore = request.app.state.cms_store
    content = store.get_content(page.value, active_only=True)
    if content is None:
        raise NotFound(_NOT_FOUND)
    # Admin edits must show up on the next page load.
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return ApiResponse(data=_to_response(content))


@router.post("/content/{page}", response_model=ApiResponse[ContentResponse])
def save_content(
    request: Request,
    response: Response,
    page: ContentPageKey,
    body: ContentSave,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[ContentResponse]:
    store: CMSStore = request.app.state.cms_store
    if body.sections is None and store.get_content(page.value) is None:
        raise ValidationFailed(
            "Validation failed: sections - required when creating a page",
            errors=[{"field": "sections", "message": "Field required", "location": "body"}],
        )
    content, created = store.save_content(
        page.value,
        current_user.id,
        sections=body.sections,
        is_active=body.is_active,
    )
    if created:
        response.status_code = 201
        return ApiResponse(message="Content created successfully", data=_to_response(content))
    return ApiResponse(message="Content updated successfully", data=_to_response(content))


@router.delete("/content/{page}", response_model=ApiResponse[None])
def delete_content(
    request: Request,
    page: ContentPageKey,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[None]:
    store: CMSStore = request.app.state.cms_store
    if not store.delete_content(page.value):
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="Content deleted successfully")


@router.get("/content/{page}/history", response_model=ApiResponse[ContentHistory])
def content_history(
    request: Request,
    page: ContentPageKey,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[ContentHistory]:
    store: CMSStore = request.app.state.cms_store
    content = store.get_content(page.value)
    if content is None:
        raise NotFound(_NOT_FOUND)
    return ApiResponse(
        data=ContentHistory(
            page=content.page,
            version=content.version,
            last_updated=content.updated_at,
            last_updated_by=content.last_updated_by,
        )
    )
