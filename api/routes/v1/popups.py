"""
api/routes/v1/popups.py -- Promotional popup endpoints.

Routes:
  GET    /api/v1/popup/active       -- public; the active popup, or data: null
  GET    /api/v1/popup              -- admin, paginated
  POST   /api/v1/popup              -- admin
  PUT    /api/v1/popup/{id}         -- admin; partial update
  DELETE /api/v1/popup/{id}         -- admin; hard delete
  PATCH  /api/v1/popup/{id}/toggle  -- admin; flips isActive

At most one popup is active. Any write that activates a popup (create with
isActive true, update false -> true, toggle on) deactivates every other popup
in the same transaction; the store takes care of it.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from api.models import ApiResponse, PagedResponse, PaginationMeta, PopupCreate, PopupResponse, PopupUpdate
from auth.dependencies import require_admin
from auth.models import Account
from cms.models import Popup
from cms.store import CMSStore
from core.errors import NotFound

router = APIRouter()

_NOT_FOUND = "Popup not found"


def _to_response(popup: Popup) -> PopupResponse:
    return PopupResponse.model_validate(asdict(popup))


@router.get("/popup/active", response_model=ApiResponse[Optional[PopupResponse]])
def get_active_popup(request: Request) -> ApiResponse[Optional[PopupResponse]]:
    store: CMSStore = request.app.state.cms_store
    popup = store.get_active_popup()
    return ApiResponse(data=_to_response(popup) if popup else None)


@router.get("/popup", response_model=PagedResponse[PopupResponse])
def list_popups(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: Account = Depends(require_admin),
) -> PagedResponse[PopupResponse]:
    store: CMSStore = request.app.state.cms_store
    result = store.list_popups(page=page, limit=limit)
    return PagedResponse(
        data=[_to_response(p) for p in result.items],
        pagination=PaginationMeta.from_page(result),
    )


@router.post("/popup", response_model=ApiResponse[PopupResponse], status_code=201)
def create_popup(
    request: Request,
    body: PopupCreate,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[PopupResponse]:
    store: CMSStore = request.app.state.cms_store
    popup = Popup(**body.model_dump(), created_by=current_user.id, updated_by=current_user.id)
    popup_id = store.create_popup(popup)
    return ApiResponse(message="Popup created successfully", data=_to_response(store.get_popup(popup_id)))


@router.put("/popup/{popup_id}", response_model=ApiResponse[PopupResponse])
def update_popup(
    request: Request,
    popup_id: int,
    body: PopupUpdate,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[PopupResponse]:
    store: CMSStore = request.app.state.cms_store
    updated = store.update_popup(popup_id, current_user.id, **body.model_dump(exclude_unset=True))
    if updated is None:
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="Popup updated successfully", data=_to_response(updated))


@router.delete("/popup/{popup_id}", response_model=ApiResponse[None])
def delete_popup(
    request: Request,
    popup_id: int,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[None]:
    store: CMSStore = request.app.state.cms_store
    if not store.delete_popup(popup_id):
        raise NotFound(_NOT_FOUND)
    return ApiResponse(message="Popup deleted successfully")


@router.patch("/popup/{popup_id}/toggle", response_model=ApiResponse[PopupResponse])
def toggle_popup(
    request: Request,
    popup_id: int,
    current_user: Account = Depends(require_admin),
) -> ApiResponse[PopupResponse]:
    store: CMSStore = request.app.state.cms_store
    toggled = store.toggle_popup(popup_id, current_user.id)
    if toggled is None:
        raise NotFound(_NOT_FOUND)
    state = "activated" if toggled.is_active else "deactivated"
    return ApiResponse(message=f"Popup {state} successfully", data=_to_response(toggled))
