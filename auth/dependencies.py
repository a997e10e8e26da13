"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Request flow:
  Unauthenticated -> get_current_user() -> Authenticated(account)
                  -> require_admin() / require_permission(p) -> Authorized | Rejected

try_get_current_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises Unauthorized if unauthenticated.
require_admin() wraps get_current_user() and raises Forbidden if not admin.
require_permission(p) builds a dependency that raises Forbidden unless
has_permission(account, p).

The resolved Account is handed to the route handler as a parameter. Handlers
pass its id to the stores explicitly; nothing reads a request-global "current
user".

Layer rule: no imports from api/ or cms/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from auth.models import Account, Permission, Role
from auth.permissions import has_permission
from auth.tokens import decode_access_token
from core.errors import Forbidden, Unauthorized


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def try_get_current_user(request: Request) -> Account | None:
    """Attempt to authenticate the request via its Bearer token.

    Returns the Account on success, None on any failure (missing header,
    bad signature, expired token, unknown account, deactivated account).
    Never raises.
    """
    token = _bearer_token(request)
    if not token:
        return None
    payload = decode_access_token(token)
    if not payload:
        return None
    account = request.app.state.account_store.get_by_id(payload["user_id"])
    if account is None or not account.is_active:
        return None
    return account


def get_current_user(request: Request) -> Account:
    """Require authentication. Raises Unauthorized if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: Account = Depends(get_current_user)): ...
    """
    account = try_get_current_user(request)
    if account is None:
        raise Unauthorized("Authentication required. Provide a valid Bearer token.")
    return account


def require_admin(current_user: Account = Depends(get_current_user)) -> Account:
    """Require the admin role. Unauthorized if unauthenticated, Forbidden if not admin."""
    if current_user.role != Role.admin.value:
        raise Forbidden("Admin access required.")
    return current_user


def require_permission(permission: Permission) -> Callable[..., Account]:
    """Build a dependency that enforces a single permission.

    Use as a FastAPI dependency:
        @router.post("/courses")
        def route(user: Account = Depends(require_permission(Permission.create_course))): ...
    """

    def _dependency(current_user: Account = Depends(get_current_user)) -> Account:
        if not has_permission(current_user, permission):
            raise Forbidden(f"Permission '{permission.value}' required.")
        return current_user

    return _dependency
