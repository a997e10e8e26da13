"""
api/routes/v1/auth.py -- Sign-up, sign-in and self-service account endpoints.

Routes:
  POST /api/v1/auth/register         -- create a "user" account; returns a token
  POST /api/v1/auth/login            -- email + password; returns a token
  GET  /api/v1/auth/me               -- current account (requires auth)
  POST /api/v1/auth/change-password  -- requires the current password

Security:
  POST /login is rate-limited per client IP (LOGIN_RATE_LIMIT).
  authenticate_user() provides timing equalization -- use it, never inline.
  Wrong email and wrong password produce the same Unauthorized message.
  Cache-Control: no-store on every response that carries a token.
  Self-registration always yields role "user" with no explicit permissions;
  elevated accounts are created through /api/v1/admin/users.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.limiter import limiter
from api.models import (
    AccountResponse,
    ApiResponse,
    AuthPayload,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
)
from auth.dependencies import get_current_user
from auth.models import Account
from auth.store import AccountStore
from auth.tokens import authenticate_user, create_access_token, verify_password
from core.config import get_settings
from core.errors import Conflict, Unauthorized, ValidationFailed

_settings = get_settings()

router = APIRouter()


def _auth_payload(account: Account) -> AuthPayload:
    token = create_access_token(account.id, account.email, account.role)
    return AuthPayload(
        token=token,
        expires_in=_settings.token_expire_seconds,
        user=AccountResponse.from_account(account),
    )


@router.post("/auth/register", response_model=ApiResponse[AuthPayload], status_code=201)
def register(request: Request, response: Response, body: RegisterRequest) -> ApiResponse[AuthPayload]:
    store: AccountStore = request.app.state.account_store
    if store.get_by_email(body.email) is not None:
        raise Conflict("An account with that email already exists.")
    account_id = store.create_account(
        Account(name=body.name, email=body.email, phone=body.phone),
        password=body.password,
    )
    account = store.get_by_id(account_id)
    response.headers["Cache-Control"] = "no-store"
    return ApiResponse(message="Registration successful", data=_auth_payload(account))


@limiter.limit(_settings.login_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/login", response_model=ApiResponse[AuthPayload])
def login(request: Request, response: Response, body: LoginRequest) -> ApiResponse[AuthPayload]:
    """Authenticate with email and password.

    Uses authenticate_user() which includes timing equalization. Do NOT
    inline get_by_email() + verify_password().
    """
    store: AccountStore = request.app.state.account_store
    account = authenticate_user(store, body.email, body.password)
    if account is None:
        raise Unauthorized("Invalid email or password.")
    store.update_last_login(account.id)
    account = store.get_by_id(account.id)
    response.headers["Cache-Control"] = "no-store"
    return ApiResponse(message="Login successful", data=_auth_payload(account))


@router.get("/auth/me", response_model=ApiResponse[AccountResponse])
def me(current_user: Account = Depends(get_current_user)) -> ApiResponse[AccountResponse]:
    return ApiResponse(data=AccountResponse.from_account(current_user))


@router.post("/auth/change-password", response_model=ApiResponse[None])
def change_password(
    request: Request,
    body: ChangePasswordRequest,
    current_user: Account = Depends(get_current_user),
) -> ApiResponse[None]:
    if not verify_password(body.current_password, current_user.hashed_password or ""):
        raise ValidationFailed("Current password is incorrect.")
    store: AccountStore = request.app.state.account_store
    store.update_account(current_user.id, password=body.new_password)
    return ApiResponse(message="Password updated successfully")
