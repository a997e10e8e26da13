"""
api/main.py -- FastAPI application entry point for the Admissionshala API.

Serves the public site (courses, colleges, blogs, the active popup, page
content) and the admin panel (CRUD, users, analytics) from one process.

Run with:      uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins
  3. SlowAPIMiddleware     -- enforces per-route rate limits from api.limiter

Lifespan opens the account store, the CMS store and the media backend on
startup and disposes the database engines on shutdown.

Every failure leaves through one of the exception handlers below and is
rendered as the same ErrorResponse envelope.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorDetail, ErrorResponse, FieldError, HealthResponse
from api.routes.v1.admin import router as admin_router
from api.routes.v1.auth import router as auth_router
from api.routes.v1.blogs import router as blogs_router
from api.routes.v1.colleges import router as colleges_router
from api.routes.v1.content import router as content_router
from api.routes.v1.courses import router as courses_router
from api.routes.v1.popups import router as popups_router
from auth.store import AccountStore
from cms.media import build_media_store
from cms.store import CMSStore
from core.config import get_settings
from core.errors import AppError, Conflict, InternalError

VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("admissionshala.api")

settings = get_settings()

# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the stores on startup and dispose them on shutdown.

    Both stores run create_all() in their constructors, so a fresh database
    is usable as soon as startup finishes.
    """
    logger.info("Admissionshala API starting up")
    app.state.account_store = AccountStore()
    app.state.cms_store = CMSStore()
    app.state.media_store = build_media_store(settings)
    logger.info(
        "Stores initialized (media backend=%s, accounts present=%s)",
        type(app.state.media_store).__name__,
        app.state.account_store.has_accounts(),
    )

    yield

    app.state.cms_store.close()
    app.state.account_store.close()
    logger.info("Admissionshala API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Admissionshala API",
    description="Course, college, blog and site-content management for an education consultancy.",
    version=VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# Register in the order you want the request to encounter them:
# TrustedHost -> CORS -> SlowAPI.
# ---------------------------------------------------------------------------

app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter

# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Wall-clock time around call_next gives the latency of each response.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
app.include_router(courses_router, prefix="/api/v1", tags=["Courses"])
app.include_router(colleges_router, prefix="/api/v1", tags=["Colleges"])
app.include_router(blogs_router, prefix="/api/v1", tags=["Blogs"])
app.include_router(popups_router, prefix="/api/v1", tags=["Popup"])
app.include_router(content_router, prefix="/api/v1", tags=["Content"])
app.include_router(admin_router, prefix="/api/v1", tags=["Admin"])

# Locally stored uploads. Unused (but harmless) when Cloudinary is configured.
app.mount(
    settings.media_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="media",
)

# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error_response(
    status_code: int,
    code: str,
    message: str,
    detail: str | None = None,
    errors: list[FieldError] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error=ErrorDetail(code=code, message=message, detail=detail),
        errors=errors,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    errors = [FieldError(**e) for e in exc.errors] if exc.errors else None
    return _error_response(exc.status_code, exc.code, exc.message, exc.detail, errors)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 naming the first offending field, plus every violation.

    Covers body, query and path parameters alike, so a malformed id is a
    validation failure rather than a 500.
    """
    errors = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        location = loc[0] if loc else "body"
        field = ".".join(loc[1:]) or location
        errors.append(FieldError(field=field, message=err.get("msg", "Invalid value"), location=location))
    message = "Validation failed"
    if errors:
        message = f"Validation failed: {errors[0].field} - {errors[0].message}"
    return _error_response(400, "validation_failed", message, errors=errors)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique-key collisions (email, slug, page, college name) become 409.

    Any other constraint failure means a bad value got past request
    validation, so it is reported as an internal error. The driver message
    names tables and columns; it is logged, never returned.
    """
    if "unique" not in str(exc.orig).lower():
        logger.error("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        internal = InternalError()
        return _error_response(internal.status_code, internal.code, internal.message)
    logger.warning("Unique constraint hit on %s %s: %s", request.method, request.url.path, exc.orig)
    conflict = Conflict()
    return _error_response(conflict.status_code, conflict.code, conflict.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes, wrong methods and any HTTPException raised by a dependency."""
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with a structured error when a rate limit is exceeded.

    Retry-After tells clients exactly how many seconds to wait before retrying.
    """
    retry_after = int(getattr(exc, "retry_after", 60))
    response = _error_response(429, "rate_limited", "Too many requests.", detail=str(exc))
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    Security note: the raw exception is written to the log only, never to the
    response body. The client receives only a generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    internal = InternalError()
    return _error_response(internal.status_code, internal.code, internal.message)


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state. No rate limit applied.
# ---------------------------------------------------------------------------


@app.get("/api/v1/health", tags=["Health"], response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """Return API liveness and a database probe."""
    components = {"app": "ok"}
    try:
        request.app.state.account_store.ping()
        request.app.state.cms_store.ping()
        components["database"] = "ok"
    except Exception:
        logger.exception("Health check database probe failed")
        components["database"] = "error"
    status = "healthy" if components["database"] == "ok" else "degraded"
    return HealthResponse(status=status, version=VERSION, components=components)
