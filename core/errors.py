"""
core/errors.py -- Domain error taxonomy shared by every layer.

Stores, guards and route handlers raise these instead of HTTPException so the
failure kind travels with the exception. api/main.py registers one handler for
AppError that renders the common error envelope; nothing below api/ knows about
HTTP responses beyond the status code carried on each class.

Layer rule: core/ is the kernel. No imports from api/, auth/, or cms/.
"""

from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base class for every failure the API reports to its callers."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        errors: Optional[list[dict[str, Any]]] = None,
        detail: Optional[str] = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors
        self.detail = detail
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = 400
    code = "validation_failed"
    default_message = "Validation failed."


class Unauthorized(AppError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required."


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"
    default_message = "You do not have permission to perform this action."


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class Conflict(AppError):
    status_code = 409
    code = "conflict"
    default_message = "A record with that key already exists."


class UploadFailed(AppError):
    status_code = 400
    code = "upload_failed"
    default_message = "Failed to upload image."


class SelfModification(AppError):
    """An account tried to deactivate or delete itself.

    Raised after authorization succeeds, so admins hit it too. It is a rule
    about the target record, not about the caller's rights.
    """

    status_code = 400
    code = "self_modification"
    default_message = "You cannot modify the active state of your own account."


class InternalError(AppError):
    pass
