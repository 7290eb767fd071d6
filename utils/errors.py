"""Application exception hierarchy.

Services raise these; ``utils.error_handlers`` turns them into JSON responses
with the matching HTTP status.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base exception for Game Tracker application errors."""

    status_code = 500
    code = "server_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "error": self.message}
        payload.update(self.details)
        return payload


class ValidationError(AppError):
    """Raised when request or payload validation fails."""

    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field
        self.value = value


class AuthenticationError(AppError):
    status_code = 401
    code = "authentication_required"


class PermissionDeniedError(AppError):
    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    """Raised when a requested resource cannot be located."""

    status_code = 404
    code = "not_found"


class ConflictError(AppError):
    """Raised when a write would violate a uniqueness or reference constraint."""

    status_code = 409
    code = "conflict"


__all__ = [
    "AppError",
    "AuthenticationError",
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationError",
]
