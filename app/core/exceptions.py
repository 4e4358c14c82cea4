"""
Application error kinds.

Services raise these; the handlers registered in app.main render every one of
them as a JSON body of the form {"error": message} with the matching status.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or malformed required input."""
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class AuthError(AppError):
    """Invalid credential."""
    status_code = 401


class TokenExpired(AuthError):
    status_code = 401


class TokenMalformed(AuthError):
    status_code = 400


class PermissionDeniedError(AppError):
    status_code = 403


class StorageError(AppError):
    """The store was unreachable or rejected the operation. Retryable by the caller."""
    status_code = 500


class UpstreamError(AppError):
    """A third-party identity provider failed; carries its status when known."""
    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        status_code = upstream_status if upstream_status and upstream_status >= 400 else None
        super().__init__(message, status_code)
        self.upstream_status = upstream_status


def is_unique_violation(exc: Exception) -> bool:
    """True for a PostgREST error caused by a unique constraint (SQLSTATE 23505)."""
    code = getattr(exc, "code", None)
    if code == "23505":
        return True
    return "duplicate key" in str(exc).lower()
