"""Exception taxonomy for the request boundary.

Learn: Every error that leaves the process is one of these (or is turned
into InternalError by the boundary). Each class fixes its HTTP status and
its machine-readable errorCode, so the error envelope is always built the
same way regardless of where the failure was raised.
"""

from typing import Optional

VALIDATION_ERROR = "VALIDATION_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"
ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
ALREADY_EXISTS = "ALREADY_EXISTS"
RATE_LIMITED = "RATE_LIMITED"
INTERNAL_ERROR = "INTERNAL_ERROR"

INTERNAL_ERROR_MESSAGE = "Internal error"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class AppError(Exception):
    """Base for failures that carry their own status and error code."""

    status_code: int = 500
    error_code: str = INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.headers = headers


class ValidationFailed(AppError):
    """Malformed or missing input. Messages are grouped per field by the boundary."""

    status_code = 400
    error_code = VALIDATION_ERROR

    def __init__(
        self,
        messages: list[str],
        message: str = "Request validation failed",
    ):
        super().__init__(message)
        self.messages = messages


class Unauthorized(AppError):
    """Bad credentials, inactive account, or a missing/invalid/expired token."""

    status_code = 401
    error_code = UNAUTHORIZED

    def __init__(self, message: str = INVALID_TOKEN_MESSAGE):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    status_code = 403
    error_code = FORBIDDEN


class NotFound(AppError):
    status_code = 404
    error_code = ENTITY_NOT_FOUND

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        suffix = f" with ID {entity_id}" if entity_id else ""
        super().__init__(f"{entity}{suffix} not found")


class AlreadyExists(AppError):
    status_code = 400
    error_code = ALREADY_EXISTS

    def __init__(self, entity: str, field: str, value: str):
        super().__init__(f"{entity} with {field} {value} already exists")


class InternalError(AppError):
    """Unexpected failure. The client only ever sees the generic message."""

    status_code = 500
    error_code = INTERNAL_ERROR

    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE):
        super().__init__(message)
