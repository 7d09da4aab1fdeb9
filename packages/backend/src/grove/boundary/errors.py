"""Exception handlers — classify every failure into the error envelope.

Learn: Registered once on the app by register_exception_handlers(). Order of
classification:
  1. RequestValidationError / ValidationFailed → 400 VALIDATION_ERROR with
     messages grouped by the field named in "property <field> ..."
  2. AppError → its own status and errorCode
  3. Starlette HTTPException (404 route miss, 405, ...) → its status
  4. anything else → its declared status_code if it has one, otherwise
     500 "Internal error"

Log level follows the status: validation → warning, other 4xx → info,
5xx → error with stack trace.

Starlette runs a handler registered for Exception in ServerErrorMiddleware,
outside the app middleware, so its response would miss every header that
middleware adds. EnvelopeRoute therefore calls
unhandled_exception_handler itself for anything a route raises; the app-level
registration only covers failures inside middleware.
"""

import re
from http import HTTPStatus
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from grove.boundary.envelopes import error_response
from grove.errors import (
    FORBIDDEN,
    INTERNAL_ERROR,
    INTERNAL_ERROR_MESSAGE,
    RATE_LIMITED,
    UNAUTHORIZED,
    VALIDATION_ERROR,
    AppError,
    ValidationFailed,
)

logger = structlog.get_logger()

_PROPERTY = re.compile(r"property (\w+)")
_LOCATIONS = {"body", "query", "path", "header", "cookie"}

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: UNAUTHORIZED,
    403: FORBIDDEN,
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: RATE_LIMITED,
}


def status_phrase(status_code: int) -> str:
    """Reason phrase for a status, "Error" for codes outside http.HTTPStatus (499, ...)."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def group_validation_messages(messages: list[str]) -> dict[str, list[str]]:
    """Group messages by the field they mention; the rest go under "unknown"."""
    grouped: dict[str, list[str]] = {}
    for message in messages:
        match = _PROPERTY.search(message)
        field = match.group(1) if match else "unknown"
        grouped.setdefault(field, []).append(message)
    return grouped


def messages_from_errors(errors: list[dict[str, Any]]) -> list[str]:
    """Render pydantic errors as "property <field>: <msg>" lines."""
    messages = []
    for err in errors:
        names = [
            part for part in err.get("loc", ()) if isinstance(part, str) and part not in _LOCATIONS
        ]
        msg = err.get("msg", "Invalid value")
        messages.append(f"property {names[-1]}: {msg}" if names else msg)
    return messages


def _request_id(request: Request) -> Optional[str]:
    container = getattr(request.app.state, "container", None)
    if container is not None and container.settings.is_production:
        return None
    return request.headers.get("X-Request-ID")


def _respond(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    *,
    validation_errors: Optional[dict[str, list[str]]] = None,
    headers: Optional[dict[str, str]] = None,
):
    return error_response(
        status_code=status_code,
        message=message,
        error_code=error_code,
        path=request.url.path,
        method=request.method,
        validation_errors=validation_errors,
        request_id=_request_id(request),
        headers=headers,
    )


def _log(request: Request, status_code: int, message: str, exc: BaseException) -> None:
    fields = {"method": request.method, "path": request.url.path, "status": status_code}
    if status_code >= 500:
        logger.error("grove.http.error", message=message, exc_info=exc, **fields)
    else:
        logger.info("grove.http.client_error", message=message, **fields)


async def validation_error_handler(request: Request, exc: Exception):
    if isinstance(exc, ValidationFailed):
        messages, message = exc.messages, exc.message
    else:
        messages = messages_from_errors(exc.errors())
        message = "Request validation failed"

    grouped = group_validation_messages(messages)
    logger.warning(
        "grove.http.validation_error",
        method=request.method,
        path=request.url.path,
        fields=sorted(grouped),
    )
    return _respond(request, 400, message, VALIDATION_ERROR, validation_errors=grouped)


async def app_error_handler(request: Request, exc: AppError):
    _log(request, exc.status_code, exc.message, exc)
    return _respond(request, exc.status_code, exc.message, exc.error_code, headers=exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    status_code = exc.status_code
    if status_code >= 500:
        message = INTERNAL_ERROR_MESSAGE
    elif isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = status_phrase(status_code)
    _log(request, status_code, message, exc)
    code = HTTP_ERROR_CODES.get(status_code, INTERNAL_ERROR if status_code >= 500 else f"HTTP_{status_code}")
    return _respond(request, status_code, message, code, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    declared = getattr(exc, "status_code", None)
    if isinstance(declared, int) and 400 <= declared < 500:
        message = str(exc) or status_phrase(declared)
        _log(request, declared, message, exc)
        return _respond(request, declared, message, HTTP_ERROR_CODES.get(declared, f"HTTP_{declared}"))

    status_code = declared if isinstance(declared, int) and declared >= 500 else 500
    _log(request, status_code, INTERNAL_ERROR_MESSAGE, exc)
    return _respond(request, status_code, INTERNAL_ERROR_MESSAGE, INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationFailed, validation_error_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
