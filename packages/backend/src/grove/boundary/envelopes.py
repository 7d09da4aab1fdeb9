"""Response envelopes — the fixed JSON shapes every API response uses.

Success:
    {"success": true, "statusCode": 200, "message": "...", "data": ...,
     "timestamp": "...", "executionTime": "3ms"}   # executionTime: non-production only

Error:
    {"success": false, "statusCode": 401, "message": "...", "errorCode": "UNAUTHORIZED",
     "validationErrors": {"email": ["..."]},        # validation errors only
     "timestamp": "...", "path": "/api/v1/...", "method": "POST",
     "requestId": "..."}                            # non-production only

Handlers return either a plain value (wrapped by EnvelopeRoute) or an
explicit SuccessEnvelope when they want to choose the message themselves.
"""

from typing import Generic, Optional, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from grove.timeutil import iso_timestamp

T = TypeVar("T")

CREATED_MESSAGE = "Resource created successfully"
UPDATED_MESSAGE = "Resource updated successfully"
DELETED_MESSAGE = "Resource deleted successfully"
COMPLETED_MESSAGE = "Operation completed successfully"


class SuccessEnvelope(BaseModel, Generic[T]):
    """A handler result that is already enveloped; only metadata gets merged in."""

    success: bool = True
    message: str
    data: Optional[T] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    status_code: int
    message: str
    error_code: str
    validation_errors: Optional[dict[str, list[str]]] = None
    timestamp: str
    path: str
    method: str
    request_id: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


def success_message(method: str, status_code: int) -> str:
    method = method.upper()
    if method == "POST" and status_code == 201:
        return CREATED_MESSAGE
    if method in ("PUT", "PATCH"):
        return UPDATED_MESSAGE
    if method == "DELETE":
        return DELETED_MESSAGE
    return COMPLETED_MESSAGE


def error_response(
    *,
    status_code: int,
    message: str,
    error_code: str,
    path: str,
    method: str,
    validation_errors: Optional[dict[str, list[str]]] = None,
    request_id: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(
        status_code=status_code,
        message=message,
        error_code=error_code,
        validation_errors=validation_errors,
        timestamp=iso_timestamp(),
        path=path,
        method=method,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )
