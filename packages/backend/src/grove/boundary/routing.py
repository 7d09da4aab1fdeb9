"""Success envelope wrapping, applied per route.

Learn: EnvelopeRoute is set as route_class on the API routers. It runs the
normal FastAPI handler, then rewrites a successful JSON response into the
success envelope. Whether a handler already returned a SuccessEnvelope is
decided once, from the route's response model, when the route is built —
the response body is never inspected for "success"/"message"/"data" keys.
"""

import json
import time
from typing import Any, Callable, Coroutine

import structlog
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from grove.boundary.envelopes import SuccessEnvelope, success_message
from grove.boundary.errors import unhandled_exception_handler
from grove.errors import AppError
from grove.timeutil import iso_timestamp

logger = structlog.get_logger()

_SKIPPED_HEADERS = {b"content-length", b"content-type"}

# Raised on purpose; ExceptionMiddleware has a handler for each of these.
_HANDLED = (AppError, StarletteHTTPException, RequestValidationError)


def returns_envelope(response_model: Any) -> bool:
    return isinstance(response_model, type) and issubclass(response_model, SuccessEnvelope)


class EnvelopeRoute(APIRoute):
    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()
        pre_enveloped = returns_envelope(self.response_model)

        async def envelope_handler(request: Request) -> Response:
            started = time.perf_counter()
            try:
                response = await handler(request)
            except _HANDLED:
                raise
            except Exception as exc:
                response = await unhandled_exception_handler(request, exc)
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            logger.info(
                "grove.http.request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                execution_ms=elapsed_ms,
            )
            if not _is_json_success(response):
                return response
            return wrap_response(request, response, pre_enveloped, elapsed_ms)

        return envelope_handler


def _is_json_success(response: Response) -> bool:
    return (
        200 <= response.status_code < 300
        and response.media_type == "application/json"
        and bool(response.body)
    )


def wrap_response(
    request: Request, response: Response, pre_enveloped: bool, elapsed_ms: int
) -> JSONResponse:
    body = json.loads(response.body)
    settings = request.app.state.container.settings

    metadata: dict[str, Any] = {
        "statusCode": response.status_code,
        "timestamp": iso_timestamp(),
    }
    if not settings.is_production:
        metadata["executionTime"] = f"{elapsed_ms}ms"

    if pre_enveloped:
        content = {**body, **metadata}
    else:
        content = {
            "success": True,
            "statusCode": response.status_code,
            "message": success_message(request.method, response.status_code),
            "data": body,
            **metadata,
        }

    wrapped = JSONResponse(
        content=content, status_code=response.status_code, background=response.background
    )
    wrapped.raw_headers.extend(
        (name, value) for name, value in response.raw_headers if name not in _SKIPPED_HEADERS
    )
    return wrapped
