"""Rate limiting middleware — Redis-based fixed window.

Learn: Uses a per-minute counter stored in Redis. Each IP gets a counter
key like "grove:rl:{ip}:{bucket}:{minute}". Login and register get a
stricter limit to slow down credential stuffing.

Skipped when Redis is not configured (app.state.redis is None, e.g. in
tests) or when a Redis call fails — rate limiting never blocks a request
because of its own outage. Rejections use the standard error envelope.
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from grove.boundary.envelopes import error_response
from grove.errors import RATE_LIMITED

logger = structlog.get_logger()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Redis-based rate limiting per IP per minute."""

    def __init__(
        self,
        app,
        default_rpm: int = 100,
        auth_rpm: int = 10,
        auth_paths: tuple[str, ...] = ("/api/v1/auth/login", "/api/v1/auth/register"),
    ):
        super().__init__(app)
        self.default_rpm = default_rpm
        self.auth_rpm = auth_rpm
        self.auth_paths = auth_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        is_auth = request.url.path.startswith(self.auth_paths)
        rpm = self.auth_rpm if is_auth else self.default_rpm

        window = int(time.time() // 60)
        bucket = "auth" if is_auth else "api"
        key = f"grove:rl:{client_ip}:{bucket}:{window}"

        try:
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, 120)
        except Exception as e:
            logger.warning("grove.rate_limit_unavailable", error=str(e))
            return await call_next(request)

        if count > rpm:
            logger.info("grove.rate_limited", client_ip=client_ip, bucket=bucket)
            return error_response(
                status_code=429,
                message="Rate limit exceeded. Try again later.",
                error_code=RATE_LIMITED,
                path=request.url.path,
                method=request.method,
                headers={"Retry-After": "60"},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(rpm)
        response.headers["X-RateLimit-Remaining"] = str(max(0, rpm - count))
        return response
