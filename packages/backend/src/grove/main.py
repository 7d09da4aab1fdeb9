"""FastAPI application factory.

Learn: App factory pattern — create_app(settings) returns a configured
FastAPI instance. Settings are read once here and wired into a Container
on app.state; lifespan only handles what needs the event loop (Redis, the
optional admin bootstrap).

Boundary order for a request:
  RequestId → SecurityHeaders → RateLimit → CORS → access gate → handler
  → EnvelopeRoute (success) / exception handlers (errors)
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grove import __version__
from grove.api import build_api_router
from grove.boundary.errors import register_exception_handlers
from grove.cache import close_redis, connect_redis
from grove.config import Settings
from grove.container import Container, build_container
from grove.log import configure_logging
from grove.middleware.rate_limit import RateLimitMiddleware
from grove.middleware.request_id import RequestIdMiddleware
from grove.middleware.security import SecurityHeadersMiddleware
from grove.services.bootstrap import ensure_admin

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    container: Container = app.state.container
    settings = container.settings
    logger.info(
        "grove.starting",
        version=__version__,
        environment=settings.environment,
        store=container.store.backend,
        port=settings.port,
    )

    try:
        app.state.redis = await connect_redis(settings.redis_url)
        if app.state.redis is not None:
            logger.info("grove.redis_connected")
    except Exception as e:
        logger.warning("grove.redis_unavailable", error=str(e))
        app.state.redis = None

    if settings.bootstrap_admin:
        await ensure_admin(
            container.users,
            settings.admin_default_email,
            settings.admin_default_password,
            settings.admin_default_name,
        )

    yield

    logger.info("grove.shutdown")
    await close_redis(app.state.redis)
    app.state.redis = None


def create_app(settings: Optional[Settings] = None, container: Optional[Container] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    if container is None:
        container = build_container(settings or Settings())
    settings = container.settings
    configure_logging(settings)

    app = FastAPI(
        title="Grove System API",
        description="Restaurant management backend — identity and request boundary",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.redis = None

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → RateLimit → CORS → handler
    prefix = settings.api_prefix.rstrip("/")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type", "Authorization", "Accept", "X-Requested-With", "X-Request-ID"],
    )
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
        auth_paths=(f"{prefix}/auth/login", f"{prefix}/auth/register"),
    )
    app.add_middleware(SecurityHeadersMiddleware, auth_prefix=f"{prefix}/auth")
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(build_api_router(prefix))

    return app


def get_app() -> FastAPI:
    """uvicorn factory entry point: uvicorn grove.main:get_app --factory"""
    return create_app(Settings())
