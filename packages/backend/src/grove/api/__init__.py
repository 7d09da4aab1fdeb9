"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: The access gate is applied once, at the api_router level, so every
route is protected by default. A route opts out with the @public decorator
(health, login, register) instead of being mounted on a separate open
router — forgetting to protect a new router is not possible.
"""

from fastapi import APIRouter, Depends

from grove.api.admin import router as admin_router
from grove.api.auth import router as auth_router
from grove.api.health import router as health_router
from grove.auth.dependencies import access_gate


def build_api_router(prefix: str) -> APIRouter:
    api_router = APIRouter(prefix=prefix, dependencies=[Depends(access_gate)])
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(auth_router, tags=["auth"])
    api_router.include_router(admin_router, tags=["admin"])
    return api_router
