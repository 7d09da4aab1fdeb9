"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and reports
which identity store backend is wired and whether Redis is reachable.
"""

from fastapi import APIRouter, Depends, Request

from grove import __version__
from grove.auth.dependencies import get_container, public
from grove.boundary.routing import EnvelopeRoute
from grove.container import Container

router = APIRouter(route_class=EnvelopeRoute)


@router.get("/health")
@public
async def health_check(request: Request, container: Container = Depends(get_container)):
    """Check server health and dependency connectivity."""
    checks = {
        "server": "ok",
        "version": __version__,
        "store": container.store.backend,
    }

    redis = getattr(request.app.state, "redis", None)
    if redis is None:
        checks["redis"] = "disabled"
    else:
        try:
            await redis.ping()
            checks["redis"] = "ok"
        except Exception as e:
            checks["redis"] = f"error: {e}"

    status = "degraded" if checks["redis"].startswith("error") else "healthy"
    return {"status": status, **checks}
