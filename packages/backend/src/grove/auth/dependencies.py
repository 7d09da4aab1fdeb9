"""FastAPI auth dependencies — the access gate.

Learn: access_gate is attached to the whole API router, so it runs before
every handler. Routes decorated with @public skip it entirely (no token is
read, even if one is sent). For everything else:

    Authorization: Bearer <token> → TokenIssuer.verify → request.state.claims

A missing, malformed, expired or forged token is rejected with 401 before
the handler runs. All of those use the same message.

Handlers read the verified identity with Depends(get_current_claims) and can
restrict roles with Depends(require_roles(...)).
"""

from typing import Callable, Optional, TypeVar

import structlog
from fastapi import Depends, Request

from grove.auth.jwt import InvalidToken
from grove.auth.models import SessionClaims, UserRole
from grove.container import Container
from grove.errors import Forbidden, Unauthorized

logger = structlog.get_logger()

PUBLIC_ATTR = "__grove_public__"

F = TypeVar("F", bound=Callable)


def public(endpoint: F) -> F:
    """Mark a route handler as reachable without a token."""
    setattr(endpoint, PUBLIC_ATTR, True)
    return endpoint


def is_public(request: Request) -> bool:
    endpoint = request.scope.get("endpoint")
    return bool(getattr(endpoint, PUBLIC_ATTR, False))


def get_container(request: Request) -> Container:
    return request.app.state.container


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def access_gate(request: Request) -> None:
    """Verify the bearer token of every non-public request."""
    if is_public(request):
        return

    token = bearer_token(request)
    if token is None:
        logger.info("grove.auth.gate_rejected", reason="missing_token", path=request.url.path)
        raise Unauthorized()

    result = get_container(request).tokens.verify(token)
    if isinstance(result, InvalidToken):
        logger.info("grove.auth.gate_rejected", reason=result.reason, path=request.url.path)
        raise Unauthorized()

    request.state.claims = result
    structlog.contextvars.bind_contextvars(user_id=result.user_id)


def get_current_claims(request: Request) -> SessionClaims:
    """Verified claims of the caller. 401 if the gate did not attach any."""
    claims = getattr(request.state, "claims", None)
    if claims is None:
        raise Unauthorized()
    return claims


def require_roles(*roles: UserRole) -> Callable[..., SessionClaims]:
    """Dependency factory: allow only callers whose token carries one of roles.

    Use as:
        @router.get("/admin-only")
        async def route(claims: SessionClaims = Depends(require_roles(UserRole.ADMIN))): ...
    """
    allowed = frozenset(roles)

    def checker(claims: SessionClaims = Depends(get_current_claims)) -> SessionClaims:
        if claims.role not in allowed:
            raise Forbidden(
                f"Access denied. Required roles: {', '.join(r.value for r in roles)}"
            )
        return claims

    return checker
