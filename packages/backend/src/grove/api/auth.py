"""Auth API — login, registration, current identity.

Learn: Routes for user authentication:
- POST /auth/login → email/password → JWT access token     (public)
- POST /auth/register → new customer account + auto-login  (public)
- GET /auth/me → verified claims + stored profile           (token required)

The services return AuthSession or AuthFailure; this module is where a
failure becomes an HTTP error (Unauthorized / AlreadyExists).
"""

from fastapi import APIRouter, Depends

from grove.auth.dependencies import get_container, get_current_claims, public
from grove.auth.models import SessionClaims
from grove.auth.outcomes import AuthFailure, AuthSession
from grove.boundary.envelopes import SuccessEnvelope
from grove.boundary.routing import EnvelopeRoute
from grove.container import Container
from grove.errors import INVALID_CREDENTIALS_MESSAGE, AlreadyExists, Unauthorized
from grove.schemas.auth import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserRead,
)

router = APIRouter(prefix="/auth", route_class=EnvelopeRoute)


def _auth_response(result: AuthSession | AuthFailure, email: str) -> AuthResponse:
    if result is AuthFailure.EMAIL_TAKEN:
        raise AlreadyExists("User", "email", email)
    if result is AuthFailure.INVALID_CREDENTIALS:
        raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)
    return AuthResponse(
        access_token=result.access_token,
        user=AuthUser.from_claims(result.claims),
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
@public
async def login(body: LoginRequest, container: Container = Depends(get_container)):
    """Login with email and password → JWT access token."""
    result = await container.auth.login(body.email, body.password)
    return _auth_response(result, body.email)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
@public
async def register(body: RegisterRequest, container: Container = Depends(get_container)):
    """Create a customer account and log it in. A requested role is ignored."""
    result = await container.auth.register(body.email, body.password, body.name, body.role)
    return _auth_response(result, body.email)


# ─── Current user ───────────────────────────────────────


@router.get("/me")
async def get_me(
    claims: SessionClaims = Depends(get_current_claims),
    container: Container = Depends(get_container),
) -> SuccessEnvelope[MeResponse]:
    """Get the current authenticated user's info."""
    user = await container.users.find_by_id(claims.user_id)
    return SuccessEnvelope[MeResponse](
        message="Authenticated user",
        data=MeResponse(
            claims=AuthUser.from_claims(claims),
            profile=UserRead.from_user(user.public()) if user else None,
        ),
    )
