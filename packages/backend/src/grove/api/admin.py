"""Admin API — staff accounts.

Learn: Self-registration always produces customers. Staff (waiters, chefs,
cashiers, managers, admins) are created here by an admin, with the role
taken from the request.
"""

from fastapi import APIRouter, Depends

from grove.auth.dependencies import get_container, require_roles
from grove.auth.models import SessionClaims, UserRole
from grove.auth.outcomes import AuthFailure
from grove.boundary.routing import EnvelopeRoute
from grove.container import Container
from grove.errors import AlreadyExists, NotFound
from grove.schemas.auth import UserCreate, UserRead

router = APIRouter(prefix="/admin", route_class=EnvelopeRoute)


@router.post("/users", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    claims: SessionClaims = Depends(require_roles(UserRole.ADMIN)),
    container: Container = Depends(get_container),
):
    created = await container.users.create(
        body.email, body.password, body.name, role=body.role, created_by=claims.user_id
    )
    if created is AuthFailure.EMAIL_TAKEN:
        raise AlreadyExists("User", "email", body.email)
    return UserRead.from_user(created)


@router.get("/users/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    _: SessionClaims = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER)),
    container: Container = Depends(get_container),
):
    user = await container.users.find_by_id(user_id)
    if user is None:
        raise NotFound("User", user_id)
    return UserRead.from_user(user.public())
