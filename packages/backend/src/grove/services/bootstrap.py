"""Default admin bootstrap.

Learn: A fresh deployment has no users, and self-registration only makes
customers. ensure_admin() creates the first admin from configuration. It
is idempotent: an existing account with that email is left untouched.
"""

from typing import Optional

import structlog

from grove.auth.models import User, UserRole
from grove.auth.outcomes import AuthFailure
from grove.services.user_service import UserService

logger = structlog.get_logger()


async def ensure_admin(
    users: UserService, email: str, password: str, name: str
) -> tuple[Optional[User], bool]:
    """Return (user, created). user is None only if a concurrent insert won."""
    existing = await users.find_by_email(email)
    if existing:
        logger.info("grove.bootstrap.admin_exists", user_id=existing.id, role=existing.role.value)
        return existing.public(), False

    created = await users.create(email, password, name, role=UserRole.ADMIN, created_by="system")
    if isinstance(created, AuthFailure):
        return None, False

    logger.info("grove.bootstrap.admin_created", user_id=created.id)
    return created, True
