"""User service — identity store lifecycle for users.

Learn: Service layer separates business logic from HTTP routing.
UserService owns the users table: lookups by email (secondary index) and
id (primary key), creation with the email-uniqueness check, and password
hashing/verification through PasswordHasher.

Uniqueness is a read-before-write: the store itself does not enforce it,
so two concurrent registrations for the same email can both pass the
check. The put is conditional on the generated id only.
"""

import uuid
from typing import Optional, Union

import structlog
from starlette.concurrency import run_in_threadpool

from grove.auth.models import StoredUser, User, UserRole
from grove.auth.outcomes import AuthFailure
from grove.auth.password import PasswordHasher
from grove.db.store import DocumentStore
from grove.timeutil import iso_timestamp

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def split_name(name: str) -> tuple[str, str]:
    """Split a display name on the first whitespace: "Juan Pérez Gómez" → ("Juan", "Pérez Gómez")."""
    parts = name.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""


class UserService:
    """Business logic for the users table."""

    def __init__(
        self,
        store: DocumentStore,
        hasher: PasswordHasher,
        table: str,
        email_index: str = "email-index",
    ):
        self.store = store
        self.hasher = hasher
        self.table = table
        self.email_index = email_index
        self._dummy_hash: Optional[str] = None

    async def find_by_email(self, email: str) -> Optional[StoredUser]:
        items = await self.store.query(
            self.table,
            "email = :email",
            {":email": normalize_email(email)},
            index=self.email_index,
            limit=1,
        )
        if not items:
            return None
        # The index is not unique; duplicates are a data anomaly and the first wins.
        return StoredUser.from_item(items[0])

    async def find_by_id(self, user_id: str) -> Optional[StoredUser]:
        item = await self.store.get(self.table, {"id": user_id})
        return StoredUser.from_item(item) if item else None

    async def create(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.CUSTOMER,
        created_by: Optional[str] = None,
    ) -> Union[User, AuthFailure]:
        """Create a user. Returns AuthFailure.EMAIL_TAKEN instead of raising.

        The returned User never carries the password hash.
        """
        email = normalize_email(email)
        if await self.find_by_email(email):
            logger.info("grove.user_create_rejected", reason="email_taken")
            return AuthFailure.EMAIL_TAKEN

        # bcrypt is CPU-bound; run it off the event loop.
        password_hash = await run_in_threadpool(self.hasher.hash, password)

        user_id = str(uuid.uuid4())
        now = iso_timestamp()
        first_name, last_name = split_name(name)
        user = StoredUser(
            id=user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=UserRole(role),
            is_active=True,
            created_at=now,
            updated_at=now,
            created_by=created_by or user_id,
            updated_by=created_by or user_id,
            password_hash=password_hash,
        )
        await self.store.put(self.table, user.to_item(), if_not_exists="id")
        logger.info("grove.user_created", user_id=user_id, role=user.role.value)
        return user.public()

    async def spend_password_check(self, password: str) -> None:
        """Run one bcrypt verify against a throwaway hash.

        Login calls this when there is no usable account, so an unknown or
        inactive email costs the same time as a wrong password.
        """
        if self._dummy_hash is None:
            self._dummy_hash = await run_in_threadpool(self.hasher.hash, uuid.uuid4().hex)
        await self.validate_password(password, self._dummy_hash)

    async def validate_password(self, password: str, password_hash: str) -> bool:
        """Never raises; a corrupted stored hash simply fails."""
        try:
            return await run_in_threadpool(self.hasher.verify, password, password_hash)
        except Exception:
            logger.warning("grove.password_check_failed")
            return False
