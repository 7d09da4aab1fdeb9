"""Auth service — the login and register use cases.

Learn: Each call is independent; nothing is remembered between requests.
Expected outcomes come back as values (AuthSession or AuthFailure) and the
route decides how to present them. "No such user", "inactive" and "wrong
password" are all the same INVALID_CREDENTIALS so a caller cannot probe
which emails are registered.

Store failures are logged here with full context and re-raised as a bare
InternalError; the client never sees the underlying message.
"""

from typing import Union

import structlog

from grove.auth.jwt import InvalidToken, TokenIssuer
from grove.auth.models import User, UserRole
from grove.auth.outcomes import AuthFailure, AuthSession
from grove.db.store import StoreError
from grove.errors import InternalError
from grove.services.user_service import UserService

logger = structlog.get_logger()


class AuthService:
    """Compose UserService + TokenIssuer into login/register."""

    def __init__(self, users: UserService, tokens: TokenIssuer):
        self.users = users
        self.tokens = tokens

    async def login(self, email: str, password: str) -> Union[AuthSession, AuthFailure]:
        try:
            user = await self.users.find_by_email(email)
            if user is None or not user.is_active:
                logger.info(
                    "grove.auth.login_failed",
                    reason="unknown_email" if user is None else "inactive",
                )
                await self.users.spend_password_check(password)
                return AuthFailure.INVALID_CREDENTIALS

            if not await self.users.validate_password(password, user.password_hash):
                logger.info("grove.auth.login_failed", reason="bad_password", user_id=user.id)
                return AuthFailure.INVALID_CREDENTIALS
        except StoreError as e:
            logger.exception("grove.auth.login_error", error=str(e))
            raise InternalError() from e

        logger.info("grove.auth.login", user_id=user.id, role=user.role.value)
        return self._session_for(user)

    async def register(
        self, email: str, password: str, name: str, role: UserRole | None = None
    ) -> Union[AuthSession, AuthFailure]:
        """Self-service sign-up. Always creates a customer and logs them in.

        The requested role is accepted for API compatibility and ignored.
        """
        if role is not None and role != UserRole.CUSTOMER:
            logger.info("grove.auth.register_role_ignored", requested=UserRole(role).value)

        try:
            created = await self.users.create(email, password, name, role=UserRole.CUSTOMER)
        except StoreError as e:
            logger.exception("grove.auth.register_error", error=str(e))
            raise InternalError() from e

        if isinstance(created, AuthFailure):
            return created

        logger.info("grove.auth.registered", user_id=created.id)
        return self._session_for(created)

    def _session_for(self, user: User) -> AuthSession:
        token = self.tokens.issue(user.id, user.email, user.role)
        claims = self.tokens.verify(token)
        if isinstance(claims, InvalidToken):
            # A token we just signed must verify; anything else is misconfiguration.
            raise InternalError()
        return AuthSession(access_token=token, claims=claims)
