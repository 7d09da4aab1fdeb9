"""JWT session tokens.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
is the session: it carries sub (user id), email and role plus iat/exp, and
is signed with the process-wide secret. Nothing is stored server side, so
a token stays valid until it expires.

verify() returns a value instead of raising — an invalid token is an
expected outcome at the access gate, not a fault.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

import jwt

from grove.auth.models import SessionClaims, UserRole
from grove.timeutil import utcnow


@dataclass(frozen=True)
class InvalidToken:
    """Why a token was rejected. For logs only — clients get one message."""

    reason: str


class TokenIssuer:
    """Issue and verify signed access tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(
        self,
        user_id: str,
        email: str,
        role: UserRole | str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Create a JWT access token."""
        now = utcnow()
        expires = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        payload = {
            "sub": user_id,
            "email": email,
            "role": UserRole(role).value,
            "iat": now,
            "exp": expires,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Union[SessionClaims, InvalidToken]:
        """Check signature and expiry, then return the claims.

        A token without a role claim (issued by an older build or another
        service sharing the secret) is treated as customer.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            return InvalidToken("expired")
        except jwt.InvalidTokenError as e:
            return InvalidToken(f"invalid: {e}")

        try:
            role = UserRole(payload.get("role") or UserRole.CUSTOMER.value)
        except ValueError:
            return InvalidToken("unknown role")

        return SessionClaims(
            user_id=str(payload["sub"]),
            email=payload.get("email", ""),
            role=role,
            issued_at=int(payload.get("iat", 0)),
            expires_at=int(payload["exp"]),
        )
