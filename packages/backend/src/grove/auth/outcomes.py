"""Results of the login/register use cases.

Learn: Bad credentials and duplicate emails are normal outcomes, so the
services return them as values. Callers have to handle each case; only
real faults (store down, bugs) travel as exceptions.
"""

from dataclasses import dataclass
from enum import Enum

from grove.auth.models import SessionClaims


class AuthFailure(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_TAKEN = "email_taken"


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    claims: SessionClaims
