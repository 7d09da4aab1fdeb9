"""Pydantic schemas for auth and users.

Learn: Pydantic v2 models validate request/response data. Separate
request schemas (input) from read schemas (output). Output field names are
camelCase on the wire via serialization_alias; Python code stays snake_case.
"""

import re
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator

from grove.auth.models import SessionClaims, User, UserRole

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL.match(value):
        raise ValueError("must be a valid email")
    return value


Email = Annotated[str, AfterValidator(_check_email)]


# ─── Requests ───────────────────────────────────────────


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(min_length=6)


class RegisterRequest(BaseModel):
    email: Email
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=200)
    role: Optional[UserRole] = None  # accepted, ignored for self-registration

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class UserCreate(RegisterRequest):
    """Staff account created by an admin. The role is honoured here."""

    role: UserRole = UserRole.CUSTOMER


# ─── Responses ──────────────────────────────────────────


class AuthUser(BaseModel):
    user_id: str = Field(serialization_alias="userId")
    email: str
    role: UserRole

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "AuthUser":
        return cls(user_id=claims.user_id, email=claims.email, role=claims.role)


class AuthResponse(BaseModel):
    access_token: str
    user: AuthUser


class UserRead(BaseModel):
    id: str
    email: str
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    role: UserRole
    is_active: bool = Field(serialization_alias="isActive")
    created_at: str = Field(serialization_alias="createdAt")
    updated_at: str = Field(serialization_alias="updatedAt")

    model_config = {"from_attributes": True}

    @classmethod
    def from_user(cls, user: User) -> "UserRead":
        return cls.model_validate(user)


class MeResponse(BaseModel):
    claims: AuthUser
    profile: Optional[UserRead] = None
