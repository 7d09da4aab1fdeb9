"""Domain dataclasses for identities and sessions.

Learn: Two user types on purpose. StoredUser carries password_hash and only
lives inside UserService/AuthService. User has no password field at all,
so anything that leaves the service layer cannot leak a hash.

Storage format is camelCase (shared with the rest of the restaurant tables);
the dataclasses are snake_case.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    WAITER = "waiter"
    CHEF = "chef"
    CASHIER = "cashier"
    CUSTOMER = "customer"


_STORAGE_NAMES = {
    "first_name": "firstName",
    "last_name": "lastName",
    "is_active": "isActive",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "created_by": "createdBy",
    "updated_by": "updatedBy",
    "password_hash": "passwordHash",
}
_FIELD_NAMES = {v: k for k, v in _STORAGE_NAMES.items()}


@dataclass
class User:
    """A user as it may be shown outside the identity service."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    created_at: str
    updated_at: str
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


@dataclass
class StoredUser(User):
    """A user as persisted, including the bcrypt hash."""

    password_hash: str = ""

    def to_item(self) -> dict[str, Any]:
        item = {_STORAGE_NAMES.get(k, k): v for k, v in asdict(self).items()}
        item["role"] = self.role.value
        return {k: v for k, v in item.items() if v is not None}

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "StoredUser":
        fields = {_FIELD_NAMES.get(k, k): v for k, v in item.items()}
        return cls(
            id=fields["id"],
            email=fields["email"],
            first_name=fields.get("first_name", ""),
            last_name=fields.get("last_name", ""),
            role=UserRole(fields.get("role", UserRole.CUSTOMER.value)),
            is_active=bool(fields.get("is_active", True)),
            created_at=fields.get("created_at", ""),
            updated_at=fields.get("updated_at", ""),
            created_by=fields.get("created_by"),
            updated_by=fields.get("updated_by"),
            password_hash=fields.get("password_hash", ""),
        )

    def public(self) -> User:
        """Strip the hash. The only way a StoredUser leaves the service layer."""
        data = asdict(self)
        data.pop("password_hash")
        return User(**data)


@dataclass(frozen=True)
class SessionClaims:
    """Identity facts carried by a verified session token."""

    user_id: str
    email: str
    role: UserRole
    issued_at: int
    expires_at: int
