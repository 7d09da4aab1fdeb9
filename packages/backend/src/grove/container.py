"""Composition root — wires configuration into services once at startup.

Learn: create_app() builds one Container from its Settings and stores it on
app.state. Route dependencies read it from the request, so there are no
module-level singletons and every test can build an isolated app.
"""

from dataclasses import dataclass
from typing import Optional

from grove.auth.jwt import TokenIssuer
from grove.auth.password import PasswordHasher
from grove.config import Settings
from grove.db.store import DocumentStore
from grove.services.auth_service import AuthService
from grove.services.user_service import UserService


@dataclass
class Container:
    settings: Settings
    store: DocumentStore
    hasher: PasswordHasher
    tokens: TokenIssuer
    users: UserService
    auth: AuthService


def build_store(settings: Settings) -> DocumentStore:
    if settings.store_backend == "memory":
        from grove.db.memory import MemoryDocumentStore

        return MemoryDocumentStore()
    if settings.store_backend == "dynamodb":
        from grove.db.dynamodb import DynamoDocumentStore

        return DynamoDocumentStore(settings.dynamodb_region, settings.dynamodb_endpoint)
    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")


def build_container(settings: Settings, store: Optional[DocumentStore] = None) -> Container:
    store = store or build_store(settings)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    tokens = TokenIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )
    users = UserService(
        store, hasher, table=settings.users_table, email_index=settings.users_email_index
    )
    return Container(
        settings=settings,
        store=store,
        hasher=hasher,
        tokens=tokens,
        users=users,
        auth=AuthService(users, tokens),
    )
