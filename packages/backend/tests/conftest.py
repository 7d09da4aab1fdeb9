"""Test fixtures — an isolated app per test on the in-memory store.

Learn: Every test builds its own Settings → Container → FastAPI app, so no
state leaks between tests and nothing reads a global config. bcrypt runs
at its minimum cost (4 rounds) to keep the suite fast.

httpx's ASGITransport does not send lifespan events, which is fine here:
create_app() wires everything the routes need up front, and Redis stays
disabled (app.state.redis is None).
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from grove.auth.models import UserRole
from grove.config import Settings
from grove.container import build_container
from grove.main import create_app

TEST_SECRET = "grove-test-secret-0123456789-abcdefghijklmnop"
ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "123456"


@pytest.fixture()
def settings():
    return Settings(
        environment="test",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        store_backend="memory",
        redis_url=None,
        bootstrap_admin=False,
    )


@pytest.fixture()
def container(settings):
    return build_container(settings)


@pytest.fixture()
def app(container):
    return create_app(container=container)


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def admin_user(container):
    """Seeded active admin: admin@test.com / 123456."""
    return await container.users.create(
        ADMIN_EMAIL, ADMIN_PASSWORD, "Admin User", role=UserRole.ADMIN
    )


@pytest.fixture()
def token_for(container):
    """Issue a real token for (user_id, email, role) — skips the login round trip."""

    def _issue(user_id="user-1", email="someone@test.com", role=UserRole.CUSTOMER):
        return container.tokens.issue(user_id, email, role)

    return _issue


@pytest.fixture()
def bearer(token_for):
    def _headers(**kwargs):
        return {"Authorization": f"Bearer {token_for(**kwargs)}"}

    return _headers
