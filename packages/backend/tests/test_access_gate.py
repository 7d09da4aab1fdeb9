"""Access gate — token checks on protected routes, @public, role checks."""

from datetime import timedelta

import pytest

from grove.auth.jwt import TokenIssuer
from grove.auth.models import UserRole

from conftest import ADMIN_EMAIL

ME = "/api/v1/auth/me"
ADMIN_USERS = "/api/v1/admin/users"


# ═══════════════════════════════════════════════════════════
# Protected routes
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer"},
        {"Authorization": "Bearer not.a.jwt"},
        {"Authorization": "Basic dXNlcjpwYXNz"},
    ],
)
async def test_missing_or_malformed_token_is_rejected(client, headers):
    resp = await client.get(ME, headers=headers)

    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Bearer"
    body = resp.json()
    assert body["errorCode"] == "UNAUTHORIZED"
    assert body["message"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client, container):
    token = container.tokens.issue(
        "u-1", "a@test.com", UserRole.ADMIN, expires_delta=timedelta(seconds=-1)
    )
    resp = await client.get(ME, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_is_rejected(client):
    forged = TokenIssuer("someone-elses-secret-0123456789-abcdef").issue(
        "u-1", "a@test.com", UserRole.ADMIN
    )
    resp = await client.get(ME, headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_bearer_scheme_is_case_insensitive(client, token_for):
    resp = await client.get(ME, headers={"Authorization": f"bearer {token_for()}"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_gate_runs_before_body_validation(client):
    resp = await client.post(ADMIN_USERS, json={"email": "broken"})
    assert resp.status_code == 401


# ═══════════════════════════════════════════════════════════
# Public routes
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_public_route_ignores_garbage_token(client):
    resp = await client.get("/api/v1/health", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_public_login_ignores_garbage_token(client, admin_user):
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": ADMIN_EMAIL, "password": "123456"},
        headers={"Authorization": "Bearer garbage"},
    )
    assert resp.status_code == 200


# ═══════════════════════════════════════════════════════════
# Role checks (admin routes)
# ═══════════════════════════════════════════════════════════


NEW_WAITER = {
    "email": "waiter@test.com",
    "password": "pw1234",
    "name": "Wendy Waiter",
    "role": "waiter",
}


@pytest.mark.asyncio
async def test_admin_creates_staff_with_role(client, bearer, container):
    resp = await client.post(ADMIN_USERS, json=NEW_WAITER, headers=bearer(user_id="admin-1", role="admin"))

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Resource created successfully"
    data = body["data"]
    assert data["role"] == "waiter"
    assert data["firstName"] == "Wendy"
    assert data["isActive"] is True
    assert "passwordHash" not in data

    stored = await container.users.find_by_id(data["id"])
    assert stored.created_by == "admin-1"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["manager", "waiter", "customer"])
async def test_non_admin_cannot_create_staff(client, bearer, role):
    resp = await client.post(ADMIN_USERS, json=NEW_WAITER, headers=bearer(role=role))

    assert resp.status_code == 403
    body = resp.json()
    assert body["errorCode"] == "FORBIDDEN"
    assert body["message"] == "Access denied. Required roles: admin"


@pytest.mark.asyncio
async def test_admin_create_duplicate_email(client, bearer, admin_user):
    resp = await client.post(
        ADMIN_USERS,
        json={**NEW_WAITER, "email": ADMIN_EMAIL},
        headers=bearer(role="admin"),
    )
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == "ALREADY_EXISTS"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["admin", "manager"])
async def test_get_user_allowed_roles(client, bearer, admin_user, role):
    resp = await client.get(f"{ADMIN_USERS}/{admin_user.id}", headers=bearer(role=role))

    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == ADMIN_EMAIL


@pytest.mark.asyncio
async def test_get_user_forbidden_for_chef(client, bearer, admin_user):
    resp = await client.get(f"{ADMIN_USERS}/{admin_user.id}", headers=bearer(role="chef"))
    assert resp.status_code == 403
    assert resp.json()["message"] == "Access denied. Required roles: admin, manager"


@pytest.mark.asyncio
async def test_get_missing_user(client, bearer):
    resp = await client.get(f"{ADMIN_USERS}/nope", headers=bearer(role="admin"))
    assert resp.status_code == 404
    assert resp.json()["message"] == "User with ID nope not found"
