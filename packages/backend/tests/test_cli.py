"""CLI — create-admin / create-user against a shared in-memory store."""

import asyncio

import pytest
from click.testing import CliRunner

from grove.cli import main as cli_main

from test_auth_service import BrokenStore

ENV = {
    "GROVE_ENVIRONMENT": "test",
    "GROVE_STORE_BACKEND": "memory",
    "GROVE_BCRYPT_ROUNDS": "4",
    "GROVE_ADMIN_DEFAULT_EMAIL": "boss@grove.com",
    "GROVE_ADMIN_DEFAULT_PASSWORD": "Boss123!",
}


@pytest.fixture()
def shared(container, monkeypatch):
    """Every CLI invocation in a test reuses one container, so state carries over."""
    monkeypatch.setattr(cli_main, "build_container", lambda settings: container)
    return container


@pytest.fixture()
def runner():
    return CliRunner()


def test_create_admin_uses_defaults(runner, shared):
    result = runner.invoke(cli_main.cli, ["create-admin"], env=ENV)

    assert result.exit_code == 0, result.output
    assert "Created admin user:" in result.output
    assert "boss@grove.com" in result.output
    assert "admin" in result.output
    assert "Boss123!" not in result.output


def test_create_admin_is_idempotent(runner, shared):
    first = runner.invoke(cli_main.cli, ["create-admin", "--email", "root@grove.com"], env=ENV)
    second = runner.invoke(cli_main.cli, ["create-admin", "--email", "root@grove.com"], env=ENV)

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert "Admin user already exists:" in second.output

    admin = asyncio.run(shared.users.find_by_email("root@grove.com"))
    assert admin.created_by == "system"


def test_create_user_with_role(runner, shared):
    args = ["create-user", "--email", "chef@grove.com", "--password", "pw1234", "--name", "Chef Uno", "--role", "chef"]
    result = runner.invoke(cli_main.cli, args, env=ENV)

    assert result.exit_code == 0, result.output
    assert "Created user:" in result.output
    assert "chef" in result.output

    duplicate = runner.invoke(cli_main.cli, args, env=ENV)
    assert duplicate.exit_code == 1
    assert "already exists" in duplicate.output


def test_create_user_rejects_unknown_role(runner, shared):
    result = runner.invoke(
        cli_main.cli,
        ["create-user", "--email", "x@grove.com", "--password", "pw1234", "--name", "X", "--role", "king"],
        env=ENV,
    )
    assert result.exit_code == 2


def test_store_outage_exits_with_error(runner, monkeypatch, settings):
    from grove.container import build_container

    monkeypatch.setattr(
        cli_main, "build_container", lambda s: build_container(settings, store=BrokenStore())
    )
    result = runner.invoke(cli_main.cli, ["create-admin"], env=ENV)

    assert result.exit_code == 1
    assert "identity store unavailable" in result.output
