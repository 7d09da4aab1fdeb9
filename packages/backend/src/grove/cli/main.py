"""Grove CLI — seed accounts in the identity store.

Usage:
    grove create-admin                                  # defaults from GROVE_ADMIN_DEFAULT_*
    grove create-admin --email boss@grove.com --password s3cret!
    grove create-user --email ana@grove.com --password pw1234 --name "Ana Ruiz" --role waiter

Reads the same GROVE_* environment as the server, so it writes to whichever
store backend the server is configured for. Passwords are never echoed back.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click

from grove.auth.models import User, UserRole
from grove.auth.outcomes import AuthFailure
from grove.config import Settings
from grove.container import build_container
from grove.db.store import StoreError
from grove.services.bootstrap import ensure_admin


def _run(coro):
    try:
        return asyncio.run(coro)
    except StoreError as e:
        click.secho(f"Error: identity store unavailable ({e})", fg="red", err=True)
        sys.exit(1)


def _print_user(user: User) -> None:
    click.echo(f"   ID:    {user.id}")
    click.echo(f"   Email: {user.email}")
    click.echo(f"   Role:  {user.role.value}")


@click.group()
def cli():
    """Grove System administration commands."""


@cli.command("create-admin")
@click.option("--email", default=None, help="Admin email (default: GROVE_ADMIN_DEFAULT_EMAIL)")
@click.option("--password", default=None, help="Admin password (default: GROVE_ADMIN_DEFAULT_PASSWORD)")
@click.option("--name", default=None, help="Display name (default: GROVE_ADMIN_DEFAULT_NAME)")
def create_admin(email: Optional[str], password: Optional[str], name: Optional[str]):
    """Create the admin account if it does not exist yet."""
    settings = Settings()
    container = build_container(settings)
    user, created = _run(
        ensure_admin(
            container.users,
            email or settings.admin_default_email,
            password or settings.admin_default_password,
            name or settings.admin_default_name,
        )
    )
    if user is None:
        click.secho("Error: admin could not be created (email taken concurrently)", fg="red", err=True)
        sys.exit(1)

    click.secho("Created admin user:" if created else "Admin user already exists:", fg="green")
    _print_user(user)


@cli.command("create-user")
@click.option("--email", required=True)
@click.option("--password", required=True)
@click.option("--name", required=True, help='Display name, e.g. "Juan Pérez"')
@click.option(
    "--role",
    type=click.Choice([r.value for r in UserRole]),
    default=UserRole.CUSTOMER.value,
    show_default=True,
)
def create_user(email: str, password: str, name: str, role: str):
    """Create a user with an explicit role."""
    container = build_container(Settings())
    result = _run(
        container.users.create(email, password, name, role=UserRole(role), created_by="cli")
    )
    if result is AuthFailure.EMAIL_TAKEN:
        click.secho(f"Error: a user with email {email} already exists", fg="red", err=True)
        sys.exit(1)

    click.secho("Created user:", fg="green")
    _print_user(result)


def main():
    cli()


if __name__ == "__main__":
    main()
