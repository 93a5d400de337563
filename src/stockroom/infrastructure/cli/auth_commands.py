"""CLI commands for signing in and out."""

from __future__ import annotations

import click

from stockroom.domain.exceptions import DomainException
from stockroom.infrastructure.bootstrap import local_auth_gateway, open_dashboard
from stockroom.infrastructure.cli.runner import run
from stockroom.infrastructure.config import Settings


@click.command("login")
@click.option("--email", required=True, help="Account email.")
@click.password_option("--password", confirmation_prompt=False, help="Account password.")
def auth_login(email: str, password: str) -> None:
    """Log in to the store dashboard."""

    async def _login():
        async with open_dashboard() as dashboard:
            user = await dashboard.sign_in(email, password)
            return user, len(dashboard.inventory)

    user, product_count = run(_login())
    click.echo(f"Welcome, {user.display_name}! {product_count} products loaded.")


@click.command("logout")
def auth_logout() -> None:
    """Log out of the store dashboard."""

    async def _logout():
        async with open_dashboard() as dashboard:
            await dashboard.sign_out()

    run(_logout())
    click.echo("Logged out.")


@click.command("whoami")
def auth_whoami() -> None:
    """Show the signed-in user."""

    async def _whoami():
        async with open_dashboard() as dashboard:
            return dashboard.gate.user

    user = run(_whoami())
    if user is None:
        click.echo("Not logged in.")
        return
    click.echo(f"{user.display_name} <{user.email}>")


@click.command("add-user")
@click.option("--email", required=True, help="Account email.")
@click.option("--name", "full_name", default=None, help="Full name.")
@click.password_option("--password", help="Account password.")
def auth_add_user(email: str, full_name: str | None, password: str) -> None:
    """Create a local account (json backend only)."""
    try:
        gateway = local_auth_gateway(Settings.from_env())
        user = gateway.add_user(email=email, password=password, full_name=full_name)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User '{user.email}' created.")
