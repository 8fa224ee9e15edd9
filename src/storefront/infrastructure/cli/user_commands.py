"""CLI commands for user accounts."""

from __future__ import annotations

import click

from storefront.application.promote_user import PromoteUserHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure import bootstrap


@click.command("promote")
@click.option("--email", required=True, help="Email of the account to promote.")
def user_promote(email: str) -> None:
    """Grant the admin role to an existing account."""
    handler = PromoteUserHandler(bootstrap.unit_of_work())

    try:
        user = handler.handle(email)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User #{user.id} {user.email} is now {user.role}")
