"""Flask CLI commands for inspecting principals and granting roles."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from board.core.extensions import get_redis
from board.repositories import UserRepository
from board.services._shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


def _repository() -> UserRepository:
    return UserRepository(get_redis())


@click.group("users")
def users_cli() -> None:
    """Principal administration commands."""


@users_cli.command("grant-role")
@click.argument("username")
@click.argument("role")
@with_appcontext
def grant_role_command(username: str, role: str) -> None:
    """Grant ROLE to USERNAME (takes effect on the next token refresh)."""
    users = _repository()
    try:
        principal = users.find_by_username(username)
        if principal is None:
            raise click.ClickException(f"User '{username}' not found")
        added = users.grant_role(principal.id, role.strip())
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    LOGGER.info("cli.grant_role username=%s role=%s new=%s", username, role, added)
    if added:
        click.echo(f"Granted '{role}' to {principal.username}")
    else:
        click.echo(f"{principal.username} already has '{role}'")


@users_cli.command("show")
@click.argument("username")
@with_appcontext
def show_command(username: str) -> None:
    """Print the id, email and roles of USERNAME."""
    try:
        principal = _repository().find_by_username(username)
    except ServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    if principal is None:
        raise click.ClickException(f"User '{username}' not found")
    click.echo(f"id:       {principal.id}")
    click.echo(f"username: {principal.username}")
    click.echo(f"email:    {principal.email}")
    click.echo(f"roles:    {', '.join(sorted(principal.roles))}")
