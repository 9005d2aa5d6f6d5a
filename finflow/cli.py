"""CLI commands for FinFlow.

Usage:
    flask finflow create-user owner@example.com --name "Shop Owner"
    flask finflow seed-demo owner@example.com
"""

from __future__ import annotations

import click
from flask.cli import AppGroup

from finflow.core.errors import ValidationError

finflow_cli = AppGroup("finflow", help="FinFlow maintenance commands.")


@finflow_cli.command("create-user")
@click.argument("email")
@click.option("--name", "-n", default=None, help="Display name")
def create_user_command(email: str, name: str | None):
    """Register a user so their email resolves in API paths."""
    from finflow.core.users.services import create_user

    try:
        user = create_user(email, name=name)
    except ValidationError as exc:
        raise click.ClickException(exc.message)
    click.echo(f"Created user {user.email} ({user.id})")


@finflow_cli.command("seed-demo")
@click.argument("email")
def seed_demo_command(email: str):
    """Seed demo categories, branches and transactions for EMAIL."""
    from finflow.scripts.seed_demo import seed_demo

    try:
        counts = seed_demo(email)
    except ValidationError as exc:
        raise click.ClickException(exc.message)
    for resource, count in counts.items():
        click.echo(f"  {resource}: {count} rows")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(finflow_cli)
