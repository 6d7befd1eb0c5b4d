"""User management commands."""

import click

from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.errors import DomainError
from fintrack.domain.user import UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("register")
@click.argument("subject", metavar="SUBJECT")
@click.option("--email", required=True, help="Email address")
@click.option("--name", help="Display name")
@click.pass_context
def register_user(ctx, subject: str, email: str, name: str | None):
    """Register a user for an authentication subject.

    Examples:
        fintrack user register user_2abc --email jane@example.com --name "Jane"
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.register(subject=subject, email=email, name=name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Registered user '{subject}' (ID: {user_id})")


@user_group.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the user the CLI is acting as."""
    service = UserService(ctx.obj["db"])
    try:
        current = service.current_user(ctx.obj["request"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{current.subject} <{current.email}> (ID: {current.id})")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
