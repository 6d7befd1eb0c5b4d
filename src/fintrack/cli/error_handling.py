"""CLI error rendering."""

import click

from fintrack.domain.errors import DomainError, RateLimitedError


def format_domain_error(error: DomainError | ValueError) -> str:
    """Return the message shown to the user for a domain error."""
    message = f"Error: {error}"
    if isinstance(error, RateLimitedError) and error.reset_at is not None:
        message += f" (retry after {error.reset_at:%Y-%m-%d %H:%M:%S} UTC)"
    return message


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print a domain error to stderr and exit with status 1."""
    click.echo(format_domain_error(error), err=True)
    ctx.exit(1)
