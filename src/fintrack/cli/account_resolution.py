"""CLI helpers for account resolution."""

from __future__ import annotations

import click

from fintrack.domain.account import AccountService
from fintrack.domain.errors import DomainError
from fintrack.cli.error_handling import handle_domain_error
from fintrack.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve one of the caller's accounts by name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, ctx.obj["request"], account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
