"""Utility for resolving account names to IDs."""

from fintrack.domain.account import AccountService
from fintrack.domain.context import RequestContext
from fintrack.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, ctx: RequestContext, account: str | int) -> int:
    """Resolve one of the caller's accounts by name or ID.

    Args:
        account_service: AccountService instance
        ctx: Request context
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If the caller has no such account
    """
    if isinstance(account, int):
        return account_service.get_account(ctx, account).id

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None
    if account_id is not None:
        return account_service.get_account(ctx, account_id).id

    for acc in account_service.list_accounts(ctx):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
