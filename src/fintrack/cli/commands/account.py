"""Account management commands."""

import click

from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.entities import AccountType
from fintrack.domain.errors import DomainError
from fintrack.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    default=AccountType.CURRENT.value,
    show_default=True,
    help="Account type",
)
@click.option("--balance", default="0", help="Opening balance (e.g., 1000.00)")
@click.option("--default", "is_default", is_flag=True, help="Make this the default account")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str, is_default: bool):
    """Create a new account.

    The first account you create becomes your default account.

    Examples:
        fintrack account create "Checking"
        fintrack account create "Savings" --type savings --balance 2500.00
    """
    service = AccountService(ctx.obj["db"])

    try:
        opening_balance = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        account_id = service.create_account(
            ctx.obj["request"],
            name=name,
            account_type=account_type.upper(),
            balance=opening_balance,
            is_default=is_default,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List your accounts with their balances."""
    service = AccountService(ctx.obj["db"])
    try:
        accounts = service.list_accounts(ctx.obj["request"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        marker = "*" if acc.is_default else " "
        click.echo(
            f"{marker} ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:8s} | "
            f"Balance: {acc.balance:,.2f}"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
