"""Transaction management commands."""

import click

from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.entities import RecurringInterval, Transaction, TransactionDraft, TransactionType
from fintrack.domain.errors import DomainError
from fintrack.domain.ledger import LedgerService
from fintrack.domain.transaction import TransactionService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.date_parser import parse_date

TYPE_CHOICE = click.Choice([t.value for t in TransactionType], case_sensitive=False)
INTERVAL_CHOICE = click.Choice([i.value for i in RecurringInterval], case_sensitive=False)


def _ledger(ctx) -> LedgerService:
    return LedgerService(ctx.obj["db"], gate=ctx.obj.get("gate"), invalidator=ctx.obj.get("invalidator"))


def _parse_date_or_exit(ctx, value: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _echo_transaction(txn: Transaction, account_name: str | None = None) -> None:
    sign = "+" if txn.type == TransactionType.INCOME else "-"
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Amount: {sign}{txn.amount:,.2f}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Account: {account_name or txn.account_id}")
    click.echo(f"  Category: {txn.category}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if txn.is_recurring:
        interval = txn.recurring_interval.value if txn.recurring_interval else "-"
        click.echo(f"  Recurring: {interval} (next: {txn.next_recurring_date or '-'})")


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, default="EXPENSE", show_default=True)
@click.option("--amount", required=True, help="Transaction amount (e.g., 50.00)")
@click.option("--date", "txn_date", default="today", help="Date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--category", required=True, help="Category label (e.g., groceries)")
@click.option("--description", help="Transaction description")
@click.option("--recurring", type=INTERVAL_CHOICE, help="Make the transaction recurring with this interval")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_type: str,
    amount: str,
    txn_date: str,
    category: str,
    description: str | None,
    recurring: str | None,
):
    """Add a transaction and update the account balance.

    Examples:
        fintrack transaction add --account Checking --amount 50.00 --category groceries
        fintrack transaction add --account 1 --type income --amount 3000 --category salary --recurring monthly
    """
    account_service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, account_service, account)

    draft = TransactionDraft(
        account_id=account_id,
        type=TransactionType(txn_type.upper()),
        amount=_parse_amount_or_exit(ctx, amount),
        date=_parse_date_or_exit(ctx, txn_date),
        category=category,
        description=description,
        is_recurring=recurring is not None,
        recurring_interval=RecurringInterval(recurring.upper()) if recurring else None,
    )

    try:
        txn = _ledger(ctx).create_transaction(ctx.obj["request"], draft)
        account_obj = account_service.get_account(ctx.obj["request"], txn.account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {txn.id}")
    _echo_transaction(txn, account_obj.name)
    click.echo(f"  New balance: {account_obj.balance:,.2f}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="INCOME or EXPENSE")
@click.option("--amount", help="Transaction amount")
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--category", help="Category label")
@click.option("--description", help="Transaction description")
@click.option("--recurring", type=INTERVAL_CHOICE, help="Make the transaction recurring with this interval")
@click.option("--one-off", is_flag=True, help="Stop the transaction from recurring")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    txn_type: str | None,
    amount: str | None,
    txn_date: str | None,
    category: str | None,
    description: str | None,
    recurring: str | None,
    one_off: bool,
) -> None:
    """Update a transaction and rebalance the affected accounts.

    Only the fields that are provided change.

    Examples:
        fintrack transaction update 1 --type income --amount 30.00
        fintrack transaction update 1 --account Savings
    """
    if recurring and one_off:
        click.echo("Error: --recurring and --one-off cannot be combined", err=True)
        ctx.exit(1)

    request = ctx.obj["request"]
    account_service = AccountService(ctx.obj["db"])
    query_service = TransactionService(ctx.obj["db"])

    try:
        current = query_service.get_transaction(request, transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    account_id = current.account_id
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    is_recurring = current.is_recurring
    interval = current.recurring_interval
    if recurring:
        is_recurring, interval = True, RecurringInterval(recurring.upper())
    elif one_off:
        is_recurring, interval = False, None

    draft = TransactionDraft(
        account_id=account_id,
        type=TransactionType(txn_type.upper()) if txn_type else current.type,
        amount=_parse_amount_or_exit(ctx, amount) if amount is not None else current.amount,
        date=_parse_date_or_exit(ctx, txn_date) if txn_date is not None else current.date,
        category=category if category is not None else current.category,
        description=description if description is not None else current.description,
        is_recurring=is_recurring,
        recurring_interval=interval,
    )

    try:
        txn = _ledger(ctx).update_transaction(request, transaction_id, draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {txn.id}")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show one transaction."""
    try:
        txn = TransactionService(ctx.obj["db"]).get_transaction(ctx.obj["request"], transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {txn.id}")
    _echo_transaction(txn)


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Only INCOME or EXPENSE transactions")
@click.option("--category", help="Only this category")
@click.option("--recurring/--one-off", "is_recurring", default=None, help="Only recurring or one-off transactions")
@click.pass_context
def list_transactions(ctx, account: str | None, txn_type: str | None, category: str | None, is_recurring: bool | None):
    """List your transactions, most recent first."""
    request = ctx.obj["request"]
    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(ctx.obj["db"]), account)

    try:
        transactions = TransactionService(ctx.obj["db"]).list_transactions(
            request,
            account_id=account_id,
            type=txn_type.upper() if txn_type else None,
            is_recurring=is_recurring,
            category=category,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12}  {'Account':<20} {'Category':<18} {'Recurring':<10} {'Description':<20}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        account_name = txn.account.name if txn.account else str(txn.account_id)
        amount_str = f"{txn.signed_effect:+,.2f}"
        recurring_str = txn.recurring_interval.value if txn.is_recurring and txn.recurring_interval else ""
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {amount_str:>12}  {account_name[:20]:<20} "
            f"{txn.category[:18]:<18} {recurring_str:<10} {(txn.description or '')[:20]:<20}"
        )

    total_expenses = sum(txn.amount for txn in transactions if txn.type == TransactionType.EXPENSE)
    total_income = sum(txn.amount for txn in transactions if txn.type == TransactionType.INCOME)
    click.echo("-" * 100)
    click.echo(
        f"{'TOTAL':<6} Expenses: {total_expenses:,.2f} | Income: {total_income:,.2f} | Count: {len(transactions)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transactions(ctx, transaction_ids: tuple[int, ...], yes: bool) -> None:
    """Delete transactions and reverse their effect on account balances.

    Examples:
        fintrack transaction delete 3
        fintrack transaction delete 3 4 5 --yes
    """
    if not yes and not click.confirm(f"Are you sure you want to delete {len(transaction_ids)} transaction(s)?"):
        click.echo("Deletion cancelled.")
        return

    try:
        count = _ledger(ctx).delete_transactions(ctx.obj["request"], list(transaction_ids))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {count} transaction(s)")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
