"""Receipt scanning commands."""

import mimetypes
from pathlib import Path

import click

from fintrack.cli.account_resolution import resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.config import get_settings
from fintrack.domain.account import AccountService
from fintrack.domain.entities import TransactionDraft, TransactionType
from fintrack.domain.errors import DomainError, ReceiptConfigurationError
from fintrack.domain.ledger import LedgerService
from fintrack.services.receipt_scanner import DEFAULT_MIME_TYPE, ReceiptScanner


@click.group()
def receipt_group():
    """Scan receipts."""
    pass


@receipt_group.command("scan")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mime-type", help="Image MIME type (guessed from the file name if omitted)")
@click.option("--account", help="Record the scanned receipt as an expense on this account")
@click.pass_context
def scan_receipt(ctx, file: Path, mime_type: str | None, account: str | None):
    """Scan a receipt image and print the extracted transaction data.

    With --account, the result is also recorded as an expense.

    Examples:
        fintrack receipt scan lunch.jpg
        fintrack receipt scan lunch.jpg --account Checking
    """
    max_bytes = get_settings().app.max_receipt_bytes
    if file.stat().st_size > max_bytes:
        click.echo(f"Error: File size should be less than {max_bytes // (1024 * 1024)}MB", err=True)
        ctx.exit(1)

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(ctx.obj["db"]), account)

    scanner = ctx.obj.get("receipt_scanner")
    if scanner is None:
        try:
            scanner = ReceiptScanner.from_settings()
        except ReceiptConfigurationError:
            click.echo("Error: Receipt scanning is not configured (set GEMINI_API_KEY)", err=True)
            ctx.exit(1)

    mime_type = mime_type or mimetypes.guess_type(file.name)[0] or DEFAULT_MIME_TYPE
    try:
        result = scanner.scan(file.read_bytes(), mime_type=mime_type)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("Scanned receipt:")
    click.echo(f"  Amount: {result.amount:,.2f}")
    click.echo(f"  Date: {result.date.date()}")
    click.echo(f"  Merchant: {result.merchant_name}")
    click.echo(f"  Description: {result.description}")
    click.echo(f"  Category: {result.category}")

    if account_id is None:
        return

    draft = TransactionDraft(
        account_id=account_id,
        type=TransactionType.EXPENSE,
        amount=result.amount,
        date=result.date.date(),
        category=result.category,
        description=result.description,
    )
    ledger = LedgerService(ctx.obj["db"], gate=ctx.obj.get("gate"), invalidator=ctx.obj.get("invalidator"))
    try:
        txn = ledger.create_transaction(ctx.obj["request"], draft)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {txn.id}")


def register_commands(cli):
    """Register receipt commands with main CLI."""
    cli.add_command(receipt_group, name="receipt")
