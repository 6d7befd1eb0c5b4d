"""Main CLI entry point."""

import click

from fintrack.config import get_settings
from fintrack.database.factories import create_sqlite_database
from fintrack.domain.admission import BucketStore, TokenBucketGate
from fintrack.domain.context import RequestContext
from fintrack.utils.logging_setup import configure_logging

# Import and register all commands at module level
from fintrack.cli.commands import (
    user,
    account,
    transaction,
    receipt,
)


def build_gate(store: BucketStore | None = None) -> TokenBucketGate:
    """Create the admission gate from settings.

    Bucket state is kept in ``store``, normally the CLI database, so limits
    hold across separate invocations.
    """
    settings = get_settings().admission
    return TokenBucketGate(
        capacity=settings.rate_capacity,
        refill_rate=settings.rate_refill,
        interval=settings.rate_interval_seconds,
        blocked_subjects=settings.blocked_subjects_list,
        store=store,
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option(
    "--user",
    "subject",
    help="Authenticated user subject to act as",
    envvar="FINTRACK_USER",
)
@click.pass_context
def cli(ctx, db_path: str | None, subject: str | None):
    """Fintrack - personal finance tracking.

    Record income and expenses against your accounts, keep balances in sync,
    and scan receipts to pre-fill transactions.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["request"] = RequestContext(subject=subject)
        if "gate" not in ctx.obj:
            ctx.obj["gate"] = build_gate(db)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
transaction.register_commands(cli)
receipt.register_commands(cli)


def main():
    """Main entry point for CLI."""
    app_settings = get_settings().app
    configure_logging(level=app_settings.log_level, as_json=app_settings.log_json)
    cli()


if __name__ == "__main__":
    main()
