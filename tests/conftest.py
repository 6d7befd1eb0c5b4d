"""Shared pytest fixtures for fintrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from fintrack.database.factories import create_sqlite_database
from fintrack.domain.account import AccountService
from fintrack.domain.context import RequestContext
from fintrack.domain.entities import TransactionDraft, TransactionType
from fintrack.domain.ledger import LedgerService
from fintrack.domain.transaction import TransactionService
from fintrack.domain.user import UserService


class RecordingInvalidator:
    """Cache invalidator that remembers every path it was given."""

    def __init__(self):
        self.paths = []

    def invalidate(self, path: str) -> None:
        self.paths.append(path)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_service(temp_db):
    return UserService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def invalidator():
    return RecordingInvalidator()


@pytest.fixture
def ledger_service(temp_db, invalidator):
    """Create a LedgerService without an admission gate."""
    return LedgerService(temp_db, invalidator=invalidator)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def ctx(user_service):
    """Request context for a registered user."""
    user_service.register(subject="user_alice", email="alice@example.com", name="Alice")
    return RequestContext(subject="user_alice")


@pytest.fixture
def other_ctx(user_service):
    """Request context for a second, unrelated user."""
    user_service.register(subject="user_bob", email="bob@example.com", name="Bob")
    return RequestContext(subject="user_bob")


@pytest.fixture
def sample_account(account_service, ctx):
    """Create an account with a 100.00 opening balance."""
    account_id = account_service.create_account(ctx, name="Checking", balance=Decimal("100.00"))
    return account_service.get_account(ctx, account_id)


@pytest.fixture
def second_account(account_service, ctx):
    """Create a second account with a 20.00 opening balance."""
    account_id = account_service.create_account(
        ctx, name="Savings", account_type="SAVINGS", balance=Decimal("20.00")
    )
    return account_service.get_account(ctx, account_id)


@pytest.fixture
def make_draft():
    """Factory for transaction drafts with sensible defaults."""

    def _make(account_id, amount="50.00", type=TransactionType.EXPENSE, **kwargs):
        kwargs.setdefault("date", date(2024, 1, 15))
        kwargs.setdefault("category", "groceries")
        return TransactionDraft(account_id=account_id, type=type, amount=Decimal(amount), **kwargs)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
