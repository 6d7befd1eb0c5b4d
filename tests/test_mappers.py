"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from fintrack.database.models import (
    User as ORMUser,
    Account as ORMAccount,
    Transaction as ORMTransaction,
)
from fintrack.database.mappers import (
    user_to_domain,
    account_to_domain,
    transaction_to_domain,
)
from fintrack.domain.entities import (
    Account,
    AccountType,
    RecurringInterval,
    Transaction,
    TransactionType,
    User,
)


def orm_account(**overrides):
    fields = dict(
        id=3,
        user_id=1,
        name="Checking",
        account_type=AccountType.CURRENT,
        balance=Decimal("100"),
        is_default=True,
        created_at=datetime.now(UTC),
    )
    fields.update(overrides)
    return ORMAccount(**fields)


class TestUserMapper:
    def test_user_to_domain(self):
        """Test converting ORM User to domain User."""
        orm_user = ORMUser(
            id=1,
            subject="user_alice",
            email="alice@example.com",
            name="Alice",
            created_at=datetime.now(UTC),
        )
        user = user_to_domain(orm_user)

        assert isinstance(user, User)
        assert user.id == 1
        assert user.subject == "user_alice"
        assert user.email == "alice@example.com"
        assert user.name == "Alice"


class TestAccountMapper:
    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        account = account_to_domain(orm_account())

        assert isinstance(account, Account)
        assert account.id == 3
        assert account.account_type == AccountType.CURRENT
        assert account.is_default is True

    def test_balance_normalized_to_cents(self):
        account = account_to_domain(orm_account(balance=Decimal("12.5")))
        assert str(account.balance) == "12.50"

    def test_float_balance(self):
        """SQLite may hand back floats for numeric columns."""
        account = account_to_domain(orm_account(balance=0.1 + 0.2))
        assert account.balance == Decimal("0.30")


class TestTransactionMapper:
    def make_orm_transaction(self, account=None):
        now = datetime.now(UTC)
        return ORMTransaction(
            id=7,
            user_id=1,
            account_id=3,
            type=TransactionType.EXPENSE,
            amount=Decimal("42.1"),
            date=date(2024, 1, 15),
            description="Weekly shop",
            category="groceries",
            is_recurring=True,
            recurring_interval=RecurringInterval.WEEKLY,
            next_recurring_date=date(2024, 1, 22),
            created_at=now,
            updated_at=now,
            account=account,
        )

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction to domain Transaction."""
        txn = transaction_to_domain(self.make_orm_transaction())

        assert isinstance(txn, Transaction)
        assert txn.id == 7
        assert txn.amount == Decimal("42.10")
        assert txn.type == TransactionType.EXPENSE
        assert txn.recurring_interval == RecurringInterval.WEEKLY
        assert txn.next_recurring_date == date(2024, 1, 22)
        assert txn.account is None

    def test_include_account(self):
        txn = transaction_to_domain(self.make_orm_transaction(account=orm_account()), include_account=True)

        assert txn.account is not None
        assert txn.account.name == "Checking"
        assert txn.account.balance == Decimal("100.00")
