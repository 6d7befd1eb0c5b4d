"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from fintrack.domain.entities import (
    Account,
    AccountType,
    RecurringInterval,
    Transaction,
    TransactionDraft,
    TransactionType,
    User,
)

# Maps account IDs to the amount their balance must change by.
BalanceAdjustments = dict[int, Decimal]
# (tokens, last refill timestamp) of a rate limit bucket
BucketState = tuple[float, float]


class Database(ABC):
    """Abstract database interface for fintrack.

    Every mutating transaction operation is atomic: the transaction rows and
    the account balances it touches are committed together or not at all.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, subject: str, email: str, name: Optional[str] = None) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user_by_subject(self, subject: str) -> Optional[User]:
        """Get user by external authentication subject."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        user_id: int,
        name: str,
        account_type: AccountType,
        balance: Decimal,
        is_default: bool = False,
    ) -> int:
        """Create a new account. Returns account ID.

        If ``is_default`` is True, any other default account of the user is
        cleared in the same commit.
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int, user_id: Optional[int] = None) -> Optional[Account]:
        """Get account by ID, optionally restricted to an owner."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: int) -> list[Account]:
        """List a user's accounts."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction(
        self,
        user_id: int,
        draft: TransactionDraft,
        next_recurring_date: Optional[date],
        balance_delta: Decimal,
    ) -> Transaction:
        """Insert a transaction and increment its account balance atomically."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        user_id: int,
        draft: TransactionDraft,
        next_recurring_date: Optional[date],
        rebalance: Callable[[Transaction], BalanceAdjustments],
    ) -> Transaction:
        """Replace a transaction's fields and rebalance accounts atomically.

        ``rebalance`` receives the original transaction as read inside the
        store transaction and returns the balance adjustments to apply.

        Raises:
            NotFoundError: If the transaction does not exist for the user
        """
        pass

    @abstractmethod
    def delete_transactions(
        self,
        transaction_ids: list[int],
        user_id: int,
        rebalance: Callable[[list[Transaction]], BalanceAdjustments],
    ) -> list[Transaction]:
        """Delete a user's transactions and rebalance accounts atomically.

        Returns the deleted transactions. IDs not owned by the user are skipped.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int, user_id: int) -> Optional[Transaction]:
        """Get a user's transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: int,
        account_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        is_recurring: Optional[bool] = None,
        recurring_interval: Optional[RecurringInterval] = None,
        category: Optional[str] = None,
    ) -> list[Transaction]:
        """List a user's transactions with equality filters.

        Results include the owning account and are ordered by date, most
        recent first.
        """
        pass

    # Rate limit operations
    @abstractmethod
    def update_bucket(
        self, subject: str, update: Callable[[Optional[BucketState]], tuple[BucketState, Any]]
    ) -> Any:
        """Read, transform and save a subject's rate limit bucket atomically.

        ``update`` receives the stored state (None if there is none) and
        returns the new state together with a result, which is returned.
        """
        pass
