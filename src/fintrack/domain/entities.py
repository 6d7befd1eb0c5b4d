"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
database schema. Services and the CLI only ever see these types; ORM rows are
converted by ``fintrack.database.mappers``.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction's effect on its account."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class RecurringInterval(str, Enum):
    """Supported recurrence intervals."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class AccountType(str, Enum):
    """Kind of account."""

    CURRENT = "CURRENT"
    SAVINGS = "SAVINGS"


@dataclass(frozen=True)
class User:
    """User domain entity, keyed by the external authentication subject."""

    id: int
    subject: str
    email: str
    name: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank or cash account domain entity."""

    id: int
    user_id: int
    name: str
    account_type: AccountType
    balance: Decimal
    is_default: bool
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always non-negative; ``type`` decides the sign of its effect
    on the account balance. ``account`` is only populated by listing queries.
    """

    id: int
    user_id: int
    account_id: int
    type: TransactionType
    amount: Decimal
    date: date
    description: Optional[str]
    category: str
    is_recurring: bool
    recurring_interval: Optional[RecurringInterval]
    next_recurring_date: Optional[date]
    created_at: datetime
    updated_at: datetime
    account: Optional[Account] = None

    @property
    def signed_effect(self) -> Decimal:
        """Balance impact of this transaction."""
        return signed_effect(self.type, self.amount)


@dataclass(frozen=True)
class TransactionDraft:
    """Caller-supplied transaction data for create and update."""

    account_id: int
    type: TransactionType
    amount: Decimal
    date: date
    category: str
    description: Optional[str] = None
    is_recurring: bool = False
    recurring_interval: Optional[RecurringInterval] = None

    @property
    def signed_effect(self) -> Decimal:
        return signed_effect(self.type, self.amount)


@dataclass(frozen=True)
class ReceiptScan:
    """Normalized result of scanning a receipt image."""

    amount: Decimal
    date: datetime
    description: str
    merchant_name: str
    category: str


def signed_effect(transaction_type: TransactionType, amount: Decimal) -> Decimal:
    """Return +amount for income and -amount for expenses."""
    if transaction_type == TransactionType.EXPENSE:
        return -amount
    return amount
