"""Mapper functions to convert between domain models and SQLAlchemy models."""

from decimal import Decimal

from fintrack.domain import entities as domain
from fintrack.database.models import (
    User as ORMUser,
    Account as ORMAccount,
    Transaction as ORMTransaction,
)


def _money(value) -> Decimal:
    """Normalize a stored amount to a two-place Decimal."""
    return Decimal(value).quantize(Decimal("0.01"))


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        subject=orm_user.subject,
        email=orm_user.email,
        name=orm_user.name,
        created_at=orm_user.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        account_type=orm_account.account_type,
        balance=_money(orm_account.balance),
        is_default=orm_account.is_default,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(
    orm_transaction: ORMTransaction, include_account: bool = False
) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity.

    Args:
        orm_transaction: ORM row
        include_account: If True, attach the owning account entity
    """
    account = None
    if include_account:
        account = account_to_domain(orm_transaction.account)
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        account_id=orm_transaction.account_id,
        type=orm_transaction.type,
        amount=_money(orm_transaction.amount),
        date=orm_transaction.date,
        description=orm_transaction.description,
        category=orm_transaction.category,
        is_recurring=orm_transaction.is_recurring,
        recurring_interval=orm_transaction.recurring_interval,
        next_recurring_date=orm_transaction.next_recurring_date,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
        account=account,
    )
