"""Transaction query service."""

from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from fintrack.database.base import Database
from fintrack.domain.context import RequestContext
from fintrack.domain.entities import (
    RecurringInterval,
    Transaction as TransactionEntity,
    TransactionType,
)
from fintrack.domain.errors import InternalError, NotFoundError, ValidationError, transaction_not_found
from fintrack.domain.user import require_user

logger = structlog.get_logger(__name__)


class TransactionService:
    """Read access to the caller's transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, ctx: RequestContext, transaction_id: int) -> TransactionEntity:
        """Get one of the caller's transactions.

        Raises:
            AuthorizationError: If the caller is not authenticated
            NotFoundError: If the transaction does not exist or belongs to another user
        """
        user = require_user(self.db, ctx)
        try:
            txn = self.db.get_transaction(transaction_id, user.id)
        except SQLAlchemyError:
            logger.exception("transaction_read_failed", user_id=user.id, transaction_id=transaction_id)
            raise InternalError("Failed to load transaction")
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        ctx: RequestContext,
        account_id: Optional[int] = None,
        type: Optional[TransactionType | str] = None,
        is_recurring: Optional[bool] = None,
        recurring_interval: Optional[RecurringInterval | str] = None,
        category: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List the caller's transactions, most recent first.

        Every filter is an equality match and is skipped when None. Each
        returned transaction carries its owning account.

        Raises:
            AuthorizationError: If the caller is not authenticated
            ValidationError: If an enum filter has an unknown value
        """
        user = require_user(self.db, ctx)

        if type is not None:
            try:
                type = TransactionType(type)
            except ValueError:
                raise ValidationError(f"Invalid transaction type '{type}'")
        if recurring_interval is not None:
            try:
                recurring_interval = RecurringInterval(recurring_interval)
            except ValueError:
                raise ValidationError(f"Invalid recurring interval '{recurring_interval}'")

        try:
            return self.db.list_transactions(
                user_id=user.id,
                account_id=account_id,
                type=type,
                is_recurring=is_recurring,
                recurring_interval=recurring_interval,
                category=category,
            )
        except SQLAlchemyError:
            logger.exception("transaction_list_failed", user_id=user.id)
            raise InternalError("Failed to list transactions")
