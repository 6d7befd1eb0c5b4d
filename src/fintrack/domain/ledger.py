"""Ledger domain service.

``LedgerService`` is the only writer of account balances. Every operation
computes the signed effect of the transactions it touches and hands the
resulting balance adjustments to the database, which applies the row change
and the balance change in a single store transaction.
"""

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from fintrack.database.base import BalanceAdjustments, Database
from fintrack.domain.admission import AdmissionGate, enforce_admission
from fintrack.domain.cache import DASHBOARD_PATH, CacheInvalidator, LoggingInvalidator, account_path
from fintrack.domain.context import RequestContext
from fintrack.domain.entities import (
    RecurringInterval,
    Transaction as TransactionEntity,
    TransactionDraft,
    TransactionType,
)
from fintrack.domain.errors import (
    AuthorizationError,
    InternalError,
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
    unauthorized,
)
from fintrack.domain.money import parse_money
from fintrack.domain.recurrence import project_next_recurring_date
from fintrack.domain.user import require_user

logger = structlog.get_logger(__name__)


def validate_draft(draft: TransactionDraft) -> TransactionDraft:
    """Return a normalized copy of ``draft`` or raise ValidationError.

    Accepts string values for the enums and int/float/str amounts, which
    callers outside the domain layer tend to pass.
    """
    try:
        txn_type = TransactionType(draft.type)
    except ValueError:
        raise ValidationError(f"Invalid transaction type '{draft.type}'")

    amount = parse_money(draft.amount)

    txn_date = draft.date
    if isinstance(txn_date, datetime):
        txn_date = txn_date.date()
    if not isinstance(txn_date, date):
        raise ValidationError(f"Invalid date '{draft.date}'")

    interval = draft.recurring_interval
    if interval is not None:
        try:
            interval = RecurringInterval(interval)
        except ValueError:
            raise ValidationError(f"Invalid recurring interval '{interval}'")

    category = (draft.category or "").strip()
    if not category:
        raise ValidationError("Category is required")

    if not isinstance(draft.account_id, int) or isinstance(draft.account_id, bool):
        raise ValidationError(f"Invalid account ID '{draft.account_id}'")

    is_recurring = bool(draft.is_recurring)
    return replace(
        draft,
        type=txn_type,
        amount=amount,
        date=txn_date,
        category=category,
        is_recurring=is_recurring,
        recurring_interval=interval if is_recurring else None,
    )


def balance_adjustments_for_update(
    original: TransactionEntity, draft: TransactionDraft
) -> BalanceAdjustments:
    """Balance changes needed to replace ``original`` with ``draft``.

    When the account is unchanged the account moves by the net difference.
    When the transaction moves to another account, the old account gives up
    the old effect and the new account receives the new effect.
    """
    old_effect = original.signed_effect
    new_effect = draft.signed_effect
    if original.account_id == draft.account_id:
        return {draft.account_id: new_effect - old_effect}
    return {original.account_id: -old_effect, draft.account_id: new_effect}


def balance_adjustments_for_delete(transactions: Iterable[TransactionEntity]) -> BalanceAdjustments:
    """Balance changes that reverse the effect of ``transactions``."""
    adjustments: dict[int, Decimal] = defaultdict(Decimal)
    for txn in transactions:
        adjustments[txn.account_id] -= txn.signed_effect
    return dict(adjustments)


class LedgerService:
    """Service for creating, updating and deleting transactions."""

    def __init__(
        self,
        db: Database,
        gate: Optional[AdmissionGate] = None,
        invalidator: Optional[CacheInvalidator] = None,
    ):
        """Initialize ledger service.

        Args:
            db: Database instance
            gate: Optional admission gate consulted before creating transactions
            invalidator: Receives cache invalidation signals after each commit
        """
        self.db = db
        self.gate = gate
        self.invalidator = invalidator or LoggingInvalidator()

    def _invalidate(self, *account_ids: int) -> None:
        self.invalidator.invalidate(DASHBOARD_PATH)
        for account_id in sorted(set(account_ids)):
            self.invalidator.invalidate(account_path(account_id))

    def _require_account(self, account_id: int, user_id: int) -> None:
        if self.db.get_account(account_id, user_id=user_id) is None:
            raise NotFoundError(account_not_found(account_id))

    def create_transaction(self, ctx: RequestContext, draft: TransactionDraft) -> TransactionEntity:
        """Record a transaction and apply its effect to the account balance.

        Args:
            ctx: Request context
            draft: Transaction data

        Returns:
            The created transaction

        Raises:
            AuthorizationError: If the caller is not authenticated
            RateLimitedError: If the admission gate denies the caller's quota
            BlockedError: If the admission gate denies the request otherwise
            NotFoundError: If the user or account does not exist
            ValidationError: If the draft is invalid
            InternalError: If the store fails; nothing is written in that case
        """
        if not ctx.is_authenticated:
            raise AuthorizationError(unauthorized())
        if self.gate is not None:
            try:
                enforce_admission(self.gate, ctx.subject, requested=1)
            except SQLAlchemyError:
                logger.exception("admission_check_failed", subject=ctx.subject)
                raise InternalError("Failed to create transaction")

        user = require_user(self.db, ctx)
        draft = validate_draft(draft)
        self._require_account(draft.account_id, user.id)

        next_date = project_next_recurring_date(draft.date, draft.is_recurring, draft.recurring_interval)
        try:
            txn = self.db.insert_transaction(
                user_id=user.id,
                draft=draft,
                next_recurring_date=next_date,
                balance_delta=draft.signed_effect,
            )
        except SQLAlchemyError:
            logger.exception("transaction_create_failed", user_id=user.id, account_id=draft.account_id)
            raise InternalError("Failed to create transaction")

        logger.info(
            "transaction_created",
            user_id=user.id,
            account_id=txn.account_id,
            transaction_id=txn.id,
            delta=str(draft.signed_effect),
        )
        self._invalidate(txn.account_id)
        return txn

    def update_transaction(
        self, ctx: RequestContext, transaction_id: int, draft: TransactionDraft
    ) -> TransactionEntity:
        """Replace a transaction's data and rebalance the affected accounts.

        Args:
            ctx: Request context
            transaction_id: ID of the caller's transaction
            draft: Complete new transaction data

        Returns:
            The updated transaction

        Raises:
            AuthorizationError: If the caller is not authenticated
            NotFoundError: If the user, transaction or new account does not exist
            ValidationError: If the draft is invalid
            InternalError: If the store fails; nothing is written in that case
        """
        user = require_user(self.db, ctx)
        draft = validate_draft(draft)
        if self.db.get_transaction(transaction_id, user.id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self._require_account(draft.account_id, user.id)

        originals: list[TransactionEntity] = []

        def rebalance(original: TransactionEntity) -> BalanceAdjustments:
            originals.append(original)
            return balance_adjustments_for_update(original, draft)

        next_date = project_next_recurring_date(draft.date, draft.is_recurring, draft.recurring_interval)
        try:
            txn = self.db.update_transaction(
                transaction_id=transaction_id,
                user_id=user.id,
                draft=draft,
                next_recurring_date=next_date,
                rebalance=rebalance,
            )
        except SQLAlchemyError:
            logger.exception("transaction_update_failed", user_id=user.id, transaction_id=transaction_id)
            raise InternalError("Failed to update transaction")

        original = originals[-1]
        logger.info(
            "transaction_updated",
            user_id=user.id,
            transaction_id=txn.id,
            old_account_id=original.account_id,
            account_id=txn.account_id,
            old_effect=str(original.signed_effect),
            new_effect=str(draft.signed_effect),
        )
        self._invalidate(original.account_id, txn.account_id)
        return txn

    def delete_transactions(self, ctx: RequestContext, transaction_ids: Iterable[int]) -> int:
        """Delete the caller's transactions and reverse their balance effects.

        IDs that do not belong to the caller are ignored.

        Returns:
            Number of transactions deleted
        """
        user = require_user(self.db, ctx)
        transaction_ids = list(transaction_ids)
        for transaction_id in transaction_ids:
            if not isinstance(transaction_id, int) or isinstance(transaction_id, bool):
                raise ValidationError(f"Invalid transaction ID '{transaction_id}'")
        ids = list(dict.fromkeys(transaction_ids))
        if not ids:
            return 0

        try:
            deleted = self.db.delete_transactions(
                transaction_ids=ids,
                user_id=user.id,
                rebalance=balance_adjustments_for_delete,
            )
        except SQLAlchemyError:
            logger.exception("transaction_delete_failed", user_id=user.id, transaction_ids=ids)
            raise InternalError("Failed to delete transactions")

        if deleted:
            logger.info(
                "transactions_deleted",
                user_id=user.id,
                transaction_ids=[txn.id for txn in deleted],
            )
            self._invalidate(*(txn.account_id for txn in deleted))
        return len(deleted)
