"""Account domain service."""

from decimal import Decimal

from fintrack.database.base import Database
from fintrack.domain.context import RequestContext
from fintrack.domain.entities import Account as AccountEntity, AccountType
from fintrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
)
from fintrack.domain.money import parse_money
from fintrack.domain.user import require_user


class AccountService:
    """Service for managing a user's accounts.

    Balances are only set here when an account is opened; afterwards they
    change exclusively through ``LedgerService``.
    """

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        ctx: RequestContext,
        name: str,
        account_type: AccountType | str = AccountType.CURRENT,
        balance: Decimal = Decimal("0"),
        is_default: bool = False,
    ) -> int:
        """Open a new account for the caller.

        The user's first account is always made the default.

        Args:
            ctx: Request context
            name: Account name (unique per user)
            account_type: CURRENT or SAVINGS
            balance: Opening balance (may be negative)
            is_default: Make this the user's default account

        Returns:
            Account ID

        Raises:
            ValidationError: If name, type or opening balance is invalid
            ConflictError: If the user already has an account with that name
        """
        user = require_user(self.db, ctx)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        try:
            account_type = AccountType(account_type)
        except ValueError:
            raise ValidationError(f"Invalid account type '{account_type}'")
        opening_balance = parse_money(balance, allow_negative=True)

        accounts = self.db.list_accounts(user.id)
        for acc in accounts:
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        return self.db.create_account(
            user_id=user.id,
            name=name,
            account_type=account_type,
            balance=opening_balance,
            is_default=is_default or not accounts,
        )

    def get_account(self, ctx: RequestContext, account_id: int) -> AccountEntity:
        """Get one of the caller's accounts.

        Raises:
            NotFoundError: If the account does not exist or belongs to someone else
        """
        user = require_user(self.db, ctx)
        account = self.db.get_account(account_id, user_id=user.id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, ctx: RequestContext) -> list[AccountEntity]:
        """List the caller's accounts."""
        user = require_user(self.db, ctx)
        return self.db.list_accounts(user.id)
