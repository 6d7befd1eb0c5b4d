"""Shared domain error messages and error types."""

from datetime import datetime
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or is not owned by the caller."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class AuthorizationError(DomainError):
    """Caller is not authenticated."""


class RateLimitedError(DomainError):
    """Admission gate denied the request because of its rate quota."""

    def __init__(
        self,
        message: str = "Too many requests. Please try again later.",
        remaining: int = 0,
        reset_at: Optional[datetime] = None,
    ):
        super().__init__(message)
        self.remaining = remaining
        self.reset_at = reset_at


class BlockedError(DomainError):
    """Admission gate denied the request for a policy reason."""


class InternalError(DomainError):
    """Storage or other internal failure. Details are logged, not surfaced."""


class ExternalServiceError(DomainError):
    """External service unreachable, misconfigured or misbehaving."""


class ReceiptConfigurationError(ExternalServiceError):
    """Receipt scanning credentials are missing."""


class ReceiptExtractionError(ExternalServiceError):
    """Receipt service reply could not be parsed."""


class ReceiptScanError(ExternalServiceError):
    """Generic, caller-facing receipt scan failure."""


def unauthorized() -> str:
    return "Unauthorized"


def user_not_found() -> str:
    return "User not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def duplicate_account_name(name: str) -> str:
    return f"Account with name '{name}' already exists"
