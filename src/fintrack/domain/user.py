"""User domain service."""

from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.context import RequestContext
from fintrack.domain.entities import User as UserEntity
from fintrack.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    unauthorized,
    user_not_found,
)


def require_user(db: Database, ctx: RequestContext) -> UserEntity:
    """Resolve the caller of a request to a user.

    Raises:
        AuthorizationError: If the request carries no identity
        NotFoundError: If no user is registered for the identity
    """
    if not ctx.is_authenticated:
        raise AuthorizationError(unauthorized())
    user = db.get_user_by_subject(ctx.subject)
    if user is None:
        raise NotFoundError(user_not_found())
    return user


class UserService:
    """Service for registering and resolving users."""

    def __init__(self, db: Database):
        self.db = db

    def register(self, subject: str, email: str, name: Optional[str] = None) -> int:
        """Register a user for an authentication subject.

        Args:
            subject: External authentication subject
            email: Email address
            name: Optional display name

        Returns:
            User ID

        Raises:
            ValidationError: If subject or email is empty
            ConflictError: If the subject is already registered
        """
        if not subject or not subject.strip():
            raise ValidationError("Subject is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email '{email}'")

        subject = subject.strip()
        if self.db.get_user_by_subject(subject) is not None:
            raise ConflictError(f"User '{subject}' already exists")
        return self.db.create_user(subject=subject, email=email.strip(), name=name)

    def current_user(self, ctx: RequestContext) -> UserEntity:
        """Return the user making the request."""
        return require_user(self.db, ctx)
