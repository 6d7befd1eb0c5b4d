"""Cache invalidation hooks emitted after ledger mutations."""

from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

DASHBOARD_PATH = "/dashboard"


def account_path(account_id: int) -> str:
    """Path of an account's detail view."""
    return f"/account/{account_id}"


class CacheInvalidator(Protocol):
    """Receives invalidation signals for cached views."""

    def invalidate(self, path: str) -> None:
        ...


class LoggingInvalidator:
    """Invalidator that only records the signal in the log."""

    def invalidate(self, path: str) -> None:
        logger.debug("cache_invalidated", path=path)
