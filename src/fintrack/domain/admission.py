"""Admission control for mutating operations.

An admission gate decides, per caller, whether a request may proceed. The
default gate is an in-process token bucket keyed by the caller's subject,
with an optional list of subjects that are always blocked.
"""

import time
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum
from threading import Lock
from typing import Callable, Iterable, Optional, Protocol, TypeVar

import structlog

from fintrack.domain.errors import BlockedError, RateLimitedError

logger = structlog.get_logger(__name__)


class DenialReason(str, Enum):
    """Why a request was denied."""

    RATE_LIMIT = "RATE_LIMIT"
    POLICY = "POLICY"


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of an admission check."""

    allowed: bool
    reason: Optional[DenialReason] = None
    remaining: int = 0
    reset_at: Optional[datetime] = None

    @property
    def is_rate_limited(self) -> bool:
        return not self.allowed and self.reason == DenialReason.RATE_LIMIT


class AdmissionGate(Protocol):
    """Anything that can decide whether a caller's request is admitted."""

    def protect(self, subject: str, requested: int = 1) -> AdmissionDecision:
        ...


# (tokens, last refill timestamp) for one subject
BucketState = tuple[float, float]
T = TypeVar("T")


class BucketStore(Protocol):
    """Holds token bucket state per subject.

    ``update_bucket`` calls ``update`` with the stored state (None for a new
    subject), saves the state it returns and hands back its result. The read
    and the write must not interleave with another update of the same subject.
    """

    def update_bucket(
        self, subject: str, update: Callable[[Optional[BucketState]], tuple[BucketState, T]]
    ) -> T:
        ...


class InMemoryBucketStore:
    """Bucket state for a single process."""

    def __init__(self):
        self._buckets: dict[str, BucketState] = {}
        self._lock = Lock()

    def update_bucket(self, subject, update):
        with self._lock:
            state, result = update(self._buckets.get(subject))
            self._buckets[subject] = state
            return result


class TokenBucketGate:
    """Per-subject token bucket.

    Each subject starts with ``capacity`` tokens. ``refill_rate`` tokens are
    added every ``interval`` seconds, up to ``capacity``. State lives in
    ``store``; pass a database to share it between processes.
    """

    def __init__(
        self,
        capacity: int = 10,
        refill_rate: int = 10,
        interval: float = 3600.0,
        blocked_subjects: Iterable[str] = (),
        clock: Callable[[], float] = time.time,
        store: Optional[BucketStore] = None,
    ):
        if capacity <= 0 or refill_rate <= 0 or interval <= 0:
            raise ValueError("capacity, refill_rate and interval must be positive")
        self.capacity = capacity
        self.refill_rate = refill_rate
        self.interval = interval
        self.blocked_subjects = frozenset(blocked_subjects)
        self._clock = clock
        self.store = store if store is not None else InMemoryBucketStore()

    def _refill(self, state: Optional[BucketState], now: float) -> float:
        tokens, updated = state if state is not None else (float(self.capacity), now)
        elapsed = max(0.0, now - updated)
        tokens = min(float(self.capacity), tokens + elapsed * self.refill_rate / self.interval)
        return tokens

    def _reset_at(self, tokens: float, requested: int, now: float) -> datetime:
        missing = max(0.0, requested - tokens)
        wait = missing * self.interval / self.refill_rate
        return datetime.fromtimestamp(now + wait, UTC)

    def protect(self, subject: str, requested: int = 1) -> AdmissionDecision:
        """Consume ``requested`` tokens for ``subject`` if available."""
        if subject in self.blocked_subjects:
            return AdmissionDecision(allowed=False, reason=DenialReason.POLICY)

        now = self._clock()

        def consume(state: Optional[BucketState]) -> tuple[BucketState, AdmissionDecision]:
            tokens = self._refill(state, now)
            if tokens < requested:
                return (tokens, now), AdmissionDecision(
                    allowed=False,
                    reason=DenialReason.RATE_LIMIT,
                    remaining=int(tokens),
                    reset_at=self._reset_at(tokens, requested, now),
                )
            tokens -= requested
            return (tokens, now), AdmissionDecision(allowed=True, remaining=int(tokens))

        return self.store.update_bucket(subject, consume)


def enforce_admission(
    gate: AdmissionGate, subject: str, requested: int = 1
) -> AdmissionDecision:
    """Raise if the gate denies the request, otherwise return its decision.

    Raises:
        RateLimitedError: If denied because the subject's quota is exhausted
        BlockedError: If denied for any other reason
    """
    decision = gate.protect(subject, requested=requested)
    if decision.allowed:
        return decision

    if decision.is_rate_limited:
        logger.warning(
            "rate_limit_exceeded",
            subject=subject,
            requested=requested,
            remaining=decision.remaining,
            reset_at=decision.reset_at.isoformat() if decision.reset_at else None,
        )
        raise RateLimitedError(remaining=decision.remaining, reset_at=decision.reset_at)

    logger.warning("request_blocked", subject=subject, reason=str(decision.reason))
    raise BlockedError("Request blocked")
