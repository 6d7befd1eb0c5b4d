"""Recurring transaction date projection."""

from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from fintrack.domain.entities import RecurringInterval


_STEPS = {
    RecurringInterval.DAILY: timedelta(days=1),
    RecurringInterval.WEEKLY: timedelta(days=7),
    # relativedelta clamps to the last day of the target month, so
    # Jan 31 + 1 month is Feb 28 (or 29) and Feb 29 + 1 year is Feb 28.
    RecurringInterval.MONTHLY: relativedelta(months=1),
    RecurringInterval.YEARLY: relativedelta(years=1),
}


def next_occurrence(start_date: date, interval: RecurringInterval | str | None) -> date:
    """Return the next occurrence of a recurring transaction.

    Args:
        start_date: Date of the current occurrence
        interval: Recurrence interval (enum member or its string value)

    Returns:
        The next occurrence date. Unrecognized intervals return
        ``start_date`` unchanged.
    """
    try:
        step = _STEPS[RecurringInterval(interval)]
    except ValueError:
        return start_date
    return start_date + step


def project_next_recurring_date(
    start_date: date,
    is_recurring: bool,
    interval: Optional[RecurringInterval],
) -> Optional[date]:
    """Return the stored projection for a transaction, or None if not recurring."""
    if not is_recurring or interval is None:
        return None
    return next_occurrence(start_date, interval)
