"""
Policy Lifecycle Classifier.

A policy's status is never stored as ground truth; it is derived from the
next due date and the calendar day the caller treats as "today":

- today on or before the due date -> ACTIVE
- up to GRACE_PERIOD_DAYS days past due (inclusive) -> GRACE_PERIOD
- further past due -> TERMINATED
"""

from datetime import date, datetime
from typing import Optional, Union

from policywallet.core.config import get_settings
from policywallet.core.enums import PolicyStatus

DEFAULT_GRACE_PERIOD_DAYS = 30

DateLike = Union[date, datetime]


def to_day(value: DateLike) -> date:
    """Truncate a timestamp to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def today_local(now: Optional[datetime] = None) -> date:
    """
    Current calendar day in the policyholder's zone.

    Read once per pass and hand the result to every computation in it.
    """
    zone = get_settings().zone
    current = now.astimezone(zone) if now is not None else datetime.now(zone)
    return current.date()


def classify_status(
    due_date: DateLike,
    today: DateLike,
    grace_period_days: int = DEFAULT_GRACE_PERIOD_DAYS,
) -> PolicyStatus:
    """
    Classify a policy from its next due date.

    Args:
        due_date: Next renewal/payment date
        today: Reference day for the whole pass
        grace_period_days: Cure window after the due date

    Returns:
        PolicyStatus for the pair
    """
    due = to_day(due_date)
    reference = to_day(today)

    if reference <= due:
        return PolicyStatus.ACTIVE

    days_overdue = (reference - due).days
    if days_overdue <= grace_period_days:
        return PolicyStatus.GRACE_PERIOD
    return PolicyStatus.TERMINATED


def is_in_force(status: PolicyStatus) -> bool:
    """Active and grace-period policies still count toward rollups."""
    return status != PolicyStatus.TERMINATED
