"""
Time range resolution module.

This module handles:
- Mapping a TimeRange selector to a concrete [start, end] range
- Calendar month / year arithmetic (no fixed 30 or 365 day offsets)

The reference instant is always passed in, never read from the clock here.
"""

import calendar
from datetime import datetime, timedelta
from typing import Union
from activity_summary.models import TimeRange, ResolvedRange


def subtract_months(instant: datetime, months: int) -> datetime:
    """
    Move an instant back by whole calendar months.

    The day of month is clamped to the last day of the target month, so
    March 31 minus one month is the last day of February.
    """
    month_index = instant.year * 12 + (instant.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return instant.replace(year=year, month=month, day=min(instant.day, last_day))


def epoch_start(now: datetime) -> datetime:
    """Start of the 'all' window: the Unix epoch in the reference timezone."""
    return datetime(1970, 1, 1, tzinfo=now.tzinfo)


def resolve_range(selector: Union[TimeRange, str], now: datetime) -> ResolvedRange:
    """
    Resolve a selector against a reference instant.

    Raises:
        ValueError: If a string selector is not a known TimeRange value
        AssertionError: If a TimeRange member has no resolution rule
    """
    selector = TimeRange(selector)

    if selector is TimeRange.TODAY:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif selector is TimeRange.WEEK:
        start = now - timedelta(days=7)
    elif selector is TimeRange.MONTH:
        start = subtract_months(now, 1)
    elif selector is TimeRange.YEAR:
        start = subtract_months(now, 12)
    elif selector is TimeRange.ALL:
        start = epoch_start(now)
    else:
        raise AssertionError(f"Unhandled time range: {selector!r}")

    return ResolvedRange(start=start, end=now)
