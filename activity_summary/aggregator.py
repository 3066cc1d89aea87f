"""
Filtering and aggregation module.

This module handles:
- Filtering daily metric and activity records to a resolved range
- Computing totals, per-day averages, best / worst days
- Counting activities per type
- The compute_snapshot query used by the presentation layer
"""

import math
from collections import Counter
from datetime import datetime, date, tzinfo
from typing import Iterable, Optional, Union
from activity_summary.models import (
    ActivitySessionRecord,
    AggregationSnapshot,
    AveragePolicy,
    DailyMetricRecord,
    MalformedRecordError,
    ResolvedRange,
    TimeRange,
)
from activity_summary.time_range import resolve_range


# Nominal period length in days; ALL uses the record count instead
NOMINAL_DAYS = {
    TimeRange.TODAY: 1,
    TimeRange.WEEK: 7,
    TimeRange.MONTH: 30,
    TimeRange.YEAR: 365,
}


def record_instant(value, tz: Optional[tzinfo] = None) -> datetime:
    """
    Place a record's date on the timeline.

    A calendar day becomes midnight of that day. Naive datetimes adopt the
    range timezone so they compare against aware range bounds; aware
    datetimes against a naive range keep their own wall-clock time.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None and tz is not None:
            return value.replace(tzinfo=tz)
        if value.tzinfo is not None and tz is None:
            return value.replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=tz)
    raise MalformedRecordError(f"Record date must be a date or datetime, got {value!r}")


def filter_by_range(records: Iterable, resolved_range: ResolvedRange) -> list:
    """Keep records dated inside the range (both ends inclusive), in order."""
    tz = resolved_range.end.tzinfo
    filtered = []
    for record in records:
        try:
            instant = record_instant(record.date, tz)
        except MalformedRecordError as e:
            raise MalformedRecordError(f"Record {record.id}: {e}") from e
        if resolved_range.contains(instant):
            filtered.append(record)
    return filtered


def filter_records(
    metric_records: Iterable[DailyMetricRecord],
    activity_records: Iterable[ActivitySessionRecord],
    resolved_range: ResolvedRange
) -> tuple[list[DailyMetricRecord], list[ActivitySessionRecord]]:
    """
    Filter both record collections to the same range.
    """
    return (
        filter_by_range(metric_records, resolved_range),
        filter_by_range(activity_records, resolved_range)
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def averaging_denominator(selector: Union[TimeRange, str], record_count: int) -> int:
    """
    Number of days an average is spread over for a selector.

    Fixed windows use their nominal length even when fewer days have data.
    """
    selector = TimeRange(selector)
    if selector is TimeRange.ALL:
        return record_count
    if selector not in NOMINAL_DAYS:
        raise AssertionError(f"Unhandled time range: {selector!r}")
    return NOMINAL_DAYS[selector]


def elapsed_denominator(
    resolved_range: ResolvedRange,
    metric_records: list[DailyMetricRecord],
    selector: Union[TimeRange, str]
) -> int:
    """
    Number of calendar days the range actually spans, end day included.

    For ALL the span starts at the earliest record instead of the epoch.
    """
    end_day = resolved_range.end.date()
    if TimeRange(selector) is TimeRange.ALL:
        if not metric_records:
            return 0
        tz = resolved_range.end.tzinfo
        start_day = min(record_instant(r.date, tz) for r in metric_records).date()
    else:
        start_day = resolved_range.start.date()
    return max((end_day - start_day).days + 1, 1)


def find_extremes(
    metric_records: list[DailyMetricRecord]
) -> tuple[Optional[DailyMetricRecord], Optional[DailyMetricRecord]]:
    """
    Return (best_day, worst_day) by step count.

    The sort is stable, so ties keep their original order: the first of the
    tied highest is best, the last of the tied lowest is worst.
    """
    if not metric_records:
        return None, None
    ranked = sorted(metric_records, key=lambda r: r.step_count, reverse=True)
    return ranked[0], ranked[-1]


def count_by_type(activity_records: list[ActivitySessionRecord]) -> dict[str, int]:
    """Count activities per type, in first-seen order."""
    return dict(Counter(r.type for r in activity_records))


def aggregate(
    metric_records: list[DailyMetricRecord],
    activity_records: list[ActivitySessionRecord],
    selector: Union[TimeRange, str],
    resolved_range: Optional[ResolvedRange] = None,
    average_policy: AveragePolicy = AveragePolicy.NOMINAL
) -> AggregationSnapshot:
    """
    Compute the snapshot for already filtered records.

    Raises:
        ValueError: If the elapsed policy is requested without a range
    """
    selector = TimeRange(selector)
    average_policy = AveragePolicy(average_policy)

    total_steps = sum(r.step_count for r in metric_records)
    total_calories = sum(r.calories_burned or 0 for r in metric_records)
    total_distance = sum(r.distance or 0 for r in metric_records)

    if average_policy is AveragePolicy.ELAPSED:
        if resolved_range is None:
            raise ValueError("The elapsed average policy needs a resolved range")
        days = elapsed_denominator(resolved_range, metric_records, selector)
    else:
        days = averaging_denominator(selector, len(metric_records))

    average_steps = round_half_up(total_steps / days) if days > 0 else 0
    average_calories = round_half_up(total_calories / days) if days > 0 else 0

    best_day, worst_day = find_extremes(metric_records)

    return AggregationSnapshot(
        time_range=selector,
        resolved_range=resolved_range,
        total_steps=total_steps,
        total_calories=total_calories,
        total_distance=total_distance,
        total_activity_count=len(activity_records),
        average_steps=average_steps,
        average_calories=average_calories,
        best_day=best_day,
        worst_day=worst_day,
        activity_breakdown=count_by_type(activity_records),
        total_activity_minutes=sum(r.duration or 0 for r in activity_records),
        total_activity_calories=sum(r.calories for r in activity_records)
    )


def compute_snapshot(
    store,
    selector: Union[TimeRange, str],
    now: datetime,
    average_policy: AveragePolicy = AveragePolicy.NOMINAL
) -> AggregationSnapshot:
    """
    Summarize a record store over the window chosen by `selector`.

    `store` is anything with get_all_metric_records() and
    get_all_activity_records(). Nothing is cached between calls.
    """
    resolved = resolve_range(selector, now)
    metrics, activities = filter_records(
        store.get_all_metric_records(),
        store.get_all_activity_records(),
        resolved
    )
    return aggregate(metrics, activities, selector, resolved, average_policy)
