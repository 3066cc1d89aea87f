"""
Data loading and normalization module.

This module handles:
- Loading daily step logs from JSON
- Loading activity logs from JSON
- Parsing calendar dates
- Estimating missing distance / calories from step counts
- Comprehensive error handling for invalid data
- The read-only RecordStore handed to the aggregator
"""

import json
from datetime import datetime, date
from typing import Iterable
from activity_summary.models import (
    ActivitySessionRecord,
    DailyMetricRecord,
    MalformedRecordError,
)


# Required fields for step and activity records
METRIC_REQUIRED_FIELDS = {'date', 'steps'}
ACTIVITY_REQUIRED_FIELDS = {'id', 'date', 'type'}

# Fields mapped onto ActivitySessionRecord attributes; the rest is metadata
ACTIVITY_CORE_FIELDS = {'id', 'date', 'type', 'duration'}

STRIDE_LENGTH_M = 0.762
CALORIES_PER_STEP = 0.04


class RecordStore:
    """Read-only in-memory holder for metric and activity records."""

    def __init__(
        self,
        metric_records: Iterable[DailyMetricRecord] = (),
        activity_records: Iterable[ActivitySessionRecord] = ()
    ):
        self._metric_records = tuple(merge_daily_records(metric_records))
        self._activity_records = tuple(activity_records)

    def get_all_metric_records(self) -> tuple[DailyMetricRecord, ...]:
        return self._metric_records

    def get_all_activity_records(self) -> tuple[ActivitySessionRecord, ...]:
        return self._activity_records

    def __repr__(self):
        return (
            f"RecordStore({len(self._metric_records)} metric records, "
            f"{len(self._activity_records)} activity records)"
        )


def _calendar_day(value):
    return value.date() if isinstance(value, datetime) else value


def merge_daily_records(records: Iterable[DailyMetricRecord]) -> list[DailyMetricRecord]:
    """
    Keep one record per calendar day.

    A later record for a day replaces the earlier one in place, so the
    first-seen order of days is preserved.
    """
    by_day = {}
    for record in records:
        by_day[_calendar_day(record.date)] = record
    return list(by_day.values())


def estimate_distance(steps: int) -> float:
    """Distance in km for a step count, assuming a 0.762 m stride."""
    return round(steps * STRIDE_LENGTH_M / 1000, 2)


def estimate_calories(steps: int) -> int:
    """Rough calories burned for a step count."""
    return round(steps * CALORIES_PER_STEP)


def parse_record_date(raw) -> date:
    """
    Parse a record date.

    Accepts 'YYYY-MM-DD' or a full ISO 8601 timestamp (a trailing 'Z' is
    treated as UTC); a timestamp is reduced to its calendar day.
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise MalformedRecordError(f"Date must be a string, got {type(raw).__name__}")
    try:
        if 'T' in raw:
            return datetime.fromisoformat(raw.replace('Z', '+00:00')).date()
        return date.fromisoformat(raw)
    except ValueError as e:
        raise MalformedRecordError(f"Invalid date '{raw}'. Error: {e}")


def validate_entry(entry: dict, required: set, label: str, index: int) -> None:
    """
    Validate that an entry is an object with all required fields.
    """
    if not isinstance(entry, dict):
        raise MalformedRecordError(
            f"{label} record {index}: Expected an object, got {type(entry).__name__}"
        )
    missing_fields = required - set(entry.keys())
    if missing_fields:
        raise MalformedRecordError(
            f"{label} record {index}: Missing required fields: {', '.join(sorted(missing_fields))}. "
            f"Required: {', '.join(sorted(required))}"
        )


def _non_negative(value, name: str, cast):
    try:
        number = cast(value)
    except (ValueError, TypeError) as e:
        raise MalformedRecordError(f"Invalid numeric value for '{name}'. {e}")
    if number < 0:
        raise MalformedRecordError(f"'{name}' must be non-negative, got {number}")
    return number


def parse_metric_entry(entry: dict, index: int, estimate_missing: bool = False) -> DailyMetricRecord:
    """
    Build a DailyMetricRecord from one 'step_logs' entry.
    """
    validate_entry(entry, METRIC_REQUIRED_FIELDS, 'Step', index)

    record_date = parse_record_date(entry['date'])
    steps = _non_negative(entry['steps'], 'steps', int)

    calories = entry.get('caloriesBurned')
    distance = entry.get('distance')
    if estimate_missing:
        if not calories:
            calories = estimate_calories(steps)
        if not distance:
            distance = estimate_distance(steps)

    return DailyMetricRecord(
        id=str(entry.get('id', record_date.isoformat())),
        date=record_date,
        step_count=steps,
        calories_burned=_non_negative(calories or 0, 'caloriesBurned', float),
        distance=_non_negative(distance or 0, 'distance', float),
        source=str(entry.get('source', 'App'))
    )


def parse_activity_entry(entry: dict, index: int) -> ActivitySessionRecord:
    """
    Build an ActivitySessionRecord from one 'activity_logs' entry.
    """
    validate_entry(entry, ACTIVITY_REQUIRED_FIELDS, 'Activity', index)

    return ActivitySessionRecord(
        id=str(entry['id']),
        date=parse_record_date(entry['date']),
        type=str(entry['type']),
        duration=_non_negative(entry.get('duration', 0) or 0, 'duration', int),
        metadata={k: v for k, v in entry.items() if k not in ACTIVITY_CORE_FIELDS}
    )


def _read_record_list(filepath: str, key: str, label: str) -> list:
    try:
        with open(filepath, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"{label} data file not found: {filepath}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {label.lower()} data file: {e}")

    if not isinstance(data, dict) or key not in data:
        raise KeyError(f"{label} data JSON must contain '{key}' key")

    if not isinstance(data[key], list):
        raise TypeError(f"'{key}' must be a list, got {type(data[key]).__name__}")

    return data[key]


def _report_skipped(skipped: list, label: str) -> None:
    if skipped:
        print(f"  Warning: Skipped {len(skipped)} invalid {label} record(s):")
        for idx, error in skipped:
            print(f"    - Record {idx}: {error}")


def load_metric_records(
    filepath: str,
    strict: bool = False,
    estimate_missing: bool = False
) -> list[DailyMetricRecord]:
    """
    Load daily step logs from a JSON file.

    Invalid records are skipped with a printed warning for each, unless
    `strict` is set, in which case the first one raises.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON
        KeyError: If the 'step_logs' key is missing
        TypeError: If 'step_logs' is not a list
        MalformedRecordError: On the first invalid record in strict mode
    """
    entries = _read_record_list(filepath, 'step_logs', 'Step')

    records = []
    skipped = []
    for idx, entry in enumerate(entries):
        try:
            records.append(parse_metric_entry(entry, idx, estimate_missing))
        except MalformedRecordError as e:
            if strict:
                raise
            skipped.append((idx, str(e)))

    _report_skipped(skipped, 'step')

    merged = merge_daily_records(records)
    if len(merged) < len(records):
        print(f"  Note: Replaced {len(records) - len(merged)} step record(s) "
              f"by a later entry for the same date")
    return merged


def load_activity_records(filepath: str, strict: bool = False) -> list[ActivitySessionRecord]:
    """
    Load activity logs from a JSON file.

    Same error policy as load_metric_records, for the 'activity_logs' key.
    """
    entries = _read_record_list(filepath, 'activity_logs', 'Activity')

    records = []
    skipped = []
    for idx, entry in enumerate(entries):
        try:
            records.append(parse_activity_entry(entry, idx))
        except MalformedRecordError as e:
            if strict:
                raise
            skipped.append((idx, str(e)))

    _report_skipped(skipped, 'activity')
    return records


def load_record_store(
    steps_path: str,
    activities_path: str,
    strict: bool = False,
    estimate_missing: bool = False
) -> RecordStore:
    """Load both files into a RecordStore."""
    return RecordStore(
        load_metric_records(steps_path, strict=strict, estimate_missing=estimate_missing),
        load_activity_records(activities_path, strict=strict)
    )
