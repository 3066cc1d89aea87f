"""
Reporting and output functions module.

This module handles all display and output operations:
- Printing the summary totals, averages and best / worst days
- Printing the activity breakdown
- Generating JSON output
"""

from datetime import datetime
from typing import Optional
from activity_summary.models import AggregationSnapshot, DailyMetricRecord


RANGE_LABELS = {
    'today': 'Today',
    'week': 'Last 7 days',
    'month': 'Last month',
    'year': 'Last year',
    'all': 'All time',
}


def _day_to_dict(record: Optional[DailyMetricRecord]) -> Optional[dict]:
    if record is None:
        return None
    return {
        "id": record.id,
        "date": record.date.isoformat(),
        "steps": record.step_count,
        "calories_burned": record.calories_burned,
        "distance_km": record.distance,
        "source": record.source
    }


def snapshot_to_dict(snapshot: AggregationSnapshot) -> dict:
    """Convert a snapshot to a JSON-serializable dictionary."""
    return {
        "time_range": snapshot.time_range.value,
        "totals": {
            "steps": snapshot.total_steps,
            "calories": snapshot.total_calories,
            "distance_km": round(snapshot.total_distance, 2),
            "activities": snapshot.total_activity_count,
            "activity_minutes": snapshot.total_activity_minutes,
            "activity_calories": snapshot.total_activity_calories
        },
        "averages": {
            "steps_per_day": snapshot.average_steps,
            "calories_per_day": snapshot.average_calories
        },
        "best_day": _day_to_dict(snapshot.best_day),
        "worst_day": _day_to_dict(snapshot.worst_day),
        "activity_breakdown": dict(snapshot.activity_breakdown)
    }


def generate_json_output(snapshot: AggregationSnapshot, now: datetime) -> dict:
    """
    Generate the JSON document for a snapshot, with a metadata header.
    """
    resolved = snapshot.resolved_range
    output = {
        "metadata": {
            "generated_at": now.isoformat(),
            "time_range": snapshot.time_range.value,
            "range": {
                "start": resolved.start.isoformat(),
                "end": resolved.end.isoformat()
            } if resolved is not None else None
        },
        "summary": snapshot_to_dict(snapshot)
    }

    return output


def print_snapshot(snapshot: AggregationSnapshot):
    """Print the summary in a readable format."""
    label = RANGE_LABELS.get(snapshot.time_range.value, snapshot.time_range.value)
    print("\n" + "=" * 70)
    print(f"ACTIVITY SUMMARY ({label})")
    print("=" * 70)

    if snapshot.resolved_range is not None:
        start = snapshot.resolved_range.start.strftime('%Y-%m-%d %H:%M')
        end = snapshot.resolved_range.end.strftime('%Y-%m-%d %H:%M')
        print(f"\n  Window: {start} -> {end}")

    print(f"\n  Steps:     {snapshot.total_steps:,} (avg {snapshot.average_steps:,}/day)")
    print(f"  Calories:  {snapshot.total_calories:,.0f} (avg {snapshot.average_calories:,}/day)")
    print(f"  Distance:  {snapshot.total_distance:.2f} km")
    print(f"  Activities: {snapshot.total_activity_count} "
          f"({snapshot.total_activity_minutes} min, {snapshot.total_activity_calories:,.0f} cal)")

    print("\n  Best day:")
    if snapshot.best_day is not None:
        print(f"    {snapshot.best_day.date}: {snapshot.best_day.step_count:,} steps")
    else:
        print("    No data")

    print("  Worst day:")
    if snapshot.worst_day is not None:
        print(f"    {snapshot.worst_day.date}: {snapshot.worst_day.step_count:,} steps")
    else:
        print("    No data")


def print_activity_breakdown(snapshot: AggregationSnapshot):
    """Print activity counts per type."""
    print("\n" + "=" * 70)
    print("ACTIVITY BREAKDOWN")
    print("=" * 70 + "\n")

    if not snapshot.activity_breakdown:
        print("  No activities in this range.")
        return

    for activity_type, count in snapshot.activity_breakdown.items():
        print(f"  {activity_type}: {count}")
