"""
Reporter tests.
Run with: python3 -m pytest tests/
"""

import json
from datetime import date, datetime

from activity_summary.aggregator import compute_snapshot
from activity_summary.data_loader import RecordStore
from activity_summary.models import ActivitySessionRecord, DailyMetricRecord, TimeRange
from activity_summary.reporter import (
    generate_json_output,
    print_activity_breakdown,
    print_snapshot,
    snapshot_to_dict,
)


NOW = datetime(2024, 3, 15, 18, 0)


def sample_store() -> RecordStore:
    return RecordStore(
        [
            DailyMetricRecord(id="d1", date=date(2024, 3, 13), step_count=9000, calories_burned=360),
            DailyMetricRecord(id="d2", date=date(2024, 3, 14), step_count=1000, calories_burned=40),
        ],
        [
            ActivitySessionRecord(id="a1", date=date(2024, 3, 14), type="run", duration=30),
        ]
    )


class TestSnapshotToDict:
    def test_serializes_days_and_breakdown(self):
        data = snapshot_to_dict(compute_snapshot(sample_store(), TimeRange.WEEK, NOW))
        assert data["time_range"] == "week"
        assert data["totals"]["steps"] == 10000
        assert data["averages"]["steps_per_day"] == 1429
        assert data["best_day"]["date"] == "2024-03-13"
        assert data["worst_day"]["steps"] == 1000
        assert data["activity_breakdown"] == {"run": 1}
        json.dumps(data)

    def test_empty_days_are_null(self):
        data = snapshot_to_dict(compute_snapshot(RecordStore(), TimeRange.MONTH, NOW))
        assert data["best_day"] is None
        assert data["worst_day"] is None

    def test_json_output_metadata(self):
        output = generate_json_output(compute_snapshot(sample_store(), TimeRange.TODAY, NOW), NOW)
        assert output["metadata"]["time_range"] == "today"
        assert output["metadata"]["range"]["start"] == "2024-03-15T00:00:00"
        assert output["summary"]["totals"]["steps"] == 0


class TestPrinting:
    def test_print_snapshot(self, capsys):
        print_snapshot(compute_snapshot(sample_store(), TimeRange.WEEK, NOW))
        out = capsys.readouterr().out
        assert "ACTIVITY SUMMARY (Last 7 days)" in out
        assert "10,000" in out
        assert "2024-03-13: 9,000 steps" in out

    def test_print_snapshot_without_data(self, capsys):
        print_snapshot(compute_snapshot(RecordStore(), TimeRange.ALL, NOW))
        assert "No data" in capsys.readouterr().out

    def test_print_breakdown(self, capsys):
        print_activity_breakdown(compute_snapshot(sample_store(), TimeRange.WEEK, NOW))
        assert "run: 1" in capsys.readouterr().out

    def test_print_empty_breakdown(self, capsys):
        print_activity_breakdown(compute_snapshot(RecordStore(), TimeRange.WEEK, NOW))
        assert "No activities in this range." in capsys.readouterr().out
